from django.urls import path
from . import views

urlpatterns = [
    path('health/', views.health, name='health'),
    path('conditions/', views.flying_conditions, name='flying_conditions'),
    path('aviation/', views.aviation_conditions, name='aviation_conditions'),
    path('aviation/<str:icao>/', views.station_conditions, name='station_conditions'),
]
