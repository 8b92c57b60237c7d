from django.apps import AppConfig
from django.conf import settings


class FlycastConfig(AppConfig):
    name = 'apps.flycast'

    def ready(self):
        from .services.credentials import ApiKeyStore

        # Provider keys live for the process; views inject them into WeatherService
        self.forecast_key = ApiKeyStore('WeatherAPI', getattr(settings, 'WEATHERAPI_KEY', ''))
        self.metar_key = ApiKeyStore('CheckWX', getattr(settings, 'CHECKWX_API_KEY', ''))
