from .airports import Airport, find_nearby_airports, get_airport
from .conditions import Verdict, aggregate_worst, classify_forecast_day, estimate_cloud_ceiling
from .credentials import ApiKeyStore
from .enrichment import ForecastEnricher
from .forecast import DailyForecast, ForecastAnalysis, analyze_forecast
from .metar import MetarInterpretation, MetarObservation, format_observation_time, interpret_metar
from .providers import ProviderNotConfiguredError, RateLimitError, WeatherServiceError
from .weather import FlyingConditions, StationReport, WeatherService

__all__ = [
    'Airport',
    'ApiKeyStore',
    'DailyForecast',
    'FlyingConditions',
    'ForecastAnalysis',
    'ForecastEnricher',
    'MetarInterpretation',
    'MetarObservation',
    'ProviderNotConfiguredError',
    'RateLimitError',
    'StationReport',
    'Verdict',
    'WeatherService',
    'WeatherServiceError',
    'aggregate_worst',
    'analyze_forecast',
    'classify_forecast_day',
    'estimate_cloud_ceiling',
    'find_nearby_airports',
    'format_observation_time',
    'get_airport',
    'interpret_metar',
]
