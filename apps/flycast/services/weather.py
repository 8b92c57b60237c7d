"""
Weather Service

Combines the forecast and METAR providers for R/C flying assessment:
- Forecast (WeatherAPI) - today and tomorrow, analyzed for the overall verdict
- METAR (CheckWX) - current observations from the nearest major airports

Implements caching to stay within API rate limits.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, Optional

from django.conf import settings
from django.core.cache import cache

from .airports import Airport, find_nearby_airports
from .credentials import ApiKeyStore
from .forecast import DailyForecast, ForecastAnalysis, analyze_forecast
from .metar import MetarInterpretation, MetarObservation, interpret_metar
from .providers import (
    CheckWxMetarProvider,
    WeatherApiForecastProvider,
    WeatherServiceError,
)

logger = logging.getLogger(__name__)


@dataclass
class FlyingConditions:
    """Forecast plus today's analysis."""
    forecast: list[DailyForecast]
    analysis: ForecastAnalysis


@dataclass
class StationReport:
    """One nearby airport with its METAR, if any."""
    airport: Airport
    metar: Optional[MetarObservation] = None
    interpretation: Optional[MetarInterpretation] = None

    @property
    def has_data(self) -> bool:
        return self.metar is not None


class WeatherService:
    """Fetches and caches forecasts and METARs, then runs the classifiers."""

    CACHE_KEY_PREFIX = 'flycast_'

    def __init__(
        self,
        forecast_key: Optional[ApiKeyStore] = None,
        metar_key: Optional[ApiKeyStore] = None,
        forecast_provider: Optional[WeatherApiForecastProvider] = None,
        metar_provider: Optional[CheckWxMetarProvider] = None,
    ):
        if forecast_provider is None:
            if forecast_key is None:
                forecast_key = ApiKeyStore('WeatherAPI', getattr(settings, 'WEATHERAPI_KEY', ''))
            forecast_provider = WeatherApiForecastProvider(forecast_key)
        if metar_provider is None:
            if metar_key is None:
                metar_key = ApiKeyStore('CheckWX', getattr(settings, 'CHECKWX_API_KEY', ''))
            metar_provider = CheckWxMetarProvider(metar_key)

        self.forecast_provider = forecast_provider
        self.metar_provider = metar_provider

        self.forecast_days = getattr(settings, 'WEATHER_FORECAST_DAYS', 2)
        self.search_radius = getattr(settings, 'FLYCAST_NEARBY_RADIUS_MILES', 100)
        self.max_workers = getattr(settings, 'WEATHER_METAR_MAX_WORKERS', 5)

        # Cache TTLs
        self.forecast_cache_ttl = getattr(settings, 'WEATHER_FORECAST_CACHE_TTL', 1800)
        self.metar_cache_ttl = getattr(settings, 'WEATHER_METAR_CACHE_TTL', 1800)

    def _cache_key(self, prefix: str, identifier: str) -> str:
        return f"{self.CACHE_KEY_PREFIX}{prefix}_{identifier}"

    def _forecast_cache_key(self, latitude: float, longitude: float) -> str:
        return self._cache_key('forecast', f"{latitude:.2f}_{longitude:.2f}")

    def get_forecast(self, latitude: float, longitude: float) -> list[DailyForecast]:
        """Get the normalized short forecast for a location."""
        cache_key = self._forecast_cache_key(latitude, longitude)

        cached_data = cache.get(cache_key)
        if cached_data is not None:
            logger.debug(f"Forecast cache hit for {latitude},{longitude}")
            return cached_data

        logger.info(f"Fetching forecast for {latitude},{longitude}")
        forecast = self.forecast_provider.fetch_forecast(latitude, longitude, self.forecast_days)
        if forecast:
            cache.set(cache_key, forecast, self.forecast_cache_ttl)
        return forecast

    def get_flying_conditions(self, latitude: float, longitude: float) -> Optional[FlyingConditions]:
        """
        Forecast and analysis for a location.

        Returns None when the provider had no forecast days. Provider
        failures propagate as WeatherServiceError.
        """
        forecast = self.get_forecast(latitude, longitude)
        if not forecast:
            return None
        return FlyingConditions(forecast=forecast, analysis=analyze_forecast(forecast))

    def get_metar(self, icao: str) -> Optional[MetarObservation]:
        """Get the current METAR for a station."""
        station = icao.strip().upper()
        cache_key = self._cache_key('metar', station)

        cached_data = cache.get(cache_key)
        if cached_data is not None:
            logger.debug(f"METAR cache hit for {station}")
            return cached_data

        logger.info(f"Fetching METAR for {station} from CheckWX")
        data = self.metar_provider.fetch_metar(station)
        if data:
            cache.set(cache_key, data, self.metar_cache_ttl)
        return data

    def get_multiple_metar(self, icao_codes: Iterable[str]) -> dict[str, Optional[MetarObservation]]:
        """
        Fetch METARs for several stations in parallel.

        A failure for one station gives None for that station only.
        """
        codes = [code.strip().upper() for code in icao_codes]
        results = {code: None for code in codes}
        if not codes:
            return results

        def fetch_metar_safe(code):
            try:
                return self.get_metar(code)
            except WeatherServiceError as e:
                logger.warning(f"METAR fetch failed for {code}: {e}")
                return None

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(codes))) as executor:
            futures = {executor.submit(fetch_metar_safe, code): code for code in codes}

            for future in as_completed(futures):
                code = futures[future]
                try:
                    results[code] = future.result()
                except Exception as e:
                    logger.error(f"Error fetching METAR for {code}: {e}")
                    results[code] = None

        return results

    def get_station_reports(self, latitude: float, longitude: float) -> list[StationReport]:
        """
        Interpreted METARs for the airports nearest to a location.

        An empty list means no airport lies within the search radius.
        """
        airports = find_nearby_airports(latitude, longitude, self.search_radius)
        if not airports:
            logger.info(f"No airports within {self.search_radius} mi of {latitude},{longitude}")
            return []

        metars = self.get_multiple_metar(airport.icao for airport in airports)

        reports = []
        for airport in airports:
            metar = metars.get(airport.icao)
            interpretation = interpret_metar(metar) if metar else None
            reports.append(StationReport(airport=airport, metar=metar, interpretation=interpretation))

        found = sum(1 for report in reports if report.has_data)
        logger.info(f"Loaded METAR data for {found} of {len(reports)} nearby airports")
        return reports

    def clear_cache(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        icao_codes: Iterable[str] = (),
    ) -> None:
        """Clear cached forecast and/or METAR data."""
        if latitude is not None and longitude is not None:
            cache.delete(self._forecast_cache_key(latitude, longitude))
        for code in icao_codes:
            cache.delete(self._cache_key('metar', code.strip().upper()))

    def is_configured(self) -> bool:
        """Check if the forecast provider has an API key."""
        return self.forecast_provider.is_configured()

    def is_aviation_configured(self) -> bool:
        return self.metar_provider.is_configured()
