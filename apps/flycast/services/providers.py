"""
Weather provider clients.

- WeatherAPI.com - consumer forecast for today and the next days (mph)
- CheckWX - decoded METAR observations per ICAO station (knots)

Each client takes an injected ApiKeyStore and is unaware of how the
caller obtained it. HTTP calls retry with exponential backoff.
"""

import logging
import random
import time
from datetime import date, datetime, timezone as dt_timezone
from fractions import Fraction
from typing import Optional

import httpx
from django.conf import settings
from django.utils import timezone

from .conditions import estimate_cloud_ceiling
from .credentials import ApiKeyStore
from .forecast import DailyForecast
from .metar import CloudLayer, MetarObservation, WindData

logger = logging.getLogger(__name__)


class WeatherServiceError(Exception):
    """Base exception for weather provider errors."""
    pass


class RateLimitError(WeatherServiceError):
    """Provider kept answering 429 after all retries."""
    pass


class ProviderNotConfiguredError(WeatherServiceError):
    """No API key available for the provider."""
    pass


class HttpProvider:
    """Shared HTTP plumbing: timeouts, retries and backoff."""

    name = 'Weather API'

    def __init__(
        self,
        credential: ApiKeyStore,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ):
        self.credential = credential
        self.timeout = timeout if timeout is not None else getattr(settings, 'WEATHER_REQUEST_TIMEOUT', 10.0)
        self.max_retries = max_retries if max_retries is not None else getattr(settings, 'WEATHER_MAX_RETRIES', 3)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def is_configured(self) -> bool:
        return self.credential.has()

    def _calculate_backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with up to 10% jitter, capped at max_delay."""
        delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        jitter = random.uniform(0, delay * 0.1)
        return min(delay + jitter, self.max_delay)

    def _make_request_with_retry(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        """
        GET with retries on timeouts, transport errors, 429 and 5xx.

        Other responses are returned as-is for the caller to interpret.
        """
        last_error = None
        for attempt in range(self.max_retries + 1):
            try:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url, params=params, headers=headers)
            except httpx.TimeoutException:
                last_error = WeatherServiceError(f"{self.name} request timed out")
            except httpx.RequestError as e:
                last_error = WeatherServiceError(f"{self.name} request failed: {e}")
            else:
                if response.status_code == 429:
                    last_error = RateLimitError(f"{self.name} rate limit exceeded")
                elif response.status_code >= 500:
                    last_error = WeatherServiceError(f"{self.name} error: {response.status_code}")
                else:
                    return response

            if attempt < self.max_retries:
                delay = self._calculate_backoff_delay(attempt)
                logger.warning(
                    f"{last_error}; retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                time.sleep(delay)

        raise last_error


class WeatherApiForecastProvider(HttpProvider):
    """Forecast client for api.weatherapi.com."""

    name = 'WeatherAPI'
    base_url = 'https://api.weatherapi.com/v1'

    def fetch_forecast(self, latitude: float, longitude: float, days: int = 2) -> list[DailyForecast]:
        """Fetch and normalize a short forecast. Index 0 is today."""
        if not self.is_configured():
            logger.warning("WEATHERAPI_KEY not configured")
            raise ProviderNotConfiguredError("Forecast API key not configured")

        params = {
            'key': self.credential.get(),
            'q': f"{latitude},{longitude}",
            'days': days,
            'aqi': 'no',
            'alerts': 'no',
        }
        response = self._make_request_with_retry(f"{self.base_url}/forecast.json", params=params)

        if response.status_code in (401, 403):
            raise WeatherServiceError("Invalid API key")
        elif response.status_code != 200:
            raise WeatherServiceError(f"Weather API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise WeatherServiceError(f"Invalid forecast response: {e}")
        return self._parse_forecast_response(data)

    def _parse_forecast_response(self, data: dict) -> list[DailyForecast]:
        """Parse WeatherAPI forecast.json into DailyForecast records."""
        try:
            current = data.get('current') or {}
            forecast_days = (data.get('forecast') or {}).get('forecastday') or []

            forecast = []
            for index, day_data in enumerate(forecast_days):
                day = day_data.get('day') or {}
                hours = day_data.get('hour') or []

                # Today uses current conditions, later days the daily aggregates
                if index == 0 and current:
                    temperature = current['temp_f']
                    wind = current['wind_mph']
                    direction = current.get('wind_degree') or 0
                    gust = current.get('gust_mph')
                    cloud_cover = current.get('cloud') or 0
                    humidity = current.get('humidity') or 0
                    visibility = current.get('vis_miles', 10)
                    description = (current.get('condition') or {}).get('text', '')
                else:
                    temperature = day['avgtemp_f']
                    wind = day['maxwind_mph']
                    midday = hours[len(hours) // 2] if hours else {}
                    direction = midday.get('wind_degree') or 0
                    gusts = [h['gust_mph'] for h in hours if h.get('gust_mph') is not None]
                    gust = max(gusts) if gusts else None
                    covers = [h.get('cloud') or 0 for h in hours]
                    cloud_cover = sum(covers) / len(covers) if covers else 0
                    humidity = day.get('avghumidity') or 0
                    visibility = day.get('avgvis_miles', 10)
                    description = (day.get('condition') or {}).get('text', '')

                wind_mph = round(wind)
                gust_mph = round(gust) if gust is not None else None
                if gust_mph is not None and gust_mph <= wind_mph:
                    gust_mph = None

                forecast.append(DailyForecast(
                    date=date.fromisoformat(day_data['date']),
                    temperature_f=round(temperature),
                    wind_speed_mph=wind_mph,
                    wind_direction=round(direction),
                    cloud_ceiling_ft=estimate_cloud_ceiling(cloud_cover),
                    humidity=round(humidity),
                    visibility_miles=float(visibility),
                    precipitation_chance=round(day.get('daily_chance_of_rain') or 0),
                    description=description,
                    wind_gust_mph=gust_mph,
                ))

            return forecast

        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse forecast response: {e}")
            raise WeatherServiceError(f"Failed to parse forecast data: {e}")


def parse_visibility(value) -> float:
    """
    Statute miles from a METAR visibility value.

    Accepts numbers and text such as "10", "10+", "P6", "1/2" or "1 1/2".
    Raises ValueError for anything else.
    """
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip().upper().rstrip('+').lstrip('PM')
    if not text:
        raise ValueError(f"Empty visibility: {value!r}")
    try:
        return float(sum(Fraction(part) for part in text.split()))
    except ZeroDivisionError:
        raise ValueError(f"Invalid visibility: {value!r}")


class CheckWxMetarProvider(HttpProvider):
    """Decoded METAR client for api.checkwx.com."""

    name = 'CheckWX'
    base_url = 'https://api.checkwx.com'

    def fetch_metar(self, icao: str) -> Optional[MetarObservation]:
        """Latest METAR for a station, None when the station has no current report."""
        if not self.is_configured():
            logger.warning("CHECKWX_API_KEY not configured")
            raise ProviderNotConfiguredError("METAR API key not configured")

        station = icao.strip().upper()
        headers = {
            'X-API-Key': self.credential.get(),
            'Accept': 'application/json',
        }
        response = self._make_request_with_retry(f"{self.base_url}/metar/{station}/decoded", headers=headers)

        if response.status_code == 401:
            raise WeatherServiceError("Invalid API key")
        elif response.status_code == 404:
            logger.warning(f"Station not found: {station}")
            return None
        elif response.status_code != 200:
            raise WeatherServiceError(f"CheckWX API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise WeatherServiceError(f"Invalid METAR response: {e}")

        records = data.get('data') or []
        if not records:
            logger.info(f"No current METAR for {station}")
            return None
        return self._parse_metar_response(records[0])

    def _parse_metar_response(self, data: dict) -> MetarObservation:
        """Parse one CheckWX decoded METAR record."""
        try:
            wind_data = data.get('wind') or {}
            wind = WindData(
                direction=wind_data.get('degrees'),
                speed=wind_data.get('speed_kts') or 0,
                gust=wind_data.get('gust_kts'),
            )

            clouds = [
                CloudLayer(code=cloud.get('code', 'CLR'), altitude=cloud.get('feet') or 0)
                for cloud in data.get('clouds') or []
            ]

            vis = data.get('visibility') or {}
            visibility_repr = str(vis.get('miles', '10'))
            visibility = parse_visibility(visibility_repr)

            observed_str = data.get('observed') or ''
            try:
                observed = datetime.fromisoformat(observed_str.replace('Z', '+00:00'))
                if timezone.is_naive(observed):
                    observed = observed.replace(tzinfo=dt_timezone.utc)
            except ValueError:
                observed = timezone.now()

            humidity = data.get('humidity')
            if isinstance(humidity, dict):
                humidity = humidity.get('percent')
            elif humidity is None:
                humidity = data.get('humidity_percent')

            return MetarObservation(
                station=data.get('icao', ''),
                observed=observed,
                raw_text=data.get('raw_text', ''),
                wind=wind,
                visibility=visibility,
                visibility_repr=visibility_repr,
                clouds=clouds,
                temperature_f=(data.get('temperature') or {}).get('fahrenheit'),
                dewpoint_f=(data.get('dewpoint') or {}).get('fahrenheit'),
                flight_category=data.get('flight_category') or 'VFR',
                humidity=humidity,
                barometer_hg=(data.get('barometer') or {}).get('hg'),
                conditions=[c.get('text', '') for c in data.get('conditions') or []],
            )

        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse METAR response: {e}")
            raise WeatherServiceError(f"Failed to parse METAR data: {e}")
