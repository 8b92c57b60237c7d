"""
Optional LLM commentary via a webhook (e.g. an n8n workflow).

Best effort only: any failure returns None and the core verdict is shown
without commentary.
"""

import logging
from typing import Optional

import httpx
from django.conf import settings
from django.utils import timezone

from .forecast import DailyForecast

logger = logging.getLogger(__name__)

ANALYSIS_FACTORS = [
    "wind speed and direction",
    "precipitation and visibility",
    "temperature effects on battery and electronics",
    "cloud ceiling for visual line of sight",
    "general safety considerations",
]


class ForecastEnricher:
    """Posts the forecast to the enrichment webhook and returns its answer."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        if webhook_url is None:
            webhook_url = getattr(settings, 'FLYCAST_ENRICHMENT_WEBHOOK_URL', '')
        self.webhook_url = webhook_url
        self.timeout = timeout if timeout is not None else getattr(settings, 'FLYCAST_ENRICHMENT_TIMEOUT', 15.0)

    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def build_payload(self, forecast: list[DailyForecast], location: dict) -> dict:
        latitude = location.get('latitude')
        longitude = location.get('longitude')
        return {
            'location': {
                'city': location.get('city', ''),
                'country': location.get('country', ''),
                'coordinates': f"{latitude}, {longitude}",
            },
            'currentWeather': forecast[0].to_dict() if forecast else None,
            'forecast': [day.to_dict() for day in forecast[1:]],
            'analysisContext': {
                'purpose': "RC aircraft flying conditions",
                'factors': ANALYSIS_FACTORS,
            },
            'timestamp': timezone.now().isoformat(),
        }

    def enrich(self, forecast: list[DailyForecast], location: dict) -> Optional[dict]:
        """Commentary from the webhook, or None if unavailable."""
        if not self.is_configured():
            logger.debug("Enrichment webhook not configured, skipping")
            return None

        payload = self.build_payload(forecast, location)
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.webhook_url, json=payload)
        except httpx.TimeoutException:
            logger.warning("Enrichment webhook timed out")
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Enrichment webhook request failed: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Enrichment webhook error: {response.status_code}")
            return None

        try:
            analysis = response.json()
        except ValueError:
            logger.warning("Enrichment webhook returned invalid JSON")
            return None

        return {
            'analysis': analysis,
            'source': 'llm',
            'timestamp': timezone.now().isoformat(),
        }
