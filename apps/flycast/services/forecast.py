"""
Daily forecast model and today's flying analysis.

Forecast wind is in mph. Only the first entry (today) drives the
analysis; later days are informational.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .conditions import Verdict, classify_forecast_day, escalate


@dataclass
class DailyForecast:
    """Normalized forecast for one calendar day."""
    date: date
    temperature_f: int
    wind_speed_mph: int
    wind_direction: int  # degrees
    cloud_ceiling_ft: int
    humidity: int
    visibility_miles: float
    precipitation_chance: int  # percent
    description: str
    wind_gust_mph: Optional[int] = None
    condition: Verdict = field(init=False)

    def __post_init__(self):
        self.condition = classify_forecast_day(
            self.wind_speed_mph,
            self.precipitation_chance,
            self.cloud_ceiling_ft,
        )

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'temperature_f': self.temperature_f,
            'wind_speed_mph': self.wind_speed_mph,
            'wind_direction': self.wind_direction,
            'wind_gust_mph': self.wind_gust_mph,
            'cloud_ceiling_ft': self.cloud_ceiling_ft,
            'humidity': self.humidity,
            'visibility_miles': self.visibility_miles,
            'precipitation_chance': self.precipitation_chance,
            'description': self.description,
            'condition': self.condition.value,
        }


@dataclass
class ForecastAnalysis:
    overall_condition: Verdict
    recommendations: list[str]


def analyze_forecast(forecast: list[DailyForecast]) -> ForecastAnalysis:
    """
    Analyze today's forecast for R/C flying.

    Each rule may add a recommendation. The verdict only ever escalates,
    so a poor verdict from an earlier rule survives later caution-level
    findings.
    """
    if not forecast:
        raise ValueError("Forecast must contain at least today")

    today = forecast[0]
    condition = Verdict.GOOD
    recommendations = []

    wind = today.wind_speed_mph
    if wind > 15:
        condition = escalate(condition, Verdict.POOR)
        recommendations.append('Wind speed too high for safe RC flying')
    elif wind > 10:
        condition = escalate(condition, Verdict.CAUTION)
        recommendations.append('High winds - consider larger, heavier aircraft')
    elif wind < 5:
        recommendations.append('Light winds - perfect for beginners and small aircraft')

    gust = today.wind_gust_mph
    if gust is not None and gust > wind + 5:
        condition = escalate(condition, Verdict.CAUTION)
        recommendations.append(
            f"Gusty conditions - gusts up to {gust} mph, {gust - wind} mph above sustained wind"
        )

    ceiling = today.cloud_ceiling_ft
    if ceiling < 400:
        condition = escalate(condition, Verdict.POOR)
        recommendations.append('Cloud ceiling too low - dangerous for RC flying')
    elif ceiling < 800:
        condition = escalate(condition, Verdict.CAUTION)
        recommendations.append('Low cloud ceiling - keep altitude low')
    elif ceiling > 3000:
        recommendations.append('High cloud ceiling - good for altitude flying')

    precipitation = today.precipitation_chance
    if precipitation > 50:
        condition = escalate(condition, Verdict.POOR)
        recommendations.append('High chance of rain - avoid flying')
    elif precipitation > 20:
        condition = escalate(condition, Verdict.CAUTION)
        recommendations.append('Possible precipitation - monitor weather closely')

    if today.visibility_miles < 5:
        condition = escalate(condition, Verdict.CAUTION)
        recommendations.append('Low visibility - maintain close visual contact')

    if condition == Verdict.GOOD:
        recommendations.append('Great conditions for all skill levels')
        recommendations.append('Consider trying new maneuvers or aircraft')

    return ForecastAnalysis(overall_condition=condition, recommendations=recommendations)
