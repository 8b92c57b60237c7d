"""
R/C flying condition classification.

Turns raw forecast factors into a three-level verdict and combines
per-factor verdicts using worst-wins.
"""

from enum import Enum
from typing import Iterable


class Verdict(Enum):
    """Flying suitability, ordered good < caution < poor."""
    GOOD = 'good'
    CAUTION = 'caution'
    POOR = 'poor'

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        labels = {
            Verdict.GOOD: 'Good Flying',
            Verdict.CAUTION: 'Use Caution',
            Verdict.POOR: 'Poor Conditions',
        }
        return labels[self]


_SEVERITY = {
    Verdict.GOOD: 0,
    Verdict.CAUTION: 1,
    Verdict.POOR: 2,
}


def aggregate_worst(verdicts: Iterable[Verdict]) -> Verdict:
    """Worst verdict among the inputs. Raises ValueError when empty."""
    return max(verdicts, key=lambda verdict: verdict.severity)


def escalate(current: Verdict, at_least: Verdict) -> Verdict:
    """Raise current to at_least, never lower it."""
    return aggregate_worst((current, at_least))


def classify_forecast_day(
    wind_speed_mph: float,
    precipitation_chance: float,
    cloud_ceiling_ft: float,
) -> Verdict:
    """
    Verdict for a forecast day.

    Wind and precipitation limits are strict. Ceiling limits include the
    boundary, so exactly 400 ft is poor and exactly 800 ft is caution.
    """
    if wind_speed_mph > 15 or precipitation_chance > 50 or cloud_ceiling_ft <= 400:
        return Verdict.POOR
    if wind_speed_mph > 10 or precipitation_chance > 20 or cloud_ceiling_ft <= 800:
        return Verdict.CAUTION
    return Verdict.GOOD


# (lower bound of cloud cover %, estimated ceiling ft), highest first
CEILING_BANDS = (
    (90, 500),
    (70, 1000),
    (50, 2000),
    (20, 4000),
)
CLEAR_SKY_CEILING = 8000


def estimate_cloud_ceiling(cloud_cover_percent: float) -> int:
    """Estimate ceiling in feet from cloud cover percentage."""
    for lower_bound, ceiling in CEILING_BANDS:
        if cloud_cover_percent >= lower_bound:
            return ceiling
    return CLEAR_SKY_CEILING


def verdict_color(verdict) -> str:
    """DaisyUI color class for a verdict."""
    colors = {
        Verdict.GOOD: 'success',
        Verdict.CAUTION: 'warning',
        Verdict.POOR: 'error',
    }
    return colors.get(verdict, 'neutral')
