"""
METAR interpretation for R/C flying.

Converts a decoded aviation observation into per-factor verdicts, an
overall verdict and short narrative text.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import formats, timezone

from .conditions import Verdict, aggregate_worst

CLEAR_SKY_CODES = ('CLR', 'SKC')


@dataclass
class WindData:
    """Wind information from an observation or forecast."""
    direction: Optional[int]  # degrees (0-359), None if variable/calm
    speed: int
    gust: Optional[int] = None

    @property
    def is_gusty(self) -> bool:
        return self.gust is not None

    @property
    def direction_compass(self) -> str:
        """Return 16-point compass direction (N, NNE, NE, etc.)."""
        if self.direction is None:
            return 'VRB'
        directions = ['N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE',
                      'S', 'SSW', 'SW', 'WSW', 'W', 'WNW', 'NW', 'NNW']
        index = round(self.direction / 22.5) % 16
        return directions[index]


@dataclass
class CloudLayer:
    """Single cloud layer from a METAR."""
    code: str  # FEW, SCT, BKN, OVC, VV, CLR, SKC
    altitude: int  # feet AGL

    @property
    def is_clear(self) -> bool:
        return self.code in CLEAR_SKY_CODES

    @property
    def coverage_text(self) -> str:
        coverage_map = {
            'FEW': 'Few',
            'SCT': 'Scattered',
            'BKN': 'Broken',
            'OVC': 'Overcast',
            'CLR': 'Clear',
            'SKC': 'Sky Clear',
            'VV': 'Vertical Vis',
        }
        return coverage_map.get(self.code, self.code)


@dataclass
class MetarObservation:
    """Decoded METAR. Wind in knots, visibility in statute miles."""
    station: str
    observed: datetime
    raw_text: str
    wind: WindData
    visibility: float
    visibility_repr: str
    clouds: list[CloudLayer] = field(default_factory=list)
    temperature_f: Optional[int] = None
    dewpoint_f: Optional[int] = None
    flight_category: str = 'VFR'
    humidity: Optional[int] = None
    barometer_hg: Optional[float] = None
    conditions: list[str] = field(default_factory=list)

    @property
    def lowest_cloud_base(self) -> float:
        """Lowest non-clear layer base, infinity when there is none."""
        bases = [layer.altitude for layer in self.clouds if not layer.is_clear]
        return min(bases) if bases else math.inf

    @property
    def flight_category_color(self) -> str:
        colors = {
            'VFR': 'success',
            'MVFR': 'info',
            'IFR': 'warning',
            'LIFR': 'error',
        }
        return colors.get(self.flight_category, 'neutral')


@dataclass
class MetarInterpretation:
    flight_category: str
    wind_condition: Verdict
    visibility_condition: Verdict
    cloud_condition: Verdict
    overall_condition: Verdict
    recommendation: str
    summary: str


def classify_metar_wind(wind: WindData) -> Verdict:
    gust = wind.gust or 0
    if wind.speed > 25 or gust > 30:
        return Verdict.POOR
    # Any reported gust means at least caution
    if wind.speed > 15 or gust > 20 or wind.is_gusty:
        return Verdict.CAUTION
    return Verdict.GOOD


def classify_metar_visibility(visibility_miles: float) -> Verdict:
    if visibility_miles < 3:
        return Verdict.POOR
    if visibility_miles < 6:
        return Verdict.CAUTION
    return Verdict.GOOD


def classify_cloud_base(lowest_base_ft: float) -> Verdict:
    if lowest_base_ft < 1000:
        return Verdict.POOR
    if lowest_base_ft < 2500:
        return Verdict.CAUTION
    return Verdict.GOOD


def _recommendation(overall, wind, visibility, clouds) -> str:
    if overall == Verdict.GOOD:
        return 'Excellent conditions for RC flying. Good visibility and manageable winds.'
    if overall == Verdict.CAUTION:
        issues = []
        if wind != Verdict.GOOD:
            issues.append('gusty winds')
        if visibility != Verdict.GOOD:
            issues.append('reduced visibility')
        if clouds != Verdict.GOOD:
            issues.append('low clouds')
        return (
            f"Flyable but use caution due to {', '.join(issues)}. "
            "Consider staying close and flying conservatively."
        )
    return 'Poor conditions for RC flying. Consider waiting for better weather.'


def _summary(obs: MetarObservation) -> str:
    wind = f"{obs.wind.speed}"
    if obs.wind.is_gusty:
        wind += f"G{obs.wind.gust}"
    clouds = ', '.join(f"{layer.code} {layer.altitude}ft" for layer in obs.clouds) or 'Clear'
    return (
        f"{obs.flight_category} conditions. Wind: {wind} kts, "
        f"Visibility: {obs.visibility_repr} mi, Clouds: {clouds}"
    )


def interpret_metar(obs: MetarObservation) -> MetarInterpretation:
    """Assess a METAR observation for R/C flying."""
    wind = classify_metar_wind(obs.wind)
    visibility = classify_metar_visibility(obs.visibility)
    clouds = classify_cloud_base(obs.lowest_cloud_base)
    overall = aggregate_worst((wind, visibility, clouds))

    return MetarInterpretation(
        flight_category=obs.flight_category,
        wind_condition=wind,
        visibility_condition=visibility,
        cloud_condition=clouds,
        overall_condition=overall,
        recommendation=_recommendation(overall, wind, visibility, clouds),
        summary=_summary(obs),
    )


def format_observation_time(observed: datetime, now: Optional[datetime] = None) -> str:
    """
    Human-relative age of an observation.

    Future timestamps are clamped to "0 minutes ago". Anything a day or
    older is shown as a locale-formatted date and time.
    """
    if timezone.is_naive(observed):
        observed = timezone.make_aware(observed)
    if now is None:
        now = timezone.now()
    elif timezone.is_naive(now):
        now = timezone.make_aware(now)

    diff_minutes = max(math.floor((now - observed).total_seconds() / 60), 0)

    if diff_minutes < 60:
        unit = 'minute' if diff_minutes == 1 else 'minutes'
        return f"{diff_minutes} {unit} ago"
    if diff_minutes < 1440:
        hours = diff_minutes // 60
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return formats.date_format(timezone.localtime(observed), 'SHORT_DATETIME_FORMAT')
