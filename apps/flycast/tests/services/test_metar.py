"""Tests for METAR interpretation and observation age formatting."""

import math
from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import SimpleTestCase, override_settings

from apps.flycast.services.conditions import Verdict
from apps.flycast.services.metar import (
    CloudLayer,
    WindData,
    format_observation_time,
    interpret_metar,
)
from apps.flycast.tests.factories import create_observation


class WindDataTests(SimpleTestCase):

    def test_compass_points(self):
        self.assertEqual(WindData(direction=0, speed=5).direction_compass, 'N')
        self.assertEqual(WindData(direction=270, speed=5).direction_compass, 'W')
        self.assertEqual(WindData(direction=225, speed=5).direction_compass, 'SW')
        self.assertEqual(WindData(direction=350, speed=5).direction_compass, 'N')

    def test_variable_direction(self):
        self.assertEqual(WindData(direction=None, speed=3).direction_compass, 'VRB')

    def test_gusty(self):
        self.assertFalse(WindData(direction=270, speed=10).is_gusty)
        self.assertTrue(WindData(direction=270, speed=10, gust=12).is_gusty)


class CloudLayerTests(SimpleTestCase):

    def test_coverage_text(self):
        self.assertEqual(CloudLayer('BKN', 1200).coverage_text, 'Broken')
        self.assertEqual(CloudLayer('SKC', 0).coverage_text, 'Sky Clear')
        self.assertEqual(CloudLayer('XYZ', 0).coverage_text, 'XYZ')

    def test_lowest_base_ignores_clear_layers(self):
        obs = create_observation(clouds=[CloudLayer('CLR', 0), CloudLayer('SKC', 0)])
        self.assertEqual(obs.lowest_cloud_base, math.inf)


class InterpretMetarTests(SimpleTestCase):
    """Tests for interpret_metar"""

    def test_calm_clear_day_is_good(self):
        result = interpret_metar(create_observation())
        self.assertEqual(result.wind_condition, Verdict.GOOD)
        self.assertEqual(result.visibility_condition, Verdict.GOOD)
        self.assertEqual(result.cloud_condition, Verdict.GOOD)
        self.assertEqual(result.overall_condition, Verdict.GOOD)
        self.assertIn('Excellent conditions', result.recommendation)

    def test_any_gust_is_caution(self):
        result = interpret_metar(create_observation(wind=WindData(270, 12, gust=18)))
        self.assertEqual(result.wind_condition, Verdict.CAUTION)

    def test_strong_wind_is_poor(self):
        result = interpret_metar(create_observation(wind=WindData(270, 30, gust=35)))
        self.assertEqual(result.wind_condition, Verdict.POOR)

    def test_visibility(self):
        cases = [(2.0, Verdict.POOR), (4.0, Verdict.CAUTION), (10.0, Verdict.GOOD)]
        for visibility, expected in cases:
            with self.subTest(visibility=visibility):
                result = interpret_metar(create_observation(visibility=visibility))
                self.assertEqual(result.visibility_condition, expected)

    def test_clouds(self):
        cases = [
            ([CloudLayer('BKN', 800)], Verdict.POOR),
            ([CloudLayer('SCT', 1500)], Verdict.CAUTION),
            ([CloudLayer('CLR', 0), CloudLayer('SKC', 0)], Verdict.GOOD),
            ([CloudLayer('FEW', 3000), CloudLayer('BKN', 1200), CloudLayer('OVC', 5000)], Verdict.CAUTION),
            ([], Verdict.GOOD),
        ]
        for clouds, expected in cases:
            with self.subTest(clouds=clouds):
                result = interpret_metar(create_observation(clouds=clouds))
                self.assertEqual(result.cloud_condition, expected)

    def test_worst_factor_wins(self):
        result = interpret_metar(create_observation(clouds=[CloudLayer('OVC', 500)]))
        self.assertEqual(result.wind_condition, Verdict.GOOD)
        self.assertEqual(result.visibility_condition, Verdict.GOOD)
        self.assertEqual(result.overall_condition, Verdict.POOR)
        self.assertIn('Poor conditions', result.recommendation)

    def test_caution_names_contributing_factors(self):
        result = interpret_metar(create_observation(
            wind=WindData(270, 12, gust=18),
            visibility=4.0,
        ))
        self.assertEqual(result.overall_condition, Verdict.CAUTION)
        self.assertIn('gusty winds', result.recommendation)
        self.assertIn('reduced visibility', result.recommendation)
        self.assertNotIn('low clouds', result.recommendation)

    def test_caution_for_low_clouds_only(self):
        result = interpret_metar(create_observation(clouds=[CloudLayer('BKN', 2000)]))
        self.assertIn('due to low clouds.', result.recommendation)

    def test_summary(self):
        obs = create_observation(
            wind=WindData(270, 12, gust=18),
            visibility_repr='10',
            clouds=[CloudLayer('FEW', 3000), CloudLayer('BKN', 1200)],
        )
        self.assertEqual(
            interpret_metar(obs).summary,
            'VFR conditions. Wind: 12G18 kts, Visibility: 10 mi, Clouds: FEW 3000ft, BKN 1200ft',
        )

    def test_summary_without_clouds(self):
        obs = create_observation(wind=WindData(90, 5), clouds=[], flight_category='MVFR')
        summary = interpret_metar(obs).summary
        self.assertTrue(summary.startswith('MVFR conditions. Wind: 5 kts,'))
        self.assertTrue(summary.endswith('Clouds: Clear'))

    def test_flight_category_passthrough(self):
        obs = create_observation(flight_category='IFR')
        self.assertEqual(interpret_metar(obs).flight_category, 'IFR')
        self.assertEqual(obs.flight_category_color, 'warning')


class FormatObservationTimeTests(SimpleTestCase):
    """Tests for format_observation_time"""

    now = datetime(2024, 1, 15, 14, 30, tzinfo=dt_timezone.utc)

    def ago(self, **delta):
        return format_observation_time(self.now - timedelta(**delta), now=self.now)

    def test_minutes(self):
        self.assertEqual(self.ago(minutes=5), '5 minutes ago')
        self.assertEqual(self.ago(minutes=59, seconds=59), '59 minutes ago')

    def test_single_minute(self):
        self.assertEqual(self.ago(minutes=1), '1 minute ago')

    def test_hours(self):
        self.assertEqual(self.ago(minutes=60), '1 hour ago')
        self.assertEqual(self.ago(minutes=61), '1 hour ago')
        self.assertEqual(self.ago(minutes=150), '2 hours ago')
        self.assertEqual(self.ago(minutes=1439), '23 hours ago')

    def test_future_clamped_to_zero(self):
        self.assertEqual(self.ago(minutes=-10), '0 minutes ago')

    @override_settings(TIME_ZONE='UTC', LANGUAGE_CODE='en-us')
    def test_older_than_a_day_shows_date(self):
        result = self.ago(hours=26)
        self.assertIn('01/14/2024', result)

    @override_settings(TIME_ZONE='UTC')
    def test_naive_timestamps_treated_as_local(self):
        observed = datetime(2024, 1, 15, 14, 0)
        self.assertEqual(format_observation_time(observed, now=self.now), '30 minutes ago')
