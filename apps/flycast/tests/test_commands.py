"""Tests for the check_conditions management command."""

from io import StringIO
from unittest.mock import patch

from django.apps import apps
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from apps.flycast.services.airports import find_nearby_airports
from apps.flycast.services.forecast import analyze_forecast
from apps.flycast.services.metar import interpret_metar
from apps.flycast.services.providers import WeatherServiceError
from apps.flycast.services.weather import FlyingConditions, StationReport
from apps.flycast.tests.factories import create_forecast_day, create_observation

COMMAND_PATH = 'apps.flycast.management.commands.check_conditions.WeatherService'


class CheckConditionsCommandTests(SimpleTestCase):

    def setUp(self):
        config = apps.get_app_config('flycast')
        self.original_keys = (config.forecast_key.get(), config.metar_key.get())

    def tearDown(self):
        config = apps.get_app_config('flycast')
        config.forecast_key.set(self.original_keys[0])
        config.metar_key.set(self.original_keys[1])

    def run_command(self, *args):
        out = StringIO()
        call_command('check_conditions', '--lat=41.8781', '--lon=-87.6298', *args, stdout=out)
        return out.getvalue()

    @patch(COMMAND_PATH)
    def test_forecast_and_aviation(self, mock_service_class):
        forecast = [create_forecast_day(wind_speed_mph=3, wind_gust_mph=8)]
        metar = create_observation()
        ohare = find_nearby_airports(41.8781, -87.6298)[0]
        service = mock_service_class.return_value
        service.get_flying_conditions.return_value = FlyingConditions(forecast, analyze_forecast(forecast))
        service.get_station_reports.return_value = [StationReport(ohare, metar, interpret_metar(metar))]

        output = self.run_command()

        self.assertIn('Good Flying (good)', output)
        self.assertIn('Light winds - perfect for beginners and small aircraft', output)
        self.assertIn('2024-06-01: 72F, wind 3 G8 mph', output)
        self.assertIn('KORD', output)
        self.assertIn('VFR conditions.', output)
        service.get_flying_conditions.assert_called_once_with(41.8781, -87.6298)

    @patch(COMMAND_PATH)
    def test_no_aviation(self, mock_service_class):
        forecast = [create_forecast_day()]
        service = mock_service_class.return_value
        service.get_flying_conditions.return_value = FlyingConditions(forecast, analyze_forecast(forecast))

        output = self.run_command('--no-aviation')

        self.assertNotIn('Nearby airports', output)
        service.get_station_reports.assert_not_called()

    @patch(COMMAND_PATH)
    def test_no_forecast_and_no_airports(self, mock_service_class):
        service = mock_service_class.return_value
        service.get_flying_conditions.return_value = None
        service.search_radius = 100
        service.get_station_reports.return_value = []

        output = self.run_command()

        self.assertIn('No forecast available', output)
        self.assertIn('No major airports within 100 miles', output)

    @patch(COMMAND_PATH)
    def test_station_without_metar(self, mock_service_class):
        ohare = find_nearby_airports(41.8781, -87.6298)[0]
        service = mock_service_class.return_value
        service.get_flying_conditions.return_value = None
        service.get_station_reports.return_value = [StationReport(ohare)]

        output = self.run_command()

        self.assertIn('KORD', output)
        self.assertIn('no current METAR data', output)

    @patch(COMMAND_PATH)
    def test_provider_error(self, mock_service_class):
        mock_service_class.return_value.get_flying_conditions.side_effect = WeatherServiceError('Invalid API key')

        with self.assertRaises(CommandError):
            self.run_command()

    @patch(COMMAND_PATH)
    def test_api_keys_update_shared_stores(self, mock_service_class):
        mock_service_class.return_value.get_flying_conditions.return_value = None

        self.run_command('--no-aviation', '--api-key=forecast-key', '--metar-api-key=metar-key')

        config = apps.get_app_config('flycast')
        self.assertEqual(config.forecast_key.get(), 'forecast-key')
        self.assertEqual(config.metar_key.get(), 'metar-key')
        mock_service_class.assert_called_once_with(
            forecast_key=config.forecast_key,
            metar_key=config.metar_key,
        )
