"""
Management command to check R/C flying conditions for a location.

Usage:
    python manage.py check_conditions --lat 41.88 --lon -87.63
    python manage.py check_conditions --lat 41.88 --lon -87.63 --no-aviation
    python manage.py check_conditions --lat 41.88 --lon -87.63 --api-key KEY --metar-api-key KEY
"""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from apps.flycast.services import Verdict, WeatherService, WeatherServiceError


class Command(BaseCommand):
    help = 'Show forecast and METAR flying conditions for a location'

    def add_arguments(self, parser):
        parser.add_argument('--lat', type=float, required=True, help='Latitude in decimal degrees')
        parser.add_argument('--lon', type=float, required=True, help='Longitude in decimal degrees')
        parser.add_argument('--api-key', help='WeatherAPI key (overrides WEATHERAPI_KEY)')
        parser.add_argument('--metar-api-key', help='CheckWX key (overrides CHECKWX_API_KEY)')
        parser.add_argument(
            '--no-aviation',
            action='store_true',
            help='Skip METAR lookups for nearby airports',
        )

    def handle(self, *args, **options):
        config = apps.get_app_config('flycast')
        if options['api_key']:
            config.forecast_key.set(options['api_key'])
        if options['metar_api_key']:
            config.metar_key.set(options['metar_api_key'])

        service = WeatherService(forecast_key=config.forecast_key, metar_key=config.metar_key)
        latitude, longitude = options['lat'], options['lon']

        self._show_forecast(service, latitude, longitude)
        if not options['no_aviation']:
            self._show_aviation(service, latitude, longitude)

    def _style_for(self, verdict):
        return {
            Verdict.GOOD: self.style.SUCCESS,
            Verdict.CAUTION: self.style.WARNING,
            Verdict.POOR: self.style.ERROR,
        }[verdict]

    def _show_forecast(self, service, latitude, longitude):
        self.stdout.write(f'Forecast for {latitude},{longitude}')
        try:
            conditions = service.get_flying_conditions(latitude, longitude)
        except WeatherServiceError as e:
            raise CommandError(f'Unable to load weather data: {e}')

        if conditions is None:
            self.stdout.write(self.style.WARNING('  No forecast available'))
            return

        overall = conditions.analysis.overall_condition
        self.stdout.write(self._style_for(overall)(f'  {overall.label} ({overall.value})'))
        for recommendation in conditions.analysis.recommendations:
            self.stdout.write(f'    - {recommendation}')

        for day in conditions.forecast:
            gust = f' G{day.wind_gust_mph}' if day.wind_gust_mph else ''
            self.stdout.write(
                f'  {day.date}: {day.temperature_f}F, wind {day.wind_speed_mph}{gust} mph, '
                f'rain {day.precipitation_chance}%, ceiling ~{day.cloud_ceiling_ft} ft, '
                f'{day.description} [{day.condition.value}]'
            )

    def _show_aviation(self, service, latitude, longitude):
        self.stdout.write('Nearby airports (METAR)')
        reports = service.get_station_reports(latitude, longitude)
        if not reports:
            self.stdout.write(f'  No major airports within {service.search_radius} miles')
            return

        for report in reports:
            airport = report.airport
            heading = f'  {airport.icao} {airport.name} ({airport.distance:.1f} mi)'
            if not report.has_data:
                self.stdout.write(f'{heading}: no current METAR data')
                continue

            interpretation = report.interpretation
            self.stdout.write(
                self._style_for(interpretation.overall_condition)(
                    f'{heading}: {interpretation.overall_condition.value}'
                )
            )
            self.stdout.write(f'    {interpretation.summary}')
            self.stdout.write(f'    {interpretation.recommendation}')
