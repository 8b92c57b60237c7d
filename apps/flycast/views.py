import logging

from django.apps import apps
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .services import (
    ForecastEnricher,
    WeatherService,
    WeatherServiceError,
    format_observation_time,
    get_airport,
    interpret_metar,
)
from .services.conditions import verdict_color

logger = logging.getLogger(__name__)


def get_weather_service() -> WeatherService:
    """WeatherService wired with the process-wide provider keys."""
    config = apps.get_app_config('flycast')
    return WeatherService(forecast_key=config.forecast_key, metar_key=config.metar_key)


def parse_coordinates(params):
    """(lat, lon) from query params, None if missing or out of range."""
    try:
        latitude = float(params['lat'])
        longitude = float(params['lon'])
    except (KeyError, TypeError, ValueError):
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return latitude, longitude


def serialize_airport(airport) -> dict:
    return {
        'icao': airport.icao,
        'name': airport.name,
        'city': airport.city,
        'country': airport.country,
        'latitude': airport.latitude,
        'longitude': airport.longitude,
        'elevation': airport.elevation,
        'distance': round(airport.distance, 1) if airport.distance is not None else None,
    }


def serialize_metar(metar) -> dict:
    return {
        'station': metar.station,
        'observed': metar.observed.isoformat(),
        'observed_ago': format_observation_time(metar.observed),
        'raw_text': metar.raw_text,
        'wind': {
            'direction': metar.wind.direction,
            'direction_compass': metar.wind.direction_compass,
            'speed_kts': metar.wind.speed,
            'gust_kts': metar.wind.gust,
        },
        'visibility_miles': metar.visibility,
        'clouds': [
            {'code': layer.code, 'text': layer.coverage_text, 'feet': layer.altitude}
            for layer in metar.clouds
        ],
        'temperature_f': metar.temperature_f,
        'dewpoint_f': metar.dewpoint_f,
        'humidity': metar.humidity,
        'barometer_hg': metar.barometer_hg,
        'conditions': metar.conditions,
        'flight_category': metar.flight_category,
        'flight_category_color': metar.flight_category_color,
    }


def serialize_interpretation(interpretation) -> dict:
    return {
        'flight_category': interpretation.flight_category,
        'wind_condition': interpretation.wind_condition.value,
        'visibility_condition': interpretation.visibility_condition.value,
        'cloud_condition': interpretation.cloud_condition.value,
        'overall_condition': interpretation.overall_condition.value,
        'color': verdict_color(interpretation.overall_condition),
        'recommendation': interpretation.recommendation,
        'summary': interpretation.summary,
    }


def aviation_not_configured():
    return JsonResponse(
        {'status': 'error', 'error': 'METAR API key not configured (CHECKWX_API_KEY)'},
        status=503,
    )


@require_GET
def health(request):
    """Health check endpoint."""
    return JsonResponse({'status': 'ok'})


@require_GET
def flying_conditions(request):
    """Forecast verdict and recommendations for a location."""
    coordinates = parse_coordinates(request.GET)
    if coordinates is None:
        return JsonResponse({'status': 'no_data', 'message': 'Location not available yet'})
    latitude, longitude = coordinates

    weather_service = get_weather_service()
    if not weather_service.is_configured():
        return JsonResponse(
            {'status': 'error', 'error': 'Weather API key not configured'},
            status=503,
        )

    try:
        conditions = weather_service.get_flying_conditions(latitude, longitude)
    except WeatherServiceError as e:
        logger.warning(f"Forecast fetch failed for {latitude},{longitude}: {e}")
        return JsonResponse(
            {'status': 'error', 'error': f"Unable to load weather data: {e}"},
            status=502,
        )

    if conditions is None:
        return JsonResponse({'status': 'no_data', 'message': 'No forecast available for this location'})

    location = {
        'latitude': latitude,
        'longitude': longitude,
        'city': request.GET.get('city', ''),
        'country': request.GET.get('country', ''),
    }
    overall = conditions.analysis.overall_condition

    try:
        enrichment = ForecastEnricher().enrich(conditions.forecast, location)
    except Exception as e:
        logger.error(f"Enrichment failed for {latitude},{longitude}: {e}")
        enrichment = None

    return JsonResponse({
        'status': 'ok',
        'location': location,
        'overall_condition': overall.value,
        'label': overall.label,
        'color': verdict_color(overall),
        'recommendations': conditions.analysis.recommendations,
        'forecast': [day.to_dict() for day in conditions.forecast],
        'enrichment': enrichment,
    })


@require_GET
def aviation_conditions(request):
    """Interpreted METARs from the airports nearest to a location."""
    coordinates = parse_coordinates(request.GET)
    if coordinates is None:
        return JsonResponse({'status': 'no_data', 'message': 'Location not available yet'})
    latitude, longitude = coordinates

    weather_service = get_weather_service()
    if not weather_service.is_aviation_configured():
        return aviation_not_configured()

    reports = weather_service.get_station_reports(latitude, longitude)

    if not reports:
        return JsonResponse({
            'status': 'ok',
            'stations': [],
            'message': f"No major airports found within {weather_service.search_radius} miles of your location.",
        })

    stations = []
    for report in reports:
        stations.append({
            'airport': serialize_airport(report.airport),
            'metar': serialize_metar(report.metar) if report.metar else None,
            'interpretation': serialize_interpretation(report.interpretation) if report.interpretation else None,
        })

    found = sum(1 for report in reports if report.has_data)
    return JsonResponse({
        'status': 'ok',
        'stations': stations,
        'message': f"Loaded METAR data for {found} of {len(reports)} nearby airports.",
    })


@require_GET
def station_conditions(request, icao):
    """Interpreted METAR for a single registered airport."""
    airport = get_airport(icao)
    if airport is None:
        return JsonResponse({'status': 'error', 'error': f"Unknown airport: {icao}"}, status=404)

    weather_service = get_weather_service()
    if not weather_service.is_aviation_configured():
        return aviation_not_configured()

    try:
        metar = weather_service.get_metar(airport.icao)
    except WeatherServiceError as e:
        logger.warning(f"METAR fetch failed for {airport.icao}: {e}")
        return JsonResponse(
            {'status': 'error', 'error': f"Unable to load METAR data: {e}"},
            status=502,
        )

    if metar is None:
        return JsonResponse({
            'status': 'no_data',
            'airport': serialize_airport(airport),
            'metar': None,
            'interpretation': None,
            'message': 'No current METAR data',
        })

    return JsonResponse({
        'status': 'ok',
        'airport': serialize_airport(airport),
        'metar': serialize_metar(metar),
        'interpretation': serialize_interpretation(interpret_metar(metar)),
    })
