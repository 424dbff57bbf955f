import logging

import requests
from requests import RequestException

from models import GeoLocation, WeatherReport
from transliteration import contains_han, romanize

logger = logging.getLogger(__name__)

WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"

DEFAULT_COUNTRY = "CN"
DEFAULT_LANG = "zh_cn"
DEFAULT_UNITS = "metric"
REQUEST_TIMEOUT = 20


class WeatherLookupError(RuntimeError):
    """A lookup failed; the message is safe to show to the user."""


# Language code used for geocoding local_names ("zh_cn" -> "zh").
def _local_name_lang(lang):
    return (lang or "").split("_")[0].lower() or "en"


def _with_country(name, country):
    return f"{name},{country}" if country else name


def _body(response):
    try:
        return response.text
    except Exception:
        return ""


# Picks the string actually sent to the API: pinyin for Chinese input when available.
def resolve_search_query(query: str, transliterate: bool = True) -> str:
    if not (transliterate and contains_han(query)):
        return query
    romanized = romanize(query)
    if romanized:
        logger.info("Chinese %r converted to pinyin %r", query, romanized)
        return romanized
    logger.info("Querying with the original name %r (geocoding accepts Chinese)", query)
    return query


def geocode_city(city: str, api_key: str, country: str = DEFAULT_COUNTRY, transliterate: bool = True):
    """
    Resolve `city` to a GeoLocation using the geocoding API, or None.
    Tries the name as given, then with the country code, then (for Chinese input
    with pinyin available) the pinyin form with and without the country code.
    A rejected API key raises WeatherLookupError; other failures move on to the next form.
    """
    attempts = [city, _with_country(city, country)]
    if transliterate and contains_han(city):
        pinyin = romanize(city)
        if pinyin and pinyin != city:
            attempts += [pinyin, _with_country(pinyin, country)]

    for attempt in attempts:
        params = {"q": attempt, "limit": 1, "appid": api_key}
        try:
            response = requests.get(GEO_URL, params=params, timeout=REQUEST_TIMEOUT)
        except RequestException as e:
            logger.error("Geocoding request (%s) failed: %s", attempt, e)
            continue

        if not response.ok:
            if response.status_code == 401:
                raise WeatherLookupError(
                    "401 Unauthorized: the API key is invalid or not yet active (geocoding API)."
                )
            logger.warning("Geocoding attempt (%s) returned HTTP %s: %s", attempt, response.status_code, _body(response))
            continue

        try:
            results = response.json()
        except ValueError:
            results = []
        if isinstance(results, list) and results:
            try:
                hit = GeoLocation.from_api(results[0])
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Geocoding attempt (%s) returned an unusable record: %s", attempt, e)
                continue
            logger.info("Geocoding hit for %s: %s (%s, %s)", attempt, hit.name, hit.latitude, hit.longitude)
            return hit
        logger.warning("Geocoding attempt (%s) returned no results", attempt)

    return None


def _get_weather(params, api_key, units, lang):
    query = dict(params, appid=api_key, units=units, lang=lang)
    try:
        return requests.get(WEATHER_URL, params=query, timeout=REQUEST_TIMEOUT)
    except RequestException as e:
        raise WeatherLookupError(f"Weather request failed: {e}") from e


def _parse_report(response, city_name=None):
    try:
        return WeatherReport.from_api(response.json(), city_name=city_name)
    except ValueError as e:
        raise WeatherLookupError(f"Could not parse the weather response: {e} - {_body(response)}") from e


def lookup_weather(
    query: str,
    api_key: str | None,
    country: str = DEFAULT_COUNTRY,
    lang: str = DEFAULT_LANG,
    units: str = DEFAULT_UNITS,
    transliterate: bool = True,
) -> WeatherReport:
    """
    Look up the current weather for a user-entered city name.

    Order: direct name query, then name plus country code, then geocoding followed
    by a coordinate query. A geocoded result is labelled with the geocoder's
    localized name rather than the weather API's name.
    Every failure is raised as WeatherLookupError.
    """
    search_query = resolve_search_query(query, transliterate)

    if not api_key:
        logger.error("OpenWeather API key is not configured")
        raise WeatherLookupError(
            "API key not configured: set OPENWEATHER_API_KEY to your OpenWeatherMap API key."
        )

    response = _get_weather({"q": search_query}, api_key, units, lang)

    if not response.ok:
        if response.status_code == 401:
            raise WeatherLookupError(
                "401 Unauthorized: the API key is invalid or not yet active (check your OpenWeather API key)."
            )
        if response.status_code != 404:
            raise WeatherLookupError(f"HTTP {response.status_code} - {_body(response)}")

        logger.info("Searching for city %r in several ways", search_query)
        logger.info("1/3: direct query found nothing, trying other forms")

        with_country = _with_country(search_query, country)
        logger.info("2/3: trying with country code: %s", with_country)
        response = _get_weather({"q": with_country}, api_key, units, lang)

        if response.ok:
            logger.info("Found city using the country code")
        else:
            logger.info("3/3: trying geocoding")
            geo = geocode_city(search_query, api_key, country=country, transliterate=transliterate)
            if geo is None:
                raise WeatherLookupError(
                    "404 Not Found: no such city (geocoding returned nothing either); "
                    "check the spelling or try the English/pinyin name."
                )
            logger.info("Geocoding found the city at lat=%s, lon=%s", geo.latitude, geo.longitude)
            response = _get_weather({"lat": geo.latitude, "lon": geo.longitude}, api_key, units, lang)
            if not response.ok:
                raise WeatherLookupError(
                    f"Weather by coordinates failed: HTTP {response.status_code} - {_body(response)}"
                )
            report = _parse_report(response, city_name=geo.display_name(_local_name_lang(lang)))
            report.query, report.search_query = query, search_query
            logger.info("Weather lookup finished for %s", report.city_name)
            return report

    report = _parse_report(response)
    report.query, report.search_query = query, search_query
    return report
