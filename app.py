import logging
import os

from flask import Flask, jsonify, render_template, request

import weather_api as weather_api

logger = logging.getLogger(__name__)


def _env_flag(name, default=True):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


# Runs one lookup with the app's configured credential and options.
def _lookup(app, city):
    return weather_api.lookup_weather(
        city,
        api_key=app.config["OPENWEATHER_API_KEY"],
        country=app.config["DEFAULT_COUNTRY"],
        lang=app.config["WEATHER_LANG"],
        units=app.config["WEATHER_UNITS"],
        transliterate=app.config["TRANSLITERATE"],
    )


# App factory: reads configuration from the environment and registers routes.
def create_app(config=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret")
    app.config["OPENWEATHER_API_KEY"] = os.environ.get("OPENWEATHER_API_KEY", "")
    app.config["WEATHER_LANG"] = os.environ.get("WEATHER_LANG", weather_api.DEFAULT_LANG)
    app.config["WEATHER_UNITS"] = weather_api.DEFAULT_UNITS
    app.config["DEFAULT_COUNTRY"] = os.environ.get("DEFAULT_COUNTRY", weather_api.DEFAULT_COUNTRY)
    app.config["TRANSLITERATE"] = _env_flag("TRANSLITERATE")
    if config:
        app.config.update(config)

    # Search page. The form submits with GET so both the button and Enter trigger a lookup.
    @app.route("/", methods=["GET"])
    def index():
        city = (request.args.get("city") or "").strip()
        report = None
        error = None

        if city:
            try:
                report = _lookup(app, city)
            except weather_api.WeatherLookupError as e:
                logger.warning("Weather lookup for %r failed: %s", city, e)
                error = f"Error fetching weather data: {e}"

        return render_template("index.html", city=city, report=report, error=error)

    # JSON variant of the same lookup.
    @app.route("/api/weather", methods=["GET"])
    def api_weather():
        city = (request.args.get("city") or "").strip()
        if not city:
            return jsonify({"error": "city is required"}), 400
        try:
            report = _lookup(app, city)
        except weather_api.WeatherLookupError as e:
            logger.warning("Weather lookup for %r failed: %s", city, e)
            return jsonify({"error": str(e)}), 502
        return jsonify(report.to_dict())

    return app

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    app.run(debug=True)
