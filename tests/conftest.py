import pytest

import transliteration
from app import create_app

# Creates a Flask app configured with a test API key.
@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.delenv("TRANSLITERATE", raising=False)
    monkeypatch.delenv("WEATHER_LANG", raising=False)
    monkeypatch.delenv("DEFAULT_COUNTRY", raising=False)
    app = create_app()
    app.config.update(TESTING=True)
    yield app

@pytest.fixture()
def client(app):
    return app.test_client()

# Forces the "pinyin library missing" path.
@pytest.fixture()
def no_pinyin(monkeypatch):
    monkeypatch.setattr(transliteration, "_lazy_pinyin", None)


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, text=None):
        self._json = json_data
        self.status_code = status_code
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


def weather_payload(name, temp=21.4, description="晴", humidity=40, speed=3.0, icon="01d"):
    return {
        "name": name,
        "main": {"temp": temp, "humidity": humidity},
        "weather": [{"description": description, "icon": icon}],
        "wind": {"speed": speed},
    }


# Replaces weather_api.requests with a stub; `handler(url, params)` returns a FakeResponse.
@pytest.fixture()
def fake_http(monkeypatch):
    import types
    import weather_api as wa

    calls = []

    def install(handler):
        def _get(url, params=None, timeout=30, **kwargs):
            params = dict(params or {})
            calls.append({"url": url, "params": params})
            return handler(url, params)
        monkeypatch.setattr(wa, "requests", types.SimpleNamespace(get=_get))
        return calls

    return install
