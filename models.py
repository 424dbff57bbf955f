import math
from decimal import ROUND_HALF_UP, Decimal
from dataclasses import dataclass, field

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


@dataclass
class GeoLocation:
    name: str
    latitude: float
    longitude: float
    local_names: dict = field(default_factory=dict)
    country: str | None = None
    state: str | None = None

    @classmethod
    def from_api(cls, item):
        """Build from one element of the geocoding API's JSON array."""
        return cls(
            name=item.get("name"),
            latitude=item["lat"],
            longitude=item["lon"],
            local_names=item.get("local_names") or {},
            country=item.get("country"),
            state=item.get("state"),
        )

    # Localized name for `language` (e.g. "zh"), else the standard name.
    def display_name(self, language="zh"):
        return self.local_names.get(language) or self.name


@dataclass
class WeatherReport:
    city_name: str
    temperature: float
    description: str
    humidity: int
    wind_speed: float
    icon: str
    query: str | None = None
    search_query: str | None = None

    @classmethod
    def from_api(cls, payload, city_name=None):
        """
        Build a report from a current-weather payload.
        An explicit city_name wins over the payload's own "name".
        Raises ValueError when a required field is missing.
        """
        try:
            main = payload["main"]
            condition = payload["weather"][0]
            return cls(
                city_name=city_name or payload.get("name"),
                temperature=float(main["temp"]),
                description=condition["description"],
                humidity=main["humidity"],
                wind_speed=float(payload["wind"]["speed"]),
                icon=condition["icon"],
            )
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"unexpected weather payload: missing {e}") from e

    @property
    def temperature_label(self):
        # half-up, so -0.5 shows as 0 rather than banker's rounding
        return f"{math.floor(self.temperature + 0.5)}°C"

    @property
    def humidity_label(self):
        return f"{self.humidity}%"

    @property
    def wind_label(self):
        # half-up on the stored binary value, so 4.25 -> 4.3 but 1.15 (1.1499..) -> 1.1
        speed = Decimal(self.wind_speed).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{speed} m/s"

    @property
    def icon_url(self):
        return ICON_URL.format(icon=self.icon)

    def to_dict(self):
        return {
            "city": self.city_name,
            "temperature": self.temperature,
            "description": self.description,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "icon": self.icon,
            "icon_url": self.icon_url,
            "query": self.query,
            "search_query": self.search_query,
        }

    def __repr__(self):
        return f"<WeatherReport {self.city_name} {self.temperature_label} {self.description}>"
