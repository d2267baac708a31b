"""Read-only view model for a country returned by the REST Countries API."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

PLACEHOLDER = "—"


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _amount(value: Any) -> float:
    # bool is an int subclass; a flag is not a population
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if value != value or value < 0:  # NaN or negative
        return 0
    return value


def _strings(values: Any) -> Tuple[str, ...]:
    if isinstance(values, dict):
        values = list(values.values())
    if not isinstance(values, (list, tuple)):
        return ()
    return tuple(str(v) for v in values if isinstance(v, (str, int, float)) and not isinstance(v, bool))


def _grouped(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class CountryView:
    """Normalized country data with a default for every field.

    Build instances with ``CountryView.from_raw``; it accepts anything the API
    (or a broken cache) might hand back and never raises.
    """

    name: str = "Unknown"
    official_name: str = ""
    capital: str = PLACEHOLDER
    region: str = PLACEHOLDER
    subregion: str = PLACEHOLDER
    population: float = 0
    area: float = 0
    languages: Tuple[str, ...] = ()
    timezones: Tuple[str, ...] = ()
    flag_url: str = ""
    maps_links: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def __post_init__(self):
        if not isinstance(self.maps_links, MappingProxyType):
            object.__setattr__(self, "maps_links", MappingProxyType(dict(self.maps_links)))

    @classmethod
    def from_raw(cls, raw: Any) -> "CountryView":
        if not isinstance(raw, dict):
            return cls()

        names = _section(raw, "name")
        flags = _section(raw, "flags")
        maps = _section(raw, "maps")

        capitals = raw.get("capital")
        capital = capitals[0] if isinstance(capitals, list) and capitals else None

        return cls(
            name=_text(names.get("common"), "Unknown"),
            official_name=_text(names.get("official"), ""),
            capital=_text(capital, PLACEHOLDER),
            region=_text(raw.get("region"), PLACEHOLDER),
            subregion=_text(raw.get("subregion"), PLACEHOLDER),
            population=_amount(raw.get("population")),
            area=_amount(raw.get("area")),
            languages=_strings(raw.get("languages")),
            timezones=_strings(raw.get("timezones")),
            flag_url=_text(flags.get("png"), "") or _text(flags.get("svg"), ""),
            maps_links=MappingProxyType({str(k): v for k, v in maps.items() if isinstance(v, str) and v}),
        )

    # Display helpers used by the search tab

    @property
    def google_maps_url(self) -> str:
        return self.maps_links.get("googleMaps", "")

    @property
    def languages_label(self) -> str:
        return ", ".join(self.languages) or PLACEHOLDER

    @property
    def timezones_label(self) -> str:
        return ", ".join(self.timezones)

    @property
    def population_label(self) -> str:
        return _grouped(self.population)

    @property
    def area_label(self) -> str:
        return f"{_grouped(self.area)} km²"

    def __str__(self):
        return self.name
