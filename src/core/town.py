"""Town data models and parsing - Pure functions.

This module handles parsing the town feed JSON into typed Town objects.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Town:
    """Immutable town record from the feed.

    Attributes:
        name: Town name (feed field "Town")
        county: County name (feed field "County")
        population: Population count, None if the feed omits it
        latitude: Latitude (feed field "lat"), None if missing
        longitude: Longitude (feed field "lng"), None if missing
    """
    name: str
    county: str
    population: float | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def is_plottable(self) -> bool:
        """True if both coordinates are present and non-zero."""
        return bool(self.latitude) and bool(self.longitude)

    @property
    def coordinates(self) -> tuple[float | None, float | None]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def _optional_number(value: Any) -> float | None:
    """Coerce a feed value to float, or None if absent or not numeric.

    Numeric strings are converted first, so "0" becomes 0.0 and is then
    treated like a numeric zero (not plottable). The feed sends numbers.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_town(record: dict[str, Any]) -> Town:
    """Parse a single feed record into a Town.

    Pure function. Missing or non-numeric coordinates become None so the
    record can still be reported by name when it is skipped.

    Args:
        record: One object from the feed array

    Returns:
        Town object

    Raises:
        ValueError: If the population is negative or not finite
    """
    name = record.get("Town")
    county = record.get("County")
    population = _optional_number(record.get("Population"))
    latitude = _optional_number(record.get("lat"))
    longitude = _optional_number(record.get("lng"))

    if population is not None and (population < 0 or not math.isfinite(population)):
        raise ValueError(f"Invalid population for town {name!r}: {population}")

    return Town(
        name=str(name) if name is not None else "",
        county=str(county) if county is not None else "",
        population=population,
        latitude=latitude if latitude is None or math.isfinite(latitude) else None,
        longitude=longitude if longitude is None or math.isfinite(longitude) else None,
    )


def parse_towns(data: Any) -> list[Town]:
    """Parse the feed response body into a list of towns.

    Pure function.

    Args:
        data: Decoded JSON body (expected: list of objects)

    Returns:
        List of Town objects, in feed order

    Raises:
        ValueError: If the body is not a list of objects, or a record
            carries an invalid population
    """
    if not isinstance(data, list):
        raise ValueError(
            f"Expected a JSON array of towns, got {type(data).__name__}"
        )

    towns = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ValueError(
                f"Town record {index} is {type(record).__name__}, expected object"
            )
        towns.append(parse_town(record))

    return towns


def split_plottable(towns: list[Town]) -> tuple[list[Town], list[Town]]:
    """Split towns into plottable and skipped lists.

    Pure function. Order within each list follows the input order.

    Args:
        towns: Parsed towns

    Returns:
        Tuple of (plottable towns, skipped towns)
    """
    plottable = [t for t in towns if t.is_plottable]
    skipped = [t for t in towns if not t.is_plottable]
    return plottable, skipped
