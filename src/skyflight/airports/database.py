"""Airport database.

Loads airport records from a JSON list such as:

    [{"icao": "LFPG", "iata": "CDG", "name": "Charles de Gaulle",
      "city": "Paris", "country": "France", "lat": 49.0097, "lon": 2.5479}]

The flight core only needs an airport's coordinates and identifier; the
other fields are carried for display and search.

Typical usage:
    db = AirportDatabase()
    db.load_json("data/airports.json")

    airport = db.get_airport("LFPG")
    matches = db.search("paris")
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Airport:
    """Airport record.

    Attributes:
        icao: ICAO code, used as the identifier.
        latitude: Degrees.
        longitude: Degrees.
        iata: IATA code (may be empty).
        name: Airport name.
        city: City served.
        country: Country.
    """

    icao: str
    latitude: float
    longitude: float
    iata: str = ""
    name: str = ""
    city: str = ""
    country: str = ""

    @property
    def identifier(self) -> str:
        """Identifier of the airport (its ICAO code)."""
        return self.icao

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Airport":
        """Create from a JSON record.

        Accepts both ``lat``/``lon`` and ``latitude``/``longitude`` keys.

        Raises:
            KeyError: If the identifier or a coordinate is missing.
            ValueError: If a coordinate is not numeric.
        """
        latitude = data["lat"] if "lat" in data else data["latitude"]
        longitude = data["lon"] if "lon" in data else data["longitude"]
        return cls(
            icao=str(data["icao"]).upper(),
            latitude=float(latitude),
            longitude=float(longitude),
            iata=str(data.get("iata", "")).upper(),
            name=data.get("name", ""),
            city=data.get("city", ""),
            country=data.get("country", ""),
        )


class AirportDatabase:
    """In-memory airport collection keyed by ICAO code."""

    def __init__(self) -> None:
        self.airports: dict[str, Airport] = {}

    def add_airport(self, airport: Airport) -> None:
        """Add or replace an airport."""
        self.airports[airport.icao.upper()] = airport

    def load_records(self, records: list[dict[str, Any]]) -> int:
        """Load airports from parsed JSON records.

        Malformed records are skipped with a warning.

        Returns:
            Number of airports loaded.
        """
        loaded = 0
        for record in records:
            try:
                self.add_airport(Airport.from_dict(record))
                loaded += 1
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed airport record %r: %s", record, e)
        return loaded

    def load_json(self, path: str | Path) -> int:
        """Load airports from a JSON file.

        Args:
            path: File containing a JSON list of airport records.

        Returns:
            Number of airports loaded.
        """
        with open(path, encoding="utf-8") as f:
            records = json.load(f)

        loaded = self.load_records(records)
        logger.info("Loaded %d airports from %s", loaded, path)
        return loaded

    def get_airport(self, icao: str) -> Airport | None:
        """Get an airport by ICAO code (case-insensitive)."""
        return self.airports.get(icao.upper())

    def search(self, query: str) -> list[Airport]:
        """Find airports whose name, city, country or codes contain ``query``."""
        needle = query.lower()
        return [
            airport
            for airport in self.airports.values()
            if needle in airport.name.lower()
            or needle in airport.city.lower()
            or needle in airport.country.lower()
            or needle in airport.iata.lower()
            or needle in airport.icao.lower()
        ]

    def get_all(self) -> list[Airport]:
        """Get all airports."""
        return list(self.airports.values())

    def __len__(self) -> int:
        return len(self.airports)
