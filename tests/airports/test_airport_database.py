"""Tests for the airport database."""

import json
from pathlib import Path

import pytest

from skyflight.airports.database import Airport, AirportDatabase

REPO_AIRPORTS = Path(__file__).resolve().parent.parent.parent / "data" / "airports.json"


@pytest.fixture
def database() -> AirportDatabase:
    """Create a database with two airports."""
    db = AirportDatabase()
    db.load_records(
        [
            {"icao": "lfpg", "iata": "cdg", "name": "Charles de Gaulle", "city": "Paris",
             "country": "France", "lat": 49.0097, "lon": 2.5479},
            {"icao": "EGLL", "iata": "LHR", "name": "Heathrow", "city": "London",
             "country": "United Kingdom", "latitude": 51.47, "longitude": -0.4543},
        ]
    )
    return db


class TestAirport:
    """Test airport records."""

    def test_from_dict_short_keys(self) -> None:
        """Test lat/lon keys and upper-cased codes."""
        airport = Airport.from_dict({"icao": "kjfk", "iata": "jfk", "lat": "40.64", "lon": -73.78})
        assert airport.icao == "KJFK"
        assert airport.iata == "JFK"
        assert airport.latitude == pytest.approx(40.64)
        assert airport.identifier == "KJFK"

    def test_from_dict_missing_coordinate(self) -> None:
        """Test a record without coordinates is rejected."""
        with pytest.raises(KeyError):
            Airport.from_dict({"icao": "XXXX", "lat": 1.0})


class TestAirportDatabase:
    """Test loading, lookup and search."""

    def test_lookup_case_insensitive(self, database: AirportDatabase) -> None:
        """Test ICAO lookup ignores case."""
        assert database.get_airport("lfpg").name == "Charles de Gaulle"
        assert database.get_airport("EGLL").longitude == pytest.approx(-0.4543)
        assert database.get_airport("ZZZZ") is None

    def test_search(self, database: AirportDatabase) -> None:
        """Test search over names, cities and codes."""
        assert [a.icao for a in database.search("paris")] == ["LFPG"]
        assert [a.icao for a in database.search("lhr")] == ["EGLL"]
        assert database.search("tokyo") == []

    def test_malformed_records_skipped(self) -> None:
        """Test bad records are skipped, good ones kept."""
        db = AirportDatabase()
        loaded = db.load_records(
            [{"icao": "GOOD", "lat": 1.0, "lon": 2.0}, {"icao": "BAD", "lat": "north"}, {"lat": 1.0}]
        )
        assert loaded == 1
        assert len(db) == 1

    def test_load_json(self, tmp_path: Path) -> None:
        """Test loading from a JSON file."""
        path = tmp_path / "airports.json"
        path.write_text(json.dumps([{"icao": "RJTT", "lat": 35.55, "lon": 139.78}]))

        db = AirportDatabase()

        assert db.load_json(path) == 1
        assert db.get_all()[0].icao == "RJTT"

    def test_bundled_airports(self) -> None:
        """Test the bundled airport list loads completely."""
        if not REPO_AIRPORTS.exists():
            pytest.skip("bundled data not available")
        db = AirportDatabase()
        assert db.load_json(REPO_AIRPORTS) == len(db) > 0
        assert db.get_airport("LFPG") is not None
