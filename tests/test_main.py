"""Tests for the headless runner."""

from pathlib import Path

import pytest

from skyflight.main import SkyFlight, main, parse_args
from skyflight.telemetry import TelemetryAnalyzer
from skyflight.version import get_about_info, get_version


class TestParseArgs:
    """Test command line parsing."""

    def test_defaults(self) -> None:
        """Test the default run."""
        args = parse_args([])
        assert args.aircraft == "cessna"
        assert args.duration == 10.0
        assert args.fps == 60
        assert args.realtime is True
        assert args.day_night == "auto"
        assert args.view is None
        assert args.version is False

    def test_options(self) -> None:
        """Test explicit options."""
        args = parse_args(
            ["--aircraft", "jet", "--no-realtime", "--throttle", "0.5", "--view", "overhead"]
        )
        assert args.aircraft == "jet"
        assert args.realtime is False
        assert args.throttle == 0.5
        assert args.view == "overhead"

    @pytest.mark.parametrize("argv", [["--fps", "0"], ["--aircraft", "glider"], ["--view", "tail"]])
    def test_invalid(self, argv: list[str]) -> None:
        """Test invalid values exit with a usage error."""
        with pytest.raises(SystemExit):
            parse_args(argv)


class TestSkyFlight:
    """Test the runner."""

    def test_requires_departure(self) -> None:
        """Test a departure is mandatory."""
        with pytest.raises(ValueError):
            SkyFlight(parse_args(["--no-realtime"]))

    def test_unknown_airport(self, tmp_path: Path) -> None:
        """Test an unknown ICAO code is rejected."""
        airports = tmp_path / "airports.json"
        airports.write_text('[{"icao": "LFPG", "lat": 49.0, "lon": 2.5}]')

        with pytest.raises(ValueError):
            SkyFlight(parse_args(["--airports", str(airports), "--from-airport", "KJFK"]))

    def test_headless_run_with_telemetry(self, tmp_path: Path) -> None:
        """Test a fixed-step run records one row per tick."""
        db_path = tmp_path / "flight.db"
        argv = [
            "--no-realtime",
            "--duration", "1",
            "--fps", "4",
            "--from-lat", "48.85",
            "--from-lon", "2.35",
            "--to-lat", "51.47",
            "--to-lon", "-0.45",
            "--roll", "0.3",
            "--view", "overhead",
            "--telemetry", str(db_path),
        ]

        assert main(argv) == 0

        summary = TelemetryAnalyzer(str(db_path)).get_summary()
        assert summary["frames"] == 4
        assert summary["min_altitude"] >= 0.5

    def test_airport_codes(self, tmp_path: Path) -> None:
        """Test departure and destination resolved from the database."""
        airports = tmp_path / "airports.json"
        airports.write_text(
            '[{"icao": "LFPG", "lat": 49.0, "lon": 2.5}, {"icao": "EGLL", "lat": 51.5, "lon": -0.5}]'
        )
        app = SkyFlight(
            parse_args(
                ["--airports", str(airports), "--from-airport", "lfpg", "--to-airport", "EGLL"]
            )
        )
        assert app.departure.icao == "LFPG"
        assert app.destination.icao == "EGLL"

    def test_main_reports_failure(self) -> None:
        """Test errors become a non-zero exit code."""
        assert main(["--no-realtime", "--duration", "0"]) == 1


class TestVersion:
    """Test version reporting."""

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the version and exits before any flight setup."""
        # No departure given: a flight run would fail with exit code 1
        assert main(["--version"]) == 0

        out = capsys.readouterr().out
        assert out.strip() == f"SkyFlight {get_version()}"

    def test_about_info(self) -> None:
        """Test the about information fields."""
        about = get_about_info()
        assert about["name"] == "SkyFlight"
        assert about["version"] == get_version()
        assert about["license"] == "MIT"
        assert about["version"]
