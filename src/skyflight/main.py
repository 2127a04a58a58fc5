"""SkyFlight - spherical-world flight simulator core.

Headless runner: flies a session with constant control inputs, paced by a
pygame clock, and logs a HUD line every simulated second. Rendering and raw
input capture are left to the front end; this runner exercises the core.

Typical usage:
    python -m skyflight.main --aircraft cessna --from-lat 48.85 --from-lon 2.35
    python -m skyflight.main --airports data/airports.json --from-airport LFPG \\
        --to-airport EGLL --duration 60 --telemetry /tmp/flight.db
"""

import argparse
import sys

import pygame

from skyflight.airports.database import Airport, AirportDatabase
from skyflight.camera.views import CameraView
from skyflight.core.config import get_config_path, load_config
from skyflight.core.logging_system import get_logger, initialize_logging
from skyflight.core.session import FlightSession, TickResult
from skyflight.environment.illumination import DayNightMode
from skyflight.physics.flight_model.base import AircraftType, ControlInputs
from skyflight.telemetry import TelemetryLogger
from skyflight.version import get_about_info

logger = get_logger(__name__)


class SkyFlight:
    """Runs a flight session at a fixed tick rate.

    Attributes:
        args: Parsed command line arguments.
        session: Flight session being flown.
        telemetry: Optional telemetry recorder.
    """

    def __init__(self, args: argparse.Namespace) -> None:
        """Initialize the runner.

        Args:
            args: Command line arguments.

        Raises:
            ValueError: If the departure or destination cannot be resolved.
        """
        self.args = args

        config_path = args.config or get_config_path("simulation.yaml")
        self.session = FlightSession(
            load_config(config_path), day_night_mode=DayNightMode(args.day_night)
        )
        self.session.camera.add_view_listener(self._on_view_changed)

        self.airport_db = AirportDatabase()
        if args.airports:
            self.airport_db.load_json(args.airports)

        self.departure = self._resolve_airport(
            args.from_airport, args.from_lat, args.from_lon, "DEP"
        )
        self.destination = None
        if args.to_airport or (args.to_lat is not None and args.to_lon is not None):
            self.destination = self._resolve_airport(args.to_airport, args.to_lat, args.to_lon, "DST")

        self.inputs = ControlInputs(
            pitch=args.pitch, roll=args.roll, yaw=args.yaw, throttle=args.throttle
        )

        self.telemetry: TelemetryLogger | None = None
        if args.telemetry:
            self.telemetry = TelemetryLogger(args.telemetry)

        self.clock: pygame.time.Clock | None = None
        self.running = False

    def _resolve_airport(
        self, icao: str | None, lat: float | None, lon: float | None, fallback_id: str
    ) -> Airport:
        if icao:
            airport = self.airport_db.get_airport(icao)
            if airport is None:
                raise ValueError(f"Airport not found: {icao}")
            return airport
        if lat is None or lon is None:
            raise ValueError("Either an airport code or latitude/longitude is required")
        return Airport(icao=fallback_id, latitude=lat, longitude=lon)

    def _on_view_changed(self, view: CameraView) -> None:
        logger.info("HUD view indicator: %s", view.value)

    def run(self) -> None:
        """Fly the session for the configured duration."""
        args = self.args
        session = self.session

        session.select_aircraft(AircraftType.from_name(args.aircraft))
        session.takeoff(self.departure, self.destination)
        if args.view:
            session.camera.set_view(CameraView(args.view), animate=True)

        if self.telemetry:
            self.telemetry.set_metadata("aircraft", args.aircraft)
            self.telemetry.set_metadata("departure", self.departure.identifier)

        if args.realtime:
            pygame.init()
            self.clock = pygame.time.Clock()

        fixed_dt = 1.0 / args.fps
        elapsed = 0.0
        next_report = 1.0
        self.running = True

        logger.info("Starting flight loop (%.1fs at %d Hz)", args.duration, args.fps)
        try:
            while self.running and elapsed < args.duration:
                dt = self.clock.tick(args.fps) / 1000.0 if self.clock else fixed_dt
                elapsed += dt

                result = session.tick(dt, self.inputs)
                self._record(dt, result)

                if elapsed >= next_report:
                    next_report += 1.0
                    self._report(result)
        finally:
            self._shutdown()

    def _record(self, dt: float, result: TickResult) -> None:
        if not self.telemetry:
            return

        state = self.session.aircraft
        geo = self.session.flight_model.get_position()
        snapshot = result.snapshot
        self.telemetry.log(
            {
                "dt": dt,
                "position_x": state.position.x,
                "position_y": state.position.y,
                "position_z": state.position.z,
                "latitude": geo.latitude,
                "longitude": geo.longitude,
                "altitude": snapshot.altitude,
                "heading_deg": snapshot.heading,
                "pitch_deg": snapshot.pitch,
                "roll_deg": state.roll,
                "speed_kmh": snapshot.speed,
                "flight_phase": state.flight_phase.name,
                "camera_view": snapshot.current_view,
                "field_of_view": snapshot.field_of_view,
                "night_opacity": result.night_opacity,
                "distance_to_destination_km": snapshot.distance_to_destination,
            }
        )

    def _report(self, result: TickResult) -> None:
        snapshot = result.snapshot
        distance = (
            f"{snapshot.distance_to_destination:.0f}km"
            if snapshot.distance_to_destination is not None
            else "--"
        )
        logger.info(
            "ALT %.2f | SPD %.0f | HDG %03.0f | PITCH %+.1f | DST %s | T %.1fs | %s FOV %.1f",
            snapshot.altitude,
            snapshot.speed,
            snapshot.heading,
            snapshot.pitch,
            distance,
            snapshot.flight_time_elapsed,
            snapshot.current_view,
            snapshot.field_of_view,
        )

    def _shutdown(self) -> None:
        self.running = False
        self.session.land()
        if self.telemetry:
            self.telemetry.close()
        if self.clock:
            pygame.quit()
        logger.info("SkyFlight shut down")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (sys.argv when None).

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(description="SkyFlight headless flight runner")
    parser.add_argument(
        "--aircraft",
        choices=[t.spec.name for t in AircraftType],
        default="cessna",
        help="Aircraft type",
    )
    parser.add_argument("--airports", type=str, help="Airport database JSON file")
    parser.add_argument("--from-airport", type=str, help="Departure ICAO code")
    parser.add_argument("--to-airport", type=str, help="Destination ICAO code")
    parser.add_argument("--from-lat", type=float, default=None, help="Departure latitude")
    parser.add_argument("--from-lon", type=float, default=None, help="Departure longitude")
    parser.add_argument("--to-lat", type=float, default=None, help="Destination latitude")
    parser.add_argument("--to-lon", type=float, default=None, help="Destination longitude")
    parser.add_argument("--duration", type=float, default=10.0, help="Seconds to fly")
    parser.add_argument("--fps", type=int, default=60, help="Tick rate")
    parser.add_argument(
        "--realtime",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Pace ticks with the wall clock",
    )
    parser.add_argument("--pitch", type=float, default=0.0, help="Constant pitch input")
    parser.add_argument("--roll", type=float, default=0.0, help="Constant roll input")
    parser.add_argument("--yaw", type=float, default=0.0, help="Constant yaw input")
    parser.add_argument("--throttle", type=float, default=0.0, help="Constant throttle input")
    parser.add_argument("--view", choices=[v.value for v in CameraView], help="Camera view")
    parser.add_argument(
        "--day-night",
        choices=[m.value for m in DayNightMode],
        default=DayNightMode.AUTO.value,
        help="Night overlay mode",
    )
    parser.add_argument("--telemetry", type=str, help="Record telemetry to this SQLite file")
    parser.add_argument("--config", type=str, help="Simulation config YAML")
    parser.add_argument("--log-config", type=str, help="Logging config YAML")
    parser.add_argument("--version", action="store_true", help="Print the version and exit")

    args = parser.parse_args(argv)
    if args.fps <= 0:
        parser.error("--fps must be positive")
    return args


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)
    if args.version:
        about = get_about_info()
        print(f"{about['name']} {about['version']}")
        return 0

    initialize_logging(args.log_config or get_config_path("logging.yaml"))

    try:
        app = SkyFlight(args)
        app.run()
        return 0
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
