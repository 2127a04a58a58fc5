"""Tests for the flight session tick pipeline."""

import math
from datetime import datetime, timezone

import pytest

from skyflight.airports.database import Airport
from skyflight.camera.views import CameraView
from skyflight.core.config import SimulationConfig, WorldConfig
from skyflight.core.session import FlightSession
from skyflight.environment.illumination import DayNightMode
from skyflight.physics.flight_model.base import AircraftNotSelectedError, AircraftType, ControlInputs
from skyflight.services.flight_phase import FlightPhase

NOON_UTC = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
PARIS = Airport(icao="LFPG", latitude=49.0097, longitude=2.5479)
LONDON = Airport(icao="EGLL", latitude=51.47, longitude=-0.4543)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock fixture."""
    return FakeClock()


@pytest.fixture
def session(clock: FakeClock) -> FlightSession:
    """Create a session flying a Cessna out of Paris."""
    flight_session = FlightSession(clock=clock)
    flight_session.select_aircraft(AircraftType.CESSNA)
    flight_session.takeoff(PARIS)
    return flight_session


class TestFlightSession:
    """Test session lifecycle and the per-tick pipeline."""

    def test_tick_before_takeoff(self) -> None:
        """Test ticking a parked session only reports the HUD."""
        flight_session = FlightSession()
        result = flight_session.tick(0.016, now=NOON_UTC)

        assert not flight_session.is_flying
        assert result.camera_pose is None
        assert result.snapshot.current_view == "chase"
        assert flight_session.flight_model.get_update_count() == 0

    def test_takeoff_requires_aircraft(self) -> None:
        """Test the selection error surfaces from the session."""
        with pytest.raises(AircraftNotSelectedError):
            FlightSession().takeoff(PARIS)

    def test_camera_reads_state_after_dynamics(self, session: FlightSession) -> None:
        """Test the pose of a tick looks at the position produced by that tick."""
        result = session.tick(0.5, ControlInputs(roll=1.0), now=NOON_UTC)

        assert result.camera_pose is not None
        look_at = result.camera_pose.look_at
        position = session.aircraft.position
        assert (look_at.x, look_at.y, look_at.z) == pytest.approx((position.x, position.y, position.z))

    def test_illumination_runs_each_tick(self, clock: FakeClock) -> None:
        """Test the night overlay advances with the session."""
        flight_session = FlightSession(clock=clock, day_night_mode=DayNightMode.NIGHT)
        flight_session.select_aircraft(AircraftType.JET)
        flight_session.takeoff(PARIS)

        first = flight_session.tick(0.1, now=NOON_UTC).night_opacity
        second = flight_session.tick(0.1, now=NOON_UTC).night_opacity

        assert 0.0 < first < second < 1.0

    def test_snapshot(self, session: FlightSession, clock: FakeClock) -> None:
        """Test the HUD values after a tick."""
        session.set_destination(LONDON)
        clock.now += 3.0

        snapshot = session.tick(1.0, ControlInputs(yaw=1.0), now=NOON_UTC).snapshot

        assert snapshot.speed == 300.0
        assert snapshot.heading == pytest.approx(30.0)
        assert snapshot.pitch == 0.0
        assert snapshot.altitude == pytest.approx(session.aircraft.altitude)
        assert snapshot.flight_time_elapsed == pytest.approx(3.0)
        assert 300.0 < snapshot.distance_to_destination < 400.0
        assert snapshot.current_view == "chase"
        assert snapshot.field_of_view > 60.0

    def test_snapshot_without_destination(self, session: FlightSession) -> None:
        """Test the distance readout is blank without a destination."""
        assert session.tick(0.016, now=NOON_UTC).snapshot.distance_to_destination is None

    def test_takeoff_with_destination(self, clock: FakeClock) -> None:
        """Test takeoff can set the destination in one call."""
        flight_session = FlightSession(clock=clock)
        flight_session.select_aircraft(AircraftType.AIRLINER)
        flight_session.takeoff(PARIS, LONDON)
        assert flight_session.aircraft.destination_airport is LONDON

    def test_next_view(self, session: FlightSession) -> None:
        """Test cycling the view shows up in the HUD."""
        assert session.next_view() == CameraView.COCKPIT
        snapshot = session.tick(0.016, now=NOON_UTC).snapshot
        assert snapshot.current_view == "cockpit"

    def test_stabilize(self, session: FlightSession) -> None:
        """Test the level-off command reaches the flight model."""
        session.aircraft.roll = 40.0
        session.stabilize()
        assert session.aircraft.roll == pytest.approx(36.0)

    def test_land(self, session: FlightSession) -> None:
        """Test landing releases the camera."""
        session.tick(0.016, now=NOON_UTC)
        session.land()

        result = session.tick(0.016, now=NOON_UTC)

        assert not session.is_flying
        assert result.camera_pose is None

    def test_tick_count_resets_on_takeoff(self, session: FlightSession) -> None:
        """Test ticks are counted per flight."""
        for _ in range(3):
            session.tick(0.016, now=NOON_UTC)
        assert session.get_tick_count() == 3

        session.takeoff(LONDON)
        assert session.get_tick_count() == 0

    def test_flight_time_stops_at_landing(self, session: FlightSession, clock: FakeClock) -> None:
        """Test the HUD keeps the flown time once the aircraft has landed."""
        clock.now += 10.0
        session.land()
        clock.now += 50.0

        assert session.tick(0.016, now=NOON_UTC).snapshot.flight_time_elapsed == pytest.approx(10.0)


@pytest.fixture
def runway_session(clock: FakeClock) -> FlightSession:
    """Create a session whose aircraft spawns on the altitude floor."""
    config = SimulationConfig(world=WorldConfig(takeoff_altitude=0.5))
    flight_session = FlightSession(config=config, clock=clock, day_night_mode=DayNightMode.NIGHT)
    flight_session.select_aircraft(AircraftType.CESSNA)
    flight_session.takeoff(PARIS)
    return flight_session


class TestGlitchedTicks:
    """Test bogus frame times never corrupt the session state."""

    @pytest.mark.parametrize("dt", [1e308, math.inf, math.nan, -5.0])
    def test_takeoff_roll_survives_bad_dt(self, runway_session: FlightSession, dt: float) -> None:
        """Test a bad tick on the runway, then a normal one, keeps every output finite."""
        first = runway_session.tick(1.0 / 60.0, ControlInputs(throttle=1.0), now=NOON_UTC)
        assert runway_session.aircraft.flight_phase == FlightPhase.TAKEOFF_ROLL
        assert first.camera_pose is not None

        runway_session.tick(dt, ControlInputs(pitch=1.0, throttle=1.0), now=NOON_UTC)
        result = runway_session.tick(1.0 / 60.0, now=NOON_UTC)

        pose = result.camera_pose
        assert pose is not None
        assert pose.position.is_finite()
        assert pose.look_at.is_finite()
        assert math.isfinite(pose.field_of_view)
        assert math.isfinite(result.night_opacity)
        assert 0.0 <= result.night_opacity <= 1.0
        assert math.isfinite(runway_session.camera.state.shake_phase)
        assert runway_session.aircraft.position.is_finite()
        assert math.isfinite(result.snapshot.altitude)

    @pytest.mark.parametrize("dt", [1e308, math.inf, math.nan])
    def test_climb_survives_bad_dt(self, session: FlightSession, dt: float) -> None:
        """Test a bad tick while climbing keeps the camera pose finite."""
        for _ in range(30):
            session.tick(0.1, ControlInputs(pitch=1.0, roll=0.5), now=NOON_UTC)

        session.tick(dt, ControlInputs(pitch=1.0), now=NOON_UTC)
        result = session.tick(1.0 / 60.0, now=NOON_UTC)

        assert result.camera_pose is not None
        assert result.camera_pose.position.is_finite()
        assert math.isfinite(result.night_opacity)
        assert math.isfinite(session.camera.state.shake_phase)

    def test_nan_tick_is_skipped(self, session: FlightSession) -> None:
        """Test a NaN tick moves nothing."""
        session.tick(0.1, now=NOON_UTC)
        position = session.aircraft.position.copy()
        opacity = session.illumination.opacity

        result = session.tick(math.nan, ControlInputs(throttle=1.0), now=NOON_UTC)

        assert session.aircraft.position == position
        assert result.night_opacity == opacity
