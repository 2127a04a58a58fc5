"""Flight session: the world context for one simulator run.

The session owns the flight model, camera controller and illumination model
and runs them in a fixed order each tick:

    input -> flight dynamics -> camera -> illumination

Camera and illumination read the aircraft state produced earlier in the same
tick; only the flight model writes it.

Typical usage:
    session = FlightSession()
    session.select_aircraft(AircraftType.JET)
    session.takeoff(departure)
    while running:
        snapshot = session.tick(dt, controls.sample())
        hud.update(snapshot)
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from skyflight.airports.database import Airport
from skyflight.camera.camera_controller import CameraController, CameraPose
from skyflight.camera.views import CameraView
from skyflight.core.config import SimulationConfig
from skyflight.core.logging_system import get_logger
from skyflight.environment.illumination import DayNightMode, IlluminationModel
from skyflight.physics.flight_model.base import AircraftState, AircraftType, ControlInputs
from skyflight.physics.flight_model.spherical_flight import SphericalFlightModel
from skyflight.physics.smoothing import sanitize_dt

logger = get_logger(__name__)


@dataclass(frozen=True)
class HudSnapshot:
    """Read-only values shown by the HUD after a tick.

    Attributes:
        altitude: Scene units above the sphere.
        speed: km/h.
        heading: Degrees in [0, 360).
        pitch: Degrees.
        distance_to_destination: km, None when no destination is set.
        flight_time_elapsed: Seconds since takeoff.
        current_view: Active camera view name.
        field_of_view: Camera field of view in degrees.
    """

    altitude: float
    speed: float
    heading: float
    pitch: float
    distance_to_destination: float | None
    flight_time_elapsed: float
    current_view: str
    field_of_view: float


@dataclass(frozen=True)
class TickResult:
    """Everything produced by one tick."""

    snapshot: HudSnapshot
    camera_pose: CameraPose | None
    night_opacity: float


class FlightSession:
    """Owns the simulation components and runs the per-tick pipeline.

    Attributes:
        config: Simulation configuration.
        flight_model: Flight dynamics (sole writer of the aircraft state).
        camera: Camera controller.
        illumination: Day/night blend.
        day_night_mode: Illumination mode.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        clock: Callable[[], float] = time.time,
        day_night_mode: DayNightMode = DayNightMode.AUTO,
    ) -> None:
        self.config = config or SimulationConfig()
        self.flight_model = SphericalFlightModel(self.config, clock=clock)
        self.camera = CameraController(self.config.camera)
        self.illumination = IlluminationModel(self.config.illumination)
        self.day_night_mode = day_night_mode
        self.last_pose: CameraPose | None = None
        self._ticks = 0

    @property
    def aircraft(self) -> AircraftState:
        """Aircraft state (read only for everything but the flight model)."""
        return self.flight_model.state

    @property
    def is_flying(self) -> bool:
        """True while a flight is in progress."""
        return self.flight_model.state.is_flying

    def select_aircraft(self, aircraft_type: AircraftType) -> None:
        """Select the aircraft flown on the next takeoff."""
        self.flight_model.select_aircraft(aircraft_type)

    def takeoff(self, airport: Airport, destination: Airport | None = None) -> None:
        """Start a new flight, resetting the aircraft and the camera follow.

        Raises:
            AircraftNotSelectedError: If no aircraft type has been selected.
        """
        self.flight_model.takeoff(airport)
        self.flight_model.set_destination(destination)
        self.camera.reset()
        self.last_pose = None
        self._ticks = 0

    def land(self) -> None:
        """End the current flight; the camera stops following."""
        self.flight_model.land()

    def set_destination(self, airport: Airport | None) -> None:
        """Set (or clear) the destination airport."""
        self.flight_model.set_destination(airport)

    def next_view(self) -> CameraView:
        """Cycle the camera view."""
        return self.camera.next_view()

    def stabilize(self) -> None:
        """Level the aircraft off."""
        self.flight_model.stabilize()

    def tick(
        self, dt: float, inputs: ControlInputs | None = None, now: datetime | None = None
    ) -> TickResult:
        """Run one simulation tick.

        Args:
            dt: Elapsed time in seconds.
            inputs: Control inputs sampled for this tick (neutral if None).
            now: Wall-clock time for illumination (current UTC time if None).

        Returns:
            HUD snapshot, camera pose and night overlay opacity.
        """
        self._ticks += 1
        dt = sanitize_dt(dt)
        model = self.flight_model

        if model.state.is_flying:
            model.set_input(inputs if inputs is not None else ControlInputs())
            state = model.update(dt)
            self.last_pose = self.camera.update(state, model.spec, dt)
            position = model.get_position()
            self.illumination.update(position.longitude, dt, self.day_night_mode, now)

        return TickResult(
            snapshot=self.snapshot(),
            camera_pose=self.last_pose if model.state.is_flying else None,
            night_opacity=self.illumination.opacity,
        )

    def snapshot(self) -> HudSnapshot:
        """Build the HUD snapshot of the current state."""
        model = self.flight_model
        state = model.state
        return HudSnapshot(
            altitude=state.altitude,
            speed=state.speed,
            heading=state.heading,
            pitch=state.pitch,
            distance_to_destination=model.get_distance_to_destination(),
            flight_time_elapsed=model.get_flight_time(),
            current_view=self.camera.current_view.value,
            field_of_view=self.camera.state.current_fov,
        )

    def get_tick_count(self) -> int:
        """Ticks run since the last takeoff."""
        return self._ticks
