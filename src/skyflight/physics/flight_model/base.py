"""Flight model data types.

Defines the aircraft catalogue, the per-tick control inputs and the aircraft
state record owned by the flight model.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from skyflight.airports.database import Airport
from skyflight.physics.vectors import Quaternion, Vector3
from skyflight.services.flight_phase import FlightPhase


class SkyFlightError(RuntimeError):
    """Base class for errors raised by the simulator core."""


class AircraftNotSelectedError(SkyFlightError):
    """Raised when a flight is started before an aircraft type is selected."""


@dataclass(frozen=True)
class AircraftSpec:
    """Immutable performance figures for an aircraft type.

    Attributes:
        name: Identifier used in configuration and logs.
        cruise_speed: Speed on takeoff in km/h.
        min_speed: Lower speed bound in km/h.
        max_speed: Upper speed bound in km/h.
        handling: Control responsiveness multiplier.
        scale: Visual model scale (consumed by the renderer).
    """

    name: str
    cruise_speed: float
    min_speed: float
    max_speed: float
    handling: float
    scale: float


class AircraftType(Enum):
    """Closed set of flyable aircraft."""

    CESSNA = AircraftSpec("cessna", 300.0, 100.0, 400.0, 1.0, 0.3)
    AIRLINER = AircraftSpec("airliner", 850.0, 300.0, 1000.0, 0.7, 0.5)
    JET = AircraftSpec("jet", 1500.0, 500.0, 2000.0, 1.5, 0.35)

    @property
    def spec(self) -> AircraftSpec:
        """Performance figures for this type."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "AircraftType":
        """Look up a type by its identifier (case-insensitive).

        Raises:
            ValueError: If the identifier is unknown.
        """
        for aircraft_type in cls:
            if aircraft_type.spec.name == name.lower():
                return aircraft_type
        raise ValueError(f"Unknown aircraft type: {name}")


def _clamp_unit(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(-1.0, min(1.0, value))


@dataclass
class ControlInputs:
    """Normalized control inputs for one tick.

    Every channel is clamped to [-1, 1] on construction and assignment, so
    no unclamped value can reach the integrator.

    Attributes:
        pitch: Nose up (+) / down (-).
        roll: Right (+) / left (-) bank.
        yaw: Heading change rate demand.
        throttle: Speed up (+) / slow down (-).
    """

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    throttle: float = 0.0

    def __setattr__(self, name: str, value: float) -> None:
        if name in ("pitch", "roll", "yaw", "throttle"):
            value = _clamp_unit(float(value))
        super().__setattr__(name, value)

    def copy(self) -> "ControlInputs":
        """Return an independent copy."""
        return ControlInputs(self.pitch, self.roll, self.yaw, self.throttle)


@dataclass
class AircraftState:
    """Complete aircraft state.

    Angles are in degrees, speed in km/h, altitude and position in scene
    units. ``velocity`` is the displacement applied during the last tick.

    Attributes:
        position: Sphere-centred position.
        velocity: Displacement of the last tick.
        orientation: World orientation (body +X along the flight path).
        pitch: Degrees in [-80, 80].
        roll: Degrees in [-60, 60].
        heading: Degrees in [0, 360).
        speed: km/h within the active spec's bounds.
        altitude: Scene units above the sphere surface.
        is_flying: True between takeoff and landing.
        takeoff_airport: Departure airport, if any.
        destination_airport: Destination airport, if any.
        flight_start_time: Wall-clock timestamp of takeoff (seconds).
        flight_end_time: Wall-clock timestamp of landing, None while airborne.
        flight_phase: Phase derived from the last tick.
    """

    position: Vector3 = field(default_factory=Vector3.zero)
    velocity: Vector3 = field(default_factory=Vector3.zero)
    orientation: Quaternion = field(default_factory=Quaternion.identity)
    pitch: float = 0.0
    roll: float = 0.0
    heading: float = 0.0
    speed: float = 0.0
    altitude: float = 10.0
    is_flying: bool = False
    takeoff_airport: Airport | None = None
    destination_airport: Airport | None = None
    flight_start_time: float | None = None
    flight_end_time: float | None = None
    flight_phase: FlightPhase = FlightPhase.PARKED

    def forward(self) -> Vector3:
        """Nose direction in world coordinates."""
        return self.orientation.forward()
