"""Arcade flight model over a spherical world.

This module turns normalized stick/throttle input into aircraft attitude,
speed and position on a sphere. It is not an aerodynamic model: attitude is
integrated directly from control rates, speed follows the throttle through a
first-order lag, and the aircraft moves along the direction given by its
heading, pitch and roll.

Per tick:
1. Integrate pitch/roll/heading rates scaled by the aircraft's handling.
2. Coordinated turn: bank angle adds heading rate.
3. Throttle sets a target speed; speed lags toward it, then is clamped.
4. Clamp pitch and roll, wrap heading into [0, 360).
5. Self-level axes that received no input.
6. Forward = Ry(heading) * Rx(pitch) * Rz(roll) applied to +X.
7. Move along forward by the scaled speed.
8. Clamp the distance from the sphere centre to the altitude envelope.
9. Orient the airframe along the motion with the local radial as up.

Typical usage example:
    from skyflight.physics.flight_model.spherical_flight import SphericalFlightModel

    model = SphericalFlightModel()
    model.select_aircraft(AircraftType.CESSNA)
    model.takeoff(airport)
    state = model.update(dt=0.016, inputs=ControlInputs(throttle=0.5))
"""

import math
import time
from collections.abc import Callable

from skyflight.airports.database import Airport
from skyflight.core.config import SimulationConfig
from skyflight.core.logging_system import get_logger
from skyflight.physics.coordinates import CoordinateSystem, GeoPosition
from skyflight.physics.flight_model.base import (
    AircraftNotSelectedError,
    AircraftSpec,
    AircraftState,
    AircraftType,
    ControlInputs,
)
from skyflight.physics.smoothing import clamp, damp_factor, sanitize_dt
from skyflight.physics.vectors import Quaternion, Vector3
from skyflight.services.flight_phase import FlightPhaseTracker

logger = get_logger(__name__)

DEGREES_TO_RADIANS = math.pi / 180.0
SECONDS_PER_HOUR = 3600.0

# Reference nose axis in the body frame
BODY_FORWARD = Vector3(1.0, 0.0, 0.0)


def normalize_heading(heading: float) -> float:
    """Wrap a heading into [0, 360)."""
    wrapped = heading % 360.0
    # -1e-17 % 360.0 rounds to exactly 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


class SphericalFlightModel:
    """Flight dynamics model; sole owner of the aircraft state.

    Attributes:
        config: Simulation configuration.
        coordinates: Coordinate system of the world sphere.
        aircraft_type: Selected aircraft type, or None before selection.
        state: Aircraft state (mutated in place every tick).
        inputs: Control inputs applied on the next tick.
        phase_tracker: Flight phase derivation.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the flight model (no aircraft selected yet).

        Args:
            config: Simulation configuration (defaults if None).
            clock: Wall-clock source in seconds, used for flight time.
        """
        self.config = config or SimulationConfig()
        self.coordinates = CoordinateSystem(
            self.config.world.scene_radius, self.config.world.earth_radius_km
        )
        self.clock = clock

        self.aircraft_type: AircraftType | None = None
        self.state = AircraftState()
        self.inputs = ControlInputs()
        self.phase_tracker = FlightPhaseTracker(self.config.phase)

        self._last_longitude = 0.0
        self._updates = 0

    @property
    def spec(self) -> AircraftSpec:
        """Active aircraft specification.

        Raises:
            AircraftNotSelectedError: If no aircraft type has been selected.
        """
        if self.aircraft_type is None:
            raise AircraftNotSelectedError("Select an aircraft type before takeoff")
        return self.aircraft_type.spec

    def select_aircraft(self, aircraft_type: AircraftType) -> None:
        """Select the aircraft type; resets speed to its cruise speed."""
        self.aircraft_type = aircraft_type
        self.state.speed = aircraft_type.spec.cruise_speed
        logger.info(
            "Selected aircraft %s (cruise=%.0f km/h, range=%.0f-%.0f km/h, handling=%.2f)",
            aircraft_type.spec.name,
            aircraft_type.spec.cruise_speed,
            aircraft_type.spec.min_speed,
            aircraft_type.spec.max_speed,
            aircraft_type.spec.handling,
        )

    def takeoff(self, airport: Airport) -> AircraftState:
        """Start a flight from an airport.

        Resets the whole flight state: position above the airport at the
        takeoff altitude, heading 0, level attitude, cruise speed.

        Args:
            airport: Departure airport.

        Returns:
            The fresh aircraft state.

        Raises:
            AircraftNotSelectedError: If no aircraft type has been selected.
        """
        spec = self.spec
        world = self.config.world

        state = self.state
        state.position = self.coordinates.lat_lon_to_vector(
            airport.latitude, airport.longitude, world.takeoff_altitude
        )
        state.velocity = Vector3.zero()
        state.altitude = world.takeoff_altitude
        state.heading = 0.0
        state.pitch = 0.0
        state.roll = 0.0
        state.speed = spec.cruise_speed
        state.is_flying = True
        state.takeoff_airport = airport
        state.flight_start_time = self.clock()
        state.flight_end_time = None

        self.inputs = ControlInputs()
        self._last_longitude = airport.longitude

        state.orientation = Quaternion.look_rotation(
            BODY_FORWARD, self.coordinates.local_up(state.position)
        )

        self.phase_tracker.start_flight()
        state.flight_phase = self.phase_tracker.current_phase

        logger.info(
            "Takeoff from %s (%.4f, %.4f) in %s",
            airport.identifier,
            airport.latitude,
            airport.longitude,
            spec.name,
        )
        return state

    def land(self) -> None:
        """End the current flight."""
        if not self.state.is_flying:
            return
        self.state.is_flying = False
        self.state.flight_end_time = self.clock()
        self.phase_tracker.end_flight()
        self.state.flight_phase = self.phase_tracker.current_phase
        logger.info("Flight ended after %.1fs", self.get_flight_time())

    def set_input(self, inputs: ControlInputs) -> None:
        """Set the control inputs for the next tick (clamped to [-1, 1])."""
        self.inputs = inputs.copy()

    def stabilize(self) -> None:
        """Level off: scale pitch and roll toward zero once."""
        factor = self.config.dynamics.stabilize_factor
        self.state.pitch *= factor
        self.state.roll *= factor

    def update(self, dt: float, inputs: ControlInputs | None = None) -> AircraftState:
        """Advance the flight by one tick.

        Does nothing while not flying.

        Args:
            dt: Elapsed time in seconds, clamped to [0, MAX_TICK_SECONDS].
            inputs: Control inputs for this tick; the last ones set with
                ``set_input`` when None.

        Returns:
            Updated state (reference to internal state).
        """
        state = self.state
        if not state.is_flying:
            return state

        if inputs is not None:
            self.set_input(inputs)
        inputs = self.inputs

        dt = sanitize_dt(dt)

        self._updates += 1
        spec = self.spec
        dyn = self.config.dynamics

        self._integrate_attitude(dt, inputs, spec)
        self._integrate_speed(dt, inputs, spec)

        # Limits
        state.pitch = clamp(state.pitch, -dyn.max_pitch, dyn.max_pitch)
        state.roll = clamp(state.roll, -dyn.max_roll, dyn.max_roll)
        state.heading = normalize_heading(state.heading)

        # Self-leveling on axes without input
        leveling = 1.0 - damp_factor(dyn.leveling_rate, dt)
        if inputs.pitch == 0.0:
            state.pitch *= leveling
        if inputs.roll == 0.0:
            state.roll *= leveling

        previous_altitude = state.altitude
        self._integrate_position(dt)
        self._update_orientation()

        # Flight phase from the altitude trend
        vertical_rate = (state.altitude - previous_altitude) / dt if dt > 0.0 else 0.0
        state.flight_phase = self.phase_tracker.update(
            dt=dt,
            altitude_above_floor=state.altitude - self.config.world.min_altitude,
            vertical_rate=vertical_rate,
            speed=state.speed,
            cruise_speed=spec.cruise_speed,
        )

        geo = self.coordinates.to_geodetic(state.position, self._last_longitude)
        self._last_longitude = geo.longitude

        if self._updates % 60 == 0:
            logger.debug(
                "[FLIGHT] alt=%.3f spd=%.0f hdg=%.1f pitch=%.1f roll=%.1f phase=%s",
                state.altitude,
                state.speed,
                state.heading,
                state.pitch,
                state.roll,
                state.flight_phase.name,
            )

        return state

    def _integrate_attitude(self, dt: float, inputs: ControlInputs, spec: AircraftSpec) -> None:
        """Integrate control rates and the coordinated-turn coupling."""
        state = self.state
        dyn = self.config.dynamics
        handling = spec.handling

        state.pitch += inputs.pitch * handling * dyn.pitch_rate * dt
        state.roll += inputs.roll * handling * dyn.roll_rate * dt
        state.heading += inputs.yaw * handling * dyn.yaw_rate * dt

        # Banking turns the aircraft without rudder
        state.heading += state.roll * dyn.bank_coefficient * dt

    def _integrate_speed(self, dt: float, inputs: ControlInputs, spec: AircraftSpec) -> None:
        """Move speed toward the throttle target with a first-order lag."""
        state = self.state
        dyn = self.config.dynamics

        target_speed = state.speed + inputs.throttle * dyn.throttle_gain
        state.speed += (target_speed - state.speed) * damp_factor(dyn.speed_response, dt)
        state.speed = clamp(state.speed, spec.min_speed, spec.max_speed)

    def _integrate_position(self, dt: float) -> None:
        """Move along the attitude-derived forward vector and clamp altitude."""
        state = self.state
        world = self.config.world
        dyn = self.config.dynamics

        forward = BODY_FORWARD.rotated_by_euler_yxz(
            state.pitch * DEGREES_TO_RADIANS,
            state.heading * DEGREES_TO_RADIANS,
            state.roll * DEGREES_TO_RADIANS,
        )

        # km/h -> km covered this tick -> scene units
        scaled_speed = state.speed / SECONDS_PER_HOUR * dt * dyn.speed_scale
        state.velocity = forward * scaled_speed

        new_position = state.position + state.velocity
        if not new_position.is_finite() or new_position.is_near_zero():
            logger.debug("Degenerate position %s, keeping previous", new_position)
            state.velocity = Vector3.zero()
            return

        floor = world.scene_radius + world.min_altitude
        ceiling = world.scene_radius + world.max_altitude
        distance = new_position.magnitude()

        if distance < floor:
            new_position = new_position.normalized() * floor
            state.altitude = world.min_altitude
        elif distance > ceiling:
            new_position = new_position.normalized() * ceiling
            state.altitude = world.max_altitude
        else:
            state.altitude = distance - world.scene_radius

        state.position = new_position

    def _update_orientation(self) -> None:
        """Align the airframe with the motion, up along the local radial."""
        state = self.state
        if state.velocity.is_near_zero():
            return

        up = self.coordinates.local_up(state.position)
        state.orientation = Quaternion.look_rotation(state.velocity, up)

    def set_destination(self, airport: Airport | None) -> None:
        """Set (or clear) the destination airport."""
        self.state.destination_airport = airport
        if airport is not None:
            logger.info("Destination set to %s", airport.identifier)

    def get_distance_to_destination(self) -> float | None:
        """Straight-line distance to the destination in km, or None if unset."""
        destination = self.state.destination_airport
        if destination is None:
            return None

        target = self.coordinates.lat_lon_to_vector(destination.latitude, destination.longitude, 0.0)
        return self.coordinates.surface_distance_km(self.state.position, target)

    def get_flight_time(self) -> float:
        """Seconds flown: since takeoff, or from takeoff to landing once landed.

        0 before the first takeoff.
        """
        state = self.state
        if state.flight_start_time is None:
            return 0.0
        end = state.flight_end_time if state.flight_end_time is not None else self.clock()
        return max(0.0, end - state.flight_start_time)

    def get_position(self) -> GeoPosition:
        """Current geodetic position; keeps the last longitude at the poles."""
        return self.coordinates.to_geodetic(self.state.position, self._last_longitude)

    def get_update_count(self) -> int:
        """Number of ticks integrated so far."""
        return self._updates
