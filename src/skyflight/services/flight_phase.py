"""Flight phase state machine derived from the flight dynamics output.

The phase drives camera shake (rumble on the takeoff roll and in the climb,
a lighter buzz while taxiing). It is derived each tick from altitude above
the floor, speed and vertical rate:

- On the ground (within ``ground_band`` of the altitude floor): TAXIING
  below ``taxi_speed_ratio`` x cruise speed, TAKEOFF_ROLL above it.
- Airborne: CLIMBING while the vertical rate is at least ``climb_enter``,
  DESCENDING while it is at most ``-climb_enter``, CRUISE otherwise. Once
  climbing or descending, the phase is kept until the rate falls back
  under ``climb_exit`` (hysteresis).
- A candidate phase must persist for ``hold_time`` seconds before it is
  committed, so single-tick spikes never flip the phase.
"""

from collections.abc import Callable
from enum import Enum, auto

from skyflight.core.config import PhaseConfig
from skyflight.core.logging_system import get_logger

logger = get_logger(__name__)


class FlightPhase(Enum):
    """Flight phases."""

    PARKED = auto()  # Not flying
    TAXIING = auto()  # On the floor, slow
    TAKEOFF_ROLL = auto()  # On the floor, fast
    CLIMBING = auto()
    CRUISE = auto()
    DESCENDING = auto()


GROUND_PHASES = frozenset({FlightPhase.PARKED, FlightPhase.TAXIING, FlightPhase.TAKEOFF_ROLL})


class FlightPhaseTracker:
    """Tracks the current flight phase with hysteresis.

    Examples:
        >>> tracker = FlightPhaseTracker()
        >>> tracker.start_flight()
        >>> tracker.update(dt=0.016, altitude_above_floor=1.5,
        ...                vertical_rate=0.01, speed=300.0, cruise_speed=300.0)
        <FlightPhase.CLIMBING: 4>
    """

    def __init__(self, config: PhaseConfig | None = None) -> None:
        """Initialize the tracker in the PARKED phase.

        Args:
            config: Threshold configuration (defaults if None).
        """
        self.config = config or PhaseConfig()
        self._current_phase = FlightPhase.PARKED
        self._phase_history: list[FlightPhase] = [FlightPhase.PARKED]
        self._listeners: list[Callable[[FlightPhase, FlightPhase], None]] = []
        self._candidate: FlightPhase | None = None
        self._candidate_time = 0.0
        self._commit_immediately = False

    @property
    def current_phase(self) -> FlightPhase:
        """Get the current flight phase."""
        return self._current_phase

    def start_flight(self) -> None:
        """Prepare for a new flight; the next evaluation commits immediately."""
        self._candidate = None
        self._candidate_time = 0.0
        self._commit_immediately = True

    def end_flight(self) -> None:
        """Return to PARKED."""
        self._candidate = None
        self._commit_immediately = False
        self._commit(FlightPhase.PARKED)

    def classify(
        self,
        altitude_above_floor: float,
        vertical_rate: float,
        speed: float,
        cruise_speed: float,
    ) -> FlightPhase:
        """Classify a single sample, applying the climb/descent hysteresis.

        Args:
            altitude_above_floor: Altitude minus the minimum altitude.
            vertical_rate: Altitude change in scene units per second.
            speed: Current speed (km/h).
            cruise_speed: Cruise speed of the active aircraft (km/h).

        Returns:
            Phase the sample belongs to.
        """
        cfg = self.config

        if altitude_above_floor <= cfg.ground_band:
            if speed < cfg.taxi_speed_ratio * cruise_speed:
                return FlightPhase.TAXIING
            return FlightPhase.TAKEOFF_ROLL

        if self._current_phase == FlightPhase.CLIMBING and vertical_rate >= cfg.climb_exit:
            return FlightPhase.CLIMBING
        if self._current_phase == FlightPhase.DESCENDING and vertical_rate <= -cfg.climb_exit:
            return FlightPhase.DESCENDING

        if vertical_rate >= cfg.climb_enter:
            return FlightPhase.CLIMBING
        if vertical_rate <= -cfg.climb_enter:
            return FlightPhase.DESCENDING
        return FlightPhase.CRUISE

    def update(
        self,
        dt: float,
        altitude_above_floor: float,
        vertical_rate: float,
        speed: float,
        cruise_speed: float,
    ) -> FlightPhase:
        """Evaluate one tick and commit a phase change once it has held.

        Returns:
            The (possibly unchanged) current phase.
        """
        phase = self.classify(altitude_above_floor, vertical_rate, speed, cruise_speed)

        if self._commit_immediately:
            self._commit_immediately = False
            self._candidate = None
            self._commit(phase)
            return self._current_phase

        if phase == self._current_phase:
            self._candidate = None
            self._candidate_time = 0.0
            return self._current_phase

        if phase != self._candidate:
            self._candidate = phase
            self._candidate_time = 0.0

        self._candidate_time += max(0.0, dt)
        if self._candidate_time >= self.config.hold_time:
            self._candidate = None
            self._candidate_time = 0.0
            self._commit(phase)

        return self._current_phase

    def _commit(self, new_phase: FlightPhase) -> None:
        if new_phase == self._current_phase:
            return

        old_phase = self._current_phase
        self._current_phase = new_phase
        self._phase_history.append(new_phase)
        logger.debug("Flight phase %s -> %s", old_phase.name, new_phase.name)

        for listener in self._listeners:
            listener(old_phase, new_phase)

    def add_transition_listener(self, listener: Callable[[FlightPhase, FlightPhase], None]) -> None:
        """Add a listener for phase transitions.

        Args:
            listener: Callback function(old_phase, new_phase).
        """
        self._listeners.append(listener)

    def remove_transition_listener(
        self, listener: Callable[[FlightPhase, FlightPhase], None]
    ) -> None:
        """Remove a transition listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def is_on_ground(self) -> bool:
        """Check if the aircraft is on the ground."""
        return self._current_phase in GROUND_PHASES

    def is_airborne(self) -> bool:
        """Check if the aircraft is in the air."""
        return not self.is_on_ground()

    def get_phase_history(self) -> list[FlightPhase]:
        """Get the history of flight phases."""
        return self._phase_history.copy()

    def reset(self) -> None:
        """Reset to PARKED and clear the history."""
        self._current_phase = FlightPhase.PARKED
        self._phase_history = [FlightPhase.PARKED]
        self._candidate = None
        self._candidate_time = 0.0
        self._commit_immediately = False
