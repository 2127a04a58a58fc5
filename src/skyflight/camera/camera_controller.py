"""Camera controller that follows the aircraft.

Keeps a view-mode state machine (chase, cockpit, overhead), eases the view
parameters across switches, widens the field of view with speed and adds a
small procedural shake during the takeoff roll and climb.

The controller only reads the aircraft state. While the aircraft is not
flying it produces no pose, leaving the camera to the exploration controls.

Typical usage:
    controller = CameraController()
    controller.add_view_listener(hud.on_view_changed)
    pose = controller.update(model.state, model.spec, dt)
    if pose:
        renderer.place_camera(pose)
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from skyflight.camera.views import VIEW_ORDER, CameraView, ViewSettings
from skyflight.core.config import CameraConfig
from skyflight.core.logging_system import get_logger
from skyflight.physics.flight_model.base import AircraftSpec, AircraftState
from skyflight.physics.smoothing import damp, damp_factor, ease_in_out_cubic, sanitize_dt
from skyflight.physics.vectors import Vector3
from skyflight.services.flight_phase import FlightPhase

logger = get_logger(__name__)

# Progress this close to 1 completes the transition (float accumulation)
PROGRESS_EPSILON = 1e-9

# Shake phase wraps at 10 full turns, a common period of both shake sinusoids
# for the 1.3 secondary ratio
SHAKE_PHASE_PERIOD = 20.0 * math.pi

# Target shake intensity per flight phase (scene units); others are 0
SHAKE_INTENSITY: dict[FlightPhase, float] = {
    FlightPhase.TAKEOFF_ROLL: 0.05,
    FlightPhase.CLIMBING: 0.05,
    FlightPhase.TAXIING: 0.02,
}


@dataclass
class CameraTransition:
    """Animated switch between two views.

    Attributes:
        active: True while the switch is running.
        progress: Fraction completed in [0, 1].
        from_settings: Interpolated settings when the switch started.
        to_settings: Static settings of the target view.
        duration: Length of the switch in seconds.
    """

    active: bool = False
    progress: float = 0.0
    from_settings: ViewSettings | None = None
    to_settings: ViewSettings | None = None
    duration: float = 0.5


@dataclass
class CameraState:
    """Persistent camera state.

    Attributes:
        settings: Current interpolated distance/height/fov.
        base_fov: Field of view before the speed effect.
        current_fov: Smoothed field of view including the speed effect.
        shake_intensity: Smoothed shake amplitude.
        shake_phase: Shake oscillator phase (radians).
        position: Smoothed camera position without shake, None until placed.
    """

    settings: ViewSettings
    base_fov: float
    current_fov: float
    shake_intensity: float = 0.0
    shake_phase: float = 0.0
    position: Vector3 | None = None


@dataclass
class CameraPose:
    """Camera placement for one frame.

    Attributes:
        view: Active view.
        position: Camera position (shake included).
        look_at: Point the camera looks at.
        up: Camera up vector (local radial).
        field_of_view: Vertical field of view in degrees.
    """

    view: CameraView
    position: Vector3
    look_at: Vector3
    up: Vector3
    field_of_view: float


@dataclass
class TransitionRecord:
    """A view switch that was started."""

    from_view: CameraView
    to_view: CameraView


class CameraController:
    """Follows the aircraft through the available views.

    Attributes:
        config: Camera tuning.
        views: Ordered views cycled by ``next_view``.
        current_view: Active view.
        state: Persistent camera state.
        transition: Running (or last) view transition.
    """

    def __init__(
        self,
        config: CameraConfig | None = None,
        views: Sequence[CameraView] = VIEW_ORDER,
        initial_view: CameraView = CameraView.CHASE,
    ) -> None:
        """Initialize the controller snapped to ``initial_view``.

        Args:
            config: Camera tuning (defaults if None).
            views: Cycling order of the views.
            initial_view: View selected at startup.
        """
        self.config = config or CameraConfig()
        self.views: tuple[CameraView, ...] = tuple(views)
        if initial_view not in self.views:
            initial_view = self.views[0]

        start = initial_view.settings
        self.current_view = initial_view
        self.state = CameraState(settings=start, base_fov=start.fov, current_fov=start.fov)
        self.transition = CameraTransition(duration=self.config.transition_duration)

        self._listeners: list[Callable[[CameraView], None]] = []
        self._transition_history: list[TransitionRecord] = []

        self.set_view(initial_view, animate=False)

    def set_view(self, view: CameraView, animate: bool = True) -> None:
        """Switch to a view.

        Animated switches to a different view start a transition from the
        current interpolated settings. An animated switch to the view that is
        already active does nothing. Non-animated switches snap.

        Args:
            view: View to activate (ignored if not in ``views``).
            animate: Whether to ease into the view.
        """
        if view not in self.views:
            logger.warning("Ignoring unknown camera view: %s", view)
            return

        if animate:
            if view == self.current_view:
                return
            self.transition = CameraTransition(
                active=True,
                progress=0.0,
                from_settings=self.state.settings,
                to_settings=view.settings,
                duration=self.config.transition_duration,
            )
            self._transition_history.append(TransitionRecord(self.current_view, view))
        else:
            self.transition = CameraTransition(duration=self.config.transition_duration)
            self.state.settings = view.settings
            self.state.base_fov = view.settings.fov
            self.state.current_fov = view.settings.fov

        if view != self.current_view:
            logger.info("Camera view %s -> %s", self.current_view.value, view.value)
        self.current_view = view

    def next_view(self) -> CameraView:
        """Advance to the next view in the cycle (animated) and notify listeners.

        Returns:
            The newly active view.
        """
        index = self.views.index(self.current_view)
        view = self.views[(index + 1) % len(self.views)]
        self.set_view(view, animate=True)

        for listener in self._listeners:
            listener(view)

        return view

    def reset(self) -> None:
        """Forget the smoothed position so the next pose snaps into place."""
        self.state.position = None
        self.state.shake_intensity = 0.0
        self.state.shake_phase = 0.0

    def update(self, aircraft: AircraftState, spec: AircraftSpec, dt: float) -> CameraPose | None:
        """Advance the camera by one tick.

        Args:
            aircraft: Aircraft state of this tick (read only).
            spec: Active aircraft specification.
            dt: Elapsed time in seconds.

        Returns:
            Camera pose, or None while the aircraft is not flying.
        """
        if not aircraft.is_flying:
            return None

        dt = sanitize_dt(dt)
        self._advance_transition(dt)
        self._update_fov(aircraft, spec, dt)
        self._update_shake(aircraft, dt)

        if self.current_view == CameraView.COCKPIT:
            return self._cockpit_pose(aircraft)
        if self.current_view == CameraView.OVERHEAD:
            return self._follow_pose(
                aircraft, self.state.settings.distance * self.config.overhead_back_ratio, dt, False
            )
        return self._follow_pose(aircraft, self.state.settings.distance, dt, True)

    def _advance_transition(self, dt: float) -> None:
        transition = self.transition
        if not transition.active:
            return

        transition.progress += dt / transition.duration
        if transition.progress >= 1.0 - PROGRESS_EPSILON:
            transition.progress = 1.0
            transition.active = False

        t = ease_in_out_cubic(transition.progress)
        self.state.settings = transition.from_settings.lerp(transition.to_settings, t)
        self.state.base_fov = self.state.settings.fov

    def _update_fov(self, aircraft: AircraftState, spec: AircraftSpec, dt: float) -> None:
        speed_ratio = aircraft.speed / spec.max_speed if spec.max_speed > 0.0 else 0.0
        target_fov = self.state.base_fov + speed_ratio * self.config.fov_boost
        self.state.current_fov = damp(
            self.state.current_fov, target_fov, self.config.fov_response, dt
        )

    def _update_shake(self, aircraft: AircraftState, dt: float) -> None:
        target = SHAKE_INTENSITY.get(aircraft.flight_phase, 0.0)
        self.state.shake_intensity = damp(
            self.state.shake_intensity, target, self.config.shake_response, dt
        )
        self.state.shake_phase = (
            self.state.shake_phase + dt * self.config.shake_frequency
        ) % SHAKE_PHASE_PERIOD

    def shake_offset(self, up: Vector3, right: Vector3) -> Vector3:
        """Current shake displacement, confined to the up/right plane."""
        intensity = self.state.shake_intensity
        if intensity <= 0.001:
            return Vector3.zero()

        phase = self.state.shake_phase
        lateral = math.sin(phase) * intensity
        vertical = math.cos(phase * self.config.shake_secondary_ratio) * intensity
        return right * lateral + up * vertical

    def _follow_pose(
        self, aircraft: AircraftState, back_distance: float, dt: float, with_shake: bool
    ) -> CameraPose:
        """Chase-style pose: above and behind, smoothed, looking at the aircraft."""
        target_pos = aircraft.position
        up = target_pos.normalized_or(Vector3(0.0, 1.0, 0.0))
        backward = -aircraft.orientation.forward()

        target = target_pos + up * self.state.settings.height + backward * back_distance
        if self.state.position is None:
            self.state.position = target
        else:
            self.state.position = self.state.position.lerp(
                target, damp_factor(self.config.follow_response, dt)
            )

        position = self.state.position.copy()
        if with_shake:
            right = up.cross(backward)
            if right.is_near_zero():
                right = aircraft.orientation.right()
            position = position + self.shake_offset(up, right.normalized())

        return CameraPose(
            view=self.current_view,
            position=position,
            look_at=target_pos.copy(),
            up=up,
            field_of_view=self.state.current_fov,
        )

    def _cockpit_pose(self, aircraft: AircraftState) -> CameraPose:
        """First-person pose near the nose, looking along the flight path."""
        orientation = aircraft.orientation
        offset = orientation.rotate(Vector3(*self.config.cockpit_offset))
        position = aircraft.position + offset
        self.state.position = position.copy()

        forward = orientation.forward()
        return CameraPose(
            view=self.current_view,
            position=position,
            look_at=position + forward * self.config.look_ahead_distance,
            up=aircraft.position.normalized_or(Vector3(0.0, 1.0, 0.0)),
            field_of_view=self.state.current_fov,
        )

    def get_current_view(self) -> CameraView:
        """Get the active view."""
        return self.current_view

    def get_transition_history(self) -> list[TransitionRecord]:
        """Get every view switch started so far."""
        return self._transition_history.copy()

    def add_view_listener(self, listener: Callable[[CameraView], None]) -> None:
        """Add a callback notified by ``next_view`` with the new view."""
        self._listeners.append(listener)

    def remove_view_listener(self, listener: Callable[[CameraView], None]) -> None:
        """Remove a view listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)
