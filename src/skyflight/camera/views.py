"""Camera view modes and their static placement settings."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ViewSettings:
    """Placement parameters of a camera view.

    Attributes:
        distance: Offset behind the aircraft (scene units).
        height: Offset along the local up axis (scene units).
        fov: Vertical field of view in degrees.
    """

    distance: float
    height: float
    fov: float

    def lerp(self, target: "ViewSettings", t: float) -> "ViewSettings":
        """Interpolate every parameter toward ``target`` by fraction ``t``."""
        return ViewSettings(
            distance=self.distance + (target.distance - self.distance) * t,
            height=self.height + (target.height - self.height) * t,
            fov=self.fov + (target.fov - self.fov) * t,
        )


class CameraView(Enum):
    """Camera views, in cycling order."""

    CHASE = "chase"
    COCKPIT = "cockpit"
    OVERHEAD = "overhead"

    @property
    def settings(self) -> ViewSettings:
        """Static placement of this view."""
        return VIEW_SETTINGS[self]


VIEW_SETTINGS: dict[CameraView, ViewSettings] = {
    CameraView.CHASE: ViewSettings(distance=5.0, height=2.0, fov=60.0),
    CameraView.COCKPIT: ViewSettings(distance=0.0, height=0.2, fov=90.0),
    CameraView.OVERHEAD: ViewSettings(distance=20.0, height=15.0, fov=45.0),
}

VIEW_ORDER: tuple[CameraView, ...] = (CameraView.CHASE, CameraView.COCKPIT, CameraView.OVERHEAD)
