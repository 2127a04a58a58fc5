"""Camera views and the aircraft-following camera controller."""

from skyflight.camera.camera_controller import CameraController, CameraPose
from skyflight.camera.views import CameraView, ViewSettings

__all__ = ["CameraController", "CameraPose", "CameraView", "ViewSettings"]
