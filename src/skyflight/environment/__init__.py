"""Environment models (day/night illumination)."""

from skyflight.environment.illumination import DayNightMode, IlluminationModel

__all__ = ["DayNightMode", "IlluminationModel"]
