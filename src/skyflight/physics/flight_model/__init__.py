"""Flight dynamics model over the spherical world."""

from skyflight.physics.flight_model.base import (
    AircraftNotSelectedError,
    AircraftSpec,
    AircraftState,
    AircraftType,
    ControlInputs,
    SkyFlightError,
)
from skyflight.physics.flight_model.spherical_flight import SphericalFlightModel

__all__ = [
    "AircraftNotSelectedError",
    "AircraftSpec",
    "AircraftState",
    "AircraftType",
    "ControlInputs",
    "SkyFlightError",
    "SphericalFlightModel",
]
