"""SkyFlight: flight dynamics and camera core for a spherical-world simulator."""

from skyflight.version import __version__

__all__ = ["__version__"]
