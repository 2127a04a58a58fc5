"""Airport records and lookup."""

from skyflight.airports.database import Airport, AirportDatabase

__all__ = ["Airport", "AirportDatabase"]
