"""Day/night blend for the night-lights overlay.

A cosmetic approximation of the terminator: the local solar hour is the UTC
hour shifted by longitude / 15, and the night overlay fades in and out over
one-hour dawn and dusk windows. The opacity eases toward its target every
tick instead of snapping.

Typical usage:
    model = IlluminationModel()
    opacity = model.update(longitude=2.35, dt=0.016, mode=DayNightMode.AUTO)
"""

from datetime import datetime, timezone
from enum import Enum

from skyflight.core.config import IlluminationConfig
from skyflight.core.logging_system import get_logger
from skyflight.physics.smoothing import damp, sanitize_dt

logger = get_logger(__name__)


class DayNightMode(Enum):
    """Night overlay mode."""

    AUTO = "auto"
    DAY = "day"
    NIGHT = "night"


def utc_hour(now: datetime | None = None) -> float:
    """Fractional UTC hour of ``now`` (current time if None)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.hour + now.minute / 60.0 + now.second / 3600.0


def local_solar_hour(utc: float, longitude: float) -> float:
    """Local solar hour in [0, 24) at ``longitude`` for a UTC hour."""
    return (utc + longitude / 15.0 + 24.0) % 24.0


class IlluminationModel:
    """Computes the night overlay opacity from position and time.

    Attributes:
        config: Dawn/dusk windows and response rate.
        opacity: Current overlay opacity in [0, 1].
    """

    def __init__(self, config: IlluminationConfig | None = None, opacity: float = 0.0) -> None:
        self.config = config or IlluminationConfig()
        self.opacity = max(0.0, min(1.0, opacity))

    def target_opacity(self, local_hour: float, mode: DayNightMode = DayNightMode.AUTO) -> float:
        """Opacity the overlay should settle at.

        Args:
            local_hour: Local solar hour in [0, 24).
            mode: DAY and NIGHT override the hour.

        Returns:
            0 for full day, 1 for full night.
        """
        if mode == DayNightMode.DAY:
            return 0.0
        if mode == DayNightMode.NIGHT:
            return 1.0

        cfg = self.config
        if cfg.dawn_start <= local_hour <= cfg.dawn_end:
            return 1.0 - (local_hour - cfg.dawn_start) / max(cfg.dawn_end - cfg.dawn_start, 1e-9)
        if cfg.dusk_start <= local_hour <= cfg.dusk_end:
            return (local_hour - cfg.dusk_start) / max(cfg.dusk_end - cfg.dusk_start, 1e-9)
        if cfg.dawn_end < local_hour < cfg.dusk_start:
            return 0.0
        return 1.0

    def update(
        self,
        longitude: float,
        dt: float,
        mode: DayNightMode = DayNightMode.AUTO,
        now: datetime | None = None,
    ) -> float:
        """Advance the overlay opacity by one tick.

        Args:
            longitude: Aircraft longitude in degrees.
            dt: Elapsed time in seconds.
            mode: Overlay mode.
            now: Wall-clock time (current UTC time if None).

        Returns:
            Updated opacity.
        """
        dt = sanitize_dt(dt)
        hour = local_solar_hour(utc_hour(now), longitude)
        target = self.target_opacity(hour, mode)
        self.opacity = damp(self.opacity, target, self.config.response, dt)
        return self.opacity
