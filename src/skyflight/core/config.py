"""Simulation tuning configuration.

All tunable constants of the flight model, camera, illumination and flight
phase tracker live here as dataclasses with defaults. A YAML file can
override any subset of them:

    dynamics:
      pitch_rate: 45.0
    camera:
      transition_duration: 0.8

Typical usage:
    from skyflight.core.config import get_config_path, load_config

    config = load_config(get_config_path("simulation.yaml"))
"""

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from skyflight.core.logging_system import get_logger

logger = get_logger(__name__)

# Repository-level configuration directory (src/skyflight/core -> root/config)
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"


def get_config_path(name: str) -> Path:
    """Resolve a file name inside the configuration directory."""
    return CONFIG_DIR / name


# Hard attitude limits; configured limits can only tighten them
MAX_PITCH_LIMIT = 80.0
MAX_ROLL_LIMIT = 60.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _parse_value(key: str, value: Any) -> Any:
    """Convert a raw config value, or return None when it is unusable."""
    if key == "cockpit_offset":
        if not isinstance(value, (list, tuple)) or len(value) != 3:
            return None
        if not all(_is_number(v) for v in value):
            return None
        return tuple(float(v) for v in value)
    if not _is_number(value):
        return None
    return float(value)


@dataclass
class WorldConfig:
    """Sphere geometry and altitude envelope.

    Attributes:
        scene_radius: Sphere radius in scene units.
        earth_radius_km: Real-world radius used to scale distances.
        min_altitude: Floor above the sphere surface (scene units).
        max_altitude: Ceiling above the sphere surface (scene units).
        takeoff_altitude: Spawn altitude on takeoff (scene units).
    """

    scene_radius: float = 100.0
    earth_radius_km: float = 6371.0
    min_altitude: float = 0.5
    max_altitude: float = 50.0
    takeoff_altitude: float = 2.0


@dataclass
class DynamicsConfig:
    """Flight dynamics rates and gains."""

    pitch_rate: float = 60.0  # deg/s at full input
    roll_rate: float = 60.0  # deg/s at full input
    yaw_rate: float = 30.0  # deg/s at full input
    bank_coefficient: float = 0.5  # heading deg/s per degree of roll
    throttle_gain: float = 200.0  # km/h of target speed at full throttle
    speed_response: float = 1.0  # 1/s, first-order lag toward target speed
    leveling_rate: float = 1.2  # 1/s, self-leveling decay with no input
    speed_scale: float = 0.01  # km -> scene units
    stabilize_factor: float = 0.9  # one-shot level-off multiplier
    max_pitch: float = 80.0
    max_roll: float = 60.0


@dataclass
class CameraConfig:
    """Camera controller tuning."""

    transition_duration: float = 0.5  # seconds
    fov_boost: float = 15.0  # degrees added at max speed
    fov_response: float = 3.0  # 1/s
    follow_response: float = 1.8  # 1/s
    shake_response: float = 3.0  # 1/s
    shake_frequency: float = 20.0  # rad/s of shake phase
    shake_secondary_ratio: float = 1.3
    cockpit_offset: tuple[float, float, float] = (0.5, 0.2, 0.0)
    look_ahead_distance: float = 10.0
    overhead_back_ratio: float = 0.5


@dataclass
class IlluminationConfig:
    """Day/night blend tuning."""

    response: float = 1.2  # 1/s
    dawn_start: float = 6.0
    dawn_end: float = 7.0
    dusk_start: float = 18.0
    dusk_end: float = 19.0


@dataclass
class PhaseConfig:
    """Flight phase derivation thresholds."""

    ground_band: float = 0.05  # scene units above the floor
    taxi_speed_ratio: float = 0.5  # fraction of cruise speed
    climb_enter: float = 0.002  # scene units/s
    climb_exit: float = 0.0008  # scene units/s
    hold_time: float = 0.3  # seconds a candidate phase must persist


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""

    world: WorldConfig = field(default_factory=WorldConfig)
    dynamics: DynamicsConfig = field(default_factory=DynamicsConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    illumination: IlluminationConfig = field(default_factory=IlluminationConfig)
    phase: PhaseConfig = field(default_factory=PhaseConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "SimulationConfig":
        """Build a configuration from a nested mapping.

        Unknown sections and keys, non-numeric values and a root that is not
        a mapping are ignored with a warning. Out-of-range values are clamped
        silently.
        """
        config = cls()
        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.warning("Config root must be a mapping, got %s", type(data).__name__)
            data = {}

        for section_name, values in data.items():
            section = getattr(config, section_name, None)
            if section is None or not dataclasses.is_dataclass(section):
                logger.warning("Ignoring unknown config section: %s", section_name)
                continue
            if not isinstance(values, dict):
                logger.warning("Config section %s must be a mapping", section_name)
                continue
            known = {f.name for f in dataclasses.fields(section)}
            for key, value in values.items():
                if key not in known:
                    logger.warning("Ignoring unknown config key: %s.%s", section_name, key)
                    continue
                parsed = _parse_value(key, value)
                if parsed is None:
                    logger.warning(
                        "Ignoring invalid config value %s.%s: %r", section_name, key, value
                    )
                    continue
                setattr(section, key, parsed)
        config._sanitize()
        return config

    def _sanitize(self) -> None:
        """Clamp values into their valid ranges."""
        for section in (self.dynamics, self.camera, self.illumination, self.phase):
            for f in dataclasses.fields(section):
                value = getattr(section, f.name)
                if isinstance(value, (int, float)) and value < 0:
                    setattr(section, f.name, 0.0)

        world = self.world
        world.scene_radius = max(world.scene_radius, 1e-3)
        world.min_altitude = max(world.min_altitude, 0.0)
        if world.max_altitude < world.min_altitude:
            world.max_altitude = world.min_altitude
        world.takeoff_altitude = max(
            world.min_altitude, min(world.max_altitude, world.takeoff_altitude)
        )

        self.dynamics.max_pitch = min(self.dynamics.max_pitch, MAX_PITCH_LIMIT)
        self.dynamics.max_roll = min(self.dynamics.max_roll, MAX_ROLL_LIMIT)
        if self.camera.transition_duration <= 0.0:
            self.camera.transition_duration = 1e-3


def load_config(path: str | Path | None = None) -> SimulationConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file path. Missing files yield the defaults.

    Returns:
        Simulation configuration.
    """
    if path is None or not Path(path).exists():
        if path is not None:
            logger.info("Config file %s not found, using defaults", path)
        return SimulationConfig()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    logger.info("Loaded simulation config from %s", path)
    return SimulationConfig.from_dict(data)
