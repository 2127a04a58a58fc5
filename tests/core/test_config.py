"""Tests for simulation configuration loading."""

from pathlib import Path

import pytest

from skyflight.core.config import (
    CONFIG_DIR,
    MAX_PITCH_LIMIT,
    MAX_ROLL_LIMIT,
    SimulationConfig,
    get_config_path,
    load_config,
)


class TestSimulationConfig:
    """Test defaults and dict overrides."""

    def test_defaults(self) -> None:
        """Test the built-in tuning values."""
        config = SimulationConfig()
        assert config.world.scene_radius == 100.0
        assert config.world.takeoff_altitude == 2.0
        assert config.dynamics.pitch_rate == 60.0
        assert config.dynamics.speed_scale == 0.01
        assert config.camera.transition_duration == 0.5
        assert config.camera.cockpit_offset == (0.5, 0.2, 0.0)
        assert config.illumination.dawn_start == 6.0
        assert config.phase.hold_time == 0.3

    def test_from_dict_overrides(self) -> None:
        """Test a partial mapping overrides only what it names."""
        config = SimulationConfig.from_dict(
            {"dynamics": {"pitch_rate": 45.0}, "camera": {"cockpit_offset": [1, 0, 0]}}
        )
        assert config.dynamics.pitch_rate == 45.0
        assert config.dynamics.roll_rate == 60.0
        assert config.camera.cockpit_offset == (1.0, 0.0, 0.0)

    def test_unknown_entries_ignored(self) -> None:
        """Test unknown sections and keys are skipped."""
        config = SimulationConfig.from_dict(
            {"radar": {"range": 10}, "world": {"gravity": 9.81}, "phase": "bad"}
        )
        assert not hasattr(config, "radar")
        assert not hasattr(config.world, "gravity")
        assert config.phase.hold_time == 0.3

    def test_values_sanitized(self) -> None:
        """Test out-of-range values are clamped."""
        config = SimulationConfig.from_dict(
            {
                "world": {"min_altitude": 5.0, "max_altitude": 1.0, "takeoff_altitude": 0.0},
                "dynamics": {"yaw_rate": -10.0, "max_pitch": 120.0},
                "camera": {"transition_duration": 0.0},
            }
        )
        assert config.world.max_altitude == 5.0
        assert config.world.takeoff_altitude == 5.0
        assert config.dynamics.yaw_rate == 0.0
        assert config.dynamics.max_pitch == 80.0
        assert config.camera.transition_duration > 0.0

    def test_empty_dict(self) -> None:
        """Test None and empty mappings give the defaults."""
        assert SimulationConfig.from_dict({}) == SimulationConfig()
        assert SimulationConfig.from_dict(None) == SimulationConfig()

    def test_attitude_limits_capped(self) -> None:
        """Test configured limits cannot loosen the hard attitude bounds."""
        config = SimulationConfig.from_dict({"dynamics": {"max_pitch": 89, "max_roll": 170}})
        assert config.dynamics.max_pitch == MAX_PITCH_LIMIT == 80.0
        assert config.dynamics.max_roll == MAX_ROLL_LIMIT == 60.0

        tighter = SimulationConfig.from_dict({"dynamics": {"max_pitch": 30, "max_roll": 20}})
        assert tighter.dynamics.max_pitch == 30.0
        assert tighter.dynamics.max_roll == 20.0

    @pytest.mark.parametrize("data", [[1, 2], "dynamics", 42])
    def test_non_mapping_root(self, data: object) -> None:
        """Test a root that is not a mapping gives the defaults."""
        assert SimulationConfig.from_dict(data) == SimulationConfig()

    @pytest.mark.parametrize("value", ["fast", True, None, [60.0], float("nan")])
    def test_invalid_scalar_skipped(self, value: object) -> None:
        """Test unusable values keep the default and the rest still loads."""
        config = SimulationConfig.from_dict(
            {"dynamics": {"pitch_rate": value, "roll_rate": 45.0}}
        )
        assert config.dynamics.pitch_rate == 60.0
        assert config.dynamics.roll_rate == 45.0

    @pytest.mark.parametrize("value", [[1.0, 2.0], "front", [1.0, "up", 0.0], 3.0])
    def test_invalid_cockpit_offset_skipped(self, value: object) -> None:
        """Test a malformed cockpit offset keeps the default."""
        config = SimulationConfig.from_dict({"camera": {"cockpit_offset": value}})
        assert config.camera.cockpit_offset == (0.5, 0.2, 0.0)


class TestLoadConfig:
    """Test YAML loading."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test a missing file is not an error."""
        assert load_config(tmp_path / "missing.yaml") == SimulationConfig()
        assert load_config(None) == SimulationConfig()

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test values are read from YAML."""
        path = tmp_path / "simulation.yaml"
        path.write_text("world:\n  scene_radius: 50.0\nphase:\n  hold_time: 0.5\n")

        config = load_config(path)

        assert config.world.scene_radius == 50.0
        assert config.phase.hold_time == 0.5

    def test_empty_yaml(self, tmp_path: Path) -> None:
        """Test an empty file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == SimulationConfig()

    def test_yaml_list_gives_defaults(self, tmp_path: Path) -> None:
        """Test a YAML document that is not a mapping is ignored."""
        path = tmp_path / "list.yaml"
        path.write_text("- world\n- dynamics\n")
        assert load_config(path) == SimulationConfig()

    def test_yaml_bad_value_skipped(self, tmp_path: Path) -> None:
        """Test a non-numeric YAML value is skipped with the others kept."""
        path = tmp_path / "simulation.yaml"
        path.write_text("dynamics:\n  pitch_rate: fast\n  yaw_rate: 20\n")

        config = load_config(path)

        assert config.dynamics.pitch_rate == 60.0
        assert config.dynamics.yaw_rate == 20.0

    def test_shipped_config_matches_defaults(self) -> None:
        """Test the repository config file restates the defaults."""
        path = get_config_path("simulation.yaml")
        assert path.parent == CONFIG_DIR
        if not path.exists():
            pytest.skip("config directory not available")
        assert load_config(path) == SimulationConfig()
