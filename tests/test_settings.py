"""Tests for EQUIMAP settings."""

import pytest

from equimap.layout import LayoutConfig
from equimap.settings import EquimapSettings
from equimap.utils import ConfigurationError


class TestDefaults:
    def test_layout_config_matches_defaults(self, settings):
        assert settings.layout_config() == LayoutConfig()

    def test_canvas(self, settings):
        assert settings.canvas.width == 1200.0
        assert settings.canvas.height == 800.0


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("EQUIMAP_SEED", "7")
        monkeypatch.setenv("EQUIMAP_MAX_TRIALS", "10")
        settings = EquimapSettings(_env_file=None)
        assert settings.seed == 7
        assert settings.layout_config().max_trials == 10

    def test_band_from_env_json(self, monkeypatch):
        monkeypatch.setenv("EQUIMAP_TOOL_BAND", "[0.1, 0.3]")
        settings = EquimapSettings(_env_file=None)
        assert settings.layout_config().tool_band.max_fraction == pytest.approx(0.3)


class TestYaml:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "equimap.yaml"
        path.write_text("canvas_width: 640\nseed: 3\nscale_x: 1.2\n")
        settings = EquimapSettings.from_yaml(path)
        assert settings.canvas_width == 640
        assert settings.seed == 3
        assert settings.layout_config().scale_x == pytest.approx(1.2)

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = EquimapSettings.from_yaml(tmp_path / "missing.yaml")
        assert settings.max_trials == 50

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("canvas_width: [unclosed\n")
        with pytest.raises(ConfigurationError):
            EquimapSettings.from_yaml(path)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            EquimapSettings.from_yaml(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "neg.yaml"
        path.write_text("canvas_width: -5\n")
        with pytest.raises(ConfigurationError):
            EquimapSettings.from_yaml(path)


class TestLayoutValidation:
    def test_overlapping_bands(self):
        settings = EquimapSettings(_env_file=None, tool_band=(0.1, 0.6))
        with pytest.raises(ConfigurationError, match="Invalid layout settings"):
            settings.layout_config()

    def test_bad_scale(self):
        settings = EquimapSettings(_env_file=None, scale_y=1.5)
        with pytest.raises(ConfigurationError):
            settings.layout_config()
