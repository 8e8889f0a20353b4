"""EQUIMAP Configuration Settings using Pydantic.

Loads settings from:
1. An optional YAML file (``EquimapSettings.from_yaml``)
2. Environment variables (``EQUIMAP_*``, ``.env``)
3. Default values
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from equimap.layout.config import Band, LayoutConfig
from equimap.layout.engine import Canvas
from equimap.utils import ConfigurationError


class EquimapSettings(BaseSettings):
    """Central configuration for EQUIMAP."""

    model_config = SettingsConfigDict(
        env_prefix="EQUIMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Canvas ---
    canvas_width: float = Field(default=1200.0, gt=0.0)
    canvas_height: float = Field(default=800.0, gt=0.0)

    # --- Layout geometry ---
    margin: float = 20.0
    scale_x: float = 1.4
    scale_y: float = 0.85
    tool_band: tuple[float, float] = (0.15, 0.42)
    discipline_band: tuple[float, float] = (0.50, 0.72)
    knowledge_area_band: tuple[float, float] = (0.80, 1.00)

    # --- Node sizing (collision radius and spacing per level) ---
    tool_radius: float = 8.0
    discipline_radius: float = 12.0
    knowledge_area_radius: float = 16.0
    content_radius_bonus: float = 2.0
    tool_spacing: float = 4.0
    discipline_spacing: float = 8.0
    knowledge_area_spacing: float = 12.0

    # --- Placement search ---
    max_trials: int = 50
    jitter_fraction: float = 0.3
    min_slots: int = 8
    fallback_radius_step: float = 2.0
    seed: Optional[int] = 42

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "EquimapSettings":
        """Load settings from a YAML mapping; environment variables still apply.

        A missing file yields the defaults.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        try:
            with open(yaml_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse {yaml_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"{yaml_path} must contain a mapping at the top level")
        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {yaml_path}: {e}") from e

    @property
    def canvas(self) -> Canvas:
        return Canvas(self.canvas_width, self.canvas_height)

    def layout_config(self) -> LayoutConfig:
        """Build a validated LayoutConfig; overlapping bands raise ConfigurationError."""
        try:
            return LayoutConfig(
                margin=self.margin,
                scale_x=self.scale_x,
                scale_y=self.scale_y,
                tool_band=Band(
                    min_fraction=self.tool_band[0],
                    max_fraction=self.tool_band[1],
                    node_radius=self.tool_radius,
                    min_spacing=self.tool_spacing,
                ),
                discipline_band=Band(
                    min_fraction=self.discipline_band[0],
                    max_fraction=self.discipline_band[1],
                    node_radius=self.discipline_radius,
                    min_spacing=self.discipline_spacing,
                ),
                knowledge_area_band=Band(
                    min_fraction=self.knowledge_area_band[0],
                    max_fraction=self.knowledge_area_band[1],
                    node_radius=self.knowledge_area_radius,
                    min_spacing=self.knowledge_area_spacing,
                ),
                content_radius_bonus=self.content_radius_bonus,
                max_trials=self.max_trials,
                jitter_fraction=self.jitter_fraction,
                min_slots=self.min_slots,
                fallback_radius_step=self.fallback_radius_step,
                start_angle=-math.pi / 2,
                seed=self.seed,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid layout settings: {e}") from e


# Global settings instance
_settings: Optional[EquimapSettings] = None


def get_settings() -> EquimapSettings:
    """Get or create global settings instance"""
    global _settings
    if _settings is None:
        _settings = EquimapSettings()
    return _settings


def reload_settings(yaml_path: Optional[str | Path] = None) -> EquimapSettings:
    """Reload settings, optionally from a YAML file"""
    global _settings
    _settings = EquimapSettings.from_yaml(yaml_path) if yaml_path else EquimapSettings()
    return _settings
