"""
Configuration management for the auto-navigation engine.

Hierarchical configuration precedence: Environment > JSON > Defaults.

Usage:
    from autonavigation.config import AutoNavigationConfig

    config = AutoNavigationConfig('autonavigation_config.json')
    settings = config.to_settings()

Environment variables are named AUTONAV_<KEY>, e.g. AUTONAV_DEFAULT_DURATION=3.5.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .state import CurveType, EasingType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationSettings:
    """Tunable constants handed to the compiler and the player."""
    default_duration: float = 5.0
    bezier_tension: float = 10.0
    standoff_factor: float = 2.0
    surface_height_factor: float = 1.5
    curve_type: CurveType = CurveType.BEZIER
    easing: EasingType = EasingType.CUBIC_EASE_IN_OUT


class AutoNavigationConfig:
    """
    Auto-navigation configuration.

    Implements hierarchical configuration loading:
    1. Defaults
    2. JSON config file (bare mapping or an 'autonavigation' section)
    3. Environment variables (highest priority)
    """

    SECTION = 'autonavigation'
    ENV_PREFIX = 'AUTONAV_'

    DEFAULTS: Dict[str, Any] = {
        'default_duration': 5.0,
        'bezier_tension': 10.0,
        'standoff_factor': 2.0,
        'surface_height_factor': 1.5,
        'curve_type': CurveType.BEZIER.value,
        'easing': EasingType.CUBIC_EASE_IN_OUT.value,
        'debug_mode': False,
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Args:
            config_file: Optional path to a JSON config file
        """
        self._config: Dict[str, Any] = {}
        self._config_file = Path(config_file) if config_file else None
        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from all sources in priority order."""
        self._config = self.DEFAULTS.copy()
        self._load_from_json_config()
        self._load_from_environment()
        self._validate_config()

        if self.debug_mode:
            logger.info("autonavigation configuration loaded successfully")

    def _load_from_json_config(self):
        """Load configuration from JSON config file."""
        if not self._config_file:
            return
        if not self._config_file.exists():
            logger.debug(f"No config file found at {self._config_file}")
            return

        try:
            with open(self._config_file, 'r') as f:
                json_config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load JSON config from {self._config_file}: {e}")
            return

        if not isinstance(json_config, dict):
            logger.warning(f"Ignoring JSON config {self._config_file}: top level is not an object")
            return

        if isinstance(json_config.get(self.SECTION), dict):
            section = json_config[self.SECTION]
            logger.debug(f"Using {self.SECTION} section from {self._config_file}")
        else:
            section = json_config

        # Filter out comment keys (starting with _)
        filtered_config = {k: v for k, v in section.items() if not k.startswith('_')}
        self._config.update(filtered_config)
        logger.debug(f"Loaded JSON config from {self._config_file}")

    def _load_from_environment(self):
        """Load configuration from environment variables."""
        for key in list(self._config.keys()):
            env_key = f"{self.ENV_PREFIX}{key.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                default = self.DEFAULTS.get(key, self._config[key])
                converted_value = self._convert_env_value(env_value, default)
                self._config[key] = converted_value
                logger.debug(f"Loaded environment variable: {env_key} = {converted_value}")

    def _convert_env_value(self, env_value: str, default_value: Any) -> Any:
        """Convert environment variable string to appropriate type."""
        if isinstance(default_value, bool):
            return env_value.lower() in ('true', '1', 'yes', 'on')
        elif isinstance(default_value, int):
            try:
                return int(env_value)
            except ValueError:
                logger.warning(f"Invalid integer value in environment: {env_value}")
                return default_value
        elif isinstance(default_value, float):
            try:
                return float(env_value)
            except ValueError:
                logger.warning(f"Invalid float value in environment: {env_value}")
                return default_value
        else:
            return env_value

    def _reset(self, key: str, reason: str):
        logger.warning(f"Invalid {key} {self._config.get(key)!r} ({reason}), using {self.DEFAULTS[key]!r}")
        self._config[key] = self.DEFAULTS[key]

    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def _validate_config(self):
        """Reset out-of-range values to their defaults."""
        for key in ('default_duration', 'standoff_factor', 'surface_height_factor'):
            value = self._config.get(key)
            if not self._is_number(value) or value <= 0:
                self._reset(key, 'must be a positive number')
            else:
                self._config[key] = float(value)

        tension = self._config.get('bezier_tension')
        if not self._is_number(tension) or tension < 0:
            self._reset('bezier_tension', 'must be a non-negative number')
        else:
            self._config['bezier_tension'] = float(tension)

        try:
            CurveType(str(self._config.get('curve_type')).lower())
            self._config['curve_type'] = str(self._config['curve_type']).lower()
        except ValueError:
            self._reset('curve_type', 'unknown curve type')

        try:
            EasingType(str(self._config.get('easing')).lower())
            self._config['easing'] = str(self._config['easing']).lower()
        except ValueError:
            self._reset('easing', 'unknown easing')

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set configuration value (runtime only)."""
        self._config[key] = value

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self._config.copy()

    def reload(self):
        """Reload configuration from all sources."""
        self._load_configuration()

    def to_settings(self) -> NavigationSettings:
        return NavigationSettings(
            default_duration=self.default_duration,
            bezier_tension=self.bezier_tension,
            standoff_factor=self.standoff_factor,
            surface_height_factor=self.surface_height_factor,
            curve_type=self.curve_type,
            easing=self.easing,
        )

    # Property access for common settings
    @property
    def default_duration(self) -> float:
        return float(self._config.get('default_duration', 5.0))

    @property
    def bezier_tension(self) -> float:
        return float(self._config.get('bezier_tension', 10.0))

    @property
    def standoff_factor(self) -> float:
        return float(self._config.get('standoff_factor', 2.0))

    @property
    def surface_height_factor(self) -> float:
        return float(self._config.get('surface_height_factor', 1.5))

    @property
    def curve_type(self) -> CurveType:
        return CurveType(self._config.get('curve_type', CurveType.BEZIER.value))

    @property
    def easing(self) -> EasingType:
        return EasingType(self._config.get('easing', EasingType.CUBIC_EASE_IN_OUT.value))

    @property
    def debug_mode(self) -> bool:
        return bool(self._config.get('debug_mode', False))


__all__ = ['AutoNavigationConfig', 'NavigationSettings']
