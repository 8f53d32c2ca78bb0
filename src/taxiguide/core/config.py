"""Configuration loading for routing settings.

Reads YAML configuration files with nested access and defaults, and turns
the ``routing`` section into a typed settings object.

Typical usage example:
    from taxiguide.core.config import ConfigLoader, RoutingSettings

    config = ConfigLoader.load("config/routing.yaml")
    settings = RoutingSettings.from_config(config)
    epsilon = config.get("routing.node_merge_epsilon_deg", default=1e-7)
"""

import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Examples:
        >>> config = ConfigLoader.load("config/routing.yaml")
        >>> threshold = config.get("routing.sharp_turn_threshold_deg", default=90.0)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data or {}

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If file cannot be loaded.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g. "routing.feet_per_degree").
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation.

        Args:
            key: Configuration key (supports dot notation).
            value: Value to set.
        """
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            data = data[k]

        data[keys[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def save(self, path: str | Path) -> None:
        """Write the configuration to a YAML file.

        Raises:
            ConfigError: If the file cannot be written.
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

        logger.info("Saved configuration to: %s", path)

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one.

        Other config values override existing ones.
        """
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Get the configuration as a dictionary."""
        return self._data.copy()


@dataclass(frozen=True)
class RoutingSettings:
    """Tunable constants of the routing engine.

    Attributes:
        node_merge_epsilon_deg: Tolerance in degrees under which two segment
            endpoints are merged into one node. Zero means exact equality.
        feet_per_degree: Feet per degree of latitude, used for footprints.
        sharp_turn_threshold_deg: Turns above this angle are flagged as sharp
            (advisory, never affects routing).
        max_anchor_distance_km: Maximum distance between a user position and
            the taxiway node it is anchored to. None means unlimited.

    Examples:
        >>> settings = RoutingSettings(node_merge_epsilon_deg=0.0)
        >>> settings.feet_per_degree
        364000.0
    """

    node_merge_epsilon_deg: float = 1e-7
    feet_per_degree: float = 364000.0
    sharp_turn_threshold_deg: float = 90.0
    max_anchor_distance_km: float | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.node_merge_epsilon_deg) or self.node_merge_epsilon_deg < 0:
            raise ConfigError(
                f"node_merge_epsilon_deg must be a non-negative number, got {self.node_merge_epsilon_deg}"
            )
        if not math.isfinite(self.feet_per_degree) or self.feet_per_degree <= 0:
            raise ConfigError(f"feet_per_degree must be positive, got {self.feet_per_degree}")
        if not 0 <= self.sharp_turn_threshold_deg <= 180:
            raise ConfigError(
                f"sharp_turn_threshold_deg must be within [0, 180], got {self.sharp_turn_threshold_deg}"
            )
        if self.max_anchor_distance_km is not None and (
            not math.isfinite(self.max_anchor_distance_km) or self.max_anchor_distance_km <= 0
        ):
            raise ConfigError(
                f"max_anchor_distance_km must be a positive finite number, got {self.max_anchor_distance_km}"
            )

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "RoutingSettings":
        """Build settings from the ``routing`` section of a configuration.

        Missing keys fall back to defaults; unknown keys are ignored with a
        warning.

        Raises:
            ConfigError: If a value is invalid.
        """
        section = config.get("routing", default={}) or {}
        if not isinstance(section, dict):
            raise ConfigError("Configuration key is not a section: routing")

        known = set(asdict(cls()).keys())
        for key in section:
            if key not in known:
                logger.warning("Ignoring unknown routing setting: %s", key)

        values: dict[str, Any] = {}
        for key in known:
            if key not in section:
                continue
            value = section[key]
            if value is None and key == "max_anchor_distance_km":
                values[key] = None
                continue
            try:
                values[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for routing.{key}: {value!r}") from e

        return cls(**values)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RoutingSettings":
        """Load settings from a YAML file, or defaults when path is None."""
        if path is None:
            return cls()
        return cls.from_config(ConfigLoader.load(path))
