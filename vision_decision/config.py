"""
Decision Configuration - Tunables for the vision decision algorithm.
"""

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

# Parameters may be namespaced under this key in a YAML file.
CONFIG_NAMESPACE = "vision_decision"

_FRACTION_FIELDS = (
    "rolling_average_constant",
    "percent_of_samples_needed",
    "percent_of_image_sampled",
    "percent_of_white_needed",
)


@dataclass(frozen=True)
class DecisionConfig:
    """
    Immutable snapshot of the decision tunables.

    Loaded once at startup and shared read-only by every frame.
    """
    # Velocity shaping
    angular_vel_multiplier: float = 1.0  # scales commanded turn rate
    angular_vel_cap: float = 1.0  # max |angular.z|

    # Line sampling
    rolling_average_constant: float = 0.25  # weight of each new slope sample
    percent_of_samples_needed: float = 0.125  # of image height, for 100% confidence
    percent_of_image_sampled: float = 0.25  # of image height, rows sampled per scan

    # Decision
    move_away_threshold: float = 25.0  # degrees
    confidence_threshold: float = 60.0  # loaded but not used for gating
    percent_of_white_needed: float = 0.05  # minimum line coverage

    def __post_init__(self):
        for name in _FRACTION_FIELDS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

        if self.angular_vel_cap < 0:
            raise ValueError(
                f"angular_vel_cap must be non-negative, got {self.angular_vel_cap}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DecisionConfig":
        """
        Build a config from a flat mapping or one nested under ``vision_decision``.

        Unknown keys are ignored with a warning; missing keys keep defaults.
        """
        if not data:
            return cls()

        if CONFIG_NAMESPACE in data and isinstance(data[CONFIG_NAMESPACE], Mapping):
            data = data[CONFIG_NAMESPACE] or {}

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            try:
                values[key] = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"{key} must be a number, got {value!r}")

        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        """Convert to a plain dictionary."""
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> DecisionConfig:
    """
    Load a decision config from a YAML file.

    Args:
        path: YAML file path, or None for defaults

    Returns:
        DecisionConfig
    """
    if path is None:
        return DecisionConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if data is not None and not isinstance(data, Mapping):
        raise ValueError(f"Config file must contain a mapping: {path}")

    return DecisionConfig.from_dict(data)
