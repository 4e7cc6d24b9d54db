"""
Velocity Mapping - Converts a heading angle into linear and angular speed fractions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

import numpy as np

from vision_decision.config import DecisionConfig
from vision_decision.core.sampler import map_range


class MotionSignal(Enum):
    """Explicit motion requests that are not headings."""
    STOP = "stop"


# arctan never yields exactly 90 degrees, so this integer is reserved to
# mean "halt" for callers still passing a numeric angle.
STOP_SIGNAL_ANGLE = 90

Angle = Union[int, float, MotionSignal]


def is_stop(angle: Angle) -> bool:
    """Check whether an angle value requests a halt."""
    if isinstance(angle, MotionSignal):
        return angle is MotionSignal.STOP
    return angle == STOP_SIGNAL_ANGLE


@dataclass(frozen=True)
class VelocityCommand:
    """
    Velocity command for the motion controller.

    Both values are fractions of the vehicle's maximum speeds.
    Positive angular is a left (counter-clockwise) turn.
    """
    linear: float = 0.0
    angular: float = 0.0

    @property
    def is_stopped(self) -> bool:
        return self.linear == 0.0 and self.angular == 0.0

    def to_twist(self) -> Dict[str, Dict[str, float]]:
        """Render as a twist message payload."""
        return {
            'linear': {'x': self.linear, 'y': 0.0, 'z': 0.0},
            'angular': {'x': 0.0, 'y': 0.0, 'z': self.angular},
        }


def angular_speed(angle: Angle) -> float:
    """
    Turn rate for an angle; grows with the square of the angle.

    Returns:
        sign(angle) * angle^2 / 10000, or 0 for a stop request
    """
    if is_stop(angle):
        return 0.0

    return float(np.sign(angle)) * angle ** 2 / 10000.0


def linear_speed(angle: Angle) -> float:
    """
    Forward speed for an angle: full speed straight ahead, none at 90 degrees.
    """
    if is_stop(angle):
        return 0.0

    speed = 1.0 - map_range(abs(int(angle)), 0, 90, 0, 1)
    return float(np.clip(speed, 0.0, 1.0))


def compute_velocity(
    angle: Angle,
    config: DecisionConfig,
) -> VelocityCommand:
    """
    Build the velocity command for a decided angle.

    A positive image angle (line leaning right) yields a negative, i.e.
    clockwise, turn. The turn magnitude is clamped to ``angular_vel_cap``.
    """
    linear = linear_speed(angle)
    angular = -config.angular_vel_multiplier * angular_speed(angle)

    if abs(angular) > config.angular_vel_cap:
        angular = float(np.copysign(config.angular_vel_cap, angular))

    return VelocityCommand(linear=linear, angular=angular)
