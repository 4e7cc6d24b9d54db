"""
Line Sampling - Smoothed line angle estimation and confidence scoring.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from vision_decision.core.edges import find_edge, find_midpoint
from vision_decision.core.image import ScanDirection

logger = logging.getLogger(__name__)

# Samples implying a jump of this many degrees or more are rejected.
MAX_ANGLE_JUMP_DEG = 90.0


@dataclass(frozen=True)
class LineSample:
    """
    Result of sampling the line from one side of the image.

    ``angle`` is in integer degrees, positive when the line leans right
    going up the image. A sample with no anchor has angle 0 and zero
    valid samples and must be read as "no line".
    """
    direction: ScanDirection
    angle: int = 0
    valid_samples: int = 0

    # Lowest line midpoint as (column, row), None if no line was found
    anchor: Optional[Tuple[int, int]] = None

    @property
    def has_line(self) -> bool:
        return self.anchor is not None and self.valid_samples > 0


def _find_anchor(
    image: np.ndarray,
    direction: ScanDirection,
) -> Tuple[Optional[int], Optional[int]]:
    """Return (bottom_row, midpoint) of the lowest row with an entering edge."""
    height, width = image.shape
    start_col = direction.start_column(width)

    for row in range(height - 1, 0, -1):
        edge = find_edge(image, start_col, direction.increment, row, entering=True)
        if edge is not None:
            return row, find_midpoint(image, start_col, row, direction)

    return None, None


def sample_angle(
    image: np.ndarray,
    direction: ScanDirection,
    max_samples: float,
    rolling_average_constant: float = 0.25,
) -> LineSample:
    """
    Estimate the angle of the line seen from one side of the image.

    Midpoints of the line are sampled on the rows above the anchor point
    (the lowest row with a confirmed line edge). Each midpoint's slope to
    the anchor is folded into an exponential rolling average.

    Args:
        image: (H, W) boolean line mask
        direction: Side the rows are scanned from
        max_samples: Sample budget; rows ``bottom - 1`` to
            ``bottom - ceil(max_samples) + 1`` are visited
        rolling_average_constant: Weight of each new sample

    Returns:
        LineSample with the rounded angle in degrees
    """
    bottom_row, x1 = _find_anchor(image, direction)

    if bottom_row is None or x1 is None:
        return LineSample(direction=direction)

    start_col = direction.start_column(image.shape[1])
    alpha = rolling_average_constant

    current_angle = 0.0
    valid_samples = 0

    division = 1
    while division < max_samples and bottom_row - division > 0:
        y_compared = bottom_row - division
        x_compared = find_midpoint(image, start_col, y_compared, direction)
        division += 1

        if x_compared is None:
            continue

        slope = -(x_compared - x1) / (y_compared - bottom_row)
        found_angle = math.atan(slope)

        # Reject changes sharper than a right angle turn
        if abs(math.degrees(current_angle - found_angle)) < MAX_ANGLE_JUMP_DEG:
            current_angle = alpha * found_angle + (1 - alpha) * current_angle
            valid_samples += 1

        logger.debug(
            "%s curAngle: %.2f, x1: %d, bottomRow: %d, xCompared: %d, "
            "yCompared: %d, foundAngle: %.2f, valid: %d",
            direction.value, math.degrees(current_angle), x1, bottom_row,
            x_compared, y_compared, math.degrees(found_angle), valid_samples,
        )

    return LineSample(
        direction=direction,
        angle=int(round(math.degrees(current_angle))),
        valid_samples=valid_samples,
        anchor=(x1, bottom_row),
    )


def compute_confidence(
    valid_samples: float,
    height: int,
    percent_of_samples_needed: float,
) -> float:
    """
    Map a valid sample count to a confidence score in [0, 100].

    Args:
        valid_samples: Accepted samples from sample_angle
        height: Image height in pixels
        percent_of_samples_needed: Fraction of the height that gives
            full confidence

    Returns:
        Confidence score, 0 when no samples can be needed
    """
    samples_needed = height * percent_of_samples_needed

    if samples_needed <= 0:
        return 0.0

    valid_samples = min(max(valid_samples, 0), samples_needed)
    return map_range(valid_samples, 0, samples_needed, 0, 100)


def map_range(
    x: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """Linearly re-map a value from one range to another."""
    return (x - in_min) * (out_max - out_min) / (in_max - in_min) + out_min
