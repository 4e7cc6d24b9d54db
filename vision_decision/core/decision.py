"""
Decision Aggregation - Picks a heading and confidence from both scan sides.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from vision_decision.config import DecisionConfig
from vision_decision.core.guards import escape_angle, has_enough_line, is_perpendicular
from vision_decision.core.image import ScanDirection, as_binary_image, count_line_pixels
from vision_decision.core.sampler import LineSample, compute_confidence, sample_angle

logger = logging.getLogger(__name__)


class DecisionStatus(Enum):
    """Which rule produced the final decision."""
    VALID = "valid"
    MOVE_AWAY = "move_away"
    STOP_LINE = "stop_line"
    LOW_COVERAGE = "low_coverage"


@dataclass(frozen=True)
class ScanResult:
    """Line sample from one side together with its confidence."""
    sample: LineSample
    confidence: float = 0.0

    @property
    def angle(self) -> int:
        return self.sample.angle

    @property
    def direction(self) -> ScanDirection:
        return self.sample.direction


@dataclass(frozen=True)
class Decision:
    """
    Recommended heading for one frame.

    ``angle`` is in integer degrees within [-90, 90], positive when the
    vehicle should turn right. ``confidence`` is within [0, 100]; a
    detected stop line forces it to 0 while leaving the angle untouched.
    """
    angle: int
    confidence: float

    status: DecisionStatus = DecisionStatus.VALID
    fallback_active: bool = False
    fallback_reason: str = ""
    stop_line_detected: bool = False

    # Diagnostics
    line_pixels: int = 0
    selected: Optional[ScanResult] = None
    left: Optional[ScanResult] = None
    right: Optional[ScanResult] = None

    def as_tuple(self) -> Tuple[int, float]:
        return self.angle, self.confidence


def _scan(
    image: np.ndarray,
    direction: ScanDirection,
    config: DecisionConfig,
) -> ScanResult:
    height = image.shape[0]
    sample = sample_angle(
        image,
        direction,
        max_samples=height * config.percent_of_image_sampled,
        rolling_average_constant=config.rolling_average_constant,
    )
    confidence = compute_confidence(
        sample.valid_samples,
        height,
        config.percent_of_samples_needed,
    )
    return ScanResult(sample=sample, confidence=confidence)


def decide(
    image: np.ndarray,
    config: Optional[DecisionConfig] = None,
) -> Decision:
    """
    Decide the heading for a filtered line image.

    Both scan sides are sampled and the more confident one wins (ties go
    to the left-to-right scan). The measured angle is replaced by an
    escape angle when it is within ``move_away_threshold`` of straight
    ahead or when too little line is visible. A stop line zeroes the
    confidence.

    Args:
        image: (H, W) filtered image, non-zero pixels are line
        config: Decision configuration (defaults if None)

    Returns:
        Decision with angle and confidence
    """
    config = config or DecisionConfig()
    image = as_binary_image(image)

    line_pixels = count_line_pixels(image)

    left = _scan(image, ScanDirection.LEFT_TO_RIGHT, config)
    right = _scan(image, ScanDirection.RIGHT_TO_LEFT, config)

    selected = right if right.confidence > left.confidence else left
    angle = selected.angle
    confidence = selected.confidence

    status = DecisionStatus.VALID
    fallback_active = False
    fallback_reason = ""

    if abs(angle) <= config.move_away_threshold:
        measured = angle
        angle = escape_angle(image)
        status = DecisionStatus.MOVE_AWAY
        fallback_active = True
        fallback_reason = (
            f"Angle {measured} within move-away threshold "
            f"{config.move_away_threshold:g}"
        )
        logger.debug("%s, escaping at %d", fallback_reason, angle)

    stop_line = is_perpendicular(image)
    if stop_line:
        confidence = 0.0
        status = DecisionStatus.STOP_LINE
        logger.debug("Perpendicular line detected, confidence forced to 0")

    if not has_enough_line(image, config.percent_of_white_needed):
        angle = escape_angle(image)
        status = DecisionStatus.LOW_COVERAGE
        fallback_active = True
        fallback_reason = (
            f"Line coverage {line_pixels}px below "
            f"{config.percent_of_white_needed:.1%} of image"
        )
        logger.debug("%s, escaping at %d", fallback_reason, angle)

    return Decision(
        angle=angle,
        confidence=confidence,
        status=status,
        fallback_active=fallback_active,
        fallback_reason=fallback_reason,
        stop_line_detected=stop_line,
        line_pixels=line_pixels,
        selected=selected,
        left=left,
        right=right,
    )
