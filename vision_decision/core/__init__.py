"""
Core module - Line edge scanning, sampling, decision and velocity mapping.
"""

from vision_decision.core.decision import Decision, DecisionStatus, ScanResult, decide
from vision_decision.core.image import NOISE_MAX, ScanDirection, as_binary_image, from_buffer
from vision_decision.core.sampler import LineSample, compute_confidence, sample_angle
from vision_decision.core.system import VisionDecisionSystem
from vision_decision.core.velocity import (
    MotionSignal,
    VelocityCommand,
    angular_speed,
    compute_velocity,
    linear_speed,
)

__all__ = [
    "decide",
    "Decision",
    "DecisionStatus",
    "ScanResult",
    "NOISE_MAX",
    "ScanDirection",
    "as_binary_image",
    "from_buffer",
    "LineSample",
    "sample_angle",
    "compute_confidence",
    "VisionDecisionSystem",
    "MotionSignal",
    "VelocityCommand",
    "angular_speed",
    "linear_speed",
    "compute_velocity",
]
