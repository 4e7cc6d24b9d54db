"""
Vision Decision - Line-following heading and speed from filtered camera images
==============================================================================

Single-frame decision algorithm for a line-following ground vehicle.

This module provides:
- Noise-tolerant edge scanning of binary (pre-filtered) line images
- Dual-sided slope sampling with exponential smoothing
- Confidence scoring, stop-line detection and line coverage checks
- Escape maneuvers when the line cannot be trusted
- Mapping of the decided angle to capped linear/angular speed fractions

Modules:
    - core: Edge scanning, sampling, decision, velocity mapping, system wiring
    - processing: Synthetic binary frame generation
    - evaluation: Scenario benchmark
    - visualization: Decision overlay

Example Usage:
    >>> from vision_decision import VisionDecisionSystem, DecisionConfig
    >>>
    >>> system = VisionDecisionSystem(DecisionConfig(move_away_threshold=20.0))
    >>> decision, command = system.process_frame(filtered_image)
    >>> print(f"Angle: {decision.angle} deg, confidence {decision.confidence:.0f}")
    >>> print(f"linear.x={command.linear:.2f} angular.z={command.angular:.2f}")
"""

__version__ = "1.0.0"
__author__ = "Vision Decision Team"

from vision_decision.config import DecisionConfig, load_config
from vision_decision.core import (
    Decision,
    DecisionStatus,
    MotionSignal,
    ScanDirection,
    VelocityCommand,
    VisionDecisionSystem,
    compute_velocity,
    decide,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DecisionConfig",
    "load_config",
    # Core
    "decide",
    "compute_velocity",
    "VisionDecisionSystem",
    # Data classes
    "Decision",
    "DecisionStatus",
    "ScanDirection",
    "MotionSignal",
    "VelocityCommand",
]
