"""
Visualization module - Decision overlay.
"""

from vision_decision.visualization.overlay import DecisionOverlay

__all__ = [
    "DecisionOverlay",
]
