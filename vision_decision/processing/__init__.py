"""
Processing module - Synthetic binary frame generation.
"""

from vision_decision.processing.synthetic import SyntheticFrameGenerator

__all__ = [
    "SyntheticFrameGenerator",
]
