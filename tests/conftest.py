"""
Test configuration for pytest.
"""

import pytest
import numpy as np

from vision_decision.config import DecisionConfig


def _line_image(
    height: int = 200,
    width: int = 200,
    angle_deg: float = 0.0,
    thickness: int = 20,
    bottom_center=None,
) -> np.ndarray:
    """Render a straight band of fixed horizontal width, row by row."""
    image = np.zeros((height, width), dtype=np.uint8)
    if bottom_center is None:
        bottom_center = width // 2

    slope = np.tan(np.radians(angle_deg))
    for row in range(height):
        center = bottom_center + (height - 1 - row) * slope
        left = int(round(center - thickness / 2))
        lo, hi = max(left, 0), min(left + thickness, width)
        if lo < hi:
            image[row, lo:hi] = 255
    return image


@pytest.fixture
def line_image():
    """Factory for single-line images."""
    return _line_image


@pytest.fixture
def blank_image():
    """All-background 200x200 image."""
    return np.zeros((200, 200), dtype=np.uint8)


@pytest.fixture
def vertical_line_image():
    """20px wide vertical line at the center of a 200x200 image (cols 90-109)."""
    return _line_image(angle_deg=0.0)


@pytest.fixture
def stop_line_image():
    """Full-width horizontal band on rows 100-119 of a 200x200 image."""
    image = np.zeros((200, 200), dtype=np.uint8)
    image[100:120, :] = 255
    return image


@pytest.fixture
def default_config():
    """Default decision configuration."""
    return DecisionConfig()


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
