"""
Safety Guards - Stop-line detection, line coverage and escape angle selection.
"""

import numpy as np

from vision_decision.core.edges import find_vertical_edge
from vision_decision.core.image import count_line_pixels

# Angle magnitude used to turn away from the line when the measured
# angle cannot be trusted.
ESCAPE_ANGLE_DEG = 45


def is_perpendicular(image: np.ndarray) -> bool:
    """
    Check for a wide, level line crossing the view (a stop line).

    The first column with a confirmed vertical edge is found from each
    side. The line is perpendicular when both edges sit within a tenth of
    the image height of each other and more than a tenth of the image
    width apart.
    """
    height, width = image.shape

    left_row = right_row = None
    i = j = 0

    for i in range(width):
        left_row = find_vertical_edge(image, i)
        if left_row is not None:
            break

    for j in range(width - 1, 0, -1):
        right_row = find_vertical_edge(image, j)
        if right_row is not None:
            break

    if left_row is None or right_row is None:
        return False

    if left_row == 0 and right_row == 0:
        return False

    return abs(right_row - left_row) < height // 10 and abs(j - i) > width // 10


def has_enough_line(image: np.ndarray, percent_of_white_needed: float) -> bool:
    """Check that line pixels cover at least the required fraction of the image."""
    if image.size == 0:
        return False

    return count_line_pixels(image) >= image.size * percent_of_white_needed


def line_pixel_balance(image: np.ndarray) -> int:
    """
    Return right-half minus left-half line pixel count.

    The middle column ``width // 2`` belongs to the left half.
    """
    split = image.shape[1] // 2 + 1
    left_count = count_line_pixels(image[:, :split])
    right_count = count_line_pixels(image[:, split:])
    return right_count - left_count


def escape_angle(image: np.ndarray) -> int:
    """
    Pick a fixed angle that steers away from the side with more line.

    Returns:
        +45 (turn right) when the left half holds more line, else -45
    """
    if line_pixel_balance(image) < 0:
        return ESCAPE_ANGLE_DEG
    return -ESCAPE_ANGLE_DEG
