"""
Edge Scanning - Noise-tolerant edge search along image rows and columns.
"""

from typing import Iterable, Optional
import numpy as np

from vision_decision.core.image import NOISE_MAX, ScanDirection


def _confirm_run(matches: Iterable[bool], positions: Iterable[int]) -> Optional[int]:
    """
    Return the position where a run of NOISE_MAX matching pixels starts.

    A candidate is latched on the first matching pixel and survives gaps
    shorter than NOISE_MAX. It is dropped once NOISE_MAX consecutive
    non-matching pixels are seen.
    """
    candidate = None
    matched = 0
    missed = 0

    for is_match, position in zip(matches, positions):
        if is_match:
            missed = 0
            if candidate is None:
                candidate = position

            matched += 1
            if matched == NOISE_MAX:
                return candidate
        else:
            missed += 1
            if missed >= NOISE_MAX:
                matched = 0
                candidate = None

    return None


def find_edge(
    image: np.ndarray,
    start_col: Optional[int],
    increment: int,
    row: int,
    entering: bool = True,
) -> Optional[int]:
    """
    Find the first confirmed edge along a row.

    Args:
        image: (H, W) boolean line mask
        start_col: Column to start scanning from
        increment: Column step (+1 or -1)
        row: Row to scan
        entering: Look for line pixels if True, background pixels if False

    Returns:
        Column of the edge pixel, or None if no edge is confirmed
    """
    width = image.shape[1]

    if start_col is None or not 0 <= start_col < width:
        return None

    if increment > 0:
        pixels = image[row, start_col:]
        columns = range(start_col, width)
    else:
        pixels = image[row, start_col::-1]
        columns = range(start_col, -1, -1)

    if not entering:
        pixels = ~pixels

    return _confirm_run(pixels.tolist(), columns)


def find_midpoint(
    image: np.ndarray,
    start_col: int,
    row: int,
    direction: ScanDirection,
) -> Optional[int]:
    """
    Find the horizontal middle of the line band in a row.

    The entering edge is searched from ``start_col`` and the exiting edge
    from the entering edge, both in ``direction``.

    Returns:
        Integer average of the two edge columns, or None if either is missing
    """
    increment = direction.increment

    entering = find_edge(image, start_col, increment, row, entering=True)
    if entering is None:
        return None

    exiting = find_edge(image, entering, increment, row, entering=False)
    if exiting is None:
        return None

    return (entering + exiting) // 2


def find_vertical_edge(image: np.ndarray, column: int) -> Optional[int]:
    """
    Find the first confirmed line pixel in a column, scanning bottom-up.

    Returns:
        Row of the edge pixel, or None if no edge is confirmed
    """
    height = image.shape[0]
    rows = range(height - 1, -1, -1)
    return _confirm_run(image[::-1, column].tolist(), rows)
