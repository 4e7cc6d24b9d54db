"""
Unit tests for edge scanning and midpoint location.
"""

import pytest
import numpy as np

from vision_decision.core.edges import find_edge, find_midpoint, find_vertical_edge
from vision_decision.core.image import (
    NOISE_MAX,
    ScanDirection,
    as_binary_image,
    count_line_pixels,
    from_buffer,
)


def row_image(*segments, width=100):
    """Single-row mask with line pixels on the given [start, stop) segments."""
    image = np.zeros((1, width), dtype=np.uint8)
    for start, stop in segments:
        image[0, start:stop] = 255
    return as_binary_image(image)


class TestBinaryImage:
    """Tests for image helpers."""

    def test_mask_from_uint8(self):
        """Non-zero pixels become line."""
        image = np.array([[0, 1, 255], [0, 0, 7]], dtype=np.uint8)
        mask = as_binary_image(image)

        assert mask.dtype == bool
        assert mask.tolist() == [[False, True, True], [False, False, True]]

    def test_mask_is_read_only(self):
        """Mask cannot be modified during a decision."""
        mask = as_binary_image(np.zeros((4, 4), dtype=np.uint8))

        with pytest.raises(ValueError):
            mask[0, 0] = True

    def test_single_channel_squeezed(self):
        """(H, W, 1) frames are accepted."""
        mask = as_binary_image(np.ones((3, 5, 1), dtype=np.uint8))
        assert mask.shape == (3, 5)

    def test_rejects_color_image(self):
        """Multi-channel frames are rejected."""
        with pytest.raises(ValueError):
            as_binary_image(np.zeros((3, 5, 3), dtype=np.uint8))

    def test_from_buffer(self):
        """Row-major buffer is reshaped to height x width."""
        mask = from_buffer(bytes([0, 1, 0, 0, 0, 9]), height=2, width=3)

        assert mask.shape == (2, 3)
        assert mask[0, 1]
        assert mask[1, 2]
        assert count_line_pixels(mask) == 2

    def test_from_buffer_size_mismatch(self):
        """Buffer length must match the declared size."""
        with pytest.raises(ValueError):
            from_buffer(bytes(5), height=2, width=3)

    def test_scan_direction(self):
        """Directions define start column and step."""
        assert ScanDirection.LEFT_TO_RIGHT.start_column(50) == 0
        assert ScanDirection.LEFT_TO_RIGHT.increment == 1
        assert ScanDirection.RIGHT_TO_LEFT.start_column(50) == 49
        assert ScanDirection.RIGHT_TO_LEFT.increment == -1


class TestFindEdge:
    """Tests for the noise-tolerant row scan."""

    def test_entering_edge(self):
        """Start of a wide line is found."""
        image = row_image((30, 50))
        assert find_edge(image, 0, 1, 0, entering=True) == 30

    def test_entering_edge_right_to_left(self):
        """Scanning from the right finds the line's right edge."""
        image = row_image((30, 50))
        assert find_edge(image, 99, -1, 0, entering=True) == 49

    def test_exiting_edge(self):
        """Background after the line is found from the entering edge."""
        image = row_image((30, 50))
        assert find_edge(image, 30, 1, 0, entering=False) == 50
        assert find_edge(image, 49, -1, 0, entering=False) == 29

    def test_short_run_is_noise(self):
        """A run shorter than NOISE_MAX is not an edge."""
        image = row_image((20, 20 + NOISE_MAX - 1))
        assert find_edge(image, 0, 1, 0, entering=True) is None

    def test_run_of_noise_max_is_edge(self):
        """Exactly NOISE_MAX pixels confirm an edge."""
        image = row_image((20, 20 + NOISE_MAX))
        assert find_edge(image, 0, 1, 0, entering=True) == 20

    def test_noise_then_line(self):
        """Noise separated by a long gap is discarded before the real line."""
        image = row_image((20, 29), (39, 51))
        assert find_edge(image, 0, 1, 0, entering=True) == 39

    def test_short_gap_keeps_candidate(self):
        """Gaps shorter than NOISE_MAX do not reset the candidate."""
        image = row_image((10, 15), (18, 23))
        assert find_edge(image, 0, 1, 0, entering=True) == 10

    def test_line_to_border_has_no_exit(self):
        """A line running off the image has no exiting edge."""
        image = row_image((80, 100))
        assert find_edge(image, 80, 1, 0, entering=False) is None

    def test_invalid_start(self):
        """Missing or out-of-bounds start columns find nothing."""
        image = row_image((30, 50))
        assert find_edge(image, None, 1, 0) is None
        assert find_edge(image, -1, 1, 0) is None
        assert find_edge(image, 100, -1, 0) is None

    def test_empty_row(self):
        """All-background row has no edge."""
        assert find_edge(row_image(), 0, 1, 0) is None


class TestFindMidpoint:
    """Tests for line midpoint location."""

    def test_left_to_right(self):
        """Midpoint is the average of entering and exiting edges."""
        image = row_image((30, 50))
        assert find_midpoint(image, 0, 0, ScanDirection.LEFT_TO_RIGHT) == 40

    def test_right_to_left(self):
        """Right-to-left uses the right edge and the background left of the line."""
        image = row_image((30, 50))
        assert find_midpoint(image, 99, 0, ScanDirection.RIGHT_TO_LEFT) == 39

    def test_missing_exit(self):
        """Missing exiting edge yields None, never column 0."""
        image = row_image((80, 100))
        assert find_midpoint(image, 0, 0, ScanDirection.LEFT_TO_RIGHT) is None

    def test_no_line(self):
        """No line yields None."""
        assert find_midpoint(row_image(), 0, 0, ScanDirection.LEFT_TO_RIGHT) is None


class TestFindVerticalEdge:
    """Tests for the bottom-up column scan."""

    def test_lowest_run(self):
        """Bottom row of the lowest confirmed run is returned."""
        image = np.zeros((100, 5), dtype=np.uint8)
        image[50:81, 2] = 255
        assert find_vertical_edge(as_binary_image(image), 2) == 80

    def test_short_run_is_noise(self):
        """Runs shorter than NOISE_MAX are ignored."""
        image = np.zeros((100, 5), dtype=np.uint8)
        image[70:79, 2] = 255
        image[20:40, 2] = 255
        assert find_vertical_edge(as_binary_image(image), 2) == 39

    def test_empty_column(self):
        """Empty column yields None."""
        image = as_binary_image(np.zeros((100, 5), dtype=np.uint8))
        assert find_vertical_edge(image, 0) is None
