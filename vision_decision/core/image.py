"""
Binary Image Helpers - Representation of filtered line images and scan directions.
"""

from enum import Enum
from typing import Sequence, Union
import numpy as np


# Maximum length of a pixel run that is still treated as noise.
# An edge is confirmed once NOISE_MAX consecutive matching pixels are seen,
# and a candidate is dropped after NOISE_MAX consecutive non-matching pixels.
NOISE_MAX = 10


class ScanDirection(Enum):
    """Horizontal direction used when scanning image rows."""
    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"

    @property
    def increment(self) -> int:
        """Column step for this direction."""
        return 1 if self is ScanDirection.LEFT_TO_RIGHT else -1

    def start_column(self, width: int) -> int:
        """Anchor column a scan in this direction starts from."""
        return 0 if self is ScanDirection.LEFT_TO_RIGHT else width - 1


def as_binary_image(image: np.ndarray) -> np.ndarray:
    """
    Convert a filtered frame into a read-only boolean line mask.

    Args:
        image: (H, W) or (H, W, 1) array, non-zero pixels are line

    Returns:
        (H, W) boolean array
    """
    image = np.asarray(image)

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.ndim != 2:
        raise ValueError(
            f"Expected a single-channel 2-D image, got shape {image.shape}"
        )

    mask = image != 0
    mask.setflags(write=False)
    return mask


def from_buffer(
    data: Union[bytes, bytearray, Sequence[int], np.ndarray],
    height: int,
    width: int,
) -> np.ndarray:
    """
    Build a binary image from a row-major byte buffer.

    Args:
        data: Row-major pixel buffer of length height * width
        height: Image height in pixels
        width: Image width in pixels

    Returns:
        (H, W) boolean line mask
    """
    if height < 0 or width < 0:
        raise ValueError(f"Invalid image size: {height}x{width}")

    if isinstance(data, (bytes, bytearray)):
        pixels = np.frombuffer(data, dtype=np.uint8)
    else:
        pixels = np.asarray(data).ravel()

    if pixels.size != height * width:
        raise ValueError(
            f"Buffer holds {pixels.size} pixels, expected {height * width} "
            f"for a {height}x{width} image"
        )

    return as_binary_image(pixels.reshape(height, width))


def count_line_pixels(image: np.ndarray) -> int:
    """Count all line-colored pixels in the image."""
    return int(np.count_nonzero(image))
