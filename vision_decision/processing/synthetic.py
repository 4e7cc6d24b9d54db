"""
Synthetic Frames - Binary line images for testing and benchmarking the decision.
"""

from typing import Optional, Tuple
import numpy as np
import cv2


LINE_VALUE = 255


class SyntheticFrameGenerator:
    """
    Renders filtered-image look-alikes: single lines, stop lines and speckle noise.

    Angles follow the decision convention: 0 is straight up the image,
    positive leans right going up.
    """

    def __init__(
        self,
        height: int = 240,
        width: int = 320,
        seed: Optional[int] = None,
    ):
        """
        Initialize generator.

        Args:
            height: Frame height in pixels
            width: Frame width in pixels
            seed: Random seed for noise
        """
        self.height = height
        self.width = width
        self.rng = np.random.default_rng(seed)

    def blank(self) -> np.ndarray:
        """All-background frame."""
        return np.zeros((self.height, self.width), dtype=np.uint8)

    def line(
        self,
        angle_deg: float = 0.0,
        thickness: int = 20,
        bottom_center: Optional[int] = None,
        frame: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Draw a straight line starting at the bottom edge.

        Args:
            angle_deg: Line angle from vertical, positive leans right
            thickness: Line width in pixels
            bottom_center: Column of the line at the bottom row
            frame: Frame to draw into (a blank one if None)

        Returns:
            Frame with the line drawn
        """
        frame = self.blank() if frame is None else frame
        if bottom_center is None:
            bottom_center = self.width // 2

        bottom = self.height - 1
        length = max(self.height, self.width) * 2
        dx = np.sin(np.radians(angle_deg)) * length
        dy = np.cos(np.radians(angle_deg)) * length

        start = (int(bottom_center), bottom)
        end = (int(round(bottom_center + dx)), int(round(bottom - dy)))

        cv2.line(frame, start, end, LINE_VALUE, thickness=thickness)
        return frame

    def stop_line(
        self,
        row: Optional[int] = None,
        thickness: int = 20,
        span: Tuple[float, float] = (0.0, 1.0),
        frame: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Draw a horizontal band across the frame.

        Args:
            row: Top row of the band (middle of the frame if None)
            thickness: Band height in pixels
            span: Horizontal extent as fractions of the width
            frame: Frame to draw into (a blank one if None)
        """
        frame = self.blank() if frame is None else frame
        if row is None:
            row = self.height // 2

        x0 = int(span[0] * (self.width - 1))
        x1 = int(span[1] * (self.width - 1))

        cv2.rectangle(
            frame,
            (x0, row),
            (x1, row + thickness - 1),
            LINE_VALUE,
            thickness=-1,
        )
        return frame

    def add_speckle(
        self,
        frame: np.ndarray,
        count: int = 50,
        max_size: int = 4,
    ) -> np.ndarray:
        """
        Scatter small square blobs over the frame.

        Blobs no larger than ``max_size`` stay below the edge noise threshold
        when ``max_size`` is under NOISE_MAX.
        """
        frame = frame.copy()
        for _ in range(count):
            size = int(self.rng.integers(1, max_size + 1))
            x = int(self.rng.integers(0, max(self.width - size, 1)))
            y = int(self.rng.integers(0, max(self.height - size, 1)))
            frame[y:y + size, x:x + size] = LINE_VALUE
        return frame
