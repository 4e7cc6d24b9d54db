"""
Decision Overlay Visualization.
"""

from typing import Optional, Tuple
import numpy as np
import cv2

from vision_decision.core.decision import Decision, ScanResult
from vision_decision.core.image import ScanDirection
from vision_decision.core.velocity import VelocityCommand


class DecisionOverlay:
    """
    Visualize a frame decision on top of the filtered image.
    """

    # Color palette (BGR)
    COLORS = {
        'line': (200, 200, 200),        # Light gray
        'left_anchor': (0, 255, 0),     # Green
        'right_anchor': (255, 0, 0),    # Blue
        'heading': (0, 255, 255),       # Yellow
        'warning': (0, 0, 255),         # Red
        'text': (255, 255, 255),        # White
        'background': (0, 0, 0),        # Black
    }

    def __init__(
        self,
        show_anchors: bool = True,
        show_heading: bool = True,
        show_info: bool = True,
        line_thickness: int = 2,
        point_radius: int = 5,
        heading_length: float = 0.3,
    ):
        """
        Initialize overlay visualizer.

        Args:
            show_anchors: Mark the anchor point of each scan side
            show_heading: Draw the decided heading arrow
            show_info: Show info text
            line_thickness: Line thickness in pixels
            point_radius: Anchor marker radius
            heading_length: Arrow length as a fraction of the image height
        """
        self.show_anchors = show_anchors
        self.show_heading = show_heading
        self.show_info = show_info
        self.line_thickness = line_thickness
        self.point_radius = point_radius
        self.heading_length = heading_length

    def draw(
        self,
        image: np.ndarray,
        decision: Decision,
        command: Optional[VelocityCommand] = None,
    ) -> np.ndarray:
        """
        Draw decision overlay on a frame.

        Args:
            image: Filtered (H, W) image or BGR (H, W, 3) frame
            decision: Frame decision
            command: Velocity command (optional)

        Returns:
            BGR image with overlay
        """
        output = self._to_bgr(image)

        if self.show_anchors:
            for scan in (decision.left, decision.right):
                if scan is not None:
                    self._draw_anchor(output, scan)

        if self.show_heading:
            self._draw_heading(output, decision)

        if self.show_info:
            self._draw_info(output, decision, command)

        return output

    def _to_bgr(self, image: np.ndarray) -> np.ndarray:
        """Copy the frame into a BGR canvas."""
        image = np.asarray(image)

        if image.ndim == 3 and image.shape[2] == 3:
            return image.copy()

        if image.ndim == 3:
            image = image[:, :, 0]

        canvas = np.zeros((*image.shape, 3), dtype=np.uint8)
        canvas[image != 0] = self.COLORS['line']
        return canvas

    def _draw_anchor(self, image: np.ndarray, scan: ScanResult) -> None:
        """Mark a scan side's anchor point."""
        if scan.sample.anchor is None:
            return

        if scan.direction is ScanDirection.LEFT_TO_RIGHT:
            color = self.COLORS['left_anchor']
        else:
            color = self.COLORS['right_anchor']

        cv2.circle(
            image,
            scan.sample.anchor,
            self.point_radius,
            color,
            -1,
            lineType=cv2.LINE_AA,
        )

    def _draw_heading(self, image: np.ndarray, decision: Decision) -> None:
        """Draw the decided heading from the bottom center."""
        h, w = image.shape[:2]
        if h == 0 or w == 0:
            return

        origin = (w // 2, h - 1)
        length = self.heading_length * h
        angle = np.radians(decision.angle)
        tip = (
            int(origin[0] + length * np.sin(angle)),
            int(origin[1] - length * np.cos(angle)),
        )

        color = self.COLORS['warning'] if decision.fallback_active else self.COLORS['heading']
        cv2.arrowedLine(
            image,
            origin,
            tip,
            color,
            self.line_thickness,
            tipLength=0.2,
        )

    def _draw_info(
        self,
        image: np.ndarray,
        decision: Decision,
        command: Optional[VelocityCommand],
    ) -> None:
        """Draw info text in the top-left corner."""
        lines = [
            f"Angle: {decision.angle} deg",
            f"Confidence: {decision.confidence:.0f}",
            f"Status: {decision.status.value}",
        ]

        if command is not None:
            lines.append(f"v={command.linear:.2f} w={command.angular:.2f}")

        if decision.stop_line_detected:
            lines.append("STOP LINE")

        self._put_lines(image, lines, origin=(10, 20))

    def _put_lines(
        self,
        image: np.ndarray,
        lines,
        origin: Tuple[int, int],
        line_height: int = 18,
    ) -> None:
        for i, line in enumerate(lines):
            position = (origin[0], origin[1] + i * line_height)
            # Outline keeps text readable over line pixels
            cv2.putText(image, line, position, cv2.FONT_HERSHEY_SIMPLEX,
                        0.45, self.COLORS['background'], 3, cv2.LINE_AA)
            cv2.putText(image, line, position, cv2.FONT_HERSHEY_SIMPLEX,
                        0.45, self.COLORS['text'], 1, cv2.LINE_AA)
