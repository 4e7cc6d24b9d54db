"""
Vision Decision System - Node-level wiring around the per-frame decision.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import numpy as np

from vision_decision.config import DecisionConfig
from vision_decision.core.decision import Decision, decide
from vision_decision.core.image import as_binary_image, from_buffer
from vision_decision.core.velocity import VelocityCommand, compute_velocity

logger = logging.getLogger(__name__)


class VisionDecisionSystem:
    """
    Turns filtered line images into velocity commands.

    Owns the configuration and the outbound hooks; the decision itself is
    stateless. Exactly one frame is processed per call.
    """

    def __init__(
        self,
        config: Optional[Union[DecisionConfig, Mapping]] = None,
        publisher: Optional[Callable[[Dict], None]] = None,
    ):
        """
        Initialize the system.

        Args:
            config: DecisionConfig or parameter mapping (defaults if None)
            publisher: Called with each twist payload from handle_image_message
        """
        if isinstance(config, DecisionConfig):
            self.config = config
        else:
            self.config = DecisionConfig.from_dict(config)

        self.publisher = publisher

        # System state
        self.frame_count = 0
        self.last_timestamp = 0.0

        # Performance tracking
        self.timing_history: List[Dict] = []
        self.max_timing_history = 100

        # Callbacks
        self.on_decision: Optional[Callable[[Decision], None]] = None
        self.on_command: Optional[Callable[[VelocityCommand], None]] = None
        self.on_fallback: Optional[Callable[[str], None]] = None

    def process_frame(
        self,
        image: np.ndarray,
        timestamp: Optional[float] = None,
    ) -> Tuple[Decision, VelocityCommand]:
        """
        Process a single filtered frame.

        Args:
            image: (H, W) filtered image, non-zero pixels are line
            timestamp: Frame timestamp (optional)

        Returns:
            Tuple of (decision, velocity_command)
        """
        if timestamp is None:
            timestamp = time.time()

        start_time = time.perf_counter()

        decision = decide(image, self.config)
        decision_time = time.perf_counter()

        command = compute_velocity(decision.angle, self.config)
        velocity_time = time.perf_counter()

        timing = {
            'frame_id': self.frame_count,
            'timestamp': timestamp,
            'decision_ms': (decision_time - start_time) * 1000,
            'velocity_ms': (velocity_time - decision_time) * 1000,
            'total_ms': (velocity_time - start_time) * 1000,
        }
        self._update_timing(timing)

        self.frame_count += 1
        self.last_timestamp = timestamp

        if self.on_decision is not None:
            self.on_decision(decision)

        if self.on_command is not None:
            self.on_command(command)

        if decision.fallback_active and self.on_fallback is not None:
            self.on_fallback(decision.fallback_reason)

        return decision, command

    def handle_image_message(
        self,
        height: int,
        width: int,
        data: Union[bytes, bytearray, Sequence[int]],
        timestamp: Optional[float] = None,
    ) -> VelocityCommand:
        """
        Subscriber callback for a raw filtered image message.

        Publishes the resulting twist payload if a publisher is set.
        """
        image = from_buffer(data, height, width)
        _, command = self.process_frame(image, timestamp)

        if self.publisher is not None:
            self.publisher(command.to_twist())

        return command

    def _update_timing(self, timing: Dict) -> None:
        """Update timing history."""
        self.timing_history.append(timing)
        if len(self.timing_history) > self.max_timing_history:
            self.timing_history.pop(0)

    def get_timing_stats(self) -> Dict:
        """Get timing statistics."""
        if not self.timing_history:
            return {}

        total_times = [t['total_ms'] for t in self.timing_history]
        decision_times = [t['decision_ms'] for t in self.timing_history]

        return {
            'mean_total_ms': float(np.mean(total_times)),
            'std_total_ms': float(np.std(total_times)),
            'p95_total_ms': float(np.percentile(total_times, 95)),
            'max_total_ms': max(total_times),
            'mean_decision_ms': float(np.mean(decision_times)),
            'mean_fps': 1000 / np.mean(total_times) if np.mean(total_times) > 0 else 0,
        }

    def process_video(
        self,
        video_path: Union[str, Path],
        output_callback: Optional[Callable] = None,
        max_frames: Optional[int] = None,
    ) -> List[Tuple[Decision, VelocityCommand]]:
        """
        Replay a recorded filtered-image video.

        Args:
            video_path: Path to input video
            output_callback: Called as (frame_idx, mask, decision, command)
            max_frames: Maximum frames to process

        Returns:
            List of (decision, velocity_command) for each frame
        """
        import cv2

        cap = cv2.VideoCapture(str(video_path))
        if not cap.isOpened():
            logger.error("Cannot open video: %s", video_path)
            raise ValueError(f"Cannot open video: {video_path}")

        fps = cap.get(cv2.CAP_PROP_FPS) or 30.0

        results = []
        frame_idx = 0

        try:
            while True:
                if max_frames is not None and frame_idx >= max_frames:
                    break

                ret, frame = cap.read()
                if not ret:
                    break

                if frame.ndim == 3:
                    frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
                mask = as_binary_image(frame)

                decision, command = self.process_frame(mask, frame_idx / fps)
                results.append((decision, command))

                if output_callback is not None:
                    output_callback(frame_idx, mask, decision, command)

                frame_idx += 1
        finally:
            cap.release()

        return results

    def reset(self) -> None:
        """Reset system state."""
        self.frame_count = 0
        self.last_timestamp = 0.0
        self.timing_history.clear()

    def get_status(self) -> Dict:
        """Get system status."""
        return {
            'frame_count': self.frame_count,
            'last_timestamp': self.last_timestamp,
            'config': self.config.to_dict(),
            'timing_stats': self.get_timing_stats(),
        }
