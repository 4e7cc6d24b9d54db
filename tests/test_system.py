"""
Integration tests for the vision decision system.
"""

import json
from unittest.mock import Mock

import cv2
import pytest
import numpy as np

from vision_decision import cli
from vision_decision.core.decision import DecisionStatus
from vision_decision.core.system import VisionDecisionSystem
from vision_decision.core.velocity import VelocityCommand
from vision_decision.evaluation.benchmark import BenchmarkConfig, DecisionBenchmark
from vision_decision.processing.synthetic import SyntheticFrameGenerator
from vision_decision.visualization.overlay import DecisionOverlay


class TestSystemIntegration:
    """Integration tests for the full system."""

    @pytest.fixture
    def system(self, default_config):
        """Create vision decision system."""
        return VisionDecisionSystem(default_config)

    def test_config_mapping(self):
        """Parameter mappings are accepted in place of a config."""
        system = VisionDecisionSystem({'vision_decision': {'angular_vel_cap': 0.3}})
        assert system.config.angular_vel_cap == 0.3

    def test_process_frame(self, system, line_image):
        """Single frame yields a decision and a command."""
        decision, command = system.process_frame(line_image(angle_deg=40.0, bottom_center=60))

        assert abs(decision.angle - 40) <= 2
        assert isinstance(command, VelocityCommand)
        assert command.angular < 0
        assert 0 < command.linear < 1
        assert system.frame_count == 1

    def test_callbacks(self, system, blank_image, line_image):
        """Callbacks fire per frame, fallback only when active."""
        system.on_decision = Mock()
        system.on_command = Mock()
        system.on_fallback = Mock()

        system.process_frame(line_image(angle_deg=40.0, bottom_center=60))
        system.on_fallback.assert_not_called()

        system.process_frame(blank_image)

        assert system.on_decision.call_count == 2
        assert system.on_command.call_count == 2
        system.on_fallback.assert_called_once()
        assert system.on_fallback.call_args[0][0]

    def test_handle_image_message(self, default_config, stop_line_image):
        """Raw messages are decoded, decided on and published."""
        publisher = Mock()
        system = VisionDecisionSystem(default_config, publisher=publisher)

        command = system.handle_image_message(200, 200, stop_line_image.tobytes())

        publisher.assert_called_once_with(command.to_twist())
        twist = publisher.call_args[0][0]
        assert twist['linear']['x'] == pytest.approx(0.5)
        assert twist['angular']['z'] == pytest.approx(-0.2025)

    def test_handle_bad_message(self, system):
        """Buffers that do not match the header are rejected."""
        with pytest.raises(ValueError):
            system.handle_image_message(10, 10, bytes(50))

    def test_timing_and_reset(self, system, blank_image):
        """Timing is tracked and cleared on reset."""
        assert system.get_timing_stats() == {}

        for i in range(3):
            system.process_frame(blank_image, timestamp=float(i))

        stats = system.get_timing_stats()
        assert stats['mean_total_ms'] > 0
        assert system.get_status()['frame_count'] == 3
        assert system.last_timestamp == 2.0

        system.reset()

        assert system.frame_count == 0
        assert system.get_timing_stats() == {}

    def test_timing_history_bounded(self, system):
        """Timing history keeps only the most recent frames."""
        system.max_timing_history = 5
        frame = np.zeros((20, 20), dtype=np.uint8)

        for _ in range(8):
            system.process_frame(frame)

        assert len(system.timing_history) == 5
        assert system.timing_history[0]['frame_id'] == 3

    def test_status_config(self, system):
        """Status reports the active configuration."""
        status = system.get_status()
        assert status['config']['move_away_threshold'] == 25.0

    def test_process_video_missing(self, system, tmp_path):
        """Unreadable videos raise."""
        with pytest.raises(ValueError):
            system.process_video(tmp_path / 'missing.avi')

    def test_process_video(self, system, tmp_path):
        """Recorded frames are replayed in order."""
        generator = SyntheticFrameGenerator(height=120, width=160)
        path = tmp_path / 'run.avi'

        writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*'MJPG'), 10.0, (160, 120))
        if not writer.isOpened():
            pytest.skip("No video encoder available")

        for angle in (0.0, 20.0, -20.0, 0.0):
            frame = generator.line(angle)
            writer.write(cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR))
        writer.release()

        callback = Mock()
        results = system.process_video(path, output_callback=callback, max_frames=3)

        assert len(results) == 3
        assert callback.call_count == 3
        frame_idx, mask, decision, command = callback.call_args[0]
        assert frame_idx == 2
        assert mask.shape == (120, 160)
        assert mask.dtype == bool


class TestSyntheticFrames:
    """Tests for the synthetic frame generator."""

    def test_blank(self):
        generator = SyntheticFrameGenerator(height=40, width=60)
        frame = generator.blank()

        assert frame.shape == (40, 60)
        assert not frame.any()

    def test_line_starts_at_bottom(self):
        """Lines start at the bottom row around the requested column."""
        generator = SyntheticFrameGenerator()
        frame = generator.line(0.0, bottom_center=100)

        columns = np.flatnonzero(frame[-1])
        assert columns.min() <= 100 <= columns.max()

    def test_stop_line_detected(self, default_config):
        """Generated stop lines trip the perpendicular guard."""
        generator = SyntheticFrameGenerator()
        decision = VisionDecisionSystem(default_config).process_frame(generator.stop_line())[0]

        assert decision.stop_line_detected
        assert decision.status == DecisionStatus.STOP_LINE

    def test_speckle_is_reproducible(self):
        """Seeded generators scatter identical noise without touching the input."""
        first = SyntheticFrameGenerator(seed=3)
        second = SyntheticFrameGenerator(seed=3)
        base = first.blank()

        noisy = first.add_speckle(base, count=20)

        assert not base.any()
        assert noisy.any()
        np.testing.assert_array_equal(noisy, second.add_speckle(second.blank(), count=20))


class TestOverlay:
    """Tests for the decision overlay."""

    def test_draw(self, line_image, default_config):
        """Overlay is a BGR copy of the frame."""
        image = line_image(angle_deg=40.0, bottom_center=60)
        before = image.copy()
        decision, command = VisionDecisionSystem(default_config).process_frame(image)

        vis = DecisionOverlay().draw(image, decision, command)

        assert vis.shape == (200, 200, 3)
        assert vis.dtype == np.uint8
        np.testing.assert_array_equal(image, before)

    def test_draw_without_info(self, blank_image, default_config):
        """Elements can be switched off."""
        decision, _ = VisionDecisionSystem(default_config).process_frame(blank_image)
        vis = DecisionOverlay(show_anchors=False, show_heading=False, show_info=False).draw(
            blank_image, decision
        )
        assert not vis.any()


class TestBenchmark:
    """Tests for the scenario benchmark."""

    def test_all_scenarios_pass(self, tmp_path):
        """Default scenarios pass and results are saved."""
        benchmark = DecisionBenchmark(BenchmarkConfig(warmup_iterations=0, timing_iterations=1))
        results = benchmark.run(output_dir=tmp_path, verbose=False)

        assert results['aggregate'].passed, results['aggregate'].failures

        with open(tmp_path / 'benchmark_results.json') as f:
            saved = json.load(f)
        assert set(saved) == set(results)

    def test_unknown_scenario(self):
        """Unknown scenario names are rejected."""
        benchmark = DecisionBenchmark(BenchmarkConfig(scenarios=['fog']))
        with pytest.raises(ValueError):
            benchmark.run(verbose=False)


class TestCli:
    """Tests for the command line interface."""

    @pytest.fixture
    def image_path(self, tmp_path, line_image):
        path = tmp_path / 'frame.png'
        cv2.imwrite(str(path), line_image(angle_deg=40.0, bottom_center=60))
        return path

    def test_no_command(self):
        """Missing command prints help and exits."""
        with pytest.raises(SystemExit):
            cli.main([])

    def test_decide(self, image_path, capsys):
        """Decisions are printed per image."""
        cli.main(['decide', str(image_path)])

        out = capsys.readouterr().out
        assert 'frame.png' in out
        assert 'status=valid' in out

    def test_decide_overlay(self, image_path, tmp_path):
        """Overlays are written next to the requested directory."""
        overlay_dir = tmp_path / 'overlays'
        cli.main(['decide', str(image_path), '--save-overlay', str(overlay_dir)])

        assert (overlay_dir / 'frame_overlay.png').exists()

    def test_decide_missing_image(self, tmp_path):
        """Unreadable images raise."""
        with pytest.raises(FileNotFoundError):
            cli.main(['decide', str(tmp_path / 'missing.png')])

    @pytest.mark.slow
    def test_benchmark(self, tmp_path, capsys):
        """Benchmark command reports and saves results."""
        cli.main(['benchmark', '--iterations', '2', '--output', str(tmp_path)])

        assert 'All scenarios passed' in capsys.readouterr().out
        assert (tmp_path / 'benchmark_results.json').exists()
