"""
Vision Decision CLI - Command line interface for the line-following decision.
"""

import argparse
import logging
import sys
from pathlib import Path


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Vision Decision - heading and speed from filtered line images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decide on recorded filtered frames
  vision-decision decide frames/*.png --config configs/default.yaml

  # Replay a filtered-image video and save an overlay video
  vision-decision video --source run.mp4 --output run_overlay.mp4

  # Run the synthetic scenario benchmark
  vision-decision benchmark --iterations 50 --output outputs/bench
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Decide command
    decide_parser = subparsers.add_parser('decide', help='Decide on image files')
    decide_parser.add_argument('images', nargs='+', help='Filtered image files')
    decide_parser.add_argument('--config', type=str, default=None, help='Config file')
    decide_parser.add_argument('--save-overlay', type=str, default=None,
                               help='Directory for overlay images')
    decide_parser.add_argument('--verbose', action='store_true', help='Debug logging')

    # Video command
    video_parser = subparsers.add_parser('video', help='Replay a filtered-image video')
    video_parser.add_argument('--source', type=str, required=True, help='Input video')
    video_parser.add_argument('--config', type=str, default=None, help='Config file')
    video_parser.add_argument('--output', type=str, default=None, help='Overlay video path')
    video_parser.add_argument('--max-frames', type=int, default=None, help='Frame limit')
    video_parser.add_argument('--verbose', action='store_true', help='Debug logging')

    # Benchmark command
    bench_parser = subparsers.add_parser('benchmark', help='Run scenario benchmark')
    bench_parser.add_argument('--config', type=str, default=None, help='Config file')
    bench_parser.add_argument('--iterations', type=int, default=20, help='Iterations')
    bench_parser.add_argument('--output', type=str, default=None, help='Output dir')
    bench_parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Route to appropriate handler
    if args.command == 'decide':
        run_decide(args)

    elif args.command == 'video':
        run_video(args)

    elif args.command == 'benchmark':
        run_benchmark(args)


def run_decide(args):
    """Decide on individual image files."""
    import cv2
    from vision_decision.config import load_config
    from vision_decision.core.system import VisionDecisionSystem
    from vision_decision.visualization.overlay import DecisionOverlay

    system = VisionDecisionSystem(load_config(args.config))
    overlay = DecisionOverlay()

    overlay_dir = Path(args.save_overlay) if args.save_overlay else None
    if overlay_dir is not None:
        overlay_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for image_path in args.images:
        image = cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise FileNotFoundError(f"Cannot read image: {image_path}")

        decision, command = system.process_frame(image)
        results.append((decision, command))

        print(f"{image_path}: angle={decision.angle} "
              f"confidence={decision.confidence:.1f} "
              f"linear={command.linear:.3f} angular={command.angular:.3f} "
              f"status={decision.status.value}")

        if overlay_dir is not None:
            vis = overlay.draw(image, decision, command)
            cv2.imwrite(str(overlay_dir / f"{Path(image_path).stem}_overlay.png"), vis)

    return results


def run_video(args):
    """Replay a filtered-image video."""
    import cv2
    from vision_decision.config import load_config
    from vision_decision.core.system import VisionDecisionSystem
    from vision_decision.visualization.overlay import DecisionOverlay

    system = VisionDecisionSystem(load_config(args.config))
    overlay = DecisionOverlay()

    writer = None

    def write_frame(frame_idx, mask, decision, command):
        nonlocal writer
        vis = overlay.draw(mask, decision, command)
        if writer is None:
            h, w = vis.shape[:2]
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            writer = cv2.VideoWriter(args.output, fourcc, 30.0, (w, h))
        writer.write(vis)

    try:
        results = system.process_video(
            args.source,
            output_callback=write_frame if args.output else None,
            max_frames=args.max_frames,
        )
    finally:
        if writer is not None:
            writer.release()

    stops = sum(1 for decision, _ in results if decision.stop_line_detected)
    fallbacks = sum(1 for decision, _ in results if decision.fallback_active)
    stats = system.get_timing_stats()

    print("\n=== Replay Results ===")
    print(f"Frames: {len(results)}")
    print(f"Stop lines: {stops}")
    print(f"Fallbacks: {fallbacks}")
    if stats:
        print(f"Mean decision: {stats['mean_decision_ms']:.2f} ms")
        print(f"P95 total: {stats['p95_total_ms']:.2f} ms")
    if args.output:
        print(f"Overlay saved to: {args.output}")

    return results


def run_benchmark(args):
    """Run the synthetic scenario benchmark."""
    from vision_decision.config import load_config
    from vision_decision.evaluation.benchmark import BenchmarkConfig, DecisionBenchmark

    benchmark = DecisionBenchmark(
        config=BenchmarkConfig(timing_iterations=args.iterations),
        decision_config=load_config(args.config),
    )
    results = benchmark.run(output_dir=Path(args.output) if args.output else None)

    aggregate = results['aggregate']
    if aggregate.passed:
        print("\n✓ All scenarios passed")
    else:
        print(f"\n✗ {len(aggregate.failures)} failure(s)")

    return results


if __name__ == '__main__':
    main()
