"""
Benchmark suite for the vision decision.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
import json
import time
import numpy as np
from tqdm import tqdm

from vision_decision.config import DecisionConfig
from vision_decision.core.decision import Decision, decide
from vision_decision.processing.synthetic import SyntheticFrameGenerator


@dataclass
class BenchmarkConfig:
    """Configuration for benchmarking."""
    # Test scenarios
    scenarios: List[str] = None

    # Synthetic frame size
    height: int = 240
    width: int = 320
    seed: int = 0

    # Timing
    warmup_iterations: int = 3
    timing_iterations: int = 20

    # Pass/fail criteria
    max_decision_time_ms: float = 500.0
    angle_tolerance_deg: float = 5.0

    def __post_init__(self):
        if self.scenarios is None:
            self.scenarios = list(SCENARIOS)


@dataclass
class BenchmarkResult:
    """Result of a single benchmark scenario."""
    scenario: str
    angle: int
    confidence: float
    timing: Dict[str, float]
    passed: bool
    failures: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'angle': self.angle,
            'confidence': self.confidence,
            'timing': self.timing,
            'passed': self.passed,
            'failures': self.failures,
        }


# Each scenario renders a frame and checks the decision against it.
Scenario = Tuple[
    Callable[[SyntheticFrameGenerator], np.ndarray],
    Callable[[Decision, BenchmarkConfig], List[str]],
]


def _expect_escape(decision: Decision, config: BenchmarkConfig) -> List[str]:
    if abs(decision.angle) != 45:
        return [f"Expected escape angle, got {decision.angle}"]
    return []


def _expect_angle(expected: float) -> Callable[[Decision, BenchmarkConfig], List[str]]:
    def check(decision: Decision, config: BenchmarkConfig) -> List[str]:
        failures = []
        if abs(decision.angle - expected) > config.angle_tolerance_deg:
            failures.append(f"Angle {decision.angle} not within "
                            f"{config.angle_tolerance_deg} of {expected}")
        if decision.confidence <= 0:
            failures.append("Confidence is zero")
        return failures
    return check


def _expect_stop(decision: Decision, config: BenchmarkConfig) -> List[str]:
    failures = []
    if not decision.stop_line_detected:
        failures.append("Stop line not detected")
    if decision.confidence != 0:
        failures.append(f"Confidence {decision.confidence:.1f} not forced to 0")
    return failures


def _expect_no_line(decision: Decision, config: BenchmarkConfig) -> List[str]:
    failures = _expect_escape(decision, config)
    if not decision.fallback_active:
        failures.append("Fallback not active")
    return failures


SCENARIOS: Dict[str, Scenario] = {
    'straight': (lambda g: g.line(0.0), _expect_escape),
    'slant_left': (lambda g: g.line(-40.0, bottom_center=g.width * 3 // 4),
                   _expect_angle(-40.0)),
    'slant_right': (lambda g: g.line(40.0, bottom_center=g.width // 4),
                    _expect_angle(40.0)),
    'stop_line': (lambda g: g.stop_line(), _expect_stop),
    'empty': (lambda g: g.blank(), _expect_no_line),
    'speckle': (lambda g: g.add_speckle(g.blank(), count=200, max_size=4),
                _expect_no_line),
}


class DecisionBenchmark:
    """
    Runs the decision over synthetic scenarios and checks outcome and latency.
    """

    def __init__(
        self,
        config: Optional[BenchmarkConfig] = None,
        decision_config: Optional[DecisionConfig] = None,
    ):
        """
        Initialize benchmark.

        Args:
            config: Benchmark configuration
            decision_config: Decision tunables under test
        """
        self.config = config or BenchmarkConfig()
        self.decision_config = decision_config or DecisionConfig()
        self.generator = SyntheticFrameGenerator(
            height=self.config.height,
            width=self.config.width,
            seed=self.config.seed,
        )

    def run(
        self,
        output_dir: Optional[Path] = None,
        verbose: bool = True,
    ) -> Dict[str, BenchmarkResult]:
        """
        Run full benchmark suite.

        Args:
            output_dir: Directory to save results
            verbose: Print per-scenario reports and progress

        Returns:
            Dictionary mapping scenario names to results
        """
        results = {}

        for scenario in tqdm(self.config.scenarios, desc='Scenarios', disable=not verbose):
            if scenario not in SCENARIOS:
                raise ValueError(f"Unknown scenario: {scenario}")

            result = self._run_scenario(scenario)
            results[scenario] = result

            if verbose:
                self._print_result(result)

        results['aggregate'] = self._aggregate_results(results)

        if output_dir:
            self._save_results(results, Path(output_dir), verbose)

        return results

    def _run_scenario(self, scenario: str) -> BenchmarkResult:
        """Run benchmark for a single scenario."""
        render, check = SCENARIOS[scenario]
        frame = render(self.generator)

        for _ in range(self.config.warmup_iterations):
            decide(frame, self.decision_config)

        decision_times = []
        decision = None
        for _ in range(max(self.config.timing_iterations, 1)):
            start = time.perf_counter()
            decision = decide(frame, self.decision_config)
            decision_times.append((time.perf_counter() - start) * 1000)

        timing = {
            'mean_ms': float(np.mean(decision_times)),
            'std_ms': float(np.std(decision_times)),
            'p50_ms': float(np.percentile(decision_times, 50)),
            'p95_ms': float(np.percentile(decision_times, 95)),
            'max_ms': float(np.max(decision_times)),
        }

        failures = check(decision, self.config)
        if timing['p95_ms'] > self.config.max_decision_time_ms:
            failures.append(
                f"P95 decision time {timing['p95_ms']:.1f}ms > "
                f"{self.config.max_decision_time_ms}ms"
            )

        return BenchmarkResult(
            scenario=scenario,
            angle=decision.angle,
            confidence=decision.confidence,
            timing=timing,
            passed=len(failures) == 0,
            failures=failures,
        )

    def _aggregate_results(
        self,
        results: Dict[str, BenchmarkResult],
    ) -> BenchmarkResult:
        """Aggregate results across all scenarios."""
        mean_times = []
        p95_times = []
        all_failures = []

        for scenario, result in results.items():
            if scenario == 'aggregate':
                continue

            mean_times.append(result.timing.get('mean_ms', 0))
            p95_times.append(result.timing.get('p95_ms', 0))

            for failure in result.failures:
                all_failures.append(f"[{scenario}] {failure}")

        timing = {
            'mean_ms': float(np.mean(mean_times)) if mean_times else 0,
            'p95_ms': float(np.max(p95_times)) if p95_times else 0,
        }

        return BenchmarkResult(
            scenario='aggregate',
            angle=0,
            confidence=0.0,
            timing=timing,
            passed=len(all_failures) == 0,
            failures=all_failures,
        )

    def _print_result(self, result: BenchmarkResult) -> None:
        """Print benchmark result."""
        status = "PASS" if result.passed else "FAIL"
        print(f"\n{'='*60}")
        print(f"Scenario: {result.scenario} [{status}]")
        print(f"{'='*60}")

        print(f"  Angle: {result.angle} deg")
        print(f"  Confidence: {result.confidence:.1f}")

        if result.timing:
            print(f"  Decision Time (P95): {result.timing.get('p95_ms', 0):.1f}ms")

        if result.failures:
            print("  Failures:")
            for failure in result.failures:
                print(f"    - {failure}")

    def _save_results(
        self,
        results: Dict[str, BenchmarkResult],
        output_dir: Path,
        verbose: bool = True,
    ) -> Path:
        """Save benchmark results to file."""
        output_dir.mkdir(parents=True, exist_ok=True)

        output = {scenario: result.to_dict() for scenario, result in results.items()}

        output_path = output_dir / 'benchmark_results.json'
        with open(output_path, 'w') as f:
            json.dump(output, f, indent=2)

        if verbose:
            print(f"\nResults saved to: {output_path}")
        return output_path
