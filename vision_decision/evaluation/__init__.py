"""
Evaluation module - Scenario benchmarking.
"""

from vision_decision.evaluation.benchmark import (
    BenchmarkConfig,
    BenchmarkResult,
    DecisionBenchmark,
)

__all__ = [
    "BenchmarkConfig",
    "BenchmarkResult",
    "DecisionBenchmark",
]
