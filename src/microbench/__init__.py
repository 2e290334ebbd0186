"""microbench: statistically-aware micro-benchmarking."""

from microbench.bench.config import (
    PRESETS,
    QUICK,
    STANDARD,
    THOROUGH,
    BenchmarkConfig,
    InvalidConfigurationError,
)
from microbench.bench.percentage import Percentage
from microbench.bench.results import BenchmarkComparison, BenchmarkResult
from microbench.bench.runner import Benchmark, BenchmarkVariant, run_benchmark
from microbench.bench.stats import EmptyInputError, Reliability

__version__ = "0.1.0"

__all__ = [
    "PRESETS",
    "QUICK",
    "STANDARD",
    "THOROUGH",
    "Benchmark",
    "BenchmarkComparison",
    "BenchmarkConfig",
    "BenchmarkResult",
    "BenchmarkVariant",
    "EmptyInputError",
    "InvalidConfigurationError",
    "Percentage",
    "Reliability",
    "__version__",
    "run_benchmark",
]
