"""Terminal display formatting for benchmark results.

Produces aligned tables and per-result summaries.  All functions
return strings; printing is left to the caller.
"""

from __future__ import annotations

from typing import Sequence

from microbench.bench.results import BenchmarkComparison, BenchmarkResult, find_result
from microbench.bench.stats import Reliability


# ---------------------------------------------------------------------------
# Formatting utilities
# ---------------------------------------------------------------------------


def select_baseline(
    results: Sequence[BenchmarkResult],
    baseline_name: str | None,
) -> BenchmarkResult:
    """Named baseline if present, otherwise the first result."""
    if baseline_name is not None:
        try:
            return find_result(results, baseline_name)
        except KeyError:
            pass
    return results[0]


def format_speedup(result: BenchmarkResult, baseline: BenchmarkResult) -> str:
    """Speedup versus baseline as ``"1.23x"``; ``-`` for the baseline row."""
    if result is baseline:
        return "-"
    if result.median == 0:
        return "N/A"
    return f"{result.speedup_vs(baseline):.2f}x"


# ---------------------------------------------------------------------------
# Results table
# ---------------------------------------------------------------------------


def format_results(
    results: Sequence[BenchmarkResult],
    *,
    baseline_name: str | None = None,
) -> str:
    """Format results as an aligned comparison table.

    The "vs base" column is the speedup of each row relative to the
    baseline (the result named *baseline_name*, or the first one).

    Args:
        results: Results in display order.
        baseline_name: Name of the baseline result.

    Returns:
        Formatted string for terminal output.
    """
    if not results:
        return "(no results)"

    baseline = select_baseline(results, baseline_name)
    name_width = max(len("Variant"), max(len(r.name) for r in results))

    lines: list[str] = [""]
    lines.append(
        f"  {'Variant':<{name_width}s} | {'median':>10s} | {'mean':>10s} | "
        f"{'stddev':>8s} | {'cv%':>6s} | {'vs base':>8s}"
    )
    lines.append("  " + "-" * (name_width + 55))

    for r in results:
        lines.append(
            f"  {r.name:<{name_width}s} | {r.median:>10.2f} | {r.mean:>10.2f} | "
            f"{r.stdev:>8.2f} | {r.cv.as_percent:>6.1f} | {format_speedup(r, baseline):>8s}"
        )

    lines.append("")
    lines.append("  (times in microseconds per operation)")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Single result
# ---------------------------------------------------------------------------


def format_detailed_result(result: BenchmarkResult) -> str:
    """Format every statistic of one result, with an interpretation note."""
    lines: list[str] = [f"Result: {result.name}"]
    lines.append(f"  Samples: {result.n_samples}")
    if not result.samples:
        return "\n".join(lines)

    lines.append(f"  Median:  {result.median:.2f} us/op")
    lines.append(f"  Mean:    {result.mean:.2f} us/op")
    lines.append(f"  Stddev:  {result.stdev:.2f} us")
    lines.append(f"  CV%:     {result.cv}")
    lines.append(f"  Range:   {result.min:.2f} - {result.max:.2f} us")
    lines.append(f"  Reliability: {result.reliability.value}")
    lines.append(f"  Outliers: {result.n_outliers}")

    # Skew between mean and median points at one-sided outliers.  The
    # gap never exceeds one stdev, so flag anything past half of one.
    diff = result.mean - result.median
    if abs(diff) > result.stdev / 2:
        if diff > 0:
            lines.append("  Note: mean > median suggests high outliers (normal for benchmarks)")
        else:
            lines.append("  Note: mean < median suggests low outliers (unusual)")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def format_comparison(comparison: BenchmarkComparison) -> str:
    """Format a baseline-vs-test comparison."""
    lines: list[str] = [
        f"Comparison: {comparison.test.name} vs {comparison.baseline.name}",
    ]

    speedup = comparison.speedup
    if speedup >= 1:
        lines.append(f"  Speedup:     {speedup:.2f}x faster")
    else:
        lines.append(f"  Slowdown:    {1 / speedup:.2f}x slower")

    improvement = comparison.improvement.as_percent
    if improvement >= 0:
        lines.append(f"  Improvement: {improvement:.1f}%")
    else:
        lines.append(f"  Regression:  {-improvement:.1f}%")

    lines.append(f"  Reliable:    {'yes' if comparison.is_reliable else 'no'}")
    if not comparison.is_reliable:
        lines.append("  Warning: High variance in measurements. Treat as directional only.")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Reliability warnings
# ---------------------------------------------------------------------------


def format_reliability_warning(results: Sequence[BenchmarkResult]) -> str | None:
    """Describe noisy results, or return None if all are good or better.

    Poor results (CV >= 50%) take precedence; moderate ones (20-50%)
    are only listed when nothing is poor.
    """
    poor = [r for r in results if r.reliability is Reliability.POOR]
    if poor:
        lines = ["Warning: The following measurements have CV% > 50% and may be unreliable:"]
        lines.extend(f"  - {r.name} (CV: {r.cv})" for r in poor)
        lines.append("Consider increasing iterations or investigating system noise.")
        return "\n".join(lines)

    moderate = [r for r in results if r.reliability is Reliability.MODERATE]
    if moderate:
        lines = ["Note: The following measurements have CV% 20-50% (directional only):"]
        lines.extend(f"  - {r.name} (CV: {r.cv})" for r in moderate)
        return "\n".join(lines)

    return None
