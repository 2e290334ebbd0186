"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per variant with the summary statistics followed
by every raw sample (wide format).

Markdown format: a summary table suitable for reports, README files,
and GitHub issues.
"""

from __future__ import annotations

import csv
import io
from typing import Sequence

from microbench.bench.display import format_speedup, select_baseline
from microbench.bench.results import BenchmarkResult


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(results: Sequence[BenchmarkResult]) -> str:
    """Export results as CSV (wide format).

    Columns:
        name, median, mean, stddev, cv, min, max, sample_0 .. sample_N

    ``cv`` is in percent.  There are as many sample columns as the
    longest result has samples; shorter rows are left ragged.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    max_samples = max((r.n_samples for r in results), default=0)
    writer.writerow(
        ["name", "median", "mean", "stddev", "cv", "min", "max"]
        + [f"sample_{i}" for i in range(max_samples)]
    )

    for r in results:
        if not r.samples:
            writer.writerow([r.name, r.median, r.mean, r.stdev, r.cv.as_percent, "", ""])
            continue
        writer.writerow(
            [r.name, r.median, r.mean, r.stdev, r.cv.as_percent, r.min, r.max] + list(r.samples)
        )

    return output.getvalue()


format_results_as_csv = export_csv


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(
    results: Sequence[BenchmarkResult],
    *,
    title: str = "Benchmark results",
    baseline_name: str | None = None,
) -> str:
    """Export results as a Markdown report."""
    lines: list[str] = [f"# {title}", ""]

    if not results:
        lines.append("(no results)")
        return "\n".join(lines)

    baseline = select_baseline(results, baseline_name)

    lines.append("| Variant | Median (us) | Mean (us) | Stddev | CV | Reliability | vs base |")
    lines.append("|---|---:|---:|---:|---:|---|---:|")
    for r in results:
        lines.append(
            f"| {r.name} | {r.median:.2f} | {r.mean:.2f} | {r.stdev:.2f} | "
            f"{r.cv} | {r.reliability.value} | {format_speedup(r, baseline)} |"
        )

    lines.append("")
    lines.append(f"Baseline: **{baseline.name}**. Times are microseconds per operation.")
    return "\n".join(lines)
