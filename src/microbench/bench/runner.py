"""Benchmark execution engine.

Orchestrates three phases per run:
1. Warmup: every variant, in declaration order, runs
   ``warmup_iterations`` times untimed.
2. Sampling: ``samples`` rounds.  Each round picks an execution
   order (a fresh random permutation when ``randomize_order`` is set)
   and times ``iterations`` back-to-back calls of each variant.
3. Completion: one BenchmarkResult per variant, in declaration order.

Variants are executed strictly one at a time on the calling thread.
Exceptions raised by a variant propagate unchanged and abort the run.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence, Union

from microbench.bench.config import STANDARD, BenchmarkConfig, InvalidConfigurationError
from microbench.bench.results import BenchmarkResult

log = logging.getLogger("microbench")

# Monotonic high-resolution clock, in seconds.
_clock: Callable[[], float] = time.perf_counter


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkVariant:
    """A named piece of code to measure.

    ``run`` is called repeatedly with no arguments.  It should be
    self-contained, avoid accumulating state across calls, and must
    not do its own timing.
    """

    name: str
    run: Callable[[], object]

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidConfigurationError("Variant names must be non-empty.")


VariantsArg = Union[Sequence[BenchmarkVariant], Mapping[str, Callable[[], object]]]

# Receives one human-readable status line per phase boundary.
ProgressCallback = Callable[[str], None]


def _coerce_variants(variants: VariantsArg) -> tuple[BenchmarkVariant, ...]:
    """Accept a list of variants or a ``{name: callable}`` mapping."""
    if isinstance(variants, Mapping):
        return tuple(BenchmarkVariant(name=name, run=fn) for name, fn in variants.items())
    return tuple(variants)


def _no_progress(message: str) -> None:
    pass


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


class Benchmark:
    """Runs a set of variants and collects per-operation timings.

    Usage::

        benchmark = Benchmark(
            "string join",
            [
                BenchmarkVariant("plus", lambda: "a" + "b" + "c"),
                BenchmarkVariant("join", lambda: "".join(("a", "b", "c"))),
            ],
            config=QUICK,
        )
        results = benchmark.run()

    Raises:
        InvalidConfigurationError: If no variants are given.
    """

    def __init__(
        self,
        title: str,
        variants: VariantsArg,
        config: BenchmarkConfig = STANDARD,
    ) -> None:
        self.title = title
        self.variants = _coerce_variants(variants)
        self.config = config
        if not self.variants:
            raise InvalidConfigurationError(
                f"Benchmark '{title}' needs at least one variant."
            )

    def run(
        self,
        log_callback: ProgressCallback | None = None,
        *,
        seed: int | None = None,
    ) -> list[BenchmarkResult]:
        """Execute warmup and sampling, then build the results.

        Args:
            log_callback: Optional sink for progress lines.
            seed: Seed for the per-sample shuffle.  None draws a fresh
                seed, so every run uses a different ordering.

        Returns:
            One BenchmarkResult per variant, in declaration order.
        """
        progress = log_callback or _no_progress
        config = self.config
        rng = random.Random(seed)
        # Per-run accumulators, indexed like self.variants.
        samples: list[list[float]] = [[] for _ in self.variants]

        # Phase 1: Warmup.
        progress(f"[{self.title}] Warming up {len(self.variants)} variant(s)...")
        log.debug(
            "%s: warmup, %d call(s) per variant",
            self.title,
            config.warmup_iterations,
        )
        for variant in self.variants:
            for _ in range(config.warmup_iterations):
                variant.run()

        # Phase 2: Sampling.
        progress(f"[{self.title}] Collecting {config.samples} sample(s)...")
        for sample_idx in range(config.samples):
            order = list(range(len(self.variants)))
            if config.randomize_order:
                rng.shuffle(order)

            for idx in order:
                samples[idx].append(self._measure(self.variants[idx]))

            log.debug(
                "%s: sample %d/%d order=%s",
                self.title,
                sample_idx + 1,
                config.samples,
                [self.variants[i].name for i in order],
            )

        # Phase 3: Completion.
        results = [
            BenchmarkResult(name=variant.name, samples=tuple(s))
            for variant, s in zip(self.variants, samples)
        ]
        progress(f"[{self.title}] Done.")
        for r in results:
            log.debug("%s: %s", self.title, r)
        return results

    def _measure(self, variant: BenchmarkVariant) -> float:
        """Time ``iterations`` calls; return microseconds per call."""
        iterations = self.config.iterations
        run = variant.run
        start = _clock()
        for _ in range(iterations):
            run()
        elapsed = _clock() - start
        return max(elapsed, 0.0) * 1_000_000 / iterations

    def __repr__(self) -> str:
        return f"Benchmark({self.title!r}, {len(self.variants)} variants)"


def run_benchmark(
    title: str,
    variants: VariantsArg,
    *,
    config: BenchmarkConfig = STANDARD,
    log_callback: ProgressCallback | None = None,
    seed: int | None = None,
) -> list[BenchmarkResult]:
    """Build a Benchmark and run it in one call."""
    return Benchmark(title, variants, config=config).run(log_callback, seed=seed)
