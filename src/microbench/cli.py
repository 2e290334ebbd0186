"""Command-line interface for microbench.

Subcommands:
    microbench run TARGET   Run the benchmark defined at TARGET
    microbench presets      List the built-in configuration presets
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import click

from microbench import __version__
from microbench.bench.config import PRESETS
from microbench.bench.runner import Benchmark, BenchmarkVariant
from microbench.logging import progress_to_log, setup_logging

log = logging.getLogger("microbench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """microbench — statistically-aware micro-benchmarks for Python code."""


# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


def _import_target_module(module_ref: str) -> Any:
    """Import a dotted module name or a ``.py`` file path."""
    if module_ref.endswith(".py") or "/" in module_ref:
        path = Path(module_ref)
        if not path.is_file():
            raise click.ClickException(f"No such file: {module_ref}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise click.ClickException(f"Cannot load {module_ref}")
        module = importlib.util.module_from_spec(spec)
        # Dataclasses and pickling resolve names through sys.modules.
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(spec.name, None)
            raise
        return module
    try:
        return importlib.import_module(module_ref)
    except ImportError as exc:
        raise click.ClickException(f"Cannot import '{module_ref}': {exc}") from exc


def load_benchmark(target: str) -> Benchmark:
    """Resolve ``module:attr`` or ``file.py:attr`` to a Benchmark.

    The attribute may be a Benchmark, a sequence of BenchmarkVariant,
    or a mapping of name to zero-argument callable.  The latter two
    are wrapped in a Benchmark titled after the attribute.
    """
    if ":" not in target:
        raise click.ClickException(
            f"Invalid target '{target}'. Expected 'module:attr' or 'path/to/file.py:attr'."
        )
    module_ref, attr = target.rsplit(":", 1)
    module = _import_target_module(module_ref)

    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise click.ClickException(f"'{module_ref}' has no attribute '{attr}'") from None

    if isinstance(obj, Benchmark):
        return obj
    if isinstance(obj, Mapping):
        return Benchmark(attr, obj)
    if isinstance(obj, Sequence) and all(isinstance(v, BenchmarkVariant) for v in obj):
        return Benchmark(attr, obj)
    raise click.ClickException(
        f"'{target}' is a {type(obj).__name__}; expected a Benchmark, "
        f"a list of BenchmarkVariant, or a mapping of name to callable."
    )


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("target")
@click.option(
    "--preset",
    type=click.Choice(sorted(PRESETS)),
    default=None,
    help="Start from a preset configuration.",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML profile with configuration values.",
)
@click.option("--iterations", type=int, default=None, help="Operations timed per sample.")
@click.option("--samples", type=int, default=None, help="Samples per variant.")
@click.option("--warmup", type=int, default=None, help="Untimed warmup calls per variant.")
@click.option(
    "--randomize/--no-randomize",
    default=None,
    help="Shuffle variant order in every sample.",
)
@click.option("--seed", type=int, default=None, help="Seed for the order shuffle.")
@click.option("--baseline", type=str, default=None, help="Baseline variant (default: first).")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "detailed", "csv", "markdown"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    target: str,
    preset: str | None,
    profile_path: Path | None,
    iterations: int | None,
    samples: int | None,
    warmup: int | None,
    randomize: bool | None,
    seed: int | None,
    baseline: str | None,
    fmt: str,
    output: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmark defined at TARGET and report the results.

    TARGET is 'module:attr' or 'path/to/file.py:attr'.

    \b
    Examples:
        microbench run benches/strings.py:benchmark
        microbench run mypkg.benches:VARIANTS --preset quick --seed 1
        microbench run benches/strings.py:benchmark --format csv -o out.csv
    """
    from microbench.bench.config import config_from_profile, load_profile
    from microbench.bench.display import (
        format_comparison,
        format_detailed_result,
        format_reliability_warning,
        format_results,
        select_baseline,
    )
    from microbench.bench.export import export_csv, export_markdown
    from microbench.bench.results import BenchmarkComparison

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "preset": preset,
        "iterations": iterations,
        "samples": samples,
        "warmup_iterations": warmup,
        "randomize_order": randomize,
    }
    try:
        benchmark = load_benchmark(target)
        profile_data: dict[str, Any] = {}
        if profile_path is not None:
            profile_data = load_profile(profile_path)
        if profile_data or any(v is not None for v in cli_overrides.values()):
            if preset is None and "preset" not in profile_data:
                # Start from the benchmark's own configuration.
                profile_data = {**benchmark.config.to_dict(), **profile_data}
            config = config_from_profile(profile_data, cli_overrides=cli_overrides)
            benchmark = Benchmark(benchmark.title, benchmark.variants, config=config)
        if seed is None:
            seed = profile_data.get("seed")
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    log.debug("Configuration: %s", benchmark.config.to_dict())
    results = benchmark.run(progress_to_log(), seed=seed)

    if fmt == "csv":
        text = export_csv(results)
    elif fmt == "markdown":
        text = export_markdown(results, title=benchmark.title, baseline_name=baseline)
    elif fmt == "detailed":
        base = select_baseline(results, baseline)
        blocks = [format_detailed_result(r) for r in results]
        blocks.extend(
            format_comparison(BenchmarkComparison(baseline=base, test=r))
            for r in results
            if r is not base and r.median > 0 and base.median > 0
        )
        text = "\n\n".join(blocks)
    else:
        text = format_results(results, baseline_name=baseline)

    warning = format_reliability_warning(results)
    if warning:
        log.warning(warning)

    if output:
        output.write_text(text if text.endswith("\n") else text + "\n")
        click.echo(f"Results written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# presets
# ---------------------------------------------------------------------------


@main.command("presets")
def presets_cmd() -> None:
    """List the built-in configuration presets."""
    click.echo(f"{'Preset':<10s} {'iterations':>10s} {'samples':>8s} {'warmup':>8s}")
    for name, config in PRESETS.items():
        click.echo(
            f"{name:<10s} {config.iterations:>10d} {config.samples:>8d} "
            f"{config.warmup_iterations:>8d}"
        )


if __name__ == "__main__":
    sys.exit(main())
