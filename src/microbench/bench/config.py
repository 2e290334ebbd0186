"""Benchmark configuration, presets, and profile loading.

Handles:
- The immutable BenchmarkConfig value object and its validation.
- The quick / standard / thorough presets.
- Loading configuration profiles from YAML files.
- Merging CLI options with profile and preset values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger("microbench")


class InvalidConfigurationError(ValueError):
    """Raised when a benchmark or its configuration cannot be built."""


# ---------------------------------------------------------------------------
# BenchmarkConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkConfig:
    """How a benchmark samples its variants."""

    iterations: int = 1000  # Operations timed per sample
    samples: int = 10  # Independent measurements per variant
    warmup_iterations: int = 500  # Untimed runs before sampling
    randomize_order: bool = True  # Shuffle variant order every sample

    def __post_init__(self) -> None:
        if self.iterations <= 0:
            raise InvalidConfigurationError(
                f"iterations must be positive (got {self.iterations})."
            )
        if self.samples <= 0:
            raise InvalidConfigurationError(f"samples must be positive (got {self.samples}).")
        if self.warmup_iterations < 0:
            raise InvalidConfigurationError(
                f"warmup_iterations cannot be negative (got {self.warmup_iterations})."
            )

    @property
    def total_runs_per_variant(self) -> int:
        """Calls each variant receives in one run (warmup + measured)."""
        return self.warmup_iterations + self.samples * self.iterations

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "iterations": self.iterations,
            "samples": self.samples,
            "warmup_iterations": self.warmup_iterations,
            "randomize_order": self.randomize_order,
        }


QUICK = BenchmarkConfig(iterations=100, samples=5, warmup_iterations=50)
STANDARD = BenchmarkConfig()
THOROUGH = BenchmarkConfig(iterations=10000, samples=20, warmup_iterations=1000)

PRESETS: dict[str, BenchmarkConfig] = {
    "quick": QUICK,
    "standard": STANDARD,
    "thorough": THOROUGH,
}


def get_preset(name: str) -> BenchmarkConfig:
    """Look up a preset by name.

    Raises:
        ValueError: If the preset is unknown.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Valid presets: {', '.join(PRESETS)}"
        ) from None


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        preset: quick          # optional starting point
        iterations: 2000
        samples: 15
        warmup_iterations: 200
        randomize_order: true
        seed: 1234             # optional, for reproducible ordering

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    log.debug("Loaded profile %s: %s", profile_path, data)
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchmarkConfig:
    """Build a BenchmarkConfig from a parsed profile.

    Precedence (last wins): preset, profile values, CLI overrides.
    ``None`` values in *cli_overrides* are ignored.  ``warmup`` is
    accepted as an alias for ``warmup_iterations``.  Values are not
    coerced: counts must be integers and ``randomize_order`` a bool.

    Args:
        profile_data: Parsed YAML profile dict.
        cli_overrides: CLI option values keyed by BenchmarkConfig
            field name (plus ``preset``).
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    preset_name = cli.get("preset") or profile_data.get("preset") or "standard"
    base = get_preset(preset_name)

    values = base.to_dict()
    for source in (profile_data, cli):
        if "warmup" in source:
            values["warmup_iterations"] = source["warmup"]
        for key in values:
            if key in source:
                values[key] = source[key]

    for key in ("iterations", "samples", "warmup_iterations"):
        value = values[key]
        # bool is an int subclass; ``iterations: true`` is a typo, not 1.
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigurationError(
                f"{key} must be an integer (got {value!r})."
            )
    if not isinstance(values["randomize_order"], bool):
        raise InvalidConfigurationError(
            f"randomize_order must be true or false (got {values['randomize_order']!r})."
        )

    return BenchmarkConfig(
        iterations=values["iterations"],
        samples=values["samples"],
        warmup_iterations=values["warmup_iterations"],
        randomize_order=values["randomize_order"],
    )
