"""Tests for microbench.cli — Click CLI for running benchmarks."""

from __future__ import annotations

import csv
import io
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

import click
from bench_test_helpers import make_result
from click.testing import CliRunner

from microbench import __version__
from microbench.bench.config import QUICK
from microbench.bench.runner import Benchmark
from microbench.cli import load_benchmark, main

_BENCH_SOURCE = textwrap.dedent(
    """\
    from microbench import QUICK, Benchmark, BenchmarkVariant

    VARIANTS = {
        "plus": lambda: "a" + "b" + "c",
        "join": lambda: "".join(("a", "b", "c")),
    }

    VARIANT_LIST = [
        BenchmarkVariant("plus", lambda: "a" + "b"),
        BenchmarkVariant("fmt", lambda: f"{'a'}{'b'}"),
    ]

    benchmark = Benchmark("strings", VARIANTS, config=QUICK)

    EMPTY = {}

    NOT_A_BENCHMARK = 42
    """
)


class _BenchFileMixin(unittest.TestCase):
    """Writes a benchmark module to a temporary directory."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.bench_file = self.tmp / "strings_bench.py"
        self.bench_file.write_text(_BENCH_SOURCE)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def target(self, attr: str) -> str:
        return f"{self.bench_file}:{attr}"


# ---------------------------------------------------------------------------
# Help and metadata
# ---------------------------------------------------------------------------


class TestMainGroup(unittest.TestCase):
    """Tests for the top-level group."""

    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("run", result.output)
        self.assertIn("presets", result.output)

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_run_help(self) -> None:
        result = CliRunner().invoke(main, ["run", "--help"])
        self.assertEqual(result.exit_code, 0)
        for opt in ("--preset", "--profile", "--samples", "--seed", "--format"):
            with self.subTest(opt=opt):
                self.assertIn(opt, result.output)

    def test_presets(self) -> None:
        result = CliRunner().invoke(main, ["presets"])
        self.assertEqual(result.exit_code, 0)
        for name in ("quick", "standard", "thorough"):
            self.assertIn(name, result.output)
        self.assertIn("10000", result.output)


# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


class TestLoadBenchmark(_BenchFileMixin):
    """Tests for load_benchmark()."""

    def test_benchmark_object(self) -> None:
        bench = load_benchmark(self.target("benchmark"))
        self.assertEqual(bench.title, "strings")
        self.assertEqual(bench.config, QUICK)

    def test_mapping(self) -> None:
        bench = load_benchmark(self.target("VARIANTS"))
        self.assertEqual(bench.title, "VARIANTS")
        self.assertEqual([v.name for v in bench.variants], ["plus", "join"])

    def test_variant_list(self) -> None:
        bench = load_benchmark(self.target("VARIANT_LIST"))
        self.assertEqual([v.name for v in bench.variants], ["plus", "fmt"])

    def test_dotted_module(self) -> None:
        with self.assertRaises(click.ClickException):
            load_benchmark("os:path")

    def test_missing_colon(self) -> None:
        with self.assertRaises(click.ClickException):
            load_benchmark(str(self.bench_file))

    def test_missing_attribute(self) -> None:
        with self.assertRaises(click.ClickException):
            load_benchmark(self.target("nope"))

    def test_missing_file(self) -> None:
        with self.assertRaises(click.ClickException):
            load_benchmark(f"{self.tmp / 'absent.py'}:x")

    def test_unsupported_object(self) -> None:
        with self.assertRaises(click.ClickException):
            load_benchmark(self.target("NOT_A_BENCHMARK"))


_DATACLASS_SOURCE = textwrap.dedent(
    """\
    from __future__ import annotations

    from dataclasses import dataclass


    @dataclass
    class Point:
        x: int
        y: int


    VARIANTS = {
        "tuple": lambda: (1, 2),
        "point": lambda: Point(1, 2),
    }
    """
)


class TestFileTargetModules(unittest.TestCase):
    """File targets behave like regularly imported modules."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, stem: str, source: str) -> Path:
        path = self.tmp / f"{stem}.py"
        path.write_text(source)
        self.addCleanup(sys.modules.pop, stem, None)
        return path

    def test_dataclass_with_postponed_annotations(self) -> None:
        path = self._write("mb_dataclass_bench", _DATACLASS_SOURCE)
        bench = load_benchmark(f"{path}:VARIANTS")
        self.assertEqual([v.name for v in bench.variants], ["tuple", "point"])
        self.assertIn("mb_dataclass_bench", sys.modules)

    def test_dataclass_module_runs_from_cli(self) -> None:
        path = self._write("mb_dataclass_cli_bench", _DATACLASS_SOURCE)
        out = self.tmp / "out.csv"
        args = [f"{path}:VARIANTS", "--preset", "quick", "-q", "--format", "csv", "-o", str(out)]
        result = CliRunner().invoke(main, ["run", *args])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(out.read_text().splitlines()), 3)

    def test_failed_import_is_not_registered(self) -> None:
        path = self._write("mb_broken_bench", "raise RuntimeError('broken')\n")
        with self.assertRaises(RuntimeError):
            load_benchmark(f"{path}:VARIANTS")
        self.assertNotIn("mb_broken_bench", sys.modules)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRunCommand(_BenchFileMixin):
    """Tests for ``microbench run``."""

    _SMALL = ["--iterations", "5", "--samples", "3", "--warmup", "1", "-q"]

    def _invoke(self, *args: str) -> object:
        return CliRunner().invoke(main, ["run", *args])

    def test_csv_to_file(self) -> None:
        out = self.tmp / "results.csv"
        result = self._invoke(
            self.target("VARIANTS"), *self._SMALL, "--format", "csv", "-o", str(out)
        )
        self.assertEqual(result.exit_code, 0, result.output)
        lines = out.read_text().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("name,median,mean"))
        self.assertTrue(lines[1].startswith("plus,"))
        self.assertTrue(lines[2].startswith("join,"))
        rows = list(csv.DictReader(io.StringIO(out.read_text())))
        self.assertIn("sample_2", rows[0])
        self.assertNotIn("sample_3", rows[0])

    def test_table_to_stdout(self) -> None:
        result = self._invoke(self.target("VARIANTS"), *self._SMALL)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("plus", result.output)
        self.assertIn("join", result.output)
        self.assertIn("vs base", result.output)

    def test_markdown_format(self) -> None:
        out = self.tmp / "results.md"
        result = self._invoke(
            self.target("benchmark"), *self._SMALL, "--format", "markdown", "-o", str(out)
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(out.read_text().startswith("# strings"))

    def test_detailed_format(self) -> None:
        out = self.tmp / "results.txt"
        result = self._invoke(
            self.target("VARIANTS"), *self._SMALL, "--format", "detailed", "-o", str(out)
        )
        self.assertEqual(result.exit_code, 0, result.output)
        text = out.read_text()
        self.assertIn("Result: plus", text)
        self.assertIn("Result: join", text)

    def test_invalid_samples(self) -> None:
        result = self._invoke(self.target("VARIANTS"), "--samples", "0", "-q")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error", result.output)

    def test_empty_variants(self) -> None:
        result = self._invoke(self.target("EMPTY"), "-q")
        self.assertEqual(result.exit_code, 1)

    def test_bad_target(self) -> None:
        result = self._invoke("no_colon_here", "-q")
        self.assertNotEqual(result.exit_code, 0)

    def test_unknown_preset(self) -> None:
        result = self._invoke(self.target("VARIANTS"), "--preset", "turbo")
        self.assertNotEqual(result.exit_code, 0)

    def test_profile_with_quoted_bool(self) -> None:
        profile = self.tmp / "profile.yaml"
        profile.write_text('randomize_order: "false"\n')
        result = self._invoke(self.target("VARIANTS"), "--profile", str(profile), "-q")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("randomize_order", result.output)

    def test_profile_values_and_seed(self) -> None:
        profile = self.tmp / "profile.yaml"
        profile.write_text("preset: quick\nsamples: 2\nseed: 7\n")
        fake_results = [make_result("plus", [1.0, 1.0]), make_result("join", [2.0, 2.0])]
        with patch.object(
            Benchmark, "run", autospec=True, return_value=fake_results
        ) as mock_run:
            result = self._invoke(self.target("VARIANTS"), "--profile", str(profile), "-q")
        self.assertEqual(result.exit_code, 0, result.output)
        bench = mock_run.call_args.args[0]
        self.assertEqual(bench.config.samples, 2)
        self.assertEqual(bench.config.iterations, QUICK.iterations)
        self.assertEqual(mock_run.call_args.kwargs["seed"], 7)

    def test_cli_seed_overrides_profile(self) -> None:
        profile = self.tmp / "profile.yaml"
        profile.write_text("seed: 7\n")
        fake_results = [make_result("plus", [1.0])]
        with patch.object(
            Benchmark, "run", autospec=True, return_value=fake_results
        ) as mock_run:
            self._invoke(
                self.target("VARIANTS"), "--profile", str(profile), "--seed", "3", "-q"
            )
        self.assertEqual(mock_run.call_args.kwargs["seed"], 3)

    def test_benchmark_config_kept_without_overrides(self) -> None:
        fake_results = [make_result("plus", [1.0])]
        with patch.object(
            Benchmark, "run", autospec=True, return_value=fake_results
        ) as mock_run:
            result = self._invoke(self.target("benchmark"), "-q")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(mock_run.call_args.args[0].config, QUICK)

    def test_override_on_top_of_benchmark_config(self) -> None:
        fake_results = [make_result("plus", [1.0])]
        with patch.object(
            Benchmark, "run", autospec=True, return_value=fake_results
        ) as mock_run:
            self._invoke(self.target("benchmark"), "--samples", "4", "-q")
        config = mock_run.call_args.args[0].config
        self.assertEqual(config.samples, 4)
        self.assertEqual(config.iterations, QUICK.iterations)

    def test_reliability_warning_logged(self) -> None:
        fake_results = [make_result("plus", [1.0, 2.0, 3.0])]
        with patch.object(Benchmark, "run", autospec=True, return_value=fake_results):
            result = self._invoke(self.target("VARIANTS"))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("CV% > 50%", result.output)


if __name__ == "__main__":
    unittest.main()
