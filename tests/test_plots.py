"""Tests for benchmark plots."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

pytest.importorskip("matplotlib")

from matplotlib.axes import Axes

from wordbench.benchmark.aggregator import BenchmarkReport
from wordbench.benchmark.config import BenchmarkConfig
from wordbench.benchmark.plots import BenchmarkPlotter
from wordbench.metrics import ModelAccumulator, Trial


@pytest.fixture
def temp_output_dir():
    """Create a temporary output directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def report():
    """A small two-model report with one failed trial."""
    results = []
    for model, actuals in [("m1", [10, 12, 25, None]), ("m2", [10, 10, 24, 25])]:
        acc = ModelAccumulator(model, [10, 25], 2)
        for i, (target, actual) in enumerate(zip([10, 10, 25, 25], actuals)):
            number = i % 2 + 1
            if actual is None:
                acc.record(Trial.failure(target, "topic", number, "timeout"))
            else:
                acc.record(Trial.success(target, "topic", number, "words", actual))
            if number == 2:
                acc.complete_group(target)
        results.append(acc.finalize())

    config = BenchmarkConfig(models=("m1", "m2"), word_counts=(10, 25), trials_per_word_count=2)
    return BenchmarkReport(config=config, model_results=tuple(results))


class TestBenchmarkPlotter:
    """Tests for BenchmarkPlotter."""

    def test_generate_all_plots(self, report, temp_output_dir):
        """Test that every plot is written."""
        plotter = BenchmarkPlotter(Path(temp_output_dir) / "plots")

        paths = plotter.generate_all_plots(report)

        assert len(paths) == 5
        assert all(path.exists() for path in paths)

    def test_empty_report(self, temp_output_dir):
        """Test a report with no results."""
        config = BenchmarkConfig(models=("m1",), word_counts=(10,), trials_per_word_count=1)
        empty = BenchmarkReport(config=config, model_results=(), complete=False)

        assert BenchmarkPlotter(temp_output_dir).generate_all_plots(empty) == []

    def test_all_failed_model_has_no_box(self, report, temp_output_dir):
        """Test that a model with no successful trial is not drawn as zero deviation."""
        acc = ModelAccumulator("m3", [10], 1)
        acc.record(Trial.failure(10, "topic", 1, "timeout"))
        acc.complete_group(10)
        report = BenchmarkReport(
            config=report.config, model_results=report.model_results + (acc.finalize(),)
        )
        plotter = BenchmarkPlotter(temp_output_dir)

        with patch.object(Axes, "boxplot", autospec=True, side_effect=Axes.boxplot) as boxplot:
            path = plotter.plot_deviation_distribution(report)

        assert path.exists()
        assert boxplot.call_args.kwargs["tick_labels"] == ["m1", "m2"]
        assert boxplot.call_args.args[1] == [[0, 2, 0], [0, 0, 1, 0]]

    def test_every_model_failed(self, temp_output_dir):
        """Test the distribution plot when no trial succeeded."""
        acc = ModelAccumulator("m1", [10], 1)
        acc.record(Trial.failure(10, "topic", 1, "timeout"))
        acc.complete_group(10)
        config = BenchmarkConfig(models=("m1",), word_counts=(10,), trials_per_word_count=1)
        report = BenchmarkReport(config=config, model_results=(acc.finalize(),))
        plotter = BenchmarkPlotter(temp_output_dir)

        with patch.object(Axes, "boxplot", autospec=True) as boxplot:
            path = plotter.plot_deviation_distribution(report)

        assert path.exists()
        boxplot.assert_not_called()
