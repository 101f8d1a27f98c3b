"""Plotting utilities for benchmark results visualization."""

import logging
from pathlib import Path
from typing import Optional

from .aggregator import BenchmarkReport

logger = logging.getLogger(__name__)

# Check for matplotlib availability
try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import numpy as np

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    logger.warning("matplotlib not installed. Plotting features will be disabled.")


class BenchmarkPlotter:
    """
    Generates visualization plots for benchmark results.

    Available plots:
    - Model comparison bar charts (accuracy, deviation)
    - Accuracy by word count line chart
    - Deviation heatmap per model and word count
    - Deviation distribution box plots
    """

    # Color palette for different models
    COLORS = [
        "#4C72B0",  # Blue
        "#55A868",  # Green
        "#C44E52",  # Red
        "#8172B3",  # Purple
        "#CCB974",  # Yellow
        "#64B5CD",  # Cyan
        "#E377C2",  # Pink
        "#7F7F7F",  # Gray
    ]

    def __init__(self, output_dir: str | Path):
        """
        Initialize the plotter.

        Args:
            output_dir: Directory to save plots
        """
        if not HAS_MATPLOTLIB:
            raise ImportError(
                "matplotlib is required for plotting. Install with: pip install matplotlib"
            )

        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Set style
        plt.style.use("seaborn-v0_8-whitegrid")
        plt.rcParams["figure.figsize"] = (12, 8)
        plt.rcParams["font.size"] = 12

    def _get_color(self, index: int) -> str:
        """Get a color from the palette."""
        return self.COLORS[index % len(self.COLORS)]

    def _save(self, filename: str) -> Path:
        plt.tight_layout()

        output_path = self.output_dir / filename
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close()

        logger.info(f"Saved plot: {output_path}")
        return output_path

    def plot_model_comparison(
        self,
        leaderboard: list[dict],
        metric: str = "overall_accuracy",
        title: Optional[str] = None,
        filename: str = "model_comparison.png",
    ) -> Path:
        """
        Create a bar chart comparing models on a specific metric.

        Args:
            leaderboard: Ranking entries as dictionaries
            metric: Metric to compare ('overall_accuracy' or 'average_deviation')
            title: Plot title
            filename: Output filename

        Returns:
            Path to saved plot
        """
        fig, ax = plt.subplots(figsize=(12, 6))

        models = [entry["model"] for entry in leaderboard]
        values = [entry.get(metric, 0) for entry in leaderboard]

        bars = ax.barh(
            range(len(models)), values, color=[self._get_color(i) for i in range(len(models))]
        )

        # Add value labels
        offset = (max(values) if values and max(values) > 0 else 1) * 0.02
        for bar, val in zip(bars, values):
            ax.text(
                bar.get_width() + offset,
                bar.get_y() + bar.get_height() / 2,
                f"{val:.1f}",
                va="center",
                fontsize=10,
            )

        ax.set_yticks(range(len(models)))
        ax.set_yticklabels(models)
        ax.invert_yaxis()

        metric_labels = {
            "overall_accuracy": "Exact Match Rate (%)",
            "average_deviation": "Average Deviation (words)",
        }
        ax.set_xlabel(metric_labels.get(metric, metric))
        ax.set_title(title or f"Model Comparison: {metric_labels.get(metric, metric)}")

        return self._save(filename)

    def plot_accuracy_by_word_count(
        self,
        report: BenchmarkReport,
        title: Optional[str] = None,
        filename: str = "accuracy_by_word_count.png",
    ) -> Path:
        """
        Create a line chart of exact match rate against target word count.

        Args:
            report: Benchmark report
            title: Plot title
            filename: Output filename

        Returns:
            Path to saved plot
        """
        fig, ax = plt.subplots(figsize=(12, 6))

        for i, result in enumerate(report.model_results):
            targets = [wcr.target_words for wcr in result.word_count_results]
            rates = [wcr.accuracy_rate for wcr in result.word_count_results]
            ax.plot(targets, rates, marker="o", color=self._get_color(i), label=result.model)

        ax.set_xlabel("Target Word Count")
        ax.set_ylabel("Exact Match Rate (%)")
        ax.set_ylim(-5, 105)
        ax.set_title(title or "Exact Match Rate by Target Word Count")
        ax.legend(loc="best")

        return self._save(filename)

    def plot_deviation_heatmap(
        self,
        report: BenchmarkReport,
        title: Optional[str] = None,
        filename: str = "deviation_heatmap.png",
    ) -> Path:
        """
        Create a heatmap of average deviation per model and word count.

        Args:
            report: Benchmark report
            title: Plot title
            filename: Output filename

        Returns:
            Path to saved plot
        """
        models = [r.model for r in report.model_results]
        targets = list(report.config.word_counts)

        # Cells for groups that never finished stay NaN
        matrix = np.full((len(models), len(targets)), np.nan)
        for i, result in enumerate(report.model_results):
            for j, target in enumerate(targets):
                wcr = result.get_word_count_result(target)
                if wcr is not None:
                    matrix[i, j] = wcr.average_deviation

        fig, ax = plt.subplots(figsize=(max(10, len(targets) * 1.2), max(4, len(models) * 0.6)))

        im = ax.imshow(matrix, cmap="RdYlGn_r", aspect="auto")

        ax.set_xticks(range(len(targets)))
        ax.set_xticklabels([str(t) for t in targets])
        ax.set_yticks(range(len(models)))
        ax.set_yticklabels(models)

        for i in range(len(models)):
            for j in range(len(targets)):
                val = matrix[i, j]
                if not np.isnan(val):
                    ax.text(j, i, f"{val:.1f}", ha="center", va="center", fontsize=8)

        cbar = plt.colorbar(im, ax=ax, shrink=0.8)
        cbar.set_label("Average Deviation (words)")

        ax.set_title(title or "Average Deviation by Model and Word Count")
        ax.set_xlabel("Target Word Count")
        ax.set_ylabel("Model")

        return self._save(filename)

    def plot_deviation_distribution(
        self,
        report: BenchmarkReport,
        title: Optional[str] = None,
        filename: str = "deviation_distribution.png",
    ) -> Path:
        """
        Create box plots of per-trial deviation for each model.

        Failed trials have no deviation and are left out. A model whose trials
        all failed gets no box; it is named in a note under the chart.

        Args:
            report: Benchmark report
            title: Plot title
            filename: Output filename

        Returns:
            Path to saved plot
        """
        models = []
        data = []
        all_failed = []
        for result in report.model_results:
            deviations = [
                trial.deviation
                for wcr in result.word_count_results
                for trial in wcr.trials
                if trial.succeeded
            ]
            if deviations:
                models.append(result.model)
                data.append(deviations)
            else:
                all_failed.append(result.model)

        fig, ax = plt.subplots(figsize=(12, 6))

        if data:
            bp = ax.boxplot(data, patch_artist=True, tick_labels=models)

            for i, (box, median) in enumerate(zip(bp["boxes"], bp["medians"])):
                box.set_facecolor(self._get_color(i))
                box.set_alpha(0.7)
                median.set_color("black")
                median.set_linewidth(2)

        if all_failed:
            ax.text(
                0.5,
                -0.25 if data else 0.5,
                f"All trials failed: {', '.join(all_failed)}",
                transform=ax.transAxes,
                ha="center",
                va="center",
                fontsize=10,
            )

        ax.set_ylabel("Deviation (words)")
        ax.set_title(title or "Deviation Distribution by Model")
        plt.xticks(rotation=45, ha="right")

        return self._save(filename)

    def generate_all_plots(self, report: BenchmarkReport) -> list[Path]:
        """
        Generate all available plots from a benchmark report.

        Args:
            report: The benchmark report

        Returns:
            List of paths to generated plots
        """
        plots = []

        if not report.model_results:
            logger.warning("No model results to plot")
            return plots

        leaderboard = [entry.to_dict() for entry in report.summary.overall_rankings]

        plots.append(self.plot_model_comparison(leaderboard))
        plots.append(
            self.plot_model_comparison(
                leaderboard,
                metric="average_deviation",
                title="Average Deviation by Model",
                filename="deviation_comparison.png",
            )
        )
        plots.append(self.plot_accuracy_by_word_count(report))
        plots.append(self.plot_deviation_heatmap(report))
        plots.append(self.plot_deviation_distribution(report))

        logger.info(f"Generated {len(plots)} plots in {self.output_dir}")
        return plots
