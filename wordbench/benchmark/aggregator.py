"""Rankings, summaries and report output for finished benchmark runs."""

import csv
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from ..metrics import ModelResult
from .config import BenchmarkConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingEntry:
    """A model's place in the overall leaderboard."""

    rank: int
    model: str
    overall_accuracy: float
    average_deviation: float
    total_exact_matches: int
    total_trials: int

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "model": self.model,
            "overall_accuracy": round(self.overall_accuracy, 2),
            "average_deviation": round(self.average_deviation, 2),
            "total_exact_matches": self.total_exact_matches,
            "total_trials": self.total_trials,
        }


@dataclass(frozen=True)
class ModelPerformance:
    """One model's figures at a single target word count."""

    model: str
    accuracy_rate: float
    average_deviation: float

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "accuracy_rate": round(self.accuracy_rate, 2),
            "average_deviation": round(self.average_deviation, 2),
        }


@dataclass(frozen=True)
class WordCountBreakdown:
    """All models at one target word count, best first."""

    target_words: int
    all_models: tuple[ModelPerformance, ...]

    @property
    def best_model(self) -> str:
        return self.all_models[0].model

    @property
    def best_accuracy(self) -> float:
        return self.all_models[0].accuracy_rate

    def to_dict(self) -> dict:
        return {
            "best_model": self.best_model,
            "best_accuracy": round(self.best_accuracy, 2),
            "all_models": [p.to_dict() for p in self.all_models],
        }


@dataclass(frozen=True)
class Summary:
    """Leaderboard and per-word-count breakdown derived from model results."""

    total_models_tested: int
    overall_rankings: tuple[RankingEntry, ...] = ()
    word_count_breakdown: dict[int, WordCountBreakdown] = field(default_factory=dict)

    @property
    def best_model(self) -> Optional[RankingEntry]:
        return self.overall_rankings[0] if self.overall_rankings else None

    def to_dict(self) -> dict:
        return {
            "total_models_tested": self.total_models_tested,
            "overall_rankings": [entry.to_dict() for entry in self.overall_rankings],
            "word_count_breakdown": {
                str(target): breakdown.to_dict()
                for target, breakdown in self.word_count_breakdown.items()
            },
        }


def summarize(model_results: Sequence[ModelResult]) -> Summary:
    """
    Rank models and find the best model per word count.

    Both orderings are stable descending sorts by accuracy, so models that tie
    keep the order they were run in.

    Args:
        model_results: Results in run order; not modified

    Returns:
        Summary of the run
    """
    ranked = sorted(model_results, key=lambda r: r.overall_accuracy, reverse=True)
    rankings = tuple(
        RankingEntry(
            rank=index + 1,
            model=result.model,
            overall_accuracy=result.overall_accuracy,
            average_deviation=result.average_deviation,
            total_exact_matches=result.total_exact_matches,
            total_trials=result.total_trials,
        )
        for index, result in enumerate(ranked)
    )

    performances: dict[int, list[ModelPerformance]] = {}
    for result in model_results:
        for wcr in result.word_count_results:
            performances.setdefault(wcr.target_words, []).append(
                ModelPerformance(
                    model=result.model,
                    accuracy_rate=wcr.accuracy_rate,
                    average_deviation=wcr.average_deviation,
                )
            )

    breakdown = {
        target: WordCountBreakdown(
            target_words=target,
            all_models=tuple(sorted(entries, key=lambda p: p.accuracy_rate, reverse=True)),
        )
        for target, entries in performances.items()
    }

    return Summary(
        total_models_tested=len(model_results),
        overall_rankings=rankings,
        word_count_breakdown=breakdown,
    )


@dataclass(frozen=True)
class BenchmarkReport:
    """Snapshot of a finished (or cancelled) run, handed to renderers and persisters."""

    config: BenchmarkConfig
    model_results: tuple[ModelResult, ...]
    complete: bool = True
    started_at: Optional[str] = None
    finished_at: Optional[str] = None

    @property
    def summary(self) -> Summary:
        return summarize(self.model_results)

    @property
    def duration_seconds(self) -> Optional[float]:
        if not self.started_at or not self.finished_at:
            return None
        start = datetime.fromisoformat(self.started_at)
        end = datetime.fromisoformat(self.finished_at)
        return (end - start).total_seconds()

    def to_dict(self) -> dict:
        """Convert to the self-describing dictionary used for persistence."""
        return {
            "timestamp": self.finished_at or datetime.now().isoformat(),
            "started_at": self.started_at,
            "duration_seconds": self.duration_seconds,
            "complete": self.complete,
            "configuration": {
                "word_counts_tested": list(self.config.word_counts),
                "models_tested": list(self.config.models),
                "trials_per_word_count": self.config.trials_per_word_count,
                "temperature": self.config.temperature,
                "seed": self.config.seed,
            },
            "results": [r.to_dict() for r in self.model_results],
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BenchmarkReport":
        """Load from dictionary; the summary is recomputed, not read back."""
        configuration = data["configuration"]
        config = BenchmarkConfig(
            models=tuple(configuration["models_tested"]),
            word_counts=tuple(configuration["word_counts_tested"]),
            trials_per_word_count=configuration["trials_per_word_count"],
            temperature=configuration.get("temperature", 0.7),
            seed=configuration.get("seed"),
        )
        return cls(
            config=config,
            model_results=tuple(ModelResult.from_dict(r) for r in data.get("results", [])),
            complete=data.get("complete", True),
            started_at=data.get("started_at"),
            finished_at=data.get("timestamp"),
        )

    @classmethod
    def load(cls, path: str | Path) -> "BenchmarkReport":
        """Load from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)


class ResultsAggregator:
    """
    Writes and prints a BenchmarkReport.

    Provides:
    - JSON report output
    - Per-trial CSV export
    - Console summary tables
    """

    def __init__(self, report: BenchmarkReport):
        self.report = report

    def get_leaderboard(self) -> list[dict]:
        """Overall rankings as dictionaries."""
        return [entry.to_dict() for entry in self.report.summary.overall_rankings]

    def save_report(self, output_path: str | Path) -> Path:
        """
        Save the benchmark report to a JSON file.

        Args:
            output_path: Path to save the report

        Returns:
            The path written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.report.to_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Report saved to {output_path}")
        return output_path

    def generate_csv(self, output_path: str | Path) -> Path:
        """
        Generate a CSV file with one row per trial, failures included.

        Args:
            output_path: Path to save the CSV
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            "model",
            "target_words",
            "trial_number",
            "topic",
            "actual_words",
            "deviation",
            "exact_match",
            "error",
        ]

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()

            for model_result in self.report.model_results:
                for wcr in model_result.word_count_results:
                    for trial in wcr.trials:
                        writer.writerow(
                            {
                                "model": model_result.model,
                                "target_words": trial.target_words,
                                "trial_number": trial.trial_number,
                                "topic": trial.topic,
                                "actual_words": trial.actual_words,
                                "deviation": trial.deviation,
                                "exact_match": trial.is_exact_match,
                                "error": trial.error,
                            }
                        )

        logger.info(f"CSV saved to {output_path}")
        return output_path

    def print_summary(self) -> None:
        """Print a summary of the benchmark results to console."""
        report = self.report
        summary = report.summary

        print("\n" + "=" * 70)
        print("WORD COUNT BENCHMARK RESULTS")
        print("=" * 70)
        if not report.complete:
            print("\n(run interrupted - only completed word counts are shown)")

        print("\n" + "-" * 70)
        print("OVERALL PERFORMANCE")
        print("-" * 70)
        print(f"{'Model':<30} {'Accuracy':<12} {'Exact':<12} {'Avg Dev':<10}")
        print("-" * 70)

        for result in report.model_results:
            exact_str = f"{result.total_exact_matches}/{result.total_trials}"
            print(
                f"{result.model:<30} {result.overall_accuracy:<11.2f}% "
                f"{exact_str:<12} {result.average_deviation:<10.2f}"
            )

        print("\n" + "-" * 70)
        print("PERFORMANCE BY WORD COUNT")
        print("-" * 70)

        for result in report.model_results:
            print(f"\nModel: {result.model}")
            print(
                f"  {'Words':<8} {'Accuracy':<10} {'Exact':<8} {'Avg Dev':<9} "
                f"{'Min Dev':<9} {'Max Dev':<9} {'Errors':<6}"
            )
            for wcr in result.word_count_results:
                exact_str = f"{wcr.exact_matches}/{len(wcr.trials)}"
                min_str = "-" if wcr.min_deviation is None else str(wcr.min_deviation)
                max_str = "-" if wcr.max_deviation is None else str(wcr.max_deviation)
                print(
                    f"  {wcr.target_words:<8} {wcr.accuracy_rate:<9.2f}% {exact_str:<8} "
                    f"{wcr.average_deviation:<9.2f} {min_str:<9} {max_str:<9} {wcr.failed_trials:<6}"
                )

        best = summary.best_model
        if best is not None:
            print("\n" + "-" * 70)
            print(f"Best overall performer: {best.model}")
            print(f"  Overall accuracy: {best.overall_accuracy:.2f}%")
            print(f"  Total exact matches: {best.total_exact_matches} out of {best.total_trials}")
            print(f"  Average deviation: {best.average_deviation:.2f} words")

        print("\n" + "=" * 70)
