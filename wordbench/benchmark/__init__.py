"""Benchmark module for running word count evaluations across multiple models."""

from .config import BenchmarkConfig, InvalidConfiguration, WORD_COUNT_PRESETS
from .runner import BenchmarkEngine, ProgressEvent
from .aggregator import BenchmarkReport, ResultsAggregator, Summary, summarize
from .plots import BenchmarkPlotter

__all__ = [
    "BenchmarkConfig",
    "InvalidConfiguration",
    "WORD_COUNT_PRESETS",
    "BenchmarkEngine",
    "ProgressEvent",
    "BenchmarkReport",
    "ResultsAggregator",
    "Summary",
    "summarize",
    "BenchmarkPlotter",
]
