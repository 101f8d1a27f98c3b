"""Benchmark engine for running the model x word count x trial matrix."""

import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..catalog import ModelCatalog, ModelEntry
from ..llm_interface import LLMProvider, get_provider
from ..metrics import ModelAccumulator, ModelResult, Trial
from ..trial import TrialRunner
from .aggregator import BenchmarkReport
from .config import BenchmarkConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted after every recorded trial."""

    current: int  # 1-based position in the whole run
    total: int
    model: str
    target_words: int
    trial_number: int
    trial: Trial


ProviderFactory = Callable[[ModelEntry], LLMProvider]


def default_provider_factory(entry: ModelEntry) -> LLMProvider:
    """Build a provider for a catalog entry, reading API keys from the environment."""
    return get_provider(entry.provider, entry.model_name)


class BenchmarkEngine:
    """
    Runs every model against every target word count, several times each.

    Execution is strictly sequential: models in configured order, then word
    counts in configured order, then trials 1..N. A failed trial is recorded
    and the run moves on; only a bad configuration stops a run, and it does so
    before any trial is sent.
    """

    def __init__(
        self,
        catalog: Optional[ModelCatalog] = None,
        provider_factory: Optional[ProviderFactory] = None,
        trial_runner: Optional[TrialRunner] = None,
        progress_callback: Optional[Callable[[ProgressEvent], None]] = None,
    ):
        """
        Initialize the engine.

        Args:
            catalog: Model lookup table, defaults to the built-in catalog
            provider_factory: Builds the completion backend for a catalog entry
            trial_runner: Runs single trials; built from the config seed when omitted
            progress_callback: Optional observer called after each trial
        """
        self.catalog = catalog if catalog is not None else ModelCatalog()
        self.provider_factory = provider_factory or default_provider_factory
        self.trial_runner = trial_runner
        self.progress_callback = progress_callback
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """Stop the run before the next trial starts."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _report_progress(self, event: ProgressEvent) -> None:
        if self.progress_callback:
            self.progress_callback(event)

    def execute(self, config: BenchmarkConfig) -> BenchmarkReport:
        """
        Execute the full benchmark.

        Args:
            config: Validated run configuration

        Returns:
            BenchmarkReport with model results in configured order. If the run
            was cancelled or interrupted, only fully finished word count groups
            are included and ``complete`` is False.

        Raises:
            InvalidConfiguration: On an unusable configuration
            UnknownModel: If a configured model is not in the catalog
        """
        config.validate(self.catalog)
        entries = self.catalog.resolve_all(config.models)
        providers = {model: self.provider_factory(entry) for model, entry in entries.items()}

        trial_runner = self.trial_runner or TrialRunner(rng=random.Random(config.seed))
        self._cancel_event.clear()

        start_time = datetime.now()
        total = config.total_trials

        logger.info(f"Benchmark: {total} total trials")
        logger.info(f"  Models: {list(config.models)}")
        logger.info(f"  Word counts: {list(config.word_counts)}")
        logger.info(f"  Trials per word count: {config.trials_per_word_count}")
        logger.info(f"  Temperature: {config.temperature}")

        accumulators: list[ModelAccumulator] = []
        current = 0
        complete = True

        try:
            for model in config.models:
                accumulator = ModelAccumulator(
                    model, list(config.word_counts), config.trials_per_word_count
                )
                accumulators.append(accumulator)

                for target_words in config.word_counts:
                    for trial_number in range(1, config.trials_per_word_count + 1):
                        if self.cancelled:
                            raise _Cancelled()

                        trial = trial_runner.run(
                            providers[model], target_words, trial_number, config.temperature
                        )
                        accumulator.record(trial)
                        current += 1

                        if not trial.succeeded:
                            logger.warning(
                                f"Error testing {model} ({target_words} words, "
                                f"trial {trial_number}): {trial.error}"
                            )

                        self._report_progress(
                            ProgressEvent(
                                current=current,
                                total=total,
                                model=model,
                                target_words=target_words,
                                trial_number=trial_number,
                                trial=trial,
                            )
                        )

                    wcr = accumulator.complete_group(target_words)
                    logger.info(
                        f"  {model} @ {target_words} words: "
                        f"{wcr.exact_matches}/{wcr.trial_count} exact "
                        f"({wcr.accuracy_rate:.1f}%), avg deviation {wcr.average_deviation:.2f}"
                    )
        except (_Cancelled, KeyboardInterrupt):
            complete = False
            logger.warning(f"Benchmark cancelled after {current}/{total} trials")

        # Partially run groups are dropped; models with no finished group are left out
        model_results: list[ModelResult] = [a.finalize() for a in accumulators if a.results]

        end_time = datetime.now()
        duration = (end_time - start_time).total_seconds()

        logger.info("=" * 50)
        logger.info("BENCHMARK COMPLETE" if complete else "BENCHMARK INCOMPLETE")
        logger.info("=" * 50)
        logger.info(f"Trials run: {current}/{total}")
        logger.info(f"Duration: {duration:.1f}s")

        return BenchmarkReport(
            config=config,
            model_results=tuple(model_results),
            complete=complete,
            started_at=start_time.isoformat(),
            finished_at=end_time.isoformat(),
        )


class _Cancelled(Exception):
    pass
