"""Trial outcomes and running statistics for word count benchmarks."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Trial:
    """One attempt at producing an exact word count."""

    target_words: int
    topic: str
    trial_number: int  # 1-based within its (model, target) group
    actual_words: Optional[int] = None
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, target_words: int, topic: str, trial_number: int, text: str, actual_words: int) -> "Trial":
        return cls(
            target_words=target_words,
            topic=topic,
            trial_number=trial_number,
            actual_words=actual_words,
            text=text,
        )

    @classmethod
    def failure(cls, target_words: int, topic: str, trial_number: int, error: str) -> "Trial":
        return cls(
            target_words=target_words,
            topic=topic,
            trial_number=trial_number,
            error=error,
        )

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def deviation(self) -> Optional[int]:
        """Absolute distance from the target; None for failed trials."""
        if not self.succeeded:
            return None
        return abs(self.actual_words - self.target_words)

    @property
    def is_exact_match(self) -> bool:
        return self.deviation == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        if not self.succeeded:
            return {
                "trial_number": self.trial_number,
                "target_words": self.target_words,
                "topic": self.topic,
                "error": self.error,
            }
        return {
            "trial_number": self.trial_number,
            "target_words": self.target_words,
            "actual_words": self.actual_words,
            "deviation": self.deviation,
            "topic": self.topic,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Trial":
        """Load from dictionary."""
        return cls(
            target_words=data["target_words"],
            topic=data.get("topic", ""),
            trial_number=data["trial_number"],
            actual_words=data.get("actual_words"),
            text=data.get("text"),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class WordCountResult:
    """Aggregate over every trial of one (model, target word count) group."""

    target_words: int
    trial_count: int  # configured trials for the group, the denominator for rates
    trials: tuple[Trial, ...] = ()
    exact_matches: int = 0
    total_deviation: int = 0
    min_deviation: Optional[int] = None  # None when no trial succeeded
    max_deviation: Optional[int] = None

    @property
    def average_deviation(self) -> float:
        """
        Total deviation over the configured trial count.

        Failed trials add nothing to the total but still count in the
        denominator, so a group with failures reads as more accurate than its
        successful trials alone would suggest.
        """
        return self.total_deviation / self.trial_count if self.trial_count > 0 else 0

    @property
    def accuracy_rate(self) -> float:
        """Percentage of configured trials that hit the target exactly."""
        return self.exact_matches / self.trial_count * 100 if self.trial_count > 0 else 0

    @property
    def successful_trials(self) -> int:
        return sum(1 for t in self.trials if t.succeeded)

    @property
    def failed_trials(self) -> int:
        return len(self.trials) - self.successful_trials

    @property
    def failure_rate(self) -> float:
        return self.failed_trials / self.trial_count * 100 if self.trial_count > 0 else 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "target_words": self.target_words,
            "trial_count": self.trial_count,
            "trials": [t.to_dict() for t in self.trials],
            "exact_matches": self.exact_matches,
            "failed_trials": self.failed_trials,
            "total_deviation": self.total_deviation,
            "min_deviation": self.min_deviation,
            "max_deviation": self.max_deviation,
            "average_deviation": round(self.average_deviation, 2),
            "accuracy_rate": round(self.accuracy_rate, 2),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WordCountResult":
        """Load from dictionary."""
        trials = tuple(Trial.from_dict(t) for t in data.get("trials", []))
        return cls(
            target_words=data["target_words"],
            trial_count=data.get("trial_count", len(trials)),
            trials=trials,
            exact_matches=data["exact_matches"],
            total_deviation=data["total_deviation"],
            min_deviation=data.get("min_deviation"),
            max_deviation=data.get("max_deviation"),
        )


@dataclass(frozen=True)
class ModelResult:
    """Aggregate over every word count tested for one model."""

    model: str
    word_count_results: tuple[WordCountResult, ...] = ()
    total_trials: int = 0
    total_exact_matches: int = 0
    total_deviation: int = 0

    @property
    def overall_accuracy(self) -> float:
        """Exact matches as a percentage of all trials."""
        return self.total_exact_matches / self.total_trials * 100 if self.total_trials > 0 else 0

    @property
    def average_deviation(self) -> float:
        return self.total_deviation / self.total_trials if self.total_trials > 0 else 0

    def get_word_count_result(self, target_words: int) -> Optional[WordCountResult]:
        """Find the result for one target, if it was tested."""
        for result in self.word_count_results:
            if result.target_words == target_words:
                return result
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "model": self.model,
            "word_count_results": [r.to_dict() for r in self.word_count_results],
            "overall_stats": {
                "total_trials": self.total_trials,
                "total_exact_matches": self.total_exact_matches,
                "total_deviation": self.total_deviation,
                "overall_accuracy": round(self.overall_accuracy, 2),
                "average_deviation": round(self.average_deviation, 2),
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ModelResult":
        """Load from dictionary."""
        stats = data["overall_stats"]
        return cls(
            model=data["model"],
            word_count_results=tuple(
                WordCountResult.from_dict(r) for r in data.get("word_count_results", [])
            ),
            total_trials=stats["total_trials"],
            total_exact_matches=stats["total_exact_matches"],
            total_deviation=stats["total_deviation"],
        )


class WordCountAccumulator:
    """Tracks running statistics for one (model, target word count) group."""

    def __init__(self, target_words: int):
        self.target_words = target_words
        self.trials: list[Trial] = []
        self.exact_matches = 0
        self.total_deviation = 0
        self.min_deviation: Optional[int] = None
        self.max_deviation: Optional[int] = None
        self._result: Optional[WordCountResult] = None

    @property
    def is_finalized(self) -> bool:
        return self._result is not None

    def record(self, trial: Trial) -> None:
        """Record a trial result."""
        if self.is_finalized:
            raise RuntimeError(f"Group for {self.target_words} words is already finalized")
        if trial.target_words != self.target_words:
            raise ValueError(
                f"Trial targets {trial.target_words} words, group targets {self.target_words}"
            )

        self.trials.append(trial)

        deviation = trial.deviation
        if deviation is None:
            return

        if deviation == 0:
            self.exact_matches += 1
        self.total_deviation += deviation
        self.min_deviation = deviation if self.min_deviation is None else min(self.min_deviation, deviation)
        self.max_deviation = deviation if self.max_deviation is None else max(self.max_deviation, deviation)

    def finalize(self, configured_trial_count: int) -> WordCountResult:
        """
        Freeze the group into a WordCountResult.

        Args:
            configured_trial_count: Trials the group was configured for; used as
                the denominator for average deviation and accuracy rate

        Returns:
            The finished WordCountResult
        """
        if self._result is not None:
            return self._result
        if len(self.trials) > configured_trial_count:
            raise ValueError(
                f"Recorded {len(self.trials)} trials but only {configured_trial_count} were configured"
            )

        self._result = WordCountResult(
            target_words=self.target_words,
            trial_count=configured_trial_count,
            trials=tuple(self.trials),
            exact_matches=self.exact_matches,
            total_deviation=self.total_deviation,
            min_deviation=self.min_deviation,
            max_deviation=self.max_deviation,
        )
        return self._result


class ModelAccumulator:
    """Holds one WordCountAccumulator per configured target for a single model."""

    def __init__(self, model: str, word_counts: list[int], trials_per_word_count: int):
        self.model = model
        self.trials_per_word_count = trials_per_word_count
        self.groups: dict[int, WordCountAccumulator] = {
            target: WordCountAccumulator(target) for target in word_counts
        }
        self.results: list[WordCountResult] = []

    def record(self, trial: Trial) -> None:
        """Route a trial to the group for its target."""
        self.groups[trial.target_words].record(trial)

    def complete_group(self, target_words: int) -> WordCountResult:
        """Finalize one group and append it to the model's ordered results."""
        group = self.groups[target_words]
        if group.is_finalized:
            raise RuntimeError(f"Group for {target_words} words is already complete for {self.model}")
        result = group.finalize(self.trials_per_word_count)
        self.results.append(result)
        return result

    def finalize(self) -> ModelResult:
        """Sum every completed group into the model's overall statistics."""
        return ModelResult(
            model=self.model,
            word_count_results=tuple(self.results),
            total_trials=sum(r.trial_count for r in self.results),
            total_exact_matches=sum(r.exact_matches for r in self.results),
            total_deviation=sum(r.total_deviation for r in self.results),
        )
