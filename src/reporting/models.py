"""Data structures for the survey reporting pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from src.exceptions import InvalidFilterError
from src.reporting import config

ALL = "all"


@dataclass(frozen=True)
class AggregationFilter:
    """Immutable filter configuration for one report computation.

    ``year`` and ``month`` are either ``"all"`` or an exact value to match.
    Months given as digit strings are normalized to ``int`` and years to
    ``str`` so that equal filters compare equal.
    """

    year: Union[str, int] = ALL
    month: Union[str, int] = ALL
    exclude_ignored: bool = False
    dissatisfied_only: bool = False

    def __post_init__(self) -> None:
        year = str(self.year).strip()
        if not year:
            raise InvalidFilterError("Year filter must be 'all' or a year value.")
        object.__setattr__(self, "year", year)

        if self.month != ALL:
            try:
                if isinstance(self.month, bool):
                    raise ValueError(self.month)
                month = int(self.month)
            except (TypeError, ValueError) as exc:
                raise InvalidFilterError(
                    f"Month filter must be 'all' or 1-12, got {self.month!r}."
                ) from exc
            if not 1 <= month <= 12:
                raise InvalidFilterError(
                    f"Month filter must be 'all' or 1-12, got {self.month!r}."
                )
            object.__setattr__(self, "month", month)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QuestionCatalog:
    """Question key → human-readable label, with a fallback for unknown keys."""

    labels: Mapping[str, str] = field(default_factory=dict, hash=False)
    fallback_label: Optional[str] = None

    def label(self, key: str) -> str:
        """Return the label for *key*; never raises for unknown keys."""
        found = self.labels.get(key)
        if found:
            return found
        if self.fallback_label is not None:
            return self.fallback_label
        return config.UNKNOWN_QUESTION_LABEL


@dataclass(frozen=True)
class QuestionAverage:
    """Average score of one question across the responses that answered it."""

    key: str
    label: str
    score: float
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SatisfactionDistribution:
    """Number of customers per satisfaction tier."""

    dissatisfied: int = 0
    average: int = 0
    good: int = 0
    excellent: int = 0

    @property
    def total(self) -> int:
        return self.dissatisfied + self.average + self.good + self.excellent

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class PartitionCounts:
    """Size of each (filtered) response partition."""

    completed: int = 0
    in_progress: int = 0
    not_answered: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.in_progress + self.not_answered

    def response_rate(self) -> float:
        """Return fraction of surveyed customers who completed (0‒1)."""
        return self.completed / (self.total or 1)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = asdict(self)
        data["total"] = self.total
        data["response_rate"] = self.response_rate()
        return data
