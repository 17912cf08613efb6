"""Composite score of a single survey response."""
from __future__ import annotations

from typing import Iterator, Mapping, Optional, Tuple

from src.reporting import config
from src.survey_data import FieldValue, NumericAnswer


def numeric_answers(
    fields: Mapping[str, FieldValue], *, prefix: Optional[str] = None
) -> Iterator[Tuple[str, float]]:
    """Yield ``(key, score)`` for every scored question in *fields*.

    A field qualifies when its key carries the question prefix **and** its
    value is numeric; comments under the same prefix are skipped by type.
    """
    prefix = config.NUMERIC_FIELD_PREFIX if prefix is None else prefix
    for key, answer in fields.items():
        if key.startswith(prefix) and isinstance(answer, NumericAnswer):
            yield key, answer.value


def customer_score(
    fields: Mapping[str, FieldValue], *, prefix: Optional[str] = None
) -> float:
    """Return the mean of the numeric answers in *fields*, or ``0`` if none."""
    scores = [score for _, score in numeric_answers(fields, prefix=prefix)]
    if not scores:
        return 0
    return sum(scores) / len(scores)


def is_dissatisfied(
    fields: Mapping[str, FieldValue],
    *,
    threshold: Optional[float] = None,
    prefix: Optional[str] = None,
) -> bool:
    """Return *True* if the composite score falls below *threshold*."""
    threshold = config.DISSATISFIED_THRESHOLD if threshold is None else threshold
    return customer_score(fields, prefix=prefix) < threshold
