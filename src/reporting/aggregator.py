"""Aggregate filtered survey responses into question averages and tiers."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.analysis.scoring import customer_score, numeric_answers
from src.reporting import config
from src.reporting.models import (
    QuestionAverage,
    QuestionCatalog,
    SatisfactionDistribution,
)
from src.survey_data import SurveyResponse

logger = logging.getLogger(__name__)


def _tally_answers(
    responses: Iterable[SurveyResponse], prefix: Optional[str]
) -> Dict[str, Tuple[float, int]]:
    """Return ``key → (sum, count)`` in first-encounter order."""
    totals: Dict[str, Tuple[float, int]] = {}
    for response in responses:
        for key, score in numeric_answers(response.fields, prefix=prefix):
            running, count = totals.get(key, (0, 0))
            totals[key] = (running + score, count + 1)
    return totals


def question_averages(
    responses: Iterable[SurveyResponse],
    catalog: QuestionCatalog,
    *,
    prefix: Optional[str] = None,
) -> List[QuestionAverage]:
    """Average each question over the responses that answered it.

    The field map is sparse, so every question is divided by its own answer
    count.  The result is sorted by score, highest first; equal scores keep
    the order in which their questions were first seen.
    """
    averages = [
        QuestionAverage(
            key=key, label=catalog.label(key), score=total / count, count=count
        )
        for key, (total, count) in _tally_answers(responses, prefix).items()
    ]
    averages.sort(key=lambda item: item.score, reverse=True)
    logger.debug("Computed averages for %d questions", len(averages))
    return averages


def overall_index(averages: Sequence[QuestionAverage]) -> float:
    """Return the customer satisfaction index: the plain mean of the averages.

    Every question weighs the same regardless of how many customers
    answered it.
    """
    if not averages:
        return 0.0
    return sum(item.score for item in averages) / len(averages)


def classify_score(
    score: float, bounds: Optional[Tuple[float, float, float]] = None
) -> str:
    """Return the tier name of *score*: ``[0,5)``, ``[5,7)``, ``[7,9)``, ``[9,10]``."""
    low, mid, high = bounds or config.DISTRIBUTION_BOUNDS
    if score < low:
        return "dissatisfied"
    if score < mid:
        return "average"
    if score < high:
        return "good"
    return "excellent"


def build_distribution(
    responses: Iterable[SurveyResponse],
    *,
    bounds: Optional[Tuple[float, float, float]] = None,
    prefix: Optional[str] = None,
) -> SatisfactionDistribution:
    """Count customers per satisfaction tier by their composite score."""
    counts: Dict[str, int] = {
        "dissatisfied": 0,
        "average": 0,
        "good": 0,
        "excellent": 0,
    }
    for response in responses:
        score = customer_score(response.fields, prefix=prefix)
        counts[classify_score(score, bounds)] += 1
    return SatisfactionDistribution(**counts)


def summarize_server_averages(
    averages: Mapping[str, object], catalog: QuestionCatalog
) -> List[QuestionAverage]:
    """Label and sort the averages precomputed by the data service.

    Keys arrive as ``average_<question key>``; unparseable scores become 0.
    """
    out: List[QuestionAverage] = []
    for raw_key, raw_score in averages.items():
        key = str(raw_key)
        if key.startswith(config.SERVER_AVERAGE_PREFIX):
            key = key[len(config.SERVER_AVERAGE_PREFIX) :]
        try:
            score = float(raw_score)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Non-numeric server average %r for %s", raw_score, key)
            score = 0.0
        out.append(QuestionAverage(key=key, label=catalog.label(key), score=score))
    out.sort(key=lambda item: item.score, reverse=True)
    return out
