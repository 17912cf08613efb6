"""Apply an :class:`AggregationFilter` across the response partitions."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from src.analysis.scoring import is_dissatisfied
from src.reporting.models import ALL, AggregationFilter
from src.survey_data import Partition, SurveyData, SurveyResponse, iter_partitions

logger = logging.getLogger(__name__)


def matches(response: SurveyResponse, survey_filter: AggregationFilter) -> bool:
    """Return *True* if *response* passes the year, month and ignore checks."""
    if survey_filter.year != ALL and response.delivery_year != survey_filter.year:
        return False
    if survey_filter.month != ALL and str(response.delivery_month) != str(
        survey_filter.month
    ):
        return False
    if survey_filter.exclude_ignored and response.ignore:
        return False
    return True


def filter_partition(
    responses: Iterable[SurveyResponse],
    survey_filter: AggregationFilter,
    *,
    completed: bool = False,
    threshold: Optional[float] = None,
) -> List[SurveyResponse]:
    """Return the responses of one partition that pass *survey_filter*.

    ``dissatisfied_only`` is honoured only when *completed* is set, since
    pending responses carry no scores.  Input order is preserved and the
    input is never mutated.
    """
    kept = [r for r in responses if matches(r, survey_filter)]
    if completed and survey_filter.dissatisfied_only:
        kept = [r for r in kept if is_dissatisfied(r.fields, threshold=threshold)]
    return kept


def filter_partitions(
    data: SurveyData,
    survey_filter: AggregationFilter,
    *,
    threshold: Optional[float] = None,
) -> Dict[Partition, List[SurveyResponse]]:
    """Filter all three partitions of *data* with the same predicate."""
    filtered: Dict[Partition, List[SurveyResponse]] = {}
    for which, responses in iter_partitions(data):
        filtered[which] = filter_partition(
            responses,
            survey_filter,
            completed=which is Partition.COMPLETED,
            threshold=threshold,
        )
        logger.debug(
            "Filter %s kept %d/%d %s responses",
            survey_filter,
            len(filtered[which]),
            len(responses),
            which.value,
        )
    return filtered
