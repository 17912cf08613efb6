"""Report container for the survey satisfaction view.

This module defines :class:`SurveyReport`, a typed container holding every
value the report view shows for one filter configuration, and
:func:`build_survey_report`, which runs the whole pipeline:

    partitions + catalog → filter → {averages, index, distribution,
    per-customer summaries}, plus the service's own averages as-is

Keeping the computation here, apart from any presentation code, means:
    • The report can be rebuilt from scratch on every filter change.
    • Business logic is unit-tested without a UI.
    • Other outputs (JSON export, CLI) reuse the same object.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from src.analysis.extraction import (
    ExtractedVehicleInfo,
    extract_comment,
    extract_vehicle_info,
)
from src.analysis.scoring import customer_score
from src.reporting import config
from src.reporting.aggregator import (
    build_distribution,
    overall_index,
    question_averages,
    summarize_server_averages,
)
from src.reporting.filters import filter_partitions
from src.reporting.models import (
    AggregationFilter,
    PartitionCounts,
    QuestionAverage,
    SatisfactionDistribution,
)
from src.survey_data import Contact, Partition, SurveyData, SurveyResponse

__all__ = [
    "CustomerSummary",
    "SurveyReport",
    "build_survey_report",
    "summarize_customer",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CustomerSummary:
    """One customer card: identity, composite score and scraped details."""

    contact: Contact
    status: Partition
    score: float = 0
    dissatisfied: bool = False
    vehicle: ExtractedVehicleInfo = field(default_factory=ExtractedVehicleInfo)
    comment: Optional[str] = None
    delivery_date: Optional[str] = None
    pipeline_change_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` representation."""
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(slots=True)
class SurveyReport:
    """Container with all fields shown by the survey report view."""

    survey_filter: AggregationFilter

    # Status overview
    counts: PartitionCounts

    # Satisfaction statistics over the filtered completed partition
    question_averages: List[QuestionAverage] = field(default_factory=list)
    overall_index: float = 0.0
    distribution: SatisfactionDistribution = field(
        default_factory=SatisfactionDistribution
    )

    # Averages precomputed by the data service over the whole export
    server_averages: List[QuestionAverage] = field(default_factory=list)

    # Per-customer cards
    customers: List[CustomerSummary] = field(default_factory=list)
    in_progress: List[CustomerSummary] = field(default_factory=list)
    not_answered: List[CustomerSummary] = field(default_factory=list)

    # Filtered partitions as handed to the aggregators
    partitions: Dict[Partition, List[SurveyResponse]] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) suitable for JSON."""
        return {
            "filter": self.survey_filter.to_dict(),
            "counts": self.counts.to_dict(),
            "question_averages": [qa.to_dict() for qa in self.question_averages],
            "overall_index": self.overall_index,
            "distribution": self.distribution.to_dict(),
            "server_averages": [qa.to_dict() for qa in self.server_averages],
            "customers": [c.to_dict() for c in self.customers],
            "in_progress": [c.to_dict() for c in self.in_progress],
            "not_answered": [c.to_dict() for c in self.not_answered],
            "partitions": {
                which.value: [r.to_dict() for r in responses]
                for which, responses in self.partitions.items()
            },
        }

    # Alias for convenience
    __call__ = to_dict


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------
def summarize_customer(
    response: SurveyResponse,
    status: Partition,
    *,
    threshold: Optional[float] = None,
) -> CustomerSummary:
    """Build the card shown for *response*.

    Pending responses carry no answers, so only completed ones are scored.
    """
    threshold = config.DISSATISFIED_THRESHOLD if threshold is None else threshold
    score = customer_score(response.fields) if status is Partition.COMPLETED else 0
    return CustomerSummary(
        contact=response.contact,
        status=status,
        score=score,
        dissatisfied=status is Partition.COMPLETED and score < threshold,
        vehicle=extract_vehicle_info(response.description),
        comment=extract_comment(response.fields),
        delivery_date=response.delivery_date,
        pipeline_change_time=response.pipeline_change_time,
    )


def build_survey_report(
    data: SurveyData,
    survey_filter: Optional[AggregationFilter] = None,
) -> SurveyReport:
    """Compute the full report for *data* under *survey_filter*.

    The function is *pure* – it does not mutate *data*, keeps no state
    between calls, and the same inputs always give the same report.
    """
    survey_filter = survey_filter or AggregationFilter()
    partitions = filter_partitions(data, survey_filter)
    completed = partitions[Partition.COMPLETED]

    catalog = data.catalog
    averages = question_averages(completed, catalog)
    distribution = build_distribution(completed)

    counts = PartitionCounts(
        completed=len(completed),
        in_progress=len(partitions[Partition.IN_PROGRESS]),
        not_answered=len(partitions[Partition.NOT_ANSWERED]),
    )
    logger.debug(
        "Survey report: %d completed, %d questions, filter=%s",
        counts.completed,
        len(averages),
        survey_filter,
    )

    return SurveyReport(
        survey_filter=survey_filter,
        counts=counts,
        question_averages=averages,
        overall_index=overall_index(averages),
        distribution=distribution,
        server_averages=summarize_server_averages(data.averages, catalog),
        customers=[summarize_customer(r, Partition.COMPLETED) for r in completed],
        in_progress=[
            summarize_customer(r, Partition.IN_PROGRESS)
            for r in partitions[Partition.IN_PROGRESS]
        ],
        not_answered=[
            summarize_customer(r, Partition.NOT_ANSWERED)
            for r in partitions[Partition.NOT_ANSWERED]
        ],
        partitions=partitions,
    )
