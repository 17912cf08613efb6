"""Survey export data model.

A survey *export* is what the dealership data service hands over after a
delivery-satisfaction campaign: the question catalog, the service's own
per-question averages and three disjoint partitions of customer responses
(``completed``, ``in_progress`` and ``not_answered``).  Partition membership is
decided upstream and never recomputed here.

Two payload shapes are understood:

* the raw service array – a list of items each carrying some of
  ``AverageAll``, ``perCustomerResults``, ``inProgress``, ``NotAnswered`` and
  ``fieldsGuid`` (see :py:meth:`SurveyData.from_api_items`);
* the processed mapping with ``averages``, ``questions``, ``customers``,
  ``inProgress`` and ``notAnswered`` (see :py:meth:`SurveyData.from_dict`).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from src.reporting.models import QuestionCatalog

logger = logging.getLogger(__name__)


class Partition(str, Enum):
    """The three response partitions assigned by the data service."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    NOT_ANSWERED = "not_answered"


@dataclass(frozen=True)
class NumericAnswer:
    """A 0–10 score given to one survey question."""

    value: float


@dataclass(frozen=True)
class TextAnswer:
    """A free-form answer, e.g. the closing comment."""

    text: str


FieldValue = Union[NumericAnswer, TextAnswer]


def to_answer(value: Any) -> Optional[FieldValue]:
    """Tag a raw JSON field value; ``None`` for JSON ``null``.

    Only real JSON numbers are scores.  Booleans and numeric-looking strings
    stay text, so ``"8"`` never counts towards an average.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return NumericAnswer(value)
    return TextAnswer(str(value))


@dataclass(frozen=True)
class Contact:
    """Customer identity as delivered by the data service."""

    display_name: str = ""
    phone_number: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"display_name": self.display_name, "phone_number": self.phone_number}


def _pick(raw: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first non-null value stored under any of *names*."""
    for name in names:
        value = raw.get(name)
        if value is not None:
            return value
    return default


def _parse_month(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        if isinstance(value, bool):
            raise ValueError(value)
        month = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric delivery month %r", value)
        return None
    if not 1 <= month <= 12:
        logger.warning("Ignoring out-of-range delivery month %r", value)
        return None
    return month


@dataclass(frozen=True)
class SurveyResponse:
    """One customer's survey record.

    ``fields`` is a read-only, ordered, sparse mapping from question key to a
    tagged answer: not every response answers every question.
    """

    contact: Contact = field(default_factory=Contact)
    fields: Mapping[str, FieldValue] = field(default_factory=dict, hash=False)
    description: str = ""
    delivery_month: Optional[int] = None
    delivery_year: Optional[str] = None
    delivery_date: Optional[str] = None
    pipeline_change_time: Optional[str] = None
    ignore: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SurveyResponse":
        """Build a response from one raw service record.

        PascalCase (service) and camelCase spellings are both accepted.
        """
        contact_raw = _pick(raw, "Contact", "contact", default={})
        if not isinstance(contact_raw, Mapping):
            contact_raw = {}
        contact = Contact(
            display_name=str(
                _pick(contact_raw, "DisplayName", "displayName", default="")
            ),
            phone_number=str(
                _pick(
                    contact_raw,
                    "MobilePhone",
                    "phoneNumber",
                    "PhoneNumber",
                    default="",
                )
            ),
        )

        raw_fields = _pick(raw, "Fields", "fields", default={})
        if not isinstance(raw_fields, Mapping):
            logger.warning("Ignoring non-mapping Fields value %r", raw_fields)
            raw_fields = {}
        fields: Dict[str, FieldValue] = {}
        for key, value in raw_fields.items():
            answer = to_answer(value)
            if answer is not None:
                fields[str(key)] = answer

        year = _pick(raw, "DeliveryYear", "deliveryYear")
        delivery_date = _pick(raw, "DeliveryDate", "deliveryDate")
        change_time = _pick(raw, "PipelineChangeTime", "pipelineChangeTime")

        return cls(
            contact=contact,
            fields=fields,
            description=str(_pick(raw, "Description", "description", default="")),
            delivery_month=_parse_month(_pick(raw, "DeliveryMonth", "deliveryMonth")),
            delivery_year=str(year) if year is not None else None,
            delivery_date=str(delivery_date) if delivery_date is not None else None,
            pipeline_change_time=str(change_time) if change_time is not None else None,
            ignore=bool(_pick(raw, "Ignore", "ignore", default=False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain, JSON-serializable representation."""
        fields: Dict[str, Any] = {}
        for key, answer in self.fields.items():
            fields[key] = (
                answer.value if isinstance(answer, NumericAnswer) else answer.text
            )
        return {
            "contact": self.contact.to_dict(),
            "fields": fields,
            "description": self.description,
            "delivery_month": self.delivery_month,
            "delivery_year": self.delivery_year,
            "delivery_date": self.delivery_date,
            "pipeline_change_time": self.pipeline_change_time,
            "ignore": self.ignore,
        }


def _parse_responses(items: Any) -> Tuple[SurveyResponse, ...]:
    if not isinstance(items, list):
        return ()
    return tuple(
        SurveyResponse.from_dict(item) for item in items if isinstance(item, Mapping)
    )


@dataclass(frozen=True)
class SurveyData:
    """One survey export: catalog, service averages and the three partitions."""

    completed: Tuple[SurveyResponse, ...] = ()
    in_progress: Tuple[SurveyResponse, ...] = ()
    not_answered: Tuple[SurveyResponse, ...] = ()
    questions: Mapping[str, str] = field(default_factory=dict, hash=False)
    averages: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def partition(self, which: Partition) -> Tuple[SurveyResponse, ...]:
        """Return the responses of partition *which*."""
        return {
            Partition.COMPLETED: self.completed,
            Partition.IN_PROGRESS: self.in_progress,
            Partition.NOT_ANSWERED: self.not_answered,
        }[Partition(which)]

    @property
    def catalog(self) -> QuestionCatalog:
        return QuestionCatalog(dict(self.questions))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_api_items(cls, items: Any) -> "SurveyData":
        """Normalize the raw service array.

        Items are scanned in order and later items overwrite earlier ones key
        by key.  Anything that is not a list yields an empty export.
        """
        if not isinstance(items, list):
            logger.warning(
                "Survey payload is %s, not a list; using an empty export",
                type(items).__name__,
            )
            return cls()

        averages: Dict[str, Any] = {}
        questions: Dict[str, str] = {}
        partitions: Dict[str, Tuple[SurveyResponse, ...]] = {}

        for item in items:
            if not isinstance(item, Mapping):
                continue
            if isinstance(item.get("AverageAll"), Mapping):
                averages = dict(item["AverageAll"])
            if item.get("perCustomerResults") is not None:
                partitions["completed"] = _parse_responses(item["perCustomerResults"])
            if item.get("inProgress") is not None:
                partitions["in_progress"] = _parse_responses(item["inProgress"])
            if item.get("NotAnswered") is not None:
                partitions["not_answered"] = _parse_responses(item["NotAnswered"])
            if isinstance(item.get("fieldsGuid"), list):
                for entry in item["fieldsGuid"]:
                    if isinstance(entry, Mapping) and "Key" in entry:
                        questions[str(entry["Key"])] = str(entry.get("Title") or "")

        return cls(questions=questions, averages=averages, **partitions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SurveyData":
        """Build an export from the processed mapping shape."""
        return cls(
            completed=_parse_responses(data.get("customers")),
            in_progress=_parse_responses(data.get("inProgress")),
            not_answered=_parse_responses(data.get("notAnswered")),
            questions={
                str(k): "" if v is None else str(v)
                for k, v in (data.get("questions") or {}).items()
            },
            averages=dict(data.get("averages") or {}),
        )

    @classmethod
    def load(cls, payload: Any) -> "SurveyData":
        """Dispatch on payload shape: raw array or processed mapping."""
        if isinstance(payload, Mapping):
            return cls.from_dict(payload)
        return cls.from_api_items(payload)

    def __repr__(self) -> str:
        return (
            f"SurveyData(completed={len(self.completed)}, "
            f"in_progress={len(self.in_progress)}, "
            f"not_answered={len(self.not_answered)}, "
            f"questions={len(self.questions)})"
        )


def iter_partitions(
    data: SurveyData,
) -> Iterable[Tuple[Partition, Tuple[SurveyResponse, ...]]]:
    """Yield ``(partition, responses)`` pairs in display order."""
    for which in Partition:
        yield which, data.partition(which)


__all__ = [
    "Contact",
    "FieldValue",
    "NumericAnswer",
    "Partition",
    "SurveyData",
    "SurveyResponse",
    "TextAnswer",
    "iter_partitions",
    "to_answer",
]
