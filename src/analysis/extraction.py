"""Pull vehicle attributes out of a response's free-text description.

The data service stores delivery details as marker-labelled text mixed with
HTML, e.g. ``"نام خودرو: X200<br>رنگ خودرو: سفید"``.  Each marker is located on
a fresh scan of the whole blob; the value runs until the next ``<`` or the end
of the text.  Missing markers give empty strings, never an error.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Sequence, Tuple

from src.reporting import config
from src.survey_data import FieldValue, TextAnswer

# (output field, marker) pairs searched in a delivery description
VEHICLE_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("car_model", "نام خودرو"),
    ("color", "رنگ خودرو"),
    ("chassis_number", "شماره شاسی"),
    ("delivery_date_text", "تاریخ تحویل"),
)

# Placeholder the survey form stores when a comment was left blank
_EMPTY_COMMENT = "-"


@dataclass(frozen=True)
class ExtractedVehicleInfo:
    """Vehicle details scraped from a description; empty when absent."""

    car_model: str = ""
    color: str = ""
    chassis_number: str = ""
    delivery_date_text: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@lru_cache(maxsize=64)
def _marker_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(re.escape(marker) + r":?\s*([^<]*)")


def extract_fields(
    text: Optional[str], markers: Sequence[Tuple[str, str]]
) -> Dict[str, str]:
    """Return ``{field_name: value}`` for every ``(field_name, marker)`` pair.

    The first occurrence of each marker wins; duplicates are not merged.
    """
    blob = text or ""
    out: Dict[str, str] = {}
    for name, marker in markers:
        match = _marker_pattern(marker).search(blob) if marker else None
        out[name] = match.group(1).strip() if match else ""
    return out


def extract_vehicle_info(
    description: Optional[str],
    markers: Sequence[Tuple[str, str]] = VEHICLE_MARKERS,
) -> ExtractedVehicleInfo:
    """Scrape model, color, chassis number and delivery date from *description*."""
    found = extract_fields(description, markers)
    return ExtractedVehicleInfo(
        car_model=found.get("car_model", ""),
        color=found.get("color", ""),
        chassis_number=found.get("chassis_number", ""),
        delivery_date_text=found.get("delivery_date_text", ""),
    )


def extract_comment(
    fields: Mapping[str, FieldValue], key: Optional[str] = None
) -> Optional[str]:
    """Return the customer's free-text comment, or ``None`` if there is none.

    Blank comments and the ``-`` placeholder count as no comment.
    """
    answer = fields.get(key or config.COMMENT_FIELD_KEY)
    if not isinstance(answer, TextAnswer):
        return None
    text = answer.text.strip()
    if not text or text == _EMPTY_COMMENT:
        return None
    return text
