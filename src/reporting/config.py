"""Configuration constants for the survey reporting pipeline."""
from __future__ import annotations

import os
from typing import Tuple


def _parse_bounds(raw: str) -> Tuple[float, float, float]:
    """Return the three ascending tier boundaries encoded as ``"5,7,9"``."""
    parts = tuple(float(p) for p in raw.split(","))
    if len(parts) != 3 or list(parts) != sorted(parts):
        raise ValueError(f"Expected three ascending bounds, got {raw!r}")
    return parts  # type: ignore[return-value]


# Only answers whose key starts with this prefix count as survey questions
NUMERIC_FIELD_PREFIX: str = os.getenv("SURVEY_FIELD_PREFIX", "Field_")

# Composite scores strictly below this value mark a dissatisfied customer
DISSATISFIED_THRESHOLD: float = float(
    os.getenv("SURVEY_DISSATISFIED_THRESHOLD", "7")
)

# Lower bounds of the "average", "good" and "excellent" tiers
DISTRIBUTION_BOUNDS: Tuple[float, float, float] = _parse_bounds(
    os.getenv("SURVEY_DISTRIBUTION_BOUNDS", "5,7,9")
)

# Field holding the customer's free-text comment
COMMENT_FIELD_KEY: str = os.getenv("SURVEY_COMMENT_FIELD_KEY", "Field_8785_1_17")

# Label shown for question keys missing from the catalog
UNKNOWN_QUESTION_LABEL: str = os.getenv(
    "SURVEY_UNKNOWN_QUESTION_LABEL", "سوال نامشخص"
)

# Prefix the data service puts in front of question keys in its averages map
SERVER_AVERAGE_PREFIX: str = "average_"
