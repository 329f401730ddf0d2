"""
Base schemas and coercion helpers shared by all models.
"""

import math
from pydantic import BaseModel, ConfigDict
from typing import Any


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


def coerce_number(value: Any, default: float) -> float:
    """
    Coerce a loosely-typed numeric field.

    Planning rows come from spreadsheets and the AI parser, so "1,500",
    "", None and "abc" all show up. Anything that is not a finite number
    becomes the default instead of failing validation.

    Examples:
        coerce_number("1,500", 0) → 1500.0
        coerce_number(None, 1)    → 1
        coerce_number("abc", 0)   → 0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_text(value: Any) -> str:
    """None becomes "", everything else its string form."""
    if value is None:
        return ""
    return str(value)
