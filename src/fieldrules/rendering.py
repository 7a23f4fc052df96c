"""Canonical string rendering of scalar values.

Rules operate on the string form of a value, not its native type, so the
rendering must be stable:

- str: unchanged
- bool: "true" / "false"
- int: decimal digits
- float: integral values below 1e21 print without a fractional part
  ("3", not "3.0"); everything else uses repr() ("0.5", "1e-05",
  "1e+21"); nan -> "NaN", inf -> "+Inf", -inf -> "-Inf"
- Decimal: str()
- Enum: rendering of its value
- date / datetime / time: isoformat()
- UUID: canonical hyphenated form
"""

import math
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

SCALAR_TYPES = (str, bool, int, float, Decimal, Enum, date, datetime, time, UUID)

# Types a parameterized rule accepts (bool is excluded).
PARAM_KINDS = (str, int, float, Decimal)


def is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def kind_name(value: Any) -> str:
    """Short type name used in error messages ("str", "int", "list", ...)."""
    if isinstance(value, Enum):
        return kind_name(value.value)
    return type(value).__name__


def render_value(value: Any) -> str:
    """Render a scalar to the string form predicates are evaluated on."""
    if isinstance(value, Enum):
        return render_value(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _render_float(value)
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    return str(value)


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)
