import math
from decimal import Decimal
from enum import Enum
from typing import Any


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively traverse the object and make it JSON-compliant.

    - ``Decimal`` values become floats (non-finite ones become None)
    - NaN and Infinity floats become None
    - Enum members become their values

    Args:
        obj: The object to sanitize (dict, list, float, Decimal, etc.)

    Returns:
        The sanitized object.
    """
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            return None
        return float(obj)
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    elif isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [sanitize_for_json(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(sanitize_for_json(item) for item in obj)
    return obj
