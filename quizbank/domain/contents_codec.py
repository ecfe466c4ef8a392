from __future__ import annotations

import json
from typing import Any

from ..errors import ValidationError


def serialize_contents(value: Any) -> str:
    """Encode quiz contents as JSON text.

    Only values that decode back to an equal value are accepted: NaN/Infinity,
    tuples and non-string dict keys are rejected instead of being reshaped.
    """
    try:
        text = json.dumps(value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"contents is not serializable: {e}") from e
    decoded = json.loads(text)
    if decoded != value or not _same_shape(decoded, value):
        raise ValidationError("contents would not survive a JSON round trip (use str keys and lists)")
    return text


def _same_shape(decoded: Any, value: Any) -> bool:
    # == treats (1, 2) != [1, 2] but True == 1 and 1 == 1.0; compare container types too
    if type(decoded) is not type(value):
        return isinstance(decoded, (int, float)) and isinstance(value, (int, float)) \
            and not isinstance(value, bool) and not isinstance(decoded, bool)
    if isinstance(value, dict):
        return all(_same_shape(decoded[k], v) for k, v in value.items())
    if isinstance(value, list):
        return all(_same_shape(d, v) for d, v in zip(decoded, value))
    return True


def deserialize_contents(text: str) -> Any:
    """Decode stored contents. Raises ValueError on anything that isn't UTF-8 JSON text."""
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    if not isinstance(text, str):
        raise ValueError(f"expected text, got {type(text).__name__}")
    return json.loads(text)
