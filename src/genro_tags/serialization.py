# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""JSON serialization for data-* attribute values and the metadata blob."""

from __future__ import annotations

import dataclasses
import datetime
import json
from decimal import Decimal
from typing import Any


def _json_default(value: Any) -> Any:
    """Fallback encoder for values the json module does not handle."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "to_json"):
        return value.to_json()
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def to_json(value: Any) -> str:
    """Serialize value to compact JSON (no whitespace between tokens).

    Example:
        >>> to_json({'k': 'v'})
        '{"k":"v"}'
    """
    return json.dumps(value, default=_json_default, separators=(",", ":"), ensure_ascii=False)
