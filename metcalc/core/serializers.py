"""Serialization utilities — request dict ↔ dataclass, result → JSON-safe dict.

Used by the batch runner and by callers that persist or transmit results.
"""

from __future__ import annotations

import dataclasses
import math
from enum import Enum
from typing import Any

import numpy as np

from metcalc.constants import RESULT_SCHEMA_VERSION
from metcalc.core.errors import InvalidInput
from metcalc.models.material import Composition
from metcalc.models.results import (
    AlloyingRequest,
    AlloyingResult,
    CasterRequest,
    CasterResult,
)


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, np.ndarray):
        return val.tolist()
    if isinstance(val, np.generic):
        return val.item()
    if dataclasses.is_dataclass(val) and not isinstance(val, type):
        return _dataclass_to_dict(val)
    if isinstance(val, dict):
        return {str(k): _serialize_value(v) for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


def _dataclass_to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a JSON-safe dict."""
    result = {}
    for f in dataclasses.fields(obj):
        val = getattr(obj, f.name)
        result[f.name] = _serialize_value(val)
    return result


def _number(data: dict, key: str) -> float:
    """Required numeric field."""
    if key not in data:
        raise InvalidInput(key, f"Missing field: {key}")
    val = data[key]
    if isinstance(val, bool):
        raise InvalidInput(key, f"Field {key} must be a number, got {val!r}")
    try:
        number = float(val)
    except (TypeError, ValueError):
        raise InvalidInput(key, f"Field {key} must be a number, got {val!r}") from None
    if not math.isfinite(number):
        raise InvalidInput(key, f"Field {key} must be finite, got {val!r}")
    return number


def _composition(data: dict, key: str) -> Composition:
    """Element → percent mapping field (may be absent → empty)."""
    raw = data.get(key, {})
    if not isinstance(raw, dict):
        raise InvalidInput(key, f"Field {key} must be an element mapping")
    return {str(element): _number(raw, element) for element in raw}


# =====================================================================
# Requests
# =====================================================================


def dict_to_alloying_request(data: dict) -> AlloyingRequest:
    """Deserialize an alloying request.

    Expected keys: ``melt_mass_kg``, ``initial``, ``target`` and optionally
    ``grade_label``.

    Raises:
        InvalidInput: Naming the missing or non-numeric field.
    """
    return AlloyingRequest(
        melt_mass_kg=_number(data, "melt_mass_kg"),
        initial=_composition(data, "initial"),
        target=_composition(data, "target"),
        grade_label=str(data.get("grade_label", "")),
    )


def dict_to_caster_request(data: dict) -> CasterRequest:
    """Deserialize a caster sizing request.

    Raises:
        InvalidInput: Naming the missing or non-numeric field.
    """
    return CasterRequest(
        grade_label=str(data.get("grade_label", "")),
        heat_mass_t=_number(data, "heat_mass_t"),
        width_m=_number(data, "width_m"),
        thickness_m=_number(data, "thickness_m"),
        speed_m_min=_number(data, "speed_m_min"),
        cycle_time_min=_number(data, "cycle_time_min"),
    )


# =====================================================================
# Results
# =====================================================================


def alloying_result_to_dict(result: AlloyingResult) -> dict:
    """Serialize an AlloyingResult to a JSON-safe dict.

    Adds ``schema_version`` and the derived ``total_additive_kg``.
    """
    d = _dataclass_to_dict(result)
    d["total_additive_kg"] = result.total_additive_kg
    d["schema_version"] = RESULT_SCHEMA_VERSION
    return d


def caster_result_to_dict(result: CasterResult) -> dict:
    """Serialize a CasterResult to a JSON-safe dict.

    Adds ``schema_version`` and the derived ``radius_floor_applied`` flag.
    """
    d = _dataclass_to_dict(result)
    d["radius_floor_applied"] = result.radius_floor_applied
    d["schema_version"] = RESULT_SCHEMA_VERSION
    return d
