"""
Module M5: Result Export & Operational Checks

Builds the informational JSON dump of a computation (timestamp, display unit
system, raw SI inputs, full model result and sensitivity rows) and checks the
computed wellbore pressure against the operational limit. The engine never
reads these dumps back.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union

from .m01_inputs import FracInputs
from .m02_propagation import ModelResult
from .m03_sensitivity import SensitivityRow
from .m04_units import UnitSystem


def pressure_limit_exceeded(result: ModelResult, p_limit: float) -> bool:
    """True if wellbore pressure exceeds the limit (both in Pa)"""
    return result.p_well > p_limit


def _plain(obj: Any) -> Any:
    """Recursively replace enums and tuples with JSON-friendly values"""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


def build_export_record(
    inputs: FracInputs,
    result: ModelResult,
    sensitivity: Sequence[SensitivityRow],
    unit_system: Union[UnitSystem, str] = UnitSystem.SI,
    timestamp: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Structured dump of one computation

    Args:
        inputs: SI inputs
        result: Model result (SI)
        sensitivity: Sensitivity rows
        unit_system: Display unit system in effect at export time
        timestamp: Export time (defaults to now, UTC)

    Returns:
        Dictionary with keys timestamp, unitSystem, inputs, result, sensitivity
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    return {
        "timestamp": timestamp.isoformat(),
        "unitSystem": UnitSystem(unit_system).value,
        "inputs": _plain(inputs.to_dict()),
        "result": _plain(asdict(result)),
        "sensitivity": [_plain(asdict(row)) for row in sensitivity],
    }


def export_json(
    inputs: FracInputs,
    result: ModelResult,
    sensitivity: Sequence[SensitivityRow],
    unit_system: Union[UnitSystem, str] = UnitSystem.SI,
    timestamp: Optional[datetime] = None
) -> str:
    """JSON text of build_export_record, two-space indented"""
    record = build_export_record(inputs, result, sensitivity, unit_system, timestamp)
    return json.dumps(record, indent=2)
