"""
Module M4: Display Unit Conversion

Converts between SI (the engine's only unit system) and oilfield (Field)
display units. The propagation engine never calls this module; only the
dashboard and demo scripts do, before calling in and after reading out.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

from dataclasses import fields
from enum import Enum
from typing import Dict, Union

from .m01_inputs import FracInputs

try:
    from config import UNIT_SYSTEMS, PARAM_UNIT_MAP
except ImportError:
    # Fallback when the project root is not on sys.path
    import sys
    import os
    sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
    from config import UNIT_SYSTEMS, PARAM_UNIT_MAP


class UnitSystem(str, Enum):
    SI = "SI"
    FIELD = "Field"


def _factor(category: str, system: Union[UnitSystem, str]) -> float:
    system = UnitSystem(system)
    table = UNIT_SYSTEMS[system.value]
    if category not in table:
        raise ValueError(f"Unknown unit category: {category!r}")
    return table[category]["toSI"]


def convert_value(
    value: float,
    category: str,
    from_system: Union[UnitSystem, str],
    to_system: Union[UnitSystem, str]
) -> float:
    """
    Convert a value between unit systems

    SI = value · toSI(from); result = SI / toSI(to)
    """
    if UnitSystem(from_system) == UnitSystem(to_system):
        # Still validates the category
        _factor(category, from_system)
        return value
    return value * _factor(category, from_system) / _factor(category, to_system)


def to_si(value: float, category: str, system: Union[UnitSystem, str]) -> float:
    return convert_value(value, category, system, UnitSystem.SI)


def to_display(value: float, category: str, system: Union[UnitSystem, str]) -> float:
    return convert_value(value, category, UnitSystem.SI, system)


def convert_inputs(
    inputs: Union[FracInputs, Dict[str, float]],
    from_system: Union[UnitSystem, str],
    to_system: Union[UnitSystem, str]
) -> Union[FracInputs, Dict[str, float]]:
    """
    Convert every input field; returns the same kind it was given

    Args:
        inputs: FracInputs or dict with the same keys
        from_system: Unit system of the given values
        to_system: Target unit system

    Returns:
        Converted FracInputs or dict
    """
    if isinstance(inputs, FracInputs):
        values = inputs.to_dict()
    else:
        values = dict(inputs)

    converted = {}
    for key, value in values.items():
        if key not in PARAM_UNIT_MAP:
            raise ValueError(f"Unknown input parameter: {key!r}")
        converted[key] = convert_value(value, PARAM_UNIT_MAP[key], from_system, to_system)

    if isinstance(inputs, FracInputs):
        return FracInputs(**converted)
    return converted


def unit_label(category: str, system: Union[UnitSystem, str]) -> str:
    """Display label of a unit category"""
    _factor(category, system)
    return UNIT_SYSTEMS[UnitSystem(system).value][category]["label"]


def param_unit_label(param: str, system: Union[UnitSystem, str]) -> str:
    """Display label of an input parameter"""
    if param not in PARAM_UNIT_MAP:
        raise ValueError(f"Unknown input parameter: {param!r}")
    return unit_label(PARAM_UNIT_MAP[param], system)


# Input fields in declaration order, for form rendering
INPUT_FIELDS = tuple(f.name for f in fields(FracInputs))
