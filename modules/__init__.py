"""
Hydraulic Fracture Propagation Simulator — Modules Package

This package contains the five-module architecture for analytical fracture
propagation:

Modules:
- M1: Input Set, Validation & Plane-Strain Modulus
- M2: Analytical Propagation Engine (PKN / KGD / Radial)
- M3: Parameter Sensitivity Analyzer
- M4: Display Unit Conversion
- M5: Result Export & Operational Checks

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

from .m01_inputs import (
    FracInputs,
    FractureModelError,
    InvalidInputError,
    DegenerateResultError,
    UnsupportedModelError,
    FractureModelWarning,
    GeometryAssumptionWarning,
    VolumeBalanceWarning,
    validate_inputs,
    plane_strain_modulus
)
from .m02_propagation import (
    ModelType,
    ModelResult,
    TimeStep,
    ProfilePoint,
    classify_regime,
    compute,
    calculate_pkn,
    calculate_kgd,
    calculate_radial,
    compare_models
)
from .m03_sensitivity import SensitivityRow, run_sensitivity
from .m04_units import UnitSystem, convert_inputs, convert_value
from .m05_export import build_export_record, export_json, pressure_limit_exceeded

__all__ = [
    'FracInputs',
    'FractureModelError',
    'InvalidInputError',
    'DegenerateResultError',
    'UnsupportedModelError',
    'FractureModelWarning',
    'GeometryAssumptionWarning',
    'VolumeBalanceWarning',
    'validate_inputs',
    'plane_strain_modulus',
    'ModelType',
    'ModelResult',
    'TimeStep',
    'ProfilePoint',
    'classify_regime',
    'compute',
    'calculate_pkn',
    'calculate_kgd',
    'calculate_radial',
    'compare_models',
    'SensitivityRow',
    'run_sensitivity',
    'UnitSystem',
    'convert_inputs',
    'convert_value',
    'build_export_record',
    'export_json',
    'pressure_limit_exceeded'
]

__version__ = '0.1.0'
