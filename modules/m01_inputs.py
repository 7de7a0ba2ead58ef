"""
Module M1: Treatment Input Set, Validation & Elastic Properties

Defines the SI input record consumed by every propagation model, the typed
error hierarchy shared by the engine, and the plane-strain modulus.

Classes:
    FracInputs: Immutable SI input record for one computation
    FractureModelError: Base class for all engine failures
    InvalidInputError / DegenerateResultError / UnsupportedModelError
    FractureModelWarning: Base category for non-fatal physics notices

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import numpy as np
from dataclasses import dataclass, fields, asdict, replace as dc_replace
from typing import Dict, Any, List, Optional

try:
    from config import DEFAULT_INPUTS
except ImportError:
    # Fallback when the project root is not on sys.path
    import sys
    import os
    sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
    from config import DEFAULT_INPUTS


# =====================================================================
# Errors and warning categories
# =====================================================================

class FractureModelError(ValueError):
    """Base class for failures reported by the propagation engine."""


class InvalidInputError(FractureModelError):
    """A physical parameter lies outside its valid domain."""


class DegenerateResultError(FractureModelError):
    """A computed quantity is non-finite (overflow or division by zero)."""


class UnsupportedModelError(FractureModelError):
    """The requested model variant is not PKN, KGD or Radial."""


class FractureModelWarning(UserWarning):
    """Base category for non-fatal physics notices."""


class GeometryAssumptionWarning(FractureModelWarning):
    """Computed geometry violates the model's confinement assumption."""


class VolumeBalanceWarning(FractureModelWarning):
    """Contained volume exceeds injected volume (negative leakoff)."""


# =====================================================================
# Input record
# =====================================================================

@dataclass(frozen=True)
class FracInputs:
    """Treatment parameters for one computation, all in SI"""
    E: float           # Young's modulus [Pa]
    nu: float          # Poisson's ratio [-]
    sigma_min: float   # Minimum horizontal stress [Pa]
    CL: float          # Carter leakoff coefficient [m/s^0.5]
    mu: float          # Fluid viscosity [Pa·s]
    q: float           # Injection rate [m³/s]
    H: float           # Fracture height [m] (PKN/KGD only)
    K_IC: float        # Fracture toughness [Pa·m^0.5]
    time: float        # Injection time [s]
    p_limit: float     # Wellbore pressure limit [Pa] (not used by solvers)
    depth: float       # True vertical depth [m] (not used by solvers)

    @classmethod
    def default(cls) -> "FracInputs":
        """Default treatment from the configuration table"""
        return cls(**DEFAULT_INPUTS)

    @classmethod
    def from_dict(cls, values: Dict[str, Any],
                  defaults: Optional[Dict[str, Any]] = None) -> "FracInputs":
        """
        Build an input record from a plain dictionary.

        Args:
            values: Mapping of field name to value
            defaults: Values for missing fields (none filled if omitted)

        Returns:
            FracInputs instance

        Raises:
            InvalidInputError: On unknown or missing fields
        """
        names = [f.name for f in fields(cls)]
        unknown = sorted(set(values) - set(names))
        if unknown:
            raise InvalidInputError(f"Unknown input fields: {', '.join(unknown)}")

        merged = dict(defaults or {})
        merged.update(values)
        missing = [n for n in names if n not in merged]
        if missing:
            raise InvalidInputError(f"Missing input fields: {', '.join(missing)}")

        return cls(**{n: float(merged[n]) for n in names})

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def replace(self, **changes: float) -> "FracInputs":
        """Copy with selected fields changed"""
        return dc_replace(self, **changes)


# =====================================================================
# Validation
# =====================================================================

# Fields that must be strictly positive for every model
_POSITIVE_FIELDS = ("E", "mu", "q", "CL", "K_IC", "time")

# Models whose formulas divide by fracture height
_HEIGHT_MODELS = ("PKN", "KGD")


def validate_inputs(inputs: FracInputs, model: Optional[str] = None) -> None:
    """
    Reject physically invalid inputs before any solver runs.

    Args:
        inputs: SI input record
        model: Model variant value ("PKN", "KGD", "Radial"); height is
            only checked for the height-dependent variants. When None,
            height is always checked.

    Raises:
        InvalidInputError: Listing every offending field
    """
    problems: List[str] = []

    for f in fields(inputs):
        value = getattr(inputs, f.name)
        if not np.isfinite(value):
            problems.append(f"{f.name} must be finite (got {value})")

    for name in _POSITIVE_FIELDS:
        value = getattr(inputs, name)
        if np.isfinite(value) and value <= 0:
            problems.append(f"{name} must be positive (got {value})")

    if model is None or model in _HEIGHT_MODELS:
        if np.isfinite(inputs.H) and inputs.H <= 0:
            problems.append(f"H must be positive (got {inputs.H})")

    if np.isfinite(inputs.nu) and not (-1.0 < inputs.nu < 0.5):
        problems.append(f"nu must lie in (-1, 0.5) (got {inputs.nu})")

    if problems:
        raise InvalidInputError("Invalid inputs: " + "; ".join(problems))


# =====================================================================
# Elastic properties
# =====================================================================

def plane_strain_modulus(E: float, nu: float) -> float:
    """
    Plane-strain modulus E' = E / (1 - ν²)

    Args:
        E: Young's modulus [Pa]
        nu: Poisson's ratio [-]

    Returns:
        Plane-strain modulus [Pa]

    Raises:
        InvalidInputError: If |ν| >= 1
    """
    if abs(nu) >= 1.0:
        raise InvalidInputError(f"Poisson's ratio must satisfy |nu| < 1 (got {nu})")
    return E / (1.0 - nu ** 2)
