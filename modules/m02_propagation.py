"""
M2: Analytical Hydraulic Fracture Propagation Engine
Hydraulic Fracture Propagation Simulator

Physics Implementation:
1. Asymptotic matching: harmonic combination of the no-leakoff (viscosity
   storage) and high-leakoff (Carter) extent asymptotes, 1/L = 1/L_nl + 1/L_hl
2. Closure relations: net pressure and maximum width from the combined extent
   (PKN height-contained, KGD plane-strain, Radial penny-shaped)
3. Volume balance, efficiency, regime heuristic and geometry checks
4. Time history and width profile sampling of the closed-form state

Every quantity is evaluated analytically at the requested time; nothing is
integrated, so each sample is independent of every other.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple, Union
import warnings

from .m01_inputs import (
    FracInputs,
    DegenerateResultError,
    UnsupportedModelError,
    GeometryAssumptionWarning,
    VolumeBalanceWarning,
    validate_inputs,
    plane_strain_modulus,
)

# Import configuration parameters
try:
    from config import MODEL_CONSTANTS, REGIME, SAMPLING
except ImportError:
    # Fallback when the project root is not on sys.path
    import sys
    import os
    sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
    from config import MODEL_CONSTANTS, REGIME, SAMPLING


class ModelType(str, Enum):
    """Fracture geometry model variants"""
    PKN = "PKN"
    KGD = "KGD"
    RADIAL = "Radial"

    @classmethod
    def parse(cls, value: Union["ModelType", str]) -> "ModelType":
        """Resolve a ModelType or its (case-insensitive) name"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.strip().lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise UnsupportedModelError(
            f"Unsupported model {value!r}; expected one of "
            f"{', '.join(m.value for m in cls)}"
        )


@dataclass(frozen=True)
class ModelConstants:
    """Coefficients and exponents of one model variant"""
    no_leakoff_coeff: float
    group_exponent: float
    height_power: int
    time_exponent: float
    leakoff_divisor: float
    leakoff_uses_height: bool
    leakoff_exponent: float
    pressure_coeff: float
    width_coeff: float
    avg_width_factor: float
    footprint: str            # "wings" (2·L·H) or "penny" (π·R²)
    profile_exponent: float


MODEL_TABLE: Mapping[ModelType, ModelConstants] = MappingProxyType({
    model: ModelConstants(**MODEL_CONSTANTS[model.value]) for model in ModelType
})


@dataclass(frozen=True)
class FractureState:
    """Closed-form state at one instant"""
    length: float      # Half-length or radius [m]
    width: float       # Maximum width [m]
    pressure: float    # Net pressure [Pa]


@dataclass(frozen=True)
class TimeStep:
    """One sample of the time history"""
    time: float        # [s]
    length: float      # [m]
    width: float       # Maximum width [m]
    pressure: float    # Net pressure [Pa]


@dataclass(frozen=True)
class ProfilePoint:
    """One sample of the width profile"""
    position: float    # Distance from wellbore [m]
    width: float       # [m]


@dataclass(frozen=True)
class ModelResult:
    """Container for one model evaluation, all fields in SI"""
    model: ModelType
    length: float                       # Final half-length / radius [m]
    width_avg: float                    # Average width [m]
    width_max: float                    # Maximum width [m]
    p_net: float                        # Net pressure [Pa]
    p_well: float                       # Wellbore pressure σ_min + p_net [Pa]
    efficiency: float                   # Fluid efficiency, clamped to [0, 1]
    volume_injected: float              # q·t [m³]
    volume_leakoff: float               # injected − contained, unclamped [m³]
    regime: str                         # "Viscosity" or "Toughness"
    warnings: Tuple[str, ...]           # Geometry-assumption notices
    time_series: Tuple[TimeStep, ...]   # 50 samples, ascending in time
    profile: Tuple[ProfilePoint, ...]   # 51 samples, ascending in position

    @property
    def volume_fracture(self) -> float:
        """Fluid volume contained in the fracture [m³]"""
        return self.volume_injected - self.volume_leakoff


# =====================================================================
# Regime heuristic
# =====================================================================

def regime_score(K_IC: float, mu: float, q: float,
                 scale: float = REGIME["score_scale"]) -> float:
    """Toughness score K_IC / (μ·q·scale)"""
    return K_IC / (mu * q * scale)


def classify_regime(
    K_IC: float,
    mu: float,
    q: float,
    threshold: float = REGIME["toughness_threshold"]
) -> str:
    """
    Coarse toughness/viscosity classification

    This is a heuristic cut on K_IC / (μ·q·1e6), not a rigorously derived
    regime boundary; the threshold is configurable.

    Args:
        K_IC: Fracture toughness [Pa·m^0.5]
        mu: Fluid viscosity [Pa·s]
        q: Injection rate [m³/s]
        threshold: Score above which the case is toughness-dominated

    Returns:
        "Toughness" or "Viscosity"
    """
    return "Toughness" if regime_score(K_IC, mu, q) > threshold else "Viscosity"


# =====================================================================
# Asymptotic matching
# =====================================================================

def _constants(model: Union[ModelType, str]) -> ModelConstants:
    return MODEL_TABLE[ModelType.parse(model)]


def asymptotes(
    model: Union[ModelType, str],
    inputs: FracInputs,
    t: float
) -> Tuple[float, float]:
    """
    No-leakoff and high-leakoff extent asymptotes at time t

    L_nl = c · (E'·q³ / (μ·H^n))^a · t^b
    L_hl = (q·√t / (d·C_L·[H]))^e

    Args:
        model: Model variant
        inputs: Validated SI inputs
        t: Elapsed time [s]

    Returns:
        (L_no_leakoff, L_high_leakoff) in meters
    """
    c = _constants(model)
    Ep = plane_strain_modulus(inputs.E, inputs.nu)
    q, mu, H, CL = inputs.q, inputs.mu, inputs.H, inputs.CL

    group = Ep * q ** 3 / (mu * H ** c.height_power)
    L_no_leakoff = c.no_leakoff_coeff * group ** c.group_exponent * t ** c.time_exponent

    leak_term = c.leakoff_divisor * CL * (H if c.leakoff_uses_height else 1.0)
    L_high_leakoff = (q * np.sqrt(t) / leak_term) ** c.leakoff_exponent

    return L_no_leakoff, L_high_leakoff


def harmonic_combination(a: float, b: float) -> float:
    """1/L = 1/a + 1/b; never exceeds either argument"""
    return 1.0 / (1.0 / a + 1.0 / b)


def _pkn_closure(c: ModelConstants, inputs: FracInputs, Ep: float, L: float):
    p_net = c.pressure_coeff * (inputs.mu * inputs.q * L / inputs.H ** 4) ** 0.25 * Ep ** 0.75
    w_max = c.width_coeff * p_net * inputs.H / Ep
    return p_net, w_max


def _kgd_closure(c: ModelConstants, inputs: FracInputs, Ep: float, L: float):
    w_max = c.width_coeff * (inputs.mu * inputs.q * L ** 2 / (Ep * inputs.H)) ** 0.25
    p_net = c.pressure_coeff * Ep * w_max / L
    return p_net, w_max


def _radial_closure(c: ModelConstants, inputs: FracInputs, Ep: float, R: float):
    p_net = c.pressure_coeff * (inputs.mu * inputs.q * Ep ** 2 / R ** 3) ** 0.25
    w_max = c.width_coeff * p_net * R / Ep
    return p_net, w_max


_CLOSURES: Mapping[ModelType, Callable] = MappingProxyType({
    ModelType.PKN: _pkn_closure,
    ModelType.KGD: _kgd_closure,
    ModelType.RADIAL: _radial_closure,
})


def solve_at_time(
    model: Union[ModelType, str],
    inputs: FracInputs,
    t: float
) -> FractureState:
    """
    Evaluate extent, maximum width and net pressure at time t

    Args:
        model: Model variant
        inputs: Validated SI inputs
        t: Elapsed time [s], must be positive

    Returns:
        FractureState at t
    """
    model = ModelType.parse(model)
    c = MODEL_TABLE[model]
    Ep = plane_strain_modulus(inputs.E, inputs.nu)

    L = harmonic_combination(*asymptotes(model, inputs, t))
    p_net, w_max = _CLOSURES[model](c, inputs, Ep, L)

    return FractureState(length=float(L), width=float(w_max), pressure=float(p_net))


# =====================================================================
# Sampling
# =====================================================================

def generate_history(
    total_time: float,
    solve: Callable[[float], FractureState],
    steps: int = SAMPLING["history_steps"]
) -> List[TimeStep]:
    """
    Sample the closed-form solution at t = T/n, 2T/n, ..., T

    Each sample is an independent evaluation, not an integration step.
    """
    history = []
    for i in range(1, steps + 1):
        t = (total_time / steps) * i
        state = solve(t)
        history.append(TimeStep(
            time=t,
            length=state.length,
            width=state.width,
            pressure=state.pressure
        ))
    return history


def generate_profile(
    length: float,
    width_max: float,
    shape_exponent: float,
    intervals: int = SAMPLING["profile_intervals"]
) -> List[ProfilePoint]:
    """
    Power-law width profile w(x) = w_max · (1 − x/L)^exponent

    Visualization approximation, not the analytical cross-section.
    0.25 approximates the PKN (Nordgren) taper; 0.5 an ellipse.

    Args:
        length: Final extent L [m]
        width_max: Wellbore width [m]
        shape_exponent: Power-law exponent
        intervals: Number of intervals (intervals + 1 points)

    Returns:
        Profile points from x = 0 to x = L
    """
    profile = []
    for i in range(intervals + 1):
        x = (length / intervals) * i
        x_norm = min(x / length, 1.0)
        profile.append(ProfilePoint(
            position=x,
            width=width_max * (1.0 - x_norm) ** shape_exponent
        ))
    return profile


# =====================================================================
# Derived quantities
# =====================================================================

def contained_volume(model: Union[ModelType, str], length: float,
                     height: float, width_avg: float) -> float:
    """Fluid volume stored in the fracture [m³]"""
    c = _constants(model)
    if c.footprint == "penny":
        return np.pi * length ** 2 * width_avg
    return 2.0 * length * height * width_avg


def geometry_warnings(model: Union[ModelType, str], length: float,
                      height: float) -> List[str]:
    """Confinement-assumption checks for the final geometry"""
    model = ModelType.parse(model)
    if model is ModelType.PKN and length < 2.0 * height:
        return [
            "L < 2H: PKN assumption violated "
            "(fracture too short relative to height)."
        ]
    if model is ModelType.KGD and length > height:
        return [
            "L > H: KGD assumption violated "
            "(fracture too long for plane-strain approximation)."
        ]
    return []


def _check_finite(result: ModelResult) -> None:
    scalars = {
        "length": result.length,
        "width_avg": result.width_avg,
        "width_max": result.width_max,
        "p_net": result.p_net,
        "p_well": result.p_well,
        "efficiency": result.efficiency,
        "volume_injected": result.volume_injected,
        "volume_leakoff": result.volume_leakoff,
    }
    bad = [name for name, value in scalars.items() if not np.isfinite(value)]

    series = np.array(
        [(s.time, s.length, s.width, s.pressure) for s in result.time_series]
        + [(p.position, p.width, 0.0, 0.0) for p in result.profile],
        dtype=float
    )
    if series.size and not np.all(np.isfinite(series)):
        bad.append("time_series/profile")

    if bad:
        raise DegenerateResultError(
            f"{result.model.value} produced non-finite values for: {', '.join(bad)}"
        )


# =====================================================================
# Entry point
# =====================================================================

def compute(
    model: Union[ModelType, str],
    inputs: FracInputs,
    emit_warnings: bool = True
) -> ModelResult:
    """
    Run one model at inputs.time and derive history and profile

    Args:
        model: ModelType or its name ("PKN", "KGD", "Radial")
        inputs: SI input record
        emit_warnings: Issue Python warnings for geometry violations and
            negative leakoff volume (the result carries the geometry
            notices either way)

    Returns:
        ModelResult

    Raises:
        UnsupportedModelError: Unknown model
        InvalidInputError: Inputs outside their physical domain
        DegenerateResultError: Non-finite result
    """
    model = ModelType.parse(model)
    validate_inputs(inputs, model.value)
    c = MODEL_TABLE[model]

    def solve(t: float) -> FractureState:
        return solve_at_time(model, inputs, t)

    try:
        with np.errstate(all="ignore"):
            final = solve(inputs.time)
            w_avg = c.avg_width_factor * final.width
            volume_injected = inputs.q * inputs.time
            volume_frac = contained_volume(model, final.length, inputs.H, w_avg)
            notices = geometry_warnings(model, final.length, inputs.H)

            result = ModelResult(
                model=model,
                length=final.length,
                width_avg=float(w_avg),
                width_max=final.width,
                p_net=final.pressure,
                p_well=inputs.sigma_min + final.pressure,
                efficiency=float(min(1.0, volume_frac / volume_injected)),
                volume_injected=volume_injected,
                # Deliberately unclamped: negative when efficiency saturates at 1
                volume_leakoff=float(volume_injected - volume_frac),
                regime=classify_regime(inputs.K_IC, inputs.mu, inputs.q),
                warnings=tuple(notices),
                time_series=tuple(generate_history(inputs.time, solve)),
                profile=tuple(generate_profile(final.length, final.width, c.profile_exponent)),
            )
    except (OverflowError, ZeroDivisionError) as exc:
        raise DegenerateResultError(f"{model.value} evaluation failed: {exc}") from exc
    _check_finite(result)

    if emit_warnings:
        for notice in notices:
            warnings.warn(notice, GeometryAssumptionWarning, stacklevel=2)
        if result.volume_leakoff < 0:
            warnings.warn(
                f"{model.value}: contained volume {volume_frac:.3g} m³ exceeds "
                f"injected volume {volume_injected:.3g} m³; efficiency clamped to 1 "
                f"and leakoff volume reported as {result.volume_leakoff:.3g} m³",
                VolumeBalanceWarning,
                stacklevel=2
            )

    return result


def calculate_pkn(inputs: FracInputs, emit_warnings: bool = True) -> ModelResult:
    """PKN (height-contained) model"""
    return compute(ModelType.PKN, inputs, emit_warnings)


def calculate_kgd(inputs: FracInputs, emit_warnings: bool = True) -> ModelResult:
    """KGD (plane-strain) model"""
    return compute(ModelType.KGD, inputs, emit_warnings)


def calculate_radial(inputs: FracInputs, emit_warnings: bool = True) -> ModelResult:
    """Radial (penny-shaped) model"""
    return compute(ModelType.RADIAL, inputs, emit_warnings)


def compare_models(inputs: FracInputs) -> Dict[ModelType, ModelResult]:
    """Evaluate all three models on the same inputs"""
    return {model: compute(model, inputs, emit_warnings=False) for model in ModelType}
