"""
Module M3: Parameter Sensitivity Analyzer

Re-runs the model that produced a baseline result with one input scaled at a
time and reports the percentage change in length, average width and net
pressure.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Sequence, Union

from .m01_inputs import FracInputs, DegenerateResultError, UnsupportedModelError
from .m02_propagation import ModelType, ModelResult, compute

try:
    from config import SENSITIVITY
except ImportError:
    # Fallback when the project root is not on sys.path
    import sys
    import os
    sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
    from config import SENSITIVITY


@dataclass(frozen=True)
class SensitivityRow:
    """Percentage response to one perturbation"""
    parameter: str     # Perturbed input field
    factor: float      # Multiplier applied to it
    L_change: float    # Length change [%]
    w_change: float    # Average width change [%]
    p_change: float    # Net pressure change [%]


def percent_change(value: float, baseline: float) -> float:
    """(value − baseline) / baseline × 100"""
    return (value - baseline) / baseline * 100.0


def run_sensitivity(
    inputs: FracInputs,
    model: Union[ModelType, str],
    base_result: ModelResult,
    parameters: Sequence[str] = SENSITIVITY["parameters"],
    factors: Sequence[float] = SENSITIVITY["factors"]
) -> List[SensitivityRow]:
    """
    One-at-a-time sensitivity of the selected model

    Rows are ordered parameter-then-factor.

    Args:
        inputs: SI inputs the baseline was computed from
        model: Model variant that produced base_result
        base_result: Baseline ModelResult
        parameters: Input fields to perturb
        factors: Multipliers applied to each field

    Returns:
        List of SensitivityRow, len(parameters) × len(factors) long

    Raises:
        DegenerateResultError: Baseline length, average width or net
            pressure is zero or non-finite
        InvalidInputError: A perturbed input leaves its valid domain
        UnsupportedModelError: model is not the one that produced base_result
    """
    model = ModelType.parse(model)
    if model is not base_result.model:
        raise UnsupportedModelError(
            f"Baseline was computed with {base_result.model.value}, not {model.value}"
        )

    baseline = {
        "length": base_result.length,
        "width_avg": base_result.width_avg,
        "p_net": base_result.p_net,
    }
    degenerate = [k for k, v in baseline.items() if v == 0 or not np.isfinite(v)]
    if degenerate:
        raise DegenerateResultError(
            f"Baseline cannot be used as a denominator: {', '.join(degenerate)}"
        )

    rows = []
    for param in parameters:
        for factor in factors:
            perturbed = inputs.replace(**{param: getattr(inputs, param) * factor})
            res = compute(model, perturbed, emit_warnings=False)
            rows.append(SensitivityRow(
                parameter=param,
                factor=factor,
                L_change=percent_change(res.length, base_result.length),
                w_change=percent_change(res.width_avg, base_result.width_avg),
                p_change=percent_change(res.p_net, base_result.p_net),
            ))

    return rows
