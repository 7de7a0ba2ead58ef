#!/usr/bin/env python3
"""
M2 Fracture Propagation Engine - Demonstration Script

Example usage of the analytical PKN / KGD / Radial engine, the sensitivity
analyzer and the display-unit helpers.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import sys
import os
import warnings
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from modules.m01_inputs import FracInputs, FractureModelWarning, plane_strain_modulus
from modules.m02_propagation import ModelType, compute, compare_models
from modules.m03_sensitivity import run_sensitivity
from modules.m04_units import UnitSystem, convert_inputs, to_display


def demo_single_model():
    """Demonstrate one PKN evaluation on the default treatment."""
    print("=== PKN Reference Case ===")

    inputs = FracInputs.default()
    Ep = plane_strain_modulus(inputs.E, inputs.nu)
    print(f"Plane-strain modulus: {Ep/1e9:.2f} GPa")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", FractureModelWarning)
        result = compute(ModelType.PKN, inputs)

    print(f"Length: {result.length:.1f} m")
    print(f"Max width: {result.width_max*1e3:.2f} mm, avg width: {result.width_avg*1e3:.2f} mm")
    print(f"Net pressure: {result.p_net/1e6:.2f} MPa, wellbore: {result.p_well/1e6:.2f} MPa")
    print(f"Efficiency: {result.efficiency:.3f}, leakoff volume: {result.volume_leakoff:.1f} m³")
    print(f"Regime: {result.regime}")
    for w in caught:
        print(f"  warning: {w.message}")

    return inputs, result


def demo_field_units(inputs):
    """Demonstrate conversion to oilfield display units."""
    print("\n=== Field Units ===")

    field = convert_inputs(inputs, UnitSystem.SI, UnitSystem.FIELD)
    print(f"Rate: {field.q:.1f} bpm, viscosity: {field.mu:.0f} cp, time: {field.time:.0f} min")
    print(f"Stress: {field.sigma_min:.0f} psi, height: {field.H:.1f} ft")

    result = compute(ModelType.PKN, inputs, emit_warnings=False)
    print(f"Length: {to_display(result.length, 'length', UnitSystem.FIELD):.0f} ft, "
          f"max width: {to_display(result.width_max, 'width', UnitSystem.FIELD):.3f} in")


def demo_comparison(inputs):
    """Compare the three geometry models."""
    print("\n=== Model Comparison ===")

    results = compare_models(inputs)
    for model, res in results.items():
        flag = " (!)" if res.warnings else ""
        print(f"{model.value:>6}: L={res.length:7.1f} m  w_max={res.width_max*1e3:6.2f} mm  "
              f"p_net={res.p_net/1e6:6.3f} MPa  eff={res.efficiency:.3f}{flag}")

    return results


def demo_sensitivity(inputs, model=ModelType.KGD):
    """Demonstrate the one-at-a-time sensitivity table."""
    print(f"\n=== {model.value} Sensitivity ===")

    base = compute(model, inputs, emit_warnings=False)
    rows = run_sensitivity(inputs, model, base)

    print(f"{'param':>10} {'factor':>6} {'dL%':>8} {'dw%':>8} {'dp%':>8}")
    for r in rows:
        print(f"{r.parameter:>10} {r.factor:>6.1f} {r.L_change:>8.1f} "
              f"{r.w_change:>8.1f} {r.p_change:>8.1f}")

    return rows


def plot_results(results, out_path):
    """Plot length histories and width profiles of all models."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 4.5))

    for model, res in results.items():
        t = np.array([s.time for s in res.time_series]) / 60
        L = np.array([s.length for s in res.time_series])
        axes[0].plot(t, L, label=model.value)

        x = np.array([p.position for p in res.profile])
        w = np.array([p.width for p in res.profile]) * 1e3
        axes[1].plot(x, w, label=model.value)

    axes[0].set_xlabel("Time (min)")
    axes[0].set_ylabel("Length / radius (m)")
    axes[0].set_title("Growth History")
    axes[1].set_xlabel("Distance from wellbore (m)")
    axes[1].set_ylabel("Width (mm)")
    axes[1].set_title("Width Profile (approximate)")
    for ax in axes:
        ax.grid(alpha=0.3)
        ax.legend()

    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    print(f"\nSaved figure to {out_path}")


def main():
    """Run all demonstration functions."""
    print("Hydraulic Fracture Propagation Simulator - M2 Engine Demo")
    print("=" * 70)

    try:
        inputs, _ = demo_single_model()
        demo_field_units(inputs)
        results = demo_comparison(inputs)
        demo_sensitivity(inputs)
        plot_results(results, os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                            "m02_demo.png"))

        print("\n" + "=" * 70)
        print("Demo completed successfully!")

    except Exception as e:
        print(f"\nError during demo: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
