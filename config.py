"""
Hydraulic Fracture Propagation Simulator — Configuration

Five-module architecture:
  M1: Input Set, Validation & Plane-Strain Modulus
  M2: Analytical Propagation Engine (PKN / KGD / Radial)
  M3: Parameter Sensitivity Analyzer
  M4: Display Unit Conversion (SI / Field)
  M5: Result Export & Operational Checks

All physics is computed in SI. Display units are a presentation concern
handled by M4 and the Streamlit app only.
"""

import numpy as np

# =============================================================================
# Default Treatment Inputs (SI)
# =============================================================================
DEFAULT_INPUTS = {
    "E": 30.0e9,             # Young's modulus [Pa]
    "nu": 0.25,              # Poisson's ratio [-]
    "sigma_min": 40.0e6,     # Minimum horizontal stress [Pa]
    "CL": 5.0e-5,            # Carter leakoff coefficient [m/s^0.5]
    "mu": 0.1,               # Fluid viscosity [Pa·s] (100 cP)
    "q": 0.05,               # Injection rate [m³/s] (~19 bpm)
    "H": 30.0,               # Fracture height [m]
    "K_IC": 1.0e6,           # Fracture toughness [Pa·m^0.5]
    "time": 1800.0,          # Injection time [s] (30 min)
    "p_limit": 70.0e6,       # Wellbore pressure limit [Pa]
    "depth": 2500.0,         # True vertical depth [m]
}

# =============================================================================
# Per-Model Constants (Module 2)
# =============================================================================
# No-leakoff extent:   coeff · (Ep·q³ / (μ·H^height_power))^group_exponent · t^time_exponent
# High-leakoff extent: (q·√t / (leakoff_divisor·CL·[H]))^leakoff_exponent
MODEL_CONSTANTS = {
    "PKN": {
        "no_leakoff_coeff": 0.68,
        "group_exponent": 0.2,
        "height_power": 4,
        "time_exponent": 0.8,
        "leakoff_divisor": 2.0 * np.pi,
        "leakoff_uses_height": True,
        "leakoff_exponent": 1.0,
        "pressure_coeff": 2.5,       # p_net = 2.5·(μqL/H⁴)^0.25·Ep^0.75
        "width_coeff": 3.0,          # w_max = 3·p_net·H/Ep
        "avg_width_factor": np.pi / 4.0 * 0.8,
        "footprint": "wings",        # V = 2·L·H·w_avg
        "profile_exponent": 0.25,    # Nordgren-like taper
    },
    "KGD": {
        "no_leakoff_coeff": 0.48,
        "group_exponent": 1.0 / 6.0,
        "height_power": 3,
        "time_exponent": 2.0 / 3.0,
        "leakoff_divisor": 2.0 * np.pi,
        "leakoff_uses_height": True,
        "leakoff_exponent": 1.0,
        "pressure_coeff": 0.25,      # p_net = Ep·w_max/(4L)
        "width_coeff": 1.32,         # w_max = 1.32·(μqL²/(Ep·H))^0.25
        "avg_width_factor": np.pi / 4.0,
        "footprint": "wings",
        "profile_exponent": 0.5,     # elliptical
    },
    "Radial": {
        "no_leakoff_coeff": 0.52,
        "group_exponent": 1.0 / 9.0,
        "height_power": 0,
        "time_exponent": 4.0 / 9.0,
        "leakoff_divisor": np.pi ** 2,
        "leakoff_uses_height": False,
        "leakoff_exponent": 0.5,
        "pressure_coeff": 1.25,      # p_net = 1.25·(μqEp²/R³)^0.25
        "width_coeff": 8.0 / np.pi,  # w_max = 8·p_net·R/(π·Ep)
        "avg_width_factor": 2.0 / 3.0,
        "footprint": "penny",        # V = π·R²·w_avg
        "profile_exponent": 0.5,
    },
}

# =============================================================================
# Regime Classification Heuristic (Module 2)
# =============================================================================
# Coarse toughness/viscosity split, not a derived dimensionless group.
REGIME = {
    "score_scale": 1.0e6,            # score = K_IC / (μ·q·scale)
    "toughness_threshold": 100.0,    # score > threshold -> "Toughness"
}

# =============================================================================
# Sampling (Module 2)
# =============================================================================
SAMPLING = {
    "history_steps": 50,             # t = T/50, 2T/50, ..., T
    "profile_intervals": 50,         # 51 points from 0 to L
}

# =============================================================================
# Sensitivity Grid (Module 3)
# =============================================================================
SENSITIVITY = {
    "parameters": ("mu", "q", "sigma_min", "CL"),
    "factors": (0.5, 2.0),
}

# =============================================================================
# Display Unit Systems (Module 4)
# =============================================================================
# Multiply a display value by "toSI" to get SI.
UNIT_SYSTEMS = {
    "SI": {
        "pressure": {"label": "Pa", "toSI": 1.0},
        "rate": {"label": "m³/s", "toSI": 1.0},
        "viscosity": {"label": "Pa.s", "toSI": 1.0},
        "length": {"label": "m", "toSI": 1.0},
        "width": {"label": "mm", "toSI": 0.001},
        "toughness": {"label": "Pa.m^0.5", "toSI": 1.0},
        "leakoff": {"label": "m/s^0.5", "toSI": 1.0},
        "time": {"label": "s", "toSI": 1.0},
        "volume": {"label": "m³", "toSI": 1.0},
        "dimensionless": {"label": "-", "toSI": 1.0},
    },
    "Field": {
        "pressure": {"label": "psi", "toSI": 6894.76},
        "rate": {"label": "bpm", "toSI": 0.00264979},
        "viscosity": {"label": "cp", "toSI": 0.001},
        "length": {"label": "ft", "toSI": 0.3048},
        "width": {"label": "in", "toSI": 0.0254},
        "toughness": {"label": "psi.in^0.5", "toSI": 1098.84},
        "leakoff": {"label": "ft/min^0.5", "toSI": 0.0393396},
        "time": {"label": "min", "toSI": 60.0},
        "volume": {"label": "bbl", "toSI": 0.158987},
        "dimensionless": {"label": "-", "toSI": 1.0},
    },
}

PARAM_UNIT_MAP = {
    "E": "pressure",
    "nu": "dimensionless",
    "sigma_min": "pressure",
    "CL": "leakoff",
    "mu": "viscosity",
    "q": "rate",
    "H": "length",
    "K_IC": "toughness",
    "time": "time",
    "p_limit": "pressure",
    "depth": "length",
}
