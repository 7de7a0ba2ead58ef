"""
Hydraulic Fracture Propagation Simulator — Streamlit App

Interactive UI over the analytical engine (M1–M5): inputs in SI or Field
units, PKN / KGD / Radial results, time history, width profile, sensitivity
and JSON export.
"""

import streamlit as st
import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import sys
import os

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import DEFAULT_INPUTS
from modules.m01_inputs import FracInputs, FractureModelError
from modules.m02_propagation import ModelType, compute, compare_models
from modules.m03_sensitivity import run_sensitivity
from modules.m04_units import (
    INPUT_FIELDS, UnitSystem, convert_inputs, to_display, unit_label, param_unit_label
)
from modules.m05_export import export_json, pressure_limit_exceeded

# ─── Page Config ─────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Hydraulic Fracture Propagation Simulator",
    page_icon="🪨",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stApp { background-color: #ffffff; }
    .block-container { padding-top: 1.5rem; }
    h1, h2, h3 { color: #1a1a2e; }
    .stTabs [data-baseweb="tab-list"] { gap: 4px; }
    .stTabs [data-baseweb="tab"] {
        background-color: #f0f2f6; border-radius: 6px 6px 0 0;
        padding: 8px 16px; font-size: 0.9rem;
    }
    .stTabs [aria-selected="true"] {
        background-color: #ffffff; border-bottom: 2px solid #0068c9;
    }
</style>
""", unsafe_allow_html=True)

# ─── Sidebar ─────────────────────────────────────────────────────────────────
st.sidebar.title("🪨 Frac Simulator")
st.sidebar.markdown("---")

unit_system = UnitSystem(st.sidebar.radio(
    "Unit System", [u.value for u in UnitSystem], horizontal=True
))
model = ModelType(st.sidebar.selectbox(
    "Model", [m.value for m in ModelType],
    help="PKN: height-contained · KGD: plane-strain · Radial: penny-shaped"
))

st.sidebar.markdown("---")
st.sidebar.subheader("Parameters")

INPUT_LABELS = {
    "E": "Young's Modulus",
    "nu": "Poisson's Ratio",
    "sigma_min": "Min. Horizontal Stress",
    "CL": "Leakoff Coefficient",
    "mu": "Fluid Viscosity",
    "q": "Injection Rate",
    "H": "Fracture Height",
    "K_IC": "Fracture Toughness",
    "time": "Injection Time",
    "p_limit": "Wellbore Pressure Limit",
    "depth": "Depth (TVD)",
}

display_defaults = convert_inputs(dict(DEFAULT_INPUTS), UnitSystem.SI, unit_system)
display_values = {}
for key in INPUT_FIELDS:
    display_values[key] = st.sidebar.number_input(
        f"{INPUT_LABELS[key]} ({param_unit_label(key, unit_system)})",
        value=float(display_defaults[key]),
        format="%.4g",
        key=f"{key}_{unit_system.value}",
    )

st.sidebar.markdown("---")
st.sidebar.caption("Analytical PKN / KGD / Radial · SI core")

# Display-unit helpers
u_len = unit_label("length", unit_system)
u_width = unit_label("width", unit_system)
u_press = unit_label("pressure", unit_system)
u_time = unit_label("time", unit_system)
u_vol = unit_label("volume", unit_system)


def disp(value, category):
    return to_display(value, category, unit_system)


# ─── Compute ─────────────────────────────────────────────────────────────────
st.title("Hydraulic Fracture Propagation Simulator")
st.caption(f"Model: **{model.value}** | Units: {unit_system.value}")

try:
    inputs = FracInputs(**convert_inputs(display_values, unit_system, UnitSystem.SI))
    result = compute(model, inputs, emit_warnings=False)
    sensitivity = run_sensitivity(inputs, model, result)
except FractureModelError as exc:
    st.error(f"❌ {exc}")
    st.stop()

tabs = st.tabs([
    "📋 Results", "📈 Time History", "📐 Width Profile",
    "🎚️ Sensitivity", "📊 Model Comparison", "💾 Export"
])

# ═════════════════════════════════════════════════════════════════════════════
# TAB 1: RESULTS
# ═════════════════════════════════════════════════════════════════════════════
with tabs[0]:
    st.header(f"{model.value} Results")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Length / Radius", f"{disp(result.length, 'length'):.1f} {u_len}")
    c2.metric("Max Width", f"{disp(result.width_max, 'width'):.3f} {u_width}")
    c3.metric("Avg Width", f"{disp(result.width_avg, 'width'):.3f} {u_width}")
    c4.metric("Efficiency", f"{result.efficiency:.1%}")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Net Pressure", f"{disp(result.p_net, 'pressure'):,.4g} {u_press}")
    c2.metric("Wellbore Pressure", f"{disp(result.p_well, 'pressure'):,.4g} {u_press}")
    c3.metric("Injected Volume", f"{disp(result.volume_injected, 'volume'):.4g} {u_vol}")
    c4.metric("Regime", result.regime)

    if pressure_limit_exceeded(result, inputs.p_limit):
        st.error("❌ Wellbore pressure exceeds the operational limit")
    else:
        st.success("✅ Within wellbore pressure limit")

    for notice in result.warnings:
        st.warning(notice)
    if result.volume_leakoff < 0:
        st.info(
            f"Contained volume exceeds injected volume; efficiency clamped to 1, "
            f"leakoff volume shown as {disp(result.volume_leakoff, 'volume'):.4g} {u_vol}."
        )

# ═════════════════════════════════════════════════════════════════════════════
# TAB 2: TIME HISTORY
# ═════════════════════════════════════════════════════════════════════════════
with tabs[1]:
    st.header("Growth History")

    t_arr = np.array([disp(s.time, "time") for s in result.time_series])
    L_arr = np.array([disp(s.length, "length") for s in result.time_series])
    w_arr = np.array([disp(s.width, "width") for s in result.time_series])
    p_arr = np.array([disp(s.pressure, "pressure") for s in result.time_series])

    fig_hist = make_subplots(
        rows=1, cols=3,
        subplot_titles=("Length / Radius", "Max Width", "Net Pressure")
    )
    fig_hist.add_trace(go.Scatter(x=t_arr, y=L_arr, mode='lines',
                                  line=dict(color='#1f77b4', width=2)), row=1, col=1)
    fig_hist.add_trace(go.Scatter(x=t_arr, y=w_arr, mode='lines',
                                  line=dict(color='#2ca02c', width=2)), row=1, col=2)
    fig_hist.add_trace(go.Scatter(x=t_arr, y=p_arr, mode='lines',
                                  line=dict(color='#d62728', width=2)), row=1, col=3)
    fig_hist.update_xaxes(title_text=f"Time ({u_time})")
    fig_hist.update_yaxes(title_text=u_len, row=1, col=1)
    fig_hist.update_yaxes(title_text=u_width, row=1, col=2)
    fig_hist.update_yaxes(title_text=u_press, row=1, col=3)
    fig_hist.update_layout(height=400, template="plotly_white", showlegend=False)
    st.plotly_chart(fig_hist, use_container_width=True)

# ═════════════════════════════════════════════════════════════════════════════
# TAB 3: WIDTH PROFILE
# ═════════════════════════════════════════════════════════════════════════════
with tabs[2]:
    st.header("Width Profile")
    st.caption("Power-law shape approximation for visualization")

    x_arr = np.array([disp(p.position, "length") for p in result.profile])
    half_w = np.array([disp(p.width, "width") for p in result.profile]) / 2

    fig_prof = go.Figure()
    fig_prof.add_trace(go.Scatter(
        x=np.concatenate([x_arr, x_arr[::-1]]),
        y=np.concatenate([half_w, -half_w[::-1]]),
        fill='toself', mode='lines', name='Fracture',
        line=dict(color='#ff7f0e', width=2)
    ))
    fig_prof.update_layout(
        xaxis_title=f"Distance from wellbore ({u_len})",
        yaxis_title=f"Width ({u_width})",
        height=400, template="plotly_white",
    )
    st.plotly_chart(fig_prof, use_container_width=True)

# ═════════════════════════════════════════════════════════════════════════════
# TAB 4: SENSITIVITY
# ═════════════════════════════════════════════════════════════════════════════
with tabs[3]:
    st.header("Parameter Sensitivity")

    labels = [f"{INPUT_LABELS[r.parameter]} ×{r.factor:g}" for r in sensitivity]
    fig_sens = go.Figure()
    fig_sens.add_trace(go.Bar(y=labels, x=[r.L_change for r in sensitivity],
                              name='Length', orientation='h'))
    fig_sens.add_trace(go.Bar(y=labels, x=[r.w_change for r in sensitivity],
                              name='Avg Width', orientation='h'))
    fig_sens.add_trace(go.Bar(y=labels, x=[r.p_change for r in sensitivity],
                              name='Net Pressure', orientation='h'))
    fig_sens.update_layout(
        barmode='group', xaxis_title="Change (%)",
        height=500, template="plotly_white",
    )
    st.plotly_chart(fig_sens, use_container_width=True)

    st.dataframe({
        "Parameter": [INPUT_LABELS[r.parameter] for r in sensitivity],
        "Factor": [r.factor for r in sensitivity],
        "ΔL (%)": [f"{r.L_change:+.1f}" for r in sensitivity],
        "Δw (%)": [f"{r.w_change:+.1f}" for r in sensitivity],
        "Δp (%)": [f"{r.p_change:+.1f}" for r in sensitivity],
    }, use_container_width=True, hide_index=True)

# ═════════════════════════════════════════════════════════════════════════════
# TAB 5: MODEL COMPARISON
# ═════════════════════════════════════════════════════════════════════════════
with tabs[4]:
    st.header("📊 Model Comparison")

    try:
        all_results = compare_models(inputs)
    except FractureModelError as exc:
        st.warning(f"Comparison unavailable: {exc}")
    else:
        st.dataframe({
            "Model": [m.value for m in all_results],
            f"Length ({u_len})": [f"{disp(r.length, 'length'):.1f}" for r in all_results.values()],
            f"Max Width ({u_width})": [f"{disp(r.width_max, 'width'):.3f}" for r in all_results.values()],
            f"Net Pressure ({u_press})": [f"{disp(r.p_net, 'pressure'):,.4g}" for r in all_results.values()],
            "Efficiency": [f"{r.efficiency:.1%}" for r in all_results.values()],
            "Warnings": [len(r.warnings) for r in all_results.values()],
        }, use_container_width=True, hide_index=True)

        fig_cmp = go.Figure()
        for m, r in all_results.items():
            fig_cmp.add_trace(go.Scatter(
                x=[disp(s.time, "time") for s in r.time_series],
                y=[disp(s.length, "length") for s in r.time_series],
                mode='lines', name=m.value,
            ))
        fig_cmp.update_layout(
            xaxis_title=f"Time ({u_time})", yaxis_title=f"Length / Radius ({u_len})",
            height=400, template="plotly_white",
        )
        st.plotly_chart(fig_cmp, use_container_width=True)

# ═════════════════════════════════════════════════════════════════════════════
# TAB 6: EXPORT
# ═════════════════════════════════════════════════════════════════════════════
with tabs[5]:
    st.header("Export")
    st.caption("Inputs and results are exported in SI regardless of display units.")

    payload = export_json(inputs, result, sensitivity, unit_system)
    st.download_button(
        "Download JSON", payload,
        file_name=f"frac_{model.value.lower()}.json",
        mime="application/json",
    )
    with st.expander("Preview"):
        st.code(payload[:4000], language="json")
