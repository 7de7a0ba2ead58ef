"""
Test Suite for M2 Analytical Propagation Engine
Hydraulic Fracture Propagation Simulator

Testing of asymptotic matching, PKN/KGD/Radial closure, regime heuristic,
history and profile sampling, geometry warnings and the compute entry point.

Author: Fracture Propagation Simulator Team
Date: 2026-10-19
"""

import importlib.util
import itertools
import warnings

import pytest
import numpy as np
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from modules.m01_inputs import (
    FracInputs,
    InvalidInputError,
    DegenerateResultError,
    UnsupportedModelError,
    GeometryAssumptionWarning,
    VolumeBalanceWarning
)
from modules.m02_propagation import (
    ModelType,
    ModelResult,
    MODEL_TABLE,
    asymptotes,
    harmonic_combination,
    solve_at_time,
    classify_regime,
    regime_score,
    generate_history,
    generate_profile,
    FractureState,
    compute,
    calculate_pkn,
    calculate_kgd,
    calculate_radial,
    compare_models
)


def _input_grid():
    """Spread of valid inputs spanning both leakoff regimes"""
    base = FracInputs.default()
    grid = []
    for mu, q, CL, H, t in itertools.product(
        (0.001, 0.1, 1.0),
        (0.01, 0.05, 0.2),
        (1e-6, 5e-5, 1e-3),
        (10.0, 30.0, 100.0),
        (60.0, 1800.0, 36000.0),
    ):
        grid.append(base.replace(mu=mu, q=q, CL=CL, H=H, time=t))
    return grid


INPUT_GRID = _input_grid()


class TestModelType:
    """Test model selection and the constants table"""

    def test_parse_names(self):
        """Test 1: Enum members, values and case variants resolve"""
        assert ModelType.parse(ModelType.KGD) is ModelType.KGD
        assert ModelType.parse("PKN") is ModelType.PKN
        assert ModelType.parse("radial") is ModelType.RADIAL
        assert ModelType.parse(" Radial ") is ModelType.RADIAL

    @pytest.mark.parametrize("bad", ["P3D", "", None, 3])
    def test_parse_unsupported(self, bad):
        """Test 2: Anything else is an UnsupportedModelError"""
        with pytest.raises(UnsupportedModelError):
            ModelType.parse(bad)

    def test_table_is_read_only(self):
        """Test 3: Constants table cannot be mutated"""
        with pytest.raises(TypeError):
            MODEL_TABLE[ModelType.PKN] = None
        with pytest.raises(AttributeError):
            MODEL_TABLE[ModelType.PKN].no_leakoff_coeff = 1.0

    def test_profile_exponents(self):
        """Test 4: PKN tapers at 0.25, KGD/Radial are elliptical"""
        assert MODEL_TABLE[ModelType.PKN].profile_exponent == 0.25
        assert MODEL_TABLE[ModelType.KGD].profile_exponent == 0.5
        assert MODEL_TABLE[ModelType.RADIAL].profile_exponent == 0.5


class TestAsymptoticMatching:
    """Test the harmonic combination of the two asymptotes"""

    def test_harmonic_combination_value(self):
        """Test 5: 1/L = 1/a + 1/b"""
        assert harmonic_combination(2.0, 2.0) == pytest.approx(1.0)
        assert harmonic_combination(3.0, 6.0) == pytest.approx(2.0)

    def test_pkn_asymptotes_reference(self):
        """Test 6: PKN asymptotes for the default treatment"""
        L_nl, L_hl = asymptotes(ModelType.PKN, FracInputs.default(), 1800.0)
        assert L_nl == pytest.approx(596.0, rel=0.01)
        assert L_hl == pytest.approx(225.1, rel=0.01)

    @pytest.mark.parametrize("model", list(ModelType))
    def test_combined_never_exceeds_asymptotes(self, model):
        """Test 7: Combined extent ≤ min(no-leakoff, high-leakoff)"""
        for inputs in INPUT_GRID:
            L_nl, L_hl = asymptotes(model, inputs, inputs.time)
            state = solve_at_time(model, inputs, inputs.time)
            assert state.length <= min(L_nl, L_hl) * (1 + 1e-12)
            assert state.length > 0

    @pytest.mark.parametrize("model", list(ModelType))
    def test_asymptotes_grow_with_time(self, model):
        """Test 8: Both asymptotes are increasing power laws in t"""
        inputs = FracInputs.default()
        early = asymptotes(model, inputs, 100.0)
        late = asymptotes(model, inputs, 1000.0)
        assert late[0] > early[0]
        assert late[1] > early[1]

    def test_high_leakoff_limit(self):
        """Test 9: Very leaky formation approaches the Carter asymptote"""
        inputs = FracInputs.default().replace(CL=1e-2)
        L_nl, L_hl = asymptotes(ModelType.PKN, inputs, inputs.time)
        state = solve_at_time(ModelType.PKN, inputs, inputs.time)
        assert L_hl < 0.01 * L_nl
        assert state.length == pytest.approx(L_hl, rel=0.02)

    def test_radial_ignores_height(self):
        """Test 10: Radial extent does not depend on H"""
        inputs = FracInputs.default()
        a = solve_at_time(ModelType.RADIAL, inputs, 600.0)
        b = solve_at_time(ModelType.RADIAL, inputs.replace(H=300.0), 600.0)
        assert a == b


class TestPKN:
    """Reference PKN scenario: 30 GPa, ν=0.25, 100 cP, 0.05 m³/s, H=30 m, 30 min"""

    def setup_method(self):
        self.inputs = FracInputs.default()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            self.result = calculate_pkn(self.inputs)

    def test_geometry(self):
        """Test 11: Length, widths and net pressure"""
        assert self.result.model is ModelType.PKN
        assert self.result.length == pytest.approx(163.0, rel=0.01)
        assert self.result.width_max == pytest.approx(16.9e-3, rel=0.01)
        assert self.result.width_avg == pytest.approx(10.6e-3, rel=0.01)
        assert self.result.p_net == pytest.approx(6.0e6, rel=0.01)

    def test_average_width_factor(self):
        """Test 12: w_avg = (π/4)·0.8·w_max"""
        assert self.result.width_avg == pytest.approx(np.pi / 4 * 0.8 * self.result.width_max)

    def test_wellbore_pressure(self):
        """Test 13: p_well = σ_min + p_net"""
        assert self.result.p_well == pytest.approx(self.inputs.sigma_min + self.result.p_net)

    def test_no_short_fracture_warning(self):
        """Test 14: L ≈ 163 m > 2H = 60 m"""
        assert self.result.warnings == ()

    def test_regime(self):
        """Test 15: Score = 1e6 / (0.1·0.05·1e6) = 200 → Toughness"""
        assert self.result.regime == "Toughness"

    def test_efficiency_saturates_and_leakoff_negative(self):
        """Test 16: Contained (≈104 m³) > injected (90 m³); leakoff kept unclamped"""
        contained = 2 * self.result.length * self.inputs.H * self.result.width_avg
        assert contained == pytest.approx(104.0, rel=0.01)
        assert self.result.volume_injected == pytest.approx(90.0)
        assert self.result.efficiency == 1.0
        assert self.result.volume_leakoff == pytest.approx(90.0 - contained)
        assert self.result.volume_leakoff < 0
        assert self.result.volume_fracture == pytest.approx(contained)

    def test_volume_balance_warning_issued(self):
        """Test 17: Negative leakoff volume is flagged as a warning"""
        with pytest.warns(VolumeBalanceWarning):
            compute("PKN", self.inputs)

    def test_short_fracture_warning(self):
        """Test 18: Tall fracture (H=200 m) violates L ≥ 2H"""
        tall = self.inputs.replace(H=200.0)
        with pytest.warns(GeometryAssumptionWarning):
            result = calculate_pkn(tall)
        assert result.length < 2 * tall.H
        assert len(result.warnings) == 1
        assert "PKN" in result.warnings[0]


class TestKGD:
    """KGD on the same reference inputs"""

    def setup_method(self):
        self.inputs = FracInputs.default()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            self.result = calculate_kgd(self.inputs)

    def test_length_and_long_fracture_warning(self):
        """Test 19: L ≈ 116 m > H = 30 m → warning"""
        assert self.result.length == pytest.approx(116.1, rel=0.02)
        assert self.result.length > self.inputs.H
        assert len(self.result.warnings) == 1
        assert "KGD" in self.result.warnings[0]

    def test_closure_relations(self):
        """Test 20: p_net = E'·w_max/(4L), w_avg = (π/4)·w_max"""
        Ep = 3.0e10 / (1 - 0.25 ** 2)
        assert self.result.p_net == pytest.approx(Ep * self.result.width_max / (4 * self.result.length))
        assert self.result.width_avg == pytest.approx(np.pi / 4 * self.result.width_max)

    def test_efficiency_below_one(self):
        """Test 21: Leakoff volume positive, efficiency consistent with volumes"""
        assert 0 < self.result.efficiency < 1
        assert self.result.volume_leakoff > 0
        contained = 2 * self.result.length * self.inputs.H * self.result.width_avg
        assert self.result.efficiency == pytest.approx(contained / self.result.volume_injected)

    def test_short_fracture_no_warning(self):
        """Test 22: H = 200 m keeps L below H"""
        result = calculate_kgd(self.inputs.replace(H=200.0), emit_warnings=False)
        assert result.length <= 200.0
        assert result.warnings == ()


class TestRadial:
    """Radial (penny-shaped) model"""

    def setup_method(self):
        self.inputs = FracInputs.default()
        self.result = calculate_radial(self.inputs)

    def test_closure_relations(self):
        """Test 23: w_max = 8·p_net·R/(π·E'), w_avg = (2/3)·w_max"""
        Ep = 3.0e10 / (1 - 0.25 ** 2)
        R = self.result.length
        assert self.result.width_max == pytest.approx(8 * self.result.p_net * R / (np.pi * Ep))
        assert self.result.width_avg == pytest.approx(2.0 / 3.0 * self.result.width_max)

    def test_penny_volume(self):
        """Test 24: Contained volume uses the π·R² footprint"""
        contained = np.pi * self.result.length ** 2 * self.result.width_avg
        assert self.result.volume_fracture == pytest.approx(contained)

    def test_never_warns(self):
        """Test 25: No competing height constraint"""
        for inputs in INPUT_GRID[::7]:
            assert compute(ModelType.RADIAL, inputs, emit_warnings=False).warnings == ()


class TestInvariants:
    """Properties that hold across models and inputs"""

    @pytest.mark.parametrize("model", list(ModelType))
    def test_efficiency_bounds(self, model):
        """Test 26: 0 ≤ efficiency ≤ 1"""
        for inputs in INPUT_GRID:
            result = compute(model, inputs, emit_warnings=False)
            assert 0.0 <= result.efficiency <= 1.0

    @pytest.mark.parametrize("model", [ModelType.PKN, ModelType.KGD])
    def test_warning_iff_geometry(self, model):
        """Test 27: PKN warns iff L < 2H; KGD warns iff L > H"""
        for inputs in INPUT_GRID:
            result = compute(model, inputs, emit_warnings=False)
            if model is ModelType.PKN:
                expected = result.length < 2 * inputs.H
            else:
                expected = result.length > inputs.H
            assert bool(result.warnings) == expected

    @pytest.mark.parametrize("model", list(ModelType))
    def test_history_monotone(self, model):
        """Test 28: Length never decreases with time"""
        for inputs in INPUT_GRID[::5]:
            result = compute(model, inputs, emit_warnings=False)
            lengths = np.array([s.length for s in result.time_series])
            assert np.all(np.diff(lengths) >= 0)

    @pytest.mark.parametrize("model", list(ModelType))
    def test_history_ends_at_final_state(self, model):
        """Test 29: Last history sample equals the final result"""
        result = compute(model, FracInputs.default(), emit_warnings=False)
        last = result.time_series[-1]
        assert last.time == pytest.approx(1800.0)
        assert last.length == result.length
        assert last.width == result.width_max
        assert last.pressure == result.p_net

    def test_regime_independent_of_model(self):
        """Test 30: Same inputs → same regime label for all models"""
        regimes = {r.regime for r in compare_models(FracInputs.default().replace(mu=1.0)).values()}
        assert regimes == {"Viscosity"}

    @pytest.mark.parametrize("model", list(ModelType))
    def test_deterministic(self, model):
        """Test 31: Repeated runs are identical"""
        inputs = FracInputs.default()
        a = compute(model, inputs, emit_warnings=False)
        b = compute(model, inputs, emit_warnings=False)
        assert a == b
        assert isinstance(a, ModelResult)


class TestRegime:
    """Test the toughness/viscosity heuristic"""

    def test_score(self):
        """Test 32: Score formula"""
        assert regime_score(1e6, 0.1, 0.05) == pytest.approx(200.0)

    def test_threshold(self):
        """Test 33: Strictly above 100 → Toughness"""
        assert classify_regime(1e6, 0.1, 0.05) == "Toughness"
        assert classify_regime(1e6, 1.0, 0.05) == "Viscosity"
        # Score exactly 100 is not above the threshold
        assert classify_regime(1e8, 1.0, 1.0) == "Viscosity"

    def test_configurable_threshold(self):
        """Test 34: Threshold is a parameter"""
        assert classify_regime(1e6, 0.1, 0.05, threshold=500.0) == "Viscosity"


class TestSampling:
    """Test history and profile generators"""

    def test_history_times(self):
        """Test 35: 50 samples at T/50 ... T, each an independent call"""
        calls = []

        def solve(t):
            calls.append(t)
            return FractureState(length=t, width=2 * t, pressure=3 * t)

        history = generate_history(100.0, solve)
        assert len(history) == 50
        assert history[0].time == pytest.approx(2.0)
        assert history[-1].time == pytest.approx(100.0)
        assert calls == [h.time for h in history]
        assert history[10].width == pytest.approx(2 * history[10].time)

    def test_profile_shape(self):
        """Test 36: 51 points from 0 to L following w_max·(1 − x/L)^n"""
        profile = generate_profile(100.0, 0.01, 0.5)
        assert len(profile) == 51
        assert profile[0].position == 0.0
        assert profile[0].width == pytest.approx(0.01)
        assert profile[-1].position == pytest.approx(100.0)
        assert profile[-1].width == pytest.approx(0.0, abs=1e-12)
        assert profile[25].width == pytest.approx(0.01 * 0.5 ** 0.5)

        widths = np.array([p.width for p in profile])
        assert np.all(np.diff(widths) <= 0)

    def test_result_profile_uses_model_exponent(self):
        """Test 37: PKN profile midpoint follows the 0.25 taper"""
        result = compute(ModelType.PKN, FracInputs.default(), emit_warnings=False)
        mid = result.profile[25]
        assert mid.position == pytest.approx(result.length / 2)
        assert mid.width == pytest.approx(result.width_max * 0.5 ** 0.25)


class TestComputeErrors:
    """Test failure reporting of the entry point"""

    def test_unsupported_model(self):
        """Test 38: Dispatch rejects unknown variants"""
        with pytest.raises(UnsupportedModelError):
            compute("Planar3D", FracInputs.default())

    def test_invalid_inputs_rejected_before_solving(self):
        """Test 39: Zero leakoff is an input error, not a division by zero"""
        with pytest.raises(InvalidInputError, match="CL"):
            compute(ModelType.PKN, FracInputs.default().replace(CL=0.0))

    def test_radial_accepts_zero_height(self):
        """Test 40: Height is not needed by the radial model"""
        result = compute(ModelType.RADIAL, FracInputs.default().replace(H=0.0))
        assert result.length > 0

    def test_overflow_is_degenerate(self):
        """Test 41: Overflowing modulus surfaces as DegenerateResultError"""
        with pytest.raises(DegenerateResultError):
            compute(ModelType.RADIAL, FracInputs.default().replace(E=1e308))

    def test_numpy_overflow_is_degenerate(self):
        """Test 42: inf produced silently by numpy scalars is caught too"""
        inputs = FracInputs.default().replace(E=np.float64(1e308))
        with pytest.raises(DegenerateResultError, match="non-finite"):
            compute(ModelType.RADIAL, inputs)


class TestDemoScript:
    """Test the command-line demonstration in examples/."""

    def setup_method(self):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        path = os.path.join(os.path.dirname(__file__), '..', 'examples', 'm02_demo.py')
        spec = importlib.util.spec_from_file_location("m02_demo", path)
        self.demo = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(self.demo)

    def test_demo_runs_end_to_end(self, tmp_path, capsys):
        """Test 43: Demo walkthrough prints results and saves the figure"""
        inputs, result = self.demo.demo_single_model()
        assert result.model is ModelType.PKN

        results = self.demo.demo_comparison(inputs)
        assert set(results) == set(ModelType)
        assert len(self.demo.demo_sensitivity(inputs)) == 8

        out = tmp_path / "demo.png"
        self.demo.plot_results(results, str(out))
        assert out.exists()
        assert "PKN Reference Case" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
