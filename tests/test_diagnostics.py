"""Curve diagnostics: buffer regions, HH regression, inflections, half-equivalence."""

import math
import warnings

import numpy as np
import pandas as pd
import pytest

from burette.analysis import (
    analyze_result,
    check_half_equivalence,
    detect_equivalence_point,
    detect_inflection_points,
    ph_derivative,
)
from burette.chemistry.buffer_region import select_buffer_region, stage_windows
from burette.chemistry.hh_model import fit_henderson_hasselbalch, fit_stage_pkas
from burette.schema import CURVE
from burette.simulation import simulate_titration
from burette.stats.regression import linear_regression


def _curve(volumes, ph_values):
    return pd.DataFrame({CURVE.volume: volumes, CURVE.ph: ph_values})


class TestBufferRegion:
    def test_mask_bounds(self):
        mask = select_buffer_region(np.array([3.0, 3.8, 4.76, 5.7, 6.0]), 4.76)
        assert mask.tolist() == [False, True, True, True, False]

    def test_non_finite_pka(self):
        with pytest.raises(ValueError, match="finite"):
            select_buffer_region(np.array([4.0]), float("nan"))

    def test_stage_windows(self):
        assert stage_windows(75.0, 3) == [(0.0, 25.0), (25.0, 50.0), (50.0, 75.0)]
        assert stage_windows(float("nan"), 3) == []


class TestRegression:
    def test_perfect_line(self):
        x = np.linspace(-1.0, 1.0, 11)
        reg = linear_regression(x, 2.0 * x + 4.0)
        assert reg["m"] == pytest.approx(2.0)
        assert reg["b"] == pytest.approx(4.0)
        assert reg["r2"] == pytest.approx(1.0)
        assert reg["n"] == 11

    def test_noisy_line_has_intercept_interval(self):
        rng = np.random.default_rng(0)
        x = np.linspace(0.0, 10.0, 30)
        y = 0.5 * x + 1.0 + rng.normal(0.0, 0.1, size=x.size)
        reg = linear_regression(x, y)
        assert reg["ci95_b"] > reg["se_b"] > 0
        assert abs(reg["b"] - 1.0) < 3 * reg["ci95_b"]

    def test_two_points_have_no_interval(self):
        reg = linear_regression([0.0, 1.0], [1.0, 3.0], min_points=2)
        assert reg["m"] == pytest.approx(2.0)
        assert math.isnan(reg["se_b"])
        assert math.isnan(reg["ci95_b"])

    def test_constant_y(self):
        with pytest.raises(ValueError, match="y variance"):
            linear_regression([1.0, 2.0, 3.0], [4.0, 4.0, 4.0])

    def test_insufficient_points(self):
        with pytest.raises(ValueError, match="Insufficient valid data"):
            linear_regression([1.0, 2.0], [1.0, 2.0])

    def test_constant_x(self):
        with pytest.raises(ValueError, match="x variance"):
            linear_regression([1.0, 1.0, 1.0], [1.0, 2.0, 3.0])


class TestHendersonHasselbalch:
    def test_recovers_acetic_pka(self, acetic_result):
        fit = fit_henderson_hasselbalch(acetic_result.to_dataframe(), 0.0, 25.0, 4.76)
        assert fit["pka_app"] == pytest.approx(-math.log10(1.74e-5), abs=0.05)
        assert fit["slope_reg"] == pytest.approx(1.0, abs=1e-6)
        assert fit["r2_reg"] == pytest.approx(1.0)
        assert fit["n_points"] == len(fit["buffer_df"])

    def test_buffer_points_respect_window(self, acetic_result):
        fit = fit_henderson_hasselbalch(acetic_result.to_dataframe(), 0.0, 25.0, 4.76)
        assert (np.abs(fit["buffer_df"][CURVE.ph] - 4.76) <= 1.0).all()

    def test_non_ideal_slope_warns(self):
        volumes = np.linspace(2.0, 23.0, 43)
        ph = 5.0 + 0.7 * np.log10(volumes / (25.0 - volumes))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            fit_henderson_hasselbalch(_curve(volumes, ph), 0.0, 25.0, 5.0)
        assert len(w) == 1
        assert "unity" in str(w[0].message)

    def test_invalid_bounds(self, acetic_result):
        with pytest.raises(ValueError, match="v_start < v_end"):
            fit_henderson_hasselbalch(acetic_result.to_dataframe(), 25.0, 0.0, 4.76)

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="must include"):
            fit_henderson_hasselbalch(pd.DataFrame({"x": [1.0]}), 0.0, 25.0, 4.76)

    def test_too_few_points(self, acetic_result):
        with pytest.raises(ValueError, match="Insufficient valid buffer points"):
            fit_henderson_hasselbalch(acetic_result.to_dataframe(), 24.0, 25.0, 4.76)

    def test_stage_pkas_for_phosphoric(self, phosphoric, phosphoric_result):
        table = fit_stage_pkas(phosphoric_result, phosphoric)
        assert list(table["Stage"]) == [1, 2, 3]
        assert np.all(np.isfinite(table["pKa (fitted)"]))
        # Ka1 and Ka3 sit outside the buffer approximation; stage 2 is ideal.
        assert table["pKa (fitted)"].iloc[1] == pytest.approx(phosphoric.pka_values[1], abs=0.05)
        assert table["Slope (HH fit)"].iloc[1] == pytest.approx(1.0, abs=0.05)

    def test_stage_pkas_require_weak_acid(self, hcl, hcl_result):
        with pytest.raises(ValueError, match="weak acid"):
            fit_stage_pkas(hcl_result, hcl)


class TestInflections:
    def test_strong_acid_single_jump(self, hcl_result):
        found = detect_inflection_points(hcl_result.to_dataframe())
        assert len(found) == 1
        assert found[CURVE.volume].iloc[0] == pytest.approx(25.0)
        assert found["Delta pH"].iloc[0] > 5.0

    def test_weak_acid_jump(self, acetic_result):
        found = detect_inflection_points(acetic_result.to_dataframe())
        assert np.any(np.abs(found[CURVE.volume] - 25.0) <= 0.5)

    def test_polyprotic_stage_jumps(self, phosphoric_result):
        volumes = detect_inflection_points(phosphoric_result.to_dataframe())[CURVE.volume]
        for boundary in (25.0, 50.0):
            assert np.any(np.abs(volumes - boundary) <= 0.5)

    def test_short_curve_is_empty(self):
        found = detect_inflection_points(_curve([0.0, 1.0, 2.0], [1.0, 2.0, 3.0]))
        assert found.empty

    def test_derivative_column(self, hcl_result):
        df = ph_derivative(hcl_result.to_dataframe())
        assert "dpH/dV" in df.columns
        assert int(df["dpH/dV"].idxmax()) == 50

    def test_equivalence_detection(self, hcl_result):
        eq = detect_equivalence_point(hcl_result.to_dataframe())
        assert eq["eq_x"] == pytest.approx(25.0)
        assert eq["qc_pass"]
        assert eq["qc_reason"] == "OK"

    def test_equivalence_detection_flags_edge_peak(self):
        volumes = np.arange(0.0, 10.0, 1.0)
        ph = np.concatenate([np.full(8, 3.0), [3.1, 9.0]])
        eq = detect_equivalence_point(_curve(volumes, ph))
        assert not eq["qc_pass"]
        assert "edge" in eq["qc_reason"]


class TestHalfEquivalence:
    def test_acetic_passes(self, acetic, acetic_result):
        check = check_half_equivalence(acetic_result, acetic)
        assert check["passes"]
        assert check["deviation"] < 1e-9

    def test_offset_grid_within_default_tolerance(self, acetic, naoh, phenolphthalein):
        result = simulate_titration(acetic, naoh, phenolphthalein, 0.7)
        check = check_half_equivalence(result, acetic)
        assert check["volume"] == pytest.approx(12.6)
        assert check["deviation"] > 0
        assert check["passes"]

    def test_tight_tolerance_fails_on_offset_grid(self, acetic, naoh, phenolphthalein):
        result = simulate_titration(acetic, naoh, phenolphthalein, 0.7)
        assert not check_half_equivalence(result, acetic, tolerance=1e-4)["passes"]

    def test_strong_acid_never_passes(self, hcl, hcl_result):
        check = check_half_equivalence(hcl_result, hcl)
        assert not check["passes"]
        assert math.isnan(check["observed_ph"])


def test_analyze_result(acetic, acetic_result, hcl, hcl_result):
    weak = analyze_result(acetic_result, acetic)
    assert len(weak["stage_pkas"]) == 1
    assert weak["half_equivalence"]["passes"]
    assert abs(weak["equivalence_error"]) <= 0.5

    strong = analyze_result(hcl_result, hcl)
    assert strong["stage_pkas"] is None
    assert strong["equivalence_error"] == pytest.approx(0.0, abs=1e-9)
