"""Closed-form and staged pH models."""

import math

import pytest

from burette.chemistry.ph_solver import (
    acid_equivalents,
    base_equivalents_added,
    initial_ph,
    polyprotic_weak_acid_ph,
    solution_ph,
    strong_acid_ph,
    strong_acid_strong_base_ph,
    uses_staged_model,
    weak_acid_ph,
    weak_acid_strong_base_ph,
)
from burette.chemistry.species import Base, StrongAcid, WeakAcid

KW = 1.008e-14


def test_strong_acid_ph():
    assert strong_acid_ph(0.1) == pytest.approx(1.0)
    assert strong_acid_ph(0.05, 2) == pytest.approx(1.0)


def test_strong_acid_ph_zero_concentration_is_floored():
    assert strong_acid_ph(0.0) == pytest.approx(30.0)


def test_weak_acid_ph():
    assert weak_acid_ph(0.1, 1.74e-5) == pytest.approx(-math.log10(math.sqrt(1.74e-6)))
    assert weak_acid_ph(0.0, 1.74e-5) == 7.0


def test_equivalents():
    sulfuric = StrongAcid("Sulfuric acid", "H2SO4", 0.1, 25.0, proton_count=2)
    assert acid_equivalents(sulfuric) == pytest.approx(5e-3)
    assert base_equivalents_added(10.0, 0.1, 2) == pytest.approx(2e-3)


class TestStrongStrong:
    def test_excess_acid(self, hcl):
        ph = strong_acid_strong_base_ph(hcl, 10.0, 0.1, 1, 1)
        assert ph == pytest.approx(-math.log10(1.5e-3 / 0.035))

    def test_equivalence_is_exactly_neutral(self, hcl):
        assert strong_acid_strong_base_ph(hcl, 25.0, 0.1, 1, 1) == 7.0

    def test_excess_base(self, hcl):
        ph = strong_acid_strong_base_ph(hcl, 50.0, 0.1, 1, 1)
        assert ph == pytest.approx(14.0 + math.log10(2.5e-3 / 0.075))

    def test_diprotic_titrant(self, hcl):
        assert strong_acid_strong_base_ph(hcl, 12.5, 0.1, 2, 1) == 7.0


class TestWeakStrong:
    def test_initial_point_uses_weak_acid_formula(self, acetic):
        assert polyprotic_weak_acid_ph(acetic, 0.0, 0.1, 1, KW) == pytest.approx(
            weak_acid_ph(0.1, 1.74e-5)
        )

    def test_half_equivalence_equals_pka(self, acetic):
        ph = weak_acid_strong_base_ph(acetic, 12.5, 0.1, 1, KW)
        assert ph == pytest.approx(-math.log10(1.74e-5), abs=1e-9)

    def test_buffer_region(self, acetic):
        ph = weak_acid_strong_base_ph(acetic, 5.0, 0.1, 1, KW)
        assert ph == pytest.approx(-math.log10(1.74e-5) + math.log10(5.0 / 20.0))

    def test_equivalence_uses_conjugate_base_hydrolysis(self, acetic):
        ph = weak_acid_strong_base_ph(acetic, 25.0, 0.1, 1, KW)
        oh = math.sqrt(KW / 1.74e-5 * (2.5e-3 / 0.05))
        assert ph == pytest.approx(14.0 + math.log10(oh))
        assert ph > 7.0

    def test_kw_changes_hydrolysis_ph(self, acetic):
        high = weak_acid_strong_base_ph(acetic, 25.0, 0.1, 1, 1.008e-14)
        low = weak_acid_strong_base_ph(acetic, 25.0, 0.1, 1, 1.0e-14)
        assert high > low

    def test_excess_base(self, acetic):
        ph = weak_acid_strong_base_ph(acetic, 30.0, 0.1, 1, KW)
        assert ph == pytest.approx(14.0 + math.log10(5e-4 / 0.055))

    def test_first_buffer_sample_not_below_initial_ph(self):
        hf = WeakAcid("Hydrofluoric acid", "HF", 0.1, 25.0, ka_values=(6.76e-4,))
        start = weak_acid_strong_base_ph(hf, 0.0, 0.1, 1, KW)
        assert weak_acid_strong_base_ph(hf, 0.5, 0.1, 1, KW) == pytest.approx(start)
        assert weak_acid_strong_base_ph(hf, 5.0, 0.1, 1, KW) > start

    def test_last_stage_capped_by_equivalence_hydrolysis(self, acetic):
        at_equivalence = weak_acid_strong_base_ph(acetic, 25.0, 0.1, 1, KW)
        before = weak_acid_strong_base_ph(acetic, 24.999, 0.1, 1, KW)
        assert before == pytest.approx(at_equivalence)

    def test_small_excess_floored_by_equivalence_hydrolysis(self, acetic):
        at_equivalence = weak_acid_strong_base_ph(acetic, 25.0, 0.1, 1, KW)
        after = weak_acid_strong_base_ph(acetic, 25.001, 0.1, 1, KW)
        assert after == pytest.approx(at_equivalence)
        assert weak_acid_strong_base_ph(acetic, 26.0, 0.1, 1, KW) > at_equivalence

    def test_no_analyte_is_neutral(self):
        empty = WeakAcid("Acetic acid", "CH3COOH", 0.0, 25.0, ka_values=(1.74e-5,))
        assert weak_acid_strong_base_ph(empty, 5.0, 0.1, 1, KW) == 7.0


class TestPolyprotic:
    def test_stage_midpoints_equal_each_pka(self, phosphoric):
        for volume, pka in zip((12.5, 37.5, 62.5), phosphoric.pka_values):
            ph = polyprotic_weak_acid_ph(phosphoric, volume, 0.1, 1, KW)
            assert ph == pytest.approx(pka, abs=1e-9)

    def test_interior_boundaries_average_neighbouring_pka(self, phosphoric):
        pka = phosphoric.pka_values
        assert polyprotic_weak_acid_ph(phosphoric, 25.0, 0.1, 1, KW) == pytest.approx(
            0.5 * (pka[0] + pka[1])
        )
        assert polyprotic_weak_acid_ph(phosphoric, 50.0, 0.1, 1, KW) == pytest.approx(
            0.5 * (pka[1] + pka[2])
        )

    def test_final_boundary_hydrolysis_uses_last_ka(self, phosphoric):
        ph = polyprotic_weak_acid_ph(phosphoric, 75.0, 0.1, 1, KW)
        oh = math.sqrt(KW / 4.2e-13 * (2.5e-3 / 0.1))
        assert ph == pytest.approx(14.0 + math.log10(oh))


def test_weak_base_titrant_falls_back_to_strong_model(acetic):
    ammonia = Base("Ammonia", "NH3", 0.1, 1, type="weak", kb=1.78e-5)
    assert not uses_staged_model(acetic, ammonia)
    assert solution_ph(acetic, ammonia, 25.0, KW) == 7.0


def test_solution_ph_dispatch(acetic, naoh):
    assert uses_staged_model(acetic, naoh)
    assert solution_ph(acetic, naoh, 12.5, KW) == pytest.approx(4.7595, abs=1e-3)


def test_initial_ph(hcl, acetic):
    assert initial_ph(hcl, KW) == pytest.approx(1.0)
    assert initial_ph(acetic, KW) == pytest.approx(2.8797, abs=1e-4)
    sulfuric = StrongAcid("Sulfuric acid", "H2SO4", 0.1, 25.0, proton_count=2)
    assert initial_ph(sulfuric, KW) == pytest.approx(-math.log10(0.2))


@pytest.mark.parametrize("volume", [0.0, 1e-12, 0.5, 25.0, 1e6])
def test_degenerate_inputs_stay_finite(volume):
    empty = StrongAcid("Hydrochloric acid", "HCl", 0.0, 0.0)
    assert math.isfinite(strong_acid_strong_base_ph(empty, volume, 0.1, 1, 1))
    weak = WeakAcid("Acetic acid", "CH3COOH", 0.0, 0.0, ka_values=(1.74e-5,))
    assert math.isfinite(polyprotic_weak_acid_ph(weak, volume, 0.0, 1, KW))
