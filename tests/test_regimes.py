"""Regime classification for strong and staged weak-acid titrations."""

import pytest

from burette.chemistry.regimes import Regime, classify_stage_regime, classify_strong_regime

ACID_MOLES = 2.5e-3


class TestStrongRegime:
    def test_excess_acid(self):
        state = classify_strong_regime(1e-3, 4e-4)
        assert state.regime is Regime.EXCESS_ACID
        assert state.excess == pytest.approx(6e-4)

    def test_neutral_within_tolerance(self):
        assert classify_strong_regime(1e-3, 1e-3).regime is Regime.NEUTRAL
        assert classify_strong_regime(1e-3, 1e-3 + 1e-13).regime is Regime.NEUTRAL

    def test_excess_base(self):
        state = classify_strong_regime(1e-3, 1.5e-3)
        assert state.regime is Regime.EXCESS_BASE
        assert state.excess == pytest.approx(5e-4)


class TestStageRegime:
    def test_zero_volume_is_before_any_dissociation(self):
        state = classify_stage_regime(ACID_MOLES, 0.0, 3, 0.0)
        assert state.regime is Regime.BEFORE_ANY_DISSOCIATION

    def test_no_analyte(self):
        assert classify_stage_regime(0.0, 1e-4, 1, 1.0).regime is Regime.NO_ANALYTE

    def test_in_first_stage(self):
        state = classify_stage_regime(ACID_MOLES, 1.25e-3, 1, 12.5)
        assert state.regime is Regime.IN_STAGE
        assert state.stage == 0
        assert state.fractional == pytest.approx(1.25e-3)

    def test_in_later_stage(self):
        state = classify_stage_regime(ACID_MOLES, 3.75e-3, 3, 37.5)
        assert state.regime is Regime.IN_STAGE
        assert state.stage == 1
        assert state.fractional == pytest.approx(1.25e-3)

    def test_interior_boundary(self):
        state = classify_stage_regime(ACID_MOLES, 2 * ACID_MOLES, 3, 50.0)
        assert state.regime is Regime.AT_STAGE_BOUNDARY
        assert state.stage == 2

    def test_boundary_reached_through_round_off(self):
        base_eq = 2 * ACID_MOLES * (1 - 1e-15)
        state = classify_stage_regime(ACID_MOLES, base_eq, 3, 50.0)
        assert state.regime is Regime.AT_STAGE_BOUNDARY
        assert state.stage == 2

    def test_past_all_stages_exactly(self):
        state = classify_stage_regime(ACID_MOLES, 3 * ACID_MOLES, 3, 75.0)
        assert state.regime is Regime.PAST_ALL_STAGES_EXACT
        assert state.stage == 3

    def test_past_all_stages_with_excess(self):
        state = classify_stage_regime(ACID_MOLES, ACID_MOLES + 1e-4, 1, 26.0)
        assert state.regime is Regime.PAST_ALL_STAGES_EXCESS
        assert state.excess == pytest.approx(1e-4)
