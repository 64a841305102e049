"""Closed-form and piecewise pH models for acid-base titrations.

Every function here is pure and never raises: degenerate inputs (zero
concentration, zero volume) are absorbed by the floors in
:mod:`burette.constants` so that ``log10`` and divisions stay defined. The
solver holds no state; each call recomputes the regime for one volume step.

Models:
    Strong acid / strong base:
        pH from the excess of acid or base equivalents in the total volume;
        exactly 7.0 at equivalence.

    Weak acid / strong base (monoprotic and polyprotic):
        An n-protic acid is treated as n sequential monoprotic buffers.
        Within stage k the Henderson-Hasselbalch form applies:

            pH = pKa_k + log10([A⁻]/[HA])

        At an interior stage boundary the pH is the mean of the neighbouring
        pKa values (amphiprotic crossover). Past the last stage the final
        conjugate base hydrolyses with Kb = Kw / Ka_last, or excess OH⁻
        dominates. Inter-stage coupling of the Ka equilibria is ignored; the
        model is meant for visualisation, not analytical prediction.

        The first stage never drops below the pH of the untitrated acid, and
        the hydrolysis pH at equivalence caps the last stage and floors the
        excess-base branch. With these bounds a monoprotic curve never falls
        as titrant is added.

Kw is always passed in explicitly by the caller.
"""

from __future__ import annotations

import math

from burette.chemistry.regimes import (
    Regime,
    RegimeState,
    classify_stage_regime,
    classify_strong_regime,
)
from burette.chemistry.species import (
    Acid,
    Base,
    WeakAcid,
    get_acid_proton_count,
    get_base_hydroxide_count,
    get_ka_series,
)
from burette.constants import (
    MIN_CONCENTRATION,
    MIN_MOLES,
    MIN_VOLUME_L,
    NEUTRAL_PH,
    PKW_NOMINAL,
)
from burette.units import ML_PER_L, ml_to_l, moles_from_ml


def _p(value: float) -> float:
    """Return ``-log10`` of a concentration floored at ``MIN_CONCENTRATION``."""
    return -math.log10(max(value, MIN_CONCENTRATION))


def _ph_from_excess_base(excess_equivalents: float, total_volume_l: float) -> float:
    oh = excess_equivalents / max(total_volume_l, MIN_VOLUME_L)
    return PKW_NOMINAL - _p(oh)


def strong_acid_ph(concentration: float, proton_count: int = 1) -> float:
    """pH of a strong acid solution before any titrant is added."""
    return _p(concentration * max(proton_count, 1))


def weak_acid_ph(concentration: float, ka: float) -> float:
    """pH of a weak acid solution from ``[H⁺] = sqrt(Ka * C)``.

    Returns 7.0 for a non-positive concentration.
    """
    if concentration <= 0:
        return NEUTRAL_PH
    h = math.sqrt(max(ka * concentration, 0.0))
    return _p(h)


def base_equivalents_added(
    volume_added: float, base_concentration: float, hydroxide_count: int
) -> float:
    """OH⁻ equivalents (mol) delivered by ``volume_added`` mL of titrant."""
    return moles_from_ml(base_concentration * hydroxide_count, volume_added)


def acid_equivalents(acid: Acid) -> float:
    """Total H⁺ equivalents (mol) the titration has to neutralize."""
    return acid.moles * max(get_acid_proton_count(acid), 1)


def strong_regime_at(
    acid: Acid,
    volume_added: float,
    base_concentration: float,
    hydroxide_count: int,
    proton_count: int,
) -> RegimeState:
    acid_eq = acid.moles * max(proton_count, 1)
    base_eq = base_equivalents_added(volume_added, base_concentration, hydroxide_count)
    return classify_strong_regime(acid_eq, base_eq)


def strong_acid_strong_base_ph(
    acid: Acid,
    volume_added: float,
    base_concentration: float,
    hydroxide_count: int,
    proton_count: int,
) -> float:
    """pH during titration of a strong acid with a strong base.

    Args:
        acid: Analyte (only concentration and volume are used).
        volume_added: Titrant volume delivered so far, mL.
        base_concentration: Titrant concentration, mol/L.
        hydroxide_count: OH⁻ per titrant formula unit.
        proton_count: H⁺ per analyte formula unit.
    """
    state = strong_regime_at(
        acid, volume_added, base_concentration, hydroxide_count, proton_count
    )
    total_volume_l = ml_to_l(acid.volume + volume_added)

    if state.regime is Regime.NEUTRAL:
        return NEUTRAL_PH
    if state.regime is Regime.EXCESS_ACID:
        return _p(state.excess / max(total_volume_l, MIN_VOLUME_L))
    return _ph_from_excess_base(state.excess, total_volume_l)


def stage_regime_at(
    acid: WeakAcid,
    volume_added: float,
    base_concentration: float,
    hydroxide_count: int,
) -> RegimeState:
    base_eq = base_equivalents_added(volume_added, base_concentration, hydroxide_count)
    return classify_stage_regime(
        acid.moles, base_eq, len(get_ka_series(acid)), volume_added
    )


def _equivalence_hydrolysis_ph(
    acid: WeakAcid,
    base_concentration: float,
    hydroxide_count: int,
    kw: float,
    fallback_volume_l: float,
) -> float:
    """pH of the final conjugate base, evaluated at the equivalence volume.

    The flask volume is fixed at equivalence rather than at the current step,
    so the value is one constant per titration. Without titrant strength the
    equivalence volume is undefined and ``fallback_volume_l`` is used.
    """
    ka_series = get_ka_series(acid)
    strength = base_concentration * hydroxide_count
    if strength > 0:
        equivalence_ml = len(ka_series) * acid.moles * ML_PER_L / strength
        total_volume_l = max(ml_to_l(acid.volume + equivalence_ml), MIN_VOLUME_L)
    else:
        total_volume_l = fallback_volume_l
    concentration = acid.moles / total_volume_l
    kb = max(kw / ka_series[-1], MIN_CONCENTRATION)
    oh = math.sqrt(max(kb * concentration, MIN_CONCENTRATION))
    return PKW_NOMINAL - _p(oh)


def polyprotic_weak_acid_ph(
    acid: WeakAcid,
    volume_added: float,
    base_concentration: float,
    hydroxide_count: int,
    kw: float,
) -> float:
    """pH during titration of an n-protic weak acid with a strong base.

    Args:
        acid: Weak analyte with its Ka series.
        volume_added: Titrant volume delivered so far, mL.
        base_concentration: Titrant concentration, mol/L.
        hydroxide_count: OH⁻ per titrant formula unit.
        kw: Ion product of water used for conjugate-base hydrolysis.

    Returns:
        float: pH of the mixture. Always finite.
    """
    ka_series = get_ka_series(acid)
    state = stage_regime_at(acid, volume_added, base_concentration, hydroxide_count)
    stage_size = acid.moles
    total_volume_l = max(ml_to_l(acid.volume + volume_added), MIN_VOLUME_L)

    if state.regime is Regime.NO_ANALYTE:
        return NEUTRAL_PH

    if state.regime is Regime.BEFORE_ANY_DISSOCIATION:
        return weak_acid_ph(acid.concentration, ka_series[0])

    if state.regime is Regime.AT_STAGE_BOUNDARY:
        prev_pka = -math.log10(ka_series[state.stage - 1])
        next_pka = -math.log10(ka_series[state.stage])
        return 0.5 * (prev_pka + next_pka)

    hydrolysis = _equivalence_hydrolysis_ph(
        acid, base_concentration, hydroxide_count, kw, total_volume_l
    )

    if state.regime is Regime.IN_STAGE:
        pka = -math.log10(ka_series[state.stage])
        remaining = max(stage_size - state.fractional, MIN_MOLES)
        conjugate = max(state.fractional, MIN_MOLES)
        ha = remaining / total_volume_l
        a = conjugate / total_volume_l
        ph = pka + math.log10(a / ha)
        if state.stage == 0:
            ph = max(ph, weak_acid_ph(acid.concentration, ka_series[0]))
        if state.stage == len(ka_series) - 1:
            ph = min(ph, hydrolysis)
        return ph

    if state.regime is Regime.PAST_ALL_STAGES_EXACT:
        return hydrolysis

    return max(_ph_from_excess_base(state.excess, total_volume_l), hydrolysis)


def weak_acid_strong_base_ph(
    acid: WeakAcid,
    volume_added: float,
    base_concentration: float,
    hydroxide_count: int,
    kw: float,
) -> float:
    """pH during titration of a weak acid with a strong base.

    The monoprotic case is the one-stage specialisation of
    :func:`polyprotic_weak_acid_ph`.
    """
    return polyprotic_weak_acid_ph(
        acid, volume_added, base_concentration, hydroxide_count, kw
    )


def uses_staged_model(acid: Acid, base: Base) -> bool:
    """Whether the (acid, base) pair is solved with the staged weak-acid model.

    Only weak acid + strong base uses the staged model. Every pairing with a
    weak base falls back to the strong/strong model.
    """
    return isinstance(acid, WeakAcid) and base.type == "strong"


def solution_ph(acid: Acid, base: Base, volume_added: float, kw: float) -> float:
    """pH of the flask after ``volume_added`` mL of ``base``."""
    hydroxide_count = get_base_hydroxide_count(base)
    if uses_staged_model(acid, base):
        return weak_acid_strong_base_ph(
            acid, volume_added, base.concentration, hydroxide_count, kw
        )
    return strong_acid_strong_base_ph(
        acid,
        volume_added,
        base.concentration,
        hydroxide_count,
        get_acid_proton_count(acid),
    )


def initial_ph(acid: Acid, kw: float) -> float:
    """pH of the analyte before any titrant is added."""
    if isinstance(acid, WeakAcid):
        return polyprotic_weak_acid_ph(acid, 0.0, 0.0, 1, kw)
    return strong_acid_ph(acid.concentration, get_acid_proton_count(acid))
