"""Titration regimes as an explicit tagged state.

As titrant is added, the flask passes through a fixed sequence of chemical
regimes. The solver classifies each volume step once, then computes the pH
with the formula that belongs to that regime:

Strong acid / strong base:
    EXCESS_ACID -> NEUTRAL -> EXCESS_BASE

Weak (n-protic) acid / strong base, modelled as n sequential monoprotic
buffer stages of one acid-mole each:
    BEFORE_ANY_DISSOCIATION -> IN_STAGE(0) -> AT_STAGE_BOUNDARY(1)
    -> IN_STAGE(1) -> ... -> PAST_ALL_STAGES_EXACT -> PAST_ALL_STAGES_EXCESS

``NO_ANALYTE`` covers a flask without acid (zero concentration or volume).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from burette.constants import EQUIVALENCE_TOLERANCE

# Relative slack on base/stage ratios so exact stage boundaries reached through
# floating-point arithmetic (e.g. 1.9999999999999998) are not placed one stage low.
_STAGE_RATIO_SLACK = 1e-9


class Regime(Enum):
    EXCESS_ACID = "excess_acid"
    NEUTRAL = "neutral"
    EXCESS_BASE = "excess_base"
    NO_ANALYTE = "no_analyte"
    BEFORE_ANY_DISSOCIATION = "before_any_dissociation"
    IN_STAGE = "in_stage"
    AT_STAGE_BOUNDARY = "at_stage_boundary"
    PAST_ALL_STAGES_EXACT = "past_all_stages_exact"
    PAST_ALL_STAGES_EXCESS = "past_all_stages_excess"


@dataclass(frozen=True)
class RegimeState:
    """Classified state of the flask at one volume step.

    Attributes:
        regime: The regime tag.
        stage: Dissociation stage index (0-based) for staged regimes;
            ``total_stages`` once past all stages; 0 otherwise.
        fractional: Base equivalents (mol) added beyond the current stage
            boundary.
        excess: Equivalents (mol) of the species in excess: acid for
            ``EXCESS_ACID``, base for ``EXCESS_BASE`` and
            ``PAST_ALL_STAGES_EXCESS``; 0 otherwise.
    """

    regime: Regime
    stage: int = 0
    fractional: float = 0.0
    excess: float = 0.0


def classify_strong_regime(acid_equivalents: float, base_equivalents: float) -> RegimeState:
    """Classify a strong acid / strong base mixture by equivalents (mol)."""
    if abs(base_equivalents - acid_equivalents) <= EQUIVALENCE_TOLERANCE:
        return RegimeState(Regime.NEUTRAL)
    if base_equivalents < acid_equivalents:
        return RegimeState(Regime.EXCESS_ACID, excess=acid_equivalents - base_equivalents)
    return RegimeState(Regime.EXCESS_BASE, excess=base_equivalents - acid_equivalents)


def classify_stage_regime(
    acid_moles: float,
    base_equivalents: float,
    total_stages: int,
    volume_added: float,
) -> RegimeState:
    """Classify a weak (possibly polyprotic) acid / strong base mixture.

    Each stage consumes one mole of OH⁻ per mole of acid, so the stage size is
    ``acid_moles`` and ``stage = floor(base_equivalents / acid_moles)``.

    Args:
        acid_moles: Initial moles of analyte.
        base_equivalents: OH⁻ equivalents (mol) delivered so far.
        total_stages: Number of dissociation stages (length of the Ka series).
        volume_added: Titrant volume in mL; exactly zero selects the initial
            regime regardless of round-off in ``base_equivalents``.
    """
    if volume_added == 0:
        return RegimeState(Regime.BEFORE_ANY_DISSOCIATION)
    if acid_moles <= 0:
        return RegimeState(Regime.NO_ANALYTE)

    stages = max(int(total_stages), 1)
    ratio = base_equivalents / acid_moles
    stage = int(math.floor(ratio + _STAGE_RATIO_SLACK)) if math.isfinite(ratio) else stages
    stage = min(max(stage, 0), stages)
    fractional = max(0.0, base_equivalents - stage * acid_moles)

    if stage >= stages:
        excess = base_equivalents - acid_moles * stages
        if excess <= EQUIVALENCE_TOLERANCE:
            return RegimeState(Regime.PAST_ALL_STAGES_EXACT, stage=stages)
        return RegimeState(Regime.PAST_ALL_STAGES_EXCESS, stage=stages, excess=excess)

    if fractional <= EQUIVALENCE_TOLERANCE:
        if stage == 0:
            return RegimeState(Regime.BEFORE_ANY_DISSOCIATION)
        return RegimeState(Regime.AT_STAGE_BOUNDARY, stage=stage)

    return RegimeState(Regime.IN_STAGE, stage=stage, fractional=fractional)
