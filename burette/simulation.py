"""Simulate a complete acid-base titration curve.

:func:`simulate_titration` drives the pH solver across an evenly spaced grid of
titrant volumes, from 0 mL to twice the theoretical equivalence volume, and
collects the indicator colour and percent neutralized at every sample.

Equivalence handling:
    The theoretical equivalence volume is closed-form:

        V_eq = n_H+ * c_acid * V_acid / (c_base * n_OH-)

    The reported equivalence and half-equivalence points are, by default, the
    grid samples nearest to V_eq and V_eq/2 (``locate="sample"``), so their
    accuracy is bounded by the step size. ``locate="exact"`` evaluates the
    solver directly at the theoretical volumes instead while the curve itself
    stays sampled at the step size.

Failure semantics:
    Once valid species exist, the simulation never raises. Situations where
    the model runs outside its assumptions are reported with ``UserWarning``
    and a result is still returned.

The simulation is a pure function of its inputs (plus Kw): results are
immutable and calls can run concurrently without synchronisation.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from burette.chemistry.ph_solver import (
    acid_equivalents,
    base_equivalents_added,
    initial_ph,
    solution_ph,
)
from burette.chemistry.species import (
    Acid,
    Base,
    Indicator,
    WeakAcid,
    get_acid_proton_count,
    get_base_hydroxide_count,
    get_ka_series,
)
from burette.color import get_indicator_color
from burette.constants import DEFAULT_STEP_SIZE, DEFAULT_TEMPERATURE_C, water_ion_product
from burette.schema import CURVE
from burette.units import ML_PER_L

logger = logging.getLogger(__name__)

MAX_CURVE_POINTS = 100_000
LOCATE_MODES = ("sample", "exact")

# Grid volumes are rounded to this many decimals so that i * step lands on
# exact multiples (0.7 * 3 -> 2.1, not 2.0999999999999996).
_VOLUME_DECIMALS = 9


@dataclass(frozen=True)
class TitrationPoint:
    """One simulated sample of the titration curve.

    Attributes:
        volume_added: Titrant volume delivered, mL.
        ph: Simulated pH.
        color: Indicator colour at ``ph`` (``#rrggbb``).
        percent_neutralized: Share of acid equivalents neutralized, 0-100.
    """

    volume_added: float
    ph: float
    color: str
    percent_neutralized: float


@dataclass(frozen=True)
class CurvePoint:
    """A (volume, pH) annotation on the curve, e.g. the equivalence point."""

    volume: float
    ph: float


@dataclass(frozen=True)
class TitrationResult:
    """Write-once output of :func:`simulate_titration`.

    Attributes:
        points: Samples ordered by strictly increasing volume, starting at 0.
        equivalence_point: Located equivalence point.
        half_equivalence_point: Located half-equivalence point; weak acids only.
        initial_ph: pH before any titrant is added.
        final_ph: pH of the last sample (at twice the equivalence volume).
        total_volume: Flask volume at the end of the run, mL.
        steps: Human-readable explanation of the run, one line per entry.
        equivalence_volume: Theoretical equivalence volume, mL (``nan`` when
            the titrant delivers no hydroxide).
        stage_boundaries: Located stage boundaries (k * V_eq / n for an
            n-protic weak acid; the equivalence point for strong acids).
        kw: Ion product of water used for the run.
    """

    points: Tuple[TitrationPoint, ...]
    equivalence_point: CurvePoint
    half_equivalence_point: Optional[CurvePoint]
    initial_ph: float
    final_ph: float
    total_volume: float
    steps: Tuple[str, ...]
    equivalence_volume: float
    stage_boundaries: Tuple[CurvePoint, ...] = ()
    kw: float = float("nan")

    @property
    def max_volume(self) -> float:
        return self.points[-1].volume_added

    def to_dataframe(self) -> pd.DataFrame:
        """Return the curve as a DataFrame with :data:`burette.schema.CURVE` columns."""
        return pd.DataFrame(
            {
                CURVE.volume: np.array([p.volume_added for p in self.points], dtype=float),
                CURVE.ph: np.array([p.ph for p in self.points], dtype=float),
                CURVE.color: [p.color for p in self.points],
                CURVE.percent: np.array(
                    [p.percent_neutralized for p in self.points], dtype=float
                ),
            }
        )


def theoretical_equivalence_volume(acid: Acid, base: Base) -> float:
    """Volume of titrant (mL) that exactly neutralizes every acid proton.

    Returns ``nan`` when the titrant strength ``c_base * n_OH`` is not positive.
    """
    strength = base.concentration * get_base_hydroxide_count(base)
    if strength <= 0:
        return float("nan")
    return acid_equivalents(acid) * ML_PER_L / strength


def percent_neutralized(base_equivalents: float, total_acid_equivalents: float) -> float:
    """Percent of acid equivalents neutralized, clamped to ``[0, 100]``."""
    if total_acid_equivalents <= 0:
        return 0.0
    return min(max(100.0 * base_equivalents / total_acid_equivalents, 0.0), 100.0)


def find_nearest_point(points: Sequence[TitrationPoint], volume: float) -> TitrationPoint:
    """Return the sample whose volume is closest to ``volume``.

    Linear scan with a strict ``<`` comparison, so ties go to the earlier
    sample. ``points`` must not be empty.
    """
    best = points[0]
    best_diff = abs(best.volume_added - volume)
    for point in points:
        diff = abs(point.volume_added - volume)
        if diff < best_diff:
            best_diff = diff
            best = point
    return best


def expected_half_equivalence_pka(acid: Acid) -> float:
    """pH the staged model predicts at half the total equivalence volume.

    For an n-protic weak acid V_eq/2 falls in the middle of stage ``n // 2``
    when n is odd (pH = that stage's pKa) and on the boundary between the two
    middle stages when n is even (pH = mean of their pKa values). Strong acids
    have no such point and return ``nan``.
    """
    if not isinstance(acid, WeakAcid):
        return float("nan")
    pkas = acid.pka_values
    n = len(pkas)
    if n % 2 == 1:
        return pkas[n // 2]
    return 0.5 * (pkas[n // 2 - 1] + pkas[n // 2])


def _resolve_step_size(step_size: object) -> float:
    try:
        step = float(step_size)
    except (TypeError, ValueError):
        step = float("nan")
    if not math.isfinite(step) or step <= 0:
        warnings.warn(
            f"Step size {step_size!r} is not a positive finite volume; "
            f"using {DEFAULT_STEP_SIZE} mL.",
            UserWarning,
            stacklevel=3,
        )
        return DEFAULT_STEP_SIZE
    return step


def _make_point(
    acid: Acid,
    base: Base,
    indicator: Indicator,
    volume: float,
    kw: float,
    total_acid_eq: float,
) -> TitrationPoint:
    if volume == 0:
        ph = initial_ph(acid, kw)
    else:
        ph = solution_ph(acid, base, volume, kw)
    base_eq = base_equivalents_added(
        volume, base.concentration, get_base_hydroxide_count(base)
    )
    return TitrationPoint(
        volume_added=volume,
        ph=ph,
        color=get_indicator_color(indicator, ph),
        percent_neutralized=percent_neutralized(base_eq, total_acid_eq) if volume else 0.0,
    )


def _locate(
    points: Sequence[TitrationPoint],
    volume: float,
    locate: str,
    acid: Acid,
    base: Base,
    indicator: Indicator,
    kw: float,
    total_acid_eq: float,
) -> CurvePoint:
    if locate == "exact" and math.isfinite(volume):
        point = _make_point(acid, base, indicator, volume, kw, total_acid_eq)
    else:
        point = find_nearest_point(points, volume)
    return CurvePoint(volume=point.volume_added, ph=point.ph)


def _describe_inputs(
    acid: Acid, base: Base, indicator: Indicator, proton_count: int, hydroxide_count: int
) -> List[str]:
    acid_line = f"  Type: {acid.type} acid"
    pka = getattr(acid, "pka", None)
    if pka is not None:
        acid_line += f", pKa = {pka:.2f}"
    if proton_count > 1:
        acid_line += f", {proton_count} ionizable protons"

    base_line = f"  Type: {base.type} base"
    if hydroxide_count > 1:
        base_line += f", provides {hydroxide_count} OH⁻"

    low, high = indicator.transition_range
    return [
        "=== Acid-Base Titration Simulation ===\n",
        f"Analyte: {acid.name} ({acid.formula})",
        f"  Concentration: {acid.concentration:.3f} M",
        f"  Volume: {acid.volume:.1f} mL",
        acid_line,
        f"\nTitrant: {base.name} ({base.formula})",
        f"  Concentration: {base.concentration:.3f} M",
        base_line,
        f"\nIndicator: {indicator.name}",
        f"  Transition range: pH {low:g}-{high:g}",
        f"  Acid color: {indicator.acid_color}",
        f"  Base color: {indicator.base_color}\n",
    ]


def simulate_titration(
    acid: Acid,
    base: Base,
    indicator: Indicator,
    step_size: float = DEFAULT_STEP_SIZE,
    *,
    kw: Optional[float] = None,
    locate: str = "sample",
) -> TitrationResult:
    """Simulate titrating ``acid`` with ``base`` and watching ``indicator``.

    Args:
        acid: Analyte in the flask.
        base: Titrant in the burette.
        indicator: Indicator used for the per-point colour.
        step_size: Titrant increment between samples, mL. Defaults to 0.5.
        kw: Ion product of water. Defaults to the 25 °C table value.
        locate: ``"sample"`` reads the equivalence, half-equivalence and stage
            points off the nearest grid sample; ``"exact"`` evaluates the
            solver at the theoretical volumes.

    Returns:
        TitrationResult: The sampled curve, located points and an explanatory
        step log.

    Note:
        Weak-base titrants are modelled as strong bases. Inputs outside the
        model (weak base, invalid step size, titrant without hydroxide, grids
        larger than ``MAX_CURVE_POINTS``) emit ``UserWarning``; the function
        itself never raises for valid species.
    """
    if kw is None:
        kw = water_ion_product(DEFAULT_TEMPERATURE_C)
    if locate not in LOCATE_MODES:
        warnings.warn(
            f"Unknown locate mode {locate!r}; using 'sample'.", UserWarning, stacklevel=2
        )
        locate = "sample"
    step = _resolve_step_size(step_size)

    proton_count = get_acid_proton_count(acid)
    hydroxide_count = get_base_hydroxide_count(base)
    steps = _describe_inputs(acid, base, indicator, proton_count, hydroxide_count)

    if base.type != "strong":
        warnings.warn(
            f"{base.name} is a weak base; the titration is modelled as if it were strong.",
            UserWarning,
            stacklevel=2,
        )
        steps.append("Note: weak-base titrants are modelled as strong bases.\n")

    total_acid_eq = acid_equivalents(acid)
    equivalence_volume = theoretical_equivalence_volume(acid, base)

    steps.append("Theoretical Equivalence Point:")
    steps.append(f"  Moles of acid = {acid.moles:.4e} mol")
    steps.append(f"  Protons to neutralize = {total_acid_eq:.4e} eq")
    steps.append(f"  Volume of base needed = {equivalence_volume:.2f} mL\n")

    points = [_make_point(acid, base, indicator, 0.0, kw, total_acid_eq)]

    if math.isfinite(equivalence_volume):
        max_volume = 2.0 * equivalence_volume
    else:
        warnings.warn(
            f"{base.name} delivers no hydroxide; only the initial point is simulated.",
            UserWarning,
            stacklevel=2,
        )
        max_volume = 0.0

    n_steps = int(math.floor(max_volume / step + 1e-9))
    if n_steps > MAX_CURVE_POINTS:
        coarse = max_volume / MAX_CURVE_POINTS
        warnings.warn(
            f"Step size {step} mL would need {n_steps} samples; "
            f"coarsening to {coarse:.6g} mL.",
            UserWarning,
            stacklevel=2,
        )
        step = coarse
        n_steps = MAX_CURVE_POINTS

    for i in range(1, n_steps + 1):
        volume = round(i * step, _VOLUME_DECIMALS)
        points.append(_make_point(acid, base, indicator, volume, kw, total_acid_eq))

    logger.debug(
        "Simulated %d points up to %.3f mL (V_eq = %.3f mL, step = %.4g mL)",
        len(points),
        max_volume,
        equivalence_volume,
        step,
    )

    def locate_at(volume: float) -> CurvePoint:
        return _locate(points, volume, locate, acid, base, indicator, kw, total_acid_eq)

    equivalence_point = locate_at(equivalence_volume)

    half_equivalence_point = None
    stage_boundaries: Tuple[CurvePoint, ...] = (equivalence_point,)
    if isinstance(acid, WeakAcid):
        half_equivalence_point = locate_at(equivalence_volume / 2.0)
        steps.append("Half-Equivalence Point:")
        steps.append(f"  Volume = {half_equivalence_point.volume:.2f} mL")
        steps.append(f"  pH = {half_equivalence_point.ph:.2f}")
        steps.append(
            f"  At half-equivalence: pH ≈ pKa = {expected_half_equivalence_pka(acid):.2f}\n"
        )

        n_stages = len(get_ka_series(acid))
        if n_stages > 1:
            stage_boundaries = tuple(
                locate_at(k * equivalence_volume / n_stages) for k in range(1, n_stages + 1)
            )
            steps.append("Stage Boundaries:")
            for k, boundary in enumerate(stage_boundaries, start=1):
                steps.append(
                    f"  Stage {k}: Volume = {boundary.volume:.2f} mL, pH = {boundary.ph:.2f}"
                )
            steps.append("")

    equivalence_color = get_indicator_color(indicator, equivalence_point.ph)
    steps.append("Equivalence Point:")
    steps.append(f"  Volume = {equivalence_point.volume:.2f} mL")
    steps.append(f"  pH = {equivalence_point.ph:.2f}")
    steps.append(f"  Color: {equivalence_color}")

    return TitrationResult(
        points=tuple(points),
        equivalence_point=equivalence_point,
        half_equivalence_point=half_equivalence_point,
        initial_ph=points[0].ph,
        final_ph=points[-1].ph,
        total_volume=acid.volume + max_volume,
        steps=tuple(steps),
        equivalence_volume=equivalence_volume,
        stage_boundaries=stage_boundaries,
        kw=float(kw),
    )
