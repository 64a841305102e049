"""Henderson-Hasselbalch regression on simulated titration curves.

Within dissociation stage k (titrant volumes ``v_start`` to ``v_end``) the
staged solver computes

    pH = pKa_k + log10([A⁻]/[HA]) = pKa_k + log10((V - v_start) / (v_end - V))

so regressing pH on the log-ratio inside the buffer region must return a
slope of 1 and an intercept equal to pKa_k. This module performs that
regression as a consistency check of the curve; it performs no I/O.
"""

from __future__ import annotations

import warnings
from typing import Dict

import numpy as np
import pandas as pd

from burette.chemistry.buffer_region import select_buffer_region, stage_windows
from burette.chemistry.species import Acid, WeakAcid
from burette.schema import CURVE
from burette.stats.regression import linear_regression


def fit_henderson_hasselbalch(
    curve_df: pd.DataFrame, v_start: float, v_end: float, pka_guess: float
) -> Dict[str, object]:
    r"""Fit the Henderson-Hasselbalch model within one buffer stage.

    Model form:
        ``pH = m * log10((V - v_start) / (v_end - V)) + b``, where ``b`` is the
        apparent pKa of the stage and ``m`` is expected to be 1.0.

    Args:
        curve_df: Curve with :data:`burette.schema.CURVE` volume and pH
            columns (see :meth:`TitrationResult.to_dataframe`).
        v_start: Titrant volume at the start of the stage, mL.
        v_end: Titrant volume at the end of the stage, mL.
        pka_guess: pKa used to centre the ``|pH - pKa| <= 1`` window.

    Returns:
        A dictionary containing the fitted ``pka_app``, ``slope_reg``,
        ``r2_reg``, ``n_points``, ``se_intercept``, ``ci95_intercept`` and the
        ``buffer_df`` used for the fit.

    Raises:
        ValueError: If required columns are missing, the stage bounds are
            invalid, or the buffer region contains fewer than three points.
    """
    if curve_df.empty or CURVE.volume not in curve_df.columns or CURVE.ph not in curve_df.columns:
        raise ValueError(
            f"Curve data must include {CURVE.volume} and {CURVE.ph} for regression."
        )
    if not (np.isfinite(v_start) and np.isfinite(v_end)) or v_end <= v_start:
        raise ValueError("Stage bounds must be finite with v_start < v_end.")
    if not np.isfinite(pka_guess):
        raise ValueError("pKa guess must be finite for buffer selection.")

    volumes = pd.to_numeric(curve_df[CURVE.volume], errors="coerce").to_numpy(dtype=float)
    pH_values = pd.to_numeric(curve_df[CURVE.ph], errors="coerce").to_numpy(dtype=float)

    inside = (
        np.isfinite(volumes)
        & np.isfinite(pH_values)
        & (volumes > v_start)
        & (volumes < v_end)
    )
    volumes = volumes[inside]
    pH_values = pH_values[inside]

    log_ratio = np.log10((volumes - v_start) / (v_end - volumes))

    buffer_mask = select_buffer_region(pH_values, pka_guess)
    log_ratio = log_ratio[buffer_mask]
    pH_values = pH_values[buffer_mask]
    volumes = volumes[buffer_mask]

    if len(log_ratio) < 3:
        raise ValueError(
            f"Insufficient valid buffer points for regression. "
            f"Found {len(log_ratio)} points, minimum 3 required."
        )

    reg = linear_regression(log_ratio, pH_values, min_points=3)
    slope = float(reg["m"])
    intercept = float(reg["b"])

    if abs(slope - 1.0) > 0.1:
        warnings.warn(
            f"HH slope ({slope:.3f}) deviates significantly from unity; "
            f"the stage is not behaving as an ideal buffer.",
            UserWarning,
            stacklevel=2,
        )

    buffer_df = pd.DataFrame(
        {
            CURVE.volume: volumes,
            "log10_ratio": log_ratio,
            CURVE.ph: pH_values,
            "pH_fit": slope * log_ratio + intercept,
        }
    )

    return {
        "pka_app": intercept,
        "slope_reg": slope,
        "r2_reg": float(reg["r2"]),
        "n_points": int(len(log_ratio)),
        "se_intercept": float(reg["se_b"]),
        "ci95_intercept": float(reg["ci95_b"]),
        "buffer_df": buffer_df,
    }


def fit_stage_pkas(result, acid: Acid) -> pd.DataFrame:
    """Recover one pKa per dissociation stage from a simulated curve.

    Args:
        result: :class:`burette.simulation.TitrationResult` of a weak acid
            titrated with a strong base.
        acid: The weak acid that was titrated.

    Returns:
        pandas.DataFrame: One row per stage with the input pKa, the fitted
        apparent pKa, slope, R² and the number of buffer points.

    Raises:
        ValueError: If ``acid`` is not a weak acid or the curve has no
            finite equivalence volume.
    """
    if not isinstance(acid, WeakAcid):
        raise ValueError("Stage pKa fitting requires a weak acid.")
    windows = stage_windows(result.equivalence_volume, len(acid.ka_values))
    if not windows:
        raise ValueError("Equivalence volume must be positive and finite.")

    curve_df = result.to_dataframe()
    rows = []
    for stage, ((v_start, v_end), pka) in enumerate(zip(windows, acid.pka_values), start=1):
        fit = fit_henderson_hasselbalch(curve_df, v_start, v_end, pka)
        rows.append(
            {
                "Stage": stage,
                "Stage start (mL)": v_start,
                "Stage end (mL)": v_end,
                "pKa (input)": pka,
                "pKa (fitted)": fit["pka_app"],
                "Slope (HH fit)": fit["slope_reg"],
                "R2 (HH fit)": fit["r2_reg"],
                "Buffer points": fit["n_points"],
            }
        )
    return pd.DataFrame(rows)
