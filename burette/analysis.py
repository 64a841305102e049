"""
Consistency checks on simulated titration curves.

This module reads a finished :class:`burette.simulation.TitrationResult` (or
its DataFrame form) and checks it against the chemistry it encodes:
- Inflection points from the maxima of d(pH)/dV, located with
  ``scipy.signal.find_peaks`` on ``np.gradient(pH, V)``.
- The equivalence point as the steepest inflection, with QC on edge proximity,
  post-equivalence coverage and the size of the pH jump.
- The half-equivalence rule pH = pKa for weak acids.
- Per-stage apparent pKa values from Henderson-Hasselbalch regression
  (see :mod:`burette.chemistry.hh_model`).

Nothing here modifies the result; all functions are pure.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

import numpy as np
import pandas as pd
from scipy.signal import find_peaks

from burette.chemistry.hh_model import fit_stage_pkas
from burette.chemistry.species import Acid, WeakAcid
from burette.schema import CURVE
from burette.simulation import expected_half_equivalence_pka

DEFAULT_MIN_JUMP = 0.5
DEFAULT_EDGE_BUFFER = 2

INFLECTION_COLUMNS = [CURVE.volume, CURVE.ph, "dpH/dV", "Delta pH"]


def _curve_arrays(curve_df: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
    if CURVE.volume not in curve_df.columns or CURVE.ph not in curve_df.columns:
        raise KeyError(f"Curve data must include {CURVE.volume} and {CURVE.ph}.")
    v = pd.to_numeric(curve_df[CURVE.volume], errors="coerce").to_numpy(dtype=float)
    p = pd.to_numeric(curve_df[CURVE.ph], errors="coerce").to_numpy(dtype=float)
    mask = np.isfinite(v) & np.isfinite(p)
    v = v[mask]
    p = p[mask]
    order = np.argsort(v, kind="stable")
    return v[order], p[order]


def ph_derivative(curve_df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``curve_df`` with a ``dpH/dV`` column.

    Uses ``np.gradient`` on the finite, volume-sorted samples; curves with
    fewer than three samples get an all-NaN derivative.
    """
    v, p = _curve_arrays(curve_df)
    out = pd.DataFrame({CURVE.volume: v, CURVE.ph: p})
    if len(v) >= 3:
        out["dpH/dV"] = np.gradient(p, v)
    else:
        out["dpH/dV"] = np.nan
    return out


def detect_inflection_points(
    curve_df: pd.DataFrame,
    min_jump: float = DEFAULT_MIN_JUMP,
    edge_buffer: int = DEFAULT_EDGE_BUFFER,
) -> pd.DataFrame:
    """Find steep rising sections of a titration curve.

    Args:
        curve_df: Curve with :data:`burette.schema.CURVE` volume and pH columns.
        min_jump: Minimum pH rise across ±2 samples around a derivative peak.
        edge_buffer: Peaks within this many samples of either end are dropped.

    Returns:
        pandas.DataFrame: One row per inflection with columns
        ``Volume (mL)``, ``pH``, ``dpH/dV`` and ``Delta pH``, ordered by volume.
        Empty when the curve has fewer than five samples.
    """
    df = ph_derivative(curve_df)
    n = int(len(df))
    if n < 5:
        return pd.DataFrame(columns=INFLECTION_COLUMNS)

    p = df[CURVE.ph].to_numpy(dtype=float)
    d = df["dpH/dV"].to_numpy(dtype=float)
    peaks, _ = find_peaks(d)

    rows = []
    for idx in peaks:
        idx = int(idx)
        if idx <= edge_buffer or idx >= n - 1 - edge_buffer:
            continue
        before_idx = max(idx - 2, 0)
        after_idx = min(idx + 2, n - 1)
        delta = float(p[after_idx] - p[before_idx])
        if not np.isfinite(delta) or delta < min_jump:
            continue
        rows.append(
            {
                CURVE.volume: float(df[CURVE.volume].iloc[idx]),
                CURVE.ph: float(p[idx]),
                "dpH/dV": float(d[idx]),
                "Delta pH": delta,
            }
        )
    return pd.DataFrame(rows, columns=INFLECTION_COLUMNS)


def detect_equivalence_point(
    curve_df: pd.DataFrame,
    edge_buffer: int = DEFAULT_EDGE_BUFFER,
    min_post_points: int = 3,
) -> Dict:
    """Locate the equivalence point as the maximum of d(pH)/dV.

    Returns:
        dict: ``eq_x`` and ``eq_pH`` (NaN when nothing is found), ``qc_pass``
        and ``qc_reason``. QC fails when the peak sits within ``edge_buffer``
        samples of an end, fewer than ``min_post_points`` samples follow it,
        or the pH rise across it is below ``max(0.5, 0.1 * pH span)``.
    """
    df = ph_derivative(curve_df)
    d = df["dpH/dV"]
    if d.dropna().empty:
        return {"eq_x": np.nan, "eq_pH": np.nan, "qc_pass": False, "qc_reason": "No derivative"}

    n = int(len(df))
    peak_idx = int(d.idxmax())
    p = df[CURVE.ph].to_numpy(dtype=float)

    reasons = []
    if peak_idx <= edge_buffer or peak_idx >= n - 1 - edge_buffer:
        reasons.append("Peak too close to data edge")
    if (n - peak_idx - 1) < min_post_points:
        reasons.append("Insufficient post-equivalence coverage")
    min_jump = max(DEFAULT_MIN_JUMP, 0.10 * float(np.max(p) - np.min(p)))
    delta = float(p[min(peak_idx + 2, n - 1)] - p[max(peak_idx - 2, 0)])
    if delta < min_jump:
        reasons.append("Steep-region pH change too small for a clear equivalence")

    ok = len(reasons) == 0
    return {
        "eq_x": float(df[CURVE.volume].iloc[peak_idx]),
        "eq_pH": float(p[peak_idx]),
        "qc_pass": ok,
        "qc_reason": "OK" if ok else "; ".join(reasons),
    }


def check_half_equivalence(result, acid: Acid, tolerance: float | None = None) -> Dict:
    """Check that pH at half-equivalence matches the expected pKa.

    The default tolerance is the pH change the curve undergoes over half a
    sampling step at the half-equivalence volume (plus 1e-6), i.e. the largest
    deviation the nearest-sample rule can introduce.

    Returns:
        dict: ``expected_pka``, ``observed_ph``, ``volume``, ``deviation``,
        ``tolerance`` and ``passes``. Strong acids, and results without a
        half-equivalence point, never pass.
    """
    half = result.half_equivalence_point
    expected = expected_half_equivalence_pka(acid)
    if half is None or not isinstance(acid, WeakAcid) or not math.isfinite(expected):
        return {
            "expected_pka": expected,
            "observed_ph": np.nan,
            "volume": np.nan,
            "deviation": np.nan,
            "tolerance": np.nan if tolerance is None else float(tolerance),
            "passes": False,
        }

    if tolerance is None:
        df = ph_derivative(result.to_dataframe())
        volumes = df[CURVE.volume].to_numpy(dtype=float)
        if len(volumes) >= 3:
            idx = int(np.argmin(np.abs(volumes - half.volume)))
            spacing = float(np.median(np.diff(volumes)))
            slope = abs(float(df["dpH/dV"].iloc[idx]))
            tolerance = slope * spacing / 2.0 + 1e-6
        else:
            tolerance = 1e-6

    deviation = abs(half.ph - expected)
    return {
        "expected_pka": expected,
        "observed_ph": half.ph,
        "volume": half.volume,
        "deviation": deviation,
        "tolerance": float(tolerance),
        "passes": bool(deviation <= tolerance),
    }


def analyze_result(result, acid: Acid) -> Dict:
    """Bundle the consistency checks for one simulated titration.

    Returns:
        dict: ``inflections`` (DataFrame), ``equivalence`` (derivative-based
        detection), ``equivalence_error`` (detected minus theoretical volume,
        mL), ``half_equivalence`` (see :func:`check_half_equivalence`) and
        ``stage_pkas`` (DataFrame, weak acids only, else ``None``).
    """
    curve_df = result.to_dataframe()
    equivalence = detect_equivalence_point(curve_df)
    stage_pkas = None
    if isinstance(acid, WeakAcid) and math.isfinite(result.equivalence_volume):
        stage_pkas = fit_stage_pkas(result, acid)
    return {
        "inflections": detect_inflection_points(curve_df),
        "equivalence": equivalence,
        "equivalence_error": equivalence["eq_x"] - result.equivalence_volume,
        "half_equivalence": check_half_equivalence(result, acid),
        "stage_pkas": stage_pkas,
    }
