"""Straight-line fit behind the per-stage Henderson-Hasselbalch diagnostics.

Only the intercept carries an uncertainty: in ``pH = pKa + m * log10(ratio)``
the intercept is the apparent pKa.
"""

from __future__ import annotations

import math
from typing import Dict

import numpy as np
from scipy.stats import t as student_t


def linear_regression(
    x: np.ndarray, y: np.ndarray, min_points: int = 3
) -> Dict[str, float]:
    """Least-squares line through the finite ``(x, y)`` pairs.

    Returns:
        dict[str, float]: ``m`` (slope), ``b`` (intercept), ``r2``, ``se_b``
        (standard error of the intercept), ``ci95_b`` (Student-t 95%
        half-width of the intercept) and ``n`` (pairs used). With exactly two
        pairs there are no residual degrees of freedom and both are ``nan``.

    Raises:
        ValueError: With fewer than ``min_points`` finite pairs, or when
            either coordinate is constant.
    """
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    keep = np.isfinite(xs) & np.isfinite(ys)
    xs, ys = xs[keep], ys[keep]
    n = int(xs.size)
    if n < min_points:
        raise ValueError("Insufficient valid data for regression.")

    x_mean = float(xs.mean())
    sxx = float(np.sum((xs - x_mean) ** 2))
    syy = float(np.sum((ys - ys.mean()) ** 2))
    if sxx <= 0:
        raise ValueError("Insufficient x variance for regression.")
    if syy <= 0:
        raise ValueError("Insufficient y variance for regression.")

    m, b = np.polyfit(xs, ys, 1)
    sse = float(np.sum((ys - (m * xs + b)) ** 2))

    se_b = ci95_b = math.nan
    dof = n - 2
    if dof > 0:
        # Residual variance scaled by the intercept's leverage.
        se_b = math.sqrt(sse / dof * (1.0 / n + x_mean**2 / sxx))
        ci95_b = float(student_t.ppf(0.975, dof)) * se_b

    return {
        "m": float(m),
        "b": float(b),
        "r2": 1.0 - sse / syy,
        "se_b": se_b,
        "ci95_b": ci95_b,
        "n": n,
    }
