"""Select buffer regions of a simulated titration curve.

Buffer Region Definition:
    The operational criterion |pH - pKa| ≤ 1 corresponds to:
        0.1 ≤ [A⁻]/[HA] ≤ 10

    Inside this window both the acid and its conjugate base are present in
    significant amounts and the Henderson-Hasselbalch form used by the staged
    solver is a defensible description of the pH. A polyprotic acid has one
    such window per dissociation stage.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np


def select_buffer_region(pH: np.ndarray, pKa: float) -> np.ndarray:
    """Return a boolean mask for the chemically valid buffer region.

    Args:
        pH (numpy.ndarray): pH values along one curve.
        pKa (float): pKa of the dissociation stage the window is centred on.

    Returns:
        numpy.ndarray: Boolean mask selecting points satisfying
        ``|pH - pKa| <= 1``; shape matches ``pH``.

    Raises:
        ValueError: If ``pKa`` is non-finite.
    """
    pH_arr = np.asarray(pH, dtype=float)
    if not np.isfinite(pKa):
        raise ValueError("pKa must be finite to select buffer region.")
    return np.abs(pH_arr - float(pKa)) <= 1.0


def stage_windows(equivalence_volume: float, n_stages: int) -> List[Tuple[float, float]]:
    """Volume bounds ``(k * V1, (k + 1) * V1)`` of each dissociation stage.

    ``V1 = equivalence_volume / n_stages`` is the titrant volume one stage
    consumes. Returns an empty list for a non-finite or non-positive volume.
    """
    if not np.isfinite(equivalence_volume) or equivalence_volume <= 0 or n_stages < 1:
        return []
    v1 = float(equivalence_volume) / int(n_stages)
    return [(k * v1, (k + 1) * v1) for k in range(int(n_stages))]
