"""Centralized unit conversion utilities."""

from __future__ import annotations

ML_PER_L: float = 1000.0


def ml_to_l(volume_ml: float) -> float:
    """Convert a volume from mL to L.

    Args:
        volume_ml (float): Volume in millilitres (numerically equal to cm^3).

    Returns:
        float: Volume in litres (numerically equal to dm^3).

    Note:
        All molar quantities in the solver are built as ``c (mol/L) * V (L)``,
        so every burette or flask volume passes through this conversion first.
    """
    return float(volume_ml) / ML_PER_L


def moles_from_ml(concentration: float, volume_ml: float) -> float:
    """Return the amount of substance (mol) in ``volume_ml`` of a solution."""
    return float(concentration) * ml_to_l(volume_ml)
