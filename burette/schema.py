"""Define standardized column names for curve and summary DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurveColumns:
    """Container for standardized column labels.

    These column names are used in every DataFrame built from a simulated
    titration, keeping export, diagnostics and plotting consistent.

    Attributes:
        volume: Titrant volume added in mL (cm^3), starting at 0 and strictly
            increasing along the curve.
        ph: Simulated pH of the flask at that volume.
        color: Indicator colour at that pH as a ``#rrggbb`` string.
        percent: Percent of acid equivalents neutralized, clamped to 0-100.
    """

    volume: str = "Volume (mL)"
    ph: str = "pH"
    color: str = "Indicator Color"
    percent: str = "Neutralized (%)"


CURVE = CurveColumns()
