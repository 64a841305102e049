"""
Chemistry models for simulated acid-base titrations.

Modules:
    species:
        Canonical acids, bases and indicators with construction-time
        validation, plus the loose catalog-mapping constructors.

    regimes:
        Explicit regime tags (excess acid, in stage k, past all stages, ...)
        computed once per volume step.

    ph_solver:
        Closed-form and staged Henderson-Hasselbalch pH models. Pure
        functions; Kw is passed in by the caller.

    buffer_region:
        Buffer region selection enforcing the |pH − pKa| ≤ 1 constraint.

    hh_model:
        Henderson-Hasselbalch regression recovering one apparent pKa per
        dissociation stage of a simulated curve.

Design Principle:
    This subpackage has no dependencies on plotting/ or matplotlib.
"""

from .buffer_region import select_buffer_region, stage_windows
from .hh_model import fit_henderson_hasselbalch, fit_stage_pkas
from .ph_solver import initial_ph, solution_ph
from .species import Base, Indicator, StrongAcid, WeakAcid

__all__ = [
    "Base",
    "Indicator",
    "StrongAcid",
    "WeakAcid",
    "initial_ph",
    "solution_ph",
    "select_buffer_region",
    "stage_windows",
    "fit_henderson_hasselbalch",
    "fit_stage_pkas",
]
