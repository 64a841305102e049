"""
A Python package for simulating acid-base titration curves.

Computes pH versus added titrant for strong and weak (including polyprotic)
acids titrated with a strong base, locates equivalence and half-equivalence
points, and maps each pH to an indicator colour.

Modules:
    - chemistry: Species model, regime classification and pH solver.
    - simulation: Runs a full titration and collects the curve.
    - color: Indicator colour interpolation.
    - catalog: Predefined indicators, acids, bases and example titrations.
    - analysis: Consistency checks on simulated curves.
    - lab: Interactive burette session over a finished simulation.
    - output / plotting: CSV export and publication-style figures.
"""

__version__ = "1.0.0"

from .analysis import (
    analyze_result,
    check_half_equivalence,
    detect_equivalence_point,
    detect_inflection_points,
)
from .catalog import EXAMPLE_TITRATIONS, INDICATORS, get_acid, get_base, get_indicator
from .chemistry.species import Base, Indicator, StrongAcid, WeakAcid
from .color import get_indicator_color, interpolate_color
from .lab import BuretteSession
from .simulation import TitrationResult, simulate_titration

__all__ = [
    # Species
    "StrongAcid",
    "WeakAcid",
    "Base",
    "Indicator",
    # Simulation
    "simulate_titration",
    "TitrationResult",
    "get_indicator_color",
    "interpolate_color",
    # Catalog
    "INDICATORS",
    "EXAMPLE_TITRATIONS",
    "get_acid",
    "get_base",
    "get_indicator",
    # Analysis
    "analyze_result",
    "check_half_equivalence",
    "detect_equivalence_point",
    "detect_inflection_points",
    # Lab
    "BuretteSession",
]
