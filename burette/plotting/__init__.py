"""
Figure export for simulated titrations.

Modules:
    titration_plots:
        Two-panel figures for individual titrations:
        (1) pH vs. volume with the indicator colour strip and V_eq / V_1/2 guides
        (2) First derivative d(pH)/dV

    style:
        Shared rcParams, axis helpers and PNG/PDF/SVG bundle export.

Design Principles:
    No chemistry calculations in plotting code. Functions receive finished
    simulation results and simply render them.
"""

from .titration_plots import plot_titration_curve, plot_titration_curves, setup_plot_style

__all__ = ["plot_titration_curve", "plot_titration_curves", "setup_plot_style"]
