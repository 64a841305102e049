"""Render simulated titration curves with indicator colours and guides.

Each figure shows pH against titrant volume with the indicator colour strip
beneath it, and the first derivative d(pH)/dV beside it. Plotting code
receives finished results and performs no pH calculations of its own.
"""

from __future__ import annotations

import os
from typing import List, Mapping

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgb

from burette.analysis import ph_derivative
from burette.schema import CURVE
from burette.simulation import TitrationResult

from .style import (
    MATH_LABELS,
    STYLE,
    apply_rcparams,
    clean_axis,
    draw_equivalence_guides,
    figure_filename,
    finalize_figure,
    save_figure_bundle,
    set_axis_labels,
)

DEFAULT_TITLE = "Titration curve"


def setup_plot_style():
    """Apply the project plotting style.

    Returns:
        None: Matplotlib global state is updated in place.
    """
    apply_rcparams()


def _draw_color_strip(ax, volumes: np.ndarray, colors: List[str]) -> None:
    v0, v1 = float(volumes[0]), float(volumes[-1])
    if v1 <= v0:
        v0, v1 = v0 - 0.5, v0 + 0.5
    rgb = np.array([to_rgb(c) for c in colors], dtype=float)[np.newaxis, :, :]
    ax.imshow(
        rgb,
        aspect="auto",
        extent=(v0, v1, 0.0, 1.0),
        interpolation="nearest",
    )
    ax.set_yticks([])
    ax.set_ylabel(MATH_LABELS["indicator"], rotation=0, ha="right", va="center")
    for side in ("left", "top", "right"):
        ax.spines[side].set_visible(False)


def _draw_panels(fig, result: TitrationResult, show_colors: bool) -> None:
    curve_df = result.to_dataframe()
    deriv_df = ph_derivative(curve_df)
    volumes = curve_df[CURVE.volume].to_numpy(dtype=float)
    ph_values = curve_df[CURVE.ph].to_numpy(dtype=float)
    colors = list(curve_df[CURVE.color])

    if show_colors:
        gs = fig.add_gridspec(2, 2, height_ratios=(8, 1), hspace=0.08)
        ax_ph = fig.add_subplot(gs[0, 0])
        ax_strip = fig.add_subplot(gs[1, 0], sharex=ax_ph)
        ax_d = fig.add_subplot(gs[:, 1])
    else:
        gs = fig.add_gridspec(1, 2)
        ax_ph = fig.add_subplot(gs[0, 0])
        ax_strip = None
        ax_d = fig.add_subplot(gs[0, 1])

    ax_ph.plot(volumes, ph_values, color=STYLE.CURVE_COLOR, linewidth=STYLE.LINEWIDTH, zorder=2)
    if show_colors:
        ax_ph.scatter(
            volumes, ph_values, c=colors, s=14, edgecolors=STYLE.GUIDE_COLOR,
            linewidths=0.3, zorder=3,
        )

    half = result.half_equivalence_point
    draw_equivalence_guides(
        ax_ph, result.equivalence_volume, half.volume if half is not None else None
    )
    ax_ph.plot(
        [result.equivalence_point.volume],
        [result.equivalence_point.ph],
        marker="o",
        color=STYLE.CURVE_COLOR,
        linestyle="none",
        zorder=4,
        label="Equivalence point",
    )
    if half is not None:
        ax_ph.plot(
            [half.volume],
            [half.ph],
            marker="s",
            markerfacecolor="white",
            color=STYLE.CURVE_COLOR,
            linestyle="none",
            zorder=4,
            label="Half-equivalence point",
        )
    ax_ph.set_ylim(
        min(0.0, float(np.nanmin(ph_values))),
        max(14.0, float(np.nanmax(ph_values)) + 0.5),
    )
    clean_axis(ax_ph)
    set_axis_labels(ax_ph, y=MATH_LABELS["ph"])
    ax_ph.legend(loc="upper left")

    if ax_strip is not None:
        _draw_color_strip(ax_strip, volumes, colors)
        set_axis_labels(ax_strip, x=MATH_LABELS["x_volume"])
        plt.setp(ax_ph.get_xticklabels(), visible=False)
    else:
        set_axis_labels(ax_ph, x=MATH_LABELS["x_volume"])

    ax_d.plot(
        deriv_df[CURVE.volume].to_numpy(dtype=float),
        deriv_df["dpH/dV"].to_numpy(dtype=float),
        color=STYLE.CURVE_COLOR,
        linewidth=STYLE.LINEWIDTH_THIN,
    )
    draw_equivalence_guides(ax_d, result.equivalence_volume)
    clean_axis(ax_d)
    set_axis_labels(ax_d, x=MATH_LABELS["x_volume"], y=MATH_LABELS["y_derivative"])


def plot_titration_curve(
    result: TitrationResult,
    output_dir: str = "output",
    title: str | None = None,
    show_colors: bool = True,
) -> str:
    """Render one titration as a PNG/PDF/SVG figure bundle.

    Args:
        result: Finished simulation.
        output_dir: Directory for the figure bundle; created if missing.
        title: Figure title, also used for the file name. Defaults to
            ``"Titration curve"``.
        show_colors: Draw each sample in its indicator colour and add the
            colour strip under the curve.

    Returns:
        str: Path of the PNG file.

    Raises:
        ValueError: If the result has no points.
    """
    if not result.points:
        raise ValueError("Result has no simulated points; nothing to plot")

    setup_plot_style()
    os.makedirs(output_dir, exist_ok=True)
    title = title or DEFAULT_TITLE

    fig = plt.figure(figsize=STYLE.FIGSIZE_WIDE)
    try:
        _draw_panels(fig, result, show_colors)
        finalize_figure(fig, title=title)
        return save_figure_bundle(fig, os.path.join(output_dir, figure_filename(title)))
    finally:
        plt.close(fig)


def plot_titration_curves(
    results: Mapping[str, TitrationResult], output_dir: str = "output"
) -> List[str]:
    """Render one figure per named result.

    Returns:
        list[str]: PNG paths in the order of ``results``.

    Raises:
        ValueError: If ``results`` is empty.
    """
    if not results:
        raise ValueError("results mapping is empty; nothing to plot")
    return [
        plot_titration_curve(result, output_dir=output_dir, title=name)
        for name, result in results.items()
    ]
