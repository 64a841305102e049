"""Centralized plotting style, labels, guides and save helpers."""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from burette.output import sanitize_filename

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    TITLE_FONTSIZE: float = 14.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LEGEND_FONTSIZE: float = 10.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    MARKERSIZE: float = 6.0
    GRID_ALPHA: float = 0.20
    CURVE_COLOR: str = "#222222"
    GUIDE_COLOR: str = "#555555"
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.8)
    FIGSIZE_WIDE: tuple[float, float] = (12.0, 5.0)


STYLE = StyleConfig()

FONT_SIZES = {
    "base": STYLE.BASE_FONTSIZE,
    "title": STYLE.TITLE_FONTSIZE,
    "axis_label": STYLE.LABEL_FONTSIZE,
    "tick": STYLE.TICK_FONTSIZE,
    "legend": STYLE.LEGEND_FONTSIZE,
}

MATH_LABELS = {
    "x_volume": r"$V_{\mathrm{titrant}}\ \mathrm{added}\ /\ \mathrm{mL}$",
    "ph": r"$\mathrm{pH}$",
    "y_derivative": r"$\mathrm{d(pH)}/\mathrm{d}V\ /\ \mathrm{mL^{-1}}$",
    "veq": r"$V_{\mathrm{eq}}$",
    "vhalf": r"$V_{1/2}$",
    "indicator": r"$\mathrm{Indicator}$",
}


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply the project Matplotlib style, scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "figure.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE * scale,
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "legend.frameon": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style(font_scale=1.0)
        _STYLE_STATE["initialized"] = True


def apply_rcparams() -> None:
    """Alias for unified plot-style initialization."""
    set_global_style()


def clean_axis(ax: Axes, *, grid_axis: str = "y", nbins: int = 6) -> None:
    """Apply consistent ticks, dotted grid and spines to one axis."""
    ax.tick_params(axis="both", which="major", labelsize=FONT_SIZES["tick"], width=1.0)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(False)
    if grid_axis in {"x", "y", "both"}:
        ax.grid(True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def set_axis_labels(ax: Axes, x: str | None = None, y: str | None = None) -> None:
    """Apply standardized axis labels with project typography."""
    if x is not None:
        ax.set_xlabel(x, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if y is not None:
        ax.set_ylabel(y, fontsize=FONT_SIZES["axis_label"], labelpad=6)


def draw_equivalence_guides(
    ax: Axes, veq: float, vhalf: float | None = None, color: str = STYLE.GUIDE_COLOR
) -> None:
    """Draw V_eq (solid) and V_{1/2} (dashed) vertical guides.

    Non-finite or missing volumes are skipped.
    """
    if veq is not None and np.isfinite(veq):
        ax.axvline(
            veq, color=color, linewidth=STYLE.LINEWIDTH_THIN, linestyle="-",
            label=MATH_LABELS["veq"],
        )
    if vhalf is not None and np.isfinite(vhalf):
        ax.axvline(
            vhalf, color=color, linewidth=STYLE.LINEWIDTH_THIN, linestyle="--",
            label=MATH_LABELS["vhalf"],
        )


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
) -> Path:
    """Save a figure to multiple formats using one extensionless base path."""
    base = Path(savepath_base)
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        target = base.with_suffix(f".{ext}")
        fig.savefig(str(target), dpi=dpi if ext == "png" else None, bbox_inches="tight")
    return base.with_suffix(".png")


def save_figure_bundle(fig: Figure, png_path: str) -> str:
    """Save synchronized PNG, PDF, and SVG files for a figure."""
    base = Path(os.path.splitext(png_path)[0])
    return str(save_figure(fig, base))


def finalize_figure(fig: Figure, *, title: str | None = None) -> None:
    """Set the figure title and tighten the layout."""
    if title:
        fig.suptitle(title, fontsize=FONT_SIZES["title"])
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        fig.tight_layout(pad=1.2)


def figure_filename(title: str) -> str:
    """Return the PNG file name used for a figure titled ``title``."""
    return f"{sanitize_filename(title)}.png"
