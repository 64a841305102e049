"""Write simulated titrations to reproducible CSV and text files.

This module is the reporting/output boundary between in-memory simulation
results and files on disk. Scenario names become file names through
:func:`sanitize_filename`.
"""

from __future__ import annotations

import math
import os
import re
from typing import Dict, List, Mapping

import numpy as np
import pandas as pd

from burette.simulation import TitrationResult

SUMMARY_FILENAME = "simulation_summary.csv"
DIAGNOSTICS_FILENAME = "diagnostics_summary.csv"


def sanitize_filename(name: str) -> str:
    """Normalize a scenario name into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text.lower() or "titration"


def create_points_dataframe(result: TitrationResult) -> pd.DataFrame:
    """Return the sampled curve of one result as a DataFrame.

    Raises:
        ValueError: If the result has no points.
    """
    if not result.points:
        raise ValueError("Result has no simulated points.")
    return result.to_dataframe()


def create_summary_dataframe(results: Mapping[str, TitrationResult]) -> pd.DataFrame:
    """Build one summary row per named scenario.

    Args:
        results: Mapping from scenario name to simulation result.

    Returns:
        pandas.DataFrame: Initial and final pH, theoretical and located
        equivalence point, half-equivalence point (NaN for strong acids),
        total flask volume and the number of samples.
    """
    rows: List[Dict[str, object]] = []
    for name, result in results.items():
        half = result.half_equivalence_point
        rows.append(
            {
                "Scenario": name,
                "Initial pH": result.initial_ph,
                "Final pH": result.final_ph,
                "Theoretical Veq (mL)": result.equivalence_volume,
                "Equivalence Volume (mL)": result.equivalence_point.volume,
                "Equivalence pH": result.equivalence_point.ph,
                "Half-Equivalence Volume (mL)": half.volume if half else np.nan,
                "Half-Equivalence pH": half.ph if half else np.nan,
                "Total Volume (mL)": result.total_volume,
                "Points": len(result.points),
                "Kw": result.kw,
            }
        )
    return pd.DataFrame(rows)


def create_diagnostics_dataframe(analyses: Mapping[str, Dict]) -> pd.DataFrame:
    """Flatten :func:`burette.analysis.analyze_result` payloads into a table.

    Stage pKa values are joined into ``;``-separated strings so that each
    scenario stays on one row.
    """
    rows: List[Dict[str, object]] = []
    for name, analysis in analyses.items():
        eq = analysis.get("equivalence", {})
        half = analysis.get("half_equivalence", {})
        stage_df = analysis.get("stage_pkas")
        fitted = ""
        if isinstance(stage_df, pd.DataFrame) and not stage_df.empty:
            fitted = "; ".join(f"{v:.3f}" for v in stage_df["pKa (fitted)"])
        rows.append(
            {
                "Scenario": name,
                "Detected Veq (mL)": eq.get("eq_x", np.nan),
                "Veq Error (mL)": analysis.get("equivalence_error", np.nan),
                "Equivalence QC": eq.get("qc_reason", ""),
                "Inflections": len(analysis.get("inflections", [])),
                "Expected Half-Eq pKa": half.get("expected_pka", np.nan),
                "Half-Eq pH": half.get("observed_ph", np.nan),
                "Half-Eq Check": bool(half.get("passes", False)),
                "Fitted Stage pKa": fitted,
            }
        )
    return pd.DataFrame(rows)


def save_results_to_csv(
    results: Mapping[str, TitrationResult], output_dir: str = "output"
) -> List[str]:
    """Save every curve, the step logs and a summary table.

    Args:
        results: Mapping from scenario name to simulation result.
        output_dir: Directory where files are written; created if missing.

    Returns:
        list[str]: Paths written, curves and step logs first and the
        ``simulation_summary.csv`` path last.

    Raises:
        ValueError: If ``results`` is empty.
    """
    if not results:
        raise ValueError("results mapping is empty; nothing to save")
    os.makedirs(output_dir, exist_ok=True)

    paths: List[str] = []
    for name, result in results.items():
        slug = sanitize_filename(name)
        curve_path = os.path.join(output_dir, f"{slug}_curve.csv")
        create_points_dataframe(result).to_csv(curve_path, index=False)

        steps_path = os.path.join(output_dir, f"{slug}_steps.txt")
        with open(steps_path, "w", encoding="utf-8") as handle:
            handle.write("\n".join(result.steps) + "\n")

        print(f"Saved {name} curve to {curve_path}")
        paths.extend([curve_path, steps_path])

    summary_path = os.path.join(output_dir, SUMMARY_FILENAME)
    create_summary_dataframe(results).to_csv(summary_path, index=False)
    print(f"Saved simulation summary to {summary_path}")
    paths.append(summary_path)
    return paths


def save_diagnostics_to_csv(analyses: Mapping[str, Dict], output_dir: str = "output") -> str:
    """Save the diagnostics table and one stage-pKa table per weak acid."""
    os.makedirs(output_dir, exist_ok=True)
    for name, analysis in analyses.items():
        stage_df = analysis.get("stage_pkas")
        if isinstance(stage_df, pd.DataFrame) and not stage_df.empty:
            stage_path = os.path.join(output_dir, f"{sanitize_filename(name)}_stage_pka.csv")
            stage_df.to_csv(stage_path, index=False)
            print(f"Saved {name} stage pKa fits to {stage_path}")

    path = os.path.join(output_dir, DIAGNOSTICS_FILENAME)
    create_diagnostics_dataframe(analyses).to_csv(path, index=False)
    print(f"Saved diagnostics summary to {path}")
    return path


def format_ph(value: float) -> str:
    """Format a pH for display with two decimals; ``"n/a"`` for NaN."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "n/a"
    return f"{value:.2f}"
