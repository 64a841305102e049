import dataclasses
import os

import matplotlib.pyplot as plt
import pytest

import burette.plotting.titration_plots as titration_plots
from burette.plotting import plot_titration_curve, plot_titration_curves


def test_plot_titration_curve_writes_bundle(tmp_path, acetic_result):
    png = plot_titration_curve(acetic_result, output_dir=str(tmp_path), title="Acetic acid")
    assert png.endswith(".png")
    assert os.path.exists(png)
    base = os.path.splitext(png)[0]
    assert os.path.exists(base + ".pdf")
    assert os.path.exists(base + ".svg")


def test_plot_without_colour_strip(tmp_path, hcl_result):
    png = plot_titration_curve(hcl_result, output_dir=str(tmp_path), show_colors=False)
    assert os.path.basename(png) == "titration_curve.png"
    assert os.path.exists(png)


def test_plot_titration_curves(tmp_path, hcl_result, phosphoric_result):
    out = plot_titration_curves(
        {"HCl": hcl_result, "Phosphoric acid": phosphoric_result}, output_dir=str(tmp_path)
    )
    assert len(out) == 2
    assert all(os.path.exists(p) for p in out)


def test_plot_single_point_result(tmp_path, hcl_result):
    single = dataclasses.replace(hcl_result, points=hcl_result.points[:1])
    assert os.path.exists(plot_titration_curve(single, output_dir=str(tmp_path)))


def test_plot_validation(tmp_path, hcl_result):
    with pytest.raises(ValueError):
        plot_titration_curves({}, output_dir=str(tmp_path))
    with pytest.raises(ValueError, match="no simulated points"):
        plot_titration_curve(dataclasses.replace(hcl_result, points=()), str(tmp_path))


def test_failed_save_closes_figure(tmp_path, monkeypatch, hcl_result):
    def broken_save(fig, path):
        raise OSError("disk full")

    plt.close("all")
    monkeypatch.setattr(titration_plots, "save_figure_bundle", broken_save)
    with pytest.raises(OSError, match="disk full"):
        plot_titration_curve(hcl_result, output_dir=str(tmp_path))
    assert plt.get_fignums() == []
