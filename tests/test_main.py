import importlib
import os


def test_main_runs_single_example(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main = importlib.import_module("main")
    outdir = tmp_path / "out"
    assert main.main(["--outdir", str(outdir), "--example", "1", "--step-size", "1.0"]) == 0
    assert (outdir / "simulation_summary.csv").exists()
    assert (outdir / "diagnostics_summary.csv").exists()
    assert (outdir / "weak_acid_strong_base_curve.csv").exists()
    assert os.path.exists(outdir / "weak_acid_strong_base.png")


def test_main_rejects_unknown_example(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main = importlib.import_module("main")
    assert main.main(["--outdir", str(tmp_path / "out"), "--example", "Nope"]) == 1
