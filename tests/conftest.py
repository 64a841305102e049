"""Pytest configuration for repository-relative imports and shared species."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from burette.catalog import get_acid, get_base, get_indicator  # noqa: E402
from burette.simulation import simulate_titration  # noqa: E402


@pytest.fixture()
def hcl():
    return get_acid("Hydrochloric acid", concentration=0.1, volume=25.0)


@pytest.fixture()
def acetic():
    return get_acid("Acetic acid", concentration=0.1, volume=25.0)


@pytest.fixture()
def phosphoric():
    return get_acid("Phosphoric acid", concentration=0.1, volume=25.0)


@pytest.fixture()
def naoh():
    return get_base("Sodium hydroxide", concentration=0.1)


@pytest.fixture()
def phenolphthalein():
    return get_indicator("Phenolphthalein")


@pytest.fixture()
def hcl_result(hcl, naoh, phenolphthalein):
    return simulate_titration(hcl, naoh, phenolphthalein, 0.5)


@pytest.fixture()
def acetic_result(acetic, naoh, phenolphthalein):
    return simulate_titration(acetic, naoh, phenolphthalein, 0.5)


@pytest.fixture()
def phosphoric_result(phosphoric, naoh, phenolphthalein):
    return simulate_titration(phosphoric, naoh, phenolphthalein, 0.5)
