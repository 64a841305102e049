"""Predefined catalogs and example titrations."""

import pytest

from burette.catalog import (
    EXAMPLE_TITRATIONS,
    INDICATORS,
    STRONG_ACIDS,
    STRONG_BASES,
    WEAK_ACIDS,
    WEAK_BASES,
    example_names,
    get_acid,
    get_base,
    get_example,
    get_indicator,
    simulate_example,
)
from burette.chemistry.species import StrongAcid, WeakAcid, make_acid, make_base


def test_indicator_lookup_is_case_insensitive():
    assert get_indicator("methyl orange").name == "Methyl Orange"
    assert get_indicator("  Phenolphthalein ").transition_range == (8.3, 10.0)


def test_unknown_names_raise_key_error():
    with pytest.raises(KeyError, match="Unknown indicator"):
        get_indicator("Universal")
    with pytest.raises(KeyError, match="Unknown acid"):
        get_acid("Unobtainium acid", concentration=0.1, volume=25.0)
    with pytest.raises(KeyError, match="Unknown base"):
        get_base("Unobtainium hydroxide", concentration=0.1)


def test_every_acid_entry_builds():
    for entry in STRONG_ACIDS + WEAK_ACIDS:
        acid = make_acid(entry, concentration=0.1, volume=25.0)
        expected = StrongAcid if entry["type"] == "strong" else WeakAcid
        assert isinstance(acid, expected)


def test_every_base_entry_builds():
    for entry in STRONG_BASES + WEAK_BASES:
        base = make_base(entry, concentration=0.1)
        assert base.hydroxide_count >= 1
        assert base.type == entry["type"]


def test_polyprotic_catalog_entries():
    phosphoric = get_acid("Phosphoric acid", concentration=0.1, volume=25.0)
    assert phosphoric.ka_values == (7.5e-3, 6.2e-8, 4.2e-13)
    assert phosphoric.proton_count == 3
    assert get_base("Barium hydroxide", concentration=0.1).hydroxide_count == 2


def test_indicators_have_distinct_names():
    names = [indicator.name for indicator in INDICATORS]
    assert len(names) == len(set(names)) == 5


def test_examples():
    assert len(EXAMPLE_TITRATIONS) == 4
    assert example_names()[0] == "Strong Acid + Strong Base"
    assert get_example(1).acid.name == "Acetic acid"
    assert get_example("polyprotic acid + strong base").acid.name == "Phosphoric acid"
    with pytest.raises(KeyError, match="out of range"):
        get_example(10)


def test_simulate_example():
    result = simulate_example(0)
    assert result.equivalence_point.volume == pytest.approx(25.0)
    assert result.equivalence_point.ph == pytest.approx(7.0)
    methyl_orange = simulate_example("Strong Acid with Methyl Orange", step_size=1.0)
    assert len(methyl_orange.points) == 51
    assert methyl_orange.points[-1].color == "#ffa500"
