"""Predefined indicators, acids, bases and example titrations.

Acid and base catalog entries are plain mappings without a concentration or
volume; :func:`get_acid` and :func:`get_base` turn them into canonical
species for a given experiment. Weak acids always carry their Ka values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Tuple, Union

from burette.chemistry.species import (
    Acid,
    Base,
    Indicator,
    make_acid,
    make_base,
)
from burette.constants import DEFAULT_STEP_SIZE
from burette.simulation import TitrationResult, simulate_titration

INDICATORS: Tuple[Indicator, ...] = (
    Indicator(
        name="Phenolphthalein",
        pka=9.3,
        acid_color="#ffffff",  # colourless
        base_color="#ff1493",  # deep pink
        transition_range=(8.3, 10.0),
    ),
    Indicator(
        name="Methyl Orange",
        pka=3.7,
        acid_color="#ff0000",
        base_color="#ffa500",
        transition_range=(3.1, 4.4),
    ),
    Indicator(
        name="Methyl Red",
        pka=5.1,
        acid_color="#ff0000",
        base_color="#ffff00",
        transition_range=(4.4, 6.2),
    ),
    Indicator(
        name="Bromothymol Blue",
        pka=7.0,
        acid_color="#ffff00",
        base_color="#0000ff",
        transition_range=(6.0, 7.6),
    ),
    Indicator(
        name="Litmus",
        pka=6.5,
        acid_color="#ff0000",
        base_color="#0000ff",
        transition_range=(4.5, 8.3),
    ),
)

STRONG_ACIDS: Tuple[Mapping[str, object], ...] = (
    {"name": "Hydrochloric acid", "formula": "HCl", "type": "strong"},
    {"name": "Nitric acid", "formula": "HNO₃", "type": "strong"},
    {"name": "Sulfuric acid", "formula": "H₂SO₄", "type": "strong", "proton_count": 2},
    {"name": "Hydrobromic acid", "formula": "HBr", "type": "strong"},
    {"name": "Perchloric acid", "formula": "HClO₄", "type": "strong"},
)

WEAK_ACIDS: Tuple[Mapping[str, object], ...] = (
    {"name": "Acetic acid", "formula": "CH₃COOH", "type": "weak", "pka": 4.76, "ka": 1.74e-5},
    {"name": "Formic acid", "formula": "HCOOH", "type": "weak", "pka": 3.75, "ka": 1.78e-4},
    {"name": "Benzoic acid", "formula": "C₆H₅COOH", "type": "weak", "pka": 4.20, "ka": 6.31e-5},
    {"name": "Hydrofluoric acid", "formula": "HF", "type": "weak", "pka": 3.17, "ka": 6.76e-4},
    {
        "name": "Carbonic acid",
        "formula": "H₂CO₃",
        "type": "weak",
        "ka_values": (4.3e-7, 5.6e-11),
        "proton_count": 2,
    },
    {
        "name": "Phosphoric acid",
        "formula": "H₃PO₄",
        "type": "weak",
        "ka_values": (7.5e-3, 6.2e-8, 4.2e-13),
        "proton_count": 3,
    },
    {
        "name": "Citric acid",
        "formula": "C₆H₈O₇",
        "type": "weak",
        "ka_values": (7.4e-4, 1.7e-5, 4.0e-7),
        "proton_count": 3,
    },
)

STRONG_BASES: Tuple[Mapping[str, object], ...] = (
    {"name": "Sodium hydroxide", "formula": "NaOH", "type": "strong", "hydroxide_count": 1},
    {"name": "Potassium hydroxide", "formula": "KOH", "type": "strong", "hydroxide_count": 1},
    {"name": "Lithium hydroxide", "formula": "LiOH", "type": "strong", "hydroxide_count": 1},
    {"name": "Barium hydroxide", "formula": "Ba(OH)₂", "type": "strong", "hydroxide_count": 2},
)

WEAK_BASES: Tuple[Mapping[str, object], ...] = (
    {"name": "Ammonia", "formula": "NH₃", "type": "weak", "pkb": 4.75, "kb": 1.78e-5},
    {"name": "Methylamine", "formula": "CH₃NH₂", "type": "weak", "pkb": 3.36, "kb": 4.38e-4},
)


def _entry_name(entry) -> str:
    return str(entry["name"]) if isinstance(entry, Mapping) else entry.name


def _find(entries, name: str, kind: str):
    key = str(name).strip().lower()
    for entry in entries:
        if _entry_name(entry).lower() == key:
            return entry
    known = ", ".join(_entry_name(e) for e in entries)
    raise KeyError(f"Unknown {kind} {name!r}. Known: {known}")


def get_indicator(name: str) -> Indicator:
    """Look up a catalog indicator by (case-insensitive) name."""
    return _find(INDICATORS, name, "indicator")


def get_acid(name: str, concentration: float, volume: float) -> Acid:
    """Build a catalog acid at the given concentration (mol/L) and volume (mL)."""
    entry = _find(STRONG_ACIDS + WEAK_ACIDS, name, "acid")
    return make_acid(entry, concentration=concentration, volume=volume)


def get_base(name: str, concentration: float) -> Base:
    """Build a catalog base at the given concentration (mol/L)."""
    entry = _find(STRONG_BASES + WEAK_BASES, name, "base")
    return make_base(entry, concentration=concentration)


@dataclass(frozen=True)
class ExampleTitration:
    name: str
    description: str
    acid: Acid
    base: Base
    indicator: Indicator


EXAMPLE_TITRATIONS: Tuple[ExampleTitration, ...] = (
    ExampleTitration(
        name="Strong Acid + Strong Base",
        description="HCl titrated with NaOH - Classic titration",
        acid=get_acid("Hydrochloric acid", concentration=0.1, volume=25.0),
        base=get_base("Sodium hydroxide", concentration=0.1),
        indicator=get_indicator("Phenolphthalein"),
    ),
    ExampleTitration(
        name="Weak Acid + Strong Base",
        description="Acetic acid (vinegar) titrated with NaOH",
        acid=get_acid("Acetic acid", concentration=0.1, volume=25.0),
        base=get_base("Sodium hydroxide", concentration=0.1),
        indicator=get_indicator("Phenolphthalein"),
    ),
    ExampleTitration(
        name="Strong Acid with Methyl Orange",
        description="HCl with methyl orange indicator",
        acid=get_acid("Hydrochloric acid", concentration=0.1, volume=25.0),
        base=get_base("Sodium hydroxide", concentration=0.1),
        indicator=get_indicator("Methyl Orange"),
    ),
    ExampleTitration(
        name="Polyprotic Acid + Strong Base",
        description="Phosphoric acid titrated with NaOH - three buffer regions",
        acid=get_acid("Phosphoric acid", concentration=0.1, volume=25.0),
        base=get_base("Sodium hydroxide", concentration=0.1),
        indicator=get_indicator("Phenolphthalein"),
    ),
)


def get_example(name_or_index: Union[str, int]) -> ExampleTitration:
    """Return an example titration by position or (case-insensitive) name."""
    if isinstance(name_or_index, int) and not isinstance(name_or_index, bool):
        try:
            return EXAMPLE_TITRATIONS[name_or_index]
        except IndexError:
            raise KeyError(
                f"Example index {name_or_index} out of range "
                f"(0-{len(EXAMPLE_TITRATIONS) - 1})"
            ) from None
    return _find(EXAMPLE_TITRATIONS, str(name_or_index), "example")


def simulate_example(
    name_or_index: Union[str, int], step_size: float = DEFAULT_STEP_SIZE, **kwargs
) -> TitrationResult:
    """Run :func:`burette.simulation.simulate_titration` for one example."""
    example = get_example(name_or_index)
    return simulate_titration(
        example.acid, example.base, example.indicator, step_size, **kwargs
    )


def example_names() -> List[str]:
    return [example.name for example in EXAMPLE_TITRATIONS]
