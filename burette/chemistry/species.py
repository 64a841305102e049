"""Canonical acid, base and indicator definitions for the titration engine.

The solver only ever sees these normalized species. Validation happens once,
when a species is constructed, so that the simulation itself can run without
raising:

    - ``StrongAcid`` needs no dissociation constant.
    - ``WeakAcid`` cannot be built without a Ka series. There is no
      "typical weak acid" default; a weak acid with an unknown Ka is rejected
      instead of being silently simulated as ethanoic acid.
    - ``Base`` carries an explicit hydroxide count. The formula heuristic in
      :func:`parse_hydroxide_count` is only used by the catalog constructors.

Species are frozen dataclasses and may be shared freely between simulations.
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple, Union

from burette.units import moles_from_ml

_SUBSCRIPT_DIGITS = str.maketrans("₀₁₂₃₄₅₆₇₈₉", "0123456789")
_HYDROXIDE_GROUP = re.compile(r"\(OH\)(\d+)")
HEX_COLOR_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

ACID_TYPES = ("strong", "weak")
BASE_TYPES = ("strong", "weak")


def _require_number(value: object, label: str, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{label} must be numeric, got {type(value)}")
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"{label} must be finite, got {v}")
    if v < 0:
        raise ValueError(f"{label} cannot be negative, got {v}")
    if not allow_zero and v == 0:
        raise ValueError(f"{label} must be positive, got {v}")
    return v


def _require_count(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{label} must be an integer, got {type(value)}")
    if int(value) < 1:
        raise ValueError(f"{label} must be at least 1, got {value}")
    return int(value)


def _optional_finite(value: object, label: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{label} must be numeric, got {type(value)}")
    if not math.isfinite(float(value)):
        raise ValueError(f"{label} must be finite, got {value}")
    return float(value)


@dataclass(frozen=True)
class StrongAcid:
    """A fully dissociating analyte.

    Attributes:
        name: Display name, e.g. ``"Hydrochloric acid"``.
        formula: Display formula, e.g. ``"HCl"``.
        concentration: Analyte concentration in mol/L.
        volume: Analyte volume in the flask in mL (constant during titration).
        proton_count: Ionizable protons per formula unit.
    """

    name: str
    formula: str
    concentration: float
    volume: float
    proton_count: int = 1

    def __post_init__(self):
        object.__setattr__(
            self, "concentration", _require_number(self.concentration, "Acid concentration")
        )
        object.__setattr__(self, "volume", _require_number(self.volume, "Acid volume"))
        object.__setattr__(
            self, "proton_count", _require_count(self.proton_count, "proton_count")
        )

    @property
    def type(self) -> str:
        return "strong"

    @property
    def moles(self) -> float:
        return moles_from_ml(self.concentration, self.volume)


@dataclass(frozen=True)
class WeakAcid:
    """A partially dissociating (possibly polyprotic) analyte.

    Attributes:
        name: Display name.
        formula: Display formula.
        concentration: Analyte concentration in mol/L.
        volume: Analyte volume in mL.
        ka_values: Stepwise dissociation constants ``(Ka1, Ka2, ...)`` in
            dissociation order. Its length is the number of ionizable protons.
        proton_count: Optional explicit proton count; must agree with
            ``len(ka_values)`` when given.
        pka: Optional literature pKa, used for reporting only. The solver
            always works from ``ka_values``.
    """

    name: str
    formula: str
    concentration: float
    volume: float
    ka_values: Tuple[float, ...]
    proton_count: Optional[int] = None
    pka: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(
            self, "concentration", _require_number(self.concentration, "Acid concentration")
        )
        object.__setattr__(self, "volume", _require_number(self.volume, "Acid volume"))

        if isinstance(self.ka_values, numbers.Real):
            raw: Sequence[object] = (self.ka_values,)
        else:
            raw = tuple(self.ka_values or ())
        if not raw:
            raise ValueError(
                f"Weak acid '{self.name}' requires at least one Ka value; "
                "no default dissociation constant is assumed."
            )
        ka = tuple(_require_number(k, "Ka", allow_zero=False) for k in raw)
        if any(later > earlier for earlier, later in zip(ka, ka[1:])):
            raise ValueError(
                f"Ka values for '{self.name}' must be ordered Ka1 >= Ka2 >= ..., got {ka}"
            )
        object.__setattr__(self, "ka_values", ka)

        if self.proton_count is not None:
            count = _require_count(self.proton_count, "proton_count")
            if count != len(ka):
                raise ValueError(
                    f"proton_count ({count}) disagrees with the number of Ka "
                    f"values ({len(ka)}) for '{self.name}'"
                )
            object.__setattr__(self, "proton_count", count)

        object.__setattr__(self, "pka", _optional_finite(self.pka, "pKa"))

    @classmethod
    def from_pka(
        cls, name: str, formula: str, concentration: float, volume: float, pka: float
    ) -> "WeakAcid":
        """Build a monoprotic weak acid from its pKa alone."""
        return cls(
            name=name,
            formula=formula,
            concentration=concentration,
            volume=volume,
            ka_values=(10.0 ** (-float(pka)),),
            pka=pka,
        )

    @property
    def type(self) -> str:
        return "weak"

    @property
    def moles(self) -> float:
        return moles_from_ml(self.concentration, self.volume)

    @property
    def pka_values(self) -> Tuple[float, ...]:
        return tuple(-math.log10(k) for k in self.ka_values)


Acid = Union[StrongAcid, WeakAcid]


@dataclass(frozen=True)
class Base:
    """Titrant in the burette (constant-concentration reservoir).

    ``hydroxide_count`` is the number of OH⁻ delivered per formula unit and
    is always explicit here; use :meth:`Base.from_formula` to infer it from a
    formula string. Weak-base constants (``kb``/``pkb``) are carried for
    display; the solver treats every titrant as a strong base.
    """

    name: str
    formula: str
    concentration: float
    hydroxide_count: int
    type: str = "strong"
    kb: Optional[float] = None
    pkb: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(
            self, "concentration", _require_number(self.concentration, "Base concentration")
        )
        object.__setattr__(
            self, "hydroxide_count", _require_count(self.hydroxide_count, "hydroxide_count")
        )
        kind = str(self.type).lower()
        if kind not in BASE_TYPES:
            raise ValueError(f"Base type must be one of {BASE_TYPES}, got {self.type!r}")
        object.__setattr__(self, "type", kind)
        if self.kb is not None:
            object.__setattr__(self, "kb", _require_number(self.kb, "Kb", allow_zero=False))
        object.__setattr__(self, "pkb", _optional_finite(self.pkb, "pKb"))

    @classmethod
    def from_formula(
        cls,
        name: str,
        formula: str,
        concentration: float,
        type: str = "strong",
        kb: Optional[float] = None,
        pkb: Optional[float] = None,
        hydroxide_count: Optional[int] = None,
    ) -> "Base":
        """Build a base, inferring the hydroxide count from ``formula`` if needed."""
        count = hydroxide_count
        if count is None or count <= 0:
            count = parse_hydroxide_count(formula)
        return cls(
            name=name,
            formula=formula,
            concentration=concentration,
            hydroxide_count=count,
            type=type,
            kb=kb,
            pkb=pkb,
        )


@dataclass(frozen=True)
class Indicator:
    """Acid-base indicator with a linear colour transition band.

    Attributes:
        name: Display name.
        pka: pKa of the indicator's own protonation equilibrium (not the
            analyte's).
        acid_color: ``#RRGGBB`` colour below the transition band.
        base_color: ``#RRGGBB`` colour above the transition band.
        transition_range: ``(low_pH, high_pH)`` of the visible change.
    """

    name: str
    pka: float
    acid_color: str
    base_color: str
    transition_range: Tuple[float, float]

    def __post_init__(self):
        for label, color in (("acid_color", self.acid_color), ("base_color", self.base_color)):
            if not isinstance(color, str) or not HEX_COLOR_PATTERN.match(color):
                raise ValueError(f"{label} must be a #RRGGBB hex string, got {color!r}")
        if len(self.transition_range) != 2:
            raise ValueError("transition_range must be a (low, high) pair")
        low, high = (float(v) for v in self.transition_range)
        if not (math.isfinite(low) and math.isfinite(high)) or low >= high:
            raise ValueError(
                f"transition_range must be finite with low < high, got {self.transition_range}"
            )
        object.__setattr__(self, "transition_range", (low, high))
        object.__setattr__(self, "pka", float(self.pka))


def get_acid_proton_count(acid: Acid) -> int:
    """Return the number of ionizable protons the titration must neutralize.

    An explicit positive ``proton_count`` wins; otherwise the length of the Ka
    series; otherwise 1. For a :class:`WeakAcid` the first two always agree.
    """
    count = getattr(acid, "proton_count", None)
    if count is not None and count > 0:
        return int(count)
    ka = get_ka_series(acid)
    if ka:
        return len(ka)
    return 1


def get_ka_series(acid: Acid) -> Tuple[float, ...]:
    """Return the stepwise Ka series ``(Ka1, Ka2, ...)`` of a weak acid.

    Weak acids always yield a non-empty series ordered from the first to the
    last dissociation. Strong acids have no Ka series and yield ``()``.
    """
    if isinstance(acid, WeakAcid):
        return tuple(acid.ka_values)
    return ()


def get_base_hydroxide_count(base: Base) -> int:
    """Return the OH⁻ equivalents delivered per mole of titrant."""
    return int(base.hydroxide_count)


def parse_hydroxide_count(formula: str) -> int:
    """Infer a hydroxide count from a formula string.

    This is a textual heuristic for catalog data, not a formula parser:
    ``"Ba(OH)2"`` and ``"Ba(OH)₂"`` give 2, anything else gives 1.
    """
    normalized = str(formula).translate(_SUBSCRIPT_DIGITS)
    match = _HYDROXIDE_GROUP.search(normalized)
    if match:
        return max(int(match.group(1)), 1)
    return 1


def _entry_with(entry: Mapping[str, object], **overrides: object) -> dict:
    data = dict(entry)
    for key, value in overrides.items():
        if value is not None:
            data[key] = value
    return data


def make_acid(
    entry: Mapping[str, object],
    concentration: Optional[float] = None,
    volume: Optional[float] = None,
) -> Acid:
    """Build a canonical acid from a loose catalog mapping.

    Recognised keys: ``name``, ``formula``, ``type`` (``"strong"`` or
    ``"weak"``), ``concentration``, ``volume``, ``proton_count``, ``ka``,
    ``ka_values``, ``pka``. ``concentration``/``volume`` arguments override the
    mapping.

    Raises:
        KeyError: If name, formula, concentration or volume is missing.
        ValueError: If the type is unknown or a weak acid has no Ka, Ka series
            or pKa.
    """
    data = _entry_with(entry, concentration=concentration, volume=volume)
    required = {"name", "formula", "concentration", "volume"}
    missing = required - set(data.keys())
    if missing:
        raise KeyError(f"Acid entry missing required keys: {sorted(missing)}")

    kind = str(data.get("type", "strong")).lower()
    if kind == "strong":
        return StrongAcid(
            name=str(data["name"]),
            formula=str(data["formula"]),
            concentration=data["concentration"],
            volume=data["volume"],
            proton_count=data.get("proton_count") or 1,
        )
    if kind == "weak":
        ka_values = data.get("ka_values")
        if not ka_values and data.get("ka") is not None:
            ka_values = (data["ka"],)
        if not ka_values and data.get("pka") is not None:
            ka_values = (10.0 ** (-float(data["pka"])),)
        if not ka_values:
            raise ValueError(
                f"Weak acid '{data['name']}' needs ka, ka_values or pka; "
                "no default dissociation constant is assumed."
            )
        return WeakAcid(
            name=str(data["name"]),
            formula=str(data["formula"]),
            concentration=data["concentration"],
            volume=data["volume"],
            ka_values=tuple(ka_values),
            proton_count=data.get("proton_count"),
            pka=data.get("pka"),
        )
    raise ValueError(f"Acid type must be one of {ACID_TYPES}, got {kind!r}")


def make_base(entry: Mapping[str, object], concentration: Optional[float] = None) -> Base:
    """Build a canonical base from a loose catalog mapping.

    Recognised keys: ``name``, ``formula``, ``type``, ``concentration``,
    ``hydroxide_count``, ``kb``, ``pkb``. A missing hydroxide count is inferred
    from the formula.
    """
    data = _entry_with(entry, concentration=concentration)
    required = {"name", "formula", "concentration"}
    missing = required - set(data.keys())
    if missing:
        raise KeyError(f"Base entry missing required keys: {sorted(missing)}")
    return Base.from_formula(
        name=str(data["name"]),
        formula=str(data["formula"]),
        concentration=data["concentration"],
        type=str(data.get("type", "strong")),
        kb=data.get("kb"),
        pkb=data.get("pkb"),
        hydroxide_count=data.get("hydroxide_count"),
    )
