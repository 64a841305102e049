"""Physical constants and numeric floors used by the titration engine.

The solver performs no global lookups: Kw is resolved here by the
caller (``simulate_titration``) and passed down explicitly. Only the 25 °C
entry is used by the simulation; the remaining entries document the table the
value is taken from.
"""

from __future__ import annotations

import math
from typing import Dict

# Ion product of water, Kw, keyed by temperature in °C.
WATER_ION_PRODUCT: Dict[int, float] = {
    0: 1.139e-15,
    10: 2.929e-15,
    20: 6.809e-15,
    25: 1.008e-14,
    30: 1.471e-14,
    40: 2.916e-14,
    50: 5.476e-14,
    60: 9.614e-14,
}

DEFAULT_TEMPERATURE_C: int = 25
FALLBACK_KW: float = 1.0e-14

# pH + pOH; the pOH -> pH conversion uses the nominal value.
PKW_NOMINAL: float = 14.0
NEUTRAL_PH: float = 7.0

# Floors that keep log10 and divisions defined for degenerate inputs.
MIN_CONCENTRATION: float = 1e-30
MIN_MOLES: float = 1e-12
MIN_VOLUME_L: float = 1e-9
EQUIVALENCE_TOLERANCE: float = 1e-12

DEFAULT_STEP_SIZE: float = 0.5  # mL


def water_ion_product(temperature: int = DEFAULT_TEMPERATURE_C) -> float:
    """Return Kw at ``temperature`` from :data:`WATER_ION_PRODUCT`.

    Args:
        temperature (int): Temperature in °C. Only tabulated temperatures are
            recognised; there is no interpolation.

    Returns:
        float: Kw (dimensionless, mol^2 dm^-6 by convention). Falls back to
        ``1.0e-14`` when the temperature is not tabulated or the stored value
        is unusable.
    """
    kw = WATER_ION_PRODUCT.get(temperature)
    if kw is None or not math.isfinite(kw) or kw <= 0:
        return FALLBACK_KW
    return float(kw)
