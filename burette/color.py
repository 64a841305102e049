"""Indicator colour mapping.

Colours are ``#RRGGBB`` strings, the interchange format with the rendering
layer. Inside an indicator's transition band the colour is a straight linear
blend of the RGB channels; this is not perceptually uniform and is only meant
to be illustrative.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np

from burette.chemistry.species import HEX_COLOR_PATTERN, Indicator


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``#RRGGBB`` (leading ``#`` optional) into an RGB tuple.

    Returns ``None`` for anything that is not a six-digit hex colour.
    """
    match = HEX_COLOR_PATTERN.match(str(hex_color))
    if not match:
        return None
    return tuple(int(channel, 16) for channel in match.groups())


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Encode RGB channels as a lower-case ``#rrggbb`` string."""
    channels = (min(max(int(c), 0), 255) for c in (r, g, b))
    return "#" + "".join(f"{c:02x}" for c in channels)


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def interpolate_color(color1: str, color2: str, fraction: float) -> str:
    """Blend two hex colours channel by channel.

    ``fraction=0`` gives ``color1`` and ``fraction=1`` gives ``color2``.
    If either colour cannot be parsed, ``color1`` is returned unchanged.
    """
    c1 = hex_to_rgb(color1)
    c2 = hex_to_rgb(color2)
    if c1 is None or c2 is None:
        return color1

    r, g, b = (
        _round_half_up(a + (z - a) * fraction) for a, z in zip(c1, c2)
    )
    return rgb_to_hex(r, g, b)


def get_indicator_color(indicator: Indicator, ph: float) -> str:
    """Return the colour ``indicator`` shows at ``ph``.

    Below the transition band the acid colour is returned verbatim, above it
    the base colour; inside the band (bounds inclusive) the two are blended
    linearly in pH.
    """
    low, high = indicator.transition_range
    if ph < low:
        return indicator.acid_color
    if ph > high:
        return indicator.base_color
    fraction = (ph - low) / (high - low)
    return interpolate_color(indicator.acid_color, indicator.base_color, fraction)


def indicator_colors(indicator: Indicator, ph_values: Iterable[float]) -> List[str]:
    """Apply :func:`get_indicator_color` to each pH value in turn."""
    return [get_indicator_color(indicator, float(ph)) for ph in ph_values]
