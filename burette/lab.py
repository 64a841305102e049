"""Interactive burette over a finished simulation.

A :class:`BuretteSession` replays a :class:`~burette.simulation.TitrationResult`
the way a student works a burette: titrant is added in increments, the flask
shows the pH and indicator colour of the nearest simulated sample, and the
session reports when the equivalence point has been reached. The result itself
is never modified; only the session's delivered volume changes.
"""

from __future__ import annotations

import logging
import math

from burette.simulation import TitrationPoint, TitrationResult, find_nearest_point

logger = logging.getLogger(__name__)

DEFAULT_TITRANT_INCREMENT_ML = 1.0
EQUIVALENCE_WINDOW_ML = 0.5


class BuretteSession:
    """Step through a simulated titration one titrant addition at a time.

    Args:
        result: A finished simulation with at least one point.
        equivalence_window: Distance (mL) from the equivalence volume within
            which :attr:`reached_equivalence` is true.

    Raises:
        ValueError: If ``result`` has no points.
    """

    def __init__(
        self, result: TitrationResult, equivalence_window: float = EQUIVALENCE_WINDOW_ML
    ):
        if not result.points:
            raise ValueError("Cannot start a burette session without simulated points.")
        self.result = result
        self.equivalence_window = float(equivalence_window)
        self._volume_added = 0.0

    @property
    def volume_added(self) -> float:
        return self._volume_added

    @property
    def max_volume(self) -> float:
        return self.result.max_volume

    @property
    def current_point(self) -> TitrationPoint:
        """Simulated sample nearest to the delivered volume."""
        return find_nearest_point(self.result.points, self._volume_added)

    @property
    def ph(self) -> float:
        return self.current_point.ph

    @property
    def color(self) -> str:
        return self.current_point.color

    @property
    def reached_equivalence(self) -> bool:
        v_eq = self.result.equivalence_volume
        if not math.isfinite(v_eq):
            return False
        return abs(self._volume_added - v_eq) <= self.equivalence_window

    def add_titrant(self, amount: float = DEFAULT_TITRANT_INCREMENT_ML) -> TitrationPoint:
        """Deliver ``amount`` mL and return the sample now shown in the flask.

        The delivered volume is clamped to ``[0, max_volume]``.

        Raises:
            ValueError: If ``amount`` is not a finite number.
        """
        amount = float(amount)
        if not math.isfinite(amount):
            raise ValueError("Titrant amount must be finite.")
        self._volume_added = min(max(self._volume_added + amount, 0.0), self.max_volume)
        point = self.current_point
        logger.debug(
            "Added %.3f mL (total %.3f mL): pH %.2f", amount, self._volume_added, point.ph
        )
        return point

    def reset(self) -> None:
        """Empty the burette back to 0 mL."""
        self._volume_added = 0.0
