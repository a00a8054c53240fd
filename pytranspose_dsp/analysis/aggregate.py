"""
aggregate.py
============
Collecte des estimations trame par trame et réduction en une hauteur
représentative : moyenne (capture live) ou médiane (analyse de fichier).

Filtre indépendant de celui de YIN : seules les valeurs dans la bande vocale
ouverte (VOICE_FMIN_HZ, VOICE_FMAX_HZ) sont gardées à la réduction.
"""

from __future__ import annotations

import math

import numpy as np

from pytranspose_dsp.types.dataclasses import PitchEstimate
from pytranspose_dsp.types.enums import PitchStatus, ReductionMode

VOICE_FMIN_HZ = 50.0
VOICE_FMAX_HZ = 500.0

AGG_PREFIX = "[AGG]"


def _agg_log(debug: bool, msg: str):
    if debug:
        print(f"{AGG_PREFIX} {msg}")


class PitchEstimateWindow:
    """
    Fenêtre append-only d'estimations. Invariant : uniquement des valeurs
    finies et > 0 (les "pas de pitch" sont refusés à l'insertion).
    """

    def __init__(self, values=None):
        self._values: list[float] = []
        for v in values or ():
            self.append(v)

    def append(self, estimate: PitchEstimate | float | None) -> bool:
        """Ajoute une estimation ; retourne False si elle a été refusée."""
        if isinstance(estimate, PitchEstimate):
            value = estimate.frequency if estimate.found else None
        else:
            value = estimate
        if value is None:
            return False
        try:
            value = float(value)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value) or value <= 0:
            return False
        self._values.append(value)
        return True

    def clear(self):
        self._values.clear()

    @property
    def values(self) -> np.ndarray:
        return np.array(self._values, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(list(self._values))


def in_voice_band(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values, dtype=np.float64)
    return values[(values > VOICE_FMIN_HZ) & (values < VOICE_FMAX_HZ)]


def lower_median(values: np.ndarray) -> float:
    """Élément du milieu après tri ; milieu bas si le nombre est pair."""
    ordered = np.sort(np.asarray(values, dtype=np.float64))
    return float(ordered[(ordered.size - 1) // 2])


def reduce_window(
    window: PitchEstimateWindow,
    mode: ReductionMode | str = ReductionMode.MEAN_FILTERED,
    debug: bool = False,
) -> PitchEstimate:
    """
    Réduit une fenêtre en une seule estimation.

    - fenêtre vide                → EMPTY_WINDOW
    - rien dans (50, 500) Hz      → OUT_OF_RANGE
    - sinon moyenne ou médiane basse des valeurs retenues
    """
    mode = ReductionMode(mode)
    method = mode.value

    if len(window) == 0:
        _agg_log(debug, "no pitch data collected")
        return PitchEstimate.missing(PitchStatus.EMPTY_WINDOW, method)

    kept = in_voice_band(window.values)
    if kept.size == 0:
        _agg_log(debug, f"no valid pitch data ({len(window)} values outside band)")
        return PitchEstimate.missing(PitchStatus.OUT_OF_RANGE, method)

    if mode is ReductionMode.MEDIAN:
        f0 = lower_median(kept)
    else:
        f0 = float(np.mean(kept))

    _agg_log(debug, f"{method}: {kept.size}/{len(window)} values kept → {f0:.2f} Hz")
    return PitchEstimate.detected(f0, method)
