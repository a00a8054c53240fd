# pytranspose_dsp/analysis/pitch_yin.py
"""
Estimateur A : fonction de différence normalisée (type YIN)
-----------------------------------------------------------
d(τ)  = Σ_{i<L} (x[i] - x[i+τ])²          L = N/2
d'(τ) = d(τ) · τ / Σ_{j≤τ} d(j)           (normalisation par moyenne cumulée)

On retient le premier creux qui passe sous YIN_THRESHOLD, suivi jusqu'à son
minimum local. Les creux plus profonds à 2τ, 3τ... sont ignorés : on évite
ainsi les erreurs d'octave basse.

Les seuils sont des constantes de module, pas des paramètres d'appel.
"""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from pytranspose_dsp.core.preprocess import as_frame
from pytranspose_dsp.types.dataclasses import PitchEstimate
from pytranspose_dsp.types.enums import PitchStatus

METHOD = "yin"

YIN_THRESHOLD = 0.10
YIN_FMIN_HZ = 100.0
YIN_FMAX_HZ = 5000.0

YIN_PREFIX = "[YIN]"


def _yin_log(debug: bool, msg: str):
    if debug:
        print(f"{YIN_PREFIX} {msg}")


def difference_function(x: np.ndarray) -> np.ndarray:
    """d(τ) pour τ ∈ [0, N/2) ; d(0) = 0."""
    half = x.size // 2
    lagged = sliding_window_view(x, half)[:half]   # lagged[τ] = x[τ:τ+half]
    return np.sum(np.square(lagged - x[:half]), axis=1)


def cumulative_mean_normalized(diff: np.ndarray) -> np.ndarray:
    """
    d'(τ) = d(τ)·τ / Σ_{j=1..τ} d(j), d'(0) = 1.
    Somme cumulée nulle (trame silencieuse) → 1, jamais NaN.
    """
    cmnd = np.ones_like(diff)
    if diff.size < 2:
        return cmnd
    taus = np.arange(1, diff.size, dtype=np.float64)
    running = np.cumsum(diff[1:])
    with np.errstate(divide="ignore", invalid="ignore"):
        cmnd[1:] = np.where(running > 0, diff[1:] * taus / running, 1.0)
    return cmnd


def first_dip_lag(cmnd: np.ndarray, threshold: float = YIN_THRESHOLD) -> int | None:
    """Premier τ sous le seuil, suivi jusqu'au fond du creux. None si aucun."""
    below = np.flatnonzero(cmnd[1:] < threshold)
    if below.size == 0:
        return None
    tau = int(below[0]) + 1
    while tau + 1 < cmnd.size and cmnd[tau + 1] < cmnd[tau]:
        tau += 1
    return tau


def estimate_yin(signal, sr: int, debug: bool = False) -> PitchEstimate:
    """
    Estime f0 d'une trame. Ne lève jamais : tout échec est un PitchEstimate
    avec found == False.

    Parameters
    ----------
    signal : array-like
        Trame mono, échantillons dans [-1, 1].
    sr : int
        Sample rate (Hz).
    """
    x = as_frame(signal, sr)
    if x is None:
        _yin_log(debug, "invalid frame")
        return PitchEstimate.missing(PitchStatus.INVALID_FRAME, METHOD)

    cmnd = cumulative_mean_normalized(difference_function(x))
    tau = first_dip_lag(cmnd)
    if tau is None:
        _yin_log(debug, f"no lag below {YIN_THRESHOLD} (min={float(np.min(cmnd)):.3f})")
        return PitchEstimate.missing(PitchStatus.NO_PERIODICITY, METHOD)

    f0 = float(sr) / tau
    if not (YIN_FMIN_HZ <= f0 <= YIN_FMAX_HZ):
        _yin_log(debug, f"tau={tau} → {f0:.2f} Hz hors [{YIN_FMIN_HZ:.0f},{YIN_FMAX_HZ:.0f}]")
        return PitchEstimate.missing(PitchStatus.OUT_OF_RANGE, METHOD, raw_frequency=f0)

    _yin_log(debug, f"tau={tau} d'={cmnd[tau]:.4f} → {f0:.2f} Hz")
    return PitchEstimate.detected(f0, METHOD)
