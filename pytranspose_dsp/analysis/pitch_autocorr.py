# pytranspose_dsp/analysis/pitch_autocorr.py
"""
Estimateur B : corrélation par différence absolue + interpolation locale.

c(offset) = 1 - Σ_{i<M} |x[i] - x[i+offset]| / M      M = N/2

Balayage "monte puis descend" : dès qu'une corrélation > GOOD_CORRELATION
progresse par rapport au lag précédent, on suit le pic ; à la première
baisse on s'arrête (premier pic = fondamentale) et on affine le lag avec
les voisins du pic.

Pas de bande de fréquence ici : le filtrage est fait à l'agrégation.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from pytranspose_dsp.core.preprocess import as_frame, rms
from pytranspose_dsp.types.dataclasses import PitchEstimate
from pytranspose_dsp.types.enums import PitchStatus

METHOD = "acf"

RMS_GATE = 0.01
GOOD_CORRELATION = 0.9
MIN_CORRELATION = 0.01
INTERPOLATION_FACTOR = 8.0   # constante empirique, conservée telle quelle

ACF_PREFIX = "[ACF]"


def _acf_log(debug: bool, msg: str):
    if debug:
        print(f"{ACF_PREFIX} {msg}")


def correlation_curve(x: np.ndarray) -> np.ndarray:
    """c(offset) pour offset ∈ [0, N/2)."""
    half = x.size // 2
    lagged = sliding_window_view(x, half)[:half]
    return 1.0 - np.sum(np.abs(lagged - x[:half]), axis=1) / half


def _scan_first_peak(corr: np.ndarray) -> tuple[int, float, bool]:
    """
    Retourne (best_offset, best_correlation, stopped).
    stopped=True si le balayage a été interrompu après le premier pic.
    """
    best_offset = -1
    best_corr = 0.0
    found_good = False
    last = 1.0  # le lag 0 (c=1) ne compte jamais comme une montée

    for offset, c in enumerate(corr):
        c = float(c)
        if c > GOOD_CORRELATION and c > last:
            found_good = True
            if c > best_corr:
                best_corr = c
                best_offset = offset
        elif found_good:
            return best_offset, best_corr, True
        last = c

    return best_offset, best_corr, False


def estimate_autocorr(signal, sr: int, debug: bool = False) -> PitchEstimate:
    """
    Estime f0 d'une trame. Ne lève jamais.

    - RMS < RMS_GATE → SILENT
    - premier pic trouvé → interpolation b + 8·(c[b+1] - c[b-1]) / c[b]
    - sinon repli sur le meilleur lag si corrélation > MIN_CORRELATION
    """
    x = as_frame(signal, sr)
    if x is None:
        _acf_log(debug, "invalid frame")
        return PitchEstimate.missing(PitchStatus.INVALID_FRAME, METHOD)

    level = rms(x)
    if level < RMS_GATE:
        _acf_log(debug, f"rms={level:.4f} < {RMS_GATE} → silence")
        return PitchEstimate.missing(PitchStatus.SILENT, METHOD)

    corr = correlation_curve(x)
    best, best_corr, stopped = _scan_first_peak(corr)

    if stopped:
        shift = (corr[best + 1] - corr[best - 1]) / corr[best]
        lag = best + INTERPOLATION_FACTOR * float(shift)
        f0 = float(sr) / lag if lag > 0 else math.nan
        _acf_log(debug, f"peak={best} c={best_corr:.4f} shift={shift:+.4f} → {f0:.2f} Hz")
        return PitchEstimate.detected(f0, METHOD)

    if best > 0 and best_corr > MIN_CORRELATION:
        f0 = float(sr) / best
        _acf_log(debug, f"no fall after peak, best={best} c={best_corr:.4f} → {f0:.2f} Hz")
        return PitchEstimate.detected(f0, METHOD)

    _acf_log(debug, "no good correlation")
    return PitchEstimate.missing(PitchStatus.NO_PERIODICITY, METHOD)
