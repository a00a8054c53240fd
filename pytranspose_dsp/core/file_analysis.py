# pytranspose_dsp/core/file_analysis.py
"""
Analyse d'un buffer complet (morceau décodé par l'appelant).

Trames chevauchantes (frame_size / hop_size) sur les max_duration_s
premières secondes, estimation par trame, réduction par médiane
(robuste aux pics transitoires).
"""

from __future__ import annotations

from typing import Iterator, Literal

import librosa
import numpy as np

from pytranspose_dsp.analysis.aggregate import PitchEstimateWindow, reduce_window
from pytranspose_dsp.analysis.estimators import DifferenceFunctionEstimator, PitchEstimator
from pytranspose_dsp.core.preprocess import select_channel
from pytranspose_dsp.types.dataclasses import PitchEstimate
from pytranspose_dsp.types.enums import PitchStatus, ReductionMode
from pytranspose_dsp.types.schemas import DEFAULT_SETTINGS, AnalysisSettings, FrameMeta

FILE_PREFIX = "[FILE]"


def _file_log(debug: bool, msg: str):
    if debug:
        print(f"{FILE_PREFIX} {msg}")


def frame_estimates(
    signal: np.ndarray,
    sr: int,
    estimator: PitchEstimator | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    channel: Literal["first", "mono", "dominant"] = "first",
) -> Iterator[PitchEstimate]:
    """Estimation trame par trame (générateur), pour diagnostic ou agrégation."""
    estimator = estimator or DifferenceFunctionEstimator()
    sr = FrameMeta(sample_rate=sr, length=settings.frame_size).sample_rate

    y = select_channel(signal, channel)
    y = y[: int(settings.max_duration_s * sr)]
    if y.size < settings.frame_size:
        return

    frames = librosa.util.frame(y, frame_length=settings.frame_size, hop_length=settings.hop_size)
    for frame in frames.T:
        yield estimator.estimate(frame, sr)


def analyze_signal(
    signal: np.ndarray,
    sr: int,
    estimator: PitchEstimator | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    channel: Literal["first", "mono", "dominant"] = "first",
    debug: bool = False,
) -> PitchEstimate:
    """
    Hauteur représentative d'un morceau (médiane des trames valides).

    Buffer plus court qu'une trame → EMPTY_WINDOW.
    """
    window = PitchEstimateWindow()
    n_frames = 0
    for est in frame_estimates(signal, sr, estimator, settings, channel):
        n_frames += 1
        window.append(est)

    _file_log(debug, f"{n_frames} frames, {len(window)} pitches detected")
    if n_frames == 0:
        return PitchEstimate.missing(PitchStatus.EMPTY_WINDOW, ReductionMode.MEDIAN.value)
    return reduce_window(window, ReductionMode.MEDIAN, debug=debug)
