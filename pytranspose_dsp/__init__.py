"""
PyTranspose DSP : détection de hauteur et calcul de transposition
----------------------------------------------------------------

Cœur numérique de l'application "chante une note, on transpose le morceau
dans ta tessiture" :
- deux estimateurs de f0 interchangeables (YIN / corrélation),
- agrégation des estimations d'une session (moyenne ou médiane filtrée),
- conversion de deux hauteurs en décalage de demi-tons.

Structure :
    analysis/pitch_yin.py       → estimateur A (différence normalisée)
    analysis/pitch_autocorr.py  → estimateur B (corrélation + interpolation)
    analysis/estimators.py      → interface commune + sélection
    analysis/aggregate.py       → fenêtre d'estimations + réduction
    analysis/semitones.py       → demi-tons, ratio, plan de transposition
    core/session.py             → session de capture live
    core/file_analysis.py       → balayage d'un buffer complet
"""

from .analysis.aggregate import PitchEstimateWindow, reduce_window
from .analysis.estimators import (
    AutocorrelationEstimator,
    DifferenceFunctionEstimator,
    PitchEstimator,
    estimate_frame,
    get_estimator,
)
from .analysis.pitch_autocorr import estimate_autocorr
from .analysis.pitch_yin import estimate_yin
from .analysis.semitones import (
    InvalidPitchError,
    plan_transposition,
    semitone_shift,
    shift_to_ratio,
)
from .core.file_analysis import analyze_signal
from .core.session import LiveCaptureSession, SessionStateError
from .types.dataclasses import PitchEstimate, SampleFrame, TranspositionPlan
from .types.enums import EstimatorKind, PitchStatus, ReductionMode, SessionState
from .types.schemas import AnalysisSettings

__all__ = [
    "estimate_yin",
    "estimate_autocorr",
    "PitchEstimator",
    "DifferenceFunctionEstimator",
    "AutocorrelationEstimator",
    "get_estimator",
    "estimate_frame",
    "PitchEstimateWindow",
    "reduce_window",
    "semitone_shift",
    "shift_to_ratio",
    "plan_transposition",
    "InvalidPitchError",
    "LiveCaptureSession",
    "SessionStateError",
    "analyze_signal",
    "PitchEstimate",
    "SampleFrame",
    "TranspositionPlan",
    "PitchStatus",
    "ReductionMode",
    "EstimatorKind",
    "SessionState",
    "AnalysisSettings",
]
