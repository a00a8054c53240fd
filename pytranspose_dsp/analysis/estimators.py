from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from pytranspose_dsp.analysis.pitch_autocorr import estimate_autocorr
from pytranspose_dsp.analysis.pitch_yin import estimate_yin
from pytranspose_dsp.types.dataclasses import PitchEstimate, SampleFrame
from pytranspose_dsp.types.enums import EstimatorKind


class PitchEstimator(Protocol):
    name: str

    def estimate(self, signal: np.ndarray, sr: int) -> PitchEstimate: ...


@dataclass(frozen=True)
class DifferenceFunctionEstimator:
    """Estimateur A (YIN). Borne interne [100, 5000] Hz."""
    name: str = "yin"
    debug: bool = False

    def estimate(self, signal: np.ndarray, sr: int) -> PitchEstimate:
        return estimate_yin(signal, sr, debug=self.debug)


@dataclass(frozen=True)
class AutocorrelationEstimator:
    """Estimateur B (corrélation + interpolation). Pas de borne interne."""
    name: str = "acf"
    debug: bool = False

    def estimate(self, signal: np.ndarray, sr: int) -> PitchEstimate:
        return estimate_autocorr(signal, sr, debug=self.debug)


_REGISTRY: dict[EstimatorKind, type] = {
    EstimatorKind.DIFFERENCE_FUNCTION: DifferenceFunctionEstimator,
    EstimatorKind.AUTOCORRELATION: AutocorrelationEstimator,
}


def get_estimator(kind: EstimatorKind | str = EstimatorKind.DIFFERENCE_FUNCTION,
                  debug: bool = False) -> PitchEstimator:
    """Choix de la stratégie par l'appelant : EstimatorKind ou "yin" / "acf"."""
    kind = EstimatorKind(kind)
    return _REGISTRY[kind](debug=debug)


def estimate_frame(frame: SampleFrame, estimator: PitchEstimator | None = None) -> PitchEstimate:
    estimator = estimator or DifferenceFunctionEstimator()
    return estimator.estimate(frame.samples, frame.sr)
