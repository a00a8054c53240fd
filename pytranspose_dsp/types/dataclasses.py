from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from pytranspose_dsp.types.enums import PitchStatus


@dataclass(frozen=True)
class SampleFrame:
    samples: np.ndarray
    sr: int

    def __post_init__(self):
        arr = np.array(self.samples, dtype=np.float64)
        arr.setflags(write=False)  # trame figée pendant l'estimation
        object.__setattr__(self, "samples", arr)
        object.__setattr__(self, "sr", int(self.sr))

    @classmethod
    def from_array(cls, samples, sr: int) -> "SampleFrame":
        return cls(samples=samples, sr=sr)

    @property
    def duration(self) -> float:
        return self.samples.size / self.sr if self.sr > 0 else 0.0


@dataclass(frozen=True)
class PitchEstimate:
    """
    Résultat d'une estimation (trame ou session).

    `frequency` n'est renseignée que si status == DETECTED (finie, > 0).
    `raw_frequency` garde la valeur rejetée pour les diagnostics
    (ex: 6 kHz hors bande pour YIN).
    """
    frequency: float | None
    status: PitchStatus
    method: str = "none"
    raw_frequency: float | None = None

    @property
    def found(self) -> bool:
        return self.status is PitchStatus.DETECTED

    @classmethod
    def detected(cls, frequency: float, method: str) -> "PitchEstimate":
        f = float(frequency)
        if not math.isfinite(f) or f <= 0:
            return cls(None, PitchStatus.NO_PERIODICITY, method, raw_frequency=None)
        return cls(f, PitchStatus.DETECTED, method, raw_frequency=f)

    @classmethod
    def missing(
        cls,
        status: PitchStatus,
        method: str,
        raw_frequency: float | None = None,
    ) -> "PitchEstimate":
        return cls(None, status, method, raw_frequency=raw_frequency)


@dataclass(frozen=True)
class TranspositionPlan:
    source_pitch: float | None
    target_pitch: float | None
    semitones: int = 0
    ratio: float = 1.0            # facteur passé au pitch shifter externe
    valid: bool = False
    reason: str | None = None
