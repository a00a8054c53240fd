# pytranspose_dsp/core/session.py
"""
Session de capture live
-----------------------
Objet explicite possédé par l'appelant (pas d'état audio global) :

    OPEN → SAMPLING → CLOSED

L'appelant fournit une trame toutes les `cadence_ms` ; la session s'arrête
après `budget_ms // cadence_ms` trames et réduit par moyenne filtrée.
Aucun timer ni thread ici.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from pytranspose_dsp.analysis.aggregate import PitchEstimateWindow, reduce_window
from pytranspose_dsp.analysis.estimators import DifferenceFunctionEstimator, PitchEstimator
from pytranspose_dsp.types.dataclasses import PitchEstimate
from pytranspose_dsp.types.enums import ReductionMode, SessionState
from pytranspose_dsp.types.schemas import DEFAULT_SETTINGS, AnalysisSettings, FrameMeta

LIVE_PREFIX = "[LIVE]"


class SessionStateError(RuntimeError):
    """Opération interdite dans l'état courant de la session."""


class LiveCaptureSession:
    def __init__(
        self,
        estimator: PitchEstimator | None = None,
        settings: AnalysisSettings = DEFAULT_SETTINGS,
        debug: bool = False,
    ):
        self.estimator = estimator or DifferenceFunctionEstimator()
        self.settings = settings
        self.debug = debug
        self.window = PitchEstimateWindow()
        self.state: SessionState | None = None
        self.sr: int | None = None
        self.frames_seen = 0
        self.result: PitchEstimate | None = None

    def _log(self, msg: str):
        if self.debug:
            print(f"{LIVE_PREFIX} {msg}")

    @property
    def max_frames(self) -> int:
        return self.settings.max_live_frames

    @property
    def exhausted(self) -> bool:
        return self.frames_seen >= self.max_frames

    def open(self, sr: int) -> "LiveCaptureSession":
        if self.state in (SessionState.OPEN, SessionState.SAMPLING):
            raise SessionStateError(f"session already {self.state.name.lower()}")
        self.sr = FrameMeta(sample_rate=sr, length=self.settings.frame_size).sample_rate
        self.window.clear()
        self.frames_seen = 0
        self.result = None
        self.state = SessionState.OPEN
        self._log(f"open sr={self.sr} budget={self.max_frames} frames")
        return self

    def push(self, samples: np.ndarray) -> PitchEstimate:
        """Estime une trame et l'ajoute à la fenêtre. Retourne l'estimation (affichage)."""
        if self.state not in (SessionState.OPEN, SessionState.SAMPLING):
            raise SessionStateError("push() requires an open session")
        if self.exhausted:
            raise SessionStateError(f"time budget exhausted ({self.settings.budget_ms} ms)")

        self.state = SessionState.SAMPLING
        est = self.estimator.estimate(samples, self.sr)
        self.frames_seen += 1
        kept = self.window.append(est)
        self._log(
            f"frame {self.frames_seen}/{self.max_frames}: {est.status.name.lower()}"
            + (f" {est.frequency:.2f} Hz" if kept else "")
        )
        return est

    def close(self) -> PitchEstimate:
        if self.state is SessionState.CLOSED:
            return self.result
        if self.state is None:
            raise SessionStateError("close() on a session that was never opened")
        self.result = reduce_window(self.window, ReductionMode.MEAN_FILTERED, debug=self.debug)
        self.state = SessionState.CLOSED
        self._log(f"closed after {self.frames_seen} frames → {self.result.status.name.lower()}")
        return self.result

    def run(self, frames: Iterable[np.ndarray], sr: int) -> PitchEstimate:
        """open → push jusqu'au budget (ou fin du flux) → close."""
        self.open(sr)
        for samples in frames:
            if self.exhausted:
                break
            self.push(samples)
        return self.close()

    def __enter__(self) -> "LiveCaptureSession":
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.state in (SessionState.OPEN, SessionState.SAMPLING):
            self.close()
        return False
