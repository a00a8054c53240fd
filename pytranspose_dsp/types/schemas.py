# pytranspose_dsp/types/schemas.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pytranspose_dsp.types.dataclasses import PitchEstimate, TranspositionPlan
from pytranspose_dsp.utils.note_utils import freq_to_note


# ────────────────────────────────────────────────────────────────────────────
# Paramètres de session / balayage
# ────────────────────────────────────────────────────────────────────────────
class AnalysisSettings(BaseModel):
    """
    Paramètres fixes côté appelant. Les seuils des estimateurs restent des
    constantes de module, ils ne passent pas par ici.
    """
    model_config = ConfigDict(frozen=True)

    frame_size: int = Field(2048, description="Taille de trame (échantillons)")
    hop_size: int = Field(512, description="Pas entre deux trames (échantillons)")
    max_duration_s: float = Field(30.0, description="Durée analysée en début de fichier (s)")
    cadence_ms: int = Field(100, description="Intervalle entre deux estimations live (ms)")
    budget_ms: int = Field(5000, description="Durée totale d'une capture live (ms)")

    @field_validator("frame_size")
    @classmethod
    def validate_frame_size(cls, v: int) -> int:
        if v < 4 or v % 2:
            raise ValueError(f"frame_size doit être pair et >= 4: {v}")
        return v

    @field_validator("hop_size", "cadence_ms", "budget_ms")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"valeur strictement positive attendue: {v}")
        return v

    @field_validator("max_duration_s")
    @classmethod
    def validate_duration(cls, v: float) -> float:
        if not v > 0:
            raise ValueError(f"max_duration_s doit être > 0: {v}")
        return v

    @model_validator(mode="after")
    def _check_consistency(self) -> "AnalysisSettings":
        if self.hop_size > self.frame_size:
            raise ValueError("hop_size > frame_size: des échantillons seraient ignorés")
        if self.cadence_ms > self.budget_ms:
            raise ValueError("cadence_ms > budget_ms: aucune trame ne serait capturée")
        return self

    @property
    def max_live_frames(self) -> int:
        return self.budget_ms // self.cadence_ms


DEFAULT_SETTINGS = AnalysisSettings()


# ────────────────────────────────────────────────────────────────────────────
# Métadonnées d'une trame entrante
# ────────────────────────────────────────────────────────────────────────────
class FrameMeta(BaseModel):
    sample_rate: int = Field(..., description="Sample rate (Hz)")
    length: int = Field(..., description="Number of samples in frame")

    @field_validator("sample_rate")
    @classmethod
    def validate_sample_rate(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Unsupported sample rate: {v}")
        return v

    @field_validator("length")
    @classmethod
    def validate_length(cls, v: int) -> int:
        if v < 4:
            raise ValueError(f"Frame too short: {v} samples")
        return v


# ────────────────────────────────────────────────────────────────────────────
# Payloads pour l'UI
# ────────────────────────────────────────────────────────────────────────────
class PitchEstimateModel(BaseModel):
    found: bool
    status: str
    method: str
    frequency: Optional[float] = None
    raw_frequency: Optional[float] = None
    note_name: Optional[str] = None

    @classmethod
    def from_result(cls, est: PitchEstimate) -> "PitchEstimateModel":
        return cls(
            found=est.found,
            status=est.status.name.lower(),
            method=est.method,
            frequency=est.frequency,
            raw_frequency=est.raw_frequency,
            note_name=freq_to_note(est.frequency) if est.found else None,
        )


class TranspositionPlanModel(BaseModel):
    source_pitch: Optional[float] = None
    target_pitch: Optional[float] = None
    semitones: int = 0
    ratio: float = 1.0
    valid: bool = False
    reason: Optional[str] = None

    @classmethod
    def from_result(cls, plan: TranspositionPlan) -> "TranspositionPlanModel":
        return cls(
            source_pitch=plan.source_pitch,
            target_pitch=plan.target_pitch,
            semitones=plan.semitones,
            ratio=plan.ratio,
            valid=plan.valid,
            reason=plan.reason,
        )
