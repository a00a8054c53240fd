import numpy as np
import pytest
from pydantic import ValidationError

from pytranspose_dsp.analysis.semitones import plan_transposition
from pytranspose_dsp.types.dataclasses import PitchEstimate, SampleFrame
from pytranspose_dsp.types.enums import PitchStatus
from pytranspose_dsp.types.schemas import (
    AnalysisSettings,
    FrameMeta,
    PitchEstimateModel,
    TranspositionPlanModel,
)
from pytranspose_dsp.analysis.estimators import estimate_frame


def test_default_settings():
    s = AnalysisSettings()
    assert (s.frame_size, s.hop_size, s.max_duration_s) == (2048, 512, 30.0)
    assert s.max_live_frames == 50


@pytest.mark.parametrize("kwargs", [
    {"frame_size": 2047},
    {"frame_size": 2},
    {"hop_size": 0},
    {"hop_size": 4096},
    {"max_duration_s": 0.0},
    {"cadence_ms": 6000},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValidationError):
        AnalysisSettings(**kwargs)


def test_settings_are_frozen():
    s = AnalysisSettings()
    with pytest.raises(ValidationError):
        s.frame_size = 1024


def test_frame_meta():
    assert FrameMeta(sample_rate=48000, length=2048).sample_rate == 48000
    with pytest.raises(ValidationError):
        FrameMeta(sample_rate=0, length=2048)
    with pytest.raises(ValidationError):
        FrameMeta(sample_rate=44100, length=3)


def test_pitch_payload():
    m = PitchEstimateModel.from_result(PitchEstimate.detected(440.0, "yin"))
    assert m.found and m.note_name == "A4" and m.status == "detected"

    missing = PitchEstimateModel.from_result(
        PitchEstimate.missing(PitchStatus.OUT_OF_RANGE, "yin", raw_frequency=6300.0)
    )
    assert missing.note_name is None
    assert missing.raw_frequency == 6300.0
    assert missing.model_dump()["status"] == "out_of_range"


def test_plan_payload():
    m = TranspositionPlanModel.from_result(plan_transposition(220.0, 110.0))
    assert m.semitones == -12 and m.valid and m.ratio == 0.5


def test_sample_frame_is_read_only():
    frame = SampleFrame.from_array([0.0] * 2048, 44100)
    assert frame.duration == pytest.approx(2048 / 44100)
    with pytest.raises(ValueError):
        frame.samples[0] = 1.0
    assert not estimate_frame(frame).found


def test_sample_frame_constructor_copies_and_freezes():
    source = np.zeros(1024, dtype=np.float32)
    frame = SampleFrame(samples=source, sr=48000.0)
    assert frame.samples.dtype == np.float64 and frame.sr == 48000
    with pytest.raises(ValueError):
        frame.samples[0] = 1.0
    source[0] = 1.0
    assert frame.samples[0] == 0.0


def test_sample_frame_has_no_defaults():
    with pytest.raises(TypeError):
        SampleFrame()
