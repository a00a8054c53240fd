import numpy as np
import pytest

from pytranspose_dsp.analysis.estimators import AutocorrelationEstimator, get_estimator
from pytranspose_dsp.core.session import LiveCaptureSession, SessionStateError
from pytranspose_dsp.types.enums import EstimatorKind, PitchStatus, SessionState
from pytranspose_dsp.types.schemas import AnalysisSettings

SR = 44100


def sine(freq: float, n: int = 2048, amp: float = 0.5) -> np.ndarray:
    t = np.arange(n) / SR
    return amp * np.sin(2 * np.pi * freq * t)


def test_lifecycle_and_mean_pitch():
    session = LiveCaptureSession()
    assert session.state is None
    session.open(SR)
    assert session.state is SessionState.OPEN

    est = session.push(sine(220.0))
    assert est.found
    assert session.state is SessionState.SAMPLING

    result = session.close()
    assert session.state is SessionState.CLOSED
    assert result.found
    assert abs(result.frequency - 220.0) / 220.0 < 0.02
    assert result.method == "mean_filtered"


def test_run_stops_at_budget():
    session = LiveCaptureSession()
    result = session.run((sine(196.0) for _ in range(80)), SR)
    assert session.frames_seen == 50
    assert len(session.window) == 50
    assert abs(result.frequency - 196.0) / 196.0 < 0.02


def test_out_of_band_frames_are_excluded_from_mean():
    session = LiveCaptureSession(estimator=AutocorrelationEstimator())
    frames = [sine(220.0)] * 5 + [sine(1000.0)] * 3
    result = session.run(frames, SR)
    assert len(session.window) == 8
    assert abs(result.frequency - 220.0) / 220.0 < 0.02


def test_silent_session_reports_no_pitch():
    session = LiveCaptureSession(estimator=get_estimator(EstimatorKind.AUTOCORRELATION))
    result = session.run([np.zeros(2048)] * 10, SR)
    assert not result.found
    assert result.status is PitchStatus.EMPTY_WINDOW


def test_high_voice_reports_out_of_range():
    session = LiveCaptureSession(estimator=get_estimator("acf"))
    result = session.run([sine(700.0)] * 4, SR)
    assert result.status is PitchStatus.OUT_OF_RANGE


def test_push_requires_open_session():
    session = LiveCaptureSession()
    with pytest.raises(SessionStateError):
        session.push(sine(220.0))
    session.open(SR)
    session.close()
    with pytest.raises(SessionStateError):
        session.push(sine(220.0))


def test_push_past_budget():
    settings = AnalysisSettings(cadence_ms=100, budget_ms=300)
    session = LiveCaptureSession(settings=settings).open(SR)
    for _ in range(3):
        session.push(sine(220.0))
    assert session.exhausted
    with pytest.raises(SessionStateError):
        session.push(sine(220.0))


def test_double_open_is_refused():
    session = LiveCaptureSession().open(SR)
    with pytest.raises(SessionStateError):
        session.open(SR)


def test_reopen_starts_a_fresh_window():
    session = LiveCaptureSession()
    session.run([sine(220.0)] * 3, SR)
    session.open(SR)
    assert len(session.window) == 0
    assert session.frames_seen == 0
    assert session.result is None


def test_context_manager_closes():
    with LiveCaptureSession().open(SR) as session:
        session.push(sine(330.0))
    assert session.state is SessionState.CLOSED
    assert session.result.found


def test_invalid_sample_rate():
    with pytest.raises(ValueError):
        LiveCaptureSession().open(0)
