import numpy as np
import pytest

from pytranspose_dsp.analysis.pitch_autocorr import (
    INTERPOLATION_FACTOR,
    _scan_first_peak,
    correlation_curve,
    estimate_autocorr,
)
from pytranspose_dsp.types.enums import PitchStatus

SR = 44100


def sine(freq: float, n: int = 2048, amp: float = 0.5, sr: int = SR) -> np.ndarray:
    t = np.arange(n) / sr
    return amp * np.sin(2 * np.pi * freq * t)


def test_silence_is_gated():
    est = estimate_autocorr(np.zeros(2048), SR)
    assert est.status is PitchStatus.SILENT
    assert est.frequency is None


def test_quiet_sine_is_gated():
    # rms ≈ 0.0035 < 0.01
    est = estimate_autocorr(sine(440.0, amp=0.005), SR)
    assert est.status is PitchStatus.SILENT


@pytest.mark.parametrize("freq", [105.0, 220.0, 440.0, 1000.0, 2000.0])
def test_sine_within_two_percent(freq):
    est = estimate_autocorr(sine(freq), SR)
    assert est.found, f"aucune hauteur pour {freq} Hz: {est}"
    assert abs(est.frequency - freq) / freq < 0.02, f"{est.frequency:.2f} Hz vs {freq} Hz"
    assert est.method == "acf"


def test_full_scale_high_pitch_exceeds_two_percent():
    # le facteur 8 sur-corrige quand la pente du pic (∝ amplitude · f) est forte :
    # la précision de 2 % ne vaut pas à pleine échelle vers 1.8 kHz
    freq = 1806.9
    est = estimate_autocorr(sine(freq, amp=1.0), SR)
    assert est.found
    err = abs(est.frequency - freq) / freq
    assert 0.02 < err < 0.05, f"{est.frequency:.2f} Hz vs {freq} Hz ({err:.1%})"


def test_white_noise_has_no_periodicity():
    rng = np.random.default_rng(1)
    est = estimate_autocorr(0.3 * rng.standard_normal(2048), SR)
    assert est.status is PitchStatus.NO_PERIODICITY


def test_no_internal_band_limit():
    # YIN rejetterait 60 Hz ; ici le filtrage est laissé à l'agrégation
    est = estimate_autocorr(sine(60.0), SR)
    assert est.found
    assert abs(est.frequency - 60.0) / 60.0 < 0.02


def test_correlation_curve_starts_at_one():
    corr = correlation_curve(sine(440.0))
    assert corr.size == 1024
    assert corr[0] == pytest.approx(1.0)


def test_scan_stops_after_first_peak():
    corr = np.array([1.0, 0.5, 0.95, 0.97, 0.96, 0.99])
    assert _scan_first_peak(corr) == (3, 0.97, True)


def test_scan_without_fall_keeps_best():
    corr = np.array([1.0, 0.2, 0.5, 0.92, 0.95])
    assert _scan_first_peak(corr) == (4, 0.95, False)


def test_scan_without_good_correlation():
    best, best_corr, stopped = _scan_first_peak(np.array([1.0, 0.5, 0.3, 0.4]))
    assert best == -1 and best_corr == 0.0 and not stopped


def test_interpolation_factor_is_fixed():
    assert INTERPOLATION_FACTOR == 8.0


@pytest.mark.parametrize("signal, sr", [
    ([], SR),
    ([0.5, -0.5, 0.5], SR),
    (np.array([0.1, np.inf, 0.2, 0.3]), SR),
    (np.ones(1024), -44100),
])
def test_invalid_frames(signal, sr):
    assert estimate_autocorr(signal, sr).status is PitchStatus.INVALID_FRAME
