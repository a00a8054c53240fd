# pytranspose_dsp/analysis/semitones.py
from __future__ import annotations

import math

from pytranspose_dsp.types.dataclasses import PitchEstimate, TranspositionPlan

REFERENCE_PITCH_HZ = 16.35   # C0 tempéré

SEMI_PREFIX = "[SEMI]"


def _semi_log(debug: bool, msg: str):
    if debug:
        print(f"{SEMI_PREFIX} {msg}")


class InvalidPitchError(ValueError):
    """Hauteur non finie ou <= 0 passée au calcul de transposition."""


def _check_pitch(freq, label: str) -> float:
    try:
        f = float(freq)
    except (TypeError, ValueError):
        raise InvalidPitchError(f"{label}: hauteur invalide {freq!r}") from None
    if not math.isfinite(f) or f <= 0:
        raise InvalidPitchError(f"{label}: hauteur invalide {f}")
    return f


def semitone_position(freq: float) -> int:
    """
    Position en demi-tons au-dessus de C0, tronquée vers -inf :
    floor(12 · log2(f / 16.35)). Négative sous C0.
    """
    f = _check_pitch(freq, "freq")
    return math.floor(12 * math.log2(f / REFERENCE_PITCH_HZ))


def semitone_shift(source_pitch: float, target_pitch: float) -> int:
    """
    Nombre de demi-tons pour amener source_pitch vers target_pitch.

    Lève InvalidPitchError si une des deux hauteurs est non finie ou <= 0.

        semitone_shift(440.0, 880.0)  # 12
        semitone_shift(440.0, 440.0)  # 0
    """
    src = _check_pitch(source_pitch, "source_pitch")
    tgt = _check_pitch(target_pitch, "target_pitch")
    return semitone_position(tgt) - semitone_position(src)


def shift_to_ratio(semitones: int) -> float:
    """Facteur de hauteur pour le pitch shifter : 2^(n/12)."""
    return 2.0 ** (semitones / 12.0)


def _as_freq(pitch: PitchEstimate | float | None) -> float | None:
    if isinstance(pitch, PitchEstimate):
        return pitch.frequency
    return pitch


def plan_transposition(
    song_pitch: PitchEstimate | float | None,
    voice_pitch: PitchEstimate | float | None,
    debug: bool = False,
) -> TranspositionPlan:
    """
    Transposition morceau → voix, côté appelant.

    Sur entrée invalide on ne lève pas : plan neutre (0 demi-ton, ratio 1.0)
    avec valid=False et la raison.
    """
    src = _as_freq(song_pitch)
    tgt = _as_freq(voice_pitch)
    try:
        n = semitone_shift(src, tgt)
    except InvalidPitchError as exc:
        _semi_log(debug, f"invalid pitch values for difference calculation: {exc}")
        return TranspositionPlan(source_pitch=src, target_pitch=tgt, reason=str(exc))

    _semi_log(
        debug,
        f"song move={semitone_position(src)} voice move={semitone_position(tgt)} → {n:+d}",
    )
    return TranspositionPlan(
        source_pitch=src,
        target_pitch=tgt,
        semitones=n,
        ratio=shift_to_ratio(n),
        valid=True,
    )
