import numpy as np
import librosa
from typing import Literal

MIN_FRAME_LENGTH = 4


def as_frame(signal, sr: int) -> np.ndarray | None:
    """
    Valide une trame avant estimation.

    Retourne le signal en float64 1D, ou None si la trame est inexploitable
    (sr <= 0, moins de MIN_FRAME_LENGTH échantillons, pas 1D, NaN/inf).
    Les estimateurs traduisent None en PitchStatus.INVALID_FRAME.
    """
    try:
        sr = int(sr)
        x = np.asarray(signal, dtype=np.float64)
    except (TypeError, ValueError):
        return None

    if sr <= 0 or x.ndim != 1 or x.size < MIN_FRAME_LENGTH:
        return None
    if not np.all(np.isfinite(x)):
        return None
    return x


def rms(x: np.ndarray) -> float:
    return float(np.sqrt(np.mean(np.square(x)))) if x.size else 0.0


def select_channel(
    y: np.ndarray,
    strategy: Literal["first", "mono", "dominant"] = "first",
) -> np.ndarray:
    """
    Réduit un signal multi-canaux (nb_canaux x nb_samples) à un vecteur 1D.

    Args:
        y: np.ndarray
            Signal audio brut (1D mono ou 2D multi-canaux).
        strategy: str
            - "first"    : canal 0 uniquement (comportement historique).
            - "mono"     : moyenne des canaux (librosa.to_mono).
            - "dominant" : conserve uniquement le canal le plus fort.
    """
    y = np.asarray(y, dtype=np.float64)
    if y.ndim == 1:
        return y  # déjà mono

    if strategy == "first":
        return y[0]

    elif strategy == "mono":
        return librosa.to_mono(y)

    elif strategy == "dominant":
        rms_per_channel = [rms(chan) for chan in y]
        return y[int(np.argmax(rms_per_channel))]

    else:
        raise ValueError(f"Unknown strategy '{strategy}'")
