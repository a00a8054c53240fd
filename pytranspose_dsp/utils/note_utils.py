import math

NOTE_NAMES = ["C", "C♯", "D", "E♭", "E", "F", "F♯", "G", "G♯", "A", "B♭", "B"]


def freq_to_midi(freq: float, a4: float = 440.0) -> int | None:
    """Convertit une fréquence (Hz) en numéro MIDI arrondi (None si invalide)."""
    if freq is None or not math.isfinite(freq) or freq <= 0:
        return None
    return int(round(69 + 12 * math.log2(freq / a4)))


def freq_to_note(freq: float, a4: float = 440.0) -> str | None:
    """
    Nom de la note tempérée la plus proche, pour l'affichage.

        freq_to_note(440)    # "A4"
        freq_to_note(261.6)  # "C4"
        freq_to_note(-1)     # None
    """
    midi = freq_to_midi(freq, a4)
    if midi is None:
        return None
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"
