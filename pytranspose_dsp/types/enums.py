from enum import Enum


class PitchStatus(Enum):
    DETECTED = 0
    SILENT = 1                # RMS sous le seuil (estimateur autocorrélation)
    NO_PERIODICITY = 2        # aucun lag ne passe le critère
    OUT_OF_RANGE = 3          # fréquence trouvée mais hors bande
    INVALID_FRAME = 4         # trame inexploitable (vide, NaN, sr <= 0...)
    EMPTY_WINDOW = 5          # rien n'a été collecté pendant la session


class ReductionMode(Enum):
    MEAN_FILTERED = "mean_filtered"   # capture live
    MEDIAN = "median"                 # analyse de fichier


class EstimatorKind(Enum):
    DIFFERENCE_FUNCTION = "yin"
    AUTOCORRELATION = "acf"


class SessionState(Enum):
    OPEN = 0
    SAMPLING = 1
    CLOSED = 2
