from enum import Enum


class KnownField(str, Enum):
    """
    ADIF fields which get special treatment when filtering, sorting and displaying
    """

    CALL = "call"
    BAND = "band"
    MODE = "mode"
    QSO_DATE = "qso_date"
    TIME_ON = "time_on"


class Validity(Enum):
    UNKNOWN = 0
    VALID = 1
    INVALID = 2


class LoginState(Enum):
    IDLE = 0
    LOGGING_IN = 1
    SUCCESS = 2
    FAILED = 3
