"""Core enumerations for blockopt"""

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of the client session"""
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    REFRESH_IN_FLIGHT = "refresh_in_flight"


class BlockField(str, Enum):
    """Spreadsheet columns, in the fixed order rows are mapped to"""
    MARK = "MARK"
    W1 = "A(W1)"
    W2 = "B(W2)"
    ANGLE = "C(angle)"
    LENGTH = "D(length)"
    THICKNESS = "Thickness"
    ALPHA = "α"
    VOLUME = "Volume"
    AD = "AD"
    UNIT_WEIGHT = "UW-(Kg)"
    COUNT = "Nos"
    TOTAL_VOLUME = "TOT V"
    TOTAL_WEIGHT = "TOT KG"
