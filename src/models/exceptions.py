class ZScoreException(Exception):
    """Base class for exceptions raised while resolving a z-score"""


class InvalidArgument(ZScoreException, ValueError):
    """Raised when the rule function receives the wrong number of arguments,
    or when age/weight cannot be parsed as a small non-negative integer.
    """


class ReferenceLookupError(ZScoreException, LookupError):
    """Raised when the reference table has no row for the requested
    (sex, age) key, or a row has no tabulated entry for a requested weight.
    """


class UnknownFunctionError(ZScoreException, KeyError):
    """Raised when a rule function name is not registered."""


class ReferenceDataError(ZScoreException):
    """Raised when embedded reference data violates the SD row layout
    (exactly seven strictly increasing weights).
    """
