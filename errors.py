"""
Exceptions raised while locating, reading, typesetting and fitting equations.
Every error carries a message meant to be shown to the user as-is.
"""


class EquationViewerError(Exception):
    pass


# --- Line fetching ---

class FetchError(EquationViewerError):
    pass


class SourceNotFound(FetchError):
    pass


class LineOutOfRange(FetchError):
    pass


class NoHistory(FetchError):
    pass


# --- Reconstruction ---

class ReconstructError(EquationViewerError):
    pass


class StartLineUnavailable(ReconstructError):
    pass


class NoPrecedingContext(StartLineUnavailable):
    """There is nothing above the call to read an expression from."""


# --- Typesetting ---

class TypesetError(EquationViewerError):
    pass


class InvalidExpression(TypesetError):
    pass


# --- Fitting ---

class ScalerError(EquationViewerError):
    pass


class DegenerateRender(ScalerError):
    """The rendered text has no extent, so it can't be scaled to fit."""


class ScalingDidNotConverge(ScalerError):
    pass


class NoCallerContext(EquationViewerError):
    pass
