# errors.py

class SimulatorError(Exception):
    """Base class for every error raised by the simulation engines."""


class InvalidConfiguration(SimulatorError, ValueError):
    """
    Raised when simulation inputs are rejected before any state is built.

    Examples: a frame count below 1, a non-positive process size, an empty
    reference string or hole list, or a token that is not a number.
    """


class ExhaustedError(SimulatorError):
    """
    Raised when stepping a paging session that already replayed every access.

    This is the normal "simulation complete" signal. The final counts are
    attached so the caller can still report them.
    """

    def __init__(self, counts=None, message="Step run finished."):
        super().__init__(message)
        self.counts = counts
