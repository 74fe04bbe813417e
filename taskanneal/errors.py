"""Exception hierarchy shared by the optimizer and its collaborators."""


class TaskAnnealError(Exception):
    """Base class for all errors raised by taskanneal."""


class ConfigurationError(TaskAnnealError, ValueError):
    """Annealing settings outside their admissible ranges."""


class DegenerateLandscapeError(TaskAnnealError, ArithmeticError):
    """Temperature calibration observed no profit-decreasing move.

    The mean downhill delta is undefined in that case, so no starting
    temperature can be derived for the requested acceptance rate.
    """


class InstanceError(TaskAnnealError, ValueError):
    """Malformed or unreadable problem instance."""


class CandidateError(TaskAnnealError, ValueError):
    """Candidate referencing a task index outside the instance."""
