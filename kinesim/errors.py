"""Exception types raised by kinesim."""


class KinesimError(Exception):
    """Base class for kinesim errors."""
    pass


class UnknownBehaviorError(KinesimError, ValueError):
    """Raised when a behavior name is not registered."""
    pass


class ScenarioError(KinesimError):
    """Raised when a scenario file cannot be loaded or fails validation."""
    pass
