"""Exception base for dotkit.

Only fatal conditions are exceptions: a bad manifest
(``ConfigError``) and a failed bootstrap step (``StepFailed``).
Missing link sources and ambiguous restore targets are reported as
``LinkOutcome`` values instead, so one bad entry never stops the rest.
"""


class DotkitError(Exception):
    """Base class for fatal dotkit errors."""
