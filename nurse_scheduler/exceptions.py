"""
Error taxonomy for the scheduling engine.

Constraint failures during search are never raised: an infeasible seed is a
None result and an invalid neighbour is a skipped iteration. Only malformed
input and configuration surface as exceptions.
"""


class SchedulerError(Exception):
    """Base class for all scheduler errors."""

    pass


class InvalidInputError(SchedulerError, ValueError):
    """Raised when the scheduling context or generation options are malformed."""

    pass


class ConfigError(SchedulerError, ValueError):
    """Raised when the scheduler configuration cannot be loaded or is invalid."""

    pass


# Mapping of scheduler exceptions to HTTP status codes for callers that expose
# generation over an API
CUSTOM_ERRORS = {
    InvalidInputError: 400,
    ConfigError: 500,
}
