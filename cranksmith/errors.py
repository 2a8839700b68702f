"""
Error types raised by the drivetrain engine.

Only malformed input is an error. Unknown reference-table keys (an unlisted
bike type, brand or freehub) are never raised: lookups degrade to a default
entry and the compatibility report carries an info warning instead.
"""


class CrankSmithError(Exception):
    """Base class for all cranksmith errors."""


class InvalidInputError(CrankSmithError, ValueError):
    """
    A setup that cannot be analyzed.

    Raised for missing components, zero or negative tooth counts and
    non-positive physical dimensions. Subclasses ValueError so callers that
    already handle pydantic validation errors catch it the same way.
    """
