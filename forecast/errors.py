"""Errors raised by the recurrence and projection engine."""


class InvalidRule(ValueError):
    """A calendar or recurring rule was constructed with invalid fields.

    Raised at construction time and never recovered from inside the engine.
    """


class ProjectionUnavailable(RuntimeError):
    """The starting balance could not be read, so no projection was built."""
