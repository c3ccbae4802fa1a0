"""
Domain Exceptions
=================
Every failure the user can see derives from GradientSlideError, so the view
layer can catch one type and show its message as advisory text.
"""


class GradientSlideError(Exception):
    """Base class for all user-facing errors of the application."""


class ExpressionError(GradientSlideError):
    """The flat expression could not be parsed or compiled."""


class InvalidStartPointError(GradientSlideError):
    """The start coordinates are not parseable, finite numbers."""


class PathTooShortError(GradientSlideError):
    """A trace recorded fewer than two waypoints."""


class SettingsError(GradientSlideError):
    """The view settings are inconsistent (e.g. min >= max)."""
