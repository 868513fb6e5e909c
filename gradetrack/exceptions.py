"""Custom exceptions for the grade tracker."""


class GradeTrackError(Exception):
    """Base exception for grade tracker errors."""
    pass


class ValidationError(GradeTrackError):
    """User input failed a local invariant; nothing was changed."""
    pass


class PersistenceError(GradeTrackError):
    """
    A create/update/delete against the official record failed.

    ``operation`` is the change that was being applied when it failed, if
    the failure happened during a commit.
    """

    def __init__(self, message: str, operation=None):
        super().__init__(message)
        self.operation = operation


class ConfigError(GradeTrackError):
    """Settings are missing or invalid."""
    pass
