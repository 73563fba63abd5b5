"""Errors raised by the task/context engine.

All of them are recoverable: the state machine catches ValidationError
and shows its message until the next key press.
"""


class TuidoError(Exception):
    """Base class for tuido errors."""


class ValidationError(TuidoError, ValueError):
    """A user request was rejected; nothing was modified."""


class DuplicateContextError(ValidationError):
    def __init__(self, name, message="Context already exists"):
        super().__init__(message)
        self.name = name


class LastContextError(ValidationError):
    def __init__(self):
        super().__init__("Cannot delete the only context")


class InvalidDateError(ValidationError):
    def __init__(self, value):
        super().__init__("Invalid date format. Use YYYY-MM-DD")
        self.value = value


class NoTagsError(ValidationError):
    def __init__(self):
        super().__init__("No tags to remove")
