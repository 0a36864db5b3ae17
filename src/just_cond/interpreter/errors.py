"""Interpreter errors."""


class InterpreterError(Exception):
    """Base class for errors raised while evaluating a conditional."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class FatalError(InterpreterError):
    """The expression tree was built incorrectly; evaluation aborts.

    No partial truth value is meaningful once this is raised.
    """
