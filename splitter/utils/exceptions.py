"""Domain errors raised by services."""


class SplitterError(Exception):
    """Base error for the splitter domain."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(SplitterError):
    """Sign-up or sign-in failed."""

    title = "Authentication failed"


class ValidationError(SplitterError):
    """Input rejected before it reached the database."""

    title = "Missing Information"


class NotFoundError(SplitterError):
    """Referenced row does not exist."""

    title = "Not found"
