"""Error hierarchy for prtui.

Every failure the session can report derives from `PullRequestError`, so the
state machine catches a single base class and turns it into a status message.
"""

from __future__ import annotations


class PullRequestError(Exception):
    """Base error for all prtui failures."""


class InvalidInputError(PullRequestError):
    """Raised when a local precondition fails before any network call."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid input: {field} - {reason}")
        self.field = field
        self.reason = reason


class ValidationFailedError(PullRequestError):
    """Raised when GitHub rejects a request as semantically invalid (HTTP 422)."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Validation failed: {message}")
        self.message = message


class RepoNotFoundError(PullRequestError):
    """Raised when the repository does not exist or is not accessible (HTTP 404)."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Repository not found: {path}")
        self.path = path


class ApiError(PullRequestError):
    """Raised for transport failures and any unclassified GitHub API error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(f"GitHub API error: {message}")
        self.message = message
        self.status_code = status_code


class PersistenceError(PullRequestError):
    """Raised when the credential cannot be written to the config file."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Could not save credential: {message}")
        self.message = message
