"""Project exception hierarchy."""
from __future__ import annotations


class AssignGradersError(Exception):
    """Base class for all assign-graders exceptions."""


# -----------------------------
# User / configuration errors
# -----------------------------

class UserError(AssignGradersError):
    """Bad input from whoever runs the tool. Report the message and stop."""


class ConfigError(UserError):
    """Raised when the graders file or environment is missing or malformed."""


class NotEnoughGradersError(UserError):
    """Raised when fewer than two distinct graders can review a job."""

    def __init__(self, job: str) -> None:
        super().__init__(f"Not enough graders to pick from for job {job!r}")
        self.job = job


# -----------------------------
# UI environment errors
# -----------------------------

class UIError(AssignGradersError):
    """The Greenhouse UI did not look the way we expect."""


class UITimeoutError(UIError):
    """Raised when an element never shows up within the timeout."""


class CurrentUserNotFoundError(UIError):
    """Raised when the signed-in user's name can't be read from the page."""


class ListingExhaustedError(AssignGradersError):
    """Raised when a consumed application listing is iterated again."""
