from __future__ import annotations

from typing import Optional


class StudyToolError(Exception):
    """Base class for errors that end a request with a JSON `{"error": ...}` body."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None) -> None:
        self.public_message = (message or "").strip() or self.default_message
        super().__init__(self.public_message)


class ValidationError(StudyToolError):
    """Bad or missing input. The message is shown to the user as is."""

    status_code = 400
    default_message = "Invalid request"


class UpstreamError(StudyToolError):
    """The extraction library or the LLM service failed."""

    status_code = 500
    default_message = "The AI service is unavailable right now"


class FormatError(StudyToolError):
    """The LLM replied with something that is not the expected JSON object."""

    status_code = 500
    default_message = "The AI returned an invalid response. Please try again."

    def __init__(self, reason: str = "") -> None:
        # the reason is for logs only, users always see the fixed message
        self.reason = reason
        super().__init__(self.default_message)
