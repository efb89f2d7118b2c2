"""
Exception hierarchy for the interview engine.

Administrative operations (session creation, lifecycle transitions,
continuation) raise these; normal interview turns surface soft failures as
`redirect` actions instead.
"""

from __future__ import annotations
from typing import Any, Optional


class InterviewSystemError(Exception):
    """Base error carrying a machine-readable code and details."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ValidationError(InterviewSystemError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        if field:
            self.details["field"] = field


class InvalidRoleInputError(ValidationError):
    """Unrecognized role or experience-level token."""

    def __init__(self, message: str, available_options: list[str]):
        super().__init__(message)
        self.error_code = "INVALID_ROLE_INPUT"
        self.available_options = list(available_options)
        self.details["available_options"] = self.available_options


class SessionError(InterviewSystemError):
    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message, "SESSION_ERROR")
        self.details["session_id"] = session_id


class SessionNotFoundError(SessionError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}", session_id=session_id)
        self.error_code = "SESSION_NOT_FOUND"


class InvalidStateTransitionError(SessionError):
    def __init__(
        self, current_state: str, attempted_action: str, session_id: Optional[str] = None
    ):
        super().__init__(
            f"Cannot {attempted_action} from state {current_state}",
            session_id=session_id,
        )
        self.error_code = "INVALID_STATE_TRANSITION"
        self.current_state = current_state
        self.attempted_action = attempted_action
        self.details.update(
            {"current_state": current_state, "attempted_action": attempted_action}
        )


class ContinuationError(InterviewSystemError):
    """Continuation requested without required fields or with an unknown type."""

    def __init__(self, message: str):
        super().__init__(message, "CONTINUATION_ERROR")


class ResumeParsingError(InterviewSystemError):
    def __init__(self, message: str, original_error: Optional[str] = None):
        super().__init__(message, "RESUME_PARSING_ERROR")
        self.details["original_error"] = original_error


class InteractionModeError(InterviewSystemError):
    def __init__(self, message: str, mode: Optional[str] = None):
        super().__init__(message, "INTERACTION_MODE_ERROR")
        self.details["mode"] = mode
