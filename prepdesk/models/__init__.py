"""Pydantic models."""
from prepdesk.models.sessions import (
    NavigateRequest,
    SelectOptionRequest,
    SessionStartRequest,
    SessionSubmitted,
    SessionView,
    ToggleReviewRequest,
)
from prepdesk.models.submissions import (
    ResponseItem,
    SubmissionCreated,
    SubmissionOut,
    SubmissionPayload,
)
from prepdesk.models.tests import QuestionImport, QuestionOut, TestImport, TestOut, TestSummary

__all__ = [
    "NavigateRequest",
    "QuestionImport",
    "QuestionOut",
    "ResponseItem",
    "SelectOptionRequest",
    "SessionStartRequest",
    "SessionSubmitted",
    "SessionView",
    "SubmissionCreated",
    "SubmissionOut",
    "SubmissionPayload",
    "TestImport",
    "TestOut",
    "TestSummary",
    "ToggleReviewRequest",
]
