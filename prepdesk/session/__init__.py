"""Test-taking session engine."""
from prepdesk.session.engine import TestSession
from prepdesk.session.errors import (
    InvalidOption,
    NavigationError,
    ReadOnlySession,
    ResultNotFound,
    SubmissionFailed,
    TestNotFound,
    TestSessionError,
    TransportError,
    UnknownQuestion,
)
from prepdesk.session.gateway import TestGateway
from prepdesk.session.types import (
    Question,
    QuestionStatus,
    ReviewOutcome,
    SessionContext,
    SessionMode,
    Subject,
    TestWithQuestions,
    Theme,
)

__all__ = [
    "InvalidOption",
    "NavigationError",
    "Question",
    "QuestionStatus",
    "ReadOnlySession",
    "ResultNotFound",
    "ReviewOutcome",
    "SessionContext",
    "SessionMode",
    "Subject",
    "SubmissionFailed",
    "TestGateway",
    "TestNotFound",
    "TestSession",
    "TestSessionError",
    "TestWithQuestions",
    "Theme",
    "TransportError",
    "UnknownQuestion",
]
