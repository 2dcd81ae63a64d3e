"""Database models."""
from prepdesk.models.db.submission import Submission, SubmissionResponse
from prepdesk.models.db.test import Question, Test

__all__ = [
    "Question",
    "Submission",
    "SubmissionResponse",
    "Test",
]
