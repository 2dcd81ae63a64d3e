"""Turns final progress state into a submission and sends it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from prepdesk.session.errors import SubmissionFailed, TestSessionError
from prepdesk.session.gateway import TestGateway
from prepdesk.session.progress import QuestionProgress
from prepdesk.session.timer import ElapsedTime
from prepdesk.session.types import TestWithQuestions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    question_id: str
    selected_answer: str


@dataclass(frozen=True)
class Submission:
    test_id: str
    user_id: str
    duration: int  # whole minutes
    responses: tuple[Response, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, object]:
        """Wire shape accepted by the submit endpoint."""
        return {
            "testId": self.test_id,
            "userId": self.user_id,
            "duration": self.duration,
            "responses": [
                {"questionId": item.question_id, "selectedAnswer": item.selected_answer}
                for item in self.responses
            ],
        }


def build_submission(
    test: TestWithQuestions,
    progress: Iterable[QuestionProgress],
    elapsed: ElapsedTime,
    user_id: str,
) -> Submission:
    """Collect answered questions; unanswered ones are left out, not sent empty."""
    responses = tuple(
        Response(question_id=entry.question_id, selected_answer=entry.selected_option)
        for entry in progress
        if entry.selected_option
    )
    return Submission(
        test_id=test.id,
        user_id=user_id,
        duration=elapsed.total_minutes,
        responses=responses,
    )


async def submit(gateway: TestGateway, submission: Submission) -> str:
    """
    Send the submission and return the result id.
    Any failure is reported as SubmissionFailed; nothing is retried.
    """
    try:
        result_id = await gateway.submit_test(submission.to_payload())
    except SubmissionFailed:
        raise
    except TestSessionError as exc:
        raise SubmissionFailed(str(exc)) from exc
    logger.info(
        "Submitted test %s for %s: %d responses, result %s",
        submission.test_id,
        submission.user_id,
        len(submission.responses),
        result_id,
    )
    return result_id
