"""Loads a test's question set and seeds the initial progress records."""
import logging

from prepdesk.session.gateway import TestGateway
from prepdesk.session.progress import QuestionProgress
from prepdesk.session.types import QuestionStatus, TestWithQuestions

logger = logging.getLogger(__name__)


class QuestionSetLoader:
    """Fetches a test through the gateway and normalizes question order."""

    def __init__(self, gateway: TestGateway):
        self.gateway = gateway

    async def load(self, test_id: str) -> TestWithQuestions:
        """
        Fetch the test with its questions in ordinal order.

        Raises TestNotFound or TransportError from the gateway unchanged;
        callers show them and do not retry.
        """
        test = await self.gateway.fetch_test(test_id)
        # sorted() is stable, so equal ordinals keep the fetched order
        questions = tuple(sorted(test.questions, key=lambda question: question.order))
        logger.info("Loaded test %s with %d questions", test.id, len(questions))
        return TestWithQuestions(
            id=test.id,
            title=test.title,
            duration=test.duration,
            questions=questions,
        )


def seed_progress(
    test: TestWithQuestions,
    historical: dict[str, str] | None = None,
) -> list[QuestionProgress]:
    """
    Build the initial progress list: the first question is CURRENT, the rest
    UNATTEMPTED. ``historical`` pre-fills answers when reviewing a submission.
    """
    historical = historical or {}
    progress = []
    for index, question in enumerate(test.questions):
        progress.append(
            QuestionProgress(
                question=question,
                status=QuestionStatus.CURRENT if index == 0 else QuestionStatus.UNATTEMPTED,
                selected_option=historical.get(question.id) or None,
            )
        )
    return progress
