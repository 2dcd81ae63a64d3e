"""
TestSession: the single-session test-taking engine.

Wires the loader, progress store, navigation controller, timer and
submission builder together and exposes the accessors and mutators a host
UI needs. All mutations run to completion on the event loop thread, so a
navigation transition is never interleaved with a timer tick.
"""
from __future__ import annotations

import logging

from prepdesk.session.errors import ReadOnlySession, TestSessionError
from prepdesk.session.gateway import TestGateway
from prepdesk.session.loader import QuestionSetLoader, seed_progress
from prepdesk.session.navigation import NavigationController
from prepdesk.session.progress import ProgressStore, QuestionProgress, SubjectGroup
from prepdesk.session.submission import Submission, build_submission, submit
from prepdesk.session.timer import SessionTimer
from prepdesk.session.types import (
    ReviewOutcome,
    SessionContext,
    SessionMode,
    TestWithQuestions,
)

logger = logging.getLogger(__name__)


class TestSession:
    __test__ = False  # not a pytest test class

    def __init__(
        self,
        test: TestWithQuestions,
        context: SessionContext,
        historical: dict[str, str] | None = None,
        timer: SessionTimer | None = None,
    ):
        self.test = test
        self.context = context
        self.store = ProgressStore(
            seed_progress(test, historical), read_only=context.read_only
        )
        self.navigation = NavigationController(self.store)
        self.timer = timer or SessionTimer()
        self.result_id: str | None = None
        self.submission: Submission | None = None
        self._submitting = False

    @classmethod
    async def open(
        cls,
        gateway: TestGateway,
        test_id: str,
        context: SessionContext,
        timer: SessionTimer | None = None,
    ) -> TestSession:
        """
        Load the test and build a session. In review mode the stored answers
        of ``context.result_id`` are fetched and pre-selected.
        """
        test = await QuestionSetLoader(gateway).load(test_id)
        historical = None
        if context.mode is SessionMode.REVIEW:
            if not context.result_id:
                raise TestSessionError("Review mode requires a result id")
            historical = await gateway.fetch_responses(context.result_id)
        logger.info(
            "Opened %s session on test %s for %s",
            context.mode.value,
            test.id,
            context.user_id,
        )
        return cls(test, context, historical=historical, timer=timer)

    # Lifecycle

    @property
    def finished(self) -> bool:
        return self.result_id is not None

    def start(self) -> None:
        """Start the timer. Review sessions are never timed."""
        if self.context.read_only or self.finished:
            return
        self.timer.start()

    def close(self) -> None:
        self.timer.stop()

    # Read accessors

    @property
    def current_index(self) -> int:
        return self.store.current_index

    @property
    def current_question(self) -> QuestionProgress | None:
        return self.store.current

    @property
    def progress(self) -> list[QuestionProgress]:
        return self.store.entries

    def counts(self) -> dict[str, int]:
        return self.store.counts()

    @property
    def formatted_time(self) -> str:
        return self.timer.elapsed.format()

    def is_marked_for_review(self, question_id: str) -> bool:
        return self.store.is_marked_for_review(question_id)

    def subject_groups(self) -> list[SubjectGroup]:
        return self.store.subject_groups()

    def review_outcome(self, question_id: str) -> ReviewOutcome | None:
        return self.store.review_outcome(question_id)

    # Mutators

    def _check_editable(self) -> None:
        if self.finished:
            raise ReadOnlySession("Test already submitted")
        if self._submitting:
            raise ReadOnlySession("Submission in progress")

    def select_option(self, question_id: str, option: str) -> QuestionProgress:
        self._check_editable()
        return self.store.select_option(question_id, option)

    def toggle_review(self, question_id: str) -> QuestionProgress:
        self._check_editable()
        return self.store.toggle_review(question_id)

    def go_to_question(self, index: int) -> None:
        self.navigation.go_to_question(index)

    def go_to_next(self) -> None:
        self.navigation.go_to_next()

    def go_to_previous(self) -> None:
        self.navigation.go_to_previous()

    def build_submission(self) -> Submission:
        return build_submission(
            self.test, self.store, self.timer.elapsed, self.context.user_id
        )

    async def submit(self, gateway: TestGateway) -> str:
        """
        Submit the answered questions. On SubmissionFailed the session is left
        as it was so the student can submit again. Answers cannot change while
        the request is in flight.
        """
        if self.context.read_only:
            raise ReadOnlySession("Review sessions cannot be submitted")
        self._check_editable()

        # Answers are frozen from here until the gateway replies
        self._submitting = True
        try:
            submission = self.build_submission()
            self.result_id = await submit(gateway, submission)
        finally:
            self._submitting = False
        self.submission = submission
        self.close()
        return self.result_id
