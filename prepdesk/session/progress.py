"""
In-memory progress state for a single test-taking session.

Each question gets one QuestionProgress record holding its status and the
selected answer. The store also owns the index of the displayed question,
which the navigation controller moves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from prepdesk.session.errors import InvalidOption, UnknownQuestion
from prepdesk.session.types import Question, QuestionStatus, ReviewOutcome, Subject

logger = logging.getLogger(__name__)


@dataclass
class QuestionProgress:
    """Mutable progress record wrapping one question."""

    question: Question
    status: QuestionStatus = QuestionStatus.UNATTEMPTED
    selected_option: str | None = None
    # Survives promotion to CURRENT, so a displayed question keeps its review mark
    review_flag: bool = False
    # Status to restore when the review mark is removed
    status_before_review: QuestionStatus | None = field(default=None, repr=False)

    @property
    def question_id(self) -> str:
        return self.question.id

    @property
    def is_answered(self) -> bool:
        return bool(self.selected_option)

    @property
    def settled_status(self) -> QuestionStatus:
        """Status for a question that is neither displayed nor flagged."""
        if self.is_answered:
            return QuestionStatus.ATTEMPTED
        return QuestionStatus.UNATTEMPTED


@dataclass
class SubjectGroup:
    """Questions of one subject, in test order."""

    subject: Subject
    entries: list[QuestionProgress]

    @property
    def first_order(self) -> int:
        return self.entries[0].question.order

    @property
    def last_order(self) -> int:
        return self.entries[-1].question.order


class ProgressStore:
    """Progress records keyed by question id, in test order."""

    def __init__(self, progress: list[QuestionProgress], read_only: bool = False):
        self._progress = list(progress)
        self._index_by_id = {
            entry.question_id: index for index, entry in enumerate(self._progress)
        }
        self.read_only = read_only
        self.current_index = 0

    def __len__(self) -> int:
        return len(self._progress)

    def __iter__(self):
        return iter(self._progress)

    @property
    def entries(self) -> list[QuestionProgress]:
        return list(self._progress)

    def at(self, index: int) -> QuestionProgress:
        return self._progress[index]

    def index_of(self, question_id: str) -> int:
        try:
            return self._index_by_id[question_id]
        except KeyError:
            raise UnknownQuestion(question_id) from None

    def get(self, question_id: str) -> QuestionProgress:
        return self._progress[self.index_of(question_id)]

    @property
    def current(self) -> QuestionProgress | None:
        if not self._progress:
            return None
        return self._progress[self.current_index]

    def select_option(self, question_id: str, option: str) -> QuestionProgress:
        """
        Record an answer. A question marked for review keeps its status;
        any other question becomes attempted.
        """
        entry = self.get(question_id)
        if self.read_only:
            logger.debug("Ignoring answer for %s in read-only session", question_id)
            return entry
        if option not in entry.question.options:
            raise InvalidOption(f"{option!r} is not an option of question {question_id}")

        entry.selected_option = option
        if entry.status is not QuestionStatus.REVIEW and not entry.review_flag:
            entry.status = QuestionStatus.ATTEMPTED
        return entry

    def toggle_review(self, question_id: str) -> QuestionProgress:
        """Mark a question for review, or remove the mark."""
        index = self.index_of(question_id)
        entry = self._progress[index]
        if self.read_only:
            logger.debug("Ignoring review toggle for %s in read-only session", question_id)
            return entry

        if entry.status is QuestionStatus.REVIEW:
            entry.status = self._status_after_review(entry, index)
            entry.review_flag = False
            entry.status_before_review = None
        elif entry.review_flag:
            # Displayed question that was promoted while marked
            entry.review_flag = False
            entry.status_before_review = None
        else:
            entry.status_before_review = entry.status
            entry.status = QuestionStatus.REVIEW
            entry.review_flag = True
        return entry

    def _status_after_review(self, entry: QuestionProgress, index: int) -> QuestionStatus:
        # CURRENT is only restored on the displayed question
        if entry.status_before_review is QuestionStatus.CURRENT and index == self.current_index:
            return QuestionStatus.CURRENT
        return entry.settled_status

    def is_marked_for_review(self, question_id: str) -> bool:
        entry = self.get(question_id)
        return entry.status is QuestionStatus.REVIEW or entry.review_flag

    # Counts overlap on purpose: an answered question under review is counted
    # both as attempted and as review, and the displayed unanswered question
    # counts as unattempted.

    @property
    def attempted_count(self) -> int:
        return sum(
            1
            for entry in self._progress
            if entry.status is QuestionStatus.ATTEMPTED or entry.is_answered
        )

    @property
    def review_count(self) -> int:
        return sum(1 for entry in self._progress if entry.status is QuestionStatus.REVIEW)

    @property
    def unattempted_count(self) -> int:
        return sum(
            1
            for entry in self._progress
            if entry.status in (QuestionStatus.UNATTEMPTED, QuestionStatus.CURRENT)
            and not entry.is_answered
        )

    def counts(self) -> dict[str, int]:
        return {
            "attempted": self.attempted_count,
            "review": self.review_count,
            "unattempted": self.unattempted_count,
        }

    def subject_groups(self) -> list[SubjectGroup]:
        """Group questions by subject in order of first appearance."""
        groups: dict[Subject, SubjectGroup] = {}
        for entry in self._progress:
            subject = entry.question.subject
            if subject not in groups:
                groups[subject] = SubjectGroup(subject=subject, entries=[])
            groups[subject].entries.append(entry)
        return list(groups.values())

    def review_outcome(self, question_id: str) -> ReviewOutcome | None:
        """Correctness of the recorded answer, for review-mode highlighting."""
        entry = self.get(question_id)
        if not self.read_only or not entry.is_answered:
            return None
        if entry.selected_option == entry.question.correct_answer:
            return ReviewOutcome.CORRECT
        return ReviewOutcome.INCORRECT
