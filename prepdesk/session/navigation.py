"""Moves the displayed question and applies the current/review hand-off."""
import logging

from prepdesk.session.errors import NavigationError
from prepdesk.session.progress import ProgressStore
from prepdesk.session.types import QuestionStatus

logger = logging.getLogger(__name__)


class NavigationController:
    """State-machine transitions between questions of a ProgressStore."""

    def __init__(self, store: ProgressStore):
        self.store = store

    @property
    def current_index(self) -> int:
        return self.store.current_index

    def go_to_question(self, index: int) -> None:
        """
        Display the question at ``index``.

        The question being left is demoted only while its status is still
        CURRENT; a question toggled to REVIEW while displayed keeps it.
        The target becomes CURRENT whatever its prior status, and a prior
        REVIEW status is carried in its review flag.
        """
        store = self.store
        if not len(store):
            return
        if index < 0 or index >= len(store):
            raise NavigationError(
                f"Question index {index} out of range (0-{len(store) - 1})"
            )

        leaving = store.at(store.current_index)
        if leaving.status is QuestionStatus.CURRENT:
            if leaving.review_flag:
                leaving.status = QuestionStatus.REVIEW
            else:
                leaving.status = leaving.settled_status

        target = store.at(index)
        if target.status is QuestionStatus.REVIEW:
            target.review_flag = True
        target.status = QuestionStatus.CURRENT
        store.current_index = index
        logger.debug("Moved to question %d (%s)", index, target.question_id)

    def go_to_next(self) -> None:
        if self.store.current_index < len(self.store) - 1:
            self.go_to_question(self.store.current_index + 1)

    def go_to_previous(self) -> None:
        if self.store.current_index > 0:
            self.go_to_question(self.store.current_index - 1)
