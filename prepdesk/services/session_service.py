"""In-memory registry of hosted test-taking sessions."""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from fastapi import HTTPException

from prepdesk.config import SESSION_CLEANUP_INTERVAL_SECONDS, SESSION_IDLE_MINUTES
from prepdesk.session import SessionMode, TestSession
from prepdesk.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    session: TestSession
    last_seen: datetime = field(default_factory=utc_now)


class SessionRegistry:
    """
    Sessions keyed by id. Single process, accessed from the event loop only.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SessionEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, session: TestSession) -> str:
        session_id = uuid.uuid4().hex
        self._entries[session_id] = SessionEntry(session=session)
        return session_id

    def get(self, session_id: str) -> TestSession:
        entry = self._entries.get(session_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Session not found")
        entry.last_seen = utc_now()
        return entry.session

    def discard(self, session_id: str) -> bool:
        """Remove a session and stop its timer."""
        entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        entry.session.close()
        return True

    def purge_idle(self, max_idle: timedelta, now: datetime | None = None) -> int:
        """Drop sessions not touched within ``max_idle``."""
        cutoff = (now or utc_now()) - max_idle
        stale = [
            session_id
            for session_id, entry in self._entries.items()
            if entry.last_seen < cutoff
        ]
        for session_id in stale:
            self.discard(session_id)
        if stale:
            logger.info("Dropped %d idle sessions", len(stale))
        return len(stale)

    def close_all(self) -> None:
        for session_id in list(self._entries):
            self.discard(session_id)


registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """Dependency returning the process-wide registry."""
    return registry


async def purge_idle_sessions_forever(target: SessionRegistry) -> None:
    """Periodically drop idle sessions; runs until cancelled."""
    max_idle = timedelta(minutes=SESSION_IDLE_MINUTES)
    while True:
        await asyncio.sleep(SESSION_CLEANUP_INTERVAL_SECONDS)
        try:
            target.purge_idle(max_idle)
        except Exception as e:
            logger.error("Failed to purge idle sessions: %s", e)


def serialize_session(session_id: str, session: TestSession) -> dict[str, object]:
    """Build the session view rendered by the test-taking screen."""
    review = session.context.mode is SessionMode.REVIEW

    questions = []
    for entry in session.progress:
        questions.append(
            {
                "id": entry.question_id,
                "subject": entry.question.subject,
                "order": entry.question.order,
                "status": entry.status,
                "selectedOption": entry.selected_option,
                "markedForReview": session.is_marked_for_review(entry.question_id),
                "outcome": session.review_outcome(entry.question_id),
            }
        )

    current = session.current_question
    current_view = None
    if current is not None:
        question = current.question
        current_view = {
            "index": session.current_index,
            "id": question.id,
            "subject": question.subject,
            "order": question.order,
            "question": question.text,
            "image": question.image,
            "options": list(question.options),
            "selectedOption": current.selected_option,
            "status": current.status,
            "markedForReview": session.is_marked_for_review(question.id),
            "correctAnswer": question.correct_answer if review else None,
            "solution": question.solution if review else None,
        }

    return {
        "sessionId": session_id,
        "testId": session.test.id,
        "title": session.test.title,
        "duration": session.test.duration,
        "mode": session.context.mode,
        "theme": session.context.theme,
        "elapsed": session.formatted_time,
        "currentIndex": session.current_index,
        "currentQuestion": current_view,
        "questions": questions,
        "subjects": [
            {
                "subject": group.subject,
                "firstOrder": group.first_order,
                "lastOrder": group.last_order,
                "questionIds": [entry.question_id for entry in group.entries],
            }
            for group in session.subject_groups()
        ],
        "counts": session.counts(),
        "resultId": session.result_id,
    }
