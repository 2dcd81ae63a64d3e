import asyncio
import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database before prepdesk is imported
_DB_DIR = Path(tempfile.mkdtemp(prefix="prepdesk-tests-"))
os.environ["DB_DIR"] = str(_DB_DIR)
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'prepdesk-test.db'}"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from prepdesk.database import Base, SessionLocal, engine, init_db  # noqa: E402
from prepdesk.models import TestImport  # noqa: E402
from prepdesk.services import test_service  # noqa: E402
from prepdesk.services.session_service import registry  # noqa: E402
from prepdesk.session import (  # noqa: E402
    Question,
    ResultNotFound,
    Subject,
    SubmissionFailed,
    TestNotFound,
    TestWithQuestions,
    TransportError,
)

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "samples"

THREE_QUESTION_DOC = {
    "id": "t1",
    "title": "Test Paper 1",
    "duration": 60,
    "questions": [
        {
            "id": "Q1",
            "subject": "Physics",
            "order": 1,
            "question": "Unit of force?",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": "B",
        },
        {
            "id": "Q2",
            "subject": "Physics",
            "order": 2,
            "question": "Unit of power?",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": "C",
        },
        {
            "id": "Q3",
            "subject": "Chemistry",
            "order": 3,
            "question": "Symbol of sodium?",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": "A",
            "solution": "Na, from natrium.",
        },
    ],
}


def make_question(question_id: str, subject: Subject, order: int, correct: str = "A") -> Question:
    return Question(
        id=question_id,
        subject=subject,
        order=order,
        text=f"Question {question_id}",
        options=("A", "B", "C", "D"),
        correct_answer=correct,
    )


@pytest.fixture
def three_question_test() -> TestWithQuestions:
    return TestWithQuestions(
        id="t1",
        title="Test Paper 1",
        duration=60,
        questions=(
            make_question("Q1", Subject.PHYSICS, 1, correct="B"),
            make_question("Q2", Subject.PHYSICS, 2, correct="C"),
            make_question("Q3", Subject.CHEMISTRY, 3, correct="A"),
        ),
    )


class FakeGateway:
    """In-memory TestGateway recording what it was sent."""

    def __init__(self, tests: list[TestWithQuestions] | None = None):
        self.tests = {test.id: test for test in tests or []}
        self.results: dict[str, dict[str, str]] = {}
        self.submitted: list[dict[str, object]] = []
        self.fail_fetch = False
        self.fail_submit = False
        self.submit_delay = 0.0

    async def fetch_test(self, test_id: str) -> TestWithQuestions:
        if self.fail_fetch:
            raise TransportError("backend unreachable")
        if test_id not in self.tests:
            raise TestNotFound(test_id)
        return self.tests[test_id]

    async def submit_test(self, payload: dict[str, object]) -> str:
        if self.submit_delay:
            await asyncio.sleep(self.submit_delay)
        if self.fail_submit:
            raise SubmissionFailed("backend rejected the submission")
        self.submitted.append(payload)
        result_id = f"result-{len(self.submitted)}"
        self.results[result_id] = {
            item["questionId"]: item["selectedAnswer"] for item in payload["responses"]
        }
        return result_id

    async def fetch_responses(self, result_id: str) -> dict[str, str]:
        if result_id not in self.results:
            raise ResultNotFound(result_id)
        return self.results[result_id]


@pytest.fixture
def fake_gateway(three_question_test: TestWithQuestions) -> FakeGateway:
    return FakeGateway([three_question_test])


@pytest.fixture
def fresh_db():
    """Empty tables on the app database."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(fresh_db):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_test_id(db) -> str:
    return test_service.import_test(db, TestImport.model_validate(THREE_QUESTION_DOC)).id


@pytest.fixture
def client(fresh_db):
    from prepdesk.app import app

    with TestClient(app) as test_client:
        yield test_client
    registry.close_all()
