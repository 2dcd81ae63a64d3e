import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from prepdesk.models import SubmissionPayload, TestImport
from prepdesk.services import submission_service, test_service

from conftest import THREE_QUESTION_DOC


def test_import_and_serialize_test(db, seeded_test_id: str) -> None:
    test = test_service.get_test(db, seeded_test_id)
    payload = test_service.serialize_test(test)
    assert payload["id"] == "t1"
    assert [item["id"] for item in payload["questions"]] == ["Q1", "Q2", "Q3"]
    assert payload["questions"][0]["options"] == ["A", "B", "C", "D"]
    assert payload["questions"][0]["correctAnswer"] == "B"


def test_questions_come_back_in_ordinal_order(db) -> None:
    doc = {
        "title": "Reordered",
        "duration": 10,
        "questions": [
            {"subject": "Biology", "order": 2, "question": "second", "options": ["x", "y"], "correctAnswer": "x"},
            {"subject": "Physics", "order": 1, "question": "first", "options": ["x", "y"], "correctAnswer": "y"},
        ],
    }
    test = test_service.import_test(db, TestImport.model_validate(doc))
    loaded = test_service.get_test(db, test.id)
    assert [question.text for question in loaded.questions] == ["first", "second"]
    assert len(test.id) == 32


def test_duplicate_import_is_rejected(db, seeded_test_id: str) -> None:
    with pytest.raises(HTTPException) as excinfo:
        test_service.import_test(db, TestImport.model_validate(THREE_QUESTION_DOC))
    assert excinfo.value.status_code == 409


@pytest.mark.parametrize(
    "question",
    [
        {"subject": "Physics", "order": 1, "question": "q", "options": ["a", "b"], "correctAnswer": "c"},
        {"subject": "Physics", "order": 1, "question": "q", "options": ["a", "a"], "correctAnswer": "a"},
        {"subject": "Astrology", "order": 1, "question": "q", "options": ["a", "b"], "correctAnswer": "a"},
        {"subject": "Physics", "order": 0, "question": "q", "options": ["a", "b"], "correctAnswer": "a"},
    ],
)
def test_invalid_test_documents(question: dict) -> None:
    with pytest.raises(ValidationError):
        TestImport.model_validate({"title": "Bad", "duration": 5, "questions": [question]})


def test_list_tests_counts_questions(db, seeded_test_id: str) -> None:
    assert test_service.list_tests(db) == [
        {"id": "t1", "title": "Test Paper 1", "duration": 60, "questionCount": 3}
    ]


def test_create_and_read_submission(db, seeded_test_id: str) -> None:
    payload = SubmissionPayload(
        testId=seeded_test_id,
        userId="student-1",
        duration=42,
        responses=[
            {"questionId": "Q1", "selectedAnswer": "B"},
            {"questionId": "Q3", "selectedAnswer": "A"},
        ],
    )
    submission = submission_service.create_submission(db, payload)

    stored = submission_service.get_submission(db, submission.id)
    assert stored.answered_count == 2
    assert submission_service.response_map(stored) == {"Q1": "B", "Q3": "A"}

    data = submission_service.serialize_submission(stored)
    assert data["duration"] == 42
    assert data["userId"] == "student-1"
    assert data["submittedAt"].endswith("+00:00")

    assert [item.id for item in submission_service.get_submissions_by_user(db, "student-1")] == [
        submission.id
    ]
    assert submission_service.get_submissions_by_user(db, "someone-else") == []


def test_duplicate_responses_are_rejected(db, seeded_test_id: str) -> None:
    payload = SubmissionPayload(
        testId=seeded_test_id,
        userId="u",
        duration=1,
        responses=[
            {"questionId": "Q1", "selectedAnswer": "B"},
            {"questionId": "Q1", "selectedAnswer": "C"},
        ],
    )
    with pytest.raises(HTTPException) as excinfo:
        submission_service.create_submission(db, payload)
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize("bad_id", ["physics mock 1", "..", "a/b", "x" * 65])
def test_imported_ids_must_be_loadable_by_the_api(bad_id: str) -> None:
    with pytest.raises(ValidationError):
        TestImport.model_validate({**THREE_QUESTION_DOC, "id": bad_id})

    questions = [dict(THREE_QUESTION_DOC["questions"][0], id=bad_id)]
    with pytest.raises(ValidationError):
        TestImport.model_validate({**THREE_QUESTION_DOC, "questions": questions})
