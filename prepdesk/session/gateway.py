"""Contract between the session core and the test/submission backend."""
from typing import Protocol

from prepdesk.session.types import TestWithQuestions


class TestGateway(Protocol):
    """
    Backend operations the session depends on. Implementations raise
    TestNotFound / TransportError from fetches and SubmissionFailed from
    submit; they never retry.
    """

    __test__ = False  # not a pytest test class

    async def fetch_test(self, test_id: str) -> TestWithQuestions:
        ...

    async def submit_test(self, payload: dict[str, object]) -> str:
        ...

    async def fetch_responses(self, result_id: str) -> dict[str, str]:
        """Answers of a stored submission, keyed by question id."""
        ...
