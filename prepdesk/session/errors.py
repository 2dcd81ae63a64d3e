"""Error conditions raised by the test-taking session."""


class TestSessionError(Exception):
    """Base class for session errors surfaced to the host UI."""

    __test__ = False  # not a pytest test class


class TestNotFound(TestSessionError):
    """The test identifier does not resolve."""

    def __init__(self, test_id: str):
        super().__init__(f"Test not found: {test_id}")
        self.test_id = test_id


class TransportError(TestSessionError):
    """Fetching data from the backend failed."""


class SubmissionFailed(TestSessionError):
    """The submit call failed; progress is kept for a retry."""


class UnknownQuestion(TestSessionError):
    """The question identifier is not part of the loaded test."""

    def __init__(self, question_id: str):
        super().__init__(f"Unknown question: {question_id}")
        self.question_id = question_id


class InvalidOption(TestSessionError):
    """The selected answer is not one of the question's options."""


class NavigationError(TestSessionError):
    """Navigation target is outside the question set."""


class ReadOnlySession(TestSessionError):
    """The operation is not allowed in review mode or after submission."""


class ResultNotFound(TestSessionError):
    """No stored submission for the requested result id."""

    def __init__(self, result_id: str):
        super().__init__(f"Result not found: {result_id}")
        self.result_id = result_id
