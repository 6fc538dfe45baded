"""Tests for the exception hierarchy."""

from taskgraph.core.constants import ErrorKind
from taskgraph.core.exceptions import (
    ConfigurationError,
    DataCorruptionError,
    DuplicateTaskError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    TaskGraphError,
)


class TestErrorKinds:
    """Each error carries a kind and its status equivalent."""

    def test_not_found(self) -> None:
        error = NotFoundError("abc")

        assert error.kind is ErrorKind.NOT_FOUND
        assert error.status_code == 404
        assert str(error) == "Task not found (task_id=abc)"

    def test_invalid_input(self) -> None:
        error = InvalidInputError("bad")

        assert error.kind is ErrorKind.INVALID_INPUT
        assert error.status_code == 400

    def test_duplicate_is_invalid_input(self) -> None:
        error = DuplicateTaskError("abc")

        assert isinstance(error, InvalidInputError)
        assert error.status_code == 400
        assert error.details["task_id"] == "abc"

    def test_store_unavailable(self) -> None:
        error = StoreUnavailableError("down", operation="commit")

        assert error.kind is ErrorKind.STORE_UNAVAILABLE
        assert error.status_code == 500
        assert error.details["operation"] == "commit"

    def test_data_corruption_names_field(self) -> None:
        error = DataCorruptionError("completed", "yes", expected="bool")

        assert error.kind is ErrorKind.DATA_CORRUPTION
        assert error.status_code == 500
        assert "completed" in str(error)
        assert error.details == {"field": "completed", "expected": "bool", "actual": "str"}

    def test_configuration_error_is_internal(self) -> None:
        error = ConfigurationError("missing")

        assert isinstance(error, TaskGraphError)
        assert error.kind is ErrorKind.CONFIGURATION
        assert error.kind.value == "configuration"
        assert error.status_code == 500

    def test_plain_message_without_details(self) -> None:
        assert str(TaskGraphError("plain")) == "plain"
