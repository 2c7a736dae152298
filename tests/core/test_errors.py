"""Tests for error types and codes."""

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from covgraph.core.errors import (
    ConfigError,
    CovGraphError,
    ErrorCode,
    InputError,
    InvalidOptionsError,
    UnsupportedFormatError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CONFIG_FILE_NOT_FOUND, 2000),
            (ErrorCode.INPUT_FILE_NOT_FOUND, 3000),
            (ErrorCode.UNSUPPORTED_FORMAT, 3000),
            (ErrorCode.INVALID_OPTIONS, 3000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestCovGraphError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = CovGraphError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": False,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = CovGraphError(code=ErrorCode.UNSUPPORTED_FORMAT, message="Nope")

        # When
        text = str(error)

        # Then
        assert text == "[3002] UNSUPPORTED_FORMAT: Nope"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(CovGraphError) as exc_info:
            raise InputError.file_not_found("missing.xml")

        assert exc_info.value.code == ErrorCode.INPUT_FILE_NOT_FOUND

    def test_given_error_when_reraised_by_context_manager_then_unchanged(self) -> None:
        """contextlib re-raise assigns __traceback__ on the way out."""

        @contextmanager
        def scope() -> Iterator[None]:
            yield

        error = ConfigError.file_not_found("cfg.yaml")
        with pytest.raises(ConfigError) as exc_info, scope():
            raise error

        assert exc_info.value is error
        assert exc_info.value.__traceback__ is not None

    def test_given_errors_when_hashed_then_identity_based(self) -> None:
        a = InputError.file_not_found("x")
        b = InputError.file_not_found("x")
        assert a != b
        assert len({a, b}) == 2


class TestErrorFactories:
    """Factory classmethods build consistent messages and details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/x/.covgraph.yaml", "bad indent")
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/x/.covgraph.yaml" in error.message
        assert error.details == {"path": "/x/.covgraph.yaml", "reason": "bad indent"}

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("defaults.max_depth", 0, "too small")
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "0"

    def test_config_file_not_found(self) -> None:
        error = ConfigError.file_not_found("cfg.yaml")
        assert error.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_input_file_not_found_names_path(self) -> None:
        error = InputError.file_not_found("coverage.xml")
        assert error.message == "Coverage file not found: coverage.xml"
        assert error.code == ErrorCode.INPUT_FILE_NOT_FOUND
        assert error.details == {"path": "coverage.xml"}
        assert not error.retryable

    def test_unsupported_format_names_supported_list(self) -> None:
        error = UnsupportedFormatError.exhausted(
            "coverage.txt", ["serialized"], "Clover XML (.xml), JSON (.json)"
        )
        assert error.code == ErrorCode.UNSUPPORTED_FORMAT
        assert error.message.startswith("Unable to parse coverage file format.")
        assert "Clover XML (.xml), JSON (.json)" in error.message
        assert error.details == {"hint": "coverage.txt", "attempted": ["serialized"]}

    def test_invalid_options(self) -> None:
        error = InvalidOptionsError.invalid("max_depth", 0, "must be >= 1")
        assert error.code == ErrorCode.INVALID_OPTIONS
        assert error.message == "Invalid option 'max_depth': must be >= 1"
