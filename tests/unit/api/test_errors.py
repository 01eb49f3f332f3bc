"""Unit tests for the IMSLP error hierarchy."""

import pytest

from easy_imslp.api.errors import (
    ErrorDetails,
    ImslpError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
)


class TestErrorCodes:
    """Tests for codes, inheritance and default suggestions."""

    @pytest.mark.unit
    def test_network_error(self) -> None:
        """Should carry NETWORK_ERROR and an empty details record."""
        error = NetworkError("boom")
        assert error.code == "NETWORK_ERROR"
        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.details == ErrorDetails()
        assert isinstance(error, ImslpError)

    @pytest.mark.unit
    def test_timeout_error(self) -> None:
        """Should be a NetworkError with its own code and the timeout value."""
        error = RequestTimeoutError("slow", 5.0)
        assert isinstance(error, NetworkError)
        assert error.code == "TIMEOUT_ERROR"
        assert error.timeout == 5.0
        assert error.details.suggestion is not None
        assert "5.0s" in error.details.suggestion

    @pytest.mark.unit
    def test_rate_limit_error(self) -> None:
        """Should suggest waiting retry_after seconds."""
        error = RateLimitError("slow down", retry_after=30)
        assert error.code == "RATE_LIMIT_ERROR"
        assert error.retry_after == 30
        assert error.details.suggestion == "Wait 30 seconds before retrying."

    @pytest.mark.unit
    def test_rate_limit_without_retry_after(self) -> None:
        """Should fall back to a vague wait."""
        error = RateLimitError("slow down")
        assert error.retry_after is None
        assert error.details.suggestion == "Wait a few seconds before retrying."

    @pytest.mark.unit
    def test_not_found_error(self) -> None:
        """Should suggest checking the slug."""
        error = NotFoundError("missing", ErrorDetails(url="https://imslp.org/wiki/X"))
        assert error.code == "NOT_FOUND"
        assert error.details.url == "https://imslp.org/wiki/X"
        assert error.details.suggestion == (
            "Check the slug format. Use find_work() for fuzzy matching."
        )

    @pytest.mark.unit
    def test_caller_suggestion_kept(self) -> None:
        """Should not overwrite a suggestion the caller already supplied."""
        error = NotFoundError("missing", ErrorDetails(suggestion="Try again"))
        assert error.details.suggestion == "Try again"

    @pytest.mark.unit
    def test_parse_error_keeps_raw_data(self) -> None:
        """Should keep the undecodable payload."""
        error = ParseError("bad json", raw_data="<html>")
        assert error.code == "PARSE_ERROR"
        assert error.raw_data == "<html>"


class TestDetailedString:
    """Tests for the multi-line error description."""

    @pytest.mark.unit
    def test_all_fields(self) -> None:
        """Should list message, code, URL, status, suggestion and body."""
        error = ImslpError(
            "failed",
            "CUSTOM",
            ErrorDetails(
                url="https://imslp.org/api.php",
                status_code=500,
                response_body="oops",
                suggestion="Retry later",
            ),
        )
        assert error.to_detailed_string().splitlines() == [
            "ImslpError: failed",
            "Code: CUSTOM",
            "URL: https://imslp.org/api.php",
            "Status: 500",
            "Suggestion: Retry later",
            "Response: oops",
        ]

    @pytest.mark.unit
    def test_minimal(self) -> None:
        """Should omit absent fields."""
        assert NetworkError("boom").to_detailed_string() == "NetworkError: boom\nCode: NETWORK_ERROR"

    @pytest.mark.unit
    def test_body_truncated(self) -> None:
        """Should truncate long bodies to 200 characters plus an ellipsis."""
        error = NetworkError("boom", ErrorDetails(response_body="x" * 500))
        last_line = error.to_detailed_string().splitlines()[-1]
        assert last_line == "Response: " + "x" * 200 + "..."
