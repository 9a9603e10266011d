"""Tests for download retry module."""

from __future__ import annotations

from unittest.mock import Mock, patch
from urllib.error import HTTPError, URLError

import pytest

from sif_miner.retry import DownloadError, RetryHandler, with_retry


def _http_error(code: int) -> HTTPError:
    return HTTPError(
        url="http://test", code=code, msg="err", hdrs=None, fp=None  # type: ignore[arg-type]
    )


class TestRetryHandler:
    """Tests for RetryHandler class."""

    def test_execute_success_first_try(self) -> None:
        """Test successful execution on first try."""
        handler = RetryHandler(max_retries=3)
        mock_func = Mock(return_value="success")

        result = handler.execute(mock_func, "test_op")

        assert result == "success"
        assert mock_func.call_count == 1

    def test_execute_success_after_retry(self) -> None:
        """Test successful execution after retries."""
        handler = RetryHandler(max_retries=3, initial_delay=0.01)
        mock_func = Mock(side_effect=[URLError("fail"), URLError("fail"), "success"])

        result = handler.execute(mock_func, "test_op")

        assert result == "success"
        assert mock_func.call_count == 3

    def test_execute_fails_after_max_retries(self) -> None:
        """Test failure after exhausting all retries."""
        handler = RetryHandler(max_retries=2, initial_delay=0.01)
        mock_func = Mock(side_effect=URLError("persistent failure"))

        with pytest.raises(DownloadError, match="failed after 3 attempts.*persistent failure"):
            handler.execute(mock_func, "test_op")

        # Initial attempt + 2 retries = 3 calls
        assert mock_func.call_count == 3

    def test_execute_http_4xx_no_retry(self) -> None:
        """Test that HTTP 4xx errors (except 429) don't trigger retry."""
        handler = RetryHandler(max_retries=3, initial_delay=0.01)
        mock_func = Mock(side_effect=_http_error(404))

        with pytest.raises(DownloadError, match="HTTP 404"):
            handler.execute(mock_func, "test_op")

        assert mock_func.call_count == 1

    def test_execute_http_429_retries(self) -> None:
        """Test that HTTP 429 (rate limit) triggers retry."""
        handler = RetryHandler(max_retries=2, initial_delay=0.01)
        mock_func = Mock(side_effect=[_http_error(429), "success"])

        assert handler.execute(mock_func, "test_op") == "success"
        assert mock_func.call_count == 2

    def test_execute_http_5xx_retries(self) -> None:
        """Test that server errors trigger retry."""
        handler = RetryHandler(max_retries=1, initial_delay=0.01)
        mock_func = Mock(side_effect=[_http_error(503), "success"])

        assert handler.execute(mock_func, "test_op") == "success"

    def test_non_retryable_error_propagates(self) -> None:
        """Test that errors outside the retryable set are raised as-is."""
        handler = RetryHandler(max_retries=3, initial_delay=0.01)
        mock_func = Mock(side_effect=KeyError("bug"))

        with pytest.raises(KeyError):
            handler.execute(mock_func, "test_op")

        assert mock_func.call_count == 1

    def test_exponential_backoff(self) -> None:
        """Test that delay doubles and is capped."""
        handler = RetryHandler(max_retries=3, initial_delay=1.0, max_delay=3.0)
        mock_func = Mock(side_effect=[ConnectionError(), ConnectionError(), ConnectionError(), 1])

        with patch("sif_miner.retry.time.sleep") as sleep:
            assert handler.execute(mock_func, "test_op") == 1

        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0, 3.0]

    def test_custom_retryable_errors(self) -> None:
        """Test restricting the retryable error types."""
        handler = RetryHandler(max_retries=3, initial_delay=0.01)
        mock_func = Mock(side_effect=TimeoutError("slow"))

        with pytest.raises(TimeoutError):
            handler.execute(mock_func, "test_op", retryable_errors=(URLError,))


class TestWithRetry:
    """Tests for with_retry convenience function."""

    def test_with_retry_success(self) -> None:
        """Test with_retry on success."""
        mock_func = Mock(return_value="result")
        assert with_retry(mock_func, "test_op", max_retries=1) == "result"

    def test_with_retry_failure(self) -> None:
        """Test with_retry raising after retries."""
        mock_func = Mock(side_effect=URLError("down"))
        with pytest.raises(DownloadError):
            with_retry(mock_func, "test_op", max_retries=1, initial_delay=0.01)
        assert mock_func.call_count == 2
