"""Tests for upstream error categorization and the transient/fatal split."""

import logging

import pytest

from trends_gateway.core.exceptions import TransientUpstreamError, UpstreamRequestError
from trends_gateway.domain.models.outcome import FailureKind
from trends_gateway.infrastructure.error.handler import (
    HTML_ERROR_PAGE_MESSAGE,
    ErrorCategory,
    ErrorHandler,
    ErrorSeverity,
    categorize_error,
    classify,
    is_rate_limit_category,
)


class TestCategorizeError:
    @pytest.mark.parametrize("message", [
        "Upstream responded with HTTP 429 Too Many Requests",
        "too many requests",
        "Rate limit exceeded",
        "daily QUOTA reached",
    ])
    def test_rate_limit(self, message):
        assert categorize_error(Exception(message)) == ErrorCategory.RATE_LIMIT

    @pytest.mark.parametrize("message", [
        "request blocked by provider",
        "HTTP 403 Forbidden",
        "Our systems have detected unusual traffic",
    ])
    def test_blocked(self, message):
        assert categorize_error(Exception(message)) == ErrorCategory.BLOCKED

    def test_captcha(self):
        assert categorize_error(Exception("Please solve the CAPTCHA")) == ErrorCategory.CAPTCHA

    @pytest.mark.parametrize("message", [
        "Unexpected token < in JSON at position 0",
        "<!DOCTYPE html><html>",
        HTML_ERROR_PAGE_MESSAGE,
    ])
    def test_html_error_page(self, message):
        assert categorize_error(Exception(message)) == ErrorCategory.HTML_ERROR_PAGE

    @pytest.mark.parametrize("message", [
        "Failed to connect to upstream: connection refused",
        "Upstream responded with HTTP 500 Internal Server Error",
        "",
    ])
    def test_everything_else_is_upstream(self, message):
        assert categorize_error(Exception(message)) == ErrorCategory.UPSTREAM

    def test_classified_error_keeps_category(self):
        error = TransientUpstreamError("whatever", ErrorCategory.CAPTCHA)
        assert categorize_error(error) == ErrorCategory.CAPTCHA


class TestClassify:
    @pytest.mark.parametrize("message", ["HTTP 429", "blocked", "captcha", "unexpected token <"])
    def test_transient(self, message):
        assert classify(UpstreamRequestError(message)) == FailureKind.TRANSIENT

    def test_fatal(self):
        assert classify(UpstreamRequestError("connection reset by peer")) == FailureKind.FATAL

    def test_rate_limit_categories_exclude_html(self):
        assert is_rate_limit_category(ErrorCategory.RATE_LIMIT)
        assert is_rate_limit_category(ErrorCategory.BLOCKED)
        assert is_rate_limit_category(ErrorCategory.CAPTCHA)
        assert not is_rate_limit_category(ErrorCategory.HTML_ERROR_PAGE)
        assert not is_rate_limit_category(None)


class TestErrorHandler:
    def test_transient_error_logged_as_warning(self, caplog):
        handler = ErrorHandler(logging.getLogger("test.errors"))
        with caplog.at_level(logging.WARNING, logger="test.errors"):
            details = handler.handle_error(Exception("HTTP 429"), source="upstream", retry_count=1, max_retries=3)

        assert details.kind == FailureKind.TRANSIENT
        assert details.severity == ErrorSeverity.MEDIUM
        assert details.retry_count == 1
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].data["category"] == "rate_limit"

    def test_fatal_error_logged_as_error(self, caplog):
        handler = ErrorHandler(logging.getLogger("test.errors"))
        with caplog.at_level(logging.WARNING, logger="test.errors"):
            details = handler.handle_error(ValueError("boom"), source="upstream", context={"geo": "US"})

        assert details.kind == FailureKind.FATAL
        assert details.category == ErrorCategory.UPSTREAM
        assert details.context == {"geo": "US"}
        assert caplog.records[-1].levelno == logging.ERROR
