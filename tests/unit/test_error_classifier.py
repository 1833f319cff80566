"""
Unit Tests for upstream error classification.
"""

import json

import pytest

from models.upstream import ErrorKind, UpstreamCallResult
from services.error_classifier import (
    classify_failure,
    classify_unusable_success,
    extract_error_message,
)


def make_result(status, body=None, raw=None, status_text="", content_type=None):
    if raw is None:
        raw = json.dumps(body) if body is not None else ""
    return UpstreamCallResult(
        ok=200 <= status < 300,
        status=status,
        raw_body=raw,
        parsed_body=body,
        status_text=status_text,
        content_type=content_type,
    )


class TestExtractErrorMessage:
    """Message candidates are probed in a fixed priority order."""

    @pytest.mark.parametrize("payload, expected", [
        ({"message": "m"}, "m"),
        ({"error": {"message": "nested"}}, "nested"),
        ({"error": "flat"}, "flat"),
        ({"error_message": "em"}, "em"),
        ({"errors": [{"message": "first"}]}, "first"),
        ({"title": "Unauthorized"}, "Unauthorized"),
        ({"detail": "Rate limit"}, "Rate limit"),
    ])
    def test_each_location(self, payload, expected):
        assert extract_error_message(payload) == expected

    def test_priority_order(self):
        payload = {
            "detail": "d",
            "title": "t",
            "errors": [{"message": "e0"}],
            "error_message": "em",
            "error": {"message": "nested"},
            "message": "top",
        }
        assert extract_error_message(payload) == "top"
        del payload["message"]
        assert extract_error_message(payload) == "nested"
        payload["error"] = "flat"
        assert extract_error_message(payload) == "flat"
        del payload["error"]
        assert extract_error_message(payload) == "em"
        del payload["error_message"]
        assert extract_error_message(payload) == "e0"
        del payload["errors"]
        assert extract_error_message(payload) == "t"
        del payload["title"]
        assert extract_error_message(payload) == "d"

    def test_empty_strings_skipped(self):
        assert extract_error_message({"message": "", "title": "Forbidden"}) == "Forbidden"

    def test_non_object_payloads(self):
        assert extract_error_message(None) is None
        assert extract_error_message(["message"]) is None
        assert extract_error_message("message") is None


class TestClassifyFailure:
    def test_auth_statuses_pass_through(self):
        for status in (401, 403):
            error = classify_failure(make_result(status, {"message": "Invalid API key"}))
            assert error.kind == ErrorKind.UPSTREAM_AUTH
            assert error.http_status == status
            assert error.message == "Invalid API key"

    def test_other_status_passes_through(self):
        body = {"status": "error", "message": "Too many requests"}
        error = classify_failure(make_result(429, body))
        assert error.kind == ErrorKind.UPSTREAM
        assert error.http_status == 429
        assert error.message == "Too many requests"
        assert error.details == body

    def test_falls_back_to_status_text(self):
        error = classify_failure(make_result(500, {"unexpected": 1}, status_text="Internal Server Error"))
        assert error.message == "Internal Server Error"

    def test_generic_fallback_without_status_text(self):
        error = classify_failure(make_result(520, {}))
        assert error.message == "External API Error 520"

    def test_unparsable_body_details_are_bounded_preview(self):
        raw = "<html>" + "x" * 2000 + "</html>"
        error = classify_failure(make_result(502, None, raw=raw, status_text="Bad Gateway"))
        assert error.message == "Bad Gateway"
        assert error.details["bodyPreview"] == raw[:500]
        assert "could not be parsed as JSON" in error.details["message"]

    def test_small_parsed_body_is_details_unchanged(self):
        body = {"message": "Rate limit exceeded", "code": 88}
        error = classify_failure(make_result(429, body))
        assert error.details == body

    def test_large_parsed_body_details_are_bounded(self):
        body = {"message": "Too many", "trace": ["frame"] * 1000}
        error = classify_failure(make_result(429, body))
        assert error.message == "Too many"
        assert isinstance(error.details, str)
        assert len(error.details) == 500
        assert error.details == json.dumps(body)[:500]


class TestClassifyUnusableSuccess:
    def test_empty_body(self):
        error = classify_unusable_success(make_result(200, None, raw=""))
        assert error.kind == ErrorKind.UPSTREAM_SCHEMA
        assert error.http_status == 502
        assert "empty body" in error.details["message"]

    def test_declared_json_unparsable(self):
        result = make_result(200, None, raw="{not json", content_type="application/json; charset=utf-8")
        error = classify_unusable_success(result)
        assert error.http_status == 502
        assert "declared a JSON response" in error.details["message"]
        assert error.details["bodyPreview"] == "{not json"

    def test_plain_text_body(self):
        error = classify_unusable_success(make_result(200, None, raw="OK", content_type="text/plain"))
        assert error.http_status == 502
        assert error.message == "Bad Gateway: Upstream API sent an invalid success response."
