"""Tests for ordered failure-message extraction."""

from __future__ import annotations

import httpx
import pytest

from imgupload.errors import UploadError, UploadTransportError
from imgupload.upload.messages import (
    DEFAULT_EXTRACTORS,
    FALLBACK_MESSAGE,
    extract_error_message,
    from_exception_message,
    from_response_body,
)


def _status_error(status: int, body: bytes) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.example.com/api/upload")
    response = httpx.Response(status, content=body, request=request)
    return httpx.HTTPStatusError("bad status", request=request, response=response)


class TestFromResponseBody:

    def test_structured_error_field(self):
        exc = UploadError(message="Request failed", context={"body": {"error": "quota exceeded"}})
        assert from_response_body(exc) == "quota exceeded"

    @pytest.mark.parametrize("body", [None, "plain text", {}, {"error": ""}, {"error": 42}])
    def test_unusable_body_gives_none(self, body):
        exc = UploadError(message="Request failed", context={"body": body})
        assert from_response_body(exc) is None

    def test_httpx_status_error_body(self):
        exc = _status_error(413, b'{"error": "too large"}')
        assert from_response_body(exc) == "too large"

    def test_httpx_status_error_non_json(self):
        assert from_response_body(_status_error(500, b"<html>")) is None

    def test_plain_exception(self):
        assert from_response_body(RuntimeError("x")) is None


class TestFromExceptionMessage:

    def test_uses_message_attribute(self):
        assert from_exception_message(UploadTransportError("Connection refused")) == "Connection refused"

    def test_uses_str_for_plain_exceptions(self):
        assert from_exception_message(ValueError("bad path")) == "bad path"

    def test_empty_message_gives_none(self):
        assert from_exception_message(RuntimeError()) is None
        assert from_exception_message(UploadTransportError("")) is None


class TestExtractErrorMessage:

    def test_structured_body_wins(self):
        exc = UploadError(
            message="Request failed with status code 429",
            context={"body": {"error": "quota exceeded"}},
        )
        assert extract_error_message(exc) == "quota exceeded"

    def test_transport_message_when_no_body(self):
        exc = UploadTransportError("All connection attempts failed")
        assert extract_error_message(exc) == "All connection attempts failed"

    def test_status_message_when_body_lacks_error(self):
        exc = UploadError(
            message="Request failed with status code 500",
            context={"body": {"detail": "oops"}},
        )
        assert extract_error_message(exc) == "Request failed with status code 500"

    def test_fallback_when_nothing_available(self):
        assert extract_error_message(UploadTransportError("")) == FALLBACK_MESSAGE
        assert FALLBACK_MESSAGE == "Upload failed"

    def test_custom_extractor_order(self):
        exc = UploadError(message="generic", context={"body": {"error": "specific"}})
        reordered = tuple(reversed(DEFAULT_EXTRACTORS))
        assert extract_error_message(exc, reordered) == "generic"

    def test_custom_fallback(self):
        assert extract_error_message(RuntimeError(), fallback="nope") == "nope"
