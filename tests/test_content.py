"""
Unit tests for response content-type normalization and payload sizing.
"""

import json

import httpx
import pytest

from irdata.api.content import is_json_media_type, media_type, parse_error_body, parse_response, payload_size


def make_response(body, content_type=None):
    headers = {"content-type": content_type} if content_type else {}
    if isinstance(body, str):
        body = body.encode("utf-8")
    return httpx.Response(200, content=body, headers=headers)


class TestMediaType:
    def test_strips_parameters(self):
        assert media_type("application/json; charset=utf-8") == "application/json"

    def test_lowercases(self):
        assert media_type("Application/JSON") == "application/json"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("application/json", True),
            ("application/problem+json", True),
            ("text/plain", False),
            ("application/octet-stream", False),
        ],
    )
    def test_is_json_media_type(self, value, expected):
        assert is_json_media_type(value) is expected


class TestParseResponse:
    """Test suite for parse_response."""

    def test_json(self):
        data, content_type = parse_response(make_response('{"a": 1}', "application/json"))
        assert data == {"a": 1}
        assert content_type == "application/json"

    def test_json_keeps_declared_header(self):
        _, content_type = parse_response(make_response("[1]", "application/json; charset=utf-8"))
        assert content_type == "application/json; charset=utf-8"

    def test_empty_json_body_is_none(self):
        data, content_type = parse_response(make_response(b"", "application/json"))
        assert data is None
        assert content_type == "application/json"

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_response(make_response("not json", "application/json"))

    def test_octet_stream_json_is_reported_as_json(self):
        data, content_type = parse_response(make_response('[{"id": 1}]', "application/octet-stream"))
        assert data == [{"id": 1}]
        assert content_type == "application/json"

    def test_octet_stream_keeps_charset(self):
        _, content_type = parse_response(make_response('{"a": 1}', "application/octet-stream; charset=utf-8"))
        assert content_type == "application/json; charset=utf-8"

    def test_octet_stream_non_json_falls_back_to_text(self):
        data, content_type = parse_response(make_response("plain bytes", "application/octet-stream"))
        assert data == "plain bytes"
        assert content_type == "application/octet-stream"

    def test_text(self):
        data, content_type = parse_response(make_response("hello", "text/csv"))
        assert data == "hello"
        assert content_type == "text/csv"

    def test_text_containing_json_is_not_parsed(self):
        data, _ = parse_response(make_response('{"a": 1}', "text/plain"))
        assert data == '{"a": 1}'

    def test_missing_header_detects_json(self):
        data, content_type = parse_response(make_response('{"a": 1}'))
        assert data == {"a": 1}
        assert content_type == "application/json"

    def test_missing_header_falls_back_to_text(self):
        data, content_type = parse_response(make_response("hello"))
        assert data == "hello"
        assert content_type == "text/plain"


class TestParseErrorBody:
    def test_json_body(self):
        response = httpx.Response(400, json={"error": "invalid_grant"})
        assert parse_error_body(response) == {"error": "invalid_grant"}

    def test_malformed_json_body_returns_text(self):
        response = httpx.Response(500, content=b"<html>", headers={"content-type": "application/json"})
        assert parse_error_body(response) == "<html>"

    def test_empty_body(self):
        response = httpx.Response(500, content=b"", headers={"content-type": "application/json"})
        assert parse_error_body(response) is None


class TestPayloadSize:
    """Test suite for payload_size."""

    def test_uses_content_length(self):
        response = make_response('{"a": 1}', "application/json")
        assert payload_size(response, {"a": 1}) == len(b'{"a": 1}')

    def test_measures_json_without_content_length(self):
        response = make_response('{"a": 1}', "application/json")
        del response.headers["content-length"]

        data = {"name": "Zoë", "laps": [1, 2]}
        expected = len(json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
        assert payload_size(response, data) == expected

    def test_measures_text_without_content_length(self):
        response = make_response("héllo", "text/plain")
        del response.headers["content-length"]

        assert payload_size(response, "héllo") == 6

    def test_ignores_invalid_content_length(self):
        response = make_response("abc", "text/plain")
        response.headers["content-length"] = "bogus"

        assert payload_size(response, "abc") == 3
