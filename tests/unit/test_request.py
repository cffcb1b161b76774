"""
Unit tests for the request model.
"""

import pytest

from requestchain.http.request import (
    HTTPMethod,
    Request,
    is_empty_payload,
    make_request,
)


class TestRequest:
    """Tests for Request class."""

    def test_method_string_is_normalized(self):
        """Test that plain strings become HTTPMethod members."""
        request = Request(method="post", path="/api/users")

        assert request.method is HTTPMethod.POST
        assert request.method == "POST"
        assert str(request.method) == "POST"

    def test_unknown_method_rejected(self):
        """Test that an unknown verb fails at construction."""
        with pytest.raises(ValueError):
            Request(method="BREW", path="/coffee")

    def test_headers_lowercased(self):
        """Test that header names are normalized to lowercase."""
        request = Request(
            method="GET",
            path="/",
            headers={"Authorization": "Bearer t", "X-Client-Id": "c1"},
        )

        assert request.headers == {"authorization": "Bearer t", "x-client-id": "c1"}
        assert request.get_header("AUTHORIZATION") == "Bearer t"
        assert request.get_header("missing", "default") == "default"

    def test_authorization(self):
        """Test authorization accessor."""
        assert Request("GET", "/", headers={"Authorization": "Bearer t"}).authorization == "Bearer t"
        assert Request("GET", "/").authorization is None
        assert Request("GET", "/", headers={"authorization": ""}).authorization is None

    def test_client_id_aliases(self):
        """Test that the client id is read from its header or the bare field name."""
        assert Request("GET", "/", headers={"X-Client-Id": "a"}).client_id == "a"
        assert Request("GET", "/", headers={"clientId": "b"}).client_id == "b"
        assert Request("GET", "/").client_id is None

    def test_has_body(self):
        """Test body presence detection."""
        assert Request("POST", "/", body={"name": "John"}).has_body is True
        assert Request("POST", "/", body=None).has_body is False
        assert Request("POST", "/", body={}).has_body is False


class TestEmptyPayload:
    """Tests for is_empty_payload."""

    @pytest.mark.parametrize("body", [None, "", b"", {}, [], ()])
    def test_empty(self, body):
        assert is_empty_payload(body) is True

    @pytest.mark.parametrize("body", ["x", b"x", {"a": 1}, [0], 0, False])
    def test_not_empty(self, body):
        assert is_empty_payload(body) is False


class TestMakeRequest:
    """Tests for the make_request helper."""

    def test_sets_only_given_headers(self):
        request = make_request("GET", "/api/users")

        assert request.headers == {}

    def test_full_request(self):
        request = make_request(
            "POST", "/api/users",
            body={"name": "John"},
            authorization="Bearer t",
            client_id="client-1",
        )

        assert request.method is HTTPMethod.POST
        assert request.body == {"name": "John"}
        assert request.authorization == "Bearer t"
        assert request.client_id == "client-1"
