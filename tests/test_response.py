"""Tests for folio.http.response: immutable Response and Redirect."""

import json

import pytest

from folio.http.response import Redirect, Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()

    def test_with_methods_return_new_instances(self) -> None:
        original = Response(body="hi")
        changed = original.with_status(201).with_header("X-A", "1")
        assert original.status == 200
        assert original.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-A", "1"),)

    def test_with_headers_accepts_mapping_or_pairs(self) -> None:
        response = Response().with_headers({"X-A": "1"}).with_headers([("X-B", "2")])
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_header_lookup(self) -> None:
        response = Response().with_header("Cache-Control", "no-store").with_header("X-Tag", "a")
        assert response.header("cache-control") == "no-store"
        assert response.header("X-TAG") == "a"
        assert response.header("Location") is None

    def test_from_json(self) -> None:
        response = Response.from_json({"id": 7, "when": object}, status=201)
        assert response.status == 201
        assert response.content_type == "application/json; charset=utf-8"
        assert json.loads(response.text)["id"] == 7

    def test_plain(self) -> None:
        response = Response.plain("Not found", status=404)
        assert response.status == 404
        assert response.content_type == "text/plain; charset=utf-8"
        assert response.text == "Not found"

    def test_text_and_bytes(self) -> None:
        assert Response(body="é").body_bytes == "é".encode()
        assert Response(body=b"\xc3\xa9").text == "é"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]


class TestRedirect:
    def test_defaults(self) -> None:
        redirect = Redirect("/blog")
        assert redirect.status == 302
        assert redirect.headers == ()

    def test_to_response(self) -> None:
        response = Redirect("/blog#entry-5", status=301, headers=(("X-A", "1"),)).to_response()
        assert response.status == 301
        assert response.header("Location") == "/blog#entry-5"
        assert response.header("X-A") == "1"
        assert response.body == ""
