# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the immutable ServerRequest/Response pair."""

import io

from pyaction.http import Response, ServerRequest, UploadedFile


class TestServerRequest:
    def test_build_normalizes_input(self):
        request = ServerRequest.build(
            "post",
            "/items?page=2",
            headers={"Content-Type": "application/json; charset=utf-8"},
            body="{}",
        )
        assert request.method == "POST"
        assert request.path == "/items"
        assert request.content_type == "application/json"
        assert request.body == b"{}"

    def test_header_access_is_case_insensitive(self):
        request = ServerRequest.build(headers=[("Accept", "text/html"), ("Accept", "application/json")])
        assert request.has_header("accept")
        assert request.get_header("ACCEPT") == ["text/html", "application/json"]
        assert request.get_header_line("Accept") == "text/html, application/json"
        assert request.get_headers() == {"accept": ["text/html", "application/json"]}

    def test_missing_header_line_is_empty(self):
        assert ServerRequest.build().get_header_line("X-Missing") == ""

    def test_with_attribute_returns_copy(self):
        request = ServerRequest.build()
        updated = request.with_attribute("route:action", "show")
        assert updated.get_attribute("route:action") == "show"
        assert request.get_attribute("route:action") is None
        assert updated.without_attribute("route:action").get_attribute("route:action") is None

    def test_with_attributes_merges(self):
        request = ServerRequest.build(attributes={"a": 1}).with_attributes({"b": 2})
        assert request.attributes == {"a": 1, "b": 2}

    def test_with_header_replaces(self):
        request = ServerRequest.build(headers={"Host": "a.test"}).with_header("Host", "b.test")
        assert request.get_header("host") == ["b.test"]

    def test_with_input_copies(self):
        request = (
            ServerRequest.build()
            .with_query_params({"page": "1"})
            .with_parsed_body({"name": "x"})
            .with_cookie_params({"sid": "abc"})
        )
        assert request.query_params == {"page": "1"}
        assert request.parsed_body == {"name": "x"}
        assert request.cookie_params == {"sid": "abc"}


class TestResponse:
    def test_defaults(self):
        response = Response()
        assert response.status_code == 200
        assert response.reason_phrase == ""
        assert response.body == b""

    def test_with_status(self):
        response = Response().with_status(404, "Not Found")
        assert (response.status_code, response.reason_phrase) == (404, "Not Found")

    def test_with_header_and_added_header(self):
        response = Response().with_header("Vary", "Accept").with_added_header("Vary", "Cookie")
        assert response.get_header("vary") == ["Accept", "Cookie"]
        assert response.with_header("Vary", "Origin").get_header_line("Vary") == "Origin"

    def test_without_header(self):
        response = Response.build(headers={"X-Test": "1"}).without_header("x-test")
        assert not response.has_header("X-Test")

    def test_body_append_and_replace(self):
        response = Response().with_appended_body("Hello").with_appended_body(b", world")
        assert response.text == "Hello, world"
        assert response.with_body("Bye").text == "Bye"

    def test_messages_are_immutable(self):
        response = Response()
        response.with_status(500)
        assert response.status_code == 200


class TestUploadedFile:
    def test_read_and_save(self, tmp_path):
        upload = UploadedFile("a.txt", "text/plain", 5, io.BytesIO(b"hello"))
        assert upload.read() == b"hello"
        assert upload.read() == b"hello"
        upload.save(tmp_path / "a.txt")
        assert (tmp_path / "a.txt").read_bytes() == b"hello"
        assert "a.txt" in repr(upload)
