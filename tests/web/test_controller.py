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
"""Tests for Controller input, request checks and session helpers."""

import io

import pytest

from pyaction.config import configure, reset
from pyaction.core.config import Config
from pyaction.http import Response, ServerRequest, UploadedFile
from pyaction.kernel.exceptions import NotInvokedError, SessionNotAvailableError
from pyaction.session import FlashMessage, HttpSession, MappingSession
from pyaction.web.coercion import INVALID
from pyaction.web.controller import Controller
from pyaction.web.reply import Reply


class NoticeController(Controller):
    def process(self) -> Reply:
        self.flash("notice", "Saved")
        return self.reply.redirect("/items")

    def show(self) -> Reply:
        return self.reply.output(str(self.flash()), "text")


def bound(**kwargs) -> Controller:
    controller = Controller()
    controller.bind(ServerRequest.build(**kwargs), Response())
    return controller


@pytest.fixture(autouse=True)
def _reset_properties():
    yield
    reset()


class TestInvocation:
    def test_request_before_invoke_raises(self):
        with pytest.raises(NotInvokedError):
            Controller().request

    def test_call_runs_action(self):
        session = HttpSession()
        request = ServerRequest.build(attributes={"session": session})
        response = NoticeController()(request, Response())
        assert response.status_code == 303
        assert session.get_attribute("flash") == {"type": "notice", "message": "Saved"}


class TestInput:
    def test_get_query_params(self):
        controller = bound(query_params={"page": "2", "q": "shoes"})
        assert controller.get_query_params() == {"page": "2", "q": "shoes"}

    def test_get_query_params_list(self):
        controller = bound(query_params={"page": "2"})
        assert controller.get_query_params(["page", ("size", 20), "q"]) == ["2", 20, None]
        assert controller.get_query_params({"page": 1, "size": 20}) == ["2", 20]

    def test_has_query_param(self):
        controller = bound(query_params={"page": "2"})
        assert controller.has_query_param("page")
        assert not controller.has_query_param("size")

    def test_get_query_param(self):
        controller = bound(query_params={"page": "2", "email": "nope"})
        assert controller.get_query_param("page") == "2"
        assert controller.get_query_param("page", type="int") == 2
        assert controller.get_query_param("size", 20) == 20
        assert controller.get_query_param("email", type="email") is INVALID
        assert controller.get_query_param("missing", type="int") is None

    def test_get_input_merges_files(self):
        upload = UploadedFile("a.png", "image/png", 3, io.BytesIO(b"png"))
        controller = bound(parsed_body={"name": "widget"}, uploaded_files={"image": upload})
        assert controller.get_input() == {"name": "widget", "image": upload}

    def test_get_input_non_mapping(self):
        assert bound(parsed_body=["a"]).get_input() == ["a"]
        assert bound().get_input() is None


class TestRequestChecks:
    @pytest.mark.parametrize(
        ("method", "check"),
        [
            ("GET", "is_get_request"),
            ("POST", "is_post_request"),
            ("PUT", "is_put_request"),
            ("DELETE", "is_delete_request"),
            ("HEAD", "is_head_request"),
        ],
    )
    def test_method_checks(self, method, check):
        assert getattr(bound(method=method), check)()
        assert not getattr(bound(method="PATCH"), check)()

    def test_empty_method_is_get(self):
        assert bound(method="").is_get_request()

    def test_local_referer(self):
        controller = bound(headers={"Host": "shop.test", "Referer": "http://shop.test/cart"})
        assert controller.get_local_referer() == "http://shop.test/cart"
        assert bound(headers={"Host": "shop.test"}).get_local_referer() is None


class TestSession:
    def test_session_attribute(self):
        session = HttpSession()
        assert bound(attributes={"session": session}).session is session

    def test_mapping_session_is_wrapped(self):
        data = {"user": "jane"}
        session = bound(attributes={"session": data}).session
        assert isinstance(session, MappingSession)
        session.set_attribute("cart", 3)
        assert data == {"user": "jane", "cart": 3}

    def test_no_session(self):
        controller = bound()
        assert controller.session is None
        with pytest.raises(SessionNotAvailableError):
            controller.flash()

    def test_flash_is_reused(self):
        controller = bound(attributes={"session": HttpSession()})
        assert controller.flash() is controller.flash()

    def test_flash_set_and_read_next_request(self):
        session = HttpSession()
        bound(attributes={"session": session}).flash("error", "Oops")

        controller = bound(attributes={"session": session})
        assert controller.flash().get() == FlashMessage("error", "Oops")
        assert session.get_attribute("flash") is None

    def test_flash_key_from_config(self):
        configure(Config({"pyaction": {"controller": {"flash_key": "notice"}}}))
        session = HttpSession()
        bound(attributes={"session": session}).flash("info", "Hi")
        assert session.get_attribute("notice") == {"type": "info", "message": "Hi"}

    def test_flash_in_action(self):
        session = HttpSession(data={"flash": {"type": "notice", "message": "Saved"}})
        request = ServerRequest.build(attributes={"session": session, "route:action": "show"})
        assert NoticeController()(request, Response()).text == "Saved"

    def test_flash_follows_each_request(self):
        controller = NoticeController()
        first, second = HttpSession(), HttpSession()
        for session in (first, second):
            request = ServerRequest.build(attributes={"session": session, "route:action": "process"})
            controller(request, Response())
        assert first.get_attribute("flash") == {"type": "notice", "message": "Saved"}
        assert second.get_attribute("flash") == {"type": "notice", "message": "Saved"}
