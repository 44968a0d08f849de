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
"""Tests for the Flash state machine."""

from pyaction.session import Flash, FlashMessage, HttpSession
from pyaction.session.flash import Consumed, Empty, Pending


class TestFlashMessage:
    def test_from_value(self):
        assert FlashMessage.from_value({"type": "error", "message": "Oops"}) == FlashMessage("error", "Oops")
        assert FlashMessage.from_value("plain") == FlashMessage(None, "plain")

    def test_str(self):
        assert str(FlashMessage("notice", "Saved")) == "Saved"
        assert str(FlashMessage("notice")) == ""


class TestFlash:
    def test_get_without_flash(self):
        flash = Flash(HttpSession())
        assert flash.get() is None
        assert flash.type is None
        assert flash.message is None
        assert str(flash) == ""

    def test_set_then_get_consumes(self):
        session = HttpSession()
        flash = Flash(session)
        flash.set("success", "Saved")
        assert flash.is_issued()
        assert isinstance(flash.state, Empty)

        assert flash.get() == FlashMessage("success", "Saved")
        assert isinstance(flash.state, Consumed)
        assert not flash.is_issued()
        assert session.get_attribute("flash") is None

    def test_repeated_get_returns_cached_copy(self):
        flash = Flash(HttpSession())
        flash.set("success", "Saved")
        first = flash.get()
        assert flash.get() == first
        assert flash.type == "success"
        assert flash.message == "Saved"
        assert str(flash) == "Saved"

    def test_new_flash_over_same_session_gets_none(self):
        session = HttpSession()
        flash = Flash(session)
        flash.set("success", "Saved")
        flash.get()
        assert Flash(session).get() is None

    def test_is_issued_does_not_consume(self):
        session = HttpSession()
        Flash(session).set("notice", "Hi")
        flash = Flash(session)
        assert flash.is_issued()
        assert flash.is_issued()
        assert flash.get() == FlashMessage("notice", "Hi")

    def test_reissue_before_get_keeps_session(self):
        session = HttpSession()
        Flash(session).set("notice", "Hi")
        flash = Flash(session)
        flash.reissue()
        assert isinstance(flash.state, Pending)
        assert flash.get() == FlashMessage("notice", "Hi")
        assert flash.is_issued()

    def test_reissue_after_get_writes_back(self):
        session = HttpSession()
        Flash(session).set("notice", "Hi")
        flash = Flash(session)
        flash.get()
        assert not flash.is_issued()
        flash.reissue()
        assert flash.is_issued()
        assert Flash(session).get() == FlashMessage("notice", "Hi")

    def test_reissue_without_flash(self):
        flash = Flash(HttpSession())
        flash.reissue()
        assert isinstance(flash.state, Empty)
        assert not flash.is_issued()

    def test_clear(self):
        session = HttpSession()
        flash = Flash(session)
        flash.set("notice", "Hi")
        flash.clear()
        assert not flash.is_issued()
        assert flash.get() is None

    def test_custom_key(self):
        session = HttpSession()
        Flash(session, key="notice").set("info", "Hi")
        assert session.get_attribute("notice") == {"type": "info", "message": "Hi"}
        assert Flash(session).get() is None
