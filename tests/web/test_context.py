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
"""Tests for MessageContext request/response binding."""

import pytest

from pyaction.http import Response, ServerRequest
from pyaction.kernel.exceptions import NotInvokedError
from pyaction.web.context import MessageContext
from pyaction.web.reply import Reply


class TestMessageContext:
    def test_request_before_bind_raises(self):
        with pytest.raises(NotInvokedError, match="Request not set, MessageContext has not been invoked"):
            MessageContext().request

    def test_response_before_bind_raises(self):
        with pytest.raises(NotInvokedError, match="Response not set"):
            MessageContext().response

    def test_bind(self):
        context = MessageContext()
        request, response = ServerRequest.build(), Response()
        context.bind(request, response)
        assert context.request is request
        assert context.response is response

    def test_reply_starts_from_current_response(self):
        context = MessageContext()
        context.bind(ServerRequest.build(), Response().with_header("X-Trace", "1"))
        reply = context.reply
        assert isinstance(reply, Reply)
        assert reply.response.get_header_line("X-Trace") == "1"

    def test_commit_sets_response(self):
        context = MessageContext()
        context.bind(ServerRequest.build(), Response())
        reply = context.commit(context.reply.created("/items/1"))
        assert context.response is reply.response
        assert context.response.status_code == 201
