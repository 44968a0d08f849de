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
"""MessageContext — request/response binding shared by controllers and guards."""

from __future__ import annotations

from pyaction.http.message import Response, ServerRequest
from pyaction.kernel.exceptions import NotInvokedError
from pyaction.web.reply import Reply


class MessageContext:
    """Holds the request and the current response for one invocation.

    Accessing :attr:`request` or :attr:`response` before :meth:`bind` is a
    programmer error and raises :class:`NotInvokedError`.
    """

    _request: ServerRequest | None = None
    _response: Response | None = None

    def bind(self, request: ServerRequest, response: Response) -> None:
        self._request = request
        self._response = response

    @property
    def request(self) -> ServerRequest:
        if self._request is None:
            raise NotInvokedError(f"Request not set, {type(self).__name__} has not been invoked")
        return self._request

    @property
    def response(self) -> Response:
        if self._response is None:
            raise NotInvokedError(f"Response not set, {type(self).__name__} has not been invoked")
        return self._response

    def set_response(self, response: Response) -> None:
        """Replace the current response."""
        self._response = response

    @property
    def reply(self) -> Reply:
        """Start a response builder from the current response."""
        return Reply(self.request, self.response)

    def commit(self, reply: Reply) -> Reply:
        """Make *reply*'s response the current response and return *reply*."""
        self.set_response(reply.response)
        return reply
