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
"""Controller — the base class for action controllers.

A controller is invoked with a request and a response and returns the
response to send. The action to run is taken from the ``route:action``
request attribute (``process`` when absent)::

    class ItemController(Controller):
        def show(self, item_id: Path[int]) -> Reply:
            item = repository.find(item_id)
            if item is None:
                return self.reply.not_found().output("Item not found", "text")
            return self.reply.json(item)

    response = ItemController()(request.with_attribute("route:action", "show"), Response())

Guards declared with :func:`~pyaction.web.guards.guard` on the class run
before :meth:`Controller.before`; guards on the action run after it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from pyaction.config import get_properties
from pyaction.http.message import Response, ServerRequest
from pyaction.kernel.exceptions import SessionNotAvailableError
from pyaction.session.adapters.mapping import MappingSession
from pyaction.session.flash import Flash
from pyaction.session.ports.outbound import SessionAttributes
from pyaction.web.coercion import coerce
from pyaction.web.context import MessageContext
from pyaction.web.dispatcher import ActionTable, dispatch, table_for
from pyaction.web.hooks import CONTINUE, HookResult
from pyaction.web.resolver import replace_recursive


class Controller(MessageContext):
    """Base class for controllers. Public methods of subclasses are actions."""

    _flash: Flash | None = None

    def __call__(self, request: ServerRequest, response: Response) -> Response:
        return self.run(request, response)

    def run(self, request: ServerRequest, response: Response) -> Response:
        """Dispatch the request to the action named by ``route:action``."""
        self._flash = None
        return dispatch(self, type(self).compile(), request, response)

    @classmethod
    def compile(cls) -> ActionTable:
        """Compile the action table now, so binding errors surface at startup."""
        return table_for(cls, _RESERVED)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before(self) -> HookResult:
        """Called before the method guards and the action.

        Return ``ShortCircuit(response)`` to answer without running the action.
        """
        return CONTINUE

    def after(self, result: Any) -> HookResult:
        """Called with the action result; ``ShortCircuit`` replaces it."""
        return CONTINUE

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def get_query_params(
        self, keys: Iterable[str | tuple[str, Any]] | Mapping[str, Any] | None = None
    ) -> Any:
        """All query parameters, or a list of the values of *keys*.

        *keys* holds names or ``(name, default)`` pairs; a mapping gives a
        default for each name::

            page, size = self.get_query_params({"page": 1, "size": 20})
        """
        params = self.request.query_params
        if keys is None:
            return dict(params)

        items = keys.items() if isinstance(keys, Mapping) else (
            key if isinstance(key, tuple) else (key, None) for key in keys
        )
        return [params.get(key, default) for key, default in items]

    def has_query_param(self, param: str) -> bool:
        return self.request.query_params.get(param) is not None

    def get_query_param(self, param: str, default: Any = None, type: str | None = None) -> Any:
        """A query parameter, optionally coerced to ``bool``, ``int``, ``float``,
        ``email`` or ``url``. Invalid values come back as ``INVALID``."""
        value = self.request.query_params.get(param, default)
        if type is not None and value is not None:
            value = coerce(value, type)
        return value

    def get_input(self) -> Any:
        """The parsed body; a mapping body is merged with the uploaded files."""
        data = self.request.parsed_body
        if isinstance(data, Mapping):
            data = replace_recursive(dict(data), self.request.uploaded_files)
        return data

    # ------------------------------------------------------------------
    # Request checks
    # ------------------------------------------------------------------

    def is_get_request(self) -> bool:
        return self.request.method in ("GET", "")

    def is_post_request(self) -> bool:
        return self.request.method == "POST"

    def is_put_request(self) -> bool:
        return self.request.method == "PUT"

    def is_delete_request(self) -> bool:
        return self.request.method == "DELETE"

    def is_head_request(self) -> bool:
        return self.request.method == "HEAD"

    def get_local_referer(self) -> str | None:
        return self.reply.local_referer()

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def session(self) -> SessionAttributes | None:
        """The session attached to the request as the ``session`` attribute."""
        session = self.request.get_attribute("session")
        if isinstance(session, SessionAttributes):
            return session
        if isinstance(session, MutableMapping):
            return MappingSession(session)
        return None

    def flash(self, type: str | None = None, message: Any = None) -> Flash:
        """The flash of this request; sets it when *type* is given."""
        if self._flash is None:
            session = self.session
            if session is None:
                raise SessionNotAvailableError(
                    "No session attached to the request", code="SESSION_NOT_AVAILABLE"
                )
            self._flash = Flash(session, get_properties().flash_key)

        if type:
            self._flash.set(type, message)
        return self._flash


_RESERVED = frozenset(dir(Controller))
