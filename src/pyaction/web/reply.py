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
"""Reply — a fluent, immutable response builder.

Every helper returns a new :class:`Reply` wrapping an updated response, so a
chain of calls reads in the order it is applied::

    return self.reply.created(f"/items/{item.id}").json(item)

Helpers that accept a status code check it against the range their name
implies and raise :class:`InvalidStatusError` otherwise.
"""

from __future__ import annotations

import dataclasses
import html
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from pyaction.config import get_properties
from pyaction.http.message import Response, ServerRequest
from pyaction.kernel.exceptions import InvalidStatusError, UnknownFormatError
from pyaction.web.converters import encode_data, to_json
from pyaction.web.negotiation import (
    AcceptNegotiator,
    CharsetNegotiator,
    EncodingNegotiator,
    LanguageNegotiator,
    MimeResolver,
    MimeTypes,
)

_DEFAULT_MIME_TYPES = MimeTypes()

_CHARSET_PARAM = re.compile(r";\s*charset\s*=[^;]+", re.IGNORECASE)


def _check_status(status: int, allowed: range | tuple[int, ...], purpose: str) -> None:
    if status not in allowed:
        raise InvalidStatusError(f"Invalid status code {status} for {purpose}")


@dataclass(frozen=True)
class Reply:
    """Builds a response for ``request`` starting from ``response``."""

    request: ServerRequest
    response: Response
    mime_types: MimeResolver = field(default=_DEFAULT_MIME_TYPES, repr=False, compare=False)

    def _with(self, response: Response) -> Reply:
        return dataclasses.replace(self, response=response)

    # ------------------------------------------------------------------
    # Status and headers
    # ------------------------------------------------------------------

    def status(self, status: int | str, phrase: str = "") -> Reply:
        """Set the status code, e.g. ``status(404)`` or ``status("404 Not Found")``."""
        if isinstance(status, str):
            code, _, text = status.strip().partition(" ")
            if not code.isdigit():
                raise InvalidStatusError(f"Invalid status '{status}'")
            status, phrase = int(code), text.strip() or phrase

        _check_status(status, range(100, 600), "a response")
        return self._with(self.response.with_status(status, phrase))

    def header(self, name: str, value: Any, add: bool = False) -> Reply:
        """Set a header, or append another value when *add* is true."""
        response = (
            self.response.with_added_header(name, str(value))
            if add
            else self.response.with_header(name, str(value))
        )
        return self._with(response)

    def ok(self) -> Reply:
        return self.status(200)

    def created(self, location: str | None = None) -> Reply:
        """201 Created, with a ``Location`` header when *location* is given."""
        reply = self.status(201)
        return reply.header("Location", location) if location else reply

    def accepted(self) -> Reply:
        return self.status(202)

    def no_content(self, status: int = 204) -> Reply:
        """204 No Content or 205 Reset Content."""
        _check_status(status, (204, 205), "no content response")
        return self.status(status)

    def partial_content(self, range_from: int, range_to: int, total_size: int) -> Reply:
        """206 Partial Content for the inclusive byte range ``range_from-range_to``."""
        return (
            self.status(206)
            .header("Content-Range", f"bytes {range_from}-{range_to}/{total_size}")
            .header("Content-Length", range_to - range_from + 1)
        )

    def redirect(self, url: str, status: int | None = None) -> Reply:
        """Redirect to *url* with a short HTML body linking to it.

        The status defaults to ``pyaction.controller.redirect_status`` (303).
        """
        status = get_properties().redirect_status if status is None else status
        _check_status(status, range(300, 400), "redirect")

        url_html = html.escape(url)
        return (
            self.status(status)
            .header("Location", url)
            .output(f'You are being redirected to <a href="{url_html}">{url_html}</a>', "text/html")
        )

    def back(self) -> Reply:
        """Redirect to the referer when it is on the same host, else to ``/``."""
        return self.redirect(self.local_referer() or "/")

    def not_modified(self) -> Reply:
        return self.status(304)

    def bad_request(self, status: int = 400) -> Reply:
        _check_status(status, range(400, 500), "bad request response")
        return self.status(status)

    def unauthorized(self) -> Reply:
        return self.status(401)

    def payment_required(self) -> Reply:
        return self.status(402)

    def forbidden(self) -> Reply:
        return self.status(403)

    def not_found(self, status: int = 404) -> Reply:
        """404 Not Found, 405 Method Not Allowed or 406 Not Acceptable."""
        _check_status(status, (404, 405, 406), "not found response")
        return self.status(status)

    def conflict(self) -> Reply:
        return self.status(409)

    def too_many_requests(self) -> Reply:
        return self.status(429)

    def error(self, status: int = 500) -> Reply:
        _check_status(status, range(500, 600), "server error response")
        return self.status(status)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def get_mime(self, format: str) -> str:
        """Resolve a format token to a MIME type; MIME types pass through."""
        if "/" in format:
            return format

        mime = self.mime_types.get_mime_type(format)
        if mime is None:
            raise UnknownFormatError(
                f"Format '{format}' doesn't correspond with a MIME type",
                code="UNKNOWN_FORMAT",
                context={"format": format},
            )
        return mime

    def output(self, content: Any, format: str | None = None) -> Reply:
        """Write *content* to the body, setting ``Content-Type`` from *format*.

        Strings and bytes are written as they are. Other data is encoded for
        the format (JSON or XML); without a format it is rejected.
        """
        response = self.response

        if format is not None:
            mime = self.get_mime(format)
            response = response.with_header("Content-Type", mime)
        else:
            mime = response.get_header_line("Content-Type")

        if not isinstance(content, str | bytes):
            content = encode_data(content, mime or "none")

        return self._with(response.with_appended_body(content))

    def json(self, data: Any) -> Reply:
        """Output *data* as JSON."""
        return self.output(to_json(data), "application/json")

    def xml(self, data: Any, root_tag: str = "response") -> Reply:
        """Output *data* as XML under *root_tag*."""
        return self.output(encode_data(data, "application/xml", root_tag), "application/xml")

    # ------------------------------------------------------------------
    # Content negotiation
    # ------------------------------------------------------------------

    def _negotiate(self, negotiator: AcceptNegotiator, header: str, priorities: list[str]) -> str:
        return negotiator.get_best(self.request.get_header_line(header), priorities) or ""

    def accepted_content_type(self, priorities: list[str]) -> str:
        """Best match of *priorities* for the ``Accept`` header, or ``""``."""
        return self._negotiate(AcceptNegotiator(), "Accept", priorities)

    def accepted_language(self, priorities: list[str]) -> str:
        return self._negotiate(LanguageNegotiator(), "Accept-Language", priorities)

    def accepted_encoding(self, priorities: list[str]) -> str:
        return self._negotiate(EncodingNegotiator(), "Accept-Encoding", priorities)

    def accepted_charset(self, priorities: list[str]) -> str:
        return self._negotiate(CharsetNegotiator(), "Accept-Charset", priorities)

    def negotiate_content_type(self, priorities: list[str]) -> Reply:
        """Set ``Content-Type`` to the best accepted of *priorities*."""
        content_type = self.accepted_content_type(priorities)
        return self.header("Content-Type", content_type) if content_type else self

    def negotiate_language(self, priorities: list[str]) -> Reply:
        """Set ``Content-Language`` to the best accepted of *priorities*."""
        language = self.accepted_language(priorities)
        return self.header("Content-Language", language) if language else self

    def negotiate_encoding(self, priorities: list[str]) -> Reply:
        """Set ``Content-Encoding`` to the best accepted of *priorities*."""
        encoding = self.accepted_encoding(priorities)
        return self.header("Content-Encoding", encoding) if encoding else self

    def negotiate_charset(self, priorities: list[str]) -> Reply:
        """Replace the charset of the current ``Content-Type``, if one is set."""
        charset = self.accepted_charset(priorities)
        content_type = self.response.get_header_line("Content-Type")
        if not charset or not content_type:
            return self
        return self.header("Content-Type", f"{_CHARSET_PARAM.sub('', content_type)}; charset={charset}")

    # ------------------------------------------------------------------
    # Request and response checks
    # ------------------------------------------------------------------

    def local_referer(self) -> str | None:
        """The ``Referer`` header when its host equals the ``Host`` header."""
        referer = self.request.get_header_line("Referer")
        host = self.request.get_header_line("Host")
        if referer and urlsplit(referer).netloc == host:
            return referer
        return None

    def get_response_header(self, name: str) -> str:
        return self.response.get_header_line(name)

    @property
    def _code(self) -> int:
        return self.response.status_code or 200

    def is_informational(self) -> bool:
        return 100 <= self._code < 200

    def is_successful(self) -> bool:
        return 200 <= self._code < 300

    def is_redirection(self) -> bool:
        return 300 <= self._code < 400

    def is_client_error(self) -> bool:
        return 400 <= self._code < 500

    def is_server_error(self) -> bool:
        return 500 <= self._code < 600

    def is_error(self) -> bool:
        return self.is_client_error() or self.is_server_error()
