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
"""Immutable HTTP message pair consumed and produced by controllers.

Both messages are frozen; every ``with_*`` method returns a modified copy.
Headers use Starlette's case-insensitive, multi-valued ``Headers``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import urlsplit

from starlette.datastructures import Headers

HeaderInput = Headers | Mapping[str, str] | Iterable[tuple[str, str]] | None


def make_headers(headers: HeaderInput = None) -> Headers:
    """Build an immutable ``Headers`` from a mapping, pair list, or ``Headers``."""
    if headers is None:
        return Headers()
    if isinstance(headers, Headers):
        return headers
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    raw = [(str(k).lower().encode("latin-1"), str(v).encode("latin-1")) for k, v in pairs]
    return Headers(raw=raw)


def _header_lines(headers: Headers, name: str) -> list[str]:
    return headers.getlist(name)


def _group_headers(headers: Headers) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for key, value in headers.items():
        grouped.setdefault(key, []).append(value)
    return grouped


class UploadedFile:
    """A file received in a multipart request.

    Attributes:
        filename: Original filename from the client.
        content_type: MIME type of the uploaded file.
        size: File size in bytes.
    """

    def __init__(
        self,
        filename: str,
        content_type: str,
        size: int,
        file: BinaryIO,
    ) -> None:
        self._filename = filename
        self._content_type = content_type
        self._size = size
        self._file = file

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def size(self) -> int:
        return self._size

    def read(self) -> bytes:
        """Read the entire file content into memory."""
        self._file.seek(0)
        return self._file.read()

    def save(self, path: str | Path) -> None:
        """Write the file content to *path*."""
        Path(path).write_bytes(self.read())

    def __repr__(self) -> str:
        return f"UploadedFile(filename={self._filename!r}, content_type={self._content_type!r}, size={self._size})"


@dataclass(frozen=True)
class ServerRequest:
    """An inbound HTTP request with an open-ended attribute bag.

    Upstream routers store the resolved route in ``attributes``:
    ``route:action`` names the action and ``route:{name}`` holds each path
    parameter.
    """

    method: str = "GET"
    uri: str = "/"
    headers: Headers = field(default_factory=Headers)
    query_params: dict[str, Any] = field(default_factory=dict)
    parsed_body: Any = None
    body: bytes = b""
    uploaded_files: dict[str, Any] = field(default_factory=dict)
    cookie_params: dict[str, str] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        method: str = "GET",
        uri: str = "/",
        *,
        headers: HeaderInput = None,
        query_params: Mapping[str, Any] | None = None,
        parsed_body: Any = None,
        body: bytes | str = b"",
        uploaded_files: Mapping[str, Any] | None = None,
        cookie_params: Mapping[str, str] | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> ServerRequest:
        """Convenience constructor accepting plain mappings."""
        return cls(
            method=method.upper(),
            uri=uri,
            headers=make_headers(headers),
            query_params=dict(query_params or {}),
            parsed_body=parsed_body,
            body=body.encode() if isinstance(body, str) else body,
            uploaded_files=dict(uploaded_files or {}),
            cookie_params=dict(cookie_params or {}),
            attributes=dict(attributes or {}),
        )

    @property
    def path(self) -> str:
        return urlsplit(self.uri).path or "/"

    @property
    def content_type(self) -> str:
        """Media type of the body without parameters, lowercased."""
        return self.get_header_line("Content-Type").split(";", 1)[0].strip().lower()

    def get_header(self, name: str) -> list[str]:
        return _header_lines(self.headers, name)

    def get_header_line(self, name: str) -> str:
        """All values of a header joined with ``", "``; empty when absent."""
        return ", ".join(_header_lines(self.headers, name))

    def get_headers(self) -> dict[str, list[str]]:
        """All headers grouped by (lowercase) name."""
        return _group_headers(self.headers)

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_attribute(self, key: str, value: Any) -> ServerRequest:
        return dataclasses.replace(self, attributes={**self.attributes, key: value})

    def with_attributes(self, values: Mapping[str, Any]) -> ServerRequest:
        return dataclasses.replace(self, attributes={**self.attributes, **values})

    def without_attribute(self, key: str) -> ServerRequest:
        return dataclasses.replace(
            self, attributes={k: v for k, v in self.attributes.items() if k != key}
        )

    def with_header(self, name: str, value: str) -> ServerRequest:
        headers = self.headers.mutablecopy()
        headers[name] = value
        return dataclasses.replace(self, headers=Headers(raw=headers.raw))

    def with_query_params(self, query_params: Mapping[str, Any]) -> ServerRequest:
        return dataclasses.replace(self, query_params=dict(query_params))

    def with_parsed_body(self, parsed_body: Any) -> ServerRequest:
        return dataclasses.replace(self, parsed_body=parsed_body)

    def with_uploaded_files(self, uploaded_files: Mapping[str, Any]) -> ServerRequest:
        return dataclasses.replace(self, uploaded_files=dict(uploaded_files))

    def with_cookie_params(self, cookie_params: Mapping[str, str]) -> ServerRequest:
        return dataclasses.replace(self, cookie_params=dict(cookie_params))


@dataclass(frozen=True)
class Response:
    """An outbound HTTP response.

    ``status_code`` 200 and an empty ``reason_phrase`` are the defaults; the
    body is accumulated bytes.
    """

    status_code: int = 200
    reason_phrase: str = ""
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    @classmethod
    def build(
        cls,
        status_code: int = 200,
        *,
        headers: HeaderInput = None,
        body: bytes | str = b"",
        reason_phrase: str = "",
    ) -> Response:
        return cls(
            status_code=status_code,
            reason_phrase=reason_phrase,
            headers=make_headers(headers),
            body=body.encode() if isinstance(body, str) else body,
        )

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def get_header(self, name: str) -> list[str]:
        return _header_lines(self.headers, name)

    def get_header_line(self, name: str) -> str:
        return ", ".join(_header_lines(self.headers, name))

    def get_headers(self) -> dict[str, list[str]]:
        return _group_headers(self.headers)

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def with_status(self, code: int, reason_phrase: str = "") -> Response:
        return dataclasses.replace(self, status_code=int(code), reason_phrase=reason_phrase)

    def with_header(self, name: str, value: str) -> Response:
        """Replace all values of *name* with *value*."""
        headers = self.headers.mutablecopy()
        headers[name] = value
        return dataclasses.replace(self, headers=Headers(raw=headers.raw))

    def with_added_header(self, name: str, value: str) -> Response:
        """Append *value* to the values of *name*."""
        headers = self.headers.mutablecopy()
        headers.append(name, value)
        return dataclasses.replace(self, headers=Headers(raw=headers.raw))

    def without_header(self, name: str) -> Response:
        headers = self.headers.mutablecopy()
        if name in headers:
            del headers[name]
        return dataclasses.replace(self, headers=Headers(raw=headers.raw))

    def with_appended_body(self, content: str | bytes) -> Response:
        """Return a copy with *content* written after the current body."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        return dataclasses.replace(self, body=self.body + data)

    def with_body(self, content: str | bytes) -> Response:
        data = content.encode("utf-8") if isinstance(content, str) else content
        return dataclasses.replace(self, body=data)
