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
"""MIME lookup and Accept-header negotiation.

:class:`MimeTypes` maps short format tokens (``json``, ``html``) to MIME
types. :class:`AcceptNegotiator` and its subclasses pick the best of a list
of server priorities for an ``Accept*`` header value.
"""

from __future__ import annotations

import mimetypes
from typing import Protocol, runtime_checkable

_FORMATS: dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "json": "application/json",
    "xml": "application/xml",
    "text": "text/plain",
    "txt": "text/plain",
    "csv": "text/csv",
    "js": "application/javascript",
    "css": "text/css",
    "png": "image/png",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "zip": "application/zip",
}


@runtime_checkable
class MimeResolver(Protocol):
    """Port for format-to-MIME lookup."""

    def get_mime_type(self, format: str) -> str | None: ...


class MimeTypes:
    """Format lookup backed by a builtin table and the ``mimetypes`` module."""

    def __init__(self, extra: dict[str, str] | None = None) -> None:
        self._formats = {**_FORMATS, **(extra or {})}

    def get_mime_type(self, format: str) -> str | None:
        token = format.lower().lstrip(".")
        if token in self._formats:
            return self._formats[token]
        mime, _ = mimetypes.guess_type(f"file.{token}", strict=False)
        return mime


# ---------------------------------------------------------------------------
# Negotiation
# ---------------------------------------------------------------------------


def parse_accept(header: str) -> list[tuple[str, float]]:
    """Parse an ``Accept*`` header into ``(value, quality)`` pairs, best first.

    ``"text/html, application/json;q=0.9, */*;q=0.1"`` gives
    ``[("text/html", 1.0), ("application/json", 0.9), ("*/*", 0.1)]``.
    Entries with an unparsable quality are skipped.
    """
    entries: list[tuple[str, float]] = []
    for part in header.split(","):
        segments = [s.strip() for s in part.split(";")]
        value = segments[0]
        if not value:
            continue
        quality = 1.0
        for seg in segments[1:]:
            if seg[:2].lower() == "q=":
                try:
                    quality = float(seg[2:])
                except ValueError:
                    quality = -1.0
        if quality < 0:
            continue
        entries.append((value, quality))

    entries.sort(key=lambda e: e[1], reverse=True)
    return entries


class AcceptNegotiator:
    """Negotiates media types from an ``Accept`` header."""

    def matches(self, accepted: str, candidate: str) -> bool:
        accepted = accepted.lower()
        candidate = candidate.lower()
        if accepted in ("*", "*/*"):
            return True
        if accepted.endswith("/*"):
            return candidate.split("/", 1)[0] == accepted[:-2]
        return accepted == candidate

    def get_best(self, header: str, priorities: list[str]) -> str | None:
        """Return the priority that best satisfies *header*, or ``None``.

        An empty header accepts the first priority. Ties in quality go to
        the earlier entry of the header, then to the earlier priority.
        """
        if not priorities:
            return None
        if not header.strip():
            return priorities[0]

        for accepted, quality in parse_accept(header):
            if quality <= 0:
                continue
            for candidate in priorities:
                if self.matches(accepted, candidate) and not self._excluded(header, candidate):
                    return candidate
        return None

    def _excluded(self, header: str, candidate: str) -> bool:
        """True when the header explicitly refuses *candidate* with ``q=0``."""
        return any(
            q <= 0 and value.lower() == candidate.lower() for value, q in parse_accept(header)
        )


class LanguageNegotiator(AcceptNegotiator):
    """Negotiates ``Accept-Language``; ``en`` accepts ``en-US`` and vice versa."""

    def matches(self, accepted: str, candidate: str) -> bool:
        accepted = accepted.lower()
        candidate = candidate.lower()
        if accepted == "*":
            return True
        return (
            accepted == candidate
            or candidate.split("-", 1)[0] == accepted
            or accepted.split("-", 1)[0] == candidate
        )


class EncodingNegotiator(AcceptNegotiator):
    """Negotiates ``Accept-Encoding``."""


class CharsetNegotiator(AcceptNegotiator):
    """Negotiates ``Accept-Charset``."""
