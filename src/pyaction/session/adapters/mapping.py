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
"""MappingSession — exposes a plain mapping as session attributes.

Starlette's ``SessionMiddleware`` stores the session as a ``dict`` on
``request.session``; wrapping it keeps writes visible to the middleware.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any


class MappingSession:
    """Session attributes backed by a mutable mapping, shared not copied."""

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self._data = data

    @property
    def data(self) -> MutableMapping[str, Any]:
        return self._data

    def get_attribute(self, name: str) -> Any | None:
        return self._data.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self._data[name] = value

    def remove_attribute(self, name: str) -> None:
        self._data.pop(name, None)
