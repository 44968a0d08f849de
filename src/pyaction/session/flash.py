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
"""Flash — a one-time message carried to the next request in the session.

A flash is written with :meth:`Flash.set` and read once with
:meth:`Flash.get`; reading removes it from the session but the same
:class:`Flash` keeps returning its copy for the rest of the request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pyaction.session.ports.outbound import SessionAttributes


@dataclass(frozen=True)
class FlashMessage:
    """A flash type (``"error"``, ``"notice"``, ``"success"``, ...) and message."""

    type: str | None
    message: Any = None

    @classmethod
    def from_value(cls, value: Any) -> FlashMessage:
        if isinstance(value, FlashMessage):
            return value
        if isinstance(value, dict):
            return cls(type=value.get("type"), message=value.get("message"))
        return cls(type=None, message=value)

    def to_value(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message}

    def __str__(self) -> str:
        return "" if self.message is None else str(self.message)


# States: nothing cached, cached and still in the session, cached and removed.


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Pending:
    value: FlashMessage


@dataclass(frozen=True)
class Consumed:
    value: FlashMessage


FlashState = Empty | Pending | Consumed


class Flash:
    """Flash message stored under *key* in *session*."""

    def __init__(self, session: SessionAttributes, key: str = "flash") -> None:
        self._session = session
        self._key = key
        self._state: FlashState = Empty()

    @property
    def state(self) -> FlashState:
        return self._state

    def is_issued(self) -> bool:
        """Whether the session holds a flash. Does not consume it."""
        return self._session.get_attribute(self._key) is not None

    def set(self, type: str, message: Any) -> None:
        self._session.set_attribute(self._key, FlashMessage(type, message).to_value())
        self._state = Empty()

    def get(self) -> FlashMessage | None:
        """Return the flash, removing it from the session on first read."""
        state = self._state
        if isinstance(state, Empty):
            value = self._session.get_attribute(self._key)
            if value is None:
                return None
            self._session.remove_attribute(self._key)
            self._state = Consumed(FlashMessage.from_value(value))
        elif isinstance(state, Pending):
            self._state = Consumed(state.value)

        return self._state.value

    def reissue(self) -> None:
        """Keep the flash for the next request as well."""
        state = self._state
        if isinstance(state, Empty):
            value = self._session.get_attribute(self._key)
            if value is not None:
                self._state = Pending(FlashMessage.from_value(value))
            return

        self._session.set_attribute(self._key, state.value.to_value())
        self._state = Pending(state.value)

    def clear(self) -> None:
        self._state = Empty()
        self._session.remove_attribute(self._key)

    @property
    def type(self) -> str | None:
        data = self.get()
        return data.type if data is not None else None

    @property
    def message(self) -> Any:
        data = self.get()
        return data.message if data is not None else None

    def __str__(self) -> str:
        message = self.message
        return "" if message is None else str(message)
