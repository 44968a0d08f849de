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
"""Scalar coercion for single-value parameters.

Values are validated with Pydantic in lax mode. ``None`` passes through and
input that does not validate yields :data:`INVALID` instead of raising.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import AnyUrl, EmailStr, TypeAdapter, ValidationError


class _Invalid:
    """Falsy marker for a value that failed coercion."""

    _instance: _Invalid | None = None

    def __new__(cls) -> _Invalid:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "INVALID"


INVALID: Final = _Invalid()

_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "bool": TypeAdapter(bool),
    "int": TypeAdapter(int),
    "float": TypeAdapter(float),
    "email": TypeAdapter(EmailStr),
    "url": TypeAdapter(AnyUrl),
}

# email and url are validated but returned as sent
_VALIDATE_ONLY = frozenset({"email", "url"})

_TYPE_NAMES: dict[type, str] = {bool: "bool", int: "int", float: "float"}


def scalar_type_for(annotation: Any) -> str | None:
    """Map a declared Python type to a scalar type name, if any."""
    if isinstance(annotation, type):
        return _TYPE_NAMES.get(annotation)
    return None


def coerce(value: Any, type_name: str | None) -> Any:
    """Coerce *value* to *type_name*; :data:`INVALID` when it does not fit."""
    if value is None or type_name is None:
        return value

    try:
        result = _ADAPTERS[type_name].validate_python(value)
    except ValidationError:
        return INVALID

    return value if type_name in _VALIDATE_ONLY else result
