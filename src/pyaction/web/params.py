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
"""Request binding declarations for action method parameters.

Bindings are attached with ``typing.Annotated``; the subscript form is a
shorthand for the default declaration::

    def show(self, item_id: Annotated[int, Path()]) -> Reply: ...
    def show(self, item_id: Path[int]) -> Reply: ...
    def search(self, page_size: Annotated[int, QueryParam("per-page")] = 20): ...
    def create(self, data: Body[dict]): ...
    def secured(self, api_key: Header[str]): ...         # reads X-Api-Key
    def contact(self, email: Annotated[str, BodyParam(type="email")]): ...

Parameters without a declaration are bound as :class:`Path` parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from pyaction.kernel.exceptions import BindingError

SCALAR_TYPES = frozenset({"bool", "int", "float", "email", "url"})


@dataclass(frozen=True)
class Parameter:
    """Base class of all binding declarations.

    ``kind`` selects the resolver registered for the declaration.
    """

    kind: ClassVar[str] = ""

    def __class_getitem__(cls, item: Any) -> Any:
        return Annotated[item, cls()]


@dataclass(frozen=True)
class SingleParameter(Parameter):
    """Binding that extracts one value, optionally coerced to a scalar type.

    Args:
        key: Request key to read; derived from the parameter name when omitted.
        type: One of ``bool``, ``int``, ``float``, ``email`` or ``url``.
            Derived from the annotation when omitted.
    """

    key: str | None = None
    type: str | None = None

    def __post_init__(self) -> None:
        if self.type is not None and self.type not in SCALAR_TYPES:
            raise BindingError(f"Undefined parameter type '{self.type}'")


class Path(SingleParameter):
    """Path parameter set by the router as the ``route:{key}`` attribute."""

    kind = "path"


class QueryParam(SingleParameter):
    """Single query parameter; ``page_size`` reads ``page-size``."""

    kind = "query_param"


class BodyParam(SingleParameter):
    """Single entry of the parsed request body."""

    kind = "body_param"


class Header(SingleParameter):
    """Single header line; ``api_key`` or ``apiKey`` reads ``Api-Key``."""

    kind = "header"


class Cookie(SingleParameter):
    """Single cookie value."""

    kind = "cookie"


class Attr(SingleParameter):
    """Arbitrary request attribute."""

    kind = "attribute"


class File(SingleParameter):
    """Single uploaded file by form field name."""

    kind = "uploaded_file"


class Query(Parameter):
    """All query parameters."""

    kind = "query"


class Body(Parameter):
    """Parsed body (with uploaded files for multipart), or raw text for ``str``."""

    kind = "body"


class Headers(Parameter):
    """All headers, multiple values joined with ``", "``."""

    kind = "headers"


class Cookies(Parameter):
    """All cookies."""

    kind = "cookies"


class Files(Parameter):
    """All uploaded files."""

    kind = "uploaded_files"
