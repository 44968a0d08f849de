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
"""Guards — pre-action checks declared with :func:`guard`.

A guard inspects the request and either lets the action run (returns
``None``) or answers in its place::

    class RequireApiKey(Guard):
        def __init__(self, expected: str) -> None:
            self.expected = expected

        def check(self, api_key: Header[str] = "") -> Reply | None:
            if api_key != self.expected:
                return self.reply.forbidden().output("Invalid API key", "text")
            return None

    @guard(RequireApiKey, "secret")
    class AdminController(Controller): ...

The parameters of :meth:`Guard.check` are bound exactly like action
parameters.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from pyaction.http.message import Response, ServerRequest
from pyaction.kernel.exceptions import BindingError
from pyaction.web.context import MessageContext
from pyaction.web.reply import Reply
from pyaction.web.resolver import ParameterResolver

logger = structlog.get_logger("pyaction.web.guards")

GUARDS_ATTR = "__pyaction_guards__"

T = TypeVar("T")


class Guard(MessageContext, ABC):
    """Base class for guards."""

    @abstractmethod
    def check(self, *args: Any, **kwargs: Any) -> Response | Reply | None:
        """Return ``None`` to continue, or a response to answer with."""

    def __call__(self, request: ServerRequest, response: Response) -> Response | None:
        self.bind(request, response)
        kwargs = check_resolver(type(self)).resolve(request)
        result = self.check(**kwargs)
        if isinstance(result, Reply):
            return result.response
        return result


@functools.cache
def check_resolver(guard_cls: type[Guard]) -> ParameterResolver:
    """The resolver of *guard_cls*.check, built once per guard class."""
    return ParameterResolver(guard_cls.check)


@dataclass(frozen=True, eq=False)
class GuardFactory:
    """Builds a fresh guard instance for each request."""

    guard_cls: type[Guard]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __call__(self) -> Guard:
        return self.guard_cls(*self.args, **self.kwargs)


def guard(guard_cls: type[Guard], *args: Any, **kwargs: Any) -> Callable[[T], T]:
    """Declare a guard on a controller class or an action method.

    Stacked declarations run top to bottom. *args* and *kwargs* are passed to
    the guard's constructor.
    """
    if not (isinstance(guard_cls, type) and issubclass(guard_cls, Guard)):
        raise BindingError(f"{guard_cls!r} is not a Guard subclass")

    factory = GuardFactory(guard_cls, args, kwargs)

    def decorator(target: T) -> T:
        # Decorators apply bottom-up; prepend to keep declaration order.
        existing = declared_guards(target)
        setattr(target, GUARDS_ATTR, (factory, *existing))
        return target

    return decorator


def declared_guards(target: Any) -> tuple[GuardFactory, ...]:
    """Guards declared directly on *target*, not inherited ones."""
    if isinstance(target, type):
        return target.__dict__.get(GUARDS_ATTR, ())
    return getattr(target, GUARDS_ATTR, ())


class Guardian:
    """Runs a chain of guards and stops at the first one that answers."""

    @staticmethod
    def guard(
        factories: Iterable[GuardFactory],
        request: ServerRequest,
        response: Response,
    ) -> Response | None:
        for factory in factories:
            result = factory()(request, response)
            if result is not None:
                logger.info(
                    "guard_short_circuit",
                    guard=factory.guard_cls.__name__,
                    status=result.status_code,
                )
                return result
        return None
