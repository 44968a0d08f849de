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
"""Action dispatch — resolve an action, run guards and hooks, invoke it.

The per-class :class:`ActionTable` holds everything that can be worked out
from declarations alone (bindings and guards of every action) so a request
only pays for resolving values.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from pyaction.config import get_properties
from pyaction.http.message import Response, ServerRequest
from pyaction.kernel.exceptions import ParameterException
from pyaction.web.guards import GuardFactory, Guardian, check_resolver, declared_guards
from pyaction.web.hooks import ShortCircuit
from pyaction.web.reply import Reply
from pyaction.web.resolver import ParameterResolver

logger = structlog.get_logger("pyaction.web.dispatcher")

ACTIONS_ATTR = "__pyaction_actions__"

_CAMEL_HUMP = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\W_]+")


def action_method_name(action: str) -> str:
    """``do-the-thing`` and ``doTheThing`` both become ``do_the_thing``."""
    words = _SEPARATORS.split(_CAMEL_HUMP.sub(" ", action))
    return "_".join(word.lower() for word in words if word)


@dataclass(frozen=True)
class CompiledAction:
    """An action method with its parameter bindings and method guards."""

    name: str
    method: Callable[..., Any]
    resolver: ParameterResolver
    guards: tuple[GuardFactory, ...]


@dataclass(frozen=True)
class ActionTable:
    """Class guards and compiled actions of one controller class."""

    controller_cls: type
    guards: tuple[GuardFactory, ...]
    actions: Mapping[str, CompiledAction]

    @classmethod
    def compile(cls, controller_cls: type, reserved: Iterable[str] = ()) -> ActionTable:
        """Compile *controller_cls*; *reserved* names are never actions.

        Raises:
            BindingError: If an action or a declared guard binds a parameter
                without a resolver.
        """
        reserved = frozenset(reserved)
        actions: dict[str, CompiledAction] = {}
        class_guards: list[GuardFactory] = []

        for klass in reversed(controller_cls.__mro__):
            class_guards.extend(declared_guards(klass))
            for name, member in vars(klass).items():
                if name.startswith("_") or name in reserved or not inspect.isfunction(member):
                    continue
                actions[name] = CompiledAction(
                    name=name,
                    method=member,
                    resolver=ParameterResolver(member),
                    guards=declared_guards(member),
                )

        method_guards = [factory for action in actions.values() for factory in action.guards]
        for factory in (*class_guards, *method_guards):
            check_resolver(factory.guard_cls)

        return cls(controller_cls=controller_cls, guards=tuple(class_guards), actions=actions)

    def get(self, name: str) -> CompiledAction | None:
        return self.actions.get(name)


def table_for(controller_cls: type, reserved: Iterable[str] = ()) -> ActionTable:
    """Return the cached table of *controller_cls*, compiling it on first use."""
    table = controller_cls.__dict__.get(ACTIONS_ATTR)
    if table is None:
        table = ActionTable.compile(controller_cls, reserved)
        setattr(controller_cls, ACTIONS_ATTR, table)
    return table


def _finalize(result: Any, controller: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, Reply):
        return result.response
    return controller.response


def dispatch(controller: Any, table: ActionTable, request: ServerRequest, response: Response) -> Response:
    """Run the action pipeline of *controller* for one request.

    Order: class guards, ``before()``, method guards, parameter binding, the
    action, ``after()``. Guards and hooks may answer early; a missing
    required parameter answers 400. Exceptions raised by the action itself
    propagate.
    """
    properties = get_properties()
    controller.bind(request, response)
    controller_name = type(controller).__name__

    action = request.get_attribute("route:action") or properties.default_action
    compiled = table.get(action_method_name(action))
    if compiled is None:
        logger.info("action_not_found", controller=controller_name, action=action)
        return response.with_status(404).with_body(properties.not_found_message)

    try:
        answer = Guardian.guard(table.guards, request, controller.response)
        if answer is not None:
            return answer

        hook = controller.before()
        if isinstance(hook, ShortCircuit):
            logger.info("before_short_circuit", controller=controller_name, action=compiled.name)
            return _finalize(hook.response, controller)

        answer = Guardian.guard(compiled.guards, request, controller.response)
        if answer is not None:
            return answer

        kwargs = compiled.resolver.resolve(request)
    except ParameterException as exc:
        logger.info(
            "parameter_rejected",
            controller=controller_name,
            action=compiled.name,
            source=exc.source,
            key=exc.key,
        )
        return controller.response.with_status(400).with_body(str(exc))

    result = compiled.method(controller, **kwargs)

    hook = controller.after(result)
    if isinstance(hook, ShortCircuit):
        result = hook.response

    return _finalize(result, controller)
