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
"""Tests for guards, the @guard declaration and the Guardian chain."""

import pytest

from pyaction.http import Response, ServerRequest
from pyaction.kernel.exceptions import BindingError, ParameterException
from pyaction.web.guards import Guard, GuardFactory, Guardian, declared_guards, guard
from pyaction.web.params import Header
from pyaction.web.reply import Reply


class RequireApiKey(Guard):
    def __init__(self, expected: str = "secret") -> None:
        self.expected = expected

    def check(self, x_api_key: Header[str] = "") -> Reply | None:
        if x_api_key != self.expected:
            return self.reply.forbidden().output("Invalid API key", "text")
        return None


class RequireAgent(Guard):
    def check(self, user_agent: Header[str]) -> Response | None:
        return None


class Teapot(Guard):
    calls: list[str] = []

    def __init__(self, name: str) -> None:
        self.name = name

    def check(self) -> Response | None:
        Teapot.calls.append(self.name)
        return self.response.with_status(418)


class Pass(Guard):
    calls: list[str] = []

    def __init__(self, name: str) -> None:
        self.name = name

    def check(self) -> None:
        Pass.calls.append(self.name)
        return None


@pytest.fixture(autouse=True)
def _reset_calls():
    Teapot.calls.clear()
    Pass.calls.clear()


class TestGuard:
    def test_passes(self):
        request = ServerRequest.build(headers={"X-Api-Key": "secret"})
        assert RequireApiKey()(request, Response()) is None

    def test_reply_converted_to_response(self):
        result = RequireApiKey()(ServerRequest.build(), Response())
        assert isinstance(result, Response)
        assert result.status_code == 403
        assert result.text == "Invalid API key"

    def test_constructor_arguments(self):
        request = ServerRequest.build(headers={"X-Api-Key": "other"})
        assert RequireApiKey("other")(request, Response()) is None

    def test_missing_required_parameter(self):
        with pytest.raises(ParameterException, match="Missing required header 'User-Agent'"):
            RequireAgent()(ServerRequest.build(), Response())

    def test_guard_is_abstract(self):
        with pytest.raises(TypeError):
            Guard()


class TestGuardDecorator:
    def test_declaration_order_on_function(self):
        @guard(Pass, "first")
        @guard(Pass, "second")
        def action(self): ...

        factories = declared_guards(action)
        assert [f.args for f in factories] == [("first",), ("second",)]

    def test_class_guards_not_inherited_in_dict(self):
        @guard(Pass, "base")
        class Base:
            pass

        class Child(Base):
            pass

        assert len(declared_guards(Base)) == 1
        assert declared_guards(Child) == ()

    def test_rejects_non_guard(self):
        with pytest.raises(BindingError, match="is not a Guard subclass"):
            guard(object)

    def test_factory_builds_fresh_instances(self):
        factory = GuardFactory(Pass, ("x",))
        assert factory() is not factory()
        assert factory().name == "x"


class TestGuardian:
    def test_returns_none_when_all_pass(self):
        factories = [GuardFactory(Pass, ("a",)), GuardFactory(Pass, ("b",))]
        assert Guardian.guard(factories, ServerRequest.build(), Response()) is None
        assert Pass.calls == ["a", "b"]

    def test_first_answer_wins(self):
        factories = [GuardFactory(Pass, ("a",)), GuardFactory(Teapot, ("t",)), GuardFactory(Pass, ("b",))]
        result = Guardian.guard(factories, ServerRequest.build(), Response())
        assert result.status_code == 418
        assert Pass.calls == ["a"]
        assert Teapot.calls == ["t"]
