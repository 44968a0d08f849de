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
"""Parameter resolution — binding kinds mapped to resolver functions.

Resolvers are registered in a static table keyed by the binding ``kind``.
:class:`ParameterResolver` inspects a handler signature once and resolves all
of its parameters from a :class:`ServerRequest` on every call.
"""

from __future__ import annotations

import inspect
import re
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from pyaction.http.message import ServerRequest
from pyaction.kernel.exceptions import BindingError, ParameterException
from pyaction.web.coercion import coerce, scalar_type_for
from pyaction.web.params import Parameter, Path, SingleParameter

_MISSING = object()

ResolverFn = Callable[[Any, ServerRequest, str, Any, bool], Any]

_RESOLVERS: dict[str, ResolverFn] = {}


def resolver(kind: str) -> Callable[[ResolverFn], ResolverFn]:
    """Register *fn* as the resolver for bindings of *kind*."""

    def decorator(fn: ResolverFn) -> ResolverFn:
        _RESOLVERS[kind] = fn
        return fn

    return decorator


def registered_kinds() -> frozenset[str]:
    return frozenset(_RESOLVERS)


# ---------------------------------------------------------------------------
# Key conventions
# ---------------------------------------------------------------------------

_CAMEL_HUMP = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def header_name(name: str) -> str:
    """``x_api_key`` and ``xApiKey`` both become ``X-Api-Key``."""
    words = _CAMEL_HUMP.sub("_", name).split("_")
    return "-".join(word.capitalize() for word in words if word)


def query_key(name: str) -> str:
    """``page_size`` becomes ``page-size``."""
    return name.replace("_", "-")


def _scalar_type(binding: SingleParameter, declared_type: Any) -> str | None:
    return binding.type if binding.type is not None else scalar_type_for(declared_type)


def _lookup(params: Any, key: str) -> Any:
    if isinstance(params, Mapping):
        return params.get(key)
    if isinstance(params, BaseModel) and key in type(params).model_fields:
        return getattr(params, key)
    return None


def replace_recursive(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, Mapping):
            merged[key] = replace_recursive(merged[key], value)
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Single-value resolvers
# ---------------------------------------------------------------------------


@resolver("path")
def _resolve_path(binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    key = binding.key or name
    value = request.get_attribute(f"route:{{{key}}}")
    if required and value is None:
        raise ParameterException("path parameter", key)
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("query_param")
def _resolve_query_param(
    binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool
) -> Any:
    key = binding.key or query_key(name)
    value = request.query_params.get(key)
    if required and value is None:
        raise ParameterException("query parameter", key)
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("body_param")
def _resolve_body_param(
    binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool
) -> Any:
    key = binding.key or name
    body = request.parsed_body
    value = _lookup(body, key) if body is not None else None
    if required and value is None:
        raise ParameterException("body parameter", key)
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("header")
def _resolve_header(binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    key = binding.key or header_name(name)
    value = request.get_header_line(key)
    if value == "":
        if required:
            raise ParameterException("header", key)
        return None
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("cookie")
def _resolve_cookie(binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    key = binding.key or name
    value = request.cookie_params.get(key)
    if required and value is None:
        raise ParameterException("cookie parameter", key)
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("attribute")
def _resolve_attribute(
    binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool
) -> Any:
    key = binding.key or name
    value = request.get_attribute(key)
    if required and value is None:
        raise ParameterException("request attribute", key)
    return coerce(value, _scalar_type(binding, declared_type))


@resolver("uploaded_file")
def _resolve_uploaded_file(
    binding: SingleParameter, request: ServerRequest, name: str, declared_type: Any, required: bool
) -> Any:
    key = binding.key or name
    value = request.uploaded_files.get(key)
    if required and value is None:
        raise ParameterException("uploaded file", key)
    return value


# ---------------------------------------------------------------------------
# Whole-source resolvers
# ---------------------------------------------------------------------------


@resolver("query")
def _resolve_query(binding: Parameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    return dict(request.query_params)


@resolver("body")
def _resolve_body(binding: Parameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    if declared_type is str:
        try:
            return request.body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParameterException("body", name, "Invalid request body encoding") from exc
    if declared_type is bytes:
        return request.body

    data = request.parsed_body
    if isinstance(data, Mapping) and request.content_type == "multipart/form-data":
        data = replace_recursive(dict(data), request.uploaded_files)

    if isinstance(declared_type, type) and issubclass(declared_type, BaseModel) and data is not None:
        try:
            return declared_type.model_validate(data)
        except ValidationError as exc:
            detail = "; ".join(
                f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
            )
            raise ParameterException("body", name, f"Invalid request body: {detail}") from exc
    return data


@resolver("headers")
def _resolve_headers(binding: Parameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    return {key: ", ".join(values) for key, values in request.get_headers().items()}


@resolver("cookies")
def _resolve_cookies(binding: Parameter, request: ServerRequest, name: str, declared_type: Any, required: bool) -> Any:
    return dict(request.cookie_params)


@resolver("uploaded_files")
def _resolve_uploaded_files(
    binding: Parameter, request: ServerRequest, name: str, declared_type: Any, required: bool
) -> Any:
    return dict(request.uploaded_files)


# ---------------------------------------------------------------------------
# Signature inspection
# ---------------------------------------------------------------------------


def _unwrap_optional(hint: Any) -> Any:
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


@dataclass(frozen=True)
class ResolvedParam:
    """Binding metadata for a single handler parameter."""

    name: str
    binding: Parameter
    declared_type: Any
    default: Any = _MISSING

    @property
    def required(self) -> bool:
        return self.default is _MISSING


class ParameterResolver:
    """Inspects a handler's signature and resolves its parameters from a request.

    Inspection happens once, when the resolver is built, and fails with
    :class:`BindingError` for declarations without a registered resolver.
    Parameters without a declaration are bound as :class:`Path` parameters.
    """

    def __init__(self, handler: Callable[..., Any]) -> None:
        self.handler = handler
        self.params = self._inspect(handler)

    def _inspect(self, handler: Callable[..., Any]) -> list[ResolvedParam]:
        hints = typing.get_type_hints(handler, include_extras=True)
        sig = inspect.signature(handler)
        params: list[ResolvedParam] = []

        for name, param in sig.parameters.items():
            if name == "self":
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            hint = _unwrap_optional(hints.get(name, Any))
            binding: Parameter = Path()
            if get_origin(hint) is Annotated:
                declared, *extras = get_args(hint)
                declarations = [e for e in extras if isinstance(e, Parameter)]
                if declarations:
                    binding = declarations[0]
            else:
                declared = hint

            if binding.kind not in _RESOLVERS:
                raise BindingError(
                    f"No resolver registered for {type(binding).__name__} "
                    f"on parameter '{name}' of {getattr(handler, '__qualname__', handler)}()"
                )

            default = param.default if param.default is not inspect.Parameter.empty else _MISSING
            params.append(
                ResolvedParam(
                    name=name,
                    binding=binding,
                    declared_type=_unwrap_optional(declared),
                    default=default,
                )
            )

        return params

    def resolve(self, request: ServerRequest) -> dict[str, Any]:
        """Resolve all parameters, raising ParameterException for missing required values."""
        kwargs: dict[str, Any] = {}
        for param in self.params:
            value = _RESOLVERS[param.binding.kind](
                param.binding, request, param.name, param.declared_type, param.required
            )
            if value is None and not param.required:
                value = param.default
            kwargs[param.name] = value
        return kwargs
