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
"""Starlette adapter — run controllers as Starlette endpoints.

Converts Starlette requests to :class:`ServerRequest`, runs the controller
and converts the resulting :class:`Response` back::

    app = Starlette(routes=[
        *controller_routes(ItemController, {"/items": "index", "/items/{item_id}": "show"}),
        Route("/ping", ControllerEndpoint(PingController)),
    ])
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any
from xml.etree.ElementTree import ParseError

import structlog
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from pyaction.http.message import Response, ServerRequest, UploadedFile
from pyaction.web.controller import Controller
from pyaction.web.converters import xml_to_dict

logger = structlog.get_logger("pyaction.web.adapters.starlette")

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
_XML_TYPES = ("application/xml", "text/xml")


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


def _to_uploaded_file(upload: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        size=upload.size or 0,
        file=upload.file,
    )


async def _parse_body(request: Request, body: bytes) -> tuple[Any, dict[str, Any]]:
    media_type = _media_type(request)

    if media_type in _FORM_TYPES:
        form = await request.form()
        fields: dict[str, Any] = {}
        files: dict[str, Any] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = _to_uploaded_file(value)
            else:
                fields[key] = value
        return fields, files

    if not body:
        return None, {}

    try:
        if media_type == "application/json" or media_type.endswith("+json"):
            return json.loads(body), {}
        if media_type in _XML_TYPES or media_type.endswith("+xml"):
            return xml_to_dict(body.decode("utf-8")), {}
    except (ValueError, ParseError) as exc:
        logger.info("request_body_unparsable", media_type=media_type, error=str(exc))
        raise HTTPException(status_code=400, detail="Malformed request body") from exc

    return None, {}


async def from_starlette(request: Request, action: str | None = None) -> ServerRequest:
    """Convert a Starlette request.

    Path parameters become ``route:{name}`` attributes. The action is *action*
    when given, else the ``action`` path parameter when the route has one.
    """
    body = await request.body()
    parsed_body, uploaded_files = await _parse_body(request, body)

    attributes: dict[str, Any] = {
        f"route:{{{name}}}": value for name, value in request.path_params.items()
    }
    route_action = action or request.path_params.get("action")
    if route_action:
        attributes["route:action"] = route_action
    if "session" in request.scope:
        attributes["session"] = request.session

    return ServerRequest(
        method=request.method,
        uri=str(request.url),
        headers=request.headers,
        query_params=dict(request.query_params),
        parsed_body=parsed_body,
        body=body,
        uploaded_files=uploaded_files,
        cookie_params=dict(request.cookies),
        attributes=attributes,
    )


def to_starlette(response: Response) -> StarletteResponse:
    """Convert a :class:`Response`, keeping repeated headers."""
    result = StarletteResponse(content=response.body, status_code=response.status_code)
    computed = [
        (name, value)
        for name, value in result.raw_headers
        if name == b"content-length" and "content-length" not in response.headers
    ]
    result.raw_headers = [*response.headers.raw, *computed]
    return result


class ControllerEndpoint:
    """ASGI endpoint creating a new controller for every request.

    Args:
        controller_cls: The controller to run.
        action: Fixed action name; otherwise taken from the ``action`` path
            parameter, falling back to the default action.
        raise_on_error: Raise 4xx and 5xx responses as Starlette
            ``HTTPException`` so the application's exception handlers render
            them.
    """

    def __init__(
        self,
        controller_cls: type[Controller],
        action: str | None = None,
        raise_on_error: bool = False,
    ) -> None:
        self.controller_cls = controller_cls
        self.action = action
        self.raise_on_error = raise_on_error
        controller_cls.compile()

    async def handle(self, request: Request) -> StarletteResponse:
        server_request = await from_starlette(request, self.action)
        controller = self.controller_cls()
        response = await run_in_threadpool(controller, server_request, Response())

        if self.raise_on_error and response.status_code >= 400:
            raise HTTPException(
                status_code=response.status_code,
                detail=response.text or None,
                headers={
                    name: value
                    for name, value in response.headers.items()
                    if name not in ("content-length", "content-type")
                }
                or None,
            )
        return to_starlette(response)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = await self.handle(Request(scope, receive))
        await response(scope, receive, send)


def controller_routes(
    controller_cls: type[Controller],
    mapping: Mapping[str, str],
    methods: Sequence[str] | None = None,
    raise_on_error: bool = False,
) -> list[Route]:
    """Build a ``Route`` per ``{path: action}`` pair of *mapping*."""
    return [
        Route(
            path,
            ControllerEndpoint(controller_cls, action, raise_on_error=raise_on_error),
            methods=list(methods) if methods else None,
            name=f"{controller_cls.__name__}.{action}",
        )
        for path, action in mapping.items()
    ]
