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
"""pyaction Web — controllers, parameter bindings, guards and replies.

Framework-agnostic types are exported here; the Starlette adapter lives in
:mod:`pyaction.web.adapters.starlette`.
"""

from pyaction.web.coercion import INVALID, coerce
from pyaction.web.context import MessageContext
from pyaction.web.controller import Controller
from pyaction.web.dispatcher import ActionTable, action_method_name
from pyaction.web.guards import Guard, Guardian, guard
from pyaction.web.hooks import CONTINUE, Continue, HookResult, ShortCircuit
from pyaction.web.negotiation import (
    AcceptNegotiator,
    CharsetNegotiator,
    EncodingNegotiator,
    LanguageNegotiator,
    MimeTypes,
)
from pyaction.web.params import (
    Attr,
    Body,
    BodyParam,
    Cookie,
    Cookies,
    File,
    Files,
    Header,
    Headers,
    Parameter,
    Path,
    Query,
    QueryParam,
    SingleParameter,
)
from pyaction.web.reply import Reply
from pyaction.web.resolver import ParameterResolver, resolver

__all__ = [
    "CONTINUE",
    "INVALID",
    "AcceptNegotiator",
    "ActionTable",
    "Attr",
    "Body",
    "BodyParam",
    "CharsetNegotiator",
    "Continue",
    "Controller",
    "Cookie",
    "Cookies",
    "EncodingNegotiator",
    "File",
    "Files",
    "Guard",
    "Guardian",
    "Header",
    "Headers",
    "HookResult",
    "LanguageNegotiator",
    "MessageContext",
    "MimeTypes",
    "Parameter",
    "ParameterResolver",
    "Path",
    "Query",
    "QueryParam",
    "Reply",
    "ShortCircuit",
    "SingleParameter",
    "action_method_name",
    "coerce",
    "guard",
    "resolver",
]
