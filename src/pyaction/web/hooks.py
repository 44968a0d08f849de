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
"""Hook results — tell the dispatcher whether to go on or stop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pyaction.http.message import Response
    from pyaction.web.reply import Reply


@dataclass(frozen=True)
class Continue:
    """Proceed with the pipeline."""


@dataclass(frozen=True)
class ShortCircuit:
    """Stop the pipeline and answer with ``response``."""

    response: Response | Reply


CONTINUE: Final = Continue()

HookResult = Continue | ShortCircuit
