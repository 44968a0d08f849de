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
"""Process-wide controller settings.

Call :func:`configure` once at startup; controllers read the active
properties through :func:`get_properties` on every dispatch.
"""

from __future__ import annotations

import structlog

from pyaction.config.properties import ControllerProperties
from pyaction.core.config import Config

logger = structlog.get_logger("pyaction.config")

_active = ControllerProperties()


def configure(config: Config) -> ControllerProperties:
    """Bind ``pyaction.controller.*`` from *config* and make it active."""
    global _active
    _active = config.bind(ControllerProperties)
    logger.debug(
        "controller_properties_configured",
        default_action=_active.default_action,
        redirect_status=_active.redirect_status,
    )
    return _active


def get_properties() -> ControllerProperties:
    """Return the active controller properties."""
    return _active


def reset() -> None:
    """Restore the built-in defaults."""
    global _active
    _active = ControllerProperties()


__all__ = ["ControllerProperties", "configure", "get_properties", "reset"]
