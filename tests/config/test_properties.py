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
"""Tests for ControllerProperties binding and the process-wide settings."""

import pytest

from pyaction.config import ControllerProperties, configure, get_properties, reset
from pyaction.core.config import Config


@pytest.fixture(autouse=True)
def _restore_properties():
    yield
    reset()


class TestControllerProperties:
    def test_bind_defaults(self):
        props = Config({}).bind(ControllerProperties)
        assert props.default_action == "process"
        assert props.not_found_message == "Not found"
        assert props.redirect_status == 303
        assert props.flash_key == "flash"

    def test_bind_custom_values(self):
        config = Config(
            {"pyaction": {"controller": {"default_action": "index", "redirect_status": 302}}}
        )
        props = config.bind(ControllerProperties)
        assert props.default_action == "index"
        assert props.redirect_status == 302

    def test_framework_defaults_match_dataclass(self):
        assert Config.defaults().bind(ControllerProperties) == ControllerProperties()


class TestConfigure:
    def test_configure_installs_properties(self):
        configure(Config({"pyaction": {"controller": {"flash_key": "notice"}}}))
        assert get_properties().flash_key == "notice"

    def test_reset_restores_defaults(self):
        configure(Config({"pyaction": {"controller": {"flash_key": "notice"}}}))
        reset()
        assert get_properties() == ControllerProperties()
