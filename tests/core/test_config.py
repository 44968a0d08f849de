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
"""Tests for Config — dot-notation access, files, env overrides, binding."""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel

from pyaction.core.config import Config, config_properties


class TestConfig:
    def test_get_simple_value(self):
        config = Config({"app": {"port": 8080}})
        assert config.get("app.port") == 8080

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_get_section(self):
        config = Config({"pyaction": {"controller": {"default_action": "index"}}})
        assert config.get_section("pyaction.controller") == {"default_action": "index"}
        assert config.get_section("pyaction.missing") == {}

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyaction.yaml"
        config_file.write_text("pyaction:\n  controller:\n    default_action: index\n")
        config = Config.from_file(config_file)
        assert config.get("pyaction.controller.default_action") == "index"
        assert config.get("pyaction.controller.redirect_status") == 303

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyaction.toml"
        config_file.write_text('[pyaction.controller]\nnot_found_message = "Nothing here"\n')
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("pyaction.controller.not_found_message") == "Nothing here"
        assert config.get("pyaction.controller.redirect_status") is None

    def test_profile_overlay(self, tmp_path: Path):
        (tmp_path / "pyaction.yaml").write_text("app:\n  name: test\n  port: 8080\n")
        (tmp_path / "pyaction-dev.yaml").write_text("app:\n  port: 9090\n")
        config = Config.from_file(tmp_path / "pyaction.yaml", active_profiles=["dev"])
        assert config.get("app.name") == "test"
        assert config.get("app.port") == 9090
        assert len(config.loaded_sources) == 3

    def test_defaults(self):
        config = Config.defaults()
        assert config.get("pyaction.controller.default_action") == "process"
        assert config.get("pyaction.controller.flash_key") == "flash"

    def test_env_var_override(self):
        os.environ["PYACTION_CONTROLLER_DEFAULT_ACTION"] = "from-env"
        try:
            config = Config({"pyaction": {"controller": {"default_action": "index"}}})
            assert config.get("pyaction.controller.default_action") == "from-env"
        finally:
            del os.environ["PYACTION_CONTROLLER_DEFAULT_ACTION"]

    def test_placeholder_from_config(self):
        config = Config({"site": {"host": "example.com", "home": "https://${site.host}/"}})
        assert config.get("site.home") == "https://example.com/"

    def test_placeholder_default(self):
        config = Config({"site": {"home": "${PYACTION_TEST_UNSET_HOST:localhost}"}})
        assert config.get("site.home") == "localhost"

    def test_unresolvable_placeholder_raises(self):
        config = Config({"site": {"home": "${PYACTION_TEST_UNSET_HOST}"}})
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            config.get("site.home")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="uploads")
        @dataclass
        class UploadSettings:
            directory: str = "/tmp"
            max_size: int = 1024

        config = Config({"uploads": {"directory": "/srv/uploads", "max_size": 4096}})
        settings = config.bind(UploadSettings)
        assert settings.directory == "/srv/uploads"
        assert settings.max_size == 4096

    def test_bind_uses_defaults(self):
        @config_properties(prefix="uploads")
        @dataclass
        class UploadSettings:
            directory: str = "/tmp"
            max_size: int = 1024

        settings = Config({}).bind(UploadSettings)
        assert settings.directory == "/tmp"
        assert settings.max_size == 1024

    def test_bind_coerces_env_strings(self):
        @config_properties(prefix="pyaction.uploads")
        @dataclass
        class UploadSettings:
            max_size: int = 1024
            keep: bool = False

        os.environ["PYACTION_UPLOADS_MAX_SIZE"] = "2048"
        os.environ["PYACTION_UPLOADS_KEEP"] = "yes"
        try:
            settings = Config({}).bind(UploadSettings)
        finally:
            del os.environ["PYACTION_UPLOADS_MAX_SIZE"]
            del os.environ["PYACTION_UPLOADS_KEEP"]
        assert settings.max_size == 2048
        assert settings.keep is True

    def test_bind_pydantic_model(self):
        @config_properties(prefix="uploads")
        class UploadSettings(BaseModel):
            max_size: int = 1024

        settings = Config({"uploads": {"max_size": "512"}}).bind(UploadSettings)
        assert settings.max_size == 512

    def test_bind_pydantic_validation_error(self):
        @config_properties(prefix="uploads")
        class UploadSettings(BaseModel):
            max_size: int = 1024

        with pytest.raises(ValueError, match="Configuration validation failed"):
            Config({"uploads": {"max_size": "lots"}}).bind(UploadSettings)

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)
