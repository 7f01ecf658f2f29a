"""Tests for configuration system."""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel, Field

from pywake.core.config import Config, config_properties
from pywake.kernel.exceptions import ConfigurationException
from pywake.runtime.properties import ExecutorProperties


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"app": {"name": "test-service", "port": 8080}})
        assert config.get("app.name") == "test-service"
        assert config.get("app.port") == 8080

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_get_nested_value(self):
        config = Config({"executor": {"queue": {"size": 10}}})
        assert config.get("executor.queue.size") == 10

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "runtime.yaml"
        config_file.write_text("pywake:\n  executor:\n    queue-capacity: 64\n")
        config = Config.from_file(config_file)
        assert config.get("pywake.executor.queue-capacity") == 64
        assert str(config_file) in config.loaded_sources

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "runtime.toml"
        config_file.write_text('[pywake.executor]\n"queue-capacity" = 32\n')
        config = Config.from_file(config_file)
        assert config.get("pywake.executor.queue-capacity") == 32

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("pywake.executor.queue-capacity") == 10000

    def test_packaged_defaults(self):
        config = Config.defaults()
        assert config.get("pywake.executor.propagate-errors") is False
        assert config.get("pywake.logging.format") == "console"

    def test_env_var_override(self):
        os.environ["PYWAKE_APP_NAME"] = "env-service"
        try:
            config = Config({"app": {"name": "file-service"}})
            assert config.get("app.name") == "env-service"
        finally:
            del os.environ["PYWAKE_APP_NAME"]

    def test_env_var_override_strips_prefix_and_dashes(self, monkeypatch):
        monkeypatch.setenv("PYWAKE_EXECUTOR_QUEUE_CAPACITY", "99")
        config = Config({})
        assert config.get("pywake.executor.queue-capacity") == "99"

    def test_get_section(self):
        config = Config({"pywake": {"logging": {"level": {"root": "DEBUG"}}}})
        assert config.get_section("pywake.logging.level") == {"root": "DEBUG"}
        assert config.get_section("pywake.nothing") == {}


class TestSources:
    def test_merges_config_dir_then_base_dir(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "pywake.yaml").write_text("pywake:\n  executor:\n    queue-capacity: 5\n")
        (tmp_path / "pywake.yaml").write_text("pywake:\n  executor:\n    queue-capacity: 6\n")
        config = Config.from_sources(tmp_path)
        assert config.get("pywake.executor.queue-capacity") == 6
        assert config.get("pywake.executor.propagate-errors") is False

    def test_later_profile_wins(self, tmp_path: Path):
        (tmp_path / "pywake.yaml").write_text("db:\n  url: base\n")
        (tmp_path / "pywake-dev.yaml").write_text("db:\n  url: dev-url\n")
        (tmp_path / "pywake-local.yaml").write_text("db:\n  url: local-url\n")
        config = Config.from_sources(tmp_path, active_profiles=["dev", "local"], load_defaults=False)
        assert config.get("db.url") == "local-url"
        assert len(config.loaded_sources) == 3

    def test_missing_profile_file_is_skipped(self, tmp_path: Path):
        (tmp_path / "pywake.yaml").write_text("app:\n  name: test\n")
        config = Config.from_sources(tmp_path, active_profiles=["nonexistent"])
        assert config.get("app.name") == "test"


class TestPlaceholderResolution:
    def test_resolve_env_var(self, monkeypatch):
        monkeypatch.setenv("QUEUE_SIZE", "128")
        config = Config({"size": "${QUEUE_SIZE}"})
        assert config.get("size") == "128"

    def test_resolve_config_reference(self):
        config = Config({"app": {"name": "MyApp"}, "greeting": "Hello from ${app.name}"})
        assert config.get("greeting") == "Hello from MyApp"

    def test_resolve_with_default(self):
        config = Config({"key": "${MISSING_VAR_FOR_PYWAKE:fallback}"})
        assert config.get("key") == "fallback"

    def test_unresolvable_placeholder_raises(self):
        config = Config({"key": "${DEFINITELY_NOT_SET_ANYWHERE}"})
        with pytest.raises(ConfigurationException):
            config.get("key")

    def test_circular_reference_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ConfigurationException):
            config.get("a")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="worker")
        @dataclass
        class WorkerConfig:
            name: str = "default"
            pool_size: int = 5

        config = Config({"worker": {"name": "w1", "pool-size": 20}})
        worker = config.bind(WorkerConfig)
        assert worker.name == "w1"
        assert worker.pool_size == 20

    def test_bind_dataclass_coerces_env_strings(self, monkeypatch):
        @config_properties(prefix="worker")
        @dataclass
        class WorkerConfig:
            pool_size: int = 5
            verbose: bool = False

        monkeypatch.setenv("PYWAKE_WORKER_POOL_SIZE", "12")
        monkeypatch.setenv("PYWAKE_WORKER_VERBOSE", "yes")
        worker = Config({}).bind(WorkerConfig)
        assert worker.pool_size == 12
        assert worker.verbose is True

    def test_bind_uses_defaults(self):
        @config_properties(prefix="worker")
        @dataclass
        class WorkerConfig:
            pool_size: int = 5

        assert Config({}).bind(WorkerConfig).pool_size == 5

    def test_bind_pydantic_model(self):
        @config_properties(prefix="server")
        class ServerConfig(BaseModel):
            port: int = Field(default=8080, ge=1, le=65535)

        assert Config({"server": {"port": 9000}}).bind(ServerConfig).port == 9000

    def test_bind_pydantic_validation_failure(self):
        @config_properties(prefix="server")
        class ServerConfig(BaseModel):
            port: int = Field(default=8080, ge=1, le=65535)

        with pytest.raises(ConfigurationException) as exc_info:
            Config({"server": {"port": 0}}).bind(ServerConfig)
        assert exc_info.value.code == "CONFIG_INVALID"

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)


class TestExecutorProperties:
    def test_defaults(self):
        props = Config.defaults().bind(ExecutorProperties)
        assert props.queue_capacity == 10000
        assert props.propagate_errors is False

    def test_kebab_case_keys(self):
        config = Config({"pywake": {"executor": {"queue-capacity": 12, "propagate-errors": True}}})
        props = config.bind(ExecutorProperties)
        assert props.queue_capacity == 12
        assert props.propagate_errors is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PYWAKE_EXECUTOR_PROPAGATE_ERRORS", "true")
        props = Config.defaults().bind(ExecutorProperties)
        assert props.propagate_errors is True

    def test_capacity_must_be_positive(self):
        config = Config({"pywake": {"executor": {"queue-capacity": 0}}})
        with pytest.raises(ConfigurationException):
            config.bind(ExecutorProperties)
