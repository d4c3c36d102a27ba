"""Tests for the configuration module."""

import pytest

from logging_appinsights.config import HookConfig, load_config, load_yaml_config, validate_config
from logging_appinsights.errors import ConfigError
from logging_appinsights.levels import Level


def test_config_defaults():
    cfg = HookConfig()
    assert cfg.instrumentation_key == ""
    assert cfg.role_name == ""
    assert cfg.max_batch_size == 0
    assert cfg.max_batch_interval == 0.0
    assert cfg.endpoint_url == ""
    assert cfg.async_dispatch is False
    assert cfg.async_workers == 4
    assert cfg.levels is None
    assert cfg.ignore_fields == ()


def test_config_frozen():
    cfg = HookConfig()
    with pytest.raises(AttributeError):
        cfg.role_name = "other"


def test_validate_ok():
    validate_config(HookConfig(instrumentation_key="key", role_name="client"))


@pytest.mark.parametrize("kwargs", [
    {"instrumentation_key": "", "role_name": "client"},
    {"instrumentation_key": "   ", "role_name": "client"},
    {"instrumentation_key": "key", "role_name": ""},
    {"instrumentation_key": "key", "role_name": "client", "max_batch_size": -1},
    {"instrumentation_key": "key", "role_name": "client", "max_batch_interval": -0.5},
    {"instrumentation_key": "key", "role_name": "client", "async_workers": 0},
])
def test_validate_rejects(kwargs):
    with pytest.raises(ConfigError):
        validate_config(HookConfig(**kwargs))


def test_missing_key_message():
    with pytest.raises(ConfigError, match="InstrumentationKey is required"):
        validate_config(HookConfig(role_name="client"))


def test_load_from_env():
    env = {
        "APPINSIGHTS_INSTRUMENTATIONKEY": "env-key",
        "APPINSIGHTS_ROLE_NAME": "env-client",
        "APPINSIGHTS_MAX_BATCH_SIZE": "10",
        "APPINSIGHTS_MAX_BATCH_INTERVAL": "2.5",
        "APPINSIGHTS_ENDPOINT_URL": "http://localhost:8080/v2/track",
        "APPINSIGHTS_ASYNC": "yes",
    }
    cfg = load_config(env=env)
    assert cfg.instrumentation_key == "env-key"
    assert cfg.role_name == "env-client"
    assert cfg.max_batch_size == 10
    assert cfg.max_batch_interval == 2.5
    assert cfg.endpoint_url == "http://localhost:8080/v2/track"
    assert cfg.async_dispatch is True


def test_load_reads_os_environ(monkeypatch):
    monkeypatch.setenv("APPINSIGHTS_INSTRUMENTATIONKEY", "os-key")
    monkeypatch.delenv("APPINSIGHTS_CONFIG", raising=False)
    cfg = load_config()
    assert cfg.instrumentation_key == "os-key"


def test_load_from_yaml(tmp_path):
    path = tmp_path / "hook.yml"
    path.write_text(
        "instrumentation_key: yaml-key\n"
        "role_name: yaml-client\n"
        "max_batch_size: 5\n"
        "async_dispatch: true\n"
        "levels: [error, WARN]\n"
        "ignore_fields: [private, password]\n"
    )
    cfg = load_config(str(path), env={})
    assert cfg.instrumentation_key == "yaml-key"
    assert cfg.role_name == "yaml-client"
    assert cfg.max_batch_size == 5
    assert cfg.async_dispatch is True
    assert cfg.levels == (Level.ERROR, Level.WARN)
    assert cfg.ignore_fields == ("private", "password")


def test_env_overrides_yaml(tmp_path):
    path = tmp_path / "hook.yml"
    path.write_text("instrumentation_key: yaml-key\nmax_batch_size: 5\n")
    cfg = load_config(str(path), env={"APPINSIGHTS_MAX_BATCH_SIZE": "50"})
    assert cfg.instrumentation_key == "yaml-key"
    assert cfg.max_batch_size == 50


def test_yaml_path_from_env(tmp_path):
    path = tmp_path / "hook.yml"
    path.write_text("role_name: from-file\n")
    cfg = load_config(env={"APPINSIGHTS_CONFIG": str(path)})
    assert cfg.role_name == "from-file"


def test_missing_yaml_file(tmp_path):
    assert load_yaml_config(str(tmp_path / "nope.yml")) == {}
    assert load_yaml_config(None) == {}


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("key: [unclosed\n")
    with pytest.raises(ConfigError):
        load_yaml_config(str(path))


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_yaml_config(str(path))


def test_malformed_env_number():
    with pytest.raises(ConfigError):
        load_config(env={"APPINSIGHTS_MAX_BATCH_SIZE": "lots"})


def test_unknown_level_in_yaml(tmp_path):
    path = tmp_path / "hook.yml"
    path.write_text("levels: [loud]\n")
    with pytest.raises(ConfigError):
        load_config(str(path), env={})


@pytest.mark.parametrize("text", [
    "ignore_fields: private\n",
    "ignore_fields: {private: true}\n",
    "levels: error\n",
])
def test_scalar_list_setting_rejected(tmp_path, text):
    path = tmp_path / "hook.yml"
    path.write_text(text)
    with pytest.raises(ConfigError, match="must be a list"):
        load_config(str(path), env={})


def test_single_ignore_field_as_list(tmp_path):
    path = tmp_path / "hook.yml"
    path.write_text("ignore_fields: [private]\n")
    assert load_config(str(path), env={}).ignore_fields == ("private",)
