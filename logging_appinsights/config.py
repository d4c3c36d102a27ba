"""Hook configuration loaded from an optional YAML file and env vars."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

import yaml

from logging_appinsights.errors import ConfigError
from logging_appinsights.levels import Level, parse_level

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "APPINSIGHTS_CONFIG"


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class HookConfig:
    instrumentation_key: str = ""
    role_name: str = ""
    max_batch_size: int = 0          # 0 keeps the SDK default
    max_batch_interval: float = 0.0  # seconds, 0 keeps the SDK default
    endpoint_url: str = ""           # "" keeps the SDK default
    async_dispatch: bool = False
    async_workers: int = 4
    levels: Optional[tuple[Level, ...]] = None
    ignore_fields: tuple[str, ...] = ()


def validate_config(config: HookConfig) -> None:
    """Raise ConfigError if *config* cannot be used to build a hook."""
    if not config.instrumentation_key or not config.instrumentation_key.strip():
        raise ConfigError("InstrumentationKey is required and missing from configuration")
    if not config.role_name or not config.role_name.strip():
        raise ConfigError("Role name is required and missing from configuration")
    if config.max_batch_size < 0:
        raise ConfigError(f"max_batch_size must not be negative, got {config.max_batch_size}")
    if config.max_batch_interval < 0:
        raise ConfigError(
            f"max_batch_interval must not be negative, got {config.max_batch_interval}"
        )
    if config.async_workers < 1:
        raise ConfigError(f"async_workers must be at least 1, got {config.async_workers}")


def load_yaml_config(path: Optional[str]) -> dict:
    """Load hook settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _convert(key: str, value, kind):
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc


def _as_list(key: str, value) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key} must be a list, got {value!r}")
    return list(value)


def load_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> HookConfig:
    """Build HookConfig from defaults <- YAML file <- env vars (highest priority).

    Required fields are not checked here; see validate_config.
    """
    if env is None:
        env = os.environ
    data = load_yaml_config(path or env.get(ENV_CONFIG_PATH))

    kwargs: dict = {
        "instrumentation_key": str(data.get("instrumentation_key", "")),
        "role_name": str(data.get("role_name", "")),
        "max_batch_size": _convert("max_batch_size", data.get("max_batch_size", 0), int),
        "max_batch_interval": _convert(
            "max_batch_interval", data.get("max_batch_interval", 0.0), float
        ),
        "endpoint_url": str(data.get("endpoint_url", "")),
        "async_dispatch": _parse_bool(data.get("async_dispatch", False)),
        "async_workers": _convert("async_workers", data.get("async_workers", 4), int),
        "ignore_fields": tuple(
            str(name) for name in _as_list("ignore_fields", data.get("ignore_fields"))
        ),
    }
    if data.get("levels") is not None:
        try:
            kwargs["levels"] = tuple(
                parse_level(str(name)) for name in _as_list("levels", data["levels"])
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    if "APPINSIGHTS_INSTRUMENTATIONKEY" in env:
        kwargs["instrumentation_key"] = env["APPINSIGHTS_INSTRUMENTATIONKEY"]
    if "APPINSIGHTS_ROLE_NAME" in env:
        kwargs["role_name"] = env["APPINSIGHTS_ROLE_NAME"]
    if "APPINSIGHTS_MAX_BATCH_SIZE" in env:
        kwargs["max_batch_size"] = _convert(
            "APPINSIGHTS_MAX_BATCH_SIZE", env["APPINSIGHTS_MAX_BATCH_SIZE"], int
        )
    if "APPINSIGHTS_MAX_BATCH_INTERVAL" in env:
        kwargs["max_batch_interval"] = _convert(
            "APPINSIGHTS_MAX_BATCH_INTERVAL", env["APPINSIGHTS_MAX_BATCH_INTERVAL"], float
        )
    if "APPINSIGHTS_ENDPOINT_URL" in env:
        kwargs["endpoint_url"] = env["APPINSIGHTS_ENDPOINT_URL"]
    if "APPINSIGHTS_ASYNC" in env:
        kwargs["async_dispatch"] = _parse_bool(env["APPINSIGHTS_ASYNC"])

    return HookConfig(**kwargs)
