"""Configuration helpers for the idpctl CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from idpctl.client import HTTP_TOKEN_ENV_VAR

DEFAULT_CONFIG_PATH = Path.home() / ".idpctl" / "config.toml"
DEFAULT_HTTP_ADDR = "http://127.0.0.1:8500"
DEFAULT_TIMEOUT = 10.0
HTTP_ADDR_ENV_VAR = "IDPCTL_HTTP_ADDR"


@dataclass(frozen=True)
class CLIConfig:
    http_addr: str = DEFAULT_HTTP_ADDR
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError("timeout must be a positive number")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError("timeout must be a positive number") from exc
    if timeout <= 0:
        raise ConfigError("timeout must be a positive number")
    return timeout


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if config_path.exists():
        parsed = _load_toml(config_path)
    else:
        parsed = {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    configured_http_addr = str(source.get("http_addr", DEFAULT_HTTP_ADDR)).strip()
    http_addr = _env(HTTP_ADDR_ENV_VAR) or configured_http_addr
    if not http_addr:
        raise ConfigError("http_addr must not be empty")

    token_raw = source.get("token")
    configured_token = str(token_raw).strip() or None if token_raw is not None else None
    token = _env(HTTP_TOKEN_ENV_VAR) or configured_token

    timeout = _to_timeout(source.get("timeout", DEFAULT_TIMEOUT))

    return CLIConfig(http_addr=http_addr, token=token, timeout=timeout)
