"""XDG config loading/saving."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from pathlib import Path
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

DEFAULT_CONFIG_PATH = Path("~/.config/termtoggle/config.toml").expanduser()
DEFAULT_SIZE = 12
MAX_SIZE = 500
DEFAULT_DIRECTION: Literal["horizontal", "vertical"] = "horizontal"
DEFAULT_LOG_LEVEL = "INFO"
SHELL_ENV = "TERMTOGGLE_SHELL"

_VALID_DIRECTIONS = {"horizontal", "vertical"}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    size: int = Field(default=DEFAULT_SIZE, ge=1, le=MAX_SIZE)
    direction: Literal["horizontal", "vertical"] = DEFAULT_DIRECTION
    shell: str = ""
    persist_size: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    tmux_socket: str = ""

    @field_validator("direction")
    @classmethod
    def _validate_direction(cls, value: str) -> str:
        if value not in _VALID_DIRECTIONS:
            raise ValueError(f"Invalid split direction: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized

    def resolved_shell(self) -> str:
        return self.shell or os.getenv("SHELL", "") or "/bin/sh"


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    size = raw.get("size", cfg.size)
    # bool is an int subclass; `size = true` must not become 1.
    if isinstance(size, int) and not isinstance(size, bool) and 1 <= size <= MAX_SIZE:
        cfg.size = size

    direction = raw.get("direction", cfg.direction)
    if isinstance(direction, str) and direction in _VALID_DIRECTIONS:
        cfg.direction = cast(Literal["horizontal", "vertical"], direction)

    shell = raw.get("shell", cfg.shell)
    if isinstance(shell, str):
        cfg.shell = shell.strip()
    env_shell = os.getenv(SHELL_ENV, "").strip()
    if env_shell:
        cfg.shell = env_shell

    persist_size = raw.get("persist_size", cfg.persist_size)
    if isinstance(persist_size, bool):
        cfg.persist_size = persist_size

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str) and log_level.strip().upper() in _VALID_LOG_LEVELS:
        cfg.log_level = log_level

    tmux_socket = raw.get("tmux_socket", cfg.tmux_socket)
    if isinstance(tmux_socket, str):
        cfg.tmux_socket = tmux_socket.strip()

    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _sanitize({})
    if not isinstance(raw, dict):
        return _sanitize({})
    return _sanitize(raw)


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        f"size = {_toml_scalar(config.size)}",
        f"direction = {_toml_scalar(config.direction)}",
        f"shell = {_toml_scalar(config.shell)}",
        f"persist_size = {_toml_scalar(config.persist_size)}",
        f"log_level = {_toml_scalar(config.log_level)}",
        f"tmux_socket = {_toml_scalar(config.tmux_socket)}",
    ]
    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
