import copy
import logging
import os
import shlex
from pathlib import Path
from typing import Any, TypedDict

import tomli
import tomli_w


FTL_CONF_PATH = "/etc/pihole/pihole-FTL.conf"
DEFAULT_PID_FILE = "/run/pihole-FTL.pid"
DEFAULT_FTL_COMMAND = ["pihole-FTL"]

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


class PathsConfig(TypedDict, total=False):
    ftl_conf: str
    default_pid_file: str


class FTLConfig(TypedDict, total=False):
    command: list[str]


class LoggingConfig(TypedDict, total=False):
    level: str


class Config(TypedDict, total=False):
    paths: PathsConfig
    ftl: FTLConfig
    logging: LoggingConfig


def get_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / ".config"
    return base / "ftlutils"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


DEFAULT_CONFIG: Config = {
    "paths": {
        "ftl_conf": FTL_CONF_PATH,
        "default_pid_file": DEFAULT_PID_FILE,
    },
    "ftl": {
        "command": list(DEFAULT_FTL_COMMAND),
    },
    "logging": {
        "level": "warning",
    },
}


def load_config() -> Config:
    config_path = get_config_path()
    config: dict[str, Any] = copy.deepcopy(dict(DEFAULT_CONFIG))

    if config_path.exists():
        with open(config_path, "rb") as f:
            user_config = tomli.load(f)
            _merge_config(config, user_config)

    return Config(**{k: v for k, v in config.items()})


def save_config(config: Config) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value


def set_config_value(config: Config, name: str, raw: str) -> None:
    """Set a single dotted setting such as ``paths.ftl_conf``.

    ``ftl.command`` is split with shell quoting rules so that a wrapper like
    ``sudo pihole-FTL`` becomes a two element argv prefix.
    """
    if name in ("paths.ftl_conf", "paths.default_pid_file"):
        if not raw:
            raise ValueError(f"{name} cannot be empty")
        config.setdefault("paths", {})[name.split(".", 1)[1]] = raw
    elif name == "ftl.command":
        command = shlex.split(raw)
        if not command:
            raise ValueError("ftl.command cannot be empty")
        config.setdefault("ftl", {})["command"] = command
    elif name == "logging.level":
        level = raw.lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{raw}', expected one of: {', '.join(LOG_LEVELS)}")
        config.setdefault("logging", {})["level"] = level
    else:
        raise ValueError(f"Unknown setting: {name}")


def get_log_level(config: Config) -> int:
    level = config.get("logging", {}).get("level", "warning")
    return getattr(logging, level.upper(), logging.WARNING)


def get_ftl_command(config: Config) -> list[str]:
    return list(config.get("ftl", {}).get("command") or DEFAULT_FTL_COMMAND)
