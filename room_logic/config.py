"""Settings for the server and playtest tools: defaults, then escape_room.yaml, then environment."""

import os
from dataclasses import dataclass

import yaml
from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DEFAULT_CONFIG = os.path.join(PROJECT_ROOT, "escape_room.yaml")

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    tick_interval: float = 1.0
    log_dir: str = "logs"
    server_log: bool = False
    walkthrough_dir: str = "walkthroughs"

    def resolve(self, path: str) -> str:
        """Resolve a configured path relative to the project root."""
        return path if os.path.isabs(path) else os.path.join(PROJECT_ROOT, path)


def _read_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def _as_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    raise ValueError(f"{name} must be true or false, got {value!r}")


def _as_interval(value) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"tick_interval must be a number, got {value!r}") from None
    if interval <= 0:
        raise ValueError(f"tick_interval must be positive, got {interval}")
    return interval


def load_settings(path: str | None = None, env_file: str | None = None) -> Settings:
    load_dotenv(env_file or os.path.join(PROJECT_ROOT, ".env"))

    if path is None:
        path = os.getenv("ESCAPE_ROOM_CONFIG", DEFAULT_CONFIG)
    data = _read_yaml(path)

    unknown = sorted(set(data) - set(Settings.__dataclass_fields__))
    if unknown:
        raise ValueError(f"{path}: unknown setting '{unknown[0]}'")
    settings = Settings(**data)

    if "ESCAPE_ROOM_TICK_INTERVAL" in os.environ:
        settings.tick_interval = os.environ["ESCAPE_ROOM_TICK_INTERVAL"]
    if "ESCAPE_ROOM_LOG_DIR" in os.environ:
        settings.log_dir = os.environ["ESCAPE_ROOM_LOG_DIR"]
    if "ESCAPE_ROOM_SERVER_LOG" in os.environ:
        settings.server_log = os.environ["ESCAPE_ROOM_SERVER_LOG"]

    settings.tick_interval = _as_interval(settings.tick_interval)
    settings.server_log = _as_bool("server_log", settings.server_log)
    return settings
