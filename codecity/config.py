"""Configuration loading for the codecity service (.codecity.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".codecity.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ServerConfig:
    """HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class GitHubConfig:
    """GitHub lookup and clone settings."""

    api_url: str = "https://api.github.com"
    token: Optional[str] = None
    clone_timeout: float = 600.0
    full_history: bool = True


@dataclass
class ServiceConfig:
    """Represents the settings defined in .codecity.yml."""

    root: Path
    server: ServerConfig = field(default_factory=ServerConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)


def load_config(config_path: Path) -> ServiceConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    config = ServiceConfig(root=root)
    config.github.token = os.environ.get("GITHUB_TOKEN") or None

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    server_data = _as_dict(data.get("server"))
    if server_data:
        host = _as_str(server_data.get("host"))
        if host:
            config.server.host = host
        port = _as_int(server_data.get("port"))
        if port is not None:
            if not 0 < port < 65536:
                raise ConfigError(f"server.port out of range: {port}")
            config.server.port = port
        if "cors_origins" in server_data:
            config.server.cors_origins = _as_str_list(server_data.get("cors_origins"))

    github_data = _as_dict(data.get("github"))
    if github_data:
        api_url = _as_str(github_data.get("api_url"))
        if api_url:
            config.github.api_url = api_url.rstrip("/")
        token = _as_str(github_data.get("token"))
        if token:
            config.github.token = token
        timeout = _as_float(github_data.get("clone_timeout"))
        if timeout is not None:
            config.github.clone_timeout = timeout
        full_history = _as_bool(github_data.get("full_history"))
        if full_history is not None:
            config.github.full_history = full_history

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitHubConfig",
    "ServerConfig",
    "ServiceConfig",
    "load_config",
]
