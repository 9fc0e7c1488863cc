"""Configuration loading and saving.

Config file location: ~/.config/bookmark-search/config.toml

Schema:
    [relay]
    backend_url = "http://localhost:5000"
    timeout = 30.0

    [auth]
    token_file = "~/.config/bookmark-search/token.json"
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from .relay import DEFAULT_BACKEND_URL

CONFIG_DIR = Path.home() / ".config" / "bookmark-search"
CONFIG_FILE = CONFIG_DIR / "config.toml"
TOKEN_FILE = CONFIG_DIR / "token.json"


@dataclass
class AppConfig:
    backend_url: str = DEFAULT_BACKEND_URL
    timeout: float = 30.0
    token_file: Path = field(default_factory=lambda: TOKEN_FILE)


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    relay_data = data.get("relay", {})
    auth_data = data.get("auth", {})

    backend_url = relay_data.get("backend_url", DEFAULT_BACKEND_URL)
    if not backend_url.startswith(("http://", "https://")):
        raise ValueError(f"relay.backend_url must be an http(s) URL: {backend_url}")

    try:
        timeout = float(relay_data.get("timeout", 30.0))
    except (TypeError, ValueError):
        raise ValueError("relay.timeout must be a number") from None

    return AppConfig(
        backend_url=backend_url,
        timeout=timeout,
        token_file=Path(auth_data.get("token_file", str(TOKEN_FILE))).expanduser(),
    )


def load_config_or_default(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Like load_config, but a missing file yields the defaults."""
    if not config_exists(config_path):
        return AppConfig()
    return load_config(config_path)


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file with restricted permissions."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "relay": {
            "backend_url": config.backend_url,
            "timeout": config.timeout,
        },
        "auth": {
            "token_file": str(config.token_file),
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(config_path, 0o600)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
