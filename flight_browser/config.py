"""Configuration utilities for the flight browser client.

This module reads environment variables (optionally from an `.env` file) and
produces the configuration object shared by the API client, the view
controllers and logging.

Supported keys: `FLIGHT_API_BASE_URL`, `REQUEST_TIMEOUT`, `ROSTER_PAGE_SIZE`,
`LOG_DIR`, `LOG_LEVEL`, and optional `APP_NAME`.

Usage example:

    from flight_browser.config import load_config

    config = load_config()
    client = FlightApiClient(config.api_base_url, timeout=config.request_timeout)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional


def resolve_root(candidate: Path) -> Path:
    """Return ``candidate`` for a source checkout, else the working directory.

    An installed package lives in site-packages, which is no place for a
    `.env` file or session logs.
    """
    if (candidate / "pyproject.toml").exists():
        return candidate
    return Path.cwd()


REPO_ROOT = resolve_root(Path(__file__).resolve().parents[1])
DEFAULT_ENV_FILE = REPO_ROOT / ".env"
DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_APP_NAME = "flight-browser"


def _load_env_file(path: Path) -> Dict[str, str]:
    """Parse a dotenv-style file into a dictionary."""
    if not path.exists():
        return {}

    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip("\"'")
    return data


def _merge_envs(dotenv_values: Mapping[str, str], env: MutableMapping[str, str]) -> Dict[str, str]:
    """Merge dotenv values with the current environment, preferring os.environ."""
    merged = dict(dotenv_values)
    merged.update(env)  # os.environ wins
    return merged


def _normalize_base_url(value: str) -> str:
    url = value.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"FLIGHT_API_BASE_URL must be an http(s) URL, got {value!r}")
    return url


def _positive_float(values: Mapping[str, str], key: str, default: float) -> float:
    raw = values.get(key)
    if raw is None or raw == "":
        return default
    try:
        parsed = float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return parsed


def _positive_int(values: Mapping[str, str], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or raw == "":
        return default
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return parsed


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration values."""

    api_base_url: str
    log_directory: Path
    log_level: str
    request_timeout: float = 10.0
    roster_page_size: int = 10
    app_name: str = DEFAULT_APP_NAME


def load_config(env_file: Optional[Path] = None) -> AppConfig:
    """Load configuration values using environment defaults."""
    target_file = env_file or DEFAULT_ENV_FILE
    dotenv_values = _load_env_file(target_file)
    merged = _merge_envs(dotenv_values, os.environ)

    api_base_url = _normalize_base_url(merged.get("FLIGHT_API_BASE_URL") or DEFAULT_API_BASE_URL)

    log_directory = Path(merged.get("LOG_DIR", REPO_ROOT / "logs"))
    if not log_directory.is_absolute():
        log_directory = REPO_ROOT / log_directory

    log_level = merged.get("LOG_LEVEL", "INFO").upper()

    return AppConfig(
        api_base_url=api_base_url,
        log_directory=log_directory,
        log_level=log_level,
        request_timeout=_positive_float(merged, "REQUEST_TIMEOUT", 10.0),
        roster_page_size=_positive_int(merged, "ROSTER_PAGE_SIZE", 10),
        app_name=merged.get("APP_NAME", DEFAULT_APP_NAME),
    )


__all__ = ["AppConfig", "load_config", "resolve_root", "REPO_ROOT", "DEFAULT_API_BASE_URL"]
