"""Runtime settings for vocabart.

Values come from the environment (a `.env` file is honoured), then an
optional YAML deck config, then explicit overrides such as CLI options.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Look for .env in current dir, then project root
_env_path = Path.cwd() / ".env"
if _env_path.exists():
    load_dotenv(_env_path)
else:
    _env_path = Path(__file__).resolve().parent.parent / ".env"
    if _env_path.exists():
        load_dotenv(_env_path)

DEFAULT_MODEL = "gemini-3-pro-image-preview"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE_S = 1.0
DEFAULT_HTTP_TIMEOUT_S = 120.0

_NUMERIC_SETTINGS = {
    "max_attempts": int,
    "backoff_base_s": float,
    "http_timeout_s": float,
    "concurrency": int,
}


@dataclass
class Settings:
    """Settings for one generation run."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    style: str = ""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_base_s: float = DEFAULT_BACKOFF_BASE_S
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    concurrency: Optional[int] = None

    def validate(self) -> list[str]:
        """Return a list of problems; empty when the settings are usable."""
        errors = []

        if not self.api_key:
            errors.append("Gemini API key is required (set GEMINI_API_KEY or pass --api-key)")
        if not self.model:
            errors.append("Model identifier must not be empty")
        if self.max_attempts < 1:
            errors.append(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.backoff_base_s < 0:
            errors.append(f"backoff_base_s must not be negative, got {self.backoff_base_s}")
        if self.concurrency is not None and self.concurrency < 1:
            errors.append(f"concurrency must be at least 1, got {self.concurrency}")

        return errors


def _env_number(name: str, cast, default):
    raw = os.environ.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return cast(float(raw)) if cast is int else cast(raw)
    except (ValueError, OverflowError):
        logger.warning(f"Ignoring invalid {name}={raw!r}")
        return default


def settings_from_env() -> Settings:
    """Build settings from environment variables only."""
    return Settings(
        api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("GEMINI_TEXT_API_KEY") or "",
        model=os.environ.get("GEMINI_IMAGE_MODEL") or DEFAULT_MODEL,
        style=os.environ.get("VOCABART_STYLE", "").strip(),
        max_attempts=_env_number("GEMINI_MAX_ATTEMPTS", int, DEFAULT_MAX_ATTEMPTS),
        backoff_base_s=_env_number("GEMINI_RETRY_BASE_DELAY_S", float, DEFAULT_BACKOFF_BASE_S),
        http_timeout_s=_env_number("GEMINI_HTTP_TIMEOUT_S", float, DEFAULT_HTTP_TIMEOUT_S),
        concurrency=_env_number("VOCABART_CONCURRENCY", int, None),
    )


def load_deck_config(path: Path) -> dict[str, Any]:
    """Load a YAML deck config, keeping only keys that name a setting."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Deck config {path} must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown keys in {path}: {', '.join(unknown)}")

    return {k: _coerce(k, v, path) for k, v in data.items() if k in known}


def _coerce(key: str, value: Any, path: Path) -> Any:
    """Cast a YAML value to the type its setting expects.

    Raises:
        ValueError: If the value cannot be read as that type.
    """
    if value is None:
        if key == "concurrency":
            return None
        raise ValueError(f"Deck config {path}: {key} must not be empty")

    if key in _NUMERIC_SETTINGS:
        cast = _NUMERIC_SETTINGS[key]
        if isinstance(value, bool):
            raise ValueError(f"Deck config {path}: {key} must be a number, got {value!r}")
        try:
            return cast(float(value)) if cast is int else cast(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Deck config {path}: {key} must be a number, got {value!r}") from e

    if isinstance(value, (dict, list)):
        raise ValueError(f"Deck config {path}: {key} must be a string")
    return str(value).strip()


def load_settings(config_path: Optional[Path] = None, **overrides) -> Settings:
    """Resolve settings: environment, then YAML file, then non-None overrides."""
    settings = settings_from_env()

    layers = []
    if config_path is not None:
        layers.append(load_deck_config(config_path))
    layers.append({k: v for k, v in overrides.items() if v is not None})

    for layer in layers:
        for key, value in layer.items():
            if not hasattr(settings, key):
                raise TypeError(f"Unknown setting: {key}")
            setattr(settings, key, value)

    return settings
