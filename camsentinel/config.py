from __future__ import annotations

"""Application configuration and defaults.

Reads environment variables and provides a typed configuration object.
"""

from dataclasses import dataclass, field
import os
from typing import Mapping, Optional, Tuple

from camsentinel.errors import ConfigError

DEFAULT_CAMERA_URL = "http://10.0.0.146/ISAPI/Streaming/channels/101/picture"
DEFAULT_PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"
DEFAULT_IGNORE_LABELS: Tuple[str, ...] = ("Table", "Chair", "Coffee table", "Furniture")
DEFAULT_COOLDOWN_SECONDS = 600

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_labels(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma separated label list, keeping order and case."""
    if raw is None:
        return DEFAULT_IGNORE_LABELS
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _parse_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    # Camera
    camera_url: str = DEFAULT_CAMERA_URL
    camera_username: str = "viewer"
    camera_password: Optional[str] = None

    # Object detection backend
    vision_credentials_path: Optional[str] = None

    # Pushover
    pushover_app_token: Optional[str] = None
    pushover_user_key: Optional[str] = None
    pushover_api_url: str = DEFAULT_PUSHOVER_API_URL

    # Behaviour
    ignore_labels: Tuple[str, ...] = field(default=DEFAULT_IGNORE_LABELS)
    cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS
    annotate_image: bool = False

    # Files
    state_file: str = "lastmessage.txt"
    log_file: str = "log.txt"

    # Runtime
    http_timeout: float = 15.0
    vision_timeout: float = 30.0
    html_output: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ
        return cls(
            camera_url=env.get("CAMERA_URL", DEFAULT_CAMERA_URL),
            camera_username=env.get("CAMERA_USERNAME", "viewer"),
            camera_password=env.get("CAMERA_PASSWORD"),
            vision_credentials_path=env.get("VISION_CREDENTIALS_PATH"),
            pushover_app_token=env.get("PUSHOVER_APP_TOKEN"),
            pushover_user_key=env.get("PUSHOVER_USER_KEY"),
            pushover_api_url=env.get("PUSHOVER_API_URL", DEFAULT_PUSHOVER_API_URL),
            ignore_labels=parse_labels(env.get("IGNORE_LABELS")),
            cooldown_seconds=_parse_int("COOLDOWN_SECONDS", env.get("COOLDOWN_SECONDS"), DEFAULT_COOLDOWN_SECONDS),
            annotate_image=env.get("ANNOTATE_IMAGE", "").strip().lower() in _TRUE_VALUES,
            state_file=env.get("STATE_FILE", "lastmessage.txt"),
            log_file=env.get("LOG_FILE", "log.txt"),
            http_timeout=_parse_float("HTTP_TIMEOUT", env.get("HTTP_TIMEOUT"), 15.0),
            vision_timeout=_parse_float("VISION_TIMEOUT", env.get("VISION_TIMEOUT"), 30.0),
            html_output=env.get("HTML_OUTPUT", "").strip().lower() in _TRUE_VALUES,
            log_level=env.get("LOG_LEVEL", "WARNING"),
        )

    def validate(self) -> "Config":
        """Raise ConfigError listing every missing or invalid setting."""
        required = {
            "CAMERA_PASSWORD": self.camera_password,
            "VISION_CREDENTIALS_PATH": self.vision_credentials_path,
            "PUSHOVER_APP_TOKEN": self.pushover_app_token,
            "PUSHOVER_USER_KEY": self.pushover_user_key,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigError("Missing required configuration: " + ", ".join(missing))
        if not os.path.isfile(self.vision_credentials_path):
            raise ConfigError(f"VISION_CREDENTIALS_PATH file not found: {self.vision_credentials_path}")
        if self.cooldown_seconds < 0:
            raise ConfigError(f"COOLDOWN_SECONDS must not be negative, got {self.cooldown_seconds}")
        if self.http_timeout <= 0 or self.vision_timeout <= 0:
            raise ConfigError("Timeouts must be positive")
        return self
