from __future__ import annotations

"""Factories to assemble pipeline components from a Config."""

from typing import Optional, TextIO

from camsentinel.config import Config
from camsentinel.services.camera_client import CameraClient
from camsentinel.services.cooldown import CooldownStore
from camsentinel.services.reporter import ResultReporter
from camsentinel.services.vision_client import VisionClient


def create_camera_client(cfg: Config) -> CameraClient:
    return CameraClient(
        url=cfg.camera_url,
        username=cfg.camera_username,
        password=cfg.camera_password or "",
        timeout=cfg.http_timeout,
    )


def create_vision_client(cfg: Config) -> VisionClient:
    return VisionClient(credentials_path=cfg.vision_credentials_path or "", timeout=cfg.vision_timeout)


def create_cooldown_store(cfg: Config) -> CooldownStore:
    return CooldownStore(cfg.state_file, cooldown_seconds=cfg.cooldown_seconds)


def create_reporter(cfg: Config, stream: Optional[TextIO] = None) -> ResultReporter:
    return ResultReporter(cfg.log_file, stream=stream, html=cfg.html_output)
