from __future__ import annotations

"""Dependency container that wires config, clients, and the pipeline."""

from dataclasses import dataclass
from typing import Optional, TextIO

from camsentinel.config import Config
from camsentinel.services.factories import (
    create_camera_client,
    create_cooldown_store,
    create_reporter,
    create_vision_client,
)
from camsentinel.services.notifications.factory import create_notifier_from_config
from camsentinel.services.pipeline import SentinelPipeline


@dataclass
class Container:
    config: Config
    stream: Optional[TextIO] = None

    def __post_init__(self) -> None:
        self.config.validate()
        self.cooldown = create_cooldown_store(self.config)
        self.camera = create_camera_client(self.config)
        self.vision = create_vision_client(self.config)
        self.reporter = create_reporter(self.config, self.stream)
        self.notifier = create_notifier_from_config(self.config)
        self.pipeline = SentinelPipeline(
            limiter=self.cooldown,
            camera=self.camera,
            detector=self.vision,
            reporter=self.reporter,
            notifier=self.notifier,
            ignore_labels=self.config.ignore_labels,
        )
