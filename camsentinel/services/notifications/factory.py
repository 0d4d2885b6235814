from __future__ import annotations

from camsentinel.config import Config
from camsentinel.services.notifications import PushoverNotifier


def create_notifier_from_config(cfg: Config) -> PushoverNotifier:
    return PushoverNotifier(
        app_token=cfg.pushover_app_token or "",
        user_key=cfg.pushover_user_key or "",
        api_url=cfg.pushover_api_url,
        timeout=cfg.http_timeout,
        annotate_image=cfg.annotate_image,
    )
