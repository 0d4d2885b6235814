from __future__ import annotations

"""CLI entrypoint: run the sentinel pipeline once and exit."""

import argparse
import dataclasses
import os
import sys
from typing import Dict, List, Optional

from dotenv import dotenv_values

from camsentinel.config import Config
from camsentinel.container import Container
from camsentinel.errors import ConfigError
from camsentinel.logging_config import setup_logging


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        description="Capture one camera frame, detect objects, and push an alert",
        epilog="Under cron the working directory is usually $HOME; set STATE_FILE and LOG_FILE to absolute paths.",
    )
    p.add_argument("--env-file", type=str, default=None, help="KEY=VALUE file read before the environment")
    p.add_argument("--camera-url", type=str, default=None, help="Camera still-picture URL")
    p.add_argument("--state-file", type=str, default=None, help="File holding the last notification time (default: lastmessage.txt; relative paths resolve against the working directory)")
    p.add_argument("--log-file", type=str, default=None, help="Append-only audit log (default: log.txt; relative paths resolve against the working directory)")
    p.add_argument("--cooldown", type=int, default=None, help="Seconds between notifications (default: 600)")
    p.add_argument("--ignore", type=str, nargs="*", default=None, metavar="LABEL", help="Labels to ignore")
    p.add_argument("--annotate", action="store_true", default=None, help="Draw boxes on the attached image")
    p.add_argument("--html", action="store_true", help="Render live output line breaks as <br />")
    p.add_argument("--log-level", type=str, default=None, help="Diagnostic log level on stderr")
    return p.parse_args(argv)


def load_environment(env_file: Optional[str]) -> Dict[str, str]:
    """Environment variables overlaid on the optional env file."""
    env: Dict[str, str] = {}
    if env_file:
        if not os.path.isfile(env_file):
            raise ConfigError(f"Env file not found: {env_file}")
        env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    env.update(os.environ)
    return env


def build_config_from_env_and_args(args) -> Config:
    # Start with env values; overlay CLI overrides if provided
    cfg = Config.from_env(load_environment(args.env_file))
    overrides = dict(
        camera_url=args.camera_url,
        state_file=args.state_file,
        log_file=args.log_file,
        cooldown_seconds=args.cooldown,
        ignore_labels=tuple(args.ignore) if args.ignore is not None else None,
        annotate_image=args.annotate,
        html_output=args.html or None,
        log_level=args.log_level,
    )
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_config_from_env_and_args(args)
        setup_logging(cfg.log_level)
        container = Container(cfg)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    container.pipeline.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
