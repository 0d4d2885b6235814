from __future__ import annotations

import io
import logging
from unittest.mock import patch

import pytest

from camsentinel import main as main_module
from camsentinel.config import DEFAULT_IGNORE_LABELS, Config
from camsentinel.container import Container
from camsentinel.errors import ConfigError
from camsentinel.logging_config import setup_logging
from camsentinel.services.pipeline import RunOutcome, RunResult

BASE_ENV = {
    "CAMERA_PASSWORD": "cam-secret",
    "PUSHOVER_APP_TOKEN": "app",
    "PUSHOVER_USER_KEY": "user",
}


@pytest.fixture
def credentials(tmp_path):
    path = tmp_path / "service-account.json"
    path.write_text("{}")
    return path


@pytest.fixture
def required_env(credentials):
    return dict(BASE_ENV, VISION_CREDENTIALS_PATH=str(credentials))


@pytest.fixture
def clean_env(monkeypatch):
    names = list(BASE_ENV) + [
        "VISION_CREDENTIALS_PATH", "IGNORE_LABELS", "COOLDOWN_SECONDS", "STATE_FILE", "LOG_FILE",
        "ANNOTATE_IMAGE", "HTML_OUTPUT",
    ]
    for name in names:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults():
    cfg = Config.from_env({})
    assert cfg.ignore_labels == DEFAULT_IGNORE_LABELS
    assert cfg.cooldown_seconds == 600
    assert cfg.camera_username == "viewer"
    assert cfg.camera_url.endswith("/ISAPI/Streaming/channels/101/picture")
    assert cfg.annotate_image is False
    assert cfg.html_output is False


def test_config_from_env_values(required_env):
    cfg = Config.from_env(
        dict(required_env, IGNORE_LABELS="Plant, Lamp ,", COOLDOWN_SECONDS="300", ANNOTATE_IMAGE="yes",
             HTML_OUTPUT="true")
    )
    assert cfg.ignore_labels == ("Plant", "Lamp")
    assert cfg.cooldown_seconds == 300
    assert cfg.annotate_image is True
    assert cfg.html_output is True
    assert cfg.validate() is cfg


def test_config_rejects_bad_number():
    with pytest.raises(ConfigError, match="COOLDOWN_SECONDS"):
        Config.from_env({"COOLDOWN_SECONDS": "ten"})


def test_validate_lists_missing_values():
    with pytest.raises(ConfigError) as exc:
        Config.from_env({"CAMERA_PASSWORD": "x"}).validate()
    message = str(exc.value)
    assert "VISION_CREDENTIALS_PATH" in message
    assert "PUSHOVER_USER_KEY" in message
    assert "CAMERA_PASSWORD" not in message


def test_validate_rejects_missing_credentials_file(tmp_path):
    env = dict(BASE_ENV, VISION_CREDENTIALS_PATH=str(tmp_path / "nope.json"))
    with pytest.raises(ConfigError, match="nope.json"):
        Container(Config.from_env(env))


def test_validate_rejects_negative_cooldown(required_env):
    with pytest.raises(ConfigError, match="negative"):
        Config.from_env(dict(required_env, COOLDOWN_SECONDS="-1")).validate()


def test_container_wires_pipeline(tmp_path, required_env):
    cfg = Config.from_env(dict(required_env, STATE_FILE=str(tmp_path / "s"), LOG_FILE=str(tmp_path / "l")))
    container = Container(cfg)
    assert container.cooldown.path == tmp_path / "s"
    assert container.camera.url == cfg.camera_url


def test_missing_credentials_exit_code(clean_env, capsys):
    with patch("camsentinel.main.setup_logging"):
        assert main_module.main([]) == 2
    assert "Missing required configuration" in capsys.readouterr().err


def test_env_file_and_cli_overrides(clean_env, tmp_path, required_env):
    env_file = tmp_path / ".env"
    env_file.write_text("\n".join(f"{k}={v}" for k, v in required_env.items()) + "\nCOOLDOWN_SECONDS=120\n")
    clean_env.setenv("PUSHOVER_USER_KEY", "from-environment")

    args = main_module.parse_args(
        ["--env-file", str(env_file), "--ignore", "Plant", "Lamp", "--state-file", str(tmp_path / "s"), "--html"]
    )
    cfg = main_module.build_config_from_env_and_args(args)

    assert cfg.camera_password == "cam-secret"
    assert cfg.pushover_user_key == "from-environment"
    assert cfg.cooldown_seconds == 120
    assert cfg.ignore_labels == ("Plant", "Lamp")
    assert cfg.state_file == str(tmp_path / "s")
    assert cfg.html_output is True


def test_missing_env_file_is_config_error(clean_env, tmp_path):
    with patch("camsentinel.main.setup_logging"):
        assert main_module.main(["--env-file", str(tmp_path / "nope")]) == 2


def test_pipeline_outcome_exits_zero(clean_env, tmp_path, required_env):
    for k, v in required_env.items():
        clean_env.setenv(k, v)
    result = RunResult(RunOutcome.ERROR, error=RuntimeError("x"))
    with patch("camsentinel.main.setup_logging"), \
            patch("camsentinel.services.pipeline.SentinelPipeline.run", return_value=result) as run:
        code = main_module.main(["--state-file", str(tmp_path / "s"), "--log-file", str(tmp_path / "l")])

    assert code == 0
    run.assert_called_once_with()


def test_missing_credentials_file_exit_code(clean_env, tmp_path, capsys):
    for k, v in BASE_ENV.items():
        clean_env.setenv(k, v)
    clean_env.setenv("VISION_CREDENTIALS_PATH", str(tmp_path / "nope.json"))
    with patch("camsentinel.main.setup_logging"), \
            patch("camsentinel.services.pipeline.SentinelPipeline.run") as run:
        code = main_module.main(["--state-file", str(tmp_path / "s"), "--log-file", str(tmp_path / "l")])

    assert code == 2
    assert "nope.json" in capsys.readouterr().err
    run.assert_not_called()


def test_help_explains_relative_paths(capsys):
    with pytest.raises(SystemExit):
        main_module.parse_args(["--help"])
    assert "working directory" in capsys.readouterr().out


def test_setup_logging_writes_to_given_stream():
    stream = io.StringIO()
    logger = setup_logging("info", stream=stream)
    try:
        logging.getLogger("camsentinel.services.pipeline").info("Run finished: notified")
        logging.getLogger("camsentinel.services.pipeline").debug("hidden")

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.propagate is False
        line = stream.getvalue()
        assert "| INFO     | camsentinel.services.pipeline" in line
        assert line.rstrip().endswith("| Run finished: notified")
        assert "hidden" not in line
    finally:
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def test_setup_logging_unknown_level_falls_back_to_warning():
    logger = setup_logging("chatty", stream=io.StringIO())
    try:
        assert logger.level == logging.WARNING
        setup_logging("debug", stream=io.StringIO())
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
