import json
import logging
import sys
from pathlib import Path
from unittest import mock

import pytest
import requests

from ringcaptcha import cli, logging_config


def make_response(status_code=200, payload=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload or {}).encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # Keep the root logger of the test session untouched
    fake = mock.Mock()
    monkeypatch.setattr(cli, "setup_logging", fake)
    return fake


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"app_key": "app", "secret_key": "secret", "default_service": "voice"}))
    return str(path)


@pytest.fixture
def post():
    with mock.patch("ringcaptcha.api.requests.post") as patched:
        yield patched


def test_send_code_uses_default_service_from_config(config_path, post, capsys):
    post.return_value = make_response(payload={"status": "SUCCESS", "token": "tok-7"})

    code = cli.main(["send-code", "+15551234567", "--config", config_path])

    assert code == 0
    assert post.call_args[0][0] == "https://api.ringcaptcha.com:443/app/code/voice"
    assert "Token: tok-7" in capsys.readouterr().out


def test_send_code_service_option_overrides_config(config_path, post):
    post.return_value = make_response(payload={"status": "SUCCESS"})

    cli.main(["send-code", "5551234", "--service", "sms", "--config", config_path])

    assert post.call_args[0][0].endswith("/app/code/sms")


def test_send_code_invalid_service_exits_with_error(config_path, post, capsys):
    code = cli.main(["send-code", "5551234", "--service", "fax", "--config", config_path])

    assert code == 1
    assert "fax" in capsys.readouterr().err
    post.assert_not_called()


def test_verify_rejected_code_exits_with_2(config_path, post, capsys):
    post.return_value = make_response(payload={"status": "ERROR", "message": "ERROR_INVALID_PIN_CODE"})

    code = cli.main(["verify", "0000", "tok", "--config", config_path])

    assert code == 2
    assert "ERROR_INVALID_PIN_CODE" in capsys.readouterr().out


def test_send_message_verbose_prints_json(config_path, post, capsys, no_logging_setup):
    post.return_value = make_response(payload={"status": "SUCCESS", "id": "m-1", "token": "dropped"})

    code = cli.main(["send-message", "5551234", "hello there", "--config", config_path, "-v"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"status": "SUCCESS", "id": "m-1"}
    assert post.call_args[1]["data"]["message"] == "hello there"
    no_logging_setup.assert_called_once_with("DEBUG", stream=sys.stderr)


def test_insecure_flag_switches_to_http(config_path, post):
    post.return_value = make_response(payload={"status": "SUCCESS"})

    cli.main(["send-message", "5551234", "hi", "--config", config_path, "--insecure"])

    assert post.call_args[0][0] == "http://api.ringcaptcha.com:80/app/sms"


def test_transport_failure_exits_with_error(config_path, post, capsys):
    post.return_value = make_response(status_code=500)

    code = cli.main(["send-message", "5551234", "hi", "--config", config_path])

    assert code == 1
    assert "ERROR_PROCESSING_REQUEST" in capsys.readouterr().err


def test_missing_config_exits_with_error(tmp_path: Path, post, capsys):
    code = cli.main(["verify", "1234", "tok", "--config", str(tmp_path / "missing.json")])

    assert code == 1
    assert "Config file not found" in capsys.readouterr().err
    post.assert_not_called()


def test_init_writes_config(tmp_path: Path):
    config_dir = tmp_path / "ringcaptcha"

    code = cli.main(["init", "--config-dir", str(config_dir), "--app-key", "app",
                     "--secret-key", "secret", "--service", "voice", "--timeout", "4"])

    assert code == 0
    data = json.loads((config_dir / "config.json").read_text())
    assert data == {"app_key": "app", "secret_key": "secret", "secure": True,
                    "timeout": 4.0, "default_service": "voice"}


def test_init_refuses_to_overwrite_without_force(tmp_path: Path):
    args = ["init", "--config-dir", str(tmp_path), "--app-key", "app", "--secret-key", "secret"]
    assert cli.main(args) == 0

    assert cli.main(args) == 1
    assert cli.main(args + ["--force", "--insecure"]) == 0
    assert json.loads((tmp_path / "config.json").read_text())["secure"] is False


def test_verbose_logs_do_not_mix_with_json_output(config_path, post, capsys, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", logging_config.setup_logging)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    post.return_value = make_response(payload={"status": "SUCCESS", "id": "m"})

    try:
        code = cli.main(["send-message", "5551234", "hi", "--config", config_path, "-v"])
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)

    captured = capsys.readouterr()
    assert code == 0
    assert json.loads(captured.out) == {"status": "SUCCESS", "id": "m"}
    assert "DEBUG - POST https://api.ringcaptcha.com:443/app/sms" in captured.err
