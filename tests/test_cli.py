import json
import logging
import sys

from typer.testing import CliRunner

from mail_posture.cli import JsonFormatter, app, setup_logging

runner = CliRunner()


def test_lint_command_outputs_json():
    result = runner.invoke(app, ["lint", "--subject", "FREE MONEY!!!"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["score"] == 65


def test_scan_rejects_invalid_domain():
    result = runner.invoke(app, ["scan", "--domain", "bad..example.com"])
    assert result.exit_code == 1


def test_monitor_rejects_zero_interval_without_once():
    result = runner.invoke(
        app,
        [
            "monitor",
            "--domain",
            "example.com",
            "--store",
            "memory",
            "--interval-hours",
            "0",
        ],
    )
    assert result.exit_code == 2


def test_setup_logging_writes_json_lines_to_stderr(monkeypatch):
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))
    setup_logging(verbose=True)
    (handler,) = seen["handlers"]
    assert handler.stream is sys.stderr
    assert isinstance(handler.formatter, JsonFormatter)
    assert seen["level"] == logging.DEBUG
