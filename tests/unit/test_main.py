import json

import pytest

from foodies.main import run


@pytest.mark.unit
def test_cli_returns_non_zero_for_invalid_port(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run(["--port", "-1", "--dry-run-startup"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "ERROR:" in captured.err


@pytest.mark.unit
def test_cli_dry_run_succeeds_and_logs_json(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run(["--dry-run-startup"])
    captured = capsys.readouterr()

    assert exit_code == 0
    lines = [json.loads(line) for line in captured.out.splitlines() if line.strip()]
    assert lines[-1]["message"] == "dry-run startup complete"
    assert lines[-1]["service"] == "foodies"
