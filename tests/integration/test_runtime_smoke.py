import subprocess
import sys

import pytest


@pytest.mark.integration
def test_service_starts_in_dry_run_mode() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "foodies.main", "--dry-run-startup"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0, proc.stderr
    assert "dry-run startup complete" in proc.stdout
