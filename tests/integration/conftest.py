import os
import sys
import subprocess
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture()
def run_cli():
    """
    Run the CLI as a subprocess: python -m sasscan.cli <args>
    Returns CompletedProcess with stdout/stderr text captured.
    """

    def _run(args, cwd=None, timeout=60):
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(p for p in (str(REPO_ROOT), env.get("PYTHONPATH")) if p)
        cmd = [sys.executable, "-m", "sasscan.cli"] + list(map(str, args))
        return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, timeout=timeout)

    return _run
