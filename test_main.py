"""Tests for the unified service launcher."""

import subprocess
import sys

import main


def test_start_service_does_not_pipe_child_output(monkeypatch):
    launched = {}

    def fake_popen(args, **kwargs):
        launched['args'] = args
        launched.update(kwargs)
        return "process"

    monkeypatch.setattr(main.subprocess, "Popen", fake_popen)

    process = main.start_service("API Server", "api_server.py", {"EXTRA": "1"}, "/srv")

    assert process == "process"
    assert launched['args'] == [sys.executable, "api_server.py"]
    assert launched['stdout'] == subprocess.DEVNULL
    assert launched['env']["EXTRA"] == "1"
    assert launched['cwd'] == "/srv"
