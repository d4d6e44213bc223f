# tests/conftest.py
import json
import shutil
from pathlib import Path

import pytest

from dhconfig.config.session import reset


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh)
    return path


class RecordingLogger:
    """Logger collaborator exposing only info/warn/error."""

    def __init__(self):
        self.records = []

    def info(self, msg):
        self.records.append(("info", msg))

    def warn(self, msg):
        self.records.append(("warn", msg))

    def error(self, msg):
        self.records.append(("error", msg))

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A config directory with all.json and local.json."""
    directory = tmp_path / "config"
    write_json(directory / "all.json", {
        "name": "base",
        "serverSettings": {"port": 3000, "host": "localhost"},
        "database": {"host": "db.internal", "port": 5432},
        "features": ["search", "export"],
    })
    write_json(directory / "local.json", {
        "name": "local",
        "serverSettings": {"port": 8080},
    })
    return directory


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture(autouse=True)
def clean_process_state(monkeypatch):
    """Keep the selector variable and the shared session out of every test."""
    monkeypatch.delenv("NODE_ENV", raising=False)
    reset()
    yield
    reset()


@pytest.fixture(autouse=True)
def isolate_fs(tmp_path: Path, monkeypatch):
    """Prevent tests from accidentally touching real project files."""
    monkeypatch.chdir(tmp_path)
    yield
    # cleanup
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture
def write_config():
    """Helper writing a JSON document to a path."""
    return write_json
