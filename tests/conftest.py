import io
import logging
import os
from pathlib import Path
from typing import Optional

import pytest

from modfetch.config import FetchConfig
from modfetch.fetch.runner import AcquisitionResult
from modfetch.modcache import module_dir


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("modfetch")
    logger.addHandler(handler)
    previous = logger.level
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    logger.setLevel(previous)
    log_stream.close()


@pytest.fixture
def cache_root(tmp_path) -> Path:
    """An empty, isolated module cache root."""
    root = tmp_path / "gomodcache"
    root.mkdir()
    return root


@pytest.fixture
def make_module(cache_root):
    """Factory creating a read-only module directory in the cache root."""

    def _make(
        path: str,
        version: str,
        gomod: Optional[str] = "",
        gopmod: Optional[str] = None,
        mode: int = 0o555,
    ) -> Path:
        directory = module_dir(cache_root, path, version)
        directory.mkdir(parents=True)
        if gomod is not None:
            (directory / "go.mod").write_text(gomod or f"module {path}\n\ngo 1.21\n")
        if gopmod is not None:
            (directory / "gop.mod").write_text(gopmod)
        os.chmod(directory, mode)
        return directory

    return _make


@pytest.fixture
def fetch_config(cache_root, tmp_path) -> FetchConfig:
    return FetchConfig(cache_dir=cache_root, lock_dir=tmp_path / "locks")


class FakeRunner:
    """Stands in for AcquisitionRunner; optionally populates the cache when run."""

    def __init__(self, stderr: bytes = b"", returncode: int = 0, on_run=None):
        self.stderr = stderr
        self.returncode = returncode
        self.on_run = on_run
        self.calls = []

    def run(self, ref):
        self.calls.append(ref)
        if self.on_run is not None:
            self.on_run(ref)
        return AcquisitionResult(["go", "install", str(ref)], self.returncode, b"", self.stderr)


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
