"""Tests for module classification and the scoped permission change."""

import os
import stat

import pytest

from modfetch.env import GopEnv
from modfetch.exceptions import ManifestError
from modfetch.modload import ManifestAdapter, writable
from modfetch.modload.loader import Manifest

CLASSFILE = "gop 1.2\n\nproject .gmx Game github.com/goplus/spx math\n"


def mode_of(path):
    return stat.S_IMODE(os.stat(path).st_mode)


@pytest.fixture
def adapter(tmp_path):
    return ManifestAdapter(lock_dir=tmp_path / "locks")


@pytest.mark.short
class TestWritable:
    def test_adds_owner_write_and_restores(self, tmp_path):
        directory = tmp_path / "d"
        directory.mkdir()
        os.chmod(directory, 0o555)

        with writable(directory) as prior:
            assert prior == 0o555
            assert mode_of(directory) & stat.S_IWUSR

        assert mode_of(directory) == 0o555

    def test_restores_on_error(self, tmp_path):
        directory = tmp_path / "d"
        directory.mkdir()
        os.chmod(directory, 0o500)

        with pytest.raises(RuntimeError):
            with writable(directory):
                raise RuntimeError("boom")

        assert mode_of(directory) == 0o500

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ManifestError):
            with writable(tmp_path / "absent"):
                pass


@pytest.mark.short
class TestClassify:
    def test_without_env_only_reads(self, adapter, make_module):
        directory = make_module("github.com/goplus/spx", "v1.0.0", gopmod=CLASSFILE)
        before = (directory / "go.mod").read_text()

        assert adapter.classify(directory) is False
        assert (directory / "go.mod").read_text() == before
        assert mode_of(directory) == 0o555

    def test_with_env_rewrites_and_restores_mode(self, adapter, make_module):
        directory = make_module("github.com/goplus/spx", "v1.0.0", gopmod=CLASSFILE)

        assert adapter.classify(directory, GopEnv("v1.2.6")) is True
        assert "github.com/goplus/gop v1.2.6" in (directory / "go.mod").read_text()
        assert mode_of(directory) == 0o555

    def test_plain_module(self, adapter, make_module):
        directory = make_module("golang.org/x/mod", "v0.14.0")
        assert adapter.classify(directory, GopEnv("v1.2.6")) is False

    def test_update_failure_restores_mode(self, adapter, make_module, monkeypatch):
        directory = make_module("github.com/goplus/spx", "v1.0.0", gopmod=CLASSFILE)

        def failing_update(self, env, create_if_absent):
            assert mode_of(self.directory) & stat.S_IWUSR
            raise ManifestError(self.directory, "disk full")

        monkeypatch.setattr(Manifest, "update_canonical_form", failing_update)

        with pytest.raises(ManifestError, match="disk full"):
            adapter.classify(directory, GopEnv("v1.2.6"))
        assert mode_of(directory) == 0o555

    def test_already_canonical_is_not_touched(self, adapter, make_module, monkeypatch):
        directory = make_module("github.com/goplus/spx", "v1.0.0", gopmod=CLASSFILE)
        env = GopEnv("v1.2.6")
        adapter.classify(directory, env)

        def unexpected(*args, **kwargs):
            raise AssertionError("manifest updated twice")

        monkeypatch.setattr(Manifest, "update_canonical_form", unexpected)
        monkeypatch.setattr("modfetch.modload.adapter.writable", unexpected)

        assert adapter.classify(directory, env) is True
        assert mode_of(directory) == 0o555

    def test_lock_files_stay_outside_cache(self, adapter, make_module, cache_root, tmp_path):
        directory = make_module("github.com/goplus/spx", "v1.0.0", gopmod=CLASSFILE)

        adapter.classify(directory, GopEnv("v1.2.6"))

        assert (tmp_path / "locks").is_dir()
        assert not list(cache_root.rglob("*.lock"))
