"""Tests for manifest loading and canonical go.mod updates."""

import os
import stat

import pytest

from modfetch.env import GopEnv, GOP_MODULE_PATH
from modfetch.exceptions import ManifestError
from modfetch.modload import LoadMode, load
from modfetch.modload.loader import DEVEL_VERSION

CLASSFILE = "gop 1.2\n\nproject .gmx Game github.com/goplus/spx math\n"


@pytest.fixture
def module(tmp_path):
    directory = tmp_path / "spx@v1.0.0"
    directory.mkdir()
    (directory / "go.mod").write_text("module github.com/goplus/spx\n\ngo 1.21\n")
    (directory / "gop.mod").write_text(CLASSFILE)
    return directory


@pytest.mark.short
class TestLoad:
    def test_full_mode_reports_classfile(self, module):
        manifest = load(module, LoadMode.FULL)

        assert manifest.is_class_type
        assert manifest.classfile.class_name == "Game"
        assert manifest.module_path == "github.com/goplus/spx"

    def test_legacy_mode_ignores_gopmod(self, module):
        manifest = load(module, LoadMode.LEGACY)

        assert manifest.gopmod is None
        assert not manifest.is_class_type

    def test_plain_module(self, module):
        (module / "gop.mod").unlink()
        assert not load(module).is_class_type

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ManifestError):
            load(tmp_path / "absent")

    def test_syntax_error(self, module):
        (module / "gop.mod").write_text("project\n")
        with pytest.raises(ManifestError, match="gop.mod:1"):
            load(module)


@pytest.mark.short
class TestCanonicalForm:
    def test_release_requires_gop(self, module):
        manifest = load(module)
        canonical = manifest.canonical_gomod(GopEnv("v1.2.6"))

        assert canonical.find_require(GOP_MODULE_PATH).version == "v1.2.6"
        assert canonical.replace == []

    def test_release_drops_local_replace(self, module):
        (module / "go.mod").write_text(
            "module github.com/goplus/spx\n\nreplace github.com/goplus/gop => /old/gop\n"
        )
        canonical = load(module).canonical_gomod(GopEnv("v1.2.6"))
        assert canonical.replace == []

    def test_devel_build_replaces_with_root(self, module, tmp_path):
        env = GopEnv("v1.3.0-devel", root=tmp_path / "gop")
        canonical = load(module).canonical_gomod(env)

        assert canonical.find_require(GOP_MODULE_PATH).version == "v1.3.0-devel"
        assert canonical.replace[0].new_path == str(tmp_path / "gop")

    def test_unversioned_devel_build(self, module, tmp_path):
        canonical = load(module).canonical_gomod(GopEnv("devel", root=tmp_path))
        assert canonical.find_require(GOP_MODULE_PATH).version == DEVEL_VERSION

    def test_plain_module_is_canonical_as_is(self, module):
        (module / "gop.mod").unlink()
        (module / "go.mod").write_text("module   m   // spaced\n")

        assert load(module).is_canonical(GopEnv("v1.2.6"))

    def test_module_without_manifests_is_canonical(self, tmp_path):
        directory = tmp_path / "bare@v1.0.0"
        directory.mkdir()
        manifest = load(directory)

        assert manifest.is_canonical(GopEnv("v1.2.6"))
        assert not manifest.update_canonical_form(GopEnv("v1.2.6"), create_if_absent=True)
        assert not (directory / "go.mod").exists()


@pytest.mark.short
class TestUpdate:
    def test_writes_once(self, module):
        env = GopEnv("v1.2.6")
        manifest = load(module)

        assert manifest.update_canonical_form(env, create_if_absent=True)
        text = (module / "go.mod").read_text()
        assert f"require {GOP_MODULE_PATH} v1.2.6" in text

        again = load(module)
        assert again.is_canonical(env)
        assert not again.update_canonical_form(env, create_if_absent=True)
        assert (module / "go.mod").read_text() == text

    def test_preserves_file_mode(self, module):
        os.chmod(module / "go.mod", 0o444)

        load(module).update_canonical_form(GopEnv("v1.2.6"), create_if_absent=True)

        assert stat.S_IMODE(os.stat(module / "go.mod").st_mode) == 0o444

    def test_no_temp_files_left(self, module):
        load(module).update_canonical_form(GopEnv("v1.2.6"), create_if_absent=True)
        assert sorted(p.name for p in module.iterdir()) == ["go.mod", "gop.mod"]

    def test_creates_missing_gomod(self, module):
        (module / "go.mod").unlink()
        manifest = load(module, module_path="github.com/goplus/spx")

        assert manifest.update_canonical_form(GopEnv("v1.2.6"), create_if_absent=True)
        assert (module / "go.mod").read_text().startswith("module github.com/goplus/spx\n")

    def test_missing_gomod_without_create(self, module):
        (module / "go.mod").unlink()
        manifest = load(module, module_path="github.com/goplus/spx")

        with pytest.raises(ManifestError, match="go.mod not found"):
            manifest.update_canonical_form(GopEnv("v1.2.6"), create_if_absent=False)

    def test_missing_gomod_without_module_path(self, module):
        (module / "go.mod").unlink()

        with pytest.raises(ManifestError, match="module path unknown"):
            load(module).update_canonical_form(GopEnv("v1.2.6"), create_if_absent=True)

    def test_legacy_manifest_cannot_update(self, module):
        with pytest.raises(ManifestError, match="legacy"):
            load(module, LoadMode.LEGACY).update_canonical_form(GopEnv("v1.2.6"), True)
