"""Tests for locating modules in the module cache."""

import os

import pytest

from modfetch.exceptions import CacheIOError, CacheMissError, InvalidPathError
from modfetch.modcache import CacheLocator
from modfetch.model import ModuleReference


def ref(text):
    return ModuleReference.parse(text)


@pytest.mark.short
class TestExplicitVersion:
    def test_hit(self, cache_root, make_module):
        directory = make_module("github.com/user/repo", "v1.0.0")

        hit = CacheLocator(cache_root).locate(ref("github.com/user/repo@v1.0.0"))

        assert hit.directory == directory
        assert hit.version == "v1.0.0"

    def test_independent_of_siblings(self, cache_root, make_module):
        make_module("mod", "v1.0.0")
        make_module("mod", "v3.0.0")

        hit = CacheLocator(cache_root).locate(ref("mod@v1.0.0"))

        assert hit.version == "v1.0.0"

    def test_miss(self, cache_root, make_module):
        make_module("mod", "v1.0.0")

        with pytest.raises(CacheMissError):
            CacheLocator(cache_root).locate(ref("mod@v2.0.0"))

    def test_file_is_not_a_hit(self, cache_root):
        (cache_root / "mod@v1.0.0").write_text("not a directory")

        with pytest.raises(CacheMissError):
            CacheLocator(cache_root).locate(ref("mod@v1.0.0"))

    def test_uppercase_path(self, cache_root, make_module):
        directory = make_module("github.com/Azure/sdk", "v0.1.0")
        assert directory.parent.name == "!azure"

        hit = CacheLocator(cache_root).locate(ref("github.com/Azure/sdk@v0.1.0"))

        assert hit.directory == directory


@pytest.mark.short
class TestLatestVersion:
    def test_numeric_aware_selection(self, cache_root, make_module):
        for version in ("v1.2.0", "v1.10.0", "v1.9.9"):
            make_module("github.com/user/repo", version)

        hit = CacheLocator(cache_root).locate(ref("github.com/user/repo"))

        assert hit.version == "v1.10.0"
        assert hit.directory.name == "repo@v1.10.0"

    def test_ignores_other_modules_with_shared_prefix(self, cache_root, make_module):
        make_module("github.com/user/repo", "v1.0.0")
        make_module("github.com/user/repo-extra", "v9.0.0")
        make_module("github.com/user/repo/sub", "v5.0.0")

        hit = CacheLocator(cache_root).locate(ref("github.com/user/repo"))

        assert hit.version == "v1.0.0"

    def test_release_beats_prerelease(self, cache_root, make_module):
        make_module("mod", "v2.0.0-rc.1")
        make_module("mod", "v2.0.0")

        assert CacheLocator(cache_root).locate(ref("mod")).version == "v2.0.0"

    def test_skips_files_and_invalid_versions(self, cache_root, make_module):
        make_module("mod", "v0.1.0")
        (cache_root / "mod@v9.0.0").write_text("a file")
        (cache_root / "mod@garbage").mkdir()

        assert CacheLocator(cache_root).locate(ref("mod")).version == "v0.1.0"

    def test_tie_resolves_to_last_name(self, cache_root, make_module):
        make_module("mod", "v1.0.0+a")
        make_module("mod", "v1.0.0+b")

        assert CacheLocator(cache_root).locate(ref("mod")).version == "v1.0.0+b"

    def test_no_match(self, cache_root, make_module):
        make_module("other", "v1.0.0")

        with pytest.raises(CacheMissError):
            CacheLocator(cache_root).locate(ref("mod"))

    def test_missing_parent_is_a_miss(self, cache_root):
        with pytest.raises(CacheMissError):
            CacheLocator(cache_root).locate(ref("github.com/nobody/repo"))

    def test_missing_cache_root_is_a_miss(self, tmp_path):
        with pytest.raises(CacheMissError):
            CacheLocator(tmp_path / "absent").locate(ref("mod"))

    def test_listing_error_is_not_a_miss(self, cache_root, monkeypatch):
        def broken_listdir(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(os, "listdir", broken_listdir)

        with pytest.raises(CacheIOError) as excinfo:
            CacheLocator(cache_root).locate(ref("mod"))
        assert not isinstance(excinfo.value, CacheMissError)
        assert excinfo.value.path == cache_root

    def test_stat_error_is_not_a_miss(self, cache_root, make_module, monkeypatch):
        directory = make_module("mod", "v1.0.0")
        real_stat = os.stat

        def denied_stat(path, *args, **kwargs):
            if str(path) == str(directory):
                raise PermissionError(13, "Permission denied", str(path))
            return real_stat(path, *args, **kwargs)

        monkeypatch.setattr(os, "stat", denied_stat)

        with pytest.raises(CacheIOError) as excinfo:
            CacheLocator(cache_root).locate(ref("mod@v1.0.0"))
        assert not isinstance(excinfo.value, CacheMissError)
        assert excinfo.value.path == directory

    def test_invalid_path(self, cache_root):
        with pytest.raises(InvalidPathError):
            CacheLocator(cache_root).locate(ref("../escape"))


@pytest.mark.short
def test_versions_sorted(cache_root, make_module):
    for version in ("v1.10.0", "v1.2.0", "v1.9.9"):
        make_module("mod", version)

    assert CacheLocator(cache_root).versions("mod") == ["v1.2.0", "v1.9.9", "v1.10.0"]


@pytest.mark.short
def test_locate_does_not_modify_cache(cache_root, make_module):
    make_module("mod", "v1.0.0")
    before = sorted(p.name for p in cache_root.iterdir())

    CacheLocator(cache_root).locate(ref("mod"))

    assert sorted(p.name for p in cache_root.iterdir()) == before
