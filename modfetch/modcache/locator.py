"""
Lookup of modules in the Go module cache.

Cache layout (GOMODCACHE):
    <cache_dir>/
    ├── cache/download/...                 # managed by the go command
    └── github.com/
        └── user/
            ├── repo@v1.2.0/               # one directory per version
            └── repo@v1.10.0/

The existence of ``<escaped path>@<escaped version>`` is the only record of a
cached version; no separate index is kept. When no version is requested, the
siblings sharing the ``<escaped path>@`` prefix are listed in lexicographic
order and the highest version wins. On a comparison tie the lexicographically
last directory name wins.
"""

import errno
import logging
import os
import stat
from dataclasses import dataclass
from functools import cmp_to_key
from pathlib import Path
from typing import List, Tuple

from modfetch.exceptions import CacheIOError, CacheMissError, InvalidPathError
from modfetch.model import ModuleReference, VERSION_SEPARATOR
from modfetch.modcache.escape import escape_path, escape_version, unescape
from modfetch.versioning import compare_versions, is_valid, max_version

logger = logging.getLogger(__name__)

_MISSING = (errno.ENOENT, errno.ENOTDIR)


@dataclass(frozen=True)
class CacheHit:
    directory: Path
    version: str


def module_dir(cache_dir: Path, path: str, version: str) -> Path:
    """
    Return the cache directory of an exact module version.

    Raises:
        InvalidPathError: If the path or version cannot be escaped
    """
    return Path(cache_dir) / (
        escape_path(path) + VERSION_SEPARATOR + escape_version(version)
    )


class CacheLocator:
    """
    Finds cached module versions without touching the cache contents.

    Usage:
        locator = CacheLocator(Path("~/go/pkg/mod").expanduser())
        hit = locator.locate(ModuleReference.parse("github.com/user/repo"))
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def locate(self, ref: ModuleReference) -> CacheHit:
        """
        Locate a module in the cache.

        Args:
            ref: Module reference; without a version the highest cached
                version is selected

        Returns:
            CacheHit with the module directory and its concrete version

        Raises:
            CacheMissError: If no matching directory exists
            InvalidPathError: If the reference cannot be escaped
            CacheIOError: If the cache cannot be read
        """
        if ref.has_version:
            directory = module_dir(self.cache_dir, ref.path, ref.version)
            if not self._is_dir(directory):
                raise CacheMissError(str(ref))
            logger.debug(f"Found {ref} at {directory}")
            return CacheHit(directory, ref.version)

        candidates = dict(self._scan(ref.path))
        best = max_version(candidates)
        if best is None:
            raise CacheMissError(str(ref))
        directory = candidates[best]
        logger.debug(f"Selected {ref.path}@{best} from {len(candidates)} cached versions")
        return CacheHit(directory, best)

    def versions(self, path: str) -> List[str]:
        """Return the cached versions of *path*, lowest first."""
        found = [v for v, _ in self._scan(path)]
        return sorted(found, key=cmp_to_key(compare_versions))

    def _scan(self, path: str) -> List[Tuple[str, Path]]:
        escaped = escape_path(path)
        parent = self.cache_dir.joinpath(*escaped.split("/")[:-1])
        prefix = escaped.split("/")[-1] + VERSION_SEPARATOR

        try:
            names = sorted(os.listdir(parent))
        except OSError as e:
            if e.errno in _MISSING:
                return []
            raise CacheIOError(parent, e.strerror or str(e)) from e

        found = []
        for name in names:
            if not name.startswith(prefix):
                continue
            entry = parent / name
            if not self._is_dir(entry):
                continue
            try:
                version = unescape(name[len(prefix) :])
            except InvalidPathError:
                logger.debug(f"Skipping malformed cache entry {entry}")
                continue
            if not is_valid(version):
                logger.debug(f"Skipping cache entry with invalid version {entry}")
                continue
            found.append((version, entry))
        return found

    @staticmethod
    def _is_dir(path: Path) -> bool:
        try:
            return stat.S_ISDIR(os.stat(path).st_mode)
        except OSError as e:
            if e.errno in _MISSING:
                return False
            raise CacheIOError(path, e.strerror or str(e)) from e
