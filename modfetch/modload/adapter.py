"""
Classification of cached modules and guarded manifest rewriting.

Module cache directories are kept read-only. The adapter is the only writer:
it makes a directory writable for the duration of a manifest update and
restores the previous mode on every exit path. Updates of the same directory
are serialized across processes with a file lock kept outside the cache.
"""

import hashlib
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from filelock import FileLock

from modfetch.env import GopEnv
from modfetch.exceptions import ManifestError
from modfetch.modload.loader import LoadMode, load

logger = logging.getLogger(__name__)


@contextmanager
def writable(directory: Path) -> Iterator[int]:
    """
    Temporarily add owner write permission to *directory*.

    Yields:
        The mode the directory had on entry, which is restored on exit

    Raises:
        ManifestError: If the mode cannot be read, changed or restored
    """
    directory = Path(directory)
    try:
        prior = stat.S_IMODE(os.stat(directory).st_mode)
        os.chmod(directory, prior | stat.S_IWUSR)
    except OSError as e:
        raise ManifestError(directory, f"cannot make directory writable: {e}") from e

    try:
        yield prior
    finally:
        try:
            os.chmod(directory, prior)
        except OSError as e:
            raise ManifestError(directory, f"cannot restore directory mode {oct(prior)}: {e}") from e


class ManifestAdapter:
    """
    Reports whether a module is class-type and keeps its go.mod canonical.

    Usage:
        adapter = ManifestAdapter()
        is_class = adapter.classify(Path(".../repo@v1.0.0"), env=GopEnv("v1.2.6"))
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        if lock_dir is None:
            lock_dir = Path(tempfile.gettempdir()) / "modfetch_locks"
        self.lock_dir = Path(lock_dir)

    def classify(
        self,
        directory: Path,
        env: Optional[GopEnv] = None,
        module_path: Optional[str] = None,
    ) -> bool:
        """
        Classify a module directory, updating its go.mod when *env* is given.

        Args:
            directory: Module directory in the cache
            env: Go+ environment; without it the manifest is only read
            module_path: Module path, used if go.mod has to be created

        Returns:
            True if the module declares a Go+ project classfile

        Raises:
            ManifestError: If loading or updating fails; the directory mode is
                restored before this is raised
        """
        if env is None:
            return load(directory, LoadMode.LEGACY, module_path).is_class_type

        manifest = load(directory, LoadMode.FULL, module_path)
        if manifest.is_canonical(env):
            return manifest.is_class_type

        with self._lock(directory):
            # another process may have finished the update while we waited
            manifest = load(directory, LoadMode.FULL, module_path)
            with writable(directory):
                if manifest.update_canonical_form(env, create_if_absent=True):
                    logger.info(f"Rewrote go.mod of {directory} for Go+ {env.version}")
        return manifest.is_class_type

    def _lock(self, directory: Path) -> FileLock:
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        key = hashlib.sha256(str(Path(directory).resolve()).encode("utf-8")).hexdigest()[:16]
        return FileLock(self.lock_dir / f"{key}.lock")
