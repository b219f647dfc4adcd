"""
Loading of module manifests from a module directory.

Two load modes exist:
    FULL    reads go.mod and gop.mod; the class-type flag is known and the
            manifest can be rewritten to canonical form.
    LEGACY  reads go.mod only; used when no Go+ environment is available.
            The class-type flag is reported as False and updates are refused.
"""

import enum
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

from modfetch.env import GopEnv, GOP_MODULE_PATH
from modfetch.exceptions import ManifestError
from modfetch.modload.gomod import GO_MOD, GOP_MOD, GoMod, GopMod, ModSyntaxError, Project
from modfetch.versioning import is_release, is_valid

logger = logging.getLogger(__name__)

# used in require lines when the Go+ version is a development build
DEVEL_VERSION = "v0.0.0"


class LoadMode(enum.Enum):
    FULL = "full"
    LEGACY = "legacy"


class Manifest:
    """The manifests of one module directory."""

    def __init__(
        self,
        directory: Path,
        mode: LoadMode,
        gomod: Optional[GoMod],
        gomod_text: Optional[str],
        gopmod: Optional[GopMod],
        module_path: Optional[str] = None,
    ):
        self.directory = directory
        self.mode = mode
        self.gomod = gomod
        self.gomod_text = gomod_text
        self.gopmod = gopmod
        self.module_path = module_path or (gomod.module if gomod else None)

    @property
    def classfile(self) -> Optional[Project]:
        if self.gopmod is None or not self.gopmod.projects:
            return None
        return self.gopmod.projects[0]

    @property
    def is_class_type(self) -> bool:
        return self.classfile is not None

    def canonical_gomod(self, env: GopEnv) -> Optional[GoMod]:
        """
        Return the go.mod this module should have for *env*.

        None means no go.mod is needed (a plain module without one).
        """
        if self.gomod is None and self.gopmod is None:
            return None

        mod = self.gomod.model_copy(deep=True) if self.gomod else GoMod(module=self.module_path)
        if self.gopmod is not None:
            version = env.version if is_valid(env.version) else DEVEL_VERSION
            mod.set_require(GOP_MODULE_PATH, version)
            if is_release(env.version) or env.root is None:
                mod.drop_replace(GOP_MODULE_PATH)
            else:
                mod.set_replace(GOP_MODULE_PATH, str(env.root))
        return mod

    def is_canonical(self, env: GopEnv) -> bool:
        """True if update_canonical_form would not write anything."""
        canonical = self.canonical_gomod(env)
        if canonical is None:
            return True
        if self.gomod is None:
            return False
        return canonical.render() == self.gomod.render()

    def update_canonical_form(self, env: GopEnv, create_if_absent: bool) -> bool:
        """
        Rewrite go.mod to its canonical form for *env*.

        The file is replaced atomically through a temporary file in the
        module directory, so the directory itself must be writable.

        Args:
            env: Go+ environment the module is prepared for
            create_if_absent: Create go.mod when the module has none

        Returns:
            True if go.mod was written

        Raises:
            ManifestError: If the manifest was loaded in LEGACY mode, go.mod is
                missing and may not be created, or the write fails
        """
        if self.mode is not LoadMode.FULL:
            raise ManifestError(self.directory, "manifest loaded in legacy mode cannot be updated")
        if self.is_canonical(env):
            return False

        canonical = self.canonical_gomod(env)
        if self.gomod is None:
            if not create_if_absent:
                raise ManifestError(self.directory, f"{GO_MOD} not found")
            if not canonical.module:
                raise ManifestError(self.directory, f"cannot create {GO_MOD}: module path unknown")

        text = canonical.render()
        _write_atomic(self.directory / GO_MOD, text)
        logger.debug(f"Updated {self.directory / GO_MOD}")
        self.gomod = canonical
        self.gomod_text = text
        return True


def _write_atomic(target: Path, text: str) -> None:
    try:
        mode = stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        mode = 0o444

    try:
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    except OSError as e:
        raise ManifestError(target.parent, f"cannot write {target.name}: {e}") from e

    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise ManifestError(target.parent, f"cannot write {target.name}: {e}") from e


def _read_optional(path: Path) -> Optional[str]:
    try:
        return path.read_text()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ManifestError(path.parent, f"cannot read {path.name}: {e}") from e


def load(directory: Path, mode: LoadMode = LoadMode.FULL, module_path: Optional[str] = None) -> Manifest:
    """
    Load the manifests of a module directory.

    Args:
        directory: Module directory
        mode: FULL or LEGACY (go.mod only)
        module_path: Module path, used when go.mod has to be created

    Returns:
        Manifest

    Raises:
        ManifestError: If the directory is missing or a manifest is malformed
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ManifestError(directory, "module directory not found")

    try:
        gomod_text = _read_optional(directory / GO_MOD)
        gomod = GoMod.parse(gomod_text) if gomod_text is not None else None

        gopmod = None
        if mode is LoadMode.FULL:
            gopmod_text = _read_optional(directory / GOP_MOD)
            gopmod = GopMod.parse(gopmod_text) if gopmod_text is not None else None
    except ModSyntaxError as e:
        raise ManifestError(directory, str(e)) from e

    return Manifest(directory, mode, gomod, gomod_text, gopmod, module_path)
