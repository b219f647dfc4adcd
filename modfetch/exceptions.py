"""
Exception classes for module resolution.

Only CacheMissError (and its subclasses) is recovered inside the resolver;
every other error is surfaced to the caller unchanged.
"""

from pathlib import Path
from typing import Optional, Sequence, Union


class ModFetchError(Exception):
    """Base exception for all module fetch errors."""

    pass


class CacheMissError(ModFetchError, LookupError):
    """Raised when a module is not present in the local cache."""

    def __init__(self, reference: str, message: str = ""):
        self.reference = reference
        super().__init__(message or f"{reference} not found in module cache")


class ReportNotFoundError(CacheMissError):
    """Raised when acquisition output contains no recognizable report."""

    def __init__(self, message: str = "no module report found in go output"):
        super().__init__("", message)


class ModuleNotCachedError(CacheMissError):
    """Raised when every resolution path has been exhausted."""

    def __init__(self, reference: str, stderr: bytes = b""):
        self.stderr = stderr
        message = f"module {reference} not found in cache after acquisition"
        details = stderr.decode("utf-8", errors="replace").strip()
        if details:
            message += f"\n{details}"
        super().__init__(reference, message)


class InvalidPathError(ModFetchError, ValueError):
    """Raised when a module path or version cannot be escaped or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"malformed module path {path!r}: {reason}")


class SubprocessFailure(ModFetchError):
    """Raised when the acquisition command fails and its exit code is authoritative."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stderr: bytes = b"",
        message: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        text = message or f"{' '.join(self.command)} exited with status {returncode}"
        details = stderr.decode("utf-8", errors="replace").strip()
        if details:
            text += f"\n{details}"
        super().__init__(text)


class ManifestError(ModFetchError):
    """Raised when a module manifest cannot be loaded or updated."""

    def __init__(self, directory: Union[str, Path], message: str):
        self.directory = Path(directory)
        super().__init__(f"{self.directory}: {message}")


class CacheIOError(ModFetchError, OSError):
    """Raised when listing or inspecting the cache fails for a reason other than absence."""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(f"cannot read module cache at {self.path}: {message}")


class ConfigurationError(ModFetchError, ValueError):
    """Raised for configuration values that cannot be used."""

    pass
