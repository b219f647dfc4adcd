"""
Read-only access to the Go module cache (GOMODCACHE).

Cache directories are created by the go command only; this package escapes
module paths and finds the directories that already exist.
"""

from .escape import escape_path, escape_version, unescape
from .locator import CacheHit, CacheLocator, module_dir

__all__ = [
    "CacheHit",
    "CacheLocator",
    "escape_path",
    "escape_version",
    "module_dir",
    "unescape",
]
