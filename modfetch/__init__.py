"""Resolve Go module references to locally cached, version-pinned modules."""

__version__ = "0.3.0"

from modfetch.config import FetchConfig  # noqa: E402
from modfetch.env import GopEnv  # noqa: E402
from modfetch.exceptions import (  # noqa: E402
    CacheIOError,
    CacheMissError,
    ConfigurationError,
    InvalidPathError,
    ManifestError,
    ModFetchError,
    ModuleNotCachedError,
    SubprocessFailure,
)
from modfetch.fetch.resolver import Resolver, get  # noqa: E402
from modfetch.model import ModuleReference, ResolvedModule  # noqa: E402

__all__ = [
    "CacheIOError",
    "CacheMissError",
    "ConfigurationError",
    "FetchConfig",
    "GopEnv",
    "InvalidPathError",
    "ManifestError",
    "ModFetchError",
    "ModuleNotCachedError",
    "ModuleReference",
    "ResolvedModule",
    "Resolver",
    "SubprocessFailure",
    "get",
]
