"""
Semantic version handling for Go module versions.

The comparison rules mirror the Go toolchain: versions carry a leading ``v``,
shorthand forms are allowed, and invalid strings rank below every valid one.
"""

from .semver import (
    SemVer,
    compare_versions,
    is_release,
    is_valid,
    max_version,
    parse_semver,
)

__all__ = [
    "SemVer",
    "compare_versions",
    "is_release",
    "is_valid",
    "max_version",
    "parse_semver",
]
