"""
Go-style semantic version utilities.

Versions look like ``v1.2.3``, ``v1.2.3-pre.1+build`` or the shorthands
``v1`` and ``v1.2``. Release cores are ordered through packaging.version;
prerelease identifiers follow semver 2.0 precedence. Strings that are not
valid versions (the empty string included) sort below every valid version
and compare equal to each other.
"""

import re
from typing import Iterable, Optional, Tuple

from packaging.version import Version as PackagingVersion

_NUM = r"(?:0|[1-9]\d*)"
_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    rf"^v(?P<major>{_NUM})"
    rf"(?:\.(?P<minor>{_NUM})"
    rf"(?:\.(?P<patch>{_NUM})"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?"
    r")?)?$"
)


class SemVer:
    """
    A parsed Go semantic version.

    Raises ValueError for strings that are not valid versions.
    """

    def __init__(self, version_string: str):
        self._original_string = version_string
        match = _SEMVER_RE.match(version_string)
        if not match:
            raise ValueError(f"Invalid semantic version: '{version_string}'")

        prerelease = match.group("prerelease")
        if prerelease:
            for ident in prerelease.split("."):
                if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
                    raise ValueError(
                        f"Invalid semantic version: '{version_string}' "
                        "(numeric prerelease identifier with leading zero)"
                    )

        self.major = int(match.group("major"))
        self.minor = int(match.group("minor") or 0)
        self.patch = int(match.group("patch") or 0)
        self.prerelease: Tuple[str, ...] = tuple(prerelease.split(".")) if prerelease else ()
        self.build: Optional[str] = match.group("build")
        self._core = PackagingVersion(f"{self.major}.{self.minor}.{self.patch}")

    def __str__(self) -> str:
        return self._original_string

    def __repr__(self) -> str:
        return f"SemVer('{self._original_string}')"

    def canonical(self) -> str:
        """Return the full ``vX.Y.Z[-pre]`` form, without build metadata."""
        text = f"v{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        return text

    def compare(self, other: "SemVer") -> int:
        if self._core != other._core:
            return -1 if self._core < other._core else 1
        return _compare_prerelease(self.prerelease, other.prerelease)


def _compare_prerelease(a: Tuple[str, ...], b: Tuple[str, ...]) -> int:
    # a release outranks any prerelease of the same core
    if not a or not b:
        if a == b:
            return 0
        return 1 if not a else -1

    for x, y in zip(a, b):
        if x == y:
            continue
        x_num, y_num = x.isdigit(), y.isdigit()
        if x_num and y_num:
            return -1 if int(x) < int(y) else 1
        if x_num != y_num:
            return -1 if x_num else 1
        return -1 if x < y else 1

    if len(a) == len(b):
        return 0
    return -1 if len(a) < len(b) else 1


def parse_semver(version_string: str) -> Optional[SemVer]:
    """Parse a version, returning None if it is not valid."""
    try:
        return SemVer(version_string)
    except ValueError:
        return None


def is_valid(version_string: str) -> bool:
    return parse_semver(version_string) is not None


def is_release(version_string: str) -> bool:
    """True for valid versions without a prerelease part."""
    v = parse_semver(version_string)
    return v is not None and not v.prerelease


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two version strings.

    Args:
        version1: First version string
        version2: Second version string

    Returns:
        -1 if version1 < version2
         0 if version1 == version2
         1 if version1 > version2
    """
    v1 = parse_semver(version1)
    v2 = parse_semver(version2)

    if v1 is None or v2 is None:
        if v1 is None and v2 is None:
            return 0
        return -1 if v1 is None else 1
    return v1.compare(v2)


def max_version(versions: Iterable[str]) -> Optional[str]:
    """
    Return the highest valid version of *versions*, or None if there is none.

    Invalid versions are skipped. On a tie the later element wins, so callers
    should pass a deterministically ordered iterable.
    """
    best: Optional[str] = None
    for version in versions:
        if not is_valid(version):
            continue
        if best is None or compare_versions(best, version) <= 0:
            best = version
    return best
