"""
Module path escaping for the case-insensitive module cache.

Upper-case letters are written as ``!`` followed by the lower-case letter, so
``github.com/Azure/sdk`` is cached under ``github.com/!azure/sdk``.
"""

import string

from modfetch.exceptions import InvalidPathError

_ALLOWED = set(string.ascii_letters + string.digits + "-._~+")


def _check_element(path: str, elem: str, kind: str) -> None:
    if not elem:
        raise InvalidPathError(path, f"empty {kind} element")
    if elem in (".", ".."):
        raise InvalidPathError(path, f"invalid {kind} element {elem!r}")
    if elem.startswith(".") or elem.endswith("."):
        raise InvalidPathError(path, f"{kind} element {elem!r} has a leading or trailing dot")
    for ch in elem:
        if ch not in _ALLOWED:
            raise InvalidPathError(path, f"invalid char {ch!r}")


def _escape(text: str) -> str:
    out = []
    for ch in text:
        if "A" <= ch <= "Z":
            out.append("!" + ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def escape_path(path: str) -> str:
    """
    Validate a module path and return its cache-safe form.

    Args:
        path: Module path such as ``github.com/user/repo``

    Returns:
        Escaped path, using ``/`` as separator

    Raises:
        InvalidPathError: If the path is empty or contains unsafe characters
    """
    if not path:
        raise InvalidPathError(path, "empty string")
    if path.startswith("/") or path.endswith("/"):
        raise InvalidPathError(path, "leading or trailing slash")
    for elem in path.split("/"):
        _check_element(path, elem, "path")
    return _escape(path)


def escape_version(version: str) -> str:
    """Validate a version and return its cache-safe form."""
    if not version:
        raise InvalidPathError(version, "empty version")
    if "/" in version:
        raise InvalidPathError(version, "version contains a slash")
    for ch in version:
        if ch not in _ALLOWED:
            raise InvalidPathError(version, f"invalid char {ch!r} in version")
    return _escape(version)


def unescape(segment: str) -> str:
    """
    Reverse escape_path / escape_version.

    Raises:
        InvalidPathError: If the segment holds an upper-case letter or a ``!``
            that is not followed by a lower-case letter
    """
    out = []
    bang = False
    for ch in segment:
        if bang:
            if not "a" <= ch <= "z":
                raise InvalidPathError(segment, "'!' must be followed by a lower-case letter")
            out.append(ch.upper())
            bang = False
        elif ch == "!":
            bang = True
        elif "A" <= ch <= "Z":
            raise InvalidPathError(segment, "unescaped upper-case letter")
        else:
            out.append(ch)
    if bang:
        raise InvalidPathError(segment, "trailing '!'")
    return "".join(out)
