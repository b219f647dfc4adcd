"""
Parsing of the go command's stderr to learn which module version was fetched.

Recognized lines, in priority order:
    go: downloading github.com/user/repo v0.1.0
    go get: added github.com/user/repo v0.1.0
    go: added github.com/user/repo v0.1.0

Every line is examined, since the go command prints other progress before
the report. A line that starts with a known prefix but has no space between
path and version, or whose version is not a valid semantic version, does not count
as a match: it is skipped and scanning continues with the following lines.
Text whose only candidates are malformed therefore yields no report.
"""

import logging
from typing import Iterator, Optional, Tuple

from pydantic import ValidationError

from modfetch.exceptions import ReportNotFoundError
from modfetch.model import ModuleReference
from modfetch.versioning import is_valid

logger = logging.getLogger(__name__)

DOWNLOADING = "go: downloading "
GET_ADDED = "go get: added "
ADDED = "go: added "

REPORT_PREFIXES = (DOWNLOADING, GET_ADDED, ADDED)


def _parse_line(line: str, prefix: str) -> Optional[ModuleReference]:
    body = line[len(prefix) :].rstrip("\r\n")
    path, sep, rest = body.partition(" ")
    if not sep or not path:
        return None
    version = rest.split(" ", 1)[0]
    if not is_valid(version):
        return None
    try:
        return ModuleReference(path=path, version=version)
    except ValidationError:
        return None


def _scan(text: str, prefix: str) -> Iterator[Tuple[ModuleReference, str]]:
    lines = text.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if not line.startswith(prefix):
            continue
        ref = _parse_line(line, prefix)
        if ref is None:
            logger.debug(f"Ignoring malformed report line: {line.rstrip()}")
            continue
        if prefix == DOWNLOADING:
            logger.info(f"gop: {line[4:].rstrip()}")
        yield ref, "".join(lines[index + 1 :])


def iter_reports(text: str) -> Iterator[Tuple[ModuleReference, str]]:
    """
    Yield every recognized report as (module reference, remainder).

    Reports of the first message shape come first, in line order, followed
    by those of the next shape. The remainder is the text after the report's
    line.
    """
    for prefix in REPORT_PREFIXES:
        yield from _scan(text, prefix)


def parse_report(text: str) -> Tuple[ModuleReference, str]:
    """
    Extract the first reported module from go command output.

    Args:
        text: Decoded stderr of the go command

    Returns:
        Tuple of (module reference with version, remaining text)

    Raises:
        ReportNotFoundError: If no line has a recognized, well-formed shape
    """
    for report in iter_reports(text):
        return report
    raise ReportNotFoundError()
