"""Go+ environment context used when rewriting module manifests."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from modfetch.config import ConfigAccessor

GOP_MODULE_PATH = "github.com/goplus/gop"


@dataclass(frozen=True)
class GopEnv:
    """The Go+ toolchain a module is being prepared for.

    ``version`` is the Go+ release (e.g. ``v1.1.3``) or a development build
    string. ``root`` is the Go+ source tree, used as a local replacement when
    the version is not a release.
    """

    version: str
    root: Optional[Path] = None
    build_date: str = ""

    @classmethod
    def from_config(cls, accessor: "ConfigAccessor") -> Optional["GopEnv"]:
        """Read the ``[gop]`` section; returns None when no version is configured."""
        version = accessor.get("gop", "version")
        if not version:
            return None
        root = accessor.get("gop", "root")
        return cls(
            version=version,
            root=Path(root).expanduser() if root else None,
            build_date=accessor.get("gop", "build_date", ""),
        )
