"""
The acquisition protocol: how the go command is asked for a module and how
its exit status is treated.

Two presets cover the historical ways of fetching a module:
    install  ``go install path@latest``; a failing exit status is tolerated
             because stderr may still report the downloaded module
    get      ``go get path``; the go command picks the version and a failing
             exit status aborts the fetch
"""

import enum
from dataclasses import dataclass
from typing import List

from modfetch.exceptions import ConfigurationError
from modfetch.model import ModuleReference


class MissingVersionPolicy(enum.Enum):
    APPEND_LATEST = "append_latest"
    DELEGATE = "delegate"


class FailurePolicy(enum.Enum):
    PARSE_ANYWAY = "parse_anyway"
    ABORT = "abort"


@dataclass(frozen=True)
class FetchProtocol:
    verb: str
    on_missing_version: MissingVersionPolicy
    on_failure: FailurePolicy

    LATEST = "latest"

    @classmethod
    def install(cls) -> "FetchProtocol":
        return cls("install", MissingVersionPolicy.APPEND_LATEST, FailurePolicy.PARSE_ANYWAY)

    @classmethod
    def get(cls) -> "FetchProtocol":
        return cls("get", MissingVersionPolicy.DELEGATE, FailurePolicy.ABORT)

    @classmethod
    def named(cls, name: str) -> "FetchProtocol":
        """Return a preset by name ("install" or "get")."""
        presets = {"install": cls.install, "get": cls.get}
        try:
            return presets[name]()
        except KeyError:
            raise ConfigurationError(
                f"Unknown fetch protocol '{name}'. Expected one of: {', '.join(presets)}"
            )

    def target(self, ref: ModuleReference) -> str:
        """The module argument passed to the go command."""
        if not ref.has_version and self.on_missing_version is MissingVersionPolicy.APPEND_LATEST:
            return str(ref.with_version(self.LATEST))
        return str(ref)

    def command(self, go: str, ref: ModuleReference) -> List[str]:
        return [go, self.verb, self.target(ref)]
