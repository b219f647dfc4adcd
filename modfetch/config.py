"""Configuration for the module cache location and the acquisition command"""

import configparser
import logging
import os
import platform
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Any

from modfetch.fetch.protocol import FetchProtocol

APP_NAME = "modfetch"

logger = logging.getLogger(__name__)

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

default_cfg = {
    "dirs": {"modcache": ""},
    "go": {"command": "go", "protocol": "install"},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/modfetch").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file():
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    Missing sections or keys are handled gracefully, and a missing config
    file simply yields an empty configuration.

    Usage:
        config = ConfigAccessor()
        value = config.get('go', 'command', default='go')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize a ConfigAccessor with an optional config file path.

        Args:
            config_path: Path to the configuration file. If None, uses the default path.
        """
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)

        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the current configuration to the config file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except OSError as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )


def get_mod_cache_dir(accessor: Optional[ConfigAccessor] = None) -> Path:
    """
    Get the root directory of the Go module cache.

    Lookup order: the GOMODCACHE environment variable, the ``[dirs] modcache``
    config option, the first GOPATH entry plus ``pkg/mod``, and finally
    ``~/go/pkg/mod``. The directory is not created.

    Args:
        accessor: Config accessor to read from (defaults to the user config file)

    Returns:
        Path to the module cache root
    """
    env_dir = os.environ.get("GOMODCACHE")
    if env_dir:
        return Path(env_dir).expanduser()

    if accessor is None:
        accessor = ConfigAccessor()
    cfg_dir = accessor.get("dirs", "modcache", default_cfg["dirs"]["modcache"])
    if cfg_dir:
        return Path(cfg_dir).expanduser()

    gopath = os.environ.get("GOPATH", "")
    first = gopath.split(os.pathsep)[0] if gopath else ""
    if first:
        return Path(first).expanduser() / "pkg" / "mod"

    return Path(_home) / "go" / "pkg" / "mod"


@dataclass(frozen=True)
class FetchConfig:
    """Settings shared by every resolution component.

    The cache root is carried explicitly so that tests and callers can point
    resolution at an isolated directory.
    """

    cache_dir: Path
    go_command: str = "go"
    protocol: FetchProtocol = field(default_factory=FetchProtocol.install)
    workdir: Optional[Path] = None
    lock_dir: Path = field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "modfetch_locks"
    )

    @classmethod
    def from_config(
        cls, accessor: Optional[ConfigAccessor] = None, **overrides: Any
    ) -> "FetchConfig":
        """
        Build a FetchConfig from the user configuration.

        Args:
            accessor: Config accessor to read from (defaults to the user config file)
            **overrides: Field values that take precedence over configured ones.
                ``None`` values are ignored.

        Returns:
            FetchConfig instance
        """
        if accessor is None:
            accessor = ConfigAccessor()

        protocol_name = accessor.get("go", "protocol", default_cfg["go"]["protocol"])
        settings = cls(
            cache_dir=get_mod_cache_dir(accessor),
            go_command=accessor.get("go", "command", default_cfg["go"]["command"]),
            protocol=FetchProtocol.named(protocol_name),
        )
        workdir = accessor.get("go", "workdir")
        if workdir:
            settings = replace(settings, workdir=Path(workdir).expanduser())

        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            settings = replace(settings, **overrides)
        return settings
