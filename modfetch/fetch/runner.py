"""
Invocation of the go command to bring a module into the cache.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from modfetch.exceptions import SubprocessFailure
from modfetch.fetch.protocol import FailurePolicy
from modfetch.model import ModuleReference

if TYPE_CHECKING:
    from modfetch.config import FetchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcquisitionResult:
    command: List[str]
    returncode: Optional[int]
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class AcquisitionRunner:
    """
    Runs the configured go command for a module reference.

    Both output streams are captured in memory. The child process writes to
    the configured cache root through GOMODCACHE.
    """

    def __init__(self, config: "FetchConfig"):
        self.config = config

    def run(self, ref: ModuleReference) -> AcquisitionResult:
        """
        Run the acquisition command for *ref*.

        Args:
            ref: Module reference to fetch

        Returns:
            AcquisitionResult with the captured streams

        Raises:
            SubprocessFailure: If the command fails (or cannot be started) and
                the protocol treats the exit status as authoritative
        """
        protocol = self.config.protocol
        cmd = protocol.command(self.config.go_command, ref)
        env = dict(os.environ, GOMODCACHE=str(self.config.cache_dir))

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            ret = subprocess.run(
                cmd,
                shell=False,
                capture_output=True,
                check=False,
                cwd=self.config.workdir,
                env=env,
            )
        except OSError as e:
            if protocol.on_failure is FailurePolicy.ABORT:
                raise SubprocessFailure(cmd, None, message=f"cannot run {cmd[0]}: {e}") from e
            logger.warning(f"Could not run {cmd[0]}: {e}. Falling back to the module cache.")
            return AcquisitionResult(cmd, None, b"", b"")

        result = AcquisitionResult(cmd, ret.returncode, ret.stdout, ret.stderr)
        if not result.ok:
            if protocol.on_failure is FailurePolicy.ABORT:
                raise SubprocessFailure(cmd, ret.returncode, ret.stderr)
            logger.debug(f"{' '.join(cmd)} exited with status {ret.returncode}")
        return result
