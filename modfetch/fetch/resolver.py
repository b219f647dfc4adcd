"""
Module resolution: cache lookup with fallback to the go command.

Resolution Process:
1. CHECK_CACHE    locate the module in GOMODCACHE and classify it
                  (skipped when the caller asks for a fresh fetch)
2. ACQUIRE        run the go command for the reference
3. PARSE_REPORT   find the fetched module version in the go command's
                  stderr and classify that exact cache directory
4. RECHECK_CACHE  repeat step 1 with the original reference, for fetches
                  that populated the cache without a recognizable report

Only cache misses advance to the next step. Any other error (an invalid
path, an unreadable cache, a broken manifest, a failed go command whose
exit status is authoritative) is raised to the caller unchanged.
"""

import logging
from typing import Optional, Union

from modfetch.env import GopEnv
from modfetch.exceptions import CacheMissError, ModuleNotCachedError
from modfetch.fetch.report import iter_reports
from modfetch.fetch.runner import AcquisitionRunner
from modfetch.modcache import CacheLocator
from modfetch.model import ModuleReference, ResolvedModule
from modfetch.modload import ManifestAdapter
from modfetch.config import FetchConfig

logger = logging.getLogger(__name__)


def _provides(reported: ModuleReference, requested: ModuleReference) -> bool:
    # go install takes package paths, which live inside a module
    return requested.path == reported.path or requested.path.startswith(reported.path + "/")


class Resolver:
    """
    Resolves module references to cached, classified modules.

    Usage:
        resolver = Resolver(FetchConfig.from_config())
        mod = resolver.get("github.com/user/repo@v1.0.0")
    """

    def __init__(
        self,
        config: FetchConfig,
        locator: Optional[CacheLocator] = None,
        adapter: Optional[ManifestAdapter] = None,
        runner: Optional[AcquisitionRunner] = None,
    ):
        self.config = config
        self.locator = locator or CacheLocator(config.cache_dir)
        self.adapter = adapter or ManifestAdapter(config.lock_dir)
        self.runner = runner or AcquisitionRunner(config)

    def get(
        self,
        ref: Union[str, ModuleReference],
        env: Optional[GopEnv] = None,
        no_cache: bool = False,
    ) -> ResolvedModule:
        """
        Resolve *ref* to a module in the cache, fetching it if needed.

        Args:
            ref: ``path`` or ``path@version`` (or a parsed ModuleReference)
            env: Go+ environment; when given, the module's go.mod is kept in
                canonical form for it
            no_cache: Skip the initial cache lookup and always run the go command

        Returns:
            ResolvedModule

        Raises:
            ModuleNotCachedError: If the module is still not cached after fetching
            InvalidPathError: If the reference is malformed
            SubprocessFailure: If the go command fails under an aborting protocol
            ManifestError: If the module manifest cannot be loaded or updated
            CacheIOError: If the cache cannot be read
        """
        if isinstance(ref, str):
            ref = ModuleReference.parse(ref)

        if not no_cache:
            try:
                return self._from_cache(ref, env)
            except CacheMissError:
                logger.debug(f"{ref} not in cache, fetching")

        result = self.runner.run(ref)

        for reported, _remainder in iter_reports(result.stderr_text()):
            if not _provides(reported, ref):
                continue
            try:
                return self._from_cache(reported, env)
            except CacheMissError:
                logger.debug(f"Reported module {reported} not found in cache")
            break

        try:
            return self._from_cache(ref, env)
        except CacheMissError:
            raise ModuleNotCachedError(str(ref), result.stderr)

    def _from_cache(self, ref: ModuleReference, env: Optional[GopEnv]) -> ResolvedModule:
        hit = self.locator.locate(ref)
        is_class = self.adapter.classify(hit.directory, env, module_path=ref.path)
        return ResolvedModule(
            path=ref.path,
            version=hit.version,
            is_class_type=is_class,
            directory=hit.directory,
        )


def get(
    ref: Union[str, ModuleReference],
    env: Optional[GopEnv] = None,
    no_cache: bool = False,
    config: Optional[FetchConfig] = None,
) -> ResolvedModule:
    """Resolve *ref* with a Resolver built from *config* (or the user configuration)."""
    if config is None:
        config = FetchConfig.from_config()
    return Resolver(config).get(ref, env=env, no_cache=no_cache)
