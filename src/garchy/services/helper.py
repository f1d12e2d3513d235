"""Bootstrap of the AUR helper (yay-bin), built from source exactly once."""

import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from garchy.exceptions import SourceUnavailableError
from garchy.logger import get_logger
from garchy.models.config import SourcesConfig
from garchy.services.reconcile import reconcile
from garchy.services.sources import SystemSource, is_executable_resolvable
from garchy.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


class HelperBootstrap:
    """Ensures the community source's client exists before AUR tiers run."""

    def __init__(
        self,
        config: SourcesConfig,
        system_source: SystemSource,
        probe: Callable[[str], bool] = is_executable_resolvable,
    ) -> None:
        self.config = config
        self.system_source = system_source
        self.probe = probe
        self._error: SourceUnavailableError | None = None
        self._attempted = False

    @property
    def helper(self) -> str:
        return self.config.aur_helper

    def ensure_helper(self) -> None:
        """
        Make sure the AUR helper is on PATH, building it if necessary.

        Only the first call may build; later calls return or re-raise the
        first result.

        Raises:
            SourceUnavailableError: If the helper could not be built
        """
        if self.probe(self.helper):
            logger.info(f"AUR helper '{self.helper}' already installed")
            return
        if self._attempted:
            if self._error is not None:
                raise self._error
            return

        self._attempted = True
        try:
            self._bootstrap()
        except SourceUnavailableError as e:
            self._error = e
            raise

    def _bootstrap(self) -> None:
        logger.info(f"Installing AUR helper '{self.helper}' (requires {', '.join(self.config.helper_prerequisites)})...")

        prereqs = self.config.helper_prerequisites
        bulk = self.system_source.bulk_install_needed(prereqs)
        outcome, _ = reconcile(prereqs, bulk)
        missing = [pkg for pkg in prereqs if pkg not in outcome.installed]
        if missing:
            raise SourceUnavailableError(
                "source.helper_build_failed",
                helper=self.helper,
                error=f"prerequisites not installed: {' '.join(missing)}",
            )

        with tempfile.TemporaryDirectory(prefix="garchy-helper-") as tmpdir:
            self._build(Path(tmpdir))

        if not self.probe(self.helper):
            raise SourceUnavailableError(
                "source.helper_build_failed",
                helper=self.helper,
                error="build finished but the helper is not on PATH",
            )
        logger.info(f"AUR helper '{self.helper}' installed")

    def _build(self, build_root: Path) -> None:
        repo_dir = build_root / Path(self.config.helper_repo_url.rstrip("/")).stem
        try:
            SubprocessExecutor.run_sync("git", "clone", self.config.helper_repo_url, str(repo_dir), check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise SourceUnavailableError("source.helper_build_failed", helper=self.helper, error=e) from e

        exit_code, _ = SubprocessExecutor.run_with_realtime_output("makepkg", "-si", "--noconfirm", cwd=repo_dir)
        if exit_code != 0:
            raise SourceUnavailableError(
                "source.helper_build_failed",
                helper=self.helper,
                error=f"makepkg exited with code {exit_code}",
            )
