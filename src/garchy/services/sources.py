"""Package source backends: official repositories (pacman) and the AUR (yay)."""

import shutil
from collections.abc import Callable, Sequence
from typing import Protocol

from garchy.logger import get_logger
from garchy.models.config import MirrorsConfig, SourcesConfig
from garchy.models.packages import BulkInstallResult, PackageSource
from garchy.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)

NEEDED_FLAGS = ("-S", "--needed", "--noconfirm")


def is_executable_resolvable(name: str) -> bool:
    """Check whether a command resolves on the operator's PATH."""
    return shutil.which(name) is not None


class PackageSourceBackend(Protocol):
    """Operations the installer consumes from a package source."""

    source: PackageSource

    def bulk_install_needed(self, packages: Sequence[str]) -> BulkInstallResult: ...

    def query_installed(self, packages: Sequence[str]) -> set[str] | None: ...


def query_local_database(pacman: Sequence[str], packages: Sequence[str]) -> set[str] | None:
    """
    Ask the local package database which of the given packages are installed.

    Args:
        pacman: pacman invocation prefix (sudo is dropped, queries need no root)
        packages: Package names to query

    Returns:
        Installed names, or None if the query could not run
    """
    if not packages:
        return set()
    argv = [part for part in pacman if part != "sudo"]
    try:
        result = SubprocessExecutor.run_sync(*argv, "-Qq", *packages)
    except OSError as e:
        logger.warning(f"Package database query failed: {e}")
        return None
    # -Qq exits 1 when any name is missing but still lists the ones found
    return {line.strip() for line in result.stdout.splitlines() if line.strip()}


class SystemSource:
    """Official repositories through pacman."""

    source = PackageSource.SYSTEM

    def __init__(self, config: SourcesConfig) -> None:
        self.config = config

    @property
    def pacman(self) -> list[str]:
        return list(self.config.pacman_command)

    def bulk_install_needed(self, packages: Sequence[str]) -> BulkInstallResult:
        """
        Install a whole batch in one pacman transaction, skipping up-to-date targets.

        Args:
            packages: Package names

        Returns:
            Exit code and combined output
        """
        logger.info(f"Installing packages via pacman: {' '.join(packages)}")
        exit_code, output = SubprocessExecutor.run_with_realtime_output(*self.pacman, *NEEDED_FLAGS, *packages)
        return BulkInstallResult(exit_code=exit_code, output=output)

    def query_installed(self, packages: Sequence[str]) -> set[str] | None:
        return query_local_database(self.pacman, packages)

    def refresh_mirrors(self, mirrors: MirrorsConfig) -> bool:
        """
        Refresh the mirrorlist with reflector, installing reflector first if needed.

        Returns:
            True if the mirrorlist was rewritten
        """
        if not is_executable_resolvable("reflector"):
            logger.info("Installing reflector first to refresh mirrorlist...")
            exit_code, _ = SubprocessExecutor.run_with_realtime_output(
                *self.pacman, "-Syu", "--needed", "--noconfirm", "reflector"
            )
            if exit_code != 0:
                logger.warning("Could not install reflector, keeping current mirrorlist")
                return False

        logger.info(f"Refreshing pacman mirrorlist with reflector ({mirrors.country}, {mirrors.protocol.upper()})...")
        exit_code, _ = SubprocessExecutor.run_with_realtime_output(
            "sudo",
            "reflector",
            "--country",
            mirrors.country,
            "--latest",
            str(mirrors.latest),
            "--protocol",
            mirrors.protocol,
            "--sort",
            mirrors.sort,
            "--save",
            mirrors.mirrorlist_path,
        )
        if exit_code != 0:
            logger.warning("reflector failed, keeping current mirrorlist", exit_code=exit_code)
            return False
        logger.info("Mirrorlist updated")
        return True


class CommunitySource:
    """AUR packages through an AUR helper (yay by default)."""

    source = PackageSource.COMMUNITY

    def __init__(
        self,
        config: SourcesConfig,
        probe: Callable[[str], bool] = is_executable_resolvable,
    ) -> None:
        self.config = config
        self.probe = probe

    @property
    def helper(self) -> str:
        return self.config.aur_helper

    def is_available(self) -> bool:
        return self.probe(self.helper)

    def bulk_install_needed(self, packages: Sequence[str]) -> BulkInstallResult:
        logger.info(f"Installing AUR packages via {self.helper}: {' '.join(packages)}")
        exit_code, output = SubprocessExecutor.run_with_realtime_output(self.helper, *NEEDED_FLAGS, *packages)
        return BulkInstallResult(exit_code=exit_code, output=output)

    def query_installed(self, packages: Sequence[str]) -> set[str] | None:
        # AUR packages land in the same local database
        return query_local_database(self.config.pacman_command, packages)
