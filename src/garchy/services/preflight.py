"""Host checks performed before anything is installed."""

import os
from collections.abc import Callable
from pathlib import Path

from garchy.exceptions import PreflightError, ResourceMissingError
from garchy.services.sources import is_executable_resolvable

ARCH_RELEASE = Path("/etc/arch-release")
REQUIRED_COMMANDS = ("sudo", "pacman")


class Preflight:
    """Refuses to provision hosts the tool was not written for."""

    def __init__(
        self,
        packages_dir: Path,
        probe: Callable[[str], bool] = is_executable_resolvable,
        release_file: Path = ARCH_RELEASE,
        euid: Callable[[], int] = os.geteuid,
    ) -> None:
        self.packages_dir = packages_dir
        self.probe = probe
        self.release_file = release_file
        self.euid = euid

    def check(self) -> None:
        """
        Raises:
            PreflightError: If running as root, not on Arch, or sudo/pacman are missing
            ResourceMissingError: If the package list directory does not exist
        """
        if self.euid() == 0:
            raise PreflightError("preflight.root")
        if not self.release_file.exists():
            raise PreflightError("preflight.not_arch", path=self.release_file)
        if not self.packages_dir.is_dir():
            raise ResourceMissingError("lists.dir_not_found", fatal=True, path=self.packages_dir)
        for command in REQUIRED_COMMANDS:
            if not self.probe(command):
                raise PreflightError("preflight.missing_command", command=command)
