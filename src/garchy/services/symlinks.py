"""Symlink farm operations through GNU stow."""

from pathlib import Path
from typing import Protocol

from garchy.logger import get_logger
from garchy.models.bundles import StowResult
from garchy.services.sources import is_executable_resolvable
from garchy.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)

CONFLICT_MARKERS = ("would cause conflicts", "existing target", "cannot stow")


class SymlinkFarm(Protocol):
    """Idempotent per-bundle symlink operation."""

    def is_available(self) -> bool: ...

    def apply(self, bundle: str) -> StowResult: ...


def is_conflict(output: str) -> bool:
    lowered = output.lower()
    return any(marker in lowered for marker in CONFLICT_MARKERS)


class StowSymlinkFarm:
    """Restows bundles from the dotfiles tree into the home directory.

    `stow -R` unlinks and relinks the bundle, so applying twice leaves the
    same links behind.
    """

    def __init__(self, dotfiles_dir: Path, home_dir: Path, stow_command: str = "stow") -> None:
        self.dotfiles_dir = dotfiles_dir
        self.home_dir = home_dir
        self.stow_command = stow_command

    def is_available(self) -> bool:
        return is_executable_resolvable(self.stow_command)

    def apply(self, bundle: str) -> StowResult:
        """
        Restow one bundle.

        Args:
            bundle: Directory name inside the dotfiles tree

        Returns:
            ok=False with the tool's message on failure; ok=True with a warning
            when stow succeeded but printed diagnostics
        """
        try:
            result = SubprocessExecutor.run_sync(
                self.stow_command,
                "-R",
                "-d",
                str(self.dotfiles_dir),
                "-t",
                str(self.home_dir),
                bundle,
            )
        except OSError as e:
            return StowResult(ok=False, warning=str(e))

        message = "\n".join(part.strip() for part in (result.stdout, result.stderr) if part and part.strip())
        if result.returncode != 0:
            return StowResult(ok=False, warning=message or f"stow exited with code {result.returncode}")
        return StowResult(ok=True, warning=message or None)
