"""Configuration (dotfiles) deployment gated by present capabilities."""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from garchy.exceptions import DeployConflictError, ResourceMissingError
from garchy.logger import get_logger
from garchy.models.bundles import BundleRule, DeployResult, DeployStatus
from garchy.services.capabilities import CapabilitySet
from garchy.services.symlinks import SymlinkFarm, is_conflict
from garchy.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)

REASON_NOT_PRESENT = "not-present"
REASON_UNMAPPED = "unmapped"
REASON_TOOL_MISSING = "symlink-tool-missing"


def capability_missing_reason(missing: Sequence[str]) -> str:
    return f"capability-missing({', '.join(missing)})"


class DotfilesRepository:
    """Local checkout of the dotfiles repository."""

    def __init__(self, path: Path, repo_url: str) -> None:
        self.path = path
        self.repo_url = repo_url

    def sync(self) -> None:
        """
        Clone the repository, or fast-forward it when already present.

        Raises:
            ResourceMissingError: If git fails, leaving no usable tree
        """
        try:
            if (self.path / ".git").is_dir():
                logger.info(f"Dotfiles repo already present at {self.path}, pulling latest...")
                SubprocessExecutor.run_sync("git", "-C", str(self.path), "pull", "--ff-only", check=True)
            else:
                logger.info(f"Cloning dotfiles into {self.path}...")
                SubprocessExecutor.run_sync("git", "clone", self.repo_url, str(self.path), check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            if self.path.is_dir():
                logger.warning(f"Could not update dotfiles, using existing tree: {e}")
                return
            raise ResourceMissingError("dotfiles.unavailable", path=self.path, error=e) from e


class ConfigurationDeployer:
    """Applies each bundle whose requirement holds; skips the rest with a reason."""

    def __init__(self, dotfiles_dir: Path, farm: SymlinkFarm) -> None:
        self.dotfiles_dir = dotfiles_dir
        self.farm = farm

    def bundle_dirs(self) -> set[str]:
        """Non-hidden directories of the dotfiles tree."""
        if not self.dotfiles_dir.is_dir():
            return set()
        return {p.name for p in self.dotfiles_dir.iterdir() if p.is_dir() and not p.name.startswith(".")}

    def deploy_all(self, bundles: Sequence[BundleRule], capabilities: CapabilitySet) -> list[DeployResult]:
        """
        Consider every known bundle and every bundle directory, in sorted order.

        Args:
            bundles: Bundle requirement table
            capabilities: Present capabilities, resolved just before deployment

        Returns:
            One result per bundle
        """
        rules = {rule.bundle: rule for rule in bundles}
        present_dirs = self.bundle_dirs()
        tool_available = self.farm.is_available()
        if not tool_available:
            logger.error("stow not installed; cannot apply dotfiles")

        results: list[DeployResult] = []
        for name in sorted(set(rules) | present_dirs):
            result = self._deploy_one(name, rules.get(name), name in present_dirs, capabilities, tool_available)
            results.append(result)
        return results

    def _deploy_one(
        self,
        name: str,
        rule: BundleRule | None,
        present: bool,
        capabilities: CapabilitySet,
        tool_available: bool,
    ) -> DeployResult:
        if rule is None:
            logger.info(f"Skipping {name} (not in dotfile map)")
            return DeployResult(bundle=name, status=DeployStatus.SKIPPED, reason=REASON_UNMAPPED)

        if not present:
            logger.debug(f"Skipping {name} (no such directory in {self.dotfiles_dir})")
            return DeployResult(bundle=name, status=DeployStatus.SKIPPED, reason=REASON_NOT_PRESENT)

        missing = rule.requires.missing(capabilities)
        if missing:
            reason = capability_missing_reason(missing)
            logger.info(f"Skipping {name} ({reason})")
            return DeployResult(bundle=name, status=DeployStatus.SKIPPED, reason=reason, missing=missing)

        if not tool_available:
            return DeployResult(bundle=name, status=DeployStatus.SKIPPED, reason=REASON_TOOL_MISSING)

        logger.info(f"Stowing {name} ({rule.requires.kind})...")
        stow = self.farm.apply(name)
        if stow.ok:
            if stow.warning:
                logger.warning(f"stow reported for {name}: {stow.warning}")
                return DeployResult(bundle=name, status=DeployStatus.WARNING, warning=stow.warning)
            return DeployResult(bundle=name, status=DeployStatus.APPLIED)

        detail = stow.warning or "unknown error"
        if is_conflict(detail):
            conflict = DeployConflictError(name, detail)
            logger.warning(str(conflict))
            return DeployResult(bundle=name, status=DeployStatus.CONFLICT, reason="conflict", warning=detail)

        logger.warning(f"Warning: stow failed for {name}", detail=detail)
        return DeployResult(bundle=name, status=DeployStatus.FAILED, reason="stow-failed", warning=detail)
