"""Tiered package installation."""

from garchy.exceptions import PackageInstallFailure
from garchy.logger import get_logger
from garchy.models.packages import InstallOutcome, InstallStatus, PackageList, Tier, TierResult
from garchy.services.prompt import Prompter
from garchy.services.reconcile import reconcile
from garchy.services.sources import PackageSourceBackend

logger = get_logger(__name__)


class TieredInstaller:
    """Installs one tier at a time, applying the tier's confirmation policy."""

    def __init__(self, prompter: Prompter, verify_with_query: bool = False) -> None:
        """
        Args:
            prompter: Displays lists and asks for confirmation
            verify_with_query: Trust the local package database over the text scan
        """
        self.prompter = prompter
        self.verify_with_query = verify_with_query

    def install_tier(self, tier: Tier, packages: PackageList, source: PackageSourceBackend) -> InstallOutcome:
        """Install a tier's list and return the per-package outcome."""
        return self.run_tier(tier, packages, source).outcome

    def run_tier(self, tier: Tier, packages: PackageList, source: PackageSourceBackend) -> TierResult:
        """
        Install a tier's list, keeping the details for the run report.

        Args:
            tier: Tier being installed
            packages: List loaded for the tier
            source: Backend performing the install

        Returns:
            Tier result with its outcome
        """
        requested = list(packages.packages)
        result = TierResult(tier=tier, requested=requested)

        if not requested:
            logger.info(f"No packages in {tier.label} list, skipping")
            return result

        self.prompter.show_list(tier.label, requested)

        if tier.requires_confirmation:
            question = f"Install {tier.label} package set?"
            if not self.prompter.confirm(question):
                logger.info(f"Skipping {tier.label} package set")
                result.confirmed = False
                result.outcome.record_all(requested, InstallStatus.SKIPPED)
                return result
        else:
            logger.info(f"{tier.label} packages are required and will be installed automatically")

        # Single invocation for the whole batch
        bulk = source.bulk_install_needed(requested)
        outcome, unrequested = reconcile(requested, bulk)

        if unrequested:
            logger.warning(
                f"Installer reported missing packages outside the {tier.label} list",
                packages=unrequested,
            )

        if self.verify_with_query:
            installed = source.query_installed(requested)
            if installed is not None:
                outcome = self._outcome_from_query(requested, installed)

        failed = outcome.with_status(InstallStatus.FAILED)
        if failed:
            for pkg in failed:
                logger.error(str(PackageInstallFailure(pkg, tier.label)))
            if not bulk.ok and len(failed) == len(set(requested)):
                logger.error(
                    f"{tier.label} install failed with exit code {bulk.exit_code}; "
                    "no failing package identified, marking the whole batch as failed"
                )
                result.error = f"exit code {bulk.exit_code}"
            else:
                logger.warning(f"Could not install some packages: {' '.join(failed)}")
                logger.info("Continuing with remaining packages...")

        result.outcome = outcome
        return result

    @staticmethod
    def _outcome_from_query(requested: list[str], installed: set[str]) -> InstallOutcome:
        installed_lower = {name.lower() for name in installed}
        outcome = InstallOutcome()
        for pkg in requested:
            status = InstallStatus.INSTALLED if pkg.lower() in installed_lower else InstallStatus.FAILED
            outcome.record(pkg, status)
        return outcome
