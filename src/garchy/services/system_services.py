"""Enabling systemd units for software that ended up installed."""

import getpass
import subprocess
from collections.abc import Sequence

from garchy.logger import get_logger
from garchy.models.bundles import ServiceResult, ServiceRule, ServiceScope
from garchy.models.packages import PackageList, PackageSource, Tier, TierKind, TierResult
from garchy.services.capabilities import CapabilityResolver
from garchy.services.installer import TieredInstaller
from garchy.services.sources import SystemSource
from garchy.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


class ServiceConfigurator:
    """Enables units whose requirement holds against the current capabilities."""

    def __init__(
        self,
        resolver: CapabilityResolver,
        installer: TieredInstaller,
        system_source: SystemSource,
    ) -> None:
        self.resolver = resolver
        self.installer = installer
        self.system_source = system_source
        # Installs offered while configuring, kept for the run report
        self.tiers: list[TierResult] = []

    def configure(self, rules: Sequence[ServiceRule], user_groups: Sequence[str] = ()) -> list[ServiceResult]:
        logger.info("Setting up system services and configuration...")
        results = [self._configure_one(rule) for rule in rules]
        if user_groups:
            self.add_user_to_groups(user_groups)
        logger.info("Service configuration complete")
        return results

    def _configure_one(self, rule: ServiceRule) -> ServiceResult:
        missing = rule.requires.missing(self.resolver.resolve())

        if missing and rule.offer_install:
            logger.info(f"{rule.unit} requirements not installed ({', '.join(missing)})")
            self._offer_install(rule.offer_install)
            missing = rule.requires.missing(self.resolver.resolve())

        if missing:
            reason = f"capability-missing({', '.join(missing)})"
            logger.info(f"Not enabling {rule.unit} ({reason})")
            return ServiceResult(unit=rule.unit, enabled=False, reason=reason)

        return self.enable(rule)

    def _offer_install(self, package: str) -> None:
        tier = Tier(source=PackageSource.SYSTEM, kind=TierKind.OPTIONAL, group=package)
        result = self.installer.run_tier(tier, PackageList(tier=tier, packages=(package,)), self.system_source)
        self.tiers.append(result)
        # The resolver reads the run's outcome, so later lookups see this install
        self.resolver.outcome.merge(result.outcome)

    def enable(self, rule: ServiceRule) -> ServiceResult:
        argv: list[str]
        if rule.scope is ServiceScope.USER:
            argv = ["systemctl", "--user", "enable"]
        else:
            argv = ["sudo", "systemctl", "enable"]
        if rule.start:
            argv.append("--now")
        argv.append(rule.unit)

        logger.info(f"Enabling {rule.unit}...")
        try:
            result = SubprocessExecutor.run_sync(*argv, merge_stderr=True)
        except OSError as e:
            logger.warning(f"Could not enable {rule.unit}: {e}")
            return ServiceResult(unit=rule.unit, enabled=False, reason=str(e))

        if result.returncode != 0:
            logger.warning(f"Could not enable {rule.unit}", output=result.stdout.strip())
            return ServiceResult(unit=rule.unit, enabled=False, reason=f"systemctl exited with code {result.returncode}")
        return ServiceResult(unit=rule.unit, enabled=True)

    def add_user_to_groups(self, groups: Sequence[str]) -> bool:
        user = getpass.getuser()
        logger.info(f"Adding user '{user}' to {', '.join(groups)} groups...")
        try:
            SubprocessExecutor.run_sync("sudo", "usermod", "-aG", ",".join(groups), user, check=True)
        except (subprocess.CalledProcessError, OSError):
            logger.warning("Some groups may already be assigned")
            return False
        return True
