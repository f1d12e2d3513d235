"""Provisioning run orchestration.

Order: preflight, mirrors, official tiers (mandatory, default, optional
groups), AUR helper bootstrap, AUR tiers, dotfiles, services.
"""

from collections.abc import Callable, Sequence
from typing import Protocol

from garchy.exceptions import GarchyError, ResourceMissingError, SourceUnavailableError
from garchy.logger import get_logger
from garchy.models.bundles import BundleRule, ServiceRule
from garchy.models.config import AppConfig
from garchy.models.packages import InstallStatus, PackageList, PackageSource, Tier, TierKind, TierResult
from garchy.models.report import RunReport
from garchy.services.capabilities import CapabilityResolver
from garchy.services.deployer import ConfigurationDeployer, DotfilesRepository
from garchy.services.helper import HelperBootstrap
from garchy.services.installer import TieredInstaller
from garchy.services.lists import ListSource
from garchy.services.preflight import Preflight
from garchy.services.prompt import Prompter
from garchy.services.rules import load_bundle_rules, load_service_rules
from garchy.services.sources import CommunitySource, PackageSourceBackend, SystemSource, is_executable_resolvable
from garchy.services.symlinks import StowSymlinkFarm, SymlinkFarm
from garchy.services.system_services import ServiceConfigurator

logger = get_logger(__name__)


class Syncable(Protocol):
    def sync(self) -> None: ...


class Provisioner:
    """Runs one provisioning pass and accumulates its report.

    Collaborators default to the real pacman/yay/stow implementations built
    from the configuration; tests inject fakes.
    """

    def __init__(
        self,
        config: AppConfig,
        prompter: Prompter,
        *,
        system_source: SystemSource | None = None,
        community_source: PackageSourceBackend | None = None,
        bootstrap: HelperBootstrap | None = None,
        farm: SymlinkFarm | None = None,
        dotfiles_repo: Syncable | None = None,
        bundle_rules: Sequence[BundleRule] | None = None,
        service_rules: Sequence[ServiceRule] | None = None,
        preflight: Preflight | None = None,
        probe: Callable[[str], bool] = is_executable_resolvable,
    ) -> None:
        self.config = config
        self.prompter = prompter
        paths = config.paths
        assert paths.packages_dir is not None

        self.lists = ListSource(paths.packages_dir)
        self.system_source = system_source or SystemSource(config.sources)
        self.community_source = community_source or CommunitySource(config.sources)
        self.bootstrap = bootstrap or HelperBootstrap(config.sources, self.system_source)
        self.farm = farm or StowSymlinkFarm(paths.dotfiles_dir, paths.home_dir, config.dotfiles.stow_command)
        self.dotfiles_repo = dotfiles_repo or DotfilesRepository(paths.dotfiles_dir, config.dotfiles.repo_url)
        self._bundle_rules = bundle_rules
        self._service_rules = service_rules
        self.preflight = preflight or Preflight(paths.packages_dir)

        self.installer = TieredInstaller(prompter, verify_with_query=config.sources.verify_with_query)
        self.report = RunReport()
        self.resolver = CapabilityResolver(self.report.outcome, probe)

    @property
    def bundle_rules(self) -> Sequence[BundleRule]:
        if self._bundle_rules is None:
            self._bundle_rules = load_bundle_rules(self.config.dotfiles.rules_file)
        return self._bundle_rules

    @property
    def service_rules(self) -> Sequence[ServiceRule]:
        if self._service_rules is None:
            self._service_rules = load_service_rules(self.config.services.rules_file)
        return self._service_rules

    def run(self) -> RunReport:
        """
        Execute the whole run.

        Returns:
            The accumulated report

        Raises:
            GarchyError: Fatal errors only (failed preflight, missing mandatory
                list, unusable AUR helper with a non-empty AUR mandatory list)
        """
        if not self.config.advanced.skip_preflight:
            self.preflight.check()

        if self.config.mirrors.enabled:
            self.system_source.refresh_mirrors(self.config.mirrors)

        self.install_system_tiers()
        if self.config.sources.community_enabled:
            self.install_community_tiers()
        else:
            logger.info("AUR installation disabled, skipping")

        logger.info("Package installation complete")

        self.deploy_dotfiles()
        if self.config.services.enabled:
            self.configure_services()

        return self.report

    def _record(self, result: TierResult) -> None:
        self.report.tiers.append(result)
        self.report.outcome.merge(result.outcome)

    def _system_tiers(self) -> list[Tier]:
        tiers = [
            Tier(source=PackageSource.SYSTEM, kind=TierKind.MANDATORY),
            Tier(source=PackageSource.SYSTEM, kind=TierKind.DEFAULT),
        ]
        return tiers + self.lists.optional_tiers(PackageSource.SYSTEM)

    def _community_tiers(self) -> list[Tier]:
        tiers = [
            Tier(source=PackageSource.COMMUNITY, kind=TierKind.MANDATORY),
            Tier(source=PackageSource.COMMUNITY, kind=TierKind.DEFAULT),
        ]
        return tiers + self.lists.optional_tiers(PackageSource.COMMUNITY)

    def install_system_tiers(self) -> None:
        for tier in self._system_tiers():
            packages = self.lists.load_tier(tier)
            self._record(self.installer.run_tier(tier, packages, self.system_source))

    def install_community_tiers(self) -> None:
        """Bootstrap the AUR helper once, then install the AUR tiers.

        Raises:
            SourceUnavailableError: If the helper is unusable and the AUR
                mandatory list is not empty
        """
        lists: list[PackageList] = [self.lists.load_tier(tier) for tier in self._community_tiers()]

        try:
            self.bootstrap.ensure_helper()
        except SourceUnavailableError as e:
            logger.error(str(e))
            self.report.errors.append(str(e))
            for package_list in lists:
                if package_list.tier.kind is TierKind.MANDATORY and len(package_list):
                    e.fatal = True
                    raise
            self._fail_unavailable(lists, str(e))
            return

        for package_list in lists:
            self._record(self.installer.run_tier(package_list.tier, package_list, self.community_source))

    def _fail_unavailable(self, lists: Sequence[PackageList], error: str) -> None:
        for package_list in lists:
            if not len(package_list):
                continue
            label = package_list.tier.label
            missing = SourceUnavailableError("source.helper_missing", helper=self.config.sources.aur_helper, label=label)
            logger.error(str(missing))
            result = TierResult(tier=package_list.tier, requested=list(package_list.packages), error=error)
            result.outcome.record_all(package_list.packages, InstallStatus.FAILED)
            self._record(result)

    def deploy_dotfiles(self) -> None:
        if not self.config.dotfiles.enabled:
            logger.info("Dotfiles disabled in configuration, skipping")
            return
        if not self.prompter.confirm(f"Do you want to use dotfiles from {self.config.dotfiles.repo_url}?"):
            logger.info("Skipping dotfiles - using vanilla configs")
            return

        try:
            self.dotfiles_repo.sync()
        except ResourceMissingError as e:
            logger.error(f"Cannot deploy dotfiles: {e}")
            self.report.errors.append(str(e))
            return

        logger.info("Determining which dotfiles to stow based on installed packages...")
        deployer = ConfigurationDeployer(self.config.paths.dotfiles_dir, self.farm)
        self.report.deploy = deployer.deploy_all(self.bundle_rules, self.resolver.resolve())

    def configure_services(self) -> None:
        configurator = ServiceConfigurator(self.resolver, self.installer, self.system_source)
        try:
            self.report.services = configurator.configure(self.service_rules, self.config.services.user_groups)
        except GarchyError as e:
            logger.error(f"Service configuration failed: {e}")
            self.report.errors.append(str(e))
        finally:
            self.report.tiers.extend(configurator.tiers)
