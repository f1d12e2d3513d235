"""Provisioning services."""

from .capabilities import CapabilityResolver, CapabilitySet
from .deployer import ConfigurationDeployer, DotfilesRepository
from .helper import HelperBootstrap
from .installer import TieredInstaller
from .lists import ListSource, parse_list
from .preflight import Preflight
from .prompt import Prompter
from .provisioner import Provisioner
from .reconcile import find_failed_packages, reconcile
from .rules import load_bundle_rules, load_service_rules
from .sources import CommunitySource, SystemSource, is_executable_resolvable
from .symlinks import StowSymlinkFarm
from .system_services import ServiceConfigurator

__all__ = [
    "CapabilityResolver",
    "CapabilitySet",
    "CommunitySource",
    "ConfigurationDeployer",
    "DotfilesRepository",
    "HelperBootstrap",
    "ListSource",
    "Preflight",
    "Prompter",
    "Provisioner",
    "ServiceConfigurator",
    "StowSymlinkFarm",
    "SystemSource",
    "TieredInstaller",
    "find_failed_packages",
    "is_executable_resolvable",
    "load_bundle_rules",
    "load_service_rules",
    "parse_list",
    "reconcile",
]
