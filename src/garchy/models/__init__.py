"""Data models for GArchy."""

from .bundles import (
    AllOfRequirement,
    AlwaysRequirement,
    AnyOfRequirement,
    BundleRule,
    BundleRuleTable,
    DeployResult,
    DeployStatus,
    Requirement,
    ServiceResult,
    ServiceRule,
    ServiceRuleTable,
    ServiceScope,
    StowResult,
    is_satisfied,
)
from .config import AppConfig
from .packages import (
    BulkInstallResult,
    InstallOutcome,
    InstallStatus,
    PackageList,
    PackageSource,
    Tier,
    TierKind,
    TierResult,
)
from .report import RunReport

__all__ = [
    "AllOfRequirement",
    "AlwaysRequirement",
    "AnyOfRequirement",
    "AppConfig",
    "BulkInstallResult",
    "BundleRule",
    "BundleRuleTable",
    "DeployResult",
    "DeployStatus",
    "InstallOutcome",
    "InstallStatus",
    "PackageList",
    "PackageSource",
    "Requirement",
    "RunReport",
    "ServiceResult",
    "ServiceRule",
    "ServiceRuleTable",
    "ServiceScope",
    "StowResult",
    "Tier",
    "TierKind",
    "TierResult",
    "is_satisfied",
]
