"""Package tier and install outcome models."""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field


class PackageSource(str, Enum):
    """Package-management backend used for a tier."""

    SYSTEM = "system"
    COMMUNITY = "community"


class TierKind(str, Enum):
    """Installation policy of a tier."""

    MANDATORY = "mandatory"
    DEFAULT = "default"
    OPTIONAL = "optional"


class InstallStatus(str, Enum):
    """Per-package result of a provisioning run."""

    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


_PRECEDENCE: dict[InstallStatus, int] = {
    InstallStatus.SKIPPED: 0,
    InstallStatus.FAILED: 1,
    InstallStatus.INSTALLED: 2,
}


class Tier(BaseModel, frozen=True):
    """A named group of packages with a shared installation policy."""

    source: PackageSource
    kind: TierKind
    group: str | None = None
    # Optional group read from the single-file layout (e.g. aur-optional.txt)
    legacy: bool = False

    @property
    def requires_confirmation(self) -> bool:
        return self.kind is not TierKind.MANDATORY

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'AUR Optional: gaming'."""
        prefix = "AUR " if self.source is PackageSource.COMMUNITY else ""
        name = f"{prefix}{self.kind.value.capitalize()}"
        if self.group:
            name = f"{name}: {self.group}"
        return name


class PackageList(BaseModel, frozen=True):
    """Ordered package identifiers loaded for one tier."""

    tier: Tier
    packages: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.packages)


class InstallOutcome(BaseModel):
    """Mapping of package identifier to install status.

    Built incrementally across all tiers of one run. Records only ever
    upgrade a package's status (installed > failed > skipped), so a package
    installed by an earlier tier stays installed when a later tier that
    repeats it is declined or fails.
    """

    statuses: dict[str, InstallStatus] = Field(default_factory=dict)

    def record(self, package: str, status: InstallStatus) -> None:
        current = self.statuses.get(package)
        if current is None or _PRECEDENCE[status] >= _PRECEDENCE[current]:
            self.statuses[package] = status

    def record_all(self, packages: Iterable[str], status: InstallStatus) -> None:
        for package in packages:
            self.record(package, status)

    def merge(self, other: "InstallOutcome") -> "InstallOutcome":
        """Merge another outcome into this one in place and return self."""
        for package, status in other.statuses.items():
            self.record(package, status)
        return self

    def get(self, package: str) -> InstallStatus | None:
        return self.statuses.get(package)

    def with_status(self, status: InstallStatus) -> list[str]:
        return [pkg for pkg, st in self.statuses.items() if st is status]

    @property
    def installed(self) -> set[str]:
        return set(self.with_status(InstallStatus.INSTALLED))

    def __len__(self) -> int:
        return len(self.statuses)

    def __contains__(self, package: object) -> bool:
        return package in self.statuses


class TierResult(BaseModel):
    """Outcome of one tier, kept for the end-of-run report."""

    tier: Tier
    requested: list[str] = Field(default_factory=list)
    confirmed: bool = True
    outcome: InstallOutcome = Field(default_factory=InstallOutcome)
    error: str | None = None


class BulkInstallResult(BaseModel):
    """Raw result of one bulk install invocation."""

    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
