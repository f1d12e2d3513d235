"""End-of-run report."""

from pydantic import BaseModel, Field

from .bundles import DeployResult, DeployStatus, ServiceResult
from .packages import InstallOutcome, InstallStatus, TierResult


class RunReport(BaseModel):
    """Everything a provisioning run did, reconstructable into a summary."""

    outcome: InstallOutcome = Field(default_factory=InstallOutcome)
    tiers: list[TierResult] = Field(default_factory=list)
    deploy: list[DeployResult] = Field(default_factory=list)
    services: list[ServiceResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    def deployed(self) -> list[str]:
        return [r.bundle for r in self.deploy if r.applied]

    def summary_lines(self) -> list[str]:
        lines = ["Provisioning summary:"]
        for status in InstallStatus:
            packages = self.outcome.with_status(status)
            lines.append(f"  {status.value:<10} {len(packages):>3}  {' '.join(sorted(packages))}".rstrip())

        if self.deploy:
            applied = self.deployed()
            lines.append(f"  dotfiles   {len(applied):>3}  {' '.join(applied)}".rstrip())
            for result in self.deploy:
                if result.status in (DeployStatus.CONFLICT, DeployStatus.FAILED, DeployStatus.WARNING):
                    lines.append(f"    ! {result.bundle}: {result.status.value} {result.warning or ''}".rstrip())

        enabled = [s.unit for s in self.services if s.enabled]
        if self.services:
            lines.append(f"  services   {len(enabled):>3}  {' '.join(enabled)}".rstrip())

        for error in self.errors:
            lines.append(f"  error: {error}")
        return lines
