"""Requirement predicates and deployment result models."""

from collections.abc import Container
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class AlwaysRequirement(BaseModel, frozen=True):
    """Always satisfied."""

    kind: Literal["always"] = "always"

    def missing(self, capabilities: Container[str]) -> list[str]:
        return []


class AllOfRequirement(BaseModel, frozen=True):
    """Satisfied iff every token is present."""

    kind: Literal["all_of"] = "all_of"
    tokens: tuple[str, ...]

    def missing(self, capabilities: Container[str]) -> list[str]:
        return [token for token in self.tokens if token not in capabilities]


class AnyOfRequirement(BaseModel, frozen=True):
    """Satisfied iff at least one token is present (e.g. alternative launchers)."""

    kind: Literal["any_of"] = "any_of"
    tokens: tuple[str, ...]

    def missing(self, capabilities: Container[str]) -> list[str]:
        if any(token in capabilities for token in self.tokens):
            return []
        return list(self.tokens)


Requirement = Annotated[
    AlwaysRequirement | AllOfRequirement | AnyOfRequirement,
    Field(discriminator="kind"),
]


def is_satisfied(requirement: Requirement, capabilities: Container[str]) -> bool:
    return not requirement.missing(capabilities)


class BundleRule(BaseModel, frozen=True):
    """Maps a dotfile bundle (a stow package directory) to its requirement."""

    bundle: str
    requires: Requirement = Field(default_factory=AlwaysRequirement)


class BundleRuleTable(BaseModel):
    """Root model of bundle_requirements.json."""

    bundles: list[BundleRule]

    def as_mapping(self) -> dict[str, BundleRule]:
        return {rule.bundle: rule for rule in self.bundles}


class DeployStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    WARNING = "warning"
    CONFLICT = "conflict"
    FAILED = "failed"


class DeployResult(BaseModel):
    """Result of considering one bundle for deployment."""

    bundle: str
    status: DeployStatus
    reason: str | None = None
    missing: list[str] = Field(default_factory=list)
    warning: str | None = None

    @property
    def applied(self) -> bool:
        return self.status in (DeployStatus.APPLIED, DeployStatus.WARNING)


class StowResult(BaseModel):
    """Result of one symlink-farm invocation."""

    ok: bool
    warning: str | None = None


class ServiceScope(str, Enum):
    SYSTEM = "system"
    USER = "user"


class ServiceRule(BaseModel, frozen=True):
    """A systemd unit enabled only when its requirement holds."""

    unit: str
    scope: ServiceScope = ServiceScope.SYSTEM
    start: bool = False
    requires: Requirement = Field(default_factory=AlwaysRequirement)
    # Package offered for installation when the requirement is not met
    offer_install: str | None = None


class ServiceRuleTable(BaseModel):
    """Root model of service_rules.json."""

    services: list[ServiceRule]


class ServiceResult(BaseModel):
    unit: str
    enabled: bool
    reason: str | None = None
