"""Capability resolution: what is present after the install tiers ran."""

from collections.abc import Callable, Iterable

from garchy.models.packages import InstallOutcome
from garchy.services.sources import is_executable_resolvable


class CapabilitySet:
    """Set of capability tokens known to be present.

    A token is present if it names a package installed during this run
    (compared case-insensitively) or an executable resolvable on PATH.
    Executable membership is probed lazily, so the set is never enumerated.
    """

    def __init__(self, installed: Iterable[str], probe: Callable[[str], bool]) -> None:
        self._installed = frozenset(pkg.lower() for pkg in installed)
        self._probe = probe

    @property
    def installed_packages(self) -> frozenset[str]:
        return self._installed

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str):
            return False
        return token.lower() in self._installed or self._probe(token)

    def present(self, tokens: Iterable[str]) -> set[str]:
        """Return the subset of tokens that are present."""
        return {token for token in tokens if token in self}


class CapabilityResolver:
    """Derives a CapabilitySet from the install outcome plus a live PATH probe."""

    def __init__(
        self,
        outcome: InstallOutcome,
        probe: Callable[[str], bool] = is_executable_resolvable,
    ) -> None:
        self.outcome = outcome
        self.probe = probe

    def resolve(self) -> CapabilitySet:
        """Build a fresh CapabilitySet; called again whenever the outcome may have changed."""
        return CapabilitySet(self.outcome.installed, self.probe)
