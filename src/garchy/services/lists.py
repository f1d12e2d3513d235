"""Package list loading.

A list resource is a plain-text file with one package identifier per line.
Blank lines and lines whose first non-blank character is '#' are ignored.
"""

from pathlib import Path

from garchy.exceptions import ResourceMissingError
from garchy.logger import get_logger
from garchy.models.packages import PackageList, PackageSource, Tier, TierKind

logger = get_logger(__name__)

LIST_SUFFIX = ".txt"

# Resource names per (source, kind); optional groups live in a directory
_TIER_RESOURCES: dict[tuple[PackageSource, TierKind], str] = {
    (PackageSource.SYSTEM, TierKind.MANDATORY): "mandatory",
    (PackageSource.SYSTEM, TierKind.DEFAULT): "default",
    (PackageSource.SYSTEM, TierKind.OPTIONAL): "optional",
    (PackageSource.COMMUNITY, TierKind.MANDATORY): "aur-mandatory",
    (PackageSource.COMMUNITY, TierKind.DEFAULT): "aur-default",
    (PackageSource.COMMUNITY, TierKind.OPTIONAL): "aur-optional",
}


def parse_list(text: str) -> list[str]:
    """Return the non-blank, non-comment lines of a list resource, trimmed, in order."""
    packages: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        packages.append(stripped)
    return packages


class ListSource:
    """Loads package lists from the packages directory."""

    def __init__(self, packages_dir: Path) -> None:
        self.packages_dir = packages_dir

    def load(self, name: str) -> list[str]:
        """
        Load a list resource by name.

        Args:
            name: Resource name relative to the packages directory, without suffix
                  (e.g. 'mandatory' or 'optional/gaming')

        Returns:
            Package identifiers in file order

        Raises:
            ResourceMissingError: If the backing file does not exist
        """
        path = self.packages_dir / f"{name}{LIST_SUFFIX}"
        if not path.is_file():
            raise ResourceMissingError(path=path)
        return parse_list(path.read_text(encoding="utf-8"))

    def resource_name(self, tier: Tier) -> str:
        base = _TIER_RESOURCES[(tier.source, tier.kind)]
        if tier.kind is TierKind.OPTIONAL:
            if tier.group is None:
                raise ValueError("optional tiers need a group name")
            if tier.legacy:
                return base
            return f"{base}/{tier.group}"
        return base

    def load_tier(self, tier: Tier) -> PackageList:
        """
        Load the list backing a tier.

        Missing resources are soft (empty list) except for the official
        mandatory list. AUR lists are all optional files, so a missing
        aur-mandatory.txt means an empty AUR mandatory tier.

        Raises:
            ResourceMissingError: If the official mandatory list is missing
        """
        try:
            packages = self.load(self.resource_name(tier))
        except ResourceMissingError as e:
            if tier.kind is TierKind.MANDATORY and tier.source is PackageSource.SYSTEM:
                e.fatal = True
                raise
            logger.info(f"No {tier.label} package list, skipping", path=e.params.get("path"))
            packages = []
        return PackageList(tier=tier, packages=tuple(packages))

    def optional_groups(self, source: PackageSource) -> list[str]:
        """
        Enumerate optional group names for a source, sorted by name.

        The group name is the file's base name. A missing directory yields no groups.
        A legacy single-file list is listed last under its own base name.
        """
        return [tier.group for tier in self.optional_tiers(source) if tier.group]

    def optional_tiers(self, source: PackageSource) -> list[Tier]:
        base = _TIER_RESOURCES[(source, TierKind.OPTIONAL)]
        tiers: list[Tier] = []

        opt_dir = self.packages_dir / base
        if opt_dir.is_dir():
            stems = sorted(p.stem for p in opt_dir.glob(f"*{LIST_SUFFIX}") if p.is_file())
            tiers.extend(Tier(source=source, kind=TierKind.OPTIONAL, group=stem) for stem in stems)
        else:
            logger.info(f"No optional package directory ({opt_dir}), skipping")

        if (self.packages_dir / f"{base}{LIST_SUFFIX}").is_file():
            tiers.append(Tier(source=source, kind=TierKind.OPTIONAL, group=base, legacy=True))
        return tiers
