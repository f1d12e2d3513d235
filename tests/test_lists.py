from pathlib import Path

import pytest

from conftest import write_list
from garchy.exceptions import ResourceMissingError
from garchy.models.packages import PackageSource, Tier, TierKind
from garchy.services.lists import ListSource, parse_list


def test_parse_list_drops_blank_and_comment_lines() -> None:
    text = "# core\ngit\n\n   \n  neovim  \n\t# indented comment\nkitty\ngit\n"
    assert parse_list(text) == ["git", "neovim", "kitty", "git"]


def test_load_returns_entries_in_file_order(packages_dir: Path) -> None:
    write_list(packages_dir / "default.txt", "# comment", "zsh", "", "alacritty", "btop")
    source = ListSource(packages_dir)
    assert source.load("default") == ["zsh", "alacritty", "btop"]


def test_load_missing_resource_raises(packages_dir: Path) -> None:
    with pytest.raises(ResourceMissingError) as excinfo:
        ListSource(packages_dir).load("nope")
    assert "nope.txt" in str(excinfo.value)


def test_missing_mandatory_list_is_fatal(packages_dir: Path) -> None:
    tier = Tier(source=PackageSource.SYSTEM, kind=TierKind.MANDATORY)
    with pytest.raises(ResourceMissingError) as excinfo:
        ListSource(packages_dir).load_tier(tier)
    assert excinfo.value.fatal


@pytest.mark.parametrize("kind", [TierKind.DEFAULT, TierKind.OPTIONAL])
def test_missing_optional_lists_are_empty(packages_dir: Path, kind: TierKind) -> None:
    tier = Tier(source=PackageSource.COMMUNITY, kind=kind, group="extra" if kind is TierKind.OPTIONAL else None)
    package_list = ListSource(packages_dir).load_tier(tier)
    assert package_list.packages == ()
    assert package_list.tier == tier


def test_optional_groups_sorted_by_file_stem(packages_dir: Path) -> None:
    write_list(packages_dir / "optional" / "gaming.txt", "steam")
    write_list(packages_dir / "optional" / "audio.txt", "ardour")
    (packages_dir / "optional" / "README.md").write_text("ignored", encoding="utf-8")

    source = ListSource(packages_dir)
    assert source.optional_groups(PackageSource.SYSTEM) == ["audio", "gaming"]

    tier = source.optional_tiers(PackageSource.SYSTEM)[1]
    assert source.load_tier(tier).packages == ("steam",)


def test_community_layout_and_legacy_optional_file(packages_dir: Path) -> None:
    write_list(packages_dir / "aur-mandatory.txt", "yay-bin")
    write_list(packages_dir / "aur-optional" / "fonts.txt", "ttf-iosevka")
    write_list(packages_dir / "aur-optional.txt", "github-copilot-cli")

    source = ListSource(packages_dir)
    assert source.optional_groups(PackageSource.COMMUNITY) == ["fonts", "aur-optional"]

    legacy = source.optional_tiers(PackageSource.COMMUNITY)[-1]
    assert legacy.legacy
    assert source.load_tier(legacy).packages == ("github-copilot-cli",)

    mandatory = Tier(source=PackageSource.COMMUNITY, kind=TierKind.MANDATORY)
    assert source.load_tier(mandatory).packages == ("yay-bin",)


def test_tier_labels() -> None:
    assert Tier(source=PackageSource.SYSTEM, kind=TierKind.DEFAULT).label == "Default"
    assert (
        Tier(source=PackageSource.COMMUNITY, kind=TierKind.OPTIONAL, group="fonts").label == "AUR Optional: fonts"
    )


def test_missing_aur_mandatory_list_is_soft(packages_dir: Path) -> None:
    tier = Tier(source=PackageSource.COMMUNITY, kind=TierKind.MANDATORY)
    assert ListSource(packages_dir).load_tier(tier).packages == ()


def test_group_named_like_its_directory_reads_the_group_file(packages_dir: Path) -> None:
    write_list(packages_dir / "optional" / "optional.txt", "steam")
    write_list(packages_dir / "aur-optional" / "aur-optional.txt", "heroic-games-launcher-bin")

    source = ListSource(packages_dir)
    [system_tier] = source.optional_tiers(PackageSource.SYSTEM)
    [community_tier] = source.optional_tiers(PackageSource.COMMUNITY)

    assert not system_tier.legacy
    assert source.load_tier(system_tier).packages == ("steam",)
    assert source.load_tier(community_tier).packages == ("heroic-games-launcher-bin",)


def test_legacy_file_and_same_named_group_are_separate_tiers(packages_dir: Path) -> None:
    write_list(packages_dir / "aur-optional" / "aur-optional.txt", "spotify")
    write_list(packages_dir / "aur-optional.txt", "github-copilot-cli")

    source = ListSource(packages_dir)
    group, legacy = source.optional_tiers(PackageSource.COMMUNITY)

    assert source.load_tier(group).packages == ("spotify",)
    assert source.load_tier(legacy).packages == ("github-copilot-cli",)
