from conftest import FakeSource, ScriptedPrompter
from garchy.models.packages import BulkInstallResult, InstallStatus, PackageList, PackageSource, Tier, TierKind
from garchy.services.installer import TieredInstaller

MANDATORY = Tier(source=PackageSource.SYSTEM, kind=TierKind.MANDATORY)
DEFAULT = Tier(source=PackageSource.SYSTEM, kind=TierKind.DEFAULT)


def _list(tier: Tier, *packages: str) -> PackageList:
    return PackageList(tier=tier, packages=packages)


def test_mandatory_installs_without_confirmation() -> None:
    prompter = ScriptedPrompter({})
    source = FakeSource()
    outcome = TieredInstaller(prompter).install_tier(MANDATORY, _list(MANDATORY, "git", "base-devel"), source)

    assert prompter.questions == []
    assert prompter.shown == ["Mandatory"]
    assert source.calls == [["git", "base-devel"]]
    assert outcome.installed == {"git", "base-devel"}


def test_declined_tier_is_skipped_without_invoking_installer() -> None:
    prompter = ScriptedPrompter({"Default": False})
    source = FakeSource()
    outcome = TieredInstaller(prompter).install_tier(DEFAULT, _list(DEFAULT, "zsh", "btop"), source)

    assert source.calls == []
    assert outcome.statuses == {"zsh": InstallStatus.SKIPPED, "btop": InstallStatus.SKIPPED}


def test_non_affirmative_answer_counts_as_decline() -> None:
    prompter = ScriptedPrompter({})
    prompter.input_func = lambda question: "maybe"
    source = FakeSource()
    outcome = TieredInstaller(prompter).install_tier(DEFAULT, _list(DEFAULT, "zsh"), source)
    assert source.calls == []
    assert outcome.get("zsh") is InstallStatus.SKIPPED


def test_optional_groups_are_independent() -> None:
    prompter = ScriptedPrompter({"gaming": False, "audio": True})
    installer = TieredInstaller(prompter)
    source = FakeSource()
    gaming = Tier(source=PackageSource.SYSTEM, kind=TierKind.OPTIONAL, group="gaming")
    audio = Tier(source=PackageSource.SYSTEM, kind=TierKind.OPTIONAL, group="audio")

    skipped = installer.install_tier(gaming, _list(gaming, "steam"), source)
    installed = installer.install_tier(audio, _list(audio, "ardour"), source)

    assert skipped.get("steam") is InstallStatus.SKIPPED
    assert installed.get("ardour") is InstallStatus.INSTALLED
    assert source.calls == [["ardour"]]


def test_batch_is_installed_once_and_partial_failures_reconciled() -> None:
    prompter = ScriptedPrompter({}, default=True)
    source = FakeSource(missing=["foo"])
    result = TieredInstaller(prompter).run_tier(DEFAULT, _list(DEFAULT, "foo", "bar", "baz"), source)

    assert source.calls == [["foo", "bar", "baz"]]
    assert result.outcome.statuses == {
        "foo": InstallStatus.FAILED,
        "bar": InstallStatus.INSTALLED,
        "baz": InstallStatus.INSTALLED,
    }
    assert result.error is None


def test_empty_list_does_nothing() -> None:
    prompter = ScriptedPrompter({}, default=True)
    source = FakeSource()
    result = TieredInstaller(prompter).run_tier(DEFAULT, _list(DEFAULT), source)
    assert source.calls == []
    assert prompter.questions == []
    assert len(result.outcome) == 0


def test_query_verification_overrides_text_scan() -> None:
    class SilentFailure(FakeSource):
        def bulk_install_needed(self, packages):  # type: ignore[no-untyped-def]
            self.calls.append(list(packages))
            return BulkInstallResult(exit_code=0, output="")

    source = SilentFailure(missing=["ghost"])
    outcome = TieredInstaller(ScriptedPrompter({}), verify_with_query=True).install_tier(
        MANDATORY, _list(MANDATORY, "ghost", "git"), source
    )
    assert outcome.get("ghost") is InstallStatus.FAILED
    assert outcome.get("git") is InstallStatus.INSTALLED
