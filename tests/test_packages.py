import pytest

from garchy.models.packages import InstallOutcome, InstallStatus


@pytest.mark.parametrize("later", [InstallStatus.SKIPPED, InstallStatus.FAILED])
def test_installed_is_never_downgraded(later: InstallStatus) -> None:
    outcome = InstallOutcome()
    outcome.record("git", InstallStatus.INSTALLED)
    outcome.record("git", later)
    assert outcome.get("git") is InstallStatus.INSTALLED


def test_statuses_upgrade_from_skipped_to_failed_to_installed() -> None:
    outcome = InstallOutcome()
    outcome.record("zsh", InstallStatus.SKIPPED)
    outcome.record("zsh", InstallStatus.FAILED)
    assert outcome.get("zsh") is InstallStatus.FAILED

    outcome.record("zsh", InstallStatus.SKIPPED)
    assert outcome.get("zsh") is InstallStatus.FAILED

    outcome.record("zsh", InstallStatus.INSTALLED)
    assert outcome.get("zsh") is InstallStatus.INSTALLED


def test_merge_keeps_earlier_installs() -> None:
    run = InstallOutcome()
    run.record_all(["git", "neovim"], InstallStatus.INSTALLED)

    declined = InstallOutcome()
    declined.record_all(["git", "zsh"], InstallStatus.SKIPPED)
    failed = InstallOutcome()
    failed.record_all(["neovim"], InstallStatus.FAILED)

    run.merge(declined).merge(failed)

    assert run.statuses == {
        "git": InstallStatus.INSTALLED,
        "neovim": InstallStatus.INSTALLED,
        "zsh": InstallStatus.SKIPPED,
    }
    assert run.installed == {"git", "neovim"}
