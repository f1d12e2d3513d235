"""Shared fakes for provisioning tests."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from garchy.models.bundles import StowResult
from garchy.models.packages import BulkInstallResult, PackageSource
from garchy.services.prompt import Prompter


class FakeSource:
    """Package source that 'installs' everything except the names in `missing`."""

    def __init__(self, source: PackageSource = PackageSource.SYSTEM, missing: Sequence[str] = ()) -> None:
        self.source = source
        self.missing = set(missing)
        self.calls: list[list[str]] = []
        self.mirror_refreshes = 0

    def bulk_install_needed(self, packages: Sequence[str]) -> BulkInstallResult:
        self.calls.append(list(packages))
        not_found = [pkg for pkg in packages if pkg in self.missing]
        if not_found:
            output = "\n".join(f"error: target not found: {pkg}" for pkg in not_found)
            return BulkInstallResult(exit_code=1, output=output)
        return BulkInstallResult(exit_code=0, output="there is nothing to do")

    def query_installed(self, packages: Sequence[str]) -> set[str] | None:
        return {pkg for pkg in packages if pkg not in self.missing}

    def refresh_mirrors(self, mirrors: object) -> bool:
        self.mirror_refreshes += 1
        return True


class FakeFarm:
    """Symlink farm that links bundle directories into a home dir, like stow -R."""

    def __init__(self, dotfiles_dir: Path, home_dir: Path, conflicts: Sequence[str] = ()) -> None:
        self.dotfiles_dir = dotfiles_dir
        self.home_dir = home_dir
        self.conflicts = set(conflicts)
        self.applied: list[str] = []
        self.available = True

    def is_available(self) -> bool:
        return self.available

    def apply(self, bundle: str) -> StowResult:
        self.applied.append(bundle)
        if bundle in self.conflicts:
            return StowResult(
                ok=False,
                warning=f"WARNING! stowing {bundle} would cause conflicts:\n"
                "  * existing target is neither a link nor a directory: .bashrc",
            )
        for item in (self.dotfiles_dir / bundle).iterdir():
            link = self.home_dir / item.name
            if link.is_symlink():
                link.unlink()
            link.symlink_to(item)
        return StowResult(ok=True)


class ScriptedPrompter(Prompter):
    """Answers confirmations from a mapping of question substring to answer."""

    def __init__(self, answers: dict[str, bool], default: bool = False) -> None:
        super().__init__(assume_yes=False, input_func=self._answer)
        self.answers = answers
        self.default = default
        self.questions: list[str] = []
        self.shown: list[str] = []

    def _answer(self, question: str) -> str:
        self.questions.append(question)
        for needle, answer in self.answers.items():
            if needle in question:
                return "y" if answer else "n"
        return "y" if self.default else "n"

    def show_list(self, label: str, packages: Sequence[str]) -> None:
        self.shown.append(label)


class NoopRepo:
    def __init__(self) -> None:
        self.synced = 0

    def sync(self) -> None:
        self.synced += 1


def write_list(path: Path, *lines: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    d = tmp_path / "GArchy" / "packages"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def dotfiles(tmp_path: Path) -> tuple[Path, Path]:
    dotfiles_dir = tmp_path / "dotfiles"
    home_dir = tmp_path / "home"
    dotfiles_dir.mkdir()
    home_dir.mkdir()
    return dotfiles_dir, home_dir


def make_bundle(dotfiles_dir: Path, name: str, filename: str | None = None) -> Path:
    bundle = dotfiles_dir / name
    bundle.mkdir(parents=True, exist_ok=True)
    (bundle / (filename or f".{name}rc")).write_text(f"# {name}\n", encoding="utf-8")
    return bundle
