"""Partial-failure reconciliation for bulk package installs.

pacman (and helpers wrapping it) report per-package problems only as text.
When run with --needed the manager may still install the rest of a batch, so
the batch result is split per package by scanning the output for known
failure signatures.
"""

import re
from collections.abc import Sequence

from garchy.models.packages import BulkInstallResult, InstallOutcome, InstallStatus

# "error: target not found: foo"
TARGET_NOT_FOUND = re.compile(r"target not found:\s*(?P<names>.*)$", re.IGNORECASE)
# "could not find all required packages: foo" (pacman) or with the names on
# following lines as "    foo (Target)" (yay)
MISSING_REQUIRED = re.compile(r"could not find all required packages:\s*(?P<names>.*)$", re.IGNORECASE)
CONTINUATION = re.compile(r"^\s+(?P<name>\S+)\s+\((?:target|wanted by[^)]*)\)\s*$", re.IGNORECASE)

_NAME_SPLIT = re.compile(r"[\s,]+")


def _split_names(raw: str) -> list[str]:
    return [name for name in _NAME_SPLIT.split(raw.strip()) if name]


def find_failed_packages(output: str) -> list[str]:
    """
    Extract the package names named by the failure signatures in installer output.

    Args:
        output: Combined stdout/stderr of the bulk install

    Returns:
        Failed package names in order of appearance, de-duplicated
    """
    failed: list[str] = []
    in_continuation = False

    for line in output.splitlines():
        if in_continuation:
            cont = CONTINUATION.match(line)
            if cont:
                failed.append(cont.group("name"))
                continue
            in_continuation = False

        match = TARGET_NOT_FOUND.search(line) or MISSING_REQUIRED.search(line)
        if not match:
            continue
        names = _split_names(match.group("names"))
        if names:
            failed.extend(names)
        elif match.re is MISSING_REQUIRED:
            in_continuation = True

    return list(dict.fromkeys(failed))


def reconcile(requested: Sequence[str], result: BulkInstallResult) -> tuple[InstallOutcome, list[str]]:
    """
    Derive per-package outcomes from a batch install result.

    Matched names are Failed and every other requested package is Installed.
    A non-zero exit with no matched names leaves the whole batch Failed.

    Args:
        requested: Packages passed to the bulk install
        result: Exit code and combined output of the install

    Returns:
        Tuple of (outcome, failed names found in output that were not requested)
    """
    failed = find_failed_packages(result.output)
    failed_lower = {name.lower() for name in failed}
    requested_lower = {pkg.lower() for pkg in requested}
    unrequested = [name for name in failed if name.lower() not in requested_lower]

    outcome = InstallOutcome()
    matched_any = bool(failed_lower & requested_lower)

    if not result.ok and not matched_any:
        outcome.record_all(requested, InstallStatus.FAILED)
        return outcome, unrequested

    for pkg in requested:
        status = InstallStatus.FAILED if pkg.lower() in failed_lower else InstallStatus.INSTALLED
        outcome.record(pkg, status)
    return outcome, unrequested
