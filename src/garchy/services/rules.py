"""Loading of the bundle and service requirement tables.

The tables are policy data: which dotfile bundle or systemd unit depends on
which packages or commands. They ship as JSON resources and can be replaced
by a user supplied file.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from garchy.exceptions import ConfigError
from garchy.logger import get_logger
from garchy.models.bundles import BundleRule, BundleRuleTable, ServiceRule, ServiceRuleTable
from garchy.utils import get_resources_dir

logger = get_logger(__name__)

BUNDLE_RULES_FILE = "bundle_requirements.json"
SERVICE_RULES_FILE = "service_rules.json"


def _read_json(path: Path) -> object:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(path=path, error=e) from e


def load_bundle_rules(path: Path | None = None) -> list[BundleRule]:
    """
    Load the bundle requirement table.

    Args:
        path: Override file; the bundled resource is used when None

    Returns:
        Rules in file order

    Raises:
        ConfigError: If the file is unreadable or invalid
    """
    path = path or get_resources_dir() / BUNDLE_RULES_FILE
    data = _read_json(path)
    try:
        table = BundleRuleTable.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path=path, error=e) from e

    names = [rule.bundle for rule in table.bundles]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigError(path=path, error=f"duplicate bundles: {', '.join(duplicates)}")

    logger.debug(f"Loaded {len(table.bundles)} bundle rules from {path}")
    return table.bundles


def load_service_rules(path: Path | None = None) -> list[ServiceRule]:
    """Load the service activation table (bundled resource unless overridden)."""
    path = path or get_resources_dir() / SERVICE_RULES_FILE
    data = _read_json(path)
    try:
        table = ServiceRuleTable.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path=path, error=e) from e
    return table.services
