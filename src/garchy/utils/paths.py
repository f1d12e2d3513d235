"""Path utilities for GArchy."""

from pathlib import Path


def get_resources_dir() -> Path:
    """Get the resources directory path (src/garchy/resources).

    Returns:
        Path to the resources directory
    """
    # This file is at src/garchy/utils/paths.py
    return Path(__file__).parent.parent / "resources"
