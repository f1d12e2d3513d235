"""Utilities for GArchy."""

from garchy.utils.paths import get_resources_dir
from garchy.utils.subprocess_executor import SubprocessExecutor

__all__ = ["SubprocessExecutor", "get_resources_dir"]
