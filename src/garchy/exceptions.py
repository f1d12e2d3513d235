"""Centralized exception hierarchy for GArchy.

Every error carries a message key and formatting parameters so that the
end-of-run report can group failures by kind.
"""

MESSAGES: dict[str, str] = {
    "lists.not_found": "Package list not found: {path}",
    "lists.dir_not_found": "Package directory not found: {path}",
    "dotfiles.unavailable": "Dotfiles repository unavailable at {path}: {error}",
    "source.helper_missing": "AUR helper '{helper}' not installed; cannot install {label} list",
    "source.helper_build_failed": "Failed to build AUR helper '{helper}': {error}",
    "install.package_failed": "Could not install package '{package}' ({tier})",
    "deploy.conflict": "Stow reported conflicts for bundle '{bundle}': {detail}",
    "preflight.root": "Do not run this as root. Run as your normal user.",
    "preflight.not_arch": "This tool is intended for Arch Linux ({path} missing).",
    "preflight.missing_command": "'{command}' is not installed; install it first.",
    "config.invalid": "Invalid configuration in {path}: {error}",
}


class GarchyError(Exception):
    """Base exception for all provisioning errors."""

    def __init__(self, message_key: str, fatal: bool = False, **params: object) -> None:
        """
        Initialize the error.

        Args:
            message_key: Key in MESSAGES (e.g., 'lists.not_found')
            fatal: Whether the error should terminate the provisioning run
            **params: Parameters for string formatting
        """
        super().__init__(message_key)
        self.message_key = message_key
        self.fatal = fatal
        self.params = params

    def __str__(self) -> str:
        """Returns the formatted English message."""
        template = MESSAGES.get(self.message_key)
        if template is None:
            params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
            return f"[{self.message_key}] {params_str}"
        try:
            return template.format(**self.params)
        except KeyError:
            return template


class ResourceMissingError(GarchyError):
    """Raised when a package list or bundle directory does not exist."""

    def __init__(self, message_key: str = "lists.not_found", fatal: bool = False, **params: object) -> None:
        super().__init__(message_key, fatal=fatal, **params)


class SourceUnavailableError(GarchyError):
    """Raised when the community source has no usable client."""

    def __init__(self, message_key: str, fatal: bool = False, **params: object) -> None:
        super().__init__(message_key, fatal=fatal, **params)


class PackageInstallFailure(GarchyError):
    """Per-package install failure; recovered locally by the installer."""

    def __init__(self, package: str, tier: str) -> None:
        super().__init__("install.package_failed", package=package, tier=tier)
        self.package = package


class DeployConflictError(GarchyError):
    """Raised when the symlink farm refuses to overwrite pre-existing files."""

    def __init__(self, bundle: str, detail: str) -> None:
        super().__init__("deploy.conflict", bundle=bundle, detail=detail)
        self.bundle = bundle


class PreflightError(GarchyError):
    """Raised when the host is not fit for provisioning."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, fatal=True, **params)


class ConfigError(GarchyError):
    """Raised when a configuration or policy file cannot be parsed."""

    def __init__(self, **params: object) -> None:
        super().__init__("config.invalid", fatal=True, **params)
