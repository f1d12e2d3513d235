"""GArchy - selective desktop provisioning for Arch Linux."""

__version__ = "0.1.0"
