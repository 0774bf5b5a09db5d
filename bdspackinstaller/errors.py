from __future__ import annotations


class PackInstallerError(Exception):
    """Base class for every error raised by the installer."""


class ConstructionError(PackInstallerError):
    """The server root cannot be used to start an install session."""


class PackError(PackInstallerError):
    """A single pack or addon could not be processed."""


class InvalidPackageType(PackError):
    pass


class ManifestNotFound(PackError):
    pass


class UnknownManifestFormat(PackError):
    pass


class NotABundle(PackError):
    pass


__all__ = [
    "PackInstallerError",
    "ConstructionError",
    "PackError",
    "InvalidPackageType",
    "ManifestNotFound",
    "UnknownManifestFormat",
    "NotABundle",
]
