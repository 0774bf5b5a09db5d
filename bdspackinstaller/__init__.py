"""Core package for the Bedrock Dedicated Server pack installer."""

from .bundle import decompose_bundle
from .errors import (
    ConstructionError,
    InvalidPackageType,
    ManifestNotFound,
    NotABundle,
    PackError,
    PackInstallerError,
    UnknownManifestFormat,
)
from .installer import InstallSession, PackInstaller
from .inventory import scan_installed, scan_inventory
from .load_config import load_program_config, read_world_name
from .manifest_reader import classify_manifest, read_manifest
from .models import (
    InstalledPack,
    InstallerConfig,
    InstallResult,
    InstallStatus,
    PackKind,
    PackManifest,
    PackVersion,
    RegistryTarget,
    ServerLayout,
)
from .registry_store import RegistryDocument, RegistryStore
from .report import export_report, print_install_summary

__all__ = [
    "ConstructionError",
    "InvalidPackageType",
    "ManifestNotFound",
    "NotABundle",
    "PackError",
    "PackInstallerError",
    "UnknownManifestFormat",
    "InstallSession",
    "PackInstaller",
    "InstalledPack",
    "InstallerConfig",
    "InstallResult",
    "InstallStatus",
    "PackKind",
    "PackManifest",
    "PackVersion",
    "RegistryTarget",
    "ServerLayout",
    "RegistryDocument",
    "RegistryStore",
    "read_manifest",
    "classify_manifest",
    "scan_installed",
    "scan_inventory",
    "decompose_bundle",
    "load_program_config",
    "read_world_name",
    "print_install_summary",
    "export_report",
]
