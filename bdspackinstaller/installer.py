from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .bundle import decompose_bundle, is_bundle
from .errors import ConstructionError, InvalidPackageType, PackError
from .file_utils import extract_archive, remove_path
from .inventory import scan_installed, scan_inventory
from .load_config import read_world_name
from .logging_utils import log_detail, log_error, log_info, log_ok, log_warn
from .manifest_reader import read_manifest
from .models import (
    ADDON_SUFFIX,
    PACK_SUFFIX,
    REQUIRED_SERVER_FILES,
    InstalledPack,
    InstallerConfig,
    InstallResult,
    InstallStatus,
    Inventory,
    PackKind,
    PackManifest,
    RegistryTarget,
    ServerLayout,
    ServerPackEntry,
    WorldPackEntry,
)
from .registry_store import RegistryStore
from .text_utils import sanitize_name

# BDS keeps a {"file_version": N} record at the head of valid_known_packs.json.
SERVER_INSERT_INDEX = 1
WORLD_INSERT_INDEX = 0
ID_SUFFIX_LENGTH = 8


@dataclass(slots=True)
class InstallSession:
    """Everything one installer run knows about a server and its world."""

    layout: ServerLayout
    config: InstallerConfig
    registries: RegistryStore
    inventory: Inventory
    results: List[InstallResult] = field(default_factory=list)

    def rescan(self, kind: PackKind | None = None) -> None:
        """Rebuild inventory maps from disk, all of them or those of one kind."""
        if kind is None:
            self.inventory = scan_inventory(self.layout)
            return
        server_map = scan_installed(self.layout.server_dir(kind))
        world_map = scan_installed(self.layout.world_packs_dir(kind))
        if kind is PackKind.RESOURCES:
            self.inventory.server_resources = server_map
            self.inventory.world_resources = world_map
        else:
            self.inventory.server_behavior = server_map
            self.inventory.world_behavior = world_map


def validate_server_root(server_root: Path | str | None) -> Path:
    if not server_root:
        raise ConstructionError("You must provide a server path.")
    root = Path(server_root).expanduser()
    if not root.exists():
        raise ConstructionError(f"The provided server path does not exist: {root}")
    for name in REQUIRED_SERVER_FILES:
        if not (root / name).exists():
            raise ConstructionError(f"Unable to find server files in provided path: {root / name}")
    return root


def open_session(server_root: Path | str, config: InstallerConfig | None = None) -> InstallSession:
    root = validate_server_root(server_root)
    config = config or InstallerConfig()
    layout = ServerLayout.resolve(root, read_world_name(root), config.addon_dir)
    try:
        registries = RegistryStore.load(layout)
    except OSError as exc:
        raise ConstructionError(f"Unable to prepare pack lists for world '{layout.world_name}': {exc}") from exc
    return InstallSession(
        layout=layout,
        config=config,
        registries=registries,
        inventory=scan_inventory(layout),
    )


def uninstall_pack(session: InstallSession, target: RegistryTarget, pack_id: str, location: Path) -> None:
    """Drop ``pack_id`` from the target pack list and delete ``location``.

    Both steps run independently; a missing entry or folder is not an error.
    """

    document = session.registries.document(target)
    if document.remove(target.id_key, pack_id):
        log_detail(f"Removed {pack_id} from {document.path.name}")
    remove_path(location)


def uninstall_existing(
    session: InstallSession,
    kind: PackKind,
    pack_id: str,
    server_pack: InstalledPack | None,
    world_pack: InstalledPack | None,
) -> None:
    if server_pack:
        uninstall_pack(session, RegistryTarget.SERVER, pack_id, server_pack.location)
    if world_pack:
        uninstall_pack(session, RegistryTarget.world_for(kind), pack_id, world_pack.location)


def choose_install_dir_name(session: InstallSession, manifest: PackManifest) -> str:
    """Folder name used in both scopes; suffixed with the id when taken."""

    id_part = sanitize_name(manifest.id)
    name = manifest.display_name or id_part
    layout = session.layout
    taken = (layout.server_dir(manifest.kind) / name).exists() or (
        layout.world_packs_dir(manifest.kind) / name
    ).exists()
    if taken and id_part:
        suffixed = f"{name}{id_part[:ID_SUFFIX_LENGTH]}"
        log_warn(f"Folder name {name} is used by another pack; installing as {suffixed}.")
        return suffixed
    return name


def install_pack_files(session: InstallSession, package_path: Path, manifest: PackManifest) -> str:
    """Extract a pack into the world and the server and register it in both."""

    layout = session.layout
    dir_name = choose_install_dir_name(session, manifest)

    world_target = RegistryTarget.world_for(manifest.kind)
    world_entry = WorldPackEntry(id=manifest.id, version=manifest.version)
    world_document = session.registries.document(world_target)
    # Each list is written once its pack files are in place.
    world_document.entries.insert(WORLD_INSERT_INDEX, world_entry.to_json())
    extract_archive(package_path, layout.world_packs_dir(manifest.kind) / dir_name)
    world_document.save()

    server_entry = ServerPackEntry(
        path=f"{manifest.kind.directory_name}/{dir_name}",
        id=manifest.id,
        version=manifest.version,
    )
    server_document = session.registries.server
    server_document.entries.insert(SERVER_INSERT_INDEX, server_entry.to_json())
    extract_archive(package_path, layout.server_dir(manifest.kind) / dir_name)
    server_document.save()
    return dir_name


def uninstall_all_world_packs(session: InstallSession) -> None:
    """Uninstall every pack found in the world, and its server copy if any.

    Vanilla packs cannot be told apart from added ones at server level, so
    packs that only exist on the server are left alone.
    """

    log_info("Uninstalling all packs found saved to world.")
    inventory = session.inventory
    for kind in PackKind:
        target = RegistryTarget.world_for(kind)
        for pack in list(inventory.world(kind).values()):
            uninstall_pack(session, target, pack.id, pack.location)
            server_pack = inventory.server(kind).get(pack.id)
            if server_pack:
                uninstall_pack(session, RegistryTarget.SERVER, pack.id, server_pack.location)
    session.rescan()


class PackInstaller:
    """Installs packs and addons to a Bedrock Dedicated Server and its world."""

    def __init__(self, server_root: Path | str, config: InstallerConfig | None = None) -> None:
        self.session = open_session(server_root, config)

    @property
    def layout(self) -> ServerLayout:
        return self.session.layout

    @property
    def inventory(self) -> Inventory:
        return self.session.inventory

    @property
    def results(self) -> List[InstallResult]:
        return self.session.results

    def refresh_inventory(self) -> None:
        self.session.rescan()

    def install(self, package_path: Path | str) -> None:
        package_path = Path(package_path)
        suffix = package_path.suffix.lower()
        if not package_path.exists():
            raise InvalidPackageType(f"The provided path does not exist: {package_path}")
        if not package_path.is_file() or suffix not in (PACK_SUFFIX, ADDON_SUFFIX):
            raise InvalidPackageType(f"The provided file is not an addon or pack: {package_path}")

        if is_bundle(package_path):
            for pack in decompose_bundle(package_path):
                self.install(pack)
            return

        manifest = read_manifest(package_path)
        log_info(f"Installing {manifest.display_name or manifest.id}...")
        session = self.session
        server_pack = session.inventory.server(manifest.kind).get(manifest.id)
        world_pack = session.inventory.world(manifest.kind).get(manifest.id)
        existing = [pack for pack in (server_pack, world_pack) if pack]

        status = InstallStatus.INSTALLED
        if existing:
            if all(pack.version == manifest.version for pack in existing):
                log_info(f"The {manifest.display_name} pack is already installed and up to date.", indent=2)
                session.results.append(
                    InstallResult(
                        source=package_path,
                        status=InstallStatus.UP_TO_DATE,
                        manifest=manifest,
                        previous_versions=[pack.version for pack in existing],
                    )
                )
                return
            log_detail("Uninstalling old version of pack", indent=2)
            uninstall_existing(session, manifest.kind, manifest.id, server_pack, world_pack)
            status = InstallStatus.UPDATED

        dir_name = install_pack_files(session, package_path, manifest)
        session.rescan(manifest.kind)
        session.results.append(
            InstallResult(
                source=package_path,
                status=status,
                manifest=manifest,
                previous_versions=[pack.version for pack in existing],
                message=f"{manifest.kind.directory_name}/{dir_name}",
            )
        )
        log_ok(f"Successfully installed the {manifest.display_name} pack.", indent=2)

    def install_all(
        self,
        intake_directory: Path | str | None = None,
        remove_existing: bool = False,
    ) -> List[InstallResult]:
        """Install every pack and addon found in the intake directory.

        A failing entry is logged and recorded; the remaining entries still run.
        """

        session = self.session
        first_result = len(session.results)
        if remove_existing:
            uninstall_all_world_packs(session)

        intake = Path(intake_directory) if intake_directory else session.layout.addon_dir
        if not intake.is_dir():
            log_warn(f"Addon directory {intake} does not exist. Nothing to install.")
            return session.results[first_result:]

        ignored = {name.lower() for name in session.config.ignore_files}
        for entry in sorted(intake.iterdir(), key=lambda p: p.name):
            if entry.name.lower() in ignored:
                log_detail(f"Skipped {entry.name}: listed in ignore_files.")
                continue
            try:
                self.install(entry)
            except (PackError, OSError, zipfile.BadZipFile) as exc:
                log_error(f"Failed to install {entry.name}: {exc}")
                session.results.append(
                    InstallResult(source=entry, status=InstallStatus.FAILED, message=str(exc))
                )
        return session.results[first_result:]

    def uninstall(self, target: RegistryTarget, pack_id: str, location: Path | str) -> None:
        uninstall_pack(self.session, target, pack_id, Path(location))
        self.session.rescan()


__all__ = [
    "InstallSession",
    "PackInstaller",
    "open_session",
    "validate_server_root",
    "uninstall_pack",
    "install_pack_files",
    "uninstall_all_world_packs",
]
