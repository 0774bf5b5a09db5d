from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .text_utils import VERSION_STRING_PATTERN, sanitize_name

PACK_SUFFIX = ".mcpack"
ADDON_SUFFIX = ".mcaddon"
MANIFEST_NAMES = ("manifest.json", "pack_manifest.json")
SERVER_PACKS_JSON = "valid_known_packs.json"
REQUIRED_SERVER_FILES = ("behavior_packs", "resource_packs", SERVER_PACKS_JSON)
DEFAULT_ADDON_DIR = "BDS-Addons"


class PackKind(str, Enum):
    RESOURCES = "resources"
    BEHAVIOR = "behavior"

    @classmethod
    def from_module_type(cls, module_type: Any) -> "PackKind | None":
        if not isinstance(module_type, str):
            return None
        normalized = module_type.strip().lower()
        if normalized == "resources":
            return cls.RESOURCES
        if normalized == "data":
            return cls.BEHAVIOR
        return None

    @property
    def directory_name(self) -> str:
        return "resource_packs" if self is PackKind.RESOURCES else "behavior_packs"


class RegistryTarget(str, Enum):
    SERVER = "server"
    WORLD_RESOURCES = "world_resources"
    WORLD_BEHAVIOR = "world_behavior"

    @classmethod
    def world_for(cls, kind: PackKind) -> "RegistryTarget":
        return cls.WORLD_RESOURCES if kind is PackKind.RESOURCES else cls.WORLD_BEHAVIOR

    @property
    def id_key(self) -> str:
        return "uuid" if self is RegistryTarget.SERVER else "pack_id"


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PackVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: Any) -> "PackVersion":
        """Accept ``[1, 0, 3]`` style lists and ``"1.0.3"`` strings."""
        if isinstance(raw, str):
            match = VERSION_STRING_PATTERN.match(raw)
            if not match:
                raise ValueError(f"Unrecognised version string: {raw!r}")
            return cls(*(int(part) for part in match.groups()))
        if isinstance(raw, (list, tuple)) and len(raw) == 3:
            parts = list(raw)
            if all(isinstance(p, int) and not isinstance(p, bool) and p >= 0 for p in parts):
                return cls(*parts)
        raise ValueError(f"Unrecognised version: {raw!r}")

    def as_list(self) -> List[int]:
        return [self.major, self.minor, self.patch]

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class PackManifest:
    id: str
    name: str
    version: PackVersion
    kind: PackKind

    @property
    def display_name(self) -> str:
        return sanitize_name(self.name)


@dataclass(slots=True)
class InstalledPack:
    name: str
    id: str
    version: PackVersion | None
    location: Path


@dataclass(slots=True)
class ServerPackEntry:
    path: str
    id: str
    version: PackVersion

    def to_json(self) -> Dict[str, Any]:
        return {
            "file_system": "RawPath",
            "path": self.path,
            "uuid": self.id,
            "version": str(self.version),
        }


@dataclass(slots=True)
class WorldPackEntry:
    id: str
    version: PackVersion

    def to_json(self) -> Dict[str, Any]:
        return {"pack_id": self.id, "version": self.version.as_list()}


@dataclass(slots=True)
class Inventory:
    server_resources: Dict[str, InstalledPack] = field(default_factory=dict)
    server_behavior: Dict[str, InstalledPack] = field(default_factory=dict)
    world_resources: Dict[str, InstalledPack] = field(default_factory=dict)
    world_behavior: Dict[str, InstalledPack] = field(default_factory=dict)

    def server(self, kind: PackKind) -> Dict[str, InstalledPack]:
        return self.server_resources if kind is PackKind.RESOURCES else self.server_behavior

    def world(self, kind: PackKind) -> Dict[str, InstalledPack]:
        return self.world_resources if kind is PackKind.RESOURCES else self.world_behavior


@dataclass(frozen=True, slots=True)
class ServerLayout:
    root: Path
    world_name: str
    addon_dir: Path
    server_packs_json: Path
    server_resources_dir: Path
    server_behaviors_dir: Path
    world_dir: Path
    world_resources_json: Path
    world_behaviors_json: Path
    world_resources_dir: Path
    world_behaviors_dir: Path

    @classmethod
    def resolve(cls, root: Path, world_name: str, addon_dir: str = DEFAULT_ADDON_DIR) -> "ServerLayout":
        world_dir = root / "worlds" / world_name
        return cls(
            root=root,
            world_name=world_name,
            addon_dir=root / addon_dir,
            server_packs_json=root / SERVER_PACKS_JSON,
            server_resources_dir=root / "resource_packs",
            server_behaviors_dir=root / "behavior_packs",
            world_dir=world_dir,
            world_resources_json=world_dir / "world_resource_packs.json",
            world_behaviors_json=world_dir / "world_behavior_packs.json",
            world_resources_dir=world_dir / "resource_packs",
            world_behaviors_dir=world_dir / "behavior_packs",
        )

    def server_dir(self, kind: PackKind) -> Path:
        return self.server_resources_dir if kind is PackKind.RESOURCES else self.server_behaviors_dir

    def world_packs_dir(self, kind: PackKind) -> Path:
        return self.world_resources_dir if kind is PackKind.RESOURCES else self.world_behaviors_dir


@dataclass(slots=True)
class InstallResult:
    source: Path
    status: InstallStatus
    manifest: PackManifest | None = None
    previous_versions: Sequence[PackVersion | None] = ()
    message: str = ""

    @property
    def previous_version_label(self) -> str:
        labels = sorted({str(v) if v else "unknown" for v in self.previous_versions})
        return ", ".join(labels)


@dataclass(slots=True)
class InstallerConfig:
    addon_dir: str = DEFAULT_ADDON_DIR
    ignore_files: List[str] = field(default_factory=list)
