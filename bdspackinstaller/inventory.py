from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .errors import UnknownManifestFormat
from .logging_utils import log_detail, log_warn
from .manifest_reader import parse_manifest_text, resolve_version
from .models import MANIFEST_NAMES, InstalledPack, Inventory, ServerLayout

MAX_SEARCH_DEPTH = 16


def find_manifest_dir(
    directory: Path,
    filenames: Sequence[str] = MANIFEST_NAMES,
    max_depth: int = MAX_SEARCH_DEPTH,
) -> Path | None:
    """Depth-first search for the first folder holding one of ``filenames``."""

    stack: List[Tuple[Path, int]] = [(directory, 0)]
    while stack:
        current, depth = stack.pop()
        try:
            children = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError:
            continue
        if any(child.name in filenames and child.is_file() for child in children):
            return current
        if depth >= max_depth:
            continue
        subdirs = [child for child in children if child.is_dir()]
        # Reversed so the first folder by name is searched first.
        stack.extend((child, depth + 1) for child in reversed(subdirs))
    return None


def _manifest_file(manifest_dir: Path) -> Path:
    for name in MANIFEST_NAMES:
        candidate = manifest_dir / name
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"No manifest file in {manifest_dir}")


def read_installed_pack(location: Path) -> InstalledPack | None:
    manifest_dir = find_manifest_dir(location)
    if manifest_dir is None:
        log_warn("Unable to locate manifest file of installed pack.")
        log_warn(f"Installed location: {location}", indent=2)
        return None

    manifest_path = _manifest_file(manifest_dir)
    try:
        document = parse_manifest_text(manifest_path.read_bytes(), manifest_path)
    except (OSError, UnknownManifestFormat) as exc:
        log_warn(f"Skipped installed pack with unreadable manifest: {exc}")
        return None

    header = document["header"]
    pack_id = header.get("uuid")
    if not isinstance(pack_id, str) or not pack_id.strip():
        log_warn(f"Skipped installed pack without a uuid: {manifest_path}")
        return None
    name = header.get("name") if isinstance(header.get("name"), str) else location.name
    return InstalledPack(
        name=name,
        id=pack_id.strip(),
        version=resolve_version(document, manifest_path),
        location=location,
    )


def scan_installed(directory: Path) -> Dict[str, InstalledPack]:
    """Map pack id to installed pack for every pack folder in ``directory``.

    Some vanilla packs are installed more than once under the same uuid with
    different versions. Only the last folder scanned is kept for such an id;
    vanilla content never needs updating so this is accepted.
    """

    results: Dict[str, InstalledPack] = {}
    if not directory.is_dir():
        return results

    for location in sorted(directory.iterdir(), key=lambda p: p.name):
        if not location.is_dir():
            continue
        log_detail(f"Reading manifest data from {location}")
        pack = read_installed_pack(location)
        if pack is None:
            continue
        results[pack.id] = pack
    return results


def scan_inventory(layout: ServerLayout) -> Inventory:
    return Inventory(
        server_resources=scan_installed(layout.server_resources_dir),
        server_behavior=scan_installed(layout.server_behaviors_dir),
        world_resources=scan_installed(layout.world_resources_dir),
        world_behavior=scan_installed(layout.world_behaviors_dir),
    )


__all__ = ["find_manifest_dir", "read_installed_pack", "scan_installed", "scan_inventory"]
