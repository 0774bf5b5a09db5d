from __future__ import annotations

import json
import zipfile
from pathlib import PurePosixPath, Path
from typing import Any, Dict, Iterable, List, Tuple

from .errors import ManifestNotFound, UnknownManifestFormat
from .logging_utils import log_detail
from .models import MANIFEST_NAMES, PackKind, PackManifest, PackVersion
from .text_utils import strip_json_comments

# Manifest layouts seen in the wild. Current packs list their modules at the
# top level; some early packs nested them inside the header.
SHAPE_TOP_LEVEL = "modules"
SHAPE_HEADER = "header.modules"


def parse_manifest_text(raw: bytes | str, source: Path | str) -> Dict[str, Any]:
    """Decode a manifest, drop comments and return the parsed object."""

    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UnknownManifestFormat(f"Manifest is not valid UTF-8: {source}") from exc
    else:
        text = raw.lstrip("\ufeff")
    try:
        document = json.loads(strip_json_comments(text))
    except json.JSONDecodeError as exc:
        raise UnknownManifestFormat(f"Manifest is not valid JSON: {source} ({exc})") from exc
    if not isinstance(document, dict) or not isinstance(document.get("header"), dict):
        raise UnknownManifestFormat(f"Manifest has no header section: {source}")
    return document


def _module_lists(document: Dict[str, Any]) -> Iterable[Tuple[str, List[Any]]]:
    header = document["header"]
    for shape, modules in ((SHAPE_TOP_LEVEL, document.get("modules")), (SHAPE_HEADER, header.get("modules"))):
        if isinstance(modules, list) and modules:
            yield shape, modules


def classify_manifest(document: Dict[str, Any], source: Path | str) -> Tuple[PackKind, PackVersion]:
    """Resolve the pack kind and version from either manifest layout."""

    for shape, modules in _module_lists(document):
        kind = None
        for module in modules:
            if isinstance(module, dict):
                kind = PackKind.from_module_type(module.get("type"))
                if kind:
                    break
        if kind is None:
            continue
        log_detail(f"{source}: kind '{kind.value}' from {shape}")
        raw_version = document["header"].get("version")
        if raw_version is None and isinstance(modules[0], dict):
            raw_version = modules[0].get("version")
        try:
            return kind, PackVersion.parse(raw_version)
        except ValueError as exc:
            raise UnknownManifestFormat(f"Manifest version is invalid: {source} ({exc})") from exc
    raise UnknownManifestFormat(f"Unknown pack manifest format: {source}")


def resolve_version(document: Dict[str, Any], source: Path | str = "") -> PackVersion | None:
    """Version of an installed manifest, or None when it cannot be read.

    Uses the same rules as ``classify_manifest`` so an installed pack reports
    the version that was registered for it.
    """
    try:
        return classify_manifest(document, source)[1]
    except UnknownManifestFormat:
        return None


def manifest_from_document(document: Dict[str, Any], source: Path | str) -> PackManifest:
    header = document["header"]
    pack_id = header.get("uuid")
    if not isinstance(pack_id, str) or not pack_id.strip():
        raise UnknownManifestFormat(f"Manifest header has no uuid: {source}")
    name = header.get("name")
    if not isinstance(name, str):
        name = ""
    kind, version = classify_manifest(document, source)
    return PackManifest(id=pack_id.strip(), name=name, version=version, kind=kind)


def find_manifest_member(names: Iterable[str]) -> str | None:
    """Pick the shallowest descriptor entry; ``manifest.json`` wins a tie."""

    best: Tuple[int, int, int] | None = None
    chosen: str | None = None
    for order, name in enumerate(names):
        member = PurePosixPath(name)
        if name.endswith("/") or member.name not in MANIFEST_NAMES:
            continue
        rank = (len(member.parts), MANIFEST_NAMES.index(member.name), order)
        if best is None or rank < best:
            best = rank
            chosen = name
    return chosen


def read_manifest(archive_path: Path) -> PackManifest:
    """Read and classify the descriptor embedded in a pack archive."""

    log_detail(f"Reading manifest data from {archive_path}")
    with zipfile.ZipFile(archive_path) as archive:
        member = find_manifest_member(archive.namelist())
        if member is None:
            raise ManifestNotFound(f"No manifest file exists in this pack: {archive_path}")
        raw = archive.read(member)
    document = parse_manifest_text(raw, f"{archive_path}:{member}")
    return manifest_from_document(document, archive_path)


__all__ = [
    "parse_manifest_text",
    "classify_manifest",
    "resolve_version",
    "manifest_from_document",
    "find_manifest_member",
    "read_manifest",
]
