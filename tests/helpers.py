from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Sequence

WORLD_NAME = "Bedrock level"


def manifest_payload(
    pack_id: str,
    name: str,
    version: Sequence[int] = (1, 0, 0),
    kind: str = "resources",
    shape: str = "modules",
) -> Dict[str, Any]:
    module = {"type": "resources" if kind == "resources" else "data", "uuid": f"{pack_id}-module", "version": list(version)}
    header: Dict[str, Any] = {"name": name, "uuid": pack_id, "version": list(version)}
    if shape == "header":
        header["modules"] = [module]
        return {"format_version": 1, "header": header}
    return {"format_version": 2, "header": header, "modules": [module]}


def archive_bytes(files: Mapping[str, str | bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def write_archive(path: Path, files: Mapping[str, str | bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(archive_bytes(files))
    return path


def pack_files(payload: Dict[str, Any], prefix: str = "", extra: Mapping[str, str] | None = None) -> Dict[str, str]:
    files = {f"{prefix}manifest.json": json.dumps(payload, indent=2)}
    files[f"{prefix}pack_icon.png"] = "not really a png"
    for name, content in (extra or {}).items():
        files[f"{prefix}{name}"] = content
    return files


def write_pack(path: Path, pack_id: str, name: str, version: Sequence[int] = (1, 0, 0), kind: str = "resources") -> Path:
    return write_archive(path, pack_files(manifest_payload(pack_id, name, version, kind)))


def write_installed(directory: Path, payload: Dict[str, Any], manifest_name: str = "manifest.json") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / manifest_name).write_text(json.dumps(payload), encoding="utf-8")
    return directory


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def entries_with(entries: Iterable[Dict[str, Any]], key: str, value: str) -> list[Dict[str, Any]]:
    return [entry for entry in entries if isinstance(entry, dict) and entry.get(key) == value]
