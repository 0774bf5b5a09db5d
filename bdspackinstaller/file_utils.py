from __future__ import annotations

import os
import shutil
import zipfile
from pathlib import Path

from .logging_utils import log_detail


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False when nothing was there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    else:
        return False
    log_detail(f"Removed {path}")
    return True


def extract_archive(archive_path: Path, destination: Path) -> None:
    """Extract every member of a zip-compatible archive, overwriting existing files."""
    ensure_directory(destination)
    with zipfile.ZipFile(archive_path) as archive:
        archive.extractall(destination)
    log_detail(f"Extracted {archive_path.name} to {destination}")


def zip_directory(folder: Path, destination: Path) -> Path:
    """Compress the contents of ``folder`` so its children sit at the archive root."""
    ensure_directory(destination.parent)
    if destination.exists():
        destination.unlink()
    with zipfile.ZipFile(destination, "w", zipfile.ZIP_DEFLATED) as archive:
        for root, dirs, files in os.walk(folder):
            dirs.sort()
            for name in sorted(files):
                file_path = Path(root) / name
                archive.write(file_path, file_path.relative_to(folder).as_posix())
    return destination


def move_file(source: Path, destination: Path) -> Path:
    ensure_directory(destination.parent)
    if destination.exists():
        remove_path(destination)
    shutil.move(str(source), str(destination))
    return destination
