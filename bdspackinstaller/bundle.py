from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List

from .errors import NotABundle
from .file_utils import extract_archive, move_file, zip_directory
from .logging_utils import log_detail, log_warn
from .models import ADDON_SUFFIX, PACK_SUFFIX

PACKAGED_SUFFIXES = (PACK_SUFFIX, ADDON_SUFFIX)


def is_bundle(path: Path) -> bool:
    return path.suffix.lower() == ADDON_SUFFIX


def decompose_bundle(bundle_path: Path) -> List[Path]:
    """Split an addon into standalone pack files next to it.

    Packed entries are moved out as ``<addon>_<entry>``; pack folders are
    zipped to ``<addon>_<folder>.mcpack``. The addon file is deleted once
    every entry has been written, so this only ever runs once per addon.
    Nothing is rolled back when an entry fails.
    """

    if not bundle_path.is_file() or not is_bundle(bundle_path):
        raise NotABundle(f"The provided file is not an addon: {bundle_path}")
    log_detail(f"Extracting packs from {bundle_path}")

    addon_name = bundle_path.stem
    target_dir = bundle_path.parent
    results: List[Path] = []

    with tempfile.TemporaryDirectory(prefix=f"{addon_name}-") as temp_dir:
        workspace = Path(temp_dir)
        extract_archive(bundle_path, workspace)
        for entry in sorted(workspace.iterdir(), key=lambda p: p.name):
            log_detail(f"Extracting {entry.name} from {addon_name}")
            if entry.is_file() and entry.suffix.lower() in PACKAGED_SUFFIXES:
                destination = move_file(entry, target_dir / f"{addon_name}_{entry.name}")
            elif entry.is_dir():
                destination = zip_directory(entry, target_dir / f"{addon_name}_{entry.name}{PACK_SUFFIX}")
            else:
                log_warn(f"Skipped {entry.name} in {bundle_path.name}: not a pack.")
                continue
            results.append(destination)
            log_detail(f"Extracted {destination}", indent=2)

    bundle_path.unlink()
    return results


__all__ = ["decompose_bundle", "is_bundle"]
