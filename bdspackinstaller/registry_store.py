from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .logging_utils import log_detail, log_warn
from .models import RegistryTarget, ServerLayout


@dataclass(slots=True)
class RegistryDocument:
    """One pack list JSON file held in memory. ``remove`` saves at once; callers adding entries call ``save``."""

    path: Path
    entries: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "RegistryDocument":
        if not path.exists():
            document = cls(path=path)
            document.save()
            log_detail(f"Created empty pack list {path}")
            return document

        try:
            data = json.loads(path.read_text(encoding="utf-8-sig"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            data = None
        if not isinstance(data, list):
            # An unreadable list is treated as "nothing installed".
            if path.stat().st_size:
                log_warn(f"Pack list {path} could not be read. Assuming no packs are installed.")
            data = []
        return cls(path=path, entries=data)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.entries, indent=2), encoding="utf-8")

    def find_index(self, key: str, value: str) -> int:
        for index, entry in enumerate(self.entries):
            if isinstance(entry, dict) and entry.get(key) == value:
                return index
        return -1

    def remove(self, key: str, value: str) -> bool:
        index = self.find_index(key, value)
        if index == -1:
            return False
        del self.entries[index]
        self.save()
        return True


@dataclass(slots=True)
class RegistryStore:
    server: RegistryDocument
    world_resources: RegistryDocument
    world_behavior: RegistryDocument

    @classmethod
    def load(cls, layout: ServerLayout) -> "RegistryStore":
        return cls(
            server=RegistryDocument.load(layout.server_packs_json),
            world_resources=RegistryDocument.load(layout.world_resources_json),
            world_behavior=RegistryDocument.load(layout.world_behaviors_json),
        )

    def document(self, target: RegistryTarget) -> RegistryDocument:
        if target is RegistryTarget.SERVER:
            return self.server
        if target is RegistryTarget.WORLD_RESOURCES:
            return self.world_resources
        return self.world_behavior


__all__ = ["RegistryDocument", "RegistryStore"]
