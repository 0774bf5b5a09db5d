import json
from pathlib import Path

import pytest

from bdspackinstaller.logging_utils import set_verbose

from .helpers import WORLD_NAME


@pytest.fixture(autouse=True)
def quiet_logging():
    set_verbose(False)
    yield
    set_verbose(False)


@pytest.fixture()
def server_root(tmp_path) -> Path:
    root = tmp_path / "bds"
    (root / "resource_packs").mkdir(parents=True)
    (root / "behavior_packs").mkdir()
    (root / "BDS-Addons").mkdir()
    (root / "valid_known_packs.json").write_text(json.dumps([{"file_version": 2}], indent=2), encoding="utf-8")
    (root / "server.properties").write_text(
        "# Minecraft server properties\nserver-name=Dedicated Server\n"
        f"gamemode=survival\nlevel-name={WORLD_NAME}\nlevel-seed=\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture()
def world_dir(server_root) -> Path:
    return server_root / "worlds" / WORLD_NAME


@pytest.fixture()
def addon_dir(server_root) -> Path:
    return server_root / "BDS-Addons"
