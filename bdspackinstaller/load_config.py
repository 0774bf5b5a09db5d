from __future__ import annotations

import toml
from pathlib import Path

from .errors import ConstructionError
from .logging_utils import log_detail, log_warn
from .models import DEFAULT_ADDON_DIR, InstallerConfig

SERVER_PROPERTIES = "server.properties"
WORLD_NAME_KEY = "level-name"


def load_program_config(config_path: Path) -> InstallerConfig:
    """Load installer options from a TOML file.

    Recognised keys are ``addon_dir`` (the intake folder name inside the
    server root) and ``ignore_files`` (intake entries to leave alone).
    """

    if not config_path.exists():
        log_warn(f"Config file {config_path} not found. Proceeding with defaults.")
        return InstallerConfig()
    raw_text = config_path.read_text(encoding="utf-8")
    try:
        config = toml.loads(raw_text)
    except toml.TomlDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {config_path}") from exc

    addon_dir = config.get("addon_dir", DEFAULT_ADDON_DIR)
    ignore_files = config.get("ignore_files", [])
    if not isinstance(addon_dir, str) or not addon_dir.strip():
        raise ValueError(f"'addon_dir' must be a non-empty string in {config_path}")
    if not isinstance(ignore_files, list) or not all(isinstance(name, str) for name in ignore_files):
        raise ValueError(f"'ignore_files' must be a list of file names in {config_path}")
    return InstallerConfig(addon_dir=addon_dir.strip(), ignore_files=list(ignore_files))


def read_server_properties(properties_path: Path) -> dict[str, str]:
    properties: dict[str, str] = {}
    for raw_line in properties_path.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        separators = [pos for pos in (line.find("="), line.find(":")) if pos != -1]
        if not separators:
            continue
        split_at = min(separators)
        properties[line[:split_at].strip()] = line[split_at + 1 :].strip()
    return properties


def read_world_name(server_root: Path) -> str:
    """Return the ``level-name`` the server loads its world from."""

    property_file = server_root / SERVER_PROPERTIES
    log_detail(f"Reading world name from {property_file}")
    if not property_file.is_file():
        raise ConstructionError(f"Unable to locate server properties @ {property_file}")
    world_name = read_server_properties(property_file).get(WORLD_NAME_KEY, "")
    if not world_name:
        raise ConstructionError(f"Unable to retrieve {WORLD_NAME_KEY} from {property_file}")
    return world_name
