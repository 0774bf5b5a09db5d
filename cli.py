from __future__ import annotations

import argparse
from pathlib import Path

from bdspackinstaller import (
    ConstructionError,
    PackInstaller,
    export_report,
    load_program_config,
    print_install_summary,
)
from bdspackinstaller.file_utils import ensure_directory
from bdspackinstaller.logging_utils import log_info, set_verbose
from bdspackinstaller.models import REQUIRED_SERVER_FILES


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Install every .mcpack and .mcaddon placed in the server's addon folder "
            "to a Bedrock Dedicated Server and its active world."
        ),
        epilog='Example: bds-pack-installer "C:\\Program Files\\BedrockServer"',
    )
    parser.add_argument(
        "server",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Path to the root of the Bedrock Dedicated Server (defaults to the current directory).",
    )
    parser.add_argument(
        "-r",
        "--remove-existing",
        action="store_true",
        default=False,
        help="Uninstall every pack saved to the world before installing. Only recommended if facing issues.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Print detailed information about each install step.",
    )
    parser.add_argument(
        "--config-path",
        type=Path,
        default=Path("config.toml"),
        help="Path to the program configuration TOML file.",
    )
    parser.add_argument(
        "--export-path",
        type=Path,
        default=Path(""),
        help="Path to save the install report Excel file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    set_verbose(args.verbose)
    log_info("Running Bedrock Dedicated Server Addon Installer...")

    server_root = args.server.expanduser().resolve()
    if not server_root.exists():
        raise SystemExit(f"The provided path does not exist: {server_root}")
    for name in REQUIRED_SERVER_FILES:
        if not (server_root / name).exists():
            raise SystemExit(
                "Required files/folders are missing. Please provide a path to the root of a Bedrock Server.\n"
                f"Missing file: {name}\n"
                f"Provided path: {server_root}"
            )

    try:
        config = load_program_config(args.config_path.expanduser())
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    addon_path = server_root / config.addon_dir
    if not addon_path.exists():
        ensure_directory(addon_path)
        log_info("It looks like this may be your first time using the installer.")
        log_info("Place all of your packs in the addon folder and run the script again.")
        log_info(f"Addon location: {addon_path}")
        return

    try:
        installer = PackInstaller(server_root, config)
    except ConstructionError as exc:
        raise SystemExit(str(exc)) from exc

    results = installer.install_all(remove_existing=args.remove_existing)
    print_install_summary(results)

    export_path = args.export_path
    if not export_path == Path(""):
        if export_path.suffix.lower() != ".xlsx":
            export_path = export_path / "install_report.xlsx"
        export_report(output_path=export_path, results=results)
        log_info(f"Report saved to {export_path}")


if __name__ == "__main__":
    main()
