from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook

from .logging_utils import log_error, log_info, log_ok, log_warn
from .models import InstallResult, InstallStatus

REPORT_HEADER = [
    "source",
    "name",
    "id",
    "kind",
    "version",
    "previous version",
    "status",
    "message",
]


def print_install_summary(results: Sequence[InstallResult]) -> None:
    if not results:
        log_info("No packs were processed.")
        return
    counts = Counter(result.status for result in results)
    log_info("Install summary:")
    for status in InstallStatus:
        if counts.get(status):
            log_info(f"{status.value}: {counts[status]}", indent=2)
    failures = [result for result in results if result.status is InstallStatus.FAILED]
    if not failures:
        log_ok("All packs processed without errors.")
        return
    log_warn(f"{len(failures)} pack(s) could not be installed:")
    for result in failures:
        log_error(f"{result.source.name}: {result.message}", indent=2)


def _build_result_rows(results: Sequence[InstallResult]) -> List[List[str]]:
    rows: List[List[str]] = []
    for result in results:
        manifest = result.manifest
        rows.append(
            [
                result.source.name,
                manifest.name if manifest else "",
                manifest.id if manifest else "",
                manifest.kind.value if manifest else "",
                str(manifest.version) if manifest else "",
                result.previous_version_label,
                result.status.value,
                result.message,
            ]
        )
    return rows


def export_report(output_path: Path, results: Sequence[InstallResult]) -> None:
    """Write an Excel workbook listing what happened to every pack."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    sheet = workbook.active
    if not sheet:
        sheet = workbook.create_sheet("packs")
    else:
        sheet.title = "packs"
    sheet.append(REPORT_HEADER)
    for row in _build_result_rows(results):
        sheet.append(row)

    workbook.save(output_path)
    workbook.close()


__all__ = ["print_install_summary", "export_report"]
