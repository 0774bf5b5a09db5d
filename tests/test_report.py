from pathlib import Path

from openpyxl import load_workbook

from bdspackinstaller.models import InstallResult, InstallStatus, PackKind, PackManifest, PackVersion
from bdspackinstaller.report import REPORT_HEADER, export_report, print_install_summary


def sample_results():
    manifest = PackManifest(id="rp-1", name="Nice Pack", version=PackVersion(1, 1, 0), kind=PackKind.RESOURCES)
    return [
        InstallResult(
            source=Path("nice.mcpack"),
            status=InstallStatus.UPDATED,
            manifest=manifest,
            previous_versions=[PackVersion(1, 0, 0)],
            message="resource_packs/NicePack",
        ),
        InstallResult(source=Path("broken.mcpack"), status=InstallStatus.FAILED, message="File is not a zip file"),
    ]


def test_export_report_writes_one_row_per_result(tmp_path):
    output = tmp_path / "reports" / "install_report.xlsx"
    export_report(output, sample_results())

    workbook = load_workbook(output)
    sheet = workbook["packs"]
    rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    workbook.close()

    assert rows[0] == REPORT_HEADER
    assert rows[1] == [
        "nice.mcpack",
        "Nice Pack",
        "rp-1",
        "resources",
        "1.1.0",
        "1.0.0",
        "updated",
        "resource_packs/NicePack",
    ]
    assert rows[2][0] == "broken.mcpack"
    assert rows[2][6] == "failed"


def test_summary_lists_failures(capsys):
    print_install_summary(sample_results())
    out = capsys.readouterr().out
    assert "[info] updated: 1" in out
    assert "[info] failed: 1" in out
    assert "broken.mcpack: File is not a zip file" in out


def test_summary_without_results(capsys):
    print_install_summary([])
    assert "No packs were processed." in capsys.readouterr().out
