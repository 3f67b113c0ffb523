"""Tests for the command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from symptom_journal.cli.main import app

runner = CliRunner()


def write_config(tmp_path: Path) -> str:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f"""
storage:
  data_dir: "{tmp_path / 'data'}"
reports:
  timezone: "UTC"
  page_compression: false
export:
  output_dir: "{tmp_path / 'out'}"
logging:
  level: "DEBUG"
  file: null
  console: false
""",
        encoding="utf-8",
    )
    return str(config_file)


def stored_ids(tmp_path: Path) -> list[str]:
    data = json.loads((tmp_path / "data" / "symptom_entries.json").read_text(encoding="utf-8"))
    return [record["id"] for record in data]


def test_add_and_list(tmp_path: Path) -> None:
    """Test recording an entry and listing it."""
    config = write_config(tmp_path)

    result = runner.invoke(
        app,
        [
            "add",
            "--config-path",
            config,
            "--set",
            "headache_severity=5",
            "-s",
            "headache_notes=throbbing",
            "--when",
            "2026-10-18 09:00",
        ],
    )
    if result.exit_code != 0:
        raise AssertionError(f"add failed: {result.output}")

    listed = runner.invoke(app, ["list", "--config-path", config])

    if listed.exit_code != 0:
        raise AssertionError(f"list failed: {listed.output}")
    if "Oct 18, 2026" not in listed.output or "Headache: 5" not in listed.output:
        raise AssertionError(f"Unexpected listing: {listed.output}")


def test_add_rejects_unknown_field(tmp_path: Path) -> None:
    """Test that an unknown field fails without writing anything."""
    config = write_config(tmp_path)

    result = runner.invoke(app, ["add", "--config-path", config, "--set", "sleep_hours=7"])

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")
    if (tmp_path / "data" / "symptom_entries.json").exists():
        raise AssertionError("Nothing should be written")


def test_update_show_and_delete(tmp_path: Path) -> None:
    """Test editing, showing and deleting an entry by id."""
    config = write_config(tmp_path)
    runner.invoke(app, ["add", "--config-path", config, "--set", "cough_severity=2"])
    entry_id = stored_ids(tmp_path)[0]

    updated = runner.invoke(
        app, ["update", entry_id, "--config-path", config, "--set", "cough=dry and persistent"]
    )
    shown = runner.invoke(app, ["show", entry_id, "--config-path", config])

    if updated.exit_code != 0 or shown.exit_code != 0:
        raise AssertionError(f"update/show failed: {updated.output} {shown.output}")
    if "Cough Severity: 2/10" not in shown.output or "dry and persistent" not in shown.output:
        raise AssertionError(f"Unexpected show output: {shown.output}")

    deleted = runner.invoke(app, ["delete", entry_id, "--config-path", config])

    if "Deleted 1 entry(ies)" not in deleted.output:
        raise AssertionError(f"Unexpected delete output: {deleted.output}")
    if stored_ids(tmp_path):
        raise AssertionError("Entry should be gone from disk")


def test_export_csv_to_stdout(tmp_path: Path) -> None:
    """Test printing the CSV export."""
    config = write_config(tmp_path)
    runner.invoke(app, ["add", "--config-path", config, "--set", "fatigue_level=4"])

    result = runner.invoke(app, ["export-csv", "--config-path", config, "--stdout"])

    lines = result.stdout.strip().split("\n")
    if result.exit_code != 0:
        raise AssertionError(f"export-csv failed: {result.output}")
    if not lines[0].startswith("Date,Headache Severity,"):
        raise AssertionError(f"Unexpected header: {lines[0]}")
    if len(lines) != 2:
        raise AssertionError(f"Expected header and one row, got {lines}")


def test_export_csv_to_file(tmp_path: Path) -> None:
    """Test writing the CSV export to the output directory."""
    config = write_config(tmp_path)

    result = runner.invoke(app, ["export-csv", "--config-path", config])

    path = tmp_path / "out" / "symptom_entries.csv"
    if result.exit_code != 0 or not path.exists():
        raise AssertionError(f"CSV file not written: {result.output}")


def test_export_summary_pdf(tmp_path: Path) -> None:
    """Test writing a summary PDF under its suggested file name."""
    config = write_config(tmp_path)
    runner.invoke(app, ["add", "--config-path", config, "--set", "back_pain_severity=6"])

    result = runner.invoke(
        app, ["export-pdf", "--config-path", config, "--kind", "summary", "--period", "all"]
    )

    path = tmp_path / "out" / "SymptomReport-All Time.pdf"
    if result.exit_code != 0:
        raise AssertionError(f"export-pdf failed: {result.output}")
    if not path.read_bytes().startswith(b"%PDF-"):
        raise AssertionError("Expected a PDF file")


def test_export_custom_detailed_pdf(tmp_path: Path) -> None:
    """Test a detailed report over a custom day range."""
    config = write_config(tmp_path)
    runner.invoke(
        app, ["add", "--config-path", config, "-s", "mood_severity=3", "--when", "2026-09-15"]
    )

    result = runner.invoke(
        app,
        [
            "export-pdf",
            "--config-path",
            config,
            "--kind",
            "detailed",
            "--period",
            "custom",
            "--start",
            "2026-09-01",
            "--end",
            "2026-09-30",
        ],
    )

    path = tmp_path / "out" / "SymptomReport-9-1-26 to 9-30-26.pdf"
    if result.exit_code != 0:
        raise AssertionError(f"export-pdf failed: {result.output}")
    if b"Detailed Symptom Report - 9/1/26 to 9/30/26" not in path.read_bytes():
        raise AssertionError("Missing report title")


def test_custom_period_requires_days(tmp_path: Path) -> None:
    """Test that a custom period without days is rejected."""
    config = write_config(tmp_path)

    result = runner.invoke(app, ["summary", "--config-path", config, "--period", "custom"])

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")


def test_entry_pdf_requires_id(tmp_path: Path) -> None:
    """Test that an entry report needs an entry id."""
    config = write_config(tmp_path)

    result = runner.invoke(app, ["export-pdf", "--config-path", config, "--kind", "entry"])

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")


def test_draft_save_and_commit(tmp_path: Path) -> None:
    """Test building a draft over two saves and committing it."""
    config = write_config(tmp_path)

    runner.invoke(app, ["draft", "save", "--config-path", config, "-s", "reflux_severity=3"])
    runner.invoke(app, ["draft", "save", "--config-path", config, "-s", "reflux=after dinner"])
    shown = runner.invoke(app, ["draft", "show", "--config-path", config])
    committed = runner.invoke(app, ["draft", "commit", "--config-path", config])
    after = runner.invoke(app, ["draft", "show", "--config-path", config])

    if "No draft" in shown.output:
        raise AssertionError("Draft should exist before commit")
    if "Committed entry" not in committed.output:
        raise AssertionError(f"Unexpected commit output: {committed.output}")
    if "No draft" not in after.output:
        raise AssertionError("Draft should be cleared after commit")

    data = json.loads((tmp_path / "data" / "symptom_entries.json").read_text(encoding="utf-8"))
    if len(data) != 1 or data[0]["refluxSeverity"] != 3 or data[0]["reflux"] != "after dinner":
        raise AssertionError(f"Unexpected committed entry: {data}")


def test_missing_config_exits_with_error(tmp_path: Path) -> None:
    """Test that a missing configuration file ends with exit code 1."""
    result = runner.invoke(app, ["list", "--config-path", str(tmp_path / "absent.yaml")])

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")


def test_add_fails_when_entries_cannot_be_written(tmp_path: Path) -> None:
    """Test that add exits with an error when the entries file cannot be saved."""
    config = write_config(tmp_path)
    (tmp_path / "data" / "symptom_entries.json.tmp").mkdir(parents=True)

    result = runner.invoke(app, ["add", "--config-path", config, "-s", "fatigue_level=3"])

    if result.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {result.exit_code}")
    if "Added entry" in result.stdout:
        raise AssertionError("Success should not be reported")


def test_update_and_delete_fail_when_entries_cannot_be_written(tmp_path: Path) -> None:
    """Test that update and delete report a failed save."""
    config = write_config(tmp_path)
    runner.invoke(app, ["add", "--config-path", config, "-s", "mood_severity=2"])
    entry_id = stored_ids(tmp_path)[0]
    (tmp_path / "data" / "symptom_entries.json.tmp").mkdir()

    updated = runner.invoke(
        app, ["update", entry_id, "--config-path", config, "-s", "mood_severity=5"]
    )
    deleted = runner.invoke(app, ["delete", entry_id, "--config-path", config])

    if updated.exit_code != 1 or deleted.exit_code != 1:
        raise AssertionError(f"Expected failures, got {updated.exit_code}, {deleted.exit_code}")
    if stored_ids(tmp_path) != [entry_id]:
        raise AssertionError("Stored entries should be unchanged")


def test_draft_commit_failure_keeps_draft(tmp_path: Path) -> None:
    """Test that a failed commit exits with an error and keeps the draft."""
    config = write_config(tmp_path)
    runner.invoke(app, ["draft", "save", "--config-path", config, "-s", "cough_severity=4"])
    (tmp_path / "data" / "symptom_entries.json.tmp").mkdir()

    committed = runner.invoke(app, ["draft", "commit", "--config-path", config])
    shown = runner.invoke(app, ["draft", "show", "--config-path", config])

    if committed.exit_code != 1:
        raise AssertionError(f"Expected exit code 1, got {committed.exit_code}")
    if "No draft" in shown.output:
        raise AssertionError("Draft should survive a failed commit")
    if (tmp_path / "data" / "symptom_entries.json").exists():
        raise AssertionError("No entries file should have been written")


def test_draft_commit_without_draft(tmp_path: Path) -> None:
    """Test that committing with no draft is not an error."""
    config = write_config(tmp_path)

    result = runner.invoke(app, ["draft", "commit", "--config-path", config])

    if result.exit_code != 0 or "No draft" not in result.output:
        raise AssertionError(f"Unexpected result: {result.exit_code} {result.output}")
