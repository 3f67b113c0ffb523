"""
Command-line interface for Symptom Journal.

Provides commands for recording entries, managing the draft, reviewing
period summaries, and exporting CSV and PDF reports.
"""

from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

import typer

from symptom_journal.domain.catalog import (
    HEADLINE_SYMPTOMS,
    FieldKind,
    field_kind,
    visible_categories,
)
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.infrastructure.storage.entry_store import EntryStore
from symptom_journal.services.aggregation import (
    Period,
    averages,
    describe_date_range,
    entries_for_period,
    period_title,
    trend_series,
)
from symptom_journal.services.csv_export import CSVExporter
from symptom_journal.services.output import OutputService
from symptom_journal.services.reports.builder import ReportBuilder, suggested_filename
from symptom_journal.utils.exceptions import StorageError, SymptomJournalError, ValidationError
from symptom_journal.utils.logging_config import get_logger, setup_logging
from symptom_journal.utils.parameters import ParameterLoader
from symptom_journal.utils.timezone_utils import (
    format_medium_date,
    parse_datetime,
    parse_day,
    utc_now,
)

app = typer.Typer(help="Symptom Journal - Daily symptom log with CSV and PDF export")
draft_app = typer.Typer(help="Manage the in-progress draft entry")
app.add_typer(draft_app, name="draft")

logger = get_logger(__name__)

RESERVED_FIELDS = {"id", "date"}

SERIES_TITLES = {
    Period.WEEK: "Daily Symptoms (Last 7 Days)",
    Period.MONTH: "Weekly Averages (Last 4 Weeks)",
}


class ReportKind(str, Enum):
    """PDF report types."""

    ENTRY = "entry"
    SUMMARY = "summary"
    DETAILED = "detailed"


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config())
    return param_loader


def open_store(param_loader: ParameterLoader) -> EntryStore:
    """Create the entry store and load persisted entries."""
    store = EntryStore(param_loader.get_storage_config())
    store.load()
    return store


def require_saved(store: EntryStore) -> None:
    """Fail when the last mutation did not reach disk."""
    if store.dirty:
        raise StorageError(f"Entries could not be written to {store.entries_path}")


def parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """
    Parse ``field=value`` pairs into entry field values.

    Severity fields are converted to integers; other fields stay text.

    Raises:
        ValidationError: If a pair is malformed or names an unknown field.
    """
    values: dict[str, Any] = {}
    for item in assignments:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValidationError(f"Expected field=value, got {item!r}")
        if name in RESERVED_FIELDS or name not in SymptomEntry.model_fields:
            raise ValidationError(f"Unknown field: {name}")

        if field_kind(name) == FieldKind.SEVERITY:
            try:
                values[name] = int(raw)
            except ValueError as e:
                raise ValidationError(f"{name} must be an integer, got {raw!r}") from e
        else:
            values[name] = raw
    return values


def parse_entry_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as e:
        raise ValidationError(f"Invalid entry id: {value!r}") from e


def apply_fields(
    base: SymptomEntry | None,
    assignments: list[str],
    when: str | None,
    timezone_str: str,
) -> SymptomEntry:
    """Return a new entry with the assignments and date applied to base."""
    data = base.model_dump() if base is not None else {}
    data.update(parse_assignments(assignments))
    if when:
        try:
            data["date"] = parse_datetime(when, timezone_str)
        except (ValueError, OverflowError) as e:
            raise ValidationError(f"Could not parse date {when!r}") from e
    return SymptomEntry.model_validate(data)


def resolve_days(
    period: Period, start: str | None, end: str | None
) -> tuple[date | None, date | None]:
    if period != Period.CUSTOM:
        return None, None
    if not start or not end:
        raise ValidationError("--start and --end are required for a custom period")
    try:
        return parse_day(start), parse_day(end)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse custom period {start!r} to {end!r}") from e


def fail(action: str, error: SymptomJournalError) -> typer.Exit:
    logger.error(f"{action} failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def entry_line(entry: SymptomEntry, timezone_str: str) -> str:
    reported = [
        f"{h.name}: {getattr(entry, h.field)}"
        for h in HEADLINE_SYMPTOMS
        if getattr(entry, h.field) > 0
    ]
    summary = ", ".join(reported) if reported else "-"
    return f"{entry.id}  {format_medium_date(entry.date, timezone_str)}  {summary}"


ConfigOption = typer.Option("config/config.yaml", help="Path to configuration file")
SetOption = typer.Option([], "--set", "-s", help="Field assignment, e.g. headache_severity=5")
DateOption = typer.Option(None, help="Entry date/time (default: now)")
PeriodOption = typer.Option(Period.MONTH, help="Period: week, month, year, all, custom")
StartOption = typer.Option(None, help="First day of a custom period")
EndOption = typer.Option(None, help="Last day of a custom period")


@app.command()
def add(
    config_path: str = ConfigOption,
    assignments: list[str] = SetOption,
    when: str | None = DateOption,
) -> None:
    """
    Record a new entry.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        entry = apply_fields(None, assignments, when, tz)
        store.add(entry)
        require_saved(store)
        typer.echo(f"Added entry {entry.id}")

    except SymptomJournalError as e:
        raise fail("Add", e) from e


@app.command()
def update(
    entry_id: str = typer.Argument(..., help="Id of the entry to update"),
    config_path: str = ConfigOption,
    assignments: list[str] = SetOption,
    when: str | None = DateOption,
) -> None:
    """
    Change fields of an existing entry.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        existing = store.get(parse_entry_id(entry_id))
        if existing is None:
            typer.echo(f"No entry with id {entry_id}")
            return

        store.update(apply_fields(existing, assignments, when, tz))
        require_saved(store)
        typer.echo(f"Updated entry {entry_id}")

    except SymptomJournalError as e:
        raise fail("Update", e) from e


@app.command()
def delete(
    entry_id: str = typer.Argument(..., help="Id of the entry to delete"),
    config_path: str = ConfigOption,
) -> None:
    """
    Delete an entry.
    """
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        before = len(store)
        store.delete(parse_entry_id(entry_id))
        require_saved(store)
        typer.echo(f"Deleted {before - len(store)} entry(ies)")

    except SymptomJournalError as e:
        raise fail("Delete", e) from e


@app.command("list")
def list_entries(
    config_path: str = ConfigOption,
    period: Period = typer.Option(Period.ALL, help="Period: week, month, year, all, custom"),
    start: str | None = StartOption,
    end: str | None = EndOption,
) -> None:
    """
    List entries for a period, newest first.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        start_day, end_day = resolve_days(period, start, end)
        entries = entries_for_period(store.entries, period, utc_now(), start_day, end_day, tz)

        if not entries:
            typer.echo("No entries")
            return
        for entry in entries:
            typer.echo(entry_line(entry, tz))

    except SymptomJournalError as e:
        raise fail("List", e) from e


@app.command()
def show(
    entry_id: str = typer.Argument(..., help="Id of the entry to show"),
    config_path: str = ConfigOption,
) -> None:
    """
    Show the reported symptoms of one entry.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        entry = store.get(parse_entry_id(entry_id))
        if entry is None:
            typer.echo(f"No entry with id {entry_id}")
            return

        typer.echo(f"Entry {entry.id} - {format_medium_date(entry.date, tz)}")
        for category in visible_categories(entry):
            typer.echo(f"\n{category.title}")
            for symptom in category.symptoms:
                severity = symptom.severity_of(entry)
                notes = symptom.notes_of(entry)
                if severity > 0:
                    typer.echo(f"  {symptom.label}: {severity}/10")
                if notes:
                    typer.echo(f"  {symptom.short_label} notes: {notes}")

    except SymptomJournalError as e:
        raise fail("Show", e) from e


@app.command()
def summary(
    config_path: str = ConfigOption,
    period: Period = PeriodOption,
    start: str | None = StartOption,
    end: str | None = EndOption,
) -> None:
    """
    Print averages and the trend series for a period.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        now = utc_now()
        start_day, end_day = resolve_days(period, start, end)
        entries = entries_for_period(store.entries, period, now, start_day, end_day, tz)

        typer.echo(f"{period_title(period, start_day, end_day)} Summary")
        typer.echo(f"Entries: {len(entries)}  {describe_date_range(entries, tz)}")
        if not entries:
            typer.echo("No data available")
            return

        means = averages(entries)
        for headline in HEADLINE_SYMPTOMS:
            typer.echo(f"  {headline.average_label}: {means[headline.field]}/10")

        typer.echo(SERIES_TITLES.get(period, "Monthly Averages (Last 12 Months)"))
        for point in trend_series(entries, period, now):
            values = ", ".join(
                f"{h.name} {point.averages[h.field]}" for h in HEADLINE_SYMPTOMS
            )
            typer.echo(f"  {format_medium_date(point.end, tz)} ({point.entry_count}): {values}")

    except SymptomJournalError as e:
        raise fail("Summary", e) from e


@app.command("export-csv")
def export_csv(
    config_path: str = ConfigOption,
    output_file: str | None = typer.Option(None, help="Override output file name"),
    stdout: bool = typer.Option(False, help="Print CSV instead of writing a file"),
) -> None:
    """
    Export all entries as CSV, in the order they were recorded.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = open_store(param_loader)

        content = CSVExporter(tz).to_csv(store.entries)
        if stdout:
            typer.echo(content)
            return

        path = OutputService(param_loader.get_export_config()).write_csv(content, output_file)
        typer.echo(f"Exported {len(store)} entries to {path}")

    except SymptomJournalError as e:
        raise fail("CSV export", e) from e


@app.command("export-pdf")
def export_pdf(
    config_path: str = ConfigOption,
    kind: ReportKind = typer.Option(ReportKind.SUMMARY, help="Report: entry, summary, detailed"),
    period: Period = PeriodOption,
    start: str | None = StartOption,
    end: str | None = EndOption,
    entry_id: str | None = typer.Option(None, help="Entry id for an entry report"),
    output_file: str | None = typer.Option(None, help="Override output file name"),
) -> None:
    """
    Export a PDF report.
    """
    try:
        param_loader = init_config(config_path)
        report_config = param_loader.get_report_config()
        tz = report_config.timezone
        store = open_store(param_loader)
        builder = ReportBuilder(report_config)

        if kind == ReportKind.ENTRY:
            if not entry_id:
                raise ValidationError("--entry-id is required for an entry report")
            entry = store.get(parse_entry_id(entry_id))
            if entry is None:
                raise ValidationError(f"No entry with id {entry_id}")
            data = builder.entry_report(entry)
            file_name = suggested_filename(format_medium_date(entry.date, tz))
        else:
            now = utc_now()
            start_day, end_day = resolve_days(period, start, end)
            title = period_title(period, start_day, end_day)
            entries = entries_for_period(store.entries, period, now, start_day, end_day, tz)

            if kind == ReportKind.SUMMARY:
                data = builder.summary_report(
                    title,
                    entries,
                    series=trend_series(entries, period, now),
                    series_title=SERIES_TITLES.get(period, "Monthly Averages (Last 12 Months)"),
                )
            else:
                data = builder.detailed_report(entries, f"Detailed Symptom Report - {title}")
            file_name = suggested_filename(title)

        output = OutputService(param_loader.get_export_config())
        path = output.write_pdf(data, output_file or file_name)
        typer.echo(f"Wrote {kind.value} report to {path}")

    except SymptomJournalError as e:
        raise fail("PDF export", e) from e


@app.command("force-save")
def force_save(config_path: str = ConfigOption) -> None:
    """
    Rewrite the entries file from the loaded collection.
    """
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        store.persist()
        require_saved(store)
        typer.echo(f"Saved {len(store)} entries")

    except SymptomJournalError as e:
        raise fail("Save", e) from e


@draft_app.command("save")
def draft_save(
    config_path: str = ConfigOption,
    assignments: list[str] = SetOption,
    when: str | None = DateOption,
) -> None:
    """
    Apply field changes to the draft, creating it if needed.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = EntryStore(param_loader.get_storage_config())

        draft = apply_fields(store.load_draft(), assignments, when, tz)
        if not store.save_draft(draft):
            raise StorageError(f"Draft could not be written to {store.draft_path}")
        typer.echo(f"Draft {draft.id} saved")

    except SymptomJournalError as e:
        raise fail("Draft save", e) from e


@draft_app.command("show")
def draft_show(config_path: str = ConfigOption) -> None:
    """
    Print the current draft.
    """
    try:
        param_loader = init_config(config_path)
        tz = param_loader.get_report_config().timezone
        store = EntryStore(param_loader.get_storage_config())

        draft = store.load_draft()
        typer.echo(entry_line(draft, tz) if draft else "No draft")

    except SymptomJournalError as e:
        raise fail("Draft show", e) from e


@draft_app.command("clear")
def draft_clear(config_path: str = ConfigOption) -> None:
    """
    Discard the current draft.
    """
    try:
        param_loader = init_config(config_path)
        EntryStore(param_loader.get_storage_config()).clear_draft()
        typer.echo("Draft cleared")

    except SymptomJournalError as e:
        raise fail("Draft clear", e) from e


@draft_app.command("commit")
def draft_commit(config_path: str = ConfigOption) -> None:
    """
    Add the draft to the journal and clear it.
    """
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        if store.load_draft() is None:
            typer.echo("No draft")
            return

        entry = store.commit_draft()
        if entry is None:
            raise StorageError(
                f"Draft kept, entries could not be written to {store.entries_path}"
            )
        typer.echo(f"Committed entry {entry.id}")

    except SymptomJournalError as e:
        raise fail("Draft commit", e) from e


if __name__ == "__main__":
    app()
