"""
Report builder for PDF exports.

Produces three documents on US-Letter pages: a single-entry report, a
period summary with trend charts, and a detailed report with one entry
per page. Each is a single pass over a fixed section order.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from symptom_journal.domain.catalog import HEADLINE_FIELDS, HEADLINE_SYMPTOMS
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.services.aggregation import SeriesPoint, averages, sort_entries
from symptom_journal.services.reports.charts import draw_bar_chart, draw_series_chart
from symptom_journal.services.reports.layout import (
    DETAILED_ENTRY_STYLE,
    INDENT,
    LEFT_MARGIN,
    SINGLE_ENTRY_STYLE,
    PageWriter,
    draw_entry_categories,
)
from symptom_journal.utils.exceptions import ReportError
from symptom_journal.utils.parameters import ReportConfig
from symptom_journal.utils.timezone_utils import (
    format_full_date,
    format_medium_date,
    format_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "No data available for this period."


def suggested_filename(title: str) -> str:
    """File name offered to the share/save collaborator for a PDF report."""
    return f"SymptomReport-{title.replace('/', '-')}.pdf"


class ReportBuilder:
    """
    Builder for paginated PDF reports.

    Each method returns the finished document as bytes.
    """

    def __init__(self, config: ReportConfig | None = None) -> None:
        """
        Initialize report builder.

        Args:
            config: Report layout configuration.
        """
        self.config = config or ReportConfig()
        self.tz = self.config.timezone
        self.entry_style = SINGLE_ENTRY_STYLE.model_copy(
            update={"break_before": frozenset(self.config.always_break_before)}
        )

    def entry_report(self, entry: SymptomEntry) -> bytes:
        """
        Render the single-entry report.

        Title and date are always drawn; category blocks with nothing
        reported are left out.

        Raises:
            ReportError: If rendering fails.
        """
        try:
            page = PageWriter(self.config, title="Symptom Log Entry")
            page.text("Symptom Log Entry", LEFT_MARGIN, 24, bold=True, advance=40)
            page.text(
                f"Date: {format_full_date(entry.date, self.tz)}", LEFT_MARGIN, 16, advance=30
            )
            draw_entry_categories(page, entry, self.entry_style)
            return page.finish()
        except Exception as e:
            raise ReportError(f"Failed to render entry report: {e}") from e

    def summary_report(
        self,
        period: str,
        entries: Sequence[SymptomEntry],
        series: Sequence[SeriesPoint] | None = None,
        series_title: str = "Symptom Trends",
    ) -> bytes:
        """
        Render the summary report for a period.

        Args:
            period: Period name shown in the title (e.g. "Month").
            entries: Entries of the period.
            series: Optional trend series drawn as a line chart.
            series_title: Title of the line chart.

        Raises:
            ReportError: If rendering fails.
        """
        title = f"Symptom Summary Report - {period}"
        logger.info(f"Generating summary report for {period} with {len(entries)} entries")

        try:
            page = PageWriter(self.config, title=title)
            page.text(title, LEFT_MARGIN, 24, bold=True, advance=40)
            page.text("Summary Statistics", LEFT_MARGIN, 18, bold=True, advance=30)
            page.text(f"Total Entries: {len(entries)}", INDENT, 14, advance=20)

            if not entries:
                page.text(NO_DATA_TEXT, INDENT, 14, advance=20)
                return page.finish()

            means = averages(entries, HEADLINE_FIELDS)
            for headline in HEADLINE_SYMPTOMS:
                page.text(
                    f"{headline.average_label}: {means[headline.field]}/10",
                    INDENT,
                    14,
                    advance=20,
                )
            page.y += 20

            page.ensure_room(self.config.chart_break_threshold)
            page.y = draw_bar_chart(page, entries, page.y, self.config.chart_max_entries)

            if self.config.include_series_chart and series:
                page.ensure_room(self.config.chart_break_threshold)
                page.y = draw_series_chart(page, series, page.y, series_title, self.tz)

            self._draw_entry_list(page, entries)
            return page.finish()
        except Exception as e:
            raise ReportError(f"Failed to render summary report: {e}") from e

    def _draw_entry_list(self, page: PageWriter, entries: Sequence[SymptomEntry]) -> None:
        page.text("Individual Entries", LEFT_MARGIN, 18, bold=True, advance=30)

        for entry in sort_entries(entries, descending=True):
            page.text(format_medium_date(entry.date, self.tz), INDENT, 14, bold=True, advance=20)

            reported = [
                f"{h.name}: {getattr(entry, h.field)}"
                for h in HEADLINE_SYMPTOMS
                if getattr(entry, h.field) > 0
            ]
            if reported:
                page.wrapped(", ".join(reported), INDENT + 20, 12, 450)
            page.y += 15

    def detailed_report(
        self,
        entries: Sequence[SymptomEntry],
        title: str,
        generated_at: datetime | None = None,
    ) -> bytes:
        """
        Render the detailed report: every entry, newest first, one per page.

        The title and generation time appear on the first page only.

        Args:
            entries: Entries to include.
            title: Report title.
            generated_at: Generation time shown under the title.

        Raises:
            ReportError: If rendering fails.
        """
        generated_at = generated_at or utc_now()
        logger.info(f"Generating detailed report with {len(entries)} entries")

        try:
            page = PageWriter(self.config, title=title)
            page.text(title, LEFT_MARGIN, 20, bold=True, advance=30)
            page.text(
                f"Generated: {format_timestamp(generated_at, self.tz)}",
                LEFT_MARGIN,
                12,
                advance=40,
            )

            if not entries:
                page.text(NO_DATA_TEXT, LEFT_MARGIN, 14, advance=20)
                return page.finish()

            for index, entry in enumerate(sort_entries(entries, descending=True)):
                if index > 0:
                    page.new_page()
                page.text(
                    f"Entry for: {format_full_date(entry.date, self.tz)}",
                    LEFT_MARGIN,
                    18,
                    bold=True,
                    advance=30,
                )
                draw_entry_categories(page, entry, DETAILED_ENTRY_STYLE)

            return page.finish()
        except Exception as e:
            raise ReportError(f"Failed to render detailed report: {e}") from e
