"""
Trend charts drawn directly on a report page.

The bar chart shows the most recent entries as three adjacent bars per
slot (headache, fatigue, back pain) against a fixed 0-10 scale. The series
chart plots sparse bucketed averages with x positions proportional to
time.
"""

from collections.abc import Sequence

from reportlab.lib import colors

from symptom_journal.domain.catalog import BACK_PAIN, FATIGUE, HEADACHE, MOOD, Headline
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.services.aggregation import SeriesPoint, sort_entries
from symptom_journal.services.reports.layout import INDENT, PageWriter
from symptom_journal.utils.timezone_utils import make_timezone_aware

CHART_X = INDENT
CHART_WIDTH = 400
CHART_HEIGHT = 120
SCALE_MAX = 10
BAR_ALPHA = 0.7

BAR_SERIES: tuple[tuple[Headline, colors.Color], ...] = (
    (HEADACHE, colors.red),
    (FATIGUE, colors.orange),
    (BACK_PAIN, colors.purple),
)

LINE_SERIES: tuple[tuple[Headline, colors.Color], ...] = BAR_SERIES + ((MOOD, colors.blue),)


def _scaled(value: int) -> float:
    clamped = max(0, min(SCALE_MAX, value))
    return clamped / SCALE_MAX * CHART_HEIGHT


def _draw_frame(page: PageWriter, title: str, y: float) -> float:
    """Draw title, border, gridlines and y-axis labels. Returns the chart top."""
    c = page.canvas
    page.draw_text(title, CHART_X, y, 16, bold=True)
    top = y + 20
    bottom = top + CHART_HEIGHT

    c.setStrokeColor(colors.lightgrey)
    c.setLineWidth(1.0)
    c.rect(CHART_X, page.pdf_y(bottom), CHART_WIDTH, CHART_HEIGHT, stroke=1, fill=0)

    c.setLineWidth(0.5)
    step = CHART_HEIGHT / SCALE_MAX
    for i in range(1, SCALE_MAX):
        gy = page.pdf_y(top + step * i)
        c.line(CHART_X, gy, CHART_X + CHART_WIDTH, gy)

    for i in range(SCALE_MAX + 1):
        label_y = bottom - step * i
        page.draw_text(str(i), CHART_X - 20, label_y - 5, 10)

    return top


def _draw_legend(
    page: PageWriter, series: Sequence[tuple[Headline, colors.Color]], y: float
) -> None:
    c = page.canvas
    for index, (headline, color) in enumerate(series):
        x = CHART_X + index * 100
        c.setFillColor(color, alpha=BAR_ALPHA)
        c.rect(x, page.pdf_y(y + 10), 10, 10, stroke=0, fill=1)
        page.draw_text(headline.name, x + 14, y, 10)


def draw_bar_chart(
    page: PageWriter,
    entries: Sequence[SymptomEntry],
    y: float,
    max_entries: int = 10,
    title: str = "Symptom Severity Trends",
) -> float:
    """
    Draw the per-entry bar chart with its top edge at ``y``.

    Args:
        page: Target page.
        entries: Entries of the period, in any order.
        y: Top-down position of the chart title.
        max_entries: Number of most recent entries shown.
        title: Chart title.

    Returns:
        Cursor position below the legend.
    """
    c = page.canvas
    top = _draw_frame(page, title, y)
    bottom = top + CHART_HEIGHT

    recent = sort_entries(entries, descending=False)[-max_entries:]
    if recent:
        slot = CHART_WIDTH / len(recent)
        sub = slot / len(BAR_SERIES)
        for index, entry in enumerate(recent):
            for offset, (headline, color) in enumerate(BAR_SERIES):
                height = _scaled(getattr(entry, headline.field))
                if height <= 0:
                    continue
                x = CHART_X + index * slot + offset * sub + 1
                c.setFillColor(color, alpha=BAR_ALPHA)
                c.rect(x, page.pdf_y(bottom), max(sub - 2, 1), height, stroke=0, fill=1)

    legend_y = bottom + 15
    _draw_legend(page, BAR_SERIES, legend_y)
    return legend_y + 30


def _point_label(point: SeriesPoint, timezone_str: str) -> str:
    local = make_timezone_aware(point.end, timezone_str)
    return f"{local:%b} {local.day}"


def draw_series_chart(
    page: PageWriter,
    points: Sequence[SeriesPoint],
    y: float,
    title: str,
    timezone_str: str = "UTC",
) -> float:
    """
    Draw a line chart of a sparse trend series with its top edge at ``y``.

    Points are placed by their bucket end time, so missing buckets show
    as wider gaps rather than as zero values.

    Returns:
        Cursor position below the legend.
    """
    c = page.canvas
    top = _draw_frame(page, title, y)
    bottom = top + CHART_HEIGHT
    pad = 10

    if points:
        first = points[0].end.timestamp()
        span = points[-1].end.timestamp() - first
        usable = CHART_WIDTH - 2 * pad

        def x_of(point: SeriesPoint) -> float:
            if span <= 0:
                return CHART_X + CHART_WIDTH / 2
            return CHART_X + pad + (point.end.timestamp() - first) / span * usable

        for headline, color in LINE_SERIES:
            coords = [
                (x_of(p), page.pdf_y(bottom - _scaled(p.averages.get(headline.field, 0))))
                for p in points
            ]
            c.setStrokeColor(color)
            c.setFillColor(color)
            c.setLineWidth(1.5)
            if len(coords) > 1:
                path = c.beginPath()
                path.moveTo(*coords[0])
                for cx, cy in coords[1:]:
                    path.lineTo(cx, cy)
                c.drawPath(path, stroke=1, fill=0)
            for cx, cy in coords:
                c.circle(cx, cy, 2, stroke=0, fill=1)

        for point in points:
            page.draw_text(_point_label(point, timezone_str), x_of(point) - 12, bottom + 3, 8)

    legend_y = bottom + 18
    _draw_legend(page, LINE_SERIES, legend_y)
    return legend_y + 30
