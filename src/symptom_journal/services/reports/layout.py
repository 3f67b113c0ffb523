"""
Page layout primitives for PDF reports.

Reports are laid out top-down on a fixed page with a vertical cursor
measured from the top edge. Whenever the cursor passes the page-break
threshold the next line starts on a fresh page.
"""

import io
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from symptom_journal.domain.catalog import CATEGORIES
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.utils.parameters import ReportConfig

logger = logging.getLogger(__name__)

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
LEADING_FACTOR = 1.2

LEFT_MARGIN = 50
INDENT = 70


def register_fonts(config: ReportConfig) -> tuple[str, str]:
    """
    Resolve the regular and bold fonts for a report.

    The built-in Helvetica pair only covers Latin-1. When ``font_file`` is
    configured, that TrueType font (and ``bold_font_file``, if given) is
    registered and used instead, so notes in other scripts render.

    Returns:
        (regular font name, bold font name).
    """
    if not config.font_file:
        return REGULAR_FONT, BOLD_FONT

    regular = _register_ttf(config.font_file)
    bold = _register_ttf(config.bold_font_file) if config.bold_font_file else regular
    return regular, bold


def _register_ttf(path: str) -> str:
    font_path = Path(path).expanduser()
    name = font_path.stem
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, str(font_path)))
        logger.debug(f"Registered font {name} from {font_path}")
    return name


class PageWriter:
    """
    A reportlab canvas with a top-down vertical cursor.

    ``y`` is the distance of the next line from the top of the page.
    """

    def __init__(self, config: ReportConfig, title: str = "") -> None:
        self.config = config
        self.width = config.page_width
        self.height = config.page_height
        self.regular_font, self.bold_font = register_fonts(config)
        self._buffer = io.BytesIO()
        self.canvas = canvas.Canvas(
            self._buffer,
            pagesize=(self.width, self.height),
            pageCompression=1 if config.page_compression else 0,
        )
        if title:
            self.canvas.setTitle(title)
        self.y: float = config.top_margin
        self.page_count = 1

    @property
    def at_top(self) -> bool:
        return self.y <= self.config.top_margin

    def pdf_y(self, y: float) -> float:
        """Convert a top-down coordinate to PDF user space."""
        return self.height - y

    def new_page(self) -> None:
        self.canvas.showPage()
        self.page_count += 1
        self.y = self.config.top_margin

    def ensure_room(self, threshold: float | None = None) -> None:
        """Start a new page if the cursor is past the threshold."""
        limit = self.config.page_break_threshold if threshold is None else threshold
        if self.y > limit:
            self.new_page()

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        bold: bool = False,
    ) -> None:
        """Draw one line whose top edge sits at top-down ``y``."""
        self.canvas.setFillColorRGB(0, 0, 0, alpha=1)
        self.canvas.setFont(self.bold_font if bold else self.regular_font, size)
        self.canvas.drawString(x, self.pdf_y(y + size), text)

    def text(
        self,
        text: str,
        x: float,
        size: float,
        bold: bool = False,
        advance: float = 0,
    ) -> None:
        """Draw a line at the cursor and move the cursor down by ``advance``."""
        self.ensure_room()
        self.draw_text(text, x, self.y, size, bold)
        self.y += advance

    def wrapped(
        self,
        text: str,
        x: float,
        size: float,
        max_width: float,
        bold: bool = False,
    ) -> float:
        """
        Word-wrap text to max_width and draw it at the cursor.

        The cursor advances by the wrapped height; long text continues on
        following pages.

        Returns:
            Height of the wrapped text.
        """
        font = self.bold_font if bold else self.regular_font
        lines = simpleSplit(text, font, size, max_width)
        leading = size * LEADING_FACTOR
        for line in lines:
            self.ensure_room()
            self.draw_text(line, x, self.y, size, bold)
            self.y += leading
        return len(lines) * leading

    def finish(self) -> bytes:
        """Close the document and return the PDF bytes."""
        self.canvas.save()
        data = self._buffer.getvalue()
        logger.debug(f"Rendered {self.page_count} page(s), {len(data)} bytes")
        return data


class EntryBlockStyle(BaseModel):
    """Font sizes and spacing for category blocks of one report type."""

    section_size: float
    section_advance: float
    symptom_size: float
    symptom_advance: float
    notes_size: float
    notes_gap: float
    label_size: float
    label_advance: float
    value_size: float
    value_gap: float
    content_width: float
    short_labels: bool = False
    break_before: frozenset[str] = frozenset()

    model_config = ConfigDict(frozen=True)


SINGLE_ENTRY_STYLE = EntryBlockStyle(
    section_size=18,
    section_advance=25,
    symptom_size=14,
    symptom_advance=20,
    notes_size=12,
    notes_gap=10,
    label_size=14,
    label_advance=20,
    value_size=12,
    value_gap=10,
    content_width=500,
)

DETAILED_ENTRY_STYLE = EntryBlockStyle(
    section_size=16,
    section_advance=20,
    symptom_size=12,
    symptom_advance=15,
    notes_size=10,
    notes_gap=5,
    label_size=12,
    label_advance=15,
    value_size=10,
    value_gap=5,
    content_width=450,
    short_labels=True,
)


def draw_entry_categories(page: PageWriter, entry: SymptomEntry, style: EntryBlockStyle) -> int:
    """
    Draw every visible category block of an entry.

    A block is skipped when all of its severities are 0 and all of its
    notes are empty. Within a block, a severity line is drawn only when
    the severity is above 0 and a notes line only when notes are present.

    Returns:
        Number of blocks drawn.
    """
    drawn = 0
    for category in CATEGORIES:
        if not category.is_visible(entry):
            continue

        if category.key in style.break_before and not page.at_top:
            page.new_page()

        title = category.short_title if style.short_labels else category.title
        page.text(title, LEFT_MARGIN, style.section_size, bold=True, advance=style.section_advance)

        for symptom in category.symptoms:
            label = symptom.short_label if style.short_labels else symptom.label
            severity = symptom.severity_of(entry)
            notes = symptom.notes_of(entry)

            if symptom.severity is not None:
                if severity > 0:
                    page.text(
                        f"{label}: {severity}/10",
                        INDENT,
                        style.symptom_size,
                        advance=style.symptom_advance,
                    )
                if notes:
                    page.wrapped(f"Notes: {notes}", INDENT, style.notes_size, style.content_width)
                    page.y += style.notes_gap
            elif notes:
                page.text(
                    f"{label}:", INDENT, style.label_size, bold=True, advance=style.label_advance
                )
                page.wrapped(notes, INDENT, style.value_size, style.content_width)
                page.y += style.value_gap

        drawn += 1

    return drawn
