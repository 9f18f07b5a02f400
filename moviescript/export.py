"""PDF export: page layout and file writing.

Layout works in A4 millimetres with y growing down the page, and only
needs a wrap function that splits text into lines of a given width. The
reportlab canvas is only touched when the finished pages are written.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .models import Document, LayoutFailure, StorageFailure


logger = logging.getLogger(__name__)

Wrap = Callable[[str, float], List[str]]

UNTITLED = "Untitled Script"

TOP = 20
LEFT = 20
INDENT = 25
CENTER = 105
WRAP_WIDTH = 170
LINE_PITCH = 7
PAGE_LIMIT = 270
DIALOGUE_LIMIT = 250

TITLE_SIZE = 20
HEADING_SIZE = 14
BODY_SIZE = 12
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class TextBlock:
    x: float
    y: float
    text: str
    size: int = BODY_SIZE
    bold: bool = False
    align: str = "left"


@dataclass
class Page:
    blocks: List[TextBlock] = field(default_factory=list)


class _Cursor:
    def __init__(self):
        self.pages = [Page()]
        self.y = TOP

    def new_page(self):
        self.pages.append(Page())
        self.y = TOP

    def break_past(self, limit: int):
        if self.y > limit:
            self.new_page()

    def put(self, x: float, text: str, size: int = BODY_SIZE, bold: bool = False, align: str = "left"):
        self.pages[-1].blocks.append(TextBlock(x, self.y, text, size, bold, align))

    def heading(self, text: str, advance: int):
        self.break_past(PAGE_LIMIT)
        self.put(LEFT, text, HEADING_SIZE, bold=True)
        self.y += advance

    def lines(self, x: float, lines: List[str]):
        for line in lines:
            self.break_past(PAGE_LIMIT)
            self.put(x, line)
            self.y += LINE_PITCH


def _wrap(wrap: Wrap, text: str) -> List[str]:
    try:
        return list(wrap(text, WRAP_WIDTH))
    except Exception as e:
        raise LayoutFailure(f"Could not lay out text for export: {e}") from e


def paginate(doc: Document, wrap: Wrap) -> List[Page]:
    """Lay the script out on fixed-size pages."""
    cursor = _Cursor()

    cursor.put(CENTER, doc.title or UNTITLED, TITLE_SIZE, bold=True, align="center")
    cursor.y += 15

    if doc.scenario:
        cursor.heading("SCENARIO", 10)
        cursor.lines(LEFT, _wrap(wrap, doc.scenario))
        cursor.y += 10

    names = [name for name in doc.characters if name.strip()]
    if names:
        cursor.heading("CHARACTERS", 10)
        for name in names:
            cursor.break_past(PAGE_LIMIT)
            cursor.put(INDENT, f"• {name}")
            cursor.y += LINE_PITCH
        cursor.y += 5

    spoken = [dialogue for dialogue in doc.dialogues if dialogue.text.strip()]
    if spoken:
        cursor.heading("DIALOGUES", 15)
        for dialogue in spoken:
            cursor.break_past(DIALOGUE_LIMIT)
            cursor.put(LEFT, f"{dialogue.character_name.upper()}:", bold=True)
            cursor.y += LINE_PITCH
            cursor.lines(INDENT, _wrap(wrap, dialogue.text.strip()))
            cursor.y += 10

    return cursor.pages


def export_filename(title: str) -> str:
    stem = re.sub(r"[^a-z0-9]", "_", title or UNTITLED, flags=re.IGNORECASE).lower()
    return f"{stem}_script.pdf"


def reportlab_wrap(text: str, max_width: float) -> List[str]:
    """Wrap body text as Helvetica 12pt; max_width is in millimetres."""
    lines = []
    for paragraph in text.split("\n"):
        lines.extend(simpleSplit(paragraph, BODY_FONT, BODY_SIZE, max_width * mm) or [""])
    return lines


def render_pdf(pages: List[Page], title: str = "") -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(title or UNTITLED)
    page_height = A4[1]
    for page in pages:
        for block in page.blocks:
            pdf.setFont(BOLD_FONT if block.bold else BODY_FONT, block.size)
            x, y = block.x * mm, page_height - block.y * mm
            if block.align == "center":
                pdf.drawCentredString(x, y, block.text)
            else:
                pdf.drawString(x, y, block.text)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def write_pdf(doc: Document, directory: Path, wrap: Wrap = reportlab_wrap) -> Path:
    """Export a script to `directory`; nothing is written if layout fails."""
    pages = paginate(doc, wrap)
    data = render_pdf(pages, doc.title)
    path = Path(directory) / export_filename(doc.title)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise StorageFailure(f"Could not write {path}: {e}") from e
    logger.info("Exported %d page(s) to %s", len(pages), path)
    return path
