import io
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from meal.domain.ShoppingList import ExportResult, ShoppingEntry
from meal.infra.paths import EXPORT_DIR
from meal.logic.shopping.list_builder import format_amount
from meal.utilities.constants import EXPORT_FILE_PREFIX, EXPORT_TIMESTAMP_FORMAT, SHOPPING_LIST_TITLE

logger = logging.getLogger(__name__)


def generate_pdf_for_shopping_list(entries: Sequence[ShoppingEntry], title: str = SHOPPING_LIST_TITLE) -> bytes:
    """Generate a simple PDF table: Item / Amount / Unit for the provided entries."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=40, leftMargin=40, topMargin=40, bottomMargin=40
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(title, styles["Title"]),
        Spacer(1, 16),
    ]

    data: List[List[str]] = [["Item", "Amount", "Unit"]]
    for entry in entries:
        data.append([entry.name, format_amount(entry.amount), entry.unit])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (1,0), (-1,-1), "CENTER"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()


class ShoppingListPdfExporter:
    """Writes the shopping list as a PDF file into ``export_dir``.

    An empty list creates no file and returns an ExportResult without a filename.
    I/O errors propagate to the caller.
    """

    def __init__(self, export_dir: Optional[Path] = None):
        self.export_dir = Path(export_dir) if export_dir is not None else EXPORT_DIR

    def export(self, entries: Sequence[ShoppingEntry]) -> ExportResult:
        if not entries:
            logger.info("Shopping list is empty; nothing to export")
            return ExportResult(filename=None, items=0)
        os.makedirs(self.export_dir, exist_ok=True)
        timestamp = datetime.now().strftime(EXPORT_TIMESTAMP_FORMAT)
        filename = f"{EXPORT_FILE_PREFIX}-{timestamp}.pdf"
        pdf_bytes = generate_pdf_for_shopping_list(entries)
        with open(self.export_dir / filename, "wb") as f:
            f.write(pdf_bytes)
        logger.info("Exported %d shopping items to %s", len(entries), filename)
        return ExportResult(filename=filename, items=len(entries))
