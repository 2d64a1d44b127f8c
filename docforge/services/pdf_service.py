"""Service for rendering proposal text to PDF using fpdf2."""

from datetime import datetime, timezone
from typing import Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


def to_latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1; unmappable characters become '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


class PDFProposalService:
    """Renders a proposal as a title page followed by its body text."""

    def __init__(self, font_family: str = "helvetica"):
        self.font_family = font_family

    def generate_pdf(self, title: str, content: str, generated_at: Optional[datetime] = None) -> bytes:
        """Generate a PDF and return its bytes."""
        generated_at = generated_at or datetime.now(timezone.utc)

        pdf = FPDF(orientation="portrait", unit="mm", format="A4")
        pdf.set_auto_page_break(auto=True, margin=15)

        # Cover page
        pdf.add_page()
        pdf.set_y(80)
        pdf.set_font(self.font_family, "B", 28)
        pdf.set_text_color(0, 51, 102)
        pdf.multi_cell(0, 14, to_latin1(title), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(10)
        pdf.set_font(self.font_family, "", 12)
        pdf.set_text_color(85, 85, 85)
        pdf.cell(
            0, 10, f"Date: {generated_at.strftime('%B %d, %Y')}",
            align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )

        # Body
        pdf.add_page()
        pdf.set_font(self.font_family, "", 11)
        pdf.set_text_color(68, 68, 68)
        pdf.multi_cell(0, 7, to_latin1(content), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        data = bytes(pdf.output())
        LOGGER.info(f"Rendered proposal PDF ({len(data)} bytes, {pdf.page_no()} pages)")
        return data
