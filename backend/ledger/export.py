"""XLSX and PDF renderings of a printable party statement."""

from io import BytesIO
from typing import Optional
import logging
import os

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from fpdf.errors import FPDFUnicodeEncodingException
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ledger.exceptions import StatementExportError
from schemas.ledgers import PrintableStatement

logger = logging.getLogger(__name__)

COLUMNS = ["Date", "Type", "Invoice No.", "Particulars", "DR Amount", "CR Amount", "Balance"]
HEADER_FILL = PatternFill(start_color="D9EAD3", end_color="D9EAD3", fill_type="solid")


def statement_to_xlsx(statement: PrintableStatement) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Ledger"

    ws.append([statement.business_name])
    ws.append([statement.business_address])
    ws.append([statement.title])
    ws.append([statement.date_range_label])
    ws.append(["Opening Balance", statement.opening_balance])
    ws.append([])
    ws["A1"].font = Font(bold=True, size=14)
    ws["A3"].font = Font(bold=True)

    ws.append(COLUMNS)
    header_row = ws.max_row
    for col_idx in range(1, len(COLUMNS) + 1):
        cell = ws.cell(row=header_row, column=col_idx)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")

    for row in statement.rows:
        ws.append([row.date, row.type, row.reference_number, row.particulars, row.debit, row.credit, row.balance])

    ws.append(["Total", "", "", "", statement.totals.debit, statement.totals.credit, statement.totals.closing_balance])
    for col_idx in range(1, len(COLUMNS) + 1):
        ws.cell(row=ws.max_row, column=col_idx).font = Font(bold=True)

    for col_idx in range(5, len(COLUMNS) + 1):
        for row_idx in range(header_row + 1, ws.max_row + 1):
            ws.cell(row=row_idx, column=col_idx).alignment = Alignment(horizontal="right")

    for col_idx, width in enumerate([14, 22, 16, 36, 16, 16, 20], start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


# Checked in order after PDF_FONT_PATH; the first file that exists is embedded
SYSTEM_UNICODE_FONTS = [
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
]
UNICODE_FAMILY = "StatementSans"
CORE_FAMILY = "Helvetica"


def unicode_font_path() -> Optional[str]:
    """TTF used for the PDF body, or None to fall back to the Latin-1 core font."""
    for path in [os.getenv("PDF_FONT_PATH", "")] + SYSTEM_UNICODE_FONTS:
        if path and os.path.isfile(path):
            return path
    return None


class StatementPDF(FPDF):
    def __init__(self, statement: PrintableStatement):
        super().__init__(orientation="L")
        self.statement = statement
        self.text_family = CORE_FAMILY
        font_path = unicode_font_path()
        if font_path:
            # one face serves every style; bold and italic are cosmetic here
            for style in ("", "B", "I"):
                self.add_font(UNICODE_FAMILY, style, font_path)
            self.text_family = UNICODE_FAMILY
            logger.debug(f"PDF statement using font {font_path}")

    def use_font(self, style: str = "", size: int = 10):
        self.set_font(self.text_family, style, size)

    def header(self):
        self.use_font("B", 14)
        self.cell(0, 8, self.statement.business_name, align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.use_font("", 10)
        self.cell(0, 6, self.statement.business_address, align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.use_font("I", 8)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")


WIDTHS = [28, 38, 30, 80, 32, 32, 37]


def _render_pdf(statement: PrintableStatement) -> bytes:
    pdf = StatementPDF(statement)
    pdf.add_page()

    pdf.use_font("B", 12)
    pdf.cell(0, 8, statement.title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.use_font("", 10)
    pdf.cell(0, 6, statement.date_range_label, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    if statement.pan_number:
        pdf.cell(0, 6, f"PAN: {statement.pan_number}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 6, f"Opening Balance ({statement.currency_label}): {statement.opening_balance}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    pdf.use_font("B", 10)
    for title, width in zip(COLUMNS, WIDTHS):
        pdf.cell(width, 8, title, border=1, align="C")
    pdf.ln()

    pdf.use_font("", 9)
    for row in statement.rows:
        values = [row.date, row.type, row.reference_number, row.particulars[:48], row.debit, row.credit, row.balance]
        for idx, (value, width) in enumerate(zip(values, WIDTHS)):
            pdf.cell(width, 7, value, border=1, align="R" if idx >= 4 else "L")
        pdf.ln()

    pdf.use_font("B", 9)
    pdf.cell(sum(WIDTHS[:4]), 8, "Total", border=1, align="R")
    pdf.cell(WIDTHS[4], 8, statement.totals.debit, border=1, align="R")
    pdf.cell(WIDTHS[5], 8, statement.totals.credit, border=1, align="R")
    pdf.cell(WIDTHS[6], 8, statement.totals.closing_balance, border=1, align="R")
    pdf.ln(12)

    pdf.use_font("", 10)
    pdf.multi_cell(0, 6, f"Closing balance in words: {statement.closing_balance_in_words}")

    return bytes(pdf.output())


def statement_to_pdf(statement: PrintableStatement) -> BytesIO:
    try:
        return BytesIO(_render_pdf(statement))
    except FPDFUnicodeEncodingException as e:
        raise StatementExportError(
            "Statement contains characters the PDF font cannot encode; "
            "set PDF_FONT_PATH to a Unicode TTF font or export as xlsx",
            stage="export:pdf",
        ) from e
