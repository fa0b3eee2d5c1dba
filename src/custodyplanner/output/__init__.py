"""Output generation for schedules (text, PDF)."""

from custodyplanner.output.pdf_generator import PDFGenerator
from custodyplanner.output.text_report import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
