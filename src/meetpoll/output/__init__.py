"""Output generation for schedule results (PDF, text)."""

from meetpoll.output.pdf_generator import PDFGenerator
from meetpoll.output.text_report import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
