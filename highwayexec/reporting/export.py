"""
Document renderers for the executive summary: DOCX via python-docx, PDF via reportlab.

Both take the already-resolved summary text and return file bytes ready for a
download button; they do not know about KPIs or tokens.
"""

from __future__ import annotations

import logging
from io import BytesIO
from xml.sax.saxutils import escape

from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

logger = logging.getLogger(__name__)

DOCX_FILENAME = "HighwayExec-Summary.docx"
PDF_FILENAME = "HighwayExec-Summary.pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"


def export_text_to_docx(title: str, body: str) -> bytes:
    doc = Document()
    doc.add_heading(title, level=1)
    for line in body.split("\n"):
        doc.add_paragraph(line)

    buffer = BytesIO()
    doc.save(buffer)
    logger.info("Rendered DOCX summary (%d lines)", body.count("\n") + 1)
    return buffer.getvalue()


def export_text_to_pdf(title: str, body: str) -> bytes:
    styles = getSampleStyleSheet()
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=0.8 * inch,
        rightMargin=0.8 * inch,
        topMargin=0.8 * inch,
        bottomMargin=0.8 * inch,
    )

    story = [Paragraph(escape(title), styles["Title"]), Spacer(1, 0.15 * inch)]
    for line in body.split("\n"):
        if not line.strip():
            story.append(Spacer(1, 0.12 * inch))
            continue
        story.append(Paragraph(escape(line), styles["BodyText"]))

    doc.build(story)
    logger.info("Rendered PDF summary (%d lines)", body.count("\n") + 1)
    return buffer.getvalue()
