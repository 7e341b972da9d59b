"""Utilities for rendering cover letters and résumés as PDFs using FPDF."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

CORE_FONT_ENCODING = "latin-1"

# Per-template look for résumé exports.
TEMPLATE_STYLES: Dict[str, Dict[str, Any]] = {
    "professional": {"font": "Helvetica", "header_size": 22, "section_size": 13, "text_size": 11, "accent": (0, 0, 0)},
    "creative": {"font": "Helvetica", "header_size": 26, "section_size": 15, "text_size": 11, "accent": (128, 0, 128)},
    "technical": {"font": "Courier", "header_size": 20, "section_size": 13, "text_size": 10, "accent": (0, 0, 128)},
    "modern": {"font": "Helvetica", "header_size": 24, "section_size": 14, "text_size": 11, "accent": (0, 128, 128)},
    "executive": {"font": "Times", "header_size": 22, "section_size": 15, "text_size": 11, "accent": (64, 64, 64)},
    "minimal": {"font": "Helvetica", "header_size": 20, "section_size": 12, "text_size": 10, "accent": (96, 96, 96)},
}


def _pdf_bytes(pdf: FPDF) -> bytes:
    return bytes(pdf.output())


def _latin1_safe(text: str) -> str:
    """Best-effort conversion ensuring FPDF receives core-font friendly content."""
    if not text:
        return ""
    return text.encode(CORE_FONT_ENCODING, "replace").decode(CORE_FONT_ENCODING)


def _wrap_long_words_for_pdf(text: str, pdf: FPDF) -> str:
    """Insert breaks into extremely long tokens so FPDF can wrap them.

    FPDF cannot wrap a single token wider than the printable width, so such
    tokens are split into chunks that fit the current font.
    """
    if not text:
        return ""

    max_w = pdf.w - pdf.l_margin - pdf.r_margin
    out_words: list[str] = []

    for word in text.split(" "):
        if pdf.get_string_width(word) <= max_w:
            out_words.append(word)
            continue

        chunk = ""
        for ch in word:
            if pdf.get_string_width(chunk + ch) <= max_w:
                chunk += ch
            else:
                if chunk:
                    out_words.append(chunk)
                chunk = ch
        if chunk:
            out_words.append(chunk)

    return " ".join(out_words)


def _new_document() -> FPDF:
    pdf = FPDF()
    pdf.set_left_margin(15)
    pdf.set_right_margin(15)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()
    return pdf


def _write_line(pdf: FPDF, text: str, height: float = 6) -> None:
    safe = _wrap_long_words_for_pdf(_latin1_safe(text), pdf)
    pdf.multi_cell(0, height, safe, align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _section_heading(pdf: FPDF, title: str, style: Dict[str, Any]) -> None:
    pdf.ln(3)
    pdf.set_font(style["font"], "B", style["section_size"])
    pdf.set_text_color(*style["accent"])
    pdf.cell(0, 8, _latin1_safe(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*style["accent"])
    pdf.set_line_width(0.3)
    current_y = pdf.get_y()
    pdf.line(pdf.l_margin, current_y, pdf.w - pdf.r_margin, current_y)
    pdf.ln(2)
    pdf.set_font(style["font"], size=style["text_size"])
    pdf.set_text_color(15, 23, 42)


def render_cover_letter_pdf(record: Dict[str, Any]) -> bytes:
    """Render a styled cover letter PDF from the stored cover letter record."""
    pdf = _new_document()

    pdf.set_font("Helvetica", "B", 20)
    pdf.set_text_color(34, 197, 94)
    pdf.cell(0, 12, _latin1_safe(record.get("title") or "Cover Letter"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(34, 197, 94)
    pdf.set_line_width(0.6)
    current_y = pdf.get_y()
    pdf.line(15, current_y, 195, current_y)
    pdf.ln(6)

    subtitle = " - ".join(part for part in (record.get("job_title"), record.get("company")) if part)
    if subtitle:
        pdf.set_font("Helvetica", "I", 12)
        pdf.set_text_color(100, 116, 139)
        pdf.cell(0, 6, _latin1_safe(subtitle), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

    pdf.set_font("Helvetica", size=12)
    pdf.set_text_color(15, 23, 42)

    body_text = record.get("content", "") or ""
    paragraphs = [block.strip() for block in body_text.split("\n\n") if block.strip()]
    for paragraph in paragraphs:
        for line in paragraph.splitlines():
            if line.strip():
                _write_line(pdf, line.rstrip())
        pdf.ln(3)

    return _pdf_bytes(pdf)


def _entries(items: Iterable[Dict[str, Any]], *fields: str) -> Iterable[Tuple[str, ...]]:
    for item in items or []:
        yield tuple(str(item.get(field) or "") for field in fields)


def render_resume_pdf(record: Dict[str, Any]) -> bytes:
    """Render a structured résumé using the style of its template."""
    content = record.get("content") or {}
    template = record.get("template") or content.get("template") or "professional"
    style = TEMPLATE_STYLES.get(template, TEMPLATE_STYLES["professional"])
    info = content.get("personalInfo") or {}

    pdf = _new_document()

    pdf.set_font(style["font"], "B", style["header_size"])
    pdf.set_text_color(*style["accent"])
    pdf.cell(0, 12, _latin1_safe(info.get("fullName") or record.get("title") or "Resume"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    contact_line = " | ".join(
        part for part in (info.get("email"), info.get("phone"), info.get("location"), info.get("linkedin")) if part
    )
    pdf.set_font(style["font"], size=style["text_size"])
    pdf.set_text_color(100, 116, 139)
    _write_line(pdf, contact_line, height=5)

    pdf.set_text_color(15, 23, 42)
    if content.get("summary"):
        _section_heading(pdf, "Summary", style)
        _write_line(pdf, content["summary"])

    if content.get("experience"):
        _section_heading(pdf, "Experience", style)
        for title, company, duration, description in _entries(
            content["experience"], "title", "company", "duration", "description"
        ):
            pdf.set_font(style["font"], "B", style["text_size"])
            _write_line(pdf, f"{title} - {company} ({duration})")
            pdf.set_font(style["font"], size=style["text_size"])
            for line in description.splitlines():
                if line.strip():
                    _write_line(pdf, f"- {line.strip().lstrip('-*').strip()}")
            pdf.ln(1)

    if content.get("education"):
        _section_heading(pdf, "Education", style)
        for degree, school, year in _entries(content["education"], "degree", "school", "year"):
            _write_line(pdf, f"{degree}, {school} ({year})")

    if content.get("skills"):
        _section_heading(pdf, "Skills", style)
        _write_line(pdf, ", ".join(content["skills"]))

    if content.get("projects"):
        _section_heading(pdf, "Projects", style)
        for name, description, technologies in _entries(
            content["projects"], "name", "description", "technologies"
        ):
            pdf.set_font(style["font"], "B", style["text_size"])
            _write_line(pdf, name)
            pdf.set_font(style["font"], size=style["text_size"])
            if description:
                _write_line(pdf, description)
            if technologies:
                _write_line(pdf, f"Technologies: {technologies}")

    if content.get("certifications"):
        _section_heading(pdf, "Certifications", style)
        for name, issuer, date in _entries(content["certifications"], "name", "issuer", "date"):
            _write_line(pdf, ", ".join(part for part in (name, issuer, date) if part))

    return _pdf_bytes(pdf)
