from __future__ import annotations

import io
import logging

from pypdf import PdfReader

logger = logging.getLogger(__name__)

MIN_PLAUSIBLE_LENGTH = 100
_RAW_PDF_MARKERS = ("obj", "<<")


def extract_pdf_text(data: bytes) -> str:
    """Best-effort text for an uploaded PDF.

    Never raises: an unreadable document degrades to the bytes decoded as
    UTF-8, which downstream extraction turns into mostly empty fields.
    """
    try:
        text = _read_pdf(data, layout=False)
    except Exception as exc:
        logger.warning("PDF decode failed (%s bytes): %s; using raw UTF-8 text", len(data), exc)
        text = data.decode("utf-8", errors="replace")

    if looks_like_raw_pdf(text):
        logger.info("Extracted text looks like raw PDF data (length=%s); retrying in layout mode", len(text))
        try:
            alternative = _read_pdf(data, layout=True)
        except Exception as exc:
            logger.warning("Layout-mode PDF decode failed: %s", exc)
            alternative = ""
        if alternative.strip():
            text = alternative

    return text


def looks_like_raw_pdf(text: str) -> bool:
    if len(text) < MIN_PLAUSIBLE_LENGTH:
        return True
    return any(marker in text for marker in _RAW_PDF_MARKERS)


def _read_pdf(data: bytes, *, layout: bool) -> str:
    reader = PdfReader(io.BytesIO(data))
    pages: list[str] = []
    for page in reader.pages:
        if layout:
            page_text = page.extract_text(extraction_mode="layout")
        else:
            page_text = page.extract_text()
        if page_text:
            pages.append(page_text)
    return "\n".join(pages)
