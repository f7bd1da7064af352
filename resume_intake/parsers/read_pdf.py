import asyncio
import logging
from typing import List

import fitz  # PyMuPDF

from ..errors import ExtractionError

logger = logging.getLogger(__name__)


def _page_text_items(page: "fitz.Page") -> List[str]:
    blocks = page.get_text(
        "dict",
        flags=fitz.TEXTFLAGS_TEXT | fitz.TEXT_PRESERVE_LIGATURES,
    )["blocks"]

    positioned = []
    for block in blocks:
        if block["type"] != 0:  # Not a text block
            continue
        for line_dict in block["lines"]:
            for span_dict in line_dict["spans"]:
                text = span_dict["text"].replace("\u00ad", "")  # Remove soft hyphens
                if not text.strip():
                    continue
                x0, y0, _, _ = span_dict["bbox"]
                positioned.append((round(y0), x0, text.strip()))

    # Reading order: top to bottom, then left to right
    positioned.sort(key=lambda item: (item[0], item[1]))
    return [text for _, _, text in positioned]


def extract_text(pdf_bytes: bytes) -> str:
    """Return the visible text of every page of a PDF.

    Text items on a page are joined by single spaces and pages are joined by
    newlines, in ascending page order, so an N-page document always yields N
    newline-separated segments.
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise ExtractionError(f"Failed to parse PDF: {e}") from e

    try:
        if doc.needs_pass:
            raise ExtractionError("Failed to parse PDF: document is encrypted")
        pages = []
        for page_num in range(doc.page_count):
            page = doc.load_page(page_num)
            pages.append(" ".join(_page_text_items(page)))
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to parse PDF: {e}") from e
    finally:
        doc.close()

    logger.debug("Extracted %d page(s) of text", len(pages))
    return "\n".join(pages)


async def extract_text_async(pdf_bytes: bytes) -> str:
    """Same as ``extract_text`` but parsed on a worker thread."""
    return await asyncio.to_thread(extract_text, pdf_bytes)
