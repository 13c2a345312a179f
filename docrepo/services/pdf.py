"""Page counts for uploaded PDF files."""

from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

PDF_EXTENSIONS = {".pdf"}


def read_pdf_page_count(content: bytes) -> int:
    """Number of pages in the PDF ``content``.

    Raises:
        ValueError: If the bytes are not a readable PDF.
    """
    try:
        return len(PdfReader(BytesIO(content)).pages)
    except (PdfReadError, OSError, ValueError, KeyError) as exc:
        raise ValueError("Not a readable PDF file") from exc
