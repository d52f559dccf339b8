import io
import logging

from pdfminer.high_level import extract_text as extract_pdf_text
from docx import Document as DocxDocument

from overlap_detector.config import ALLOWED_EXTENSIONS, MAX_UPLOAD_WORDS

logger = logging.getLogger("file_utils")


def allowed_file(filename: str) -> bool:
    return "." in (filename or "") and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def extract_text_from_file(content_bytes: bytes, filename: str, max_words: int = MAX_UPLOAD_WORDS) -> str:
    """Plain text of an uploaded txt/pdf/docx; raises ValueError past `max_words`."""
    ext = filename.rsplit(".", 1)[1].lower()
    text = ""
    try:
        if ext == "txt":
            text = content_bytes.decode("utf-8", errors="ignore")
        elif ext == "pdf":
            text = extract_pdf_text(io.BytesIO(content_bytes))
        elif ext == "docx":
            doc = DocxDocument(io.BytesIO(content_bytes))
            text = "\n".join(p.text for p in doc.paragraphs)
    except Exception as e:
        logger.warning(f"Text extraction failed for {filename}: {e}")
        text = ""

    word_count = len(text.split())
    if word_count > max_words:
        raise ValueError(f"File exceeds {max_words} words (found {word_count}).")

    return text
