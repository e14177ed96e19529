import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from pypdf import PdfReader
from pptx import Presentation

from .constants import MAX_DECK_BYTES
from .errors import (
    DeckExtractionError,
    DeckTooLargeError,
    EmptyDeckError,
    MissingDeckError,
    UnsupportedDeckTypeError,
)
from .models import ParsedDeck, ParsedSlide


logger = logging.getLogger("uvicorn.error")

SUPPORTED_DECK_EXTENSIONS = {".pdf": "pdf", ".pptx": "pptx"}
UNSUPPORTED_TYPE_MESSAGE = "Only .pdf and .pptx files are supported"
TOO_LARGE_MESSAGE = "File is too large (max 20MB)"
EXTRACTION_FAILED_MESSAGE = "Failed to parse the file. Please try a different file or format."


def detect_extension(filename: str) -> str:
    return Path(filename or "").suffix.lower()


def sanitize_filename(filename: str) -> str:
    candidate = Path(filename or "").name
    if candidate in {"", ".", ".."}:
        candidate = "deck"

    sanitized = re.sub(r"[^A-Za-z0-9._-]", "_", candidate)
    if sanitized in {"", ".", ".."}:
        sanitized = "deck"

    stem = Path(sanitized).stem[:120] or "deck"
    ext = Path(sanitized).suffix[:20]
    return f"{stem}{ext}"


def validate_deck_extension(filename: Optional[str]) -> str:
    """Return the deck type ("pdf" or "pptx") for an accepted file name."""
    if not filename:
        raise MissingDeckError("No file uploaded")
    file_type = SUPPORTED_DECK_EXTENSIONS.get(detect_extension(filename))
    if file_type is None:
        raise UnsupportedDeckTypeError(UNSUPPORTED_TYPE_MESSAGE)
    return file_type


def validate_deck_size(size_bytes: int, max_size_bytes: int = MAX_DECK_BYTES) -> None:
    if size_bytes > max_size_bytes:
        raise DeckTooLargeError(TOO_LARGE_MESSAGE)
    if size_bytes <= 0:
        raise EmptyDeckError("Uploaded file is empty")


def validate_deck_upload(filename: Optional[str], size_bytes: int) -> str:
    file_type = validate_deck_extension(filename)
    validate_deck_size(size_bytes)
    return file_type


def parse_deck(deck_path: Path, *, filename: Optional[str] = None) -> ParsedDeck:
    """Validate and extract a deck stored on disk.

    ``filename`` is the name the user uploaded; it decides the type and is
    reported back. It defaults to the on-disk name.
    """
    display_name = filename or deck_path.name
    file_type = validate_deck_upload(display_name, deck_path.stat().st_size)

    try:
        if file_type == "pdf":
            slides, slide_count = _extract_pdf(deck_path)
        else:
            slides, slide_count = _extract_pptx(deck_path)
    except Exception as exc:
        logger.warning("deck_parse_failed file_type=%s error=%s", file_type, exc)
        raise DeckExtractionError(EXTRACTION_FAILED_MESSAGE) from exc

    marker = "PAGE" if file_type == "pdf" else "SLIDE"
    raw_text = "\n\n".join(
        f"{marker} {slide.slide_number}: {slide.content}" for slide in slides if slide.content
    ).strip()

    logger.info("deck_parsed file_type=%s slides=%d raw_chars=%d", file_type, slide_count, len(raw_text))
    return ParsedDeck(
        file_name=display_name,
        file_type=file_type,
        slide_count=max(slide_count, 1),
        slides=slides,
        raw_text=raw_text,
    )


def _extract_pdf(deck_path: Path) -> Tuple[List[ParsedSlide], int]:
    reader = PdfReader(str(deck_path))
    slides: List[ParsedSlide] = []

    for index, page in enumerate(reader.pages, start=1):
        text = (page.extract_text() or "").strip()
        slides.append(ParsedSlide(slide_number=index, content=text))

    return slides, len(reader.pages)


def _extract_pptx(deck_path: Path) -> Tuple[List[ParsedSlide], int]:
    presentation = Presentation(str(deck_path))
    slides: List[ParsedSlide] = []

    for index, slide in enumerate(presentation.slides, start=1):
        text_chunks: List[str] = []
        for shape in slide.shapes:
            text = getattr(shape, "text", "")
            if text:
                text_chunks.append(text.strip())

        slide_text = "\n".join(chunk for chunk in text_chunks if chunk).strip()
        slides.append(ParsedSlide(slide_number=index, content=slide_text))

    return slides, len(presentation.slides)
