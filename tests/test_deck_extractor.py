import pytest
from pptx import Presentation
from pypdf import PdfWriter

from seedcheck.backend.constants import MAX_DECK_BYTES
from seedcheck.backend.deck_extractor import (
    parse_deck,
    sanitize_filename,
    validate_deck_upload,
)
from seedcheck.backend.errors import (
    DeckExtractionError,
    DeckInputError,
    DeckTooLargeError,
    EmptyDeckError,
    MissingDeckError,
    UnsupportedDeckTypeError,
)

TWENTY_ONE_MIB = 21 * 1024 * 1024


def _write_pdf(path, pages=2):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    with path.open("wb") as handle:
        writer.write(handle)
    return path


def _write_pptx(path):
    presentation = Presentation()
    layout = presentation.slide_layouts[0]

    first = presentation.slides.add_slide(layout)
    first.shapes.title.text = "Acme Reconcile"
    first.placeholders[1].text = "Invoice reconciliation for Shopify merchants"

    second = presentation.slides.add_slide(layout)
    second.shapes.title.text = "Traction"
    second.placeholders[1].text = "$15k MRR, 20% MoM"

    presentation.save(str(path))
    return path


def test_oversize_and_wrong_type_are_rejected_for_distinct_reasons():
    with pytest.raises(DeckTooLargeError) as too_large:
        validate_deck_upload("deck.pdf", TWENTY_ONE_MIB)
    with pytest.raises(UnsupportedDeckTypeError) as wrong_type:
        validate_deck_upload("deck.docx", 1024)

    assert str(too_large.value) != str(wrong_type.value)
    assert "20MB" in str(too_large.value)
    assert ".pdf and .pptx" in str(wrong_type.value)
    assert too_large.value.status_code == 413
    assert wrong_type.value.status_code == 400


def test_size_limit_is_inclusive():
    assert validate_deck_upload("deck.pdf", MAX_DECK_BYTES) == "pdf"
    with pytest.raises(DeckTooLargeError):
        validate_deck_upload("deck.pdf", MAX_DECK_BYTES + 1)


@pytest.mark.parametrize("filename", ["deck.ppt", "deck.key", "deck", "deck.pdf.zip"])
def test_other_types_are_unsupported(filename):
    with pytest.raises(UnsupportedDeckTypeError):
        validate_deck_upload(filename, 1024)


def test_extension_check_ignores_case():
    assert validate_deck_upload("Pitch.PDF", 10) == "pdf"
    assert validate_deck_upload("Pitch.PpTx", 10) == "pptx"


def test_missing_and_empty_files_are_input_errors():
    with pytest.raises(MissingDeckError):
        validate_deck_upload(None, 10)
    with pytest.raises(EmptyDeckError):
        validate_deck_upload("deck.pdf", 0)
    assert issubclass(MissingDeckError, DeckInputError)


def test_parse_small_pdf(tmp_path):
    deck_path = _write_pdf(tmp_path / "deck.pdf", pages=3)

    deck = parse_deck(deck_path, filename="Acme Deck.pdf")

    assert deck.file_name == "Acme Deck.pdf"
    assert deck.file_type == "pdf"
    assert deck.slide_count == 3
    assert [slide.slide_number for slide in deck.slides] == [1, 2, 3]
    assert deck.raw_text == ""


def test_parse_small_pptx(tmp_path):
    deck_path = _write_pptx(tmp_path / "deck.pptx")

    deck = parse_deck(deck_path)

    assert deck.file_type == "pptx"
    assert deck.slide_count == 2
    assert "Acme Reconcile" in deck.slides[0].content
    assert "$15k MRR" in deck.slides[1].content
    assert deck.raw_text.startswith("SLIDE 1: Acme Reconcile")
    assert "SLIDE 2: Traction" in deck.raw_text


def test_parsed_deck_serializes_with_camel_case_keys(tmp_path):
    deck = parse_deck(_write_pptx(tmp_path / "deck.pptx"))
    payload = deck.model_dump(by_alias=True)
    assert set(payload) == {"fileName", "fileType", "slideCount", "slides", "rawText"}
    assert set(payload["slides"][0]) == {"slideNumber", "content"}


def test_oversize_file_on_disk_is_rejected_before_parsing(tmp_path):
    deck_path = tmp_path / "huge.pdf"
    with deck_path.open("wb") as handle:
        handle.truncate(TWENTY_ONE_MIB)
    with pytest.raises(DeckTooLargeError):
        parse_deck(deck_path)


def test_corrupt_pdf_is_an_extraction_error(tmp_path):
    deck_path = tmp_path / "broken.pdf"
    deck_path.write_bytes(b"this is not a pdf at all")
    with pytest.raises(DeckExtractionError):
        parse_deck(deck_path)


def test_corrupt_pptx_is_an_extraction_error(tmp_path):
    deck_path = tmp_path / "broken.pptx"
    deck_path.write_bytes(b"PK\x03\x04 not really a zip")
    with pytest.raises(DeckExtractionError):
        parse_deck(deck_path)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("deck.pdf", "deck.pdf"),
        ("../../etc/passwd.pdf", "passwd.pdf"),
        ("my deck (final).pptx", "my_deck__final_.pptx"),
        ("", "deck"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected
