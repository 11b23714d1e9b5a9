import fitz
import pytest

from pitch_panda.deck import images_to_slides, load_deck, pdf_to_slides, validate_slides
from pitch_panda.schemas import SlideImage

from conftest import PNG_DATA_URL


@pytest.fixture
def pdf_deck(tmp_path):
    path = tmp_path / "deck.pdf"
    doc = fitz.open()
    for text in ("Problem", "Solution"):
        page = doc.new_page()
        page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return path


def test_pdf_to_slides(pdf_deck):
    slides = pdf_to_slides(pdf_deck)

    assert [s.page for s in slides] == [1, 2]
    assert all(s.image_data_url.startswith("data:image/png;base64,") for s in slides)
    assert slides[1].file_name == "deck.pdf#page=2"


def test_load_deck_directory_sorted_by_name(tmp_path):
    (tmp_path / "02.jpg").write_bytes(b"second")
    (tmp_path / "01.png").write_bytes(b"first")
    (tmp_path / "notes.txt").write_text("ignored")

    slides = load_deck(tmp_path)

    assert [s.file_name for s in slides] == ["01.png", "02.jpg"]
    assert slides[1].image_data_url.startswith("data:image/jpeg;base64,")


def test_load_deck_rejects_bad_input(tmp_path):
    with pytest.raises(ValueError, match="Deck not found"):
        load_deck(tmp_path / "missing.pdf")
    with pytest.raises(ValueError, match="No slide images"):
        load_deck(tmp_path)
    bad = tmp_path / "deck.pptx"
    bad.write_bytes(b"x")
    with pytest.raises(ValueError, match="Unsupported deck format"):
        load_deck(bad)


def test_images_to_slides_rejects_unknown_extension(tmp_path):
    path = tmp_path / "slide.bmp"
    path.write_bytes(b"x")
    with pytest.raises(ValueError):
        images_to_slides([path])


def test_validate_slides_filters_invalid_entries():
    slides = [
        SlideImage(page=1, image_data_url=PNG_DATA_URL),
        SlideImage(page=2, image_data_url="https://example.com/slide.png"),
        {"page": 3, "imageDataUrl": PNG_DATA_URL},
        {"page": 0, "image_data_url": PNG_DATA_URL},
        {"page": 4},
    ]

    valid = validate_slides(slides)

    assert [s.page for s in valid] == [1, 3]
    assert validate_slides(None) == []
