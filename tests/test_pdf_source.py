import pytest

from screenplay_parser.io.pdf_source import (
    SOURCE_EMPTY,
    SOURCE_LAYOUT,
    SOURCE_OCR,
    SOURCE_TEXT,
    extract_pages,
    fragments_from_words,
)
from screenplay_parser.layout.reconstruct import BBox, TextFragment


class FakePage:
    def __init__(self, text: str, words=None):
        self._text = text
        self._words = words or []

    def extract_text(self):
        return self._text

    def extract_words(self):
        return self._words


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def word(text, x0, top, x1, bottom):
    return {"text": text, "x0": x0, "top": top, "x1": x1, "bottom": bottom}


WORDS = [
    word("SARAH", 100, 50, 130, 55),
    word("there.", 135, 60, 160, 65),
    word("Hello", 100, 60, 130, 65),
]


def fake_pdf_open(_path):
    return FakePDF([
        FakePage("INT. OFFICE - DAY\nSomeone types.", words=WORDS),
        FakePage(""),
    ])


def scanned_page_ocr(page, page_number):
    return [TextFragment(text="EXT. STREET - NIGHT", bbox=BBox(x=10, y=10, w=200, h=10), confidence=0.8)]


def test_text_layer_and_empty_page():
    pages = extract_pages("dummy.pdf", pdf_open=fake_pdf_open)
    assert [p.page_number for p in pages] == [1, 2]
    assert [p.source for p in pages] == [SOURCE_TEXT, SOURCE_EMPTY]
    assert pages[0].lines() == ["INT. OFFICE - DAY", "Someone types."]
    assert pages[1].lines() == []


def test_ocr_collaborator_fills_pages_without_text():
    pages = extract_pages("dummy.pdf", pdf_open=fake_pdf_open, ocr=scanned_page_ocr)
    assert [p.source for p in pages] == [SOURCE_TEXT, SOURCE_OCR]
    assert pages[1].fragments[0].confidence == 0.8
    assert pages[1].lines() == ["EXT. STREET - NIGHT"]


def test_ocr_must_return_fragments():
    with pytest.raises(TypeError):
        extract_pages("dummy.pdf", pdf_open=fake_pdf_open, ocr=lambda page, n: ["EXT. STREET - NIGHT"])


def test_use_layout_rebuilds_lines_from_word_boxes():
    pages = extract_pages("dummy.pdf", pdf_open=fake_pdf_open, use_layout=True)
    assert pages[0].source == SOURCE_LAYOUT
    # scaled 2x: SARAH bottom 110, Hello top 120 -> gap 10 < 15, one paragraph
    assert pages[0].lines() == ["SARAH", "Hello there."]


def test_fragments_from_words_scales_points():
    frags = fragments_from_words([word("Hi", 10, 20, 30, 25)])
    assert frags == [TextFragment(text="Hi", bbox=BBox(x=20.0, y=40.0, w=40.0, h=10.0), confidence=1.0)]
    unscaled = fragments_from_words([word("Hi", 10, 20, 30, 25)], scale=1.0)
    assert unscaled[0].bbox == BBox(x=10.0, y=20.0, w=20.0, h=5.0)


def test_progress_bar_over_pages(capsys):
    extract_pages("dummy.pdf", pdf_open=fake_pdf_open, progress=True)
    assert "pages" in capsys.readouterr().err
    extract_pages("dummy.pdf", pdf_open=fake_pdf_open)
    assert capsys.readouterr().err == ""
