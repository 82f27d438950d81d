from screenplay_parser.io.jsonio import load_json
from screenplay_parser.layout.reconstruct import BBox, TextFragment
from screenplay_parser.pipeline.parse import parse_ocr_pages, parse_pdf_screenplay, parse_screenplay_text


class FakePage:
    def __init__(self, text: str):
        self._text = text

    def extract_text(self):
        return self._text

    def extract_words(self):
        return []


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def fake_pdf_open(_path):
    # Speech runs over the page break; page 3 is a scan without text layer
    p1 = FakePage(
        "\n".join([
            "1 INT. OFFICE - DAY 1",
            "Someone types.",
            "",
            "SARAH",
            "Hello there.",
        ])
    )
    p2 = FakePage(
        "\n".join([
            "(CONTINUED)",
            "and goodbye.",
            "",
            "2 EXT. STREET - NIGHT 2",
            "Cars pass by the EXT door.",
        ])
    )
    p3 = FakePage("")
    return FakePDF([p1, p2, p3])


def frag(text, y):
    return TextFragment(text=text, bbox=BBox(x=0, y=y, w=120, h=10))


def test_pdf_scene_count_and_meta():
    doc, meta = parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open, strip_layout_noise=True)
    assert doc.scene_count == 2
    assert [sc.heading.scene_number for sc in doc.scenes] == ["1", "2"]
    assert doc.scenes[0].dialogues[0].text == "Hello there. and goodbye."
    assert meta["scene_count"] == 2
    assert meta["character_count"] == 1
    assert meta["pages_total"] == 3
    assert meta["pages_ocr"] == 0
    assert meta["pages_without_text"] == [3]
    assert any("without text layer" in w for w in meta["warnings"])
    # near-miss examples are only kept in debug mode
    assert meta["near_miss_count"] == 1
    assert meta["near_miss_examples"] == []


def test_pdf_debug_near_miss_reports_page():
    _, meta = parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open, strip_layout_noise=True, debug=True)
    assert meta["near_miss_examples"] == [{"line": 9, "text": "Cars pass by the EXT door.", "page": 2}]


def test_pdf_ocr_page_counts():
    def ocr(page, page_number):
        return [frag("EXT. ROOF - DAWN", 10), frag("Wind.", 40)]

    doc, meta = parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open, ocr=ocr)
    assert meta["pages_ocr"] == 1
    assert meta["pages_without_text"] == []
    assert doc.scene_count == 3
    assert doc.scenes[-1].heading.location == "ROOF"
    assert doc.scenes[-1].description == "Wind."


def test_pdf_dump_path(tmp_path):
    out = tmp_path / "parsed" / "doc.json"
    doc, _ = parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open, dump_path=str(out))
    obj = load_json(str(out))
    assert obj["document"]["scene_count"] == doc.scene_count
    assert obj["document"]["characters"]["SARAH"]["line_count"] == 1
    assert obj["meta"]["pages_total"] == 3


def test_pdf_verbose_progress(capsys):
    parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open, verbose=True)
    captured = capsys.readouterr()
    out = captured.out
    assert "pages" in captured.err
    assert "[phase] read pdf pages..." in out
    assert "[warn]" in out
    assert "[ok] scenes=2 characters=1" in out


def test_pdf_quiet_by_default(capsys):
    parse_pdf_screenplay("dummy.pdf", pdf_open=fake_pdf_open)
    assert capsys.readouterr().out == ""


def test_ocr_pages_path():
    page1 = [frag("INT. OFFICE - DAY", 100), frag("SARAH", 140), frag("Hello there.", 152)]
    page2 = [frag("Nice to meet you.", 20)]
    doc = parse_ocr_pages([page1, page2])
    assert doc.scene_count == 1
    assert doc.scenes[0].dialogues[0].text == "Hello there. Nice to meet you."
    assert doc.characters["SARAH"].total_words == 6


def test_text_path_accepts_any_newline_convention():
    doc = parse_screenplay_text("INT. OFFICE - DAY\r\nSARAH\r\nHello there.\r\n")
    assert doc.scene_count == 1
    assert doc.characters["SARAH"].line_count == 1
    assert doc.raw_text == "INT. OFFICE - DAY\r\nSARAH\r\nHello there.\r\n"
