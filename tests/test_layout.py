from screenplay_parser.config import ParserConfig
from screenplay_parser.layout.reconstruct import (
    BBox,
    TextFragment,
    group_lines,
    group_paragraphs,
    pages_to_lines,
    reconstruct_page,
)


def frag(text, x, y, w=40.0, h=10.0, confidence=1.0):
    return TextFragment(text=text, bbox=BBox(x=x, y=y, w=w, h=h), confidence=confidence)


def test_far_apart_fragments_never_merge():
    cfg = ParserConfig(line_proximity_threshold=10)
    lines = group_lines([frag("top", 0, 100), frag("bottom", 0, 300)], config=cfg)
    assert [ln.text for ln in lines] == ["top", "bottom"]


def test_colinear_fragments_are_joined_left_to_right():
    # slightly different midY, still within the threshold
    lines = group_lines([frag("world", 200, 102), frag("Hello", 10, 100)])
    assert len(lines) == 1
    assert lines[0].text == "Hello world"
    assert lines[0].bbox.x == 10


def test_lines_come_out_top_to_bottom():
    lines = group_lines([frag("third", 0, 500), frag("first", 0, 100), frag("second", 0, 300)])
    assert [ln.text for ln in lines] == ["first", "second", "third"]


def test_zero_area_box_starts_its_own_line():
    lines = group_lines([frag("Hello", 10, 100), frag("ghost", 60, 100, w=0.0)])
    assert [ln.text for ln in lines] == ["Hello", "ghost"]


def test_missing_box_goes_last_and_alone():
    lines = group_lines([TextFragment(text="floating", bbox=None), frag("Hello", 10, 100)])
    assert [ln.text for ln in lines] == ["Hello", "floating"]
    assert lines[1].bbox is None


def test_empty_input_yields_nothing():
    assert group_lines([]) == []
    assert group_paragraphs([]) == []
    assert reconstruct_page([]) == []
    assert pages_to_lines([]) == []


def test_single_fragment_yields_one_line_and_one_paragraph():
    paragraphs = reconstruct_page([frag("Alone", 0, 0, confidence=0.5)])
    assert len(paragraphs) == 1
    assert len(paragraphs[0].lines) == 1
    assert paragraphs[0].text == "Alone"
    assert paragraphs[0].confidence == 0.5


def test_paragraph_grouping_uses_vertical_gap():
    lines = group_lines([
        frag("one", 0, 100),   # bottom 110
        frag("two", 0, 112),   # gap 2 -> same paragraph
        frag("three", 0, 160), # gap 38 -> new paragraph
    ])
    paragraphs = group_paragraphs(lines)
    assert [p.text for p in paragraphs] == ["one\ntwo", "three"]


def test_paragraph_spacing_threshold_is_configurable():
    lines = group_lines([frag("one", 0, 100), frag("two", 0, 130)])  # gap 20
    assert len(group_paragraphs(lines)) == 2
    assert len(group_paragraphs(lines, config=ParserConfig(paragraph_spacing_threshold=25))) == 1


def test_uncertain_line_never_joins_a_paragraph():
    lines = group_lines([frag("one", 0, 100), frag("flat", 0, 111, h=0.0)])
    assert len(group_paragraphs(lines)) == 2


def test_pages_to_lines_blank_between_paragraphs_not_between_pages():
    page1 = [frag("INT. OFFICE - DAY", 0, 100), frag("SARAH", 0, 140), frag("Hello there.", 0, 152)]
    page2 = [frag("and goodbye.", 0, 40)]
    assert pages_to_lines([page1, page2]) == [
        "INT. OFFICE - DAY",
        "",
        "SARAH",
        "Hello there.",
        "and goodbye.",
    ]
