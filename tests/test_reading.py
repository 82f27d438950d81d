from screenplay_parser.model.document import ACTION, CHARACTER_CUE, TaggedLine
from screenplay_parser.parse.assembler import assemble_document
from screenplay_parser.pipeline.parse import parse_screenplay_text
from screenplay_parser.text.reading import (
    NARRATOR,
    clean_text_for_speech,
    reading_sequence,
    split_blocks,
    wrap_paragraphs,
)

SCRIPT = "\n".join([
    "INT. OFFICE - DAY",
    "Someone types (loudly).",
    "",
    "SARAH",
    "(whispering)",
    "Hello there.",
    "",
    "She leaves.",
])


def test_interleaved_reading_order():
    items = reading_sequence(parse_screenplay_text(SCRIPT))
    assert [(it.speaker, it.text) for it in items] == [
        (NARRATOR, "INT. OFFICE - DAY"),
        (NARRATOR, "Someone types."),
        ("SARAH", "(whispering) Hello there."),
        (NARRATOR, "She leaves."),
    ]
    assert all(it.scene_index == 0 for it in items)
    assert items[0].is_narration and not items[2].is_narration


def test_description_first_reading_order():
    items = reading_sequence(parse_screenplay_text(SCRIPT), interleaved=False)
    assert [it.speaker for it in items] == [NARRATOR, NARRATOR, "SARAH"]
    assert items[1].text == "Someone types. She leaves."


def test_character_keeps_stage_direction():
    doc = parse_screenplay_text("INT. OFFICE - DAY\nSomeone types.\nSARAH\n(beat)\n")
    items = reading_sequence(doc)
    assert [it.speaker for it in items] == [NARRATOR, NARRATOR, "SARAH"]
    assert items[-1].text == "(beat)"


def test_nothing_to_read_is_skipped():
    doc = assemble_document([
        TaggedLine(index=0, text="(pause)", tag=ACTION),
        TaggedLine(index=1, text="SARAH", tag=CHARACTER_CUE),
    ])
    assert doc.scenes[0].dialogues[0].text == ""
    assert reading_sequence(doc) == []


def test_clean_text_for_speech():
    assert clean_text_for_speech("He (quietly)\nleaves [SFX].", is_narrator=True) == "He leaves."
    assert clean_text_for_speech("She waits (beat) , then goes (slowly) .", is_narrator=True) == "She waits, then goes."
    assert clean_text_for_speech("Hi  (smiles)\nthere.", is_narrator=False) == "Hi (smiles) there."
    assert clean_text_for_speech("(beat)", is_narrator=True) == ""


def test_wrap_paragraphs():
    assert split_blocks(["a", " b ", "", "", "c"]) == [["a", "b"], ["c"]]
    assert wrap_paragraphs(["a", "b", "", "c"]) == "a b\n\nc"
    assert wrap_paragraphs([]) == ""
