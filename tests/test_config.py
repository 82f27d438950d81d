import pytest

from screenplay_parser.config import (
    CUE_MAX_LENGTH,
    DEFAULT_CONFIG,
    DEFAULT_LINE_PROXIMITY_THRESHOLD,
    DEFAULT_PARAGRAPH_SPACING_THRESHOLD,
    ParserConfig,
)
from screenplay_parser.text.classifier import classify_text


def test_defaults():
    assert DEFAULT_CONFIG.line_proximity_threshold == DEFAULT_LINE_PROXIMITY_THRESHOLD == 10
    assert DEFAULT_CONFIG.paragraph_spacing_threshold == DEFAULT_PARAGRAPH_SPACING_THRESHOLD == 15
    assert DEFAULT_CONFIG.cue_max_length == CUE_MAX_LENGTH == 40
    assert DEFAULT_CONFIG.keep_title_scene is True
    assert DEFAULT_CONFIG.merge_name_case is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"line_proximity_threshold": 0},
        {"paragraph_spacing_threshold": -1},
        {"cue_max_words": 0},
        {"heading_max_length": 0},
        {"heading_caps_min_length": 50, "heading_caps_max_length": 10},
    ],
)
def test_invalid_config_raises(kwargs):
    with pytest.raises(ValueError):
        ParserConfig(**kwargs)


def test_cue_word_limit_is_tunable():
    text = "THE OLD GREY WIZARD KING\nSpeaks softly."
    assert classify_text(text)[0].tag == "action"
    assert classify_text(text, config=ParserConfig(cue_max_words=5))[0].tag == "character_cue"
