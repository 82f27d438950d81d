"""
config.py

Named thresholds for every heuristic in the parser.

All magic numbers that the layout reconstructor, the line classifier and the
document assembler rely on live here, so they can be tuned and tested in
isolation. Entry points take an optional ParserConfig and fall back to
DEFAULT_CONFIG.
"""
from __future__ import annotations

from dataclasses import dataclass

# Layout reconstruction (units of the OCR coordinate space, usually pixels at 2x render scale)
DEFAULT_LINE_PROXIMITY_THRESHOLD = 10.0
DEFAULT_PARAGRAPH_SPACING_THRESHOLD = 15.0

# Character cue shape
CUE_MAX_LENGTH = 40
CUE_MAX_WORDS = 4
CUE_PERIOD_TOKEN_MAX = 4

# All-caps scene heading tier
HEADING_CAPS_MIN_LENGTH = 6
HEADING_CAPS_MAX_LENGTH = 99

# Longer lines are never scene headings, whatever the tier
HEADING_MAX_LENGTH = 150


@dataclass(frozen=True)
class ParserConfig:
    """
    line_proximity_threshold: max |midY delta| for a fragment to join the current line
    paragraph_spacing_threshold: max vertical gap for a line to join the current paragraph
    cue_max_length / cue_max_words: shape limits of a character cue
    cue_period_token_max: tokens longer than this may not contain a period (V.O. is fine)
    heading_caps_min_length / heading_caps_max_length: length window of all-caps headings
    heading_max_length: no line longer than this is read as a scene heading
    keep_title_scene: keep action that precedes the first heading as a leading scene
    merge_name_case: treat "SARAH" and "Sarah" as the same character
    """
    line_proximity_threshold: float = DEFAULT_LINE_PROXIMITY_THRESHOLD
    paragraph_spacing_threshold: float = DEFAULT_PARAGRAPH_SPACING_THRESHOLD
    cue_max_length: int = CUE_MAX_LENGTH
    cue_max_words: int = CUE_MAX_WORDS
    cue_period_token_max: int = CUE_PERIOD_TOKEN_MAX
    heading_caps_min_length: int = HEADING_CAPS_MIN_LENGTH
    heading_caps_max_length: int = HEADING_CAPS_MAX_LENGTH
    heading_max_length: int = HEADING_MAX_LENGTH
    keep_title_scene: bool = True
    merge_name_case: bool = True

    def __post_init__(self) -> None:
        if self.line_proximity_threshold <= 0:
            raise ValueError("line_proximity_threshold must be positive")
        if self.paragraph_spacing_threshold <= 0:
            raise ValueError("paragraph_spacing_threshold must be positive")
        if self.cue_max_length < 1 or self.cue_max_words < 1:
            raise ValueError("cue limits must be at least 1")
        if self.heading_caps_min_length > self.heading_caps_max_length:
            raise ValueError("heading_caps_min_length exceeds heading_caps_max_length")
        if self.heading_max_length < 1:
            raise ValueError("heading_max_length must be at least 1")


DEFAULT_CONFIG = ParserConfig()
