"""
document.py

In-memory model of a parsed screenplay.

Everything here is a plain dataclass. Scenes, headings and dialogue blocks are
frozen: the assembler builds each scene completely before appending it, and no
scene is touched again once the next heading has been recognized. Character is
the one mutable record, because the statistics aggregator folds dialogue blocks
into it; it is never deleted.

The ScreenplayDocument is the sole output of a parse and is owned by the caller.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

# Line tags, in classifier precedence order
BLANK = "blank"
SCENE_HEADING = "scene_heading"
CHARACTER_CUE = "character_cue"
PARENTHETICAL = "parenthetical"
DIALOGUE_CONTINUATION = "dialogue_continuation"
ACTION = "action"

LineTag = Literal[
    "blank",
    "scene_heading",
    "character_cue",
    "parenthetical",
    "dialogue_continuation",
    "action",
]

LINE_TAGS: Tuple[str, ...] = (
    BLANK,
    SCENE_HEADING,
    CHARACTER_CUE,
    PARENTHETICAL,
    DIALOGUE_CONTINUATION,
    ACTION,
)

# Scene element kinds
ELEMENT_ACTION = "action"
ELEMENT_DIALOGUE = "dialogue"

GENDER_MALE = "M"
GENDER_FEMALE = "F"
GENDER_UNKNOWN = "Unknown"

GenderHint = Literal["M", "F", "Unknown"]

_STAGE_DIRECTION_RE = re.compile(r"\([^()]*\)")


def has_stage_direction(text: str) -> bool:
    return bool(_STAGE_DIRECTION_RE.search(text))


def spoken_word_count(text: str) -> int:
    """Whitespace token count with parenthetical stage directions removed."""
    return len(_STAGE_DIRECTION_RE.sub(" ", text).split())


@dataclass(frozen=True)
class TaggedLine:
    """
    index: 0-based position of the line in the input
    text: the raw line (not trimmed)
    tag: one of LINE_TAGS
    """
    index: int
    text: str
    tag: LineTag


@dataclass(frozen=True)
class SceneHeading:
    raw_text: str
    location: str
    time_of_day: str
    scene_number: Optional[str] = None


EMPTY_HEADING = SceneHeading(raw_text="", location="", time_of_day="", scene_number=None)


@dataclass(frozen=True)
class DialogueBlock:
    """
    character: normalized display name, always a key of ScreenplayDocument.characters
    text: spoken text with parentheticals kept verbatim
    contains_stage_direction: True iff text holds a parenthetical span
    """
    character: str
    text: str
    contains_stage_direction: bool = False

    @classmethod
    def build(cls, character: str, text: str) -> "DialogueBlock":
        return cls(character=character, text=text, contains_stage_direction=has_stage_direction(text))

    @property
    def word_count(self) -> int:
        return spoken_word_count(self.text)


@dataclass(frozen=True)
class SceneElement:
    """One entry of a scene in source order: an action paragraph or a dialogue block."""
    kind: str
    text: str
    character: Optional[str] = None


@dataclass(frozen=True)
class Scene:
    """
    index: position in ScreenplayDocument.scenes (0..N-1, monotonic in input order)
    heading: parsed heading; EMPTY_HEADING for the leading/implicit scene
    description: accumulated action text, one line per action line
    dialogues: dialogue blocks in source order
    elements: action paragraphs and dialogue blocks interleaved in source order
    """
    index: int
    heading: SceneHeading
    description: str = ""
    dialogues: Tuple[DialogueBlock, ...] = ()
    elements: Tuple[SceneElement, ...] = ()


@dataclass
class Character:
    """
    name: display form (first-seen casing)
    line_count: number of dialogue blocks attributed to the character
    total_words: spoken words across those blocks, stage directions excluded
    first_appearance_scene_index: index of the scene holding the first cue; set once
    gender_hint: "M", "F" or "Unknown"
    """
    name: str
    first_appearance_scene_index: int
    gender_hint: GenderHint = GENDER_UNKNOWN
    line_count: int = 0
    total_words: int = 0

    def register_line(self, block: DialogueBlock) -> None:
        self.line_count += 1
        self.total_words += block.word_count


@dataclass(frozen=True)
class ScreenplayDocument:
    scenes: Tuple[Scene, ...] = ()
    characters: Dict[str, Character] = field(default_factory=dict)
    raw_text: str = ""

    @property
    def scene_count(self) -> int:
        return len(self.scenes)

    @property
    def character_count(self) -> int:
        return len(self.characters)

    def dialogues(self) -> List[Tuple[int, DialogueBlock]]:
        """All dialogue blocks as (scene_index, block) pairs in document order."""
        return [(sc.index, d) for sc in self.scenes for d in sc.dialogues]

    def characters_by_lines(self) -> List[Character]:
        """Characters sorted by line count (desc), then first appearance, then name."""
        return sorted(
            self.characters.values(),
            key=lambda c: (-c.line_count, c.first_appearance_scene_index, c.name),
        )
