"""
assembler.py

Single-pass state machine that turns tagged lines into a ScreenplayDocument.

State carried between lines:
    current scene      heading + action lines + dialogue blocks, built in place
                       and frozen into a Scene when the next heading arrives
    active character   display name of the speaker whose turn is open
    speech parts       text collected for the open turn

Transitions (one per tag):
    scene_heading          close the open scene, open a new one
    character_cue          close the open turn, register the character, open a turn
    parenthetical          part of the open turn (kept verbatim), else action
    dialogue_continuation  part of the open turn, else action
    action                 closes the open turn, goes to the scene description
    blank                  closes the open turn unless the next non-blank line
                           is a parenthetical or a continuation

Text before the first heading becomes a leading scene with an empty heading.
A document without any heading is one implicit scene. Nothing raises: every
input yields a (possibly empty) document.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from screenplay_parser.config import DEFAULT_CONFIG, ParserConfig
from screenplay_parser.model.document import (
    BLANK,
    CHARACTER_CUE,
    DIALOGUE_CONTINUATION,
    ELEMENT_ACTION,
    ELEMENT_DIALOGUE,
    EMPTY_HEADING,
    PARENTHETICAL,
    SCENE_HEADING,
    DialogueBlock,
    Scene,
    SceneElement,
    SceneHeading,
    ScreenplayDocument,
    TaggedLine,
)
from screenplay_parser.parse.statistics import StatisticsAggregator
from screenplay_parser.text.classifier import (
    clean_spaces,
    normalize_character_name,
    parse_scene_heading,
    split_inline_cue,
)

_TURN_CONTINUES = (PARENTHETICAL, DIALOGUE_CONTINUATION)


class DocumentAssembler:
    def __init__(self, *, config: Optional[ParserConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.stats = StatisticsAggregator(merge_name_case=self.config.merge_name_case)
        self.scenes: List[Scene] = []

        self._scene_open = False
        self._heading: SceneHeading = EMPTY_HEADING
        self._action_lines: List[str] = []
        self._paragraph: List[str] = []
        self._elements: List[SceneElement] = []
        self._dialogues: List[DialogueBlock] = []

        self._active: Optional[str] = None
        self._speech: List[str] = []

    @property
    def current_scene_index(self) -> int:
        return len(self.scenes)

    # -- scene lifecycle ---------------------------------------------------

    def _open_scene(self, heading: SceneHeading) -> None:
        self._scene_open = True
        self._heading = heading
        self._action_lines = []
        self._paragraph = []
        self._elements = []
        self._dialogues = []

    def _ensure_scene(self) -> None:
        if not self._scene_open:
            self._open_scene(EMPTY_HEADING)

    def _close_scene(self, *, followed_by_heading: bool) -> None:
        if not self._scene_open:
            return
        self._flush_turn()
        self._close_paragraph()

        leading = self._heading is EMPTY_HEADING and not self.scenes
        drop = (
            leading
            and followed_by_heading
            and not self.config.keep_title_scene
            and not self._dialogues
        )
        if not drop:
            self.scenes.append(
                Scene(
                    index=len(self.scenes),
                    heading=self._heading,
                    description="\n".join(self._action_lines),
                    dialogues=tuple(self._dialogues),
                    elements=tuple(self._elements),
                )
            )
        self._scene_open = False

    # -- action ------------------------------------------------------------

    def _add_action(self, text: str) -> None:
        s = clean_spaces(text)
        if not s:
            return
        self._ensure_scene()
        self._action_lines.append(s)
        self._paragraph.append(s)

    def _close_paragraph(self) -> None:
        if self._paragraph:
            self._elements.append(SceneElement(kind=ELEMENT_ACTION, text=" ".join(self._paragraph)))
            self._paragraph = []

    # -- dialogue ----------------------------------------------------------

    def _open_turn(self, cue_text: str) -> None:
        self._flush_turn()
        self._close_paragraph()
        self._ensure_scene()

        inline = split_inline_cue(cue_text, config=self.config)
        if inline is not None:
            raw_name, speech = inline
        else:
            raw_name, speech = cue_text, ""

        name = normalize_character_name(raw_name)
        self._active = self.stats.register_character(name, self.current_scene_index)
        self._speech = [speech.strip()] if speech.strip() else []

    def _flush_turn(self) -> None:
        # A cue without a body still yields a (zero-length) block.
        if self._active is None:
            return
        block = DialogueBlock.build(self._active, " ".join(self._speech))
        self._dialogues.append(block)
        self._elements.append(SceneElement(kind=ELEMENT_DIALOGUE, text=block.text, character=block.character))
        self.stats.observe(block)
        self._active = None
        self._speech = []

    # -- driver ------------------------------------------------------------

    def feed(self, tagged: Sequence[TaggedLine]) -> None:
        upcoming = _next_nonblank_tags(tagged)
        for i, tl in enumerate(tagged):
            tag = tl.tag
            if tag == BLANK:
                self._close_paragraph()
                if self._active is not None and upcoming[i] not in _TURN_CONTINUES:
                    self._flush_turn()
            elif tag == SCENE_HEADING:
                self._close_scene(followed_by_heading=True)
                heading = parse_scene_heading(tl.text, config=self.config)
                if heading is None:
                    heading = SceneHeading(raw_text=tl.text.strip(), location="", time_of_day="")
                self._open_scene(heading)
            elif tag == CHARACTER_CUE:
                self._open_turn(tl.text)
            elif tag in _TURN_CONTINUES and self._active is not None:
                self._speech.append(tl.text.strip())
            else:
                # action, or a parenthetical/continuation with no open turn
                self._flush_turn()
                self._add_action(tl.text)

    def finish(self, raw_text: str = "") -> ScreenplayDocument:
        self._close_scene(followed_by_heading=False)
        return ScreenplayDocument(
            scenes=tuple(self.scenes),
            characters=dict(self.stats.characters),
            raw_text=raw_text,
        )


def _next_nonblank_tags(tagged: Sequence[TaggedLine]) -> List[Optional[str]]:
    """For each position, the tag of the first non-blank line after it."""
    out: List[Optional[str]] = [None] * len(tagged)
    nxt: Optional[str] = None
    for i in range(len(tagged) - 1, -1, -1):
        out[i] = nxt
        if tagged[i].tag != BLANK:
            nxt = tagged[i].tag
    return out


def assemble_document(
    tagged: Sequence[TaggedLine],
    *,
    config: Optional[ParserConfig] = None,
    raw_text: str = "",
) -> ScreenplayDocument:
    assembler = DocumentAssembler(config=config)
    assembler.feed(tagged)
    return assembler.finish(raw_text)
