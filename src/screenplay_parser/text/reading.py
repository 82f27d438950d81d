"""
reading.py

Flattens a parsed document into the order a narration/playback layer reads it.

Each ReadingItem carries a speaker and the text to read. Scene headings and
action paragraphs are attributed to NARRATOR; dialogue blocks to their
character. Voice selection and synthesis are not done here; this module only
decides what is read, by whom, in which order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence

from screenplay_parser.model.document import ELEMENT_DIALOGUE, Scene, ScreenplayDocument

NARRATOR = "NARRATOR"

_STAGE_DIRECTION_RES = (re.compile(r"\([^()]*\)"), re.compile(r"\[[^\[\]]*\]"))
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")


@dataclass(frozen=True)
class ReadingItem:
    scene_index: int
    speaker: str
    text: str

    @property
    def is_narration(self) -> bool:
        return self.speaker == NARRATOR


def split_blocks(lines: Sequence[str]) -> List[List[str]]:
    """Group consecutive non-empty lines; blank lines separate blocks."""
    blocks: List[List[str]] = []
    cur: List[str] = []
    for ln in lines:
        if ln.strip() == "":
            if cur:
                blocks.append(cur)
                cur = []
        else:
            cur.append(ln.strip())
    if cur:
        blocks.append(cur)
    return blocks


def wrap_paragraphs(lines: Sequence[str]) -> str:
    """Join wrapped lines into paragraphs; paragraphs are separated by one blank line."""
    return "\n\n".join(" ".join(blk) for blk in split_blocks(lines))


def clean_text_for_speech(text: str, *, is_narrator: bool) -> str:
    """
    Collapse newlines and repeated whitespace. Narrator text also loses its
    parenthetical and bracketed stage directions, and the space a removed
    direction leaves before punctuation; character text keeps them so the
    caller can still see them.
    """
    cleaned = text.replace("\n", " ")
    if is_narrator:
        for rx in _STAGE_DIRECTION_RES:
            cleaned = rx.sub("", cleaned)
        cleaned = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def _scene_items(scene: Scene, interleaved: bool) -> List[ReadingItem]:
    items: List[ReadingItem] = []

    def add(speaker: str, text: str) -> None:
        spoken = clean_text_for_speech(text, is_narrator=(speaker == NARRATOR))
        if spoken:
            items.append(ReadingItem(scene_index=scene.index, speaker=speaker, text=spoken))

    if scene.heading.raw_text:
        add(NARRATOR, scene.heading.raw_text)

    if interleaved:
        for el in scene.elements:
            if el.kind == ELEMENT_DIALOGUE and el.character:
                add(el.character, el.text)
            else:
                add(NARRATOR, el.text)
        return items

    # description first, then every dialogue block
    add(NARRATOR, wrap_paragraphs(scene.description.splitlines()))
    for d in scene.dialogues:
        add(d.character, d.text)
    return items


def reading_sequence(document: ScreenplayDocument, *, interleaved: bool = True) -> List[ReadingItem]:
    """
    Args:
        document: A parsed screenplay.
        interleaved: True reads action and dialogue in source order; False reads
            each scene's whole description before its dialogue.

    Returns:
        ReadingItems in reading order. Items with nothing left to read after
        cleaning (a cue with no body) are skipped.
    """
    out: List[ReadingItem] = []
    for scene in document.scenes:
        out.extend(_scene_items(scene, interleaved))
    return out
