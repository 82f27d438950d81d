"""
statistics.py

Per-character statistics folded from dialogue blocks.

StatisticsAggregator is shared by both ways of computing statistics:
- incrementally, by the DocumentAssembler as it emits blocks;
- as a post-pass over a finished document (aggregate_statistics).
Both register a character on its first cue/block and then count every block,
so they produce identical Character maps for the same document.
"""
from __future__ import annotations

from typing import Dict, Optional

from screenplay_parser.model.document import Character, DialogueBlock, ScreenplayDocument
from screenplay_parser.text.names import detect_gender


class StatisticsAggregator:
    """
    Owns the name -> Character map of one parse.

    merge_name_case: when True, "SARAH" and "Sarah" are one character whose
    display name is whichever casing was seen first.
    """

    def __init__(self, *, merge_name_case: bool = True) -> None:
        self.merge_name_case = merge_name_case
        self._characters: Dict[str, Character] = {}
        self._display_by_key: Dict[str, str] = {}

    def _identity(self, name: str) -> str:
        return name.casefold() if self.merge_name_case else name

    def display_name(self, name: str) -> Optional[str]:
        return self._display_by_key.get(self._identity(name))

    def register_character(self, name: str, scene_index: int) -> str:
        """
        Record a cue. Creates the Character on first sight (first appearance and
        gender hint are set exactly once) and returns the display name to use.
        """
        key = self._identity(name)
        display = self._display_by_key.get(key)
        if display is not None:
            return display
        self._display_by_key[key] = name
        self._characters[name] = Character(
            name=name,
            first_appearance_scene_index=scene_index,
            gender_hint=detect_gender(name),
        )
        return name

    def observe(self, block: DialogueBlock) -> None:
        display = self.display_name(block.character)
        if display is None:
            raise KeyError(f"dialogue for unregistered character: {block.character!r}")
        self._characters[display].register_line(block)

    @property
    def characters(self) -> Dict[str, Character]:
        return self._characters


def aggregate_statistics(
    document: ScreenplayDocument,
    *,
    merge_name_case: bool = True,
) -> Dict[str, Character]:
    """Recompute the character map from a finished document's scenes."""
    agg = StatisticsAggregator(merge_name_case=merge_name_case)
    for scene in document.scenes:
        for block in scene.dialogues:
            agg.register_character(block.character, scene.index)
            agg.observe(block)
    return agg.characters
