"""
classifier.py

The single line classifier used by every caller.

Each line of linear screenplay text gets exactly one tag from an ordered chain
of heuristics. The first match wins, and the order is part of the contract:

1) blank                  trimmed text is empty
2) scene_heading          three tiers, tried in order:
                            a) traditional INT./EXT. prefix (optional scene
                               number, optional leading FADE IN:, optional
                               trailing scene/page numbers)
                            b) numbered scene (SCENE 12, SC. 12, "12 GREAT HALL")
                            c) all-caps line (6..99 chars) holding an INT/EXT
                               word or a time-of-day word, not ending in ':'
                               and not containing 'TO:'
3) character_cue          short all-caps name (one trailing parenthetical
                          allowed) followed by lowercase dialogue or a
                          parenthetical; or the inline "NAME: speech" form
4) parenthetical          "(...)"
5) dialogue_continuation  right after a cue, parenthetical or continuation
6) action                 everything else

classify_line() is a pure function of the line and its neighbor context, so it
can be tested on its own. classify_lines() walks a whole text and supplies that
context.

Scene heading parsing (location / time of day / scene number) lives here too,
because the classifier and the assembler must agree on what a heading is.
"""
from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from screenplay_parser.config import DEFAULT_CONFIG, ParserConfig
from screenplay_parser.model.document import (
    ACTION,
    BLANK,
    CHARACTER_CUE,
    DIALOGUE_CONTINUATION,
    LineTag,
    PARENTHETICAL,
    SCENE_HEADING,
    SceneHeading,
    TaggedLine,
)

# Longest first so that "MOMENTS LATER" wins over "LATER".
TIME_KEYWORDS: Tuple[str, ...] = (
    "MOMENTS LATER",
    "AFTERNOON",
    "CONTINUOUS",
    "MORNING",
    "EVENING",
    "NIGHT",
    "DUSK",
    "DAWN",
    "LATER",
    "DAY",
)
TRANSITION_KEYWORDS: Tuple[str, ...] = ("FADE", "CUT TO", "DISSOLVE")

_TIME_ALT = "|".join(re.escape(k) for k in TIME_KEYWORDS)
TIME_WORD_RE = re.compile(rf"\b(?:{_TIME_ALT})\b")
INT_EXT_WORD_RE = re.compile(r"\b(?:INT|EXT|INTERIOR|EXTERIOR|I/E)\b")

# Prefix must be followed by a period or whitespace ("INTO" is not "INT").
_IE_PREFIX = (
    r"(?:INT\.?\s*/\s*EXT|EXT\.?\s*/\s*INT|I\s*/\s*E|INTERIOR|EXTERIOR|INT|EXT)"
    r"(?:\.|(?=\s))"
)

# Bodies are matched greedily to the end of the line; trailing numbers and
# separators are peeled off token by token afterwards, so matching stays linear.
TRADITIONAL_HEADING_RE = re.compile(
    rf"""^\s*
    (?:FADE\s+IN:?\s*)?
    (?:(?P<num>\d{{1,4}}[A-Z]?)\.?\s+)?
    (?P<prefix>{_IE_PREFIX})
    \s*
    (?P<body>\S.*)$
    """,
    re.VERBOSE,
)

NUMBERED_HEADING_RE = re.compile(
    r"^\s*(?:SCENE|SC\.?)\s+(?P<num>\d{1,4}[A-Z]?)\b[.:]?(?P<body>.*)$"
)

BARE_NUMBER_HEADING_RE = re.compile(r"^\s*(?P<num>\d{1,4}[A-Z]?)[.)]?\s+(?P<body>\S.*)$")

TIME_AT_END_RE = re.compile(rf"\b(?P<tod>{_TIME_ALT})\b[\s.]*$")
PAGE_MARKER_RE = re.compile(r"\d[\d.]*[A-Z]?")

_LOCATION_STRIP = " \t-–—,.:/"

EXTENSION_SUFFIX_RE = re.compile(
    r" (?:V\.\s?O\.?|O\.\s?S\.?|O\.\s?C\.?|CONT['’]?D\.?)$",
    re.IGNORECASE,
)
TRAILING_TO_RE = re.compile(r"\bTO:?\s*$")

DIALOGUE_FAMILY = (CHARACTER_CUE, PARENTHETICAL, DIALOGUE_CONTINUATION)


def clean_spaces(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def is_uppercase_text(s: str) -> bool:
    """True when s has at least one letter and no lowercase letter."""
    return any(c.isalpha() for c in s) and not any(c.islower() for c in s)


def is_parenthetical(s: str) -> bool:
    t = s.strip()
    return t.startswith("(") and t.endswith(")")


def is_transition(s: str) -> bool:
    up = s.upper()
    if any(k in up for k in TRANSITION_KEYWORDS):
        return True
    return bool(TRAILING_TO_RE.search(up))


# ---------------------------------------------------------------------------
# Scene headings
# ---------------------------------------------------------------------------

def split_location_time(body: str) -> Tuple[str, str]:
    """
    Split a heading body such as "OFFICE - DAY" into (location, time_of_day).

    Tries a time keyword at the end first (page numbers after it are dropped);
    then the first time keyword anywhere in the body; then a trailing " - "
    segment. Numbers that are not behind a time keyword stay in the location
    ("ROOM 101", "APARTMENT 4B").
    """
    b = clean_spaces(body)
    if not b:
        return "", ""

    tokens = b.split(" ")
    end = len(tokens)
    while end > 0 and PAGE_MARKER_RE.fullmatch(tokens[end - 1]):
        end -= 1
    head = " ".join(tokens[:end])
    m = TIME_AT_END_RE.search(head)
    if m:
        return head[: m.start()].strip(_LOCATION_STRIP), m.group("tod")

    m = TIME_WORD_RE.search(b)
    if m:
        return b[: m.start()].strip(_LOCATION_STRIP), m.group(0)

    if " - " in b:
        loc, _, tod = b.rpartition(" - ")
        return loc.strip(_LOCATION_STRIP), tod.strip(_LOCATION_STRIP)

    return b.strip(_LOCATION_STRIP), ""


def _strip_repeated_number(body: str, num: Optional[str]) -> str:
    # headings sometimes end with their own scene number: "12 INT. HALL - DAY 12"
    tokens = clean_spaces(body).split(" ")
    if num:
        while len(tokens) > 1 and tokens[-1].rstrip(".") == num:
            tokens.pop()
    return " ".join(tokens)


def parse_scene_heading(text: str, *, config: Optional[ParserConfig] = None) -> Optional[SceneHeading]:
    """Return the parsed heading, or None if no heading tier matches."""
    cfg = config or DEFAULT_CONFIG
    s = text.strip()
    if not s or len(s) > cfg.heading_max_length:
        return None

    m = TRADITIONAL_HEADING_RE.match(s)
    if m:
        body = _strip_repeated_number(m.group("body"), m.group("num"))
        location, tod = split_location_time(body)
        return SceneHeading(raw_text=s, location=location, time_of_day=tod, scene_number=m.group("num"))

    m = NUMBERED_HEADING_RE.match(s)
    if m:
        body = _strip_repeated_number(m.group("body"), m.group("num"))
        location, tod = split_location_time(body)
        return SceneHeading(raw_text=s, location=location, time_of_day=tod, scene_number=m.group("num"))

    m = BARE_NUMBER_HEADING_RE.match(s)
    if m and is_uppercase_text(m.group("body")) and not is_transition(m.group("body")):
        body = _strip_repeated_number(m.group("body"), m.group("num"))
        location, tod = split_location_time(body)
        return SceneHeading(raw_text=s, location=location, time_of_day=tod, scene_number=m.group("num"))

    if (
        cfg.heading_caps_min_length <= len(s) <= cfg.heading_caps_max_length
        and is_uppercase_text(s)
        and (INT_EXT_WORD_RE.search(s) or TIME_WORD_RE.search(s))
        and not s.endswith(":")
        and "TO:" not in s
    ):
        location, tod = split_location_time(s)
        return SceneHeading(raw_text=s, location=location, time_of_day=tod, scene_number=None)

    return None


def is_scene_heading(text: str, *, config: Optional[ParserConfig] = None) -> bool:
    return parse_scene_heading(text, config=config) is not None


# ---------------------------------------------------------------------------
# Character cues
# ---------------------------------------------------------------------------

def _trailing_parenthetical_core(s: str) -> Optional[str]:
    """Text before a closing "(...)" group, or None when s does not end with one."""
    t = s.rstrip()
    if not t.endswith(")"):
        return None
    i = t.rfind("(")
    if i < 0 or ")" in t[i + 1 : -1]:
        return None
    return t[:i].strip()


def _strip_one_parenthetical(s: str) -> str:
    core = _trailing_parenthetical_core(s)
    return s if core is None else core


def has_cue_shape(text: str, *, config: Optional[ParserConfig] = None) -> bool:
    """Shape test for a standalone cue line, without the lookahead."""
    cfg = config or DEFAULT_CONFIG
    s = text.strip()
    core = _strip_one_parenthetical(s)
    if not core or not is_uppercase_text(core):
        return False
    if len(core) > cfg.cue_max_length:
        return False
    tokens = core.split()
    if len(tokens) > cfg.cue_max_words:
        return False
    if any("." in t and len(t) > cfg.cue_period_token_max for t in tokens):
        return False
    if is_transition(core):
        return False
    if is_scene_heading(s, config=cfg) or is_scene_heading(core, config=cfg):
        return False
    return True


def cue_followed_by_dialogue(next_text: Optional[str]) -> bool:
    """A cue must be followed by lowercase-containing dialogue or a parenthetical."""
    if next_text is None:
        return False
    n = next_text.strip()
    if not n:
        return False
    return is_parenthetical(n) or any(c.islower() for c in n)


def split_inline_cue(text: str, *, config: Optional[ParserConfig] = None) -> Optional[Tuple[str, str]]:
    """Return (name, speech) for the compact "NAME: speech" form, else None."""
    cfg = config or DEFAULT_CONFIG
    name, colon, speech = text.partition(":")
    name = clean_spaces(name)
    speech = speech.strip()
    if not colon or not name or not speech:
        return None
    if len(name) > cfg.cue_max_length or not is_uppercase_text(name):
        return None
    if name.startswith(("INT", "EXT", "I/E")):
        return None
    if is_transition(name):
        return None
    return name, speech


def normalize_character_name(cue: str) -> str:
    """
    Strip extensions from a cue: "SARAH (V.O.)", "SARAH (CONT'D)", "SARAH V.O."
    and "SARAH:" all become "SARAH".
    """
    name = clean_spaces(cue).rstrip(":").strip()
    while True:
        stripped = _strip_one_parenthetical(name)
        stripped = EXTENSION_SUFFIX_RE.sub("", stripped).strip()
        if not stripped or stripped == name:
            break
        name = stripped
    return name


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_line(
    text: str,
    prev_tag: Optional[str] = None,
    next_text: Optional[str] = None,
    *,
    after_blank: bool = False,
    config: Optional[ParserConfig] = None,
) -> LineTag:
    """
    Tag one line.

    Args:
        text: The line to classify.
        prev_tag: Tag of the nearest preceding non-blank line (None at the start).
            An inline "NAME: speech" cue has already started its speech and is
            passed as dialogue_continuation.
        next_text: The nearest following non-blank line (None at the end).
        after_blank: True when blank lines separate this line from prev_tag's line.
        config: Thresholds; DEFAULT_CONFIG when omitted.

    Returns:
        One of the LINE_TAGS constants.
    """
    cfg = config or DEFAULT_CONFIG
    s = text.strip()

    if not s:
        return BLANK

    if is_scene_heading(s, config=cfg):
        return SCENE_HEADING

    if has_cue_shape(s, config=cfg) and cue_followed_by_dialogue(next_text):
        return CHARACTER_CUE
    if split_inline_cue(s, config=cfg) is not None:
        return CHARACTER_CUE

    if is_parenthetical(s):
        return PARENTHETICAL

    # Blank lines may sit between a cue and its first line, not inside a speech.
    if prev_tag in DIALOGUE_FAMILY and (not after_blank or prev_tag == CHARACTER_CUE):
        return DIALOGUE_CONTINUATION

    return ACTION


def split_lines(text: str) -> List[str]:
    return text.splitlines()


def classify_lines(lines: Sequence[str], *, config: Optional[ParserConfig] = None) -> List[TaggedLine]:
    """Tag every line; the output has exactly one entry per input line."""
    cfg = config or DEFAULT_CONFIG

    next_nonblank: List[Optional[str]] = [None] * len(lines)
    upcoming: Optional[str] = None
    for i in range(len(lines) - 1, -1, -1):
        next_nonblank[i] = upcoming
        if lines[i].strip():
            upcoming = lines[i]

    tagged: List[TaggedLine] = []
    prev_tag: Optional[str] = None
    after_blank = False
    for i, line in enumerate(lines):
        tag = classify_line(
            line,
            prev_tag,
            next_nonblank[i],
            after_blank=after_blank,
            config=cfg,
        )
        tagged.append(TaggedLine(index=i, text=line, tag=tag))
        if tag == BLANK:
            after_blank = prev_tag is not None
        else:
            prev_tag = tag
            if tag == CHARACTER_CUE and split_inline_cue(line, config=cfg) is not None:
                prev_tag = DIALOGUE_CONTINUATION
            after_blank = False
    return tagged


def classify_text(text: str, *, config: Optional[ParserConfig] = None) -> List[TaggedLine]:
    return classify_lines(split_lines(text), config=config)


def find_near_misses(tagged: Sequence[TaggedLine], *, limit: int = 60) -> List[TaggedLine]:
    """Lines that mention INT/EXT but were not recognized as scene headings."""
    out: List[TaggedLine] = []
    for tl in tagged:
        if tl.tag == SCENE_HEADING or tl.tag == BLANK:
            continue
        if INT_EXT_WORD_RE.search(tl.text.upper()):
            out.append(tl)
            if len(out) >= limit:
                break
    return out


def explain_lines(text: str, *, config: Optional[ParserConfig] = None) -> List[str]:
    """Human-readable per-line report: "[n] TAG: text" (1-based line numbers)."""
    report: List[str] = []
    for tl in classify_text(text, config=config):
        label = tl.tag.upper()
        if tl.tag == BLANK:
            report.append(f"[{tl.index + 1}] {label}")
        else:
            report.append(f"[{tl.index + 1}] {label}: {tl.text.strip()}")
    return report
