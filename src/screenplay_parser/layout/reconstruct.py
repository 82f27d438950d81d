"""
reconstruct.py

Rebuilds reading-order lines and paragraphs from OCR text fragments.

This is only needed when a page has no native text layer. The OCR collaborator
hands us, per page, a bag of TextFragment objects (text + bounding box +
confidence). We turn them into:

1) TextLine: fragments judged co-linear, grouped by vertical center.
   Fragments are sorted by (midY, x); a fragment joins the current line when
   |fragment.midY - line.midY| < line_proximity_threshold. Closed lines are
   re-sorted left-to-right before being frozen.
2) Paragraph: lines judged vertically contiguous. A line joins the current
   paragraph when (line.top - previous.bottom) < paragraph_spacing_threshold.

Fragments with absent or zero-area boxes never merge with anything: they always
open (and close) their own line and paragraph. Uncertain geometry is never
silently merged.

Pages are independent of each other; callers concatenate page results in page
index order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from screenplay_parser.config import DEFAULT_CONFIG, ParserConfig


@dataclass(frozen=True)
class BBox:
    x: float
    y: float
    w: float
    h: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def mid_y(self) -> float:
        return self.y + self.h / 2.0

    @property
    def is_degenerate(self) -> bool:
        return not (self.w > 0 and self.h > 0)


def union_bbox(boxes: Iterable[Optional[BBox]]) -> Optional[BBox]:
    present = [b for b in boxes if b is not None]
    if not present:
        return None
    x0 = min(b.x for b in present)
    y0 = min(b.y for b in present)
    x1 = max(b.right for b in present)
    y1 = max(b.bottom for b in present)
    return BBox(x=x0, y=y0, w=x1 - x0, h=y1 - y0)


@dataclass(frozen=True)
class TextFragment:
    text: str
    bbox: Optional[BBox]
    confidence: float = 1.0

    @property
    def has_geometry(self) -> bool:
        return self.bbox is not None and not self.bbox.is_degenerate


@dataclass(frozen=True)
class TextLine:
    fragments: Tuple[TextFragment, ...]
    bbox: Optional[BBox]
    text: str

    @property
    def has_geometry(self) -> bool:
        return self.bbox is not None and all(f.has_geometry for f in self.fragments)

    @property
    def confidence(self) -> float:
        if not self.fragments:
            return 0.0
        return sum(f.confidence for f in self.fragments) / len(self.fragments)


@dataclass(frozen=True)
class Paragraph:
    lines: Tuple[TextLine, ...]
    bbox: Optional[BBox]
    text: str

    @property
    def confidence(self) -> float:
        if not self.lines:
            return 0.0
        return sum(ln.confidence for ln in self.lines) / len(self.lines)


def _reading_key(fragment: TextFragment) -> Tuple[float, float]:
    # Fragments without a box go last, in input order (sort is stable).
    if fragment.bbox is None:
        return (math.inf, math.inf)
    return (fragment.bbox.mid_y, fragment.bbox.x)


def _x_key(fragment: TextFragment) -> float:
    return fragment.bbox.x if fragment.bbox is not None else math.inf


def _freeze_line(fragments: List[TextFragment]) -> TextLine:
    ordered = sorted(fragments, key=_x_key)
    text = " ".join(f.text.strip() for f in ordered if f.text.strip())
    return TextLine(
        fragments=tuple(ordered),
        bbox=union_bbox(f.bbox for f in ordered),
        text=text,
    )


def group_lines(
    fragments: Sequence[TextFragment],
    *,
    config: Optional[ParserConfig] = None,
) -> List[TextLine]:
    """Cluster one page of fragments into lines, top to bottom."""
    cfg = config or DEFAULT_CONFIG
    threshold = cfg.line_proximity_threshold

    lines: List[TextLine] = []
    cur: List[TextFragment] = []
    cur_box: Optional[BBox] = None
    cur_uncertain = False

    def flush():
        nonlocal cur, cur_box, cur_uncertain
        if cur:
            lines.append(_freeze_line(cur))
        cur = []
        cur_box = None
        cur_uncertain = False

    for frag in sorted(fragments, key=_reading_key):
        joins = (
            bool(cur)
            and not cur_uncertain
            and frag.has_geometry
            and cur_box is not None
            and abs(frag.bbox.mid_y - cur_box.mid_y) < threshold
        )
        if not joins:
            flush()
        cur.append(frag)
        cur_box = union_bbox([cur_box, frag.bbox])
        if not frag.has_geometry:
            cur_uncertain = True

    flush()
    return lines


def group_paragraphs(
    lines: Sequence[TextLine],
    *,
    config: Optional[ParserConfig] = None,
) -> List[Paragraph]:
    """Walk lines in order and merge vertically contiguous ones into paragraphs."""
    cfg = config or DEFAULT_CONFIG
    spacing = cfg.paragraph_spacing_threshold

    paragraphs: List[Paragraph] = []
    cur: List[TextLine] = []

    def flush():
        nonlocal cur
        if cur:
            paragraphs.append(
                Paragraph(
                    lines=tuple(cur),
                    bbox=union_bbox(ln.bbox for ln in cur),
                    text="\n".join(ln.text for ln in cur),
                )
            )
        cur = []

    for line in lines:
        prev = cur[-1] if cur else None
        joins = (
            prev is not None
            and prev.has_geometry
            and line.has_geometry
            and (line.bbox.top - prev.bbox.bottom) < spacing
        )
        if not joins:
            flush()
        cur.append(line)

    flush()
    return paragraphs


def reconstruct_page(
    fragments: Sequence[TextFragment],
    *,
    config: Optional[ParserConfig] = None,
) -> List[Paragraph]:
    return group_paragraphs(group_lines(fragments, config=config), config=config)


def paragraphs_to_lines(paragraphs: Sequence[Paragraph]) -> List[str]:
    """Flatten paragraphs into text lines, one blank line between paragraphs."""
    out: List[str] = []
    for para in paragraphs:
        if out:
            out.append("")
        out.extend(ln.text for ln in para.lines)
    return out


def pages_to_lines(
    pages: Sequence[Sequence[TextFragment]],
    *,
    config: Optional[ParserConfig] = None,
) -> List[str]:
    """
    Reconstruct every page and concatenate the line streams in page order.

    Pages are joined back to back, like a native text layer, so a speech that
    runs over a page break stays one speech.
    """
    out: List[str] = []
    for fragments in pages:
        out.extend(paragraphs_to_lines(reconstruct_page(fragments, config=config)))
    return out
