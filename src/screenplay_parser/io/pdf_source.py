"""
pdf_source.py

Turns a screenplay PDF into per-page parser input.

For every page we prefer the native text layer (pdfplumber extract_text). When
a page has no text layer, an OCR collaborator may be injected: a callable
ocr(page, page_number) that returns TextFragment objects for that page. The
OCR engine itself lives outside this package.

With use_layout=True, pages that do have a text layer are rebuilt from
pdfplumber's word boxes through the layout reconstructor instead, which is
useful when extract_text() interleaves columns or drops blank lines.

pdf_open is injectable so tests can pass a fake PDF object.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pdfplumber
from tqdm import tqdm

from screenplay_parser.config import ParserConfig
from screenplay_parser.layout.reconstruct import BBox, TextFragment, pages_to_lines

SOURCE_TEXT = "text"
SOURCE_LAYOUT = "layout"
SOURCE_OCR = "ocr"
SOURCE_EMPTY = "empty"

# pdfplumber reports PDF points; the default layout thresholds assume pixels at 2x.
DEFAULT_LAYOUT_SCALE = 2.0

OcrFn = Callable[[Any, int], Iterable[TextFragment]]


@dataclass(frozen=True)
class PageContent:
    """
    page_number: 1-based page number
    text: native text layer ("" when absent)
    fragments: positioned fragments (layout or OCR pages only)
    source: "text", "layout", "ocr" or "empty"
    """
    page_number: int
    text: str
    fragments: Tuple[TextFragment, ...] = ()
    source: str = SOURCE_EMPTY

    def lines(self, *, config: Optional[ParserConfig] = None) -> List[str]:
        if self.source in (SOURCE_LAYOUT, SOURCE_OCR):
            return pages_to_lines([self.fragments], config=config)
        return self.text.splitlines()


def fragments_from_words(
    words: Sequence[Dict[str, Any]],
    *,
    scale: float = DEFAULT_LAYOUT_SCALE,
) -> List[TextFragment]:
    """Convert pdfplumber word dicts (x0, top, x1, bottom, text) to fragments."""
    out: List[TextFragment] = []
    for w in words:
        x0 = float(w["x0"]) * scale
        top = float(w["top"]) * scale
        x1 = float(w["x1"]) * scale
        bottom = float(w["bottom"]) * scale
        out.append(
            TextFragment(
                text=str(w.get("text", "")),
                bbox=BBox(x=x0, y=top, w=x1 - x0, h=bottom - top),
                confidence=1.0,
            )
        )
    return out


def _run_ocr(ocr: OcrFn, page: Any, page_number: int) -> Tuple[TextFragment, ...]:
    fragments = tuple(ocr(page, page_number) or ())
    for frag in fragments:
        if not isinstance(frag, TextFragment):
            raise TypeError(
                f"OCR collaborator returned {type(frag).__name__} for page {page_number}; expected TextFragment"
            )
    return fragments


def extract_pages(
    pdf_path: str,
    *,
    pdf_open: Callable[..., Any] = pdfplumber.open,
    ocr: Optional[OcrFn] = None,
    use_layout: bool = False,
    layout_scale: float = DEFAULT_LAYOUT_SCALE,
    progress: bool = False,
) -> List[PageContent]:
    """
    Read every page of a PDF.

    Args:
        pdf_path: Path to the screenplay PDF.
        pdf_open: Opener returning a context manager with a .pages list.
        ocr: Optional OCR collaborator for pages without a text layer.
        use_layout: Rebuild text pages from word boxes instead of extract_text().
        layout_scale: Multiplier from PDF points to layout units.
        progress: Show a tqdm bar over the pages (text extraction and OCR).

    Returns:
        One PageContent per page, in page order.
    """
    pages: List[PageContent] = []
    with pdf_open(pdf_path) as pdf:
        for pno, p in enumerate(tqdm(pdf.pages, desc="pages", disable=not progress), start=1):
            text = p.extract_text() or ""

            if text.strip():
                if use_layout:
                    frags = fragments_from_words(p.extract_words(), scale=layout_scale)
                    if frags:
                        pages.append(PageContent(pno, text, tuple(frags), SOURCE_LAYOUT))
                        continue
                pages.append(PageContent(pno, text, (), SOURCE_TEXT))
                continue

            if ocr is not None:
                pages.append(PageContent(pno, "", _run_ocr(ocr, p, pno), SOURCE_OCR))
            else:
                pages.append(PageContent(pno, "", (), SOURCE_EMPTY))
    return pages
