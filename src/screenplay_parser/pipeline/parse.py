"""
parse.py

End-to-end entry points of the screenplay parser.

Data flow
---------
    linear text ──────────────────────────────┐
                                              ├─> lines ─> classify_lines ─> DocumentAssembler ─> ScreenplayDocument
    OCR fragments ─> layout reconstructor ────┘

Three ways in:
    parse_screenplay_text(text)      text layer already extracted (input A)
    parse_ocr_pages(pages)           per-page OCR fragments (input B)
    parse_pdf_screenplay(pdf_path)   a PDF: text layer per page, OCR collaborator
                                     for pages without one

The core never raises on content: malformed input yields a degenerate but valid
document. Parse-confidence problems (no scene heading on a long input, pages
with no text and no OCR, near-miss headings) are reported in the returned meta
dict, and printed as [warn] lines when verbose.
"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pdfplumber

from screenplay_parser.config import DEFAULT_CONFIG, ParserConfig
from screenplay_parser.io.jsonio import document_to_dict, safe_write_json
from screenplay_parser.io.pdf_source import SOURCE_EMPTY, SOURCE_OCR, OcrFn, extract_pages
from screenplay_parser.layout.reconstruct import TextFragment, pages_to_lines
from screenplay_parser.model.document import BLANK, SCENE_HEADING, ScreenplayDocument
from screenplay_parser.parse.assembler import assemble_document
from screenplay_parser.text.classifier import classify_lines, find_near_misses, split_lines
from screenplay_parser.text.cleaners import clean_layout_noise

# Below this many non-blank lines, finding no heading is not worth a warning.
NO_HEADING_WARN_MIN_LINES = 10


def parse_lines(
    lines: Sequence[str],
    *,
    config: Optional[ParserConfig] = None,
    raw_text: Optional[str] = None,
    line_pages: Optional[Sequence[int]] = None,
) -> Tuple[ScreenplayDocument, Dict[str, Any]]:
    """
    Classify and assemble a list of lines.

    Args:
        lines: Input lines in reading order.
        config: Thresholds and policies; DEFAULT_CONFIG when omitted.
        raw_text: Text stored on the document; defaults to the joined lines.
        line_pages: Optional page number per line, used in near-miss reports.

    Returns:
        (document, meta) where meta holds counts, near misses and warnings.
    """
    cfg = config or DEFAULT_CONFIG
    tagged = classify_lines(lines, config=cfg)
    document = assemble_document(
        tagged,
        config=cfg,
        raw_text="\n".join(lines) if raw_text is None else raw_text,
    )

    tag_counts: Dict[str, int] = {}
    for tl in tagged:
        tag_counts[tl.tag] = tag_counts.get(tl.tag, 0) + 1

    near_miss = []
    for tl in find_near_misses(tagged):
        entry: Dict[str, Any] = {"line": tl.index + 1, "text": tl.text.strip()}
        if line_pages is not None and tl.index < len(line_pages):
            entry["page"] = line_pages[tl.index]
        near_miss.append(entry)

    warnings: List[str] = []
    non_blank = len(tagged) - tag_counts.get(BLANK, 0)
    if tag_counts.get(SCENE_HEADING, 0) == 0 and non_blank >= NO_HEADING_WARN_MIN_LINES:
        warnings.append(f"no scene heading recognized in {non_blank} non-blank lines")
    if near_miss:
        warnings.append(f"{len(near_miss)} line(s) mention INT/EXT but were not read as scene headings")

    meta: Dict[str, Any] = {
        "scene_count": document.scene_count,
        "character_count": document.character_count,
        "line_count": len(tagged),
        "tag_counts": tag_counts,
        "near_miss_count": len(near_miss),
        "near_miss_examples": near_miss,
        "warnings": warnings,
    }
    return document, meta


def parse_screenplay_text(text: str, *, config: Optional[ParserConfig] = None) -> ScreenplayDocument:
    document, _ = parse_lines(split_lines(text), config=config, raw_text=text)
    return document


def parse_ocr_pages(
    pages: Sequence[Sequence[TextFragment]],
    *,
    config: Optional[ParserConfig] = None,
) -> ScreenplayDocument:
    """Parse per-page OCR fragments; pages must be given in page-index order."""
    lines = pages_to_lines(pages, config=config)
    document, _ = parse_lines(lines, config=config)
    return document


def parse_pdf_screenplay(
    pdf_path: str,
    *,
    config: Optional[ParserConfig] = None,
    pdf_open=pdfplumber.open,
    ocr: Optional[OcrFn] = None,
    use_layout: bool = False,
    strip_layout_noise: bool = False,
    debug: bool = False,
    dump_path: Optional[str] = None,
    verbose: bool = False,
) -> Tuple[ScreenplayDocument, Dict[str, Any]]:
    """
    Parse a screenplay PDF into a ScreenplayDocument.

    Args:
        pdf_path: Path to the screenplay PDF.
        config: Thresholds and policies; DEFAULT_CONFIG when omitted.
        pdf_open: PDF opener (pdfplumber.open by default; fakes in tests).
        ocr: Optional OCR collaborator for pages without a text layer.
        use_layout: Rebuild text pages from word boxes via the layout reconstructor.
        strip_layout_noise: Drop (CONTINUED)/(MORE)/page-number lines first.
        debug: Keep near-miss heading examples in meta.
        dump_path: If set, write {"meta", "document"} JSON there.
        verbose: Print phase/warn lines and show a progress bar over page extraction.

    Returns:
        (document, meta).
    """
    cfg = config or DEFAULT_CONFIG
    t0 = time.time()

    if verbose:
        print("[phase] read pdf pages...", flush=True)
    pages = extract_pages(pdf_path, pdf_open=pdf_open, ocr=ocr, use_layout=use_layout, progress=verbose)

    lines: List[str] = []
    line_pages: List[int] = []
    for page in pages:
        page_lines = page.lines(config=cfg)
        if strip_layout_noise:
            page_lines = clean_layout_noise(page_lines)
        lines.extend(page_lines)
        line_pages.extend([page.page_number] * len(page_lines))

    if verbose:
        print("[phase] classify + assemble...", flush=True)
    raw_text = "\n".join(lines)
    document, meta = parse_lines(lines, config=cfg, raw_text=raw_text, line_pages=line_pages)

    empty_pages = [p.page_number for p in pages if p.source == SOURCE_EMPTY]
    if empty_pages:
        meta["warnings"].append(f"{len(empty_pages)} page(s) without text layer and no OCR: {empty_pages[:20]}")

    meta.update(
        {
            "pdf": pdf_path,
            "pages_total": len(pages),
            "pages_ocr": sum(1 for p in pages if p.source == SOURCE_OCR),
            "pages_without_text": empty_pages,
            "page_sources": {p.page_number: p.source for p in pages},
            "elapsed_sec": round(time.time() - t0, 2),
        }
    )
    if not debug:
        meta["near_miss_examples"] = []

    if verbose:
        for w in meta["warnings"]:
            print(f"[warn] {w}", flush=True)

    if dump_path:
        safe_write_json(dump_path, {"meta": meta, "document": document_to_dict(document)})

    if verbose:
        print(
            f"[ok] scenes={document.scene_count} characters={document.character_count}"
            + (f" -> {dump_path}" if dump_path else ""),
            flush=True,
        )
    return document, meta
