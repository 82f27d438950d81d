#!/usr/bin/env python3
"""
Parse a screenplay (PDF or plain text) into scenes, dialogue and characters.

Examples:
1) PDF with a text layer, dump the document JSON:
   python scripts/parse_screenplay.py --pdf data/raw/script.pdf --out data/parsed/script.json

2) Plain text, show how every line was tagged:
   python scripts/parse_screenplay.py --text data/raw/script.txt --explain

3) PDF whose text layer interleaves columns, rebuild lines from word boxes:
   python scripts/parse_screenplay.py --pdf data/raw/script.pdf --use_layout --strip_noise
"""
from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

from screenplay_parser.config import (
    DEFAULT_LINE_PROXIMITY_THRESHOLD,
    DEFAULT_PARAGRAPH_SPACING_THRESHOLD,
    ParserConfig,
)
from screenplay_parser.io.jsonio import document_to_dict, safe_write_json
from screenplay_parser.model.document import ScreenplayDocument
from screenplay_parser.pipeline.parse import parse_lines, parse_pdf_screenplay
from screenplay_parser.text.classifier import explain_lines, split_lines
from screenplay_parser.text.cleaners import clean_layout_noise


def print_summary(document: ScreenplayDocument, meta: Dict[str, Any], *, top: int) -> None:
    print("=" * 80)
    print(f"scenes={document.scene_count}  characters={document.character_count}")
    if "pages_total" in meta:
        print(
            f"pages={meta['pages_total']}  ocr={meta['pages_ocr']}  "
            f"without_text={len(meta['pages_without_text'])}"
        )
    print("-" * 80)
    for ch in document.characters_by_lines()[:top]:
        print(
            f"{ch.name:<24} lines={ch.line_count:<4} words={ch.total_words:<6} "
            f"first_scene={ch.first_appearance_scene_index:<4} gender={ch.gender_hint}"
        )
    for w in meta.get("warnings", []):
        print(f"[warn] {w}")


def parse_text_file(path: str, *, config: ParserConfig, strip_noise: bool, debug: bool):
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    lines = split_lines(text)
    if strip_noise:
        lines = clean_layout_noise(lines)
    document, meta = parse_lines(lines, config=config, raw_text=text)
    if not debug:
        meta["near_miss_examples"] = []
    return document, meta


def main() -> None:
    ap = argparse.ArgumentParser(description="Parse a screenplay into scenes, dialogue and characters.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--pdf", default=None, help="Path to a screenplay PDF.")
    src.add_argument("--text", default=None, help="Path to a plain-text screenplay.")
    ap.add_argument("--out", default=None, help="If set, write the parsed document JSON here.")
    ap.add_argument("--use_layout", action="store_true", help="Rebuild PDF lines from word boxes.")
    ap.add_argument("--strip_noise", action="store_true", help="Drop (CONTINUED)/(MORE)/page-number lines.")
    ap.add_argument("--line_proximity", type=float, default=DEFAULT_LINE_PROXIMITY_THRESHOLD)
    ap.add_argument("--paragraph_spacing", type=float, default=DEFAULT_PARAGRAPH_SPACING_THRESHOLD)
    ap.add_argument("--drop_title_scene", action="store_true", help="Drop action that precedes the first heading.")
    ap.add_argument("--case_sensitive_names", action="store_true", help="Treat SARAH and Sarah as two characters.")
    ap.add_argument("--top", type=int, default=20, help="Number of characters to print.")
    ap.add_argument("--explain", action="store_true", help="Print the tag of every line (--text only).")
    ap.add_argument("--debug", action="store_true", help="Keep near-miss heading examples in meta.")
    ap.add_argument("--quiet", action="store_true", help="No progress output.")
    args = ap.parse_args()

    config = ParserConfig(
        line_proximity_threshold=args.line_proximity,
        paragraph_spacing_threshold=args.paragraph_spacing,
        keep_title_scene=not args.drop_title_scene,
        merge_name_case=not args.case_sensitive_names,
    )

    out: Optional[str] = args.out
    if args.pdf:
        document, meta = parse_pdf_screenplay(
            args.pdf,
            config=config,
            use_layout=args.use_layout,
            strip_layout_noise=args.strip_noise,
            debug=args.debug,
            dump_path=out,
            verbose=not args.quiet,
        )
    else:
        if args.explain:
            with open(args.text, "r", encoding="utf-8") as f:
                for row in explain_lines(f.read(), config=config):
                    print(row)
            return
        document, meta = parse_text_file(
            args.text, config=config, strip_noise=args.strip_noise, debug=args.debug
        )
        if out:
            safe_write_json(out, {"meta": meta, "document": document_to_dict(document)})
            print(f"[ok] wrote {out}")

    print_summary(document, meta, top=args.top)


if __name__ == "__main__":
    main()
