#!/usr/bin/env python3
"""
Inspect a parsed screenplay JSON written by parse_screenplay.py.

Use cases:
1) Character overview:
   python scripts/inspect_document.py --file data/parsed/script.json --top 20

2) Read one scene as the narration layer would:
   python scripts/inspect_document.py --file data/parsed/script.json --scene 12

3) Export a character CSV:
   python scripts/inspect_document.py --file data/parsed/script.json --csv data/parsed/characters.csv
"""
from __future__ import annotations

import argparse
import csv
import os
from typing import Any, Dict, List

from screenplay_parser.io.jsonio import load_json
from screenplay_parser.text.reading import NARRATOR, clean_text_for_speech

CSV_FIELDS = ["name", "line_count", "total_words", "first_appearance_scene_index", "gender_hint"]


def ranked_characters(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    chars = list((doc.get("characters") or {}).values())
    chars.sort(key=lambda c: (-int(c.get("line_count", 0)), int(c.get("first_appearance_scene_index", 0)), c.get("name", "")))
    return chars


def print_scene(scene: Dict[str, Any]) -> None:
    heading = scene.get("heading") or {}
    print("=" * 80)
    print(f"Scene {scene.get('index')}: {heading.get('raw_text') or '(no heading)'}")
    print(f"location={heading.get('location')!r}  time={heading.get('time_of_day')!r}  number={heading.get('scene_number')}")
    print("-" * 80)
    for el in scene.get("elements", []):
        speaker = el.get("character") or NARRATOR
        text = clean_text_for_speech(el.get("text", ""), is_narrator=(speaker == NARRATOR))
        if text:
            print(f"{speaker}: {text}")


def export_csv(chars: List[Dict[str, Any]], out_csv: str) -> None:
    os.makedirs(os.path.dirname(out_csv) or ".", exist_ok=True)
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        w.writeheader()
        for ch in chars:
            w.writerow(ch)


def main() -> None:
    ap = argparse.ArgumentParser(description="Inspect a parsed screenplay JSON.")
    ap.add_argument("--file", required=True, help="Path to the document JSON.")
    ap.add_argument("--top", type=int, default=20, help="Number of characters to print.")
    ap.add_argument("--scene", type=int, default=None, help="Print one scene by index.")
    ap.add_argument("--csv", default=None, help="If set, export the character table to CSV.")
    args = ap.parse_args()

    obj = load_json(args.file)
    doc = obj.get("document", obj)
    scenes = doc.get("scenes", [])
    if not isinstance(scenes, list):
        raise RuntimeError("JSON file does not contain a list under key 'scenes'.")

    if args.scene is not None:
        if not 0 <= args.scene < len(scenes):
            raise SystemExit(f"[error] scene index out of range: {args.scene} (0..{len(scenes) - 1})")
        print_scene(scenes[args.scene])
        return

    chars = ranked_characters(doc)
    if args.csv:
        export_csv(chars, args.csv)
        print(f"[ok] wrote CSV: {args.csv}")

    print(f"Scenes: {len(scenes)}  Characters: {len(chars)}")
    for ch in chars[: args.top]:
        print(
            f"{ch.get('name', ''):<24} lines={ch.get('line_count', 0):<4} "
            f"words={ch.get('total_words', 0):<6} gender={ch.get('gender_hint')}"
        )

    meta = obj.get("meta") or {}
    for w in meta.get("warnings", []):
        print(f"[warn] {w}")
    if not chars:
        print("[info] No characters found.")


if __name__ == "__main__":
    main()
