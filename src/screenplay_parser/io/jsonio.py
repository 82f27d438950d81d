import json
import os
from dataclasses import asdict
from typing import Any, Dict

from screenplay_parser.model.document import ScreenplayDocument


def safe_write_json(path: str, obj: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    os.replace(tmp, path)


def load_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def document_to_dict(document: ScreenplayDocument, *, include_raw_text: bool = False) -> Dict[str, Any]:
    """Plain-JSON view of a document; persistence itself is the caller's business."""
    out: Dict[str, Any] = {
        "scene_count": document.scene_count,
        "character_count": document.character_count,
        "scenes": [
            {
                "index": sc.index,
                "heading": asdict(sc.heading),
                "description": sc.description,
                "dialogues": [asdict(d) for d in sc.dialogues],
                "elements": [asdict(el) for el in sc.elements],
            }
            for sc in document.scenes
        ],
        "characters": {name: asdict(ch) for name, ch in document.characters.items()},
    }
    if include_raw_text:
        out["raw_text"] = document.raw_text
    return out
