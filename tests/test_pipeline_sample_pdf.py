import os
import pytest
from screenplay_parser.pipeline.parse import parse_pdf_screenplay

SAMPLE = "data/raw/sample_screenplay.pdf"

@pytest.mark.skipif(not os.path.exists(SAMPLE), reason="sample PDF not found in data/raw/")
def test_sample_pdf_structure():
    doc, meta = parse_pdf_screenplay(SAMPLE, debug=True)
    assert meta["scene_count"] == doc.scene_count > 0
    assert meta["pages_total"] >= 1
    # every dialogue block is attributed to a known character
    for scene_index, block in doc.dialogues():
        assert block.character in doc.characters
        assert doc.characters[block.character].first_appearance_scene_index <= scene_index
    assert [sc.index for sc in doc.scenes] == list(range(doc.scene_count))
