from __future__ import annotations

import re
from typing import List, Sequence

# Page furniture that a PDF text layer interleaves with the screenplay.
_NOISE_LINE_RE = re.compile(
    r"""(
        ^\s*\(CONTINUED\)\s*$        |  # (CONTINUED)
        ^\s*CONTINUED:?\s*(\(\d+\))?\s*$ |  # CONTINUED: / CONTINUED: (2)
        ^\s*\(MORE\)\s*$             |  # (MORE) at a dialogue page break
        ^\s*Rev\.\s                  |  # revision header lines starting with 'Rev.'
        ^\s*\d{1,3}\.?\s*$           |  # bare page number '12' / '12.'
        ^\s*PAGE\s+\d+\s*$              # page footer like 'PAGE 12'
    )""",
    re.IGNORECASE | re.VERBOSE,
)


def is_layout_noise(line: str) -> bool:
    return bool(_NOISE_LINE_RE.search(line))


def clean_layout_noise(lines: Sequence[str]) -> List[str]:
    """
    Remove page furniture from extracted lines while keeping blank lines.

    Only used when the caller opts in: by default the parser never drops text.
    Blank lines are preserved because the classifier relies on them to tell a
    finished speech from the action that follows it.

    Args:
        lines: Raw lines of one or more pages.

    Returns:
        A new list without continuation markers, revision headers and page
        numbers.
    """
    cleaned: List[str] = []
    for ln in lines:
        if not ln.strip():
            cleaned.append(ln)
            continue
        if is_layout_noise(ln):
            continue
        cleaned.append(ln)
    return cleaned
