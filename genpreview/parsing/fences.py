"""Fence boundary scanning for generated responses.

This is the first pass of response parsing: it only locates fenced spans and
records their raw pieces. Deciding whether a span describes a file is left to
the grammars in :mod:`genpreview.parsing.parser`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_FENCE_RUN = re.compile(r"`{3,}")


@dataclass(frozen=True)
class FenceSpan:
    """A terminated fenced span located in the source text."""

    start: int
    end: int
    info: str
    body: str
    line_before: str
    prefix: str

    @property
    def language(self) -> Optional[str]:
        """Return the declared language token, if the info string has one."""
        token = self.info.split(None, 1)[0] if self.info else ""
        if not token or not re.fullmatch(r"[A-Za-z0-9_+#-]+", token):
            return None
        return token.lower()

    @property
    def inline_header(self) -> str:
        """Return whatever follows the language token on the opening line."""
        if self.language is None:
            return self.info
        parts = self.info.split(None, 1)
        return parts[1].strip() if len(parts) > 1 else ""


def scan_fences(text: str) -> List[FenceSpan]:
    """Return every terminated fenced span in ``text`` in source order.

    An opening run of N backticks is closed by the next run of at least N
    backticks that starts after the opening line. Openings that never close
    are skipped and scanning resumes at the following run.
    """
    runs = list(_FENCE_RUN.finditer(text))
    spans: List[FenceSpan] = []
    index = 0
    while index < len(runs):
        opening = runs[index]
        line_end = text.find("\n", opening.end())
        if line_end == -1:
            break

        closing_index = _find_closing(runs, index, line_end)
        if closing_index is None:
            index += 1
            continue

        closing = runs[closing_index]
        line_start = text.rfind("\n", 0, opening.start()) + 1
        spans.append(
            FenceSpan(
                start=opening.start(),
                end=closing.end(),
                info=text[opening.end():line_end].strip(),
                body=text[line_end + 1:closing.start()],
                line_before=_previous_line(text, line_start),
                prefix=text[line_start:opening.start()],
            )
        )
        index = closing_index + 1
    return spans


def _find_closing(runs: List[re.Match[str]], index: int, line_end: int) -> Optional[int]:
    width = len(runs[index].group())
    for candidate in range(index + 1, len(runs)):
        run = runs[candidate]
        if run.start() < line_end:
            continue
        if len(run.group()) >= width:
            return candidate
    return None


def _previous_line(text: str, line_start: int) -> str:
    if line_start == 0:
        return ""
    previous_end = line_start - 1
    previous_start = text.rfind("\n", 0, previous_end) + 1
    return text[previous_start:previous_end].rstrip("\r")


__all__ = ["FenceSpan", "scan_fences"]
