"""Textual removal of module syntax from entry scripts.

The synthesized preview runs the entry script as a classic script, where
``import`` and ``export`` are syntax errors. These rewrites are plain regular
expressions over the source text: comments or strings that happen to look
like module statements are rewritten too.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Tuple

from .constants import DEFAULT_EXPORT_SYMBOL

_QUOTED = r"""(['"])[^'"\n]*\1"""
_LINE_TAIL = r"[ \t]*;?[ \t]*(?:\r?\n)?"

# import 'polyfill';
SIDE_EFFECT_IMPORT = re.compile(r"^[ \t]*import\s*" + _QUOTED + _LINE_TAIL, re.MULTILINE)
# import X from 'x'; import { a, b as c } from 'x'; import X, { a } from 'x'; import * as ns from 'x'
FROM_IMPORT = re.compile(
    r"^[ \t]*import\s+(?:type\s+)?"
    r"(?:[A-Za-z_$][\w$]*\s*,?\s*)?"
    r"(?:\{[^}]*\}|\*\s*as\s+[A-Za-z_$][\w$]*)?"
    r"\s*from\s*" + _QUOTED + _LINE_TAIL,
    re.MULTILINE,
)
IMPORT_PATTERNS: Tuple[Pattern[str], ...] = (SIDE_EFFECT_IMPORT, FROM_IMPORT)

EXPORT_REWRITES: Tuple[Tuple[Pattern[str], str], ...] = (
    # export { a, b as c }; export { a } from 'x';
    (
        re.compile(
            r"^[ \t]*export\s*(?:type\s*)?\{[^}]*\}\s*(?:from\s*" + _QUOTED + r")?" + _LINE_TAIL,
            re.MULTILINE,
        ),
        "",
    ),
    # export * from 'x'; export * as ns from 'x';
    (
        re.compile(
            r"^[ \t]*export\s*\*\s*(?:as\s+[A-Za-z_$][\w$]*\s*)?from\s*" + _QUOTED + _LINE_TAIL,
            re.MULTILINE,
        ),
        "",
    ),
    # export default App;
    (
        re.compile(
            r"^[ \t]*export\s+default\s+(?!(?:async\s+)?function\b|class\b)[A-Za-z_$][\w$]*"
            r"[ \t]*;?[ \t]*(?:\r?\n|$)",
            re.MULTILINE,
        ),
        "",
    ),
    # export default function () {}
    (
        re.compile(r"\bexport\s+default\s+(async\s+)?function\s*(\*?)\s*\("),
        r"\1function\2 " + DEFAULT_EXPORT_SYMBOL + "(",
    ),
    # export default class {}
    (
        re.compile(r"\bexport\s+default\s+class\s*(?=\{|extends\b)"),
        "class " + DEFAULT_EXPORT_SYMBOL + " ",
    ),
    # export default function App() {} / export default class App {}
    (re.compile(r"\bexport\s+default\s+(?=(?:async\s+)?function\b|class\b)"), ""),
    # export default memo(App); export default () => ...
    (re.compile(r"\bexport\s+default\s+"), "const " + DEFAULT_EXPORT_SYMBOL + " = "),
    # export const x = ...; export function f() {}
    (re.compile(r"\bexport\s+"), ""),
)


def strip_imports(script: str) -> str:
    """Remove every recognised static import statement."""
    for pattern in IMPORT_PATTERNS:
        script = _sub_until_stable(pattern, "", script)
    return script


def strip_exports(script: str) -> str:
    """Remove export lists and turn exported declarations into plain ones."""
    for pattern, replacement in EXPORT_REWRITES:
        script = _sub_until_stable(pattern, replacement, script)
    return script


def sanitize_script(script: str) -> str:
    """Return ``script`` without module syntax, ready for a classic script tag."""
    cleaned = strip_exports(strip_imports(script))
    cleaned = _drop_leading_blank_lines(cleaned)
    # Keep the surrounding script element intact.
    return cleaned.replace("</script", "<\\/script")


def find_imports(script: str) -> List[str]:
    """Return the import statements :func:`strip_imports` would remove."""
    found: List[Tuple[int, str]] = []
    for pattern in IMPORT_PATTERNS:
        for match in pattern.finditer(script):
            found.append((match.start(), match.group(0).strip()))
    return [statement for _, statement in sorted(found)]


def _sub_until_stable(pattern: Pattern[str], replacement: str, text: str) -> str:
    # Several statements on one line only expose the next one at a line start
    # after the previous one has been removed.
    while True:
        text, count = pattern.subn(replacement, text)
        if count == 0:
            return text


def _drop_leading_blank_lines(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    return "\n".join(lines)


__all__ = [
    "find_imports",
    "sanitize_script",
    "strip_exports",
    "strip_imports",
]
