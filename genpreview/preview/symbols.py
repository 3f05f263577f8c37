"""Top-level symbol discovery for sanitized entry scripts."""

from __future__ import annotations

import re
from typing import Iterable, List, Set, Tuple

from .constants import ENTRY_SYMBOL, RUNTIME_GLOBALS

_IDENTIFIER = r"[A-Za-z_$][\w$]*"

# Only declarations that start in column zero count as top level.
_DECLARATIONS = (
    re.compile(r"^(?:async[ \t]+)?function[ \t]*\*?[ \t]*(" + _IDENTIFIER + r")", re.MULTILINE),
    re.compile(r"^class[ \t]+(" + _IDENTIFIER + r")", re.MULTILINE),
    re.compile(r"^(?:const|let|var)[ \t]+(" + _IDENTIFIER + r")[ \t]*(?::[^=\n]*)?=", re.MULTILINE),
)
_DESTRUCTURING = re.compile(r"^(?:const|let|var)\s*([\[{])([^\]}]*)[\]}]\s*=", re.MULTILINE)


def top_level_symbols(script: str) -> List[str]:
    """Return names declared at the top level of ``script`` in declaration order."""
    found: List[Tuple[int, str]] = []
    for pattern in _DECLARATIONS:
        for match in pattern.finditer(script):
            found.append((match.start(), match.group(1)))
    return _unique(name for _, name in sorted(found))


def declared_names(script: str) -> Set[str]:
    """Return every top-level binding, including destructured ones."""
    names = set(top_level_symbols(script))
    for match in _DESTRUCTURING.finditer(script):
        for part in match.group(2).split(","):
            binding = part.strip()
            if binding.startswith("..."):
                binding = binding[3:].strip()
            if ":" in binding:
                binding = binding.split(":", 1)[1]
            binding = binding.split("=", 1)[0].strip()
            if re.fullmatch(_IDENTIFIER, binding):
                names.add(binding)
    return names


def mount_candidates(script: str, *, runtime_globals: Iterable[str] = RUNTIME_GLOBALS) -> List[str]:
    """Return the ordered entry symbol candidates for ``script``.

    ``App`` always leads when declared. The rest are top-level names that
    start with an uppercase letter and are not runtime globals, in declaration
    order. Whether a candidate is callable is only known when the document runs.
    """
    excluded = set(runtime_globals)
    symbols = top_level_symbols(script)
    ordered: List[str] = []
    if ENTRY_SYMBOL in symbols:
        ordered.append(ENTRY_SYMBOL)
    for name in symbols:
        if name == ENTRY_SYMBOL or name in excluded:
            continue
        if name[0].isupper():
            ordered.append(name)
    return ordered


def _unique(names: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    ordered: List[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


__all__ = ["declared_names", "mount_candidates", "top_level_symbols"]
