"""Extraction of named files from free-form generated text."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import GeneratedFile
from .fences import FenceSpan, scan_fences
from .language import LANGUAGE_BY_EXTENSION, classify

_COMMENT_WRAPPERS = (
    re.compile(r"^/\*+\s*(.*?)\s*\*+/$"),
    re.compile(r"^<!--\s*(.*?)\s*-->$"),
    re.compile(r"^\{/\*\s*(.*?)\s*\*/\}$"),
    re.compile(r"^(?://+|#+|--|;+)\s*(.*)$"),
)
_NAME_LABEL = re.compile(r"^(?:file(?:name)?|path)\s*:\s*", re.IGNORECASE)
_FILE_NAME = re.compile(r"^[\w@~+.-][\w@~+./\\-]*\.[A-Za-z0-9]+$")
_EXTENSIONLESS_NAMES = {"dockerfile", "makefile", "procfile", "gemfile", "license", "readme"}
# Recognized besides the classified extensions; anything else needs a directory.
_OTHER_EXTENSIONS = {
    "mjs", "cjs", "less", "sass", "vue", "svelte", "svg", "xml", "txt", "csv", "mdx",
    "yml", "yaml", "toml", "ini", "cfg", "env", "sh", "sql", "graphql", "lock",
}
_FILE_HEADER = re.compile(r"^\s*(?:[#>*-]+\s*)?\**File:\**\s*(.+?)\s*$")

logger = get_logger("parsing")


def parse(raw_text: str) -> List[GeneratedFile]:
    """Return the files described by ``raw_text`` in source order.

    The primary grammar reads the file name from the fence header; the
    ``File: <name>`` grammar is consulted only when the primary one finds
    nothing. A response without usable fences yields an empty list.
    """
    spans = scan_fences(raw_text)
    files = parse_primary(spans)
    if files:
        logger.debug("Primary grammar matched %d file(s) in %d span(s)", len(files), len(spans))
        return files
    files = parse_fallback(spans)
    logger.debug("Fallback grammar matched %d file(s) in %d span(s)", len(files), len(spans))
    return files


def parse_primary(spans: Sequence[FenceSpan]) -> List[GeneratedFile]:
    """Match spans whose header names a file, optionally inside a comment."""
    files: List[GeneratedFile] = []
    for span in spans:
        split = _split_header(span)
        if split is None:
            continue
        name, body = split
        record = _build_file(name, body, span.language)
        if record is not None:
            files.append(record)
    return files


def parse_fallback(spans: Sequence[FenceSpan]) -> List[GeneratedFile]:
    """Match spans preceded by a ``File: <name>`` line and declaring a language."""
    files: List[GeneratedFile] = []
    for span in spans:
        if span.prefix.strip() or span.language is None:
            continue
        match = _FILE_HEADER.match(span.line_before)
        if not match:
            continue
        name = _strip_decoration(match.group(1))
        record = _build_file(name, span.body, span.language)
        if record is not None:
            files.append(record)
    return files


def extract_file_name(header: str) -> Optional[str]:
    """Return the file name carried by a header line, or None if it has none."""
    candidate = header.strip()
    for pattern in _COMMENT_WRAPPERS:
        match = pattern.match(candidate)
        if match:
            candidate = match.group(1).strip()
            break
    candidate = _NAME_LABEL.sub("", candidate)
    candidate = _strip_decoration(candidate)
    if not candidate:
        return None
    if _FILE_NAME.match(candidate) and _looks_like_path(candidate):
        return candidate
    if candidate.lower() in _EXTENSIONLESS_NAMES:
        return candidate
    return None


def _split_header(span: FenceSpan) -> Optional[Tuple[str, str]]:
    inline = span.inline_header
    if inline:
        name = extract_file_name(inline)
        if name is not None:
            return name, span.body

    lines = span.body.split("\n")
    for position, line in enumerate(lines):
        if not line.strip():
            continue
        name = extract_file_name(line)
        if name is None:
            return None
        return name, "\n".join(lines[position + 1:])
    return None


def _looks_like_path(candidate: str) -> bool:
    if "/" in candidate or "\\" in candidate:
        return True
    extension = candidate.rsplit(".", 1)[1].lower()
    return extension in LANGUAGE_BY_EXTENSION or extension in _OTHER_EXTENSIONS


def _build_file(name: str, body: str, language: Optional[str]) -> Optional[GeneratedFile]:
    name = name.strip()
    content = body.strip()
    if not name or not content:
        return None
    return GeneratedFile(name=name, content=content, language=language or classify(name))


def _strip_decoration(value: str) -> str:
    return value.strip().strip("`*\"':").strip()


__all__ = ["extract_file_name", "parse", "parse_fallback", "parse_primary"]
