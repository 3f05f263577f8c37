"""File name to language tag classification."""

from __future__ import annotations

from typing import Dict

DEFAULT_LANGUAGE = "text"

LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "htm": "html",
    "json": "json",
    "md": "markdown",
    "py": "python",
}


def classify(file_name: str) -> str:
    """Return the language tag for ``file_name`` based on its extension."""
    base = file_name.strip().replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return DEFAULT_LANGUAGE
    extension = base.rsplit(".", 1)[1].lower()
    return LANGUAGE_BY_EXTENSION.get(extension, DEFAULT_LANGUAGE)


__all__ = ["DEFAULT_LANGUAGE", "LANGUAGE_BY_EXTENSION", "classify"]
