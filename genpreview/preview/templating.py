"""Jinja environment used to render preview documents."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return an environment that prefers ``templates_dir`` over the bundled templates."""
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(TEMPLATES_DIR))
    # ensure uniqueness preserving order
    seen: set[str] = set()
    ordered: list[str] = []
    for directory in directories:
        if directory not in seen:
            ordered.append(directory)
            seen.add(directory)
    loader = FileSystemLoader(ordered)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


__all__ = ["TEMPLATES_DIR", "create_environment"]
