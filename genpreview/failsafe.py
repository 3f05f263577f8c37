"""Fail-safe documents shown when nothing can be previewed."""

from __future__ import annotations

from jinja2 import Environment

from .preview.constants import PLACEHOLDER_HEADING, PLACEHOLDER_MESSAGE
from .preview.templating import create_environment


def build_placeholder_document(
    env: Environment | None = None,
    *,
    reason: str | None = None,
) -> str:
    """Return the static placeholder document for an empty or unpreviewable project."""
    environment = env or create_environment()
    template = environment.get_template("placeholder.html.j2")
    return template.render(
        heading=PLACEHOLDER_HEADING,
        message=PLACEHOLDER_MESSAGE,
        reason=_format_reason(reason),
    )


def _format_reason(reason: str | None) -> str | None:
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return None
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


__all__ = ["build_placeholder_document"]
