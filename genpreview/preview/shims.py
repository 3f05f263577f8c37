"""Inert stand-ins for optional runtime libraries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from jinja2 import Environment

from .constants import RuntimeLibrary


@dataclass(frozen=True)
class ShimBlock:
    """Rendered guard that installs a shim when a library global is missing."""

    library: str
    global_name: str
    script: str


def render_shims(env: Environment, libraries: Sequence[RuntimeLibrary]) -> List[ShimBlock]:
    """Render the shim guard for every optional library that ships one."""
    blocks: List[ShimBlock] = []
    for library in libraries:
        if not library.optional or not library.shim:
            continue
        template = env.get_template(library.shim)
        script = template.render(library=library).strip()
        blocks.append(
            ShimBlock(library=library.name, global_name=library.global_name, script=script)
        )
    return blocks


__all__ = ["ShimBlock", "render_shims"]
