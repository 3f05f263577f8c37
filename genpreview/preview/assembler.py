"""Synthesize a single renderable HTML document from project files."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from ..failsafe import build_placeholder_document
from ..logging import get_logger
from ..models import GeneratedFile, PreviewDocument
from ..state import ProjectState
from .constants import (
    DEFAULT_TITLE,
    DIAGNOSTIC_STYLE,
    ENTRY_FILES,
    ENTRY_SYMBOL,
    MARKUP_FILES,
    NO_COMPONENT_MESSAGE,
    RUNTIME_GLOBALS,
    RUNTIME_LIBRARIES,
    RUNTIME_MISSING_MESSAGE,
    STYLESHEET_FILES,
    TRANSFORM_MISSING_MESSAGE,
    RuntimeLibrary,
)
from .sanitize import sanitize_script
from .shims import render_shims
from .symbols import declared_names, mount_candidates
from .templating import create_environment

if TYPE_CHECKING:
    from ..config import PreviewConfig

ProjectFiles = Union[ProjectState, Mapping[str, str], Iterable[GeneratedFile]]


class PreviewAssembler:
    """Turns a project snapshot into the document handed to the sandboxed renderer.

    Selection follows a fixed priority: an author supplied markup file is
    returned untouched; otherwise the first entry script present is combined
    with the first stylesheet present; with neither, a static placeholder is
    produced. The assembler keeps no reference to the files it was given.
    """

    def __init__(
        self,
        *,
        markup_files: Sequence[str] = MARKUP_FILES,
        entry_files: Sequence[str] = ENTRY_FILES,
        stylesheet_files: Sequence[str] = STYLESHEET_FILES,
        libraries: Sequence[RuntimeLibrary] = RUNTIME_LIBRARIES,
        title: str = DEFAULT_TITLE,
        templates_dir: Path | None = None,
    ) -> None:
        self.markup_files = tuple(markup_files)
        self.entry_files = tuple(entry_files)
        self.stylesheet_files = tuple(stylesheet_files)
        self.libraries = tuple(libraries)
        self.title = title
        self.logger = get_logger("preview")
        self._env = create_environment(templates_dir)

    @classmethod
    def from_config(
        cls, config: "PreviewConfig", *, templates_dir: Path | None = None
    ) -> "PreviewAssembler":
        overrides = dict(config.runtime_urls or {})
        libraries = [
            replace(library, url=overrides[library.name]) if library.name in overrides else library
            for library in RUNTIME_LIBRARIES
        ]
        return cls(
            markup_files=config.markup_files,
            entry_files=config.entry_files,
            stylesheet_files=config.stylesheet_files,
            libraries=libraries,
            title=config.title,
            templates_dir=templates_dir,
        )

    def build(self, files: ProjectFiles) -> PreviewDocument:
        contents = _as_mapping(files)

        markup_name = _first_present(contents, self.markup_files)
        if markup_name is not None:
            self.logger.debug("Using %s verbatim as preview document", markup_name)
            return PreviewDocument(kind="markup", html=contents[markup_name], entry=markup_name)

        entry_name = _first_present(contents, self.entry_files)
        if entry_name is None:
            self.logger.debug("No markup or entry script among %d file(s)", len(contents))
            return PreviewDocument(kind="placeholder", html=build_placeholder_document(self._env))

        stylesheet_name = _first_present(contents, self.stylesheet_files)
        stylesheet = contents[stylesheet_name] if stylesheet_name else ""
        script = sanitize_script(contents[entry_name])
        candidates = mount_candidates(script, runtime_globals=RUNTIME_GLOBALS)
        self.logger.debug(
            "Synthesizing preview from %s (stylesheet=%s, candidates=%s)",
            entry_name,
            stylesheet_name,
            candidates,
        )

        html = self._env.get_template("document.html.j2").render(
            title=self.title,
            libraries=self.libraries,
            stylesheet=stylesheet.replace("</style", "<\\/style"),
            initial_diagnostic=None if candidates else NO_COMPONENT_MESSAGE,
            diagnostic_style=DIAGNOSTIC_STYLE,
            runtime_missing_message=RUNTIME_MISSING_MESSAGE,
            transform_missing_message=TRANSFORM_MISSING_MESSAGE,
            shims=render_shims(self._env, self.libraries),
            bindings=self._bindings(declared_names(script)),
            script=script,
            entry_symbol=ENTRY_SYMBOL,
            fallback_candidates=[name for name in candidates if name != ENTRY_SYMBOL],
            no_component_message=NO_COMPONENT_MESSAGE,
        )
        return PreviewDocument(
            kind="synthesized",
            html=html,
            entry=entry_name,
            stylesheet=stylesheet_name,
            candidates=candidates,
        )

    def _bindings(self, declared: Set[str]) -> List[str]:
        """Return preamble declarations for library globals the script does not declare itself."""
        bindings: List[str] = []
        for library in self.libraries:
            names = [name for name in library.exports if name not in declared]
            if names:
                bindings.append(f"{{ {', '.join(names)} }} = window.{library.global_name}")
            if library.bind_global and library.global_name not in declared:
                bindings.append(f"{library.global_name} = window.{library.global_name}")
        return bindings


def assemble(files: ProjectFiles, assembler: Optional[PreviewAssembler] = None) -> str:
    """Return the preview document for ``files`` as HTML text."""
    return (assembler or PreviewAssembler()).build(files).html


def _as_mapping(files: ProjectFiles) -> Dict[str, str]:
    if isinstance(files, ProjectState):
        return dict(files.snapshot())
    if isinstance(files, Mapping):
        return dict(files)
    mapping: Dict[str, str] = {}
    for record in files:
        mapping[record.name] = record.content
    return mapping


def _first_present(contents: Mapping[str, str], names: Sequence[str]) -> Optional[str]:
    # Empty content counts as absent.
    for name in names:
        if contents.get(name):
            return name
    return None


__all__ = ["PreviewAssembler", "ProjectFiles", "assemble"]
