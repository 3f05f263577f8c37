"""Materialize generated text into project files and sandbox previews."""

from .models import GeneratedFile, PreviewDocument
from .parsing import classify, parse
from .preview import assemble
from .state import ProjectState

__version__ = "0.1.0"

__all__ = [
    "GeneratedFile",
    "PreviewDocument",
    "ProjectState",
    "assemble",
    "classify",
    "parse",
]
