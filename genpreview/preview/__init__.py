"""Preview document synthesis."""

from .assembler import PreviewAssembler, assemble
from .sanitize import sanitize_script, strip_exports, strip_imports
from .symbols import mount_candidates, top_level_symbols

__all__ = [
    "PreviewAssembler",
    "assemble",
    "mount_candidates",
    "sanitize_script",
    "strip_exports",
    "strip_imports",
    "top_level_symbols",
]
