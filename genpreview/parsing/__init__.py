"""Response parsing: fence scanning, file grammars and language tags."""

from .fences import FenceSpan, scan_fences
from .language import classify
from .parser import extract_file_name, parse, parse_fallback, parse_primary

__all__ = [
    "FenceSpan",
    "classify",
    "extract_file_name",
    "parse",
    "parse_fallback",
    "parse_primary",
    "scan_fences",
]
