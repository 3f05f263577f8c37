"""Core data models shared across genpreview components."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class GeneratedFile:
    """A named file extracted from generated text."""

    name: str
    content: str
    language: str


@dataclass(frozen=True)
class ChatMessage:
    """Single turn of the conversation sent to the generation service."""

    role: str
    content: str


@dataclass(frozen=True)
class ConsoleEntry:
    """Line shown on the session console."""

    timestamp: str
    message: str
    level: str = "info"


@dataclass
class PreviewDocument:
    """Assembled preview plus the inputs that produced it.

    ``kind`` is ``markup`` when an author supplied document is returned verbatim,
    ``synthesized`` when the document was built from an entry script, and
    ``placeholder`` when nothing previewable exists.
    """

    kind: str
    html: str
    entry: Optional[str] = None
    stylesheet: Optional[str] = None
    candidates: List[str] = field(default_factory=list)
