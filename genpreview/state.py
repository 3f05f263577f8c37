"""In-memory project file state owned by a builder session."""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from .logging import get_logger
from .models import GeneratedFile
from .parsing.language import classify

StateListener = Callable[[Mapping[str, str]], None]


class ProjectState:
    """Maps file names to their current content.

    The state only changes through three writes: :meth:`replace` for a full
    generation, :meth:`merge` for incremental generations and :meth:`write`
    for direct edits. Files are never removed individually; a file disappears
    only when a later :meth:`replace` does not mention it.

    Writes from different threads are serialized together with the listener
    calls they trigger, so listeners observe snapshots in write order.
    """

    def __init__(self, files: Optional[Mapping[str, str]] = None) -> None:
        self._files: Dict[str, str] = dict(files or {})
        self._listeners: List[StateListener] = []
        self._lock = threading.RLock()
        self.logger = get_logger("state")

    def replace(self, files: Iterable[GeneratedFile]) -> None:
        """Make ``files`` the entire state. Later duplicates win."""
        updated: Dict[str, str] = {}
        for record in files:
            updated[record.name] = record.content
        with self._lock:
            discarded = [name for name in self._files if name not in updated]
            self._files = updated
            self.logger.debug(
                "Replaced project state with %d file(s); discarded %d", len(updated), len(discarded)
            )
            self._notify()

    def merge(self, files: Iterable[GeneratedFile]) -> List[str]:
        """Write each named file, leaving other entries untouched.

        Returns the distinct names written, in first-occurrence order.
        """
        written: List[str] = []
        with self._lock:
            for record in files:
                self._files[record.name] = record.content
                if record.name not in written:
                    written.append(record.name)
            if written:
                self.logger.debug("Merged %d file(s) into project state", len(written))
                self._notify()
        return written

    def write(self, name: str, content: str) -> None:
        """Store ``content`` for ``name`` as a direct editor write."""
        with self._lock:
            self._files[name] = content
            self._notify()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._files.get(name, default)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._files)

    def files(self) -> List[GeneratedFile]:
        """Return the current files with classified languages."""
        with self._lock:
            items = list(self._files.items())
        return [
            GeneratedFile(name=name, content=content, language=classify(name)) for name, content in items
        ]

    def snapshot(self) -> Mapping[str, str]:
        """Return a read-only copy that later writes do not affect."""
        with self._lock:
            return MappingProxyType(dict(self._files))

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every change.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._files))

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = ["ProjectState", "StateListener"]
