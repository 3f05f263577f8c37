"""Tests for the project state container."""

from __future__ import annotations

from typing import List, Mapping

import pytest

from genpreview.models import GeneratedFile
from genpreview.parsing import parse
from genpreview.state import ProjectState


def _file(name: str, content: str) -> GeneratedFile:
    return GeneratedFile(name=name, content=content, language="text")


def test_replace_discards_files_not_mentioned() -> None:
    state = ProjectState({"old.js": "old"})
    state.replace([_file("App.js", "a"), _file("styles.css", "b")])

    assert state.names() == ["App.js", "styles.css"]
    assert "old.js" not in state


def test_replace_keeps_last_duplicate() -> None:
    state = ProjectState()
    state.replace([_file("App.js", "first"), _file("App.js", "second")])
    assert state.get("App.js") == "second"
    assert len(state) == 1


def test_merge_overwrites_only_reused_key() -> None:
    initial = (
        "```js\n// App.js\nfunction App() { return 1; }\n```\n"
        "```css\n/* styles.css */\nbody { color: red; }\n```\n"
        "```md\n# README.md\nNotes\n```\n"
    )
    state = ProjectState()
    state.replace(parse(initial))
    before = dict(state.snapshot())

    written = state.merge(parse("```js\n// App.js\nfunction App() { return 2; }\n```\n"))

    assert written == ["App.js"]
    assert state.get("App.js") == "function App() { return 2; }"
    for name in ("styles.css", "README.md"):
        assert state.get(name) == before[name]


def test_merge_adds_new_files_and_reports_distinct_names() -> None:
    state = ProjectState({"App.js": "a"})
    written = state.merge([_file("utils.js", "u1"), _file("utils.js", "u2")])

    assert written == ["utils.js"]
    assert state.get("utils.js") == "u2"
    assert state.names() == ["App.js", "utils.js"]


def test_files_classify_languages() -> None:
    state = ProjectState({"App.jsx": "x", "notes": "y"})
    assert [(record.name, record.language) for record in state.files()] == [
        ("App.jsx", "javascript"),
        ("notes", "text"),
    ]


def test_snapshot_is_read_only_and_detached() -> None:
    state = ProjectState({"App.js": "a"})
    snapshot = state.snapshot()

    state.write("App.js", "b")

    assert snapshot["App.js"] == "a"
    with pytest.raises(TypeError):
        snapshot["App.js"] = "c"  # type: ignore[index]


def test_listeners_receive_snapshots_until_unsubscribed() -> None:
    state = ProjectState()
    seen: List[Mapping[str, str]] = []
    unsubscribe = state.subscribe(seen.append)

    state.write("App.js", "a")
    state.merge([])
    state.merge([_file("styles.css", "b")])
    unsubscribe()
    state.write("App.js", "c")

    assert [dict(snapshot) for snapshot in seen] == [
        {"App.js": "a"},
        {"App.js": "a", "styles.css": "b"},
    ]
