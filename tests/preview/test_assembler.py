"""Tests for preview document synthesis."""

from __future__ import annotations

import json

from genpreview.config import PreviewConfig
from genpreview.parsing import parse
from genpreview.preview import PreviewAssembler, assemble
from genpreview.preview.constants import (
    NO_COMPONENT_MESSAGE,
    RUNTIME_MISSING_MESSAGE,
    TRANSFORM_MISSING_MESSAGE,
)
from genpreview.state import ProjectState


def _babel_section(html: str) -> str:
    return html.split('<script type="text/babel">', 1)[1].split("</script>", 1)[0]


def test_markup_file_is_returned_verbatim() -> None:
    markup = "<!doctype html>\n<html><body><h1>Hi</h1>\n<script>go()</script></body></html>  \n"
    files = {"App.js": "function App() { return null; }", "styles.css": "h1{}", "index.html": markup}

    document = PreviewAssembler().build(files)

    assert document.kind == "markup"
    assert document.html == markup


def test_empty_markup_counts_as_absent() -> None:
    document = PreviewAssembler().build({"index.html": "", "App.js": "function App() { return null; }"})
    assert document.kind == "synthesized"


def test_placeholder_without_entry_or_markup() -> None:
    for files in ({}, {"README.md": "# Notes"}):
        document = PreviewAssembler().build(files)
        assert document.kind == "placeholder"
        assert "No Preview Available" in document.html
        assert "Generate a project to see live preview" in document.html


def test_end_to_end_example() -> None:
    raw = (
        "```javascript\n// App.js\nfunction App(){return null}\n```\n"
        "```css\n/* styles.css */\nbody{color:red}\n```\n"
    )
    state = ProjectState()
    state.replace(parse(raw))

    document = PreviewAssembler().build(state.snapshot())
    html = document.html

    assert document.kind == "synthesized"
    assert document.entry == "App.js"
    assert document.stylesheet == "styles.css"
    assert document.candidates == ["App"]
    style_block = html.split("<style>", 1)[1].split("</style>", 1)[0]
    assert "body{color:red}" in style_block
    script = _babel_section(html)
    assert "function App(){return null}" in script
    assert '["App", function () { return typeof App !== "undefined" ? App : undefined; }]' in script
    assert html.index("</style>") < html.index('<script type="text/babel">')


def test_import_forms_removed_from_embedded_script() -> None:
    entry = (
        "import './styles.css';\n"
        "import React from 'react';\n"
        "import {\n  useState\n} from 'react';\n"
        "import Confetti, { burst } from 'confetti';\n"
        "import * as helpers from './helpers';\n"
        "const label = 'Clicks';\n"
        "export default function App() {\n"
        "  const [n, setN] = useState(0);\n"
        "  return <button onClick={() => setN(n + 1)}>{label} {n}</button>;\n"
        "}\n"
    )

    script = _babel_section(assemble({"App.js": entry}))

    assert "import" not in script
    assert "export" not in script
    assert "const label = 'Clicks';" in script
    assert "function App() {" in script
    assert "const [n, setN] = useState(0);" in script


def test_diagnostic_rendered_when_no_component_is_declared() -> None:
    document = PreviewAssembler().build({"App.js": "const helper = () => 1;\nhelper();\n"})

    assert document.candidates == []
    root = document.html.split('<div id="root">', 1)[1].split("</div>", 1)[0]
    assert "data-preview-diagnostic" in root
    assert "No React component found." in root
    assert NO_COMPONENT_MESSAGE.replace('"', "&#34;") in root


def test_fallback_candidates_follow_app_in_mount_routine() -> None:
    document = PreviewAssembler().build(
        {"App.jsx": "const Card = () => null;\nconst Dashboard = () => <Card />;\n"}
    )

    script = _babel_section(document.html)
    assert document.entry == "App.jsx"
    assert document.candidates == ["Card", "Dashboard"]
    assert script.index('["App"') < script.index('["Card"') < script.index('["Dashboard"')


def test_stylesheet_priority_and_missing_stylesheet() -> None:
    entry = "function App() { return null; }"
    document = PreviewAssembler().build(
        {"App.js": entry, "index.css": ".c{}", "App.css": ".b{}", "styles.css": ".a{}"}
    )
    assert document.stylesheet == "styles.css"

    document = PreviewAssembler().build({"App.js": entry, "index.css": ".c{}"})
    assert document.stylesheet == "index.css"

    document = PreviewAssembler().build({"App.js": entry})
    assert document.stylesheet is None
    assert "<style>" in document.html


def test_runtime_libraries_and_shims_are_injected() -> None:
    html = assemble({"App.js": "function App() { return null; }"})

    assert "https://unpkg.com/react@18/umd/react.development.js" in html
    assert "https://unpkg.com/@babel/standalone/babel.min.js" in html
    assert 'typeof window.FramerMotion === "undefined"' in html
    assert 'typeof window.gsap === "undefined"' in html
    assert "React libraries failed to load" in html


def test_bindings_skip_names_the_script_declares() -> None:
    html = assemble({"App.js": "const { useState } = React;\nconst gsap = null;\nfunction App() { return null; }"})
    script = _babel_section(html)

    assert "const { useEffect, useCallback" in script
    assert "const { useState, useEffect" not in script
    assert "const gsap = window.gsap;" not in script
    assert "const { motion, AnimatePresence, useAnimation" in script


def test_from_config_applies_overrides() -> None:
    config = PreviewConfig(
        entry_files=["main.jsx"],
        title="Demo",
        runtime_urls={"react": "https://cdn.example/react.js"},
    )

    document = PreviewAssembler.from_config(config).build(
        {"App.js": "function App() { return null; }", "main.jsx": "function App() { return null; }"}
    )

    assert document.entry == "main.jsx"
    assert "<title>Demo</title>" in document.html
    assert "https://cdn.example/react.js" in document.html
    assert "react@18/umd/react.development.js" not in document.html


def test_assemble_accepts_generated_file_records() -> None:
    files = parse("```js\n// App.js\nfunction App() { return null; }\n```\n")
    assert "function App() { return null; }" in assemble(files)


def test_assemble_accepts_project_state() -> None:
    state = ProjectState({"App.js": "function App() { return null; }"})

    html = assemble(state)

    assert "function App() { return null; }" in html
    assert 'const candidates = [\n    ["App"' in html


def test_motion_hooks_are_bound_after_imports_are_removed() -> None:
    entry = (
        "import { motion, useInView, useAnimation } from 'framer-motion';\n"
        "function App() {\n"
        "  const inView = useInView();\n"
        "  const controls = useAnimation();\n"
        "  return <motion.div animate={controls}>{String(inView)}</motion.div>;\n"
        "}\n"
    )
    script = _babel_section(assemble({"App.js": entry}))

    preamble = [line for line in script.splitlines() if line.endswith("= window.FramerMotion;")]
    assert preamble == [
        "const { motion, AnimatePresence, useAnimation, useInView, useMotionValue, "
        "useSpring, useTransform, useScroll } = window.FramerMotion;"
    ]
    assert "framer-motion" not in script


def test_motion_hooks_declared_by_the_script_are_not_rebound() -> None:
    entry = "const useScroll = () => ({});\nfunction App() { return null; }"
    script = _babel_section(assemble({"App.js": entry}))

    assert "useTransform } = window.FramerMotion;" in script


def test_runtime_errors_are_reported_inside_the_document() -> None:
    html = assemble({"App.js": "function App() { return null; }"})
    boundary = html.index("window.__previewDiagnostic = function")

    assert boundary < html.index('<script type="text/babel">')
    assert boundary < html.index("window.FramerMotion =")
    assert 'window.addEventListener("error", function (event) {' in html
    assert 'window.addEventListener("unhandledrejection", function (event) {' in html


def test_missing_runtime_libraries_render_a_diagnostic() -> None:
    html = assemble({"App.js": "function App() { return null; }"})

    runtime_check = html.index('typeof window.React === "undefined"')
    transform_check = html.index('typeof window.Babel === "undefined"')
    assert runtime_check < transform_check
    assert f"window.__previewDiagnostic({json.dumps(RUNTIME_MISSING_MESSAGE)});" in html
    assert f"window.__previewDiagnostic({json.dumps(TRANSFORM_MISSING_MESSAGE)});" in html
    assert "window.__previewHalted = true;" in html
    assert "window.__previewHalted) {\n    return;" in _babel_section(html)


def test_mount_errors_are_isolated_by_boundary_and_catch() -> None:
    script = _babel_section(assemble({"App.js": "function App() { return null; }"}))

    assert "class PreviewBoundary extends React.Component {" in script
    assert "static getDerivedStateFromError(error) {" in script
    assert "React.createElement(PreviewBoundary, null, React.createElement(entry.component))" in script
    mount = script.index("  try {\n    const entry = resolveEntry();")
    handler = script.index("  } catch (error) {", mount)
    assert script.index('window.__previewDiagnostic("Error: "', handler) > handler
