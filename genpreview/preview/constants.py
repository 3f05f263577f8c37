"""Shared constants for preview assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RuntimeLibrary:
    """External script injected into synthesized documents.

    ``exports`` are destructured from the global before the entry script runs;
    ``bind_global`` binds the global itself under its own name. Optional
    libraries with a ``shim`` template get an inert stand-in when the global
    (or one of its ``aliases``) is missing at render time.
    """

    name: str
    url: str
    global_name: str
    optional: bool = False
    crossorigin: bool = False
    shim: Optional[str] = None
    exports: tuple[str, ...] = ()
    bind_global: bool = False
    aliases: tuple[str, ...] = ()


REACT_BINDINGS: tuple[str, ...] = (
    "useState",
    "useEffect",
    "useCallback",
    "useMemo",
    "useRef",
    "useReducer",
    "useContext",
    "useLayoutEffect",
    "createContext",
    "Fragment",
    "memo",
    "forwardRef",
)
MOTION_BINDINGS: tuple[str, ...] = (
    "motion",
    "AnimatePresence",
    "useAnimation",
    "useInView",
    "useMotionValue",
    "useSpring",
    "useTransform",
    "useScroll",
)

RUNTIME_LIBRARIES: tuple[RuntimeLibrary, ...] = (
    RuntimeLibrary(
        name="react",
        url="https://unpkg.com/react@18/umd/react.development.js",
        global_name="React",
        crossorigin=True,
        exports=REACT_BINDINGS,
    ),
    RuntimeLibrary(
        name="react-dom",
        url="https://unpkg.com/react-dom@18/umd/react-dom.development.js",
        global_name="ReactDOM",
        crossorigin=True,
    ),
    RuntimeLibrary(
        name="babel",
        url="https://unpkg.com/@babel/standalone/babel.min.js",
        global_name="Babel",
    ),
    RuntimeLibrary(
        name="framer-motion",
        url="https://unpkg.com/framer-motion@10/dist/framer-motion.js",
        global_name="FramerMotion",
        optional=True,
        shim="shims/framer-motion.js.j2",
        exports=MOTION_BINDINGS,
        aliases=("Motion",),
    ),
    RuntimeLibrary(
        name="gsap",
        url="https://unpkg.com/gsap@3/dist/gsap.min.js",
        global_name="gsap",
        optional=True,
        shim="shims/gsap.js.j2",
        bind_global=True,
    ),
)

MARKUP_FILES: tuple[str, ...] = ("index.html",)
ENTRY_FILES: tuple[str, ...] = ("App.js", "App.jsx")
STYLESHEET_FILES: tuple[str, ...] = ("styles.css", "App.css", "index.css")

ENTRY_SYMBOL = "App"
DEFAULT_EXPORT_SYMBOL = "DefaultExport"
DEFAULT_TITLE = "Generated App"

# Capitalized globals that are never mounted as the entry symbol.
RUNTIME_GLOBALS: frozenset[str] = frozenset(
    {
        "React",
        "ReactDOM",
        "Babel",
        "FramerMotion",
        "Motion",
        "AnimatePresence",
        "Fragment",
        "ScrollTrigger",
    }
)

DIAGNOSTIC_STYLE = "padding: 20px; color: red; font-family: monospace; white-space: pre-wrap;"
NO_COMPONENT_MESSAGE = 'No React component found. Make sure your component is named "App".'
RUNTIME_MISSING_MESSAGE = "React libraries failed to load"
TRANSFORM_MISSING_MESSAGE = "Script transform failed to load"
PLACEHOLDER_HEADING = "No Preview Available"
PLACEHOLDER_MESSAGE = "Generate a project to see live preview"


__all__ = [
    "DEFAULT_EXPORT_SYMBOL",
    "DEFAULT_TITLE",
    "DIAGNOSTIC_STYLE",
    "ENTRY_FILES",
    "ENTRY_SYMBOL",
    "MARKUP_FILES",
    "MOTION_BINDINGS",
    "NO_COMPONENT_MESSAGE",
    "PLACEHOLDER_HEADING",
    "PLACEHOLDER_MESSAGE",
    "REACT_BINDINGS",
    "RUNTIME_GLOBALS",
    "RUNTIME_LIBRARIES",
    "RUNTIME_MISSING_MESSAGE",
    "RuntimeLibrary",
    "STYLESHEET_FILES",
    "TRANSFORM_MISSING_MESSAGE",
]
