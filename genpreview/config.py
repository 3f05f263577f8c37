"""Configuration loading for genpreview (.genpreview.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .preview.constants import DEFAULT_TITLE, ENTRY_FILES, MARKUP_FILES, STYLESHEET_FILES

CONFIG_FILE_NAME = ".genpreview.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Generation service settings from .genpreview.yml."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None
    api_version: Optional[str] = None


@dataclass
class PreviewConfig:
    """File selection and runtime sources for the preview document."""

    markup_files: List[str] = field(default_factory=lambda: list(MARKUP_FILES))
    entry_files: List[str] = field(default_factory=lambda: list(ENTRY_FILES))
    stylesheet_files: List[str] = field(default_factory=lambda: list(STYLESHEET_FILES))
    title: str = DEFAULT_TITLE
    runtime_urls: Dict[str, str] = field(default_factory=dict)


@dataclass
class SessionConfig:
    """Limits applied by the builder session."""

    console_limit: int = 50
    chat_history: int = 4
    plan_max_tokens: int = 2048
    project_max_tokens: int = 4096
    chat_max_tokens: int = 2048


@dataclass
class GenPreviewConfig:
    """Represents the high-level settings defined in .genpreview.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


def load_config(config_path: Path) -> GenPreviewConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GenPreviewConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
        api_version=_as_str(llm_data.get("api_version")),
    )

    preview_data = _as_dict(data.get("preview"))
    preview = PreviewConfig()
    if preview_data:
        if "markup_files" in preview_data:
            preview.markup_files = _as_str_list(preview_data.get("markup_files"))
        if "entry_files" in preview_data:
            preview.entry_files = _as_str_list(preview_data.get("entry_files"))
        if "stylesheet_files" in preview_data:
            preview.stylesheet_files = _as_str_list(preview_data.get("stylesheet_files"))
        preview.title = _as_str(preview_data.get("title")) or DEFAULT_TITLE
        preview.runtime_urls = {
            str(name): str(url)
            for name, url in _as_dict(preview_data.get("runtime_urls")).items()
            if isinstance(url, str) and url.strip()
        }

    session_data = _as_dict(data.get("session"))
    session = SessionConfig()
    for key in (
        "console_limit",
        "chat_history",
        "plan_max_tokens",
        "project_max_tokens",
        "chat_max_tokens",
    ):
        if key not in session_data:
            continue
        value = _as_int(session_data.get(key))
        if value is None or value <= 0:
            raise ConfigError(f"session.{key} must be a positive integer")
        setattr(session, key, value)

    return GenPreviewConfig(root=root, llm=llm, preview=preview, session=session)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "GenPreviewConfig",
    "LLMConfig",
    "PreviewConfig",
    "SessionConfig",
    "load_config",
]
