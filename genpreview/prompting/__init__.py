"""Prompt text for plan, project and chat generation."""

from .constants import (
    PLAN_SYSTEM_PROMPT,
    PLAN_USER_TEMPLATE,
    PROJECT_SYSTEM_PROMPT,
    build_chat_system_prompt,
    build_project_prompt,
)

__all__ = [
    "PLAN_SYSTEM_PROMPT",
    "PLAN_USER_TEMPLATE",
    "PROJECT_SYSTEM_PROMPT",
    "build_chat_system_prompt",
    "build_project_prompt",
]
