"""System prompts sent with each kind of generation request."""

from __future__ import annotations

from typing import Iterable

PLAN_SYSTEM_PROMPT = """You are a professional project planning assistant. Create a detailed project plan for the described project.

Provide:
1. Project overview
2. Technical architecture
3. File structure
4. Key features
5. Implementation approach

Be detailed and technical."""

PROJECT_SYSTEM_PROMPT = """Generate a complete, working project based on the plan.

Generate EXACTLY these 4 files:
1. App.js - Complete React component
2. styles.css - Complete styling
3. index.html - Full HTML page
4. README.md - Project documentation

Use this EXACT format for each file:
```javascript
// App.js
[React component code]
```

```css
/* styles.css */
[CSS styling]
```

```html
<!-- index.html -->
[HTML page]
```

```markdown
# README.md
[Documentation]
```

Make it functional and professional."""

CHAT_SYSTEM_TEMPLATE = """You are helping improve a web project. Current files:
{file_list}

When updating code, return the complete file using this format:
```javascript
// filename.js
[complete updated code]
```

Provide working improvements."""

PLAN_USER_TEMPLATE = "Create a detailed project plan for: {description}"
PROJECT_USER_TEMPLATE = "Generate the complete project files for: {description}\n\nProject Plan:\n{plan}"


def build_chat_system_prompt(file_names: Iterable[str]) -> str:
    """Return the chat system prompt listing the current project files."""
    file_list = "\n".join(f"- {name}" for name in file_names)
    return CHAT_SYSTEM_TEMPLATE.format(file_list=file_list)


def build_project_prompt(description: str, plan: str | None = None) -> str:
    return PROJECT_USER_TEMPLATE.format(description=description, plan=plan or "")


__all__ = [
    "CHAT_SYSTEM_TEMPLATE",
    "PLAN_SYSTEM_PROMPT",
    "PLAN_USER_TEMPLATE",
    "PROJECT_SYSTEM_PROMPT",
    "PROJECT_USER_TEMPLATE",
    "build_chat_system_prompt",
    "build_project_prompt",
]
