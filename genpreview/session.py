"""Builder session tying generation, project state and preview together."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from .config import GenPreviewConfig
from .console import ConsoleLog
from .llm.client import GenerationClient, GenerationError
from .logging import get_logger
from .models import ChatMessage, GeneratedFile, PreviewDocument
from .parsing import parse
from .preview.assembler import PreviewAssembler
from .prompting.constants import (
    PLAN_SYSTEM_PROMPT,
    PLAN_USER_TEMPLATE,
    PROJECT_SYSTEM_PROMPT,
    build_chat_system_prompt,
    build_project_prompt,
)
from .state import ProjectState


@dataclass
class GenerationOutcome:
    """Files parsed from a full generation and the preview they produced."""

    files: List[GeneratedFile]
    document: PreviewDocument


@dataclass
class ChatOutcome:
    """Reply to a chat turn plus the files it updated."""

    reply: str
    files: List[GeneratedFile]


class BuilderSession:
    """Owns one project: its files, conversation, console and current preview.

    The preview is rebuilt synchronously whenever the project state changes,
    so :attr:`preview` always reflects the latest write.
    """

    def __init__(
        self,
        client: GenerationClient | None = None,
        *,
        config: GenPreviewConfig | None = None,
        assembler: PreviewAssembler | None = None,
        console: ConsoleLog | None = None,
    ) -> None:
        self.config = config or GenPreviewConfig(root=Path.cwd())
        self.client = client or GenerationClient.from_config(self.config.llm)
        self.assembler = assembler or PreviewAssembler.from_config(self.config.preview)
        self.console = console or ConsoleLog(self.config.session.console_limit)
        self.logger = get_logger("session")
        self.state = ProjectState()
        self.history: List[ChatMessage] = []
        self.plan: Optional[str] = None
        self._preview = self.assembler.build(self.state.snapshot())
        self.state.subscribe(self._refresh_preview)

    @property
    def preview(self) -> PreviewDocument:
        return self._preview

    def files(self) -> List[GeneratedFile]:
        return self.state.files()

    def generate_plan(self, description: str) -> Optional[str]:
        """Ask for a project plan. Returns ``None`` when ``description`` is blank."""
        description = description.strip()
        if not description:
            self.console.error("Please enter a project description")
            return None
        self.console.info(f"Starting project plan generation: {description}")
        try:
            plan = self.client.complete(
                [ChatMessage(role="user", content=PLAN_USER_TEMPLATE.format(description=description))],
                system=PLAN_SYSTEM_PROMPT,
                max_tokens=self.config.session.plan_max_tokens,
            )
        except GenerationError as exc:
            self.console.error(f"Plan generation failed: {exc}")
            raise
        self.plan = plan
        self.console.success("Project plan generated successfully")
        return plan

    def generate_project(
        self, description: str, plan: str | None = None
    ) -> Optional[GenerationOutcome]:
        """Generate a full project and make it the entire project state.

        A reply without any files leaves the current state untouched.
        """
        description = description.strip()
        if not description:
            self.console.error("Please enter a project description")
            return None
        self.console.info("Starting project generation...")
        try:
            reply = self.client.complete(
                [ChatMessage(role="user", content=build_project_prompt(description, plan or self.plan))],
                system=PROJECT_SYSTEM_PROMPT,
                max_tokens=self.config.session.project_max_tokens,
            )
        except GenerationError as exc:
            self.console.error(f"Generation failed: {exc}")
            raise

        files = parse(reply)
        self.console.info(f"Parsed {len(files)} files from response")
        if not files:
            self.console.error("No files found in response")
            return GenerationOutcome(files=[], document=self.preview)

        self.state.replace(files)
        for record in files:
            self.console.success(f"Generated: {record.name} ({len(record.content)} chars)")
        self.console.success("Project generation completed")
        return GenerationOutcome(files=files, document=self.preview)

    def chat(self, message: str) -> Optional[ChatOutcome]:
        """Send a chat turn and merge any complete files in the reply."""
        message = message.strip()
        if not message:
            self.console.error("Please enter a message")
            return None

        window = self.history[-self.config.session.chat_history :]
        # The conversation sent upstream must open with a user turn.
        while window and window[0].role != "user":
            window = window[1:]
        user_turn = ChatMessage(role="user", content=message)
        self.history.append(user_turn)
        self.console.info(f"Chat: {message}")

        try:
            reply = self.client.complete(
                [*window, user_turn],
                system=build_chat_system_prompt(self.state.names()),
                max_tokens=self.config.session.chat_max_tokens,
            )
        except GenerationError as exc:
            self.history.append(ChatMessage(role="assistant", content=f"Error: {exc}"))
            self.console.error(f"Chat error: {exc}")
            raise

        self.history.append(ChatMessage(role="assistant", content=reply))
        files = parse(reply)
        for name in self.state.merge(files):
            self.console.success(f"Updated: {name}")
        self.console.success("Assistant responded")
        return ChatOutcome(reply=reply, files=files)

    def save_file(self, name: str, content: str) -> None:
        """Write editor content for ``name`` directly into the project."""
        name = name.strip()
        if not name:
            raise ValueError("File name must not be empty")
        self.state.write(name, content)
        self.console.info(f"Saved: {name}")

    def _refresh_preview(self, snapshot: Mapping[str, str]) -> None:
        self._preview = self.assembler.build(snapshot)
        self.logger.debug("Preview rebuilt (%s)", self._preview.kind)


__all__ = ["BuilderSession", "ChatOutcome", "GenerationOutcome"]
