"""FastAPI application entrypoint for genpreview service mode."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, GenPreviewConfig
from ..llm.client import GenerationError
from ..models import GeneratedFile, PreviewDocument
from ..parsing import parse
from ..preview.assembler import PreviewAssembler
from ..session import BuilderSession

T = TypeVar("T")


class FilePayload(BaseModel):
    name: str
    content: str
    language: str


class HealthResponse(BaseModel):
    status: str


class ParseRequest(BaseModel):
    text: str


class ParseResponse(BaseModel):
    files: List[FilePayload]


class PreviewRequest(BaseModel):
    files: Optional[Dict[str, str]] = None
    text: Optional[str] = None


class PreviewResponse(BaseModel):
    kind: str
    html: str
    entry: Optional[str] = None
    stylesheet: Optional[str] = None
    candidates: List[str] = []


class PlanRequest(BaseModel):
    description: str


class PlanResponse(BaseModel):
    plan: str


class GenerateRequest(BaseModel):
    description: str
    plan: Optional[str] = None


class GenerateResponse(BaseModel):
    files: List[FilePayload]
    preview: PreviewResponse


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    reply: str
    files: List[FilePayload]


class SaveFileRequest(BaseModel):
    name: str
    content: str


class FilesResponse(BaseModel):
    files: List[FilePayload]


class ConsoleEntryPayload(BaseModel):
    timestamp: str
    message: str
    level: str


class ConsoleResponse(BaseModel):
    entries: List[ConsoleEntryPayload]


def _file_payloads(files: List[GeneratedFile]) -> List[FilePayload]:
    return [
        FilePayload(name=record.name, content=record.content, language=record.language)
        for record in files
    ]


def _preview_payload(document: PreviewDocument) -> PreviewResponse:
    return PreviewResponse(
        kind=document.kind,
        html=document.html,
        entry=document.entry,
        stylesheet=document.stylesheet,
        candidates=list(document.candidates),
    )


async def _run_blocking(func: Callable[[], T], lock: Optional[threading.Lock] = None) -> T:
    def _call() -> T:
        if lock is None:
            return func()
        with lock:
            return func()

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return _call()
    return await loop.run_in_executor(None, _call)


def create_app(
    session_factory: Callable[[], BuilderSession] | None = None,
    *,
    config: GenPreviewConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing a single builder session."""

    app_config = config or GenPreviewConfig(root=Path.cwd())
    factory = session_factory or (lambda: BuilderSession(config=app_config))
    app = FastAPI(title="genpreview service", version="0.1.0")
    app.state.session = factory()
    # One session is shared by every request; its operations run one at a time.
    app.state.session_lock = threading.Lock()
    assembler = PreviewAssembler.from_config(app_config.preview)

    def _session() -> BuilderSession:
        return app.state.session

    async def _exclusive(func: Callable[[], T]) -> T:
        return await _run_blocking(func, app.state.session_lock)

    def _rejected(session: BuilderSession) -> HTTPException:
        entries = session.console.entries()
        detail = entries[-1].message if entries else "Request rejected"
        return HTTPException(status_code=400, detail=detail)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/parse", response_model=ParseResponse)
    async def parse_response(payload: ParseRequest) -> ParseResponse:
        return ParseResponse(files=_file_payloads(parse(payload.text)))

    @app.post("/preview", response_model=PreviewResponse)
    async def build_preview(payload: PreviewRequest) -> PreviewResponse:
        contents: Dict[str, str] = dict(payload.files or {})
        if payload.text:
            for record in parse(payload.text):
                contents[record.name] = record.content
        return _preview_payload(assembler.build(contents))

    @app.post("/session/plan", response_model=PlanResponse)
    async def session_plan(payload: PlanRequest) -> PlanResponse:
        session = _session()
        plan = await _exclusive(lambda: session.generate_plan(payload.description))
        if plan is None:
            raise _rejected(session)
        return PlanResponse(plan=plan)

    @app.post("/session/generate", response_model=GenerateResponse)
    async def session_generate(payload: GenerateRequest) -> GenerateResponse:
        session = _session()
        outcome = await _exclusive(
            lambda: session.generate_project(payload.description, payload.plan)
        )
        if outcome is None:
            raise _rejected(session)
        return GenerateResponse(
            files=_file_payloads(outcome.files),
            preview=_preview_payload(outcome.document),
        )

    @app.post("/session/chat", response_model=ChatResponse)
    async def session_chat(payload: ChatRequest) -> ChatResponse:
        session = _session()
        outcome = await _exclusive(lambda: session.chat(payload.message))
        if outcome is None:
            raise _rejected(session)
        return ChatResponse(reply=outcome.reply, files=_file_payloads(outcome.files))

    @app.get("/session/files", response_model=FilesResponse)
    async def session_files() -> FilesResponse:
        return FilesResponse(files=_file_payloads(_session().files()))

    @app.post("/session/files", response_model=FilesResponse)
    async def session_save_file(payload: SaveFileRequest) -> FilesResponse:
        session = _session()
        await _exclusive(lambda: session.save_file(payload.name, payload.content))
        return FilesResponse(files=_file_payloads(session.files()))

    @app.get("/session/preview", response_class=HTMLResponse)
    async def session_preview() -> HTMLResponse:
        return HTMLResponse(content=_session().preview.html)

    @app.get("/session/console", response_model=ConsoleResponse)
    async def session_console() -> ConsoleResponse:
        return ConsoleResponse(
            entries=[
                ConsoleEntryPayload(timestamp=entry.timestamp, message=entry.message, level=entry.level)
                for entry in _session().console.entries()
            ]
        )

    @app.exception_handler(GenerationError)
    async def generation_error_handler(_: Any, exc: GenerationError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    config: GenPreviewConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
