"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from genpreview.llm.client import GenerationError
from genpreview.service import create_app
from genpreview.session import BuilderSession

PROJECT_REPLY = (
    "```javascript\n// App.js\nfunction App() { return <p>Hi</p>; }\n```\n"
    "```css\n/* styles.css */\np { margin: 0; }\n```\n"
)


@pytest.fixture
def api(transport, client_factory, config) -> TestClient:
    session = BuilderSession(client_factory(transport), config=config)
    return TestClient(create_app(lambda: session, config=config))


def test_health_endpoint(api: TestClient) -> None:
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_parse_endpoint(api: TestClient) -> None:
    response = api.post("/parse", json={"text": PROJECT_REPLY})

    assert response.status_code == 200
    files = response.json()["files"]
    assert [item["name"] for item in files] == ["App.js", "styles.css"]
    assert files[0]["language"] == "javascript"


def test_preview_endpoint_accepts_files_and_text(api: TestClient) -> None:
    markup = "<html><body>static</body></html>"
    response = api.post("/preview", json={"files": {"index.html": markup}})
    assert response.json()["kind"] == "markup"
    assert response.json()["html"] == markup

    response = api.post("/preview", json={"text": PROJECT_REPLY})
    payload = response.json()
    assert payload["kind"] == "synthesized"
    assert payload["entry"] == "App.js"
    assert payload["candidates"] == ["App"]

    response = api.post("/preview", json={})
    assert response.json()["kind"] == "placeholder"


def test_session_generate_then_preview(api: TestClient, transport) -> None:
    transport.replies.append(PROJECT_REPLY)

    response = api.post("/session/generate", json={"description": "greeting", "plan": "Keep it small"})

    assert response.status_code == 200
    payload = response.json()
    assert [item["name"] for item in payload["files"]] == ["App.js", "styles.css"]
    assert payload["preview"]["kind"] == "synthesized"
    assert "Keep it small" in transport.requests[0].messages[0].content

    preview = api.get("/session/preview")
    assert preview.headers["content-type"].startswith("text/html")
    assert "p { margin: 0; }" in preview.text


def test_session_plan_and_chat(api: TestClient, transport) -> None:
    transport.replies.extend(["A plan", "Updated:\n```css\n/* styles.css */\np { color: red; }\n```\n"])

    plan = api.post("/session/plan", json={"description": "greeting"})
    chat = api.post("/session/chat", json={"message": "make it red"})

    assert plan.json() == {"plan": "A plan"}
    assert chat.status_code == 200
    assert chat.json()["files"][0]["content"] == "p { color: red; }"
    files = api.get("/session/files").json()["files"]
    assert [item["name"] for item in files] == ["styles.css"]


def test_session_save_file(api: TestClient) -> None:
    response = api.post("/session/files", json={"name": "App.js", "content": "function App() { return null; }"})

    assert response.status_code == 200
    assert response.json()["files"][0]["language"] == "javascript"
    assert "function App() { return null; }" in api.get("/session/preview").text

    response = api.post("/session/files", json={"name": " ", "content": "x"})
    assert response.status_code == 400


def test_blank_description_is_rejected(api: TestClient, transport) -> None:
    response = api.post("/session/generate", json={"description": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a project description"
    assert transport.requests == []


def test_generation_error_maps_to_bad_gateway(client_factory, config) -> None:
    def failing(request):
        raise GenerationError("upstream down")

    session = BuilderSession(client_factory(failing), config=config)
    api = TestClient(create_app(lambda: session, config=config))

    response = api.post("/session/plan", json={"description": "anything"})

    assert response.status_code == 502
    assert response.json() == {"detail": "upstream down"}
    console = api.get("/session/console").json()["entries"]
    assert console[-1]["level"] == "error"
    assert console[-1]["message"] == "Plan generation failed: upstream down"


def test_session_operations_run_under_the_session_lock(client_factory, config) -> None:
    held: list = []

    def planning(request):
        held.append(("plan", app.state.session_lock.locked()))
        return "A plan"

    session = BuilderSession(client_factory(planning), config=config)
    app = create_app(lambda: session, config=config)
    session.state.subscribe(lambda snapshot: held.append(("save", app.state.session_lock.locked())))
    api = TestClient(app)

    api.post("/session/plan", json={"description": "greeting"})
    api.post("/session/files", json={"name": "App.js", "content": "function App() { return null; }"})

    assert held == [("plan", True), ("save", True)]
    assert not app.state.session_lock.locked()
