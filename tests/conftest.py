from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from genpreview.config import GenPreviewConfig
from genpreview.llm.client import GenerationClient, GenerationRequest

SAMPLE_RESPONSE = """Here is your project.

```javascript
// App.js
import React, { useState } from 'react';
import './styles.css';

function App() {
  const [count, setCount] = useState(0);
  return <button onClick={() => setCount(count + 1)}>{count}</button>;
}

export default App;
```

```css
/* styles.css */
button { padding: 8px; }
```

```markdown
# README.md
A counter.
```
"""


class RecordingTransport:
    """Returns queued replies and records every request it receives."""

    def __init__(self, replies: List[str] | None = None) -> None:
        self.replies = list(replies or [])
        self.requests: List[GenerationRequest] = []

    def __call__(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError("unexpected generation request")
        return self.replies.pop(0)


@pytest.fixture
def sample_response() -> str:
    return SAMPLE_RESPONSE


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client_factory() -> Callable[[RecordingTransport], GenerationClient]:
    def _factory(transport: RecordingTransport) -> GenerationClient:
        return GenerationClient(model="test-model", api_key="test-key", transport=transport)

    return _factory


@pytest.fixture
def config(tmp_path: Path) -> GenPreviewConfig:
    return GenPreviewConfig(root=tmp_path)
