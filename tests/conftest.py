"""Shared pytest fixtures."""

import json
from collections import defaultdict, deque
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Union

import httpx
import pytest

from saffron_mcp.app.config import Settings
from saffron_mcp.app.session import SessionClient
from saffron_mcp.app.token_store import TokenStore


class FakeGraphQL:
    """Scripted GraphQL endpoint for httpx.MockTransport.

    Replies are queued per operation name; the last reply for an operation
    is reused once its queue is down to one entry.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._replies: Dict[str, Deque[Union[httpx.Response, Exception]]] = defaultdict(deque)

    def reply(
        self,
        operation: str,
        *,
        data: Any = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        status: int = 200,
        set_cookie: Optional[List[str]] = None,
    ) -> None:
        body: Dict[str, Any] = {"data": data}
        if errors is not None:
            body["errors"] = errors
        headers = [("set-cookie", value) for value in set_cookie or []]
        self._replies[operation].append(httpx.Response(status, json=body, headers=headers))

    def raw(self, operation: str, response: httpx.Response) -> None:
        self._replies[operation].append(response)

    def fail(self, operation: str, exc: Exception) -> None:
        self._replies[operation].append(exc)

    def bodies(self, operation: Optional[str] = None) -> List[Dict[str, Any]]:
        parsed = [json.loads(request.content) for request in self.requests]
        if operation is None:
            return parsed
        return [body for body in parsed if body.get("operationName") == operation]

    def requests_for(self, operation: str) -> List[httpx.Request]:
        return [
            request
            for request in self.requests
            if json.loads(request.content).get("operationName") == operation
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        operation = json.loads(request.content).get("operationName")
        queue = self._replies.get(operation)
        if not queue:
            raise AssertionError(f"No reply scripted for {operation!r}")
        reply = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def token_path(tmp_path: Path) -> Path:
    return tmp_path / "saffron-tokens.json"


@pytest.fixture
def token_store(token_path: Path) -> TokenStore:
    return TokenStore(token_path)


@pytest.fixture
def settings(token_path: Path) -> Settings:
    return Settings(token_file=token_path)


@pytest.fixture
def graphql() -> FakeGraphQL:
    return FakeGraphQL()


@pytest.fixture
async def client(settings: Settings, token_store: TokenStore, graphql: FakeGraphQL):
    session_client = SessionClient(settings, token_store, transport=graphql.transport)
    yield session_client
    await session_client.aclose()


@pytest.fixture
def sample_recipe_document() -> str:
    """A serialized instructions document as Saffron returns it."""
    return json.dumps(
        {
            "document": {
                "nodes": [
                    {
                        "object": "block",
                        "type": "header-four",
                        "nodes": [{"object": "text", "text": "Preparation"}],
                    },
                    {
                        "object": "block",
                        "type": "paragraph",
                        "nodes": [{"object": "text", "text": "Preheat the oven to 180°C"}],
                    },
                ]
            }
        }
    )
