"""
Authenticated Saffron GraphQL client.

Saffron keeps the login session in cookies. ``SessionClient`` owns the
HTTP client and the in-memory cookie jar for one account and wires two
httpx event hooks around every request:

  - the request hook attaches the fixed web-client headers and a
    ``Cookie`` header built from the jar;
  - the response hook reads ``Set-Cookie`` headers, updates the jar and,
    once an account is known, writes the jar to the token store so the
    next process run can skip the password login.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import anyio
import httpx

from saffron_mcp.app import operations
from saffron_mcp.app.config import Settings
from saffron_mcp.app.documents import Operation
from saffron_mcp.app.errors import GraphQLResponseError
from saffron_mcp.app.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """The ``data`` and ``errors`` members of a GraphQL response."""

    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[Dict[str, Any]]] = None


@dataclass
class Session:
    """Cookie jar and account of the running process."""

    cookies: Dict[str, str] = field(default_factory=dict)
    account: Optional[str] = None


def cookie_header(cookies: Dict[str, str]) -> Optional[str]:
    """Render a jar as a ``Cookie`` header value, or None if it is empty."""
    if not cookies:
        return None
    return "; ".join(f"{name}={value}" for name, value in cookies.items())


def parse_set_cookie(header: str) -> Dict[str, str]:
    """
    Extract the cookie carried by one ``Set-Cookie`` header line.

    Only the leading ``name=value`` pair is read; attributes such as Path,
    Expires or HttpOnly are dropped.
    """
    pair = header.split(";", 1)[0]
    name, sep, value = pair.partition("=")
    name = name.strip()
    value = value.strip()
    if not sep or not name:
        return {}
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return {name: value}


class SessionClient:
    """
    GraphQL client bound to a single Saffron session.

    Every call is a single network attempt; there is no response cache and
    no retry.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or Settings()
        self.token_store = token_store or TokenStore(self.settings.token_file)
        self.session = Session()
        # Serializes jar updates coming from concurrent responses.
        self._cookie_lock = asyncio.Lock()
        self._http = httpx.AsyncClient(
            transport=transport,
            event_hooks={
                "request": [self._attach_headers],
                "response": [self._capture_cookies],
            },
        )

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def account(self) -> Optional[str]:
        return self.session.account

    @property
    def cookies(self) -> Dict[str, str]:
        return dict(self.session.cookies)

    def get_cookie(self, name: str) -> Optional[str]:
        return self.session.cookies.get(name)

    # ── Authentication ─────────────────────────────────────────────────────────

    def load_for_account(self, email: str) -> bool:
        """
        Adopt the cached session of an account, if a fresh one exists.

        Returns:
            bool: True if cookies were loaded and the account is now active.
        """
        cookies = self.token_store.load_for_account(email)
        if cookies is None:
            return False
        self.session.cookies.clear()
        self.session.cookies.update(cookies)
        self.session.account = email
        logger.info("Loaded saved tokens for %s", email)
        return True

    async def login(self, email: str, password: str) -> OperationResult:
        """
        Log in with a password.

        The account is recorded before the request is sent so that cookies
        set by the login response itself are saved for it. GraphQL errors
        are returned in the result, not raised.
        """
        self.session.account = email
        result = await self.mutate(
            operations.Login,
            {"input": {"email": email, "password": password}},
        )
        logger.info("Login request for %s completed", email)
        logger.debug("Cookies after login: %s", self.session.cookies)
        return result

    # ── Execution ──────────────────────────────────────────────────────────────

    async def query(
        self, operation: Operation, variables: Optional[Dict[str, Any]] = None
    ) -> OperationResult:
        logger.debug("GraphQL query %s %s", operation.name, variables)
        return await self._execute(operation, variables)

    async def mutate(
        self, operation: Operation, variables: Optional[Dict[str, Any]] = None
    ) -> OperationResult:
        logger.debug("GraphQL mutation %s", operation.name)
        return await self._execute(operation, variables)

    async def _execute(
        self, operation: Operation, variables: Optional[Dict[str, Any]]
    ) -> OperationResult:
        response = await self._http.post(
            self.settings.graphql_url, json=operation.payload(variables)
        )

        try:
            body = response.json()
        except ValueError:
            response.raise_for_status()
            raise GraphQLResponseError(
                f"{operation.name}: expected a JSON response, got "
                f"{response.headers.get('content-type', 'no content type')}"
            )

        if not isinstance(body, dict) or not ("data" in body or "errors" in body):
            response.raise_for_status()
            raise GraphQLResponseError(f"{operation.name}: response is not a GraphQL result")

        # Error statuses are only acceptable when they explain themselves.
        if response.is_error and not body.get("errors"):
            response.raise_for_status()

        return OperationResult(data=body.get("data"), errors=body.get("errors") or None)

    # ── Event hooks ────────────────────────────────────────────────────────────

    async def _attach_headers(self, request: httpx.Request) -> None:
        request.headers.update(
            {
                "content-type": "application/json",
                "x-app-version": self.settings.app_version,
                "x-platform": self.settings.platform,
                "Origin": self.settings.origin,
                "Referer": self.settings.referer,
            }
        )
        header = cookie_header(self.session.cookies)
        if header:
            request.headers["Cookie"] = header
        else:
            request.headers.pop("Cookie", None)

    async def _capture_cookies(self, response: httpx.Response) -> None:
        set_cookie_lines = response.headers.get_list("set-cookie")
        if not set_cookie_lines:
            return

        async with self._cookie_lock:
            updated = False
            for line in set_cookie_lines:
                logger.debug("Received set-cookie: %s", line)
                for name, value in parse_set_cookie(line).items():
                    if value:
                        self.session.cookies[name] = value
                        updated = True

            account = self.session.account
            if updated and account:
                # Lock held across the write; the request waits for it.
                await anyio.to_thread.run_sync(
                    self.token_store.save_for_account, account, dict(self.session.cookies)
                )
                logger.info("Updated saved tokens for %s", account)
