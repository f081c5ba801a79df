"""Tests for startup authentication and the command line."""

import signal
from pathlib import Path

import pytest
from click.testing import CliRunner

from saffron_mcp import __version__
from saffron_mcp import main as entry_point
from saffron_mcp.app.errors import AuthenticationError
from saffron_mcp.app.session import SessionClient
from saffron_mcp.app.token_store import TokenStore
from saffron_mcp.main import _shutdown, authenticate, cli

EMAIL = "user@example.com"
ME = {"me": {"id": "u1", "email": EMAIL}}


class TestAuthenticate:
    async def test_cached_session_skips_login(
        self, client: SessionClient, graphql, token_store: TokenStore
    ) -> None:
        token_store.save_for_account(EMAIL, {"sid": "cached"})
        graphql.reply("Me", data=ME)

        await authenticate(client, EMAIL, None)

        assert graphql.bodies("Login") == []
        assert graphql.requests_for("Me")[0].headers["cookie"] == "sid=cached"

    async def test_rejected_cache_without_password(
        self, client: SessionClient, graphql, token_store: TokenStore
    ) -> None:
        token_store.save_for_account(EMAIL, {"sid": "stale"})
        graphql.reply("Me", data=None, errors=[{"message": "Not authenticated"}])

        with pytest.raises(AuthenticationError, match="no password provided"):
            await authenticate(client, EMAIL, None)

    async def test_rejected_cache_falls_back_to_login(
        self, client: SessionClient, graphql, token_store: TokenStore
    ) -> None:
        token_store.save_for_account(EMAIL, {"sid": "stale"})
        graphql.reply("Me", data=None, errors=[{"message": "Not authenticated"}])
        graphql.reply("Me", data=ME)
        graphql.reply("Login", data={"login": {"success": True}}, set_cookie=["sid=fresh; Path=/"])

        await authenticate(client, EMAIL, "secret")

        assert graphql.bodies("Login")[0]["variables"] == {
            "input": {"email": EMAIL, "password": "secret"}
        }
        assert graphql.requests_for("Me")[-1].headers["cookie"] == "sid=fresh"
        assert token_store.load_for_account(EMAIL) == {"sid": "fresh"}

    async def test_no_cache_logs_in(self, client: SessionClient, graphql) -> None:
        graphql.reply("Login", data={"login": {"success": True}}, set_cookie=["sid=new"])
        graphql.reply("Me", data=ME)

        await authenticate(client, EMAIL, "secret")

        assert [body["operationName"] for body in graphql.bodies()] == ["Login", "Me"]

    async def test_login_errors_are_fatal(self, client: SessionClient, graphql) -> None:
        graphql.reply("Login", data=None, errors=[{"message": "Invalid credentials"}])

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await authenticate(client, EMAIL, "wrong")

        assert graphql.bodies("Me") == []


class TestCli:
    @pytest.fixture(autouse=True)
    def _environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("SAFFRON_PASSWORD", raising=False)
        monkeypatch.setenv("SAFFRON_TOKEN_FILE", str(tmp_path / "tokens.json"))

    def test_email_is_required(self) -> None:
        result = CliRunner().invoke(cli, [])

        assert result.exit_code == 2
        assert "--email" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_tokens_and_no_password_exits(self) -> None:
        result = CliRunner().invoke(cli, ["--email", EMAIL])

        assert result.exit_code == 1
        assert "No saved tokens found and no password provided" in result.output


class TestSignals:
    @pytest.mark.parametrize("signum", [signal.SIGINT, signal.SIGTERM])
    def test_shutdown_exits_cleanly(self, signum: int) -> None:
        with pytest.raises(SystemExit) as excinfo:
            _shutdown(signum, None)

        assert excinfo.value.code == 0

    def test_main_installs_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        installed = {}
        monkeypatch.setattr(entry_point, "load_dotenv", lambda: None)
        monkeypatch.setattr(
            entry_point.signal, "signal", lambda signum, handler: installed.update({signum: handler})
        )
        monkeypatch.setattr(entry_point, "cli", lambda: None)

        entry_point.main()

        assert installed == {signal.SIGINT: _shutdown, signal.SIGTERM: _shutdown}
