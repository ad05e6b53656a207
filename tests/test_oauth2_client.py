# SPDX-License-Identifier: MIT

import importlib
import os
import unittest
from unittest import mock
from urllib.parse import parse_qs, urlsplit

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

import cordauth.config
from cordauth import OAuth2Client, OAuth2Credentials, OAuth2Scope, OAuth2Token
from cordauth.errors import Forbidden, InvalidAccessToken, PreconditionFailed, ValidationError
from fakes import BOT_TOKEN, CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, FakeResponse, FakeSession

console = Console()

TOKEN_PAYLOAD = {
    "access_token": "6qrZcUqja7812RVdnEKjpzOL4CvHBFG",
    "token_type": "Bearer",
    "expires_in": 604800,
    "refresh_token": "D43f5y0ahjqew82jZ4NViEr2YafMKhue",
    "scope": "identify guilds",
}


def make_client(*responses, **kwargs):
    session = FakeSession(*responses)
    client = OAuth2Client(
        CLIENT_ID,
        CLIENT_SECRET,
        REDIRECT_URI,
        [OAuth2Scope.IDENTIFY],
        session=session,
        **kwargs,
    )
    return client, session


class AuthorizeUrlTestSuite(unittest.TestCase):
    """Tests for building the authorization link."""

    def setUp(self):
        console.print(Panel(Text(f"Running: {self._testMethodName}", style="bold cyan")))
        self.client, self.session = make_client()

    def test_query_decodes_to_exact_parameters(self):
        url = self.client.get_authorize_url(["identify", "guilds"], state="abc")
        parts = urlsplit(url)

        self.assertEqual(f"{parts.scheme}://{parts.netloc}{parts.path}", "https://discord.com/oauth2/authorize")
        self.assertEqual(
            parse_qs(parts.query),
            {
                "client_id": [CLIENT_ID],
                "redirect_uri": [REDIRECT_URI],
                "response_type": ["code"],
                "scope": ["identify guilds"],
                "state": ["abc"],
            },
        )
        self.assertEqual(self.session.calls, [])

    def test_defaults_to_client_scopes_and_state(self):
        query = parse_qs(urlsplit(self.client.get_authorize_url()).query)
        self.assertEqual(query["scope"], ["identify"])
        self.assertEqual(query["state"], ["1bac472"])

    def test_extra_parameters(self):
        query = parse_qs(urlsplit(self.client.get_authorize_url(prompt="none")).query)
        self.assertEqual(query["prompt"], ["none"])

    def test_scopes_from_a_generator(self):
        scopes = (s for s in ["identify", "guilds"])
        query = parse_qs(urlsplit(self.client.get_authorize_url(scopes)).query)
        self.assertEqual(query["scope"], ["identify guilds"])

    def test_client_scopes_from_a_generator(self):
        client = OAuth2Client(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, iter(["email"]), session=FakeSession())
        self.assertEqual(client.scopes, ["email"])

    def test_non_string_state_rejected(self):
        with self.assertRaises(ValidationError):
            self.client.get_authorize_url(state=123)

    def test_scopes_must_be_a_list_of_str(self):
        with self.assertRaises(ValidationError):
            self.client.get_authorize_url("identify guilds")
        with self.assertRaises(ValidationError):
            self.client.get_authorize_url(["identify", 5])


class CredentialsTestSuite(unittest.TestCase):
    def test_client_id_must_be_snowflake(self):
        with self.assertRaises(ValidationError):
            OAuth2Client("not-an-id", CLIENT_SECRET, REDIRECT_URI)

    def test_int_client_id_is_accepted(self):
        credentials = OAuth2Credentials(int(CLIENT_ID), CLIENT_SECRET, REDIRECT_URI)
        self.assertEqual(credentials.client_id, CLIENT_ID)

    def test_credentials_are_immutable(self):
        credentials = OAuth2Credentials(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI)
        with self.assertRaises(AttributeError):
            credentials.client_secret = "other"

    def test_secret_not_in_repr(self):
        credentials = OAuth2Credentials(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, BOT_TOKEN)
        self.assertNotIn(CLIENT_SECRET, repr(credentials))
        self.assertNotIn(BOT_TOKEN, repr(credentials))

    def test_from_env(self):
        env = {
            "DISCORD_CLIENT_ID": CLIENT_ID,
            "DISCORD_CLIENT_SECRET": CLIENT_SECRET,
            "DISCORD_REDIRECT_URI": REDIRECT_URI,
            "DISCORD_BOT_TOKEN": BOT_TOKEN,
            "DISCORD_OAUTH2_SCOPES": "identify guilds.join",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            client = OAuth2Client.from_env(session=FakeSession())

        self.assertEqual(client.client_id, CLIENT_ID)
        self.assertEqual(client.credentials.client_token, BOT_TOKEN)
        self.assertEqual(client.scopes, ["identify", "guilds.join"])

    def test_import_leaves_environment_untouched(self):
        with mock.patch("dotenv.load_dotenv") as load_dotenv:
            importlib.reload(cordauth.config)
        importlib.reload(cordauth.config)
        load_dotenv.assert_not_called()

    def test_from_env_loads_dotenv_file(self):
        env = {
            "DISCORD_CLIENT_ID": CLIENT_ID,
            "DISCORD_CLIENT_SECRET": CLIENT_SECRET,
            "DISCORD_REDIRECT_URI": REDIRECT_URI,
        }
        with mock.patch.dict(os.environ, env, clear=True), mock.patch("cordauth.config.load_dotenv") as load_dotenv:
            OAuth2Credentials.from_env()
        load_dotenv.assert_called_once_with()

    def test_from_env_reports_missing_values(self):
        with mock.patch.dict(os.environ, {"DISCORD_CLIENT_ID": CLIENT_ID}, clear=True):
            with self.assertRaises(ValidationError) as ctx:
                OAuth2Credentials.from_env()
        self.assertIn("DISCORD_CLIENT_SECRET", str(ctx.exception))


class OAuth2ClientTestSuite(unittest.IsolatedAsyncioTestCase):
    """Tests for the request call sites."""

    def setUp(self):
        console.print(Panel(Text(f"Running: {self._testMethodName}", style="bold cyan")))

    async def test_exchange_code_maps_tokens(self):
        client, session = make_client(FakeResponse(200, TOKEN_PAYLOAD))
        token = await client.exchange_code("auth-code")

        self.assertIsInstance(token, OAuth2Token)
        self.assertEqual(token.access_token, TOKEN_PAYLOAD["access_token"])
        self.assertEqual(token.refresh_token, TOKEN_PAYLOAD["refresh_token"])
        self.assertEqual(token.expires_in, 604800)
        self.assertEqual(token.to_dict(), TOKEN_PAYLOAD)

        method, url, kwargs = session.last_call
        self.assertEqual((method, url), ("POST", "https://discord.com/api/v10/oauth2/token"))
        self.assertEqual(
            kwargs["data"],
            {
                "client_id": CLIENT_ID,
                "client_secret": CLIENT_SECRET,
                "grant_type": "authorization_code",
                "code": "auth-code",
                "redirect_uri": REDIRECT_URI,
            },
        )
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/x-www-form-urlencoded")
        self.assertNotIn("Authorization", kwargs["headers"])

    async def test_exchange_code_rejects_non_string(self):
        client, session = make_client()
        with self.assertRaises(ValidationError):
            await client.exchange_code(None)
        self.assertEqual(session.calls, [])

    async def test_refresh_token(self):
        client, session = make_client(FakeResponse(200, TOKEN_PAYLOAD))
        token = await client.refresh_token("old-refresh")

        self.assertEqual(token.access_token, TOKEN_PAYLOAD["access_token"])
        data = session.last_call[2]["data"]
        self.assertEqual(data["grant_type"], "refresh_token")
        self.assertEqual(data["refresh_token"], "old-refresh")

    async def test_revoke_requires_both_tokens(self):
        client, session = make_client()
        with self.assertRaises(PreconditionFailed):
            await client.revoke_token("access", None)
        with self.assertRaises(PreconditionFailed):
            await client.revoke_token(None, "refresh")
        with self.assertRaises(PreconditionFailed):
            await client.revoke_token("", "refresh")
        with self.assertRaises(PreconditionFailed):
            await client.revoke_token("access", "")
        self.assertEqual(session.calls, [])

    async def test_revoke_posts_refresh_token(self):
        client, session = make_client(FakeResponse(200, {}))
        await client.revoke_token("access", "refresh")

        method, url, kwargs = session.last_call
        self.assertEqual((method, url), ("POST", "https://discord.com/api/oauth2/token/revoke"))
        self.assertEqual(
            kwargs["data"],
            {"client_id": CLIENT_ID, "client_secret": CLIENT_SECRET, "token": "refresh"},
        )

    async def test_fetch_endpoints_use_bearer_token(self):
        cases = [
            ("fetch_user", "/users/@me", {"id": "1", "username": "mahiro"}),
            ("fetch_connections", "/users/@me/connections", [{"id": "x", "type": "github"}]),
            ("fetch_guilds", "/users/@me/guilds", [{"id": "2", "name": "guild"}]),
        ]
        for name, path, body in cases:
            with self.subTest(operation=name):
                client, session = make_client(FakeResponse(200, body))
                result = await getattr(client, name)("user-token")

                self.assertEqual(result, body)
                method, url, kwargs = session.last_call
                self.assertEqual((method, url), ("GET", "https://discord.com/api/v10" + path))
                self.assertEqual(kwargs["headers"]["Authorization"], "Bearer user-token")

    async def test_fetch_username(self):
        client, _ = make_client(FakeResponse(200, {"id": "1", "username": "mahiro"}))
        self.assertEqual(await client.fetch_username("user-token"), "mahiro")

    async def test_fetch_guild_member(self):
        body = {"roles": [], "joined_at": "2024-01-01T00:00:00+00:00", "deaf": False, "mute": False, "flags": 0}
        client, session = make_client(FakeResponse(200, body))
        self.assertEqual(await client.fetch_guild_member("user-token", 987654321), body)
        self.assertEqual(
            session.last_call[1],
            "https://discord.com/api/v10/users/@me/guilds/987654321/member",
        )

    async def test_fetch_guild_member_rejects_bad_guild_id(self):
        client, session = make_client()
        with self.assertRaises(ValidationError):
            await client.fetch_guild_member("user-token", "abc")
        self.assertEqual(session.calls, [])

    async def test_invalid_token_is_classified(self):
        client, _ = make_client(FakeResponse(401, {"message": "401: Unauthorized", "code": 0}))
        with self.assertRaises(InvalidAccessToken) as ctx:
            await client.fetch_user("stale")
        self.assertIn('"code": 0', ctx.exception.context)

    async def test_join_guild_uses_bot_token(self):
        member = {"roles": ["11"], "joined_at": "2024-01-01T00:00:00+00:00", "deaf": False, "mute": False, "flags": 0}
        client, session = make_client(FakeResponse(201, member), client_token=BOT_TOKEN)
        result = await client.join_guild("user-token", "22", 33, roles=[11], nick="mahiro")

        self.assertEqual(result, member)
        method, url, kwargs = session.last_call
        self.assertEqual((method, url), ("PUT", "https://discord.com/api/v10/guilds/22/members/33"))
        self.assertEqual(kwargs["headers"]["Authorization"], f"Bot {BOT_TOKEN}")
        self.assertEqual(kwargs["json"], {"access_token": "user-token", "roles": ["11"], "nick": "mahiro"})

    async def test_join_guild_existing_member_returns_none(self):
        client, _ = make_client(FakeResponse(204, None), client_token=BOT_TOKEN)
        self.assertIsNone(await client.join_guild("user-token", 22, 33))

    async def test_join_guild_shares_error_classification(self):
        client, _ = make_client(FakeResponse(403, {"message": "Missing Permissions", "code": 50013}), client_token=BOT_TOKEN)
        with self.assertRaises(Forbidden) as ctx:
            await client.join_guild("user-token", 22, 33)
        self.assertEqual(ctx.exception.message, "Missing Permissions")

    async def test_join_guild_without_bot_token(self):
        client, session = make_client()
        with self.assertRaises(PreconditionFailed):
            await client.join_guild("user-token", 22, 33)
        self.assertEqual(session.calls, [])

    async def test_fetch_application(self):
        app = {"id": CLIENT_ID, "name": "Nexon"}
        client, session = make_client(FakeResponse(200, app), client_token=BOT_TOKEN)

        self.assertEqual(await client.fetch_application(), app)
        self.assertEqual(session.last_call[1], "https://discord.com/api/v10/oauth2/applications/@me")
        self.assertEqual(session.last_call[2]["headers"]["Authorization"], f"Bot {BOT_TOKEN}")

    async def test_context_manager_closes_owned_session(self):
        async with OAuth2Client(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI) as client:
            self.assertEqual(client.scopes, [])
        self.assertIsNone(client.http._HTTPClient__session)


if __name__ == "__main__":
    unittest.main()
