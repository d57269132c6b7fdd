try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from calendar_bot.clients.google_auth import TokenExchangeError
from calendar_bot.clients.kv_store import SQLiteKeyValueStore, StoreUnavailableError
from calendar_bot.clients.telegram import TelegramDeliveryError
from calendar_bot.main import app
from calendar_bot.services import (
    AuthorizationInitiator,
    CredentialStore,
    OAuthCallbackHandler,
    OAuthStateStore,
)
from calendar_bot.services.oauth_callback import AUTH_SUCCESS_MESSAGE

pytestmark = pytest.mark.anyio("asyncio")


class DummyOAuthClient:
    def __init__(self) -> None:
        self.codes: list[str] = []
        self.error: Exception | None = None

    def build_authorization_url(self, state: str) -> str:
        return f"https://oauth.example.com/auth?state={state}"

    async def exchange_authorization_code(self, code: str) -> dict:
        self.codes.append(code)
        if self.error:
            raise self.error
        return {"access_token": f"token-for-{code}", "expires_in": 3599}


class RecordingBot:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.fail = False

    async def send_message(self, chat_id, text, *, parse_mode=None, reply_markup=None):
        if self.fail:
            raise TelegramDeliveryError("Telegram sendMessage failed: Forbidden")
        self.messages.append((chat_id, text))
        return {"message_id": len(self.messages)}


class FakeChat:
    def __init__(self, chat_id: str) -> None:
        self.chat_id = chat_id
        self.replies: list[dict] = []

    def chat_identifier(self) -> str:
        return self.chat_id

    async def reply(self, text, *, parse_mode=None, reply_markup=None):
        self.replies.append({"text": text, "reply_markup": reply_markup})


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class BrokenStateStore:
    def consume(self, state: str):
        raise StoreUnavailableError("database is locked")


@pytest.fixture()
def flow(tmp_path):
    from calendar_bot import dependencies

    db_path = str(tmp_path / "callback.db")
    states_kv = SQLiteKeyValueStore(db_path, namespace="oauth_states")
    states = OAuthStateStore(states_kv, ttl_seconds=300)
    credentials = CredentialStore(SQLiteKeyValueStore(db_path, namespace="oauth_tokens"))
    oauth = DummyOAuthClient()
    bot = RecordingBot()

    def build_handler() -> OAuthCallbackHandler:
        return OAuthCallbackHandler(
            oauth_client=oauth, states=states, credentials=credentials, bot=bot
        )

    app.dependency_overrides[dependencies.get_oauth_callback_handler] = build_handler

    yield AuthorizationInitiator(oauth, states), states_kv, credentials, oauth, bot

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(flow):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as test_client:
        yield test_client


async def _login(initiator: AuthorizationInitiator, chat_id: str = "42") -> str:
    chat = FakeChat(chat_id)
    state = await initiator.start(chat)
    url = chat.replies[0]["reply_markup"]["inline_keyboard"][0][0]["url"]
    assert parse_qs(urlparse(url).query)["state"] == [state]
    return state


async def test_login_then_callback_stores_credential(flow, client) -> None:
    initiator, states_kv, credentials, oauth, bot = flow
    state = await _login(initiator, "42")
    assert states_kv.get(state) == "42"

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )

    assert response.status_code == 200
    assert response.text == "Authentication successful! You can close this window."
    assert oauth.codes == ["abc"]
    assert states_kv.get(state) is None
    bundle = credentials.get("42")
    assert bundle is not None
    assert bundle.access_token == "token-for-abc"
    assert bot.messages == [("42", AUTH_SUCCESS_MESSAGE)]


async def test_replayed_state_is_rejected_without_exchange(flow, client) -> None:
    initiator, _, _, oauth, _ = flow
    state = await _login(initiator)

    first = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )
    replay = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )

    assert first.status_code == 200
    assert replay.status_code == 400
    assert replay.text == "Invalid or expired chat"
    assert oauth.codes == ["abc"]


async def test_unknown_state_writes_no_credential(flow, client) -> None:
    _, _, credentials, oauth, bot = flow

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": "forged"}
    )

    assert response.status_code == 400
    assert response.text == "Invalid or expired chat"
    assert oauth.codes == []
    assert credentials.get("42") is None
    assert bot.messages == []


async def test_expired_state_is_rejected_without_exchange(tmp_path, flow, client) -> None:
    from calendar_bot import dependencies

    _, _, credentials, oauth, bot = flow
    clock = FakeClock()
    states = OAuthStateStore(
        SQLiteKeyValueStore(str(tmp_path / "expiry.db"), namespace="oauth_states", clock=clock),
        ttl_seconds=300,
    )
    app.dependency_overrides[dependencies.get_oauth_callback_handler] = (
        lambda: OAuthCallbackHandler(
            oauth_client=oauth, states=states, credentials=credentials, bot=bot
        )
    )
    state = await _login(AuthorizationInitiator(oauth, states))
    clock.now += 301

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )

    assert response.status_code == 400
    assert response.text == "Invalid or expired chat"
    assert oauth.codes == []
    assert credentials.get("42") is None
    assert bot.messages == []


@pytest.mark.parametrize(
    "params",
    [{"code": "abc"}, {"state": "s"}, {}, {"error": "access_denied", "state": "s"}],
)
async def test_missing_parameters_are_rejected(flow, client, params) -> None:
    _, _, _, oauth, _ = flow

    response = await client.get("/api/auth/callback/google", params=params)

    assert response.status_code == 400
    assert response.text == "Missing code or state"
    assert oauth.codes == []


async def test_failed_exchange_consumes_state(flow, client) -> None:
    initiator, states_kv, credentials, oauth, bot = flow
    oauth.error = TokenExchangeError("invalid_grant")
    state = await _login(initiator)

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )

    assert response.status_code == 502
    assert response.json() == {"detail": "Failed to exchange authorization code."}
    assert states_kv.get(state) is None
    assert credentials.get("42") is None
    assert bot.messages == []


async def test_notification_failure_does_not_fail_callback(flow, client) -> None:
    initiator, _, credentials, _, bot = flow
    bot.fail = True
    state = await _login(initiator)

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": state}
    )

    assert response.status_code == 200
    assert credentials.get("42") is not None


async def test_store_outage_is_reported_as_503(flow, client) -> None:
    from calendar_bot import dependencies

    _, _, credentials, oauth, bot = flow
    app.dependency_overrides[dependencies.get_oauth_callback_handler] = (
        lambda: OAuthCallbackHandler(
            oauth_client=oauth,
            states=BrokenStateStore(),
            credentials=credentials,
            bot=bot,
        )
    )

    response = await client.get(
        "/api/auth/callback/google", params={"code": "abc", "state": "s"}
    )

    assert response.status_code == 503
    assert response.json() == {"detail": "Storage backend unavailable."}
    assert oauth.codes == []


async def test_healthcheck(client) -> None:
    response = await client.get("/api/health")

    assert response.json() == {"status": "ok"}
