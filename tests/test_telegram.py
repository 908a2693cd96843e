"""Tests for the Bot API client: token parsing, rotation, polling, sending."""

import json

import httpx
import pytest

from tether.communication.telegram import (
    TelegramAPIError,
    TelegramClient,
    TelegramRateLimitError,
    TokenPool,
    is_rate_limited,
    parse_token_array,
)

RATE_LIMITED = {"ok": False, "error_code": 429, "description": "Too Many Requests: retry after 5"}


def _token_of(request: httpx.Request) -> str:
    # /bot<token>/<method>
    return request.url.path.split("/")[1][len("bot"):]


def _client(pool: TokenPool, handler) -> TelegramClient:
    return TelegramClient(pool, api_url="https://tg.test", transport=httpx.MockTransport(handler))


# ── Token array parsing ─────────────────────────────────────

class TestParseTokenArray:

    @pytest.mark.parametrize("raw, expected", [
        ("a,b", ["a", "b"]),
        ("[a, b]", ["a", "b"]),
        ("[1:x,2:y];", ["1:x", "2:y"]),
        ('["1:x", "2:y"]', ["1:x", "2:y"]),
        ("  single  ", ["single"]),
        ("[a,,b,]", ["a", "b"]),
        ("", []),
        (None, []),
        ("[]", []),
    ])
    def test_formats(self, raw, expected):
        assert parse_token_array(raw) == expected


# ── Token pool ──────────────────────────────────────────────

class TestTokenPool:

    def test_empty_pool_rejected(self):
        with pytest.raises(ValueError):
            TokenPool([])

    def test_rotate_wraps(self):
        pool = TokenPool(["a", "b", "c"])
        assert pool.current == "a"
        assert pool.rotate() == "b"
        assert pool.rotate() == "c"
        assert pool.rotate() == "a"
        assert pool.index == 0

    def test_single_token_rotates_to_itself(self):
        pool = TokenPool(["only"])
        pool.rotate()
        assert pool.index == 0
        assert pool.current == "only"

    def test_index_always_in_range(self):
        pool = TokenPool(["a", "b"])
        for _ in range(7):
            pool.rotate()
            assert 0 <= pool.index < len(pool)


# ── Rate-limit detection ────────────────────────────────────

class TestIsRateLimited:

    def test_429(self):
        assert is_rate_limited(RATE_LIMITED) is True

    @pytest.mark.parametrize("data", [
        {"ok": True, "result": []},
        {"ok": False, "error_code": 401, "description": "Unauthorized"},
        {"ok": False, "error_code": 409, "description": "Conflict"},
        {"ok": False},
        None,
        [],
        "429",
    ])
    def test_everything_else_is_final(self, data):
        assert is_rate_limited(data) is False


# ── getUpdates ──────────────────────────────────────────────

class TestGetUpdates:

    @pytest.mark.asyncio
    async def test_returns_updates(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "result": [{"update_id": 7}]})

        client = _client(TokenPool(["t1"]), handler)
        assert await client.get_updates(5) == [{"update_id": 7}]
        assert seen[0].url.path == "/bott1/getUpdates"
        assert seen[0].url.params["offset"] == "5"
        assert seen[0].url.params["timeout"] == "30"
        await client.close()

    @pytest.mark.asyncio
    async def test_rotates_once_per_rate_limit(self):
        calls = []

        def handler(request):
            token = _token_of(request)
            calls.append(token)
            if token == "t1":
                return httpx.Response(429, json=RATE_LIMITED)
            return httpx.Response(200, json={"ok": True, "result": []})

        pool = TokenPool(["t1", "t2", "t3"])
        client = _client(pool, handler)
        assert await client.get_updates(0) == []
        assert calls == ["t1", "t2"]
        assert pool.index == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_rotation_wraps_to_first_token(self):
        calls = []

        def handler(request):
            token = _token_of(request)
            calls.append(token)
            if token == "t2":
                return httpx.Response(429, json=RATE_LIMITED)
            return httpx.Response(200, json={"ok": True, "result": []})

        pool = TokenPool(["t1", "t2"])
        pool.rotate()  # start on the last token
        client = _client(pool, handler)
        await client.get_updates(0)
        assert calls == ["t2", "t1"]
        assert pool.index == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_all_tokens_rate_limited(self):
        calls = []

        def handler(request):
            calls.append(_token_of(request))
            return httpx.Response(429, json=RATE_LIMITED)

        pool = TokenPool(["t1", "t2"])
        client = _client(pool, handler)
        with pytest.raises(TelegramRateLimitError):
            await client.get_updates(0)
        # One attempt per token, cursor advanced once per 429
        assert calls == ["t1", "t2"]
        assert pool.index == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_other_errors_do_not_rotate(self):
        def handler(request):
            return httpx.Response(
                401, json={"ok": False, "error_code": 401, "description": "Unauthorized"},
            )

        pool = TokenPool(["t1", "t2"])
        client = _client(pool, handler)
        with pytest.raises(TelegramAPIError, match="401"):
            await client.get_updates(0)
        assert pool.index == 0
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        client = _client(TokenPool(["t1"]), handler)
        with pytest.raises(TelegramAPIError):
            await client.get_updates(0)
        await client.close()

    @pytest.mark.asyncio
    async def test_network_error_propagates(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        pool = TokenPool(["t1", "t2"])
        client = _client(pool, handler)
        with pytest.raises(httpx.ConnectError):
            await client.get_updates(0)
        assert pool.index == 0
        await client.close()


# ── sendMessage ─────────────────────────────────────────────

class TestSendMessage:

    @pytest.mark.asyncio
    async def test_payload(self):
        sent = []

        def handler(request):
            sent.append((request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"ok": True, "result": {}})

        client = _client(TokenPool(["t1"]), handler)
        assert await client.send_message(42, "*hi*") is True
        path, body = sent[0]
        assert path == "/bott1/sendMessage"
        assert body == {"chat_id": 42, "text": "*hi*", "parse_mode": "Markdown"}
        await client.close()

    @pytest.mark.asyncio
    async def test_markdown_fallback(self):
        sent = []

        def handler(request):
            body = json.loads(request.content)
            sent.append(body)
            if "parse_mode" in body:
                return httpx.Response(400, json={
                    "ok": False, "error_code": 400,
                    "description": "Bad Request: can't parse entities: Can't find end of the entity",
                })
            return httpx.Response(200, json={"ok": True, "result": {}})

        client = _client(TokenPool(["t1"]), handler)
        assert await client.send_message(1, "snake_case_name") is True
        assert len(sent) == 2
        assert "parse_mode" not in sent[1]
        assert sent[1]["text"] == "snake_case_name"
        await client.close()

    @pytest.mark.asyncio
    async def test_api_error_swallowed(self):
        def handler(request):
            return httpx.Response(403, json={"ok": False, "error_code": 403, "description": "Forbidden"})

        client = _client(TokenPool(["t1"]), handler)
        assert await client.send_message(1, "hi") is False
        await client.close()

    @pytest.mark.asyncio
    async def test_network_error_swallowed(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = _client(TokenPool(["t1"]), handler)
        assert await client.send_message(1, "hi") is False
        await client.close()

    @pytest.mark.asyncio
    async def test_uses_current_token(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"ok": True, "result": {}})

        pool = TokenPool(["t1", "t2"])
        pool.rotate()
        client = _client(pool, handler)
        await client.send_message(1, "hi")
        assert paths == ["/bott2/sendMessage"]
        await client.close()
