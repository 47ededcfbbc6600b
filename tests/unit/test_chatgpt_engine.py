"""Unit tests for ChatGPTEngine against an in-process HTTP server."""

import asyncio
import pytest
from aiohttp import web
from aiohttp import test_utils

from notecanvas.categorization.chatgpt_engine import ChatGPTEngine
from notecanvas.errors import CategorizationError


def run_against(handler, **send_kwargs):
    """Serve ``handler`` on /v1/chat/completions and send one prompt to it."""
    received = {}

    async def recording_handler(request):
        received["headers"] = dict(request.headers)
        received["body"] = await request.json()
        return await handler(request)

    async def scenario():
        app = web.Application()
        app.router.add_post("/v1/chat/completions", recording_handler)
        async with test_utils.TestServer(app) as server:
            engine = ChatGPTEngine(
                "test-key",
                model="gpt-test",
                base_url=str(server.make_url("/v1/chat/completions")),
                timeout_seconds=send_kwargs.pop("timeout_seconds", 5.0),
            )
            return await engine.send_prompt("hello", **send_kwargs)

    return asyncio.run(scenario()), received


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.unit
class TestChatGPTEngine:
    """Test cases for the chat-completions transport."""

    def test_returns_stripped_message_content(self):
        async def handler(request):
            return web.json_response(completion("  {\"tasks\": []}\n"))

        text, received = run_against(handler, system_prompt="be terse", json_mode=True)

        assert text == '{"tasks": []}'
        assert received["headers"]["Authorization"] == "Bearer test-key"
        body = received["body"]
        assert body["model"] == "gpt-test"
        assert body["messages"] == [
            {"role": "system", "content": "be terse"},
            {"role": "user", "content": "hello"},
        ]
        assert body["response_format"] == {"type": "json_object"}

    def test_plain_mode_omits_response_format(self):
        async def handler(request):
            return web.json_response(completion("ok"))

        text, received = run_against(handler, temperature=0.7, max_tokens=10)

        assert text == "ok"
        assert "response_format" not in received["body"]
        assert received["body"]["messages"] == [{"role": "user", "content": "hello"}]
        assert received["body"]["temperature"] == 0.7
        assert received["body"]["max_tokens"] == 10

    def test_non_200_raises_with_status(self):
        async def handler(request):
            return web.Response(status=500, text="upstream exploded")

        with pytest.raises(CategorizationError) as exc_info:
            run_against(handler)

        assert exc_info.value.status == 500
        assert "upstream exploded" in str(exc_info.value)

    def test_unexpected_payload_raises(self):
        async def handler(request):
            return web.json_response({"choices": []})

        with pytest.raises(CategorizationError):
            run_against(handler)

    def test_slow_server_times_out(self):
        async def handler(request):
            await asyncio.sleep(1.0)
            return web.json_response(completion("late"))

        with pytest.raises(asyncio.TimeoutError):
            run_against(handler, timeout_seconds=0.1)

    def test_missing_api_key_raises_without_a_request(self):
        engine = ChatGPTEngine(None, base_url="http://127.0.0.1:9/unreachable")

        with pytest.raises(CategorizationError, match="API key not configured"):
            asyncio.run(engine.send_prompt("hello"))
