"""Tests for the lifecycle Lambda handler"""

import pytest

from lifecycle_handler import index

WEBHOOK = "https://abc.execute-api.eu-central-1.amazonaws.com/prod/tg"


@pytest.fixture
def bot_api(monkeypatch):
    calls = []

    def fake_call(token, method, params):
        calls.append((token, method, params))
        return {"ok": True, "result": True}

    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("TELEGRAM_WEBHOOK_ENDPOINT", WEBHOOK)
    monkeypatch.setattr(index, "call_bot_api", fake_call)
    return calls


class TestHandler:
    def test_empty_payload_registers_webhook(self, bot_api):
        result = index.handler({}, None)

        assert result == {"action": "create", "webhook": WEBHOOK}
        assert bot_api == [
            (
                "123:abc",
                "setWebhook",
                {"url": WEBHOOK, "allowed_updates": index.ALLOWED_UPDATES},
            )
        ]

    def test_update_registers_webhook_again(self, bot_api):
        result = index.handler({"tf": {"action": "update", "prev_input": {}}}, None)

        assert result["action"] == "update"
        assert [method for _, method, _ in bot_api] == ["setWebhook"]

    def test_delete_removes_webhook(self, bot_api):
        result = index.handler({"tf": {"action": "delete", "prev_input": {}}}, None)

        assert result == {"action": "delete", "webhook": None}
        assert [method for _, method, _ in bot_api] == ["deleteWebhook"]

    def test_replacement_leaves_webhook_registered(self, bot_api):
        # Old invocation deleted first, then the new one created.
        index.handler({"tf": {"action": "delete", "prev_input": {}}}, None)
        index.handler({"tf": {"action": "create", "prev_input": {}}}, None)

        assert [method for _, method, _ in bot_api] == ["deleteWebhook", "setWebhook"]
        assert bot_api[-1][2]["url"] == WEBHOOK

    def test_bot_api_failure_propagates(self, monkeypatch, bot_api):
        def failing_call(token, method, params):
            raise RuntimeError("Telegram setWebhook failed: Unauthorized")

        monkeypatch.setattr(index, "call_bot_api", failing_call)
        with pytest.raises(RuntimeError, match="Unauthorized"):
            index.handler({}, None)


class TestCallBotApi:
    class Response:
        def __init__(self, body: bytes):
            self.body = body

        def read(self):
            return self.body

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    def test_posts_json_to_method_url(self, monkeypatch):
        seen = {}

        def fake_urlopen(request, timeout):
            seen["url"] = request.full_url
            seen["data"] = request.data
            return self.Response(b'{"ok": true, "result": true}')

        monkeypatch.setattr(index.urllib.request, "urlopen", fake_urlopen)
        body = index.call_bot_api("123:abc", "setWebhook", {"url": WEBHOOK})

        assert body["ok"] is True
        assert seen["url"] == "https://api.telegram.org/bot123:abc/setWebhook"
        assert b'"url"' in seen["data"]

    def test_not_ok_raises(self, monkeypatch):
        monkeypatch.setattr(
            index.urllib.request,
            "urlopen",
            lambda request, timeout: self.Response(
                b'{"ok": false, "description": "Bad Request"}'
            ),
        )
        with pytest.raises(RuntimeError, match="Bad Request"):
            index.call_bot_api("123:abc", "deleteWebhook", {})
