"""lifecycle_handler/index.py

Lambda invoked by the stack's lifecycle invocation, once per change of the
request dispatcher environment.

Registers the Telegram webhook on create and update, and removes it when the
invocation resource is destroyed. The invocation uses lifecycle scope CRUD,
so the event carries the action under ``tf``:

    {"tf": {"action": "create" | "update" | "delete", "prev_input": {...}}}

Any Bot API error is raised, which fails the invocation and with it the
whole deployment.

Environment variables:
    TELEGRAM_BOT_TOKEN          bot token from BotFather
    TELEGRAM_WEBHOOK_ENDPOINT   public URL of the webhook route
"""

import json
import logging
import os
import urllib.request
from typing import Any

logger = logging.getLogger()
logger.setLevel(logging.INFO)

TELEGRAM_API = "https://api.telegram.org"
ALLOWED_UPDATES = ["message", "edited_message", "chat_member"]
REQUEST_TIMEOUT = 10


def call_bot_api(token: str, method: str, params: dict[str, Any]) -> dict[str, Any]:
    request = urllib.request.Request(
        f"{TELEGRAM_API}/bot{token}/{method}",
        data=json.dumps(params).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(request, timeout=REQUEST_TIMEOUT) as response:
        body = json.loads(response.read().decode("utf-8"))
    if not body.get("ok"):
        raise RuntimeError(f"Telegram {method} failed: {body.get('description')}")
    return body


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    action = (event.get("tf") or {}).get("action", "create")
    token = os.environ["TELEGRAM_BOT_TOKEN"]

    if action == "delete":
        logger.info("Removing telegram webhook")
        call_bot_api(token, "deleteWebhook", {})
        return {"action": action, "webhook": None}

    webhook = os.environ["TELEGRAM_WEBHOOK_ENDPOINT"]
    logger.info("Registering telegram webhook %s", webhook)
    call_bot_api(
        token,
        "setWebhook",
        {"url": webhook, "allowed_updates": ALLOWED_UPDATES},
    )
    return {"action": action, "webhook": webhook}
