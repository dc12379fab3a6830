"""
Environment of the request dispatcher, and its fingerprint.

``assemble_environment`` is the only place the runtime configuration of the
stack is put together. The same map feeds the primary Lambda and, through
``fingerprint``, the lifecycle invocation triggers, so its key order is fixed
and every value is derived from another component's output: the webhook URL
is always the request API stage URL followed by the webhook route.
"""

from collections.abc import Mapping

import pulumi

from components._helpers import environment_fingerprint, webhook_endpoint

TELEGRAM_ROUTE = "/tg"

# Key order of the assembled map; part of the fingerprint.
ENVIRONMENT_KEYS: tuple[str, ...] = (
    "SERVERLESS_ENVIRONMENT",
    "WS_API_EXECUTION_ENDPOINT",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_WEBHOOK_ENDPOINT",
    "BUCKET_NAME",
    "DISABLE_SIGNAL_HANDLERS",
)
LIFECYCLE_KEYS: tuple[str, ...] = ("TELEGRAM_BOT_TOKEN", "TELEGRAM_WEBHOOK_ENDPOINT")


def assemble_environment(
    environment_name: str,
    ws_api_url: pulumi.Input[str],
    request_api_url: pulumi.Input[str],
    telegram_bot_token: pulumi.Input[str],
    bucket_name: pulumi.Input[str],
) -> dict[str, pulumi.Input[str]]:
    """
    Build the request dispatcher environment.

    Args:
        environment_name: Serverless environment (also the table prefix).
        ws_api_url: Execution endpoint of the WebSocket stage.
        request_api_url: Invoke URL of the HTTP stage.
        telegram_bot_token: Bot token (secret).
        bucket_name: Object store bucket.
    """
    values = {
        "SERVERLESS_ENVIRONMENT": environment_name,
        "WS_API_EXECUTION_ENDPOINT": ws_api_url,
        "TELEGRAM_BOT_TOKEN": telegram_bot_token,
        "TELEGRAM_WEBHOOK_ENDPOINT": pulumi.Output.from_input(request_api_url).apply(
            lambda url: webhook_endpoint(url, TELEGRAM_ROUTE)
        ),
        "BUCKET_NAME": bucket_name,
        "DISABLE_SIGNAL_HANDLERS": "true",
    }
    return {key: values[key] for key in ENVIRONMENT_KEYS}


def lifecycle_environment(
    environment: Mapping[str, pulumi.Input[str]],
) -> dict[str, pulumi.Input[str]]:
    """Subset of the dispatcher environment the lifecycle handler needs."""
    return {key: environment[key] for key in LIFECYCLE_KEYS}


def fingerprint(
    environment: Mapping[str, pulumi.Input[str]],
) -> pulumi.Output[str]:
    """Digest of the resolved environment, in key order."""
    keys = list(environment)
    return pulumi.Output.all(*environment.values()).apply(
        lambda values: environment_fingerprint(dict(zip(keys, values)))
    )
