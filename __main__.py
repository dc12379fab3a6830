"""
Kite serverless chat - IaC entrypoint.

Builds one KiteStack ComponentResource from Pulumi config:

- **Front doors**: a WebSocket API for chat clients and an HTTP API for the
  Telegram webhook, optionally on ``ws.<domain>`` / ``api.<domain>`` with a
  Cloud DNS zone and an ACM certificate.
- **Compute**: the request dispatcher Lambda behind both APIs, and a lifecycle
  Lambda that registers the Telegram webhook whenever the dispatcher
  environment changes.
- **State**: DynamoDB tables and a private S3 bucket.

Every resource is labelled by the tagging transformation the stack component
attaches to itself.

Stack exports: lifecycle_output, ws_api_endpoint, webhook_endpoint,
bucket_name, and name_servers when a custom domain is configured.
"""

import pulumi

from components import KiteStack
from config import StackConfig


def main():
    """
    Build the stack and export its outputs.

    Reads and validates config before declaring anything, reads the bot token
    as a secret, instantiates KiteStack, and exports the lifecycle invocation
    result next to the endpoints.
    """
    pulumi_config = pulumi.Config()
    config = StackConfig.from_pulumi_config(pulumi_config)
    telegram_bot_token = pulumi_config.require_secret("telegram_bot_token")

    stack = KiteStack(
        name=f"kite-{pulumi.get_stack()}",
        config=config,
        telegram_bot_token=telegram_bot_token,
    )

    outputs = [
        ("lifecycle_output", stack.lifecycle_result),
        ("ws_api_endpoint", stack.ws_api_endpoint),
        ("webhook_endpoint", stack.webhook_endpoint),
        ("bucket_name", stack.bucket_name),
    ]
    if stack.name_servers is not None:
        outputs.append(("name_servers", stack.name_servers))
    for output_name, value in outputs:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
