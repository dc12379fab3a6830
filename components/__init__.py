"""
Kite serverless stack components.

Each concern is encapsulated in its own ComponentResource for clear ownership,
testability, and reuse. ``KiteStack`` composes them in one pass:

- **resolve_features**: custom domain on or off; with it, a **DnsZone**
  (Cloud DNS) and a validated wildcard **TlsCertificate** (ACM).
- **Role** / **ApiGatewayPrincipal**: Lambda execution identity and the role
  API Gateway assumes to invoke it.
- **DynamoDbSchema** / **ObjectStore**: tables and bucket; they push grants onto
  the execution role.
- **WebsocketApi** / **HttpApi**: front doors with stages exposing
  ``invoke_url``.
- **Lambda**: request dispatcher and lifecycle handler.
- **LifecycleTrigger**: invokes the lifecycle handler when the dispatcher
  environment changes.
- **add_tags**: transformation labelling every resource.
"""

from components.certificate import TlsCertificate
from components.dns import DnsZone
from components.features import (
    CustomDomainDisabled,
    CustomDomainEnabled,
    DomainBinding,
    FeatureDecision,
    resolve_features,
)
from components.http_api import HttpApi, HttpStage
from components.iam import ApiGatewayPrincipal, Role
from components.lambda_function import Lambda
from components.lifecycle import LifecycleTrigger
from components.stack import KiteStack
from components.storage import DynamoDbSchema, ObjectStore
from components.tagging import TAGS, add_tags
from components.websocket_api import WebsocketApi, WebsocketStage

__all__ = [
    "TAGS",
    "ApiGatewayPrincipal",
    "CustomDomainDisabled",
    "CustomDomainEnabled",
    "DnsZone",
    "DomainBinding",
    "DynamoDbSchema",
    "FeatureDecision",
    "HttpApi",
    "HttpStage",
    "KiteStack",
    "Lambda",
    "LifecycleTrigger",
    "ObjectStore",
    "Role",
    "TlsCertificate",
    "WebsocketApi",
    "WebsocketStage",
    "add_tags",
    "resolve_features",
]
