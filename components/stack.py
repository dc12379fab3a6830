"""
Kite serverless stack: the composition of every component in one pass.

Construction order follows the data dependencies between components:

1. Feature decision (DNS zone + certificate only with a custom domain).
2. Tables, execution role, grants, object store: the role exists before any
   store pushes a permission onto it.
3. Front doors, bound to the custom domain before their stages exist, with
   one CNAME per custom hostname.
4. Stages, then the dispatcher environment built from their URLs.
5. Request dispatcher Lambda, routed from both stages.
6. Lifecycle Lambda (never routed) and its invocation, keyed by the
   dispatcher environment.

The stack attaches the tagging transformation to itself, so every resource
declared below it is labelled; see components.tagging.
"""

import pulumi

from components.environment import (
    TELEGRAM_ROUTE,
    assemble_environment,
    lifecycle_environment,
)
from components.features import (
    API_SUBDOMAIN,
    WS_SUBDOMAIN,
    CustomDomainEnabled,
    resolve_features,
)
from components.http_api import HttpApi
from components.iam import (
    BASIC_EXECUTION_POLICY_ARN,
    LAMBDA_SERVICE_PRINCIPAL,
    ApiGatewayPrincipal,
    Role,
)
from components.lambda_function import Lambda
from components.lifecycle import LifecycleTrigger
from components.storage import DynamoDbSchema, ObjectStore
from components.tagging import TAGS, add_tags
from components.websocket_api import WebsocketApi
from config import StackConfig

ID = "kite:index:KiteStack"

ENVIRONMENT = "prod"
OBJECT_STORE_PREFIX = f"{ENVIRONMENT}-k1te-chat-object-store-"

DISPATCHER_TIMEOUT = 30
LIFECYCLE_RUNTIME = "python3.12"
LIFECYCLE_HANDLER = "index.handler"
LIFECYCLE_ARCHITECTURE = "arm64"
LIFECYCLE_MEMORY_SIZE = 128


class KiteStack(pulumi.ComponentResource):
    """
    Chat backend: two API Gateway front doors, one dispatcher Lambda, tables,
    object store and a lifecycle Lambda invoked on configuration changes.
    """

    def __init__(
        self,
        name: str,
        config: StackConfig,
        telegram_bot_token: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Declare the whole stack.

        Args:
            name: Pulumi resource name; prefixes every child resource.
            config: Validated stack configuration.
            telegram_bot_token: Bot token, ideally a secret Output.

        Outputs (set on self, registered for the component):
            environment: Dispatcher environment map (name -> value).
            ws_api_endpoint: Execution endpoint of the WebSocket stage.
            webhook_endpoint: Telegram webhook URL on the HTTP stage.
            bucket_name: Object store bucket.
            name_servers: Custom domain name servers (None without one).
            lifecycle_result: Result of the last lifecycle invocation.
        """
        opts = pulumi.ResourceOptions.merge(
            opts, pulumi.ResourceOptions(transformations=[add_tags(TAGS)])
        )
        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        def child(suffix: str) -> str:
            return f"{name}-{suffix}"

        features = resolve_features(child("domain"), config.domain_name, opts=child_opts)

        schema = DynamoDbSchema(
            ENVIRONMENT,
            point_in_time_recovery=config.point_in_time_recovery,
            prevent_destroy=config.protect_tables,
            opts=child_opts,
        )

        role = Role(
            child("lambda-execution-role"),
            for_service=LAMBDA_SERVICE_PRINCIPAL,
            opts=child_opts,
        )
        role.attach_managed_policy_arn(BASIC_EXECUTION_POLICY_ARN)
        schema.allow_all(role)

        object_store = ObjectStore(
            child(f"{ENVIRONMENT}-object-store"),
            bucket_prefix=OBJECT_STORE_PREFIX,
            opts=child_opts,
        )
        object_store.allow_read_write(role)

        principal = ApiGatewayPrincipal(child("apigateway-principal"), opts=child_opts)

        ws_api = WebsocketApi(
            child("ws-api"),
            domain=features.binding(WS_SUBDOMAIN),
            opts=child_opts,
        )
        http_api = HttpApi(
            child("http-api"),
            domain=features.binding(API_SUBDOMAIN),
            opts=child_opts,
        )

        name_servers = None
        if isinstance(features, CustomDomainEnabled):
            for api, prefix in ((ws_api, WS_SUBDOMAIN), (http_api, API_SUBDOMAIN)):
                features.zone.create_record(
                    name=features.hostname(prefix),
                    record_type="CNAME",
                    value=api.custom_domain_target,
                )
            name_servers = features.zone.name_servers

        ws_stage = ws_api.add_stage(ENVIRONMENT)
        http_stage = http_api.add_stage(ENVIRONMENT)

        environment = assemble_environment(
            environment_name=ENVIRONMENT,
            ws_api_url=ws_stage.invoke_url,
            request_api_url=http_stage.invoke_url,
            telegram_bot_token=telegram_bot_token,
            bucket_name=object_store.bucket_name,
        )

        dispatcher = Lambda(
            child("request-dispatcher"),
            role=role,
            code=pulumi.FileArchive(config.function_archive),
            handler=config.handler,
            runtime=config.runtime,
            environment=environment,
            architecture=config.architecture,
            memory_size=config.memory_size,
            timeout=DISPATCHER_TIMEOUT,
            log_retention_days=config.log_retention_days,
            opts=child_opts,
        )
        ws_stage.add_default_routes(dispatcher, principal)
        http_stage.add_handler(TELEGRAM_ROUTE, "POST", dispatcher)

        lifecycle_handler = Lambda(
            child("lifecycle-handler"),
            role=role,
            code=pulumi.FileArchive(config.lifecycle_handler_dir),
            handler=LIFECYCLE_HANDLER,
            runtime=LIFECYCLE_RUNTIME,
            environment=lifecycle_environment(environment),
            architecture=LIFECYCLE_ARCHITECTURE,
            memory_size=LIFECYCLE_MEMORY_SIZE,
            log_retention_days=config.log_retention_days,
            opts=child_opts,
        )
        lifecycle = LifecycleTrigger(
            child("lifecycle-invocation"),
            function=lifecycle_handler,
            triggers=environment,
            opts=child_opts,
        )

        self.environment = environment
        self.ws_api_endpoint: pulumi.Output[str] = ws_stage.invoke_url
        self.webhook_endpoint = environment["TELEGRAM_WEBHOOK_ENDPOINT"]
        self.bucket_name: pulumi.Output[str] = object_store.bucket_name
        self.name_servers: pulumi.Output[list[str]] | None = name_servers
        self.lifecycle_result: pulumi.Output[str] = lifecycle.result
        self.register_outputs(
            {
                "ws_api_endpoint": self.ws_api_endpoint,
                "webhook_endpoint": self.webhook_endpoint,
                "bucket_name": self.bucket_name,
                "name_servers": self.name_servers,
                "lifecycle_result": self.lifecycle_result,
            }
        )
