"""
Persistent-channel front door: API Gateway v2 WebSocket API.

All traffic (``$connect``, ``$disconnect`` and ``$default``) goes to one
Lambda, invoked through a dedicated API Gateway principal rather than a
resource-based permission. WebSocket stages cannot auto-deploy, so the
deployment and the stage are declared together with the default routes; the
stage's execution endpoint is known up front and handed to the Lambda
environment before the routes exist.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import execution_endpoint
from components.features import DomainBinding
from components.front_door import FrontDoor
from components.iam import ApiGatewayPrincipal
from components.lambda_function import Lambda

ID = "kite:aws:WebsocketApi"
STAGE_ID = "kite:aws:WebsocketStage"

DEFAULT_ROUTES: tuple[str, ...] = ("$connect", "$disconnect", "$default")


class WebsocketApi(FrontDoor):
    """WebSocket API with an optional custom domain (``ws.<domain>``)."""

    def __init__(
        self,
        name: str,
        domain: DomainBinding | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(
            ID,
            name,
            "WEBSOCKET",
            domain=domain,
            opts=opts,
            route_selection_expression="$request.body.action",
        )

    def add_stage(self, stage: str) -> "WebsocketStage":
        return WebsocketStage(
            name=f"{self._name}-{stage}",
            api=self,
            stage=stage,
            opts=pulumi.ResourceOptions(parent=self),
        )


class WebsocketStage(pulumi.ComponentResource):
    """
    Named stage of a WebsocketApi.

    Nothing is deployed until ``add_default_routes`` runs: ``invoke_url`` is
    known from construction, but the stage only serves traffic once that call
    has declared the deployment and the Stage resource.

    Resources (declared by ``add_default_routes``): Integration, one Route per
    default route key, Deployment, Stage, optional ApiMapping.
    """

    def __init__(
        self,
        name: str,
        api: WebsocketApi,
        stage: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(STAGE_ID, name, None, opts)

        self._name = name
        self._api = api
        self._stage_name = stage
        self.stage: aws.apigatewayv2.Stage | None = None

        # https:// form, as the connection management API expects it.
        self.invoke_url: pulumi.Output[str] = api.stage_url(
            api.api_endpoint.apply(lambda endpoint: execution_endpoint(endpoint, stage))
        )
        self.register_outputs({"invoke_url": self.invoke_url})

    def add_default_routes(
        self,
        handler: Lambda,
        principal: ApiGatewayPrincipal,
    ) -> aws.apigatewayv2.Stage:
        """
        Route every WebSocket event to ``handler`` and deploy the stage.

        Args:
            handler: Lambda receiving connect, disconnect and message events.
            principal: Role API Gateway assumes to invoke ``handler``; it is
                granted lambda:InvokeFunction on it here.

        Raises:
            RuntimeError: If the default routes were already registered.
        """
        if self.stage is not None:
            raise RuntimeError(f"default routes of {self._name} are already registered")

        api_id = self._api.api.id
        child_opts = pulumi.ResourceOptions(parent=self)

        principal.allow_invoke(self._name, handler.arn)
        integration = aws.apigatewayv2.Integration(
            resource_name=self._name,
            api_id=api_id,
            integration_type="AWS_PROXY",
            integration_method="POST",
            integration_uri=handler.invoke_arn,
            credentials_arn=principal.arn,
            opts=child_opts,
        )
        target = integration.id.apply(lambda id: f"integrations/{id}")
        routes = [
            aws.apigatewayv2.Route(
                resource_name=f"{self._name}-{route_key.lstrip('$')}",
                api_id=api_id,
                route_key=route_key,
                target=target,
                opts=child_opts,
            )
            for route_key in DEFAULT_ROUTES
        ]

        # Redeploy whenever a route is replaced.
        deployment = aws.apigatewayv2.Deployment(
            resource_name=self._name,
            api_id=api_id,
            triggers={
                "routes": pulumi.Output.all(*[route.id for route in routes]).apply(
                    lambda ids: ",".join(ids)
                )
            },
            opts=pulumi.ResourceOptions(parent=self, depends_on=routes),
        )
        self.stage = aws.apigatewayv2.Stage(
            resource_name=self._name,
            api_id=api_id,
            name=self._stage_name,
            deployment_id=deployment.id,
            opts=child_opts,
        )
        self._api.map_stage(self.stage, parent=self)
        return self.stage
