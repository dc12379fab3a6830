"""
Request/response front door: API Gateway v2 HTTP API.

Routes are registered one method + path at a time on the stage
(``add_handler``), each proxied to a Lambda through an AWS_PROXY integration
and a resource-based Lambda permission. The stage auto-deploys, so routes
added after it still reach the live stage.
"""

import pulumi
import pulumi_aws as aws

from components.features import DomainBinding
from components.front_door import FrontDoor
from components.lambda_function import Lambda

ID = "kite:aws:HttpApi"
STAGE_ID = "kite:aws:HttpStage"


class HttpApi(FrontDoor):
    """HTTP API with an optional custom domain (``api.<domain>``)."""

    def __init__(
        self,
        name: str,
        domain: DomainBinding | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(ID, name, "HTTP", domain=domain, opts=opts)

    def add_stage(self, stage: str) -> "HttpStage":
        return HttpStage(
            name=f"{self._name}-{stage}",
            api=self,
            stage=stage,
            opts=pulumi.ResourceOptions(parent=self),
        )


class HttpStage(pulumi.ComponentResource):
    """
    Auto-deployed stage of an HttpApi.

    Resources: Stage, optional ApiMapping; Integration, Route and Permission
    per handler.
    """

    def __init__(
        self,
        name: str,
        api: HttpApi,
        stage: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(STAGE_ID, name, None, opts)

        self._name = name
        self._api = api
        self.stage = aws.apigatewayv2.Stage(
            resource_name=name,
            api_id=api.api.id,
            name=stage,
            auto_deploy=True,
            opts=pulumi.ResourceOptions(parent=self),
        )
        api.map_stage(self.stage, parent=self)

        self.invoke_url: pulumi.Output[str] = api.stage_url(self.stage.invoke_url)
        self.register_outputs({"invoke_url": self.invoke_url})

    def add_handler(
        self,
        path: str,
        method: str,
        handler: Lambda,
    ) -> aws.apigatewayv2.Route:
        """
        Route ``method path`` on this stage to ``handler``.

        Args:
            path: Route path, e.g. "/tg".
            method: HTTP method, e.g. "POST".
            handler: Lambda receiving the proxied requests.
        """
        route_name = f"{self._name}-{method.lower()}{path.replace('/', '-')}"
        child_opts = pulumi.ResourceOptions(parent=self)

        integration = aws.apigatewayv2.Integration(
            resource_name=route_name,
            api_id=self._api.api.id,
            integration_type="AWS_PROXY",
            integration_method="POST",
            integration_uri=handler.invoke_arn,
            payload_format_version="2.0",
            opts=child_opts,
        )
        route = aws.apigatewayv2.Route(
            resource_name=route_name,
            api_id=self._api.api.id,
            route_key=f"{method} {path}",
            target=integration.id.apply(lambda id: f"integrations/{id}"),
            opts=child_opts,
        )
        aws.lambda_.Permission(
            resource_name=route_name,
            action="lambda:InvokeFunction",
            function=handler.function_name,
            principal="apigateway.amazonaws.com",
            source_arn=self._api.api.execution_arn.apply(
                lambda arn: f"{arn}/*/{method}{path}"
            ),
            opts=child_opts,
        )
        return route
