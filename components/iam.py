"""
IAM roles: the Lambda execution identity and the API Gateway invocation principal.

A ``Role`` is created for one service principal and then collects permissions
pushed to it: managed policies via ``attach_managed_policy_arn`` and inline
policies via ``add_policy``. Stores grant access by calling ``add_policy`` on
the role they are given, so a role always exists before anything is granted
to it.
"""

import json

import pulumi
import pulumi_aws as aws

from components._helpers import policy_name_from_arn

ID = "kite:aws:Role"

LAMBDA_SERVICE_PRINCIPAL = "lambda.amazonaws.com"
APIGATEWAY_SERVICE_PRINCIPAL = "apigateway.amazonaws.com"
BASIC_EXECUTION_POLICY_ARN = (
    "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
)


def assume_role_policy(service: str) -> str:
    """Trust policy allowing ``service`` to assume the role."""
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"Service": service},
                    "Action": "sts:AssumeRole",
                }
            ],
        }
    )


def policy_document(statements: list[dict]) -> str:
    return json.dumps({"Version": "2012-10-17", "Statement": statements})


class Role(pulumi.ComponentResource):
    """
    IAM role trusted by one AWS service.

    Resources: Role, plus one RolePolicyAttachment or RolePolicy per grant.
    """

    def __init__(
        self,
        name: str,
        for_service: str,
        opts: pulumi.ResourceOptions | None = None,
        component_type: str = ID,
    ):
        """
        Create the role.

        Args:
            name: Pulumi resource name for the role and its policies.
            for_service: Service principal in the trust policy, e.g.
                LAMBDA_SERVICE_PRINCIPAL.

        Outputs (set on self, registered for the component):
            name: Role name (for policy attachments).
            arn: Role ARN (for Lambda functions and API integrations).
        """
        super().__init__(component_type, name, None, opts)

        self._name = name
        self.role = aws.iam.Role(
            resource_name=name,
            assume_role_policy=assume_role_policy(for_service),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.name: pulumi.Output[str] = self.role.name
        self.arn: pulumi.Output[str] = self.role.arn
        self.register_outputs({"name": self.name, "arn": self.arn})

    def attach_managed_policy_arn(self, policy_arn: str) -> aws.iam.RolePolicyAttachment:
        return aws.iam.RolePolicyAttachment(
            resource_name=f"{self._name}-{policy_name_from_arn(policy_arn)}",
            role=self.role.name,
            policy_arn=policy_arn,
            opts=pulumi.ResourceOptions(parent=self),
        )

    def add_policy(
        self,
        name: str,
        statements: pulumi.Input[list[dict]],
    ) -> aws.iam.RolePolicy:
        """
        Attach an inline policy built from IAM statements.

        ``statements`` may contain Outputs (e.g. resource ARNs); the document
        is rendered once they resolve.
        """
        return aws.iam.RolePolicy(
            resource_name=f"{self._name}-{name}",
            role=self.role.id,
            policy=pulumi.Output.from_input(statements).apply(policy_document),
            opts=pulumi.ResourceOptions(parent=self),
        )


class ApiGatewayPrincipal(Role):
    """
    Role API Gateway assumes to invoke Lambda integrations.

    WebSocket integrations pass this role as their credentials instead of
    relying on a resource-based Lambda permission.
    """

    def __init__(
        self,
        name: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(
            name,
            for_service=APIGATEWAY_SERVICE_PRINCIPAL,
            opts=opts,
            component_type="kite:aws:ApiGatewayPrincipal",
        )

    def allow_invoke(self, name: str, function_arn: pulumi.Input[str]) -> aws.iam.RolePolicy:
        return self.add_policy(
            f"invoke-{name}",
            [
                {
                    "Effect": "Allow",
                    "Action": "lambda:InvokeFunction",
                    "Resource": function_arn,
                }
            ],
        )
