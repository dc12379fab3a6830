"""
AWS Lambda function with its own CloudWatch log group.

The execution role is passed in, never created here: several functions share
one role, and the role must already carry its grants. The environment map is
injected as-is, preserving key order.
"""

from collections.abc import Mapping

import pulumi
import pulumi_aws as aws

from components.iam import Role

ID = "kite:aws:Lambda"


class Lambda(pulumi.ComponentResource):
    """
    Lambda function plus log group.

    Resources: LogGroup, Function.
    """

    def __init__(
        self,
        name: str,
        role: Role,
        code: pulumi.Archive,
        handler: str,
        runtime: str,
        environment: Mapping[str, pulumi.Input[str]],
        architecture: str = "x86_64",
        memory_size: int = 128,
        timeout: int = 10,
        log_retention_days: int = 14,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the log group and the function.

        Args:
            name: Pulumi resource name for the function and its log group.
            role: Shared execution role.
            code: Deployment package (e.g. pulumi.FileArchive).
            handler: Entry point inside the package.
            runtime: Lambda runtime identifier.
            environment: Environment variables, in injection order.
            architecture: "x86_64" or "arm64".
            memory_size: Memory in MB.
            timeout: Execution timeout in seconds.
            log_retention_days: Retention of the function's log group.

        Outputs (set on self, registered for the component):
            function_name: Deployed function name.
            arn: Function ARN.
            invoke_arn: ARN used by API Gateway integrations.
        """
        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        log_group = aws.cloudwatch.LogGroup(
            resource_name=name,
            retention_in_days=log_retention_days,
            opts=child_opts,
        )

        self.function = aws.lambda_.Function(
            resource_name=name,
            role=role.arn,
            code=code,
            handler=handler,
            runtime=runtime,
            architectures=[architecture],
            memory_size=memory_size,
            timeout=timeout,
            environment=aws.lambda_.FunctionEnvironmentArgs(variables=dict(environment)),
            logging_config=aws.lambda_.FunctionLoggingConfigArgs(
                log_format="Text",
                log_group=log_group.name,
            ),
            opts=child_opts,
        )

        self.function_name: pulumi.Output[str] = self.function.name
        self.arn: pulumi.Output[str] = self.function.arn
        self.invoke_arn: pulumi.Output[str] = self.function.invoke_arn
        self.register_outputs(
            {
                "function_name": self.function_name,
                "arn": self.arn,
                "invoke_arn": self.invoke_arn,
            }
        )
