"""
Lifecycle trigger: invoke a Lambda once per configuration change.

The invocation is an ``aws.lambda_.Invocation`` resource whose triggers hold
a fingerprint of the watched environment. Pulumi stores the triggers together
with the invocation result; a later update re-invokes the function only when
the fingerprint differs and otherwise keeps the stored result. A failed
invocation fails the update.
"""

import json
from collections.abc import Mapping

import pulumi
import pulumi_aws as aws

from components.environment import fingerprint
from components.lambda_function import Lambda

ID = "kite:aws:LifecycleTrigger"


class LifecycleTrigger(pulumi.ComponentResource):
    """
    Synchronous invocation of ``function``, keyed by an environment fingerprint.

    Resources: Invocation.
    """

    def __init__(
        self,
        name: str,
        function: Lambda,
        triggers: Mapping[str, pulumi.Input[str]],
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Declare the invocation.

        Args:
            name: Pulumi resource name.
            function: Lambda to invoke with an empty payload.
            triggers: Environment map whose changes re-run the invocation.

        Outputs (set on self, registered for the component):
            fingerprint: Digest recorded in the invocation triggers.
            result: JSON string returned by the function.
        """
        super().__init__(ID, name, None, opts)

        self.fingerprint: pulumi.Output[str] = fingerprint(triggers)

        # CRUD scope also invokes on update and destroy, with the action
        # passed under the "tf" key of the payload. A trigger change replaces
        # the invocation; the old one must be deleted (deleteWebhook) before
        # the new one is created (setWebhook).
        self.invocation = aws.lambda_.Invocation(
            resource_name=name,
            function_name=function.function_name,
            input=json.dumps({}),
            lifecycle_scope="CRUD",
            triggers={"environment": self.fingerprint},
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[function.function],
                delete_before_replace=True,
            ),
        )

        self.result: pulumi.Output[str] = self.invocation.result
        self.register_outputs({"fingerprint": self.fingerprint, "result": self.result})
