"""
Durable state: DynamoDB tables and a private S3 object store.

``DynamoDbSchema`` declares the chat tables for one environment
(``<env>.Channels`` and ``<env>.Messages``); the application derives the same
names from SERVERLESS_ENVIRONMENT. ``ObjectStore`` creates a bucket that is
never publicly readable. Both push permissions onto a role they are handed
(``allow_all`` / ``allow_read_write``); neither looks a role up by itself.
"""

import pulumi
import pulumi_aws as aws

from components.iam import Role

SCHEMA_ID: str = "kite:aws:DynamoDbSchema"
OBJECT_STORE_ID: str = "kite:aws:ObjectStore"

CHANNELS_TABLE = "Channels"
MESSAGES_TABLE = "Messages"
MESSAGES_TIME_INDEX = "MessageTime"

# Applied to every object store bucket. Used by tests and callers to assert
# on secure defaults.
S3_BLOCK_PUBLIC_ACCESS: dict[str, bool] = {
    "block_public_acls": True,
    "block_public_policy": True,
    "ignore_public_acls": True,
    "restrict_public_buckets": True,
}


def table_name(environment: str, table: str) -> str:
    return f"{environment}.{table}"


class DynamoDbSchema(pulumi.ComponentResource):
    """
    Channels and Messages tables, billed per request.

    Messages are keyed by ``id`` (channel + member) and ``messageId``, with a
    local secondary index on ``time`` for history queries.
    """

    def __init__(
        self,
        name: str,
        point_in_time_recovery: bool = False,
        prevent_destroy: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the tables.

        Args:
            name: Environment name; prefixes the table names (e.g. "prod").
            point_in_time_recovery: Enable continuous backups on both tables.
            prevent_destroy: Protect the tables so `pulumi destroy` refuses
                to delete them.
        """
        super().__init__(SCHEMA_ID, name, None, opts)

        table_opts = pulumi.ResourceOptions(parent=self, protect=prevent_destroy)
        recovery = aws.dynamodb.TablePointInTimeRecoveryArgs(
            enabled=point_in_time_recovery,
        )

        self.channels = aws.dynamodb.Table(
            resource_name=f"{name}-channels",
            name=table_name(name, CHANNELS_TABLE),
            billing_mode="PAY_PER_REQUEST",
            hash_key="id",
            attributes=[aws.dynamodb.TableAttributeArgs(name="id", type="S")],
            point_in_time_recovery=recovery,
            opts=table_opts,
        )

        self.messages = aws.dynamodb.Table(
            resource_name=f"{name}-messages",
            name=table_name(name, MESSAGES_TABLE),
            billing_mode="PAY_PER_REQUEST",
            hash_key="id",
            range_key="messageId",
            attributes=[
                aws.dynamodb.TableAttributeArgs(name="id", type="S"),
                aws.dynamodb.TableAttributeArgs(name="messageId", type="S"),
                aws.dynamodb.TableAttributeArgs(name="time", type="S"),
            ],
            local_secondary_indexes=[
                aws.dynamodb.TableLocalSecondaryIndexArgs(
                    name=MESSAGES_TIME_INDEX,
                    range_key="time",
                    projection_type="ALL",
                )
            ],
            point_in_time_recovery=recovery,
            opts=table_opts,
        )

        self._name = name
        self.table_arns: list[pulumi.Output[str]] = [self.channels.arn, self.messages.arn]
        self.register_outputs(
            {
                "channels_table": self.channels.name,
                "messages_table": self.messages.name,
            }
        )

    def allow_all(self, role: Role) -> aws.iam.RolePolicy:
        """Grant ``role`` every DynamoDB action on the tables and their indexes."""
        resources = []
        for arn in self.table_arns:
            resources.append(arn)
            resources.append(pulumi.Output.concat(arn, "/index/*"))
        return role.add_policy(
            f"{self._name}-dynamodb",
            [{"Effect": "Allow", "Action": "dynamodb:*", "Resource": resources}],
        )


class ObjectStore(pulumi.ComponentResource):
    """
    Private S3 bucket with Block Public Access.

    Resources: Bucket, BucketPublicAccessBlock.
    """

    def __init__(
        self,
        name: str,
        bucket_prefix: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the bucket.

        Args:
            name: Pulumi resource name for the bucket and related resources.
            bucket_prefix: Prefix of the generated, globally unique bucket
                name.

        Outputs (set on self, registered for the component):
            bucket_name: Generated bucket name (exposed to the Lambda as
                BUCKET_NAME).
        """
        super().__init__(OBJECT_STORE_ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.bucket = aws.s3.Bucket(
            resource_name=name,
            bucket_prefix=bucket_prefix,
            opts=child_opts,
        )

        # Objects are only reachable through the execution role.
        aws.s3.BucketPublicAccessBlock(
            resource_name=f"{name}-block-public",
            bucket=self.bucket.id,
            opts=child_opts,
            **S3_BLOCK_PUBLIC_ACCESS,
        )

        self._name = name
        self.bucket_name: pulumi.Output[str] = self.bucket.bucket
        self.register_outputs({"bucket_name": self.bucket_name})

    def allow_read_write(self, role: Role) -> aws.iam.RolePolicy:
        """Grant ``role`` object read/write/delete and listing on the bucket."""
        return role.add_policy(
            f"{self._name}-s3",
            [
                {
                    "Effect": "Allow",
                    "Action": ["s3:ListBucket"],
                    "Resource": self.bucket.arn,
                },
                {
                    "Effect": "Allow",
                    "Action": ["s3:GetObject", "s3:PutObject", "s3:DeleteObject"],
                    "Resource": pulumi.Output.concat(self.bucket.arn, "/*"),
                },
            ],
        )
