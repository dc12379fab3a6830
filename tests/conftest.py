"""Pulumi mocks recording every resource registration."""

import pulumi
import pytest

REGION = "eu-central-1"
ACCOUNT = "123456789012"


class RecordingMocks(pulumi.runtime.Mocks):
    """
    Answers resource registrations with plausible provider outputs and keeps
    (type, name, inputs) of each one for assertions.
    """

    def __init__(self):
        self.resources: list[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)
        name = args.name

        if args.typ == "aws:lambda/function:Function":
            arn = f"arn:aws:lambda:{REGION}:{ACCOUNT}:function:{name}"
            outputs.update(
                name=name,
                arn=arn,
                invokeArn=f"arn:aws:apigateway:{REGION}:lambda:path/2015-03-31/functions/{arn}/invocations",
            )
        elif args.typ == "aws:apigatewayv2/api:Api":
            scheme = "wss" if args.inputs.get("protocolType") == "WEBSOCKET" else "https"
            outputs.update(
                apiEndpoint=f"{scheme}://{name}.execute-api.{REGION}.amazonaws.com",
                executionArn=f"arn:aws:execute-api:{REGION}:{ACCOUNT}:{name}",
            )
        elif args.typ == "aws:apigatewayv2/stage:Stage":
            outputs.update(
                invokeUrl=f"https://{args.inputs['apiId']}.execute-api.{REGION}.amazonaws.com/{args.inputs['name']}"
            )
        elif args.typ == "aws:apigatewayv2/domainName:DomainName":
            configuration = dict(args.inputs.get("domainNameConfiguration") or {})
            configuration.update(
                targetDomainName=f"d-{name}.execute-api.{REGION}.amazonaws.com",
                hostedZoneId="Z2FDTNDATAQYW2",
            )
            outputs.update(domainNameConfiguration=configuration)
        elif args.typ == "aws:acm/certificate:Certificate":
            domain = args.inputs["domainName"]
            outputs.update(
                arn=f"arn:aws:acm:{REGION}:{ACCOUNT}:certificate/{name}",
                domainValidationOptions=[
                    {
                        "domainName": domain,
                        "resourceRecordName": f"_x1.{domain.lstrip('*.')}.",
                        "resourceRecordType": "CNAME",
                        "resourceRecordValue": "_x2.acm-validations.aws.",
                    }
                ],
            )
        elif args.typ == "aws:s3/bucket:Bucket":
            bucket = f"{args.inputs.get('bucketPrefix', name)}0001"
            outputs.update(bucket=bucket, arn=f"arn:aws:s3:::{bucket}")
        elif args.typ == "aws:dynamodb/table:Table":
            outputs.update(arn=f"arn:aws:dynamodb:{REGION}:{ACCOUNT}:table/{args.inputs['name']}")
        elif args.typ == "aws:iam/role:Role":
            outputs.update(name=name, arn=f"arn:aws:iam::{ACCOUNT}:role/{name}")
        elif args.typ == "aws:cloudwatch/logGroup:LogGroup":
            outputs.update(name=f"/aws/lambda/{name}")
        elif args.typ == "aws:lambda/invocation:Invocation":
            outputs.update(result=f'{{"invoked": "{args.inputs["functionName"]}"}}')
        elif args.typ == "gcp:dns/managedZone:ManagedZone":
            outputs.update(nameServers=["ns-cloud-a1.googledomains.com."])

        return [f"{name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ == typ]

    def named(self, typ: str, name: str) -> pulumi.runtime.MockResourceArgs:
        (match,) = [r for r in self.of_type(typ) if r.name == name]
        return match


@pytest.fixture
def mocks() -> RecordingMocks:
    recording = RecordingMocks()
    pulumi.runtime.set_mocks(recording, preview=False)
    return recording


def run_program(build):
    """
    Run ``build`` as a Pulumi program under the mocks.

    Returns once every resource registration has completed, so the recorded
    inputs are final.
    """

    @pulumi.runtime.test
    def program():
        return build()

    program()
