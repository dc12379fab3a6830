"""
Shared shape of the two API Gateway front doors.

A front door owns one API Gateway v2 API and, when given a DomainBinding,
a custom domain name bound to the certificate *before* any stage exists.
Subclasses add their stage type; stages map themselves onto the custom
domain and report their invoke URL through ``stage_url`` so the custom
hostname wins over the generated endpoint whenever it is configured.
"""

import pulumi
import pulumi_aws as aws

from components.features import DomainBinding


class FrontDoor(pulumi.ComponentResource):
    """
    API Gateway v2 API with an optional custom domain.

    Resources: Api, optional DomainName; ApiMapping per mapped stage.
    """

    def __init__(
        self,
        component_type: str,
        name: str,
        protocol_type: str,
        domain: DomainBinding | None = None,
        opts: pulumi.ResourceOptions | None = None,
        **api_args,
    ):
        """
        Create the API and bind the custom domain.

        Args:
            component_type: Pulumi type token of the subclass.
            name: Pulumi resource name for the API and its children.
            protocol_type: "WEBSOCKET" or "HTTP".
            domain: Hostname and certificate to bind, or None to serve on
                the generated endpoint only.
            api_args: Extra arguments for aws.apigatewayv2.Api.

        Outputs (set on self, registered for the component):
            api_endpoint: Generated endpoint of the API.
            custom_domain_target: Regional target domain the custom hostname
                must CNAME to (None without a custom domain).
        """
        super().__init__(component_type, name, None, opts)

        self._name = name
        self.domain = domain
        self.api = aws.apigatewayv2.Api(
            resource_name=name,
            protocol_type=protocol_type,
            opts=pulumi.ResourceOptions(parent=self),
            **api_args,
        )

        self.domain_name: aws.apigatewayv2.DomainName | None = None
        self.custom_domain_target: pulumi.Output[str] | None = None
        if domain is not None:
            configuration = aws.apigatewayv2.DomainNameDomainNameConfigurationArgs(
                certificate_arn=domain.certificate_arn,
                endpoint_type="REGIONAL",
                security_policy="TLS_1_2",
            )
            self.domain_name = aws.apigatewayv2.DomainName(
                resource_name=f"{name}-domain",
                domain_name=domain.hostname,
                domain_name_configuration=configuration,
                opts=pulumi.ResourceOptions(parent=self),
            )
            self.custom_domain_target = self.domain_name.domain_name_configuration.apply(
                lambda c: c.target_domain_name
            )

        self.api_endpoint: pulumi.Output[str] = self.api.api_endpoint
        self.register_outputs(
            {
                "api_endpoint": self.api_endpoint,
                "custom_domain_target": self.custom_domain_target,
            }
        )

    def stage_url(self, generated_url: pulumi.Input[str]) -> pulumi.Output[str]:
        """Invoke URL of a stage mapped at the root of the custom domain, if any."""
        if self.domain is None:
            return pulumi.Output.from_input(generated_url)
        return pulumi.Output.concat("https://", self.domain.hostname)

    def map_stage(
        self,
        stage: aws.apigatewayv2.Stage,
        parent: pulumi.Resource,
    ) -> aws.apigatewayv2.ApiMapping | None:
        """Serve ``stage`` at the root of the custom domain; no-op without one."""
        if self.domain_name is None:
            return None
        return aws.apigatewayv2.ApiMapping(
            resource_name=f"{self._name}-mapping",
            api_id=self.api.id,
            domain_name=self.domain_name.id,
            stage=stage.id,
            opts=pulumi.ResourceOptions(parent=parent),
        )
