"""
AWS ACM certificate for the custom domain, validated through Cloud DNS.

One wildcard certificate (``*.<domain>``) covers both front doors
(``ws.<domain>`` and ``api.<domain>``). Validation is DNS-based: the record
ACM asks for is written into the stack's DnsZone, and
``certificate_arn`` is taken from the CertificateValidation resource so that
anything binding to it waits until the certificate is actually issued.
"""

import pulumi
import pulumi_aws as aws

from components.dns import DnsZone

ID = "kite:aws:TlsCertificate"


class TlsCertificate(pulumi.ComponentResource):
    """
    Wildcard ACM certificate with DNS validation in a DnsZone.

    Resources: Certificate, validation RecordSet (in the zone),
    CertificateValidation.
    """

    def __init__(
        self,
        name: str,
        zone: DnsZone,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__(ID, name, None, opts)

        certificate = aws.acm.Certificate(
            resource_name=name,
            domain_name=f"*.{zone.domain_name}",
            validation_method="DNS",
            opts=pulumi.ResourceOptions(parent=self),
        )

        # A wildcard certificate has a single validation option.
        option = certificate.domain_validation_options.apply(lambda options: options[0])
        record = zone.create_record(
            name=f"{name}-validation",
            record_type="CNAME",
            value=option.apply(lambda o: o.resource_record_value),
            record_name=option.apply(lambda o: o.resource_record_name),
        )

        validation = aws.acm.CertificateValidation(
            resource_name=f"{name}-validation",
            certificate_arn=certificate.arn,
            validation_record_fqdns=[record.name],
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.certificate_arn: pulumi.Output[str] = validation.certificate_arn
        self.register_outputs({"certificate_arn": self.certificate_arn})
