"""
Optional features of the stack, decided once from configuration.

``resolve_features`` turns the configured domain name into a FeatureDecision:
either ``CustomDomainDisabled`` or ``CustomDomainEnabled`` carrying the DNS
zone and the validated certificate. Components downstream never look at the
raw domain name; they ask the decision for a ``DomainBinding`` per front door
and get ``None`` when the custom domain is off.
"""

from dataclasses import dataclass

import pulumi

from components._helpers import subdomain
from components.certificate import TlsCertificate
from components.dns import DnsZone

WS_SUBDOMAIN = "ws"
API_SUBDOMAIN = "api"


@dataclass(frozen=True)
class DomainBinding:
    """Custom hostname and certificate a front door binds to."""

    hostname: str
    certificate_arn: pulumi.Output[str]


@dataclass(frozen=True)
class CustomDomainDisabled:
    """No custom domain: front doors only serve their generated endpoints."""

    def binding(self, prefix: str) -> None:
        return None


@dataclass(frozen=True)
class CustomDomainEnabled:
    """Custom domain with its DNS zone and validated wildcard certificate."""

    domain_name: str
    zone: DnsZone
    certificate: TlsCertificate

    def hostname(self, prefix: str) -> str:
        return subdomain(self.domain_name, prefix)

    def binding(self, prefix: str) -> DomainBinding:
        return DomainBinding(
            hostname=self.hostname(prefix),
            certificate_arn=self.certificate.certificate_arn,
        )


FeatureDecision = CustomDomainDisabled | CustomDomainEnabled


def resolve_features(
    name: str,
    domain_name: str | None,
    opts: pulumi.ResourceOptions | None = None,
) -> FeatureDecision:
    """
    Decide which optional subsystems are active.

    With no domain name nothing is declared. Otherwise the DNS zone and the
    certificate are created here, before any front door exists, so every
    binding handed out already refers to a certificate.
    """
    if domain_name is None:
        pulumi.log.info("custom domain disabled: no DNS zone, certificate or domain bindings")
        return CustomDomainDisabled()

    pulumi.log.info(
        f"custom domain enabled: {subdomain(domain_name, WS_SUBDOMAIN)}, "
        f"{subdomain(domain_name, API_SUBDOMAIN)}"
    )
    zone = DnsZone(name=f"{name}-dns", domain_name=domain_name, opts=opts)
    certificate = TlsCertificate(name=f"{name}-cert", zone=zone, opts=opts)
    return CustomDomainEnabled(domain_name=domain_name, zone=zone, certificate=certificate)
