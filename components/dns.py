"""
GCP Cloud DNS: managed zone for the stack's custom domain.

This component creates a Cloud DNS managed zone for a given domain and lets
other components add records to it. It is wired with outputs from other
components: the TLS certificate adds its validation record, and each front
door with a custom domain adds a CNAME pointing its hostname at the
API Gateway target domain (an ``Output[str]`` known only after apply).

After deployment, the domain must be delegated at the registrar to the zone's
name servers (exposed as ``name_servers``).
"""

import pulumi
import pulumi_gcp as gcp

from components._helpers import cname_rrdata, ensure_trailing_dot

ID = "kite:gcp:DnsZone"

# Record target or name may be known now (str) or only after another resource
# is created (pulumi.Output[str]), e.g. an API Gateway target domain or an ACM
# validation record name. Both are normalized with pulumi.Output.from_input().
DnsTarget = str | pulumi.Output[str]


class DnsZone(pulumi.ComponentResource):
    """
    Cloud DNS managed zone; records are added with ``create_record``.
    """

    def __init__(
        self,
        name: str,
        domain_name: str,
        ttl: int = 300,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the managed zone.

        Args:
            name: Pulumi resource name (used for zone and record naming).
            domain_name: Domain for the zone (e.g. "example.com"). Used as-is;
                trailing dot is added for the zone FQDN.
            ttl: TTL in seconds for records created in this zone.

        Outputs (set on self, registered for the component):
            name_servers: Zone name servers; delegate the domain to these at
                the registrar.
        """
        super().__init__(ID, name, None, opts)

        self._name = name
        self._ttl = ttl
        self.domain_name = domain_name

        # Cloud DNS zone names allow only lowercase letters, digits and dashes.
        zone_name = f"{name}-zone".replace(".", "-").lower()
        self.zone = gcp.dns.ManagedZone(
            resource_name=f"{name}-zone",
            name=zone_name,
            dns_name=ensure_trailing_dot(domain_name),
            description=f"Managed zone for {domain_name}",
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Caller must delegate the domain at the registrar to these name servers.
        self.name_servers: pulumi.Output[list[str]] = self.zone.name_servers
        self.register_outputs({"name_servers": self.name_servers})

    def create_record(
        self,
        name: str,
        record_type: str,
        value: DnsTarget,
        record_name: DnsTarget | None = None,
    ) -> gcp.dns.RecordSet:
        """
        Add a record set to the zone.

        Args:
            name: Hostname of the record (e.g. "ws.example.com"), or a logical
                name when ``record_name`` is given. Used for the resource name.
            record_type: DNS record type, e.g. "CNAME".
            value: Record data. CNAME targets get a trailing dot.
            record_name: Record name when it differs from ``name`` or is only
                known after apply (e.g. ACM validation records).
        """
        if record_type == "CNAME":
            rrdatas = pulumi.Output.from_input(value).apply(cname_rrdata)
        else:
            rrdatas = pulumi.Output.from_input(value).apply(lambda v: [v])
        fqdn_name = pulumi.Output.from_input(
            name if record_name is None else record_name
        ).apply(ensure_trailing_dot)
        return gcp.dns.RecordSet(
            resource_name=f"{self._name}-{name}-{record_type.lower()}",
            name=fqdn_name,
            managed_zone=self.zone.name,
            type=record_type,
            ttl=self._ttl,
            rrdatas=rrdatas,
            opts=pulumi.ResourceOptions(parent=self),
        )
