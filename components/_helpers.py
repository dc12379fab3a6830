"""
Pure helpers for DNS, endpoints and fingerprints. Testable without Pulumi runtime.

Used by the DNS component (ensure_trailing_dot, cname_rrdata), the feature
resolver (subdomain, built on fqdn), the front doors (execution_endpoint), the
environment assembler (webhook_endpoint, environment_fingerprint) and the IAM
component (policy_name_from_arn). No Pulumi types; all functions accept and
return plain Python types so they can be unit-tested without a Pulumi stack.
"""

import hashlib
import json
from collections.abc import Mapping


def ensure_trailing_dot(
    domain: str,
) -> str:
    """
    Return domain with a single trailing dot for DNS FQDN.

    Cloud DNS (and many DNS APIs) expect zone and record names with a trailing
    dot when they are fully qualified. Idempotent if already present.
    """
    return domain if domain.endswith(".") else f"{domain}."


def fqdn(
    domain: str,
    subdomain: str,
) -> str:
    """
    Build FQDN like 'ws.example.com.' from domain and subdomain.

    Args:
        domain: Base domain (e.g. "example.com"); trailing dot is ensured.
        subdomain: Leading label (e.g. "ws", "api").

    Returns:
        FQDN with trailing dot (e.g. "ws.example.com.").
    """
    base = ensure_trailing_dot(domain)
    return f"{subdomain}.{base}" if not base.startswith(f"{subdomain}.") else base


def subdomain(
    domain: str,
    prefix: str,
) -> str:
    """Hostname without trailing dot, as API Gateway custom domains expect it."""
    return fqdn(domain, prefix).rstrip(".")


def cname_rrdata(
    target: str,
) -> list[str]:
    """
    Return CNAME rrdatas list (single target with trailing dot).

    GCP Cloud DNS RecordSet.rrdatas expects a list of strings; CNAME has
    one target. Target is normalized with a trailing dot.
    """
    return [target if target.endswith(".") else f"{target}."]


def webhook_endpoint(
    stage_url: str,
    route: str,
) -> str:
    """
    Public URL of a request API route.

    Plain concatenation of the stage invoke URL and the route path, so the
    webhook can never drift from the route actually registered on the stage.
    """
    return f"{stage_url}{route}"


def execution_endpoint(
    api_endpoint: str,
    stage: str,
) -> str:
    """
    HTTPS execution endpoint of a WebSocket API stage.

    API Gateway reports WebSocket endpoints as ``wss://``; the connection
    management API is served over ``https://`` on the same host and stage.
    """
    if api_endpoint.startswith("wss://"):
        api_endpoint = "https://" + api_endpoint[len("wss://") :]
    return f"{api_endpoint.rstrip('/')}/{stage}"


def environment_fingerprint(
    environment: Mapping[str, str],
) -> str:
    """
    Deterministic digest of an ordered environment map.

    The digest covers keys, values and their order: the same map always
    yields the same hex string, and changing any single value changes it.
    """
    payload = json.dumps(list(environment.items()), separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def policy_name_from_arn(
    policy_arn: str,
) -> str:
    """Last path segment of an IAM policy ARN, usable in resource names."""
    return policy_arn.rsplit("/", 1)[-1]
