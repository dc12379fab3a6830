"""
Tagging aspect: one fixed label set on every resource that can carry labels.

``add_tags`` returns a Pulumi resource transformation. Attached to the root
component, Pulumi runs it once for every descendant resource: AWS resources
with a ``tags`` input and GCP resources with a ``labels`` input get the label
set merged over whatever they already declare; everything else (components,
policy attachments, record sets, ...) passes through unchanged.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

import pulumi

TAGS: dict[str, str] = {"app": "k1te-chat"}

# Input property holding labels, per provider.
LABEL_PROPERTIES: tuple[str, ...] = ("tags", "labels")


def _fields(props: Any) -> MutableMapping:
    # Generated resources hand over an input-type object, components a dict.
    if props is None:
        return {}
    return props if isinstance(props, MutableMapping) else vars(props)


def label_property(props: Any) -> str | None:
    """Name of the label input ``props`` supports, or None."""
    fields = _fields(props)
    for key in LABEL_PROPERTIES:
        if key in fields:
            return key
    return None


def add_tags(
    labels: Mapping[str, str],
) -> pulumi.ResourceTransformation:
    """Transformation adding ``labels`` to every labelable resource."""

    def transformation(
        args: pulumi.ResourceTransformationArgs,
    ) -> pulumi.ResourceTransformationResult | None:
        key = label_property(args.props)
        if key is None:
            return None
        fields = _fields(args.props)
        existing = fields[key]
        if isinstance(existing, pulumi.Output):
            fields[key] = existing.apply(lambda tags: {**(tags or {}), **labels})
        else:
            fields[key] = {**(existing or {}), **labels}
        return pulumi.ResourceTransformationResult(props=args.props, opts=args.opts)

    return transformation
