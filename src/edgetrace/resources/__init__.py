# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Node and zone detection using official OTel resource detectors.

Every proxy span carries ``node_id`` and ``zone`` tags.  When they are not
configured explicitly, they are derived from resource attributes reported by
whichever detector packages are installed::

    pip install edgetrace[aws]       # AWS EC2/ECS/EKS
    pip install edgetrace[gcp]       # GCE/GKE/Cloud Run

``OTEL_RESOURCE_ATTRIBUTES`` (``host.name=...,cloud.availability_zone=...``)
is always honoured.
"""

from __future__ import annotations

import importlib
import logging
import socket
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# (module_path, class_name) — tried in order.
_DETECTOR_REGISTRY: List[Tuple[str, str]] = [
    # Built-in (opentelemetry-sdk — always available)
    ("opentelemetry.sdk.resources", "OTELResourceDetector"),
    # opentelemetry-resource-detector-aws
    ("opentelemetry.resource.detector.aws.ec2", "AwsEc2ResourceDetector"),
    ("opentelemetry.resource.detector.aws.ecs", "AwsEcsResourceDetector"),
    ("opentelemetry.resource.detector.aws.eks", "AwsEksResourceDetector"),
    # opentelemetry-resource-detector-gcp
    ("opentelemetry.resource.detector.gcp", "GoogleCloudResourceDetector"),
    # opentelemetry-resource-detector-azure
    ("opentelemetry.resource.detector.azure.vm", "AzureVMResourceDetector"),
]

_NODE_ATTRIBUTES = ("k8s.pod.name", "host.name", "host.id")
_ZONE_ATTRIBUTES = ("cloud.availability_zone", "cloud.region")


def collect_detectors() -> list:
    """Return instances of all importable OTel resource detectors.

    Missing packages are silently skipped.
    """
    detectors: list = []
    for module_path, class_name in _DETECTOR_REGISTRY:
        try:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, class_name)
            detectors.append(cls())
        except (ImportError, AttributeError):
            pass

    if detectors:
        names = [type(d).__name__ for d in detectors]
        logger.debug("Available resource detectors: %s", names)

    return detectors


def detect_resource_attrs() -> Dict[str, Any]:
    """Detect environment attributes using available OTel detectors."""
    attrs: Dict[str, Any] = {}
    for detector in collect_detectors():
        try:
            resource = detector.detect()
            attrs.update(dict(resource.attributes))
        except Exception:
            # Community detectors may raise on network timeouts or missing
            # metadata endpoints.  Never let detection break SDK init.
            logger.debug("Resource detector %s failed", type(detector).__name__, exc_info=True)
    return attrs


def _first(attrs: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = attrs.get(key)
        if value:
            return str(value)
    return None


def resolve_node_and_zone(
    node_name: Optional[str],
    zone_name: Optional[str],
    auto_detect: bool = True,
) -> Tuple[str, str]:
    """Fill in whichever of *node_name* / *zone_name* is missing.

    The node falls back to the local hostname and the zone to ``""``.
    """
    if node_name and zone_name:
        return node_name, zone_name

    attrs = detect_resource_attrs() if auto_detect else {}
    node = node_name or _first(attrs, _NODE_ATTRIBUTES) or socket.gethostname()
    zone = zone_name or _first(attrs, _ZONE_ATTRIBUTES) or ""
    return node, zone


__all__ = ["collect_detectors", "detect_resource_attrs", "resolve_node_and_zone"]
