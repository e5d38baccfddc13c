# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for node / zone resolution."""

from __future__ import annotations

import os
import socket
from unittest import mock

from edgetrace import resources
from edgetrace.resources import collect_detectors, detect_resource_attrs, resolve_node_and_zone


class TestCollectDetectors:
    def test_builtin_detector_available(self):
        names = [type(d).__name__ for d in collect_detectors()]
        assert "OTELResourceDetector" in names

    def test_missing_packages_skipped(self):
        with mock.patch.object(resources, "_DETECTOR_REGISTRY", [("no.such.module", "Nope")]):
            assert collect_detectors() == []


class TestDetectResourceAttrs:
    def test_reads_otel_resource_attributes(self):
        env = {"OTEL_RESOURCE_ATTRIBUTES": "host.name=h-1,cloud.availability_zone=z-1"}
        with mock.patch.dict(os.environ, env):
            attrs = detect_resource_attrs()
        assert attrs["host.name"] == "h-1"
        assert attrs["cloud.availability_zone"] == "z-1"

    def test_failing_detector_ignored(self):
        broken = mock.MagicMock()
        broken.detect.side_effect = RuntimeError("metadata endpoint down")
        with mock.patch.object(resources, "collect_detectors", return_value=[broken]):
            assert detect_resource_attrs() == {}


class TestResolveNodeAndZone:
    def test_configured_values_skip_detection(self):
        with mock.patch.object(resources, "detect_resource_attrs") as detect:
            assert resolve_node_and_zone("n", "z") == ("n", "z")
        detect.assert_not_called()

    def test_prefers_pod_name_over_host(self):
        attrs = {"k8s.pod.name": "pod-1", "host.name": "host-1", "cloud.region": "us-east-1"}
        with mock.patch.object(resources, "detect_resource_attrs", return_value=attrs):
            assert resolve_node_and_zone(None, None) == ("pod-1", "us-east-1")

    def test_falls_back_to_hostname_and_empty_zone(self):
        with mock.patch.object(resources, "detect_resource_attrs", return_value={}):
            assert resolve_node_and_zone(None, None) == (socket.gethostname(), "")

    def test_auto_detect_disabled(self):
        with mock.patch.object(resources, "detect_resource_attrs") as detect:
            node, zone = resolve_node_and_zone(None, "z", auto_detect=False)
        detect.assert_not_called()
        assert node == socket.gethostname()
        assert zone == "z"
