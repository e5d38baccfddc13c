# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for bootstrap — enable(), disable() and the process-wide tracer."""

from __future__ import annotations

from unittest import mock

import pytest

from edgetrace.drivers.null import NullDriver
from edgetrace.drivers.otel import OpenTelemetryDriver
from edgetrace.sdk import bootstrap
from edgetrace.sdk.config import EdgetraceConfig


@pytest.fixture(autouse=True)
def _reset_bootstrap():
    """Reset module state and keep the shared test provider alive."""
    yield
    bootstrap._initialized = False
    bootstrap._current_config = None
    bootstrap._http_tracer = None


@pytest.fixture
def patched_export():
    with mock.patch(
        "opentelemetry.exporter.otlp.proto.http.trace_exporter.OTLPSpanExporter"
    ) as exporter_cls, mock.patch("opentelemetry.sdk.trace.export.BatchSpanProcessor") as processor_cls:
        yield exporter_cls, processor_cls


def _config(**overrides) -> EdgetraceConfig:
    values = {
        "service_name": "edge-proxy",
        "node_name": "node-1",
        "zone_name": "zone-a",
        "otlp_endpoint": "http://collector:4318",
    }
    values.update(overrides)
    return EdgetraceConfig(**values)


class TestEnable:
    def test_enable_builds_tracer(self, patched_export, tracer_provider):
        exporter_cls, _ = patched_export

        assert bootstrap.enable(config=_config()) is True
        assert bootstrap.is_enabled()

        http_tracer = bootstrap.get_http_tracer()
        assert isinstance(http_tracer.driver, OpenTelemetryDriver)
        assert http_tracer.local_info.node_name == "node-1"
        assert http_tracer.local_info.zone_name == "zone-a"
        exporter_cls.assert_called_once_with(endpoint="http://collector:4318/v1/traces", headers={})

    def test_enable_twice_returns_false(self, patched_export, tracer_provider):
        assert bootstrap.enable(config=_config()) is True
        assert bootstrap.enable(config=_config()) is False

    def test_explicit_args_override_config(self, patched_export, tracer_provider):
        bootstrap.enable(config=_config(), node_name="override-node", service_name="svc")
        assert bootstrap.get_config().service_name == "svc"
        assert bootstrap.get_http_tracer().local_info.node_name == "override-node"

    def test_detects_missing_node_and_zone(self, patched_export, tracer_provider):
        with mock.patch(
            "edgetrace.resources.detect_resource_attrs",
            return_value={"host.name": "detected-host", "cloud.availability_zone": "eu-west-1b"},
        ):
            bootstrap.enable(config=_config(node_name=None, zone_name=None))

        local_info = bootstrap.get_http_tracer().local_info
        assert local_info.node_name == "detected-host"
        assert local_info.zone_name == "eu-west-1b"

    def test_failure_returns_false(self, patched_export, tracer_provider):
        exporter_cls, _ = patched_export
        exporter_cls.side_effect = RuntimeError("no exporter")

        assert bootstrap.enable(config=_config()) is False
        assert not bootstrap.is_enabled()


class TestGetHttpTracer:
    def test_null_tracer_before_enable(self):
        assert isinstance(bootstrap.get_http_tracer().driver, NullDriver)


class TestDisable:
    def test_disable_noop_when_not_enabled(self):
        bootstrap.disable()
        assert not bootstrap.is_enabled()

    def test_disable_flushes_and_resets(self, patched_export, tracer_provider):
        bootstrap.enable(config=_config())

        provider = mock.MagicMock()
        with mock.patch("opentelemetry.trace.get_tracer_provider", return_value=provider):
            bootstrap.disable()

        provider.force_flush.assert_called_once_with(timeout_millis=5000)
        provider.shutdown.assert_called_once()
        assert not bootstrap.is_enabled()
        assert bootstrap.get_config() is None
        assert isinstance(bootstrap.get_http_tracer().driver, NullDriver)
