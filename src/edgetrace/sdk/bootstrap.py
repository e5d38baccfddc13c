# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Edgetrace bootstrap — one-switch enablement of proxy tracing.

``enable()``:

1. Configures the OTel SDK with an OTLP/HTTP span exporter
2. Sets up W3C TraceContext + Baggage propagators
3. Builds the process-wide :class:`~edgetrace.sdk.tracer.HttpTracer`
   backed by :class:`~edgetrace.drivers.otel.OpenTelemetryDriver`

Usage::

    from edgetrace import enable
    enable()  # reads OTEL_SERVICE_NAME, OTEL_EXPORTER_OTLP_ENDPOINT from env
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import TYPE_CHECKING, Optional

from edgetrace.drivers.null import NullDriver
from edgetrace.sdk.tracer import HttpTracer, LocalInfo

if TYPE_CHECKING:
    from edgetrace.sdk.config import EdgetraceConfig

logger = logging.getLogger(__name__)

_TRACER_NAME = "edgetrace"

_lock = threading.RLock()
_initialized = False
_current_config: Optional[EdgetraceConfig] = None
_http_tracer: Optional[HttpTracer] = None


def enable(
    service_name: Optional[str] = None,
    otlp_endpoint: Optional[str] = None,
    node_name: Optional[str] = None,
    zone_name: Optional[str] = None,
    log_level: str = "INFO",
    config: Optional[EdgetraceConfig] = None,
    config_file: Optional[str] = None,
) -> bool:
    """Enable proxy tracing.

    Args:
        service_name: Service name.
        otlp_endpoint: OTLP collector endpoint.
        node_name: Value of the ``node_id`` tag (detected when omitted).
        zone_name: Value of the ``zone`` tag (detected when omitted).
        log_level: Logging level (default: ``"INFO"``).
        config: Full :class:`EdgetraceConfig` (overrides individual params).
        config_file: Path to YAML config file.

    Returns:
        ``True`` if successfully initialized, ``False`` if already initialized
        or initialization failed.
    """
    global _initialized, _current_config, _http_tracer

    with _lock:
        if _initialized:
            logger.warning("Edgetrace already initialized")
            return False

        logging.basicConfig(level=getattr(logging, log_level.upper()))

        from edgetrace.sdk.config import EdgetraceConfig as ConfigClass

        if config is not None:
            cfg = config
        elif config_file is not None:
            cfg = ConfigClass.from_yaml(config_file)
        else:
            cfg = ConfigClass.from_file_or_env()

        if service_name is not None:
            cfg.service_name = service_name
        if otlp_endpoint is not None:
            cfg.otlp_endpoint = otlp_endpoint
        if node_name is not None:
            cfg.node_name = node_name
        if zone_name is not None:
            cfg.zone_name = zone_name

        traces_endpoint = cfg.otlp_endpoint
        if traces_endpoint and not traces_endpoint.endswith("/v1/traces"):
            traces_endpoint = f"{traces_endpoint.rstrip('/')}/v1/traces"

        logger.info(
            "Initializing Edgetrace: service=%s, operation=%s, endpoint=%s",
            cfg.service_name,
            cfg.operation_name,
            traces_endpoint,
        )

        try:
            from opentelemetry import trace
            from opentelemetry.baggage.propagation import W3CBaggagePropagator
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
            from opentelemetry.propagate import set_global_textmap
            from opentelemetry.propagators.composite import CompositePropagator
            from opentelemetry.sdk.resources import Resource
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import BatchSpanProcessor
            from opentelemetry.sdk.trace.sampling import ALWAYS_ON
            from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

            from edgetrace._version import __version__
            from edgetrace.drivers.otel import OpenTelemetryDriver
            from edgetrace.resources import resolve_node_and_zone

            node, zone = resolve_node_and_zone(cfg.node_name, cfg.zone_name, cfg.auto_detect_resources)

            resource_attrs = {
                "service.name": cfg.service_name,
                "service.instance.id": node,
                "telemetry.sdk.name": "edgetrace",
                "telemetry.sdk.version": __version__,
            }
            if zone:
                resource_attrs["cloud.availability_zone"] = zone

            existing = trace.get_tracer_provider()
            if isinstance(existing, TracerProvider):
                provider = existing
                logger.info("Reusing existing TracerProvider — adding Edgetrace exporter")
            else:
                # The proxy's own decision picks traced requests; OTel keeps them all.
                provider = TracerProvider(resource=Resource.create(resource_attrs), sampler=ALWAYS_ON)
                trace.set_tracer_provider(provider)

            exporter = OTLPSpanExporter(
                endpoint=traces_endpoint,
                headers=cfg.otlp_headers or {},
            )
            provider.add_span_processor(
                BatchSpanProcessor(
                    exporter,
                    max_export_batch_size=cfg.max_export_batch_size,
                    max_queue_size=cfg.max_queue_size,
                    schedule_delay_millis=cfg.schedule_delay_millis,
                    export_timeout_millis=cfg.export_timeout_millis,
                )
            )

            set_global_textmap(
                CompositePropagator(
                    [
                        TraceContextTextMapPropagator(),
                        W3CBaggagePropagator(),
                    ]
                )
            )

            driver = OpenTelemetryDriver(provider.get_tracer(_TRACER_NAME, __version__))
            _http_tracer = HttpTracer(driver, LocalInfo(node_name=node, zone_name=zone))
            _current_config = cfg
            _initialized = True

            logger.info("Edgetrace initialized: node=%s, zone=%s", node, zone)
            return True

        except Exception as exc:
            logger.error("Failed to initialize Edgetrace: %s", exc, exc_info=True)
            return False


def is_enabled() -> bool:
    """Check if Edgetrace is initialized."""
    return _initialized


def get_config() -> Optional[EdgetraceConfig]:
    """Get the current Edgetrace configuration."""
    return _current_config


def get_http_tracer() -> HttpTracer:
    """Return the process-wide tracer.

    Before :func:`enable` (or after :func:`disable`) this is a tracer whose
    driver declines every span, so callers never need to branch.
    """
    if _http_tracer is not None:
        return _http_tracer
    return HttpTracer(NullDriver(), LocalInfo(node_name=socket.gethostname(), zone_name=""))


def disable() -> None:
    """Disable Edgetrace and shutdown OTel.

    Call on application shutdown for clean exit.
    """
    global _initialized, _current_config, _http_tracer

    with _lock:
        if not _initialized:
            return

        try:
            from opentelemetry import trace

            provider = trace.get_tracer_provider()
            if hasattr(provider, "force_flush"):
                provider.force_flush(timeout_millis=5000)
            if hasattr(provider, "shutdown"):
                provider.shutdown()

            logger.info("Edgetrace shutdown complete")

        except Exception as exc:
            logger.error("Error during Edgetrace shutdown: %s", exc)

        finally:
            _initialized = False
            _current_config = None
            _http_tracer = None
