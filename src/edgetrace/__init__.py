# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Edgetrace - proxy request tracing on OpenTelemetry.

Quick Start::

    from fastapi import FastAPI
    from edgetrace import enable
    from edgetrace.sdk.middleware import EdgetraceMiddleware

    enable()  # reads config from EDGETRACE_*, OTEL_EXPORTER_OTLP_ENDPOINT env vars

    app = FastAPI()
    app.add_middleware(EdgetraceMiddleware)

Lower level, a proxy drives the tracer itself::

    decision = is_tracing(stream_info, headers)
    span = tracer.start_span(config, headers, stream_info, decision)
    ...
    tracer.finalize_span(span, headers, stream_info, config)
"""

from __future__ import annotations

from edgetrace._version import __version__

# Data model
from edgetrace.models import (
    Decision,
    HeaderNames,
    HostDescription,
    OperationName,
    Protocol,
    Reason,
    RequestHeaders,
    ResponseFlag,
    StreamInfo,
    TraceStatus,
)

# Decision and finalization
from edgetrace.processors import SpanEnricher, apply_sampling, decide, is_tracing

# Bootstrap / configuration / tracer
from edgetrace.sdk import (
    EdgetraceConfig,
    HttpTracer,
    LocalInfo,
    TracingConfig,
    disable,
    enable,
    get_http_tracer,
    is_enabled,
)
from edgetrace.tags import Logs, Tags

__all__ = [
    "__version__",
    # Bootstrap
    "enable",
    "disable",
    "is_enabled",
    "get_http_tracer",
    # Configuration
    "EdgetraceConfig",
    "TracingConfig",
    # Tracer
    "HttpTracer",
    "LocalInfo",
    "SpanEnricher",
    "apply_sampling",
    "decide",
    "is_tracing",
    # Model
    "Decision",
    "HeaderNames",
    "HostDescription",
    "OperationName",
    "Protocol",
    "Reason",
    "RequestHeaders",
    "ResponseFlag",
    "StreamInfo",
    "TraceStatus",
    "Logs",
    "Tags",
]
