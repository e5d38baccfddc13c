# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""OpenTelemetry tracing backend.

Tags become span attributes, verbose logs become span events with explicit
timestamps, and finishing a span ends it so the configured span processors
(batch OTLP export in production) take over.

Example::

    from opentelemetry import trace
    from edgetrace.drivers.otel import OpenTelemetryDriver

    driver = OpenTelemetryDriver(trace.get_tracer("edgetrace"))
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, List, Optional

from opentelemetry import propagate, trace
from opentelemetry.propagators.textmap import Getter, Setter
from opentelemetry.trace import SpanKind

from edgetrace.models.decision import OperationName
from edgetrace.models.headers import RequestHeaders

if TYPE_CHECKING:
    from edgetrace.models.decision import Decision
    from edgetrace.sdk.config import TracingConfig

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_ns(timestamp: datetime) -> int:
    """Convert *timestamp* to integer nanoseconds since the epoch (UTC)."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return ((timestamp - _EPOCH) // timedelta(microseconds=1)) * 1000


class _HeaderGetter(Getter[RequestHeaders]):
    def get(self, carrier: RequestHeaders, key: str) -> Optional[List[str]]:
        value = carrier.get(key)
        if value is None:
            return None
        return [value]

    def keys(self, carrier: RequestHeaders) -> List[str]:
        return list(carrier)


class _HeaderSetter(Setter[RequestHeaders]):
    def set(self, carrier: RequestHeaders, key: str, value: str) -> None:
        carrier.set(key, value)


_getter = _HeaderGetter()
_setter = _HeaderSetter()


class OpenTelemetrySpan:
    """Adapts an OTel span to the proxy span interface."""

    def __init__(self, span: trace.Span) -> None:
        self._span = span
        self._finished = False

    @property
    def otel_span(self) -> trace.Span:
        return self._span

    @property
    def finished(self) -> bool:
        return self._finished

    def set_tag(self, key: str, value: str) -> None:
        assert not self._finished, "set_tag() called on a finished span"
        self._span.set_attribute(key, value)

    def log(self, timestamp: datetime, event: str) -> None:
        assert not self._finished, "log() called on a finished span"
        self._span.add_event(event, timestamp=_to_ns(timestamp))

    def finish_span(self) -> None:
        assert not self._finished, "finish_span() called twice"
        self._finished = True
        self._span.end()

    def inject_context(self, request_headers: RequestHeaders) -> None:
        assert not self._finished, "inject_context() called on a finished span"
        ctx = trace.set_span_in_context(self._span)
        propagate.inject(request_headers, context=ctx, setter=_setter)


class OpenTelemetryDriver:
    """Starts OTel spans for traced requests.

    The parent context is extracted from the request headers with the global
    text-map propagator, so a request that arrives with ``traceparent``
    joins the caller's trace.
    """

    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer

    def start_span(
        self,
        config: TracingConfig,
        request_headers: RequestHeaders,
        operation_name: str,
        start_time: datetime,
        decision: Decision,
    ) -> Optional[OpenTelemetrySpan]:
        if not decision.traced:
            logger.debug("Declining span %r: %s", operation_name, decision.reason.value)
            return None

        parent = propagate.extract(request_headers, getter=_getter)
        kind = SpanKind.CLIENT if config.operation_name is OperationName.EGRESS else SpanKind.SERVER
        span = self._tracer.start_span(
            operation_name,
            context=parent,
            kind=kind,
            start_time=_to_ns(start_time),
        )
        return OpenTelemetrySpan(span)
