# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""HttpTracer — starts proxy spans through a pluggable driver.

The tracer is the glue between the sampling decision and the backend:

1. Name the span after the operation (``ingress`` / ``egress <host>``).
2. Ask the driver for a span.
3. Stamp the process identity tags on it.

Finalization is done separately by
:class:`~edgetrace.processors.enricher.SpanEnricher` once the response is
known.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from edgetrace.drivers.base import Driver, Span
from edgetrace.models.decision import Decision, OperationName
from edgetrace.models.headers import RequestHeaders
from edgetrace.models.stream_info import StreamInfo
from edgetrace.processors.enricher import SpanEnricher
from edgetrace.sdk.config import TracingConfig
from edgetrace.tags import Tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalInfo:
    """Identity of the proxy process."""

    node_name: str
    zone_name: str


def operation_to_string(operation_name: OperationName) -> str:
    return operation_name.value


class HttpTracer:
    """Starts and finalizes proxy spans.

    Example::

        >>> tracer = HttpTracer(OpenTelemetryDriver(otel_tracer), LocalInfo("node-1", "zone-a"))
        >>> span = tracer.start_span(config, headers, stream_info, decision)
        >>> if span is not None:
        ...     tracer.finalize_span(span, headers, stream_info, config)
    """

    def __init__(
        self,
        driver: Driver,
        local_info: LocalInfo,
        enricher: Optional[SpanEnricher] = None,
    ) -> None:
        self._driver = driver
        self._local_info = local_info
        self._enricher = enricher or SpanEnricher()

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def local_info(self) -> LocalInfo:
        return self._local_info

    def start_span(
        self,
        config: TracingConfig,
        request_headers: RequestHeaders,
        stream_info: StreamInfo,
        decision: Decision,
    ) -> Optional[Span]:
        """Start a span for a request, or return ``None`` if the driver declines."""
        span_name = operation_to_string(config.operation_name)

        if config.operation_name is OperationName.EGRESS:
            host = request_headers.host()
            if host:
                span_name = f"{span_name} {host}"

        span = self._driver.start_span(config, request_headers, span_name, stream_info.start_time, decision)
        if span is None:
            logger.debug("Driver declined span %r", span_name)
            return None

        span.set_tag(Tags.COMPONENT, Tags.PROXY)
        span.set_tag(Tags.NODE_ID, self._local_info.node_name)
        span.set_tag(Tags.ZONE, self._local_info.zone_name)
        return span

    def finalize_span(
        self,
        span: Span,
        request_headers: Optional[RequestHeaders],
        stream_info: StreamInfo,
        config: TracingConfig,
    ) -> None:
        self._enricher.finalize(span, request_headers, stream_info, config)
