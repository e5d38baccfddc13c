# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""SpanEnricher — writes the standard proxy tag set and finishes the span.

Called exactly once per traced request, after the response (or failure) is
known.  Every absent piece of metadata is either defaulted or omitted:

- request-derived tags are skipped entirely when no headers are available;
- ``downstream_cluster`` and ``user_agent`` default to ``"-"``;
- ``http.status_code`` is ``"0"`` when no response code was recorded;
- verbose milestones that were never reached produce no log.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from edgetrace.models.headers import RequestHeaders
from edgetrace.models.stream_info import StreamInfo, protocol_to_string
from edgetrace.processors.response_flags import ResponseFlagFormatter, to_short_string
from edgetrace.tags import VERBOSE_MILESTONES, Tags

if TYPE_CHECKING:
    from edgetrace.drivers.base import Span
    from edgetrace.sdk.config import TracingConfig

logger = logging.getLogger(__name__)

MAX_PATH_LENGTH = 128


def _value_or_default(value: Optional[str], default: str) -> str:
    return value if value is not None else default


def build_url(request_headers: RequestHeaders) -> str:
    """Return ``scheme://host/path`` with the path cut to its first 128 bytes.

    The original path (before any rewrite by the proxy) is preferred.
    """
    path = request_headers.original_path()
    if path is None:
        path = request_headers.path() or ""
    encoded = path.encode("utf-8")
    if len(encoded) > MAX_PATH_LENGTH:
        # A cut inside a multi-byte character drops the partial character.
        path = encoded[:MAX_PATH_LENGTH].decode("utf-8", "ignore")

    scheme = _value_or_default(request_headers.forwarded_proto(), "")
    host = _value_or_default(request_headers.host(), "")
    return f"{scheme}://{host}{path}"


def build_response_code(stream_info: StreamInfo) -> str:
    if stream_info.response_code is None:
        return "0"
    return str(stream_info.response_code)


def is_5xx(code: int) -> bool:
    return 500 <= code < 600


def annotate_verbose(span: Span, stream_info: StreamInfo) -> None:
    """Log one timestamped event per byte-transfer milestone reached."""
    start_time = stream_info.start_time
    for event in VERBOSE_MILESTONES:
        offset = getattr(stream_info, event)
        if offset is not None:
            span.log(start_time + offset, event)


class SpanEnricher:
    """Finalizes proxy spans.

    The response-flag formatter is pluggable; it defaults to the standard
    short-code rendering (``"UH,UT"`` or ``"-"``).
    """

    def __init__(self, response_flag_formatter: ResponseFlagFormatter = to_short_string) -> None:
        self._format_response_flags = response_flag_formatter

    def finalize(
        self,
        span: Span,
        request_headers: Optional[RequestHeaders],
        stream_info: StreamInfo,
        config: TracingConfig,
    ) -> None:
        """Write all tags and logs on *span*, then finish it."""
        if request_headers is not None:
            self._tag_request(span, request_headers, stream_info, config)

        span.set_tag(Tags.REQUEST_SIZE, str(stream_info.bytes_received))

        if stream_info.upstream_host is not None:
            span.set_tag(Tags.UPSTREAM_CLUSTER, stream_info.upstream_host.cluster_name)

        # Post response data.
        span.set_tag(Tags.HTTP_STATUS_CODE, build_response_code(stream_info))
        span.set_tag(Tags.RESPONSE_SIZE, str(stream_info.bytes_sent))
        span.set_tag(Tags.RESPONSE_FLAGS, self._format_response_flags(stream_info))

        if config.verbose:
            annotate_verbose(span, stream_info)

        if stream_info.response_code is None or is_5xx(stream_info.response_code):
            span.set_tag(Tags.ERROR, Tags.TRUE)

        span.finish_span()
        logger.debug("Finalized span: status=%s", stream_info.response_code)

    def _tag_request(
        self,
        span: Span,
        request_headers: RequestHeaders,
        stream_info: StreamInfo,
        config: TracingConfig,
    ) -> None:
        request_id = request_headers.request_id()
        if request_id is not None:
            span.set_tag(Tags.GUID_X_REQUEST_ID, request_id)

        span.set_tag(Tags.HTTP_URL, build_url(request_headers))
        # :method is always present on a well-formed request.
        span.set_tag(Tags.HTTP_METHOD, request_headers.method())  # type: ignore[arg-type]
        span.set_tag(
            Tags.DOWNSTREAM_CLUSTER,
            _value_or_default(request_headers.downstream_service_cluster(), "-"),
        )
        span.set_tag(Tags.USER_AGENT, _value_or_default(request_headers.user_agent(), "-"))
        span.set_tag(Tags.HTTP_PROTOCOL, protocol_to_string(stream_info.protocol))

        client_trace_id = request_headers.client_trace_id()
        if client_trace_id is not None:
            span.set_tag(Tags.GUID_X_CLIENT_TRACE_ID, client_trace_id)

        for header in config.request_headers_for_tags:
            value = request_headers.get(header)
            if value is not None:
                span.set_tag(header, value)


_default_enricher = SpanEnricher()


def finalize_span(
    span: Span,
    request_headers: Optional[RequestHeaders],
    stream_info: StreamInfo,
    config: TracingConfig,
) -> None:
    """Finalize *span* with the default :class:`SpanEnricher`."""
    _default_enricher.finalize(span, request_headers, stream_info, config)
