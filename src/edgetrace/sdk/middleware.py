# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""FastAPI / Starlette middleware that traces requests like a proxy listener.

For each request the middleware:

1. Builds a :class:`RequestHeaders` view (with ``:path``, ``:method`` and
   ``:authority``) and a :class:`StreamInfo`.
2. Generates ``x-request-id`` when absent and stamps a trace status on it.
3. Asks the sampler for a decision and starts a span when traced.
4. Runs the app, records the response, and always finalizes the span
   exactly once, even when the app raises.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from edgetrace.models.headers import HeaderNames, RequestHeaders
from edgetrace.models.request_id import generate_request_id
from edgetrace.models.stream_info import Protocol, StreamInfo
from edgetrace.processors.sampler import apply_sampling, is_tracing
from edgetrace.sdk.bootstrap import get_config, get_http_tracer
from edgetrace.sdk.config import TracingConfig
from edgetrace.sdk.tracer import HttpTracer

logger = logging.getLogger(__name__)


def _content_length(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return max(int(value), 0)
    except ValueError:
        return 0


def build_request_headers(request: Request) -> RequestHeaders:
    """Return a header view of *request*, pseudo headers included.

    ``:path`` keeps the path and query exactly as they arrived on the wire,
    percent-encoding included.
    """
    headers = RequestHeaders(request.headers.items())

    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"")
    if query:
        path = f"{path}?{query.decode('latin-1')}"
    headers.set(HeaderNames.PATH, path)
    headers.set(HeaderNames.METHOD, request.method)

    host = request.headers.get("host")
    if host is not None:
        headers.set(HeaderNames.HOST, host)
    if headers.forwarded_proto() is None:
        headers.set(HeaderNames.FORWARDED_PROTO, request.url.scheme)
    return headers


class EdgetraceMiddleware(BaseHTTPMiddleware):
    """Trace requests handled by a Starlette / FastAPI app.

    Settings not passed explicitly come from the configuration given to
    :func:`edgetrace.enable`.

    ``request_size`` and ``response_size`` are read from the
    ``content-length`` headers. Chunked request bodies and streamed
    responses without a declared length are reported as ``"0"``.

    Example::

        from fastapi import FastAPI
        from edgetrace import enable
        from edgetrace.sdk.middleware import EdgetraceMiddleware

        enable()
        app = FastAPI()
        app.add_middleware(EdgetraceMiddleware, health_check_paths=["/healthz"])
    """

    def __init__(
        self,
        app: object,
        *,
        tracer: Optional[HttpTracer] = None,
        config: Optional[TracingConfig] = None,
        health_check_paths: Optional[Iterable[str]] = None,
        random_sampling: Optional[float] = None,
        generate_request_id: Optional[bool] = None,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._tracer = tracer
        self._config = config
        self._health_check_paths = frozenset(health_check_paths) if health_check_paths is not None else None
        self._random_sampling = random_sampling
        self._generate_request_id = generate_request_id

    # Settings are resolved per request so enable() may run after the
    # middleware has been added.

    def _resolve_tracer(self) -> HttpTracer:
        return self._tracer or get_http_tracer()

    def _resolve_config(self) -> TracingConfig:
        if self._config is not None:
            return self._config
        cfg = get_config()
        return cfg.tracing_config() if cfg is not None else TracingConfig()

    def _is_health_check(self, path: str) -> bool:
        if self._health_check_paths is not None:
            return path in self._health_check_paths
        cfg = get_config()
        return cfg is not None and path in cfg.health_check_paths

    def _sampling_percent(self) -> float:
        if self._random_sampling is not None:
            return self._random_sampling
        cfg = get_config()
        return cfg.random_sampling if cfg is not None else 100.0

    def _should_generate_request_id(self) -> bool:
        if self._generate_request_id is not None:
            return self._generate_request_id
        cfg = get_config()
        return cfg.generate_request_id if cfg is not None else True

    async def dispatch(self, request: Request, call_next: object) -> Response:  # type: ignore[override]
        """Trace one request around the downstream app."""
        start_time = datetime.now(timezone.utc)
        started = time.monotonic()

        tracer = self._resolve_tracer()
        config = self._resolve_config()

        headers = build_request_headers(request)
        original = dict(headers.items())

        if headers.request_id() is None and self._should_generate_request_id():
            headers.set(HeaderNames.REQUEST_ID, generate_request_id())
        apply_sampling(headers, self._sampling_percent())

        stream_info = StreamInfo(
            start_time=start_time,
            bytes_received=_content_length(request.headers.get("content-length")),
            protocol=Protocol.from_http_version(request.scope.get("http_version")),
            health_check=self._is_health_check(request.url.path),
        )

        decision = is_tracing(stream_info, headers)
        span = tracer.start_span(config, headers, stream_info, decision) if decision.traced else None

        response: Optional[Response] = None
        try:
            if span is not None:
                span.inject_context(headers)
            _write_back(request, headers, original)
            response = await call_next(request)  # type: ignore[misc]
        finally:
            if span is not None:
                if response is not None:
                    stream_info.response_code = response.status_code
                    stream_info.bytes_sent = _content_length(response.headers.get("content-length"))
                    stream_info.first_downstream_tx_byte_sent = timedelta(seconds=time.monotonic() - started)
                tracer.finalize_span(span, headers, stream_info, config)

        request_id = headers.request_id()
        if request_id is not None:
            response.headers[HeaderNames.REQUEST_ID] = request_id

        return response


def _write_back(request: Request, headers: RequestHeaders, original: dict) -> None:
    """Copy headers changed by sampling or context injection into the ASGI scope."""
    updates = {
        name: value
        for name, value in headers.items()
        if not name.startswith(":") and original.get(name) != value
    }
    if not updates:
        return

    raw = [(key, value) for key, value in request.scope["headers"] if key.decode("latin-1").lower() not in updates]
    raw.extend((name.encode("latin-1"), value.encode("latin-1")) for name, value in updates.items())
    request.scope["headers"] = raw
