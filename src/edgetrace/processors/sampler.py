# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Trace sampling decision.

The decision is a pure function of three request facts, evaluated in strict
precedence order:

1. Health checks are never traced.
2. Requests without a request id are never traced.
3. Otherwise the trace status embedded in the request id decides.

Safe to call concurrently from any number of requests.  :func:`apply_sampling`
is the header-side step that runs first: it stamps a trace status onto
untraced request ids.
"""

from __future__ import annotations

import logging
from typing import Optional

from edgetrace.models.decision import Decision, Reason
from edgetrace.models.headers import HeaderNames, RequestHeaders
from edgetrace.models.request_id import TraceStatus, set_trace_status, trace_status, uuid_mod_by
from edgetrace.models.stream_info import StreamInfo

logger = logging.getLogger(__name__)

_DECISION_BY_STATUS = {
    TraceStatus.CLIENT: Decision(Reason.CLIENT_FORCED, True),
    TraceStatus.FORCED: Decision(Reason.SERVICE_FORCED, True),
    TraceStatus.SAMPLED: Decision(Reason.SAMPLING, True),
    TraceStatus.NO_TRACE: Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False),
}

HEALTH_CHECK_DECISION = Decision(Reason.HEALTH_CHECK, False)
NO_REQUEST_ID_DECISION = Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)


def decide(
    health_check: bool,
    request_id_present: bool,
    status: Optional[TraceStatus],
) -> Decision:
    """Return the tracing decision for one request.

    Args:
        health_check: Whether the proxy flagged the request as a health check.
        request_id_present: Whether the request carries a request id.
        status: Trace status embedded in the request id.  Ignored unless
            *request_id_present* is true; ``None`` is treated as
            :attr:`TraceStatus.NO_TRACE`.
    """
    if health_check:
        return HEALTH_CHECK_DECISION

    if not request_id_present:
        return NO_REQUEST_ID_DECISION

    return _DECISION_BY_STATUS[status or TraceStatus.NO_TRACE]


def apply_sampling(request_headers: RequestHeaders, random_sampling: float) -> None:
    """Stamp a trace status onto an untraced ``x-request-id`` in place.

    Precedence: a client trace id forces CLIENT, the force-trace header
    forces FORCED, otherwise the id is SAMPLED when it falls within
    *random_sampling* percent (stable per id).  Ids that already carry a
    trace status are left alone.
    """
    request_id = request_headers.request_id()
    if request_id is None or trace_status(request_id) is not TraceStatus.NO_TRACE:
        return

    bucket = uuid_mod_by(request_id, 10000)
    if bucket is None:
        return

    if request_headers.client_trace_id() is not None:
        status = TraceStatus.CLIENT
    elif request_headers.force_trace() is not None:
        status = TraceStatus.FORCED
    elif bucket < random_sampling * 100:
        status = TraceStatus.SAMPLED
    else:
        return

    updated = set_trace_status(request_id, status)
    if updated is not None:
        request_headers.set(HeaderNames.REQUEST_ID, updated)


def is_tracing(stream_info: StreamInfo, request_headers: RequestHeaders) -> Decision:
    """Decide from the proxy's own view of the request."""
    request_id = request_headers.request_id()
    status = trace_status(request_id) if request_id is not None else None
    decision = decide(stream_info.health_check, request_id is not None, status)
    logger.debug("Tracing decision for request_id=%s: %s", request_id, decision)
    return decision
