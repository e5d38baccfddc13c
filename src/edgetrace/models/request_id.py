# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Trace status embedded in ``x-request-id`` UUIDs.

The proxy reuses the UUID version nibble (index 14 of the canonical
36-character form) to signal whether a request should be traced:

- ``9`` forced by the service
- ``a`` picked by random sampling
- ``b`` forced by the client (``x-client-trace-id``)
- anything else, not traced (``4`` is the stock UUIDv4 value)

Ids that are not 36 characters long are never traceable.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

UUID_LENGTH = 36
TRACE_BYTE_POSITION = 14

NO_TRACE = "4"
TRACE_FORCED = "9"
TRACE_SAMPLED = "a"
TRACE_CLIENT = "b"


class TraceStatus(str, Enum):
    """Trace status carried by a request id."""

    CLIENT = "client"
    FORCED = "forced"
    SAMPLED = "sampled"
    NO_TRACE = "no_trace"


_STATUS_BY_CHAR = {
    TRACE_FORCED: TraceStatus.FORCED,
    TRACE_SAMPLED: TraceStatus.SAMPLED,
    TRACE_CLIENT: TraceStatus.CLIENT,
}

_CHAR_BY_STATUS = {
    TraceStatus.FORCED: TRACE_FORCED,
    TraceStatus.SAMPLED: TRACE_SAMPLED,
    TraceStatus.CLIENT: TRACE_CLIENT,
    TraceStatus.NO_TRACE: NO_TRACE,
}


def generate_request_id() -> str:
    """Return a fresh, untraced request id."""
    return str(uuid.uuid4())


def trace_status(request_id: str) -> TraceStatus:
    """Classify the trace status embedded in *request_id*."""
    if len(request_id) != UUID_LENGTH:
        return TraceStatus.NO_TRACE
    return _STATUS_BY_CHAR.get(request_id[TRACE_BYTE_POSITION], TraceStatus.NO_TRACE)


def set_trace_status(request_id: str, status: TraceStatus) -> Optional[str]:
    """Return *request_id* rewritten to carry *status*.

    Returns ``None`` when *request_id* is not a UUID-length string.
    """
    if len(request_id) != UUID_LENGTH:
        return None
    char = _CHAR_BY_STATUS[status]
    return request_id[:TRACE_BYTE_POSITION] + char + request_id[TRACE_BYTE_POSITION + 1 :]


def uuid_mod_by(request_id: str, mod: int) -> Optional[int]:
    """Map *request_id* onto ``[0, mod)`` using its leading 32 bits.

    Used to make percentage sampling stable for a given id.  Returns
    ``None`` when the id does not start with eight hex digits.
    """
    if len(request_id) < 8:
        return None
    try:
        value = int(request_id[:8], 16)
    except ValueError:
        return None
    return value % mod
