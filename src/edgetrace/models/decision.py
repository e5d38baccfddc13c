# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tracing decision model.

A :class:`Decision` is produced once per request by the sampler and consumed
immediately when the span is started.  It is never mutated or persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Reason(str, Enum):
    """Why a request is (or is not) traced."""

    HEALTH_CHECK = "health_check"
    NOT_TRACEABLE_REQUEST_ID = "not_traceable_request_id"
    CLIENT_FORCED = "client_forced"
    SERVICE_FORCED = "service_forced"
    SAMPLING = "sampling"


class OperationName(str, Enum):
    """Direction of the traffic relative to the proxy."""

    INGRESS = "ingress"
    EGRESS = "egress"


@dataclass(frozen=True)
class Decision:
    """Outcome of the sampling policy for one request."""

    reason: Reason
    traced: bool
