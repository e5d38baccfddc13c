# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Edgetrace data models."""

from __future__ import annotations

from edgetrace.models.decision import Decision, OperationName, Reason
from edgetrace.models.headers import HeaderNames, RequestHeaders
from edgetrace.models.request_id import TraceStatus
from edgetrace.models.stream_info import HostDescription, Protocol, ResponseFlag, StreamInfo

__all__ = [
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
]
