# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Per-request stream metadata accumulated by the proxy.

Milestones are offsets from :attr:`StreamInfo.start_time`.  A milestone that
was never reached stays ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Set


class Protocol(str, Enum):
    """HTTP protocol version of the downstream stream."""

    HTTP10 = "HTTP/1.0"
    HTTP11 = "HTTP/1.1"
    HTTP2 = "HTTP/2"
    HTTP3 = "HTTP/3"

    @classmethod
    def from_http_version(cls, version: Optional[str]) -> Optional[Protocol]:
        """Map an ASGI ``http_version`` value (``"1.1"``, ``"2"``...)."""
        return _ASGI_VERSIONS.get(version or "")


_ASGI_VERSIONS = {
    "1.0": Protocol.HTTP10,
    "1.1": Protocol.HTTP11,
    "2": Protocol.HTTP2,
    "2.0": Protocol.HTTP2,
    "3": Protocol.HTTP3,
}


def protocol_to_string(protocol: Optional[Protocol]) -> str:
    if protocol is None:
        return "-"
    return protocol.value


class ResponseFlag(str, Enum):
    """Abnormal termination / response conditions.

    Declaration order is the order used when rendering the short string.
    """

    FAILED_LOCAL_HEALTH_CHECK = "LH"
    NO_HEALTHY_UPSTREAM = "UH"
    UPSTREAM_REQUEST_TIMEOUT = "UT"
    LOCAL_RESET = "LR"
    UPSTREAM_REMOTE_RESET = "UR"
    UPSTREAM_CONNECTION_FAILURE = "UF"
    UPSTREAM_CONNECTION_TERMINATION = "UC"
    UPSTREAM_OVERFLOW = "UO"
    NO_ROUTE_FOUND = "NR"
    DELAY_INJECTED = "DI"
    FAULT_INJECTED = "FI"
    RATE_LIMITED = "RL"
    UNAUTHORIZED_EXTERNAL_SERVICE = "UAEX"
    RATE_LIMIT_SERVICE_ERROR = "RLSE"


@dataclass(frozen=True)
class HostDescription:
    """Upstream host selected for the request."""

    address: str
    cluster_name: str


@dataclass
class StreamInfo:
    """Read-mostly view of request, response and connection facts."""

    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    bytes_received: int = 0
    bytes_sent: int = 0
    response_code: Optional[int] = None
    protocol: Optional[Protocol] = None
    upstream_host: Optional[HostDescription] = None
    health_check: bool = False

    last_downstream_rx_byte_received: Optional[timedelta] = None
    first_upstream_tx_byte_sent: Optional[timedelta] = None
    last_upstream_tx_byte_sent: Optional[timedelta] = None
    first_upstream_rx_byte_received: Optional[timedelta] = None
    last_upstream_rx_byte_received: Optional[timedelta] = None
    first_downstream_tx_byte_sent: Optional[timedelta] = None
    last_downstream_tx_byte_sent: Optional[timedelta] = None

    response_flags: Set[ResponseFlag] = field(default_factory=set)

    def set_response_flag(self, flag: ResponseFlag) -> None:
        self.response_flags.add(flag)

    def has_response_flag(self, flag: ResponseFlag) -> bool:
        return flag in self.response_flags
