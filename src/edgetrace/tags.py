# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Span tag keys and verbose log event names.

These strings are consumed by downstream trace analysis tooling and must
not change.
"""

from __future__ import annotations

from typing import Final, Tuple


class Tags:
    """Tag keys (and the two fixed tag values) written on proxy spans."""

    COMPONENT: Final = "component"
    NODE_ID: Final = "node_id"
    ZONE: Final = "zone"
    GUID_X_REQUEST_ID: Final = "guid:x-request-id"
    HTTP_URL: Final = "http.url"
    HTTP_METHOD: Final = "http.method"
    DOWNSTREAM_CLUSTER: Final = "downstream_cluster"
    USER_AGENT: Final = "user_agent"
    HTTP_PROTOCOL: Final = "http.protocol"
    GUID_X_CLIENT_TRACE_ID: Final = "guid:x-client-trace-id"
    REQUEST_SIZE: Final = "request_size"
    UPSTREAM_CLUSTER: Final = "upstream_cluster"
    HTTP_STATUS_CODE: Final = "http.status_code"
    RESPONSE_SIZE: Final = "response_size"
    RESPONSE_FLAGS: Final = "response_flags"
    ERROR: Final = "error"

    PROXY: Final = "proxy"
    TRUE: Final = "true"


class Logs:
    """Verbose timing event names."""

    LAST_DOWNSTREAM_RX_BYTE_RECEIVED: Final = "last_downstream_rx_byte_received"
    FIRST_UPSTREAM_TX_BYTE_SENT: Final = "first_upstream_tx_byte_sent"
    LAST_UPSTREAM_TX_BYTE_SENT: Final = "last_upstream_tx_byte_sent"
    FIRST_UPSTREAM_RX_BYTE_RECEIVED: Final = "first_upstream_rx_byte_received"
    LAST_UPSTREAM_RX_BYTE_RECEIVED: Final = "last_upstream_rx_byte_received"
    FIRST_DOWNSTREAM_TX_BYTE_SENT: Final = "first_downstream_tx_byte_sent"
    LAST_DOWNSTREAM_TX_BYTE_SENT: Final = "last_downstream_tx_byte_sent"


# Emission order for verbose logs.  Each event name is also the name of the
# StreamInfo attribute holding that milestone.
VERBOSE_MILESTONES: Tuple[str, ...] = (
    Logs.LAST_DOWNSTREAM_RX_BYTE_RECEIVED,
    Logs.FIRST_UPSTREAM_TX_BYTE_SENT,
    Logs.LAST_UPSTREAM_TX_BYTE_SENT,
    Logs.FIRST_UPSTREAM_RX_BYTE_RECEIVED,
    Logs.LAST_UPSTREAM_RX_BYTE_RECEIVED,
    Logs.FIRST_DOWNSTREAM_TX_BYTE_SENT,
    Logs.LAST_DOWNSTREAM_TX_BYTE_SENT,
)
