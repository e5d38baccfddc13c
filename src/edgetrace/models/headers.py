# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Request header view used by the tracer.

Header names are case-insensitive and stored lower-cased.  HTTP/2 style
pseudo headers (``:path``, ``:method``, ``:authority``) hold the request
line so that one map carries everything the tracer reads.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union


class HeaderNames:
    """Well-known header names."""

    PATH = ":path"
    METHOD = ":method"
    HOST = ":authority"
    REQUEST_ID = "x-request-id"
    ORIGINAL_PATH = "x-envoy-original-path"
    FORWARDED_PROTO = "x-forwarded-proto"
    DOWNSTREAM_SERVICE_CLUSTER = "x-envoy-downstream-service-cluster"
    USER_AGENT = "user-agent"
    CLIENT_TRACE_ID = "x-client-trace-id"
    FORCE_TRACE = "x-envoy-force-trace"


HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class RequestHeaders:
    """Mutable, case-insensitive request header map.

    Example::

        >>> headers = RequestHeaders({":path": "/a", "X-Request-Id": "abc"})
        >>> headers.request_id()
        'abc'
    """

    def __init__(self, headers: Optional[HeaderSource] = None) -> None:
        self._headers: Dict[str, str] = {}
        if headers is None:
            return
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in pairs:
            self.set(name, value)

    def get(self, name: str) -> Optional[str]:
        return self._headers.get(name.lower())

    def set(self, name: str, value: str) -> None:
        self._headers[name.lower()] = value

    def remove(self, name: str) -> None:
        self._headers.pop(name.lower(), None)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def items(self) -> Iterable[Tuple[str, str]]:
        return self._headers.items()

    def __repr__(self) -> str:
        return f"RequestHeaders({self._headers!r})"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def request_id(self) -> Optional[str]:
        return self.get(HeaderNames.REQUEST_ID)

    def path(self) -> Optional[str]:
        return self.get(HeaderNames.PATH)

    def original_path(self) -> Optional[str]:
        return self.get(HeaderNames.ORIGINAL_PATH)

    def forwarded_proto(self) -> Optional[str]:
        return self.get(HeaderNames.FORWARDED_PROTO)

    def host(self) -> Optional[str]:
        return self.get(HeaderNames.HOST)

    def method(self) -> Optional[str]:
        return self.get(HeaderNames.METHOD)

    def downstream_service_cluster(self) -> Optional[str]:
        return self.get(HeaderNames.DOWNSTREAM_SERVICE_CLUSTER)

    def user_agent(self) -> Optional[str]:
        return self.get(HeaderNames.USER_AGENT)

    def client_trace_id(self) -> Optional[str]:
        return self.get(HeaderNames.CLIENT_TRACE_ID)

    def force_trace(self) -> Optional[str]:
        return self.get(HeaderNames.FORCE_TRACE)
