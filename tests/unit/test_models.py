# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the request header view and stream metadata."""

from __future__ import annotations

from edgetrace.models.headers import RequestHeaders
from edgetrace.models.stream_info import Protocol, ResponseFlag, StreamInfo, protocol_to_string
from edgetrace.processors.response_flags import to_short_string


class TestRequestHeaders:
    def test_case_insensitive(self):
        headers = RequestHeaders({"User-Agent": "curl"})
        assert headers.get("user-agent") == "curl"
        assert headers.user_agent() == "curl"
        assert "USER-AGENT" in headers

    def test_accepts_pairs(self):
        headers = RequestHeaders([(":method", "PUT"), (":path", "/x")])
        assert headers.method() == "PUT"
        assert headers.path() == "/x"

    def test_set_and_remove(self):
        headers = RequestHeaders()
        headers.set("X-Request-Id", "abc")
        assert headers.request_id() == "abc"
        headers.remove("x-request-id")
        assert headers.request_id() is None
        assert len(headers) == 0

    def test_missing_accessors_return_none(self):
        headers = RequestHeaders()
        assert headers.original_path() is None
        assert headers.forwarded_proto() is None
        assert headers.host() is None
        assert headers.downstream_service_cluster() is None
        assert headers.client_trace_id() is None


class TestProtocol:
    def test_from_http_version(self):
        assert Protocol.from_http_version("1.0") is Protocol.HTTP10
        assert Protocol.from_http_version("1.1") is Protocol.HTTP11
        assert Protocol.from_http_version("2") is Protocol.HTTP2
        assert Protocol.from_http_version(None) is None

    def test_to_string(self):
        assert protocol_to_string(Protocol.HTTP2) == "HTTP/2"
        assert protocol_to_string(None) == "-"


class TestResponseFlags:
    def test_no_flags(self):
        assert to_short_string(StreamInfo()) == "-"

    def test_declaration_order(self):
        stream_info = StreamInfo()
        stream_info.set_response_flag(ResponseFlag.RATE_LIMITED)
        stream_info.set_response_flag(ResponseFlag.FAILED_LOCAL_HEALTH_CHECK)
        stream_info.set_response_flag(ResponseFlag.NO_ROUTE_FOUND)
        assert to_short_string(stream_info) == "LH,NR,RL"

    def test_has_flag(self):
        stream_info = StreamInfo()
        stream_info.set_response_flag(ResponseFlag.LOCAL_RESET)
        assert stream_info.has_response_flag(ResponseFlag.LOCAL_RESET)
        assert not stream_info.has_response_flag(ResponseFlag.UPSTREAM_REMOTE_RESET)
