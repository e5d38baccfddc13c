# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the sampling decision."""

from __future__ import annotations

import pytest

from edgetrace.models.decision import Decision, Reason
from edgetrace.models.headers import RequestHeaders
from edgetrace.models.request_id import TraceStatus, set_trace_status, trace_status
from edgetrace.models.stream_info import StreamInfo
from edgetrace.processors.sampler import apply_sampling, decide, is_tracing

UNTRACED_ID = "125a4afb-6f55-44ba-ad80-413f09f48a28"


def _with_status(status: TraceStatus) -> str:
    return set_trace_status(UNTRACED_ID, status)


class TestDecide:
    """Tests for decide()."""

    @pytest.mark.parametrize("status", [None, *TraceStatus])
    @pytest.mark.parametrize("present", [True, False])
    def test_health_check_always_excluded(self, status, present):
        assert decide(True, present, status) == Decision(Reason.HEALTH_CHECK, False)

    @pytest.mark.parametrize("status", [None, *TraceStatus])
    def test_missing_request_id_not_traced(self, status):
        assert decide(False, False, status) == Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (TraceStatus.CLIENT, Decision(Reason.CLIENT_FORCED, True)),
            (TraceStatus.FORCED, Decision(Reason.SERVICE_FORCED, True)),
            (TraceStatus.SAMPLED, Decision(Reason.SAMPLING, True)),
            (TraceStatus.NO_TRACE, Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)),
        ],
    )
    def test_status_mapping(self, status, expected):
        assert decide(False, True, status) == expected

    def test_missing_status_treated_as_no_trace(self):
        assert decide(False, True, None) == Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)

    def test_decision_is_immutable(self):
        decision = decide(False, True, TraceStatus.SAMPLED)
        with pytest.raises(AttributeError):
            decision.traced = False  # type: ignore[misc]


class TestIsTracing:
    """Tests for is_tracing() reading the proxy's request view."""

    def test_health_check_wins_over_forced_id(self):
        headers = RequestHeaders({"x-request-id": _with_status(TraceStatus.FORCED)})
        decision = is_tracing(StreamInfo(health_check=True), headers)
        assert decision == Decision(Reason.HEALTH_CHECK, False)

    def test_no_request_id(self):
        decision = is_tracing(StreamInfo(), RequestHeaders())
        assert decision == Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)

    def test_sampled_id(self):
        headers = RequestHeaders({"X-Request-Id": _with_status(TraceStatus.SAMPLED)})
        assert is_tracing(StreamInfo(), headers) == Decision(Reason.SAMPLING, True)

    def test_client_id(self):
        headers = RequestHeaders({"x-request-id": _with_status(TraceStatus.CLIENT)})
        assert is_tracing(StreamInfo(), headers) == Decision(Reason.CLIENT_FORCED, True)

    def test_non_uuid_id_not_traceable(self):
        headers = RequestHeaders({"x-request-id": "not-a-uuid"})
        assert is_tracing(StreamInfo(), headers) == Decision(Reason.NOT_TRACEABLE_REQUEST_ID, False)


class TestApplySampling:
    """Tests for apply_sampling() stamping trace status on request ids."""

    def test_full_sampling_marks_sampled(self):
        headers = RequestHeaders({"x-request-id": UNTRACED_ID})
        apply_sampling(headers, 100.0)
        assert trace_status(headers.request_id()) is TraceStatus.SAMPLED

    def test_zero_sampling_leaves_id_untraced(self):
        headers = RequestHeaders({"x-request-id": UNTRACED_ID})
        apply_sampling(headers, 0.0)
        assert headers.request_id() == UNTRACED_ID

    def test_client_trace_id_forces_client(self):
        headers = RequestHeaders({"x-request-id": UNTRACED_ID, "x-client-trace-id": "abc"})
        apply_sampling(headers, 0.0)
        assert trace_status(headers.request_id()) is TraceStatus.CLIENT

    def test_force_trace_header_forces(self):
        headers = RequestHeaders({"x-request-id": UNTRACED_ID, "x-envoy-force-trace": "true"})
        apply_sampling(headers, 0.0)
        assert trace_status(headers.request_id()) is TraceStatus.FORCED

    def test_already_traced_id_untouched(self):
        forced = _with_status(TraceStatus.FORCED)
        headers = RequestHeaders({"x-request-id": forced, "x-client-trace-id": "abc"})
        apply_sampling(headers, 100.0)
        assert headers.request_id() == forced

    def test_missing_id_is_noop(self):
        headers = RequestHeaders()
        apply_sampling(headers, 100.0)
        assert headers.request_id() is None

    def test_non_hex_id_untouched(self):
        headers = RequestHeaders({"x-request-id": "zzzzzzzz"})
        apply_sampling(headers, 100.0)
        assert headers.request_id() == "zzzzzzzz"
