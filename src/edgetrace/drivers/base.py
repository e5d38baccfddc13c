# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tracing backend interfaces.

The tracer depends only on these two protocols.  Each backend ships its own
:class:`Driver` that creates :class:`Span` handles; the driver owns span
lifetime and transmission.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from edgetrace.models.decision import Decision
    from edgetrace.models.headers import RequestHeaders
    from edgetrace.sdk.config import TracingConfig


@runtime_checkable
class Span(Protocol):
    """A live span.  No method may be called after :meth:`finish_span`."""

    def set_tag(self, key: str, value: str) -> None: ...

    def log(self, timestamp: datetime, event: str) -> None: ...

    def finish_span(self) -> None: ...

    def inject_context(self, request_headers: RequestHeaders) -> None: ...


@runtime_checkable
class Driver(Protocol):
    """Backend capable of starting spans.

    Returning ``None`` means the backend declined; the request is then
    simply untraced.
    """

    def start_span(
        self,
        config: TracingConfig,
        request_headers: RequestHeaders,
        operation_name: str,
        start_time: datetime,
        decision: Decision,
    ) -> Optional[Span]: ...
