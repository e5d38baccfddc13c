# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Driver used when tracing is disabled."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from edgetrace.drivers.base import Span
    from edgetrace.models.decision import Decision
    from edgetrace.models.headers import RequestHeaders
    from edgetrace.sdk.config import TracingConfig


class NullDriver:
    """Declines every span."""

    def start_span(
        self,
        config: TracingConfig,
        request_headers: RequestHeaders,
        operation_name: str,
        start_time: datetime,
        decision: Decision,
    ) -> Optional[Span]:
        return None
