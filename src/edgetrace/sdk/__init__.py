# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Edgetrace SDK core components."""

from __future__ import annotations

from edgetrace.sdk.bootstrap import disable, enable, get_config, get_http_tracer, is_enabled
from edgetrace.sdk.config import EdgetraceConfig, TracingConfig
from edgetrace.sdk.tracer import HttpTracer, LocalInfo, operation_to_string

__all__ = [
    "EdgetraceConfig",
    "HttpTracer",
    "LocalInfo",
    "TracingConfig",
    "disable",
    "enable",
    "get_config",
    "get_http_tracer",
    "is_enabled",
    "operation_to_string",
]
