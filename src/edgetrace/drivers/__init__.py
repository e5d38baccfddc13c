# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Tracing backends."""

from edgetrace.drivers.base import Driver, Span
from edgetrace.drivers.null import NullDriver
from edgetrace.drivers.otel import OpenTelemetryDriver, OpenTelemetrySpan

__all__ = ["Driver", "NullDriver", "OpenTelemetryDriver", "OpenTelemetrySpan", "Span"]
