# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Per-request tracing processors.

:func:`decide` picks which requests are traced; :class:`SpanEnricher`
writes the standard tag set when a traced request completes.
"""

from edgetrace.processors.enricher import SpanEnricher, build_url, finalize_span
from edgetrace.processors.response_flags import ResponseFlagFormatter, to_short_string
from edgetrace.processors.sampler import apply_sampling, decide, is_tracing

__all__ = [
    "ResponseFlagFormatter",
    "apply_sampling",
    "SpanEnricher",
    "build_url",
    "decide",
    "finalize_span",
    "is_tracing",
    "to_short_string",
]
