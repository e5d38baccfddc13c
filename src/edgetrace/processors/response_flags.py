# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Short-string rendering of response flags (``"UH,UT"``, ``"-"``)."""

from __future__ import annotations

from typing import Protocol

from edgetrace.models.stream_info import ResponseFlag, StreamInfo

NONE = "-"


class ResponseFlagFormatter(Protocol):
    def __call__(self, stream_info: StreamInfo) -> str: ...


def to_short_string(stream_info: StreamInfo) -> str:
    """Render the flags set on *stream_info* in declaration order."""
    codes = [flag.value for flag in ResponseFlag if stream_info.has_response_flag(flag)]
    if not codes:
        return NONE
    return ",".join(codes)
