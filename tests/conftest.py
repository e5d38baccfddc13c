# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Shared test fixtures for Edgetrace tests."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Tuple

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

# Module-level provider and exporter to avoid "cannot override" warnings
_provider: TracerProvider = None
_exporter: InMemorySpanExporter = None


def _get_or_create_provider() -> tuple[TracerProvider, InMemorySpanExporter]:
    """Get or create the global test provider."""
    global _provider, _exporter

    if _provider is None:
        _provider = TracerProvider(sampler=ALWAYS_ON)
        _exporter = InMemorySpanExporter()
        _provider.add_span_processor(SimpleSpanProcessor(_exporter))
        trace.set_tracer_provider(_provider)

    return _provider, _exporter


class RecordingSpan:
    """In-memory span that records every call, in order."""

    def __init__(self) -> None:
        self.tags: Dict[str, str] = {}
        self.tag_writes: List[Tuple[str, str]] = []
        self.logs: List[Tuple[datetime, str]] = []
        self.finished = False

    def set_tag(self, key: str, value: str) -> None:
        assert not self.finished
        self.tags[key] = value
        self.tag_writes.append((key, value))

    def log(self, timestamp: datetime, event: str) -> None:
        assert not self.finished
        self.logs.append((timestamp, event))

    def finish_span(self) -> None:
        assert not self.finished
        self.finished = True

    def inject_context(self, request_headers) -> None:
        assert not self.finished
        request_headers.set("x-recording-span", "1")


@pytest.fixture(autouse=True)
def reset_tracing():
    """Reset tracing state before each test."""
    _, exporter = _get_or_create_provider()
    exporter.clear()
    yield
    exporter.clear()


@pytest.fixture
def tracer_provider():
    """Get the test TracerProvider."""
    provider, _ = _get_or_create_provider()
    return provider


@pytest.fixture
def memory_exporter():
    """Get the in-memory span exporter for testing."""
    _, exporter = _get_or_create_provider()
    return exporter


@pytest.fixture
def tracer(tracer_provider):
    """Get a tracer instance."""
    return trace.get_tracer("test-tracer")


@pytest.fixture
def recording_span():
    return RecordingSpan()
