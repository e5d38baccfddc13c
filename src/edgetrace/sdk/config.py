# SPDX-FileCopyrightText: 2026 The Edgetrace Authors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for Edgetrace.

Two layers:

- :class:`TracingConfig` is the small, immutable view the tracer core reads
  on every request (operation name, verbose mode, header tags).
- :class:`EdgetraceConfig` is the process-level configuration used by
  :func:`edgetrace.enable` to build the exporter and the tracer.

Configuration precedence (highest to lowest):
1. Code arguments (explicit values passed to EdgetraceConfig)
2. Environment variables (EDGETRACE_*, OTEL_*)
3. YAML config file (edgetrace.yaml or specified path)
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from edgetrace.models.decision import OperationName

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class TracingConfig:
    """Per-listener tracing settings consumed by the tracer core.

    Header names in *request_headers_for_tags* are lower-cased; order is
    kept and duplicates dropped.
    """

    operation_name: OperationName = OperationName.INGRESS
    verbose: bool = False
    request_headers_for_tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operation_name", OperationName(self.operation_name))
        object.__setattr__(self, "request_headers_for_tags", _normalize_headers(self.request_headers_for_tags))


def _normalize_headers(headers: Iterable[str]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for header in headers:
        seen.setdefault(header.strip().lower(), None)
    return tuple(name for name in seen if name)


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return _split_csv(value)
    return [str(item) for item in value]


@dataclass
class EdgetraceConfig:
    """Process-level configuration for Edgetrace.

    Example::

        >>> config = EdgetraceConfig(
        ...     service_name="edge-proxy",
        ...     zone_name="us-east-1a",
        ...     request_headers_for_tags=["x-tenant-id"],
        ... )

        >>> # Or load from YAML
        >>> config = EdgetraceConfig.from_yaml("config/edgetrace.yaml")
    """

    # Service identification
    service_name: Optional[str] = None
    node_name: Optional[str] = None
    zone_name: Optional[str] = None

    # Resource detection (fills node/zone when not configured)
    auto_detect_resources: bool = True

    # OTLP exporter configuration
    otlp_endpoint: Optional[str] = None
    otlp_headers: Optional[Dict[str, str]] = None

    # Span export configuration
    max_export_batch_size: int = 512
    max_queue_size: int = 2048
    schedule_delay_millis: int = 5000
    export_timeout_millis: int = 30000

    # Tracing behaviour
    operation_name: str = "ingress"
    verbose: bool = False
    request_headers_for_tags: List[str] = field(default_factory=list)
    health_check_paths: List[str] = field(default_factory=list)

    # Percentage (0-100) of untraced request ids promoted to sampled
    random_sampling: float = 100.0
    generate_request_id: bool = True

    # Config file path (for tracking where config was loaded from)
    _config_file: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Apply environment variable defaults and validate."""
        if self.service_name is None:
            self.service_name = os.getenv("EDGETRACE_SERVICE_NAME") or os.getenv("OTEL_SERVICE_NAME", "unknown_service")

        if self.node_name is None:
            self.node_name = os.getenv("EDGETRACE_NODE_NAME")

        if self.zone_name is None:
            self.zone_name = os.getenv("EDGETRACE_ZONE_NAME")

        env_auto_detect = os.getenv("EDGETRACE_AUTO_DETECT_RESOURCES")
        if env_auto_detect is not None:
            self.auto_detect_resources = env_auto_detect.lower() in _TRUTHY

        if self.otlp_endpoint is None:
            env_endpoint = os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
            if env_endpoint:
                self.otlp_endpoint = env_endpoint
            else:
                base = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")
                self.otlp_endpoint = f"{base}/v1/traces"

        env_operation = os.getenv("EDGETRACE_OPERATION_NAME")
        if env_operation:
            self.operation_name = env_operation.lower()

        env_verbose = os.getenv("EDGETRACE_VERBOSE")
        if env_verbose is not None:
            self.verbose = env_verbose.lower() in _TRUTHY

        env_headers = os.getenv("EDGETRACE_REQUEST_HEADERS_FOR_TAGS")
        if env_headers and not self.request_headers_for_tags:
            self.request_headers_for_tags = _split_csv(env_headers)

        env_health_paths = os.getenv("EDGETRACE_HEALTH_CHECK_PATHS")
        if env_health_paths and not self.health_check_paths:
            self.health_check_paths = _split_csv(env_health_paths)

        env_sampling = os.getenv("EDGETRACE_RANDOM_SAMPLING")
        if env_sampling:
            self.random_sampling = float(env_sampling)

        try:
            self.operation_name = OperationName(self.operation_name).value
        except ValueError:
            raise ValueError(
                f"Invalid operation_name '{self.operation_name}'. Must be one of: "
                f"{', '.join(op.value for op in OperationName)}"
            ) from None

        if not 0.0 <= self.random_sampling <= 100.0:
            raise ValueError(f"random_sampling must be within [0, 100], got {self.random_sampling}")

    def tracing_config(self) -> TracingConfig:
        """Return the immutable core view of this configuration."""
        return TracingConfig(
            operation_name=OperationName(self.operation_name),
            verbose=self.verbose,
            request_headers_for_tags=tuple(self.request_headers_for_tags),
        )

    # ------------------------------------------------------------------
    # YAML loading
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> EdgetraceConfig:
        """Load configuration from a YAML file.

        Supports environment variable interpolation using ``${VAR_NAME}`` syntax.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If YAML is malformed.
        """
        if path is None:
            raise FileNotFoundError("No config file path provided")

        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")

        import yaml

        with open(resolved) as fh:
            raw_content = fh.read()

        content = _interpolate_env_vars(raw_content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {resolved}: {exc}") from exc

        if data is None:
            data = {}

        return cls._from_dict(data, config_file=str(resolved))

    @classmethod
    def from_file_or_env(cls, path: Optional[str] = None) -> EdgetraceConfig:
        """Load config from file if exists, otherwise use environment variables.

        Search order:
        1. Explicit *path* argument
        2. ``EDGETRACE_CONFIG_FILE`` env var
        3. ``./edgetrace.yaml``
        4. ``./config/edgetrace.yaml``
        5. Falls back to env-only config
        """
        search_paths: List[Path] = []

        if path:
            search_paths.append(Path(path))

        env_path = os.getenv("EDGETRACE_CONFIG_FILE")
        if env_path:
            search_paths.append(Path(env_path))

        search_paths.extend(
            [
                Path("edgetrace.yaml"),
                Path("edgetrace.yml"),
                Path("config/edgetrace.yaml"),
                Path("config/edgetrace.yml"),
            ]
        )

        for candidate in search_paths:
            if candidate.exists():
                logger.info("Loading config from: %s", candidate)
                return cls.from_yaml(str(candidate))

        logger.debug("No config file found, using environment variables only")
        return cls()

    @classmethod
    def _from_dict(
        cls,
        data: Dict[str, Any],
        config_file: Optional[str] = None,
    ) -> EdgetraceConfig:
        """Create config from dictionary (parsed YAML)."""
        service = data.get("service", {})
        resource = data.get("resource", {})
        otlp = data.get("otlp", {})
        export = data.get("export", {})
        tracing = data.get("tracing", {})

        return cls(
            service_name=service.get("name"),
            node_name=service.get("node"),
            zone_name=service.get("zone"),
            auto_detect_resources=resource.get("auto_detect", True),
            otlp_endpoint=otlp.get("endpoint"),
            otlp_headers=otlp.get("headers"),
            max_export_batch_size=export.get("batch_size", 512),
            max_queue_size=export.get("queue_size", 2048),
            schedule_delay_millis=export.get("delay_ms", 5000),
            export_timeout_millis=export.get("timeout_ms", 30000),
            operation_name=tracing.get("operation_name", "ingress"),
            verbose=tracing.get("verbose", False),
            request_headers_for_tags=_as_list(tracing.get("request_headers_for_tags")),
            health_check_paths=_as_list(tracing.get("health_check_paths")),
            random_sampling=float(tracing.get("random_sampling", 100.0)),
            generate_request_id=tracing.get("generate_request_id", True),
            _config_file=config_file,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "service": {
                "name": self.service_name,
                "node": self.node_name,
                "zone": self.zone_name,
            },
            "resource": {
                "auto_detect": self.auto_detect_resources,
            },
            "otlp": {
                "endpoint": self.otlp_endpoint,
                "headers": self.otlp_headers,
            },
            "export": {
                "batch_size": self.max_export_batch_size,
                "queue_size": self.max_queue_size,
                "delay_ms": self.schedule_delay_millis,
                "timeout_ms": self.export_timeout_millis,
            },
            "tracing": {
                "operation_name": self.operation_name,
                "verbose": self.verbose,
                "request_headers_for_tags": list(self.request_headers_for_tags),
                "health_check_paths": list(self.health_check_paths),
                "random_sampling": self.random_sampling,
                "generate_request_id": self.generate_request_id,
            },
        }


def _interpolate_env_vars(content: str) -> str:
    """Interpolate ``${VAR_NAME}`` and ``${VAR_NAME:-default}`` in *content*."""
    pattern = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

    def _replace(match: re.Match) -> str:  # type: ignore[type-arg]
        var_name = match.group(1)
        default = match.group(2)
        value = os.getenv(var_name)
        if value is not None:
            return value
        if default is not None:
            return default
        return match.group(0)

    return pattern.sub(_replace, content)
