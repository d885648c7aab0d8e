"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from code_context_search.observability.context import get_trace_context, set_trace_context, trace_context
from code_context_search.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from code_context_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOC_COUNT,
    INDEX_VOCABULARY_SIZE,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from code_context_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_BUILD_LATENCY",
    "INDEX_DOC_COUNT",
    "INDEX_VOCABULARY_SIZE",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
