# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
OpenTelemetry Configuration

Sets up distributed tracing and structured JSON logging for the
Carteirinha Pet API.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

SERVICE_NAME = 'carteirinha-pet-api'

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

_SAMPLING_RATIOS = {
    'production': 0.1,
    'staging': 0.5,
}

_LOG_LEVELS = {
    'production': logging.INFO,
    'staging': logging.INFO,
    'development': logging.DEBUG,
    'test': logging.WARNING,
}


class StructuredFormatter(logging.Formatter):
    """Render log records as one JSON object per line, with trace correlation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            entry["trace_id"] = format(span_context.trace_id, "032x")
            entry["span_id"] = format(span_context.span_id, "016x")

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_observability(config: Mapping[str, Any]):
    """Initialize tracing and logging from application configuration."""
    environment = config.get('ENVIRONMENT', 'development')

    setup_structured_logging(environment)

    if not config.get('OTEL_ENABLED', False):
        logging.getLogger(__name__).debug("OpenTelemetry tracing disabled")
        return

    resource = Resource.create({
        "service.name": SERVICE_NAME,
        "service.version": config.get('SERVICE_VERSION', '1.0.0'),
        "deployment.environment": environment
    })

    tracer_provider = TracerProvider(
        sampler=TraceIdRatioBased(_SAMPLING_RATIOS.get(environment, 1.0)),
        resource=resource
    )

    otlp_endpoint = config.get('OTEL_EXPORTER_OTLP_ENDPOINT')
    if otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint), max_export_batch_size=512)
        )
    elif environment == 'development':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)


def setup_structured_logging(environment: str):
    """Configure structured JSON logging with trace correlation."""
    root = logging.getLogger()
    root.setLevel(_LOG_LEVELS.get(environment, logging.INFO))

    if not any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)

    if environment == 'production':
        logging.getLogger('httpx').setLevel(logging.WARNING)
        logging.getLogger('hpack').setLevel(logging.WARNING)
