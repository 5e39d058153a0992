# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation error formatting.

Request bodies, path and query parameters are parsed by flask-openapi3 into
the Pydantic models declared on each view; this module turns the resulting
``ValidationError`` into a 422 problem response.
"""

from flask import current_app, request, jsonify, make_response
from typing import Dict, Any, List
from pydantic import ValidationError
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

VALIDATION_ERROR_STATUS = 422

# Pydantic prefixes messages raised from validators with this marker
_VALUE_ERROR_PREFIX = "Value error, "


def format_validation_errors(validation_error: ValidationError) -> List[Dict[str, Any]]:
    """
    Format Pydantic validation errors for API response.

    Args:
        validation_error: Pydantic ValidationError

    Returns:
        List of ``{"field", "message", "type"}`` dictionaries
    """
    errors = []

    for error in validation_error.errors():
        message = error["msg"]
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]

        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]) or "body",
            "message": message,
            "type": error["type"]
        })

    return errors


def validation_error_callback(error: ValidationError):
    """Build the 422 response for a request that failed model validation."""
    with tracer.start_as_current_span("validation.request_rejected") as span:
        validation_errors = format_validation_errors(error)
        span.set_attributes({
            "validation.model": error.title,
            "validation.error_count": len(validation_errors),
            "http.path": request.path
        })

        logger.warning(
            "Request validation failed",
            extra={
                "model": error.title,
                "path": request.path,
                "method": request.method,
                "fields": [e["field"] for e in validation_errors]
            }
        )

        body = current_app.hal_formatter.format_validation_error(
            f"Request validation failed for {error.title}",
            request.path,
            validation_errors
        )
        return make_response(jsonify(body), VALIDATION_ERROR_STATUS)
