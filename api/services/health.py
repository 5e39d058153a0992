# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Health Check Service

Reports reachability of the data backend and whether token verification
is configured.
"""

import time
from datetime import datetime, timezone
from typing import Dict, Any, List
from opentelemetry import trace

from services.auth import AuthService
from services.backend import SupabaseBackend

tracer = trace.get_tracer(__name__)

SERVICE_NAME = "carteirinha-pet-api"


class HealthCheckService:
    """Service for system health monitoring."""

    def __init__(
        self,
        backend: SupabaseBackend,
        auth_service: AuthService,
        service_version: str = "1.0.0",
        environment: str = "development"
    ):
        self.backend = backend
        self.auth_service = auth_service
        self.service_version = service_version
        self.environment = environment

    def get_comprehensive_health(self) -> Dict[str, Any]:
        """Get health status including all dependencies."""
        with tracer.start_as_current_span("health.comprehensive_check") as span:
            start_time = time.time()

            backend_health = self._check_backend_health()
            auth_health = self._check_auth_health()

            overall_status = self._determine_overall_status([
                backend_health["status"],
                auth_health["status"]
            ])

            response_time_ms = round((time.time() - start_time) * 1000, 2)

            span.set_attributes({
                "health.overall_status": overall_status,
                "health.response_time_ms": response_time_ms,
                "health.backend_status": backend_health["status"]
            })

            return {
                "status": overall_status,
                "service": SERVICE_NAME,
                "version": self.service_version,
                "environment": self.environment,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "response_time_ms": response_time_ms,
                "dependencies": {
                    "backend": backend_health,
                    "auth": auth_health
                }
            }

    def _check_backend_health(self) -> Dict[str, Any]:
        """Check the data backend answers a trivial query."""
        with tracer.start_as_current_span("health.backend_check") as span:
            start_time = time.time()
            reachable = self.backend.ping()
            response_time = round((time.time() - start_time) * 1000, 2)

            status = "healthy" if reachable else "unhealthy"
            span.set_attributes({
                "backend.status": status,
                "backend.response_time_ms": response_time
            })

            return {
                "status": status,
                "response_time_ms": response_time,
                "last_check": datetime.now(timezone.utc).isoformat()
            }

    def _check_auth_health(self) -> Dict[str, Any]:
        """Token verification needs a signing secret."""
        if self.auth_service.jwt_secret:
            return {"status": "healthy"}
        return {"status": "degraded", "error": "JWT secret not configured"}

    def _determine_overall_status(self, statuses: List[str]) -> str:
        if "unhealthy" in statuses:
            return "unhealthy"
        if "degraded" in statuses:
            return "degraded"
        return "healthy"
