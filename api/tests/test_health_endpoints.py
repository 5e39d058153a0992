# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the health check endpoint.

This module tests dependency checks and status reporting for the
backend and token verification.
"""

import json

from services.auth import AuthService
from services.health import HealthCheckService


class TestHealthCheckEndpoint:
    """Test cases for the /api/healthz endpoint."""

    def test_health_check_all_healthy(self, client):
        """Test health check when every dependency is healthy."""
        response = client.get('/api/healthz')

        assert response.status_code == 200
        data = json.loads(response.data)

        assert data['status'] == 'healthy'
        assert data['service'] == 'carteirinha-pet-api'
        assert data['environment'] == 'test'
        assert 'timestamp' in data
        assert data['dependencies']['backend']['status'] == 'healthy'
        assert data['dependencies']['auth']['status'] == 'healthy'
        assert data['_links']['self']['href'].endswith('/api/healthz')

    def test_health_check_backend_down(self, client, backend):
        """Unreachable backend makes the service unhealthy."""
        backend.healthy = False

        response = client.get('/api/healthz')

        assert response.status_code == 503
        data = json.loads(response.data)
        assert data['status'] == 'unhealthy'
        assert data['dependencies']['backend']['status'] == 'unhealthy'

    def test_health_check_does_not_need_token(self, client):
        response = client.get('/api/healthz')
        assert response.status_code == 200


class TestHealthCheckService:
    """Test cases for HealthCheckService."""

    def test_missing_secret_is_degraded(self, backend):
        service = HealthCheckService(backend, AuthService(""))

        health = service.get_comprehensive_health()

        assert health['status'] == 'degraded'
        assert health['dependencies']['auth']['status'] == 'degraded'

    def test_unhealthy_wins_over_degraded(self, backend):
        backend.healthy = False
        service = HealthCheckService(backend, AuthService(""), service_version="2.0.0")

        health = service.get_comprehensive_health()

        assert health['status'] == 'unhealthy'
        assert health['version'] == '2.0.0'
