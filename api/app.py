# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Carteirinha Pet API - Flask Application Entry Point

This module builds the Flask application with OpenAPI 3.0 support,
configures middleware, and wires the backend gateway, token verification
and clock used by the pet vaccination record endpoints.
"""

import os
from typing import Any, Mapping, Optional

from flask import jsonify
from flask_openapi3 import OpenAPI, Info, Tag

from observability.config import setup_observability
from observability.middleware import add_observability_middleware
from middleware.auth import AuthMiddleware
from middleware.cors import configure_cors
from middleware.error_handler import ErrorHandlerMiddleware, register_custom_error_handlers
from middleware.validation import VALIDATION_ERROR_STATUS, validation_error_callback
from services.auth import AuthService
from services.backend import SupabaseBackend
from services.hal import create_hal_formatter
from services.health import HealthCheckService
from utils.clock import Clock, zone_clock, DEFAULT_TIMEZONE


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


def load_config() -> dict:
    """Read application settings from the environment."""
    environment = os.getenv('ENVIRONMENT', 'development')
    origins = os.getenv('CORS_ALLOWED_ORIGINS', '')

    return {
        'ENVIRONMENT': environment,
        'DEBUG': environment == 'development',
        'DOCS_ENABLED': _env_flag('DOCS_ENABLED', 'true'),
        'BASE_URL': os.getenv('BASE_URL', 'http://localhost:5000'),
        'SERVICE_VERSION': os.getenv('SERVICE_VERSION', '1.0.0'),

        # Backend
        'SUPABASE_URL': os.getenv('SUPABASE_URL', ''),
        'SUPABASE_ANON_KEY': os.getenv('SUPABASE_ANON_KEY', ''),
        'SUPABASE_SERVICE_KEY': os.getenv('SUPABASE_SERVICE_KEY', ''),
        'SUPABASE_JWT_SECRET': os.getenv('SUPABASE_JWT_SECRET', ''),
        'JWT_AUDIENCE': os.getenv('JWT_AUDIENCE', 'authenticated'),

        # Auth email links
        'EMAIL_REDIRECT_URL': os.getenv('EMAIL_REDIRECT_URL', ''),
        'PASSWORD_RESET_REDIRECT_URL': os.getenv('PASSWORD_RESET_REDIRECT_URL', ''),

        'APP_TIMEZONE': os.getenv('APP_TIMEZONE', DEFAULT_TIMEZONE),
        'CORS_ALLOWED_ORIGINS': [o.strip() for o in origins.split(',') if o.strip()],

        # Observability
        'OTEL_ENABLED': _env_flag('OTEL_ENABLED', 'false'),
        'OTEL_EXPORTER_OTLP_ENDPOINT': os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT', ''),
    }


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    backend: Optional[SupabaseBackend] = None,
    auth_service: Optional[AuthService] = None,
    clock: Optional[Clock] = None
) -> OpenAPI:
    """
    Build the application.

    Args:
        config: Settings overriding the environment
        backend: Backend gateway; built from config when omitted
        auth_service: Token verifier; built from config when omitted
        clock: Supplies today's date; defaults to the configured timezone

    Returns:
        Configured Flask application
    """
    settings = load_config()
    settings.update(config or {})

    setup_observability(settings)

    info = Info(
        title="Carteirinha Pet API",
        version=settings['SERVICE_VERSION'],
        description="Pet vaccination records, reminders and owner accounts with HATEOAS (HAL) responses"
    )

    app = OpenAPI(
        __name__,
        info=info,
        validation_error_status=VALIDATION_ERROR_STATUS,
        validation_error_callback=validation_error_callback,
        doc_ui=settings['DOCS_ENABLED']
    )
    app.config.update(settings)

    add_observability_middleware(app)

    # Services
    app.backend = backend or SupabaseBackend.from_config(app.config)
    app.auth_service = auth_service or AuthService(
        app.config['SUPABASE_JWT_SECRET'],
        audience=app.config['JWT_AUDIENCE']
    )
    app.clock = clock or zone_clock(app.config['APP_TIMEZONE'])
    app.hal_formatter = create_hal_formatter(app.config['BASE_URL'])
    app.auth_middleware = AuthMiddleware(app.auth_service)

    health_service = HealthCheckService(
        app.backend,
        app.auth_service,
        service_version=app.config['SERVICE_VERSION'],
        environment=app.config['ENVIRONMENT']
    )

    # Middleware
    configure_cors(app)
    ErrorHandlerMiddleware(app, app.hal_formatter)
    register_custom_error_handlers(app, app.hal_formatter)

    # Routes
    from routes.auth import auth_bp
    from routes.profile import profile_bp
    from routes.pets import pets_bp
    from routes.vaccines import vaccines_bp
    from routes.dashboard import dashboard_bp
    from routes.notifications import notifications_bp

    app.register_api(auth_bp)
    app.register_api(profile_bp)
    app.register_api(pets_bp)
    app.register_api(vaccines_bp)
    app.register_api(dashboard_bp)
    app.register_api(notifications_bp)

    health_tag = Tag(name="Health", description="System health and status")

    @app.get('/api/healthz', tags=[health_tag])
    def health_check():
        """Health check with dependency status."""
        health_data = health_service.get_comprehensive_health()
        health_data["_links"] = {
            "self": app.hal_formatter.links.build_self_link("/api/healthz").model_dump(exclude_none=True)
        }

        status_code = 503 if health_data["status"] == "unhealthy" else 200
        return jsonify(health_data), status_code

    return app


if __name__ == '__main__':
    application = create_app()
    application.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=application.config['DEBUG']
    )
