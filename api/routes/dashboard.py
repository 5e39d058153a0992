# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Dashboard summary endpoint.
"""

from flask import jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from domain.vaccines import compute_dashboard_stats
from models.entities import parse_next_dose_dates
from models.responses import DashboardStatsResponse
from middleware.auth import require_jwt
from utils.request import current_user, current_backend, today

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

dashboard_tag = Tag(name="Dashboard", description="Home screen summary")
dashboard_bp = APIBlueprint(
    'dashboard',
    __name__,
    url_prefix='/api/dashboard',
    abp_tags=[dashboard_tag]
)


@dashboard_bp.get('/stats', responses={200: DashboardStatsResponse})
@require_jwt
def dashboard_stats():
    """
    Pet and vaccine counts for the home screen.

    Upcoming means due within 30 days; doses without a next dose date only
    count toward the total.
    """
    user = current_user()

    with tracer.start_as_current_span("dashboard.stats", attributes={"user.id": user.user_id}) as span:
        backend = current_backend()
        total_pets = backend.count("pets", user.access_token)
        rows = backend.select("vaccines", user.access_token, columns="next_dose_date")

        stats = compute_dashboard_stats(total_pets, parse_next_dose_dates(rows), today())

        span.set_attributes({
            "dashboard.total_pets": stats.total_pets,
            "dashboard.overdue_vaccines": stats.overdue_vaccines
        })
        return jsonify(stats.to_dict()), 200
