# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Notification endpoints.

This module implements listing with filters, marking as read, deletion and
the vaccine reminder sync that turns overdue and urgent doses into
notifications.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging
from typing import Dict, Any

from domain import notifications as notification_domain
from models.entities import Notification, Vaccine
from models.enums import NotificationType
from models.requests import NotificationQuery, NotificationPath
from models.responses import NotificationResponse
from middleware.auth import require_jwt
from middleware.error_handler import NotFoundException
from utils.request import current_user, current_backend, today, get_request_context

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

NOTIFICATION_COLUMNS = "*, pets:pet_id (name, species), vaccines:vaccine_id (name)"
REMINDER_VACCINE_COLUMNS = "id, pet_id, name, application_date, next_dose_date, pets:pet_id (name, species)"
NOTIFICATION_NOT_FOUND = "Notificação não encontrada"

STORED_FIELDS = {
    "user_id", "pet_id", "vaccine_id", "title", "message", "type", "is_read", "scheduled_for"
}

notifications_tag = Tag(name="Notifications", description="Reminders and account notices")
notifications_bp = APIBlueprint(
    'notifications',
    __name__,
    url_prefix='/api/notifications',
    abp_tags=[notifications_tag]
)


def notification_resource(row: Dict[str, Any]) -> Dict[str, Any]:
    """Parse a backend row and format it as a HAL resource."""
    notification = Notification.model_validate(row)
    return current_app.hal_formatter.format_notification(
        notification.model_dump(mode='json', exclude={'user_id'})
    )


@notifications_bp.get('')
@require_jwt
def list_notifications(query: NotificationQuery):
    """
    List notifications, newest first.

    ``filter`` is ``all`` (default), ``unread`` or ``vaccine_reminder``.
    ``unread`` in the body counts every unread notification of the user,
    whatever the filter.
    """
    user = current_user()

    with tracer.start_as_current_span(
        "notification.list",
        attributes={"user.id": user.user_id, "notification.filter": query.filter.value}
    ) as span:
        backend = current_backend()
        rows = backend.select(
            "notifications",
            user.access_token,
            columns=NOTIFICATION_COLUMNS,
            filters=notification_domain.query_filters(query.filter),
            order_by="created_at",
            descending=True
        )
        items = [notification_resource(row) for row in rows]
        unread = backend.count("notifications", user.access_token, [("eq", "is_read", False)])

        span.set_attributes({"notification.count": len(items), "notification.unread": unread})
        response = current_app.hal_formatter.format_collection("notifications", items, "/api/notifications")
        response["unread"] = unread
        return jsonify(response), 200


@notifications_bp.post('/<notification_id>/read', responses={200: NotificationResponse})
@require_jwt
def mark_notification_read(path: NotificationPath):
    """Mark one notification as read."""
    with tracer.start_as_current_span("notification.mark_read", attributes={"notification.id": path.notification_id}):
        row = current_backend().update(
            "notifications", current_user().access_token, path.notification_id, {"is_read": True}
        )
        if row is None:
            raise NotFoundException(NOTIFICATION_NOT_FOUND)
        return jsonify(notification_resource(row)), 200


@notifications_bp.post('/read-all')
@require_jwt
def mark_all_notifications_read():
    """Mark every unread notification as read."""
    user = current_user()

    with tracer.start_as_current_span("notification.mark_all_read", attributes={"user.id": user.user_id}) as span:
        rows = current_backend().update_where(
            "notifications",
            user.access_token,
            [("eq", "is_read", False)],
            {"is_read": True}
        )

        span.set_attribute("notification.updated", len(rows))
        logger.info("Notifications marked as read", extra={**get_request_context(), "updated": len(rows)})
        return jsonify({"updated": len(rows)}), 200


@notifications_bp.delete('/<notification_id>')
@require_jwt
def delete_notification(path: NotificationPath):
    """Delete a notification."""
    with tracer.start_as_current_span("notification.delete", attributes={"notification.id": path.notification_id}):
        if not current_backend().delete("notifications", current_user().access_token, path.notification_id):
            raise NotFoundException(NOTIFICATION_NOT_FOUND)
        return '', 204


@notifications_bp.post('/reminders')
@require_jwt
def sync_vaccine_reminders():
    """
    Create reminders for overdue and urgent vaccine doses.

    A dose that already has an unread reminder gets no new one, so the
    sync can run on every sign in.
    """
    user = current_user()

    with tracer.start_as_current_span("notification.sync_reminders", attributes={"user.id": user.user_id}) as span:
        backend = current_backend()

        vaccines = [
            Vaccine.model_validate(row)
            for row in backend.select(
                "vaccines",
                user.access_token,
                columns=REMINDER_VACCINE_COLUMNS,
                filters=[("not_is", "next_dose_date", "null")]
            )
        ]
        existing = [
            Notification.model_validate(row)
            for row in backend.select(
                "notifications",
                user.access_token,
                filters=[
                    ("eq", "type", NotificationType.VACCINE_REMINDER.value),
                    ("eq", "is_read", False)
                ]
            )
        ]

        reminders = notification_domain.build_vaccine_reminders(vaccines, existing, today(), user.user_id)
        rows = backend.insert_many(
            "notifications",
            user.access_token,
            [reminder.model_dump(mode='json', include=STORED_FIELDS) for reminder in reminders]
        )

        span.set_attribute("notification.created", len(rows))
        span.set_status(Status(StatusCode.OK))
        logger.info(
            "Vaccine reminders synced",
            extra={**get_request_context(), "created": len(rows), "vaccines_checked": len(vaccines)}
        )

        items = [notification_resource(row) for row in rows]
        return jsonify(current_app.hal_formatter.format_collection(
            "notifications", items, "/api/notifications"
        )), 201
