# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Notification domain logic for vaccine reminders.

This module contains pure functions that derive reminder notifications from
vaccine due dates and translate list filters into backend query filters.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple, Any

from models.entities import Notification, Vaccine
from models.enums import DueStatus, NotificationFilter, NotificationType
from domain.vaccines import DateLike, classify_due_date, to_calendar_date


REMINDER_STATUSES = (DueStatus.OVERDUE, DueStatus.URGENT)

QueryFilter = Tuple[str, str, Any]


def _format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def reminder_text(vaccine: Vaccine, status: DueStatus) -> Tuple[str, str]:
    """
    Build title and message for a vaccine reminder.

    Args:
        vaccine: Vaccine with a next dose date
        status: OVERDUE or URGENT

    Returns:
        Tuple of (title, message)
    """
    pet_name = vaccine.pet.name if vaccine.pet else "seu pet"
    due = _format_date(vaccine.next_dose_date)

    if status == DueStatus.OVERDUE:
        return (
            f"Vacina atrasada: {vaccine.name}",
            f"A dose de {vaccine.name} de {pet_name} estava prevista para {due}."
        )
    return (
        f"Vacina próxima: {vaccine.name}",
        f"A próxima dose de {vaccine.name} de {pet_name} vence em {due}."
    )


def build_vaccine_reminders(
    vaccines: Sequence[Vaccine],
    existing: Iterable[Notification],
    today: DateLike,
    user_id: Optional[str] = None
) -> List[Notification]:
    """
    Create reminders for overdue and urgent vaccines.

    A vaccine that already has an unread reminder is skipped, so running the
    sync repeatedly does not pile up duplicates.

    Args:
        vaccines: Vaccines of the user, with joined pet names when available
        existing: Notifications the user already has
        today: Current date
        user_id: Recipient user ID

    Returns:
        New notifications ready to be stored, earliest due date first
    """
    pending = {
        notification.vaccine_id
        for notification in existing
        if notification.type == NotificationType.VACCINE_REMINDER
        and not notification.is_read
        and notification.vaccine_id
    }

    reminders = []
    for vaccine in sorted(
        (v for v in vaccines if v.next_dose_date is not None),
        key=lambda v: v.next_dose_date
    ):
        if vaccine.id in pending:
            continue

        status = classify_due_date(vaccine.next_dose_date, today)
        if status not in REMINDER_STATUSES:
            continue

        title, message = reminder_text(vaccine, status)
        reminders.append(Notification(
            user_id=user_id,
            pet_id=vaccine.pet_id,
            vaccine_id=vaccine.id,
            title=title,
            message=message,
            type=NotificationType.VACCINE_REMINDER,
            is_read=False,
            scheduled_for=to_calendar_date(vaccine.next_dose_date)
        ))

    return reminders


def query_filters(notification_filter: NotificationFilter) -> List[QueryFilter]:
    """Translate a list filter into backend ``(operator, column, value)`` filters."""
    notification_filter = NotificationFilter(notification_filter)

    if notification_filter == NotificationFilter.UNREAD:
        return [("eq", "is_read", False)]
    if notification_filter == NotificationFilter.VACCINE_REMINDER:
        return [("eq", "type", NotificationType.VACCINE_REMINDER.value)]
    return []
