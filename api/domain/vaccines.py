# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Vaccine due-date classification and statistics.

This module contains pure functions that turn a vaccine's next dose date
into an urgency status and aggregate those statuses for the dashboard and
vaccine statistics.

Two policies coexist and must not be merged:

* list and detail views use ``classify_due_date``, which splits the next
  30 days into URGENT (under 7 days) and UPCOMING;
* aggregate counts use ``classify_for_stats``, which only knows the
  30-day boundary.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, TypeVar, Union

from models.enums import DueStatus


URGENT_WINDOW_DAYS = 7
UPCOMING_WINDOW_DAYS = 30

STATUS_LABELS = {
    DueStatus.OVERDUE: "Atrasada",
    DueStatus.URGENT: "Urgente",
    DueStatus.UPCOMING: "Próxima",
    DueStatus.UP_TO_DATE: "Em dia",
}

DateLike = Union[date, datetime]
T = TypeVar('T')


@dataclass
class VaccineStats:
    """Counts shown on the vaccines page."""
    total: int = 0
    up_to_date: int = 0
    upcoming: int = 0
    overdue: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DashboardStats:
    """Counts shown on the dashboard."""
    total_pets: int = 0
    total_vaccines: int = 0
    upcoming_vaccines: int = 0
    overdue_vaccines: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def to_calendar_date(value: DateLike) -> date:
    """Drop the time of day so comparisons happen on calendar dates."""
    if isinstance(value, datetime):
        return value.date()
    return value


def classify_due_date(next_dose_date: Optional[DateLike], today: DateLike) -> DueStatus:
    """
    Classify a next dose date for list and detail views.

    Args:
        next_dose_date: Scheduled date of the next dose, if any
        today: Current date, supplied by the caller

    Returns:
        NONE when no dose is scheduled, otherwise OVERDUE, URGENT,
        UPCOMING or UP_TO_DATE
    """
    if next_dose_date is None:
        return DueStatus.NONE

    due = to_calendar_date(next_dose_date)
    today = to_calendar_date(today)

    if due < today:
        return DueStatus.OVERDUE
    if due < today + timedelta(days=URGENT_WINDOW_DAYS):
        return DueStatus.URGENT
    if due < today + timedelta(days=UPCOMING_WINDOW_DAYS):
        return DueStatus.UPCOMING
    return DueStatus.UP_TO_DATE


def classify_for_stats(next_dose_date: Optional[DateLike], today: DateLike) -> DueStatus:
    """
    Classify a next dose date for aggregate counts.

    Same as ``classify_due_date`` without the 7-day URGENT split: anything
    due within 30 days is UPCOMING.
    """
    if next_dose_date is None:
        return DueStatus.NONE

    due = to_calendar_date(next_dose_date)
    today = to_calendar_date(today)

    if due < today:
        return DueStatus.OVERDUE
    if due < today + timedelta(days=UPCOMING_WINDOW_DAYS):
        return DueStatus.UPCOMING
    return DueStatus.UP_TO_DATE


def status_label(status: DueStatus) -> Optional[str]:
    """Badge text for a status; vaccines without a next dose get no badge."""
    return STATUS_LABELS.get(DueStatus(status))


def compute_vaccine_stats(next_dose_dates: Iterable[Optional[DateLike]], today: DateLike) -> VaccineStats:
    """
    Count vaccines by aggregate status.

    A vaccine without a next dose date counts as up to date.
    """
    stats = VaccineStats()

    for next_dose_date in next_dose_dates:
        stats.total += 1
        status = classify_for_stats(next_dose_date, today)
        if status == DueStatus.OVERDUE:
            stats.overdue += 1
        elif status == DueStatus.UPCOMING:
            stats.upcoming += 1
        else:
            stats.up_to_date += 1

    return stats


def compute_dashboard_stats(
    total_pets: int,
    next_dose_dates: Iterable[Optional[DateLike]],
    today: DateLike
) -> DashboardStats:
    """
    Count pets and vaccines for the dashboard cards.

    Unlike ``compute_vaccine_stats`` only overdue and upcoming vaccines are
    broken out; the rest appear in the total alone.
    """
    stats = DashboardStats(total_pets=total_pets)

    for next_dose_date in next_dose_dates:
        stats.total_vaccines += 1
        status = classify_for_stats(next_dose_date, today)
        if status == DueStatus.OVERDUE:
            stats.overdue_vaccines += 1
        elif status == DueStatus.UPCOMING:
            stats.upcoming_vaccines += 1

    return stats


def select_upcoming(
    vaccines: Sequence[T],
    today: DateLike,
    horizon_days: int = UPCOMING_WINDOW_DAYS,
    key=lambda vaccine: vaccine.next_dose_date
) -> List[T]:
    """
    Pick vaccines due on or before ``today + horizon_days``.

    Overdue doses are included. The horizon is inclusive, matching the
    ``lte`` filter the upcoming widget sends to the backend.

    Args:
        vaccines: Records to filter
        today: Current date
        horizon_days: Days ahead to include
        key: Extracts the next dose date from a record

    Returns:
        Matching records sorted by next dose date, earliest first
    """
    limit = to_calendar_date(today) + timedelta(days=horizon_days)
    selected = [
        vaccine for vaccine in vaccines
        if key(vaccine) is not None and to_calendar_date(key(vaccine)) <= limit
    ]
    return sorted(selected, key=lambda vaccine: to_calendar_date(key(vaccine)))
