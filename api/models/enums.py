# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the Carteirinha Pet platform.
"""

from enum import Enum


class Species(str, Enum):
    """Supported pet species."""
    DOG = "cachorro"
    CAT = "gato"


class DueStatus(str, Enum):
    """Urgency of a vaccine's next dose relative to today."""
    NONE = "none"
    OVERDUE = "overdue"
    URGENT = "urgent"
    UPCOMING = "upcoming"
    UP_TO_DATE = "up_to_date"


class NotificationType(str, Enum):
    """Notification categories."""
    VACCINE_REMINDER = "vaccine_reminder"
    GENERAL = "general"
    SYSTEM = "system"


class NotificationFilter(str, Enum):
    """Notification list filters."""
    ALL = "all"
    UNREAD = "unread"
    VACCINE_REMINDER = "vaccine_reminder"
