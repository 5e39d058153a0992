# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Clock utilities supplying "today" to the date classifiers.

Due dates are calendar dates in the owner's timezone, so "today" is taken
in the configured zone rather than from the server's local time.
"""

from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], date]

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def zone_clock(timezone_name: str = DEFAULT_TIMEZONE) -> Clock:
    """Clock returning the current calendar date in the given IANA zone."""
    zone = ZoneInfo(timezone_name)

    def today() -> date:
        return datetime.now(zone).date()

    return today


def fixed_clock(value: date) -> Clock:
    """Clock that always returns the same date."""
    return lambda: value
