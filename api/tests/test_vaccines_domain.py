# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for vaccine due-date classification and statistics.
"""

import pytest
from datetime import date, datetime, timedelta

from domain.vaccines import (
    classify_due_date,
    classify_for_stats,
    compute_vaccine_stats,
    compute_dashboard_stats,
    select_upcoming,
    status_label,
)
from models.entities import Vaccine
from models.enums import DueStatus

TODAY = date(2024, 1, 15)


def in_days(days: int) -> date:
    return TODAY + timedelta(days=days)


class TestClassifyDueDate:
    """Test the list and detail view classification."""

    @pytest.mark.parametrize("next_dose, expected", [
        (date(2024, 1, 10), DueStatus.OVERDUE),
        (date(2024, 1, 20), DueStatus.URGENT),
        (date(2024, 2, 1), DueStatus.UPCOMING),
        (date(2024, 3, 1), DueStatus.UP_TO_DATE),
        (None, DueStatus.NONE),
    ])
    def test_reference_dates(self, next_dose, expected):
        assert classify_due_date(next_dose, TODAY) == expected

    def test_due_today_is_urgent(self):
        assert classify_due_date(TODAY, TODAY) == DueStatus.URGENT

    def test_yesterday_is_overdue(self):
        assert classify_due_date(in_days(-1), TODAY) == DueStatus.OVERDUE

    def test_boundaries(self):
        """Thresholds are exclusive: day 7 is no longer urgent, day 30 no longer upcoming."""
        assert classify_due_date(in_days(6), TODAY) == DueStatus.URGENT
        assert classify_due_date(in_days(7), TODAY) == DueStatus.UPCOMING
        assert classify_due_date(in_days(29), TODAY) == DueStatus.UPCOMING
        assert classify_due_date(in_days(30), TODAY) == DueStatus.UP_TO_DATE

    def test_time_of_day_is_ignored(self):
        late_evening = datetime(2024, 1, 15, 23, 59)
        assert classify_due_date(date(2024, 1, 15), late_evening) == DueStatus.URGENT
        assert classify_due_date(datetime(2024, 1, 14, 23, 59), TODAY) == DueStatus.OVERDUE


class TestClassifyForStats:
    """Test the aggregate classification without the urgent split."""

    def test_urgent_window_counts_as_upcoming(self):
        assert classify_for_stats(in_days(3), TODAY) == DueStatus.UPCOMING
        assert classify_for_stats(TODAY, TODAY) == DueStatus.UPCOMING

    def test_other_statuses_match_view_classification(self):
        assert classify_for_stats(in_days(-5), TODAY) == DueStatus.OVERDUE
        assert classify_for_stats(in_days(29), TODAY) == DueStatus.UPCOMING
        assert classify_for_stats(in_days(30), TODAY) == DueStatus.UP_TO_DATE
        assert classify_for_stats(None, TODAY) == DueStatus.NONE


class TestStatusLabel:
    """Test badge text."""

    def test_labels(self):
        assert status_label(DueStatus.OVERDUE) == "Atrasada"
        assert status_label(DueStatus.URGENT) == "Urgente"
        assert status_label(DueStatus.UPCOMING) == "Próxima"
        assert status_label(DueStatus.UP_TO_DATE) == "Em dia"

    def test_no_label_without_next_dose(self):
        assert status_label(DueStatus.NONE) is None

    def test_accepts_raw_values(self):
        assert status_label("overdue") == "Atrasada"


class TestComputeVaccineStats:
    """Test vaccine page statistics."""

    def test_counts_by_status(self):
        dates = [in_days(-10), in_days(-1), in_days(2), in_days(20), in_days(45), None]
        stats = compute_vaccine_stats(dates, TODAY)

        assert stats.total == 6
        assert stats.overdue == 2
        assert stats.upcoming == 2
        assert stats.up_to_date == 2

    def test_counts_add_up(self):
        dates = [in_days(offset) for offset in range(-40, 60, 3)] + [None, None]
        stats = compute_vaccine_stats(dates, TODAY)
        assert stats.total == stats.overdue + stats.upcoming + stats.up_to_date

    def test_empty(self):
        assert compute_vaccine_stats([], TODAY).to_dict() == {
            "total": 0, "up_to_date": 0, "upcoming": 0, "overdue": 0
        }


class TestComputeDashboardStats:
    """Test dashboard statistics."""

    def test_counts(self):
        dates = [in_days(-3), in_days(5), in_days(25), in_days(90), None]
        stats = compute_dashboard_stats(2, dates, TODAY)

        assert stats.to_dict() == {
            "total_pets": 2,
            "total_vaccines": 5,
            "upcoming_vaccines": 2,
            "overdue_vaccines": 1,
        }

    def test_no_vaccines(self):
        stats = compute_dashboard_stats(1, [], TODAY)
        assert stats.total_pets == 1
        assert stats.total_vaccines == 0


class TestSelectUpcoming:
    """Test the upcoming vaccines widget selection."""

    def _vaccine(self, name, next_dose):
        return Vaccine(pet_id="pet-1", name=name, application_date=date(2023, 1, 1), next_dose_date=next_dose)

    def test_includes_overdue_and_sorts_by_due_date(self):
        vaccines = [
            self._vaccine("Raiva", in_days(10)),
            self._vaccine("V10", in_days(-2)),
            self._vaccine("Giárdia", in_days(31)),
            self._vaccine("Gripe", None),
            self._vaccine("Leishmaniose", in_days(1)),
        ]

        selected = select_upcoming(vaccines, TODAY)

        assert [v.name for v in selected] == ["V10", "Leishmaniose", "Raiva"]

    def test_horizon_is_inclusive(self):
        vaccines = [self._vaccine("Raiva", in_days(30))]
        assert len(select_upcoming(vaccines, TODAY)) == 1
        assert select_upcoming(vaccines, TODAY, horizon_days=29) == []

    def test_custom_key(self):
        rows = [{"next_dose_date": in_days(3)}, {"next_dose_date": in_days(90)}]
        selected = select_upcoming(rows, TODAY, key=lambda row: row["next_dose_date"])
        assert selected == [rows[0]]
