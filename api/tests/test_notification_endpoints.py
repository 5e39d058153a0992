# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for notification endpoints and the vaccine reminder sync.
"""

import json

from conftest import USER_ID, OTHER_USER_ID, days_from_today


class TestListNotifications:
    """Test GET /api/notifications."""

    def test_list_newest_first(self, client, backend, auth_headers):
        backend.add("notifications", user_id=USER_ID, title="Primeira", message="a")
        backend.add("notifications", user_id=USER_ID, title="Segunda", message="b", is_read=True)
        backend.add("notifications", user_id=OTHER_USER_ID, title="Alheia", message="c")

        response = client.get('/api/notifications', headers=auth_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [n['title'] for n in data['_embedded']['notifications']] == ["Segunda", "Primeira"]
        assert data['unread'] == 1

    def test_unread_filter(self, client, backend, auth_headers):
        backend.add("notifications", user_id=USER_ID, title="Nova", message="a")
        backend.add("notifications", user_id=USER_ID, title="Lida", message="b", is_read=True)

        data = json.loads(client.get('/api/notifications?filter=unread', headers=auth_headers).data)

        assert [n['title'] for n in data['_embedded']['notifications']] == ["Nova"]

    def test_vaccine_reminder_filter(self, client, backend, auth_headers):
        backend.add("notifications", user_id=USER_ID, title="Geral", message="a")
        backend.add("notifications", user_id=USER_ID, title="Vacina", message="b", type="vaccine_reminder")

        data = json.loads(client.get('/api/notifications?filter=vaccine_reminder', headers=auth_headers).data)

        assert [n['title'] for n in data['_embedded']['notifications']] == ["Vacina"]
        assert data['unread'] == 2

    def test_unknown_filter(self, client, auth_headers):
        response = client.get('/api/notifications?filter=archived', headers=auth_headers)
        assert response.status_code == 422


class TestMarkRead:
    """Test marking notifications as read."""

    def test_mark_one(self, client, backend, auth_headers):
        notification = backend.add("notifications", user_id=USER_ID, title="Nova", message="a")

        response = client.post(f"/api/notifications/{notification['id']}/read", headers=auth_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['is_read'] is True
        assert 'read' not in data['_links']

    def test_mark_other_users_notification(self, client, backend, auth_headers):
        notification = backend.add("notifications", user_id=OTHER_USER_ID, title="Alheia", message="a")

        response = client.post(f"/api/notifications/{notification['id']}/read", headers=auth_headers)

        assert response.status_code == 404
        assert backend.tables['notifications'][0]['is_read'] is False

    def test_mark_all(self, client, backend, auth_headers):
        backend.add("notifications", user_id=USER_ID, title="Um", message="a")
        backend.add("notifications", user_id=USER_ID, title="Dois", message="b")
        backend.add("notifications", user_id=USER_ID, title="Lida", message="c", is_read=True)
        backend.add("notifications", user_id=OTHER_USER_ID, title="Alheia", message="d")

        response = client.post('/api/notifications/read-all', headers=auth_headers)

        assert response.status_code == 200
        assert json.loads(response.data) == {"updated": 2}
        assert backend.tables['notifications'][3]['is_read'] is False


class TestDeleteNotification:
    """Test DELETE /api/notifications/<notification_id>."""

    def test_delete(self, client, backend, auth_headers):
        notification = backend.add("notifications", user_id=USER_ID, title="Nova", message="a")

        response = client.delete(f"/api/notifications/{notification['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert backend.tables['notifications'] == []

    def test_delete_missing(self, client, auth_headers):
        assert client.delete('/api/notifications/unknown', headers=auth_headers).status_code == 404


class TestVaccineReminders:
    """Test POST /api/notifications/reminders."""

    def test_creates_reminders(self, client, backend, pet, auth_headers):
        overdue = backend.add("vaccines", pet_id=pet['id'], name="V10",
                              application_date="2023-06-01", next_dose_date=days_from_today(-3))
        backend.add("vaccines", pet_id=pet['id'], name="Raiva",
                    application_date="2023-06-20", next_dose_date=days_from_today(6))
        backend.add("vaccines", pet_id=pet['id'], name="Gripe",
                    application_date="2023-07-01", next_dose_date=days_from_today(7))
        backend.add("vaccines", pet_id=pet['id'], name="Giárdia",
                    application_date="2024-01-05", next_dose_date=None)

        response = client.post('/api/notifications/reminders', headers=auth_headers)

        assert response.status_code == 201
        items = json.loads(response.data)['_embedded']['notifications']
        assert [item['title'] for item in items] == ["Vacina atrasada: V10", "Vacina próxima: Raiva"]
        assert items[0]['type'] == 'vaccine_reminder'
        assert items[0]['scheduled_for'] == days_from_today(-3)
        assert "Rex" in items[0]['message']

        stored = backend.tables['notifications']
        assert stored[0]['user_id'] == USER_ID
        assert stored[0]['vaccine_id'] == overdue['id']

    def test_second_sync_adds_nothing(self, client, backend, pet, auth_headers):
        backend.add("vaccines", pet_id=pet['id'], name="V10",
                    application_date="2023-06-01", next_dose_date=days_from_today(-3))

        client.post('/api/notifications/reminders', headers=auth_headers)
        response = client.post('/api/notifications/reminders', headers=auth_headers)

        assert json.loads(response.data)['total'] == 0
        assert len(backend.tables['notifications']) == 1

    def test_read_reminder_is_recreated(self, client, backend, pet, auth_headers):
        backend.add("vaccines", pet_id=pet['id'], name="V10",
                    application_date="2023-06-01", next_dose_date=days_from_today(-3))

        client.post('/api/notifications/reminders', headers=auth_headers)
        client.post('/api/notifications/read-all', headers=auth_headers)
        client.post('/api/notifications/reminders', headers=auth_headers)

        assert len(backend.tables['notifications']) == 2

    def test_no_vaccines(self, client, backend, auth_headers):
        response = client.post('/api/notifications/reminders', headers=auth_headers)

        assert response.status_code == 201
        assert backend.tables['notifications'] == []
