"""
HTTP tests for admin endpoints: moderation queue, verification, user
management, bans and report triage.
"""

from datetime import datetime, timedelta, timezone

import repositories.db_models as db_models


class TestModerationQueue:
    def test_moderator_sees_all_states(
        self, client, moderator_headers, approved_entry, pending_entry
    ):
        response = client.get("/api/admin/entries", headers=moderator_headers)

        assert response.status_code == 200
        assert {e["id"] for e in response.json()} == {
            approved_entry.id,
            pending_entry.id,
        }

    def test_status_filter(self, client, moderator_headers, approved_entry, pending_entry):
        response = client.get(
            "/api/admin/entries",
            params={"status": "pending"},
            headers=moderator_headers,
        )
        assert [e["id"] for e in response.json()] == [pending_entry.id]

    def test_regular_user_forbidden(self, client, auth_headers):
        response = client.get("/api/admin/entries", headers=auth_headers)
        assert response.status_code == 403

    def test_moderate_rejects_pending_value(
        self, client, moderator_headers, approved_entry
    ):
        response = client.patch(
            f"/api/admin/entries/{approved_entry.id}/moderate",
            json={"status": "pending"},
            headers=moderator_headers,
        )

        assert response.status_code == 422
        assert response.json()["field"] == "status"

    def test_moderate_unknown_value(self, client, moderator_headers, pending_entry):
        response = client.patch(
            f"/api/admin/entries/{pending_entry.id}/moderate",
            json={"status": "banana"},
            headers=moderator_headers,
        )
        assert response.status_code == 422

    def test_moderate_missing_entry(self, client, moderator_headers):
        response = client.patch(
            "/api/admin/entries/missing/moderate",
            json={"status": "approved"},
            headers=moderator_headers,
        )
        assert response.status_code == 404


class TestVerification:
    def test_admin_verifies(self, client, admin_headers, pending_entry):
        response = client.patch(
            f"/api/admin/entries/{pending_entry.id}/verify",
            json={"verification": "verified"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["verification"] == "verified"
        assert response.json()["status"] == "pending"

    def test_moderator_cannot_verify(self, client, moderator_headers, pending_entry):
        response = client.patch(
            f"/api/admin/entries/{pending_entry.id}/verify",
            json={"verification": "fake"},
            headers=moderator_headers,
        )
        assert response.status_code == 403

    def test_legacy_admin_flag_is_honoured(
        self, client, db_session, test_user, auth_headers, pending_entry
    ):
        test_user.is_admin = True
        db_session.commit()

        response = client.patch(
            f"/api/admin/entries/{pending_entry.id}/verify",
            json={"verification": "fake"},
            headers=auth_headers,
        )
        assert response.status_code == 200

    def test_admin_delete_cascades(
        self, client, admin_headers, db_session, other_user, approved_entry
    ):
        entry_id = approved_entry.id
        db_session.add(
            db_models.Comment(entry_id=entry_id, user_id=other_user.id, content="c")
        )
        db_session.add(db_models.Like(entry_id=entry_id, user_id=other_user.id))
        db_session.commit()

        response = client.delete(f"/api/admin/entries/{entry_id}", headers=admin_headers)

        assert response.status_code == 204
        assert db_session.query(db_models.Comment).count() == 0
        assert db_session.query(db_models.Like).count() == 0


class TestUserManagement:
    def test_list_users(self, client, admin_headers, test_user, approved_entry):
        response = client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        counts = {u["id"]: u["entry_count"] for u in response.json()}
        assert counts[test_user.id] == 1

    def test_moderator_cannot_list_users(self, client, moderator_headers):
        response = client.get("/api/admin/users", headers=moderator_headers)
        assert response.status_code == 403

    def test_promote_to_moderator(self, client, admin_headers, test_user, pending_entry):
        response = client.patch(
            f"/api/admin/users/{test_user.id}/role",
            json={"role": "moderator"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["role"] == "moderator"

    def test_invalid_role(self, client, admin_headers, test_user):
        response = client.patch(
            f"/api/admin/users/{test_user.id}/role",
            json={"role": "superuser"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_admin_cannot_demote_self(self, client, admin_headers, admin_user):
        response = client.patch(
            f"/api/admin/users/{admin_user.id}/role",
            json={"role": "user"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_badge(self, client, admin_headers, test_user):
        response = client.patch(
            f"/api/admin/users/{test_user.id}/badge",
            json={"badge": "black_check"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["badge"] == "black_check"

    def test_invalid_badge(self, client, admin_headers, test_user):
        response = client.patch(
            f"/api/admin/users/{test_user.id}/badge",
            json={"badge": "gold_star"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_delete_user(self, client, admin_headers, db_session, test_user, approved_entry):
        user_id = test_user.id
        response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)

        assert response.status_code == 204
        assert db_session.get(db_models.User, user_id) is None
        assert db_session.query(db_models.WikiEntry).count() == 0

    def test_delete_user_keeps_other_authors_content(
        self, client, admin_headers, auth_headers, db_session, test_user, other_user
    ):
        foreign = db_models.WikiEntry(
            user_id=other_user.id,
            title="Foreign",
            description="Kept",
            status=db_models.EntryStatus.APPROVED,
        )
        db_session.add(foreign)
        db_session.commit()
        foreign_id = foreign.id

        own_ids = [
            client.post(
                "/api/entries",
                json={"title": title, "description": "D"},
                headers=auth_headers,
            ).json()["id"]
            for title in ("One", "Two")
        ]
        for entry_id, content in (
            (own_ids[0], "Own"),
            (foreign_id, "Elsewhere"),
            (foreign_id, "Again"),
        ):
            created = client.post(
                "/api/comments",
                json={"entry_id": entry_id, "content": content},
                headers=auth_headers,
            )
            assert created.status_code == 201
        liked = client.post(
            "/api/likes", json={"entry_id": foreign_id}, headers=auth_headers
        )
        assert liked.status_code == 201

        response = client.delete(
            f"/api/admin/users/{test_user.id}", headers=admin_headers
        )

        assert response.status_code == 204
        assert client.get(f"/api/entries/{foreign_id}").status_code == 200
        assert client.get(f"/api/entries/{foreign_id}/comments").json() == []
        assert client.get(f"/api/entries/{foreign_id}/likes").json() == []
        db_session.expire_all()
        assert db_session.query(db_models.Comment).count() == 0
        assert db_session.query(db_models.Like).count() == 0
        assert db_session.query(db_models.WikiEntry).all() == [
            db_session.get(db_models.WikiEntry, foreign_id)
        ]


class TestBans:
    def test_banned_user_is_locked_out(
        self, client, admin_headers, auth_headers, test_user
    ):
        ban = client.post(
            f"/api/admin/users/{test_user.id}/ban",
            json={"reason": "spam"},
            headers=admin_headers,
        )
        assert ban.status_code == 200
        assert ban.json()["is_banned"] is True
        assert ban.json()["banned_until"] is None

        response = client.post(
            "/api/entries",
            json={"title": "T", "description": "D"},
            headers=auth_headers,
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "spam"
        assert response.json()["expires_at"] is None

    def test_temporary_ban_reports_expiry(
        self, client, admin_headers, auth_headers, test_user
    ):
        client.post(
            f"/api/admin/users/{test_user.id}/ban",
            json={"reason": "cool off", "hours": 2},
            headers=admin_headers,
        )

        response = client.get("/api/entries/mine", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["expires_at"] is not None

    def test_expired_ban_is_lifted_on_request(
        self, client, db_session, auth_headers, test_user
    ):
        test_user.is_banned = True
        test_user.ban_reason = "old"
        test_user.banned_until = datetime.now(timezone.utc) - timedelta(seconds=1)
        db_session.commit()

        response = client.get("/api/entries/mine", headers=auth_headers)

        assert response.status_code == 200
        db_session.expire_all()
        stored = db_session.get(db_models.User, test_user.id)
        assert stored.is_banned is False
        assert stored.ban_reason is None
        assert stored.banned_until is None

    def test_ban_requires_reason(self, client, admin_headers, test_user):
        response = client.post(
            f"/api/admin/users/{test_user.id}/ban", json={}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_admin_cannot_ban_self(self, client, admin_headers, admin_user):
        response = client.post(
            f"/api/admin/users/{admin_user.id}/ban",
            json={"reason": "test"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_unban(self, client, admin_headers, auth_headers, test_user):
        client.post(
            f"/api/admin/users/{test_user.id}/ban",
            json={"reason": "spam"},
            headers=admin_headers,
        )
        response = client.post(
            f"/api/admin/users/{test_user.id}/unban", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["is_banned"] is False
        assert client.get("/api/entries/mine", headers=auth_headers).status_code == 200


class TestReportTriage:
    def _file_report(self, client, headers, entry_id, reason="spam"):
        response = client.post(
            "/api/reports",
            json={"entry_id": entry_id, "reason": reason},
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()

    def test_list_and_filter(
        self, client, other_headers, moderator_headers, approved_entry
    ):
        report = self._file_report(client, other_headers, approved_entry.id)

        listed = client.get("/api/admin/reports", headers=moderator_headers)
        assert listed.status_code == 200
        assert listed.json()[0]["entry"]["author"]["id"] == approved_entry.user_id

        client.patch(
            f"/api/admin/reports/{report['id']}/status",
            json={"status": "dismissed"},
            headers=moderator_headers,
        )
        pending = client.get(
            "/api/admin/reports",
            params={"status": "pending"},
            headers=moderator_headers,
        )
        assert pending.json() == []

    def test_invalid_status(self, client, other_headers, moderator_headers, approved_entry):
        report = self._file_report(client, other_headers, approved_entry.id)

        response = client.patch(
            f"/api/admin/reports/{report['id']}/status",
            json={"status": "archived"},
            headers=moderator_headers,
        )
        assert response.status_code == 422

    def test_delete_report(
        self, client, other_headers, moderator_headers, approved_entry
    ):
        report = self._file_report(client, other_headers, approved_entry.id)

        response = client.delete(
            f"/api/admin/reports/{report['id']}", headers=moderator_headers
        )
        assert response.status_code == 204
        assert client.get("/api/admin/reports", headers=moderator_headers).json() == []

    def test_regular_user_cannot_triage(self, client, auth_headers):
        response = client.get("/api/admin/reports", headers=auth_headers)
        assert response.status_code == 403
