"""Tests for the guest flow: joining, authorizing, scoring and results."""

from datetime import timedelta

import pytest

from src.config import get_settings
from src.exceptions import (
    ExpiredError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from src.models.mixins import utcnow
from src.models.session_guest import SessionGuest
from src.models.tasting import TastingEntry, TastingSession
from src.services.auth import GuestClaims, hash_guest_token
from src.services.guest_access import GuestAccessController
from src.services.tasting_service import TastingService


def score(client, code, entry_id, headers, **payload):
    return client.post(
        f"/api/v1/guest-sessions/{code}/entries/{entry_id}/score",
        headers=headers,
        json=payload,
    )


class TestJoin:
    def test_join(self, client, social_tasting, db):
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": social_tasting["session_code"].lower(), "guest_name": " Sam "},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["guest_name"] == "Sam"
        assert data["session_code"] == social_tasting["session_code"]
        assert data["session_id"] == social_tasting["id"]
        assert data["session_name"] == "Friday Reds"
        assert data["venue"] == "Home"

        guest = db.get(SessionGuest, data["guest_id"])
        assert guest.guest_token_hash == hash_guest_token(data["token"])
        assert guest.guest_token_hash != data["token"]

    def test_unknown_code(self, client, social_tasting):
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": "ZZZZZZ", "guest_name": "Sam"},
        )
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_never_enabled_is_forbidden(self, client, auth_headers, tasting):
        code = client.post(
            f"/api/v1/tastings/{tasting['id']}/join-code", headers=auth_headers
        ).json()["session_code"]
        response = client.post(
            "/api/v1/guest-sessions/join", json={"session_code": code, "guest_name": "Sam"}
        )
        assert response.status_code == 403
        assert response.json()["kind"] == "forbidden"

    def test_disabled_is_forbidden(self, client, auth_headers, social_tasting):
        client.patch(
            f"/api/v1/tastings/{social_tasting['id']}/social-mode",
            headers=auth_headers,
            json={"enabled": False},
        )
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": social_tasting["session_code"], "guest_name": "Sam"},
        )
        assert response.status_code == 403

    def test_expired_invite(self, client, social_tasting, db):
        session = db.get(TastingSession, social_tasting["id"])
        session.invite_expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": social_tasting["session_code"], "guest_name": "Sam"},
        )
        assert response.status_code == 410
        assert response.json()["kind"] == "expired"

    def test_reenable_refreshes_expired_invite(self, client, auth_headers, social_tasting, db):
        session = db.get(TastingSession, social_tasting["id"])
        session.invite_expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        client.patch(
            f"/api/v1/tastings/{social_tasting['id']}/social-mode",
            headers=auth_headers,
            json={"enabled": True},
        )
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": social_tasting["session_code"], "guest_name": "Sam"},
        )
        assert response.status_code == 200

    def test_rejoin_is_a_new_guest(self, social_tasting, join_guest):
        first, _ = join_guest(social_tasting["session_code"], "Sam")
        second, _ = join_guest(social_tasting["session_code"], "Sam")
        assert first != second

    def test_blank_name_is_rejected(self, client, social_tasting, db):
        response = client.post(
            "/api/v1/guest-sessions/join",
            json={"session_code": social_tasting["session_code"], "guest_name": "   "},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"
        assert db.query(SessionGuest).count() == 0


class TestGuestAuthorization:
    def test_guest_view(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        join_guest(code, "Lee")

        response = client.get(f"/api/v1/guest-sessions/{code}", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["session"]["name"] == "Friday Reds"
        assert data["session"]["is_social_mode"] is True
        assert [e["ad_hoc_name"] for e in data["host_entries"]] == ["Rioja Reserva", "Barolo"]
        assert data["my_entries"] == []
        assert {g["guest_name"] for g in data["guests"]} == {"Sam", "Lee"}

    def test_code_in_path_is_case_insensitive(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        response = client.get(f"/api/v1/guest-sessions/{code.lower()}", headers=headers)
        assert response.status_code == 200

    def test_token_for_other_session_is_forbidden(
        self, client, auth_headers, social_tasting, join_guest
    ):
        other = client.post("/api/v1/tastings", headers=auth_headers, json={"name": "Other"})
        other_code = client.patch(
            f"/api/v1/tastings/{other.json()['id']}/social-mode",
            headers=auth_headers,
            json={"enabled": True},
        ).json()["session_code"]

        _, headers = join_guest(social_tasting["session_code"], "Sam")
        response = client.get(f"/api/v1/guest-sessions/{other_code}", headers=headers)
        assert response.status_code == 403

    def test_guest_token_rejected_by_owner_endpoints(self, client, social_tasting, join_guest):
        _, headers = join_guest(social_tasting["session_code"], "Sam")
        response = client.get("/api/v1/tastings", headers=headers)
        assert response.status_code == 401

    def test_owner_token_rejected_by_guest_endpoints(self, client, auth_headers, social_tasting):
        response = client.get(
            f"/api/v1/guest-sessions/{social_tasting['session_code']}", headers=auth_headers
        )
        assert response.status_code == 401

    def test_missing_token(self, client, social_tasting):
        response = client.get(f"/api/v1/guest-sessions/{social_tasting['session_code']}")
        assert response.status_code == 401


class TestGuestScoring:
    def test_score_twice_keeps_one_row(self, client, social_tasting, join_guest, db):
        code = social_tasting["session_code"]
        entry = social_tasting["entries"][0]
        guest_id, headers = join_guest(code, "Sam")

        first = score(client, code, entry["id"], headers, total_score=75, notes_short="Oaky")
        assert first.status_code == 201
        assert first.json()["parent_entry_id"] == entry["id"]
        assert first.json()["ad_hoc_name"] == "Rioja Reserva"
        assert first.json()["guest_name"] == "Sam"

        second = score(
            client,
            code,
            entry["id"],
            headers,
            total_score=82,
            tasting_notes={"casualVibes": "cosy", "brandNewKey": "kept"},
        )
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["total_score"] == 82
        assert second.json()["notes_short"] == "Oaky"
        assert second.json()["tasting_notes"] == {"casualVibes": "cosy", "brandNewKey": "kept"}

        rows = db.query(TastingEntry).filter(TastingEntry.guest_id == guest_id).all()
        assert len(rows) == 1

        view = client.get(f"/api/v1/guest-sessions/{code}", headers=headers).json()
        assert [e["total_score"] for e in view["my_entries"]] == [82]
        assert len(view["host_entries"]) == 2

    def test_score_unknown_entry(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        assert score(client, code, 9999, headers, total_score=50).status_code == 404

    def test_cannot_score_a_guest_entry(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        entry = social_tasting["entries"][0]
        _, sam = join_guest(code, "Sam")
        _, lee = join_guest(code, "Lee")
        guest_entry = score(client, code, entry["id"], sam, total_score=70).json()

        response = score(client, code, guest_entry["id"], lee, total_score=10)
        assert response.status_code == 404

    def test_score_out_of_range(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        entry = social_tasting["entries"][0]
        assert score(client, code, entry["id"], headers, total_score=-1).status_code == 422

    def test_scoring_continues_after_disable(
        self, client, auth_headers, social_tasting, join_guest
    ):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        client.patch(
            f"/api/v1/tastings/{social_tasting['id']}/social-mode",
            headers=auth_headers,
            json={"enabled": False},
        )
        entry = social_tasting["entries"][0]
        assert score(client, code, entry["id"], headers, total_score=60).status_code == 201

    def test_scoring_stops_after_disable_when_configured(
        self, client, auth_headers, social_tasting, join_guest, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "guest_scoring_requires_social_mode", True)
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        client.patch(
            f"/api/v1/tastings/{social_tasting['id']}/social-mode",
            headers=auth_headers,
            json={"enabled": False},
        )
        entry = social_tasting["entries"][0]
        assert score(client, code, entry["id"], headers, total_score=60).status_code == 403

    def test_guest_scores_do_not_show_as_host_entries(
        self, client, auth_headers, social_tasting, join_guest
    ):
        code = social_tasting["session_code"]
        _, headers = join_guest(code, "Sam")
        score(client, code, social_tasting["entries"][0]["id"], headers, total_score=60)

        detail = client.get(f"/api/v1/tastings/{social_tasting['id']}", headers=auth_headers)
        assert len(detail.json()["entries"]) == 2


class TestResults:
    def test_scenario(self, client, auth_headers, social_tasting, join_guest):
        code = social_tasting["session_code"]
        wine_a, wine_b = social_tasting["entries"]
        sam_id, sam = join_guest(code, "Sam")
        lee_id, lee = join_guest(code, "Lee")

        score(client, code, wine_a["id"], sam, total_score=80)
        score(client, code, wine_b["id"], sam, total_score=60)
        score(client, code, wine_a["id"], lee, total_score=90)
        client.patch(
            f"/api/v1/tastings/{social_tasting['id']}/entries/{wine_a['id']}",
            headers=auth_headers,
            json={"total_score": 70},
        )

        owner_view = client.get(
            f"/api/v1/tastings/{social_tasting['id']}/social-results", headers=auth_headers
        )
        guest_view = client.get(f"/api/v1/guest-sessions/{code}/results", headers=lee)
        assert owner_view.status_code == 200
        assert guest_view.json() == owner_view.json()

        data = owner_view.json()
        wines = {w["entry_id"]: w for w in data["wines"]}
        assert wines[wine_a["id"]]["average_score"] == 80
        assert wines[wine_a["id"]]["score_count"] == 3
        assert wines[wine_a["id"]]["host_score"] == 70
        assert len(wines[wine_a["id"]]["guest_scores"]) == 2
        assert wines[wine_b["id"]]["average_score"] == 60
        assert wines[wine_b["id"]]["score_count"] == 1

        averages = {g["guest_id"]: g for g in data["guest_averages"]}
        assert averages[sam_id]["average_score"] == 70
        assert averages[lee_id]["average_score"] == 90

        superlatives = data["superlatives"]
        assert superlatives["top_wine"]["entry_id"] == wine_a["id"]
        assert superlatives["top_wine"]["wine_name"] == "Rioja Reserva"
        assert superlatives["most_generous"]["guest_id"] == lee_id
        assert superlatives["harshest_critic"]["guest_id"] == sam_id

    def test_no_scores(self, client, auth_headers, social_tasting):
        data = client.get(
            f"/api/v1/tastings/{social_tasting['id']}/social-results", headers=auth_headers
        ).json()
        assert [(w["average_score"], w["score_count"]) for w in data["wines"]] == [(0, 0), (0, 0)]
        assert data["superlatives"] == {
            "top_wine": None,
            "most_generous": None,
            "harshest_critic": None,
        }

    def test_single_guest_has_no_harshest_critic(self, client, social_tasting, join_guest):
        code = social_tasting["session_code"]
        sam_id, sam = join_guest(code, "Sam")
        score(client, code, social_tasting["entries"][0]["id"], sam, total_score=40)

        data = client.get(f"/api/v1/guest-sessions/{code}/results", headers=sam).json()
        assert data["superlatives"]["most_generous"]["guest_id"] == sam_id
        assert data["superlatives"]["harshest_critic"] is None


class TestGuestAccessController:
    @pytest.fixture
    def session(self, db, auth_headers):
        service = TastingService(db)
        session = service.create_session(auth_headers.user_id, {"name": "Unit"})
        return service.enable_social(session)

    def test_join_and_authorize(self, db, session):
        controller = GuestAccessController(db)
        joined = controller.join(session.session_code.lower(), "Alex")
        claims, found = controller.authorize(joined.token, session.session_code.lower())
        assert claims.guest_id == joined.guest.id
        assert claims.guest_name == "Alex"
        assert found.id == session.id

    def test_authorize_other_code_is_forbidden(self, db, session):
        controller = GuestAccessController(db)
        joined = controller.join(session.session_code, "Alex")
        with pytest.raises(ForbiddenError):
            controller.authorize(joined.token, "XYZ999")

    def test_authorize_bad_token(self, db, session):
        with pytest.raises(InvalidTokenError):
            GuestAccessController(db).authorize("nope", session.session_code)

    def test_join_blank_name(self, db, session):
        with pytest.raises(ValidationError):
            GuestAccessController(db).join(session.session_code, " \t ")

    def test_join_unknown(self, db, session):
        with pytest.raises(NotFoundError):
            GuestAccessController(db).join("ZZZZ11", "Alex")

    def test_join_expired(self, db, session):
        session.invite_expires_at = utcnow() - timedelta(seconds=1)
        db.commit()
        with pytest.raises(ExpiredError):
            GuestAccessController(db).join(session.session_code, "Alex")

    def test_enable_twice_keeps_code_and_extends_expiry(self, db, session):
        service = TastingService(db)
        code = session.session_code
        session.invite_expires_at = utcnow() - timedelta(hours=1)
        db.commit()
        first_expiry = session.invite_expires_at

        service.enable_social(session)
        assert session.session_code == code
        assert session.invite_expires_at > first_expiry

    def test_concurrent_insert_falls_back_to_update(self, db, session, monkeypatch):
        service = TastingService(db)
        entry = service.add_entry(session, {"ad_hoc_name": "Albariño"})
        joined = GuestAccessController(db).join(session.session_code, "Alex")
        claims = GuestClaims(joined.guest.id, session.session_code, "Alex")

        # The other request's row, committed between our check and our insert
        db.add(
            TastingEntry(
                tasting_session_id=session.id,
                ad_hoc_name="Albariño",
                guest_id=claims.guest_id,
                guest_name="Alex",
                parent_entry_id=entry.id,
                total_score=50,
            )
        )
        db.commit()

        real_find = service._find_guest_entry
        calls = []

        def stale_find(*args):
            calls.append(args)
            return None if len(calls) == 1 else real_find(*args)

        monkeypatch.setattr(service, "_find_guest_entry", stale_find)
        stored, created = service.score_entry(session, entry.id, {"total_score": 77}, guest=claims)

        assert created is False
        assert stored.total_score == 77
        assert len(calls) == 2
        rows = db.query(TastingEntry).filter(TastingEntry.guest_id == claims.guest_id).all()
        assert len(rows) == 1

    def test_score_with_token_for_other_session(self, db, session):
        service = TastingService(db)
        entry = service.add_entry(session, {"ad_hoc_name": "Albariño"})
        claims = GuestClaims("someone", "XYZ999", "Eve")
        with pytest.raises(ForbiddenError):
            service.score_entry(session, entry.id, {"total_score": 10}, guest=claims)
