# =============================================================================
# tests/test_api_applications.py - Application Endpoint Tests
# =============================================================================
# Both sides of an application:
#   applicant: apply, list, view, withdraw
#   creator:   list for a gig, change status
# =============================================================================

import pytest


@pytest.fixture
def setup(db, complete_profile, active_gig, owner_id, other_id):
    """A creator (owner) with an active gig and an applicant (other) with a profile."""
    complete_profile(owner_id, name="Dana Reyes")
    complete_profile(other_id, name="Sam Carter", email="sam@example.com", phone="+971500000000")
    return active_gig(owner_id)


def _apply(client, gig_id, headers, body=None):
    return client.post(f"/api/gigs/{gig_id}/apply", json=body, headers=headers)


# =============================================================================
# Applying
# =============================================================================

class TestApply:

    def test_requires_complete_profile(self, client, db, active_gig, auth_headers, owner_id, other_id):
        gig = active_gig(owner_id)
        db.seed("user_profiles", user_id=other_id, firstname="Sam")

        response = _apply(client, gig["id"], auth_headers(other_id))

        assert response.status_code == 403
        assert response.json()["error"] == "Please complete your profile before applying to gigs"

    def test_unknown_gig(self, client, setup, auth_headers, other_id):
        response = _apply(client, "missing", auth_headers(other_id))

        assert response.status_code == 404
        assert response.json()["error"] == "Gig not found"

    def test_own_gig(self, client, setup, auth_headers, owner_id):
        response = _apply(client, setup["id"], auth_headers(owner_id))

        assert response.status_code == 400
        assert response.json()["error"] == "You cannot apply to your own gig"

    def test_inactive_gig(self, client, setup, active_gig, auth_headers, owner_id, other_id):
        closed = active_gig(owner_id, status="closed", slug="closed")

        response = _apply(client, closed["id"], auth_headers(other_id))

        assert response.status_code == 400
        assert response.json()["error"] == "This gig is no longer accepting applications"

    def test_expired_gig(self, client, setup, active_gig, auth_headers, owner_id, other_id):
        expired = active_gig(owner_id, expiry_date="2020-01-01T00:00:00Z", slug="old")

        response = _apply(client, expired["id"], auth_headers(other_id))

        assert response.status_code == 400
        assert response.json()["error"] == "This gig has expired"

    def test_applied(self, client, db, setup, auth_headers, owner_id, other_id):
        response = _apply(
            client,
            setup["id"],
            auth_headers(other_id),
            {"coverLetter": "I have 10 years on set", "portfolioLinks": ["https://reel"]},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["gigId"] == setup["id"]
        assert data["status"] == "pending"
        assert data["appliedAt"]

        stored = db.rows("applications")[0]
        assert stored["applicant_user_id"] == other_id
        assert stored["cover_letter"] == "I have 10 years on set"

        notification = db.rows("notifications", user_id=owner_id)[0]
        assert notification["type"] == "application_received"
        assert notification["is_read"] is False
        assert notification["message"] == f'Sam Carter has applied to your gig "{setup["title"]}"'
        assert notification["related_application_id"] == data["id"]

    def test_applied_without_body(self, client, setup, auth_headers, other_id):
        response = _apply(client, setup["id"], auth_headers(other_id))

        assert response.status_code == 201

    def test_duplicate(self, client, setup, auth_headers, other_id):
        _apply(client, setup["id"], auth_headers(other_id))

        response = _apply(client, setup["id"], auth_headers(other_id))

        assert response.status_code == 400
        assert response.json()["error"] == "You have already applied to this gig"

    def test_notification_failure_does_not_fail_apply(self, client, db, setup, auth_headers, other_id):
        db.fail("notifications", "insert")

        response = _apply(client, setup["id"], auth_headers(other_id))

        assert response.status_code == 201
        assert len(db.rows("applications")) == 1


# =============================================================================
# Applicant views
# =============================================================================

class TestMyApplications:

    def test_lists_with_gig_and_stats(self, client, db, setup, active_gig, auth_headers, owner_id, other_id):
        second = active_gig(owner_id, title="Focus puller", slug="focus-puller")
        db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")
        db.seed("applications", gig_id=second["id"], applicant_user_id=other_id, status="shortlisted")

        response = client.get("/api/applications/my", headers=auth_headers(other_id))

        data = response.json()["data"]
        assert [app["gig"]["title"] for app in data["applications"]] == [
            "Focus puller",
            setup["title"],
        ]
        assert data["applications"][0]["gig"]["postedBy"]["name"] == "Dana Reyes"
        assert data["stats"] == {
            "total": 2,
            "pending": 1,
            "shortlisted": 1,
            "confirmed": 0,
            "released": 0,
        }
        assert data["pagination"]["total"] == 2

    def test_status_filter(self, client, db, setup, active_gig, auth_headers, owner_id, other_id):
        second = active_gig(owner_id, slug="second")
        db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")
        db.seed("applications", gig_id=second["id"], applicant_user_id=other_id, status="confirmed")

        response = client.get("/api/applications/my?status=confirmed", headers=auth_headers(other_id))

        data = response.json()["data"]
        assert [app["status"] for app in data["applications"]] == ["confirmed"]
        assert data["stats"]["total"] == 2

    def test_skips_deleted_gigs(self, client, db, setup, auth_headers, other_id):
        db.seed("applications", gig_id="deleted-gig", applicant_user_id=other_id, status="pending")

        response = client.get("/api/applications/my", headers=auth_headers(other_id))

        assert response.json()["data"]["applications"] == []


class TestGetApplication:

    @pytest.fixture
    def application(self, db, setup, other_id):
        return db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")

    def test_applicant_view_hides_contact(self, client, application, auth_headers, other_id):
        response = client.get(f"/api/applications/{application['id']}", headers=auth_headers(other_id))

        data = response.json()["data"]
        assert data["applicant"]["email"] is None
        assert data["applicant"]["phone"] is None
        assert data["applicant"]["location"] == "Dubai, UAE"
        assert data["permissions"] == {"canUpdateStatus": False, "canWithdraw": True}

    def test_creator_view_shows_contact(self, client, application, auth_headers, owner_id):
        response = client.get(f"/api/applications/{application['id']}", headers=auth_headers(owner_id))

        data = response.json()["data"]
        assert data["applicant"]["email"] == "sam@example.com"
        assert data["applicant"]["phone"] == "+971500000000"
        assert data["permissions"] == {"canUpdateStatus": True, "canWithdraw": False}

    def test_third_party_forbidden(self, client, application, auth_headers):
        stranger = "11111111-1111-4111-8111-111111111111"

        response = client.get(f"/api/applications/{application['id']}", headers=auth_headers(stranger))

        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to view this application"

    def test_missing(self, client, setup, auth_headers, other_id):
        response = client.get("/api/applications/missing", headers=auth_headers(other_id))

        assert response.status_code == 404
        assert response.json()["error"] == "Application not found"

    def test_gig_gone(self, client, db, application, auth_headers, other_id):
        db.tables["gigs"] = []

        response = client.get(f"/api/applications/{application['id']}", headers=auth_headers(other_id))

        assert response.status_code == 404
        assert response.json()["error"] == "Associated gig not found"


class TestWithdraw:

    def test_pending_withdrawn(self, client, db, setup, auth_headers, other_id):
        application = db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")

        response = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(other_id))

        assert response.status_code == 200
        assert db.rows("applications") == []

    def test_only_applicant(self, client, db, setup, auth_headers, owner_id, other_id):
        application = db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")

        response = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(owner_id))

        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to withdraw this application"

    def test_past_pending(self, client, db, setup, auth_headers, other_id):
        application = db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="confirmed")

        response = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(other_id))

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot withdraw application with status: confirmed"


# =============================================================================
# Creator views
# =============================================================================

class TestGigApplications:

    def test_creator_lists(self, client, db, setup, auth_headers, owner_id, other_id):
        db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="shortlisted")

        response = client.get(f"/api/gigs/{setup['id']}/applications", headers=auth_headers(owner_id))

        data = response.json()["data"]
        assert data["gigTitle"] == setup["title"]
        assert data["applications"][0]["applicant"]["name"] == "Sam Carter"
        assert data["applications"][0]["applicant"]["email"] == "sam@example.com"
        assert data["stats"]["shortlisted"] == 1

    def test_unknown_status_filter_ignored(self, client, db, setup, auth_headers, owner_id, other_id):
        db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")

        response = client.get(
            f"/api/gigs/{setup['id']}/applications?status=bogus",
            headers=auth_headers(owner_id),
        )

        assert len(response.json()["data"]["applications"]) == 1

    def test_non_creator_forbidden(self, client, setup, auth_headers, other_id):
        response = client.get(f"/api/gigs/{setup['id']}/applications", headers=auth_headers(other_id))

        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to view applications for this gig"


class TestUpdateStatus:

    @pytest.fixture
    def application(self, db, setup, other_id):
        return db.seed("applications", gig_id=setup["id"], applicant_user_id=other_id, status="pending")

    def _patch(self, client, gig_id, application_id, headers, body):
        return client.patch(
            f"/api/gigs/{gig_id}/applications/{application_id}/status",
            json=body,
            headers=headers,
        )

    def test_status_required(self, client, setup, application, auth_headers, owner_id):
        response = self._patch(client, setup["id"], application["id"], auth_headers(owner_id), {})

        assert response.status_code == 400
        assert response.json()["error"] == "Status is required"

    def test_invalid_status(self, client, setup, application, auth_headers, owner_id):
        response = self._patch(
            client, setup["id"], application["id"], auth_headers(owner_id), {"status": "hired"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Invalid status. Must be one of: pending, shortlisted, confirmed, released"
        )

    def test_non_creator_forbidden(self, client, setup, application, auth_headers, other_id):
        response = self._patch(
            client, setup["id"], application["id"], auth_headers(other_id), {"status": "confirmed"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to update applications for this gig"

    def test_application_on_other_gig(self, client, setup, auth_headers, owner_id):
        response = self._patch(
            client, setup["id"], "missing", auth_headers(owner_id), {"status": "confirmed"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Application not found"

    def test_updated_and_applicant_notified(self, client, db, setup, application, auth_headers, owner_id, other_id):
        response = self._patch(
            client, setup["id"], application["id"], auth_headers(owner_id), {"status": "shortlisted"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "shortlisted"
        assert db.rows("applications")[0]["status"] == "shortlisted"

        notification = db.rows("notifications", user_id=other_id)[0]
        assert notification["type"] == "status_changed"
        assert notification["message"].startswith("Great news! Your application has been shortlisted.")

    def test_same_status_does_not_notify(self, client, db, setup, application, auth_headers, owner_id):
        self._patch(client, setup["id"], application["id"], auth_headers(owner_id), {"status": "pending"})

        assert db.rows("notifications") == []
