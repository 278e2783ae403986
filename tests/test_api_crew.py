# =============================================================================
# tests/test_api_crew.py - Availability & Contact Endpoint Tests
# =============================================================================

import pytest


# =============================================================================
# Availability
# =============================================================================

class TestSetAvailability:

    def test_created(self, client, db, auth_headers, owner_id):
        response = client.post(
            "/api/availability",
            json={"availability_date": "2025-03-14", "status": "hold"},
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user_id"] == owner_id
        assert data["status"] == "hold"

    def test_same_day_is_replaced(self, client, db, auth_headers, owner_id):
        headers = auth_headers(owner_id)
        client.post("/api/availability", json={"availability_date": "2025-03-14", "status": "hold"}, headers=headers)
        client.post("/api/availability", json={"availability_date": "2025-03-14", "status": "na"}, headers=headers)

        rows = db.rows("crew_availability", user_id=owner_id)
        assert len(rows) == 1
        assert rows[0]["status"] == "na"

    @pytest.mark.parametrize(
        "body, error",
        [
            ({"status": "hold"}, "Availability date is required"),
            ({"availability_date": "2025-03-14"}, "Status must be one of: available, hold, na"),
            ({"availability_date": "2025-03-14", "status": "busy"}, "Status must be one of: available, hold, na"),
            ({"availability_date": "14/03/2025", "status": "hold"}, "Date must be in YYYY-MM-DD format"),
        ],
    )
    def test_validation(self, client, auth_headers, owner_id, body, error):
        response = client.post("/api/availability", json=body, headers=auth_headers(owner_id))

        assert response.status_code == 400
        assert response.json()["error"] == error


class TestListAvailability:

    @pytest.fixture
    def calendar(self, db, owner_id, other_id):
        for day, status in [("2025-03-31", "na"), ("2025-02-28", "hold"), ("2025-03-01", "available")]:
            db.seed("crew_availability", user_id=owner_id, availability_date=day, status=status)
        db.seed("crew_availability", user_id=owner_id, availability_date="2024-03-05", status="hold")
        db.seed("crew_availability", user_id=other_id, availability_date="2025-03-10", status="hold")

    def test_all_in_date_order(self, client, calendar, auth_headers, owner_id):
        response = client.get("/api/availability", headers=auth_headers(owner_id))

        dates = [row["availability_date"] for row in response.json()["data"]]
        assert dates == ["2024-03-05", "2025-02-28", "2025-03-01", "2025-03-31"]

    def test_month_includes_last_day(self, client, calendar, auth_headers, owner_id):
        response = client.get("/api/availability?month=2025-03", headers=auth_headers(owner_id))

        dates = [row["availability_date"] for row in response.json()["data"]]
        assert dates == ["2025-03-01", "2025-03-31"]

    def test_year(self, client, calendar, auth_headers, owner_id):
        response = client.get("/api/availability?year=2024", headers=auth_headers(owner_id))

        assert [row["availability_date"] for row in response.json()["data"]] == ["2024-03-05"]

    @pytest.mark.parametrize(
        "query, error",
        [
            ("month=2025-13", "Month must be in YYYY-MM format"),
            ("month=March", "Month must be in YYYY-MM format"),
            ("year=25", "Year must be in YYYY format"),
        ],
    )
    def test_bad_filters(self, client, auth_headers, owner_id, query, error):
        response = client.get(f"/api/availability?{query}", headers=auth_headers(owner_id))

        assert response.status_code == 400
        assert response.json()["error"] == error


class TestUpdateAvailability:

    def test_updated(self, client, db, auth_headers, owner_id):
        entry = db.seed("crew_availability", user_id=owner_id, availability_date="2025-03-14", status="hold")

        response = client.patch(
            f"/api/availability/{entry['id']}",
            json={"status": "available"},
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "available"

    def test_someone_elses_entry(self, client, db, auth_headers, owner_id, other_id):
        entry = db.seed("crew_availability", user_id=other_id, availability_date="2025-03-14", status="hold")

        response = client.patch(
            f"/api/availability/{entry['id']}",
            json={"status": "available"},
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Availability not found or unauthorized"
        assert db.rows("crew_availability")[0]["status"] == "hold"


class TestCheckConflicts:

    def test_reports_hold_and_na(self, client, db, auth_headers, owner_id):
        for day, status in [("2025-03-01", "available"), ("2025-03-02", "hold"), ("2025-03-05", "na"), ("2025-04-01", "na")]:
            db.seed("crew_availability", user_id=owner_id, availability_date=day, status=status)

        response = client.get(
            "/api/availability/check?from_date=2025-03-01&to_date=2025-03-31",
            headers=auth_headers(owner_id),
        )

        assert response.json()["data"] == {
            "hasConflict": True,
            "conflictCount": 2,
            "conflicts": [
                {"date": "2025-03-02", "status": "hold"},
                {"date": "2025-03-05", "status": "na"},
            ],
        }

    def test_no_conflicts(self, client, auth_headers, owner_id):
        response = client.get(
            "/api/availability/check?from_date=2025-03-01&to_date=2025-03-31",
            headers=auth_headers(owner_id),
        )

        assert response.json()["data"] == {"hasConflict": False, "conflictCount": 0, "conflicts": []}

    def test_both_dates_required(self, client, auth_headers, owner_id):
        response = client.get("/api/availability/check?from_date=2025-03-01", headers=auth_headers(owner_id))

        assert response.status_code == 400
        assert response.json()["error"] == "Both from_date and to_date are required"

    def test_date_format(self, client, auth_headers, owner_id):
        response = client.get(
            "/api/availability/check?from_date=2025-03-01&to_date=31-03-2025",
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Dates must be in YYYY-MM-DD format"


# =============================================================================
# Contacts
# =============================================================================

class TestContacts:

    def test_creator_adds_contact(self, client, db, active_gig, auth_headers, owner_id):
        gig = active_gig(owner_id)

        response = client.post(
            "/api/contacts",
            json={
                "gig_id": gig["id"],
                "contact_name": "  Jane   Doe ",
                "contact_email": "jane@example.com",
                "role": "Producer",
            },
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 201
        assert response.json()["data"]["contact_name"] == "Jane Doe"
        assert len(db.rows("crew_contacts", gig_id=gig["id"])) == 1

    def test_required_fields(self, client, auth_headers, owner_id):
        response = client.post("/api/contacts", json={"contact_name": "Jane"}, headers=auth_headers(owner_id))

        assert response.status_code == 400
        assert response.json()["error"] == "Gig ID and contact name are required"

    def test_bad_email(self, client, active_gig, auth_headers, owner_id):
        gig = active_gig(owner_id)

        response = client.post(
            "/api/contacts",
            json={"gig_id": gig["id"], "contact_name": "Jane", "contact_email": "nope"},
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email address"

    def test_unknown_gig(self, client, auth_headers, owner_id):
        response = client.post(
            "/api/contacts",
            json={"gig_id": "missing", "contact_name": "Jane"},
            headers=auth_headers(owner_id),
        )

        assert response.status_code == 404

    def test_non_creator_cannot_add(self, client, active_gig, auth_headers, owner_id, other_id):
        gig = active_gig(owner_id)

        response = client.post(
            "/api/contacts",
            json={"gig_id": gig["id"], "contact_name": "Jane"},
            headers=auth_headers(other_id),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Only the gig creator can add contacts"

    def test_list_newest_first(self, client, db, active_gig, auth_headers, owner_id):
        gig = active_gig(owner_id)
        db.seed("crew_contacts", gig_id=gig["id"], contact_name="First")
        db.seed("crew_contacts", gig_id=gig["id"], contact_name="Second")

        response = client.get(f"/api/contacts/gig/{gig['id']}", headers=auth_headers(owner_id))

        assert [c["contact_name"] for c in response.json()["data"]] == ["Second", "First"]

    def test_non_creator_cannot_list(self, client, active_gig, auth_headers, owner_id, other_id):
        gig = active_gig(owner_id)

        response = client.get(f"/api/contacts/gig/{gig['id']}", headers=auth_headers(other_id))

        assert response.status_code == 403
        assert response.json()["error"] == "Only the gig creator can view contacts"

    def test_delete(self, client, db, active_gig, auth_headers, owner_id, other_id):
        gig = active_gig(owner_id)
        contact = db.seed("crew_contacts", gig_id=gig["id"], contact_name="Jane")

        forbidden = client.delete(f"/api/contacts/{contact['id']}", headers=auth_headers(other_id))
        deleted = client.delete(f"/api/contacts/{contact['id']}", headers=auth_headers(owner_id))

        assert forbidden.status_code == 403
        assert forbidden.json()["error"] == "Only the gig creator can delete contacts"
        assert deleted.status_code == 200
        assert db.rows("crew_contacts") == []

    def test_delete_missing(self, client, auth_headers, owner_id):
        response = client.delete("/api/contacts/missing", headers=auth_headers(owner_id))

        assert response.status_code == 404
        assert response.json()["error"] == "Contact not found"
