"""
Integration tests for the /api/societies and /api/users endpoints.
"""

from models.event import Event
from models.society import Society


class TestSocietiesAPI:
    def test_create_society(self, client):
        response = client.post("/api/societies", json={
            "name": "Robotics Society",
            "contact_email": "robots@societies.test",
            "contact_person": "Dana",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Robotics Society"
        assert data["contact_person"] == "Dana"
        assert data["email"] is None

    def test_invalid_contact_email(self, client):
        response = client.post("/api/societies", json={"name": "X", "contact_email": "not-an-email"})

        assert response.status_code == 400
        assert response.json() == {"message": "contact_email must be a valid email address."}

    def test_invalid_optional_email(self, client):
        response = client.post("/api/societies", json={
            "name": "X",
            "contact_email": "x@societies.test",
            "email": "nope",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "email must be a valid email address."

    def test_duplicate_name_conflicts(self, client, make_society):
        make_society(name="Debating Society")

        response = client.post("/api/societies", json={
            "name": "Debating Society",
            "contact_email": "other@societies.test",
        })

        assert response.status_code == 409
        assert "already exists" in response.json()["message"]

    def test_duplicate_contact_email_conflicts(self, client, make_society):
        make_society(contact_email="shared@societies.test")

        response = client.post("/api/societies", json={
            "name": "Another Society",
            "contact_email": "shared@societies.test",
        })

        assert response.status_code == 409

    def test_contact_email_is_normalized(self, client):
        response = client.post("/api/societies", json={
            "name": "Chess Society",
            "contact_email": "  Chess@Uni.ac.uk ",
            "email": "Info@Chess.test",
        })

        assert response.status_code == 201
        assert response.json()["contact_email"] == "chess@uni.ac.uk"
        assert response.json()["email"] == "info@chess.test"

    def test_contact_email_conflict_ignores_case(self, client):
        first = client.post("/api/societies", json={"name": "Chess Society", "contact_email": "Chess@uni.ac.uk"})
        second = client.post("/api/societies", json={"name": "Go Society", "contact_email": "chess@uni.ac.uk"})

        assert first.status_code == 201
        assert second.status_code == 409

    def test_list_and_get(self, client, make_society):
        b = make_society(name="Beta")
        a = make_society(name="Alpha")

        listed = client.get("/api/societies").json()
        assert [s["id"] for s in listed] == [a.id, b.id]

        response = client.get(f"/api/societies/{a.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Alpha"

    def test_get_missing(self, client):
        response = client.get("/api/societies/missing")

        assert response.status_code == 404
        assert response.json() == {"message": "Society not found."}

    def test_update_requires_a_field(self, client, make_society):
        society = make_society()

        response = client.put(f"/api/societies/{society.id}", json={})

        assert response.status_code == 400

    def test_update_to_taken_name_conflicts(self, client, make_society):
        make_society(name="Taken")
        society = make_society(name="Free")

        response = client.put(f"/api/societies/{society.id}", json={"name": "Taken"})

        assert response.status_code == 409

    def test_update_description(self, client, make_society):
        society = make_society()

        response = client.put(f"/api/societies/{society.id}", json={"description": "We meet on Tuesdays"})

        assert response.status_code == 200
        assert response.json()["description"] == "We meet on Tuesdays"

    def test_delete_cascades_to_events(self, client, db_session, make_society, make_event):
        society = make_society()
        make_event(society)

        response = client.delete(f"/api/societies/{society.id}")

        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.query(Society).count() == 0
        assert db_session.query(Event).count() == 0


class TestUsersAPI:
    def test_create_user(self, client):
        response = client.post("/api/users", json={
            "name": "Riley",
            "email": "riley@students.test",
            "user_type": "student",
        })

        assert response.status_code == 201
        assert response.json()["user_type"] == "student"

    def test_invalid_user_type(self, client):
        response = client.post("/api/users", json={
            "name": "Riley",
            "email": "riley@students.test",
            "user_type": "lecturer",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "user_type must be one of: student, society, organization."

    def test_duplicate_email_conflicts(self, client, make_user):
        make_user(email="taken@students.test")

        response = client.post("/api/users", json={
            "name": "Someone",
            "email": "taken@students.test",
            "user_type": "student",
        })

        assert response.status_code == 409
        assert response.json() == {"message": "A user with this email already exists."}

    def test_email_conflict_ignores_case(self, client, make_user):
        make_user(email="taken@students.test")

        response = client.post("/api/users", json={
            "name": "Someone",
            "email": " Taken@Students.TEST ",
            "user_type": "student",
        })

        assert response.status_code == 409

    def test_email_is_stored_lowercase(self, client):
        response = client.post("/api/users", json={
            "name": "Riley",
            "email": "Riley@Students.test",
            "user_type": "student",
        })

        assert response.status_code == 201
        assert response.json()["email"] == "riley@students.test"

    def test_list_filters_by_type_newest_first(self, client, make_user):
        first = make_user()
        make_user(user_type="organization")
        second = make_user()

        response = client.get("/api/users", params={"user_type": "student"})

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [second.id, first.id]

    def test_list_rejects_unknown_type(self, client):
        assert client.get("/api/users", params={"user_type": "robot"}).status_code == 400

    def test_update_user(self, client, make_user):
        user = make_user()

        response = client.put(f"/api/users/{user.id}", json={"name": "Renamed"})

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["email"] == user.email

    def test_update_with_invalid_email(self, client, make_user):
        user = make_user()

        response = client.put(f"/api/users/{user.id}", json={"email": "bad"})

        assert response.status_code == 400

    def test_delete_user(self, client, make_user):
        user = make_user()

        assert client.delete(f"/api/users/{user.id}").status_code == 204
        assert client.get(f"/api/users/{user.id}").status_code == 404
