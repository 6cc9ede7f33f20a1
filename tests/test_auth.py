"""
Tests for account registration.
"""


class TestSignup:
    """Tests for POST /api/signup."""

    def test_signup(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "newuser", "name": "New User", "password": "secret1"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["name"] == "New User"
        assert data["phone"] is None
        assert "password" not in data

    def test_signup_with_phone(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={
                "username": "newuser",
                "name": "New User",
                "password": "secret1",
                "phone": "(415) 123-1234",
            },
        )

        assert response.status_code == 201
        assert response.json()["phone"] == "+14151231234"

    def test_signup_invalid_phone(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "newuser", "name": "N", "password": "secret1", "phone": "123"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["title"] == "Invalid Input"

    def test_signup_duplicate_username(self, db_session, client_factory, bob):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "bob", "name": "Bobby", "password": "123456"},
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["status"] == 409
        assert error["title"] == "User Already Exists"
        assert error["message"] == "There is already a user with username 'bob'."

    def test_signup_short_username(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "ab", "name": "A B", "password": "123456"},
        )

        assert response.status_code == 400

    def test_signup_invalid_body_error_shape(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post("/api/signup", json={"username": "ab", "name": "A B"})

        assert response.status_code == 400
        assert "detail" not in response.json()
        error = response.json()["error"]
        assert error["status"] == 400
        assert error["title"] == "Bad Request"
        assert "username" in error["message"]
        assert "password" in error["message"]

    def test_signup_reserved_username(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "admin", "name": "Admin", "password": "123456"},
        )

        assert response.status_code == 400

    def test_signup_strips_markup_from_name(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "newuser", "name": "<b>Bold</b> Name", "password": "123456"},
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Bold Name"

    def test_security_headers(self, db_session, client_factory):
        client = client_factory(db_session)
        response = client.post(
            "/api/signup",
            json={"username": "newuser", "name": "New User", "password": "secret1"},
        )

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
