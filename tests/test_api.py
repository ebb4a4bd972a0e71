"""API endpoint tests."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/v1/auth/register",
        json={
            "email": "NewUser@Example.com",
            "password": "password123",
            "name": "New User",
            "default_currency": "eur",
            "beverage_type": "beer",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "newuser@example.com"
    assert data["user"]["default_currency"] == "EUR"
    assert data["user"]["beverage_type"] == "beer"
    assert data["user"]["scoring_mode"] == "casual"


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email is a conflict."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"
    assert "already registered" in response.json()["detail"]


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "short@example.com", "password": "short", "name": "Short"},
    )
    assert response.status_code == 422
    assert response.json()["kind"] == "validation_error"


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert "access_token" in response.json()


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthorized"


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email
    assert response.json()["id"] == auth_headers.user_id


def test_update_current_user(client, auth_headers):
    response = client.patch(
        "/api/v1/auth/me",
        headers=auth_headers,
        json={"name": "Renamed", "scoring_mode": "detailed", "default_currency": "usd"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["scoring_mode"] == "detailed"
    assert data["default_currency"] == "USD"


def test_update_current_user_ignores_null_name(client, auth_headers):
    response = client.patch("/api/v1/auth/me", headers=auth_headers, json={"name": None})
    assert response.status_code == 200
    assert response.json()["name"] == "Test User"


def test_missing_token_is_unauthorized(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthorized"


def test_garbage_token_is_unauthorized(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_logout(client, auth_headers):
    response = client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200


def test_locations_crud(client, auth_headers):
    response = client.post("/api/v1/locations", headers=auth_headers, json={"name": "Garage rack"})
    assert response.status_code == 201
    location_id = response.json()["id"]

    response = client.patch(
        f"/api/v1/locations/{location_id}", headers=auth_headers, json={"name": "Wine fridge"}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Wine fridge"

    client.post("/api/v1/locations", headers=auth_headers, json={"name": "Cellar"})
    response = client.get("/api/v1/locations", headers=auth_headers)
    assert [loc["name"] for loc in response.json()] == ["Cellar", "Wine fridge"]


def test_location_of_other_user_not_found(client, auth_headers, other_auth_headers):
    response = client.post("/api/v1/locations", headers=auth_headers, json={"name": "Mine"})
    location_id = response.json()["id"]

    response = client.get(f"/api/v1/locations/{location_id}", headers=other_auth_headers)
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_stats_empty(client, auth_headers):
    response = client.get("/api/v1/stats", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_bottles"] == 0
    assert data["average_score"] is None
    assert data["top_entries"] == []


def test_stats(client, auth_headers, tasting):
    client.post(
        "/api/v1/bottles",
        headers=auth_headers,
        json={
            "name": "Chianti",
            "country": "Italy",
            "quantity": 3,
            "price_amount": 12.5,
            "price_currency": "GBP",
        },
    )
    bottle = client.post(
        "/api/v1/bottles", headers=auth_headers, json={"name": "Saison", "beverage_type": "beer"}
    ).json()
    client.post(f"/api/v1/bottles/{bottle['id']}/drinks", headers=auth_headers, json={})

    first, second = tasting["entries"]
    for entry, score in ((first, 91), (second, 84)):
        client.patch(
            f"/api/v1/tastings/{tasting['id']}/entries/{entry['id']}",
            headers=auth_headers,
            json={"total_score": score},
        )

    data = client.get("/api/v1/stats", headers=auth_headers).json()
    assert data["total_bottles"] == 2
    assert data["bottles_in_cellar"] == 3
    assert data["bottles_by_status"] == {"in_cellar": 1, "consumed": 1}
    assert data["bottles_by_country"] == {"Italy": 1, "Unknown": 1}
    assert data["bottles_by_beverage_type"] == {"wine": 1, "beer": 1}
    assert data["cellar_value"] == {"GBP": 37.5}
    assert data["total_sessions"] == 1
    assert data["total_entries"] == 2
    assert data["average_score"] == 87.5
    assert data["total_drinks"] == 1
    assert sum(data["drinks_by_month"].values()) == 1
    assert [e["wine_name"] for e in data["top_entries"]] == ["Rioja Reserva", "Barolo"]
