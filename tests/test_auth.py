from passlib.context import CryptContext

from app.core.security_password import verify_and_maybe_upgrade
from app.models.user import UserRole


def _login(client, email, password="secret-pass-123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_signup_login_me(client):
    r = client.post("/api/auth/signup", json={"name": "Ann", "email": "Ann@Events.org", "password": "long-enough"})
    assert r.status_code == 201
    assert r.json()["email"] == "ann@events.org"
    assert r.json()["role"] == "user"
    assert r.json()["adminId"] is None

    dup = client.post("/api/auth/signup", json={"name": "Ann", "email": "ann@events.org", "password": "long-enough"})
    assert dup.status_code == 400

    tokens = _login(client, "ANN@events.org", "long-enough").json()
    assert tokens["tokenType"] == "bearer"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Ann"


def test_login_rejects_bad_credentials(client, admin):
    r = _login(client, admin.email, "wrong-password")
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid credentials", "code": "UNAUTHENTICATED"}
    assert _login(client, "nobody@events.org").status_code == 401


def test_refresh_rotates_and_logout_revokes(client, admin):
    first = _login(client, admin.email).json()

    second = client.post("/api/auth/refresh", json={"refreshToken": first["refreshToken"]})
    assert second.status_code == 200
    # o refresh anterior já foi rotacionado
    assert client.post("/api/auth/refresh", json={"refreshToken": first["refreshToken"]}).status_code == 401

    headers = {"Authorization": f"Bearer {second.json()['accessToken']}"}
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.post("/api/auth/refresh", json={"refreshToken": second.json()["refreshToken"]}).status_code == 401


def test_access_token_is_not_a_refresh_token(client, admin):
    tokens = _login(client, admin.email).json()
    assert client.post("/api/auth/refresh", json={"refreshToken": tokens["accessToken"]}).status_code == 401


def test_invalid_bearer_is_rejected(client):
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Token x"}).status_code == 401


def test_admin_created_user_is_bound_to_admin(client, auth, admin, make_user):
    other = make_user(UserRole.ADMIN)
    body = {"name": "Sam", "email": "sam@events.org", "password": "long-enough", "role": "user", "adminId": other.id}

    r = client.post("/api/auth/users", json=body, headers=auth(admin))

    assert r.status_code == 201
    assert r.json()["adminId"] == admin.id


def test_admin_cannot_create_admins(client, auth, admin):
    body = {"name": "Eve", "email": "eve@events.org", "password": "long-enough", "role": "admin"}
    r = client.post("/api/auth/users", json=body, headers=auth(admin))
    assert r.status_code == 403


def test_super_admin_needs_existing_admin(client, auth, make_user):
    root = make_user(UserRole.SUPER_ADMIN)
    body = {"name": "Sam", "email": "sam@events.org", "password": "long-enough", "adminId": "missing"}

    assert client.post("/api/auth/users", json=body, headers=auth(root)).status_code == 400


def test_user_listing_is_scoped(client, auth, admin, staff, make_user):
    make_user(UserRole.USER, admin=make_user(UserRole.ADMIN))

    emails = {u["email"] for u in client.get("/api/auth/users", headers=auth(admin)).json()}

    assert emails == {admin.email, staff.email}
    assert client.get("/api/auth/users", headers=auth(staff)).status_code == 403


def test_new_hashes_use_first_configured_scheme(admin):
    assert admin.hashed_password.startswith("$argon2")


def test_login_upgrades_outdated_hash(client, admin, db):
    weaker = CryptContext(schemes=["argon2"], argon2__memory_cost=8192, argon2__time_cost=1)
    admin.hashed_password = weaker.hash("secret-pass-123")
    db.add(admin); db.commit()
    old_hash = admin.hashed_password

    assert _login(client, admin.email).status_code == 200

    db.refresh(admin)
    assert admin.hashed_password != old_hash
    assert verify_and_maybe_upgrade("secret-pass-123", admin.hashed_password) == (True, None)


def test_unrecognized_stored_hash_is_rejected(client, admin, db):
    admin.hashed_password = "not-a-hash"
    db.add(admin); db.commit()

    assert _login(client, admin.email).status_code == 401
