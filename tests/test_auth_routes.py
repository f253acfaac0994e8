from safetrade.services.token_service import get_token_service

from conftest import API, PASSWORD, auth_header, create_admin_token, register_user


def test_login_returns_tokens_and_profile(client, user):
    response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "ana@example.com"
    assert body["access_token"] and body["refresh_token"]


def test_login_with_wrong_password_is_unauthorized(client, user):
    response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "incorrecta"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciales inválidas"


def test_login_records_last_login(client, user):
    client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": PASSWORD})

    profile = client.get(f"{API}/auth/profile", headers=auth_header(user["access_token"])).json()
    assert profile["user"]["last_login"] is not None
    assert "password_hash" not in profile["user"]


def test_refresh_issues_new_access_token(client, user):
    response = client.post(f"{API}/auth/refresh", json={"refresh_token": user["refresh_token"]})

    assert response.status_code == 200
    payload = get_token_service().verify_access_token(response.json()["access_token"])
    assert payload["profile"]["email"] == "ana@example.com"


def test_refresh_rejects_access_token(client, user):
    response = client.post(f"{API}/auth/refresh", json={"refresh_token": user["access_token"]})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token de renovación inválido"


def test_admin_refresh_yields_admin_token(client):
    login = client.post(f"{API}/admin/login", json={"email": "admin@safetrade.com", "password": PASSWORD})
    assert login.status_code == 401

    create_admin_token(client)
    login = client.post(f"{API}/admin/login", json={"email": "admin@safetrade.com", "password": PASSWORD}).json()
    refreshed = client.post(f"{API}/auth/refresh", json={"refresh_token": login["refresh_token"]}).json()

    assert get_token_service().verify_admin_token(refreshed["access_token"])["profile"]["isAdmin"] is True


def test_user_guard_requires_bearer_token(client):
    response = client.get(f"{API}/auth/profile")

    assert response.status_code == 401
    assert response.json()["detail"] == "Token de autenticación requerido"


def test_user_guard_rejects_garbage_token(client):
    response = client.get(f"{API}/auth/profile", headers=auth_header("no-es-un-jwt"))

    assert response.status_code == 401
    assert response.json()["detail"] == "Token inválido o expirado"


def test_user_guard_rejects_admin_token(client, admin_token):
    response = client.get(f"{API}/users/profile", headers=auth_header(admin_token))

    assert response.status_code == 401


def test_admin_guard_messages(client):
    missing = client.get(f"{API}/admin/dashboard")
    assert missing.status_code == 401
    assert missing.json()["detail"] == "Token de administrador requerido"

    invalid = client.get(f"{API}/admin/dashboard", headers=auth_header("no-es-un-jwt"))
    assert invalid.status_code == 401
    assert invalid.json()["detail"] == "Token de administrador inválido"

    citizen = register_user(client, email="luis@example.com")
    forbidden = client.get(f"{API}/admin/dashboard", headers=auth_header(citizen["access_token"]))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Se requieren permisos de administrador"


def test_admin_guard_requires_is_admin_flag(client):
    token = get_token_service().generate_admin_token({"id": 1, "email": "x@example.com"})

    response = client.get(f"{API}/admin/dashboard", headers=auth_header(token))

    assert response.status_code == 403
    assert response.json()["detail"] == "Acceso denegado - permisos insuficientes"


def test_validate_token(client, admin_token):
    response = client.get(f"{API}/admin/validate-token", headers=auth_header(admin_token))

    assert response.status_code == 200
    assert response.json()["admin"]["email"] == "admin@safetrade.com"
