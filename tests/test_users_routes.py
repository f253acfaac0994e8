from conftest import API, PASSWORD, auth_header, register_user


def test_register_returns_safe_user_and_tokens(client):
    body = register_user(client)

    assert body["success"] is True
    assert body["message"] == "Usuario registrado exitosamente"
    assert body["user"]["email"] == "ana@example.com"
    assert "password_hash" not in body["user"]
    assert "salt" not in body["user"]
    assert body["access_token"] and body["refresh_token"]


def test_register_duplicate_email_conflicts(client, user):
    response = client.post(
        f"{API}/users/register",
        json={"email": "ana@example.com", "password": PASSWORD},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "El correo electrónico ya está registrado"


def test_register_validates_password_and_email(client):
    short = client.post(f"{API}/users/register", json={"email": "ana@example.com", "password": "corta"})
    bad_email = client.post(f"{API}/users/register", json={"email": "no-es-correo", "password": PASSWORD})

    assert short.status_code == 422
    assert bad_email.status_code == 422


def test_update_email_requires_password(client, user):
    headers = auth_header(user["access_token"])

    wrong = client.put(
        f"{API}/users/profile/email",
        json={"new_email": "ana.nueva@example.com", "password": "incorrecta"},
        headers=headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Contraseña incorrecta"

    ok = client.put(
        f"{API}/users/profile/email",
        json={"new_email": "ana.nueva@example.com", "password": PASSWORD},
        headers=headers,
    )
    assert ok.status_code == 200
    assert ok.json()["user"]["email"] == "ana.nueva@example.com"


def test_update_email_to_taken_address_conflicts(client, user):
    register_user(client, email="luis@example.com", name="Luis")

    response = client.put(
        f"{API}/users/profile/email",
        json={"new_email": "luis@example.com", "password": PASSWORD},
        headers=auth_header(user["access_token"]),
    )

    assert response.status_code == 409


def test_update_name(client, user):
    headers = auth_header(user["access_token"])

    too_short = client.put(f"{API}/users/profile/name", json={"new_name": "A", "password": PASSWORD}, headers=headers)
    assert too_short.status_code == 422

    response = client.put(f"{API}/users/profile/name", json={"new_name": "Ana María", "password": PASSWORD}, headers=headers)
    assert response.status_code == 200
    assert client.get(f"{API}/users/profile", headers=headers).json()["user"]["name"] == "Ana María"


def test_change_password(client, user):
    headers = auth_header(user["access_token"])

    wrong = client.put(
        f"{API}/users/profile/password",
        json={"current_password": "incorrecta", "new_password": "nueva-contraseña-1"},
        headers=headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Contraseña actual incorrecta"

    ok = client.put(
        f"{API}/users/profile/password",
        json={"current_password": PASSWORD, "new_password": "nueva-contraseña-1"},
        headers=headers,
    )
    assert ok.status_code == 200

    old_login = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": PASSWORD})
    new_login = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "nueva-contraseña-1"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_profile_change_for_deleted_account_is_not_found(client, user):
    from safetrade.repositories.users_repository import UsersRepository

    UsersRepository().delete_user(user["user"]["id"])

    response = client.put(
        f"{API}/users/profile/name",
        json={"new_name": "Ana María", "password": PASSWORD},
        headers=auth_header(user["access_token"]),
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Usuario no encontrado"
