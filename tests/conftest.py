import os

os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-1234"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from safetrade.config.database import reset_engine
from safetrade.core.settings import settings
from safetrade.main import app
from safetrade.services.auth_service import get_auth_service

API = settings.API_PREFIX
PASSWORD = "contraseña-segura-1"


@pytest.fixture(autouse=True)
def isolated_database(tmp_path, monkeypatch):
    """Fresh SQLite file and upload directory for every test."""
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'safetrade-test.db'}")
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client, email="ana@example.com", password=PASSWORD, name="Ana") -> dict:
    response = client.post(f"{API}/users/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return response.json()


def create_admin_token(client, email="admin@safetrade.com", password=PASSWORD) -> str:
    get_auth_service().create_admin(email, password)
    response = client.post(f"{API}/admin/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def submit_report(client, token=None, files=None, **overrides) -> dict:
    form = {
        "attack_type": "email",
        "incident_date": "2026-10-01",
        "attack_origin": "soporte@banco-falso.example",
        "impact_level": "ninguno",
        "description": "Correo sospechoso",
    }
    form.update(overrides)
    response = client.post(
        f"{API}/reportes",
        data=form,
        files=files,
        headers=auth_header(token) if token else {},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def user(client):
    return register_user(client)


@pytest.fixture
def admin_token(client):
    return create_admin_token(client)
