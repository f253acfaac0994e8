from conftest import API


def test_root_describes_service(client):
    body = client.get("/").json()

    assert body["service"] == "SafeTrade API - Sistema de Reportes de Ciberseguridad"
    assert body["api"] == API


def test_health_is_outside_api_prefix(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "SafeTrade Backend API"
    assert body["version"] == "1.0.0"
    assert client.get(f"{API}/health").status_code == 404


def test_database_health(client):
    body = client.get("/health/db").json()

    assert body["connected"] is True
    assert body["database"] == "sqlite"


def test_catalogs_are_seeded_once(client):
    from safetrade.config.database import get_engine, seed_catalogs
    from safetrade.repositories.catalog_repository import CatalogRepository

    seed_catalogs(get_engine())

    repository = CatalogRepository()
    assert len(repository.get_all_impacts()) == 4
    assert repository.convert_legacy_status("en_investigacion") == 3
    assert repository.convert_legacy_attack_type("fax") is None
