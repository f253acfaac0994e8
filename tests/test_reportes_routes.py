import os

from safetrade.core.settings import settings

from conftest import API, auth_header, register_user, submit_report


def test_anonymous_submission_without_session(client):
    body = submit_report(client, impact_level="robo_dinero")

    assert body["success"] is True
    assert body["message"] == "Reporte creado exitosamente"
    assert body["reporte"]["is_anonymous"] is True
    assert body["reporte"]["user_id"] is None
    assert body["reporte"]["status"] == "nuevo"
    assert body["victim_support"]["title"] == "Pasos urgentes para víctimas de robo financiero"
    assert body["files_uploaded"] == 0


def test_no_impact_means_no_victim_support(client):
    body = submit_report(client, impact_level="ninguno")

    assert body["victim_support"] is None
    assert body["recommendations"]


def test_authenticated_submission_is_identified_by_default(client, user):
    body = submit_report(client, token=user["access_token"])

    assert body["reporte"]["is_anonymous"] is False
    assert body["reporte"]["user_id"] == user["user"]["id"]


def test_authenticated_user_can_opt_into_anonymity(client, user):
    body = submit_report(client, token=user["access_token"], is_anonymous="true")

    assert body["reporte"]["is_anonymous"] is True
    assert body["reporte"]["user_id"] is None


def test_incident_time_is_merged_into_incident_date(client):
    body = submit_report(client, incident_date="2026-10-01", incident_time="14:30")

    assert body["reporte"]["incident_date"].startswith("2026-10-01T14:30")


def test_invalid_catalog_value_is_rejected(client):
    response = client.post(
        f"{API}/reportes",
        data={
            "attack_type": "telegrama",
            "incident_date": "2026-10-01",
            "attack_origin": "x",
            "impact_level": "ninguno",
        },
    )

    assert response.status_code == 422


def test_missing_required_field_is_rejected(client):
    response = client.post(
        f"{API}/reportes",
        data={"attack_type": "email", "incident_date": "2026-10-01", "impact_level": "ninguno"},
    )

    assert response.status_code == 422


def test_evidence_files_are_stored(client):
    files = [
        ("evidencias", ("captura.png", b"\x89PNG fake image bytes", "image/png")),
        ("evidencias", ("script.exe", b"MZ binary", "application/x-msdownload")),
    ]

    body = submit_report(client, files=files)

    assert body["files_uploaded"] == 2
    assert len(body["attachments"]) == 1
    attachment = body["attachments"][0]
    assert attachment["filename"] == "captura.png"
    assert attachment["mimetype"] == "image/png"
    assert len(os.listdir(settings.UPLOAD_DIR)) == 1


def test_too_many_files_is_rejected(client):
    files = [
        ("evidencias", (f"captura-{i}.png", b"png", "image/png"))
        for i in range(settings.MAX_UPLOAD_FILES + 1)
    ]

    response = client.post(
        f"{API}/reportes",
        data={
            "attack_type": "email",
            "incident_date": "2026-10-01",
            "attack_origin": "x",
            "impact_level": "ninguno",
        },
        files=files,
    )

    assert response.status_code == 400


def test_user_info_only_visible_to_owner(client, user):
    report_id = submit_report(client, token=user["access_token"])["reporte"]["id"]
    other = register_user(client, email="luis@example.com", name="Luis")

    as_owner = client.get(f"{API}/reportes/{report_id}", headers=auth_header(user["access_token"])).json()
    as_other = client.get(f"{API}/reportes/{report_id}", headers=auth_header(other["access_token"])).json()
    as_anonymous = client.get(f"{API}/reportes/{report_id}").json()

    assert as_owner["reporte"]["user_info"]["email"] == "ana@example.com"
    assert as_other["reporte"]["user_info"] is None
    assert as_anonymous["reporte"]["user_info"] is None
    assert "attack_origin" not in as_anonymous["reporte"]


def test_unknown_report_is_not_found(client):
    response = client.get(f"{API}/reportes/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Reporte no encontrado"


def test_my_reports_lists_only_identified_reports(client, user):
    token = user["access_token"]
    first = submit_report(client, token=token, attack_type="SMS")["reporte"]["id"]
    submit_report(client, token=token, is_anonymous="true")
    second = submit_report(client, token=token, attack_type="llamada")["reporte"]["id"]
    submit_report(client)

    response = client.get(f"{API}/reportes/user/mis-reportes", headers=auth_header(token))

    assert response.status_code == 200
    ids = [r["id"] for r in response.json()["reportes"]]
    assert ids == [second, first]


def test_my_reports_requires_session(client):
    assert client.get(f"{API}/reportes/user/mis-reportes").status_code == 401


def test_public_listing_is_paginated_and_filtered(client):
    for attack_type in ("email", "email", "SMS"):
        submit_report(client, attack_type=attack_type)

    page = client.get(f"{API}/reportes", params={"limit": 2}).json()
    only_sms = client.get(f"{API}/reportes", params={"attack_type": "SMS"}).json()

    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert len(page["reportes"]) == 2
    assert only_sms["total"] == 1
    assert only_sms["reportes"][0]["attack_type"] == "SMS"


def test_catalogs_and_statistics(client):
    submit_report(client)

    catalogs = client.get(f"{API}/reportes/catalogos").json()["data"]
    stats = client.get(f"{API}/reportes/estadisticas").json()["data"]

    assert {c["name"] for c in catalogs["attack_types"]} == {"email", "SMS", "whatsapp", "llamada", "redes_sociales", "otro"}
    assert len(catalogs["statuses"]) == 4
    assert stats["total"] == 1
    assert stats["today"] == 1
    assert stats["anonymous"] == 1


def test_recommendations_endpoint(client):
    report_id = submit_report(
        client,
        attack_type="whatsapp",
        impact_level="robo_datos",
        suspicious_url="http://falso.example",
        message_content="Responde URGENTE o perderás tu cuenta",
    )["reporte"]["id"]

    body = client.get(f"{API}/reportes/{report_id}/recomendaciones").json()

    assert "Activa la verificación en dos pasos en WhatsApp" in body["recommendations"]
    assert any("urgencia" in r for r in body["recommendations"])
    assert any("Google Safe Browsing" in r for r in body["recommendations"])
    assert body["victim_support"]["title"] == "Pasos para proteger datos comprometidos"
    assert body["similar_reports"][0]["reporter_type"] == "Anónimo"


def test_attachments_visible_only_to_owner(client, user):
    files = [("evidencias", ("captura.png", b"png bytes", "image/png"))]
    report_id = submit_report(client, token=user["access_token"], files=files)["reporte"]["id"]
    other = register_user(client, email="luis@example.com", name="Luis")

    mine = client.get(f"{API}/reportes/{report_id}/adjuntos", headers=auth_header(user["access_token"]))
    theirs = client.get(f"{API}/reportes/{report_id}/adjuntos", headers=auth_header(other["access_token"]))

    assert mine.status_code == 200
    assert mine.json()["attachments"][0]["filename"] == "captura.png"
    assert theirs.status_code == 403


def test_evidence_file_is_removed_when_its_row_fails(client, monkeypatch):
    from sqlalchemy.exc import SQLAlchemyError

    from safetrade.services.report_service import ReportService

    def failing_insert(self, report_id, stored):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(ReportService, "add_attachment", failing_insert)
    files = [("evidencias", ("captura.png", b"\x89PNG fake image bytes", "image/png"))]

    body = submit_report(client, files=files)

    assert body["files_uploaded"] == 1
    assert body["attachments"] == []
    assert os.listdir(settings.UPLOAD_DIR) == []


def test_oversized_and_empty_evidence_is_skipped(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)
    files = [
        ("evidencias", ("grande.png", b"x" * (1024 * 1024 + 1), "image/png")),
        ("evidencias", ("vacio.png", b"", "image/png")),
    ]

    body = submit_report(client, files=files)

    assert body["files_uploaded"] == 2
    assert body["attachments"] == []
    assert not os.path.exists(settings.UPLOAD_DIR)


def test_unknown_form_fields_are_rejected(client):
    response = client.post(
        f"{API}/reportes",
        data={
            "attack_type": "email",
            "incident_date": "2026-10-01",
            "attack_origin": "x",
            "impact_level": "ninguno",
            "status": "cerrado",
        },
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Campos no permitidos: status"
