from conftest import API, auth_header, submit_report


def test_dashboard_counts(client, user, admin_token):
    submit_report(client, attack_type="email", impact_level="robo_dinero")
    submit_report(client, attack_type="email", impact_level="ninguno")
    submit_report(client, attack_type="SMS", impact_level="robo_datos", token=user["access_token"])

    data = client.get(f"{API}/admin/dashboard", headers=auth_header(admin_token)).json()["data"]

    assert data["total_users"] == 1
    assert data["total_reports"] == 3
    assert data["reports_today"] == 3
    assert data["critical_reports"] == 2
    assert data["pending_reports"] == 3
    assert data["attack_types"][0] == {"attack_type": "email", "count": 2}


def test_enhanced_dashboard(client, admin_token):
    report_id = submit_report(client, impact_level="cuenta_comprometida")["reporte"]["id"]
    submit_report(client)
    client.put(
        f"{API}/admin/reports/{report_id}/status",
        json={"status": "cerrado"},
        headers=auth_header(admin_token),
    )

    data = client.get(f"{API}/admin/dashboard/enhanced", headers=auth_header(admin_token)).json()["data"]

    assert data["total_reports"] == 2
    assert data["reports_this_week"] == 2
    assert data["reports_this_month"] == 2
    assert data["resolved_reports"] == 1
    assert data["pending_reports"] == 1
    assert data["anonymous_reports"] == 2
    assert data["identified_reports"] == 0
    assert data["response_times"]["avg_resolution_time"] >= 0
    statuses = {entry["status_name"]: entry["count"] for entry in data["status_distribution"]}
    assert statuses == {"nuevo": 1, "revisado": 0, "en_investigacion": 0, "cerrado": 1}
    assert len(data["attack_types"]) == 6


def test_users_list_hides_credentials(client, user, admin_token):
    body = client.get(f"{API}/admin/users/list", headers=auth_header(admin_token)).json()

    assert body["total"] == 1
    assert "password_hash" not in body["users"][0]
    assert "salt" not in body["users"][0]

    user_id = user["user"]["id"]
    detail = client.get(f"{API}/admin/users/{user_id}", headers=auth_header(admin_token)).json()
    assert detail["user"]["email"] == "ana@example.com"
    assert "salt" not in detail["user"]

    missing = client.get(f"{API}/admin/users/999", headers=auth_header(admin_token))
    assert missing.status_code == 404


def test_filtered_reports_include_reporter_contact(client, user, admin_token):
    submit_report(client, attack_type="SMS", token=user["access_token"])
    submit_report(client, attack_type="email")

    body = client.get(
        f"{API}/admin/reportes", params={"attack_type": "SMS"}, headers=auth_header(admin_token)
    ).json()

    assert body["total"] == 1
    report = body["reportes"][0]
    assert report["attack_type"] == "SMS"
    assert report["status"] == "nuevo"
    assert report["user_email"] == "ana@example.com"


def test_date_filters(client, admin_token):
    submit_report(client)

    past = client.get(
        f"{API}/admin/reportes",
        params={"date_from": "2000-01-01", "date_to": "2000-12-31"},
        headers=auth_header(admin_token),
    ).json()
    recent = client.get(
        f"{API}/admin/reportes", params={"date_from": "2000-01-01"}, headers=auth_header(admin_token)
    ).json()

    assert past["total"] == 0
    assert recent["total"] == 1


def test_paginated_reports_use_camel_case_summaries(client, admin_token):
    for _ in range(3):
        submit_report(client)

    body = client.get(f"{API}/admin/reports", params={"limit": 2, "page": 2}, headers=auth_header(admin_token)).json()

    assert body["total"] == 3
    assert body["page"] == 2
    assert body["totalPages"] == 2
    assert len(body["data"]) == 1
    summary = body["data"][0]
    assert summary["attackType"] == "email"
    assert summary["isAnonymous"] is True
    assert summary["location"] == "soporte@banco-falso.example"


def test_search_reports(client, admin_token):
    submit_report(client, description="Llamada del supuesto banco", attack_type="llamada", impact_level="robo_dinero")
    submit_report(client, description="Correo de paquetería")

    by_text = client.get(f"{API}/admin/reports/search", params={"q": "banco"}, headers=auth_header(admin_token)).json()
    by_filters = client.get(
        f"{API}/admin/reports/search",
        params={"impact_level": "robo_dinero", "is_anonymous": "true"},
        headers=auth_header(admin_token),
    ).json()
    by_location = client.get(
        f"{API}/admin/reports/search", params={"location": "no-existe"}, headers=auth_header(admin_token)
    ).json()

    assert by_text["total"] == 2
    assert by_filters["total"] == 1
    assert by_filters["data"][0]["attackType"] == "llamada"
    assert by_location["total"] == 0


def test_update_status(client, admin_token):
    report_id = submit_report(client)["reporte"]["id"]

    response = client.put(
        f"{API}/admin/reports/{report_id}/status",
        json={"status": "en_investigacion", "adminNotes": "Contactar al banco"},
        headers=auth_header(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "en_investigacion"
    assert response.json()["data"]["admin_notes"] == "Contactar al banco"

    detail = client.get(f"{API}/admin/reports/{report_id}", headers=auth_header(admin_token)).json()["data"]
    assert detail["status"] == "en_investigacion"


def test_update_status_errors(client, admin_token):
    report_id = submit_report(client)["reporte"]["id"]

    unknown_status = client.put(
        f"{API}/admin/reports/{report_id}/status", json={"status": "archivado"}, headers=auth_header(admin_token)
    )
    missing_report = client.put(
        f"{API}/admin/reports/999/status", json={"status": "revisado"}, headers=auth_header(admin_token)
    )

    assert unknown_status.status_code == 422
    assert missing_report.status_code == 404


def test_notes_lifecycle(client, admin_token):
    headers = auth_header(admin_token)
    report_id = submit_report(client)["reporte"]["id"]

    created = client.post(
        f"{API}/admin/reports/{report_id}/notes",
        json={"content": "Número reportado antes", "isTemplate": True, "templateName": "reincidente"},
        headers=headers,
    )
    assert created.status_code == 201
    note = created.json()["data"]
    assert note["isTemplate"] is True
    assert note["adminEmail"] == "admin@safetrade.com"

    updated = client.put(f"{API}/admin/notes/{note['id']}", json={"content": "Número reincidente"}, headers=headers)
    assert updated.json()["data"]["content"] == "Número reincidente"

    notes = client.get(f"{API}/admin/reports/{report_id}/notes", headers=headers).json()["data"]
    assert [n["content"] for n in notes] == ["Número reincidente"]

    assert client.delete(f"{API}/admin/notes/{note['id']}", headers=headers).status_code == 200
    assert client.delete(f"{API}/admin/notes/{note['id']}", headers=headers).status_code == 404
    assert client.get(f"{API}/admin/reports/{report_id}/notes", headers=headers).json()["data"] == []


def test_note_on_missing_report(client, admin_token):
    response = client.post(
        f"{API}/admin/reports/999/notes", json={"content": "x"}, headers=auth_header(admin_token)
    )

    assert response.status_code == 404


def test_catalog_mappings(client, admin_token):
    data = client.get(f"{API}/admin/catalogos", headers=auth_header(admin_token)).json()["data"]

    assert data["status"]["string_to_id"]["cerrado"] == 4
    assert data["attack_types"]["id_to_string"]["5"] == "redes_sociales"


def test_content_only_note_update_keeps_template(client, admin_token):
    headers = auth_header(admin_token)
    report_id = submit_report(client)["reporte"]["id"]
    note = client.post(
        f"{API}/admin/reports/{report_id}/notes",
        json={"content": "Plantilla", "isTemplate": True, "templateName": "phishing"},
        headers=headers,
    ).json()["data"]

    updated = client.put(f"{API}/admin/notes/{note['id']}", json={"content": "Plantilla revisada"}, headers=headers)

    data = updated.json()["data"]
    assert data["content"] == "Plantilla revisada"
    assert data["isTemplate"] is True
    assert data["templateName"] == "phishing"

    cleared = client.put(
        f"{API}/admin/notes/{note['id']}", json={"content": "Nota normal", "isTemplate": False}, headers=headers
    )
    assert cleared.json()["data"]["isTemplate"] is False
