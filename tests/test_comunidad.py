from safetrade.services.community_service import (
    calculate_alert_level,
    generate_community_insights,
    generate_key_insight,
)

from conftest import API, auth_header, submit_report


def _stats(total, high_impact, anonymous_percentage=50):
    return {
        "total_reports": total,
        "highest_impact_count": high_impact,
        "anonymous_percentage": anonymous_percentage,
    }


def _trend(attack_type, percentage):
    return {"attack_type": attack_type, "count": 1, "percentage": percentage}


def test_alert_level_thresholds():
    assert calculate_alert_level(_stats(10, 5), [_trend("email", 10)]) == "alto"
    assert calculate_alert_level(_stats(10, 0), [_trend("email", 60)]) == "alto"
    assert calculate_alert_level(_stats(10, 3), [_trend("email", 10)]) == "medio"
    assert calculate_alert_level(_stats(10, 0), [_trend("email", 35)]) == "medio"
    assert calculate_alert_level(_stats(10, 1), [_trend("email", 20)]) == "bajo"


def test_empty_window_is_low_alert():
    assert calculate_alert_level(_stats(0, 0), []) == "bajo"
    assert "diversidad" in generate_key_insight([], _stats(0, 0))


def test_key_insight_priorities():
    assert generate_key_insight([_trend("email", 90)], _stats(10, 4)).startswith("Alerta: El 40.0%")
    assert "Correo Electrónico" in generate_key_insight([_trend("email", 45)], _stats(10, 1))


def test_community_insights_default_message():
    insights = generate_community_insights(_stats(3, 0, anonymous_percentage=10), [])

    assert len(insights) == 1
    assert insights[0].startswith("📈")


def test_community_insights_flags_privacy_and_dominant_threat():
    insights = generate_community_insights(_stats(60, 0, anonymous_percentage=80), [_trend("SMS", 50)])

    assert len(insights) == 3
    assert any("Mensajes SMS" in insight for insight in insights)


def test_trends_endpoint(client, user):
    submit_report(client, attack_type="email", impact_level="robo_dinero")
    submit_report(client, attack_type="email", impact_level="ninguno")
    submit_report(client, attack_type="SMS", impact_level="ninguno", token=user["access_token"])

    anonymous = client.get(f"{API}/tendencias-comunidad/tendencias", params={"period": "7days"}).json()
    identified = client.get(
        f"{API}/tendencias-comunidad/tendencias", headers=auth_header(user["access_token"])
    ).json()

    assert anonymous["message"] == "Tendencias comunitarias de los últimos 7 días"
    assert anonymous["user_context"]["access_type"] == "anónimo"
    assert identified["user_context"]["access_type"] == "identificado"

    data = anonymous["data"]
    assert data["period"] == "7days"
    assert data["community_stats"]["total_reports"] == 3
    assert data["community_stats"]["most_common_attack"] == "email"
    assert data["community_stats"]["highest_impact_count"] == 1
    assert data["community_stats"]["anonymous_percentage"] == 67
    assert data["attack_trends"][0] == {"attack_type": "email", "count": 2, "percentage": 66.67}
    assert data["impact_trends"][0]["attack_type"] == "ninguno"
    assert sum(day["count"] for day in data["time_trends"]) == 3
    assert data["summary"]["main_threat"] == "Correo Electrónico"
    assert data["summary"]["main_impact"] == "Sin Impacto"
    assert data["summary"]["community_alert_level"] == "alto"


def test_trends_rejects_unknown_period(client):
    assert client.get(f"{API}/tendencias-comunidad/tendencias", params={"period": "1year"}).status_code == 422


def test_trends_on_empty_database(client):
    data = client.get(f"{API}/tendencias-comunidad/tendencias").json()["data"]

    assert data["community_stats"]["most_common_attack"] == "N/A"
    assert data["community_stats"]["anonymous_percentage"] == 0
    assert data["summary"]["main_threat"] == "N/A"
    assert data["summary"]["community_alert_level"] == "bajo"


def test_analytics_reports_repeated_origins(client):
    for _ in range(2):
        submit_report(client, attack_origin="+52 55 1111 2222", attack_type="llamada")
    submit_report(client, attack_origin="otro@example.com")

    body = client.get(f"{API}/tendencias-comunidad/analitica").json()

    assert body["message"] == "Analytics comunitarios obtenidos exitosamente"
    origins = body["data"]["suspicious_origins"]
    assert origins == [{"attack_origin": "+52 55 1111 2222", "report_count": 2, "attack_types": ["llamada"]}]
    assert body["data"]["community_overview"]["active_period"] == "30 días"


def test_alert_endpoint(client):
    submit_report(client, attack_type="whatsapp", impact_level="cuenta_comprometida")

    body = client.get(f"{API}/tendencias-comunidad/alerta").json()

    assert body["success"] is True
    assert body["alerta"]["nivel"] == "alto"
    assert body["alerta"]["recomendaciones"][0] == "No compartas códigos de verificación"
    assert body["stats"]["reportes_recientes"] == 1


def test_prevention_tips_fallback(client):
    body = client.get(f"{API}/tendencias-comunidad/recomendaciones", params={"attack_type": "otro"}).json()

    assert body["recomendaciones"][0] == "Mantén siempre actualizado tu software"


def test_anonymous_percentage_rounds_halves_up(client, user):
    submit_report(client)
    for _ in range(7):
        submit_report(client, token=user["access_token"])

    stats = client.get(f"{API}/tendencias-comunidad/tendencias").json()["data"]["community_stats"]

    assert stats["total_reports"] == 8
    assert stats["anonymous_percentage"] == 13
