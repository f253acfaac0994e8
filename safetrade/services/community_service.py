"""
Community Service - situational awareness from aggregate report data.

Everything here is derived from counts; no individual report is exposed.
Alert levels and insights are simple thresholds over percentages.
"""

from typing import Dict, List, Optional
import logging

from safetrade.repositories.community_repository import CommunityRepository
from safetrade.services.catalog_mapping import CatalogMappingService as Catalog

logger = logging.getLogger(__name__)

PERIOD_DAYS: Dict[str, int] = {"7days": 7, "30days": 30, "90days": 90}
DEFAULT_PERIOD = "30days"

PREVENTION_TIPS: Dict[str, List[str]] = {
    "email": [
        "Verifica siempre la dirección del remitente",
        "Evita hacer clic en enlaces sospechosos",
        "No descargues archivos adjuntos de fuentes desconocidas",
    ],
    "whatsapp": [
        "No compartas códigos de verificación",
        "Verifica la identidad del contacto",
        "Desconfía de ofertas demasiado buenas para ser verdad",
    ],
    "SMS": [
        "Los bancos nunca piden información por SMS",
        "No hagas clic en enlaces de mensajes no solicitados",
        "Verifica directamente con la empresa si recibes mensajes oficiales",
    ],
    "llamada": [
        "Nunca proporciones información personal por teléfono",
        "Los bancos no llaman pidiendo contraseñas",
        "Cuelga y llama directamente a la empresa",
    ],
    "redes_sociales": [
        "Configura tu perfil como privado",
        "No aceptes solicitudes de desconocidos",
        "Verifica la autenticidad de ofertas y promociones",
    ],
}

DEFAULT_PREVENTION_TIPS = [
    "Mantén siempre actualizado tu software",
    "Usa contraseñas fuertes y únicas",
    "Desconfía de comunicaciones no solicitadas",
]

ALERT_MESSAGES = {
    "alto": "Nivel de alerta alto: la comunidad reporta muchos ataques con pérdidas. Extrema precauciones.",
    "medio": "Nivel de alerta medio: hay actividad sospechosa relevante en la comunidad. Mantente atento.",
    "bajo": "Nivel de alerta bajo: la actividad reportada es normal. Sigue las buenas prácticas de seguridad.",
}


def period_to_days(period: Optional[str]) -> int:
    return PERIOD_DAYS.get(period or DEFAULT_PERIOD, PERIOD_DAYS[DEFAULT_PERIOD])


def high_impact_percentage(stats: Dict) -> float:
    total = stats.get("total_reports") or 0
    if not total:
        return 0.0
    return stats.get("highest_impact_count", 0) / total * 100


def calculate_alert_level(stats: Dict, attack_trends: List[Dict]) -> str:
    high_impact = high_impact_percentage(stats)
    top_attack = attack_trends[0]["percentage"] if attack_trends else 0

    if high_impact > 40 or top_attack > 50:
        return "alto"
    if high_impact > 20 or top_attack > 30:
        return "medio"
    return "bajo"


def generate_key_insight(attack_trends: List[Dict], stats: Dict) -> str:
    high_impact = high_impact_percentage(stats)
    top_attack = attack_trends[0] if attack_trends else None

    if high_impact > 30:
        return (
            f"Alerta: El {high_impact:.1f}% de los reportes recientes involucran pérdidas financieras "
            f"o de datos. La comunidad necesita mayor vigilancia."
        )
    if top_attack and top_attack["percentage"] > 40:
        return (
            f"Tendencia dominante: Los ataques por {Catalog.translate_attack_type(top_attack['attack_type'])} "
            f"representan {top_attack['percentage']}% de las amenazas comunitarias."
        )
    return (
        f"La comunidad muestra diversidad en tipos de amenazas, con {stats.get('anonymous_percentage', 0)}% "
        f"de reportes anónimos indicando confianza en la plataforma."
    )


def generate_community_insights(stats: Dict, trends: List[Dict]) -> List[str]:
    insights = []

    if stats.get("total_reports", 0) > 50:
        insights.append(
            f"📊 Comunidad activa: {stats['total_reports']} reportes en los últimos 30 días demuestran alta participación."
        )

    if stats.get("anonymous_percentage", 0) > 70:
        insights.append(
            f"🔒 Alta privacidad: {stats['anonymous_percentage']}% de usuarios prefieren reportar de forma anónima."
        )

    if trends and trends[0]["percentage"] > 35:
        insights.append(
            f"⚠️ Amenaza predominante: {Catalog.translate_attack_type(trends[0]['attack_type'])} "
            f"requiere atención especial de la comunidad."
        )

    if not insights:
        insights.append("📈 La comunidad está desarrollando patrones de seguridad. Más datos permitirán mejores insights.")

    return insights


class CommunityService:

    def __init__(self):
        self.repository = CommunityRepository()

    def get_trends(self, period: Optional[str] = DEFAULT_PERIOD) -> Dict:
        """
        Community trends for a trailing period.

        Args:
            period: "7days", "30days" or "90days" (unknown values fall back to 30 days)
        """
        period = period if period in PERIOD_DAYS else DEFAULT_PERIOD
        days = PERIOD_DAYS[period]

        attack_trends = self.repository.get_attack_type_trends(days)
        impact_trends = self.repository.get_impact_level_trends(days)
        time_trends = self.repository.get_time_based_trends(days)
        stats = self.repository.get_community_stats(days)

        return {
            "period": period,
            "community_stats": stats,
            "attack_trends": attack_trends,
            "impact_trends": impact_trends,
            "time_trends": time_trends,
            "summary": self._summary(attack_trends, impact_trends, stats),
        }

    def _summary(self, attack_trends: List[Dict], impact_trends: List[Dict], stats: Dict) -> Dict:
        return {
            "main_threat": Catalog.translate_attack_type(attack_trends[0]["attack_type"]) if attack_trends else "N/A",
            "main_impact": Catalog.translate_impact_level(impact_trends[0]["attack_type"]) if impact_trends else "N/A",
            "total_reports": stats["total_reports"],
            "community_alert_level": calculate_alert_level(stats, attack_trends),
            "key_insight": generate_key_insight(attack_trends, stats),
        }

    def get_analytics(self) -> Dict:
        stats = self.repository.get_community_stats(30)
        recent_trends = self.repository.get_attack_type_trends(7)
        return {
            "community_overview": stats,
            "recent_trends": recent_trends,
            "suspicious_origins": self.repository.get_top_suspicious_origins(30, 10),
            "insights": generate_community_insights(stats, recent_trends),
        }

    def get_community_alert(self) -> Dict:
        """Current alert level computed over the last 7 days."""
        trends = self.get_trends("7days")
        level = trends["summary"]["community_alert_level"]
        top_attack = trends["attack_trends"][0]["attack_type"] if trends["attack_trends"] else None

        return {
            "alerta": {
                "nivel": level,
                "mensaje": ALERT_MESSAGES[level],
                "tipo_principal": trends["summary"]["main_threat"],
                "recomendaciones": self.get_prevention_tips(top_attack),
            },
            "stats": {
                "reportes_recientes": trends["community_stats"]["total_reports"],
                "impacto_alto": trends["community_stats"]["highest_impact_count"],
                "porcentaje_anonimo": trends["community_stats"]["anonymous_percentage"],
            },
        }

    def get_prevention_tips(self, attack_type: Optional[str]) -> List[str]:
        return list(PREVENTION_TIPS.get(attack_type, DEFAULT_PREVENTION_TIPS))

    def get_similar_reports(self, attack_type: str, impact_level: str, limit: int = 5) -> List[Dict]:
        attack_type_id = Catalog.get_attack_type_id(attack_type)
        impact_id = Catalog.get_impact_id(impact_level)
        if not attack_type_id or not impact_id:
            return []
        return self.repository.get_similar_reports(attack_type_id, impact_id, limit)


# Singleton instance
_community_service: Optional[CommunityService] = None


def get_community_service() -> CommunityService:
    global _community_service
    if _community_service is None:
        _community_service = CommunityService()
    return _community_service
