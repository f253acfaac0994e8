"""
Report Service - citizen attack reports.

Handles validation of incoming reports, listing, statistics and the
guidance returned to the reporter (recommendations and victim support).

DESIGN PRINCIPLES:
- Anonymous reports never store a user ID
- Public views never expose reporter identity
- Guidance is rule based and deterministic
"""

from datetime import datetime
from typing import Dict, List, Optional
import logging

from safetrade.core.errors import ValidationFailed
from safetrade.repositories.attachments_repository import AttachmentsRepository
from safetrade.repositories.catalog_repository import CatalogRepository
from safetrade.repositories.reports_repository import ReportsRepository, total_pages
from safetrade.services.catalog_mapping import CatalogMappingService as Catalog
from safetrade.services.evidence_storage import StoredFile

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("attack_type", "incident_date", "attack_origin", "impact_level")
URGENCY_KEYWORDS = ("urgente", "inmediato", "inmediata")

ATTACK_TYPE_RECOMMENDATIONS: Dict[str, List[str]] = {
    "email": [
        "Verifica siempre la dirección del remitente antes de abrir enlaces o archivos adjuntos",
        "No proporciones información personal o financiera por correo electrónico",
        "Utiliza un filtro de spam en tu cliente de correo",
    ],
    "whatsapp": [
        "No hagas clic en enlaces sospechosos enviados por WhatsApp",
        "Verifica la identidad del remitente antes de compartir información",
        "Activa la verificación en dos pasos en WhatsApp",
    ],
    "SMS": [
        "No respondas a mensajes SMS de números desconocidos",
        "No hagas clic en enlaces recibidos por SMS",
        "Verifica directamente con la empresa si recibes mensajes que parecen oficiales",
    ],
    "llamada": [
        "No proporciones información personal por teléfono",
        "Cuelga y llama directamente a la empresa si alguien solicita datos sensibles",
        "Desconfía de llamadas que crean urgencia o presión",
    ],
    "redes_sociales": [
        "Revisa la configuración de privacidad en tus redes sociales",
        "No aceptes solicitudes de amistad de personas desconocidas",
        "Desconfía de ofertas demasiado buenas para ser verdad",
    ],
}

DEFAULT_RECOMMENDATIONS = [
    "Mantén siempre actualizados tus sistemas y aplicaciones",
    "Usa contraseñas fuertes y diferentes para cada servicio",
]

IMPACT_RECOMMENDATIONS: Dict[str, List[str]] = {
    "robo_dinero": [
        "Contacta inmediatamente a tu banco para reportar el incidente",
        "Cambia las contraseñas de todas tus cuentas bancarias y financieras",
        "Solicita el bloqueo temporal de tus tarjetas si es necesario",
    ],
    "robo_datos": [
        "Cambia inmediatamente las contraseñas de las cuentas comprometidas",
        "Activa la autenticación de dos factores donde sea posible",
        "Monitorea tus cuentas regularmente en busca de actividad sospechosa",
    ],
    "cuenta_comprometida": [
        "Cambia la contraseña de la cuenta comprometida inmediatamente",
        "Revisa la configuración de seguridad de la cuenta",
        "Verifica si hay sesiones activas no autorizadas",
    ],
}

VICTIM_SUPPORT: Dict[str, Dict] = {
    "robo_dinero": {
        "title": "Pasos urgentes para víctimas de robo financiero",
        "steps": [
            "Contacta inmediatamente a tu banco (24/7)",
            "Reporta el fraude a las autoridades locales",
            "Documenta todas las transacciones no autorizadas",
            "Solicita el bloqueo de tarjetas comprometidas",
            "Cambia todas las contraseñas bancarias",
        ],
        "resources": [
            "Línea directa del banco: disponible 24/7",
            "Policía Nacional - Unidad de Delitos Informáticos",
            "Condusef (México) - Comisión Nacional para la Protección de Usuarios",
        ],
    },
    "robo_datos": {
        "title": "Pasos para proteger datos comprometidos",
        "steps": [
            "Cambia inmediatamente todas las contraseñas",
            "Activa la autenticación de dos factores",
            "Revisa todas las cuentas en busca de actividad sospechosa",
            "Considera congelar tu reporte crediticio",
            "Documenta el incidente para futura referencia",
        ],
        "resources": [
            "Generador de contraseñas seguras",
            "Guías de autenticación de dos factores",
            "Servicios de monitoreo de identidad",
        ],
    },
}

DEFAULT_VICTIM_SUPPORT = {
    "title": "Pasos inmediatos para víctimas de ciberataques",
    "steps": [
        "Documenta el incidente con capturas de pantalla",
        "No interactúes más con el atacante",
        "Reporta el incidente en esta plataforma",
        "Comparte la información con tu comunidad",
        "Mantente alerta ante futuros intentos",
    ],
    "resources": [
        "Centro de ayuda de SafeTrade",
        "Comunidad de usuarios para soporte",
        "Recursos educativos sobre ciberseguridad",
    ],
}


class ReportService:
    """
    Service for citizen reports.
    """

    def __init__(self):
        self.reports = ReportsRepository()
        self.attachments = AttachmentsRepository()
        self.catalog = CatalogRepository()

    def create_report(self, data: Dict) -> Dict:
        """
        Validate and store a report.

        Args:
            data: Report fields with catalog names; `user_id` is None for anonymous reports

        Returns:
            Stored report

        Raises:
            ValidationFailed: required fields missing or catalog values invalid
        """
        missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
        if missing:
            raise ValidationFailed(f"Campos requeridos: {', '.join(missing)}")

        if not Catalog.get_attack_type_id(data["attack_type"]):
            raise ValidationFailed("Tipo de ataque inválido")
        if not Catalog.get_impact_id(data["impact_level"]):
            raise ValidationFailed("Nivel de impacto inválido")
        if not isinstance(data["incident_date"], datetime):
            raise ValidationFailed("Fecha del incidente inválida")

        if data.get("is_anonymous"):
            data = {**data, "user_id": None}

        return self.reports.create_report(data)

    def get_report_by_id(self, report_id: int) -> Optional[Dict]:
        return self.reports.find_by_id(report_id)

    def get_user_reports(self, user_id: int) -> List[Dict]:
        return self.reports.find_user_reports(user_id)

    def get_all_reports(self, filters: Optional[Dict] = None) -> Dict:
        filters = dict(filters or {})
        filters["page"] = max(int(filters.get("page") or 1), 1)
        filters["limit"] = max(int(filters.get("limit") or 10), 1)

        reports, total = self.reports.find_all_reports(filters)
        return {
            "reports": reports,
            "total": total,
            "page": filters["page"],
            "limit": filters["limit"],
            "total_pages": total_pages(total, filters["limit"]),
        }

    def get_recent_reports(self, limit: int = 10) -> List[Dict]:
        return self.reports.find_recent_reports(limit)

    def get_report_stats(self) -> Dict:
        return {
            **self.reports.get_report_stats(),
            "attack_trends": self.reports.get_trends_by_attack_type(30),
            "impact_trends": self.reports.get_trends_by_impact_level(30),
        }

    def get_catalog_data(self) -> Dict:
        return self.catalog.get_all_catalog_data()

    def add_attachment(self, report_id: int, stored: StoredFile) -> Dict:
        attachment = self.attachments.create_attachment(
            report_id=report_id,
            file_path=stored.path,
            file_hash=stored.sha256,
            original_name=stored.original_name,
            mime_type=stored.mimetype,
            size_bytes=stored.size,
        )
        return {
            "id": attachment["id"],
            "filename": stored.original_name,
            "size": stored.size,
            "mimetype": stored.mimetype,
        }

    def get_attachments(self, report_id: int) -> List[Dict]:
        return [
            {
                "id": row["id"],
                "filename": row.get("original_name"),
                "size": row.get("size_bytes"),
                "mimetype": row.get("mime_type"),
                "uploaded_at": row.get("uploaded_at"),
            }
            for row in self.attachments.find_by_report_id(report_id)
        ]

    def generate_recommendations(self, report: Dict) -> List[str]:
        recommendations = list(
            ATTACK_TYPE_RECOMMENDATIONS.get(report.get("attack_type"), DEFAULT_RECOMMENDATIONS)
        )
        recommendations.extend(IMPACT_RECOMMENDATIONS.get(report.get("impact_level"), []))

        if report.get("suspicious_url"):
            recommendations.append("Evita hacer clic en la URL reportada y comparte esta información con tu red")
            recommendations.append(
                "Considera reportar la URL maliciosa a servicios de seguridad como Google Safe Browsing"
            )

        message = report.get("message_content")
        if message:
            recommendations.append("Guarda el contenido del mensaje como evidencia para futuras investigaciones")
            if any(keyword in message.lower() for keyword in URGENCY_KEYWORDS):
                recommendations.append(
                    "Desconfía de mensajes que crean sensación de urgencia - es una táctica común de atacantes"
                )

        return recommendations

    def get_victim_support(self, report: Dict) -> Dict:
        support = VICTIM_SUPPORT.get(report.get("impact_level"), DEFAULT_VICTIM_SUPPORT)
        return {
            "title": support["title"],
            "steps": list(support["steps"]),
            "resources": list(support["resources"]),
        }


# Singleton instance
_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
