"""
Catalog Mapping Service - translate between catalog IDs and enum strings.

Reports store attack type, impact and status as foreign keys into the
catalog tables. Every response, however, speaks the human-readable names
("email", "robo_dinero", "en_investigacion"). This service owns both
directions of that translation plus the admin-facing row transforms.

RULES:
- Unknown ID -> str(id) (never fails a response)
- Unknown name -> 0 (never a valid catalog ID)
"""

from typing import Dict, List, Optional

from safetrade.config.database import ATTACK_TYPE_SEED, IMPACT_SEED, STATUS_SEED


ATTACK_TYPE_LABELS: Dict[str, str] = {
    "email": "Correo Electrónico",
    "SMS": "Mensajes SMS",
    "whatsapp": "WhatsApp",
    "llamada": "Llamadas Telefónicas",
    "redes_sociales": "Redes Sociales",
    "otro": "Otros",
}

IMPACT_LABELS: Dict[str, str] = {
    "ninguno": "Sin Impacto",
    "robo_datos": "Robo de Datos",
    "robo_dinero": "Robo de Dinero",
    "cuenta_comprometida": "Cuenta Comprometida",
}

UNSPECIFIED_LOCATION = "Ubicación no especificada"


def _invert(mapping: Dict[int, str]) -> Dict[str, int]:
    return {name: catalog_id for catalog_id, name in mapping.items()}


class CatalogMappingService:
    """
    Stateless ID <-> name translation for the three report catalogs.
    """

    STATUS_MAP: Dict[int, str] = dict(STATUS_SEED)
    ATTACK_TYPE_MAP: Dict[int, str] = dict(ATTACK_TYPE_SEED)
    IMPACT_MAP: Dict[int, str] = dict(IMPACT_SEED)

    STATUS_REVERSE: Dict[str, int] = _invert(STATUS_SEED)
    ATTACK_TYPE_REVERSE: Dict[str, int] = _invert(ATTACK_TYPE_SEED)
    IMPACT_REVERSE: Dict[str, int] = _invert(IMPACT_SEED)

    @classmethod
    def get_status_string(cls, status_id) -> str:
        return cls._lookup(cls.STATUS_MAP, status_id)

    @classmethod
    def get_attack_type_string(cls, attack_type_id) -> str:
        return cls._lookup(cls.ATTACK_TYPE_MAP, attack_type_id)

    @classmethod
    def get_impact_string(cls, impact_id) -> str:
        return cls._lookup(cls.IMPACT_MAP, impact_id)

    @classmethod
    def get_status_id(cls, name: Optional[str]) -> int:
        return cls.STATUS_REVERSE.get(name, 0)

    @classmethod
    def get_attack_type_id(cls, name: Optional[str]) -> int:
        return cls.ATTACK_TYPE_REVERSE.get(name, 0)

    @classmethod
    def get_impact_id(cls, name: Optional[str]) -> int:
        return cls.IMPACT_REVERSE.get(name, 0)

    @staticmethod
    def _lookup(mapping: Dict[int, str], catalog_id) -> str:
        try:
            return mapping.get(int(catalog_id), str(catalog_id))
        except (TypeError, ValueError):
            return str(catalog_id)

    @classmethod
    def transform_report_for_admin(cls, row: Dict) -> Dict:
        """
        Convert a raw reports row into the admin detail shape.

        Catalog foreign keys become names and is_anonymous becomes a bool.
        Accepts rows that carry either `impact` or `impact_level`.
        """
        impact = row.get("impact", row.get("impact_level"))
        return {
            "id": row.get("id"),
            "user_id": row.get("user_id"),
            "is_anonymous": bool(row.get("is_anonymous")),
            "attack_type": cls.get_attack_type_string(row.get("attack_type")),
            "incident_date": row.get("incident_date"),
            "attack_origin": row.get("attack_origin"),
            "evidence_url": row.get("evidence_url"),
            "suspicious_url": row.get("suspicious_url"),
            "message_content": row.get("message_content"),
            "impact_level": cls.get_impact_string(impact),
            "status": cls.get_status_string(row.get("status")),
            "description": row.get("description"),
            "admin_notes": row.get("admin_notes") or row.get("admin_note"),
            "created_at": row.get("created_at"),
            "updated_at": row.get("updated_at"),
        }

    @classmethod
    def transform_reports_for_admin(cls, rows: List[Dict]) -> List[Dict]:
        return [cls.transform_report_for_admin(row) for row in rows]

    @classmethod
    def transform_report_summary_for_admin(cls, row: Dict) -> Dict:
        """camelCase summary used by the admin portal listings."""
        impact = row.get("impact", row.get("impact_level"))
        return {
            "id": row.get("id"),
            "userId": row.get("user_id"),
            "isAnonymous": bool(row.get("is_anonymous")),
            "attackType": cls.get_attack_type_string(row.get("attack_type")),
            "incidentDate": row.get("incident_date"),
            "attackOrigin": row.get("attack_origin"),
            "evidenceUrl": row.get("evidence_url"),
            "suspiciousUrl": row.get("suspicious_url"),
            "messageContent": row.get("message_content"),
            "impactLevel": cls.get_impact_string(impact),
            "status": cls.get_status_string(row.get("status")),
            "description": row.get("description"),
            "location": row.get("attack_origin") or UNSPECIFIED_LOCATION,
            "adminNotes": row.get("admin_notes"),
            "createdAt": row.get("created_at"),
            "updatedAt": row.get("updated_at"),
            "userEmail": row.get("user_email"),
            "userName": row.get("user_name"),
        }

    @classmethod
    def get_all_status_mappings(cls) -> Dict:
        return {"id_to_string": dict(cls.STATUS_MAP), "string_to_id": dict(cls.STATUS_REVERSE)}

    @classmethod
    def get_all_attack_type_mappings(cls) -> Dict:
        return {"id_to_string": dict(cls.ATTACK_TYPE_MAP), "string_to_id": dict(cls.ATTACK_TYPE_REVERSE)}

    @classmethod
    def get_all_impact_mappings(cls) -> Dict:
        return {"id_to_string": dict(cls.IMPACT_MAP), "string_to_id": dict(cls.IMPACT_REVERSE)}

    @staticmethod
    def translate_attack_type(name: str) -> str:
        return ATTACK_TYPE_LABELS.get(name, name)

    @staticmethod
    def translate_impact_level(name: str) -> str:
        return IMPACT_LABELS.get(name, name)
