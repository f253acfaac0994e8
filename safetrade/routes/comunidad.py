"""
Community endpoints - aggregate trends for situational awareness.
Open to everyone; a session only changes the reported access type.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from safetrade.core.auth import AuthenticatedUser, optional_user
from safetrade.services.community_service import DEFAULT_PERIOD, get_community_service, period_to_days

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tendencias-comunidad", tags=["Comunidad"])


@router.get("")
async def community_index():
    return {
        "success": True,
        "message": "Tendencias de la comunidad SafeTrade",
        "endpoints": ["/tendencias", "/analitica", "/alerta", "/recomendaciones"],
    }


@router.get("/tendencias")
async def get_trends(
    period: str = Query(DEFAULT_PERIOD, pattern="^(7days|30days|90days)$"),
    current_user: AuthenticatedUser = Depends(optional_user),
):
    """
    Attack, impact and daily trends for the last 7, 30 or 90 days.
    """
    try:
        data = get_community_service().get_trends(period)
        return {
            "success": True,
            "message": f"Tendencias comunitarias de los últimos {period_to_days(period)} días",
            "data": data,
            "user_context": {
                "access_type": "anónimo" if current_user.is_anonymous else "identificado",
            },
        }
    except Exception as e:
        logger.error(f"Failed to compute community trends: {str(e)}", exc_info=True)
        return {"success": False, "message": "Error al obtener tendencias comunitarias"}


@router.get("/analitica")
async def get_analytics():
    try:
        return {
            "success": True,
            "message": "Analytics comunitarios obtenidos exitosamente",
            "data": get_community_service().get_analytics(),
        }
    except Exception as e:
        logger.error(f"Failed to compute community analytics: {str(e)}", exc_info=True)
        return {"success": False, "message": "Error al obtener analytics comunitarios"}


@router.get("/alerta")
async def get_community_alert():
    """Alert level for the last 7 days with prevention tips for the top threat."""
    try:
        return {"success": True, **get_community_service().get_community_alert()}
    except Exception as e:
        logger.error(f"Failed to compute community alert: {str(e)}", exc_info=True)
        return {"success": False, "message": "Error al obtener alerta comunitaria"}


@router.get("/recomendaciones")
async def get_prevention_tips(attack_type: Optional[str] = Query(None)):
    return {
        "success": True,
        "attack_type": attack_type,
        "recomendaciones": get_community_service().get_prevention_tips(attack_type),
    }
