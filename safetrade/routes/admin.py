"""
Admin endpoints - triage portal backend.

DESIGN PRINCIPLES:
- Every endpoint except /login requires an admin token
- Admins see reporter contact data; the public endpoints never do
- Admins move reports through the status catalog and annotate them
- Admins do NOT edit report content and do NOT delete reports
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from datetime import date
from typing import Optional
import logging

from safetrade.core.auth import AuthenticatedUser, require_admin
from safetrade.core.errors import NotFoundError, ValidationFailed
from safetrade.models.report import (
    AttackType,
    ImpactLevel,
    NoteRequest,
    NoteUpdateRequest,
    ReportStatus,
    StatusUpdateRequest,
)
from safetrade.models.user import LoginRequest
from safetrade.services.admin_service import get_admin_service
from safetrade.services.auth_service import get_auth_service
from safetrade.services.catalog_mapping import CatalogMappingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _value(enum_member) -> Optional[str]:
    return enum_member.value if enum_member is not None else None


@router.post("/login")
async def admin_login(request: LoginRequest):
    """
    Log an administrator in.

    Raises:
        401: Invalid credentials
    """
    try:
        result = get_auth_service().login_admin(request.email, request.password)
        if "error" in result:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result["error"])
        return {"success": True, **result}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Admin login failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor"
        )


@router.get("/validate-token")
async def validate_token(admin: AuthenticatedUser = Depends(require_admin)):
    return {"success": True, "valid": True, "admin": admin.profile}


@router.get("/users/list")
async def list_users(admin: AuthenticatedUser = Depends(require_admin)):
    users = get_admin_service().get_all_users()
    return {"success": True, "users": users, "total": len(users)}


@router.get("/users/{user_id}")
async def get_user(user_id: int, admin: AuthenticatedUser = Depends(require_admin)):
    user = get_admin_service().get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    return {"success": True, "user": user}


@router.get("/dashboard")
async def dashboard(admin: AuthenticatedUser = Depends(require_admin)):
    """
    Headline counts: users, reports, reports today, critical (data, money or
    account loss), pending (status nuevo) and the attack type distribution.
    """
    return {"success": True, "data": get_admin_service().get_dashboard_stats()}


@router.get("/dashboard/enhanced")
async def enhanced_dashboard(admin: AuthenticatedUser = Depends(require_admin)):
    return {"success": True, "data": get_admin_service().get_enhanced_dashboard_stats()}


@router.get("/catalogos")
async def catalog_mappings(admin: AuthenticatedUser = Depends(require_admin)):
    return {
        "success": True,
        "data": {
            "status": CatalogMappingService.get_all_status_mappings(),
            "attack_types": CatalogMappingService.get_all_attack_type_mappings(),
            "impacts": CatalogMappingService.get_all_impact_mappings(),
        },
    }


@router.get("/reportes")
async def filtered_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    attack_type: Optional[AttackType] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    admin: AuthenticatedUser = Depends(require_admin),
):
    """All reports matching the filters, in the admin detail shape."""
    reports = get_admin_service().get_filtered_reports({
        "status": _value(status_filter),
        "attack_type": _value(attack_type),
        "date_from": date_from,
        "date_to": date_to,
    })
    return {
        "success": True,
        "message": "Reportes obtenidos exitosamente",
        "reportes": reports,
        "total": len(reports),
    }


@router.get("/reports")
async def paginated_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    attack_type: Optional[AttackType] = Query(None),
    impact_level: Optional[ImpactLevel] = Query(None),
    admin: AuthenticatedUser = Depends(require_admin),
):
    return get_admin_service().get_paginated_reports(
        {
            "status": _value(status_filter),
            "attack_type": _value(attack_type),
            "impact_level": _value(impact_level),
        },
        page,
        limit,
    )


@router.get("/reports/search")
async def search_reports(
    q: Optional[str] = Query(None, max_length=200),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    attack_type: Optional[AttackType] = Query(None),
    impact_level: Optional[ImpactLevel] = Query(None),
    is_anonymous: Optional[bool] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    location: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: AuthenticatedUser = Depends(require_admin),
):
    """Free-text search over description, origin, message and URL plus filters."""
    return get_admin_service().search_reports(
        q,
        {
            "status": _value(status_filter),
            "attack_type": _value(attack_type),
            "impact_level": _value(impact_level),
            "is_anonymous": is_anonymous,
            "date_from": date_from,
            "date_to": date_to,
            "location": location,
        },
        page,
        limit,
    )


@router.get("/reports/{report_id}")
async def report_detail(report_id: int, admin: AuthenticatedUser = Depends(require_admin)):
    try:
        return {"success": True, "data": get_admin_service().get_report_detail(report_id)}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.put("/reports/{report_id}/status")
async def update_report_status(
    report_id: int,
    request: StatusUpdateRequest,
    admin: AuthenticatedUser = Depends(require_admin),
):
    """
    Move a report to another status, optionally storing a note on it.

    Raises:
        400: Unknown status
        404: Report not found
    """
    try:
        report = get_admin_service().update_report_status(report_id, request.status.value, request.adminNotes)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    logger.info(f"Admin {admin.user_id} set report {report_id} to {request.status.value}")
    return {"success": True, "message": "Estado actualizado exitosamente", "data": report}


@router.get("/reports/{report_id}/notes")
async def list_notes(report_id: int, admin: AuthenticatedUser = Depends(require_admin)):
    return {"success": True, "data": get_admin_service().list_notes(report_id)}


@router.post("/reports/{report_id}/notes", status_code=status.HTTP_201_CREATED)
async def create_note(report_id: int, request: NoteRequest, admin: AuthenticatedUser = Depends(require_admin)):
    try:
        note = get_admin_service().create_note(
            report_id, int(admin.user_id), request.content, request.isTemplate, request.templateName
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"success": True, "data": note}


@router.put("/notes/{note_id}")
async def update_note(note_id: int, request: NoteUpdateRequest, admin: AuthenticatedUser = Depends(require_admin)):
    try:
        note = get_admin_service().update_note(note_id, request.content, request.isTemplate, request.templateName)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"success": True, "data": note}


@router.delete("/notes/{note_id}")
async def delete_note(note_id: int, admin: AuthenticatedUser = Depends(require_admin)):
    try:
        get_admin_service().delete_note(note_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"success": True, "message": "Nota eliminada exitosamente"}
