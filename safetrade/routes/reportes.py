"""
Report endpoints - citizens submit and consult attack reports.

PRIVACY RULES:
- Reports are anonymous unless the reporter is authenticated and opts in
- Anonymous reports never store a user ID
- Public views never include reporter identity or admin notes
- Reporter details are shown only to the owner of an identified report
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, List, Optional
import logging

from safetrade.core.auth import AuthenticatedUser, optional_user, require_user
from safetrade.core.errors import SafeTradeError, UploadRejected, ValidationFailed
from safetrade.core.settings import settings
from safetrade.models.report import AttackType, CrearReporte, ImpactLevel, ReportStatus
from safetrade.services.community_service import get_community_service
from safetrade.services.evidence_storage import get_evidence_storage
from safetrade.services.report_service import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reportes", tags=["Reportes"])

PUBLIC_FIELDS = ("id", "attack_type", "incident_date", "impact_level", "description", "status", "created_at")
OWNER_FIELDS = (
    "id", "user_id", "is_anonymous", "attack_type", "incident_date", "attack_origin",
    "evidence_url", "suspicious_url", "message_content", "impact_level", "description",
    "status", "created_at", "updated_at",
)


def to_public_report(report: Dict) -> Dict:
    return {field: report.get(field) for field in PUBLIC_FIELDS}


def to_owner_report(report: Dict) -> Dict:
    return {field: report.get(field) for field in OWNER_FIELDS}


def _owns(report: Dict, user: AuthenticatedUser) -> bool:
    return (
        not user.is_anonymous
        and not report.get("is_anonymous")
        and report.get("user_id") is not None
        and str(report["user_id"]) == user.user_id
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(
    request: Request,
    attack_type: Optional[str] = Form(None),
    incident_date: Optional[str] = Form(None),
    incident_time: Optional[str] = Form(None),
    attack_origin: Optional[str] = Form(None),
    impact_level: Optional[str] = Form(None),
    is_anonymous: Optional[str] = Form(None),
    evidence_url: Optional[str] = Form(None),
    suspicious_url: Optional[str] = Form(None),
    message_content: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    evidencias: Optional[List[UploadFile]] = File(None),
    current_user: AuthenticatedUser = Depends(optional_user),
):
    """
    Submit an attack report (multipart form, optional evidence files).

    Works with or without a session. Without a session the report is
    always anonymous. With a session it is identified unless
    `is_anonymous` is true.

    Returns:
        Stored report, recommendations, victim support (null when there was
        no impact) and the accepted attachments

    Raises:
        400: Business validation failed or too many files
        422: Malformed or unknown fields
    """
    fields = {
        "attack_type": attack_type,
        "incident_date": incident_date,
        "incident_time": incident_time,
        "attack_origin": attack_origin,
        "impact_level": impact_level,
        "is_anonymous": is_anonymous,
        "evidence_url": evidence_url,
        "suspicious_url": suspicious_url,
        "message_content": message_content,
        "description": description,
    }
    form = await request.form()
    unknown = sorted(set(form.keys()) - set(fields) - {"evidencias"})
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Campos no permitidos: {', '.join(unknown)}",
        )

    try:
        dto = CrearReporte(**{key: value for key, value in fields.items() if value not in (None, "")})
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )

    files = [f for f in (evidencias or []) if f is not None and f.filename]
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Máximo {settings.MAX_UPLOAD_FILES} archivos por reporte",
        )

    report_service = get_report_service()
    data = dto.to_service_data()
    if current_user.is_anonymous:
        data["is_anonymous"] = True
    elif data["is_anonymous"] is None:
        data["is_anonymous"] = False
    data["user_id"] = None if data["is_anonymous"] else current_user.numeric_id

    try:
        report = report_service.create_report(data)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to create report: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al crear el reporte: {str(e)}" if settings.is_development else "Error al crear el reporte",
        )

    storage = get_evidence_storage()
    attachments = []
    for upload in files:
        stored = None
        try:
            content = await storage.read_upload(upload)
            stored = storage.save(upload.filename, upload.content_type, content)
            attachments.append(report_service.add_attachment(report["id"], stored))
        except UploadRejected as e:
            logger.warning(f"Evidence '{upload.filename}' rejected for report {report['id']}: {e.message}")
        except (OSError, SQLAlchemyError, SafeTradeError) as e:
            logger.error(f"Evidence '{upload.filename}' failed for report {report['id']}: {str(e)}", exc_info=True)
            if stored is not None:
                storage.delete(stored.path)

    logger.info(
        f"Report {report['id']} created ({'anonymous' if report['is_anonymous'] else 'identified'}, "
        f"{len(attachments)}/{len(files)} attachments)"
    )

    return {
        "success": True,
        "message": "Reporte creado exitosamente",
        "reporte": to_owner_report(report),
        "recommendations": report_service.generate_recommendations(report),
        "victim_support": (
            None if report["impact_level"] == ImpactLevel.NINGUNO.value
            else report_service.get_victim_support(report)
        ),
        "attachments": attachments,
        "files_uploaded": len(files),
    }


@router.get("")
async def list_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    attack_type: Optional[AttackType] = Query(None),
    impact_level: Optional[ImpactLevel] = Query(None),
):
    """Public paginated listing. No reporter data is included."""
    result = get_report_service().get_all_reports({
        "page": page,
        "limit": limit,
        "status": status_filter.value if status_filter else None,
        "attack_type": attack_type.value if attack_type else None,
        "impact_level": impact_level.value if impact_level else None,
    })
    return {
        "success": True,
        "reportes": [to_public_report(r) for r in result["reports"]],
        "total": result["total"],
        "page": result["page"],
        "limit": result["limit"],
        "totalPages": result["total_pages"],
    }


@router.get("/catalogos")
async def get_catalogs():
    """Attack types, impacts and statuses for form dropdowns."""
    return {"success": True, "data": get_report_service().get_catalog_data()}


@router.get("/estadisticas")
async def get_statistics():
    return {"success": True, "data": get_report_service().get_report_stats()}


@router.get("/user/mis-reportes")
async def get_my_reports(current_user: AuthenticatedUser = Depends(require_user)):
    """Identified reports filed by the authenticated citizen, newest first."""
    reports = get_report_service().get_user_reports(current_user.numeric_id)
    return {
        "success": True,
        "reportes": [to_owner_report(r) for r in reports],
        "total": len(reports),
    }


@router.get("/{report_id}")
async def get_report(report_id: int, current_user: AuthenticatedUser = Depends(optional_user)):
    """
    Report detail. `user_info` is only filled for the owner of an identified report.

    Raises:
        404: Report not found
    """
    report = get_report_service().get_report_by_id(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporte no encontrado")

    view = to_public_report(report)
    view["user_info"] = (
        {"id": report["user_id"], "email": report.get("user_email"), "name": report.get("user_name")}
        if _owns(report, current_user)
        else None
    )
    return {"success": True, "reporte": view}


@router.get("/{report_id}/recomendaciones")
async def get_recommendations(report_id: int):
    report_service = get_report_service()
    report = report_service.get_report_by_id(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporte no encontrado")

    return {
        "success": True,
        "recommendations": report_service.generate_recommendations(report),
        "victim_support": report_service.get_victim_support(report),
        "similar_reports": get_community_service().get_similar_reports(
            report["attack_type"], report["impact_level"]
        ),
    }


@router.get("/{report_id}/adjuntos")
async def get_attachments(report_id: int, current_user: AuthenticatedUser = Depends(require_user)):
    """Evidence metadata, visible only to the owner of an identified report."""
    report_service = get_report_service()
    report = report_service.get_report_by_id(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporte no encontrado")
    if not _owns(report, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No tienes acceso a este reporte")

    return {"success": True, "attachments": report_service.get_attachments(report_id)}
