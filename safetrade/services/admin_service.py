"""
Admin Service - triage layer for administrators.

SCOPE OF ADMIN:
- Read every report with reporter contact data
- Move reports through the status catalog (nuevo, revisado, en_investigacion, cerrado)
- Annotate reports with notes and reusable note templates
- Read platform-wide dashboard statistics

Admins do NOT edit report content or delete reports.
"""

from typing import Dict, List, Optional
import logging

from safetrade.core.errors import NotFoundError, ValidationFailed
from safetrade.repositories.admin_repository import AdminRepository
from safetrade.repositories.reports_repository import total_pages
from safetrade.services.catalog_mapping import CatalogMappingService as Catalog
from safetrade.services.user_service import get_user_service, to_safe_user

logger = logging.getLogger(__name__)


def to_note(row: Dict) -> Dict:
    return {
        "id": row["id"],
        "reportId": row["report_id"],
        "adminId": row.get("admin_id"),
        "adminEmail": row.get("admin_email"),
        "content": row["content"],
        "isTemplate": bool(row.get("is_template")),
        "templateName": row.get("template_name"),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


class AdminService:

    def __init__(self):
        self.repository = AdminRepository()
        self.users = get_user_service()

    def get_all_users(self) -> List[Dict]:
        return self.users.find_all()

    def get_user_by_id(self, user_id: int) -> Optional[Dict]:
        return to_safe_user(self.users.find_by_id(user_id))

    def get_dashboard_stats(self) -> Dict:
        return {"total_users": self.repository.get_user_count(), **self.repository.get_report_stats()}

    def get_enhanced_dashboard_stats(self) -> Dict:
        return {"total_users": self.repository.get_user_count(), **self.repository.get_enhanced_stats()}

    def get_filtered_reports(self, filters: Optional[Dict] = None) -> List[Dict]:
        rows = self.repository.get_filtered_reports(filters or {})
        reports = Catalog.transform_reports_for_admin(rows)
        for report, row in zip(reports, rows):
            report["user_email"] = row.get("user_email")
            report["user_name"] = row.get("user_name")
        return reports

    def get_paginated_reports(self, filters: Optional[Dict] = None, page: int = 1, limit: int = 10) -> Dict:
        page = max(int(page or 1), 1)
        limit = max(int(limit or 10), 1)
        rows, total = self.repository.get_paginated_reports(filters or {}, page, limit)
        return {
            "data": [Catalog.transform_report_summary_for_admin(row) for row in rows],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages(total, limit),
        }

    def search_reports(self, query: Optional[str], filters: Optional[Dict] = None, page: int = 1, limit: int = 10) -> Dict:
        filters = dict(filters or {})
        if query:
            filters["q"] = query.strip()
        return self.get_paginated_reports(filters, page, limit)

    def get_report_detail(self, report_id: int) -> Dict:
        """
        Raises:
            NotFoundError: report does not exist
        """
        row = self.repository.get_report_by_id(report_id)
        if not row:
            raise NotFoundError("Reporte no encontrado")
        detail = Catalog.transform_report_for_admin(row)
        detail["user_email"] = row.get("user_email")
        detail["user_name"] = row.get("user_name")
        detail["notes"] = self.list_notes(report_id)
        return detail

    def update_report_status(self, report_id: int, status: str, admin_notes: Optional[str] = None) -> Dict:
        """
        Move a report to another status.

        Raises:
            ValidationFailed: status is not in the catalog
            NotFoundError: report does not exist
        """
        status_id = Catalog.get_status_id(status)
        if not status_id:
            raise ValidationFailed(f"Estado inválido: {status}")

        if not self.repository.update_report_status(report_id, status_id, admin_notes):
            raise NotFoundError("Reporte no encontrado")

        logger.info(f"Report {report_id} moved to status {status}")
        return Catalog.transform_report_for_admin(self.repository.get_report_by_id(report_id))

    def list_notes(self, report_id: int) -> List[Dict]:
        return [to_note(row) for row in self.repository.list_notes(report_id)]

    def create_note(
        self,
        report_id: int,
        admin_id: Optional[int],
        content: str,
        is_template: bool = False,
        template_name: Optional[str] = None,
    ) -> Dict:
        if not self.repository.get_report_by_id(report_id):
            raise NotFoundError("Reporte no encontrado")
        row = self.repository.create_note(report_id, admin_id, content, is_template, template_name)
        logger.info(f"Note {row['id']} added to report {report_id}")
        return to_note(row)

    def update_note(
        self,
        note_id: int,
        content: str,
        is_template: Optional[bool] = None,
        template_name: Optional[str] = None,
    ) -> Dict:
        row = self.repository.update_note(note_id, content, is_template, template_name)
        if not row:
            raise NotFoundError("Nota no encontrada")
        return to_note(row)

    def delete_note(self, note_id: int) -> None:
        if not self.repository.delete_note(note_id):
            raise NotFoundError("Nota no encontrada")


# Singleton instance
_admin_service: Optional[AdminService] = None


def get_admin_service() -> AdminService:
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService()
    return _admin_service
