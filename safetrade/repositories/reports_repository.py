"""
Reports repository - normalized `reports` table access.

Rows leave this module with catalog names (attack_type, impact_level,
status) instead of foreign keys, so services never see raw IDs.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from safetrade.core.errors import ValidationFailed
from safetrade.repositories.base import BaseRepository
from safetrade.services.catalog_mapping import CatalogMappingService as Catalog
from safetrade.utils.dates import (
    days_ago,
    end_of_day,
    start_of_day,
    start_of_today,
    to_db_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)

REPORT_SELECT = """
    SELECT r.*, u.email AS user_email, u.name AS user_name
    FROM reports r
    LEFT JOIN users u ON r.user_id = u.id
"""


def to_report(row: Dict) -> Dict:
    """Replace catalog IDs in a raw row with their names."""
    report = dict(row)
    report["attack_type"] = Catalog.get_attack_type_string(row.get("attack_type"))
    report["impact_level"] = Catalog.get_impact_string(row.get("impact"))
    report.pop("impact", None)
    report["status"] = Catalog.get_status_string(row.get("status"))
    report["is_anonymous"] = bool(row.get("is_anonymous"))
    return report


def build_report_filters(filters: Dict) -> Tuple[List[str], Dict]:
    """
    Translate a filter dict into WHERE clauses and bind parameters.

    Catalog names that do not resolve to an ID are ignored.
    """
    clauses: List[str] = []
    params: Dict = {}

    status_id = Catalog.get_status_id(filters.get("status"))
    if status_id:
        clauses.append("r.status = :status_id")
        params["status_id"] = status_id

    attack_type_id = Catalog.get_attack_type_id(filters.get("attack_type"))
    if attack_type_id:
        clauses.append("r.attack_type = :attack_type_id")
        params["attack_type_id"] = attack_type_id

    impact_id = Catalog.get_impact_id(filters.get("impact_level"))
    if impact_id:
        clauses.append("r.impact = :impact_id")
        params["impact_id"] = impact_id

    if filters.get("is_anonymous") is not None:
        clauses.append("r.is_anonymous = :is_anonymous")
        params["is_anonymous"] = bool(filters["is_anonymous"])

    if filters.get("date_from"):
        clauses.append("r.created_at >= :date_from")
        params["date_from"] = to_db_timestamp(start_of_day(filters["date_from"]))

    if filters.get("date_to"):
        clauses.append("r.created_at < :date_to")
        params["date_to"] = to_db_timestamp(end_of_day(filters["date_to"]))

    if filters.get("location"):
        clauses.append("r.attack_origin LIKE :location")
        params["location"] = f"%{filters['location']}%"

    if filters.get("q"):
        clauses.append(
            "(r.description LIKE :q OR r.attack_origin LIKE :q "
            "OR r.message_content LIKE :q OR r.suspicious_url LIKE :q)"
        )
        params["q"] = f"%{filters['q']}%"

    return clauses, params


class ReportsRepository(BaseRepository):

    def create_report(self, data: Dict) -> Dict:
        """
        Insert a report.

        Args:
            data: Report fields using catalog names (attack_type, impact_level)

        Returns:
            The stored report

        Raises:
            ValidationFailed: attack type or impact level is not in the catalog
        """
        attack_type_id = Catalog.get_attack_type_id(data.get("attack_type"))
        impact_id = Catalog.get_impact_id(data.get("impact_level"))
        if not attack_type_id or not impact_id:
            raise ValidationFailed("Valores de catálogo inválidos")

        now = to_db_timestamp(utc_now())
        report_id = self.insert(
            """
            INSERT INTO reports (
                user_id, is_anonymous, attack_type, incident_date, evidence_url,
                attack_origin, suspicious_url, message_content, description,
                impact, status, created_at, updated_at
            ) VALUES (
                :user_id, :is_anonymous, :attack_type, :incident_date, :evidence_url,
                :attack_origin, :suspicious_url, :message_content, :description,
                :impact, 1, :now, :now
            )
            """,
            {
                "user_id": data.get("user_id"),
                "is_anonymous": bool(data.get("is_anonymous", True)),
                "attack_type": attack_type_id,
                "incident_date": to_db_timestamp(data["incident_date"]),
                "evidence_url": data.get("evidence_url"),
                "attack_origin": data.get("attack_origin"),
                "suspicious_url": data.get("suspicious_url"),
                "message_content": data.get("message_content"),
                "description": data.get("description"),
                "impact": impact_id,
                "now": now,
            },
        )
        logger.info(f"Report stored: {report_id}")
        return self.find_by_id(report_id)

    def find_by_id(self, report_id: int) -> Optional[Dict]:
        row = self.fetch_one(f"{REPORT_SELECT} WHERE r.id = :id", {"id": report_id})
        return to_report(row) if row else None

    def find_user_reports(self, user_id: int) -> List[Dict]:
        """Identified reports of one user, newest first."""
        rows = self.fetch_all(
            f"""{REPORT_SELECT}
            WHERE r.user_id = :user_id AND r.is_anonymous = :is_anonymous
            ORDER BY r.created_at DESC, r.id DESC
            """,
            {"user_id": user_id, "is_anonymous": False},
        )
        return [to_report(row) for row in rows]

    def find_all_reports(self, filters: Optional[Dict] = None) -> Tuple[List[Dict], int]:
        """
        Filtered, paginated listing.

        Returns:
            (reports on the requested page, total matching reports)
        """
        filters = filters or {}
        page = max(int(filters.get("page") or 1), 1)
        limit = max(int(filters.get("limit") or 10), 1)

        clauses, params = build_report_filters(filters)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        total = int(self.fetch_scalar(f"SELECT COUNT(*) FROM reports r {where}", params))

        rows = self.fetch_all(
            f"""{REPORT_SELECT} {where}
            ORDER BY r.created_at DESC, r.id DESC
            LIMIT :limit OFFSET :offset
            """,
            {**params, "limit": limit, "offset": (page - 1) * limit},
        )

        reports = []
        for row in rows:
            report = to_report(row)
            report["reporter_name"] = (
                "Anónimo" if report["is_anonymous"] else (row.get("user_name") or row.get("user_email"))
            )
            reports.append(report)
        return reports, total

    def find_recent_reports(self, limit: int = 10) -> List[Dict]:
        rows = self.fetch_all(
            f"{REPORT_SELECT} ORDER BY r.created_at DESC, r.id DESC LIMIT :limit",
            {"limit": limit},
        )
        return [to_report(row) for row in rows]

    def _trends(self, column: str, catalog_table: str, days: int) -> List[Dict]:
        since = to_db_timestamp(days_ago(days))
        rows = self.fetch_all(
            f"""
            SELECT c.name AS name, COUNT(*) AS count
            FROM reports r
            JOIN {catalog_table} c ON r.{column} = c.id
            WHERE r.created_at >= :since
            GROUP BY c.id, c.name
            ORDER BY count DESC
            """,
            {"since": since},
        )
        total = sum(int(row["count"]) for row in rows)
        return [
            {
                "name": row["name"],
                "count": int(row["count"]),
                "percentage": round(int(row["count"]) * 100.0 / total, 2) if total else 0.0,
            }
            for row in rows
        ]

    def get_trends_by_attack_type(self, days: int = 30) -> List[Dict]:
        return [
            {"attack_type": t["name"], "count": t["count"], "percentage": t["percentage"]}
            for t in self._trends("attack_type", "attack_types", days)
        ]

    def get_trends_by_impact_level(self, days: int = 30) -> List[Dict]:
        return [
            {"impact_level": t["name"], "count": t["count"], "percentage": t["percentage"]}
            for t in self._trends("impact", "impacts", days)
        ]

    def get_report_stats(self) -> Dict[str, int]:
        row = self.fetch_one(
            """
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN created_at >= :today THEN 1 ELSE 0 END) AS today,
                SUM(CASE WHEN created_at >= :week THEN 1 ELSE 0 END) AS this_week,
                SUM(CASE WHEN is_anonymous = :anonymous THEN 1 ELSE 0 END) AS anonymous,
                SUM(CASE WHEN is_anonymous = :identified THEN 1 ELSE 0 END) AS identified
            FROM reports
            """,
            {
                "today": to_db_timestamp(start_of_today()),
                "week": to_db_timestamp(days_ago(7)),
                "anonymous": True,
                "identified": False,
            },
        )
        return {key: int(row.get(key) or 0) for key in ("total", "today", "this_week", "anonymous", "identified")}

    def update_report_status(self, report_id: int, status_id: int, admin_notes: Optional[str] = None) -> bool:
        params = {"id": report_id, "status": status_id, "now": to_db_timestamp(utc_now())}
        if admin_notes is not None:
            sql = "UPDATE reports SET status = :status, admin_notes = :admin_notes, updated_at = :now WHERE id = :id"
            params["admin_notes"] = admin_notes
        else:
            sql = "UPDATE reports SET status = :status, updated_at = :now WHERE id = :id"
        return self.execute(sql, params) > 0


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
