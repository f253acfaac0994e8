"""
Admin repository - dashboard aggregates, triage queries and report notes.
"""

from typing import Dict, List, Optional

from safetrade.repositories.base import BaseRepository
from safetrade.repositories.community_repository import HIGH_IMPACT_IDS
from safetrade.repositories.reports_repository import REPORT_SELECT, build_report_filters
from safetrade.utils.dates import days_ago, start_of_today, to_datetime, to_db_timestamp, utc_now

PENDING_STATUS_ID = 1  # nuevo
CLOSED_STATUS_ID = 4  # cerrado


class AdminRepository(BaseRepository):

    def get_user_count(self) -> int:
        return int(self.fetch_scalar("SELECT COUNT(*) FROM users"))

    def _distribution(self, column: str, catalog_table: str, id_key: str, name_key: str) -> List[Dict]:
        rows = self.fetch_all(
            f"""
            SELECT c.id AS catalog_id, c.name AS catalog_name, COUNT(r.id) AS count
            FROM {catalog_table} c
            LEFT JOIN reports r ON r.{column} = c.id
            GROUP BY c.id, c.name
            ORDER BY count DESC, c.id ASC
            """
        )
        return [
            {id_key: row["catalog_id"], name_key: row["catalog_name"], "count": int(row["count"])}
            for row in rows
        ]

    def get_report_stats(self) -> Dict:
        row = self.fetch_one(
            f"""
            SELECT
                COUNT(*) AS total_reports,
                SUM(CASE WHEN created_at >= :today THEN 1 ELSE 0 END) AS reports_today,
                SUM(CASE WHEN impact IN {HIGH_IMPACT_IDS} THEN 1 ELSE 0 END) AS critical_reports,
                SUM(CASE WHEN status = :pending THEN 1 ELSE 0 END) AS pending_reports
            FROM reports
            """,
            {"today": to_db_timestamp(start_of_today()), "pending": PENDING_STATUS_ID},
        )
        stats = {key: int(value or 0) for key, value in row.items()}
        stats["attack_types"] = [
            {"attack_type": entry["attack_type_name"], "count": entry["count"]}
            for entry in self._distribution("attack_type", "attack_types", "attack_type_id", "attack_type_name")
            if entry["count"] > 0
        ]
        return stats

    def get_enhanced_stats(self) -> Dict:
        row = self.fetch_one(
            f"""
            SELECT
                COUNT(*) AS total_reports,
                SUM(CASE WHEN created_at >= :today THEN 1 ELSE 0 END) AS reports_today,
                SUM(CASE WHEN created_at >= :week THEN 1 ELSE 0 END) AS reports_this_week,
                SUM(CASE WHEN created_at >= :month THEN 1 ELSE 0 END) AS reports_this_month,
                SUM(CASE WHEN impact IN {HIGH_IMPACT_IDS} THEN 1 ELSE 0 END) AS critical_reports,
                SUM(CASE WHEN status = :pending THEN 1 ELSE 0 END) AS pending_reports,
                SUM(CASE WHEN status = :closed THEN 1 ELSE 0 END) AS resolved_reports,
                SUM(CASE WHEN is_anonymous = :anonymous THEN 1 ELSE 0 END) AS anonymous_reports,
                SUM(CASE WHEN is_anonymous = :identified THEN 1 ELSE 0 END) AS identified_reports
            FROM reports
            """,
            {
                "today": to_db_timestamp(start_of_today()),
                "week": to_db_timestamp(days_ago(7)),
                "month": to_db_timestamp(days_ago(30)),
                "pending": PENDING_STATUS_ID,
                "closed": CLOSED_STATUS_ID,
                "anonymous": True,
                "identified": False,
            },
        )
        stats = {key: int(value or 0) for key, value in row.items()}
        stats["response_times"] = {"avg_resolution_time": self._average_resolution_days()}
        stats["attack_types"] = self._distribution(
            "attack_type", "attack_types", "attack_type_id", "attack_type_name"
        )
        stats["impact_distribution"] = self._distribution("impact", "impacts", "impact_id", "impact_name")
        stats["status_distribution"] = self._distribution("status", "status", "status_id", "status_name")
        return stats

    def _average_resolution_days(self) -> float:
        rows = self.fetch_all(
            "SELECT created_at, updated_at FROM reports WHERE status = :closed",
            {"closed": CLOSED_STATUS_ID},
        )
        durations = []
        for row in rows:
            created, updated = to_datetime(row["created_at"]), to_datetime(row["updated_at"])
            if created and updated:
                durations.append((updated - created).total_seconds() / 86400)
        return round(sum(durations) / len(durations), 1) if durations else 0.0

    def get_filtered_reports(self, filters: Optional[Dict] = None) -> List[Dict]:
        """Raw report rows (catalog IDs intact) matching the admin filters."""
        clauses, params = build_report_filters(filters or {})
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return self.fetch_all(f"{REPORT_SELECT} {where} ORDER BY r.created_at DESC, r.id DESC", params)

    def get_paginated_reports(self, filters: Dict, page: int, limit: int):
        clauses, params = build_report_filters(filters)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        total = int(self.fetch_scalar(f"SELECT COUNT(*) FROM reports r {where}", params))
        rows = self.fetch_all(
            f"{REPORT_SELECT} {where} ORDER BY r.created_at DESC, r.id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": limit, "offset": (page - 1) * limit},
        )
        return rows, total

    def get_report_by_id(self, report_id: int) -> Optional[Dict]:
        return self.fetch_one(f"{REPORT_SELECT} WHERE r.id = :id", {"id": report_id})

    def update_report_status(self, report_id: int, status_id: int, admin_notes: Optional[str] = None) -> bool:
        params = {"id": report_id, "status": status_id, "now": to_db_timestamp(utc_now())}
        if admin_notes is not None:
            sql = "UPDATE reports SET status = :status, admin_notes = :admin_notes, updated_at = :now WHERE id = :id"
            params["admin_notes"] = admin_notes
        else:
            sql = "UPDATE reports SET status = :status, updated_at = :now WHERE id = :id"
        return self.execute(sql, params) > 0

    # Notes

    def list_notes(self, report_id: int) -> List[Dict]:
        return self.fetch_all(
            """
            SELECT n.*, a.email AS admin_email
            FROM admin_notes n
            LEFT JOIN admin_users a ON n.admin_id = a.id
            WHERE n.report_id = :report_id
            ORDER BY n.created_at DESC, n.id DESC
            """,
            {"report_id": report_id},
        )

    def get_note(self, note_id: int) -> Optional[Dict]:
        return self.fetch_one(
            """
            SELECT n.*, a.email AS admin_email
            FROM admin_notes n
            LEFT JOIN admin_users a ON n.admin_id = a.id
            WHERE n.id = :id
            """,
            {"id": note_id},
        )

    def create_note(
        self,
        report_id: int,
        admin_id: Optional[int],
        content: str,
        is_template: bool = False,
        template_name: Optional[str] = None,
    ) -> Dict:
        now = to_db_timestamp(utc_now())
        note_id = self.insert(
            """
            INSERT INTO admin_notes (report_id, admin_id, content, is_template, template_name, created_at, updated_at)
            VALUES (:report_id, :admin_id, :content, :is_template, :template_name, :now, :now)
            """,
            {
                "report_id": report_id,
                "admin_id": admin_id,
                "content": content,
                "is_template": bool(is_template),
                "template_name": template_name,
                "now": now,
            },
        )
        return self.get_note(note_id)

    def update_note(
        self,
        note_id: int,
        content: str,
        is_template: Optional[bool] = None,
        template_name: Optional[str] = None,
    ) -> Optional[Dict]:
        assignments = ["content = :content", "updated_at = :now"]
        params: Dict = {"id": note_id, "content": content, "now": to_db_timestamp(utc_now())}
        if is_template is not None:
            assignments.append("is_template = :is_template")
            params["is_template"] = bool(is_template)
        if template_name is not None:
            assignments.append("template_name = :template_name")
            params["template_name"] = template_name

        if self.execute(f"UPDATE admin_notes SET {', '.join(assignments)} WHERE id = :id", params) == 0:
            return None
        return self.get_note(note_id)

    def delete_note(self, note_id: int) -> bool:
        return self.execute("DELETE FROM admin_notes WHERE id = :id", {"id": note_id}) > 0
