"""
Attachments repository - evidence files linked to reports.
"""

from typing import Dict, List, Optional

from safetrade.repositories.base import BaseRepository
from safetrade.utils.dates import to_db_timestamp, utc_now


class AttachmentsRepository(BaseRepository):

    def create_attachment(
        self,
        report_id: int,
        file_path: str,
        file_hash: Optional[str] = None,
        original_name: Optional[str] = None,
        mime_type: Optional[str] = None,
        size_bytes: Optional[int] = None,
    ) -> Dict:
        attachment_id = self.insert(
            """
            INSERT INTO report_attachments (
                report_id, file_path, file_hash, original_name, mime_type, size_bytes, uploaded_at
            ) VALUES (
                :report_id, :file_path, :file_hash, :original_name, :mime_type, :size_bytes, :now
            )
            """,
            {
                "report_id": report_id,
                "file_path": file_path,
                "file_hash": file_hash,
                "original_name": original_name,
                "mime_type": mime_type,
                "size_bytes": size_bytes,
                "now": to_db_timestamp(utc_now()),
            },
        )
        return self.find_by_id(attachment_id)

    def find_by_id(self, attachment_id: int) -> Optional[Dict]:
        return self.fetch_one("SELECT * FROM report_attachments WHERE id = :id", {"id": attachment_id})

    def find_by_report_id(self, report_id: int) -> List[Dict]:
        return self.fetch_all(
            "SELECT * FROM report_attachments WHERE report_id = :report_id ORDER BY uploaded_at ASC, id ASC",
            {"report_id": report_id},
        )

    def delete_attachment(self, attachment_id: int) -> bool:
        return self.execute("DELETE FROM report_attachments WHERE id = :id", {"id": attachment_id}) > 0

    def delete_by_report_id(self, report_id: int) -> int:
        return self.execute(
            "DELETE FROM report_attachments WHERE report_id = :report_id", {"report_id": report_id}
        )

    def get_attachment_stats(self) -> Dict[str, int]:
        row = self.fetch_one(
            """
            SELECT
                COUNT(*) AS total,
                COALESCE(SUM(size_bytes), 0) AS total_size,
                SUM(CASE WHEN file_hash IS NOT NULL THEN 1 ELSE 0 END) AS files_with_hash
            FROM report_attachments
            """
        )
        return {
            "total": int(row.get("total") or 0),
            "total_size": int(row.get("total_size") or 0),
            "files_with_hash": int(row.get("files_with_hash") or 0),
        }
