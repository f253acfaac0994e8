"""
Community repository - aggregate statistics over a trailing window of days.

Only counts leave this module; no report content or reporter identity is
exposed to the public community endpoints.
"""

import math
from typing import Dict, List

from safetrade.repositories.base import BaseRepository
from safetrade.services.catalog_mapping import CatalogMappingService as Catalog
from safetrade.utils.dates import days_ago, to_date_string, to_db_timestamp

HIGH_IMPACT_IDS = (2, 3, 4)  # robo_datos, robo_dinero, cuenta_comprometida
SIMILAR_REPORTS_WINDOW_DAYS = 90


def round_half_up(value: float) -> int:
    """Whole-number percentage, halves rounded up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


class CommunityRepository(BaseRepository):

    def _since(self, days: int) -> str:
        return to_db_timestamp(days_ago(days))

    def _window_total(self, since: str) -> int:
        return int(
            self.fetch_scalar(
                "SELECT COUNT(*) FROM reports WHERE created_at >= :since",
                {"since": since},
            )
        )

    def _catalog_trends(self, column: str, catalog_table: str, days: int) -> List[Dict]:
        since = self._since(days)
        total = self._window_total(since)
        rows = self.fetch_all(
            f"""
            SELECT c.name AS attack_type, COUNT(*) AS count
            FROM reports r
            JOIN {catalog_table} c ON r.{column} = c.id
            WHERE r.created_at >= :since
            GROUP BY c.id, c.name
            ORDER BY count DESC, c.id ASC
            """,
            {"since": since},
        )
        return [
            {
                "attack_type": row["attack_type"],
                "count": int(row["count"]),
                "percentage": round(int(row["count"]) * 100.0 / total, 2) if total else 0.0,
            }
            for row in rows
        ]

    def get_attack_type_trends(self, days: int = 30) -> List[Dict]:
        """Attack type distribution; `percentage` is the share of the window total."""
        return self._catalog_trends("attack_type", "attack_types", days)

    def get_impact_level_trends(self, days: int = 30) -> List[Dict]:
        # Same shape as attack trends; the catalog name sits under `attack_type`.
        return self._catalog_trends("impact", "impacts", days)

    def get_time_based_trends(self, days: int = 7) -> List[Dict]:
        rows = self.fetch_all(
            """
            SELECT DATE(created_at) AS day, COUNT(*) AS count
            FROM reports
            WHERE created_at >= :since
            GROUP BY DATE(created_at)
            ORDER BY day ASC
            """,
            {"since": self._since(days)},
        )
        return [{"date": to_date_string(row["day"]), "count": int(row["count"])} for row in rows]

    def get_community_stats(self, days: int = 30) -> Dict:
        since = self._since(days)
        row = self.fetch_one(
            f"""
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN impact IN {HIGH_IMPACT_IDS} THEN 1 ELSE 0 END) AS high_impact,
                SUM(CASE WHEN is_anonymous = :anonymous THEN 1 ELSE 0 END) AS anonymous
            FROM reports
            WHERE created_at >= :since
            """,
            {"since": since, "anonymous": True},
        )
        total = int(row.get("total") or 0)
        anonymous = int(row.get("anonymous") or 0)

        most_common = self.fetch_one(
            """
            SELECT at.name AS attack_type, COUNT(*) AS count
            FROM reports r
            JOIN attack_types at ON r.attack_type = at.id
            WHERE r.created_at >= :since
            GROUP BY at.id, at.name
            ORDER BY count DESC, at.id ASC
            LIMIT 1
            """,
            {"since": since},
        )

        return {
            "total_reports": total,
            "active_period": f"{days} días",
            "most_common_attack": most_common["attack_type"] if most_common else "N/A",
            "highest_impact_count": int(row.get("high_impact") or 0),
            "anonymous_percentage": round_half_up(anonymous * 100 / total) if total else 0,
        }

    def get_similar_reports(self, attack_type_id: int, impact_id: int, limit: int = 5) -> List[Dict]:
        """Recent reports sharing attack type and impact, without reporter identity."""
        rows = self.fetch_all(
            """
            SELECT id, attack_type, impact, description, created_at, is_anonymous
            FROM reports
            WHERE attack_type = :attack_type AND impact = :impact AND created_at >= :since
            ORDER BY created_at DESC, id DESC
            LIMIT :limit
            """,
            {
                "attack_type": attack_type_id,
                "impact": impact_id,
                "since": self._since(SIMILAR_REPORTS_WINDOW_DAYS),
                "limit": limit,
            },
        )
        return [
            {
                "id": row["id"],
                "attack_type": Catalog.get_attack_type_string(row["attack_type"]),
                "impact_level": Catalog.get_impact_string(row["impact"]),
                "description": row["description"],
                "created_at": row["created_at"],
                "reporter_type": "Anónimo" if row["is_anonymous"] else "Usuario registrado",
            }
            for row in rows
        ]

    def get_top_suspicious_origins(self, days: int = 30, limit: int = 10) -> List[Dict]:
        """Attack origins reported more than once in the window."""
        rows = self.fetch_all(
            """
            SELECT attack_origin, COUNT(*) AS report_count,
                   GROUP_CONCAT(DISTINCT attack_type) AS attack_types
            FROM reports
            WHERE created_at >= :since AND attack_origin IS NOT NULL
            GROUP BY attack_origin
            HAVING COUNT(*) > 1
            ORDER BY report_count DESC
            LIMIT :limit
            """,
            {"since": self._since(days), "limit": limit},
        )
        origins = []
        for row in rows:
            type_ids = [t for t in str(row["attack_types"] or "").split(",") if t]
            origins.append({
                "attack_origin": row["attack_origin"],
                "report_count": int(row["report_count"]),
                "attack_types": sorted({Catalog.get_attack_type_string(t) for t in type_ids}),
            })
        return origins
