"""
Catalog repository - read access to attack_types, impacts and status.
"""

from typing import Dict, List, Optional

from safetrade.repositories.base import BaseRepository

CATALOG_TABLES = ("attack_types", "impacts", "status")


class CatalogRepository(BaseRepository):

    def _all(self, table: str) -> List[Dict]:
        return self.fetch_all(f"SELECT id, name FROM {table} ORDER BY name")

    def _by_id(self, table: str, catalog_id: int) -> Optional[Dict]:
        return self.fetch_one(f"SELECT id, name FROM {table} WHERE id = :id", {"id": catalog_id})

    def _by_name(self, table: str, name: str) -> Optional[Dict]:
        return self.fetch_one(f"SELECT id, name FROM {table} WHERE name = :name", {"name": name})

    def get_all_attack_types(self) -> List[Dict]:
        return self._all("attack_types")

    def get_all_impacts(self) -> List[Dict]:
        return self._all("impacts")

    def get_all_statuses(self) -> List[Dict]:
        return self._all("status")

    def get_attack_type_by_id(self, catalog_id: int) -> Optional[Dict]:
        return self._by_id("attack_types", catalog_id)

    def get_impact_by_id(self, catalog_id: int) -> Optional[Dict]:
        return self._by_id("impacts", catalog_id)

    def get_status_by_id(self, catalog_id: int) -> Optional[Dict]:
        return self._by_id("status", catalog_id)

    def get_attack_type_by_name(self, name: str) -> Optional[Dict]:
        return self._by_name("attack_types", name)

    def get_impact_by_name(self, name: str) -> Optional[Dict]:
        return self._by_name("impacts", name)

    def get_status_by_name(self, name: str) -> Optional[Dict]:
        return self._by_name("status", name)

    def get_all_catalog_data(self) -> Dict[str, List[Dict]]:
        """All three catalogs in one payload for form dropdowns."""
        return {
            "attack_types": self.get_all_attack_types(),
            "impacts": self.get_all_impacts(),
            "statuses": self.get_all_statuses(),
        }

    def convert_legacy_attack_type(self, name: str) -> Optional[int]:
        row = self.get_attack_type_by_name(name)
        return row["id"] if row else None

    def convert_legacy_impact(self, name: str) -> Optional[int]:
        row = self.get_impact_by_name(name)
        return row["id"] if row else None

    def convert_legacy_status(self, name: str) -> Optional[int]:
        row = self.get_status_by_name(name)
        return row["id"] if row else None
