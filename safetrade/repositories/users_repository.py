"""
Users repository - citizen accounts and administrator accounts.
"""

from typing import Dict, List, Optional

from safetrade.repositories.base import BaseRepository
from safetrade.utils.dates import to_db_timestamp, utc_now

SAFE_USER_COLUMNS = "id, email, name, last_login, created_at, updated_at"


class UsersRepository(BaseRepository):

    def create_user(self, email: str, name: Optional[str], password_hash: str, salt: str) -> Dict:
        now = to_db_timestamp(utc_now())
        user_id = self.insert(
            """
            INSERT INTO users (email, name, password_hash, salt, created_at, updated_at)
            VALUES (:email, :name, :password_hash, :salt, :now, :now)
            """,
            {"email": email, "name": name, "password_hash": password_hash, "salt": salt, "now": now},
        )
        return self.find_by_id(user_id)

    def find_by_email(self, email: str) -> Optional[Dict]:
        return self.fetch_one("SELECT * FROM users WHERE email = :email", {"email": email})

    def find_by_id(self, user_id: int) -> Optional[Dict]:
        return self.fetch_one("SELECT * FROM users WHERE id = :id", {"id": user_id})

    def find_all(self) -> List[Dict]:
        """Every user without credential columns, newest first."""
        return self.fetch_all(
            f"SELECT {SAFE_USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"
        )

    def update_user(self, user_id: int, email: Optional[str] = None, name: Optional[str] = None) -> Optional[Dict]:
        assignments = []
        params: Dict = {"id": user_id, "now": to_db_timestamp(utc_now())}
        if email is not None:
            assignments.append("email = :email")
            params["email"] = email
        if name is not None:
            assignments.append("name = :name")
            params["name"] = name

        if assignments:
            assignments.append("updated_at = :now")
            self.execute(f"UPDATE users SET {', '.join(assignments)} WHERE id = :id", params)
        return self.find_by_id(user_id)

    def update_password(self, user_id: int, password_hash: str, salt: str) -> bool:
        affected = self.execute(
            """
            UPDATE users SET password_hash = :password_hash, salt = :salt, updated_at = :now
            WHERE id = :id
            """,
            {"id": user_id, "password_hash": password_hash, "salt": salt, "now": to_db_timestamp(utc_now())},
        )
        return affected > 0

    def update_last_login(self, user_id: int) -> None:
        self.execute(
            "UPDATE users SET last_login = :now WHERE id = :id",
            {"id": user_id, "now": to_db_timestamp(utc_now())},
        )

    def delete_user(self, user_id: int) -> bool:
        return self.execute("DELETE FROM users WHERE id = :id", {"id": user_id}) > 0

    def count_users(self) -> int:
        return int(self.fetch_scalar("SELECT COUNT(*) FROM users"))


class AdminUsersRepository(BaseRepository):

    def create_admin(self, email: str, password_hash: str, salt: str) -> Dict:
        admin_id = self.insert(
            """
            INSERT INTO admin_users (email, password_hash, salt, created_at)
            VALUES (:email, :password_hash, :salt, :now)
            """,
            {"email": email, "password_hash": password_hash, "salt": salt, "now": to_db_timestamp(utc_now())},
        )
        return self.find_by_id(admin_id)

    def find_by_email(self, email: str) -> Optional[Dict]:
        return self.fetch_one("SELECT * FROM admin_users WHERE email = :email", {"email": email})

    def find_by_id(self, admin_id: int) -> Optional[Dict]:
        return self.fetch_one("SELECT * FROM admin_users WHERE id = :id", {"id": admin_id})

    def update_last_login(self, admin_id: int) -> None:
        self.execute(
            "UPDATE admin_users SET last_login = :now WHERE id = :id",
            {"id": admin_id, "now": to_db_timestamp(utc_now())},
        )
