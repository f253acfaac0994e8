"""
Relational schema for SafeTrade.

Catalog tables (attack_types, impacts, status) hold fixed IDs; reports
reference them by foreign key. Queries elsewhere are plain SQL text, this
module only exists so the schema can be created on SQLite and MySQL alike.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

from safetrade.utils.dates import utc_now


metadata = MetaData()


attack_types = Table(
    "attack_types",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False, unique=True),
)

impacts = Table(
    "impacts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False, unique=True),
)

status = Table(
    "status",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False, unique=True),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("name", String(255)),
    Column("password_hash", String(255), nullable=False),
    Column("salt", String(64), nullable=False),
    Column("last_login", DateTime),
    Column("created_at", DateTime, default=utc_now),
    Column("updated_at", DateTime, default=utc_now, onupdate=utc_now),
)

admin_users = Table(
    "admin_users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("salt", String(64), nullable=False),
    Column("last_login", DateTime),
    Column("created_at", DateTime, default=utc_now),
)

reports = Table(
    "reports",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    Column("is_anonymous", Boolean, nullable=False, default=True),
    Column("attack_type", Integer, ForeignKey("attack_types.id"), nullable=False),
    Column("incident_date", DateTime, nullable=False),
    Column("evidence_url", String(500)),
    Column("attack_origin", String(255), nullable=False),
    Column("suspicious_url", String(500)),
    Column("message_content", Text),
    Column("description", Text),
    Column("impact", Integer, ForeignKey("impacts.id"), nullable=False),
    Column("status", Integer, ForeignKey("status.id"), nullable=False, default=1),
    Column("admin_notes", Text),
    Column("created_at", DateTime, default=utc_now),
    Column("updated_at", DateTime, default=utc_now, onupdate=utc_now),
)

report_attachments = Table(
    "report_attachments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("report_id", Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False),
    Column("file_path", String(500), nullable=False),
    Column("file_hash", String(255)),
    Column("original_name", String(255)),
    Column("mime_type", String(100)),
    Column("size_bytes", Integer),
    Column("uploaded_at", DateTime, default=utc_now),
)

admin_notes = Table(
    "admin_notes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("report_id", Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False),
    Column("admin_id", Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
    Column("content", Text, nullable=False),
    Column("is_template", Boolean, nullable=False, default=False),
    Column("template_name", String(100)),
    Column("created_at", DateTime, default=utc_now),
    Column("updated_at", DateTime, default=utc_now, onupdate=utc_now),
)
