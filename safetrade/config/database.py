"""
Database engine initialization.
Single-source-of-truth SQLAlchemy engine for SafeTrade.

All repositories run parameterized SQL text against this engine. The
schema is created and the catalogs seeded at startup when
DB_AUTO_CREATE is enabled.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from safetrade.config.schema import metadata
from safetrade.core.settings import settings

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None


# Fixed catalog IDs. Reports store these as foreign keys.
ATTACK_TYPE_SEED: Dict[int, str] = {
    1: "email",
    2: "SMS",
    3: "whatsapp",
    4: "llamada",
    5: "redes_sociales",
    6: "otro",
}

IMPACT_SEED: Dict[int, str] = {
    1: "ninguno",
    2: "robo_datos",
    3: "robo_dinero",
    4: "cuenta_comprometida",
}

STATUS_SEED: Dict[int, str] = {
    1: "nuevo",
    2: "revisado",
    3: "en_investigacion",
    4: "cerrado",
}


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        pool_pre_ping=True,
        future=True,
    )


def initialize_database() -> Engine:
    global engine

    if engine is not None:
        return engine

    if not settings.DATABASE_URL:
        raise RuntimeError("Database initialization FAILED - DATABASE_URL is not set")

    try:
        engine = _build_engine(settings.DATABASE_URL)
        if settings.DB_AUTO_CREATE:
            metadata.create_all(engine)
            seed_catalogs(engine)
        logger.info(f"Database ready ({engine.dialect.name})")
        return engine
    except SQLAlchemyError as e:
        engine = None
        raise RuntimeError(f"Database initialization FAILED. Error: {str(e)}") from e


def seed_catalogs(target: Engine) -> None:
    """Insert the fixed catalog rows that are not present yet."""
    catalogs = (
        ("attack_types", ATTACK_TYPE_SEED),
        ("impacts", IMPACT_SEED),
        ("status", STATUS_SEED),
    )
    with target.begin() as conn:
        for table, rows in catalogs:
            existing = {
                row.id for row in conn.execute(text(f"SELECT id FROM {table}"))
            }
            for catalog_id, name in rows.items():
                if catalog_id not in existing:
                    conn.execute(
                        text(f"INSERT INTO {table} (id, name) VALUES (:id, :name)"),
                        {"id": catalog_id, "name": name},
                    )


def get_engine() -> Engine:
    """
    Get the initialized engine.

    Raises RuntimeError if the database cannot be initialized.
    """
    if engine is None:
        initialize_database()
    return engine


@contextmanager
def get_connection() -> Iterator[Connection]:
    """Transactional connection; commits on success, rolls back on error."""
    with get_engine().begin() as conn:
        yield conn


def check_connection() -> bool:
    with get_connection() as conn:
        conn.execute(text("SELECT 1"))
    return True


def reset_engine() -> None:
    """Dispose the engine so the next call reconnects with current settings."""
    global engine

    if engine is not None:
        engine.dispose()
    engine = None
