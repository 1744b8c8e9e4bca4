# plateguard/infrastructure/Database/session.py
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from plateguard.core.config import settings
from plateguard.domain.exceptions import RecordStoreError
from plateguard.infrastructure.Database.base import Base
import logging

logger = logging.getLogger(__name__)


def create_db_engine(url: Optional[str] = None) -> Engine:
    """
    Engine for the configured database, checked with one round trip.
    An unreachable database is an error: records are never redirected elsewhere.
    """
    url = url or settings.db_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connect_args)
    shown = engine.url.render_as_string(hide_password=True)

    try:
        # minimal connection check
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        engine.dispose()
        logger.error(f"❌ Could not connect to {shown}: {exc}")
        raise RecordStoreError(f"Could not connect to database {shown}") from exc

    logger.info(f"✅ Connected to database: {shown}")
    return engine


def init_db(engine: Engine) -> sessionmaker:
    # registers the entity tables on Base.metadata
    from plateguard.infrastructure.Database.entities import plate_record_entity  # noqa: F401
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
