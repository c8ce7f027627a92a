"""Generate database session"""

from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from regicide.core.config import Settings
from regicide.db.schema import Base


def create_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured database. Makes sure all tables exist."""
    settings = settings if settings is not None else Settings.from_env()
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """One session per request. Always closed afterwards, also when the request failed."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
