"""
Database engine, session factory and the per-request session dependency
"""

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine and its connection pool for the lifetime of the app"""

    def __init__(self, url: str, pool_size: int = 10, pool_timeout: int = 30):
        engine_options = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        else:
            # Bounded pool; waiters queue until a connection frees up or the timeout hits
            engine_options.update(
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
            )

        self.url = url
        self.engine = create_engine(url, **engine_options)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        """Close every pooled connection"""
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def get_db(request: Request) -> Iterator[Session]:
    """Dependency yielding a session bound to the application's database"""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
