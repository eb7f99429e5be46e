import logging
import threading
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from safelinks import config
from safelinks.errors import StoreError

logger = logging.getLogger("safelinks.database")

# Dev: SQLite (zero config), Prod: any SQLAlchemy URL
if config.ENVIRONMENT == "prod":
    if not config.DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set in production")
    DATABASE_URL = config.DATABASE_URL
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
    )
else:
    # SQLite for local dev, stored next to the package folder
    DB_PATH = Path(__file__).parent.parent / "safelinks_dev.db"
    DATABASE_URL = config.DATABASE_URL or f"sqlite:///{DB_PATH}"
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},  # needed for SQLite + FastAPI
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class SchemaGuard:
    """Creates the tables once per engine, on first use.

    ``create_all`` only issues CREATE for missing tables, so racing processes
    are harmless; the lock keeps threads of one process from repeating it.
    A failed attempt leaves the guard unset so the next request tries again.
    """

    def __init__(self, bind):
        self.bind = bind
        self.ready = False
        self._lock = threading.Lock()

    def ensure(self) -> None:
        if self.ready:
            return
        with self._lock:
            if self.ready:
                return
            # Register the models on Base before creating their tables
            from safelinks import models  # noqa: F401
            try:
                Base.metadata.create_all(bind=self.bind)
            except SQLAlchemyError as exc:
                logger.exception("Schema initialisation failed")
                raise StoreError() from exc
            self.ready = True
            logger.info("Schema ready on %s", self.bind.url.render_as_string(hide_password=True))


schema = SchemaGuard(engine)


def get_db():
    schema.ensure()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
