"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator, Mapping

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from cryptoex.logging_config import get_logger
from cryptoex.settings import settings
from cryptoex.storage.models import Base, KeyValueRecord

logger = get_logger(__name__)


class Database:
    """Database connection manager."""

    def __init__(self, database_url: str | None = None, echo: bool | None = None):
        """Initialize database connection.

        Args:
            database_url: Database URL (defaults to settings)
            echo: Echo SQL statements (defaults to settings)
        """
        self.database_url = database_url or settings.database_url
        self.engine = create_engine(
            self.database_url,
            echo=settings.database_echo if echo is None else echo,
            pool_pre_ping=True,
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )
        logger.info("database_initialized", url=self.database_url)

    def create_tables(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("tables_created")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a transactional scope for database operations.

        Yields:
            Database session
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class SqlStorage:
    """Storage adapter keeping every named record as one row."""

    def __init__(self, database: Database):
        self.database = database

    def get(self, key: str) -> str | None:
        with self.database.session() as session:
            record = session.get(KeyValueRecord, key)
            return record.value if record else None

    def set(self, key: str, value: str) -> None:
        self.apply({key: value})

    def remove(self, key: str) -> None:
        self.apply({key: None})

    def apply(self, changes: Mapping[str, str | None]) -> None:
        """Write a batch of changes in one database transaction.

        Args:
            changes: Key to new value; ``None`` removes the key
        """
        with self.database.session() as session:
            for key, value in changes.items():
                record = session.get(KeyValueRecord, key)
                if value is None:
                    if record is not None:
                        session.delete(record)
                elif record is None:
                    session.add(KeyValueRecord(key=key, value=value))
                else:
                    record.value = value

        logger.debug("records_written", keys=sorted(changes))
