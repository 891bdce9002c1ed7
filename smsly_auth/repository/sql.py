"""
SQL Challenge Repository
========================
SQLAlchemy async repository storing one challenge row per subject.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import DateTime, String, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..config import MAX_OTP_LENGTH
from ..exceptions import StorageError
from ..logging import mask_subject
from ..otp.models import OtpChallenge
from .base import ChallengeRepository

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


class OtpChallengeRecord(Base):
    __tablename__ = "otp_challenges"

    subject: Mapped[str] = mapped_column(String(64), primary_key=True)
    passcode: Mapped[str] = mapped_column(String(MAX_OTP_LENGTH))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlChallengeRepository(ChallengeRepository):
    """
    Challenge repository on any SQLAlchemy async driver.

    ``consume`` is a conditional DELETE, so two concurrent logins cannot
    both remove the same challenge.
    """

    name = "sql"
    supports_atomic_consume = True

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs) -> "SqlChallengeRepository":
        """
        Args:
            database_url: Async connection string (postgresql+asyncpg://...)
            **engine_kwargs: Passed to ``create_async_engine``
        """
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine = create_async_engine(database_url, **engine_kwargs)
        logger.info("Challenge database engine initialized", dialect=engine.dialect.name)
        return cls(engine)

    async def create_schema(self) -> None:
        """Create the challenge table if missing. Call once at startup."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError("Failed to create challenge schema", backend=self.name) from e

    async def _merge(self, subject: str, challenge: OtpChallenge) -> None:
        async with self._session_factory() as session:
            await session.merge(
                OtpChallengeRecord(
                    subject=subject,
                    passcode=challenge.passcode,
                    expires_at=challenge.expires_at,
                    created_at=challenge.created_at,
                )
            )
            await session.commit()

    async def put(self, subject: str, challenge: OtpChallenge) -> None:
        try:
            try:
                await self._merge(subject, challenge)
            except IntegrityError:
                # A concurrent put inserted the row first; overwrite it
                await self._merge(subject, challenge)
        except SQLAlchemyError as e:
            logger.error("Challenge write failed", subject=mask_subject(subject), error=type(e).__name__)
            raise StorageError("Failed to store challenge", backend=self.name) from e

    async def get(self, subject: str) -> Optional[OtpChallenge]:
        try:
            async with self._session_factory() as session:
                record = await session.get(OtpChallengeRecord, subject)
        except SQLAlchemyError as e:
            logger.error("Challenge read failed", subject=mask_subject(subject), error=type(e).__name__)
            raise StorageError("Failed to read challenge", backend=self.name) from e
        if record is None:
            return None
        return OtpChallenge(
            subject=record.subject,
            passcode=record.passcode,
            expires_at=_as_utc(record.expires_at),
            created_at=_as_utc(record.created_at),
        )

    async def remove(self, subject: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(OtpChallengeRecord).where(OtpChallengeRecord.subject == subject)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Challenge delete failed", subject=mask_subject(subject), error=type(e).__name__)
            raise StorageError("Failed to remove challenge", backend=self.name) from e

    async def consume(self, subject: str, challenge: OtpChallenge) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(OtpChallengeRecord).where(
                        OtpChallengeRecord.subject == subject,
                        OtpChallengeRecord.passcode == challenge.passcode,
                        OtpChallengeRecord.expires_at == challenge.expires_at,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Challenge consume failed", subject=mask_subject(subject), error=type(e).__name__)
            raise StorageError("Failed to consume challenge", backend=self.name) from e
        return result.rowcount == 1

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Challenge database engine closed")
