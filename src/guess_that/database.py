import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from guess_that.data_objects import Card
from guess_that.text_norm import normalize

LOG = logging.getLogger(__name__)

Base = declarative_base()


class CardRecord(Base):
    __tablename__ = "cards"
    __table_args__ = (
        UniqueConstraint("language", "norm_target", name="uq_cards_lang_norm"),
    )

    id = Column(String(36), primary_key=True)
    language = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    difficulty = Column(String(16), nullable=False)
    target = Column(String(255), nullable=False)
    norm_target = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ForbiddenWordRecord(Base):
    __tablename__ = "card_forbidden"

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(String(36), ForeignKey("cards.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    word = Column(String(255), nullable=False)


class CardDatabase:
    def __init__(self, db_path: str = "cards.db"):
        self.db_path = db_path
        self.engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self._initialized = False

    async def ainit_database(self):
        """Create the cards and card_forbidden tables if they don't exist."""
        if self._initialized:
            return

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._initialized = True
            LOG.info("Database initialized successfully")
        except Exception as e:
            LOG.error("Error initializing database: %s", e)
            raise

    async def ainsert_card_if_new(self, card: Card) -> Optional[str]:
        """Insert the card unless (language, normalized target) is already stored.

        Returns the card id when a row was written, None when it already existed.
        The forbidden words are written in the same transaction as the card row.
        """
        await self.ainit_database()

        card_id = card.card_id or str(uuid.uuid4())
        created_at = card.created_at or datetime.now(timezone.utc)
        stmt = (
            sqlite_insert(CardRecord.__table__)
            .values(
                id=card_id,
                language=card.language,
                category=card.category,
                difficulty=card.difficulty,
                target=card.target,
                norm_target=normalize(card.target),
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=["language", "norm_target"])
        )

        try:
            async with self.async_session() as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    return None

                session.add_all(
                    ForbiddenWordRecord(card_id=card_id, position=i, word=word)
                    for i, word in enumerate(card.forbidden or [])
                )
                await session.commit()
            return card_id
        except Exception as e:
            LOG.error("Error inserting card '%s': %s", card.target, e)
            raise

    async def alist_recent(
        self, lang: str, category: str, difficulty: str, limit: int, offset: int = 0
    ) -> List[Card]:
        """Newest cards first for a language/category/difficulty."""
        stmt = (
            select(CardRecord)
            .where(
                CardRecord.language == lang,
                CardRecord.category == category,
                CardRecord.difficulty == difficulty,
            )
            .order_by(CardRecord.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return await self._aload_with_forbidden(stmt)

    async def alist_random(
        self, lang: str, category: str, difficulty: str, limit: int
    ) -> List[Card]:
        stmt = (
            select(CardRecord)
            .where(
                CardRecord.language == lang,
                CardRecord.category == category,
                CardRecord.difficulty == difficulty,
            )
            .order_by(func.random())
            .limit(limit)
        )
        return await self._aload_with_forbidden(stmt)

    async def aload_forbidden_words(self, card_ids: List[str]) -> Dict[str, List[str]]:
        """Forbidden words per card id, in their original order."""
        if not card_ids:
            return {}

        await self.ainit_database()
        try:
            async with self.async_session() as session:
                stmt = (
                    select(ForbiddenWordRecord)
                    .where(ForbiddenWordRecord.card_id.in_(card_ids))
                    .order_by(ForbiddenWordRecord.card_id, ForbiddenWordRecord.position)
                )
                result = await session.execute(stmt)
                words: Dict[str, List[str]] = {}
                for row in result.scalars().all():
                    words.setdefault(row.card_id, []).append(row.word)
                return words
        except Exception as e:
            LOG.error("Error loading forbidden words: %s", e)
            raise

    async def _aload_with_forbidden(self, stmt) -> List[Card]:
        await self.ainit_database()
        try:
            async with self.async_session() as session:
                result = await session.execute(stmt)
                records = result.scalars().all()
        except Exception as e:
            LOG.error("Error loading cards: %s", e)
            raise

        if not records:
            return []

        words_by_id = await self.aload_forbidden_words([r.id for r in records])
        cards = [
            Card.model_validate(record).model_copy(
                update={"forbidden": words_by_id.get(record.id, [])}
            )
            for record in records
        ]
        LOG.info("Loaded %d cards", len(cards))
        return cards

    async def aclose(self, close: bool = True):
        """Close the database connection.

        With ``close=False`` pooled connections are dereferenced, not closed.
        """
        await self.engine.dispose(close=close)
        LOG.info("Database connection closed")
