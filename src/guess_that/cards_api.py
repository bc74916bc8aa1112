import logging
from typing import List, Optional

from guess_that.card_persistence import CardPersistenceService
from guess_that.card_service import CardService
from guess_that.data_objects import Card
from guess_that.database import CardDatabase
from guess_that.errors import CardRequestError

LOG = logging.getLogger(__name__)

DEFAULT_LANG = "de-CH"
DEFAULT_CATEGORY = "family"
DEFAULT_DIFFICULTY = "medium"
DEFAULT_COUNT = 50


class CardsApi:
    """Request-level operations: generate-and-store ("download") and draw."""

    def __init__(
        self,
        card_service: CardService,
        persistence: CardPersistenceService,
        db: CardDatabase,
        max_draw_count: int,
    ):
        self.card_service = card_service
        self.persistence = persistence
        self.db = db
        self.max_draw_count = max_draw_count

    async def adownload(
        self,
        lang: str = DEFAULT_LANG,
        category: str = DEFAULT_CATEGORY,
        difficulty: str = DEFAULT_DIFFICULTY,
        count: int = DEFAULT_COUNT,
    ) -> List[Card]:
        """Generate cards, store the new ones, and return everything generated."""
        try:
            LOG.info(
                "HTTP /download lang=%s cat=%s diff=%s n=%s", lang, category, difficulty, count
            )
            generated = await self.card_service.aget_or_generate(
                lang, category, difficulty, count
            )
            inserted = await self.persistence.astore_only_new(generated)
            LOG.info(
                "HTTP /download generated=%d inserted=%d duplicates=%d",
                len(generated),
                len(inserted),
                len(generated) - len(inserted),
            )
            return generated
        except Exception as e:
            LOG.error("HTTP /download ERROR %s", e)
            raise CardRequestError("Card generation failed") from e

    async def adraw(
        self,
        lang: str = DEFAULT_LANG,
        category: str = DEFAULT_CATEGORY,
        difficulty: str = DEFAULT_DIFFICULTY,
        count: Optional[int] = None,
        offset: Optional[int] = None,
        random: bool = False,
    ) -> List[Card]:
        """Return stored cards, newest first or in random order."""
        requested_count = self.max_draw_count if count is None else count
        limit = max(1, min(requested_count, self.max_draw_count))
        off = max(0, 0 if offset is None else offset)

        try:
            LOG.info(
                "HTTP /draw lang=%s cat=%s diff=%s n=%s offset=%d random=%s",
                lang,
                category,
                difficulty,
                limit,
                off,
                random,
            )
            if random:
                cards = await self.db.alist_random(lang, category, difficulty, limit)
            else:
                cards = await self.db.alist_recent(lang, category, difficulty, limit, off)
            LOG.info("HTTP /draw returned=%d", len(cards))
            return cards
        except Exception as e:
            LOG.error("HTTP /draw ERROR %s", e)
            raise CardRequestError("Card draw failed") from e
