import logging
import uuid
from datetime import datetime, timezone
from typing import List

from guess_that.data_objects import Card
from guess_that.database import CardDatabase

LOG = logging.getLogger(__name__)


class CardPersistenceService:
    def __init__(self, db: CardDatabase):
        self.db = db

    async def astore_only_new(self, cards: List[Card]) -> List[Card]:
        """Store each card unless its (language, normalized target) exists already.

        Returns only the newly stored cards, carrying their id and creation time.
        """
        inserted: List[Card] = []
        for card in cards:
            candidate = card.model_copy(
                update={
                    "card_id": str(uuid.uuid4()),
                    "created_at": datetime.now(timezone.utc),
                    "forbidden": list(card.forbidden or []),
                }
            )
            card_id = await self.db.ainsert_card_if_new(candidate)
            if card_id is None:
                continue

            inserted.append(candidate)
            LOG.debug(
                "DB insert id=%s target='%s' lang=%s diff=%s cat=%s",
                card_id,
                candidate.target,
                candidate.language,
                candidate.difficulty,
                candidate.category,
            )

        LOG.info(
            "DB storeOnlyNew attempted=%d inserted=%d duplicates=%d",
            len(cards),
            len(inserted),
            len(cards) - len(inserted),
        )
        return inserted
