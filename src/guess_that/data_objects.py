from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_FORBIDDEN_WORDS = 7


class Card(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
    language: Optional[str] = None
    category: str = ""
    difficulty: str = ""
    target: Optional[str] = None
    forbidden: Optional[List[str]] = None
    card_id: str | None = Field(default=None, alias="id", serialization_alias="id")
    created_at: datetime | None = None


class CardBatch(BaseModel):
    cards: List[Optional[Card]] = Field(default_factory=list)
