import logging
from typing import Optional

import dspy

from guess_that.config import Settings
from guess_that.data_objects import Card

LOG = logging.getLogger(__name__)


def configure_lm(settings: Settings) -> dspy.LM:
    lm = dspy.LM(
        model=settings.model,
        temperature=settings.temperature,
        num_retries=settings.num_retries,
        timeout=settings.request_timeout,
    )
    dspy.configure(lm=lm)
    LOG.info("LM configured model=%s temperature=%s", settings.model, settings.temperature)
    return lm


class GenerateCards(dspy.Signature):
    """Follow the prompt to write word-guessing game cards: a target word plus the related words the describing player may not say."""  # noqa

    prompt: str = dspy.InputField()
    language: str = dspy.InputField(desc="Locale tag every card must carry")
    category: str = dspy.InputField()
    difficulty: str = dspy.InputField()
    count: int = dspy.InputField(desc="Number of cards to write")
    cards: list[Optional[Card]] = dspy.OutputField(
        desc="Cards with language, category, difficulty, target and forbidden words; leave id and created_at empty"
    )


class CardGenerator(dspy.Module):
    def __init__(self):
        super().__init__()
        self.generate_cards = dspy.Predict(GenerateCards)

    async def aforward(
        self,
        language: str,
        category: str,
        difficulty: str,
        count: int,
        prompt: str,
    ) -> dspy.Prediction:
        result = await self.generate_cards.acall(
            prompt=prompt,
            language=language,
            category=category,
            difficulty=difficulty,
            count=count,
        )

        # A missing cards field is an empty batch, not a failure
        cards = result.cards if hasattr(result, "cards") else None
        result.cards = list(cards or [])

        return result
