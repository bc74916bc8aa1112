import logging
import time
from typing import List, Optional

from pydantic import ValidationError

from guess_that.card_filters import filter_batch
from guess_that.cards_generator import CardGenerator
from guess_that.data_objects import Card, CardBatch
from guess_that.errors import CardGenerationError, PromptTemplateError
from guess_that.safety_filters import SafetyFilter

LOG = logging.getLogger(__name__)


def render_prompt(
    template: Optional[str], lang: str, category: str, difficulty: str, count: int
) -> str:
    """Substitute the {LANG}, {COUNT}, {CATEGORY} and {DIFFICULTY} placeholders."""
    if template is None:
        raise PromptTemplateError("Prompt template is not available")
    return (
        template.replace("{LANG}", lang)
        .replace("{COUNT}", str(count))
        .replace("{CATEGORY}", category)
        .replace("{DIFFICULTY}", difficulty)
    )


class CardService:
    """Requests one batch from the generator and filters it down to usable cards."""

    def __init__(
        self,
        generator: CardGenerator,
        safety: SafetyFilter,
        prompt_template: Optional[str],
        max_gen_count: int,
        model_name: str = "",
    ):
        self.generator = generator
        self.safety = safety
        self.prompt_template = prompt_template
        self.max_gen_count = max_gen_count
        self.model_name = model_name

    async def aget_or_generate(
        self, lang: str, category: str, difficulty: str, count: int
    ) -> List[Card]:
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        if count == 0:
            LOG.info("GEN skipped lang=%s cat=%s diff=%s count=0", lang, category, difficulty)
            return []

        LOG.info(
            "GEN start model=%s lang=%s cat=%s diff=%s count=%d",
            self.model_name,
            lang,
            category,
            difficulty,
            count,
        )
        batch_size = min(count, self.max_gen_count)

        batch = await self._arequest_batch(lang, category, difficulty, batch_size)
        before_filter = len(batch.cards)

        filtered = filter_batch(batch.cards, lang, count, self.safety)

        LOG.info(
            "GEN parsed beforeFilter=%d afterFilter=%d", before_filter, len(filtered)
        )
        return filtered

    async def _arequest_batch(
        self, lang: str, category: str, difficulty: str, count: int
    ) -> CardBatch:
        prompt = render_prompt(self.prompt_template, lang, category, difficulty, count)

        started = time.perf_counter()
        try:
            result = await self.generator.aforward(
                language=lang,
                category=category,
                difficulty=difficulty,
                count=count,
                prompt=prompt,
            )
        except Exception as e:
            LOG.error("GEN provider failed: %s", e)
            raise CardGenerationError(f"Could not generate card batch: {e}") from e

        try:
            batch = CardBatch.model_validate(
                {"cards": getattr(result, "cards", None) or []}
            )
        except ValidationError as e:
            LOG.error("GEN could not parse card batch: %s", e)
            raise CardGenerationError("Could not parse card batch") from e

        LOG.info("GEN done durationMs=%d", (time.perf_counter() - started) * 1000)
        return batch
