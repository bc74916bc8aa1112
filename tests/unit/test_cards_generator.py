"""Unit tests for the dspy card generator."""
from unittest.mock import AsyncMock, patch

import dspy
import pytest

from guess_that.cards_generator import CardGenerator, configure_lm
from guess_that.config import Settings
from guess_that.data_objects import Card


class TestCardGenerator:
    @pytest.fixture
    def generator(self):
        generator = CardGenerator()
        generator.generate_cards.acall = AsyncMock()
        return generator

    @pytest.mark.asyncio
    async def test_passes_inputs_to_predictor(self, generator):
        card = Card(language="en", target="Dog", forbidden=["Bark"])
        generator.generate_cards.acall.return_value = dspy.Prediction(cards=[card])

        result = await generator.aforward(
            language="en", category="animals", difficulty="easy", count=1, prompt="p"
        )

        assert result.cards == [card]
        generator.generate_cards.acall.assert_awaited_once_with(
            prompt="p", language="en", category="animals", difficulty="easy", count=1
        )

    @pytest.mark.asyncio
    async def test_missing_cards_become_empty_list(self, generator):
        generator.generate_cards.acall.return_value = dspy.Prediction()

        result = await generator.aforward(
            language="en", category="animals", difficulty="easy", count=1, prompt="p"
        )

        assert result.cards == []


def test_configure_lm_uses_settings():
    settings = Settings(model="openai/test-model", temperature=0.2, num_retries=1)
    with patch("guess_that.cards_generator.dspy") as mock_dspy:
        configure_lm(settings)

    mock_dspy.LM.assert_called_once_with(
        model="openai/test-model", temperature=0.2, num_retries=1, timeout=60.0
    )
    mock_dspy.configure.assert_called_once_with(lm=mock_dspy.LM.return_value)
