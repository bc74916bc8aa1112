import asyncio
import logging
from typing import Any, Dict, List, Optional

import gradio as gr

from guess_that.card_persistence import CardPersistenceService
from guess_that.card_service import CardService
from guess_that.cards_api import (
    DEFAULT_CATEGORY,
    DEFAULT_COUNT,
    DEFAULT_DIFFICULTY,
    DEFAULT_LANG,
    CardsApi,
)
from guess_that.cards_generator import CardGenerator, configure_lm
from guess_that.config import Settings, get_settings
from guess_that.data_objects import Card
from guess_that.database import CardDatabase
from guess_that.errors import CardRequestError, ResourceNotFoundError
from guess_that.resources import load_resource
from guess_that.safety_filters import SafetyFilter

LOG = logging.getLogger(__name__)

DIFFICULTIES = ["easy", "medium", "hard"]


class AppState:
    """Process-wide services, built once at startup and closed on shutdown."""

    def __init__(
        self,
        settings: Settings,
        db: CardDatabase,
        safety: SafetyFilter,
        card_service: CardService,
    ):
        self.settings = settings
        self.db = db
        self.safety = safety
        self.card_service = card_service
        self.persistence = CardPersistenceService(db)
        self.api = CardsApi(
            card_service=card_service,
            persistence=self.persistence,
            db=db,
            max_draw_count=settings.max_draw_count,
        )

    @classmethod
    def startup(cls, settings: Settings) -> "AppState":
        configure_lm(settings)
        safety = SafetyFilter.from_resource(
            settings.profanity_list_file, base_dir=settings.resources_dir
        )

        prompt_template: Optional[str] = None
        try:
            prompt_template = load_resource(
                settings.prompt_template_file,
                folder=settings.prompt_template_folder,
                base_dir=settings.resources_dir,
            )
        except ResourceNotFoundError as e:
            # Generation requests fail until a template is provided; draws still work
            LOG.error("Prompt template unavailable: %s", e)

        card_service = CardService(
            generator=CardGenerator(),
            safety=safety,
            prompt_template=prompt_template,
            max_gen_count=settings.max_gen_count,
            model_name=settings.model,
        )
        return cls(settings, CardDatabase(settings.database_path), safety, card_service)

    async def ashutdown(self, close_connections: bool = True):
        """Dispose the database engine; failures are logged, not raised.

        Pass ``close_connections=False`` when running outside the event loop
        that opened the pooled connections: the pool is dropped without
        touching them.
        """
        try:
            await self.db.aclose(close=close_connections)
        except Exception as e:
            LOG.warning("Database shutdown incomplete: %s", e)


def cards_to_rows(cards: List[Card]) -> List[Dict[str, Any]]:
    return [card.model_dump(mode="json", by_alias=True) for card in cards]


def create_interface(state: AppState):
    """Create the Gradio interface"""

    async def download_handler(lang, category, difficulty, count):
        try:
            cards = await state.api.adownload(lang, category, difficulty, int(count))
        except CardRequestError as e:
            raise gr.Error(str(e))
        return cards_to_rows(cards)

    async def draw_handler(lang, category, difficulty, count, offset, random_order):
        try:
            cards = await state.api.adraw(
                lang,
                category,
                difficulty,
                count=int(count) if count else None,
                offset=int(offset) if offset else None,
                random=bool(random_order),
            )
        except CardRequestError as e:
            raise gr.Error(str(e))
        return cards_to_rows(cards)

    with gr.Blocks(title="GuessThat Cards") as app:
        gr.Markdown("# GuessThat Cards")

        with gr.Row():
            lang_input = gr.Textbox(label="Language", value=DEFAULT_LANG)
            category_input = gr.Textbox(label="Category", value=DEFAULT_CATEGORY)
            difficulty_input = gr.Dropdown(
                label="Difficulty",
                choices=DIFFICULTIES,
                value=DEFAULT_DIFFICULTY,
                allow_custom_value=True,
            )

        with gr.Tab("Generate"):
            count_input = gr.Number(
                label="Cards",
                value=DEFAULT_COUNT,
                precision=0,
                minimum=1,
                maximum=state.settings.max_gen_count,
            )
            generate_btn = gr.Button("Generate Cards", variant="primary")
            generated_output = gr.JSON(label="Generated cards")

        with gr.Tab("Draw"):
            with gr.Row():
                draw_count_input = gr.Number(
                    label="Cards",
                    value=state.settings.max_draw_count,
                    precision=0,
                    minimum=1,
                    maximum=state.settings.max_draw_count,
                )
                offset_input = gr.Number(label="Offset", value=0, precision=0, minimum=0)
                random_input = gr.Checkbox(label="Random order", value=False)
            draw_btn = gr.Button("Draw Cards")
            drawn_output = gr.JSON(label="Stored cards")

        generate_btn.click(
            download_handler,
            inputs=[lang_input, category_input, difficulty_input, count_input],
            outputs=generated_output,
            api_name="download",
        )
        draw_btn.click(
            draw_handler,
            inputs=[
                lang_input,
                category_input,
                difficulty_input,
                draw_count_input,
                offset_input,
                random_input,
            ],
            outputs=drawn_output,
            api_name="draw",
        )

    return app


def main():
    """Main function to run the Gradio app"""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    state = AppState.startup(settings)
    app = create_interface(state)
    try:
        app.launch(
            server_name=settings.server_name,
            server_port=settings.server_port,
            share=False,
        )
    finally:
        # gradio's event loop is gone by now
        asyncio.run(state.ashutdown(close_connections=False))


if __name__ == "__main__":
    main()
