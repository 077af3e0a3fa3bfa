"""Application entry point for the VibeQuiz API server."""

from __future__ import annotations

from trivia_app.config.settings import Settings
from trivia_app.constants.about import APP_NAME, APP_VERSION
from trivia_app.core.store import InMemoryStore, create_store
from trivia_app.core.trivia_manager import TriviaManager
from trivia_app.server.api_server import run_api_server
from trivia_app.utils.logging_config import configure_logging


def main() -> None:
    """Load settings, pick the storage backend, seed local data and serve the API."""
    settings = Settings.from_env()
    logger = configure_logging(settings.log_level)
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    store = create_store(settings)
    logger.info("Database mode: %s", store.backend_name)
    trivia_manager = TriviaManager(store)

    if settings.seed_sample_data and isinstance(store, InMemoryStore):
        trivia_manager.seed_sample_questions()

    logger.info("API available at http://%s:%s/", settings.host, settings.port)
    run_api_server(trivia_manager, settings)


if __name__ == "__main__":
    main()
