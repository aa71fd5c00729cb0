"""Application entry point for TriviaQt."""

from __future__ import annotations

import sys

from PySide6.QtCore import QCoreApplication

from trivia_app.constants.about import APP_NAME, APP_VERSION
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.models import ScoreSummary
from trivia_app.core.question_provider import TriviaApiProvider
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.core.services.quiz_session import QuizSession
from trivia_app.core.settings import SessionSettings
from trivia_app.server.api_server import start_api_server
from trivia_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, start the API server, and run the Qt event loop."""
    logger = configure_logging()
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    app = QCoreApplication(sys.argv)
    settings = SessionSettings.from_environment()
    provider = TriviaApiProvider()
    session = QuizSession(provider, settings=settings)
    quiz_manager = QuizManager(session)

    def report_result(summary: ScoreSummary) -> None:
        logger.info("Round finished. You scored %d%%", summary.percentage)

    session.finished.connect(report_result)
    app.aboutToQuit.connect(provider.close)

    start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Player API available on port %d", DEFAULT_PORT)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
