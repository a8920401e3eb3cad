from pathlib import Path

import pytest

from aerochat.core.types.conversation import Conversation, MediaAttachment, Message
from aerochat.utils.logging import get_logger


@pytest.fixture
def root_testdata_dir() -> Path:
    return Path(__file__).parent / "testdata"


@pytest.fixture(scope="session", autouse=True)
def setup_logging():
    """Fixture to set up logging for all tests.

    We want to propagate to the root logger so that
    pytest caplog can capture logs, and we can test
    logging for the default aerochat logger.
    """
    logger = get_logger("aerochat")
    logger.propagate = True
    return logger


@pytest.fixture(autouse=True)
def retain_logging_level():
    """Fixture to preserve the logging level between tests."""
    logger = get_logger("aerochat")
    # Store the current log level
    log_level = logger.level
    yield
    # Rehydrate the log level
    logger.setLevel(log_level)


@pytest.fixture
def png_attachment() -> MediaAttachment:
    # 1x1 transparent PNG.
    return MediaAttachment(
        data=(
            "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8"
            "AAAAASUVORK5CYII="
        ),
        mime_type="image/png",
    )


@pytest.fixture
def mp4_attachment() -> MediaAttachment:
    return MediaAttachment(data="AAAAGGZ0eXBtcDQy", mime_type="video/mp4")


@pytest.fixture
def single_turn_conversation() -> Conversation:
    return Conversation(
        messages=[
            Message.user("Hello"),
            Message.model_turn("Hi there!", mode="Gemini Flash Lite"),
        ]
    )
