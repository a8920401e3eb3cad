import json
import re
from typing import Final

import pytest
from aioresponses import aioresponses
from typer.testing import CliRunner

from aerochat.cli.main import get_app
from aerochat.core.constants import DEV_MODE_STORAGE_KEY, HISTORY_STORAGE_KEY
from aerochat.core.types.conversation import Conversation, Role
from tests import get_testdata_dir

_STREAM_URL_PATTERN: Final[re.Pattern] = re.compile(
    r"^https://generativelanguage\.googleapis\.com/v1beta/models/.+"
    r":streamGenerateContent\?alt=sse$"
)
_PIXEL_PNG: Final[str] = str(get_testdata_dir() / "images" / "pixel.png")

runner = CliRunner()


def _sse_body(*texts: str) -> str:
    chunks = [
        {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}
        for text in texts
    ]
    return "".join(f"data: {json.dumps(chunk)}\n\n" for chunk in chunks)


def _load_history(storage_dir) -> Conversation:
    path = storage_dir / f"{HISTORY_STORAGE_KEY}.json"
    return Conversation.from_json(path.read_text())


#
# Fixtures
#
@pytest.fixture
def app():
    yield get_app()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")


@pytest.fixture
def mock_aioresponse():
    with aioresponses() as m:
        yield m


#
# preview
#
def test_preview_default(app, tmp_path):
    result = runner.invoke(app, ["preview", "Hello", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Gemini Flash Lite" in result.output
    assert "gemini-2.5-flash-lite" in result.output
    assert "Improve" in result.output


def test_preview_search(app, tmp_path):
    result = runner.invoke(
        app, ["preview", "latest news", "--storage-dir", str(tmp_path)]
    )
    assert result.exit_code == 0, result.output
    assert "Google Search" in result.output
    assert "googleSearch" in result.output
    assert "Deep Dive" in result.output


def test_preview_with_image(app, tmp_path):
    result = runner.invoke(
        app,
        ["preview", "", "--image", _PIXEL_PNG, "--storage-dir", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output
    assert "Visual Analysis" in result.output
    assert "Extract Text" in result.output


def test_preview_in_dev_mode(app, tmp_path):
    runner.invoke(app, ["dev", "on", "--storage-dir", str(tmp_path)])
    result = runner.invoke(app, ["preview", "Hi", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Gemini Lite (Dev)" in result.output
    assert "BLOCK_MEDIUM_AND_ABOVE" in result.output


def test_preview_extra_args(app, tmp_path):
    result = runner.invoke(
        app,
        ["preview", "Hi", "--storage-dir", str(tmp_path), "--max_replay_messages=2"],
    )
    assert result.exit_code == 0, result.output


#
# ask
#
def test_ask(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(
        _STREAM_URL_PATTERN, status=200, body=_sse_body("Hello ", "from Gemini")
    )
    result = runner.invoke(app, ["ask", "Hi", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Hello from Gemini" in result.output

    conversation = _load_history(tmp_path)
    assert [m.role for m in conversation.messages] == [Role.USER, Role.MODEL]
    assert conversation.messages[1].text == "Hello from Gemini"
    assert conversation.messages[1].mode == "Gemini Flash Lite"


def test_ask_replays_history(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(
        _STREAM_URL_PATTERN, status=200, body=_sse_body("one"), repeat=True
    )
    runner.invoke(app, ["ask", "First", "--storage-dir", str(tmp_path)])
    result = runner.invoke(app, ["ask", "Second", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output

    calls = [call for call_list in mock_aioresponse.requests.values() for call in call_list]
    assert len(calls) == 2
    contents = calls[1].kwargs["json"]["contents"]
    assert [c["parts"][0]["text"] for c in contents] == ["First", "one", "Second"]
    assert len(_load_history(tmp_path)) == 4


def test_ask_with_image(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(_STREAM_URL_PATTERN, status=200, body=_sse_body("A dot."))
    result = runner.invoke(
        app,
        ["ask", "What is this?", "--image", _PIXEL_PNG, "--storage-dir", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output
    assert "Visual Analysis" in result.output
    user_message = _load_history(tmp_path).messages[0]
    assert user_message.media is not None
    assert user_message.media.mime_type == "image/png"


def test_ask_backend_error(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(
        _STREAM_URL_PATTERN,
        status=500,
        payload={"error": {"message": "Internal error"}},
    )
    result = runner.invoke(app, ["ask", "Hi", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "Internal error" in result.output
    # The user turn is kept.
    assert [m.role for m in _load_history(tmp_path).messages] == [Role.USER]


def test_ask_without_api_key(app, tmp_path, monkeypatch, mock_aioresponse):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    result = runner.invoke(app, ["ask", "Hi", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 1
    assert "GEMINI_API_KEY" in result.output
    assert not mock_aioresponse.requests


#
# chat
#
def test_chat_quit(app, tmp_path):
    result = runner.invoke(
        app, ["chat", "--storage-dir", str(tmp_path)], input="/quit\n"
    )
    assert result.exit_code == 0, result.output
    assert "Search Web" in result.output


def test_chat_exits_on_eof(app, tmp_path):
    result = runner.invoke(app, ["chat", "--storage-dir", str(tmp_path)], input="")
    assert result.exit_code == 0, result.output
    assert "Exiting..." in result.output


def test_chat_toggles_dev_mode(app, tmp_path):
    result = runner.invoke(
        app, ["chat", "--storage-dir", str(tmp_path)], input="/dev\n/quit\n"
    )
    assert result.exit_code == 0, result.output
    assert "Developer mode on" in result.output
    assert (tmp_path / f"{DEV_MODE_STORAGE_KEY}.json").read_text() == "true"


def test_chat_sends_messages(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(
        _STREAM_URL_PATTERN, status=200, body=_sse_body("Hi there!"), repeat=True
    )
    result = runner.invoke(
        app,
        ["chat", "--storage-dir", str(tmp_path)],
        input="Hello\n/1\n/quit\n",
    )
    assert result.exit_code == 0, result.output
    assert "Hi there!" in result.output
    # "/1" sends the first suggestion for the last answer: "Verify".
    conversation = _load_history(tmp_path)
    assert [m.text for m in conversation.messages] == [
        "Hello",
        "Hi there!",
        "Are you sure? Verify this information.",
        "Hi there!",
    ]


def test_chat_invalid_suggestion(app, tmp_path):
    result = runner.invoke(
        app, ["chat", "--storage-dir", str(tmp_path)], input="/9\n/quit\n"
    )
    assert "No such suggestion." in result.output


def test_chat_attach_missing_file(app, tmp_path):
    result = runner.invoke(
        app,
        ["chat", "--storage-dir", str(tmp_path)],
        input=f"/attach {tmp_path / 'missing.png'}\n/quit\n",
    )
    assert result.exit_code == 0, result.output
    assert "doesn't exist" in result.output


def test_chat_attach_and_send(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(_STREAM_URL_PATTERN, status=200, body=_sse_body("A dot."))
    result = runner.invoke(
        app,
        ["chat", "--storage-dir", str(tmp_path)],
        input=f"/attach {_PIXEL_PNG}\nWhat is it?\n/quit\n",
    )
    assert result.exit_code == 0, result.output
    assert "Attached" in result.output
    assert _load_history(tmp_path).messages[0].media is not None


def test_chat_shows_history(app, tmp_path, api_key, mock_aioresponse):
    mock_aioresponse.post(_STREAM_URL_PATTERN, status=200, body=_sse_body("Hey"))
    runner.invoke(app, ["ask", "Hello", "--storage-dir", str(tmp_path)])
    result = runner.invoke(
        app, ["chat", "--storage-dir", str(tmp_path)], input="/quit\n"
    )
    assert result.exit_code == 0, result.output
    assert "You" in result.output
    assert "Hey" in result.output
