import asyncio

import pytest

from aerochat.controller import (
    STARTER_PROMPTS,
    ActivityState,
    ChatController,
    activity_state,
    preview,
    restore_state,
    status_color,
    status_label,
)
from aerochat.core.configs import ChatConfig, DeveloperConfig
from aerochat.core.inference import BaseStreamingEngine
from aerochat.core.request_configurator import Affordance
from aerochat.core.suggestions import (
    ADD_COMMENTS,
    BRAINSTORM,
    DESCRIBE,
    PLAN,
    REFACTOR,
    VERIFY,
)
from aerochat.core.types.conversation import Conversation, Message
from aerochat.core.types.exceptions import BackendError, SessionBusyError
from aerochat.core.types.fragments import TextDelta
from aerochat.persistence import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    PersistenceAdapter,
)
from aerochat.session import SessionState


class FakeEngine(BaseStreamingEngine):
    def __init__(self, reply: str = "ok"):
        self.reply = reply
        self.error = None
        self.gate = None
        self.requests = []

    async def stream(self, request, history, message, *, cancel_event=None):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        yield TextDelta(text=self.reply)


@pytest.fixture
def adapter() -> PersistenceAdapter:
    return PersistenceAdapter(InMemoryKeyValueStore())


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def controller(engine, adapter) -> ChatController:
    return ChatController(engine, adapter)


#
# Pure helpers
#
@pytest.mark.parametrize(
    "mode_label,dev_mode,expected",
    [
        ("Deep Thinking", False, ActivityState.THINKING),
        ("Google Search (Dev)", True, ActivityState.SEARCHING),
        ("Visual Analysis", False, ActivityState.ANALYZING),
        ("Video Intelligence", False, ActivityState.ANALYZING),
        ("Google Maps", False, ActivityState.CHATTING),
        ("Gemini Lite (Dev)", True, ActivityState.DEVELOPER),
        ("Gemini Flash Lite", False, ActivityState.CHATTING),
    ],
)
def test_activity_state(mode_label, dev_mode, expected):
    assert activity_state(mode_label, dev_mode) == expected


def test_status_label():
    assert status_label("Gemini Flash Lite") == "Generating"
    assert status_label("Deep Thinking") == "Deep Thinking"


@pytest.mark.parametrize(
    "mode_label,expected",
    [
        ("Deep Thinking", "#AF52DE"),
        ("Google Search", "#34C759"),
        ("Google Maps", "#FF9500"),
        ("Visual Analysis", "#FF2D55"),
        ("Gemini Pro (Dev)", "#FF3B30"),
        ("Gemini Flash Lite", "#888888"),
    ],
)
def test_status_color(mode_label, expected):
    assert status_color(mode_label) == expected


def test_starter_prompts():
    assert [p.title for p in STARTER_PROMPTS] == [
        "Search Web",
        "Visual Analysis",
        "Deep Thinking",
        "Developer Mode",
    ]
    assert STARTER_PROMPTS[-1].prompt is None


def test_preview_empty_input():
    result = preview("", None, False, DeveloperConfig(), Conversation())
    assert not result.show_affordance
    assert not result.show_send
    assert result.suggestions == [BRAINSTORM, PLAN]
    assert result.request.affordance == Affordance.ACTIVE


def test_preview_short_text():
    result = preview("hi", None, False, DeveloperConfig(), Conversation())
    assert result.show_affordance
    assert not result.show_send


def test_preview_with_media(png_attachment):
    result = preview("", png_attachment, False, DeveloperConfig(), Conversation())
    assert result.show_affordance
    assert result.show_send
    assert result.request.affordance == Affordance.VISION
    assert result.suggestions[0] == DESCRIBE


def test_preview_dev_mode_always_shows_send():
    result = preview("", None, True, DeveloperConfig(), Conversation())
    assert result.show_affordance
    assert result.show_send
    assert result.request.mode_label == "Gemini Lite (Dev)"


def test_preview_after_model_response(single_turn_conversation):
    result = preview(
        "",
        None,
        False,
        DeveloperConfig(),
        single_turn_conversation,
        last_response="```js\nconst x = 1;\n```",
    )
    assert result.suggestions == [REFACTOR, ADD_COMMENTS, VERIFY]


#
# State restoration
#
def test_restore_empty_state(adapter):
    state = restore_state(adapter)
    assert len(state.conversation) == 0
    assert state.dev_config == DeveloperConfig()
    assert not state.dev_mode
    assert state.pending_media is None
    assert state.last_response_text == ""
    assert state.activity == ActivityState.IDLE


def test_restore_saved_state(adapter, single_turn_conversation):
    adapter.save_history(single_turn_conversation)
    adapter.save_dev_mode(True)
    adapter.save_dev_config(DeveloperConfig(top_p=0.3))
    state = restore_state(adapter)
    assert state.conversation == single_turn_conversation
    assert state.dev_mode
    assert state.dev_config.top_p == 0.3
    assert state.last_response_text == "Hi there!"
    assert state.activity == ActivityState.CHATTING


#
# Controller
#
def test_dev_mode_is_persisted(controller, adapter):
    assert controller.toggle_dev_mode()
    assert adapter.load_dev_mode()
    assert not controller.toggle_dev_mode()
    assert not adapter.load_dev_mode()
    assert controller.set_dev_mode(True)
    assert controller.state.dev_mode


def test_update_dev_config(controller, adapter):
    config = controller.update_dev_config(["temperature=0.5", "tools.thinking=true"])
    assert config.temperature == 0.5
    assert config.tools.thinking
    assert controller.state.dev_config == config
    assert adapter.load_dev_config() == config


@pytest.mark.parametrize(
    "overrides",
    [["temperature=3"], ["max_output_tokens=lots"], ["not_a_field=1"]],
)
def test_update_dev_config_rejects_invalid_values(controller, adapter, overrides):
    with pytest.raises(ValueError):
        controller.update_dev_config(overrides)
    assert controller.state.dev_config == DeveloperConfig()
    assert adapter.load_dev_config() == DeveloperConfig()


def test_reset_dev_config(controller, adapter):
    controller.update_dev_config(["top_p=0.1"])
    assert controller.reset_dev_config() == DeveloperConfig()
    assert adapter.load_dev_config() == DeveloperConfig()


def test_stage_and_clear_media(controller, png_attachment):
    assert not controller.stage_media(None)
    assert controller.state.pending_media is None
    assert controller.stage_media(png_attachment)
    assert controller.state.pending_media == png_attachment
    assert controller.preview("").request.mode_label == "Visual Analysis"
    controller.clear_media()
    assert controller.state.pending_media is None


@pytest.mark.asyncio
async def test_send_updates_state(controller, adapter):
    result = await controller.send("Hello")
    assert result.state == SessionState.COMPLETED
    assert controller.state.last_response_text == "ok"
    assert controller.state.activity == ActivityState.CHATTING
    assert [m.text for m in adapter.load_history().messages] == ["Hello", "ok"]


@pytest.mark.asyncio
async def test_send_consumes_pending_media(controller, engine, png_attachment):
    controller.stage_media(png_attachment)
    result = await controller.send("What is this?")
    assert result.request.mode_label == "Visual Analysis"
    assert controller.state.pending_media is None
    assert controller.state.conversation.messages[0].media == png_attachment


@pytest.mark.asyncio
async def test_send_nothing(controller, engine):
    assert await controller.send("  ") is None
    assert not engine.requests


@pytest.mark.asyncio
async def test_failed_send_keeps_last_response(controller, engine):
    await controller.send("Hello")
    engine.error = BackendError("boom")
    result = await controller.send("Again")
    assert result.state == SessionState.FAILED
    assert controller.state.last_response_text == "ok"
    assert controller.state.activity == ActivityState.CHATTING


@pytest.mark.asyncio
async def test_activity_while_streaming(controller, engine):
    engine.gate = asyncio.Event()
    task = asyncio.create_task(controller.send("Solve this math puzzle"))
    while not controller.is_busy:
        await asyncio.sleep(0)
    assert controller.state.activity == ActivityState.THINKING

    with pytest.raises(SessionBusyError):
        await controller.send("Another")

    assert controller.cancel()
    engine.gate.set()
    result = await task
    assert result.state == SessionState.CANCELLED
    assert controller.state.activity == ActivityState.CHATTING
    assert controller.state.last_response_text == ""


@pytest.mark.asyncio
async def test_send_uses_snapshot_of_dev_config(controller, engine):
    controller.set_dev_mode(True)
    controller.update_dev_config(["temperature=0.2"])
    await controller.send("Hello")
    assert engine.requests[0].generation.temperature == 0.2


def test_from_config(tmp_path, engine):
    config = ChatConfig(storage_dir=str(tmp_path))
    controller = ChatController.from_config(config, engine=engine)
    assert isinstance(controller.persistence.store, FileKeyValueStore)
    assert controller.persistence.store.storage_dir == tmp_path


def test_from_config_restores_from_disk(tmp_path, engine):
    config = ChatConfig(storage_dir=str(tmp_path))
    first = ChatController.from_config(config, engine=engine)
    first.set_dev_mode(True)
    first.persistence.save_history(
        Conversation(messages=[Message.user("Hi"), Message.model_turn("Hey")])
    )
    second = ChatController.from_config(config, engine=engine)
    assert second.state.dev_mode
    assert second.state.last_response_text == "Hey"
