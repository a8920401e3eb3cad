from datetime import datetime, timezone

import pydantic
import pytest

from aerochat.core.types.conversation import (
    Conversation,
    MediaAttachment,
    Message,
    Part,
    Role,
)


@pytest.fixture
def test_conversation(png_attachment):
    return Conversation(
        messages=[
            Message.user("Hello"),
            Message.model_turn("Hi, how can I help you?", mode="Gemini Flash Lite"),
            Message.user("What is in this picture?", media=png_attachment),
            Message.model_turn("A single pixel.", mode="Visual Analysis"),
        ]
    )


def test_role_str():
    assert str(Role.USER) == "user"
    assert str(Role.MODEL) == "model"


def test_media_attachment_rejects_invalid_base64():
    with pytest.raises(ValueError, match="base64"):
        MediaAttachment(data="not base64!", mime_type="image/png")


def test_media_attachment_rejects_empty_payload():
    with pytest.raises(ValueError, match="empty"):
        MediaAttachment(data="", mime_type="image/png")


def test_media_attachment_normalizes_mime_type():
    media = MediaAttachment(data="AAAA", mime_type="Image/PNG")
    assert media.mime_type == "image/png"
    assert media.is_image()
    assert not media.is_video()


def test_media_attachment_rejects_invalid_mime_type():
    with pytest.raises(ValueError, match="MIME"):
        MediaAttachment(data="AAAA", mime_type="png")


def test_part_requires_exactly_one_kind_of_content(png_attachment):
    with pytest.raises(ValueError):
        Part()
    with pytest.raises(ValueError):
        Part(text="hi", inline_data=png_attachment)
    assert Part(text="hi").is_text()
    assert Part(inline_data=png_attachment).is_media()


def test_user_message_media_then_text(png_attachment):
    message = Message.user("Describe", media=png_attachment)
    assert message.role == Role.USER
    assert len(message.parts) == 2
    assert message.parts[0].is_media()
    assert message.parts[1].is_text()
    assert message.text == "Describe"
    assert message.media == png_attachment


def test_user_message_media_only(png_attachment):
    message = Message.user(media=png_attachment)
    assert len(message.parts) == 1
    assert message.text == ""
    assert message.media is not None


def test_user_message_requires_content():
    with pytest.raises(ValueError):
        Message.user()


def test_user_message_rejects_text_before_media(png_attachment):
    with pytest.raises(ValueError, match="media followed by text"):
        Message(
            role=Role.USER,
            parts=(Part(text="Describe"), Part(inline_data=png_attachment)),
        )


def test_user_message_rejects_mode():
    with pytest.raises(ValueError, match="mode"):
        Message(role=Role.USER, parts=(Part(text="hi"),), mode="Google Search")


def test_model_message_requires_single_text_part(png_attachment):
    with pytest.raises(ValueError):
        Message(role=Role.MODEL, parts=(Part(inline_data=png_attachment),))
    with pytest.raises(ValueError):
        Message(role=Role.MODEL, parts=(Part(text="a"), Part(text="b")))


def test_model_turn_keeps_mode():
    message = Message.model_turn("Answer", mode="Deep Thinking")
    assert message.role == Role.MODEL
    assert message.mode == "Deep Thinking"
    assert message.text == "Answer"
    assert message.media is None


def test_message_is_immutable():
    message = Message.user("Hello")
    with pytest.raises(pydantic.ValidationError):
        message.role = Role.MODEL  # type: ignore


def test_message_timestamp_is_utc():
    message = Message.user("Hello")
    assert message.timestamp.tzinfo is not None
    assert message.timestamp.utcoffset().total_seconds() == 0


def test_last_message_no_role(test_conversation):
    assert test_conversation.last_message() == test_conversation.messages[-1]


def test_last_message_with_role(test_conversation):
    assert test_conversation.last_message(Role.USER) == test_conversation.messages[2]


def test_last_message_empty_conversation():
    assert Conversation().last_message() is None


def test_append_and_len():
    conversation = Conversation()
    conversation.append(Message.user("one"))
    conversation.append(Message.model_turn("two"))
    assert len(conversation) == 2
    assert conversation[0].text == "one"
    assert conversation[1].role == Role.MODEL


def test_replay_history_full(test_conversation):
    history = test_conversation.replay_history()
    assert history == test_conversation.messages
    # A copy, not the live list.
    history.pop()
    assert len(test_conversation) == 4


@pytest.mark.parametrize(
    "max_messages,expected_count",
    [(0, 0), (1, 1), (3, 3), (10, 4)],
)
def test_replay_history_capped(test_conversation, max_messages, expected_count):
    history = test_conversation.replay_history(max_messages)
    assert len(history) == expected_count
    if expected_count:
        assert history[-1] == test_conversation.messages[-1]


def test_json_round_trip_preserves_everything(test_conversation):
    restored = Conversation.from_json(test_conversation.to_json())
    assert restored == test_conversation
    for original, loaded in zip(test_conversation.messages, restored.messages):
        assert loaded.role == original.role
        assert loaded.parts == original.parts
        assert loaded.timestamp == original.timestamp
        assert loaded.mode == original.mode


def test_to_json_omits_unset_fields():
    conversation = Conversation(
        messages=[
            Message(
                role=Role.USER,
                parts=(Part(text="Hi"),),
                timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )
        ]
    )
    json_str = conversation.to_json()
    assert "inline_data" not in json_str
    assert "mode" not in json_str
    assert "2025-01-01T00:00:00Z" in json_str


def test_repr(test_conversation):
    assert repr(test_conversation) == (
        "USER: Hello\n"
        "MODEL [Gemini Flash Lite]: Hi, how can I help you?\n"
        "USER: <IMAGE/PNG> | What is in this picture?\n"
        "MODEL [Visual Analysis]: A single pixel."
    )
