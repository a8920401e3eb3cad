# Copyright 2025 - Oumi
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Final, NamedTuple, Optional

from aerochat.core.constants import LONG_RESPONSE_CHARS, MAX_CONTEXTUAL_ACTIONS
from aerochat.core.intent import is_reasoning_likely, is_search_likely
from aerochat.core.types.conversation import Role

FENCED_CODE_MARKER: Final[str] = "```"

# Case-sensitive on purpose: "const " and "function" are code keywords.
_CODE_TOKENS: Final[tuple[str, ...]] = ("code", "function", "const ", FENCED_CODE_MARKER)


class Action(NamedTuple):
    """A follow-up action offered to the user."""

    label: str
    prompt: str
    icon: str


DESCRIBE = Action("Describe", "Describe this in detail.", "visibility")
EXTRACT_TEXT = Action("Extract Text", "Extract all text from this image.", "text_fields")
ANALYZE = Action("Analyze", "Analyze the key elements.", "analytics")
FIX_BUGS = Action("Fix Bugs", "Find and fix bugs in this code.", "bug_report")
EXPLAIN = Action("Explain", "Explain this code step by step.", "description")
DEEP_DIVE = Action("Deep Dive", "Give me a detailed deep dive on this.", "scuba_diving")
FACT_CHECK = Action("Fact Check", "Verify this information.", "fact_check")
BREAK_DOWN = Action("Break Down", "Break this problem down step-by-step.", "segment")
IMPROVE = Action("Improve", "Improve this writing.", "edit_note")
CREATIVE_TWIST = Action("Creative Twist", "Add a creative twist.", "auto_awesome")
EXPAND = Action("Expand", "Expand on this idea.", "open_in_full")
REFACTOR = Action("Refactor", "Refactor this code for better performance.", "build")
ADD_COMMENTS = Action("Add Comments", "Add detailed comments to the code.", "comment")
SUMMARIZE = Action("Summarize", "Summarize the above in 3 bullet points.", "short_text")
VERIFY = Action("Verify", "Are you sure? Verify this information.", "check_circle")
BRAINSTORM = Action("Brainstorm", "Help me brainstorm creative ideas.", "lightbulb")
PLAN = Action("Plan", "Help me create a structured plan.", "calendar_today")


def _contains_code(text: str) -> bool:
    return any(token in text for token in _CODE_TOKENS)


def _actions_for_media(media_mime_type: Optional[str]) -> list[Action]:
    actions = [DESCRIBE]
    if (media_mime_type or "").lower().startswith("image"):
        actions.append(EXTRACT_TEXT)
    actions.append(ANALYZE)
    return actions


def _actions_for_text(text: str) -> list[Action]:
    if _contains_code(text):
        return [FIX_BUGS, EXPLAIN]
    if is_search_likely(text):
        return [DEEP_DIVE, FACT_CHECK]
    if is_reasoning_likely(text):
        return [BREAK_DOWN]
    return [IMPROVE, CREATIVE_TWIST, EXPAND]


def _actions_for_last_response(last_response: str) -> list[Action]:
    actions: list[Action] = []
    if FENCED_CODE_MARKER in last_response:
        actions.extend([REFACTOR, ADD_COMMENTS])
    elif len(last_response) > LONG_RESPONSE_CHARS:
        actions.append(SUMMARIZE)
    actions.append(VERIFY)
    return actions


def suggest(
    text: str,
    has_media: bool,
    last_turn_role: Optional[Role] = None,
    *,
    last_response: str = "",
    media_mime_type: Optional[str] = None,
) -> list[Action]:
    """Returns up to four follow-up actions for the current input state.

    Precedence (first applicable wins): staged media, non-empty text, a prior
    model turn with a non-empty response, then a generic fallback.

    Args:
        text: The current input text.
        has_media: Whether an image or video is staged.
        last_turn_role: Role of the last message in the conversation, if any.
        last_response: Text of the last completed model response.
        media_mime_type: MIME type of the staged media.

    Returns:
        list[Action]: The ranked suggestions.
    """
    if has_media:
        actions = _actions_for_media(media_mime_type)
    elif text:
        actions = _actions_for_text(text)
    elif last_turn_role == Role.MODEL and last_response:
        actions = _actions_for_last_response(last_response)
    else:
        actions = [BRAINSTORM, PLAN]
    return actions[:MAX_CONTEXTUAL_ACTIONS]
