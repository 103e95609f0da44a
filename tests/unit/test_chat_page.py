"""Unit tests for the chat page's prompt wiring."""

import pytest_check as check

from streamchat.ui.chat_page import PROMPT_PROPS, SUBMIT_EVENT


class TestPromptInput:
    """Tests for the prompt textarea's key binding and props."""

    def test_only_plain_enter_submits(self) -> None:
        event, *modifiers = SUBMIT_EVENT.split(".")

        check.equal(event, "keydown")
        check.is_in("enter", modifiers)
        # without "exact", Shift+Enter would submit instead of adding a newline
        check.is_in("exact", modifiers)
        check.is_in("prevent", modifiers)

    def test_prompt_is_focused_on_load(self) -> None:
        assert "autofocus" in PROMPT_PROPS.split()
