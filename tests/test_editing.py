"""
Tests for debounced autosave and the inline edit controller.

Delays are shortened to a few milliseconds; ``wait_idle`` waits for the
debounced save to fire and settle.
"""

import asyncio

import pytest

from i18nmate.core.debounce import Debouncer
from i18nmate.core.errors import ApiError, TranslationMessages
from i18nmate.keys.editing import Editing, Idle, InlineEditController, Saving

DELAY = 0.05


class RecordingSave:
    """A save callback that records calls and can be made to fail or stall."""

    def __init__(self):
        self.calls: list[tuple[str, str | None]] = []
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def __call__(self, key_id, value):
        self.calls.append((key_id, value))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error


@pytest.fixture
def save():
    return RecordingSave()


@pytest.fixture
def controller(save):
    return InlineEditController(save, delay=DELAY)


# =============================================================================
# Debouncer
# =============================================================================


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_only_last_callback_runs(self):
        calls = []
        debouncer = Debouncer(DELAY)

        for n in range(5):
            async def callback(n=n):
                calls.append(n)
            debouncer.schedule(callback)
            await asyncio.sleep(DELAY / 4)

        await debouncer.drain()
        assert calls == [4]

    @pytest.mark.asyncio
    async def test_cancel(self):
        calls = []
        debouncer = Debouncer(DELAY)

        async def callback():
            calls.append(1)

        debouncer.schedule(callback)
        assert debouncer.pending
        assert debouncer.cancel() is True
        await asyncio.sleep(DELAY * 2)
        assert calls == []
        assert debouncer.cancel() is False

    @pytest.mark.asyncio
    async def test_running_callback_is_not_cancelled(self):
        started = asyncio.Event()
        release = asyncio.Event()
        finished = []
        debouncer = Debouncer(DELAY)

        async def callback():
            started.set()
            await release.wait()
            finished.append(True)

        debouncer.schedule(callback)
        await started.wait()
        assert debouncer.cancel() is False

        release.set()
        await debouncer.drain()
        assert finished == [True]


# =============================================================================
# Session lifecycle
# =============================================================================


class TestSession:
    def test_starts_idle(self, controller):
        assert controller.state == Idle()
        assert controller.editing_key_id is None

    def test_start_editing(self, controller):
        controller.start_editing("k1", "Hello")
        assert controller.state == Editing("k1")
        assert controller.value == "Hello"
        assert controller.is_editing("k1")

    def test_missing_value_edits_as_empty(self, controller):
        controller.start_editing("k1", None)
        assert controller.value == ""
        assert controller.saved_value is None

    def test_only_one_row_edits_at_a_time(self, controller):
        controller.start_editing("k1", "A")
        controller.start_editing("k2", "B")
        assert controller.is_editing("k2")
        assert not controller.is_editing("k1")

    @pytest.mark.asyncio
    async def test_switching_rows_drops_pending_autosave(self, controller, save):
        controller.start_editing("k1", "A")
        controller.change_value("A changed")
        controller.start_editing("k2", "B")

        await asyncio.sleep(DELAY * 3)
        await controller.wait_idle()
        assert save.calls == []

    @pytest.mark.asyncio
    async def test_escape_reverts_without_saving(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("Hel")
        await controller.press_key("Escape")

        await asyncio.sleep(DELAY * 3)
        assert controller.state == Idle()
        assert controller.value == "Hello"
        assert controller.error is None
        assert save.calls == []

    def test_changes_ignored_when_idle(self, controller):
        controller.change_value("stray")
        assert controller.value == ""


# =============================================================================
# Autosave
# =============================================================================


class TestAutosave:
    @pytest.mark.asyncio
    async def test_burst_of_changes_saves_once(self, controller, save):
        controller.start_editing("k1", "H")
        for text in ["He", "Hel", "Hell", "Hello"]:
            controller.change_value(text)
            await asyncio.sleep(DELAY / 4)

        await controller.wait_idle()
        assert save.calls == [("k1", "Hello")]
        assert controller.state == Editing("k1")

    @pytest.mark.asyncio
    async def test_value_is_trimmed(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("  Bonjour  ")
        await controller.wait_idle()
        assert save.calls == [("k1", "Bonjour")]

    @pytest.mark.asyncio
    async def test_clearing_saves_missing(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("   ")
        await controller.wait_idle()
        assert save.calls == [("k1", None)]

    @pytest.mark.asyncio
    async def test_unchanged_value_is_not_saved(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("Hello ")
        await controller.wait_idle()
        assert save.calls == []

    @pytest.mark.asyncio
    async def test_250_characters_saves(self, controller, save):
        controller.start_editing("k1", "")
        controller.change_value("a" * 250)
        await controller.wait_idle()
        assert save.calls == [("k1", "a" * 250)]
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_251_characters_is_rejected(self, controller, save):
        controller.start_editing("k1", "")
        controller.change_value("a" * 251)
        await controller.wait_idle()
        assert save.calls == []
        assert controller.error == TranslationMessages.VALUE_TOO_LONG

    @pytest.mark.asyncio
    async def test_newline_is_rejected(self, controller, save):
        controller.start_editing("k1", "")
        controller.change_value("one\ntwo")
        await controller.wait_idle()
        assert save.calls == []
        assert controller.error == TranslationMessages.VALUE_NO_NEWLINES

    @pytest.mark.asyncio
    async def test_fixing_the_value_clears_the_error(self, controller, save):
        controller.start_editing("k1", "")
        controller.change_value("one\ntwo")
        await controller.wait_idle()
        controller.change_value("one two")
        await controller.wait_idle()
        assert controller.error is None
        assert save.calls == [("k1", "one two")]

    @pytest.mark.asyncio
    async def test_save_error_is_shown_and_row_stays_open(self, controller, save):
        save.error = ApiError(409, TranslationMessages.OPTIMISTIC_LOCK_FAILED)
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await controller.wait_idle()

        assert controller.error == TranslationMessages.OPTIMISTIC_LOCK_FAILED
        assert controller.state == Editing("k1")
        assert controller.saved_value == "Hello"

    @pytest.mark.asyncio
    async def test_unexpected_error_gets_generic_message(self, controller, save):
        save.error = RuntimeError("connection reset")
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await controller.wait_idle()

        assert controller.error == "Failed to update translation"
        assert controller.state == Editing("k1")

    @pytest.mark.asyncio
    async def test_state_is_saving_while_in_flight(self, controller, save):
        save.gate = asyncio.Event()
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await asyncio.sleep(DELAY * 3)

        assert controller.state == Saving("k1")
        assert controller.is_saving

        save.gate.set()
        await controller.wait_idle()
        assert controller.state == Editing("k1")

    @pytest.mark.asyncio
    async def test_typing_during_save_saves_again_afterwards(self, controller, save):
        save.gate = asyncio.Event()
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await asyncio.sleep(DELAY * 3)

        controller.change_value("Bonjour!")
        save.gate.set()
        await controller.wait_idle()

        assert save.calls == [("k1", "Bonjour"), ("k1", "Bonjour!")]

    @pytest.mark.asyncio
    async def test_stale_response_is_ignored(self, controller, save):
        save.gate = asyncio.Event()
        save.error = ApiError(500, "boom")
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await asyncio.sleep(DELAY * 3)

        # Move to another row while k1's save is in flight
        controller.start_editing("k2", "World")
        save.gate.set()
        await controller.wait_idle()

        assert controller.state == Editing("k2")
        assert controller.value == "World"
        assert controller.error is None


# =============================================================================
# Blur & Enter
# =============================================================================


class TestBlur:
    @pytest.mark.asyncio
    async def test_blur_saves_immediately_and_closes(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        assert await controller.blur() is True

        assert save.calls == [("k1", "Bonjour")]
        assert controller.state == Idle()

        # The pending autosave was superseded
        await asyncio.sleep(DELAY * 3)
        assert len(save.calls) == 1

    @pytest.mark.asyncio
    async def test_enter_blurs(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("Salut")
        await controller.press_key("Enter")
        assert save.calls == [("k1", "Salut")]
        assert controller.state == Idle()

    @pytest.mark.asyncio
    async def test_blur_without_changes_closes(self, controller, save):
        controller.start_editing("k1", "Hello")
        assert await controller.blur() is True
        assert save.calls == []
        assert controller.state == Idle()

    @pytest.mark.asyncio
    async def test_blur_with_invalid_value_stays_open(self, controller, save):
        controller.start_editing("k1", "Hello")
        controller.change_value("a" * 251)
        assert await controller.blur() is False
        assert controller.error == TranslationMessages.VALUE_TOO_LONG
        assert controller.state == Editing("k1")
        assert save.calls == []

    @pytest.mark.asyncio
    async def test_blur_retries_after_failed_autosave(self, controller, save):
        save.error = ApiError(500, "Database operation failed")
        controller.start_editing("k1", "Hello")
        controller.change_value("Bonjour")
        await controller.wait_idle()
        assert controller.error == "Database operation failed"

        save.error = None
        assert await controller.blur() is True
        assert save.calls == [("k1", "Bonjour"), ("k1", "Bonjour")]
        assert controller.state == Idle()

    @pytest.mark.asyncio
    async def test_blur_when_idle_does_nothing(self, controller, save):
        assert await controller.blur() is False
        assert save.calls == []
