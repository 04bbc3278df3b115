"""
Inline editing of translation values.

One row at a time is in edit mode. While editing, every change is
validated and saved after a quiet period (autosave); blurring or pressing
Enter saves immediately, Escape throws the local changes away.

The controller is an explicit state machine:

    Idle ──start_editing──▶ Editing ──commit──▶ Saving
      ▲                        │  ▲               │
      └──end/cancel_editing────┘  └───response────┘

Each edit session gets a token. A save response that arrives after its
session has ended (the user moved to another row, or cancelled) is
ignored, so it can never overwrite newer local state.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Union

from i18nmate.config import get_settings
from i18nmate.core.debounce import Debouncer
from i18nmate.core.errors import ApiError
from i18nmate.core.validation import normalize_translation_value, validate_translation_value

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to update translation"

# (key_id, normalized value) -> persisted row; raises ApiError on failure
SaveTranslation = Callable[[str, Union[str, None]], Awaitable[object]]


# =============================================================================
# States
# =============================================================================


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Editing:
    key_id: str


@dataclass(frozen=True)
class Saving:
    key_id: str


EditState = Union[Idle, Editing, Saving]


# =============================================================================
# Controller
# =============================================================================


class InlineEditController:
    """Edit-mode and autosave state for a list of translation rows."""

    def __init__(self, save: SaveTranslation, delay: float | None = None):
        self._save = save
        self._debouncer = Debouncer(get_settings().autosave_delay if delay is None else delay)
        self._sessions = itertools.count(1)
        self._session = 0

        self.state: EditState = Idle()
        self.value = ""
        self.error: str | None = None

        self._original: str | None = None
        self._last_saved: str | None = None

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def editing_key_id(self) -> str | None:
        if isinstance(self.state, Idle):
            return None
        return self.state.key_id

    @property
    def is_saving(self) -> bool:
        return isinstance(self.state, Saving)

    def is_editing(self, key_id: str) -> bool:
        return self.editing_key_id == key_id

    @property
    def saved_value(self) -> str | None:
        """The last value committed (or loaded) in this session."""
        return self._last_saved

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def start_editing(self, key_id: str, value: str | None) -> None:
        """Enter edit mode for a row, leaving any other row."""
        self._debouncer.cancel()
        self._session = next(self._sessions)
        self.state = Editing(key_id)
        self.value = value or ""
        self.error = None
        self._original = value
        self._last_saved = normalize_translation_value(value)

    def end_editing(self) -> None:
        """Leave edit mode. A pending autosave is dropped."""
        self._debouncer.cancel()
        self._session = next(self._sessions)
        self.state = Idle()
        self.error = None

    def cancel_editing(self) -> None:
        """Revert the local buffer and leave edit mode without saving."""
        self.value = self._original or ""
        self.end_editing()

    # =========================================================================
    # Input events
    # =========================================================================

    def change_value(self, text: str) -> None:
        """Update the local buffer and (re)start the autosave timer."""
        if isinstance(self.state, Idle):
            return
        self.value = text
        if isinstance(self.state, Saving):
            # Picked up again once the in-flight save settles
            return
        self._schedule_autosave()

    async def blur(self) -> bool:
        """
        Save immediately.

        Leaves edit mode when the value was saved (or didn't change).
        On a validation or save error the row stays in edit mode with
        ``error`` set, so the user can fix it and try again.
        """
        if isinstance(self.state, Idle):
            return False
        self._debouncer.cancel()
        if isinstance(self.state, Saving):
            await self._debouncer.drain()
            if isinstance(self.state, Idle):
                return False

        session = self._session
        saved = await self._submit(session)
        if saved and session == self._session:
            self.end_editing()
        return saved

    async def press_key(self, key: str) -> None:
        if key == "Enter":
            await self.blur()
        elif key == "Escape":
            self.cancel_editing()

    async def wait_idle(self) -> None:
        """Wait for pending and in-flight autosaves."""
        await self._debouncer.drain()

    # =========================================================================
    # Saving
    # =========================================================================

    def _schedule_autosave(self) -> None:
        session = self._session
        self._debouncer.schedule(lambda: self._autosave(session))

    async def _autosave(self, session: int) -> None:
        if session != self._session or not isinstance(self.state, Editing):
            return
        await self._submit(session)

    async def _submit(self, session: int) -> bool:
        """Validate the buffer and commit it if it differs from the saved value."""
        error = validate_translation_value(self.value)
        if error:
            self.error = error
            return False

        value = normalize_translation_value(self.value)
        if value == self._last_saved:
            self.error = None
            return True
        return await self._commit(session, value)

    async def _commit(self, session: int, value: str | None) -> bool:
        key_id = self.state.key_id
        previous = self._last_saved
        self._last_saved = value
        self.state = Saving(key_id)

        try:
            await self._save(key_id, value)
        except ApiError as e:
            return self._fail(session, key_id, previous, e.message)
        except Exception:
            logger.exception(f"Unexpected error saving translation for key {key_id}")
            return self._fail(session, key_id, previous, SAVE_FAILED)

        if session != self._session:
            logger.debug(f"Ignoring save response for ended edit session on key {key_id}")
            return False

        self.error = None
        self.state = Editing(key_id)
        if normalize_translation_value(self.value) != self._last_saved:
            self._schedule_autosave()
        return True

    def _fail(self, session: int, key_id: str, previous: str | None, message: str) -> bool:
        if session == self._session:
            self._last_saved = previous
            self.error = message
            self.state = Editing(key_id)
        return False
