"""Draft Manager: the single source of truth for the draft being edited.

One manager is constructed per editing session and handed to every step
form. It owns the in-memory draft, tracks unsaved changes and persists
them explicitly (``save``), on navigation (``flush``) and on a debounce
timer (autosave).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from resumint.clients.drafts_client import DraftsClient
from resumint.drafts.scheduler import DebouncedTask
from resumint.errors import AuthError, NotFoundError, ResumintError
from resumint.models.draft import Draft
from resumint.models.sections import SectionUpdate, build_update

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    NEVER_SAVED = "never_saved"
    UNSAVED = "unsaved"
    SAVED = "saved"


class DraftManager:
    """State container for one draft with dirty tracking and debounced autosave.

    Dirty tracking uses revision counters: every applied update bumps
    ``_revision`` and a successful save records the revision it sent, so an
    edit made while a save is in flight keeps the draft dirty.
    """

    def __init__(
        self,
        client: DraftsClient,
        *,
        autosave: bool = True,
        debounce_seconds: float = 3.0,
        retry_seconds: float = 10.0,
        clock: Callable[[], datetime] = datetime.now,
        on_auth_error: Callable[[AuthError], None] | None = None,
    ):
        self.client = client
        self.autosave_enabled = autosave
        self.retry_seconds = retry_seconds
        self.on_auth_error = on_auth_error
        self._clock = clock
        self._draft: Draft | None = None
        self._revision = 0
        self._saved_revision = 0
        self._last_saved: datetime | None = None
        self._load_generation = 0
        self._session = 0  # bumped on every load, create and local invalidation
        self._loading = False
        self._save_lock = asyncio.Lock()
        self._timer = DebouncedTask(self._autosave, debounce_seconds)

    # --- Read accessors ---

    @property
    def draft(self) -> Draft | None:
        """A copy of the current draft; mutate it through ``update_section``."""
        return self._draft.model_copy(deep=True) if self._draft is not None else None

    @property
    def draft_id(self) -> str | None:
        return self._draft.id if self._draft is not None else None

    @property
    def dirty(self) -> bool:
        return self._revision != self._saved_revision

    @property
    def last_saved(self) -> datetime | None:
        return self._last_saved

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def autosave_pending(self) -> bool:
        return self._timer.pending

    @property
    def save_state(self) -> SaveState:
        if self.dirty:
            return SaveState.UNSAVED
        if self._last_saved is not None:
            return SaveState.SAVED
        return SaveState.NEVER_SAVED

    @property
    def status_text(self) -> str:
        """Indicator shown next to the editor."""
        state = self.save_state
        if state is SaveState.UNSAVED:
            return "Unsaved changes"
        if state is SaveState.SAVED:
            return f"Saved at {self._last_saved:%H:%M:%S}"
        return ""

    # --- Loading ---

    async def load(self, draft_id: str, *, force: bool = False) -> Draft | None:
        """Fetch a draft and make it the one being edited.

        Loading the id that is already loaded is a no-op unless ``force`` is
        set (explicit reload, discarding local edits). Returns None when a
        newer ``load`` superseded this one before the response arrived.
        """
        if not force and self._draft is not None and self._draft.id == draft_id:
            # Returning to the loaded draft still supersedes any load in flight.
            self._load_generation += 1
            self._loading = False
            logger.debug("Draft %s already loaded", draft_id)
            return self.draft

        self._load_generation += 1
        generation = self._load_generation
        self._loading = True
        try:
            draft = await self.client.get(draft_id)
        finally:
            if generation == self._load_generation:
                self._loading = False

        if generation != self._load_generation:
            logger.debug("Discarding stale load response for %s", draft_id)
            return None

        self._replace(draft)
        logger.info("Loaded %s %s", self.client.kind.value, draft_id)
        return self.draft

    async def create(self, title: str, **fields: Any) -> Draft:
        """Create a new remote draft and start editing it."""
        self._load_generation += 1
        draft = await self.client.create(title, **fields)
        self._replace(draft)
        return self.draft

    def _replace(self, draft: Draft) -> None:
        self._timer.cancel()
        self._session += 1
        self._draft = draft
        self._revision = 0
        self._saved_revision = 0
        self._last_saved = draft.last_saved

    # --- Editing ---

    def update_section(self, section: str | SectionUpdate, patch: Any = None) -> None:
        """Merge a patch into one section and mark the draft dirty.

        Accepts a prebuilt ``SectionUpdate`` or a section name plus patch,
        which is validated first (ValidationError on a malformed patch).
        Does not persist; it only restarts the autosave countdown.
        """
        if self._draft is None:
            logger.warning("update_section(%s) ignored: no draft loaded", section)
            return
        if isinstance(section, SectionUpdate):
            update = section
        else:
            update = build_update(type(self._draft), section, patch)

        self._draft = update.apply(self._draft)
        self._revision += 1
        self._schedule_autosave()

    def _schedule_autosave(self, delay: float | None = None) -> None:
        if not self.autosave_enabled:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer.reset(delay)

    # --- Persistence ---

    async def save(self) -> datetime | None:
        """Send the full current draft to the Persistence API.

        On failure the draft stays dirty, in-memory state is untouched and the
        error is re-raised for the caller to surface.
        """
        if self._draft is None:
            raise RuntimeError("No draft loaded")

        async with self._save_lock:
            snapshot = self._draft.model_copy(deep=True)
            revision = self._revision
            session = self._session
            try:
                await self.client.update(snapshot)
            except ResumintError as exc:
                logger.warning("Saving %s failed: %s", snapshot.id, exc)
                raise

            if self._session != session:
                # Another document was loaded while this save was in flight.
                return None
            self._saved_revision = revision
            self._last_saved = self._clock()
            logger.debug("Saved %s at revision %d", snapshot.id, revision)
            return self._last_saved

    async def _autosave(self) -> None:
        if self._draft is None or not self.dirty:
            return
        try:
            await self.save()
        except AuthError as exc:
            logger.warning("Autosave stopped: %s", exc)
            if self.on_auth_error is not None:
                self.on_auth_error(exc)
        except NotFoundError as exc:
            logger.error("Autosave target no longer exists: %s", exc)
        except ResumintError as exc:
            logger.warning("Autosave failed, retrying in %.1fs: %s", self.retry_seconds, exc)
            if self.autosave_enabled:
                self._timer.start(self.retry_seconds)

    async def flush(self) -> bool:
        """Persist pending edits before navigating away.

        Never raises, so navigation is never blocked. Returns True when the
        draft is clean afterwards.
        """
        self._timer.cancel()
        if self._draft is None or not self.dirty:
            return True
        try:
            await self.save()
        except AuthError as exc:
            logger.warning("Save on navigation failed: %s", exc)
            if self.on_auth_error is not None:
                self.on_auth_error(exc)
        except ResumintError as exc:
            logger.warning("Save on navigation failed: %s", exc)
            self._schedule_autosave(self.retry_seconds)
        return not self.dirty

    # --- Pass-through remote operations ---

    async def duplicate(self, draft_id: str) -> Draft:
        """Copy a remote draft. The loaded draft is unaffected."""
        return await self.client.duplicate(draft_id)

    async def delete(self, draft_id: str) -> None:
        """Delete a remote draft, dropping the local copy if it is the loaded one."""
        await self.client.delete(draft_id)
        if self._draft is not None and self._draft.id == draft_id:
            self._timer.cancel()
            self._session += 1
            self._draft = None
            self._revision = 0
            self._saved_revision = 0
            self._last_saved = None

    async def close(self) -> None:
        """Stop autosave for good (the editing view is going away)."""
        self.autosave_enabled = False
        self._timer.cancel()
        await self._timer.wait()
