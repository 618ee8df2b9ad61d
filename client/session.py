from __future__ import annotations

import logging
import re
import unicodedata
from typing import Awaitable, Callable

from .api import ApiError, FilesApiClient

logger = logging.getLogger(__name__)

Confirm = Callable[[str], Awaitable[bool]]
PromptAccessCode = Callable[[], Awaitable[str | None]]

DEFAULT_EXTENSION = ".txt"
_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> tuple:
    """
    Numeric-aware, case- and accent-insensitive ordering key ("file2" < "file10").
    The raw name breaks ties so the order is total.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    parts = _DIGITS_RE.split(folded)
    # split() alternates text/digits, so positions always compare like with like.
    chunks = tuple(int(p) if i % 2 else p for i, p in enumerate(parts))
    return (chunks, name)


def sort_filenames(names) -> list[str]:
    return sorted(names, key=natural_sort_key)


class DocumentSession:
    """
    Client-side view of the document collection.

    Holds a local mirror of the server's files, the current selection and an
    edit buffer. Only save() and delete() change the server. Dialogs are
    injected as async callables: `confirm(message)` returns False to cancel and
    `prompt_access_code()` returns None (or "") to cancel.
    """

    def __init__(self, api: FilesApiClient, *, confirm: Confirm, prompt_access_code: PromptAccessCode):
        self._api = api
        self._confirm = confirm
        self._prompt_access_code = prompt_access_code

        self.files: dict[str, str] = {}
        self.selected: str | None = None
        self.is_editing = False
        self.edit_buffer = ""
        self.original_content = ""
        self.access_code: str | None = None
        self.last_error: ApiError | None = None
        self._unsaved_new_file = False

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_code)

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_new_file or self.edit_buffer != self.original_content

    def sorted_filenames(self) -> list[str]:
        return sort_filenames(self.files)

    def _first_filename(self) -> str | None:
        names = self.sorted_filenames()
        return names[0] if names else None

    def _is_staged_new_file(self, filename: str) -> bool:
        return self._unsaved_new_file and self.selected == filename

    def _discard_staged_new_file(self) -> None:
        """Forget a created-but-never-saved document and move the selection off it."""
        if self.selected is not None:
            self.files.pop(self.selected, None)
        self.selected = self._first_filename()
        self._reset_edit()

    def _reset_edit(self) -> None:
        self.is_editing = False
        self.edit_buffer = ""
        self.original_content = ""
        self._unsaved_new_file = False

    # ------------------------------------------------------------------
    # Server round trips
    # ------------------------------------------------------------------
    async def load(self) -> dict[str, str]:
        """Replace the local mirror with the server's collection."""
        try:
            files = await self._api.list_files()
        except ApiError as e:
            self.last_error = e
            logger.info("SESSION: load failed: %s", e)
            raise
        self.files = dict(files)
        self.last_error = None
        if self.selected is None or self.selected not in self.files:
            self.selected = self._first_filename()
            self._reset_edit()
        return self.files

    async def authenticate(self) -> bool:
        if self.is_authenticated:
            return True
        code = await self._prompt_access_code()
        if not code:
            return False
        self.access_code = code
        return True

    async def save(self) -> bool:
        """
        Persist the edit buffer for the selected file.

        Returns False when there is nothing to save or authentication was
        cancelled. Server errors are recorded in `last_error` and re-raised;
        the mirror and buffer are left untouched.
        """
        if self.selected is None or not self.is_editing:
            return False
        if not await self.authenticate():
            return False

        filename = self.selected
        content = self.edit_buffer
        try:
            await self._api.put_file(filename, content, self.access_code or "")
        except ApiError as e:
            self.last_error = e
            logger.info("SESSION: save of %s failed: %s", filename, e)
            raise

        self.files[filename] = content
        self.original_content = content
        self._unsaved_new_file = False
        self.is_editing = False
        self.last_error = None
        return True

    async def delete(self, filename: str) -> bool:
        if not await self.authenticate():
            return False
        if not await self._confirm(f'Delete "{filename}"?'):
            return False

        if self._is_staged_new_file(filename):
            # Never reached the server; drop it locally.
            self._discard_staged_new_file()
            return True

        try:
            await self._api.delete_file(filename, self.access_code or "")
        except ApiError as e:
            self.last_error = e
            logger.info("SESSION: delete of %s failed: %s", filename, e)
            raise

        self.files.pop(filename, None)
        if self.selected == filename:
            self.selected = self._first_filename()
            self._reset_edit()
        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # Local-only actions
    # ------------------------------------------------------------------
    async def create_file(self, name: str) -> str | None:
        """
        Stage a new empty document locally and open it for editing.
        Nothing reaches the server until save().
        """
        if not await self.authenticate():
            return None
        filename = (name or "").strip()
        if not filename:
            return None
        if "." not in filename:
            filename += DEFAULT_EXTENSION
        if filename in self.files:
            raise FileExistsError(filename)
        if self.has_unsaved_changes:
            if not await self._confirm("You have unsaved changes. Discard them?"):
                return None
        if self._unsaved_new_file:
            self._discard_staged_new_file()

        self.files[filename] = ""
        self.selected = filename
        self.is_editing = True
        self.edit_buffer = ""
        self.original_content = ""
        self._unsaved_new_file = True
        return filename

    async def select(self, filename: str) -> bool:
        if self.has_unsaved_changes:
            if not await self._confirm("You have unsaved changes. Discard them?"):
                return False
        if self._unsaved_new_file and filename != self.selected:
            self._discard_staged_new_file()
        self.selected = filename
        self._reset_edit()
        return True

    async def enter_edit(self) -> bool:
        if not await self.authenticate():
            return False
        if self.selected is None:
            return False
        if self.is_editing:
            # Keep the staged buffer.
            return True
        content = self.files.get(self.selected, "")
        self.edit_buffer = content
        self.original_content = content
        self.is_editing = True
        return True

    def update_buffer(self, text: str) -> None:
        self.edit_buffer = text

    async def cancel_edit(self) -> bool:
        if self.has_unsaved_changes:
            if not await self._confirm("Discard unsaved changes?"):
                return False
        if self._unsaved_new_file:
            self._discard_staged_new_file()
        self._reset_edit()
        return True
