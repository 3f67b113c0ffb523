"""
Entry store.

Owns the ordered collection of symptom entries and the single draft slot,
and keeps both on local disk. Every mutation is persisted immediately.
"""

import logging
import shutil
from pathlib import Path
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.infrastructure.storage.json_file import read_text, write_json_atomic
from symptom_journal.utils.exceptions import StorageError
from symptom_journal.utils.parameters import StorageConfig
from symptom_journal.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

_ENTRY_LIST = TypeAdapter(list[SymptomEntry])


class EntryStore:
    """
    Durable store for symptom entries and the in-progress draft.

    The store is designed for single in-process ownership: operations run
    to completion on the calling thread and no locking is performed.
    Write failures are logged and leave the in-memory state authoritative.
    """

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize entry store.

        The collection starts empty; call ``load`` to read persisted entries.

        Args:
            config: Storage configuration.
        """
        self.config = config
        self.entries_path: Path = config.entries_path
        self.draft_path: Path = config.draft_path
        self.backup_path: Path = config.backup_path

        self._entries: list[SymptomEntry] = []
        self.draft: SymptomEntry | None = None
        self._dirty = False

    @property
    def entries(self) -> list[SymptomEntry]:
        """Snapshot of the collection in store order."""
        return list(self._entries)

    @property
    def dirty(self) -> bool:
        """True when in-memory entries have not been written successfully."""
        return self._dirty

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: UUID | str) -> SymptomEntry | None:
        """Return the entry with the given id, if any. Malformed ids match nothing."""
        target = _as_uuid(entry_id)
        if target is None:
            return None
        for entry in self._entries:
            if entry.id == target:
                return entry
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, entry: SymptomEntry) -> list[SymptomEntry]:
        """
        Append an entry and persist the collection.

        Args:
            entry: Entry to append. Content is not validated further.

        Returns:
            Snapshot of the updated collection.
        """
        self._entries.append(entry)
        self._dirty = True
        logger.info(f"Added entry {entry.id}")
        self.persist()
        return self.entries

    def update(self, entry: SymptomEntry) -> list[SymptomEntry]:
        """
        Replace the stored entry with the same id, keeping its position.

        An unknown id is ignored.

        Args:
            entry: Replacement entry.

        Returns:
            Snapshot of the collection.
        """
        for index, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[index] = entry
                self._dirty = True
                logger.info(f"Updated entry {entry.id}")
                self.persist()
                break
        else:
            logger.debug(f"Update ignored, no entry with id {entry.id}")

        return self.entries

    def delete(self, entry: SymptomEntry | UUID | str) -> list[SymptomEntry]:
        """
        Remove every entry matching an id and persist the result.

        Args:
            entry: Entry, or its id.

        Returns:
            Snapshot of the updated collection.
        """
        target = entry.id if isinstance(entry, SymptomEntry) else _as_uuid(entry)
        if target is None:
            logger.debug(f"Delete ignored, malformed id {entry!r}")
            return self.entries

        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != target]
        removed = before - len(self._entries)

        if removed:
            logger.info(f"Deleted {removed} entry(ies) with id {target}")
        else:
            logger.debug(f"Delete found no entry with id {target}")

        self._dirty = True
        self.persist()
        return self.entries

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self) -> bool:
        """
        Write the full collection to disk, replacing prior content.

        Returns:
            True if the write succeeded. Failures are logged, not raised.
        """
        data = [entry.to_dict() for entry in self._entries]
        try:
            write_json_atomic(self.entries_path, data, self.config.file_mode)
        except StorageError as e:
            self._dirty = True
            logger.error(f"Failed to save entries: {e}")
            return False

        self._dirty = False
        logger.debug(f"Saved {len(data)} entries to {self.entries_path}")
        return True

    def flush(self) -> bool:
        """
        Persist pending changes, for lifecycle hooks.

        A no-op when nothing is pending.

        Returns:
            True if the store is clean afterwards.
        """
        if not self._dirty:
            return True
        logger.info("Flushing pending entries")
        return self.persist()

    save_now = flush

    def load(self) -> list[SymptomEntry]:
        """
        Read the persisted collection.

        A missing file yields an empty collection. An unreadable or
        malformed file is copied to the backup location (a timestamped
        sibling when a backup already exists) and the collection is reset
        to empty; backups are never read back.

        Returns:
            Snapshot of the loaded collection.
        """
        self._dirty = False

        if not self.entries_path.exists():
            logger.info(f"No entries file at {self.entries_path}")
            self._entries = []
            return self.entries

        try:
            raw = read_text(self.entries_path)
            self._entries = _ENTRY_LIST.validate_json(raw)
        except (StorageError, PydanticValidationError, ValueError) as e:
            logger.warning(f"Failed to load entries from {self.entries_path}: {e}")
            self._quarantine()
            self._entries = []
            return self.entries

        logger.info(f"Loaded {len(self._entries)} entries")
        return self.entries

    def _quarantine(self) -> Path | None:
        """Copy the unreadable entries file aside. Earlier backups are kept."""
        target = self.backup_path
        if target.exists():
            stamp = utc_now().strftime("%Y%m%dT%H%M%S%f")
            target = target.with_name(f"{target.stem}-{stamp}{target.suffix}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.entries_path, target)
        except OSError as e:
            logger.error(f"Could not back up unreadable entries file: {e}")
            return None
        logger.warning(f"Unreadable entries file backed up to {target}")
        return target

    # ------------------------------------------------------------------
    # Draft slot
    # ------------------------------------------------------------------

    def save_draft(self, entry: SymptomEntry) -> bool:
        """
        Overwrite the draft slot with an entry.

        Returns:
            True if the draft file was written.
        """
        self.draft = entry
        try:
            write_json_atomic(self.draft_path, entry.to_dict(), self.config.file_mode)
        except StorageError as e:
            logger.error(f"Failed to save draft: {e}")
            return False

        logger.debug("Draft saved")
        return True

    def load_draft(self) -> SymptomEntry | None:
        """
        Read the draft slot from disk.

        Returns:
            The draft entry, or None when absent or unreadable.
        """
        if not self.draft_path.exists():
            self.draft = None
            return None

        try:
            self.draft = SymptomEntry.model_validate_json(read_text(self.draft_path))
        except (StorageError, PydanticValidationError, ValueError) as e:
            logger.warning(f"Failed to load draft: {e}")
            self.draft = None

        return self.draft

    def clear_draft(self) -> None:
        """Empty the draft slot and remove its file."""
        self.draft = None
        try:
            self.draft_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove draft file: {e}")

    def commit_draft(self) -> SymptomEntry | None:
        """
        Move the current draft into the collection.

        The draft is cleared only once the collection is on disk. If the
        write fails the entry is taken back out of the collection and the
        draft file is left in place.

        Returns:
            The committed entry, or None when there is no draft or the
            collection could not be written.
        """
        draft = self.draft if self.draft is not None else self.load_draft()
        if draft is None:
            return None

        was_dirty = self._dirty
        self._entries.append(draft)
        self._dirty = True
        if not self.persist():
            self._entries.pop()
            self._dirty = was_dirty
            logger.error(f"Draft {draft.id} kept, entries could not be saved")
            return None

        logger.info(f"Committed draft {draft.id}")
        self.clear_draft()
        return draft


def _as_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None
