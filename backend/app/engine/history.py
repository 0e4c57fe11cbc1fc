"""Append-only allocation history ledger."""
from copy import deepcopy
from typing import Iterable

from app.schemas.allocation import Allocation
from app.schemas.history import ChangeType, HistoryEntry


def _snapshot(allocation: Allocation) -> dict:
    return deepcopy(allocation.to_wire())


class HistoryLedger:
    """Audit trail of allocation mutations. Entries are never changed or removed."""

    def __init__(self, entries: Iterable[HistoryEntry] = ()) -> None:
        self._entries: list[HistoryEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _append(self, entry: HistoryEntry) -> HistoryEntry:
        self._entries.append(entry)
        return entry

    def record_created(self, allocation: Allocation, actor_id: str) -> HistoryEntry:
        return self._append(HistoryEntry(
            allocation_id=allocation.id,
            changed_by=actor_id,
            change_type=ChangeType.CREATED,
            new_value=_snapshot(allocation),
        ))

    def record_updated(self, old: Allocation, new: Allocation, actor_id: str) -> HistoryEntry:
        return self._append(HistoryEntry(
            allocation_id=old.id,
            changed_by=actor_id,
            change_type=ChangeType.UPDATED,
            old_value=_snapshot(old),
            new_value=_snapshot(new),
        ))

    def record_deleted(self, old: Allocation, actor_id: str) -> HistoryEntry:
        return self._append(HistoryEntry(
            allocation_id=old.id,
            changed_by=actor_id,
            change_type=ChangeType.DELETED,
            old_value=_snapshot(old),
        ))

    def entries(self) -> list[HistoryEntry]:
        """All entries, newest first (insertion order breaks timestamp ties)."""
        return sorted(reversed(self._entries), key=lambda e: e.changed_at, reverse=True)

    def for_allocation(self, allocation_id: str) -> list[HistoryEntry]:
        return [e for e in self.entries() if e.allocation_id == allocation_id]

    def snapshot(self) -> list[HistoryEntry]:
        """Entries in append order, for persistence."""
        return list(self._entries)
