"""Save scheduling against a persistence backend.

Two strategies:

* debounced bulk save - every change (after the initial load) restarts a timer;
  when it fires, team members, projects, allocations and history are saved
  concurrently using the state at that moment.
* immediate save - cancels any pending debounced save, saves the primary
  collection right away (failures propagate), then the best-effort
  collections (failures are logged only).

Only a scheduled-but-not-started debounced save can be cancelled; a save that
has started always runs to completion or failure. There is no version check,
so concurrent writers are last-writer-wins.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable

from app.backends.base import PersistenceBackend
from app.engine.errors import PersistenceError

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    TEAM_MEMBERS = "teamMembers"
    PROJECTS = "projects"
    ALLOCATIONS = "allocations"
    HISTORY = "history"
    SPRINT_PROJECTS = "sprintProjects"
    SPRINT_ROLE_REQUIREMENTS = "sprintRoleRequirements"


BULK_COLLECTIONS = (
    Collection.TEAM_MEMBERS,
    Collection.PROJECTS,
    Collection.ALLOCATIONS,
    Collection.HISTORY,
)


class SaveStrategy(str, Enum):
    IMMEDIATE = "immediate"
    DEBOUNCED = "debounced"


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Additions and deletions must not be lost to a later stale debounced save.
SAVE_POLICY: dict[MutationKind, SaveStrategy] = {
    MutationKind.CREATE: SaveStrategy.IMMEDIATE,
    MutationKind.UPDATE: SaveStrategy.DEBOUNCED,
    MutationKind.DELETE: SaveStrategy.IMMEDIATE,
}

SnapshotProvider = Callable[[Collection], Any]


class PersistenceCoordinator:
    """Schedules collection saves and tracks whether any save is in flight."""

    def __init__(
        self,
        backend: PersistenceBackend,
        snapshot: SnapshotProvider,
        debounce_seconds: float = 0.2,
    ) -> None:
        self._backend = backend
        self._snapshot = snapshot
        self._debounce_seconds = debounce_seconds
        self._timer: asyncio.TimerHandle | None = None
        self._dirty: set[Collection] = set()
        self._tasks: set[asyncio.Task] = set()
        self._in_flight = 0
        self._immediate_running = 0
        self._loaded = False
        self._closed = False
        self.last_error: PersistenceError | None = None

    @property
    def is_saving(self) -> bool:
        return self._in_flight > 0

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    def mark_loaded(self) -> None:
        """Start reacting to changes; called once the initial fetch is applied."""
        self._loaded = True

    def schedule(self, *collections: Collection) -> None:
        """Mark collections dirty and (re)start the debounce timer."""
        if not self._loaded or self._closed:
            return
        self._dirty.update(collections or BULK_COLLECTIONS)
        if self._immediate_running:
            # re-armed once the running immediate save settles
            return
        self._arm()

    def discard_pending(self) -> None:
        self._cancel_timer()
        self._dirty.clear()

    async def save_now(self, primary: Collection, *best_effort: Collection) -> None:
        """Immediate save; raises PersistenceError if ``primary`` fails."""
        if self._cancel_timer():
            logger.debug("Pending debounced save cancelled by immediate save of %s", primary.value)
        self._immediate_running += 1
        self._begin()
        try:
            self._dirty.discard(primary)
            try:
                await self._write(primary, self._snapshot(primary))
            except PersistenceError as exc:
                self.last_error = exc
                logger.error("Immediate save of %s failed: %s", primary.value, exc)
                raise
            for collection in best_effort:
                self._dirty.discard(collection)
                try:
                    await self._write(collection, self._snapshot(collection))
                except PersistenceError as exc:
                    self.last_error = exc
                    logger.warning("%s not saved after %s save: %s", collection.value, primary.value, exc)
        finally:
            self._end()
            self._immediate_running -= 1
            if not self._immediate_running and self._dirty and not self._closed:
                self._arm()

    async def flush(self) -> None:
        """Run a pending debounced save now and wait for background saves."""
        if self._cancel_timer():
            self._fire()
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self.flush()
        self._closed = True

    def _arm(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce_seconds, self._fire)

    def _cancel_timer(self) -> bool:
        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        return True

    def _fire(self) -> None:
        self._timer = None
        task = asyncio.ensure_future(self._save_bulk())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save_bulk(self) -> None:
        self._dirty.difference_update(BULK_COLLECTIONS)
        snapshots = {c: self._snapshot(c) for c in BULK_COLLECTIONS}
        self._begin()
        try:
            results = await asyncio.gather(
                *(self._write(c, snapshots[c]) for c in BULK_COLLECTIONS),
                return_exceptions=True,
            )
            failures = [r for r in results if isinstance(r, PersistenceError)]
            if failures:
                self.last_error = failures[0]
                for failure in failures:
                    logger.error("Debounced save failed: %s", failure)
            else:
                logger.debug("All collections saved")
        finally:
            self._end()

    async def _write(self, collection: Collection, data: Any) -> None:
        writer = {
            Collection.TEAM_MEMBERS: self._backend.save_team_members,
            Collection.PROJECTS: self._backend.save_projects,
            Collection.ALLOCATIONS: self._backend.save_allocations,
            Collection.HISTORY: self._backend.save_history,
            Collection.SPRINT_PROJECTS: self._backend.save_sprint_projects,
            Collection.SPRINT_ROLE_REQUIREMENTS: self._backend.save_sprint_role_requirements,
        }[collection]
        try:
            await writer(data)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(collection.value, exc) from exc

    def _begin(self) -> None:
        self._in_flight += 1

    def _end(self) -> None:
        self._in_flight -= 1
