"""Flat-file JSON persistence backend."""
import asyncio
import json
import logging
import os
import shutil
import time
from pathlib import Path
from typing import Any

from app.backends.base import PersistenceBackend
from app.engine.errors import NotFoundError
from app.schemas.allocation import Allocation
from app.schemas.history import HistoryEntry
from app.schemas.project import Project
from app.schemas.snapshot import DatabaseSnapshot
from app.schemas.team import TeamMember

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT: dict[str, Any] = {
    "teamMembers": [],
    "projects": [],
    "allocations": [],
    "history": [],
    "sprintProjects": {},
    "sprintRoleRequirements": {},
}


class JsonFileBackend(PersistenceBackend):
    """Whole dataset in one JSON document.

    Writes go through a lock so collection saves are applied one at a time;
    each write backs up the previous file and replaces it via rename.
    """

    def __init__(self, path: str | Path, backup_keep: int = 10) -> None:
        self.path = Path(path)
        self.backup_keep = backup_keep
        self._lock = asyncio.Lock()

    @property
    def _backup_prefix(self) -> str:
        return f"{self.path.stem}.backup."

    async def init(self) -> None:
        await asyncio.to_thread(self._init_sync)

    def _init_sync(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write_sync(dict(EMPTY_DOCUMENT))
            logger.info("Initialised empty database at %s", self.path)

    async def fetch_all(self) -> DatabaseSnapshot:
        document = await asyncio.to_thread(self._read_sync)
        return DatabaseSnapshot.model_validate(document)

    async def save_team_members(self, members: list[TeamMember]) -> None:
        await self._replace("teamMembers", [m.to_wire() for m in members])

    async def save_projects(self, projects: list[Project]) -> None:
        await self._replace("projects", [p.to_wire() for p in projects])

    async def save_allocations(self, allocations: list[Allocation]) -> None:
        await self._replace("allocations", [a.to_wire() for a in allocations])

    async def save_history(self, history: list[HistoryEntry]) -> None:
        await self._replace("history", [h.to_wire() for h in history])

    async def save_sprint_projects(self, sprint_projects: dict[str, list[str]]) -> None:
        await self._replace("sprintProjects", {k: list(v) for k, v in sprint_projects.items()})

    async def save_sprint_role_requirements(
        self, requirements: dict[str, dict[str, float]]
    ) -> None:
        await self._replace("sprintRoleRequirements", {k: dict(v) for k, v in requirements.items()})

    def list_backups(self) -> list[str]:
        """Backup file names, newest first."""
        if not self.path.parent.exists():
            return []
        names = [
            p.name
            for p in self.path.parent.iterdir()
            if p.name.startswith(self._backup_prefix) and p.suffix == ".json"
        ]
        return sorted(names, reverse=True)

    async def restore_backup(self, name: str) -> None:
        """Make a listed backup the live document; the current file is backed up first."""
        if name not in self.list_backups():
            raise NotFoundError("Backup", name)
        async with self._lock:
            await asyncio.to_thread(self._restore_sync, name)
        logger.info("Database restored from backup %s", name)

    def _restore_sync(self, name: str) -> None:
        source = self.path.parent / name
        document = json.loads(source.read_text(encoding="utf-8"))
        self._backup_sync()
        self._write_sync(document)
        self._prune_backups_sync(keep=name)

    async def _replace(self, key: str, value: Any) -> None:
        async with self._lock:
            await asyncio.to_thread(self._replace_sync, key, value)

    def _replace_sync(self, key: str, value: Any) -> None:
        document = self._read_sync() if self.path.exists() else dict(EMPTY_DOCUMENT)
        document[key] = value
        self._backup_sync()
        self._write_sync(document)
        self._prune_backups_sync()

    def _read_sync(self) -> dict[str, Any]:
        with self.path.open(encoding="utf-8") as fh:
            document = json.load(fh)
        for key, default in EMPTY_DOCUMENT.items():
            document.setdefault(key, type(default)())
        return document

    def _write_sync(self, document: dict[str, Any]) -> None:
        payload = json.dumps(document, indent=2)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self.path)

    def _backup_sync(self) -> None:
        if not self.path.exists():
            return
        backup = self.path.with_name(f"{self._backup_prefix}{time.time_ns() // 1000}.json")
        shutil.copyfile(self.path, backup)

    def _prune_backups_sync(self, keep: str | None = None) -> None:
        for name in self.list_backups()[self.backup_keep:]:
            if name == keep:
                continue
            try:
                (self.path.parent / name).unlink()
            except FileNotFoundError:
                pass
