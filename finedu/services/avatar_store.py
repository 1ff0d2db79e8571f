"""
Avatar persistence

Stores avatar snapshots keyed by user id. The progression engine never
touches a store; the ProgressionService loads a snapshot, applies an event
and saves the result.

Backends:
- InMemoryAvatarStore: process-local dict, used by tests and demos
- JsonFileAvatarStore: one JSON document per user under DATA_PATH/avatars
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from finedu import config
from finedu.exceptions import ConfigurationError, RecordNotFoundError, StorageError
from finedu.models.avatar import Avatar
from finedu.observability.metrics import avatar_store_duration_seconds, record_error

logger = logging.getLogger(__name__)

_SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_.@-]+$")


class AvatarStore(ABC):
    """Async key-value store of Avatar snapshots"""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[Avatar]:
        """Stored avatar, or None if the user has none yet"""

    @abstractmethod
    async def save(self, user_id: str, avatar: Avatar) -> None:
        """Persist a snapshot, replacing the previous one"""

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Remove a snapshot; raises RecordNotFoundError if absent"""

    async def get_or_create(self, user_id: str) -> Avatar:
        """Stored avatar, creating and saving the default one on first access"""
        avatar = await self.get(user_id)
        if avatar is None:
            avatar = Avatar.new()
            await self.save(user_id, avatar)
            logger.info(f"Created default avatar for user {user_id}")
        return avatar


class InMemoryAvatarStore(AvatarStore):
    """In-memory store (not persisted across restarts)"""

    def __init__(self):
        self._avatars: dict[str, Avatar] = {}

    async def get(self, user_id: str) -> Optional[Avatar]:
        with avatar_store_duration_seconds.labels(operation="load").time():
            avatar = self._avatars.get(user_id)
            return avatar.model_copy(deep=True) if avatar is not None else None

    async def save(self, user_id: str, avatar: Avatar) -> None:
        with avatar_store_duration_seconds.labels(operation="save").time():
            self._avatars[user_id] = avatar.model_copy(deep=True)
        logger.debug(f"Saved avatar for user {user_id} to memory store")

    async def delete(self, user_id: str) -> None:
        if self._avatars.pop(user_id, None) is None:
            raise RecordNotFoundError(
                f"No avatar for user {user_id}",
                record_type="Avatar",
                record_id=user_id,
                user_id=user_id,
            )


class JsonFileAvatarStore(AvatarStore):
    """One <user_id>.json document per user"""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        if not _SAFE_USER_ID.match(user_id):
            raise StorageError(
                f"User id '{user_id}' cannot be used as a file name",
                user_id=user_id,
                operation="avatar_path",
            )
        return self.base_path / f"{user_id}.json"

    def _read(self, path: Path) -> Optional[Avatar]:
        if not path.exists():
            return None
        return Avatar.model_validate_json(path.read_text(encoding="utf-8"))

    def _write(self, path: Path, avatar: Avatar) -> None:
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(avatar.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(path)

    async def get(self, user_id: str) -> Optional[Avatar]:
        path = self._path(user_id)
        try:
            with avatar_store_duration_seconds.labels(operation="load").time():
                return await asyncio.to_thread(self._read, path)
        except (OSError, PydanticValidationError) as e:
            record_error(type(e).__name__, "store")
            raise StorageError(
                f"Failed to load avatar from {path}",
                user_id=user_id,
                operation="load_avatar",
                cause=e,
            )

    async def save(self, user_id: str, avatar: Avatar) -> None:
        path = self._path(user_id)
        try:
            with avatar_store_duration_seconds.labels(operation="save").time():
                await asyncio.to_thread(self._write, path, avatar)
        except OSError as e:
            record_error(type(e).__name__, "store")
            raise StorageError(
                f"Failed to save avatar to {path}",
                user_id=user_id,
                operation="save_avatar",
                cause=e,
            )
        logger.debug(f"Saved avatar for user {user_id} to {path}")

    async def delete(self, user_id: str) -> None:
        path = self._path(user_id)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            raise RecordNotFoundError(
                f"No avatar for user {user_id}",
                record_type="Avatar",
                record_id=user_id,
                user_id=user_id,
            )


def create_avatar_store(backend: Optional[str] = None, data_path: Optional[Path] = None) -> AvatarStore:
    """Build the store selected by AVATAR_STORE (or the given backend)"""
    backend = backend or config.AVATAR_STORE
    if backend == "memory":
        logger.warning("Using in-memory avatar store - progress is NOT persisted")
        return InMemoryAvatarStore()
    if backend == "json":
        return JsonFileAvatarStore(Path(data_path or config.DATA_PATH) / "avatars")
    raise ConfigurationError(f"Unknown avatar store '{backend}'", config_key="AVATAR_STORE")
