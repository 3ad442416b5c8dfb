"""
Local persistence layer for users and the current-user pointer.

This module provides two layers:
- Key-value backends (FileStorage, MemoryStorage) that behave like a browser's
  local storage: string values under string keys, whole-value overwrites, no locking.
- PersistentStore, a thin typed wrapper that keeps the registered users and the
  "current user" pointer under two fixed keys.

Stored layout:
- "recipe_app_users" -> JSON array of User objects (full dump)
- "recipe_app_current_user" -> JSON object of one User, removed when logged out

Corrupt or unparsable content is treated as "no data": loads return an empty list or
None and log a warning. Nothing in PersistentStore raises on bad stored content.

Note: FileStorage is shared by every process pointing at the same directory. There is
no locking, so concurrent writers race and the last write wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from pydantic import ValidationError

from .config import StorageConfig
from .models import User

logger = logging.getLogger(__name__)

USERS_KEY = "recipe_app_users"
CURRENT_USER_KEY = "recipe_app_current_user"


class KeyValueStorage(Protocol):
    """Protocol describing the local-storage-like backend used by PersistentStore."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string for key, or None if absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""

    def clear(self) -> None:
        """Remove every key."""


class MemoryStorage:
    """Dict-backed storage used for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileStorage:
    """
    Durable storage keeping one UTF-8 file per key inside a directory.

    The directory is created lazily on the first write. Each write goes to a temporary
    file in the same directory and is moved into place with os.replace, so readers
    never observe a half-written value.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Union[Path, str]) -> None:
        self.directory = Path(directory)

    @classmethod
    def from_env(cls) -> "FileStorage":
        """Build a storage instance from the RECIPEFIND_DATA_DIR setting."""
        return cls(StorageConfig.get_data_dir())

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{self.SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            path.unlink(missing_ok=True)


class PersistentStore:
    """Typed access to the stored user directory and current-user pointer."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def _read_json(self, key: str):
        try:
            raw = self.storage.get_item(key)
        except UnicodeDecodeError as e:
            logger.warning("Ignoring undecodable value under %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Ignoring unparsable value under %s: %s", key, e)
            return None

    def load_users(self) -> List[User]:
        """
        Load all registered users.

        Records that fail validation are skipped one at a time; the valid ones are
        still returned.

        Returns:
            List of User objects. Empty if nothing is stored or the stored content is
            not a JSON array.
        """
        data = self._read_json(USERS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a JSON array, got %s", USERS_KEY, type(data).__name__)
            return []

        users = []
        for index, item in enumerate(data):
            try:
                users.append(User.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid user record %d in %s: %s", index, USERS_KEY, e)
        return users

    def save_users(self, users: List[User]) -> None:
        """Overwrite the stored user directory with users."""
        payload = [user.to_storage() for user in users]
        self.storage.set_item(USERS_KEY, json.dumps(payload, ensure_ascii=False))

    def load_current_user(self) -> Optional[User]:
        """Load the current-user pointer, or None if absent or corrupt."""
        data = self._read_json(CURRENT_USER_KEY)
        if data is None:
            return None
        try:
            return User.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring %s: stored user failed validation: %s", CURRENT_USER_KEY, e)
            return None

    def save_current_user(self, user: Optional[User]) -> None:
        """Store user as the current user. None removes the pointer."""
        if user is None:
            self.storage.remove_item(CURRENT_USER_KEY)
            return
        self.storage.set_item(CURRENT_USER_KEY, json.dumps(user.to_storage(), ensure_ascii=False))

    def clear(self) -> None:
        """Wipe the user directory and the current-user pointer."""
        self.storage.remove_item(USERS_KEY)
        self.storage.remove_item(CURRENT_USER_KEY)
