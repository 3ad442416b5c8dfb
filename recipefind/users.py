"""
User directory operations layered on the PersistentStore.

Every function is a whole-list read-modify-write: the directory is loaded, changed
in memory and written back in full. There is no field-level locking.
"""

import logging
import time
from typing import List, Optional

from .models import User
from .storage import PersistentStore

logger = logging.getLogger(__name__)


def _new_user_id(existing: List[User]) -> str:
    """
    Generate an id from the current time in milliseconds.

    If the timestamp is already taken (two registrations in the same millisecond),
    it is bumped until it is unique within the directory.
    """
    taken = {user.id for user in existing}
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def create_user(store: PersistentStore, name: str, email: str, password: str) -> User:
    """
    Create a user with empty collections and append it to the directory.

    Args:
        store: Persistent store holding the directory
        name: Display name
        email: Login identifier
        password: Accepted but not stored or verified

    Returns:
        The newly created User

    Note:
        Callers are responsible for checking the email is not taken
        (see AuthService.register).
    """
    users = store.load_users()
    user = User(id=_new_user_id(users), email=email, name=name)
    users.append(user)
    store.save_users(users)
    logger.debug("Created user id=%s", user.id)
    return user


def find_user_by_email(store: PersistentStore, email: str) -> Optional[User]:
    """Return the user whose email matches exactly, or None."""
    return next((user for user in store.load_users() if user.email == email), None)


def find_user_by_id(store: PersistentStore, user_id: str) -> Optional[User]:
    """Return the user with the given id, or None."""
    return next((user for user in store.load_users() if user.id == user_id), None)


def update_user(store: PersistentStore, updated: User) -> bool:
    """
    Replace the directory record with the same id and store it as the current user.

    Returns:
        True if the record was found and written, False otherwise (nothing is written)
    """
    users = store.load_users()
    for index, user in enumerate(users):
        if user.id == updated.id:
            users[index] = updated
            store.save_users(users)
            store.save_current_user(updated)
            return True
    logger.debug("update_user: id=%s not in directory, skipping", updated.id)
    return False
