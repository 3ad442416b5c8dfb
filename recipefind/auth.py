"""
Simulated authentication and per-user preference operations.

AuthService is the single writer of the Session cell. Every operation follows the
same protocol: read the current user, build an updated copy, write it back both as
the current-user pointer and into the directory, then update the session.

The network-facing operations (register, login, reset_password) are coroutines that
sleep for a configurable latency before touching the store, to mimic a backend.
The preference mutators are synchronous.

Domain failures (email already registered, email not found) are returned as False.
Nothing here raises for those cases.

# NOTE: login accepts any password for a registered email. There is no password
    storage or verification in this system.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from .config import LatencyConfig
from .events import log_favorite_toggled
from .models import SEARCH_HISTORY_LIMIT, User
from .session import Session
from .storage import PersistentStore
from .users import create_user, find_user_by_email, find_user_by_id, update_user

logger = logging.getLogger(__name__)

# Fields that update_profile never overwrites
IMMUTABLE_FIELDS = {"id", "created_at", "createdAt"}


def push_search_history(history: List[str], query: str, limit: int = SEARCH_HISTORY_LIMIT) -> List[str]:
    """
    Return a new history with query moved to the front.

    Any existing equal entry is removed first, and the result is truncated to the
    limit most recent entries. Blank queries leave the history unchanged.
    """
    if not query.strip():
        return list(history)
    return [query, *[h for h in history if h != query]][:limit]


class AuthService:
    """
    Auth operations over a PersistentStore, writing the result into a Session.

    Args:
        store: Persistent store holding users and the current-user pointer
        session: Session cell to update after every operation
        auth_delay: Simulated latency for login/register (defaults to config)
        reset_delay: Simulated latency for reset_password (defaults to config)
    """

    def __init__(
        self,
        store: PersistentStore,
        session: Session,
        auth_delay: Optional[float] = None,
        reset_delay: Optional[float] = None,
    ) -> None:
        self.store = store
        self.session = session
        self.auth_delay = LatencyConfig.get_auth_delay() if auth_delay is None else auth_delay
        self.reset_delay = LatencyConfig.get_reset_delay() if reset_delay is None else reset_delay

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def restore(self) -> Optional[User]:
        """
        Load the stored current user into the session.

        A pointer that references no directory record is stale: it is removed from the
        store and the session stays logged out. Otherwise the directory record is used,
        since it is the latest copy.
        """
        pointer = self.store.load_current_user()
        if pointer is None:
            self.session._set_user(None)
            return None

        record = find_user_by_id(self.store, pointer.id)
        if record is None:
            logger.warning("Clearing stale current-user pointer for id=%s", pointer.id)
            self.store.save_current_user(None)
            self.session._set_user(None)
            return None

        self.session._set_user(record)
        return record

    async def register(self, name: str, email: str, password: str) -> bool:
        """
        Register a new user and log them in.

        Returns:
            True on success, False if the email is already registered (the directory is
            left unchanged)
        """
        await asyncio.sleep(self.auth_delay)

        if find_user_by_email(self.store, email) is not None:
            logger.info("Registration rejected: email already registered")
            return False

        user = create_user(self.store, name, email, password)
        self.store.save_current_user(user)
        self.session._set_user(user)
        logger.info("Registered and logged in user id=%s", user.id)
        return True

    async def login(self, email: str, password: str) -> bool:
        """
        Log in by email. The password is accepted but not verified.

        Returns:
            True if a user with this email exists, False otherwise
        """
        await asyncio.sleep(self.auth_delay)

        user = find_user_by_email(self.store, email)
        if user is None:
            logger.info("Login failed: email not found")
            return False

        self.store.save_current_user(user)
        self.session._set_user(user)
        logger.info("Logged in user id=%s", user.id)
        return True

    def logout(self) -> None:
        """Clear the current-user pointer. The user stays in the directory."""
        user = self.session.user
        self.store.save_current_user(None)
        self.session._set_user(None)
        if user is not None:
            logger.info("Logged out user id=%s", user.id)

    async def reset_password(self, email: str) -> bool:
        """
        Simulate sending password reset instructions.

        No password is changed. Returns True if the email is registered.
        """
        await asyncio.sleep(self.reset_delay)
        found = find_user_by_email(self.store, email) is not None
        logger.debug("Password reset requested, email %s", "found" if found else "not found")
        return found

    def delete_all_data(self) -> None:
        """Wipe the whole directory and the current-user pointer."""
        self.store.clear()
        self.session._set_user(None)
        logger.info("Deleted all stored users")

    # ------------------------------------------------------------------
    # Current-user mutations
    # ------------------------------------------------------------------

    def _apply(self, change: Callable[[User], Dict[str, Any]]) -> Optional[User]:
        """
        Merge the fields returned by change(user) into the current user and persist.

        Returns the updated user, or None when nobody is logged in.
        """
        user = self.session.user
        if user is None:
            return None

        updates = change(user)
        if not updates:
            return user

        data = user.model_dump()
        data.update(updates)
        updated = User.model_validate(data)

        # The session copy is updated even when the directory lost the record, so the
        # client keeps working until the next restore() clears the stale pointer.
        if not update_user(self.store, updated):
            self.store.save_current_user(updated)
        self.session._set_user(updated)
        return updated

    def update_profile(self, **fields: Any) -> Optional[User]:
        """
        Merge fields (snake_case or camelCase names) into the current user.

        id and created_at are immutable and silently ignored. Pass
        profile_picture=None to remove the picture.

        Changing the email to one already registered by another user is rejected:
        nothing is applied and the unchanged user is returned.
        """
        aliases = {
            "profilePicture": "profile_picture",
            "searchHistory": "search_history",
            "favoriteRecipes": "favorite_recipes",
            "savedRecipes": "saved_recipes",
        }
        updates = {
            aliases.get(key, key): value
            for key, value in fields.items()
            if key not in IMMUTABLE_FIELDS
        }
        unknown = set(updates) - set(User.model_fields)
        if unknown:
            logger.debug("update_profile: ignoring unknown fields %s", sorted(unknown))
            for key in unknown:
                updates.pop(key)

        # Collections keep set semantics, first occurrence wins
        for key in ("favorite_recipes", "saved_recipes"):
            if updates.get(key) is not None:
                updates[key] = list(dict.fromkeys(updates[key]))
        if updates.get("search_history") is not None:
            updates["search_history"] = list(dict.fromkeys(updates["search_history"]))[:SEARCH_HISTORY_LIMIT]

        current = self.session.user
        new_email = updates.get("email")
        if current is not None and new_email is not None and new_email != current.email:
            owner = find_user_by_email(self.store, new_email)
            if owner is not None and owner.id != current.id:
                logger.info("Profile update rejected: email already registered")
                return current

        return self._apply(lambda user: updates)

    def add_to_favorites(self, recipe_id: str) -> Optional[User]:
        """Add recipe_id to favorites. No-op if already present."""
        def change(user: User) -> Dict[str, Any]:
            if recipe_id in user.favorite_recipes:
                return {}
            log_favorite_toggled(user.id, recipe_id, "favorites", added=True)
            return {"favorite_recipes": [*user.favorite_recipes, recipe_id]}

        return self._apply(change)

    def remove_from_favorites(self, recipe_id: str) -> Optional[User]:
        """Remove recipe_id from favorites. No-op if absent."""
        def change(user: User) -> Dict[str, Any]:
            if recipe_id not in user.favorite_recipes:
                return {}
            log_favorite_toggled(user.id, recipe_id, "favorites", added=False)
            return {"favorite_recipes": [r for r in user.favorite_recipes if r != recipe_id]}

        return self._apply(change)

    def add_to_saved(self, recipe_id: str) -> Optional[User]:
        """Add recipe_id to saved recipes. No-op if already present."""
        def change(user: User) -> Dict[str, Any]:
            if recipe_id in user.saved_recipes:
                return {}
            log_favorite_toggled(user.id, recipe_id, "saved", added=True)
            return {"saved_recipes": [*user.saved_recipes, recipe_id]}

        return self._apply(change)

    def remove_from_saved(self, recipe_id: str) -> Optional[User]:
        """Remove recipe_id from saved recipes. No-op if absent."""
        def change(user: User) -> Dict[str, Any]:
            if recipe_id not in user.saved_recipes:
                return {}
            log_favorite_toggled(user.id, recipe_id, "saved", added=False)
            return {"saved_recipes": [r for r in user.saved_recipes if r != recipe_id]}

        return self._apply(change)

    def toggle_favorite(self, recipe_id: str) -> Optional[User]:
        """Add or remove recipe_id from favorites depending on its current state."""
        if self.session.is_favorite(recipe_id):
            return self.remove_from_favorites(recipe_id)
        return self.add_to_favorites(recipe_id)

    def toggle_saved(self, recipe_id: str) -> Optional[User]:
        """Add or remove recipe_id from saved recipes depending on its current state."""
        if self.session.is_saved(recipe_id):
            return self.remove_from_saved(recipe_id)
        return self.add_to_saved(recipe_id)

    def add_to_search_history(self, query: str) -> Optional[User]:
        """Record query at the front of the history. Blank queries are ignored."""
        if not query.strip():
            return self.session.user

        def change(user: User) -> Dict[str, Any]:
            history = push_search_history(user.search_history, query)
            if history == user.search_history:
                return {}
            return {"search_history": history}

        return self._apply(change)

    def clear_search_history(self) -> Optional[User]:
        """Empty the current user's search history."""
        return self._apply(lambda user: {"search_history": []} if user.search_history else {})
