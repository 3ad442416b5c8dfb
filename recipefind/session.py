"""
Session state: the single "current user or absent" cell.

A Session is created once per browser-tab equivalent and injected into the services
that need it. AuthService is the only writer; everything else (search, suggestions,
reviews, profile views) reads it. Observers registered with subscribe() are called
synchronously after every write, so dependent views can re-read the cell.
To pick up changes made by another client sharing the store, call
AuthService.restore(), which also drops a pointer whose user was deleted.
"""

import logging
from typing import Callable, List, Optional

from .models import User

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[User]], None]


class Session:
    """Holds the logged-in user for one client."""

    def __init__(self) -> None:
        self._user: Optional[User] = None
        self._listeners: List[SessionListener] = []

    @property
    def user(self) -> Optional[User]:
        """The current user, or None when logged out."""
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def search_history(self) -> List[str]:
        """Current user's search history, most recent first ([] when logged out)."""
        return list(self._user.search_history) if self._user else []

    def is_favorite(self, recipe_id: str) -> bool:
        return self._user is not None and recipe_id in self._user.favorite_recipes

    def is_saved(self, recipe_id: str) -> bool:
        return self._user is not None and recipe_id in self._user.saved_recipes

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback invoked with the new user after every write.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_user(self, user: Optional[User]) -> None:
        # Only AuthService calls this.
        self._user = user
        for listener in list(self._listeners):
            listener(user)
