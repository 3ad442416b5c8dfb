"""
RecipeFind core: recipe search, suggestions and local user state.

Typical wiring for one client:

    store = PersistentStore(FileStorage.from_env())
    session = Session()
    auth = AuthService(store, session)
    auth.restore()
    search = SearchService(session, auth)
    suggestions = SuggestionEngine(session, auth)
"""

from .auth import AuthService
from .models import Recipe, Review, SearchResult, User
from .search import SearchParams, SearchService
from .session import Session
from .storage import FileStorage, MemoryStorage, PersistentStore
from .suggestions import SuggestionEngine, get_search_suggestions

__all__ = [
    "AuthService",
    "FileStorage",
    "MemoryStorage",
    "PersistentStore",
    "Recipe",
    "Review",
    "SearchParams",
    "SearchResult",
    "SearchService",
    "Session",
    "SuggestionEngine",
    "User",
    "get_search_suggestions",
]
