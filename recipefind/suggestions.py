"""
Typeahead suggestions for the search box.

Two layers:
- get_search_suggestions(): the synchronous generator. Titles, tags and cuisines that
  contain the query (case-insensitive), de-duplicated in first-seen order, capped.
- SuggestionEngine: the interactive state machine behind a search box. It decides
  when to show local suggestions, when to issue a debounced asynchronous fetch, and
  handles keyboard navigation and selection.

Query-length policy:
- Empty input: the user's recent searches (up to RECENT_HISTORY_LIMIT) are offered.
- 1 to min_fetch_length-1 characters: local suggestions are computed synchronously
  and shown immediately. No fetch is issued.
- min_fetch_length characters or more: a fetch is scheduled after a quiet interval
  (debounce). The suggestions shown so far stay visible until it resolves.

Ordering guarantee: every keystroke, clear() and selection bumps a generation counter
and cancels the pending fetch task. A fetch applies its result only if its generation
is still the latest one, so a superseded response can never overwrite newer state.

# NOTE: on_input() must be called from a running event loop once the query is long
    enough to fetch, because it schedules an asyncio task.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .auth import AuthService
from .catalog import get_all_recipes
from .config import SuggestionConfig
from .session import Session

logger = logging.getLogger(__name__)

# Number of recent searches offered for an empty search box
RECENT_HISTORY_LIMIT = 5

SOURCE_HISTORY = "history"
SOURCE_LOCAL = "local"
SOURCE_REMOTE = "remote"

SuggestionFetcher = Callable[[str], Awaitable[List[str]]]


def get_search_suggestions(query: str, limit: Optional[int] = None) -> List[str]:
    """
    Build suggestion strings for a partial query.

    For each recipe in catalog order: the title if it matches, then each matching
    tag, then the cuisine if it matches. Duplicates are dropped, keeping the first
    occurrence.

    Args:
        query: Partial query text
        limit: Maximum number of suggestions (default from config, 8)

    Returns:
        Up to limit suggestion strings. [] for a blank query.
    """
    if limit is None:
        limit = SuggestionConfig.get_limit()

    q = query.strip().lower()
    if not q:
        return []

    suggestions: dict = {}
    for recipe in get_all_recipes():
        if q in recipe.title.lower():
            suggestions.setdefault(recipe.title, None)
        for tag in recipe.tags:
            if q in tag.lower():
                suggestions.setdefault(tag, None)
        if q in recipe.cuisine.lower():
            suggestions.setdefault(recipe.cuisine, None)

    return list(suggestions)[:limit]


async def fetch_suggestions(query: str) -> List[str]:
    """Default fetcher: the catalog-backed generator behind an awaitable boundary."""
    await asyncio.sleep(0)
    return get_search_suggestions(query)


class SuggestionEngine:
    """
    Interactive suggestion state for one search box.

    Attributes (read by the caller to render the dropdown):
        typed: The text the user actually typed
        text: The text currently displayed in the box (a highlighted suggestion while
            navigating with the keyboard)
        suggestions: The list currently offered
        source: Where suggestions came from ("history", "local" or "remote")
        visible: Whether the dropdown is open
        highlighted: Index of the highlighted suggestion, -1 for none
        loading: True while a fetch is pending

    Args:
        session: Session providing the search history for an empty box
        auth: AuthService used to record committed queries (optional)
        fetch: Coroutine function returning suggestions for a query
        debounce: Quiet interval in seconds before a fetch is issued
        min_fetch_length: Minimum stripped query length that triggers a fetch
    """

    def __init__(
        self,
        session: Session,
        auth: Optional[AuthService] = None,
        fetch: Optional[SuggestionFetcher] = None,
        debounce: Optional[float] = None,
        min_fetch_length: Optional[int] = None,
    ) -> None:
        self.session = session
        self.auth = auth
        self.fetch = fetch or fetch_suggestions
        self.debounce = SuggestionConfig.get_debounce() if debounce is None else debounce
        self.min_fetch_length = (
            SuggestionConfig.get_min_fetch_length() if min_fetch_length is None else min_fetch_length
        )

        self.typed = ""
        self.text = ""
        self.suggestions: List[str] = []
        self.source: Optional[str] = None
        self.visible = False
        self.highlighted = -1
        self.loading = False

        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        """Number of the most recent request (bumped on every input change)."""
        return self._generation

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_input(self, value: str) -> None:
        """Handle a keystroke: the box now contains value."""
        self._supersede()
        self.typed = value
        self.text = value
        self.highlighted = -1

        query = value.strip()
        if not query:
            self._show_history()
            return

        if len(query) < self.min_fetch_length:
            self.suggestions = get_search_suggestions(query)
            self.source = SOURCE_LOCAL
            self.visible = True
            return

        self._task = asyncio.get_running_loop().create_task(
            self._debounced_fetch(query, self._generation)
        )
        self.loading = True

    def focus(self) -> None:
        """Reopen the dropdown when the box gains focus."""
        if not self.typed.strip():
            self._show_history()
        else:
            self.visible = bool(self.suggestions)

    def close(self) -> None:
        """Hide the dropdown (click outside). Pending fetches keep running."""
        self.visible = False
        self.highlighted = -1
        self.text = self.typed

    def clear(self) -> None:
        """Empty the box and abort any in-flight fetch."""
        self._supersede()
        self.typed = ""
        self.text = ""
        self.suggestions = []
        self.source = None
        self.visible = False
        self.highlighted = -1

    async def wait(self) -> None:
        """Wait for the pending fetch, if any, to finish or be cancelled."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    # ------------------------------------------------------------------
    # Keyboard navigation
    # ------------------------------------------------------------------

    def move_down(self) -> None:
        """Highlight the next suggestion (ArrowDown). Never triggers a fetch."""
        if not self.visible or not self.suggestions:
            return
        self.highlighted = min(self.highlighted + 1, len(self.suggestions) - 1)
        self.text = self.suggestions[self.highlighted]

    def move_up(self) -> None:
        """
        Highlight the previous suggestion (ArrowUp).

        Moving up from the first suggestion clears the highlight and restores the
        typed text. Never triggers a fetch.
        """
        if self.highlighted < 0:
            return
        self.highlighted -= 1
        if self.highlighted < 0:
            self.text = self.typed
        else:
            self.text = self.suggestions[self.highlighted]

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, index: int) -> Optional[str]:
        """Commit the suggestion at index (mouse click)."""
        if not 0 <= index < len(self.suggestions):
            return None
        return self._commit(self.suggestions[index])

    def commit(self) -> Optional[str]:
        """
        Commit the highlighted suggestion, or the typed text when nothing is
        highlighted (Enter or Tab).

        Returns:
            The query to execute, or None if it is blank
        """
        if 0 <= self.highlighted < len(self.suggestions):
            return self._commit(self.suggestions[self.highlighted])
        return self._commit(self.typed)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, value: str) -> Optional[str]:
        self._supersede()
        self.visible = False
        self.highlighted = -1

        query = value.strip()
        if not query:
            self.text = self.typed
            return None

        self.typed = query
        self.text = query
        if self.auth is not None:
            self.auth.add_to_search_history(query)
        logger.debug("Committed search query %r", query)
        return query

    def _show_history(self) -> None:
        history = self.session.search_history[:RECENT_HISTORY_LIMIT]
        self.suggestions = history
        self.source = SOURCE_HISTORY
        self.visible = bool(history)

    def _supersede(self) -> None:
        """Start a new generation and abort the pending fetch."""
        self._generation += 1
        self.loading = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _debounced_fetch(self, query: str, generation: int) -> None:
        try:
            await asyncio.sleep(self.debounce)
            results = await self.fetch(query)
        except asyncio.CancelledError:
            logger.debug("Suggestion fetch for %r cancelled (generation %d)", query, generation)
            raise
        except Exception as e:
            if generation == self._generation:
                logger.warning("Suggestion fetch for %r failed: %s", query, e)
                self.suggestions = []
                self.highlighted = -1
                self.text = self.typed
                self.loading = False
            return

        if generation != self._generation:
            logger.debug("Discarding stale suggestions for %r (generation %d)", query, generation)
            return

        self.suggestions = list(results)
        self.source = SOURCE_REMOTE
        self.visible = True
        self.highlighted = -1
        self.text = self.typed
        self.loading = False
        self._task = None
