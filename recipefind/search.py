"""
Search pipeline for the recipe catalog.

This module ties the catalog, sorting and session together:
- SearchParams parses the /search query parameters (q, cuisine, difficulty, dietary,
  type, favorites, saved, sort)
- SearchService.run() produces a SearchResult for one view: the favorites list, the
  saved list, a text search, or the empty "no search performed yet" state
- SearchService.view() applies the post-search difficulty filter and sort
- SearchService.open_recipe() resolves a recipe page and logs recipe_viewed

Search flow: caller -> SearchParams.from_query_params() -> SearchService.run()
-> search_recipes() -> SearchResult -> SearchService.view() -> rendered list

Executed, non-blank queries are recorded in the current user's search history
(through AuthService, the session's single writer) and logged as search_performed.
"""

import logging
import time
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

from .auth import AuthService
from .catalog import get_recipe_by_id, get_recipes_by_ids, search_recipes
from .events import log_recipe_viewed, log_search_performed
from .models import Recipe, SearchResult
from .session import Session
from .sorting import DIFFICULTY_ALL, SORT_RELEVANCE, filter_by_difficulty, sort_recipes

logger = logging.getLogger(__name__)

TITLE_DEFAULT = "Search Recipes"
TITLE_FAVORITES = "Your Favorite Recipes"
TITLE_SAVED = "Your Saved Recipes"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SearchParams(BaseModel):
    """Parsed /search query parameters."""
    q: str = ""
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    dietary: Optional[str] = None
    meal_type: Optional[str] = Field(None, description="The 'type' parameter: a category such as 'Dessert'")
    favorites: bool = False
    saved: bool = False
    sort: str = SORT_RELEVANCE

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "SearchParams":
        """
        Build SearchParams from a query-string mapping.

        Flags (favorites, saved) are true only for the literal value "true".
        Blank filter values are treated as absent.
        """
        return cls(
            q=(params.get("q") or "").strip(),
            cuisine=_clean(params.get("cuisine")),
            difficulty=_clean(params.get("difficulty")),
            dietary=_clean(params.get("dietary")),
            meal_type=_clean(params.get("type")),
            favorites=_flag(params.get("favorites")),
            saved=_flag(params.get("saved")),
            sort=_clean(params.get("sort")) or SORT_RELEVANCE,
        )

    def has_filters(self) -> bool:
        return bool(self.cuisine or self.difficulty or self.dietary or self.meal_type)


class SearchService:
    """
    Runs searches for one session.

    Args:
        session: Session whose current user owns the favorites/saved lists
        auth: AuthService used to record search history. When None, history is not
            recorded (anonymous/embedded use).
    """

    def __init__(self, session: Session, auth: Optional[AuthService] = None) -> None:
        self.session = session
        self.auth = auth

    def run(self, params: SearchParams, record_history: bool = True) -> SearchResult:
        """
        Produce the result set for params.

        Precedence: favorites view, then saved view (both require a logged-in user),
        then text/filter search. With no query and no filters the result is empty.
        """
        user = self.session.user

        if params.favorites and user is not None:
            recipes = get_recipes_by_ids(user.favorite_recipes)
            return self._result("", TITLE_FAVORITES, recipes, 0.0)

        if params.saved and user is not None:
            recipes = get_recipes_by_ids(user.saved_recipes)
            return self._result("", TITLE_SAVED, recipes, 0.0)

        if not params.q and not params.has_filters():
            return self._result("", TITLE_DEFAULT, [], 0.0)

        return self.search(params, record_history=record_history)

    def search(self, params: SearchParams, record_history: bool = True) -> SearchResult:
        """Run a text/filter search and record it in history and the event log."""
        start = time.perf_counter()
        recipes = search_recipes(
            params.q,
            cuisine=params.cuisine,
            difficulty=params.difficulty,
            dietary=params.dietary,
            meal_type=params.meal_type,
        )
        elapsed = time.perf_counter() - start

        if params.q and record_history and self.auth is not None:
            self.auth.add_to_search_history(params.q)

        user = self.session.user
        log_search_performed(
            user.id if user else None,
            params.q,
            {
                "cuisine": params.cuisine,
                "difficulty": params.difficulty,
                "dietary": params.dietary,
                "type": params.meal_type,
            },
            len(recipes),
        )

        title = f'Search Results for "{params.q}"' if params.q else TITLE_DEFAULT
        logger.debug("Search %r returned %d results in %.4fs", params.q, len(recipes), elapsed)
        return self._result(params.q, title, recipes, elapsed)

    def view(
        self,
        result: SearchResult,
        sort_by: Optional[str] = SORT_RELEVANCE,
        difficulty: Optional[str] = DIFFICULTY_ALL,
    ) -> List[Recipe]:
        """Apply the difficulty filter and the sort to a result set, in that order."""
        return sort_recipes(filter_by_difficulty(result.results, difficulty), sort_by)

    def open_recipe(self, recipe_id: str, source: Optional[str] = None) -> Optional[Recipe]:
        """
        Resolve the recipe behind a detail page and log a recipe_viewed event.

        Args:
            recipe_id: Catalog id from the /recipe/<id> route
            source: Where the click came from ("search", "favorites", "lucky", ...)

        Returns:
            The recipe, or None for an unknown id (nothing is logged)
        """
        recipe = get_recipe_by_id(recipe_id)
        if recipe is None:
            logger.debug("open_recipe: unknown recipe id %r", recipe_id)
            return None
        user = self.session.user
        log_recipe_viewed(user.id if user else None, recipe.id, source)
        return recipe

    @staticmethod
    def _result(query: str, title: str, recipes: List[Recipe], elapsed: float) -> SearchResult:
        return SearchResult(
            query=query,
            title=title,
            results=recipes,
            total_results=len(recipes),
            search_time=elapsed,
        )
