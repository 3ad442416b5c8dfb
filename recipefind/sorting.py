"""
Sorting and filtering utilities for recipe result lists.

Key functions:
- sort_recipes: Sorts recipes by relevance, rating, cook time or calories
- filter_by_difficulty: Narrows recipes to one difficulty level

Both return new lists; the input is never mutated. Sorting is always stable, so recipes
with equal sort values keep their relative input order.
"""

from typing import List, Optional

from .models import ALLOWED_DIFFICULTIES, Recipe

SORT_RELEVANCE = "relevance"
SORT_RATING = "rating"
SORT_COOK_TIME = "cookTime"
SORT_CALORIES = "calories"

ALLOWED_SORTS = [
    SORT_RELEVANCE,
    SORT_RATING,
    SORT_COOK_TIME,
    SORT_CALORIES,
]

DIFFICULTY_ALL = "all"


def normalize_sort(sort_by: Optional[str]) -> str:
    """
    Map a sort value (including legacy aliases) to a canonical sort mode.

    Unknown or empty values fall back to relevance.
    """
    if not sort_by:
        return SORT_RELEVANCE

    sort_mode_map = {
        "relevance": SORT_RELEVANCE,
        "rating": SORT_RATING,
        "cooktime": SORT_COOK_TIME,
        "cook_time": SORT_COOK_TIME,
        "time": SORT_COOK_TIME,
        "calories": SORT_CALORIES,
    }
    return sort_mode_map.get(sort_by.strip().lower(), SORT_RELEVANCE)


def sort_recipes(recipes: List[Recipe], sort_by: Optional[str] = None) -> List[Recipe]:
    """
    Sort recipes by the specified criterion.

    Supported sort modes:
    - "relevance": No sorting (preserves input order, i.e. catalog order)
    - "rating": Highest rating first
    - "cookTime" (alias "time"): Shortest cook time first
    - "calories": Fewest calories first

    Args:
        recipes: Recipes to sort
        sort_by: Sort mode (see above). None or unknown values mean relevance.

    Returns:
        New sorted list. Ties keep their relative input order.

    Examples:
        >>> from recipefind.catalog import get_all_recipes
        >>> [r.id for r in sort_recipes(get_all_recipes(), "rating")][:2]
        ['2', '7']
    """
    mode = normalize_sort(sort_by)

    if mode == SORT_RATING:
        # sorted() is stable with reverse=True as well
        return sorted(recipes, key=lambda r: r.rating, reverse=True)
    if mode == SORT_COOK_TIME:
        return sorted(recipes, key=lambda r: r.cook_time)
    if mode == SORT_CALORIES:
        return sorted(recipes, key=lambda r: r.calories)
    return list(recipes)


def filter_by_difficulty(recipes: List[Recipe], difficulty: Optional[str] = DIFFICULTY_ALL) -> List[Recipe]:
    """
    Keep only recipes with the given difficulty.

    Args:
        recipes: Recipes to filter
        difficulty: "all" (or None/empty), "Easy", "Medium" or "Hard", case-insensitive.
            Unknown values are treated as "all".

    Returns:
        New filtered list in input order
    """
    if not difficulty or difficulty.strip().lower() == DIFFICULTY_ALL:
        return list(recipes)

    wanted = difficulty.strip().capitalize()
    if wanted not in ALLOWED_DIFFICULTIES:
        return list(recipes)
    return [recipe for recipe in recipes if recipe.difficulty == wanted]
