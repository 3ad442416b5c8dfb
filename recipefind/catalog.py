"""
Recipe Catalog Module.

This module contains the static recipe collection and the lookup/search functions
over it. The catalog is read-only: there are no create, update or delete operations.

Search semantics (search_recipes):
- The query is matched case-insensitively as a substring against title, description,
  cuisine, category, every tag and every ingredient. A recipe matches if ANY field
  matches.
- Optional filters (cuisine, difficulty, dietary tag, meal type) are ANDed on top.
- A blank query with no filters returns [] ("no search performed yet"), not the whole
  catalog.
- Results keep catalog order, which is what "relevance" means here.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional

from .models import Recipe

logger = logging.getLogger(__name__)

_IMAGE = "https://images.pexels.com/photos/{}/pexels-photo-{}.jpeg?auto=compress&cs=tinysrgb&w=800"


def _image(photo_id: int) -> str:
    return _IMAGE.format(photo_id, photo_id)


_RECIPES = [
    Recipe(
        id="1",
        title="Classic Margherita Pizza",
        description="A simple yet delicious pizza with fresh tomatoes, mozzarella, and basil",
        image=_image(315755),
        cook_time=25,
        servings=4,
        difficulty="Medium",
        ingredients=["Pizza dough", "Tomato sauce", "Fresh mozzarella", "Fresh basil", "Olive oil"],
        instructions=["Preheat oven to 475°F", "Roll out dough", "Add sauce and cheese", "Bake for 12-15 minutes"],
        cuisine="Italian",
        category="Main Course",
        calories=285,
        rating=4.8,
        tags=["vegetarian", "italian", "pizza", "cheese"],
    ),
    Recipe(
        id="2",
        title="Chicken Tikka Masala",
        description="Creamy and flavorful Indian curry with tender chicken pieces",
        image=_image(2474658),
        cook_time=45,
        servings=6,
        difficulty="Medium",
        ingredients=["Chicken breast", "Yogurt", "Tomato sauce", "Heavy cream", "Spices"],
        instructions=["Marinate chicken", "Cook chicken", "Prepare sauce", "Combine and simmer"],
        cuisine="Indian",
        category="Main Course",
        calories=320,
        rating=4.9,
        tags=["spicy", "indian", "chicken", "curry"],
    ),
    Recipe(
        id="3",
        title="Caesar Salad",
        description="Crisp romaine lettuce with creamy Caesar dressing and parmesan",
        image=_image(1639562),
        cook_time=15,
        servings=4,
        difficulty="Easy",
        ingredients=["Romaine lettuce", "Parmesan cheese", "Croutons", "Caesar dressing"],
        instructions=["Wash and chop lettuce", "Make dressing", "Toss ingredients", "Serve immediately"],
        cuisine="American",
        category="Salad",
        calories=180,
        rating=4.6,
        tags=["salad", "vegetarian", "quick", "healthy"],
    ),
    Recipe(
        id="4",
        title="Chocolate Chip Cookies",
        description="Soft and chewy homemade cookies with chocolate chips",
        image=_image(230325),
        cook_time=20,
        servings=24,
        difficulty="Easy",
        ingredients=["Flour", "Butter", "Brown sugar", "Chocolate chips", "Eggs"],
        instructions=["Mix dry ingredients", "Cream butter and sugar", "Combine all", "Bake for 10-12 minutes"],
        cuisine="American",
        category="Dessert",
        calories=150,
        rating=4.7,
        tags=["dessert", "cookies", "chocolate", "sweet"],
    ),
    Recipe(
        id="5",
        title="Beef Tacos",
        description="Seasoned ground beef tacos with fresh toppings",
        image=_image(461198),
        cook_time=30,
        servings=4,
        difficulty="Easy",
        ingredients=["Ground beef", "Taco shells", "Lettuce", "Tomatoes", "Cheese", "Sour cream"],
        instructions=["Cook beef with seasonings", "Warm taco shells", "Prepare toppings", "Assemble tacos"],
        cuisine="Mexican",
        category="Main Course",
        calories=350,
        rating=4.5,
        tags=["mexican", "beef", "tacos", "quick"],
    ),
    Recipe(
        id="6",
        title="Greek Salad",
        description="Fresh Mediterranean salad with feta cheese and olives",
        image=_image(1059905),
        cook_time=15,
        servings=4,
        difficulty="Easy",
        ingredients=["Cucumber", "Tomatoes", "Red onion", "Feta cheese", "Olives", "Olive oil"],
        instructions=["Chop vegetables", "Make dressing", "Combine ingredients", "Add feta and olives"],
        cuisine="Greek",
        category="Salad",
        calories=210,
        rating=4.4,
        tags=["mediterranean", "healthy", "vegetarian", "fresh"],
    ),
    Recipe(
        id="7",
        title="Spaghetti Carbonara",
        description="Classic Italian pasta with eggs, cheese, and pancetta",
        image=_image(4518842),
        cook_time=25,
        servings=4,
        difficulty="Medium",
        ingredients=["Spaghetti", "Eggs", "Parmesan cheese", "Pancetta", "Black pepper"],
        instructions=["Cook pasta", "Fry pancetta", "Mix eggs and cheese", "Combine while hot"],
        cuisine="Italian",
        category="Main Course",
        calories=420,
        rating=4.9,
        tags=["italian", "pasta", "creamy", "traditional"],
    ),
    Recipe(
        id="8",
        title="Thai Green Curry",
        description="Aromatic Thai curry with coconut milk and vegetables",
        image=_image(2097090),
        cook_time=35,
        servings=4,
        difficulty="Medium",
        ingredients=["Green curry paste", "Coconut milk", "Vegetables", "Thai basil", "Rice"],
        instructions=["Heat curry paste", "Add coconut milk", "Add vegetables", "Simmer and serve"],
        cuisine="Thai",
        category="Main Course",
        calories=280,
        rating=4.6,
        tags=["thai", "curry", "vegetarian", "spicy"],
    ),
]

_RECIPES_BY_ID: Dict[str, Recipe] = {recipe.id: recipe for recipe in _RECIPES}


def get_all_recipes() -> List[Recipe]:
    """Return the full catalog in catalog order (a copy of the list)."""
    return list(_RECIPES)


def get_recipe_by_id(recipe_id: str) -> Optional[Recipe]:
    """Return the recipe with this id, or None if it is not in the catalog."""
    return _RECIPES_BY_ID.get(recipe_id)


def get_recipes_by_ids(recipe_ids: Iterable[str]) -> List[Recipe]:
    """
    Resolve a list of ids, keeping their order.

    Ids with no catalog entry (stale favorites, for example) are silently skipped.
    """
    return [recipe for recipe in (get_recipe_by_id(rid) for rid in recipe_ids) if recipe is not None]


def matches_query(recipe: Recipe, query: str) -> bool:
    """True if query is a case-insensitive substring of any searchable field."""
    q = query.lower()
    return (
        q in recipe.title.lower()
        or q in recipe.description.lower()
        or q in recipe.cuisine.lower()
        or q in recipe.category.lower()
        or any(q in tag.lower() for tag in recipe.tags)
        or any(q in ingredient.lower() for ingredient in recipe.ingredients)
    )


def search_recipes(
    query: str,
    cuisine: Optional[str] = None,
    difficulty: Optional[str] = None,
    dietary: Optional[str] = None,
    meal_type: Optional[str] = None,
) -> List[Recipe]:
    """
    Search the catalog.

    Args:
        query: Free text, matched case-insensitively against every searchable field
        cuisine: Optional exact cuisine match (case-insensitive), e.g. "italian"
        difficulty: Optional exact difficulty match (case-insensitive), e.g. "easy"
        dietary: Optional dietary tag that must be present (case-insensitive), e.g. "vegetarian"
        meal_type: Optional exact category match (case-insensitive), e.g. "Dessert"

    Returns:
        Matching recipes in catalog order. [] for a blank query with no filters.
    """
    text = (query or "").strip()
    cuisine = (cuisine or "").strip().lower()
    difficulty = (difficulty or "").strip().lower()
    dietary = (dietary or "").strip().lower()
    meal_type = (meal_type or "").strip().lower()

    if not text and not (cuisine or difficulty or dietary or meal_type):
        return []

    results = []
    for recipe in _RECIPES:
        if text and not matches_query(recipe, text):
            continue
        if cuisine and recipe.cuisine.lower() != cuisine:
            continue
        if difficulty and recipe.difficulty.lower() != difficulty:
            continue
        if dietary and dietary not in (tag.lower() for tag in recipe.tags):
            continue
        if meal_type and recipe.category.lower() != meal_type:
            continue
        results.append(recipe)

    logger.debug("search_recipes(%r) -> %d results", text, len(results))
    return results


def featured_recipes(limit: int = 6) -> List[Recipe]:
    """First recipes of the catalog, shown on the home page."""
    return _RECIPES[:limit]


def popular_recipes(min_rating: float = 4.7, limit: int = 4) -> List[Recipe]:
    """Recipes rated at least min_rating, in catalog order."""
    return [recipe for recipe in _RECIPES if recipe.rating >= min_rating][:limit]


def random_recipe(rng: Optional[random.Random] = None) -> Recipe:
    """Pick a recipe at random ("I'm feeling lucky")."""
    return (rng or random).choice(_RECIPES)


def list_cuisines() -> List[str]:
    """Distinct cuisines in first-seen catalog order."""
    return list(dict.fromkeys(recipe.cuisine for recipe in _RECIPES))


def list_categories() -> List[str]:
    """Distinct categories (meal types) in first-seen catalog order."""
    return list(dict.fromkeys(recipe.category for recipe in _RECIPES))
