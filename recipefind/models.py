"""
Data models for the RecipeFind core.

This module defines the canonical schemas used throughout the package:
- User: a registered account plus its per-user collections (favorites, saved, history)
- Recipe: read-only catalog entry
- Review: ephemeral per recipe-page review
- SearchResult: the outcome of one run of the search pipeline

# NOTE: Stored JSON uses camelCase keys (profilePicture, createdAt, searchHistory,
    favoriteRecipes, savedRecipes, cookTime). Python code uses snake_case attributes;
    pydantic aliases map between the two. Always dump with by_alias=True when the
    result is written to storage.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DIFFICULTY_EASY = "Easy"
DIFFICULTY_MEDIUM = "Medium"
DIFFICULTY_HARD = "Hard"

ALLOWED_DIFFICULTIES = [
    DIFFICULTY_EASY,
    DIFFICULTY_MEDIUM,
    DIFFICULTY_HARD,
]

# Maximum number of entries kept in a user's search history
SEARCH_HISTORY_LIMIT = 10


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class User(BaseModel):
    """
    Registered user record as stored in the directory.

    id and created_at are assigned once at creation. search_history is kept
    most-recent-first and capped at SEARCH_HISTORY_LIMIT entries. favorite_recipes and
    saved_recipes hold recipe ids without duplicates.
    """
    id: str = Field(..., description="Opaque unique identifier")
    email: str = Field(..., description="Login identifier, unique within the directory")
    name: str = Field(..., description="Display name")
    profile_picture: Optional[str] = Field(None, alias="profilePicture", description="Profile picture as a data URI")
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt", description="Creation timestamp (ISO-8601)")
    search_history: List[str] = Field(default_factory=list, alias="searchHistory")
    favorite_recipes: List[str] = Field(default_factory=list, alias="favoriteRecipes")
    saved_recipes: List[str] = Field(default_factory=list, alias="savedRecipes")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_storage(self) -> dict:
        """Serialize to the stored JSON shape (camelCase, absent picture omitted)."""
        data = self.model_dump(by_alias=True)
        if data.get("profilePicture") is None:
            data.pop("profilePicture", None)
        return data


class Recipe(BaseModel):
    """Catalog recipe. Static for the process lifetime."""
    id: str
    title: str
    description: str
    image: str = Field(..., description="Image URL")
    cook_time: int = Field(..., ge=0, alias="cookTime", description="Cook time in minutes")
    servings: int = Field(..., ge=1)
    difficulty: Literal["Easy", "Medium", "Hard"]
    ingredients: List[str]
    instructions: List[str]
    cuisine: str
    category: str
    calories: int = Field(..., ge=0)
    rating: float = Field(..., ge=0, le=5)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Review(BaseModel):
    """A review left on a recipe page. Lives only as long as the page's ReviewBoard."""
    id: str
    user_id: str = Field(..., alias="userId")
    user_name: str = Field(..., alias="userName")
    user_avatar: Optional[str] = Field(None, alias="userAvatar")
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: str = Field(..., description="Review date (YYYY-MM-DD)")
    helpful_count: int = Field(0, ge=0, alias="helpfulCount")

    model_config = ConfigDict(populate_by_name=True)


class SearchResult(BaseModel):
    """
    Outcome of one search pipeline run.

    Attributes:
        query: The executed query ("" for favorites/saved views or when no search ran)
        title: Page heading describing the view
        results: Matching recipes in relevance (catalog) order
        total_results: Number of results
        search_time: Time spent searching, in seconds
        timestamp: When the search ran (ISO-8601)
    """
    query: str = ""
    title: str = "Search Recipes"
    results: List[Recipe] = Field(default_factory=list)
    total_results: int = Field(0, ge=0, alias="totalResults")
    search_time: float = Field(0.0, ge=0, alias="searchTime")
    timestamp: str = Field(default_factory=utc_now_iso)

    model_config = ConfigDict(populate_by_name=True)
