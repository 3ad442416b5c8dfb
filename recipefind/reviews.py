"""
Review board for a recipe page.

Reviews are ephemeral: a ReviewBoard lives as long as the recipe page that created it
and is never persisted. New boards are seeded with sample reviews so the page never
starts empty.

submit_review() simulates a backend round trip (configurable latency) and returns None
without adding anything when the submission is invalid: nobody logged in, a rating
outside 1-5, or a blank comment.
"""

import asyncio
import logging
import time
from datetime import date
from typing import List, Optional

from .config import LatencyConfig
from .models import Review
from .session import Session

logger = logging.getLogger(__name__)

_SAMPLE_REVIEWS = [
    {
        "id": "1",
        "user_id": "user1",
        "user_name": "Sarah Johnson",
        "rating": 5,
        "comment": "Absolutely delicious! My family loved it. The instructions were clear and easy to follow.",
        "date": "2024-01-15",
        "helpful_count": 12,
    },
    {
        "id": "2",
        "user_id": "user2",
        "user_name": "Mike Chen",
        "rating": 4,
        "comment": "Great recipe! I made a few modifications and it turned out amazing. Will definitely make again.",
        "date": "2024-01-10",
        "helpful_count": 8,
    },
    {
        "id": "3",
        "user_id": "user3",
        "user_name": "Emma Davis",
        "rating": 5,
        "comment": "Perfect for a weeknight dinner. Quick, easy, and so flavorful!",
        "date": "2024-01-08",
        "helpful_count": 15,
    },
]


def sample_reviews() -> List[Review]:
    """Fresh copies of the sample reviews, newest first."""
    return [Review(**data) for data in _SAMPLE_REVIEWS]


class ReviewBoard:
    """
    Reviews for one recipe page, newest first.

    Args:
        recipe_id: Recipe the reviews belong to
        session: Session providing the reviewer
        reviews: Initial reviews (defaults to the sample reviews)
        delay: Simulated submission latency in seconds (defaults to config)
    """

    def __init__(
        self,
        recipe_id: str,
        session: Session,
        reviews: Optional[List[Review]] = None,
        delay: Optional[float] = None,
    ) -> None:
        self.recipe_id = recipe_id
        self.session = session
        self.reviews: List[Review] = sample_reviews() if reviews is None else list(reviews)
        self.delay = LatencyConfig.get_review_delay() if delay is None else delay
        self._helpful_marked: set = set()

    @property
    def count(self) -> int:
        return len(self.reviews)

    def average_rating(self) -> float:
        """Mean rating of all reviews, 0.0 when there are none."""
        if not self.reviews:
            return 0.0
        return sum(review.rating for review in self.reviews) / len(self.reviews)

    def rating_distribution(self) -> dict:
        """Number of reviews per star value, {5: n, 4: n, ..., 1: n}."""
        distribution = {stars: 0 for stars in range(5, 0, -1)}
        for review in self.reviews:
            distribution[review.rating] += 1
        return distribution

    async def submit_review(self, rating: int, comment: str) -> Optional[Review]:
        """
        Add a review by the current user at the top of the board.

        Returns:
            The new Review, or None if the submission was rejected
        """
        user = self.session.user
        if user is None:
            logger.debug("Review rejected: not logged in")
            return None
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            logger.debug("Review rejected: rating %r out of range", rating)
            return None
        if not comment.strip():
            logger.debug("Review rejected: blank comment")
            return None

        await asyncio.sleep(self.delay)

        review = Review(
            id=str(int(time.time() * 1000)),
            user_id=user.id,
            user_name=user.name,
            user_avatar=user.profile_picture,
            rating=rating,
            comment=comment.strip(),
            date=date.today().isoformat(),
            helpful_count=0,
        )
        self.reviews.insert(0, review)
        logger.debug("Added review %s to recipe %s", review.id, self.recipe_id)
        return review

    def mark_helpful(self, review_id: str) -> Optional[Review]:
        """
        Increment a review's helpful count once per user.

        Returns the updated review, or None if the review does not exist, nobody is
        logged in, or the user already marked it.
        """
        user = self.session.user
        if user is None:
            return None
        key = (user.id, review_id)
        if key in self._helpful_marked:
            return None

        for index, review in enumerate(self.reviews):
            if review.id == review_id:
                updated = review.model_copy(update={"helpful_count": review.helpful_count + 1})
                self.reviews[index] = updated
                self._helpful_marked.add(key)
                return updated
        return None
