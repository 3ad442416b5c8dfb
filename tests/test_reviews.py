"""
Tests for the recipe page review board.
"""

import asyncio

import pytest

from recipefind.reviews import ReviewBoard, sample_reviews


@pytest.fixture
def board(session):
    return ReviewBoard("1", session, delay=0)


@pytest.fixture
def logged_in(auth):
    asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
    return auth


class TestSampleReviews:
    """Test cases for the seeded reviews."""

    def test_new_board_is_seeded(self, board):
        assert board.count == 3
        assert [r.id for r in board.reviews] == ["1", "2", "3"]

    def test_sample_reviews_are_fresh_copies(self):
        first = sample_reviews()
        first.pop()
        assert len(sample_reviews()) == 3

    def test_average_and_distribution(self, board):
        assert board.average_rating() == pytest.approx(14 / 3)
        assert board.rating_distribution() == {5: 2, 4: 1, 3: 0, 2: 0, 1: 0}

    def test_empty_board(self, session):
        board = ReviewBoard("1", session, reviews=[], delay=0)
        assert board.count == 0
        assert board.average_rating() == 0.0


class TestSubmitReview:
    """Test cases for ReviewBoard.submit_review."""

    def test_submit_inserts_at_top(self, logged_in, board, session):
        """Test that a valid review is added first, attributed to the current user."""
        review = asyncio.run(board.submit_review(4, "  Tasty and simple.  "))

        assert review is not None
        assert board.reviews[0] is review
        assert board.count == 4
        assert review.user_id == session.user.id
        assert review.user_name == "Cook"
        assert review.comment == "Tasty and simple."
        assert review.helpful_count == 0
        assert len(review.date) == 10

    def test_requires_login(self, board):
        assert asyncio.run(board.submit_review(5, "Great")) is None
        assert board.count == 3

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rejects_out_of_range_rating(self, logged_in, board, rating):
        assert asyncio.run(board.submit_review(rating, "Great")) is None
        assert board.count == 3

    def test_rejects_blank_comment(self, logged_in, board):
        assert asyncio.run(board.submit_review(5, "   ")) is None
        assert board.count == 3

    def test_avatar_comes_from_profile(self, logged_in, board):
        logged_in.update_profile(profile_picture="data:image/png;base64,AAAA")
        review = asyncio.run(board.submit_review(5, "Lovely"))
        assert review.user_avatar == "data:image/png;base64,AAAA"


class TestMarkHelpful:
    """Test cases for ReviewBoard.mark_helpful."""

    def test_increments_once_per_user(self, logged_in, board):
        updated = board.mark_helpful("2")
        assert updated.helpful_count == 9
        assert board.mark_helpful("2") is None
        assert board.reviews[1].helpful_count == 9

    def test_requires_login(self, board):
        assert board.mark_helpful("1") is None
        assert board.reviews[0].helpful_count == 12

    def test_unknown_review(self, logged_in, board):
        assert board.mark_helpful("missing") is None
