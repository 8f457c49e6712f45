"""Server-rendered review pages."""
from typing import List

from fastapi import HTTPException, status

from common.cache import SimpleTTLCache
from common.config import get_settings
from common.controller import TemplateController
from common.orm import factory
from common.schemas import ReviewRead
from common.views import View

settings = get_settings()
listing_cache: SimpleTTLCache[List[ReviewRead]] = SimpleTTLCache(ttl=settings.review_cache_ttl)


def listing_key(min_rating: int, limit: int) -> str:
    return f"reviews:top:{min_rating}:{limit}"


def invalidate_listing() -> None:
    listing_cache.clear()


class ReviewsController(TemplateController):
    def _top_reviews(self) -> List[ReviewRead]:
        reviews = (
            factory("Review", self.db)
            .where("rating", ">", settings.reviews_min_rating)
            .order_by("posted_on", "desc")
            .limit(settings.reviews_page_limit)
            .find_all()
        )
        return [ReviewRead.model_validate(review) for review in reviews]

    def action_index(self) -> None:
        key = listing_key(settings.reviews_min_rating, settings.reviews_page_limit)
        self.template.title = "Reviews"
        self.template.content = View.factory("reviews/index")
        self.template.content.reviews = listing_cache.get_or_set(key, self._top_reviews)

    def action_view(self, review_id: int) -> None:
        review = factory("Review", self.db).where("id", "=", review_id).find()
        if review is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
        self.template.title = review.title
        self.template.content = View.factory("reviews/view", review=review)
