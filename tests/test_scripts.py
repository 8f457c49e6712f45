from sqlalchemy import inspect

from common.database import engine
from common.orm import factory
from scripts.add_indexes import add_indexes
from scripts.seed_reviews import SAMPLE_REVIEWS, seed


def test_seed_loads_sample_reviews(db_session):
    assert seed(db_session) == len(SAMPLE_REVIEWS)
    assert factory("Review", db_session).count_all() == len(SAMPLE_REVIEWS)


def test_seeded_listing_page(db_session, reviews_client):
    seed(db_session)

    body = reviews_client.get("/reviews").text

    assert "Best pasta in town" in body
    assert "Order the tiramisu &amp; thank me later." in body
    assert "Slow service" not in body


def test_add_indexes_is_idempotent():
    add_indexes(engine)
    add_indexes(engine)

    names = {index["name"] for index in inspect(engine).get_indexes("reviews")}
    assert "idx_reviews_rating_posted_on" in names
