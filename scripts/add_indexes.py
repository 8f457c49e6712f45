#!/usr/bin/env python3
"""Script to add the indexes backing the review listing query."""
from sqlalchemy import Engine, text

from common.database import engine

LISTING_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_reviews_rating_posted_on ON reviews (rating, posted_on);",
    "CREATE INDEX IF NOT EXISTS idx_reviews_posted_on ON reviews (posted_on);",
)


def add_indexes(bind: Engine = engine) -> None:
    with bind.begin() as conn:
        for statement in LISTING_INDEXES:
            conn.execute(text(statement))
    print("Indexes added successfully.")


if __name__ == "__main__":
    add_indexes()
