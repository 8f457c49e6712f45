#!/usr/bin/env python3
"""Load a handful of sample reviews into the configured database."""
from datetime import timedelta

from sqlalchemy.orm import Session

from common.database import Base, SessionLocal, engine
from common.models import Review, utcnow

SAMPLE_REVIEWS = [
    (5, "maria", "Best pasta in town", "The carbonara was perfect."),
    (4, "jon", "Cosy spot", "Friendly staff, a bit noisy on Fridays."),
    (2, "li", "Slow service", "Waited forty minutes for a salad."),
    (3, "sam", "Decent", "Nothing special, nothing wrong."),
    (5, "priya", "Dessert heaven", "Order the tiramisu & thank me later."),
]


def seed(db: Session) -> int:
    now = utcnow()
    for offset, (rating, username, title, comments) in enumerate(SAMPLE_REVIEWS):
        db.add(
            Review(
                rating=rating,
                username=username,
                title=title,
                comments=comments,
                posted_on=now - timedelta(days=offset),
            )
        )
    db.commit()
    return len(SAMPLE_REVIEWS)


def main() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        count = seed(db)
    finally:
        db.close()
    print(f"Seeded {count} reviews.")


if __name__ == "__main__":
    main()
