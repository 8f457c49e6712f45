import os
from datetime import datetime, timedelta
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("SERVICE_API_KEY", "test-service-key")

from common.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from common.database import Base, SessionLocal, engine  # noqa: E402
from common.models import Review  # noqa: E402
from services.reviews.app import app as reviews_app  # noqa: E402
from services.reviews.controllers import invalidate_listing  # noqa: E402

SERVICE_HEADERS = {"X-Service-Key": os.environ["SERVICE_API_KEY"]}


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    invalidate_listing()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def reviews_client() -> Generator[TestClient, None, None]:
    with TestClient(reviews_app) as client:
        yield client


@pytest.fixture()
def service_headers() -> dict[str, str]:
    return dict(SERVICE_HEADERS)


@pytest.fixture()
def make_review(db_session) -> Callable[..., Review]:
    base = datetime(2024, 1, 1, 12, 0, 0)

    def _make(rating: int, days: int = 0, **fields) -> Review:
        review = Review(
            rating=rating,
            posted_on=base + timedelta(days=days),
            username=fields.pop("username", "reader"),
            title=fields.pop("title", f"Review rated {rating}"),
            comments=fields.pop("comments", "Some thoughts."),
            **fields,
        )
        db_session.add(review)
        db_session.commit()
        db_session.refresh(review)
        return review

    return _make
