"""Unit tests for the model conventions and the fluent query builder."""
import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from common.database import Base, infer_table_name
from common.models import Review
from common.orm import ModelNotFound, Query, QueryError, factory, get_model


class Appraisal(Base):
    __tablename__ = "critiques"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    headline: Mapped[str] = mapped_column(String(100))


class TestTableNames:
    def test_review_table_is_inferred(self):
        assert Review.__tablename__ == "reviews"
        assert Review.__table__.name == "reviews"

    def test_explicit_table_name_wins(self, db_session):
        assert infer_table_name("Appraisal") == "appraisals"
        assert Appraisal.__table__.name == "critiques"

        query = factory("Appraisal", db_session)

        assert query.model is Appraisal
        assert query.find_all() == []

    @pytest.mark.parametrize(
        "class_name, expected",
        [("Review", "reviews"), ("ProductReview", "product_reviews"), ("user", "users")],
    )
    def test_infer_table_name(self, class_name, expected):
        assert infer_table_name(class_name) == expected


class TestFactory:
    def test_factory_resolves_model_by_name(self, db_session):
        query = factory("Review", db_session)

        assert isinstance(query, Query)
        assert query.model is Review

    def test_lookup_is_case_insensitive(self):
        assert get_model("review") is Review

    def test_unknown_model(self, db_session):
        with pytest.raises(ModelNotFound):
            factory("Restaurant", db_session)


class TestQuery:
    def test_chain_returns_same_builder(self, db_session):
        query = factory("Review", db_session)

        assert query.where("rating", ">", 3) is query
        assert query.order_by("posted_on", "DESC") is query
        assert query.limit(10) is query

    def test_filter_sort_limit(self, db_session, make_review):
        make_review(5, days=1, title="a")
        make_review(4, days=2, title="b")
        make_review(3, days=3, title="c")
        make_review(4, days=4, title="d")

        reviews = (
            factory("Review", db_session)
            .where("rating", ">", 3)
            .order_by("posted_on", "desc")
            .limit(2)
            .find_all()
        )

        assert [r.title for r in reviews] == ["d", "b"]

    def test_find_returns_single_record(self, db_session, make_review):
        make_review(4, days=1, title="first")
        make_review(4, days=2, title="second")

        review = factory("Review", db_session).where("rating", "=", 4).order_by("posted_on").find()

        assert review.title == "first"

    def test_find_missing_returns_none(self, db_session):
        assert factory("Review", db_session).where("id", "=", 42).find() is None

    def test_like_and_in_operators(self, db_session, make_review):
        make_review(5, username="alice")
        make_review(2, username="bob")
        make_review(1, username="carol")

        likes = factory("Review", db_session).where("username", "like", "a%").find_all()
        ins = factory("Review", db_session).where("rating", "IN", [1, 2]).order_by("rating").find_all()

        assert [r.username for r in likes] == ["alice"]
        assert [r.rating for r in ins] == [1, 2]

    def test_offset(self, db_session, make_review):
        for day in range(3):
            make_review(5, days=day, title=str(day))

        reviews = factory("Review", db_session).order_by("posted_on").offset(1).limit(5).find_all()

        assert [r.title for r in reviews] == ["1", "2"]

    def test_count_all_ignores_limit(self, db_session, make_review):
        make_review(5)
        make_review(4)
        make_review(1)

        query = factory("Review", db_session).where("rating", ">=", 4).limit(1)

        assert query.count_all() == 2

    def test_unknown_column(self, db_session):
        with pytest.raises(QueryError):
            factory("Review", db_session).where("stars", ">", 3)

    def test_unknown_operator(self, db_session):
        with pytest.raises(QueryError):
            factory("Review", db_session).where("rating", "~", 3)

    def test_bad_direction(self, db_session):
        with pytest.raises(QueryError):
            factory("Review", db_session).order_by("posted_on", "up")

    def test_negative_limit(self, db_session):
        with pytest.raises(QueryError):
            factory("Review", db_session).limit(-1)

    def test_find_leaves_builder_unlimited(self, db_session, make_review):
        for day in range(3):
            make_review(5, days=day)

        query = factory("Review", db_session).where("rating", ">", 3)

        assert query.find() is not None
        assert len(query.find_all()) == 3
