# tests/services/test_predicates.py
"""Tests for the predicate tree and its SQL compilation."""

from sqlalchemy import select

from viet_kconnect.models import Post
from viet_kconnect.services.predicates import (
    And,
    Eq,
    In,
    IsNull,
    Or,
    TextMatch,
    any_of,
    compile_predicate,
    compile_predicates,
)


def _titles(db_session, *predicates):
    stmt = select(Post.title).where(*compile_predicates(predicates)).order_by(Post.title)
    return db_session.scalars(stmt).all()


class TestAnyOf:
    """Test OR-collapsing helper."""

    def test_empty(self):
        assert any_of([]) is None

    def test_single_item_is_unwrapped(self):
        assert any_of([Eq("type", "share")]) == Eq("type", "share")

    def test_several_items(self):
        items = [Eq("type", "share"), Eq("category", "visa")]
        assert any_of(items) == Or(tuple(items))


class TestCompilePredicate:
    """Test predicates against real rows."""

    def test_eq_and_in(self, db_session, make_post):
        make_post(title="a", category="visa")
        make_post(title="b", category="living")
        make_post(title="c", category="career")

        assert _titles(db_session, Eq("category", "visa")) == ["a"]
        assert _titles(db_session, In("category", ("visa", "career"))) == ["a", "c"]

    def test_empty_in_matches_nothing(self, db_session, make_post):
        make_post(title="a")
        assert _titles(db_session, In("category", ())) == []

    def test_is_null(self, db_session, make_post):
        make_post(title="a", subcategory=None)
        make_post(title="b", subcategory="housing")
        assert _titles(db_session, IsNull("subcategory")) == ["a"]

    def test_text_match_is_case_insensitive_over_fields(self, db_session, make_post):
        make_post(title="Visa renewal", content="<p>x</p>")
        make_post(title="Other", content="<p>about VISA fees</p>")
        make_post(title="Unrelated", content="<p>food</p>")

        result = _titles(db_session, TextMatch(("title", "content"), "visa"))
        assert result == ["Other", "Visa renewal"]

    def test_text_match_escapes_wildcards(self, db_session, make_post):
        make_post(title="100% done")
        make_post(title="100 done")
        assert _titles(db_session, TextMatch(("title",), "100%")) == ["100% done"]

    def test_nested_or_and(self, db_session, make_post):
        make_post(title="a", category="visa", type="share")
        make_post(title="b", category="visa", type="question")
        make_post(title="c", category="living", type="share")

        predicate = Or((And((Eq("category", "visa"), Eq("type", "share"))), Eq("category", "living")))
        assert _titles(db_session, predicate) == ["a", "c"]

    def test_compiles_to_boolean_clause(self):
        clause = compile_predicate(Eq("type", "question"))
        assert "posts.type" in str(clause)
