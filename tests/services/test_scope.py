# tests/services/test_scope.py
"""Tests for viewer-scoped listing filters."""

from unittest.mock import MagicMock

import pytest

from viet_kconnect.models import CategorySubscription, Follow, TopicSubscription
from viet_kconnect.services.predicates import Eq, In, Or
from viet_kconnect.services.scope import (
    EMPTY_SCOPE,
    UNRESTRICTED,
    resolve_scope,
    subscribed_slugs,
)


class TestAnonymousScope:
    """Anonymous viewers never reach the database."""

    @pytest.mark.parametrize("filter_name", ["following", "following-users"])
    def test_following_filters_are_empty(self, filter_name):
        db = MagicMock()
        assert resolve_scope(db, filter_name, None) == EMPTY_SCOPE
        db.execute.assert_not_called()
        db.scalars.assert_not_called()

    def test_my_posts_is_ignored(self):
        db = MagicMock()
        assert resolve_scope(db, "my-posts", None) == UNRESTRICTED
        db.scalars.assert_not_called()

    def test_unknown_filter_is_ignored(self):
        assert resolve_scope(MagicMock(), "everything", "user-1") == UNRESTRICTED


class TestSignedInScope:
    """Scopes resolved for a signed-in viewer."""

    def test_my_posts(self, db_session, test_user):
        scope = resolve_scope(db_session, "my-posts", test_user.id)
        assert scope.predicates == [Eq("author_id", test_user.id)]

    def test_following_without_subscriptions_is_empty(self, db_session, test_user):
        assert resolve_scope(db_session, "following", test_user.id).empty is True

    def test_following_splits_parents_and_topics(self, db_session, test_user, make_category):
        visa = make_category("visa")
        housing = make_category("housing")
        db_session.add_all(
            [
                CategorySubscription(user_id=test_user.id, category_id=visa.id),
                TopicSubscription(user_id=test_user.id, category_id=housing.id),
            ]
        )
        db_session.flush()

        assert subscribed_slugs(db_session, test_user.id) == ["housing", "visa"]
        scope = resolve_scope(db_session, "following", test_user.id)
        assert scope.predicates == [
            Or(
                (
                    In("category", ("visa",)),
                    In("subcategory", ("housing",)),
                    In("category", ("housing",)),
                )
            )
        ]

    def test_following_users(self, db_session, test_user, make_user):
        followed = make_user()
        db_session.add(Follow(follower_id=test_user.id, following_id=followed.id))
        db_session.flush()

        scope = resolve_scope(db_session, "following-users", test_user.id)
        assert scope.predicates == [In("author_id", (followed.id,))]

    def test_following_users_without_follows_is_empty(self, db_session, test_user):
        assert resolve_scope(db_session, "following-users", test_user.id).empty is True
