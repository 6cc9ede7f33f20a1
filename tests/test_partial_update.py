"""
Tests for the partial UPDATE statement builder.
"""
import pytest
from sqlalchemy import select

from hackorsnooze.core.db.partial_update import (
    apply_partial_update,
    execute_statement,
    sql_for_partial_update,
)
from hackorsnooze.core.db.tables.story import Story


class TestSqlForPartialUpdate:
    """Tests for statement generation."""

    def test_two_fields(self):
        query, values = sql_for_partial_update(
            "users",
            {"name": "Elie", "phone": "+14151231234"},
            "username",
            "bob",
        )

        assert query == "UPDATE users SET name=$1, phone=$2 WHERE username=$3 RETURNING *"
        assert values == ["Elie", "+14151231234", "bob"]

    def test_single_field(self):
        update = sql_for_partial_update("stories", {"title": "New"}, "story_id", 100)

        assert update.query == "UPDATE stories SET title=$1 WHERE story_id=$2 RETURNING *"
        assert update.values == ["New", 100]

    def test_column_order_follows_mapping_order(self):
        query, values = sql_for_partial_update(
            "users", {"phone": None, "name": "Bo"}, "username", "bob"
        )

        assert query.startswith("UPDATE users SET phone=$1, name=$2 ")
        assert values == [None, "Bo", "bob"]

    def test_many_fields_use_multi_digit_placeholders(self):
        items = {f"c{i}": i for i in range(10)}
        query, values = sql_for_partial_update("t", items, "id", 7)

        assert "c9=$10" in query
        assert query.endswith("WHERE id=$11 RETURNING *")
        assert values[-1] == 7
        assert len(values) == 11

    def test_empty_fields_is_a_caller_error(self):
        with pytest.raises(ValueError):
            sql_for_partial_update("users", {}, "username", "bob")


class TestExecuteStatement:
    """Tests running built statements against the database."""

    def test_updates_row_and_returns_it(self, db_session, bob):
        rows = apply_partial_update(
            db_session,
            "stories",
            {"title": "Cookies, revisited", "url": "https://cookies.example"},
            "story_id",
            bob["story_id"],
        )
        db_session.commit()

        assert len(rows) == 1
        assert rows[0]["title"] == "Cookies, revisited"

        story = db_session.execute(
            select(Story).where(Story.story_id == bob["story_id"])
        ).scalar()
        assert story.title == "Cookies, revisited"
        assert story.url == "https://cookies.example"

    def test_no_matching_row_returns_nothing(self, db_session, bob):
        query, values = sql_for_partial_update("stories", {"title": "x"}, "story_id", 9999)

        assert execute_statement(db_session, query, values) == []

    def test_values_are_bound_not_interpolated(self, db_session, bob):
        hostile = "x'; DROP TABLE users; --"
        apply_partial_update(db_session, "stories", {"title": hostile}, "story_id", bob["story_id"])
        db_session.commit()

        story = db_session.execute(
            select(Story).where(Story.story_id == bob["story_id"])
        ).scalar()
        assert story.title == hostile
