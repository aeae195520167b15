import pytest

from survey_platform.infrastructure.db.datastore import DataStore, Query
from tests.helpers.factories import create_user


def test_select_one_returns_none_without_rows(datastore):
    assert datastore.select_one(Query("SELECT * FROM users WHERE email = :email", {"email": "ghost@example.com"})) is None
    assert datastore.select_many(Query("SELECT * FROM users")) == []


def test_insert_returns_new_positive_ids(datastore):
    """
    Validate generated identifiers returned by insert.

    1. Insert two users.
    2. Validate both ids are positive and different.
    3. Validate the rows are readable by id.
    """
    first = create_user(datastore, "first@example.com")
    second = create_user(datastore, "second@example.com")
    assert first["id"] > 0
    assert second["id"] > 0
    assert first["id"] != second["id"]
    assert datastore.select_one(Query("SELECT email FROM users WHERE id = :id", {"id": second["id"]}))["email"] == (
        "second@example.com"
    )


def test_positional_parameters_are_bound(datastore):
    """
    Validate positional binding with question mark placeholders.

    1. Insert a user with positional values.
    2. Select it back with a positional filter.
    3. Validate a value with quotes is stored verbatim.
    """
    user_id = datastore.insert(
        Query(
            "INSERT INTO users (name, email, password, role) VALUES (?, ?, ?, ?)",
            ["O'Brien", "obrien@example.com", "x", "user"],
        )
    )
    row = datastore.select_one(Query("SELECT name FROM users WHERE id = ?", [user_id]))
    assert row["name"] == "O'Brien"

    with pytest.raises(ValueError):
        Query("SELECT * FROM users WHERE id = ?", []).bound()


def test_execute_returns_affected_rows(datastore):
    create_user(datastore, "one@example.com")
    create_user(datastore, "two@example.com")
    assert datastore.execute(Query("UPDATE users SET role = :role", {"role": "admin"})) == 2
    assert datastore.execute(Query("DELETE FROM users WHERE email = :email", {"email": "nobody@example.com"})) == 0


def test_health_check_reports_connectivity(datastore, tmp_path):
    """
    Validate health_check for reachable and unreachable databases.

    1. Validate the shared test database is reported healthy.
    2. Build a store pointing at a directory that cannot hold a database.
    3. Validate health_check returns False instead of raising.
    """
    assert datastore.health_check() is True

    broken = DataStore(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")
    assert broken.health_check() is False


def test_connect_exits_when_database_is_unreachable(tmp_path):
    broken = DataStore(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")
    with pytest.raises(SystemExit):
        broken.connect()


def test_positional_binding_skips_quoted_question_marks(datastore):
    """
    Validate that a literal question mark is not treated as a placeholder.

    1. Store a user whose email is a literal question mark and one regular user.
    2. Select with a quoted '?' literal next to a real placeholder.
    3. Validate only the real placeholder consumed the value.
    """
    datastore.insert(Query("INSERT INTO users (name, email, password, role) VALUES ('Q', '?', 'x', 'user')"))
    create_user(datastore, "q@example.com")

    rows = datastore.select_many(Query("SELECT email FROM users WHERE email <> '?' AND email = ?", ["q@example.com"]))
    assert [row["email"] for row in rows] == ["q@example.com"]

    sql, params = Query("SELECT 'it''s ?', \"?\" FROM users WHERE id = ?", [3]).bound()
    assert sql == "SELECT 'it''s ?', \"?\" FROM users WHERE id = :p0"
    assert params == {"p0": 3}


def test_transaction_rolls_back_every_statement(datastore):
    """
    Validate all-or-nothing writes through transaction().

    1. Insert a user inside a transaction scope, then raise.
    2. Validate the insert was rolled back.
    3. Insert two users in one scope and validate both are committed.
    """
    with pytest.raises(RuntimeError):
        with datastore.transaction() as scope:
            scope.insert(
                Query(
                    "INSERT INTO users (name, email, password, role) VALUES (?, ?, ?, ?)",
                    ["Lost", "lost@example.com", "x", "user"],
                )
            )
            raise RuntimeError("abort")
    assert datastore.select_one(Query("SELECT id FROM users WHERE email = ?", ["lost@example.com"])) is None

    with datastore.transaction() as scope:
        for email in ("a@example.com", "b@example.com"):
            scope.insert(
                Query("INSERT INTO users (name, email, password, role) VALUES (?, ?, ?, ?)", ["U", email, "x", "user"])
            )
        assert len(scope.select_many(Query("SELECT id FROM users"))) == 2
    assert datastore.select_one(Query("SELECT COUNT(*) AS total FROM users"))["total"] == 2
