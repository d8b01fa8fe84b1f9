from src.absence_journal.absence_journal.database.bootstrap import iter_sql_statements


def test_splits_on_semicolons_outside_quotes():
    sql = "CREATE TABLE a (x INT);\nINSERT INTO a VALUES ('x;y');\n  INSERT INTO a VALUES (\"q;\")"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x INT)",
        "INSERT INTO a VALUES ('x;y')",
        'INSERT INTO a VALUES ("q;")',
    ]


def test_ignores_empty_statements():
    assert list(iter_sql_statements(";;  ;\n")) == []
