import pytest

from quizbank.repository import ALL_TABLES, ANSWER, QUIZ, TableSchema


def test_quiz_derived_views():
    assert QUIZ.id_field == "id"
    assert QUIZ.fields[0] == "id"
    assert QUIZ.qualified_fields[:2] == ("quiz.id", "quiz.question")
    assert "id" not in QUIZ.fields_without_id
    assert len(QUIZ.fields_without_id) == len(QUIZ.fields) - 1
    assert QUIZ.required_fields == ("question", "contents", "answer")
    assert QUIZ.boolean_fields == {"is_deleted"}


def test_placeholders_and_assignments():
    assert QUIZ.insert_placeholders(["question", "answer"]) == "?, ?"
    assert QUIZ.insert_placeholders() == ", ".join(["?"] * len(QUIZ.fields_without_id))
    assert QUIZ.update_assignments(["question", "label"]) == "question = ?, label = ?"


def test_create_table_sql_includes_constraints():
    sql = ANSWER.create_table_sql()
    assert sql.startswith("CREATE TABLE IF NOT EXISTS answer (")
    assert "quiz_id INTEGER NOT NULL" in sql
    assert "FOREIGN KEY (quiz_id) REFERENCES quiz(id)" in sql


def test_all_tables_named():
    assert [t.name for t in ALL_TABLES] == ["quiz", "answer", "event", "event_ticket"]


@pytest.mark.parametrize(
    "columns",
    [
        {},
        {"a": "TEXT", "is_deleted": "BOOLEAN"},
        {"a": "INTEGER PRIMARY KEY", "b": "INTEGER PRIMARY KEY", "is_deleted": "BOOLEAN"},
        {"id": "INTEGER PRIMARY KEY"},
    ],
)
def test_malformed_schema_rejected(columns):
    with pytest.raises(ValueError):
        TableSchema("t", columns)
