"""End-to-end tests: SQL text in, diagram text out."""
from ddl_to_er.src import generate_er_diagram
from ddl_to_er.src.pipeline import build_er_model
from ddl_to_er.src.visualization import EMPTY_DIAGRAM


def test_users_roles_scenario(mysql_sql):
    diagram = generate_er_diagram([mysql_sql])
    lines = diagram.splitlines()

    assert lines[0] == "erDiagram"
    assert "  USERS {" in lines
    assert "  ROLES {" in lines
    assert "  USER_ROLES {" in lines
    assert "USERS ||--o{ USER_ROLES : user_id→id" in diagram
    assert "ROLES ||--o{ USER_ROLES : role_id→id" in diagram
    assert "    INT user_id PK" in lines
    assert "    INT role_id PK" in lines
    assert "    VARCHAR(255) email" in lines


def test_postgres_scenario(postgres_sql):
    diagram = generate_er_diagram([postgres_sql])
    assert "AUTHORS ||--o{ BOOKS : author_id→id" in diagram
    assert "BOOKS ||--|| BOOK_DETAILS : book_id→id" in diagram
    assert "BOOKS ||--o{ REVIEWS : book_id→id" in diagram
    assert "    SERIAL id PK" in diagram.splitlines()


def test_sqlite_scenario(sqlite_sql):
    diagram = generate_er_diagram([sqlite_sql])
    assert "ARTISTS ||--o{ ALBUMS : artist_id→id" in diagram
    assert "ALBUMS ||--o{ TRACKS : album_id→id" in diagram


def test_annotations_are_merged(mysql_sql, relations_text):
    diagram = generate_er_diagram([mysql_sql], relations_text)
    assert "USERS ||--o{ POSTS : fk_posts_user" in diagram
    assert "USERS ||--|| PROFILES : fk_profile_user" in diagram


def test_mixed_dialects_and_broken_file(mysql_sql, postgres_sql):
    tables, relations = build_er_model(
        [mysql_sql, "CREATE TABLE oops (id SERIAL,", postgres_sql]
    )
    assert relations == []
    assert [t.name for t in tables][:3] == ["users", "roles", "user_roles"]
    assert "oops" not in [t.name for t in tables]
    assert "authors" in [t.name for t in tables]


def test_no_input_gives_placeholder(relations_text):
    assert generate_er_diagram([]) == EMPTY_DIAGRAM
    assert generate_er_diagram([], relations_text) == EMPTY_DIAGRAM
    assert generate_er_diagram(["-- only a comment\n"]) == EMPTY_DIAGRAM


def test_idempotent(mysql_sql, postgres_sql, relations_text):
    inputs = [mysql_sql, postgres_sql]
    assert generate_er_diagram(inputs, relations_text) == generate_er_diagram(inputs, relations_text)
