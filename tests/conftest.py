# tests/conftest.py
import pytest


MYSQL_USERS_ROLES = """
-- Users table
CREATE TABLE users (
  id INT AUTO_INCREMENT PRIMARY KEY,
  username VARCHAR(255) NOT NULL,
  email VARCHAR(255) UNIQUE,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
) ENGINE=InnoDB;

-- Roles table
CREATE TABLE roles (
  id INT AUTO_INCREMENT PRIMARY KEY,
  role_name VARCHAR(100) NOT NULL
) ENGINE=InnoDB;

-- User Roles (many-to-many via join table)
CREATE TABLE user_roles (
  user_id INT NOT NULL,
  role_id INT NOT NULL,
  PRIMARY KEY (user_id, role_id)
) ENGINE=InnoDB;

-- Foreign Keys via ALTER
ALTER TABLE user_roles
  ADD CONSTRAINT fk_userroles_user FOREIGN KEY (user_id) REFERENCES users(id),
  ADD CONSTRAINT fk_userroles_role FOREIGN KEY (role_id) REFERENCES roles(id);
"""

POSTGRES_LIBRARY = """
CREATE TABLE authors (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    email VARCHAR(255) UNIQUE
);

CREATE TABLE books (
    id SERIAL PRIMARY KEY,
    author_id INTEGER REFERENCES authors(id),
    title TEXT,
    cover BYTEA
);

CREATE TABLE book_details (
    book_id INTEGER PRIMARY KEY,
    summary TEXT
);

CREATE TABLE reviews (
    id SERIAL,
    book_id INTEGER NOT NULL,
    rating INTEGER,
    PRIMARY KEY (id),
    CONSTRAINT fk_reviews_book FOREIGN KEY (book_id) REFERENCES books(id)
);

ALTER TABLE book_details ADD CONSTRAINT fk_details_book FOREIGN KEY (book_id) REFERENCES books (id);
"""

SQLITE_MUSIC = """
CREATE TABLE artists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE
);

CREATE TABLE albums (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artist_id INTEGER NOT NULL,
    title TEXT,
    FOREIGN KEY (artist_id) REFERENCES artists(id)
);

CREATE TABLE tracks (
    id INTEGER PRIMARY KEY,
    album_id INTEGER REFERENCES albums(id),
    name TEXT
) WITHOUT ROWID;
"""

RELATIONS_TEXT = """
Ref fk_posts_user: posts.user_id > users.id // many-to-one
this line is ignored
Ref fk_profile_user: profiles.user_id > users.id // one-to-one
"""


@pytest.fixture
def mysql_sql():
    return MYSQL_USERS_ROLES


@pytest.fixture
def postgres_sql():
    return POSTGRES_LIBRARY


@pytest.fixture
def sqlite_sql():
    return SQLITE_MUSIC


@pytest.fixture
def relations_text():
    return RELATIONS_TEXT
