"""Tests for the diagram JSON API."""
import pytest

from ddl_to_er.app_config import TestingConfig
from ddl_to_er.web_app.app import create_app


@pytest.fixture
def client():
    app = create_app(TestingConfig)
    return app.test_client()


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_parse_sql(client, mysql_sql, relations_text):
    response = client.post('/api/parse_sql', json={'sql': mysql_sql, 'relations': relations_text})
    assert response.status_code == 200
    data = response.get_json()

    assert "USERS ||--o{ USER_ROLES : user_id→id" in data['diagram']
    assert [t['name'] for t in data['tables']] == ['users', 'roles', 'user_roles']
    user_id = data['tables'][2]['columns'][0]
    assert user_id['isPK'] is True
    assert user_id['isFK'] is True
    assert user_id['references'] == {'table': 'users', 'column': 'id'}
    assert [r['name'] for r in data['relationships']] == ['fk_posts_user', 'fk_profile_user']


def test_parse_sql_accepts_a_list(client, mysql_sql, sqlite_sql):
    response = client.post('/api/parse_sql', json={'sql': [mysql_sql, sqlite_sql]})
    assert response.status_code == 200
    assert len(response.get_json()['tables']) == 6


def test_parse_sql_empty_list(client):
    response = client.post('/api/parse_sql', json={'sql': []})
    assert response.status_code == 200
    assert '"No tables found"' in response.get_json()['diagram']


@pytest.mark.parametrize('body', [
    {},
    {'sql': 42},
    {'sql': ['ok', 3]},
    {'sql': 'CREATE TABLE t (id INT);', 'relations': ['x']},
])
def test_parse_sql_bad_request(client, body):
    response = client.post('/api/parse_sql', json=body)
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_parse_sql_requires_json(client):
    response = client.post('/api/parse_sql', data='not json', content_type='text/plain')
    assert response.status_code == 400


def test_export_diagram(client, mysql_sql):
    response = client.post('/api/export_diagram', json={'sql': mysql_sql})
    assert response.status_code == 200
    assert 'er_diagram.mmd' in response.headers['Content-Disposition']
    text = response.get_data(as_text=True)
    assert text.startswith('erDiagram')
    assert text.rstrip('\n').endswith(TestingConfig.WATERMARK)
