import pytest

from db import seed_default_categories


@pytest.fixture(autouse=True)
def seeded(database):
    seed_default_categories(database)


def test_list_categories(client):
    response = client.get('/api/categories')
    body = response.get_json()
    assert response.status_code == 200
    assert body['count'] == 5
    assert body['data'][0]['slug'] == 'all'


def test_show_path_and_query_style(client):
    for url in ('/api/categories/commercial', '/api/categories?slug=commercial'):
        body = client.get(url).get_json()
        assert body['data']['name'] == 'Commercial'


def test_show_missing(client):
    response = client.get('/api/categories/unknown')
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Category not found'


def test_create_category(client):
    response = client.post('/api/categories', json={'name': 'Landscape <b>Design</b>'})
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['name'] == 'Landscape Design'
    assert data['slug'] == 'landscape-design'


def test_create_category_form(client):
    response = client.post('/api/categories', data={'name': 'Industrial', 'display_order': '7'})
    assert response.status_code == 201
    assert response.get_json()['data']['display_order'] == 7


def test_create_duplicate(client):
    response = client.post('/api/categories', json={'name': 'Commercial'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_create_requires_name(client):
    response = client.post('/api/categories', json={})
    assert response.status_code == 400


def test_create_numeric_name(client):
    response = client.post('/api/categories', json={'name': 5})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Fields must be text: name'
