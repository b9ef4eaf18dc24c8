import pytest

from errors import ValidationError
from models import Category
from repositories import CategoryRepository


@pytest.fixture
def repo(conn):
    return CategoryRepository(conn)


def test_list_active_ordered(repo):
    repo.create(Category('Commercial', 'commercial', display_order=2))
    repo.create(Category('Residential', 'residential', display_order=1))
    repo.create(Category('Archived', 'archived', display_order=0, is_active=False))

    assert [c.slug for c in repo.list_active()] == ['residential', 'commercial']


def test_get_by_slug_ignores_inactive(repo):
    repo.create(Category('Archived', 'archived', is_active=False))
    assert repo.get_by_slug('archived') is None


def test_get_by_id_includes_inactive(repo):
    category_id = repo.create(Category('Archived', 'archived', is_active=False))
    category = repo.get_by_id(category_id)
    assert category.is_active is False


def test_update(repo):
    category_id = repo.create(Category('Interior', 'interior'))
    category = repo.get_by_id(category_id)
    category.description = 'Interior design'
    category.is_active = False

    assert repo.update(category) is True
    assert repo.get_by_id(category_id).description == 'Interior design'
    assert repo.get_by_slug('interior') is None


def test_delete(repo):
    category_id = repo.create(Category('Interior', 'interior'))
    assert repo.delete(category_id) is True
    assert repo.get_by_id(category_id) is None
    assert repo.delete(category_id) is False


def test_duplicate_slug_rejected(repo):
    repo.create(Category('Interior', 'interior'))
    with pytest.raises(ValidationError):
        repo.create(Category('Interiors', 'interior'))
