import pytest

from fakes import catalog_connection


@pytest.fixture
def conn():
    return catalog_connection()


@pytest.fixture
def reader():
    return {"id": 1, "email": "reader@example.com", "roles": ["READ"], "is_active": True}


@pytest.fixture
def editor():
    return {"id": 2, "email": "editor@example.com", "roles": ["READ", "MODIFY"], "is_active": True}
