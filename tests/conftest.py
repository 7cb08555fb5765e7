import pytest

from pantrycart.app import create_app
from pantrycart.config import Settings


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://")


@pytest.fixture
def app(settings):
    app = create_app(settings, test_config={"TESTING": True})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user-123"}
